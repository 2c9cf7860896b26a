"""
Apocapalette Configuration
Manages environment variables and defaults for the token engine and API.
"""
import os
from typing import Literal, Optional


class Config:
    """Configuration class for Apocapalette services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("APOCAPALETTE_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("APOCAPALETTE_LOG_JSON", "0")))

    # Generation defaults
    DEFAULT_BASE_COLOR: str = os.environ.get("APOCAPALETTE_DEFAULT_BASE_COLOR", "#6366f1")
    DEFAULT_HARMONY_MODE: str = os.environ.get("APOCAPALETTE_DEFAULT_HARMONY_MODE", "Monochromatic")
    DEFAULT_THEME_MODE: Literal["light", "dark", "pop"] = os.environ.get("APOCAPALETTE_DEFAULT_THEME_MODE", "dark")

    # Contrast convergence
    CONTRAST_MAX_ITERATIONS: int = int(os.environ.get("APOCAPALETTE_CONTRAST_MAX_ITERATIONS", "30"))
    CONTRAST_LOCK_MAX_ITERATIONS: int = int(os.environ.get("APOCAPALETTE_CONTRAST_LOCK_MAX_ITERATIONS", "20"))

    # Mood board constraint solver
    MOOD_MIN_HUE_DISTANCE: float = float(os.environ.get("APOCAPALETTE_MOOD_MIN_HUE_DISTANCE", "24"))
    MOOD_ANCHOR_RANDOM_ATTEMPTS: int = int(os.environ.get("APOCAPALETTE_MOOD_ANCHOR_RANDOM_ATTEMPTS", "24"))
    MOOD_COLOR_ATTEMPTS: int = int(os.environ.get("APOCAPALETTE_MOOD_COLOR_ATTEMPTS", "12"))
    MOOD_EXHAUSTION_STRATEGY: str = os.environ.get("APOCAPALETTE_MOOD_EXHAUSTION_STRATEGY", "neutralize")

    # Project merge defaults
    PROJECT_NEAR_DUP_THRESHOLD: float = float(os.environ.get("APOCAPALETTE_PROJECT_NEAR_DUP_THRESHOLD", "2.0"))
    PROJECT_NEUTRAL_CAP: int = int(os.environ.get("APOCAPALETTE_PROJECT_NEUTRAL_CAP", "8"))
    PROJECT_MAX_COLORS: int = int(os.environ.get("APOCAPALETTE_PROJECT_MAX_COLORS", "40"))
    PROJECT_ANCHORS_ALWAYS_KEEP: bool = bool(int(os.environ.get("APOCAPALETTE_PROJECT_ANCHORS_ALWAYS_KEEP", "1")))

    # Flat palette processing (.soc export without a project)
    PALETTE_DELTA_E: float = float(os.environ.get("APOCAPALETTE_PALETTE_DELTA_E", "2.0"))
    PALETTE_MAX_NEUTRALS: int = int(os.environ.get("APOCAPALETTE_PALETTE_MAX_NEUTRALS", "8"))
    PALETTE_MAX_COLORS: int = int(os.environ.get("APOCAPALETTE_PALETTE_MAX_COLORS", "32"))

    # API
    API_TITLE: str = os.environ.get("APOCAPALETTE_API_TITLE", "Apocapalette Token Core")
    ALLOWED_ORIGINS: str = os.environ.get("APOCAPALETTE_ALLOWED_ORIGINS", "")
    METRICS_ENABLED: bool = bool(int(os.environ.get("APOCAPALETTE_METRICS_ENABLED", "1")))
    METRICS_MAX_SAMPLES: int = int(os.environ.get("APOCAPALETTE_METRICS_MAX_SAMPLES", "1000"))
    VERSION: str = "1.0.0"

    # Supported values
    SUPPORTED_THEME_MODES = ["light", "dark", "pop"]
    SUPPORTED_GENERATION_MODES = ["Monochromatic", "Analogous", "Complementary", "Tertiary", "Apocalypse"]
    SUPPORTED_EXHAUSTION_STRATEGIES = ["neutralize", "accept"]

    @classmethod
    def validate_theme_mode(cls, theme_mode: str) -> bool:
        """Validate theme mode parameter."""
        return theme_mode in cls.SUPPORTED_THEME_MODES

    @classmethod
    def validate_intensity(cls, value: float) -> bool:
        """Validate a percent-valued slider (100 = neutral)."""
        return 0 <= value <= 200

    @classmethod
    def validate_contrast_target(cls, target: float) -> bool:
        """Validate WCAG contrast target."""
        return 1.0 <= target <= 21.0

    @classmethod
    def validate_exhaustion_strategy(cls, strategy: str) -> bool:
        """Validate mood board exhaustion strategy."""
        return strategy in cls.SUPPORTED_EXHAUSTION_STRATEGIES

    @classmethod
    def allowed_origins(cls) -> Optional[list]:
        """Parse comma separated CORS origins, or None when unset."""
        if not cls.ALLOWED_ORIGINS:
            return None
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
