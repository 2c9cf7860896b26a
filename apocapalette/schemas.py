"""
Apocapalette API Schemas
Pydantic models for token, contrast, mood board and project request/response validation.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apocapalette.config import config
from apocapalette.services.mood import ConstraintPolicy
from apocapalette.services.project import Project
from apocapalette.services.tokens import GenerationParameters


HEX_PATTERN = r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$"


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("apocapalette-token-core", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# TOKEN GENERATION SCHEMAS
# ============================================================================

class TokenRequest(BaseModel):
    """Generation parameters for one token tree."""
    model_config = ConfigDict(populate_by_name=True)

    base_color: str = Field(
        config.DEFAULT_BASE_COLOR,
        alias="baseColor",
        pattern=HEX_PATTERN,
        description="Base color as #RGB or #RRGGBB"
    )
    mode: str = Field(
        config.DEFAULT_HARMONY_MODE,
        description="Generation mode: Monochromatic, Analogous, Complementary, Tertiary, Apocalypse"
    )
    theme_mode: str = Field(
        config.DEFAULT_THEME_MODE,
        alias="themeMode",
        description="Theme: light, dark or pop"
    )
    apocalypse_intensity: float = Field(100, alias="apocalypseIntensity", description="Percent, 100 = neutral")
    harmony_intensity: float = Field(100, alias="harmonyIntensity", description="Percent, 100 = neutral")
    neutral_curve: float = Field(100, alias="neutralCurve", description="Percent, 100 = neutral")
    accent_strength: float = Field(100, alias="accentStrength", description="Percent, 100 = neutral")
    pop_intensity: float = Field(100, alias="popIntensity", description="Percent, 100 = neutral")
    print_mode: bool = Field(False, alias="printMode", description="Add the print-safe group")
    contrast_lock: bool = Field(False, alias="contrastLock", description="Run the dual-color contrast lock")
    contrast_target: float = Field(4.5, alias="contrastTarget", description="Contrast lock target ratio")
    theme_name: str = Field("", alias="customThemeName", description="Optional custom theme name")

    @field_validator("theme_mode")
    @classmethod
    def validate_theme_mode(cls, v):
        v = v.lower()
        if not config.validate_theme_mode(v):
            raise ValueError(f"theme_mode must be one of {config.SUPPORTED_THEME_MODES}")
        return v

    @field_validator(
        "apocalypse_intensity", "harmony_intensity", "neutral_curve", "accent_strength", "pop_intensity"
    )
    @classmethod
    def validate_intensity(cls, v):
        if not config.validate_intensity(v):
            raise ValueError("intensity sliders must be within 0-200")
        return v

    @field_validator("contrast_target")
    @classmethod
    def validate_contrast_target(cls, v):
        if not config.validate_contrast_target(v):
            raise ValueError("contrast_target must be within 1-21")
        return v

    def to_parameters(self) -> GenerationParameters:
        return GenerationParameters(
            base_color=self.base_color,
            harmony_mode=self.mode,
            theme_mode=self.theme_mode,
            apocalypse_intensity=self.apocalypse_intensity,
            harmony_intensity=self.harmony_intensity,
            neutral_curve=self.neutral_curve,
            accent_strength=self.accent_strength,
            pop_intensity=self.pop_intensity,
            print_mode=self.print_mode,
            contrast_lock=self.contrast_lock,
            contrast_target=self.contrast_target,
            theme_name=self.theme_name,
        )


class SwatchEntry(BaseModel):
    """One entry of the ordered swatch stack."""
    name: str = Field(..., description="Swatch display name")
    path: str = Field(..., description="Token path the value was resolved from")
    value: Any = Field(None, description="Resolved token value")


class TokenResponse(BaseModel):
    """Generated token tree."""
    parameters: Dict[str, Any] = Field(..., description="Normalized generation parameters")
    tokens: Dict[str, Any] = Field(..., description="Token tree of {type, value} leaves")
    swatches: Optional[List[SwatchEntry]] = Field(None, description="Ordered swatch stack")


# ============================================================================
# COLOR SCHEMAS
# ============================================================================

class HarmonyRequest(BaseModel):
    """Harmony hue set request."""
    base: Union[float, str] = Field(..., description="Base hex color or hue in degrees")
    mode: str = Field("analogous", description="Harmony rule; unknown names fall back to analogous")
    reverse: bool = Field(False, description="Reverse the final ordering")


class HarmonyResponse(BaseModel):
    """Harmony hue set."""
    mode: str = Field(..., description="Harmony rule requested")
    hues: List[float] = Field(..., description="Ordered hues in [0, 360)")


class ContrastEnsureRequest(BaseModel):
    """Single-color contrast convergence request."""
    fg: str = Field(..., pattern=HEX_PATTERN, description="Foreground color")
    bg: str = Field(..., pattern=HEX_PATTERN, description="Background color")
    target: float = Field(4.5, ge=1.0, le=21.0, description="WCAG ratio to reach")
    prefer_lighten: bool = Field(False, description="Direction used on ties")


class ContrastEnsureResponse(BaseModel):
    """Single-color contrast convergence result."""
    hex: str = Field(..., description="Adjusted foreground color")
    ratio: float = Field(..., description="Contrast ratio of the result against bg")
    target: float = Field(..., description="Requested ratio")
    iterations: int = Field(..., description="Iterations used")
    converged: bool = Field(..., description="Whether the target was reached by adjustment")
    fallback_used: bool = Field(..., description="Whether black or white was substituted")
    level: str = Field(..., description="WCAG level of the final ratio: AAA, AA, AA18 or FAIL")


class AutoTuneRequest(BaseModel):
    """Dual-color contrast tuning request."""
    fg: str = Field(..., pattern=HEX_PATTERN, description="Foreground color")
    bg: str = Field(..., pattern=HEX_PATTERN, description="Background color")
    target: float = Field(4.5, ge=1.0, le=21.0, description="WCAG ratio to reach")


class AutoTuneResponse(BaseModel):
    """Dual-color contrast tuning result."""
    fg: str = Field(..., description="Adjusted foreground color")
    bg: str = Field(..., description="Adjusted background color")
    ratio: float = Field(..., description="Final contrast ratio")
    target: float = Field(..., description="Requested ratio")
    iterations: int = Field(..., description="Iterations used")
    converged: bool = Field(..., description="Whether the target was reached")
    level: str = Field(..., description="WCAG level of the final ratio")


# ============================================================================
# MOOD BOARD SCHEMAS
# ============================================================================

class PolicySchema(BaseModel):
    """Hue-separation constraint policy overrides."""
    min_hue_distance: float = Field(config.MOOD_MIN_HUE_DISTANCE, ge=0.0, le=180.0)
    anchor_random_attempts: int = Field(config.MOOD_ANCHOR_RANDOM_ATTEMPTS, ge=0)
    color_attempts: int = Field(config.MOOD_COLOR_ATTEMPTS, ge=1)
    exhaustion_strategy: str = Field(
        config.MOOD_EXHAUSTION_STRATEGY,
        description="neutralize or accept"
    )

    @field_validator("exhaustion_strategy")
    @classmethod
    def validate_strategy(cls, v):
        v = v.lower()
        if not config.validate_exhaustion_strategy(v):
            raise ValueError(f"exhaustion_strategy must be one of {config.SUPPORTED_EXHAUSTION_STRATEGIES}")
        return v

    def to_policy(self) -> ConstraintPolicy:
        return ConstraintPolicy(
            min_hue_distance=self.min_hue_distance,
            anchor_random_attempts=self.anchor_random_attempts,
            color_attempts=self.color_attempts,
            exhaustion_strategy=self.exhaustion_strategy,
        )


class MoodBoardRequest(BaseModel):
    """Full mood board request."""
    base_hex: Optional[str] = Field(None, pattern=HEX_PATTERN, description="Base color")
    required_hex: Optional[str] = Field(None, pattern=HEX_PATTERN, description="Color every cluster must contain")
    seed: Optional[int] = Field(None, description="Board seed; time-based when omitted")
    include_cool: bool = Field(True, description="Include the cool-drift cluster")
    policy: Optional[PolicySchema] = Field(None, description="Constraint policy overrides")


class MoodClusterRequest(BaseModel):
    """Single mood cluster request."""
    type: str = Field(..., description="Mood type: smoky, bright, deep, warm-drift, cool-drift")
    base_hex: Optional[str] = Field(None, pattern=HEX_PATTERN, description="Base color")
    required_hex: Optional[str] = Field(None, pattern=HEX_PATTERN, description="Required color")
    seed: Optional[int] = Field(None, description="Cluster seed; time-based when omitted")
    policy: Optional[PolicySchema] = Field(None, description="Constraint policy overrides")


class MoodRegenerateRequest(BaseModel):
    """Regenerate a persisted mood cluster."""
    cluster: Dict[str, Any] = Field(..., description="Cluster as returned by MoodCluster.to_dict()")
    seed: Optional[int] = Field(None, description="New seed; defaults to the cluster's seed")
    base_hex: Optional[str] = Field(None, pattern=HEX_PATTERN, description="Base color override")
    required_hex: Optional[str] = Field(None, pattern=HEX_PATTERN, description="Required color override")
    slots_to_regenerate: Optional[List[str]] = Field(None, description="Only regenerate these slot ids")
    force_all: bool = Field(False, description="Regenerate locked slots too")
    locked_slots: Optional[List[str]] = Field(None, description="Slot ids to lock before regenerating")
    edits: Optional[Dict[str, str]] = Field(None, description="Slot id to hand-picked hex; edited slots are locked")
    policy: Optional[PolicySchema] = Field(None, description="Constraint policy overrides")


class MoodClusterResponse(BaseModel):
    """One mood cluster."""
    cluster: Dict[str, Any] = Field(..., description="Serialized cluster")
    constraints_satisfied: bool = Field(..., description="False when any slot was relaxed")


class MoodBoardResponse(BaseModel):
    """A full mood board."""
    seed: Optional[int] = Field(None, description="Board seed used")
    clusters: List[MoodClusterResponse] = Field(..., description="Clusters in type order")


# ============================================================================
# PROJECT SCHEMAS
# ============================================================================

class ProjectMergeRequest(BaseModel):
    """Merge all section colors of a project."""
    project: Project = Field(..., description="Persisted project record")
    overrides: Optional[Dict[str, Any]] = Field(None, description="Merge setting overrides")


class MergedColor(BaseModel):
    """One merged project color."""
    name: str
    hex: str
    is_role: bool
    is_anchor: bool
    section_label: str


class ProjectMergeResponse(BaseModel):
    """Merged project palette."""
    project_name: str = Field(..., description="Project name")
    count: int = Field(..., description="Number of merged colors")
    colors: List[MergedColor] = Field(..., description="Merged colors, roles and anchors first")


class ProjectSocRequest(BaseModel):
    """Export a merged project as a .soc swatch table."""
    project: Project = Field(..., description="Persisted project record")
    overrides: Optional[Dict[str, Any]] = Field(None, description="Merge setting overrides")
    sanitize_names: bool = Field(True, description="Reformat camelCase and snake_case names")


class PaletteSocRequest(BaseModel):
    """Export a flat name-to-color mapping as a .soc swatch table."""
    colors: Dict[str, str] = Field(..., description="Color name to color string")
    delta_e: Optional[float] = Field(None, ge=0.0, description="CIE76 near-duplicate threshold")
    max_neutrals: Optional[int] = Field(None, ge=0, description="Neutral cap")
    max_colors: Optional[int] = Field(None, ge=0, description="Hard cap on exported colors")
    sanitize_names: bool = Field(True, description="Reformat camelCase and snake_case names")


class PresetRequest(BaseModel):
    """Random preset request."""
    seed: Optional[int] = Field(None, description="Generator seed; fresh entropy when omitted")
    crank: bool = Field(False, description="Switch the preset to full Apocalypse")
    theme_name: Optional[str] = Field(None, description="Optional custom theme name")
