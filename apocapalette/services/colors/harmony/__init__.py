"""
Apocapalette Harmony Engine

Hue-set derivation for the classic color-wheel harmonies and the per-mode
HarmonySpec table that token synthesis scales by the intensity sliders.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union

from loguru import logger

from ..colorspace import hex_to_hsl, wrap_hue, hue_distance


class HarmonyMode(str, Enum):
    """Color-wheel harmony rules for hue sets."""
    COMPLEMENTARY = "complementary"
    ANALOGOUS = "analogous"
    TRIADIC = "triadic"
    SPLIT_COMPLEMENTARY = "split-complementary"
    RECTANGLE = "rectangle"
    SQUARE = "square"


class GenerationMode(str, Enum):
    """Token generation modes, each with its own HarmonySpec."""
    MONOCHROMATIC = "Monochromatic"
    ANALOGOUS = "Analogous"
    COMPLEMENTARY = "Complementary"
    TERTIARY = "Tertiary"
    APOCALYPSE = "Apocalypse"


HARMONY_OFFSETS: Dict[HarmonyMode, List[float]] = {
    HarmonyMode.COMPLEMENTARY: [180],
    HarmonyMode.ANALOGOUS: [-30, 30],
    HarmonyMode.TRIADIC: [120, 240],
    HarmonyMode.SPLIT_COMPLEMENTARY: [180 - 30, 180 + 30],
    HarmonyMode.RECTANGLE: [60, 180, 240],
    HarmonyMode.SQUARE: [90, 180, 270],
}

# Hue set exposed alongside the tokens of each generation mode
GENERATION_HUE_MODES: Dict[GenerationMode, HarmonyMode] = {
    GenerationMode.MONOCHROMATIC: HarmonyMode.ANALOGOUS,
    GenerationMode.ANALOGOUS: HarmonyMode.ANALOGOUS,
    GenerationMode.COMPLEMENTARY: HarmonyMode.COMPLEMENTARY,
    GenerationMode.TERTIARY: HarmonyMode.TRIADIC,
    GenerationMode.APOCALYPSE: HarmonyMode.SPLIT_COMPLEMENTARY,
}


@dataclass(frozen=True)
class HarmonySpec:
    """Per-mode hue offsets, saturation multipliers and neutral mix fractions."""
    secondary_hue_offset: float
    accent_hue_offset: float
    secondary_sat_mult: float
    accent_sat_mult: float
    surface_mix_fraction: float
    background_mix_fraction: float


_STATIC_SPECS: Dict[GenerationMode, HarmonySpec] = {
    GenerationMode.MONOCHROMATIC: HarmonySpec(8, -8, 0.9, 0.95, 0.08, 0.06),
    GenerationMode.ANALOGOUS: HarmonySpec(-30, 28, 1.05, 1.15, 0.28, 0.2),
    GenerationMode.COMPLEMENTARY: HarmonySpec(180, -150, 1.08, 1.2, 0.34, 0.28),
    GenerationMode.TERTIARY: HarmonySpec(120, -120, 1.12, 1.18, 0.38, 0.32),
}


def resolve_harmony_mode(mode: Union[str, HarmonyMode, None]) -> HarmonyMode:
    """
    Resolve a hue-set mode name, falling back to analogous.

    Args:
        mode: Mode name (case-insensitive) or enum

    Returns:
        HarmonyMode
    """
    if isinstance(mode, HarmonyMode):
        return mode
    if mode:
        try:
            return HarmonyMode(str(mode).strip().lower())
        except ValueError:
            pass
    logger.bind(mode=str(mode)).warning("Unknown harmony mode, falling back to analogous")
    return HarmonyMode.ANALOGOUS


def resolve_generation_mode(mode: Union[str, GenerationMode, None]) -> GenerationMode:
    """
    Resolve a generation mode name.

    Accepts exact names and the short project forms (mono, analogous, comp,
    tertiary, apocalypse). Unknown names fall back to Analogous.
    """
    if isinstance(mode, GenerationMode):
        return mode
    value = str(mode or "").strip().lower()
    prefixes = [
        ("mono", GenerationMode.MONOCHROMATIC),
        ("anal", GenerationMode.ANALOGOUS),
        ("comp", GenerationMode.COMPLEMENTARY),
        ("ter", GenerationMode.TERTIARY),
        ("apo", GenerationMode.APOCALYPSE),
    ]
    for prefix, resolved in prefixes:
        if value.startswith(prefix):
            return resolved
    logger.bind(mode=str(mode)).warning("Unknown generation mode, falling back to Analogous")
    return GenerationMode.ANALOGOUS


def get_harmony_spec(mode: GenerationMode, apocalypse_factor: float = 1.0) -> HarmonySpec:
    """
    Look up the HarmonySpec for a generation mode.

    Args:
        mode: Generation mode
        apocalypse_factor: Apocalypse intensity in [0.2, 1.5], only used by Apocalypse

    Returns:
        HarmonySpec for the mode
    """
    if mode == GenerationMode.APOCALYPSE:
        return HarmonySpec(
            secondary_hue_offset=180,
            accent_hue_offset=180,
            secondary_sat_mult=2.0 * apocalypse_factor,
            accent_sat_mult=2.2 * apocalypse_factor,
            surface_mix_fraction=min(0.6, 0.45 * apocalypse_factor),
            background_mix_fraction=min(0.55, 0.35 * apocalypse_factor),
        )
    return _STATIC_SPECS[mode]


def rotate_hue(h: float, degrees: float) -> float:
    """
    Rotate hue by specified degrees.

    Args:
        h: Original hue in degrees
        degrees: Rotation in degrees (can be negative)

    Returns:
        Rotated hue in [0, 360)
    """
    return wrap_hue(h + degrees)


def get_hue_separation(h1: float, h2: float) -> float:
    """Minimum angular separation between two hues in degrees."""
    return hue_distance(h1, h2)


def create_harmony(
    base: Union[float, str],
    mode: Union[str, HarmonyMode, None] = HarmonyMode.ANALOGOUS,
    reverse: bool = False
) -> List[float]:
    """
    Derive the ordered hue set for a harmony rule.

    The base hue comes first in the raw list; raw hues are deduplicated and
    sorted ascending before each is wrapped into [0, 360), so a wrapped hue
    keeps the position of its unwrapped angle.

    Args:
        base: Base hue in degrees, or a hex color
        mode: Harmony rule; unknown names fall back to analogous
        reverse: Reverse the final ordering

    Returns:
        Ordered list of hues
    """
    base_hue = hex_to_hsl(base).h if isinstance(base, str) else float(base)
    resolved = resolve_harmony_mode(mode)

    raw = [base_hue] + [base_hue + offset for offset in HARMONY_OFFSETS[resolved]]
    hues: List[float] = []
    for hue in sorted(set(raw)):
        wrapped = wrap_hue(hue)
        if wrapped not in hues:
            hues.append(wrapped)

    if reverse:
        hues.reverse()
    return hues
