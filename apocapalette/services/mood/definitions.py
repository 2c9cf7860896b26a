"""
Mood cluster type definitions and family color ranges.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from apocapalette.services.colors.colorspace import HSL, clamp


MOOD_TYPES = ["smoky", "bright", "deep", "warm-drift", "cool-drift"]


@dataclass(frozen=True)
class ClusterDefinition:
    """Per-type generation targets plus the slider values handed to the token engine."""
    id: str
    title: str
    description: str
    mode: str
    hue_shift: float
    neutral_bias: float
    sat_target: float
    light_target: float
    sat_jitter: float
    light_jitter: float
    harmony_intensity: float
    neutral_curve: float
    accent_strength: float
    pop_intensity: float


@dataclass(frozen=True)
class SupportingFamily:
    family: str
    variant: str


@dataclass(frozen=True)
class FamilyRange:
    """HSL bounds a supporting color is drawn from."""
    hue: Tuple[float, float] = (0, 360)
    sat: Tuple[float, float] = (8, 32)
    light: Tuple[float, float] = (20, 52)


def between(rng: np.random.Generator, low: float, high: float) -> float:
    """Uniform draw in [low, high)."""
    return low + (high - low) * float(rng.random())


def jitter(rng: np.random.Generator, center: float, spread: float) -> float:
    """Uniform draw in [center - spread, center + spread)."""
    return center + (float(rng.random()) * 2 - 1) * spread


def build_cluster_definition(mood_type: str, base: HSL, rng: np.random.Generator) -> ClusterDefinition:
    """
    Resolve the targets of one mood type for a base color.

    Args:
        mood_type: One of MOOD_TYPES
        base: Base color in HSL
        rng: Generator used for the type's hue shift

    Returns:
        ClusterDefinition

    Raises:
        ValueError: If the mood type is unknown
    """
    if mood_type == "smoky":
        return ClusterDefinition(
            id="smoky", title="Smoky", description="Lower saturation, mid-toned haze.",
            mode="Monochromatic", hue_shift=0, neutral_bias=6,
            sat_target=clamp(base.s * 0.5 + 6, 18, 42),
            light_target=clamp(base.l * 0.9 + 8, 42, 60),
            sat_jitter=10, light_jitter=8,
            harmony_intensity=85, neutral_curve=110, accent_strength=85, pop_intensity=80,
        )
    if mood_type == "bright":
        return ClusterDefinition(
            id="bright", title="Bright", description="High saturation, higher brightness.",
            mode="Tertiary", hue_shift=between(rng, -6, 6), neutral_bias=2,
            sat_target=clamp(base.s * 1.15 + 12, 60, 95),
            light_target=clamp(base.l * 1.05 + 14, 55, 78),
            sat_jitter=12, light_jitter=10,
            harmony_intensity=125, neutral_curve=90, accent_strength=120, pop_intensity=125,
        )
    if mood_type == "deep":
        return ClusterDefinition(
            id="deep", title="Deep", description="Lower brightness, grounded saturation.",
            mode="Monochromatic", hue_shift=between(rng, -4, 4), neutral_bias=-6,
            sat_target=clamp(base.s * 0.7 + 8, 28, 60),
            light_target=clamp(base.l * 0.65 - 6, 14, 36),
            sat_jitter=10, light_jitter=8,
            harmony_intensity=88, neutral_curve=120, accent_strength=90, pop_intensity=75,
        )
    if mood_type == "warm-drift":
        return ClusterDefinition(
            id="warm-drift", title="Warm Drift", description="Hue shifted warmer, soft glow.",
            mode="Analogous", hue_shift=between(rng, 16, 34), neutral_bias=12,
            sat_target=clamp(base.s * 0.95 + 10, 42, 78),
            light_target=clamp(base.l * 0.95 + 10, 40, 68),
            sat_jitter=10, light_jitter=10,
            harmony_intensity=112, neutral_curve=100, accent_strength=115, pop_intensity=110,
        )
    if mood_type == "cool-drift":
        return ClusterDefinition(
            id="cool-drift", title="Cool Drift", description="Hue shifted cooler, airy contrast.",
            mode="Analogous", hue_shift=between(rng, -34, -16), neutral_bias=-12,
            sat_target=clamp(base.s * 0.9 + 6, 34, 72),
            light_target=clamp(base.l * 0.9 + 6, 34, 62),
            sat_jitter=10, light_jitter=10,
            harmony_intensity=110, neutral_curve=105, accent_strength=110, pop_intensity=105,
        )
    raise ValueError(f"Unknown mood cluster type: {mood_type}")


ADJACENT_OFFSETS: Dict[str, List[float]] = {
    "warm-drift": [18, 34, 52],
    "cool-drift": [-18, -34, -52],
    "deep": [22, -28, 40],
    "bright": [18, -18, 36],
    "smoky": [16, -18, 32],
}

GROUNDING_HUES: Dict[str, Tuple[float, float]] = {
    "cool-drift": (185, 205),
    "warm-drift": (95, 130),
    "deep": (110, 140),
    "bright": (100, 140),
    "smoky": (100, 130),
}

EXTRA_OFFSETS = [60, -60, 90, -90, 120, -120, 150, -150]


def grounding_hue(mood_type: str, rng: np.random.Generator) -> float:
    return between(rng, *GROUNDING_HUES.get(mood_type, GROUNDING_HUES["smoky"]))


def cool_hue(mood_type: str, rng: np.random.Generator) -> float:
    """Cool anchor hue: blue (200-225) or violet (270-295) depending on type."""
    if mood_type == "cool-drift":
        return between(rng, 270, 295)
    if mood_type == "warm-drift":
        return between(rng, 200, 225) if rng.random() < 0.6 else between(rng, 270, 295)
    if mood_type == "deep":
        return between(rng, 200, 225) if rng.random() < 0.5 else between(rng, 270, 295)
    if mood_type == "bright":
        return between(rng, 200, 230)
    return between(rng, 200, 225)


def select_supporting_families(mood_type: str, rng: np.random.Generator) -> List[SupportingFamily]:
    """Pick the type's supporting families (distinct by family, at most three)."""
    selected: List[SupportingFamily] = []

    def add(family: str, variant: str):
        if all(item.family != family for item in selected):
            selected.append(SupportingFamily(family, variant))

    if mood_type == "smoky":
        add("neutral", "smoky-neutral")
        add("blue", "blue-grey")
        if rng.random() < 0.4:
            add("green", "sage")
    elif mood_type == "deep":
        add("green", "forest")
        add("blue" if rng.random() < 0.5 else "purple", "deep-support")
        if rng.random() < 0.35:
            add("neutral", "deep-neutral")
    elif mood_type == "warm-drift":
        add("green", "olive")
        add("neutral", "warm-neutral")
        if rng.random() < 0.45:
            add("blue", "blue-green")
    elif mood_type == "cool-drift":
        add("blue", "cool-blue")
        add("purple", "cool-purple")
        if rng.random() < 0.35:
            add("neutral", "cool-neutral")
    elif mood_type == "bright":
        add("neutral", "bright-neutral")
        primary = "blue" if rng.random() < 0.5 else "green"
        add(primary, "bright-support")
        if rng.random() < 0.4:
            add("green" if primary == "blue" else "blue", "bright-support")
    else:
        add("neutral", "neutral")
        add("blue", "blue-grey")

    return selected[:3]


_FAMILY_RANGES: Dict[str, FamilyRange] = {
    "green": FamilyRange((90, 150), (10, 32), (18, 48)),
    "blue": FamilyRange((190, 230), (10, 34), (22, 56)),
    "purple": FamilyRange((260, 300), (12, 36), (20, 54)),
}

_VARIANT_RANGES: Dict[Tuple[str, str], FamilyRange] = {
    ("green", "forest"): FamilyRange((90, 150), (12, 28), (18, 34)),
    ("green", "sage"): FamilyRange((90, 150), (10, 24), (30, 58)),
    ("green", "olive"): FamilyRange((95, 130), (10, 28), (18, 44)),
    ("blue", "blue-grey"): FamilyRange((190, 230), (10, 22), (30, 62)),
    ("blue", "blue-green"): FamilyRange((190, 210), (10, 28), (22, 48)),
    ("purple", "cool-purple"): FamilyRange((260, 300), (12, 38), (20, 50)),
}


def family_range(family: str, variant: str) -> FamilyRange:
    """HSL bounds for a non-neutral supporting family and variant."""
    return _VARIANT_RANGES.get((family, variant), _FAMILY_RANGES.get(family, FamilyRange()))
