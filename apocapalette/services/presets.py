"""
Palette presets: random parameter sets and the apocalypse crank.
"""

from dataclasses import replace
from typing import Optional

import numpy as np

from apocapalette.config import config
from apocapalette.services.colors.colorspace import rgb_to_hex, round_half_up
from apocapalette.services.tokens.engine import GenerationParameters


CRANKED_APOCALYPSE_INTENSITY = 150
CRANKED_HARMONY_INTENSITY = 120


def _uniform_int(rng: np.random.Generator, low: float, span: float) -> int:
    return round_half_up(low + float(rng.random()) * span)


def generate_random_palette(rng: np.random.Generator, theme_name: Optional[str] = None) -> GenerationParameters:
    """
    Draw a random set of generation parameters.

    Args:
        rng: Caller-supplied numpy Generator
        theme_name: Optional custom theme name

    Returns:
        GenerationParameters with a random base color, mode and theme,
        harmony 70-150, apocalypse 50-150, neutral curve and accent 80-130
    """
    r, g, b = (int(channel) for channel in rng.integers(0, 256, size=3))
    modes = config.SUPPORTED_GENERATION_MODES
    themes = config.SUPPORTED_THEME_MODES
    mode = modes[int(rng.integers(0, len(modes)))]
    theme_mode = themes[int(rng.integers(0, len(themes)))]

    return GenerationParameters(
        base_color=rgb_to_hex(r, g, b),
        harmony_mode=mode,
        theme_mode=theme_mode,
        harmony_intensity=_uniform_int(rng, 70, 80),
        apocalypse_intensity=_uniform_int(rng, 50, 100),
        neutral_curve=_uniform_int(rng, 80, 50),
        accent_strength=_uniform_int(rng, 80, 50),
        pop_intensity=100,
        theme_name=theme_name or "",
    )


def crank_apocalypse(params: GenerationParameters) -> GenerationParameters:
    """Switch to Apocalypse mode at full intensity, keeping everything else."""
    return replace(
        params,
        harmony_mode="Apocalypse",
        apocalypse_intensity=CRANKED_APOCALYPSE_INTENSITY,
        harmony_intensity=CRANKED_HARMONY_INTENSITY,
    )
