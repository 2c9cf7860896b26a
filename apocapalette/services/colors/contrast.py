"""
Apocapalette Contrast Enforcement

Lightness-only convergence toward a WCAG contrast target. The single-color
variant walks one foreground in 2-point HSL lightness steps and degrades to
black or white; the dual-color variant pushes a pair apart in 0.05 steps and
returns whatever state it reaches.
"""

from dataclasses import dataclass
from typing import Tuple

from loguru import logger

from .colorspace import (
    clamp, contrast_ratio, hex_to_hsl, hsl_to_hex, normalize_hex, relative_luminance
)


BLACK = "#000000"
WHITE = "#ffffff"

MAX_ITERATIONS = 30
LIGHTNESS_STEP = 2
LIGHTNESS_FLOOR = 1
LIGHTNESS_CEILING = 99

DUAL_MAX_ITERATIONS = 20
DUAL_STEP = 0.05


@dataclass(frozen=True)
class ContrastResult:
    """Outcome of single-color convergence."""
    hex: str
    ratio: float
    target: float
    iterations: int
    converged: bool
    fallback_used: bool


@dataclass(frozen=True)
class ContrastPairResult:
    """Outcome of dual-color convergence."""
    fg: str
    bg: str
    ratio: float
    target: float
    iterations: int
    converged: bool


def enforce_contrast(
    fg: str,
    bg: str,
    target: float,
    prefer_lighten: bool = False,
    max_iterations: int = MAX_ITERATIONS
) -> ContrastResult:
    """
    Adjust fg lightness until it reaches `target` contrast against bg.

    Each iteration evaluates fg lightened and darkened by 2 (clamped to
    [1, 99]) and moves to the candidate with the higher ratio, using the
    preferred direction on a tie. The walk stops when the target is met or
    when neither candidate changes the ratio. A walk that ends short of the
    target returns whichever of black or white contrasts more with bg.

    Args:
        fg: Foreground hex
        bg: Background hex
        target: Minimum WCAG ratio
        prefer_lighten: Direction used when both candidates tie
        max_iterations: Iteration cap

    Returns:
        ContrastResult with the final color and achieved ratio
    """
    color = normalize_hex(fg)
    bg = normalize_hex(bg)
    h, s, l = hex_to_hsl(color)
    ratio = contrast_ratio(color, bg)
    if ratio >= target:
        return ContrastResult(color, ratio, target, 0, True, False)

    iterations = 0
    for _ in range(max_iterations):
        iterations += 1
        up = min(LIGHTNESS_CEILING, l + LIGHTNESS_STEP)
        down = max(LIGHTNESS_FLOOR, l - LIGHTNESS_STEP)
        up_color = hsl_to_hex(h, s, up)
        down_color = hsl_to_hex(h, s, down)
        up_ratio = contrast_ratio(up_color, bg)
        down_ratio = contrast_ratio(down_color, bg)

        if up_ratio == ratio and down_ratio == ratio:
            break
        if up_ratio == down_ratio:
            go_up = prefer_lighten
        else:
            go_up = up_ratio > down_ratio

        if go_up:
            l, color, ratio = up, up_color, up_ratio
        else:
            l, color, ratio = down, down_color, down_ratio

        if ratio >= target:
            return ContrastResult(color, ratio, target, iterations, True, False)

    black_ratio = contrast_ratio(BLACK, bg)
    white_ratio = contrast_ratio(WHITE, bg)
    fallback, fallback_ratio = (BLACK, black_ratio) if black_ratio >= white_ratio else (WHITE, white_ratio)

    logger.bind(fg=fg, bg=bg, target=target, fallback=fallback).debug(
        "Contrast walk did not converge, using black/white fallback"
    )

    return ContrastResult(
        fallback, fallback_ratio, target, iterations, fallback_ratio >= target, True
    )


def ensure_contrast(fg: str, bg: str, target: float, prefer_lighten: bool = False) -> str:
    """Hex-only shorthand for enforce_contrast."""
    return enforce_contrast(fg, bg, target, prefer_lighten).hex


def auto_tune_pair(
    fg: str,
    bg: str,
    target: float,
    max_iterations: int = DUAL_MAX_ITERATIONS
) -> ContrastPairResult:
    """
    Push a foreground/background pair apart until `target` is reached.

    The lighter color of the pair is raised and the darker one lowered by
    0.05 HSL lightness (0-1 scale) per iteration, each clamped to [0, 1].
    Hue and saturation are held at their starting values throughout. No
    fallback is substituted; the pair is returned as the loop leaves it.

    Args:
        fg: Foreground hex
        bg: Background hex
        target: Desired WCAG ratio
        max_iterations: Iteration cap

    Returns:
        ContrastPairResult
    """
    fg = normalize_hex(fg)
    bg = normalize_hex(bg)
    ratio = contrast_ratio(fg, bg)
    if ratio >= target:
        return ContrastPairResult(fg, bg, ratio, target, 0, True)

    fg_h, fg_s, fg_l = hex_to_hsl(fg)
    bg_h, bg_s, bg_l = hex_to_hsl(bg)
    fg_l /= 100
    bg_l /= 100
    fg_is_lighter = relative_luminance(fg) > relative_luminance(bg)

    new_fg, new_bg = fg, bg
    iterations = 0
    while ratio < target and iterations < max_iterations:
        if fg_is_lighter:
            fg_l = clamp(fg_l + DUAL_STEP, 0, 1)
            bg_l = clamp(bg_l - DUAL_STEP, 0, 1)
        else:
            bg_l = clamp(bg_l + DUAL_STEP, 0, 1)
            fg_l = clamp(fg_l - DUAL_STEP, 0, 1)
        new_fg = hsl_to_hex(fg_h, fg_s, fg_l * 100)
        new_bg = hsl_to_hex(bg_h, bg_s, bg_l * 100)
        ratio = contrast_ratio(new_fg, new_bg)
        iterations += 1

    return ContrastPairResult(new_fg, new_bg, ratio, target, iterations, ratio >= target)


def auto_tune_contrast(fg: str, bg: str, target: float) -> Tuple[str, str]:
    """Hex-pair shorthand for auto_tune_pair."""
    result = auto_tune_pair(fg, bg, target)
    return result.fg, result.bg
