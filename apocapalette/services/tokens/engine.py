"""
Apocapalette Token Synthesis Engine

Builds the full design-token tree from a seed color, a generation mode and
the intensity sliders, then enforces WCAG contrast on the text pairs and
optionally applies the contrast lock and the print-safe pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from apocapalette.config import config
from apocapalette.services.colors.colorspace import (
    HSL, clamp, get_color, hex_to_hsl, hsl_to_hex, normalize_hex,
    pick_readable_text, resolve_mixed_hue, blend_hue, wrap_hue
)
from apocapalette.services.colors.contrast import enforce_contrast, auto_tune_pair
from apocapalette.services.colors.harmony import (
    GenerationMode, GENERATION_HUE_MODES, create_harmony, get_harmony_spec,
    resolve_generation_mode
)
from .print_mode import apply_print_mode
from .tree import Leaf, TokenTree, color


POP_INTENSITY = 0.28
LIGHT_TEMP_SHIFT = 8

HARMONY_INTENSITY_RANGE = (40, 160)
ACCENT_STRENGTH_RANGE = (50, 150)
NEUTRAL_CURVE_RANGE = (50, 150)
POP_INTENSITY_RANGE = (60, 140)
APOCALYPSE_INTENSITY_RANGE = (20, 150)
CONTRAST_TARGET_RANGE = (1.0, 21.0)

NEUTRAL_STEPS = {
    ("light", False): [98, 95, 90, 78, 66, 52, 38, 26, 16, 10],
    ("light", True): [98, 96, 92, 84, 70, 56, 40, 28, 18, 10],
    ("dark", False): [96, 88, 78, 68, 55, 45, 32, 22, 14, 8],
    ("dark", True): [94, 80, 64, 50, 40, 30, 18, 10, 6, 3],
}
NEUTRAL_SAT_MULTS = [0.15, 0.18, 0.2, 0.22, 0.24, 0.26, 0.28, 0.3, 0.32, 0.34]

HEADING_TARGET = 7.0
BODY_TARGET = 4.5
MUTED_TARGET = 3.2
POP_MUTED_TARGET = 4.5
POP_FOCUS_TARGET = 3.5


class ThemeMode(str, Enum):
    """Theme brightness modes."""
    LIGHT = "light"
    DARK = "dark"
    POP = "pop"


@dataclass(frozen=True)
class GenerationParameters:
    """Immutable input record for one token generation call."""
    base_color: str = "#6366f1"
    harmony_mode: str = GenerationMode.MONOCHROMATIC.value
    theme_mode: str = ThemeMode.DARK.value
    apocalypse_intensity: float = 100
    harmony_intensity: float = 100
    neutral_curve: float = 100
    accent_strength: float = 100
    pop_intensity: float = 100
    print_mode: bool = False
    contrast_lock: bool = False
    contrast_target: float = 4.5
    theme_name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "base_color", normalize_hex(self.base_color))
        mode = self.theme_mode.value if isinstance(self.theme_mode, ThemeMode) else str(self.theme_mode).lower()
        if mode not in {m.value for m in ThemeMode}:
            raise ValueError(f"Unknown theme mode: {self.theme_mode}")
        object.__setattr__(self, "theme_mode", mode)
        harmony = self.harmony_mode
        object.__setattr__(
            self, "harmony_mode",
            harmony.value if isinstance(harmony, GenerationMode) else str(harmony)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseColor": self.base_color,
            "mode": self.harmony_mode,
            "themeMode": self.theme_mode,
            "isDark": self.theme_mode == ThemeMode.DARK.value,
            "apocalypseIntensity": self.apocalypse_intensity,
            "harmonyIntensity": self.harmony_intensity,
            "neutralCurve": self.neutral_curve,
            "accentStrength": self.accent_strength,
            "popIntensity": self.pop_intensity,
            "printMode": self.print_mode,
            "contrastLock": self.contrast_lock,
            "contrastTarget": self.contrast_target,
            "customThemeName": self.theme_name,
        }


@dataclass
class _Scales:
    harmony: float
    accent: float
    neutral_curve: float
    pop: float
    apocalypse: float
    pop_boost: float


@dataclass
class _Lightness:
    background: float
    surface: float
    text_main: float
    text_muted: float
    border: float
    brand: float
    accent: float
    cta: float
    cta_hover: float


@dataclass
class _Context:
    """Values derived once per call and shared by every token group."""
    base: HSL
    mode: GenerationMode
    is_dark: bool
    is_pop: bool
    is_apocalypse: bool
    scales: _Scales
    sec_h: float
    acc_h: float
    sec_sat: float
    acc_sat: float
    surface_sat: float
    sat_normalizer: float
    primary_sat: float
    secondary_sat: float
    accent_sat: float
    light: _Lightness
    background_base: HSL = None
    surface_base: HSL = None
    large_surface_base: HSL = None
    medium_surface_base: HSL = None
    neutral_background_hue: float = 0.0
    neutral_steps: List[float] = field(default_factory=list)


def _percent_scale(value: float, bounds: Tuple[float, float]) -> float:
    return clamp(value, *bounds) / 100


def _resolve_scales(params: GenerationParameters, is_pop: bool, is_apocalypse: bool) -> _Scales:
    pop_scale = _percent_scale(params.pop_intensity, POP_INTENSITY_RANGE)
    pop_boost = 0.0
    if is_pop:
        pop_boost = POP_INTENSITY * clamp(pop_scale, 0.85, 1.15) * (0.85 if params.print_mode else 1)
    return _Scales(
        harmony=_percent_scale(params.harmony_intensity, HARMONY_INTENSITY_RANGE),
        accent=_percent_scale(params.accent_strength, ACCENT_STRENGTH_RANGE),
        neutral_curve=_percent_scale(params.neutral_curve, NEUTRAL_CURVE_RANGE),
        pop=pop_scale,
        apocalypse=_percent_scale(params.apocalypse_intensity, APOCALYPSE_INTENSITY_RANGE) if is_apocalypse else 1.0,
        pop_boost=pop_boost,
    )


def _resolve_lightness(is_dark: bool, is_pop: bool, is_apocalypse: bool, pop_scale: float) -> _Lightness:
    if is_apocalypse:
        bg_l, surface_l, text_main_l, text_muted_l, border_l = (
            (2, 6, 98, 70, 10) if is_dark else (99, 98, 8, 35, 88)
        )
    else:
        bg_l, surface_l, text_main_l, text_muted_l, border_l = (
            (10, 16, 95, 65, 25) if is_dark else (98, 93, 10, 40, 90)
        )

    if not is_dark:
        bg_l, surface_l, border_l = (98, 94, 88) if is_apocalypse else (96, 92, 88)
    if is_pop and not is_dark:
        base_pop = clamp(56 + (pop_scale - 1) * 6 - (2 if is_apocalypse else 0), 42, 62)
        bg_l = base_pop
        surface_l = clamp(base_pop - (2 if is_apocalypse else 4), 38, 58)
        border_l = clamp(base_pop - (4 if is_apocalypse else 8), 32, 52)

    if is_apocalypse:
        brand_l, accent_l, cta_l, cta_hover_l = (75, 78, 78, 82) if is_dark else (52, 56, 54, 50)
    else:
        brand_l, accent_l, cta_l, cta_hover_l = (60, 67, 62, 68) if is_dark else (50, 55, 52, 48)

    return _Lightness(bg_l, surface_l, text_main_l, text_muted_l, border_l, brand_l, accent_l, cta_l, cta_hover_l)


def _build_context(params: GenerationParameters) -> _Context:
    base = hex_to_hsl(params.base_color)
    mode = resolve_generation_mode(params.harmony_mode)
    is_dark = params.theme_mode == ThemeMode.DARK.value
    is_pop = params.theme_mode == ThemeMode.POP.value
    is_apocalypse = mode == GenerationMode.APOCALYPSE

    scales = _resolve_scales(params, is_pop, is_apocalypse)
    spec = get_harmony_spec(mode, scales.apocalypse)
    surface_mix = clamp(spec.surface_mix_fraction * scales.harmony, 0, 0.6 if is_apocalypse else 0.5)
    background_mix = clamp(spec.background_mix_fraction * scales.harmony, 0, 0.55 if is_apocalypse else 0.45)

    light = _resolve_lightness(is_dark, is_pop, is_apocalypse, scales.pop)

    if is_apocalypse:
        base_surface_sat = clamp(base.s * 0.8, 32, 82)
    else:
        base_surface_sat = clamp(base.s * 0.42, 14, 56)
    gamma_light_sat = ((base_surface_sat / 100) ** 1.02) * 100
    if is_dark:
        surface_sat = base_surface_sat
    else:
        surface_sat = min(32 if is_apocalypse else 24, max(8, gamma_light_sat * (0.85 if is_apocalypse else 0.65)))

    sat_normalizer = (1.35 if is_dark else 1.5) if is_apocalypse else (0.92 if is_dark else 0.86)
    primary_sat = (1.5 if is_apocalypse else 0.9) * scales.accent
    secondary_sat = spec.secondary_sat_mult * sat_normalizer * scales.harmony * scales.accent
    accent_sat = spec.accent_sat_mult * sat_normalizer * scales.harmony * scales.accent

    if is_pop:
        boost = scales.pop_boost
        sat_boost = 1 + boost * 1.3
        primary_sat *= sat_boost
        secondary_sat *= sat_boost * 1.1
        accent_sat *= sat_boost * 1.25
        sat_normalizer *= 1 + boost * 0.55
        light.brand = clamp(light.brand + boost * 6 - 2, 46, 70)
        light.accent = clamp(light.accent + boost * 6 - 2, 48, 72)
        light.cta = clamp(light.cta + boost * 5 - 2, 46, 68)
        light.cta_hover = clamp(light.cta_hover + boost * 4 - 2, 44, 66)

    ctx = _Context(
        base=base, mode=mode, is_dark=is_dark, is_pop=is_pop, is_apocalypse=is_apocalypse,
        scales=scales, sec_h=spec.secondary_hue_offset, acc_h=spec.accent_hue_offset,
        sec_sat=spec.secondary_sat_mult, acc_sat=spec.accent_sat_mult,
        surface_sat=surface_sat, sat_normalizer=sat_normalizer, primary_sat=primary_sat,
        secondary_sat=secondary_sat, accent_sat=accent_sat, light=light,
    )

    surface_hue = resolve_mixed_hue(params.base_color, ctx.sec_h, surface_mix)
    background_hue = resolve_mixed_hue(params.base_color, ctx.acc_h, background_mix)
    neutral_shift = 0 if is_dark else LIGHT_TEMP_SHIFT
    neutral_surface_hue = wrap_hue(surface_hue + neutral_shift)
    neutral_background_hue = wrap_hue(background_hue + neutral_shift)
    ctx.neutral_background_hue = neutral_background_hue

    bg_l = light.background
    ctx.background_base = HSL(neutral_background_hue, surface_sat * (0.85 if is_dark else 1.05), bg_l)
    ctx.surface_base = HSL(neutral_surface_hue, surface_sat, bg_l)

    pop_light = is_pop and not is_dark
    if pop_light:
        boost = scales.pop_boost
        large_hue = blend_hue(neutral_background_hue, base.h - neutral_background_hue, 0.02 + boost * 0.05)
        medium_hue = blend_hue(neutral_surface_hue, base.h - neutral_surface_hue, 0.08 + boost * 0.1)
        ctx.large_surface_base = HSL(large_hue, clamp(surface_sat * 0.9, 4, 14), bg_l)
        ctx.medium_surface_base = HSL(medium_hue, clamp(surface_sat * (1 + boost * 0.7), 6, 26), bg_l)
    else:
        ctx.large_surface_base = ctx.background_base
        ctx.medium_surface_base = ctx.surface_base

    table = NEUTRAL_STEPS[("dark" if is_dark else "light", is_apocalypse)]
    pivot = 55 if is_dark else 50
    ctx.neutral_steps = [clamp(pivot + (step - pivot) * scales.neutral_curve, 1, 99) for step in table]
    return ctx


def _neutral_color(ctx: _Context, lightness: float, sat_mult: float) -> str:
    base = HSL(ctx.neutral_background_hue, ctx.surface_sat * sat_mult, lightness)
    return get_color(base, 0, 1, lightness)


def _status_colors(is_dark: bool, is_apocalypse: bool) -> Dict[str, str]:
    if is_apocalypse:
        anchors = {
            "success": (145, 100, 60) if is_dark else (145, 95, 40),
            "warning": (45, 100, 60) if is_dark else (45, 100, 50),
            "error": (0, 100, 65) if is_dark else (0, 100, 45),
            "info": (210, 100, 65) if is_dark else (210, 100, 50),
        }
    else:
        anchors = {
            "success": (145, 65, 45) if is_dark else (145, 65, 40),
            "warning": (45, 90, 50) if is_dark else (45, 90, 45),
            "error": (0, 70, 60) if is_dark else (0, 70, 50),
            "info": (210, 80, 60) if is_dark else (210, 80, 50),
        }
    return {name: hsl_to_hex(*hsl) for name, hsl in anchors.items()}


def _status_strong(is_dark: bool) -> Dict[str, str]:
    return {
        "success-strong": get_color(HSL(145, 65, 50), 0, 1, 52 if is_dark else 48),
        "warning-strong": get_color(HSL(45, 90, 55), 0, 1, 52 if is_dark else 50),
        "error-strong": get_color(HSL(0, 72, 55), 0, 1, 58 if is_dark else 52),
    }


def _foundation(ctx: _Context) -> Dict[str, Any]:
    base, dark = ctx.base, ctx.is_dark
    accent_light_steps = [68, 60, 52, 36] if dark else [58, 52, 46, 32]
    accent_base_sat = clamp(max(20, base.s) * ctx.scales.accent, 10, 100)

    def accent_color(hue: float, sat_mult: float, lightness: float) -> str:
        return get_color(HSL(hue, accent_base_sat, lightness), 0, sat_mult, lightness)

    hue_main = wrap_hue(base.h + ctx.acc_h)
    hue_secondary = wrap_hue(base.h + ctx.sec_h)
    norm = ctx.sat_normalizer

    harmony_hues = create_harmony(base.h, GENERATION_HUE_MODES[ctx.mode])
    harmony = {
        f"harmony-{index + 1}": color(hsl_to_hex(hue, base.s, base.l), hue=hue)
        for index, hue in enumerate(harmony_hues)
    }

    return {
        "hue": Leaf("number", base.h),
        "neutrals": {
            f"neutral-{index}": _neutral_color(ctx, step, NEUTRAL_SAT_MULTS[index])
            for index, step in enumerate(ctx.neutral_steps)
        },
        "accents": {
            "accent-1": accent_color(hue_main, norm * ctx.acc_sat * 0.9, accent_light_steps[0]),
            "accent-2": accent_color(hue_secondary, norm * ctx.sec_sat * 0.98, accent_light_steps[1]),
            "accent-3": accent_color(base.h, norm * ctx.acc_sat * 1.05, accent_light_steps[2]),
            "accent-ink": accent_color(hue_main, norm * ctx.acc_sat * 1.2, accent_light_steps[3]),
        },
        "status": _status_colors(dark, ctx.is_apocalypse),
        "harmony": harmony,
    }


def _brand(ctx: _Context) -> Dict[str, str]:
    base, dark, boost, light = ctx.base, ctx.is_dark, ctx.scales.pop_boost, ctx.light
    acc_h = ctx.acc_h
    accent_sat = ctx.accent_sat
    return {
        "primary": get_color(base, 0, ctx.primary_sat, light.brand),
        "secondary": get_color(base, ctx.sec_h, ctx.secondary_sat * 0.96, light.brand),
        "accent": get_color(base, acc_h, accent_sat * 0.9, light.accent),
        "accent-strong": get_color(base, acc_h, accent_sat * 0.9 + 0.04, light.accent + 5),
        "cta": get_color(base, acc_h, accent_sat * 0.88 + 0.02, light.cta),
        "cta-hover": get_color(base, acc_h, accent_sat * 0.88 + 0.05, light.cta_hover),
        "gradient-start": get_color(base, 0, 1, light.brand + 5 if dark else light.brand + 8),
        "gradient-end": get_color(base, acc_h, accent_sat * 0.9, light.brand - 4 if dark else light.brand - 2),
        "link-color": get_color(base, acc_h, 0.9 if dark else 0.9 + boost * 0.6, 70 if dark else 45),
        "focus-ring": get_color(
            base, acc_h, 1 if dark else 0.8 + boost * 0.7, 50 if dark else 62 + boost * 6
        ),
    }


def _text_accents(ctx: _Context) -> Tuple[float, float]:
    boost = ctx.scales.pop_boost
    if ctx.is_dark:
        return 1.0, 1.0
    return 1 + boost * 0.55, 1 + boost * 0.7


def _typography(ctx: _Context) -> Dict[str, str]:
    base, dark, acc_h, light = ctx.base, ctx.is_dark, ctx.acc_h, ctx.light
    text_sat, text_strong_sat = _text_accents(ctx)
    return {
        "heading": get_color(base, 0, 0.1, light.text_main),
        "text-strong": get_color(base, 0, 0.1, 90 if dark else 15),
        "text-body": get_color(base, 0, 0.1, 80 if dark else 25),
        "text-muted": get_color(base, 0, 0.1, light.text_muted),
        "text-hint": get_color(base, 0, 0.2, 50 if dark else 60),
        "text-disabled": get_color(base, 0, 0.1, 30 if dark else 80),
        "text-accent": get_color(base, acc_h, text_sat, 75 if dark else 40),
        "text-accent-strong": get_color(base, acc_h, text_strong_sat, 85 if dark else 30),
        "footer-text": get_color(base, 0, 0.1, 60 if dark else 85),
        "footer-text-muted": get_color(base, 0, 0.1, 40 if dark else 60),
    }


def _text_palette(ctx: _Context) -> Dict[str, str]:
    base, dark, acc_h = ctx.base, ctx.is_dark, ctx.acc_h
    text_sat, text_strong_sat = _text_accents(ctx)
    link_sat = 1 if dark else 1 + ctx.scales.pop_boost * 0.6
    return {
        "text-primary": get_color(base, 0, 0.1, 92 if dark else 18),
        "text-secondary": get_color(base, 0, 0.1, 86 if dark else 24),
        "text-tertiary": get_color(base, 0, 0.1, 78 if dark else 32),
        "text-hint": get_color(base, 0, 0.2, 60 if dark else 50),
        "text-disabled": get_color(base, 0, 0.1, 38 if dark else 80),
        "text-accent": get_color(base, acc_h, text_sat, 75 if dark else 40),
        "text-accent-strong": get_color(base, acc_h, text_strong_sat, 85 if dark else 30),
        "link-color": get_color(base, acc_h, link_sat, 70 if dark else 45),
    }


def _border_steps(ctx: _Context, sats: Tuple[float, float, float, float], prefix: str) -> Dict[str, str]:
    base, dark, acc_h, border_l = ctx.base, ctx.is_dark, ctx.acc_h, ctx.light.border
    offsets = [("subtle", 5), ("medium", 10), ("strong", 18), ("hover", 22)]
    return {
        f"{prefix}-{name}": get_color(base, acc_h, sat, border_l + offset if dark else border_l - offset)
        for (name, offset), sat in zip(offsets, sats)
    }


def _borders(ctx: _Context) -> Dict[str, str]:
    boost, dark, border_l = ctx.scales.pop_boost, ctx.is_dark, ctx.light.border
    sats = (0.15, 0.25, 0.35, 0.4) if dark else (
        0.12 + boost * 0.12, 0.18 + boost * 0.16, 0.26 + boost * 0.2, 0.3 + boost * 0.24
    )
    borders = {
        "border-subtle": get_color(ctx.surface_base, 0, 0.9, border_l),
        "border-strong": get_color(ctx.surface_base, 0, 0.9, border_l + 12 if dark else border_l - 12),
    }
    borders.update(_border_steps(ctx, sats, "border-accent"))
    return borders


def _surfaces(ctx: _Context) -> Dict[str, str]:
    light, dark = ctx.light, ctx.is_dark
    bg_l = light.background
    if dark:
        header_l = bg_l + 2
    else:
        header_l = clamp(bg_l + (1 if ctx.is_pop else 2), 90 if ctx.is_pop else 94, 98)
    medium = ctx.medium_surface_base
    return {
        "background": get_color(ctx.background_base, 0, 1, bg_l),
        "page-background": get_color(ctx.background_base, 0, 1, bg_l - 2),
        "header-background": get_color(ctx.large_surface_base, 0, 1, header_l),
        "surface-plain": get_color(medium, 0, 1, light.surface),
        "surface-plain-border": get_color(medium, 0, 1, light.border),
    }


def _cards(ctx: _Context) -> Dict[str, str]:
    base, dark, boost, acc_h = ctx.base, ctx.is_dark, ctx.scales.pop_boost, ctx.acc_h
    surface_l, border_l = ctx.light.surface, ctx.light.border
    medium = ctx.medium_surface_base
    return {
        "card-panel-surface": get_color(medium, 0, 1, surface_l),
        "card-panel-surface-strong": get_color(
            medium, 0, 1, surface_l + 5 if dark else min(97, surface_l + (2 if ctx.is_pop else 4))
        ),
        "card-panel-border": get_color(medium, 0, 1, border_l),
        "card-panel-border-soft": get_color(medium, 0, 1, border_l - 5 if dark else min(96, border_l + 6)),
        "card-panel-border-strong": get_color(ctx.surface_base, 0, 1, border_l + 15 if dark else 85),
        "card-tag-bg": get_color(base, 0, 0.2, 20) if dark else get_color(base, acc_h, 0.12 + boost * 0.2, 94),
        "card-tag-text": get_color(base, 0, 0.4, 80 if dark else 30),
        "card-tag-border": get_color(base, 0, 0.2, 30) if dark else get_color(base, acc_h, 0.18 + boost * 0.2, 85),
    }


def _glass(ctx: _Context) -> Dict[str, Any]:
    base, dark, acc_h = ctx.base, ctx.is_dark, ctx.acc_h
    if ctx.is_apocalypse:
        noise = "0.9"
    else:
        noise = "0.08" if dark else "0.04"
    return {
        "glass-surface": get_color(base, 0, 0.1, 20 if dark else 95),
        "glass-surface-strong": get_color(base, 0, 0.1, 30 if dark else 90),
        "glass-border": get_color(base, 0, 0.1, 35 if dark else 85),
        "glass-border-strong": get_color(base, 0, 0.2, 45 if dark else 80),
        "glass-hover": get_color(base, acc_h, 0.3, 25 if dark else 95),
        "glass-shadow": get_color(base, 0, 0.3, 5 if dark else 80),
        "glass-highlight": get_color(base, 0, 0, 30 if dark else 99),
        "glass-glow": get_color(base, acc_h, 0.5, 28 if dark else 72),
        "glass-shadow-soft": "rgba(0,0,0,0.45)" if dark else "rgba(0,0,0,0.1)",
        "glass-shadow-strong": "rgba(0,0,0,0.65)" if dark else "rgba(0,0,0,0.18)",
        "glass-blur": "40px" if ctx.is_apocalypse else "16px",
        "glass-noise-opacity": Leaf("opacity", noise),
    }


def _entity(ctx: _Context) -> Dict[str, str]:
    base, dark, sec_h = ctx.base, ctx.is_dark, ctx.sec_h
    return {
        "entity-card-surface": get_color(base, sec_h, 0.15, 18 if dark else 98),
        "entity-card-border": get_color(base, sec_h, 0.2, 35 if dark else 85),
        "entity-card-glow": get_color(base, sec_h, 0.6, 25 if dark else 90),
        "entity-card-highlight": get_color(base, sec_h, 0.4, 30 if dark else 95),
        "entity-card-heading": get_color(base, sec_h, 0.5, 80 if dark else 20),
    }


def _named(ctx: _Context) -> Dict[str, str]:
    base, sec_h, acc_h = ctx.base, ctx.sec_h, ctx.acc_h
    return {
        "color-midnight": get_color(base, 0, 0.8, 10),
        "color-night": get_color(base, 10, 0.6, 15),
        "color-dusk": get_color(base, sec_h, 0.4, 30),
        "color-ink": get_color(base, 0, 0.1, 20),
        "color-amethyst": get_color(base, acc_h, 0.7, 60),
        "color-iris": get_color(base, acc_h, 0.9, 75),
        "color-gold": get_color(base, 45, 0.8, 60),
        "color-rune": get_color(base, sec_h, 0.6, 85),
        "color-fog": get_color(base, 0, 0.1, 90),
    }


def _admin(ctx: _Context) -> Dict[str, str]:
    dark, boost, bg_l = ctx.is_dark, ctx.scales.pop_boost, ctx.light.background
    surface_base = ctx.medium_surface_base if ctx.is_pop and not dark else ctx.background_base
    return {
        "admin-surface-base": get_color(surface_base, 0, 1, bg_l + 6 if dark else min(98, bg_l + 3)),
        "admin-accent": get_color(ctx.base, ctx.acc_h, 0.95 if dark else 0.85 + boost * 0.35, 64 if dark else 54),
    }


def _aliases(ctx: _Context, accent_strong: str) -> Dict[str, str]:
    base, dark, boost, acc_h = ctx.base, ctx.is_dark, ctx.scales.pop_boost, ctx.acc_h
    surface_l, border_l = ctx.light.surface, ctx.light.border
    medium = ctx.medium_surface_base
    _, text_strong_sat = _text_accents(ctx)
    focus_sat = 1 if dark else 0.8 + boost * 0.7
    alias_sats = (0.2, 0.35, 0.5, 0.6) if dark else (
        0.16 + boost * 0.14, 0.26 + boost * 0.18, 0.38 + boost * 0.24, 0.46 + boost * 0.28
    )
    purple_subtle = 0.25 if dark else 0.18 + boost * 0.16
    purple_medium = 0.35 if dark else 0.26 + boost * 0.2

    aliases = {
        "surface-panel-primary": get_color(medium, 0, 1, surface_l),
        "surface-panel-secondary": get_color(medium, 0, 1, surface_l + 4 if dark else surface_l - 2),
        "surface-card-hover": get_color(medium, 0, 1, surface_l + 6 if dark else surface_l - 4),
        "surface-muted": get_color(medium, 0, 1, surface_l - 2 if dark else surface_l + 2),
        "border-purple-subtle": get_color(base, acc_h, purple_subtle, border_l),
        "border-purple-medium": get_color(base, acc_h, purple_medium, border_l + 8 if dark else border_l - 8),
    }
    aliases.update(_border_steps(ctx, alias_sats, "border-accent"))
    aliases.update({
        "text-subtle": get_color(base, 0, 0.1, ctx.light.text_muted),
        "text-accent-strong": get_color(base, acc_h, text_strong_sat, 88 if dark else 34),
        "accent-purple-strong": accent_strong,
        "accent-purple-soft": get_color(base, acc_h, 0.7, 75 if dark else 70),
        "overlay-panel": get_color(medium, 0, 1, surface_l + 2 if dark else surface_l),
        "overlay-panel-strong": get_color(medium, 0, 1, surface_l + 6 if dark else surface_l - 2),
        "focus-ring": get_color(base, acc_h, focus_sat, 40 if dark else 68 + boost * 4),
        "shadow-card": "0 20px 50px -20px rgba(0,0,0,0.55)" if dark else "0 12px 30px -18px rgba(0,0,0,0.15)",
        "shadow-card-hover": "0 24px 60px -22px rgba(0,0,0,0.6)" if dark else "0 14px 40px -20px rgba(0,0,0,0.2)",
        "chip-background": (
            get_color(ctx.surface_base, 0, 1, surface_l - 2) if dark
            else get_color(base, acc_h, 0.08 + boost * 0.14, surface_l + 2)
        ),
        "chip-border": (
            get_color(ctx.surface_base, 0, 1, border_l + 6) if dark
            else get_color(base, acc_h, 0.12 + boost * 0.16, border_l - 6)
        ),
    })
    return aliases


def _dawn(ctx: _Context) -> Dict[str, str]:
    base, acc_h, hue, sat = ctx.base, ctx.acc_h, ctx.neutral_background_hue, ctx.surface_sat

    def paper(sat_mult: float, floor: float, lightness: float) -> str:
        return get_color(HSL(hue, max(sat * sat_mult, floor), lightness), 0, 1, lightness)

    return {
        "surface-base": paper(0.55, 10, 98),
        "surface-panel": paper(0.55, 10, 98),
        "surface-card": paper(0.6, 12, 97),
        "surface-elevated": paper(0.6, 12, 96),
        "surface-hover": paper(0.5, 10, 94),
        "text-strong": get_color(base, 0, 0.1, 18),
        "text-body": get_color(base, 0, 0.1, 26),
        "text-muted": get_color(base, 0, 0.1, 36),
        "border-subtle": get_color(ctx.surface_base, 0, 1, 90),
        "border-strong": get_color(ctx.surface_base, 0, 1, 78),
        "accent-link": get_color(base, acc_h, 1, 45),
        "accent-code": get_color(base, acc_h, 0.95, 42),
        "prose-bg-soft": get_color(ctx.surface_base, 0, 1, 94),
        "prose-bg-strong": get_color(ctx.surface_base, 0, 1, 92),
    }


def _assemble(ctx: _Context) -> TokenTree:
    brand = _brand(ctx)
    status = dict(_status_colors(ctx.is_dark, ctx.is_apocalypse))
    status.update(_status_strong(ctx.is_dark))
    return TokenTree.from_mapping({
        "foundation": _foundation(ctx),
        "brand": brand,
        "typography": _typography(ctx),
        "textPalette": _text_palette(ctx),
        "borders": _borders(ctx),
        "surfaces": _surfaces(ctx),
        "cards": _cards(ctx),
        "glass": _glass(ctx),
        "entity": _entity(ctx),
        "named": _named(ctx),
        "status": status,
        "admin": _admin(ctx),
        "aliases": _aliases(ctx, brand["accent-strong"]),
        "dawn": _dawn(ctx),
    })


def _contrast_passes(is_pop: bool) -> List[Tuple[str, str, float, Optional[bool]]]:
    """(token path, reference path, target, prefer_lighten override) in application order."""
    muted_target = POP_MUTED_TARGET if is_pop else MUTED_TARGET
    return [
        ("typography.heading", "surfaces.background", HEADING_TARGET, None),
        ("typography.text-strong", "surfaces.background", HEADING_TARGET, None),
        ("typography.text-body", "surfaces.background", BODY_TARGET, None),
        ("typography.text-muted", "cards.card-panel-surface", muted_target, None),
        ("typography.footer-text", "surfaces.background", BODY_TARGET, None),
        ("typography.footer-text-muted", "surfaces.background", MUTED_TARGET, None),
        ("textPalette.text-primary", "surfaces.background", HEADING_TARGET, None),
        ("textPalette.text-secondary", "cards.card-panel-surface", BODY_TARGET, None),
        ("textPalette.text-tertiary", "cards.card-panel-surface", MUTED_TARGET, None),
        ("typography.text-accent", "surfaces.background", BODY_TARGET, None),
        ("typography.text-accent-strong", "surfaces.background", BODY_TARGET, None),
    ]


def _pop_passes() -> List[Tuple[str, str, float, Optional[bool]]]:
    against_bg = [
        ("brand.primary", "surfaces.background", BODY_TARGET, False),
        ("brand.secondary", "surfaces.background", BODY_TARGET, False),
        ("brand.accent", "surfaces.background", BODY_TARGET, False),
        ("brand.cta", "surfaces.background", BODY_TARGET, False),
        ("brand.cta-hover", "surfaces.background", BODY_TARGET, False),
        ("brand.link-color", "surfaces.background", BODY_TARGET, False),
        ("brand.focus-ring", "cards.card-panel-surface", POP_FOCUS_TARGET, False),
        ("borders.border-accent-medium", "surfaces.surface-plain", MUTED_TARGET, False),
        ("borders.border-accent-strong", "surfaces.surface-plain", MUTED_TARGET, False),
        ("borders.border-accent-hover", "surfaces.surface-plain", MUTED_TARGET, False),
    ]
    # None means: prefer lightening when body text is dark
    against_body = [
        (path, "typography.text-body", BODY_TARGET, None)
        for path in ("brand.primary", "brand.secondary", "brand.accent",
                     "brand.accent-strong", "brand.cta", "brand.cta-hover")
    ]
    return against_bg + against_body


def _run_passes(
    tree: TokenTree,
    passes: List[Tuple[str, str, float, Optional[bool]]],
    default_lighten: bool
) -> TokenTree:
    max_iterations = config.CONTRAST_MAX_ITERATIONS
    for path, reference_path, target, prefer_lighten in passes:
        reference = tree.value(reference_path)
        lighten = default_lighten if prefer_lighten is None else prefer_lighten
        result = enforce_contrast(tree.value(path), reference, target, lighten, max_iterations)
        tree = tree.with_values({path: result.hex})
    return tree


def apply_contrast_pass(tree: TokenTree, is_dark: bool, is_pop: bool) -> TokenTree:
    """
    Force text tokens to their WCAG targets, and in pop mode also the brand colors.

    Args:
        tree: Freshly assembled token tree
        is_dark: Prefer lightening when converging
        is_pop: Apply the pop-mode brand passes

    Returns:
        New token tree
    """
    tree = _run_passes(tree, _contrast_passes(is_pop), is_dark)
    if is_pop:
        body_is_dark = hex_to_hsl(tree.value("typography.text-body")).l < 50
        tree = _run_passes(tree, _pop_passes(), body_is_dark)
    return tree


def apply_contrast_lock(tree: TokenTree, target: float) -> TokenTree:
    """
    Dual-tune the CTA label/button pair and the body text/background pair.

    Args:
        tree: Token tree after the contrast pass
        target: Desired ratio, clamped to [1, 21]

    Returns:
        New token tree
    """
    target = clamp(target, *CONTRAST_TARGET_RANGE)
    pairs = [
        ("brand.on-cta", "brand.cta"),
        ("typography.text-body", "surfaces.background"),
    ]
    for fg_path, bg_path in pairs:
        result = auto_tune_pair(
            tree.value(fg_path), tree.value(bg_path), target, config.CONTRAST_LOCK_MAX_ITERATIONS
        )
        tree = tree.with_values({fg_path: result.fg, bg_path: result.bg})
    return tree


def generate_tokens(params: GenerationParameters) -> TokenTree:
    """
    Generate the full token tree for one set of parameters.

    Pure function: identical parameters always yield an identical tree.

    Args:
        params: Generation parameters

    Returns:
        TokenTree with foundation, brand, typography, textPalette, borders,
        surfaces, cards, glass, entity, named, status, admin, aliases and
        dawn groups, plus a print group when print_mode is set
    """
    ctx = _build_context(params)

    tree = _assemble(ctx)
    tree = apply_contrast_pass(tree, ctx.is_dark, ctx.is_pop)
    tree = tree.replace("brand.on-cta", color(pick_readable_text(tree.value("brand.cta"))))

    if params.contrast_lock:
        tree = apply_contrast_lock(tree, params.contrast_target)

    if params.print_mode:
        tree = apply_print_mode(tree, params.base_color, ctx.mode.value, ctx.is_dark)

    logger.bind(
        base_color=params.base_color,
        mode=ctx.mode.value,
        theme_mode=params.theme_mode,
    ).debug("Token tree generated")
    return tree
