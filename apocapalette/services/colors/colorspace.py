"""
Apocapalette Color Space Primitives

Hex/RGB/HSL conversions, WCAG relative luminance and contrast ratio, and
perceptual (OKLCH / CIELAB) blending and distance. Everything downstream
(harmony, contrast convergence, token synthesis, mood boards, project merge)
is built from these functions.
"""

import math
import re
from typing import NamedTuple, Optional, Tuple

from coloraide import Color as PerceptualColor


# Mix fractions above this are blended in OKLCH instead of on the hue wheel
PERCEPTUAL_MIX_THRESHOLD = 0.2

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGBA_RE = re.compile(r"^rgba?\((\d+),\s*(\d+),\s*(\d+)(?:,\s*[\d.]+)?\)$")


class InvalidColorInput(ValueError):
    """Raised when a color value cannot be parsed or would produce NaN."""


class HSL(NamedTuple):
    """HSL triple with h in [0, 360), s and l in [0, 100]."""
    h: float
    s: float
    l: float


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round to nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def _round1(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def wrap_hue(value: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = value % 360
    return 0.0 if wrapped >= 360 else wrapped


def hue_delta(from_hue: float, to_hue: float) -> float:
    """Signed shortest angular distance from one hue to another, in [-180, 180)."""
    return ((to_hue - from_hue + 540) % 360) - 180


def hue_distance(a: float, b: float) -> float:
    """Unsigned circular hue distance in [0, 180]."""
    diff = abs(a - b) % 360
    return 360 - diff if diff > 180 else diff


def interpolate_hue(from_hue: float, to_hue: float, t: float) -> float:
    """Interpolate between two hues along the shorter arc."""
    return wrap_hue(from_hue + hue_delta(from_hue, to_hue) * t)


def blend_hue(base: float, shift: float, weight: float = 0.0) -> float:
    """Move a hue `weight` of the way toward `base + shift`."""
    origin = wrap_hue(base)
    target = wrap_hue(base + shift)
    return interpolate_hue(origin, target, weight)


def normalize_hex(value: str) -> str:
    """
    Normalize a color string to lowercase #rrggbb.

    Accepts #rgb, #rrggbb, #rrggbbaa (alpha dropped) and rgb()/rgba().

    Args:
        value: Color string

    Returns:
        Normalized hex string

    Raises:
        InvalidColorInput: If the value is not a recognised color
    """
    if not isinstance(value, str):
        raise InvalidColorInput(f"Invalid hex color: {value!r}")
    text = value.strip()
    match = _HEX_RE.match(text)
    if match:
        raw = match.group(1).lower()
        if len(raw) == 3:
            raw = "".join(ch * 2 for ch in raw)
        return "#" + raw[:6]

    rgba = _RGBA_RE.match(text)
    if rgba:
        channels = [int(part) for part in rgba.groups()]
        if any(channel > 255 for channel in channels):
            raise InvalidColorInput(f"Invalid rgb color: {value!r}")
        return rgb_to_hex(*channels)

    raise InvalidColorInput(f"Invalid hex color: {value!r}")


def is_valid_hex(value: str) -> bool:
    """Check whether a value is a #rgb or #rrggbb hex string."""
    return isinstance(value, str) and bool(re.match(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$", value))


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex to an (r, g, b) tuple of 0-255 ints."""
    clean = normalize_hex(hex_color)
    return int(clean[1:3], 16), int(clean[3:5], 16), int(clean[5:7], 16)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert 0-255 channels to lowercase hex, rounding and clamping each channel."""
    channels = [int(clamp(round_half_up(channel), 0, 255)) for channel in (r, g, b)]
    return "#" + "".join(f"{channel:02x}" for channel in channels)


def hex_to_hsl(hex_color: str) -> HSL:
    """
    Convert hex color to HSL.

    Hue is rounded to the nearest integer and wrapped into [0, 360);
    saturation and lightness are rounded to one decimal.

    Args:
        hex_color: Color in #rgb or #rrggbb form

    Returns:
        HSL triple
    """
    r, g, b = (channel / 255.0 for channel in hex_to_rgb(hex_color))
    cmin = min(r, g, b)
    cmax = max(r, g, b)
    delta = cmax - cmin

    if delta == 0:
        h = 0.0
    elif cmax == r:
        h = math.fmod((g - b) / delta, 6)
    elif cmax == g:
        h = (b - r) / delta + 2
    else:
        h = (r - g) / delta + 4

    hue = round_half_up(h * 60) % 360
    l = (cmax + cmin) / 2
    s = 0.0 if delta == 0 else delta / (1 - abs(2 * l - 1))

    return HSL(float(hue), _round1(s * 100), _round1(l * 100))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """
    Convert HSL to hex using the 60 degree sector formula.

    Args:
        h: Hue in degrees (wrapped)
        s: Saturation 0-100 (clamped)
        l: Lightness 0-100 (clamped)

    Returns:
        Lowercase #rrggbb string

    Raises:
        InvalidColorInput: If any component is not a finite number
    """
    for component in (h, s, l):
        if not isinstance(component, (int, float)) or not math.isfinite(component):
            raise InvalidColorInput(f"Invalid HSL values: h={h}, s={s}, l={l}")

    h = wrap_hue(h)
    s = clamp(s, 0, 100) / 100
    l = clamp(l, 0, 100) / 100

    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs(math.fmod(h / 60, 2) - 1))
    m = l - c / 2

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return rgb_to_hex((r + m) * 255, (g + m) * 255, (b + m) * 255)


def get_color(
    base: HSL,
    hue_shift: float = 0,
    sat_mult: float = 1,
    light_set: Optional[float] = None,
    light_shift: float = 0
) -> str:
    """
    Derive a color from an HSL base.

    Args:
        base: Base HSL
        hue_shift: Degrees added to the base hue
        sat_mult: Factor applied to base saturation (result clamped to 0-100)
        light_set: Absolute lightness, overrides light_shift when given
        light_shift: Offset applied to base lightness

    Returns:
        Hex color
    """
    h = wrap_hue(base.h + hue_shift)
    s = clamp(base.s * sat_mult, 0, 100)
    l = light_set if light_set is not None else clamp(base.l + light_shift, 0, 100)
    return hsl_to_hex(h, s, l)


def _channel_luminance(value: int) -> float:
    channel = value / 255.0
    if channel <= 0.03928:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance in [0, 1]."""
    r, g, b = (_channel_luminance(channel) for channel in hex_to_rgb(hex_color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(fg: str, bg: str) -> float:
    """WCAG contrast ratio between two colors, in [1, 21]."""
    l1 = relative_luminance(fg)
    l2 = relative_luminance(bg)
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def wcag_level(ratio: float) -> str:
    """Classify a contrast ratio as AAA, AA, AA18 (large text) or FAIL."""
    if ratio >= 7:
        return "AAA"
    if ratio >= 4.5:
        return "AA"
    if ratio >= 3:
        return "AA18"
    return "FAIL"


def pick_readable_text(
    bg_hex: str,
    light: str = "#ffffff",
    dark: str = "#0f172a",
    threshold: float = 4.5
) -> str:
    """Pick the light text color when it meets `threshold` (or beats dark), else dark."""
    ratio_light = contrast_ratio(light, bg_hex)
    ratio_dark = contrast_ratio(dark, bg_hex)
    if ratio_light >= threshold or ratio_light >= ratio_dark:
        return normalize_hex(light)
    return normalize_hex(dark)


def hex_with_alpha(hex_color: str, alpha: float = 1.0) -> str:
    """Render a hex color as an rgba() string."""
    if not 0 <= alpha <= 1:
        raise InvalidColorInput(f"Invalid alpha value: {alpha}")
    r, g, b = hex_to_rgb(hex_color)
    return f"rgba({r},{g},{b},{alpha})"


def to_lch(hex_color: str) -> Tuple[float, float, float]:
    """Convert hex to CIE LCh (D50); achromatic hue reported as NaN."""
    lch = PerceptualColor(normalize_hex(hex_color)).convert("lch")
    return float(lch["l"]), float(lch["c"]), float(lch["h"])


def perceptual_blend(hex_a: str, hex_b: str, fraction: float = 0.0) -> str:
    """
    Blend two colors in OKLCH along the shorter hue arc.

    Args:
        hex_a: Start color
        hex_b: End color
        fraction: 0 returns hex_a, 1 returns hex_b

    Returns:
        Gamut-fitted sRGB hex
    """
    t = clamp(fraction or 0.0, 0.0, 1.0)
    mixed = PerceptualColor(normalize_hex(hex_a)).mix(
        normalize_hex(hex_b), t, space="oklch", hue="shorter"
    )
    return normalize_hex(mixed.convert("srgb").to_string(hex=True))


def perceptual_distance(hex_a: str, hex_b: str, method: str = "2000") -> float:
    """
    Perceptual color difference.

    Args:
        hex_a: First color
        hex_b: Second color
        method: coloraide delta E method, "2000" (CIEDE2000) or "76" (Lab euclidean)

    Returns:
        Delta E on the 0-100 scale
    """
    return float(
        PerceptualColor(normalize_hex(hex_a)).delta_e(normalize_hex(hex_b), method=method)
    )


def resolve_mixed_hue(base_hex: str, hue_shift: float, fraction: float) -> float:
    """
    Hue of `base_hex` moved `fraction` of the way toward its `hue_shift` rotation.

    Above PERCEPTUAL_MIX_THRESHOLD the two colors are blended in OKLCH and the
    hue is read back from the result; otherwise the hue angle is interpolated.
    """
    base = hex_to_hsl(base_hex)
    if fraction > PERCEPTUAL_MIX_THRESHOLD:
        target = get_color(base, hue_shift, 1, base.l)
        return hex_to_hsl(perceptual_blend(base_hex, target, fraction)).h
    return blend_hue(base.h, hue_shift, fraction)
