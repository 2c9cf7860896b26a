"""
LibreOffice .soc swatch export.

Flat palette processing (near-duplicate removal, neutral throttling and
hue ordering) and the <ooo:color-table> XML writer.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional
from xml.sax.saxutils import escape

from loguru import logger

from apocapalette.config import config
from apocapalette.services.colors.colorspace import (
    InvalidColorInput, normalize_hex, perceptual_distance, relative_luminance, to_lch
)


SOC_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<ooo:color-table xmlns:ooo="http://openoffice.org/2004/office" '
    'xmlns:draw="http://openoffice.org/2004/drawing">'
)
SOC_FOOTER = "</ooo:color-table>"

NEUTRAL_CHROMA = 12

_XML_ATTRIBUTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


@dataclass(frozen=True)
class PaletteColor:
    """A named color with its CIE LCh coordinates."""
    name: str
    hex: str
    lightness: float
    chroma: float
    hue: float

    @classmethod
    def from_hex(cls, name: str, hex_color: str) -> "PaletteColor":
        hex_color = normalize_hex(hex_color)
        lightness, chroma, hue = to_lch(hex_color)
        return cls(name, hex_color, lightness, chroma, hue)

    @property
    def luminance(self) -> float:
        return relative_luminance(self.hex)

    @property
    def sort_hue(self) -> float:
        return 0.0 if math.isnan(self.hue) else self.hue


def _parse_colors(raw: Mapping[str, Any]) -> List[PaletteColor]:
    colors = []
    for name, value in raw.items():
        try:
            colors.append(PaletteColor.from_hex(str(name), value))
        except InvalidColorInput:
            logger.bind(name=str(name), value=str(value)).debug("Skipping unparseable palette color")
    return colors


def _throttle_neutrals(neutrals: List[PaletteColor], max_neutrals: int) -> List[PaletteColor]:
    """Keep the darkest, the lightest and the most chromatic of the rest."""
    neutrals = sorted(neutrals, key=lambda color: color.luminance)
    if len(neutrals) <= max_neutrals:
        return neutrals
    if max_neutrals < 2:
        return neutrals[:max(0, max_neutrals)]
    middle = sorted(neutrals[1:-1], key=lambda color: color.chroma, reverse=True)[:max_neutrals - 2]
    kept = [neutrals[0]] + middle + [neutrals[-1]]
    return sorted(kept, key=lambda color: color.luminance)


def process_colors(
    raw: Mapping[str, Any],
    delta_e: Optional[float] = None,
    max_neutrals: Optional[int] = None,
    max_colors: Optional[int] = None
) -> List[PaletteColor]:
    """
    Clean up a flat name-to-color mapping for swatch export.

    Args:
        raw: Mapping of color name to color string; unparseable values are skipped
        delta_e: CIE76 distance below which a color duplicates an earlier one
        max_neutrals: Neutral cap (LCh chroma below 12)
        max_colors: Hard cap on the result

    Returns:
        Colors ordered by LCh hue, then lightness
    """
    delta_e = config.PALETTE_DELTA_E if delta_e is None else delta_e
    max_neutrals = config.PALETTE_MAX_NEUTRALS if max_neutrals is None else max_neutrals
    max_colors = config.PALETTE_MAX_COLORS if max_colors is None else max_colors

    unique: List[PaletteColor] = []
    for color in _parse_colors(raw):
        duplicate = any(
            kept.hex == color.hex or perceptual_distance(kept.hex, color.hex, method="76") < delta_e
            for kept in unique
        )
        if not duplicate:
            unique.append(color)

    neutrals = [color for color in unique if color.chroma < NEUTRAL_CHROMA]
    colorful = [color for color in unique if color.chroma >= NEUTRAL_CHROMA]
    final = (_throttle_neutrals(neutrals, max_neutrals) + colorful)[:max_colors]
    return sorted(final, key=lambda color: (color.sort_hue, color.lightness))


def sanitize_swatch_name(name: str) -> str:
    """Split camelCase and snake_case into capitalized words."""
    spaced = re.sub(r"([A-Z])", r" \1", str(name or "")).replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split(" ") if word)


def _field(color: Any, name: str) -> Any:
    if isinstance(color, Mapping):
        return color.get(name)
    return getattr(color, name, None)


def generate_soc(colors: Iterable[Any], sanitize_names: bool = True) -> str:
    """
    Render colors as a LibreOffice color table.

    Args:
        colors: Items with name and hex (mappings or objects)
        sanitize_names: Reformat names with sanitize_swatch_name

    Returns:
        .soc XML document; repeated names get " (2)", " (3)" suffixes and all
        names are XML-escaped
    """
    seen = set()
    lines = []
    for color in colors:
        name = str(_field(color, "name") or "")
        if sanitize_names:
            name = sanitize_swatch_name(name)
        if name in seen:
            suffix = 2
            while f"{name} ({suffix})" in seen:
                suffix += 1
            name = f"{name} ({suffix})"
        seen.add(name)
        safe_name = escape(name, _XML_ATTRIBUTE_ENTITIES)
        lines.append(f'  <draw:color draw:name="{safe_name}" draw:color="{_field(color, "hex")}"/>')

    return "\n".join([SOC_HEADER, "\n".join(lines), SOC_FOOTER])
