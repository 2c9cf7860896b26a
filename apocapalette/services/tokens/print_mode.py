"""
Print-safe token pass.

Caps saturation and clamps lightness of every color leaf and collects the
results, with paper/ink/foil metadata, into a flat "print" group.
"""

from typing import Dict

from apocapalette.services.colors.colorspace import hex_to_hsl, hsl_to_hex
from .tree import Leaf, TokenTree, color


PRINT_MAX_SATURATION = 88
PRINT_DARK_THRESHOLD = 15
PRINT_LIGHTNESS_FLOOR = 8
PRINT_LIGHTNESS_CEILING = 92

PAPER_WHITE = "#fdfdf9"


def to_print_safe(hex_color: str) -> str:
    """
    Map a color into the print-safe range.

    Saturation is capped at 88. Lightness below 15 snaps to 8 and lightness
    above 92 is clamped to 92; anything in between is kept.
    """
    h, s, l = hex_to_hsl(hex_color)
    s = min(s, PRINT_MAX_SATURATION)
    if l < PRINT_DARK_THRESHOLD:
        l = PRINT_LIGHTNESS_FLOOR
    elif l > PRINT_LIGHTNESS_CEILING:
        l = PRINT_LIGHTNESS_CEILING
    return hsl_to_hex(h, s, l)


def _print_metadata(base_color: str, mode: str, is_dark: bool) -> Dict[str, Leaf]:
    return {
        "description": Leaf("string", "Print-optimized, CMYK-safe, high-contrast, foil-ready"),
        "background/paper": color(PAPER_WHITE),
        "ink/richblack": color("#0a0a0a" if is_dark else "#111111"),
        "ink/dark": color("#111111"),
        "ink/mid": color("#333333"),
        "coat/gloss-overlay": Leaf("string", "rgba(0,0,0,0.04)"),
        "foil/gold": color("#d4af37"),
        "foil/silver": color("#e8e8e8"),
        "foil/rose": color("#c8a2c8"),
        "bleed": Leaf("dimension", "8px"),
        "safe-margin": Leaf("dimension", "24px"),
        "glass-replacement/border": color("#333333" if is_dark else "#cccccc"),
        "glass-replacement/fill": color("#1a1a1a" if is_dark else "#f8f8f8"),
        "meta/base-color": color(base_color),
        "meta/harmony": Leaf("string", mode),
    }


def apply_print_mode(tree: TokenTree, base_color: str, mode: str, is_dark: bool) -> TokenTree:
    """
    Add the flat "print" group to a token tree.

    Args:
        tree: Source token tree (left unchanged)
        base_color: Seed color recorded as provenance
        mode: Generation mode name recorded as provenance
        is_dark: Selects the dark ink and glass-replacement variants

    Returns:
        New TokenTree with a "print" category appended
    """
    print_group: Dict[str, Leaf] = {}
    for path, leaf in tree.iter_leaves():
        if path and path[0] == "print":
            continue
        if leaf.type == "color" and isinstance(leaf.value, str) and leaf.value.startswith("#"):
            print_group["/".join(path)] = color(to_print_safe(leaf.value))

    print_group.update(_print_metadata(base_color, mode, is_dark))
    return tree.replace(("print",), print_group)
