"""
Apocapalette Token Synthesis

Builds the nested design-token tree from a seed color and generation
parameters.
"""

from .tree import Leaf, Group, TokenNode, TokenTree, color
from .engine import GenerationParameters, ThemeMode, generate_tokens
from .print_mode import apply_print_mode, to_print_safe
from .swatches import ORDERED_SWATCH_SPEC, Swatch, SwatchSpec, build_ordered_stack

__all__ = [
    "Leaf",
    "Group",
    "TokenNode",
    "TokenTree",
    "color",
    "GenerationParameters",
    "ThemeMode",
    "generate_tokens",
    "apply_print_mode",
    "to_print_safe",
    "ORDERED_SWATCH_SPEC",
    "Swatch",
    "SwatchSpec",
    "build_ordered_stack",
]
