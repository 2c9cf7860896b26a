"""
Project section snapshots from a token generation.
"""

from typing import Dict, List, Optional

from apocapalette.services.colors.colorspace import is_valid_hex, normalize_hex
from apocapalette.services.tokens import GenerationParameters, build_ordered_stack, generate_tokens
from .models import ProjectColor, ProjectSection, normalize_project_mode


ROLE_TOKEN_PATHS: Dict[str, str] = {
    "background": "surfaces.background",
    "surface": "cards.card-panel-surface",
    "primary": "brand.primary",
    "secondary": "brand.secondary",
    "accent": "brand.accent",
    "cta": "brand.cta",
    "text": "typography.text-body",
    "muted": "typography.text-muted",
    "warning": "foundation.status.warning",
    "dark": "foundation.neutrals.neutral-9",
}


def _as_hex(value) -> Optional[str]:
    if isinstance(value, str) and is_valid_hex(value):
        return normalize_hex(value)
    return None


def build_section_snapshot(params: GenerationParameters, label: str = "") -> ProjectSection:
    """
    Capture one generation as a project section.

    Args:
        params: Generation parameters
        label: Section label

    Returns:
        ProjectSection with role tokens and the ordered swatch colors
        (non-hex swatches such as shadows and blur radii are left out)
    """
    tree = generate_tokens(params)

    tokens = {role: _as_hex(tree.value(path)) for role, path in ROLE_TOKEN_PATHS.items()}
    tokens = {role: hex_value for role, hex_value in tokens.items() if hex_value}

    colors: List[ProjectColor] = []
    for swatch in build_ordered_stack(tree):
        hex_value = _as_hex(swatch.value)
        if hex_value:
            colors.append(ProjectColor(name=swatch.name, hex=hex_value))

    return ProjectSection(
        label=label,
        base_hex=params.base_color,
        mode=normalize_project_mode(params.harmony_mode),
        tokens=tokens or None,
        colors=colors or None,
    )
