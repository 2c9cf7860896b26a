"""
Ordered swatch stack.

A fixed, named list of token paths used for previews and flat exports.
Entries whose path is missing resolve through their fallback path and are
dropped when neither resolves.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .tree import TokenTree


@dataclass(frozen=True)
class SwatchSpec:
    name: str
    path: str
    fallback_path: Optional[str] = None


@dataclass(frozen=True)
class Swatch:
    name: str
    path: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "path": self.path, "value": self.value}


def _spec(name: str, path: str, fallback_path: Optional[str] = None) -> SwatchSpec:
    return SwatchSpec(name, path, fallback_path)


ORDERED_SWATCH_SPEC: List[SwatchSpec] = [
    _spec("Primary", "brand.primary"),
    _spec("Accent", "brand.accent"),
    _spec("Background", "surfaces.background"),
    _spec("Body text", "typography.text-body"),
    _spec("Heading", "typography.heading"),
    _spec("Muted", "typography.text-muted"),
    _spec("Page background", "surfaces.page-background"),
    _spec("Header background", "surfaces.header-background"),
    _spec("Header border", "surfaces.surface-plain-border"),
    _spec("Footer background", "cards.card-panel-surface"),
    _spec("Footer border", "cards.card-panel-border"),
    _spec("Background (base)", "surfaces.background"),
    _spec("Page background (deepest)", "surfaces.background"),
    _spec("Header/overlay background", "aliases.overlay-panel", "surfaces.header-background"),
    _spec("Card surface background", "cards.card-panel-surface"),
    _spec("Body text colour", "typography.text-body"),
    _spec("Heading text (lightest)", "typography.heading"),
    _spec("Muted / subtle text", "typography.text-muted"),
    _spec("Primary CTA & accents", "brand.cta"),
    _spec("Brand accent colour", "brand.secondary"),
    _spec("Hover & interactive states", "brand.cta-hover"),
    _spec("Text accent", "typography.text-accent"),
    _spec("Text accent strong", "typography.text-accent-strong"),
    _spec("Link colour", "brand.link-color"),
    _spec("Focus ring colour", "brand.focus-ring"),
    _spec("Text primary", "textPalette.text-primary"),
    _spec("Text secondary", "textPalette.text-secondary"),
    _spec("Text tertiary", "textPalette.text-tertiary"),
    _spec("Text body", "typography.text-body"),
    _spec("Text subtle", "typography.text-muted"),
    _spec("Text strong", "typography.text-strong"),
    _spec("Text hint", "typography.text-hint"),
    _spec("Text disabled", "typography.text-disabled"),
    _spec("Text heading", "typography.heading"),
    _spec("Ink body", "named.color-ink", "textPalette.text-primary"),
    _spec("Ink strong", "named.color-midnight", "typography.text-strong"),
    _spec("Ink muted", "named.color-dusk", "textPalette.text-tertiary"),
    _spec("Surface plain", "surfaces.surface-plain"),
    _spec("Surface plain border", "surfaces.surface-plain-border"),
    _spec("Header background", "surfaces.header-background"),
    _spec("Header border", "surfaces.surface-plain-border"),
    _spec("Header text", "typography.text-strong"),
    _spec("Header text (hover)", "typography.text-accent"),
    _spec("Footer background", "cards.card-panel-surface-strong"),
    _spec("Footer border", "cards.card-panel-border"),
    _spec("Footer text", "typography.footer-text"),
    _spec("Footer muted text", "typography.footer-text-muted"),
    _spec("Card panel surface", "cards.card-panel-surface"),
    _spec("Card panel strong", "cards.card-panel-surface-strong"),
    _spec("Card panel border", "cards.card-panel-border"),
    _spec("Card panel border strong", "cards.card-panel-border-strong"),
    _spec("Card panel border soft", "cards.card-panel-border-soft"),
    _spec("Card badge bg", "cards.card-tag-bg"),
    _spec("Card badge border", "cards.card-tag-border"),
    _spec("Card badge text", "cards.card-tag-text"),
    _spec("Card tag bg", "cards.card-tag-bg"),
    _spec("Card tag border", "cards.card-tag-border"),
    _spec("Card tag text", "cards.card-tag-text"),
    _spec("Card spoon bg", "aliases.chip-background", "cards.card-panel-surface"),
    _spec("Card spoon border", "aliases.chip-border", "cards.card-panel-border"),
    _spec("Card spoon text", "typography.text-strong"),
    _spec("Card focus outline", "brand.focus-ring"),
    _spec("Glass base", "glass.glass-surface"),
    _spec("Glass strong", "glass.glass-surface-strong"),
    _spec("Glass card", "glass.glass-surface"),
    _spec("Glass hover", "glass.glass-hover"),
    _spec("Glass border", "glass.glass-border"),
    _spec("Glass border strong", "glass.glass-border-strong"),
    _spec("Glass highlight", "glass.glass-highlight"),
    _spec("Glass glow", "glass.glass-glow"),
    _spec("Glass shadow soft", "glass.glass-shadow-soft"),
    _spec("Glass shadow strong", "glass.glass-shadow-strong"),
    _spec("Glass blur radius", "glass.glass-blur"),
    _spec("Glass noise opacity", "glass.glass-noise-opacity"),
    _spec("Success", "status.success"),
    _spec("Warning", "status.warning"),
    _spec("Error", "status.error"),
    _spec("Info", "status.info"),
    _spec("Entity card border", "entity.entity-card-border"),
    _spec("Entity card glow", "entity.entity-card-glow"),
    _spec("Entity card highlight", "entity.entity-card-highlight"),
    _spec("Entity card surface top", "entity.entity-card-surface"),
    _spec("Entity card surface bottom", "entity.entity-card-surface"),
    _spec("Entity card heading", "entity.entity-card-heading"),
    _spec("Entity card text", "typography.text-body"),
    _spec("Entity card label", "typography.text-muted"),
    _spec("Entity card CTA", "brand.cta"),
    _spec("Entity card CTA hover", "brand.cta-hover"),
    _spec("Entity card icon", "brand.accent"),
    _spec("Entity card icon shadow", "glass.glass-shadow-soft"),
]


def build_ordered_stack(tree: TokenTree, spec: Optional[List[SwatchSpec]] = None) -> List[Swatch]:
    """
    Resolve the ordered swatch list against a token tree.

    Args:
        tree: Token tree
        spec: Swatch definitions, defaults to ORDERED_SWATCH_SPEC

    Returns:
        Swatches in definition order, skipping entries that do not resolve
    """
    stack: List[Swatch] = []
    for item in spec if spec is not None else ORDERED_SWATCH_SPEC:
        value = tree.value(item.path)
        if value is None and item.fallback_path:
            value = tree.value(item.fallback_path)
        if value is None:
            continue
        stack.append(Swatch(item.name, item.path, value))
    return stack
