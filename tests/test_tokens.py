"""
Tests for the token tree and the token synthesis engine.

Covers the Leaf/Group union, immutable updates, purity of generation, the
contrast post-pass, the contrast lock, the print pass and the ordered
swatch stack.
"""

import json
import re

import pytest

from apocapalette.services.colors.colorspace import contrast_ratio, hex_to_hsl, pick_readable_text
from apocapalette.services.tokens import (
    Group, Leaf, ORDERED_SWATCH_SPEC, GenerationParameters, SwatchSpec, ThemeMode, TokenTree,
    apply_print_mode, build_ordered_stack, color, generate_tokens, to_print_safe
)
from apocapalette.utils.metrics import get_metrics_instance

HEX_RE = re.compile(r"^#[0-9a-f]{6}$")

EXPECTED_CATEGORIES = (
    "foundation", "brand", "typography", "textPalette", "borders", "surfaces", "cards",
    "glass", "entity", "named", "status", "admin", "aliases", "dawn",
)


def _passes(fg: str, bg: str, target: float) -> bool:
    """Target reached, or the black/white fallback was used."""
    return contrast_ratio(fg, bg) >= target or fg in ("#000000", "#ffffff")


class TestTokenTree:
    """Test the immutable Leaf/Group tree."""

    def test_from_mapping_infers_leaf_types(self):
        tree = TokenTree.from_mapping({
            "brand": {"primary": "#112233", "radius": "4px", "note": "hello", "weight": 0.5},
        })
        assert tree.get("brand.primary") == Leaf("color", "#112233")
        assert tree.get("brand.radius").type == "dimension"
        assert tree.get("brand.note").type == "string"
        assert tree.get("brand.weight").type == "number"

    def test_group_children_named_type_and_value(self):
        tree = TokenTree.from_mapping({"odd": {"type": "#000000", "value": "#ffffff"}})
        assert isinstance(tree["odd"], Group)
        assert tree.value("odd.type") == "#000000"
        assert tree.to_dict() == {
            "odd": {"type": {"type": "color", "value": "#000000"},
                    "value": {"type": "color", "value": "#ffffff"}}
        }

    def test_missing_paths(self):
        tree = TokenTree.from_mapping({"brand": {"primary": "#112233"}})
        assert tree.get("brand.secondary") is None
        assert tree.value("brand") is None
        assert tree.value("nope.deeper") is None

    def test_replace_returns_new_tree(self):
        tree = TokenTree.from_mapping({"brand": {"primary": "#112233"}})
        updated = tree.replace("brand.primary", color("#445566"))
        assert tree.value("brand.primary") == "#112233"
        assert updated.value("brand.primary") == "#445566"

    def test_replace_creates_groups(self):
        tree = TokenTree.from_mapping({"brand": {"primary": "#112233"}})
        updated = tree.replace("extra.nested.leaf", "#000000")
        assert updated.value("extra.nested.leaf") == "#000000"
        assert "extra" not in tree

    def test_with_values_keeps_leaf_type(self):
        tree = TokenTree.from_mapping({"glass": {"noise": Leaf("opacity", 0.1)}})
        updated = tree.with_values({"glass.noise": 0.2})
        assert updated.get("glass.noise") == Leaf("opacity", 0.2)

    def test_iter_leaves_in_order(self):
        tree = TokenTree.from_mapping({"a": {"x": "#000000", "y": {"z": "#111111"}}, "b": "#222222"})
        assert [path for path, _ in tree.iter_leaves()] == [("a", "x"), ("a", "y", "z"), ("b",)]

    def test_nodes_are_frozen(self):
        leaf = color("#000000")
        with pytest.raises(Exception):
            leaf.value = "#ffffff"
        with pytest.raises(TypeError):
            leaf.metadata["hue"] = 10


class TestGenerationParameters:
    """Test parameter normalization."""

    def test_normalizes_base_and_theme(self):
        params = GenerationParameters(base_color="#ABC", theme_mode=ThemeMode.LIGHT)
        assert params.base_color == "#aabbcc"
        assert params.theme_mode == "light"

    def test_unknown_theme_rejected(self):
        with pytest.raises(ValueError):
            GenerationParameters(theme_mode="sepia")

    def test_to_dict_keys(self):
        data = GenerationParameters(base_color="#3366ff", theme_name="Night").to_dict()
        assert data["baseColor"] == "#3366ff"
        assert data["isDark"] is True
        assert data["customThemeName"] == "Night"


class TestGenerateTokens:
    """Test the token synthesis engine."""

    def test_categories(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        assert tree.categories == EXPECTED_CATEGORIES

    def test_pure_function(self):
        params = GenerationParameters(base_color="#c0392b", harmony_mode="Complementary", theme_mode="light")
        first = json.dumps(generate_tokens(params).to_dict(), sort_keys=True)
        second = json.dumps(generate_tokens(params).to_dict(), sort_keys=True)
        assert first == second

    def test_color_leaves_are_hex(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff", theme_mode="pop"))
        color_leaves = [leaf for _, leaf in tree.iter_leaves() if leaf.type == "color"]
        assert color_leaves
        for leaf in color_leaves:
            assert HEX_RE.match(leaf.value), leaf

    def test_non_color_leaves_typed(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        assert tree.get("glass.glass-noise-opacity").type == "opacity"
        assert tree.get("glass.glass-shadow-soft").type == "string"
        assert tree.get("foundation.hue").type == "number"

    def test_mode_changes_secondary(self):
        secondaries = {
            mode: generate_tokens(GenerationParameters(base_color="#3366ff", harmony_mode=mode)).value(
                "brand.secondary"
            )
            for mode in ["Monochromatic", "Analogous", "Complementary"]
        }
        assert len(set(secondaries.values())) == 3

    def test_ten_neutrals(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        neutrals = tree.get("foundation.neutrals")
        assert list(neutrals.children) == [f"neutral-{i}" for i in range(10)]

    def test_harmony_group(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff", harmony_mode="Complementary"))
        harmony = tree.get("foundation.harmony")
        assert list(harmony.children) == ["harmony-1", "harmony-2"]
        assert "hue" in harmony.children["harmony-1"].metadata

    @pytest.mark.parametrize("theme_mode", ["dark", "light", "pop"])
    @pytest.mark.parametrize("base_color", ["#3366ff", "#ffcc00", "#1a1a1a", "#e0f7fa"])
    def test_text_contrast(self, theme_mode, base_color):
        tree = generate_tokens(GenerationParameters(base_color=base_color, theme_mode=theme_mode))
        background = tree.value("surfaces.background")
        card = tree.value("cards.card-panel-surface")
        assert _passes(tree.value("typography.heading"), background, 7)
        assert _passes(tree.value("typography.text-strong"), background, 7)
        assert _passes(tree.value("textPalette.text-primary"), background, 7)
        assert _passes(tree.value("typography.text-body"), background, 4.5)
        assert _passes(tree.value("typography.footer-text"), background, 4.5)
        assert _passes(tree.value("typography.text-accent"), background, 4.5)
        assert _passes(tree.value("textPalette.text-secondary"), card, 4.5)
        muted_target = 4.5 if theme_mode == "pop" else 3.2
        assert _passes(tree.value("typography.text-muted"), card, muted_target)

    def test_pop_brand_contrast(self):
        tree = generate_tokens(GenerationParameters(base_color="#ff66cc", theme_mode="pop"))
        body = tree.value("typography.text-body")
        for path in ["brand.primary", "brand.secondary", "brand.accent", "brand.cta", "brand.cta-hover"]:
            assert _passes(tree.value(path), body, 4.5), path

    def test_on_cta_is_readable(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        assert tree.value("brand.on-cta") == pick_readable_text(tree.value("brand.cta"))

    def test_apocalypse_changes_tree(self):
        calm = generate_tokens(GenerationParameters(base_color="#3366ff", harmony_mode="Analogous"))
        doom = generate_tokens(GenerationParameters(
            base_color="#3366ff", harmony_mode="Apocalypse", apocalypse_intensity=150
        ))
        assert calm.to_dict() != doom.to_dict()

    def test_contrast_lock(self):
        params = GenerationParameters(base_color="#808080", theme_mode="light", contrast_lock=True, contrast_target=7)
        tree = generate_tokens(params)
        assert contrast_ratio(tree.value("typography.text-body"), tree.value("surfaces.background")) >= 7
        assert contrast_ratio(tree.value("brand.on-cta"), tree.value("brand.cta")) >= 7

    def test_contrast_lock_target_clamped(self):
        params = GenerationParameters(base_color="#808080", contrast_lock=True, contrast_target=40)
        tree = generate_tokens(params)
        assert contrast_ratio(tree.value("typography.text-body"), tree.value("surfaces.background")) >= 20.9

    def test_leaves_metrics_untouched(self):
        generate_tokens(GenerationParameters(contrast_lock=True))
        assert get_metrics_instance().get_summary()["counters"] == {}
        assert get_metrics_instance().get_timing_stats() == {}


class TestPrintMode:
    """Test the print-safe pass."""

    def test_to_print_safe(self):
        assert hex_to_hsl(to_print_safe("#ff0000")).s <= 88.5
        assert hex_to_hsl(to_print_safe("#000000")).l == pytest.approx(7.8, abs=0.5)
        assert hex_to_hsl(to_print_safe("#ffffff")).l == pytest.approx(92, abs=0.5)
        assert to_print_safe("#808080") == "#808080"

    def test_print_group_only_with_flag(self):
        assert "print" not in generate_tokens(GenerationParameters())
        assert "print" in generate_tokens(GenerationParameters(print_mode=True))

    def test_every_color_leaf_mapped(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        printed = apply_print_mode(tree, "#3366ff", "Monochromatic", True)
        group = printed["print"]
        source_paths = ["/".join(path) for path, leaf in tree.iter_leaves() if leaf.type == "color"]
        for path in source_paths:
            assert path in group.children
            hsl = hex_to_hsl(group.children[path].value)
            assert hsl.s <= 91
            assert 7.5 <= hsl.l <= 92.5

    def test_metadata_and_source_unchanged(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        printed = apply_print_mode(tree, "#3366ff", "Monochromatic", False)
        group = printed["print"]
        assert group.children["background/paper"].value == "#fdfdf9"
        assert group.children["meta/base-color"].value == "#3366ff"
        assert group.children["meta/harmony"].value == "Monochromatic"
        assert group.children["bleed"].type == "dimension"
        assert "print" not in tree
        assert printed.value("brand.primary") == tree.value("brand.primary")


class TestSwatches:
    """Test the ordered swatch stack."""

    def test_stack_follows_swatch_order(self):
        tree = generate_tokens(GenerationParameters(base_color="#3366ff"))
        stack = build_ordered_stack(tree)
        resolvable = [
            item.name for item in ORDERED_SWATCH_SPEC
            if tree.value(item.path) is not None
            or (item.fallback_path and tree.value(item.fallback_path) is not None)
        ]
        assert [swatch.name for swatch in stack] == resolvable
        assert stack[0].name == "Primary"
        assert stack[0].value == tree.value("brand.primary")

    def test_fallback_and_skip(self):
        tree = TokenTree.from_mapping({"brand": {"primary": "#111111"}})
        spec = [
            SwatchSpec("Direct", "brand.primary"),
            SwatchSpec("Fallback", "brand.missing", "brand.primary"),
            SwatchSpec("Gone", "brand.missing"),
        ]
        stack = build_ordered_stack(tree, spec)
        assert [swatch.name for swatch in stack] == ["Direct", "Fallback"]
        assert stack[1].to_dict() == {"name": "Fallback", "path": "brand.missing", "value": "#111111"}
