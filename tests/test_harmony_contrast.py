"""
Unit tests for the harmony generator and contrast enforcement.
"""

import pytest

from apocapalette.services.colors.colorspace import contrast_ratio, hex_to_hsl, hue_distance
from apocapalette.services.colors.contrast import (
    BLACK, WHITE, auto_tune_contrast, auto_tune_pair, enforce_contrast, ensure_contrast
)
from apocapalette.services.colors.harmony import (
    GenerationMode, HarmonyMode, create_harmony, get_harmony_spec, get_hue_separation,
    resolve_generation_mode, resolve_harmony_mode, rotate_hue
)
from apocapalette.utils.metrics import get_metrics_instance


class TestHarmony:
    """Test harmony hue sets."""

    def test_complementary(self):
        hues = create_harmony(30, "complementary")
        assert len(hues) == 2
        assert hue_distance(hues[1], 210) <= 1

    def test_complementary_from_hex(self):
        hues = create_harmony("#3366ff", "complementary")
        base = hex_to_hsl("#3366ff").h
        assert len(hues) == 2
        assert any(hue_distance(h, base + 180) <= 1 for h in hues)

    def test_offsets_per_mode(self):
        assert create_harmony(100, "analogous") == [70, 100, 130]
        assert create_harmony(0, "triadic") == [0, 120, 240]
        assert create_harmony(0, "split-complementary") == [0, 150, 210]
        assert create_harmony(0, "rectangle") == [0, 60, 180, 240]
        assert create_harmony(0, "square") == [0, 90, 180, 270]

    def test_sorting_happens_before_wrapping(self):
        # 350+30 = 380 wraps to 20 but keeps the position of its unwrapped angle
        assert create_harmony(350, "analogous") == [320, 350, 20]

    def test_reverse(self):
        for mode in ["analogous", "triadic", "square", "rectangle"]:
            forward = create_harmony(215, mode)
            assert create_harmony(215, mode, reverse=True) == list(reversed(forward))

    def test_unknown_mode_falls_back_to_analogous(self):
        assert resolve_harmony_mode("pentagonal") == HarmonyMode.ANALOGOUS
        assert create_harmony(100, "pentagonal") == create_harmony(100, "analogous")

    def test_generation_mode_prefixes(self):
        assert resolve_generation_mode("mono") == GenerationMode.MONOCHROMATIC
        assert resolve_generation_mode("Complementary") == GenerationMode.COMPLEMENTARY
        assert resolve_generation_mode("apocalypse") == GenerationMode.APOCALYPSE
        assert resolve_generation_mode("unknown") == GenerationMode.ANALOGOUS

    def test_harmony_specs_differ(self):
        mono = get_harmony_spec(GenerationMode.MONOCHROMATIC)
        comp = get_harmony_spec(GenerationMode.COMPLEMENTARY)
        assert mono != comp

    def test_rotation_helpers(self):
        assert rotate_hue(350, 20) == 10
        assert get_hue_separation(10, 350) == 20


class TestEnsureContrast:
    """Test single-color convergence."""

    def test_already_met_is_unchanged(self):
        result = enforce_contrast("#000000", "#ffffff", 4.5)
        assert result.hex == "#000000"
        assert result.iterations == 0
        assert result.converged

    def test_converges_by_darkening(self):
        fg = ensure_contrast("#999999", "#ffffff", 4.5)
        assert contrast_ratio(fg, "#ffffff") >= 4.5
        assert hex_to_hsl(fg).l < hex_to_hsl("#999999").l

    def test_converges_by_lightening(self):
        fg = ensure_contrast("#555555", "#000000", 7, prefer_lighten=True)
        assert contrast_ratio(fg, "#000000") >= 7

    def test_target_or_black_white_fallback(self):
        pairs = [
            ("#777777", "#808080", 4.5),
            ("#3366ff", "#1e293b", 7),
            ("#ff0000", "#00ff00", 4.5),
            ("#f0f0f0", "#ffffff", 7),
            ("#123456", "#777777", 10),
        ]
        for fg, bg, target in pairs:
            result = enforce_contrast(fg, bg, target)
            if not result.fallback_used:
                assert result.ratio >= target
            else:
                assert result.hex in (BLACK, WHITE)
                best = max(contrast_ratio(BLACK, bg), contrast_ratio(WHITE, bg))
                assert result.ratio == pytest.approx(best)

    def test_impossible_target_falls_back(self):
        result = enforce_contrast("#808080", "#777777", 21)
        assert result.fallback_used
        assert result.hex in (BLACK, WHITE)
        assert get_metrics_instance().get_counters() == {}


class TestAutoTune:
    """Test dual-color tuning."""

    def test_already_met(self):
        assert auto_tune_contrast("#000000", "#ffffff", 4.5) == ("#000000", "#ffffff")

    def test_pushes_pair_apart(self):
        result = auto_tune_pair("#777777", "#888888", 4.5)
        assert result.converged
        assert result.ratio >= 4.5
        # the lighter background got lighter, the darker foreground darker
        assert hex_to_hsl(result.bg).l > hex_to_hsl("#888888").l
        assert hex_to_hsl(result.fg).l < hex_to_hsl("#777777").l

    def test_hue_and_saturation_held(self):
        result = auto_tune_pair("#3366cc", "#4477dd", 7)
        assert hue_distance(hex_to_hsl(result.fg).h, hex_to_hsl("#3366cc").h) <= 3
        assert result.iterations <= 20

    def test_best_effort_with_iteration_cap(self):
        result = auto_tune_pair("#777777", "#787878", 21, max_iterations=2)
        assert result.iterations == 2
        assert not result.converged
