"""
Tests for the seeded mood cluster generator.
"""

from dataclasses import replace
from itertools import combinations

import pytest

from apocapalette.services.colors.colorspace import hex_to_hsl, hue_distance
from apocapalette.services.mood import (
    ConstraintPolicy, ExhaustionStrategy, MoodCluster, SlotRole, apply_mood_cluster,
    create_mood_cluster, default_policy, derive_seed, edit_slot_color, generate_mood_board,
    get_mood_cluster_types, regenerate_mood_cluster, set_slot_locked
)
from apocapalette.utils.metrics import get_metrics_instance

MOOD_TYPES = ["smoky", "bright", "deep", "warm-drift", "cool-drift"]


def _non_neutral_hues(cluster: MoodCluster):
    hues = []
    for hex_color in cluster.colors:
        h, s, _ = hex_to_hsl(hex_color)
        if s >= 10:
            hues.append(h)
    return hues


class TestClusterShape:
    """Test slot plans and basic invariants."""

    @pytest.mark.parametrize("mood_type", MOOD_TYPES)
    def test_ten_filled_slots(self, mood_type):
        cluster = create_mood_cluster("#3366ff", "#ff6600", mood_type, seed=42)
        assert cluster.id == mood_type
        assert cluster.type == mood_type
        assert len(cluster.slots) == 10
        assert all(slot.color for slot in cluster.slots)
        assert len({slot.id for slot in cluster.slots}) == 10

    def test_slot_roles(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "warm-drift", seed=3)
        roles = [slot.role for slot in cluster.slots]
        assert roles[0] == SlotRole.REQUIRED
        assert roles[-1] == SlotRole.CONTRAST
        assert 4 <= roles.count(SlotRole.ANCHOR) <= 6
        assert roles.count(SlotRole.SUPPORTING) <= 2

    def test_required_color_verbatim(self):
        cluster = create_mood_cluster("#3366ff", "#FF6600", "deep", seed=9)
        assert cluster.slot("required").color == "#ff6600"
        assert cluster.required_hex == "#ff6600"

    def test_required_defaults_to_base(self):
        cluster = create_mood_cluster("#3366ff", None, "smoky", seed=9)
        assert cluster.slot("required").color == "#3366ff"

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            create_mood_cluster("#3366ff", None, "glittery", seed=1)

    def test_seed_stored_when_missing(self):
        cluster = create_mood_cluster("#3366ff", None, "bright")
        assert isinstance(cluster.seed, int)

    def test_palette_spec(self):
        bright = create_mood_cluster("#3366ff", "#ff6600", "bright", seed=5)
        deep = create_mood_cluster("#3366ff", "#ff6600", "deep", seed=5)
        assert bright.palette_spec.base_color == "#ff6600"
        assert bright.palette_spec.harmony_mode == "Tertiary"
        assert bright.palette_spec.theme_mode == "light"
        assert deep.palette_spec.theme_mode == "dark"


class TestDeterminism:
    """Test seeded reproducibility and regeneration."""

    def test_same_seed_same_cluster(self):
        first = create_mood_cluster("#3366ff", "#ff6600", "bright", seed=1234)
        second = create_mood_cluster("#3366ff", "#ff6600", "bright", seed=1234)
        assert first.to_dict() == second.to_dict()

    def test_regenerate_with_same_seed_is_identical(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "smoky", seed=77)
        again = regenerate_mood_cluster(cluster)
        assert again.colors == cluster.colors

    def test_locked_slot_survives(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "cool-drift", seed=11)
        locked = set_slot_locked(cluster, "anchor-1")
        regenerated = regenerate_mood_cluster(locked, seed=12)
        assert regenerated.slot("anchor-1").color == cluster.slot("anchor-1").color
        assert regenerated.slot("anchor-1").locked
        assert regenerated.seed == 12

    def test_edited_slot_is_locked_and_kept(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "warm-drift", seed=21)
        edited = edit_slot_color(cluster, "contrast", "#00FF00")
        assert edited.slot("contrast").color == "#00ff00"
        assert edited.slot("contrast").locked
        regenerated = regenerate_mood_cluster(edited, seed=22)
        assert regenerated.slot("contrast").color == "#00ff00"

    def test_slots_to_regenerate(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "deep", seed=31)
        regenerated = regenerate_mood_cluster(cluster, seed=32, slots_to_regenerate=["contrast"])
        for before, after in zip(cluster.slots, regenerated.slots):
            if before.id != "contrast":
                assert before.color == after.color

    def test_records_are_immutable(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "smoky", seed=5)
        locked = set_slot_locked(cluster, "contrast")
        assert not cluster.slot("contrast").locked
        assert locked.slot("contrast").locked

    def test_unknown_slot(self):
        cluster = create_mood_cluster("#3366ff", None, "smoky", seed=5)
        with pytest.raises(ValueError):
            set_slot_locked(cluster, "anchor-99")

    def test_derive_seed(self):
        assert derive_seed(42, "bright-1") == derive_seed(42, "bright-1")
        assert derive_seed(42, "bright-1") != derive_seed(42, "deep-2")
        assert 0 <= derive_seed(2 ** 40, "smoky-0") < 2 ** 32


class TestHueSeparation:
    """Test the hue-separation constraint and its policy."""

    @pytest.mark.parametrize("mood_type", MOOD_TYPES)
    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_non_neutral_slots_are_separated(self, mood_type, seed):
        cluster = create_mood_cluster("#3366ff", "#ff6600", mood_type, seed=seed)
        for a, b in combinations(_non_neutral_hues(cluster), 2):
            assert hue_distance(a, b) >= 24

    @pytest.mark.parametrize("mood_type", MOOD_TYPES)
    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_regenerate_with_locks_keeps_separation(self, mood_type, seed):
        cluster = create_mood_cluster("#3366ff", "#ff6600", mood_type, seed=seed)
        cluster = set_slot_locked(cluster, "anchor-1")
        cluster = set_slot_locked(cluster, "contrast")

        regenerated = regenerate_mood_cluster(cluster, seed=seed + 100)
        locked = {slot.id: slot.color for slot in cluster.slots if slot.locked}
        assert {slot.id: slot.color for slot in regenerated.slots if slot.id in locked} == locked
        for a, b in combinations(_non_neutral_hues(regenerated), 2):
            assert hue_distance(a, b) >= 24

    def test_unsatisfiable_constraints_accept(self):
        policy = ConstraintPolicy(min_hue_distance=120, exhaustion_strategy=ExhaustionStrategy.ACCEPT)
        cluster = create_mood_cluster("#3366ff", "#ff0000", "bright", seed=8, policy=policy)
        assert not cluster.constraints_satisfied
        assert any(slot.relaxed for slot in cluster.slots)
        assert len(cluster.slots) == 10
        assert get_metrics_instance().get_counters() == {}

    def test_unsatisfiable_constraints_neutralize(self):
        policy = ConstraintPolicy(min_hue_distance=120, exhaustion_strategy="neutralize")
        cluster = create_mood_cluster("#3366ff", "#ff0000", "bright", seed=8, policy=policy)
        assert not cluster.constraints_satisfied
        for a, b in combinations(_non_neutral_hues(cluster), 2):
            assert hue_distance(a, b) >= 120

    def test_default_policy(self):
        policy = default_policy()
        assert policy.min_hue_distance == 24
        assert policy.color_attempts == 12
        assert policy.exhaustion_strategy == ExhaustionStrategy.NEUTRALIZE

    def test_invalid_strategy(self):
        with pytest.raises(ValueError):
            ConstraintPolicy(exhaustion_strategy="shrug")


class TestMoodBoard:
    """Test the full board and token application."""

    def test_board_types(self):
        assert get_mood_cluster_types() == MOOD_TYPES
        assert "cool-drift" not in get_mood_cluster_types(include_cool=False)

    def test_board(self):
        board = generate_mood_board("#3366ff", "#ff6600", seed=7)
        assert [cluster.type for cluster in board] == MOOD_TYPES
        assert all(cluster.slot("required").color == "#ff6600" for cluster in board)
        assert generate_mood_board("#3366ff", "#ff6600", seed=7)[0].to_dict() == board[0].to_dict()

    def test_board_without_cool(self):
        board = generate_mood_board("#3366ff", seed=7, include_cool=False)
        assert len(board) == 4

    def test_persistence_shape(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "smoky", seed=13)
        data = cluster.to_dict()
        assert set(data) >= {"id", "type", "seed", "title", "description", "slots", "paletteSpec"}
        assert set(data["slots"][0]) >= {"id", "role", "family", "locked", "color"}
        assert MoodCluster.from_dict(data) == cluster

    def test_apply_mood_cluster(self):
        cluster = create_mood_cluster("#3366ff", "#ff6600", "bright", seed=13)
        tree = apply_mood_cluster(cluster)
        assert tree.value("brand.primary").startswith("#")

    def test_apply_without_spec(self):
        cluster = replace(create_mood_cluster("#3366ff", None, "smoky", seed=13), palette_spec=None)
        with pytest.raises(ValueError):
            apply_mood_cluster(cluster)
