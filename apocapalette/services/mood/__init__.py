"""
Apocapalette Mood Boards

Seeded, hue-separated mood clusters around a base color.
"""

from .models import MoodCluster, Slot, SlotRole
from .policy import ConstraintPolicy, ExhaustionStrategy, default_policy
from .generator import (
    apply_mood_cluster,
    create_mood_cluster,
    derive_seed,
    edit_slot_color,
    generate_mood_board,
    get_mood_cluster_types,
    regenerate_mood_cluster,
    set_slot_locked,
)

__all__ = [
    "MoodCluster",
    "Slot",
    "SlotRole",
    "ConstraintPolicy",
    "ExhaustionStrategy",
    "default_policy",
    "apply_mood_cluster",
    "create_mood_cluster",
    "derive_seed",
    "edit_slot_color",
    "generate_mood_board",
    "get_mood_cluster_types",
    "regenerate_mood_cluster",
    "set_slot_locked",
]
