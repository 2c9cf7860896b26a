"""
Apocapalette Mood Cluster Generator

Seeded 10-slot mood palettes (smoky, bright, deep, warm-drift, cool-drift)
around a base color. Every draw comes from a numpy Generator created per
call from the cluster seed, so the same seed always yields the same slots.
No two non-neutral slots end up closer than the policy's minimum hue
distance unless the slot is flagged relaxed.
"""

import time
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Set, Tuple

import numpy as np
from loguru import logger

from apocapalette.config import config
from apocapalette.services.colors.colorspace import (
    HSL, clamp, hex_to_hsl, hsl_to_hex, hue_distance, normalize_hex, wrap_hue
)
from apocapalette.services.tokens.engine import GenerationParameters, generate_tokens
from apocapalette.services.tokens.tree import TokenTree
from .definitions import (
    ADJACENT_OFFSETS, EXTRA_OFFSETS, MOOD_TYPES, ClusterDefinition, SupportingFamily,
    between, build_cluster_definition, cool_hue, family_range, grounding_hue, jitter,
    select_supporting_families
)
from .models import MoodCluster, Slot, SlotRole
from .policy import ConstraintPolicy, ExhaustionStrategy, default_policy


SLOT_COUNT = 10
NEUTRAL_SATURATION = 10
CONTRAST_OFFSETS = [140, 160, 200, 220]


def _resolve_seed(seed: Optional[int]) -> int:
    if seed is None:
        return int(time.time() * 1000)
    return int(seed)


def _make_rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed & 0xFFFFFFFFFFFFFFFF)


def derive_seed(seed: int, salt: str) -> int:
    """32-bit multiplicative hash of a seed and a salt string."""
    value = seed & 0xFFFFFFFF
    for ch in salt:
        value = ((value ^ ord(ch)) * 0x45D9F3B) & 0xFFFFFFFF
    return value


def is_neutral_color(hex_color: str) -> bool:
    """Colors below 10% HSL saturation are exempt from hue separation."""
    return hex_to_hsl(hex_color).s < NEUTRAL_SATURATION


class _Exclusion:
    """Colors and hues already taken in the cluster being built."""

    def __init__(self, policy: ConstraintPolicy):
        self.policy = policy
        self.colors: Set[str] = set()
        self.hues: List[float] = []

    def hue_is_free(self, hue: float, extra: Iterable[float] = ()) -> bool:
        taken = list(self.hues) + list(extra)
        return all(hue_distance(existing, hue) >= self.policy.min_hue_distance for existing in taken)

    def accepts(self, hex_color: str) -> bool:
        if hex_color in self.colors:
            return False
        if not is_neutral_color(hex_color):
            return self.hue_is_free(hex_to_hsl(hex_color).h)
        return True

    def claim(self, hex_color: str):
        self.colors.add(hex_color)
        if not is_neutral_color(hex_color):
            self.hues.append(hex_to_hsl(hex_color).h)


def _relax(candidate: str, policy: ConstraintPolicy) -> str:
    if policy.exhaustion_strategy == ExhaustionStrategy.ACCEPT:
        return candidate
    h, _, l = hex_to_hsl(candidate)
    return hsl_to_hex(h, 0, l)


def _add_color_with_constraints(
    produce: Callable[[], str],
    exclusion: _Exclusion
) -> Tuple[str, bool]:
    """
    Draw candidates until one passes the exclusion set.

    Returns:
        (hex, relaxed) where relaxed is True when every attempt failed and the
        last candidate was kept according to the exhaustion strategy
    """
    policy = exclusion.policy
    candidate = produce()
    for attempt in range(policy.color_attempts):
        if attempt:
            candidate = produce()
        if exclusion.accepts(candidate):
            exclusion.claim(candidate)
            return candidate, False

    relaxed = _relax(candidate, policy)
    exclusion.claim(relaxed)
    return relaxed, True


def _build_anchor_swatches(
    rng: np.random.Generator,
    definition: ClusterDefinition,
    mood_type: str,
    base_hue: float,
    count: int,
    exclusion: _Exclusion
) -> List[str]:
    """
    Greedy anchor selection.

    Candidate hues are tried in order: the base, the type's adjacent
    offsets, a grounding hue, a cool hue, the shuffled wide offsets and then
    random hues. Each accepted hue gets a jittered saturation and lightness
    and the separation test runs on the hue of the resulting hex.
    """
    count = max(1, count)
    swatches: List[str] = []
    anchor_hues: List[float] = []

    def try_add(hue: float) -> bool:
        if len(swatches) >= count:
            return False
        sat = clamp(jitter(rng, definition.sat_target, definition.sat_jitter), 0, 100)
        light = clamp(jitter(rng, definition.light_target, definition.light_jitter), 0, 100)
        candidate = hsl_to_hex(wrap_hue(hue), sat, light)
        if candidate in exclusion.colors or candidate in swatches:
            return False
        if not is_neutral_color(candidate):
            produced_hue = hex_to_hsl(candidate).h
            if not exclusion.hue_is_free(produced_hue, anchor_hues):
                return False
            anchor_hues.append(produced_hue)
        swatches.append(candidate)
        return True

    def jitter_hue(hue: float) -> float:
        return hue + between(rng, -4, 4)

    try_add(jitter_hue(base_hue))
    for offset in ADJACENT_OFFSETS.get(mood_type, ADJACENT_OFFSETS["smoky"]):
        try_add(jitter_hue(base_hue + offset))
    if len(swatches) < count:
        try_add(grounding_hue(mood_type, rng))
    if len(swatches) < count:
        try_add(cool_hue(mood_type, rng))
    for offset in [int(value) for value in rng.permutation(EXTRA_OFFSETS)]:
        try_add(jitter_hue(base_hue + offset))

    attempts = 0
    while len(swatches) < count and attempts < exclusion.policy.anchor_random_attempts:
        try_add(between(rng, 0, 360))
        attempts += 1

    return swatches


def _supporting_color(rng: np.random.Generator, slot: Slot, base_hue: float) -> str:
    if slot.family == "neutral":
        hue = wrap_hue(base_hue + between(rng, -20, 20))
        sat = between(rng, 0, 12)
        light = between(rng, 24, 82)
        return hsl_to_hex(hue, sat, light)
    bounds = family_range(slot.family, slot.variant or "")
    hue = between(rng, *bounds.hue)
    sat = clamp(between(rng, *bounds.sat), 0, 100)
    light = clamp(between(rng, *bounds.light), 0, 100)
    return hsl_to_hex(wrap_hue(hue), sat, light)


def _contrast_color(rng: np.random.Generator, base_hue: float) -> str:
    offset = CONTRAST_OFFSETS[int(rng.random() * len(CONTRAST_OFFSETS))]
    hue = wrap_hue(base_hue + (offset if rng.random() > 0.5 else -offset))
    sat = between(rng, 16, 38)
    light = between(rng, 16, 42)
    return hsl_to_hex(hue, sat, light)


def _neutral_color(rng: np.random.Generator, base_hue: float, warmth_bias: float = 0) -> str:
    hue = wrap_hue(base_hue + warmth_bias + between(rng, -12, 12))
    sat = between(rng, 0, 10)
    light = between(rng, 26, 84)
    return hsl_to_hex(hue, sat, light)


def _build_slot_plan(mood_type: str, rng: np.random.Generator) -> List[Slot]:
    anchor_count = 4 + int(rng.random() * 3)
    supporting: List[SupportingFamily] = select_supporting_families(mood_type, rng)[:2]
    neutral_count = max(0, SLOT_COUNT - (1 + anchor_count + len(supporting) + 1))

    slots = [Slot("required", SlotRole.REQUIRED, "required")]
    slots += [Slot(f"anchor-{i + 1}", SlotRole.ANCHOR, "anchor") for i in range(anchor_count)]
    slots += [
        Slot(f"support-{i + 1}", SlotRole.SUPPORTING, item.family, variant=item.variant)
        for i, item in enumerate(supporting)
    ]
    slots += [
        Slot(f"neutral-{i + 1}", SlotRole.NEUTRAL, "neutral", variant="highlight" if i == 0 else "shadow")
        for i in range(neutral_count)
    ]
    slots.append(Slot("contrast", SlotRole.CONTRAST, "contrast"))
    return slots


def _build_palette_spec(definition: ClusterDefinition, base_color: str) -> GenerationParameters:
    return GenerationParameters(
        base_color=base_color,
        harmony_mode=definition.mode,
        theme_mode="dark" if definition.light_target < 45 else "light",
        apocalypse_intensity=100,
        harmony_intensity=definition.harmony_intensity,
        neutral_curve=definition.neutral_curve,
        accent_strength=definition.accent_strength,
        pop_intensity=definition.pop_intensity,
        print_mode=False,
        theme_name=definition.title,
    )


def get_mood_cluster_types(include_cool: bool = True) -> List[str]:
    """Mood types in board order; cool-drift is optional."""
    return [mood_type for mood_type in MOOD_TYPES if include_cool or mood_type != "cool-drift"]


def regenerate_mood_cluster(
    cluster: MoodCluster,
    seed: Optional[int] = None,
    base_hex: Optional[str] = None,
    required_hex: Optional[str] = None,
    slots_to_regenerate: Optional[List[str]] = None,
    force_all: bool = False,
    policy: Optional[ConstraintPolicy] = None
) -> MoodCluster:
    """
    Re-derive the slots of a cluster.

    Locked slots keep their colors unless force_all is set, and their hues
    stay in the exclusion set. The required slot always takes the required
    color unless it is locked.

    Args:
        cluster: Cluster to regenerate
        seed: New seed; defaults to the cluster's seed
        base_hex: Base color; defaults to the cluster's base color
        required_hex: Required color; defaults to the cluster's required color
        slots_to_regenerate: Regenerate only these slot ids
        force_all: Regenerate every non-required slot, locked or not
        policy: Constraint policy; defaults to the configured policy

    Returns:
        New MoodCluster

    Raises:
        ValueError: If the cluster type is unknown
        InvalidColorInput: If a color is malformed
    """
    policy = policy or default_policy()
    seed = _resolve_seed(seed if seed is not None else cluster.seed)
    rng = _make_rng(seed)
    safe_base = normalize_hex(base_hex or cluster.base_hex or config.DEFAULT_BASE_COLOR)
    required = normalize_hex(required_hex or cluster.required_hex or safe_base)
    base = hex_to_hsl(safe_base)
    definition = build_cluster_definition(cluster.type, base, rng)

    slots = list(cluster.slots)
    if not any(slot.role == SlotRole.REQUIRED for slot in slots):
        slots.insert(0, Slot("required", SlotRole.REQUIRED, "required", color=required))

    def should_regenerate(slot: Slot) -> bool:
        if slot.role == SlotRole.REQUIRED:
            return False
        if force_all:
            return True
        if slots_to_regenerate is not None:
            return slot.id in slots_to_regenerate
        return not slot.locked

    exclusion = _Exclusion(policy)
    for index, slot in enumerate(slots):
        if slot.role != SlotRole.REQUIRED:
            continue
        if force_all or not slot.locked:
            slots[index] = replace(slot, color=required, relaxed=False)
        required_color = slots[index].color or required
        exclusion.claim(required_color)

    for slot in slots:
        if slot.role != SlotRole.REQUIRED and not should_regenerate(slot) and slot.color:
            exclusion.claim(slot.color)

    anchor_indexes = [
        index for index, slot in enumerate(slots)
        if slot.role == SlotRole.ANCHOR and should_regenerate(slot)
    ]
    if anchor_indexes:
        swatches = _build_anchor_swatches(
            rng, definition, cluster.type, wrap_hue(base.h + definition.hue_shift),
            len(anchor_indexes), exclusion
        )
        for position, index in enumerate(anchor_indexes):
            if position < len(swatches):
                exclusion.claim(swatches[position])
                slots[index] = replace(slots[index], color=swatches[position], relaxed=False)
            else:
                filler, _ = _add_color_with_constraints(lambda: _neutral_color(rng, base.h), exclusion)
                slots[index] = replace(slots[index], color=filler, relaxed=True)

    producers = [
        (SlotRole.SUPPORTING, lambda slot: _supporting_color(rng, slot, base.h)),
        (SlotRole.CONTRAST, lambda slot: _contrast_color(rng, base.h)),
        (SlotRole.NEUTRAL, lambda slot: _neutral_color(rng, base.h, definition.neutral_bias)),
    ]
    for role, produce in producers:
        for index, slot in enumerate(slots):
            if slot.role != role or not should_regenerate(slot):
                continue
            color, relaxed = _add_color_with_constraints(lambda: produce(slot), exclusion)
            slots[index] = replace(slot, color=color, relaxed=relaxed)

    for index, slot in enumerate(slots):
        if not slot.color:
            filler, relaxed = _add_color_with_constraints(lambda: _neutral_color(rng, base.h), exclusion)
            slots[index] = replace(slot, color=filler, relaxed=relaxed)

    required_color = next(slot.color for slot in slots if slot.role == SlotRole.REQUIRED)
    relaxed_count = sum(1 for slot in slots if slot.relaxed)
    if relaxed_count:
        logger.bind(type=cluster.type, seed=seed, relaxed=relaxed_count).info(
            "Mood cluster relaxed the hue separation constraint"
        )

    return replace(
        cluster,
        seed=seed,
        base_hex=safe_base,
        required_hex=required_color,
        title=definition.title,
        description=definition.description,
        palette_spec=_build_palette_spec(definition, required_color),
        slots=tuple(slots),
    )


def create_mood_cluster(
    base_hex: Optional[str],
    required_hex: Optional[str],
    mood_type: str,
    seed: Optional[int] = None,
    policy: Optional[ConstraintPolicy] = None
) -> MoodCluster:
    """
    Build a new mood cluster.

    Args:
        base_hex: Base color; defaults to the configured base color
        required_hex: Color that must appear verbatim in the required slot;
            defaults to the base color
        mood_type: One of get_mood_cluster_types()
        seed: Integer seed; a time-based seed is used (and stored) when None
        policy: Constraint policy

    Returns:
        MoodCluster with all 10 slots filled

    Raises:
        ValueError: If the mood type is unknown
    """
    seed = _resolve_seed(seed)
    rng = _make_rng(seed)
    safe_base = normalize_hex(base_hex or config.DEFAULT_BASE_COLOR)
    definition = build_cluster_definition(mood_type, hex_to_hsl(safe_base), rng)
    slots = _build_slot_plan(mood_type, rng)

    cluster = MoodCluster(
        id=definition.id,
        type=mood_type,
        seed=seed,
        title=definition.title,
        description=definition.description,
        slots=tuple(slots),
        base_hex=safe_base,
        required_hex=normalize_hex(required_hex or safe_base),
    )
    return regenerate_mood_cluster(
        cluster, seed=seed, base_hex=safe_base, required_hex=required_hex,
        force_all=True, policy=policy
    )


def generate_mood_board(
    base_hex: Optional[str],
    required_hex: Optional[str] = None,
    seed: Optional[int] = None,
    include_cool: bool = True,
    policy: Optional[ConstraintPolicy] = None
) -> List[MoodCluster]:
    """
    One cluster per mood type, each seeded from the board seed and its type.

    Args:
        base_hex: Base color
        required_hex: Required color shared by every cluster
        seed: Board seed; time-based when None
        include_cool: Include the cool-drift cluster
        policy: Constraint policy

    Returns:
        List of MoodCluster in type order
    """
    seed = _resolve_seed(seed)
    clusters = [
        create_mood_cluster(base_hex, required_hex, mood_type, derive_seed(seed, f"{mood_type}-{index}"), policy)
        for index, mood_type in enumerate(get_mood_cluster_types(include_cool))
    ]
    return clusters


def set_slot_locked(cluster: MoodCluster, slot_id: str, locked: bool = True) -> MoodCluster:
    """Lock or unlock one slot."""
    return cluster.replace_slot(slot_id, locked=locked)


def edit_slot_color(cluster: MoodCluster, slot_id: str, hex_color: str) -> MoodCluster:
    """Set a slot's color by hand; the slot is locked so regeneration keeps it."""
    return cluster.replace_slot(slot_id, color=normalize_hex(hex_color), locked=True, relaxed=False)


def apply_mood_cluster(cluster: MoodCluster) -> TokenTree:
    """Generate the token tree described by a cluster's palette spec."""
    if cluster.palette_spec is None:
        raise ValueError(f"Mood cluster {cluster.id} has no palette spec")
    return generate_tokens(cluster.palette_spec)
