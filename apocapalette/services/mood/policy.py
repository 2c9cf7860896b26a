"""
Hue-separation constraint policy for mood clusters.
"""

from dataclasses import dataclass
from enum import Enum

from apocapalette.config import config


class ExhaustionStrategy(str, Enum):
    """What to do with a slot whose candidates all violate the constraint."""
    NEUTRALIZE = "neutralize"
    ACCEPT = "accept"


@dataclass(frozen=True)
class ConstraintPolicy:
    """
    Limits for the hue-separation rejection loops.

    Attributes:
        min_hue_distance: Minimum circular hue distance between non-neutral slots
        anchor_random_attempts: Random hue draws once the anchor offset list is exhausted
        color_attempts: Draws per supporting, contrast or neutral slot
        exhaustion_strategy: NEUTRALIZE desaturates the last candidate to gray,
            ACCEPT keeps it as drawn; the slot is flagged relaxed either way
    """
    min_hue_distance: float = 24
    anchor_random_attempts: int = 24
    color_attempts: int = 12
    exhaustion_strategy: ExhaustionStrategy = ExhaustionStrategy.NEUTRALIZE

    def __post_init__(self):
        object.__setattr__(self, "exhaustion_strategy", ExhaustionStrategy(self.exhaustion_strategy))


def default_policy() -> ConstraintPolicy:
    """Policy built from the APOCAPALETTE_MOOD_* settings."""
    strategy = config.MOOD_EXHAUSTION_STRATEGY.lower()
    if not config.validate_exhaustion_strategy(strategy):
        raise ValueError(f"Unsupported mood exhaustion strategy: {strategy}")
    return ConstraintPolicy(
        min_hue_distance=config.MOOD_MIN_HUE_DISTANCE,
        anchor_random_attempts=config.MOOD_ANCHOR_RANDOM_ATTEMPTS,
        color_attempts=config.MOOD_COLOR_ATTEMPTS,
        exhaustion_strategy=ExhaustionStrategy(strategy),
    )
