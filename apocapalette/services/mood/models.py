"""
Mood cluster records.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from apocapalette.services.colors.colorspace import normalize_hex
from apocapalette.services.tokens.engine import GenerationParameters


class SlotRole(str, Enum):
    REQUIRED = "required"
    ANCHOR = "anchor"
    SUPPORTING = "supporting"
    NEUTRAL = "neutral"
    CONTRAST = "contrast"


@dataclass(frozen=True)
class Slot:
    """One color position in a mood cluster."""
    id: str
    role: SlotRole
    family: str
    locked: bool = False
    color: Optional[str] = None
    variant: Optional[str] = None
    relaxed: bool = False

    def __post_init__(self):
        object.__setattr__(self, "role", SlotRole(self.role))
        if self.color is not None:
            object.__setattr__(self, "color", normalize_hex(self.color))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "role": self.role.value,
            "family": self.family,
            "locked": self.locked,
            "color": self.color,
        }
        if self.variant is not None:
            data["variant"] = self.variant
        if self.relaxed:
            data["relaxed"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Slot":
        return cls(
            id=data["id"],
            role=SlotRole(data["role"]),
            family=data.get("family", data["role"]),
            locked=bool(data.get("locked", False)),
            color=data.get("color"),
            variant=data.get("variant"),
            relaxed=bool(data.get("relaxed", False)),
        )


def _spec_from_dict(data: Dict[str, Any]) -> GenerationParameters:
    return GenerationParameters(
        base_color=data.get("baseColor", "#6366f1"),
        harmony_mode=data.get("mode", "Monochromatic"),
        theme_mode=data.get("themeMode", "dark"),
        apocalypse_intensity=data.get("apocalypseIntensity", 100),
        harmony_intensity=data.get("harmonyIntensity", 100),
        neutral_curve=data.get("neutralCurve", 100),
        accent_strength=data.get("accentStrength", 100),
        pop_intensity=data.get("popIntensity", 100),
        print_mode=bool(data.get("printMode", False)),
        theme_name=data.get("customThemeName", ""),
    )


@dataclass(frozen=True)
class MoodCluster:
    """
    A seeded 10-slot palette of one mood type.

    Updates go through dataclasses.replace; a cluster is never mutated.
    """
    id: str
    type: str
    seed: int
    title: str
    description: str
    slots: Tuple[Slot, ...]
    palette_spec: Optional[GenerationParameters] = None
    base_hex: Optional[str] = None
    required_hex: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "slots", tuple(self.slots))

    @property
    def colors(self) -> Tuple[Optional[str], ...]:
        return tuple(slot.color for slot in self.slots)

    @property
    def constraints_satisfied(self) -> bool:
        """False when any slot had to relax the hue-separation constraint."""
        return not any(slot.relaxed for slot in self.slots)

    def slot(self, slot_id: str) -> Slot:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        raise ValueError(f"Unknown slot: {slot_id}")

    def replace_slot(self, slot_id: str, **changes) -> "MoodCluster":
        self.slot(slot_id)
        slots = tuple(
            replace(slot, **changes) if slot.id == slot_id else slot
            for slot in self.slots
        )
        return replace(self, slots=slots)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type,
            "seed": self.seed,
            "title": self.title,
            "description": self.description,
            "slots": [slot.to_dict() for slot in self.slots],
            "paletteSpec": self.palette_spec.to_dict() if self.palette_spec else None,
        }
        if self.base_hex:
            data["baseHex"] = self.base_hex
        if self.required_hex:
            data["requiredHex"] = self.required_hex
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoodCluster":
        spec = data.get("paletteSpec")
        return cls(
            id=data["id"],
            type=data["type"],
            seed=int(data["seed"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            slots=tuple(Slot.from_dict(slot) for slot in data.get("slots", [])),
            palette_spec=_spec_from_dict(spec) if spec else None,
            base_hex=data.get("baseHex"),
            required_hex=data.get("requiredHex"),
        )
