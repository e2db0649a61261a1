"""
Status effect definitions.

A status effect is a timed modifier on a combatant:
- Damage over time: poison, bleed, burn (hp loss at the owner's turn start)
- Healing over time: regeneration
- Stat modifiers read by other systems: strength (bonus attack damage),
  weakness (reduces the owner's outgoing enemy attacks), vulnerable, shield

Duration counts owner turn-starts; an effect with duration 1 fires once
more and is then removed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class StatusType(Enum):
    """Status effect types."""
    POISON = "poison"
    BLEED = "bleed"
    BURN = "burn"
    WEAKNESS = "weakness"
    STRENGTH = "strength"
    REGENERATION = "regeneration"
    VULNERABLE = "vulnerable"
    SHIELD = "shield"


# Types that cost hp when ticked
DAMAGE_OVER_TIME = frozenset({StatusType.POISON, StatusType.BLEED, StatusType.BURN})

# Types that restore hp when ticked
HEALING_OVER_TIME = frozenset({StatusType.REGENERATION})


@dataclass(frozen=True)
class StatusEffect:
    """A timed modifier on a combatant."""
    status_type: StatusType
    value: int
    duration: int
    description: str = ""

    def __post_init__(self):
        if self.duration < 1:
            raise ValueError(f"{self.status_type.value} needs duration >= 1, got {self.duration}")

    @property
    def is_damage_over_time(self) -> bool:
        return self.status_type in DAMAGE_OVER_TIME

    @property
    def is_healing_over_time(self) -> bool:
        return self.status_type in HEALING_OVER_TIME


def status_total(effects: Iterable[StatusEffect], status_type: StatusType) -> int:
    """Sum of `value` over every effect of one type."""
    return sum(e.value for e in effects if e.status_type == status_type)


def has_status(effects: Iterable[StatusEffect], status_type: StatusType) -> bool:
    return any(e.status_type == status_type for e in effects)


# =============================================================================
# Factories
# =============================================================================

_DEFAULT_DESCRIPTIONS = {
    StatusType.POISON: "Takes {value} damage per turn",
    StatusType.BLEED: "Takes {value} damage per turn",
    StatusType.BURN: "Takes {value} damage per turn",
    StatusType.WEAKNESS: "Deals {value} less damage",
    StatusType.STRENGTH: "Deals {value} more attack damage",
    StatusType.REGENERATION: "Regenerates {value} hp per turn",
    StatusType.VULNERABLE: "Takes more damage",
    StatusType.SHIELD: "Shielded",
}


def create_status(status_type: StatusType, value: int, duration: int, description: str = "") -> StatusEffect:
    """Build a status effect, filling in the standard description."""
    if not description:
        description = _DEFAULT_DESCRIPTIONS[status_type].format(value=value)
    return StatusEffect(status_type, value, duration, description)


def create_poison(value: int, duration: int) -> StatusEffect:
    return create_status(StatusType.POISON, value, duration)


def create_strength(value: int, duration: int) -> StatusEffect:
    return create_status(StatusType.STRENGTH, value, duration)


def create_weakness(value: int, duration: int) -> StatusEffect:
    return create_status(StatusType.WEAKNESS, value, duration)


def create_vulnerable(value: int, duration: int = 2) -> StatusEffect:
    return create_status(StatusType.VULNERABLE, value, duration)


def create_regeneration(value: int, duration: int) -> StatusEffect:
    return create_status(StatusType.REGENERATION, value, duration)
