"""
Damage Calculator - Single source of truth for damage and healing arithmetic.

Design principles:
1. Pure functions - no side effects, no state
2. Armor absorbs before hit points
3. Multipliers are applied once, then floored to int

Calculation order:
1. Raw amount * multiplier (GameConfig damage/healing multiplier)
2. Floor to int
3. Armor absorbs min(armor, total)
4. Remainder hits hp, hp floored at 0
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import NamedTuple, TypeVar

__all__ = [
    "DamageResult",
    "resolve_damage",
    "resolve_healing",
    "apply_damage",
    "apply_piercing_damage",
    "apply_healing",
    "MIN_ENEMY_HIT",
]

# Weakness can shrink an enemy attack, but never below this
MIN_ENEMY_HIT = 1

C = TypeVar("C")


class DamageResult(NamedTuple):
    """Armor/hp split of one resolved hit."""
    total: int
    armor_absorbed: int
    hp_damage: int


# =============================================================================
# PURE ARITHMETIC
# =============================================================================

def resolve_damage(raw_amount: int, target_armor: int, multiplier: float = 1.0) -> DamageResult:
    """
    Split a raw hit into the part armor absorbs and the part that reaches hp.

    Args:
        raw_amount: Damage before multipliers (>= 0)
        target_armor: Target's current armor (>= 0)
        multiplier: GameConfig.damage_multiplier (> 0)

    Returns:
        DamageResult where armor_absorbed + hp_damage == total
    """
    total = max(0, math.floor(raw_amount * multiplier))
    armor_absorbed = min(max(0, target_armor), total)
    return DamageResult(total, armor_absorbed, total - armor_absorbed)


def resolve_healing(raw_amount: int, current_hp: int, max_hp: int, multiplier: float = 1.0) -> int:
    """
    Healing actually applied: never negative, never above max_hp.

    Args:
        raw_amount: Healing before multipliers
        current_hp: Target's current hp
        max_hp: Target's max hp
        multiplier: GameConfig.healing_multiplier

    Returns:
        Amount to add to current_hp
    """
    total = math.floor(raw_amount * multiplier)
    return max(0, min(total, max_hp - current_hp))


# =============================================================================
# COMBATANT HELPERS
# =============================================================================

def apply_damage(target: C, raw_amount: int, multiplier: float = 1.0) -> C:
    """Return a copy of `target` after an armor-absorbed hit."""
    result = resolve_damage(raw_amount, target.armor, multiplier)
    return replace(
        target,
        armor=target.armor - result.armor_absorbed,
        hp=max(0, target.hp - result.hp_damage),
    )


def apply_piercing_damage(target: C, raw_amount: int, multiplier: float = 1.0) -> C:
    """Return a copy of `target` after a hit that ignores armor."""
    damage = max(0, math.floor(raw_amount * multiplier))
    return replace(target, hp=max(0, target.hp - damage))


def apply_healing(target: C, raw_amount: int, multiplier: float = 1.0) -> C:
    """Return a copy of `target` healed without overhealing."""
    healing = resolve_healing(raw_amount, target.hp, target.max_hp, multiplier)
    return replace(target, hp=target.hp + healing)
