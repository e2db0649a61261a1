"""
Status Effect Processor - Turn-start ticking of timed effects.

For each effect on the target, in insertion order:
- regeneration heals (capped at max_hp)
- poison, bleed and burn cost hp (floored at 0)
- weakness, strength, vulnerable and shield do nothing here; other
  systems read them while they are active

Afterwards every effect loses one turn of duration, and effects that were
on their last turn are removed.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Tuple, TypeVar

from ..content.statuses import StatusEffect
from ..state.combat import BattleState, Turn

logger = logging.getLogger(__name__)

C = TypeVar("C")


def tick_effects(combatant: C) -> C:
    """Apply and age every status effect on one combatant."""
    hp = combatant.hp
    remaining: Tuple[StatusEffect, ...] = ()

    for effect in combatant.status_effects:
        if effect.is_healing_over_time:
            hp = min(combatant.max_hp, hp + effect.value)
        elif effect.is_damage_over_time:
            hp = max(0, hp - effect.value)

        if effect.duration > 1:
            remaining += (replace(effect, duration=effect.duration - 1),)

    if hp != combatant.hp:
        logger.debug("Status tick moved hp %d -> %d", combatant.hp, hp)
    return replace(combatant, hp=hp, status_effects=remaining)


def tick(state: BattleState, target: Turn) -> BattleState:
    """
    Tick the status effects of the player or the enemy.

    Args:
        state: Current battle state
        target: Turn.PLAYER or Turn.ENEMY

    Returns:
        New state; unchanged when ticking a missing enemy
    """
    if target == Turn.PLAYER:
        return replace(state, player=tick_effects(state.player))
    if state.enemy is None:
        return state
    return replace(state, enemy=tick_effects(state.enemy))
