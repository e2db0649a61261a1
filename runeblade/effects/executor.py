"""
Card Effect Executor - Resolves a played card against the battle state.

A card's effects are plain CardEffect records; this module is the single
dispatcher that interprets them. Each handler takes the state and one
effect and returns a new state.

Order of operations for apply_card:
1. Reject (unchanged state) when the player cannot pay the cost
2. Debit mana
3. Attack cards with positive strength deal card.value + strength as a
   single armor-absorbed hit, replacing the card's listed effects
4. Otherwise dispatch every effect in order

Moving the card to the discard pile and logging are done by the caller
(combat_engine.play_card).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict

from ..calc.damage import apply_damage, apply_healing, apply_piercing_damage
from ..content.cards import Card, CardEffect, CardEffectKind, CardInstance, CardType
from ..content.statuses import create_status
from ..state.combat import BattleState

logger = logging.getLogger(__name__)

EffectHandler = Callable[[BattleState, CardEffect], BattleState]


# =============================================================================
# Effect handlers
# =============================================================================

def _damage(state: BattleState, effect: CardEffect) -> BattleState:
    enemy = state.enemy
    for _ in range(effect.hits):
        enemy = apply_damage(enemy, effect.value, state.config.damage_multiplier)
    return replace(state, enemy=enemy)


def _pierce(state: BattleState, effect: CardEffect) -> BattleState:
    enemy = state.enemy
    for _ in range(effect.hits):
        enemy = apply_piercing_damage(enemy, effect.value, state.config.damage_multiplier)
    return replace(state, enemy=enemy)


def _armor(state: BattleState, effect: CardEffect) -> BattleState:
    player = replace(state.player, armor=state.player.armor + effect.value)
    return replace(state, player=player)


def _heal(state: BattleState, effect: CardEffect) -> BattleState:
    return replace(state, player=apply_healing(state.player, effect.value, state.config.healing_multiplier))


def _apply_self(state: BattleState, effect: CardEffect) -> BattleState:
    status = create_status(effect.status, effect.value, effect.duration)
    player = replace(state.player, status_effects=state.player.status_effects + (status,))
    return replace(state, player=player)


def _apply_enemy(state: BattleState, effect: CardEffect) -> BattleState:
    status = create_status(effect.status, effect.value, effect.duration)
    enemy = replace(state.enemy, status_effects=state.enemy.status_effects + (status,))
    return replace(state, enemy=enemy)


EFFECT_HANDLERS: Dict[CardEffectKind, EffectHandler] = {
    CardEffectKind.DAMAGE: _damage,
    CardEffectKind.PIERCE: _pierce,
    CardEffectKind.ARMOR: _armor,
    CardEffectKind.HEAL: _heal,
    CardEffectKind.APPLY_SELF: _apply_self,
    CardEffectKind.APPLY_ENEMY: _apply_enemy,
}


# =============================================================================
# Public API
# =============================================================================

def apply_card_effect(state: BattleState, effect: CardEffect) -> BattleState:
    """Dispatch one effect. Enemy-targeting effects are no-ops without an enemy."""
    if effect.targets_enemy and state.enemy is None:
        return state
    return EFFECT_HANDLERS[effect.kind](state, effect)


def resolve_card(state: BattleState, card: Card) -> BattleState:
    """
    Run a card's effects on a state that has already paid for it.

    A card with any enemy-targeting effect resolves as a whole or not at
    all: with no enemy present none of its effects happen.
    """
    if card.targets_enemy and state.enemy is None:
        logger.debug("%s has no target", card.name)
        return state

    strength = state.player.strength
    if card.card_type == CardType.ATTACK and strength > 0:
        enemy = apply_damage(state.enemy, card.value + strength, state.config.damage_multiplier)
        return replace(state, enemy=enemy)

    for effect in card.effects:
        state = apply_card_effect(state, effect)
    return state


def apply_card(card: CardInstance, state: BattleState) -> BattleState:
    """
    Pay for and resolve a card.

    Args:
        card: The card instance being played
        state: Current battle state

    Returns:
        New state, or the same state when mana is insufficient
    """
    if state.player.mana < card.cost:
        return state

    paid = replace(state, player=replace(state.player, mana=state.player.mana - card.cost))
    return resolve_card(paid, card.card)
