"""
Enemy AI - Picks and applies enemy actions.

Each EnemyBehavior has its own selection rule:
- AGGRESSIVE: attacks (80% when a buff is available, otherwise always),
  then buffs, then anything
- DEFENSIVE: below 40% hp, defends 70% of the time; otherwise attacks 60%
  of the time, else anything
- BALANCED: situational weights per action type
- RANDOM: uniform over every action

The chosen action is cached on the enemy as its intent so the player can
see it before ending the turn. All randomness comes from the Random handle
passed in.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Tuple

from ..calc.damage import MIN_ENEMY_HIT, apply_damage
from ..content.statuses import create_vulnerable
from ..state.combat import BattleState, EnemyState
from ..state.rng import Random
from .enemies import ActionType, EnemyAction, EnemyBehavior

logger = logging.getLogger(__name__)


# Balanced-mode weights
ATTACK_WEIGHT = 10
ATTACK_FINISHER_BONUS = 10  # Player below PLAYER_LOW_HP
DEFEND_WEIGHT = 5
DEFEND_LOW_HP_BONUS = 15  # Enemy below SELF_LOW_HP
BUFF_WEIGHT = 5
DEBUFF_WEIGHT = 3
DEBUFF_HEALTHY_BONUS = 5  # Player above PLAYER_HIGH_HP

PLAYER_LOW_HP = 0.3
PLAYER_HIGH_HP = 0.7
SELF_LOW_HP = 0.4

AGGRESSIVE_ATTACK_CHANCE = 0.8
DEFENSIVE_GUARD_CHANCE = 0.7
DEFENSIVE_ATTACK_CHANCE = 0.6


def _of_type(enemy: EnemyState, action_type: ActionType) -> List[EnemyAction]:
    return [a for a in enemy.actions if a.action_type == action_type]


# =============================================================================
# Behavior modes
# =============================================================================

def _aggressive(enemy: EnemyState, rng: Random) -> EnemyAction:
    attacks = _of_type(enemy, ActionType.ATTACK)
    buffs = _of_type(enemy, ActionType.BUFF)

    if attacks and (not buffs or rng.random_boolean(AGGRESSIVE_ATTACK_CHANCE)):
        return rng.choice(attacks)
    if buffs:
        return rng.choice(buffs)
    return rng.choice(enemy.actions)


def _defensive(enemy: EnemyState, rng: Random) -> EnemyAction:
    defends = _of_type(enemy, ActionType.DEFEND)
    attacks = _of_type(enemy, ActionType.ATTACK)

    if enemy.hp_fraction < SELF_LOW_HP and defends and rng.random_boolean(DEFENSIVE_GUARD_CHANCE):
        return rng.choice(defends)
    if rng.random_boolean(DEFENSIVE_ATTACK_CHANCE) and attacks:
        return rng.choice(attacks)
    return rng.choice(enemy.actions)


def balanced_weights(enemy: EnemyState, state: BattleState) -> List[Tuple[EnemyAction, int]]:
    """
    Weighted candidates for balanced mode, in attack/defend/buff/debuff order.

    Special actions carry no weight and are never picked here.
    """
    player_hp = state.player.hp_fraction
    own_hp = enemy.hp_fraction

    attack_w = ATTACK_WEIGHT + (ATTACK_FINISHER_BONUS if player_hp < PLAYER_LOW_HP else 0)
    defend_w = DEFEND_WEIGHT + (DEFEND_LOW_HP_BONUS if own_hp < SELF_LOW_HP else 0)
    debuff_w = DEBUFF_WEIGHT + (DEBUFF_HEALTHY_BONUS if player_hp > PLAYER_HIGH_HP else 0)

    weighted = []
    weighted += [(a, attack_w) for a in _of_type(enemy, ActionType.ATTACK)]
    weighted += [(a, defend_w) for a in _of_type(enemy, ActionType.DEFEND)]
    weighted += [(a, BUFF_WEIGHT) for a in _of_type(enemy, ActionType.BUFF)]
    weighted += [(a, debuff_w) for a in _of_type(enemy, ActionType.DEBUFF)]
    return weighted


def _balanced(enemy: EnemyState, state: BattleState, rng: Random) -> EnemyAction:
    weighted = balanced_weights(enemy, state)
    if not weighted:
        return rng.choice(enemy.actions)
    actions = [a for a, _ in weighted]
    weights = [w for _, w in weighted]
    return rng.weighted_choice(actions, weights)


# =============================================================================
# Public API
# =============================================================================

def choose_action(enemy: EnemyState, state: BattleState, rng: Random) -> EnemyAction:
    """
    Pick the enemy's next action according to its behavior.

    Args:
        enemy: The acting enemy
        state: Battle state (balanced mode reads the player's hp)
        rng: Random handle for every roll

    Returns:
        One of enemy.actions
    """
    if enemy.behavior == EnemyBehavior.AGGRESSIVE:
        return _aggressive(enemy, rng)
    if enemy.behavior == EnemyBehavior.DEFENSIVE:
        return _defensive(enemy, rng)
    if enemy.behavior == EnemyBehavior.BALANCED:
        return _balanced(enemy, state, rng)
    return rng.choice(enemy.actions)


def determine_intent(enemy: EnemyState, state: BattleState, rng: Random) -> EnemyAction:
    """The action the enemy will telegraph for its next turn."""
    return choose_action(enemy, state, rng)


def update_enemy_intent(state: BattleState, rng: Random) -> BattleState:
    """Cache a freshly determined intent on the enemy."""
    if state.enemy is None:
        return state
    intent = determine_intent(state.enemy, state, rng)
    logger.debug("%s intends %s (%s %d)", state.enemy.name, intent.description,
                 intent.action_type.value, intent.value)
    return replace(state, enemy=replace(state.enemy, intent=intent))


def apply_action(state: BattleState, action: EnemyAction) -> BattleState:
    """
    Resolve one enemy action.

    - ATTACK: max(1, value - enemy weakness) to the player, armor first
    - DEFEND: enemy gains armor
    - BUFF: raises enemy attack_power
    - DEBUFF: player becomes vulnerable for 2 turns
    - SPECIAL: nothing
    """
    enemy = state.enemy
    if enemy is None:
        return state

    if action.action_type == ActionType.ATTACK:
        damage = max(MIN_ENEMY_HIT, action.value - enemy.weakness)
        return replace(state, player=apply_damage(state.player, damage))

    if action.action_type == ActionType.DEFEND:
        return replace(state, enemy=replace(enemy, armor=enemy.armor + action.value))

    if action.action_type == ActionType.BUFF:
        return replace(state, enemy=replace(enemy, attack_power=enemy.attack_power + action.value))

    if action.action_type == ActionType.DEBUFF:
        effects = state.player.status_effects + (create_vulnerable(action.value, duration=2),)
        return replace(state, player=replace(state.player, status_effects=effects))

    return state


def execute_action(state: BattleState, rng: Random) -> BattleState:
    """Choose a fresh action and apply it in one step."""
    if state.enemy is None:
        return state
    return apply_action(state, choose_action(state.enemy, state, rng))
