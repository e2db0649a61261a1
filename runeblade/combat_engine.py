"""
Combat Engine - Turn flow for one battle.

This module composes the card executor, the status processor and the enemy
AI into the battle state machine:

    PLAYER_TURN --end_turn--> ENEMY_TURN --(both alive)--> PLAYER_TURN
         |                        |
         +------------------------+--> COMBAT_OVER (victory | defeat)

Turn sequence for end_turn:
1. Discard hand, hand the turn to the enemy
2. Tick enemy statuses, check for game end
3. Enemy performs the intent it showed, check for game end
4. New round: player armor resets, player statuses tick, check for game
   end, mana refills, hand refills, enemy picks its next intent

Game-end checks look at the enemy first, so a double knockout is a win.
Once the battle is over every transition returns the state unchanged.

Usage:
    from runeblade.combat_engine import CombatEngine
    from runeblade.state.rng import Random

    engine = CombatEngine.start(Random(42))
    while not engine.is_over:
        for card in engine.get_playable_cards():
            engine.play_card(card)
        engine.end_turn()

    result = engine.get_result()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from .content.cards import CardInstance
from .content.enemies import EnemyTemplate, get_tier
from .content.enemies_ai import apply_action, choose_action, update_enemy_intent
from .effects.executor import apply_card
from .effects.status import tick
from .state.combat import (
    BattleState,
    GameConfig,
    LogType,
    PlayerState,
    Turn,
    create_enemy,
    create_player,
    discard_card,
    discard_hand,
    draw_to_hand_size,
)
from .state.rng import Random

logger = logging.getLogger(__name__)


# =============================================================================
# COMBAT PHASE
# =============================================================================

class CombatPhase(Enum):
    """Current phase of combat."""
    PLAYER_TURN = "PLAYER_TURN"
    ENEMY_TURN = "ENEMY_TURN"
    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"


def get_phase(state: BattleState) -> CombatPhase:
    if state.is_over:
        return CombatPhase.VICTORY if state.is_victory else CombatPhase.DEFEAT
    return CombatPhase.PLAYER_TURN if state.turn == Turn.PLAYER else CombatPhase.ENEMY_TURN


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

def start_battle(
    rng: Random,
    config: Optional[GameConfig] = None,
    enemy: Optional[EnemyTemplate] = None,
    player: Optional[PlayerState] = None,
    tier: str = "tier1",
) -> BattleState:
    """
    Create a battle ready for the player's first move.

    Args:
        rng: Random handle for deck shuffles, enemy pick and enemy AI
        config: Battle rules (defaults to GameConfig())
        enemy: Enemy template; a random one from `tier` when omitted
        player: Player to bring in; a fresh starter-deck player when omitted
        tier: Enemy tier used when no enemy is given

    Returns:
        BattleState on round 1, player to act, intent already shown
    """
    config = config or GameConfig()
    if player is None:
        player = create_player(rng)
    if enemy is None:
        enemy = rng.choice(get_tier(tier))

    state = BattleState(
        player=draw_to_hand_size(player, config.starting_hand_size, rng),
        enemy=create_enemy(enemy),
        config=config,
    )
    state = update_enemy_intent(state, rng)
    logger.debug("Battle started against %s", enemy.id)
    return state.with_log("Battle started!", LogType.SYSTEM)


def check_game_end(state: BattleState) -> BattleState:
    """Mark the battle over when a side has died (enemy checked first)."""
    if state.is_over:
        return state

    if state.enemy is not None and state.enemy.is_dead:
        logger.debug("Victory in round %d", state.round)
        state = replace(state, is_over=True, is_victory=True)
        return state.with_log(f"{state.enemy.name} was defeated! You won!", LogType.SYSTEM)

    if state.player.is_dead:
        logger.debug("Defeat in round %d", state.round)
        state = replace(state, is_over=True, is_victory=False)
        return state.with_log("You were defeated!", LogType.SYSTEM)

    return state


def play_card(state: BattleState, card: CardInstance) -> BattleState:
    """
    Play a card from the hand.

    Out of turn, after the battle or for a card not in hand, nothing
    happens. Without enough mana only a log entry is added.
    """
    if not state.is_player_turn:
        return state
    if state.player.find_in_hand(card.instance_id) is None:
        return state
    if state.player.mana < card.cost:
        return state.with_log("Not enough mana!", LogType.SYSTEM)

    state = apply_card(card, state)
    state = replace(state, player=discard_card(state.player, card.instance_id))
    state = state.with_log(f"You played {card.name}!", LogType.ACTION)
    logger.debug("Played %s (mana left %d)", card.id, state.player.mana)
    return check_game_end(state)


def end_turn(state: BattleState, rng: Random) -> BattleState:
    """End the player's turn, run the enemy turn and start the next round."""
    if not state.is_player_turn:
        return state

    state = replace(state, player=discard_hand(state.player), turn=Turn.ENEMY)
    state = state.with_log("Enemy turn!", LogType.SYSTEM)
    state = _enemy_turn(state, rng)
    if state.is_over or state.enemy is None:
        return state
    return _start_player_turn(state, rng)


def _enemy_turn(state: BattleState, rng: Random) -> BattleState:
    if state.enemy is None or state.is_over:
        return state

    state = check_game_end(tick(state, Turn.ENEMY))
    if state.is_over:
        return state

    enemy = state.enemy
    action = enemy.intent or choose_action(enemy, state, rng)
    state = state.with_log(f"{enemy.name} uses {action.description}!", LogType.ACTION)
    state = apply_action(state, action)
    return check_game_end(state)


def _start_player_turn(state: BattleState, rng: Random) -> BattleState:
    state = replace(
        state,
        turn=Turn.PLAYER,
        round=state.round + 1,
        player=replace(state.player, armor=0),
    )
    state = check_game_end(tick(state, Turn.PLAYER))
    if state.is_over:
        return state

    player = replace(state.player, mana=state.player.max_mana)
    player = draw_to_hand_size(player, state.config.starting_hand_size, rng)
    state = update_enemy_intent(replace(state, player=player), rng)
    return state.with_log(f"Turn {state.round} - your move!", LogType.SYSTEM)


def get_playable_cards(state: BattleState) -> List[CardInstance]:
    """Cards in hand the player can afford right now."""
    if not state.is_player_turn:
        return []
    return [c for c in state.player.hand if c.cost <= state.player.mana]


# =============================================================================
# COMBAT RESULT
# =============================================================================

@dataclass(frozen=True)
class BattleResult:
    """Summary of a finished (or abandoned) battle."""
    victory: bool
    rounds: int
    player_hp: int
    enemy_id: Optional[str]
    cards_played: int


# =============================================================================
# COMBAT ENGINE
# =============================================================================

CardPolicy = Callable[[BattleState], Optional[CardInstance]]


def greedy_policy(state: BattleState) -> Optional[CardInstance]:
    """Play the most expensive affordable card, or nothing."""
    playable = get_playable_cards(state)
    if not playable:
        return None
    return max(playable, key=lambda c: c.cost)


class CombatEngine:
    """
    Object wrapper around the battle transitions.

    Holds the current BattleState and the Random handle so callers do not
    have to thread them through by hand. Every method replaces self.state
    with the result of the matching module-level function.
    """

    def __init__(self, state: BattleState, rng: Random):
        self.state = state
        self.rng = rng
        self.cards_played = 0

    @classmethod
    def start(
        cls,
        rng: Random,
        config: Optional[GameConfig] = None,
        enemy: Optional[EnemyTemplate] = None,
        player: Optional[PlayerState] = None,
        tier: str = "tier1",
    ) -> CombatEngine:
        return cls(start_battle(rng, config, enemy, player, tier), rng)

    @property
    def phase(self) -> CombatPhase:
        return get_phase(self.state)

    @property
    def is_over(self) -> bool:
        return self.state.is_over

    def get_playable_cards(self) -> List[CardInstance]:
        return get_playable_cards(self.state)

    def play_card(self, card: CardInstance) -> bool:
        """Play a card; returns True when the card was actually played."""
        in_hand = self.state.player.find_in_hand(card.instance_id) is not None
        self.state = play_card(self.state, card)
        played = in_hand and self.state.player.find_in_hand(card.instance_id) is None
        if played:
            self.cards_played += 1
        return played

    def play_card_at(self, hand_index: int) -> bool:
        """Play the card at a hand position; out-of-range indexes are ignored."""
        hand = self.state.player.hand
        if not 0 <= hand_index < len(hand):
            return False
        return self.play_card(hand[hand_index])

    def end_turn(self) -> None:
        self.state = end_turn(self.state, self.rng)

    def run(self, policy: CardPolicy = greedy_policy, max_rounds: int = 100) -> BattleResult:
        """
        Drive the battle with a card-choice policy until it ends.

        Each player turn plays cards while the policy returns one, then ends
        the turn. Stops after `max_rounds` rounds even if nobody has won.
        """
        while not self.is_over and self.state.round <= max_rounds:
            card = policy(self.state)
            while card is not None and self.play_card(card) and not self.is_over:
                card = policy(self.state)
            self.end_turn()
        return self.get_result()

    def get_result(self) -> BattleResult:
        state = self.state
        return BattleResult(
            victory=state.is_over and state.is_victory,
            rounds=state.round,
            player_hp=state.player.hp,
            enemy_id=state.enemy.id if state.enemy else None,
            cards_played=self.cards_played,
        )
