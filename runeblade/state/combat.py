"""
Battle State - Immutable snapshot of one battle.

Every transition builds a new BattleState with dataclasses.replace, so a
snapshot handed to a renderer never changes underneath it.

Card piles:
- deck: draw pile, top card is the LAST element
- hand: cards available to play this turn
- discard_pile: played and discarded cards, reshuffled into the deck when
  the deck runs out

Every CardInstance lives in exactly one pile.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..content.cards import CardInstance, STARTER_DECK, Card, create_card_instances
from ..content.enemies import EnemyAction, EnemyBehavior, EnemyTemplate
from ..content.statuses import StatusEffect, StatusType, status_total
from .rng import Random, make_id

logger = logging.getLogger(__name__)


# =============================================================================
# Enumerations
# =============================================================================


class Turn(Enum):
    """Whose turn it is."""
    PLAYER = "player"
    ENEMY = "enemy"


class LogType(Enum):
    """Battle log categories."""
    ACTION = "action"
    DAMAGE = "damage"
    HEAL = "heal"
    STATUS = "status"
    SYSTEM = "system"


class Difficulty(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class GameConfig:
    """Battle rules, fixed for the lifetime of one battle."""
    difficulty: Difficulty = Difficulty.NORMAL
    damage_multiplier: float = 1.0
    healing_multiplier: float = 1.0
    starting_hand_size: int = 5
    cards_per_turn: int = 1  # Carried for callers; turn-start draws refill to starting_hand_size

    def __post_init__(self):
        if self.damage_multiplier <= 0 or self.healing_multiplier <= 0:
            raise ValueError("multipliers must be positive")
        if self.starting_hand_size < 0:
            raise ValueError("starting_hand_size must be >= 0")


@dataclass(frozen=True)
class PlayerConfig:
    """Starting player stats."""
    hp: int = 80
    max_hp: int = 80
    armor: int = 0
    mana: int = 3
    max_mana: int = 3


DEFAULT_GAME_CONFIG = GameConfig()
DEFAULT_PLAYER_CONFIG = PlayerConfig()


# =============================================================================
# Log
# =============================================================================


@dataclass(frozen=True)
class LogEntry:
    """A single battle log entry."""
    id: str
    message: str
    log_type: LogType
    timestamp: int  # ms since epoch


def create_log_entry(message: str, log_type: LogType) -> LogEntry:
    return LogEntry(
        id=make_id("log"),
        message=message,
        log_type=log_type,
        timestamp=int(time.time() * 1000),
    )


# =============================================================================
# Combatants
# =============================================================================


@dataclass(frozen=True)
class PlayerState:
    """Player side of a battle."""
    hp: int
    max_hp: int
    armor: int = 0
    mana: int = 3
    max_mana: int = 3
    deck: Tuple[CardInstance, ...] = ()
    hand: Tuple[CardInstance, ...] = ()
    discard_pile: Tuple[CardInstance, ...] = ()
    status_effects: Tuple[StatusEffect, ...] = ()

    @property
    def strength(self) -> int:
        return status_total(self.status_effects, StatusType.STRENGTH)

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def hp_fraction(self) -> float:
        return self.hp / self.max_hp

    @property
    def all_cards(self) -> Tuple[CardInstance, ...]:
        return self.deck + self.hand + self.discard_pile

    def find_in_hand(self, instance_id: str) -> Optional[CardInstance]:
        for card in self.hand:
            if card.instance_id == instance_id:
                return card
        return None


@dataclass(frozen=True)
class EnemyState:
    """Enemy side of a battle."""
    id: str
    name: str
    hp: int
    max_hp: int
    behavior: EnemyBehavior
    actions: Tuple[EnemyAction, ...]
    armor: int = 0
    attack_power: int = 0  # Raised by buffs; not read by attack damage
    status_effects: Tuple[StatusEffect, ...] = ()
    intent: Optional[EnemyAction] = None

    @property
    def weakness(self) -> int:
        return status_total(self.status_effects, StatusType.WEAKNESS)

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def hp_fraction(self) -> float:
        return self.hp / self.max_hp


# =============================================================================
# Battle State
# =============================================================================


@dataclass(frozen=True)
class BattleState:
    """
    Complete battle state - everything needed to continue the simulation.

    Owned by the orchestrator; replaced wholesale on every transition.
    """
    player: PlayerState
    enemy: Optional[EnemyState]
    turn: Turn = Turn.PLAYER
    is_over: bool = False
    is_victory: bool = False
    round: int = 1
    log: Tuple[LogEntry, ...] = ()
    config: GameConfig = field(default_factory=GameConfig)

    @property
    def is_player_turn(self) -> bool:
        return self.turn == Turn.PLAYER and not self.is_over

    def with_log(self, message: str, log_type: LogType) -> BattleState:
        """Return a copy with one entry appended to the log."""
        return replace(self, log=self.log + (create_log_entry(message, log_type),))


# =============================================================================
# Factories
# =============================================================================


def create_player(
    rng: Random,
    config: PlayerConfig = DEFAULT_PLAYER_CONFIG,
    cards: Sequence[Card] = STARTER_DECK,
) -> PlayerState:
    """Create a player with a shuffled deck built from `cards`."""
    deck = rng.shuffle(create_card_instances(cards))
    return PlayerState(
        hp=config.hp,
        max_hp=config.max_hp,
        armor=config.armor,
        mana=config.mana,
        max_mana=config.max_mana,
        deck=tuple(deck),
    )


def create_enemy(template: EnemyTemplate) -> EnemyState:
    """Fresh battle copy of an enemy template: full hp, no statuses, no intent."""
    return EnemyState(
        id=template.id,
        name=template.name,
        hp=template.max_hp,
        max_hp=template.max_hp,
        armor=template.armor,
        behavior=template.behavior,
        attack_power=template.attack_power,
        actions=template.actions,
    )


def reset_player(player: PlayerState, rng: Random) -> PlayerState:
    """Gather every pile into a shuffled deck and restore hp, mana and armor."""
    return replace(
        player,
        hp=player.max_hp,
        armor=0,
        mana=player.max_mana,
        deck=tuple(rng.shuffle(player.all_cards)),
        hand=(),
        discard_pile=(),
        status_effects=(),
    )


# =============================================================================
# Pile operations
# =============================================================================


def draw_cards(player: PlayerState, count: int, rng: Random) -> PlayerState:
    """
    Draw up to `count` cards from the top of the deck.

    When the deck is empty the discard pile is shuffled into a new deck.
    Never draws more than deck + discard hold.
    """
    deck = list(player.deck)
    hand = list(player.hand)
    discard = list(player.discard_pile)

    to_draw = min(count, len(deck) + len(discard))
    for _ in range(to_draw):
        if not deck:
            deck = rng.shuffle(discard)
            discard = []
            logger.debug("Reshuffled %d cards into the deck", len(deck))
        hand.append(deck.pop())

    return replace(player, deck=tuple(deck), hand=tuple(hand), discard_pile=tuple(discard))


def draw_to_hand_size(player: PlayerState, hand_size: int, rng: Random) -> PlayerState:
    """Draw until the hand holds `hand_size` cards (or the piles run dry)."""
    return draw_cards(player, max(0, hand_size - len(player.hand)), rng)


def discard_hand(player: PlayerState) -> PlayerState:
    """Move the whole hand to the discard pile."""
    return replace(player, discard_pile=player.discard_pile + player.hand, hand=())


def discard_card(player: PlayerState, instance_id: str) -> PlayerState:
    """Move one card from hand to discard; unknown ids leave the player unchanged."""
    for idx, card in enumerate(player.hand):
        if card.instance_id == instance_id:
            hand = player.hand[:idx] + player.hand[idx + 1:]
            return replace(player, hand=hand, discard_pile=player.discard_pile + (card,))
    return player
