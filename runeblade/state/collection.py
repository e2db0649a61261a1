"""
Player Collection - Unlocked cards and the deck the player brings to runs.

The deck is a list of card ids (duplicates allowed) whose size stays within
[min_deck_size, max_deck_size] through add/remove. A card must be unlocked
before it can go into the deck.

Like the battle state, a PlayerCollection is immutable: every operation
returns a new collection, or the same object when the change is rejected.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..content.cards import ALL_CARDS, STARTER_DECK, Card

if TYPE_CHECKING:
    from ..handlers.shop_handler import ShopState

logger = logging.getLogger(__name__)

MAX_DECK_SIZE = 20
MIN_DECK_SIZE = 8


@dataclass(frozen=True)
class UnlockedCard:
    """A card the player owns, with usage stats."""
    card_id: str
    unlocked_at: int  # ms since epoch
    times_used: int = 0


@dataclass(frozen=True)
class PlayerCollection:
    unlocked_cards: Tuple[UnlockedCard, ...]
    current_deck: Tuple[str, ...]
    max_deck_size: int = MAX_DECK_SIZE
    min_deck_size: int = MIN_DECK_SIZE
    current_shop: Optional["ShopState"] = None

    def is_card_unlocked(self, card_id: str) -> bool:
        return any(u.card_id == card_id for u in self.unlocked_cards)

    def get_unlocked_cards(self) -> List[Card]:
        """Unlocked cards in unlock order; ids missing from the pool are skipped."""
        return [ALL_CARDS[u.card_id] for u in self.unlocked_cards if u.card_id in ALL_CARDS]

    def get_deck_cards(self) -> List[Card]:
        return [ALL_CARDS[cid] for cid in self.current_deck if cid in ALL_CARDS]

    def times_used(self, card_id: str) -> int:
        for u in self.unlocked_cards:
            if u.card_id == card_id:
                return u.times_used
        return 0


def _now_ms() -> int:
    return int(time.time() * 1000)


def _starter_ids() -> Tuple[str, ...]:
    return tuple(card.id for card in STARTER_DECK)


def create_collection() -> PlayerCollection:
    """New collection: starter cards unlocked, starter deck equipped."""
    now = _now_ms()
    unique_ids = tuple(dict.fromkeys(_starter_ids()))
    return PlayerCollection(
        unlocked_cards=tuple(UnlockedCard(cid, now) for cid in unique_ids),
        current_deck=_starter_ids(),
    )


def unlock_card(collection: PlayerCollection, card_id: str) -> PlayerCollection:
    if collection.is_card_unlocked(card_id):
        return collection
    logger.debug("Unlocked %s", card_id)
    unlocked = collection.unlocked_cards + (UnlockedCard(card_id, _now_ms()),)
    return replace(collection, unlocked_cards=unlocked)


def add_card_to_deck(collection: PlayerCollection, card_id: str) -> PlayerCollection:
    """Add an unlocked card to the deck unless the deck is full."""
    if not collection.is_card_unlocked(card_id):
        return collection
    if len(collection.current_deck) >= collection.max_deck_size:
        return collection
    return replace(collection, current_deck=collection.current_deck + (card_id,))


def remove_card_from_deck(collection: PlayerCollection, card_id: str) -> PlayerCollection:
    """Remove one copy of a card unless the deck is at its minimum size."""
    deck = collection.current_deck
    if len(deck) <= collection.min_deck_size or card_id not in deck:
        return collection
    idx = deck.index(card_id)
    return replace(collection, current_deck=deck[:idx] + deck[idx + 1:])


def reset_deck(collection: PlayerCollection) -> PlayerCollection:
    return replace(collection, current_deck=_starter_ids())


def increment_card_usage(collection: PlayerCollection, card_id: str) -> PlayerCollection:
    unlocked = tuple(
        replace(u, times_used=u.times_used + 1) if u.card_id == card_id else u
        for u in collection.unlocked_cards
    )
    return replace(collection, unlocked_cards=unlocked)
