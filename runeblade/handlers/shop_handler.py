"""
Shop Handler - Buying, selling and refreshing at a shop node.

Handles all shop interactions against a PlayerCollection:
- Opening a shop with generated items, closing it
- Buying a card (unlocks it and adds it to the deck)
- Selling a deck card for half its base price
- Refreshing the inventory for an escalating fee

Gold is not stored here. Callers pass the gold they hold plus a `spend`
callback (returns False to veto) or an `add_gold` callback; the collection
only changes after the callback accepts.

Every operation returns a ShopResult holding the new collection. On
failure the result carries the collection it was given, unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from ..content.cards import ALL_CARDS
from ..generation.shop import ShopItem, get_sell_price
from ..state.collection import (
    PlayerCollection,
    add_card_to_deck,
    remove_card_from_deck,
    unlock_card,
)

logger = logging.getLogger(__name__)


# ============================================================================
# SHOP CONSTANTS
# ============================================================================

SHOP_REFRESH_COST = 50
MAX_REFRESHES = 3

SpendGold = Callable[[int], bool]
AddGold = Callable[[int], None]
GenerateItems = Callable[[], Sequence[ShopItem]]


@dataclass(frozen=True)
class ShopState:
    """Inventory and refresh bookkeeping of the open shop."""
    items: Tuple[ShopItem, ...]
    refresh_cost: int = SHOP_REFRESH_COST
    refresh_count: int = 0
    max_refreshes: int = MAX_REFRESHES

    @property
    def next_refresh_cost(self) -> int:
        """Each refresh costs one more multiple of refresh_cost than the last."""
        return self.refresh_cost * (self.refresh_count + 1)

    @property
    def can_refresh(self) -> bool:
        return self.refresh_count < self.max_refreshes

    def get_item(self, item_id: str) -> Optional[ShopItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_available_items(self) -> List[ShopItem]:
        return [i for i in self.items if not i.sold]


@dataclass(frozen=True)
class ShopResult:
    """Outcome of a shop transaction."""
    success: bool
    collection: PlayerCollection
    gold: int = 0  # Gold spent (buy, refresh) or earned (sell)
    message: str = ""


def _fail(collection: PlayerCollection, message: str) -> ShopResult:
    logger.debug("Shop action rejected: %s", message)
    return ShopResult(success=False, collection=collection, message=message)


# ============================================================================
# SHOP OPERATIONS
# ============================================================================

def open_shop(collection: PlayerCollection, items: Sequence[ShopItem]) -> PlayerCollection:
    """Open a fresh shop with the given items."""
    return replace(collection, current_shop=ShopState(items=tuple(items)))


def close_shop(collection: PlayerCollection) -> PlayerCollection:
    return replace(collection, current_shop=None)


def get_affordable_items(collection: PlayerCollection, available_gold: int) -> List[ShopItem]:
    """Unsold items the player can pay for."""
    shop = collection.current_shop
    if shop is None:
        return []
    return [i for i in shop.get_available_items() if i.price <= available_gold]


def buy_card(
    collection: PlayerCollection,
    item_id: str,
    available_gold: int,
    spend: SpendGold,
) -> ShopResult:
    """
    Buy an item from the open shop.

    Fails without a shop, for unknown or sold items, when the price is
    above available_gold, or when `spend` refuses the charge. On success
    the item is marked sold, its card unlocked and added to the deck (if
    the deck has room).
    """
    shop = collection.current_shop
    if shop is None:
        return _fail(collection, "No shop is open")

    item = shop.get_item(item_id)
    if item is None or item.sold:
        return _fail(collection, "Item not found or already sold")
    if available_gold < item.price:
        return _fail(collection, "Not enough gold")
    if not spend(item.price):
        return _fail(collection, "Payment refused")

    items = tuple(replace(i, sold=True) if i.id == item_id else i for i in shop.items)
    updated = replace(collection, current_shop=replace(shop, items=items))
    updated = add_card_to_deck(unlock_card(updated, item.card.id), item.card.id)

    logger.debug("Bought %s for %d gold", item.card.id, item.price)
    return ShopResult(
        success=True,
        collection=updated,
        gold=item.price,
        message=f"Purchased {item.card.name} for {item.price} gold",
    )


def sell_card(collection: PlayerCollection, card_id: str, add_gold: AddGold) -> ShopResult:
    """Sell one copy of a deck card; fails at minimum deck size."""
    card = ALL_CARDS.get(card_id)
    if card is None:
        return _fail(collection, f"Unknown card: {card_id}")

    updated = remove_card_from_deck(collection, card_id)
    if updated is collection:
        return _fail(collection, "Card cannot be removed from the deck")

    price = get_sell_price(card)
    add_gold(price)
    logger.debug("Sold %s for %d gold", card_id, price)
    return ShopResult(
        success=True,
        collection=updated,
        gold=price,
        message=f"Sold {card.name} for {price} gold",
    )


def refresh_shop(
    collection: PlayerCollection,
    generate: GenerateItems,
    available_gold: int,
    spend: SpendGold,
) -> ShopResult:
    """
    Replace the inventory with newly generated items.

    Fails without a shop, after max_refreshes, when the fee is above
    available_gold, or when `spend` refuses it.
    """
    shop = collection.current_shop
    if shop is None:
        return _fail(collection, "No shop is open")
    if not shop.can_refresh:
        return _fail(collection, "No refreshes left")

    cost = shop.next_refresh_cost
    if available_gold < cost:
        return _fail(collection, "Not enough gold")
    if not spend(cost):
        return _fail(collection, "Payment refused")

    new_shop = replace(shop, items=tuple(generate()), refresh_count=shop.refresh_count + 1)
    return ShopResult(
        success=True,
        collection=replace(collection, current_shop=new_shop),
        gold=cost,
        message=f"Shop refreshed for {cost} gold",
    )
