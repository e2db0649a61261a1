"""
Shop Inventory Generation

Shop structure:
- SHOP_ITEMS_COUNT cards, no duplicates, none from the exclusion list
- Each slot rolls a rarity from the act's rarity table, then picks a
  uniform card of that rarity (any unused card when none is left)

Price calculation:
- Base price by rarity (CARD_BASE_PRICES)
- Each item may be discounted, with a rarity-dependent chance, by a
  uniform 10-30 percent: price = floor(base * (1 - discount / 100))
- Selling a card back returns floor(base * SELL_PERCENTAGE)

All rolls come from the Random handle passed in.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from ..content.cards import ALL_CARDS, Card, CardRarity
from ..state.rng import Random, make_id

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

RARITY_ORDER: List[CardRarity] = [
    CardRarity.COMMON,
    CardRarity.UNCOMMON,
    CardRarity.RARE,
    CardRarity.EPIC,
    CardRarity.LEGENDARY,
]

# Rarity weights per act, in RARITY_ORDER
RARITY_WEIGHTS: Dict[int, Dict[CardRarity, int]] = {
    1: {CardRarity.COMMON: 50, CardRarity.UNCOMMON: 35, CardRarity.RARE: 12,
        CardRarity.EPIC: 3, CardRarity.LEGENDARY: 0},
    2: {CardRarity.COMMON: 35, CardRarity.UNCOMMON: 40, CardRarity.RARE: 18,
        CardRarity.EPIC: 6, CardRarity.LEGENDARY: 1},
    3: {CardRarity.COMMON: 20, CardRarity.UNCOMMON: 35, CardRarity.RARE: 30,
        CardRarity.EPIC: 12, CardRarity.LEGENDARY: 3},
}

CARD_BASE_PRICES: Dict[CardRarity, int] = {
    CardRarity.COMMON: 50,
    CardRarity.UNCOMMON: 75,
    CardRarity.RARE: 150,
    CardRarity.EPIC: 250,
    CardRarity.LEGENDARY: 400,
}

DISCOUNT_CHANCES: Dict[CardRarity, float] = {
    CardRarity.COMMON: 0.3,
    CardRarity.UNCOMMON: 0.2,
    CardRarity.RARE: 0.1,
    CardRarity.EPIC: 0.05,
    CardRarity.LEGENDARY: 0.02,
}

DISCOUNT_MIN = 10
DISCOUNT_MAX = 30

SELL_PERCENTAGE = 0.5
SHOP_ITEMS_COUNT = 5


@dataclass(frozen=True)
class ShopItem:
    """A card for sale."""
    id: str
    card: Card
    price: int
    original_price: int
    discount: int = 0  # Percent
    sold: bool = False


def get_rarity_weights(act_id: int) -> Dict[CardRarity, int]:
    """Rarity table for an act; unknown acts use act 1's table."""
    return RARITY_WEIGHTS.get(act_id, RARITY_WEIGHTS[1])


def create_shop_item(card: Card, rng: Random) -> ShopItem:
    """Price a card, rolling for a discount."""
    base_price = CARD_BASE_PRICES[card.rarity]
    discount = 0
    if rng.random_boolean(DISCOUNT_CHANCES[card.rarity]):
        discount = rng.random_int_range(DISCOUNT_MIN, DISCOUNT_MAX)

    return ShopItem(
        id=make_id("shop"),
        card=card,
        price=math.floor(base_price * (1 - discount / 100)),
        original_price=base_price,
        discount=discount,
    )


def generate_shop_items(
    act_id: int,
    rng: Random,
    count: int = SHOP_ITEMS_COUNT,
    exclude_ids: Iterable[str] = (),
    pool: Optional[Sequence[Card]] = None,
) -> List[ShopItem]:
    """
    Generate shop inventory.

    Args:
        act_id: Act whose rarity table is used
        rng: Random handle for rarity, card and discount rolls
        count: Number of items wanted
        exclude_ids: Card ids that must not appear
        pool: Cards to draw from (defaults to the full card pool)

    Returns:
        Up to `count` items with distinct cards; fewer when the pool runs out
    """
    weights = get_rarity_weights(act_id)
    rarity_weights = [weights[r] for r in RARITY_ORDER]
    used = set(exclude_ids)
    available = [c for c in (pool if pool is not None else ALL_CARDS.values()) if c.id not in used]

    items: List[ShopItem] = []
    for _ in range(count):
        unused = [c for c in available if c.id not in used]
        if not unused:
            break

        rarity = rng.weighted_choice(RARITY_ORDER, rarity_weights)
        candidates = [c for c in unused if c.rarity == rarity] or unused

        card = rng.choice(candidates)
        used.add(card.id)
        items.append(create_shop_item(card, rng))

    logger.debug("Shop for act %d: %s", act_id, [i.card.id for i in items])
    return items


def get_sell_price(card: Card) -> int:
    """Gold paid when the player sells a card."""
    return math.floor(CARD_BASE_PRICES[card.rarity] * SELL_PERCENTAGE)
