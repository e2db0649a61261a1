"""
Shop Odds - Expected rarity mix and prices of shop inventories.

Two views of the same shop:
- Analytical: rarity roll probabilities per act and the expected price of
  a card of each rarity (discount chance times the mean discounted price)
- Empirical: generate many shops with a seeded Random and count what
  actually shows up, which also captures the fallback when a rolled
  rarity has no cards left

Used by the `odds` CLI command and by the tests that check the generator
against its tables.
"""

import math
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from ..generation.shop import (
    CARD_BASE_PRICES,
    DISCOUNT_CHANCES,
    DISCOUNT_MAX,
    DISCOUNT_MIN,
    RARITY_ORDER,
    SHOP_ITEMS_COUNT,
    generate_shop_items,
    get_rarity_weights,
)
from ..state.rng import Random


@dataclass
class ShopOdds:
    """Rarity mix and prices for one act's shop."""
    act_id: int
    rarity_probabilities: np.ndarray  # In RARITY_ORDER
    expected_prices: np.ndarray  # Expected price per rarity, in RARITY_ORDER
    expected_item_price: float
    expected_shop_cost: float  # Buying every item


# ============ ANALYTICAL ============

def rarity_probabilities(act_id: int) -> np.ndarray:
    """Probability of each rolled rarity, in RARITY_ORDER."""
    weights = get_rarity_weights(act_id)
    arr = np.array([weights[r] for r in RARITY_ORDER], dtype=float)
    return arr / arr.sum()


def expected_price(rarity) -> float:
    """Mean price of a card of one rarity, discount rolls included."""
    base = CARD_BASE_PRICES[rarity]
    chance = DISCOUNT_CHANCES[rarity]
    discounts = np.arange(DISCOUNT_MIN, DISCOUNT_MAX + 1)
    discounted = np.floor(base * (1 - discounts / 100)).mean()
    return (1 - chance) * base + chance * float(discounted)


def calculate_shop_odds(act_id: int, items: int = SHOP_ITEMS_COUNT) -> ShopOdds:
    """Analytical odds for an act, ignoring pool exhaustion."""
    probs = rarity_probabilities(act_id)
    prices = np.array([expected_price(r) for r in RARITY_ORDER])
    per_item = float(probs @ prices)
    return ShopOdds(
        act_id=act_id,
        rarity_probabilities=probs,
        expected_prices=prices,
        expected_item_price=per_item,
        expected_shop_cost=per_item * items,
    )


# ============ EMPIRICAL ============

def simulate_rarity_counts(act_id: int, seed: int, shops: int = 1000) -> np.ndarray:
    """
    Count the rarities of every item across `shops` generated shops.

    Returns:
        Counts in RARITY_ORDER
    """
    rng = Random(seed)
    index = {r: i for i, r in enumerate(RARITY_ORDER)}
    counts = np.zeros(len(RARITY_ORDER), dtype=int)
    for _ in range(shops):
        for item in generate_shop_items(act_id, rng):
            counts[index[item.card.rarity]] += 1
    return counts


def simulate_prices(act_id: int, seed: int, shops: int = 1000) -> np.ndarray:
    """Every item price seen across `shops` generated shops."""
    rng = Random(seed)
    prices: List[int] = []
    for _ in range(shops):
        prices.extend(item.price for item in generate_shop_items(act_id, rng))
    return np.array(prices, dtype=int)


def chi_square(observed: np.ndarray, expected_probs: np.ndarray) -> float:
    """Pearson chi-square statistic over the cells with non-zero expectation."""
    expected = expected_probs * observed.sum()
    mask = expected > 0
    return float(((observed[mask] - expected[mask]) ** 2 / expected[mask]).sum())


def format_odds_table(act_ids: List[int]) -> str:
    """Text table of rarity odds and expected prices per act."""
    header = f"{'act':>3} " + " ".join(f"{r.value:>10}" for r in RARITY_ORDER) + f" {'E[price]':>9}"
    lines = [header]
    for act_id in act_ids:
        odds = calculate_shop_odds(act_id)
        cells = " ".join(f"{p * 100:>9.1f}%" for p in odds.rarity_probabilities)
        lines.append(f"{act_id:>3} {cells} {odds.expected_item_price:>9.1f}")
    return "\n".join(lines)


def summarize_prices(prices: np.ndarray) -> Dict[str, float]:
    if prices.size == 0:
        return {"mean": math.nan, "min": math.nan, "max": math.nan}
    return {
        "mean": float(prices.mean()),
        "min": float(prices.min()),
        "max": float(prices.max()),
    }
