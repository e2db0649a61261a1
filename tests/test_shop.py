"""
Shop Generation Tests

Tests shop inventories:
- Item count, uniqueness and exclusions
- Price and discount rules
- Rarity tables per act
- Sell prices
"""

import math

import pytest

from runeblade.content.cards import ALL_CARDS, CardRarity, get_card
from runeblade.generation.shop import (
    CARD_BASE_PRICES,
    DISCOUNT_MAX,
    DISCOUNT_MIN,
    RARITY_ORDER,
    RARITY_WEIGHTS,
    SHOP_ITEMS_COUNT,
    create_shop_item,
    generate_shop_items,
    get_rarity_weights,
    get_sell_price,
)
from runeblade.state.rng import Random


class TestInventory:

    def test_default_count(self, rng):
        items = generate_shop_items(1, rng)
        assert len(items) == SHOP_ITEMS_COUNT

    def test_distinct_cards(self):
        for seed in range(50):
            items = generate_shop_items(2, Random(seed))
            assert len({i.card.id for i in items}) == len(items)

    def test_distinct_item_ids(self, rng):
        items = generate_shop_items(1, rng)
        assert len({i.id for i in items}) == len(items)
        assert all(i.id.startswith("shop-") for i in items)

    def test_exclusions(self):
        excluded = ["attack-basic", "defense-basic", "magic-heal"]
        for seed in range(30):
            items = generate_shop_items(1, Random(seed), exclude_ids=excluded)
            assert not {i.card.id for i in items} & set(excluded)

    def test_pool_runs_out(self, rng):
        keep = {"attack-basic", "magic-fireball"}
        excluded = [cid for cid in ALL_CARDS if cid not in keep]
        items = generate_shop_items(1, rng, exclude_ids=excluded)
        assert {i.card.id for i in items} == keep

    def test_custom_pool(self, rng):
        pool = [get_card("attack-basic"), get_card("defense-basic")]
        items = generate_shop_items(3, rng, pool=pool)
        assert {i.card.id for i in items} == {"attack-basic", "defense-basic"}

    def test_whole_pool(self, rng):
        items = generate_shop_items(3, rng, count=len(ALL_CARDS) + 5)
        assert len(items) == len(ALL_CARDS)

    def test_deterministic(self):
        a = generate_shop_items(2, Random(9))
        b = generate_shop_items(2, Random(9))
        assert [(i.card.id, i.price) for i in a] == [(i.card.id, i.price) for i in b]

    def test_items_start_unsold(self, rng):
        assert not any(i.sold for i in generate_shop_items(1, rng))


class TestPricing:

    def test_price_rules(self):
        rng = Random(123)
        seen_discount = False
        for card in list(ALL_CARDS.values()) * 20:
            item = create_shop_item(card, rng)
            assert item.original_price == CARD_BASE_PRICES[card.rarity]
            assert item.discount == 0 or DISCOUNT_MIN <= item.discount <= DISCOUNT_MAX
            assert item.price == math.floor(item.original_price * (1 - item.discount / 100))
            seen_discount = seen_discount or item.discount > 0
        assert seen_discount

    def test_undiscounted_price(self):
        rng = Random(5)
        items = [create_shop_item(get_card("magic-lightning"), rng) for _ in range(50)]
        assert all(i.price == 150 for i in items if i.discount == 0)

    @pytest.mark.parametrize("card_id,price", [
        ("attack-basic", 25),
        ("magic-fireball", 37),
        ("magic-lightning", 75),
        ("magic-arcane-blast", 125),
    ])
    def test_sell_price(self, card_id, price):
        assert get_sell_price(get_card(card_id)) == price


class TestRarityTables:

    def test_tables_cover_every_rarity(self):
        for weights in RARITY_WEIGHTS.values():
            assert set(weights) == set(RARITY_ORDER)

    def test_unknown_act_uses_act_one(self):
        assert get_rarity_weights(99) is RARITY_WEIGHTS[1]

    def test_later_acts_rarer(self):
        assert get_rarity_weights(3)[CardRarity.RARE] > get_rarity_weights(1)[CardRarity.RARE]
        assert get_rarity_weights(1)[CardRarity.LEGENDARY] == 0
