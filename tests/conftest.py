"""
Shared pytest fixtures for the Runeblade test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- Player, enemy and battle state construction
- Card instances with stable ids
"""

from dataclasses import replace

import pytest

from runeblade.content.cards import CardInstance, get_card
from runeblade.content.enemies import GOBLIN
from runeblade.state.combat import BattleState, GameConfig, PlayerState, create_enemy
from runeblade.state.rng import Random, seed_to_long


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def rng_abc():
    """RNG initialized from the seed string 'ABC'."""
    return Random(seed_to_long("ABC"))


# =============================================================================
# Card Fixtures
# =============================================================================


@pytest.fixture
def make_card():
    """Factory: card instance with a readable instance id."""
    counter = {"n": 0}

    def _make(card_id: str) -> CardInstance:
        counter["n"] += 1
        return CardInstance(get_card(card_id), f"{card_id}-{counter['n']}")

    return _make


# =============================================================================
# Battle State Fixtures
# =============================================================================


@pytest.fixture
def make_player():
    """Factory: player with explicit piles and stats (defaults: 80 hp, 3 mana)."""

    def _make(hp=80, max_hp=80, armor=0, mana=3, max_mana=3,
              hand=(), deck=(), discard=(), statuses=()):
        return PlayerState(
            hp=hp,
            max_hp=max_hp,
            armor=armor,
            mana=mana,
            max_mana=max_mana,
            deck=tuple(deck),
            hand=tuple(hand),
            discard_pile=tuple(discard),
            status_effects=tuple(statuses),
        )

    return _make


@pytest.fixture
def make_enemy():
    """Factory: battle copy of a template with optional overrides."""

    def _make(template=GOBLIN, **overrides):
        enemy = create_enemy(template)
        if "status_effects" in overrides:
            overrides["status_effects"] = tuple(overrides["status_effects"])
        return replace(enemy, **overrides)

    return _make


@pytest.fixture
def make_state(make_player, make_enemy):
    """Factory: battle state; pass enemy=None for a battle with no enemy."""
    missing = object()

    def _make(player=None, enemy=missing, config=None, **kwargs):
        return BattleState(
            player=player if player is not None else make_player(),
            enemy=make_enemy() if enemy is missing else enemy,
            config=config or GameConfig(),
            **kwargs,
        )

    return _make
