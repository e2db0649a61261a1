"""
Runeblade

A turn-based card battle simulator with procedurally generated act maps
and a card shop economy.

Core subsystems:
- state: RNG (XorShift128), battle state, collection, run progress
- content: Cards, status effects, enemies and their AI, acts
- effects: Card effect execution and status ticking
- generation: Act maps and shop inventories
- handlers: Shop transactions
- calc: Damage/healing formulas, shop odds

Usage:
    from runeblade import GameRunner, GamePhase

    runner = GameRunner(seed="SEED123")
    stats = runner.run()

    from runeblade import CombatEngine, Random
    engine = CombatEngine.start(Random(42))
    result = engine.run()
"""

__version__ = "0.1.0"

# RNG System
from .state.rng import XorShift128, Random, seed_to_long, long_to_seed

# Damage Calculation
from .calc.damage import (
    DamageResult,
    resolve_damage,
    resolve_healing,
    apply_damage,
    apply_piercing_damage,
    apply_healing,
)

# Content
from .content.cards import Card, CardEffect, CardEffectKind, CardInstance, CardRarity, CardType, ALL_CARDS, get_card
from .content.enemies import ActionType, EnemyAction, EnemyBehavior, EnemyTemplate, ALL_ENEMIES, get_enemy_template
from .content.statuses import StatusEffect, StatusType, status_total
from .content.acts import Act, ALL_ACTS, get_act

# Battle
from .state.combat import BattleState, EnemyState, GameConfig, LogEntry, PlayerConfig, PlayerState, Turn
from .combat_engine import BattleResult, CombatEngine, CombatPhase, end_turn, play_card, start_battle

# Generation
from .generation.map import GameMap, MapGenerationConfig, MapGenerator, MapNode, NodeStatus, NodeType, generate_map
from .generation.shop import ShopItem, generate_shop_items

# Run
from .game import GamePhase, GameRunner

__all__ = [
    "XorShift128", "Random", "seed_to_long", "long_to_seed",
    "DamageResult", "resolve_damage", "resolve_healing",
    "apply_damage", "apply_piercing_damage", "apply_healing",
    "Card", "CardEffect", "CardEffectKind", "CardInstance", "CardRarity", "CardType",
    "ALL_CARDS", "get_card",
    "ActionType", "EnemyAction", "EnemyBehavior", "EnemyTemplate", "ALL_ENEMIES", "get_enemy_template",
    "StatusEffect", "StatusType", "status_total",
    "Act", "ALL_ACTS", "get_act",
    "BattleState", "EnemyState", "GameConfig", "LogEntry", "PlayerConfig", "PlayerState", "Turn",
    "BattleResult", "CombatEngine", "CombatPhase", "end_turn", "play_card", "start_battle",
    "GameMap", "MapGenerationConfig", "MapGenerator", "MapNode", "NodeStatus", "NodeType", "generate_map",
    "ShopItem", "generate_shop_items",
    "GamePhase", "GameRunner",
]
