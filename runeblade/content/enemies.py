"""
Enemy Definitions - Templates, action lists and tiers.

Data only; the decision logic lives in enemies_ai.py and the per-battle
state (hp, armor, intent) in state/combat.py.

Tiers:
- tier1: goblin, skeleton
- tier2: orc
- tier3: dark-knight
- bosses: dragon
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class EnemyBehavior(Enum):
    """AI profile used to pick actions."""
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"
    RANDOM = "random"


class ActionType(Enum):
    """Enemy action categories (also shown as the intent icon)."""
    ATTACK = "attack"
    DEFEND = "defend"
    BUFF = "buff"
    DEBUFF = "debuff"
    SPECIAL = "special"


@dataclass(frozen=True)
class EnemyAction:
    """One move an enemy can take."""
    action_type: ActionType
    value: int
    description: str


@dataclass(frozen=True)
class EnemyTemplate:
    """Static enemy definition."""
    id: str
    name: str
    max_hp: int
    armor: int
    behavior: EnemyBehavior
    attack_power: int
    actions: Tuple[EnemyAction, ...]

    def __post_init__(self):
        if not self.actions:
            raise ValueError(f"Enemy {self.id} needs at least one action")


def _a(action_type: ActionType, value: int, description: str) -> EnemyAction:
    return EnemyAction(action_type, value, description)


ATTACK = ActionType.ATTACK
DEFEND = ActionType.DEFEND
BUFF = ActionType.BUFF
DEBUFF = ActionType.DEBUFF


# ============ ENEMY TEMPLATES ============

GOBLIN = EnemyTemplate(
    id="goblin",
    name="Goblin",
    max_hp=25,
    armor=0,
    behavior=EnemyBehavior.AGGRESSIVE,
    attack_power=5,
    actions=(
        _a(ATTACK, 5, "Weak Swipe"),
        _a(ATTACK, 8, "Bite"),
        _a(DEFEND, 3, "Dodge"),
    ),
)

ORC = EnemyTemplate(
    id="orc",
    name="Orc Warrior",
    max_hp=45,
    armor=5,
    behavior=EnemyBehavior.BALANCED,
    attack_power=10,
    actions=(
        _a(ATTACK, 10, "Axe Chop"),
        _a(ATTACK, 15, "Charge"),
        _a(DEFEND, 8, "Defensive Stance"),
        _a(BUFF, 3, "Fury"),
    ),
)

SKELETON = EnemyTemplate(
    id="skeleton",
    name="Skeleton",
    max_hp=20,
    armor=0,
    behavior=EnemyBehavior.RANDOM,
    attack_power=6,
    actions=(
        _a(ATTACK, 6, "Bone Strike"),
        _a(ATTACK, 4, "Scratch"),
        _a(DEBUFF, 2, "Chilling Touch"),
    ),
)

DARK_KNIGHT = EnemyTemplate(
    id="dark-knight",
    name="Dark Knight",
    max_hp=70,
    armor=10,
    behavior=EnemyBehavior.BALANCED,
    attack_power=12,
    actions=(
        _a(ATTACK, 12, "Shadow Strike"),
        _a(ATTACK, 18, "Blade of Darkness"),
        _a(DEFEND, 15, "Shadow Shield"),
        _a(BUFF, 5, "Dark Power"),
        _a(DEBUFF, 3, "Curse"),
    ),
)

DRAGON = EnemyTemplate(
    id="dragon",
    name="Ancient Dragon",
    max_hp=150,
    armor=20,
    behavior=EnemyBehavior.AGGRESSIVE,
    attack_power=20,
    actions=(
        _a(ATTACK, 15, "Bite"),
        _a(ATTACK, 25, "Fire Breath"),
        _a(ATTACK, 30, "Devastating Charge"),
        _a(DEFEND, 20, "Steel Scales"),
        _a(BUFF, 5, "Draconic Fury"),
    ),
)


ALL_ENEMIES: Dict[str, EnemyTemplate] = {
    e.id: e for e in (GOBLIN, ORC, SKELETON, DARK_KNIGHT, DRAGON)
}

TIER_ENEMIES: Dict[str, List[EnemyTemplate]] = {
    "tier1": [GOBLIN, SKELETON],
    "tier2": [ORC],
    "tier3": [DARK_KNIGHT],
    "bosses": [DRAGON],
}


def get_enemy_template(enemy_id: str) -> EnemyTemplate:
    """Look up an enemy template by id."""
    try:
        return ALL_ENEMIES[enemy_id]
    except KeyError:
        raise KeyError(f"Unknown enemy: {enemy_id}") from None


def get_tier(tier: str) -> List[EnemyTemplate]:
    try:
        return TIER_ENEMIES[tier]
    except KeyError:
        raise KeyError(f"Unknown enemy tier: {tier}") from None
