"""
Card Definitions - The full card pool and the starter deck.

Card structure:
- id, name, description
- card_type (ATTACK, DEFENSE, MAGIC, BUFF, DEBUFF)
- rarity (COMMON, UNCOMMON, RARE, EPIC, LEGENDARY)
- cost: mana spent when played
- value: headline number (damage, armor, heal, status magnitude)
- effects: ordered CardEffect records interpreted by effects/executor.py

Effects are plain data so cards can be compared, hashed and serialized.
Damage kinds:
- DAMAGE: absorbed by armor first
- PIERCE: ignores armor (magic and piercing attacks)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .statuses import StatusType
from ..state.rng import make_id


class CardType(Enum):
    """Card types."""
    ATTACK = "attack"
    DEFENSE = "defense"
    MAGIC = "magic"
    BUFF = "buff"
    DEBUFF = "debuff"


class CardRarity(Enum):
    """Card rarities, ordered from most to least common."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class CardEffectKind(Enum):
    """What a single card effect does."""
    DAMAGE = "damage"  # Armor-absorbed damage to the enemy
    PIERCE = "pierce"  # Damage to the enemy that ignores armor
    ARMOR = "armor"  # Player gains armor
    HEAL = "heal"  # Player heals
    APPLY_SELF = "apply_self"  # Status effect on the player
    APPLY_ENEMY = "apply_enemy"  # Status effect on the enemy


ENEMY_TARGETING = frozenset({CardEffectKind.DAMAGE, CardEffectKind.PIERCE, CardEffectKind.APPLY_ENEMY})


@dataclass(frozen=True)
class CardEffect:
    """Effect that a card applies."""
    kind: CardEffectKind
    value: int = 0
    hits: int = 1
    status: Optional[StatusType] = None
    duration: int = 0

    @property
    def targets_enemy(self) -> bool:
        return self.kind in ENEMY_TARGETING


@dataclass(frozen=True)
class Card:
    """A card definition."""
    id: str
    name: str
    card_type: CardType
    rarity: CardRarity
    cost: int
    value: int
    description: str
    effects: Tuple[CardEffect, ...] = field(default_factory=tuple)

    @property
    def targets_enemy(self) -> bool:
        """True if any effect needs an enemy to resolve."""
        return any(e.targets_enemy for e in self.effects)


@dataclass(frozen=True)
class CardInstance:
    """One physical copy of a card in a pile."""
    card: Card
    instance_id: str

    @property
    def id(self) -> str:
        return self.card.id

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def cost(self) -> int:
        return self.card.cost

    @property
    def card_type(self) -> CardType:
        return self.card.card_type


# =============================================================================
# Card builders
# =============================================================================

def _attack(cid, name, rarity, cost, damage, hits=1, pierce=False, desc=None) -> Card:
    kind = CardEffectKind.PIERCE if pierce else CardEffectKind.DAMAGE
    return Card(
        id=cid, name=name, card_type=CardType.ATTACK, rarity=rarity, cost=cost, value=damage,
        description=desc or f"Deal {damage} damage.",
        effects=(CardEffect(kind, damage, hits=hits),),
    )


def _magic_damage(cid, name, rarity, cost, damage) -> Card:
    return Card(
        id=cid, name=name, card_type=CardType.MAGIC, rarity=rarity, cost=cost, value=damage,
        description=f"Deal {damage} magic damage.",
        effects=(CardEffect(CardEffectKind.PIERCE, damage),),
    )


def _status_card(cid, name, card_type, rarity, cost, status, value, duration, kind, desc) -> Card:
    return Card(
        id=cid, name=name, card_type=card_type, rarity=rarity, cost=cost, value=value,
        description=desc,
        effects=(CardEffect(kind, value, status=status, duration=duration),),
    )


# =============================================================================
# ATTACK CARDS
# =============================================================================

STRIKE = _attack("attack-basic", "Strike", CardRarity.COMMON, 1, 6)
HEAVY_STRIKE = _attack("attack-heavy", "Heavy Strike", CardRarity.COMMON, 2, 12)
QUICK_SLASH = _attack(
    "attack-quick", "Quick Slash", CardRarity.UNCOMMON, 1, 4, hits=2,
    desc="Deal 4 damage twice.",
)
PIERCING_BLOW = _attack(
    "attack-piercing", "Piercing Blow", CardRarity.RARE, 2, 8, pierce=True,
    desc="Deal 8 damage. Ignores armor.",
)
RAGING_BLOW = _attack("attack-raging", "Raging Blow", CardRarity.EPIC, 3, 20)

# =============================================================================
# DEFENSE CARDS
# =============================================================================

DEFEND = Card(
    id="defense-basic", name="Defend", card_type=CardType.DEFENSE, rarity=CardRarity.COMMON,
    cost=1, value=5, description="Gain 5 armor.",
    effects=(CardEffect(CardEffectKind.ARMOR, 5),),
)
IRON_WALL = Card(
    id="defense-iron-wall", name="Iron Wall", card_type=CardType.DEFENSE, rarity=CardRarity.UNCOMMON,
    cost=2, value=12, description="Gain 12 armor.",
    effects=(CardEffect(CardEffectKind.ARMOR, 12),),
)
SHIELD_BASH = Card(
    id="defense-shield-bash", name="Shield Bash", card_type=CardType.DEFENSE, rarity=CardRarity.RARE,
    cost=2, value=8, description="Gain 8 armor and deal 8 damage.",
    effects=(CardEffect(CardEffectKind.ARMOR, 8), CardEffect(CardEffectKind.DAMAGE, 8)),
)

# =============================================================================
# MAGIC CARDS
# =============================================================================

FIREBALL = _magic_damage("magic-fireball", "Fireball", CardRarity.UNCOMMON, 2, 10)
HEALING_LIGHT = Card(
    id="magic-heal", name="Healing Light", card_type=CardType.MAGIC, rarity=CardRarity.UNCOMMON,
    cost=2, value=8, description="Restore 8 hp.",
    effects=(CardEffect(CardEffectKind.HEAL, 8),),
)
LIGHTNING = _magic_damage("magic-lightning", "Lightning", CardRarity.RARE, 3, 15)
ARCANE_BLAST = _magic_damage("magic-arcane-blast", "Arcane Blast", CardRarity.EPIC, 4, 25)

# =============================================================================
# BUFF CARDS
# =============================================================================

BATTLE_CRY = _status_card(
    "buff-battle-cry", "Battle Cry", CardType.BUFF, CardRarity.UNCOMMON, 1,
    StatusType.STRENGTH, 2, 3, CardEffectKind.APPLY_SELF,
    "Gain 2 Strength for 3 turns.",
)
REGENERATE = _status_card(
    "buff-regenerate", "Regenerate", CardType.BUFF, CardRarity.RARE, 2,
    StatusType.REGENERATION, 3, 3, CardEffectKind.APPLY_SELF,
    "Regenerate 3 hp per turn for 3 turns.",
)

# =============================================================================
# DEBUFF CARDS
# =============================================================================

POISON = _status_card(
    "debuff-poison", "Poison", CardType.DEBUFF, CardRarity.UNCOMMON, 1,
    StatusType.POISON, 3, 3, CardEffectKind.APPLY_ENEMY,
    "Apply Poison (3 damage per turn, 3 turns).",
)
WEAKEN = _status_card(
    "debuff-weaken", "Weaken", CardType.DEBUFF, CardRarity.UNCOMMON, 1,
    StatusType.WEAKNESS, 2, 2, CardEffectKind.APPLY_ENEMY,
    "Apply Weakness (reduced damage) for 2 turns.",
)
BLEED = _status_card(
    "debuff-bleed", "Bleed", CardType.DEBUFF, CardRarity.RARE, 2,
    StatusType.BLEED, 4, 4, CardEffectKind.APPLY_ENEMY,
    "Apply Bleed (4 damage per turn, 4 turns).",
)


# =============================================================================
# REGISTRY
# =============================================================================

ALL_CARDS: Dict[str, Card] = {
    card.id: card
    for card in (
        STRIKE, HEAVY_STRIKE, QUICK_SLASH, PIERCING_BLOW, RAGING_BLOW,
        DEFEND, IRON_WALL, SHIELD_BASH,
        FIREBALL, HEALING_LIGHT, LIGHTNING, ARCANE_BLAST,
        BATTLE_CRY, REGENERATE,
        POISON, WEAKEN, BLEED,
    )
}

STARTER_DECK: Tuple[Card, ...] = (
    STRIKE, STRIKE, STRIKE, STRIKE,
    DEFEND, DEFEND, DEFEND, DEFEND,
    HEAVY_STRIKE,
    HEALING_LIGHT,
)


def get_card(card_id: str) -> Card:
    """Look up a card by id."""
    try:
        return ALL_CARDS[card_id]
    except KeyError:
        raise KeyError(f"Unknown card: {card_id}") from None


def get_cards_by_type(card_type: CardType) -> List[Card]:
    return [c for c in ALL_CARDS.values() if c.card_type == card_type]


def get_cards_by_rarity(rarity: CardRarity) -> List[Card]:
    return [c for c in ALL_CARDS.values() if c.rarity == rarity]


def create_card_instances(cards: Sequence[Card]) -> List[CardInstance]:
    """Give each card a unique instance id."""
    return [CardInstance(card, make_id(card.id)) for card in cards]
