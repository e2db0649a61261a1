"""
Game Runner - Main orchestrator for a Runeblade run.

This module provides the GameRunner class that manages a run from the
first map node to the last boss (or the player's death). It handles:
- Run initialization from a seed
- Map navigation and room dispatch
- Room handlers (battle, shop, rest, event, treasure)
- The gold wallet and the player's hp between battles

Usage:
    runner = GameRunner(seed="RUNE42")
    runner.run()  # Full run with the greedy card policy
    # OR manual control:
    node = runner.get_available_nodes()[0]
    runner.select_node(node.id)
    while runner.phase == GamePhase.COMBAT:
        runner.play_card_at(0) or runner.end_turn()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Union

from .calc.damage import resolve_healing
from .combat_engine import BattleResult, CardPolicy, CombatEngine, greedy_policy
from .content.enemies import get_enemy_template
from .generation.map import MapGenerationConfig, MapNode, NodeType, map_to_string
from .generation.shop import generate_shop_items
from .handlers.shop_handler import (
    ShopResult,
    buy_card,
    close_shop,
    get_affordable_items,
    open_shop,
    refresh_shop,
    sell_card,
)
from .state.collection import PlayerCollection, create_collection, increment_card_usage
from .state.combat import GameConfig, PlayerConfig, create_player
from .state.rng import Random, seed_to_long
from .state import run as run_ops

logger = logging.getLogger(__name__)


# =============================================================================
# Game Phase Enum
# =============================================================================

class GamePhase(Enum):
    """Current phase of the run."""
    MAP_NAVIGATION = auto()  # Choosing the next node
    COMBAT = auto()          # In a battle node
    SHOP = auto()            # Browsing the shop
    REST = auto()            # At a rest node
    EVENT = auto()           # At an event node
    TREASURE = auto()        # At a treasure node
    RUN_COMPLETE = auto()    # Run ended (win or loss)


def calculate_rest_healing(hp: int, max_hp: int, percent: int) -> int:
    """Hp restored by a rest node healing `percent` of max hp."""
    return resolve_healing(max_hp * percent // 100, hp, max_hp)


@dataclass(frozen=True)
class DecisionLogEntry:
    """A node visited during the run."""
    act: int
    node_id: str
    node_type: NodeType
    gold_after: int
    hp_after: int


# =============================================================================
# Game Runner
# =============================================================================

class GameRunner:
    """
    Main orchestrator for a run.

    Owns the run state, the player's collection, the wallet and the single
    Random handle every generator and battle draws from.
    """

    def __init__(
        self,
        seed: Union[str, int],
        act_id: int = 1,
        game_config: Optional[GameConfig] = None,
        map_config: Optional[MapGenerationConfig] = None,
        player_config: Optional[PlayerConfig] = None,
    ):
        """
        Initialize a new run.

        Args:
            seed: Seed string (e.g., "RUNE42") or numeric seed
            act_id: Act to start in
            game_config: Battle rules for every battle of the run
            map_config: Map generation overrides for every act
            player_config: Starting player stats
        """
        if isinstance(seed, str):
            self.seed_string = seed.upper()
            self.seed = seed_to_long(self.seed_string)
        else:
            self.seed = seed
            self.seed_string = str(seed)

        self.rng = Random(self.seed)
        self.game_config = game_config or GameConfig()
        self.map_config = map_config
        self.player_config = player_config or PlayerConfig()

        self.run_state = run_ops.start_new_run(self.rng, act_id, map_config)
        self.collection: PlayerCollection = create_collection()
        self.hp = self.player_config.hp
        self.max_hp = self.player_config.max_hp

        self.phase = GamePhase.MAP_NAVIGATION
        self.game_over = False
        self.game_won = False

        self.combat: Optional[CombatEngine] = None
        self.battle_results: List[BattleResult] = []
        self.decision_log: List[DecisionLogEntry] = []

        self._log(f"Run started: seed {self.seed_string}, act {act_id}")

    def _log(self, message: str):
        logger.info(message)

    # =========================================================================
    # Wallet
    # =========================================================================

    @property
    def gold(self) -> int:
        return self.run_state.total_gold

    def add_gold(self, amount: int) -> None:
        self.run_state = run_ops.add_gold(self.run_state, amount)

    def spend_gold(self, amount: int) -> bool:
        updated = run_ops.spend_gold(self.run_state, amount)
        if updated is None:
            return False
        self.run_state = updated
        return True

    # =========================================================================
    # Map navigation
    # =========================================================================

    def get_available_nodes(self) -> List[MapNode]:
        if self.phase != GamePhase.MAP_NAVIGATION:
            return []
        return self.run_state.available_nodes

    def get_current_node(self) -> Optional[MapNode]:
        return self.run_state.current_node

    def select_node(self, node_id: str) -> bool:
        """Move to an available node and enter its room."""
        if self.phase != GamePhase.MAP_NAVIGATION:
            return False
        if node_id not in {n.id for n in self.run_state.available_nodes}:
            return False

        self.run_state = run_ops.select_node(self.run_state, node_id)
        self._enter_room(self.run_state.current_node)
        return True

    def display_map(self) -> str:
        game_map = self.run_state.current_map
        return map_to_string(game_map) if game_map else ""

    # =========================================================================
    # Room entry handlers
    # =========================================================================

    def _enter_room(self, node: MapNode):
        node_type = node.node_type
        if node_type.is_battle:
            self._enter_combat(node)
        elif node_type == NodeType.SHOP:
            self._enter_shop()
        elif node_type == NodeType.REST:
            self._log("Arrived at rest site")
            self.phase = GamePhase.REST
        elif node_type == NodeType.TREASURE:
            self._log("Found treasure")
            self.phase = GamePhase.TREASURE
        elif node_type == NodeType.EVENT:
            self._log("Entered event")
            self.phase = GamePhase.EVENT
        else:
            # Start node: nothing to resolve
            self.complete_room()

    def _enter_combat(self, node: MapNode):
        template = get_enemy_template(node.enemy_id)
        self._log(f"Battle ({node.node_type.value}) against {template.name}")

        config = replace(self.player_config, hp=self.hp, max_hp=self.max_hp)
        player = create_player(self.rng, config, self.collection.get_deck_cards())
        self.combat = CombatEngine.start(self.rng, self.game_config, enemy=template, player=player)
        self.phase = GamePhase.COMBAT

    def _enter_shop(self):
        items = generate_shop_items(self.run_state.current_act, self.rng)
        self.collection = open_shop(self.collection, items)
        self._log(f"Entered shop with {len(items)} items, gold {self.gold}")
        for item in items:
            sale = f" (-{item.discount}%)" if item.discount else ""
            self._log(f"  - {item.card.name} ({item.card.rarity.value}): {item.price}g{sale}")
        self.phase = GamePhase.SHOP

    # =========================================================================
    # Combat
    # =========================================================================

    def play_card_at(self, hand_index: int) -> bool:
        if self.phase != GamePhase.COMBAT or self.combat is None:
            return False
        hand = self.combat.state.player.hand
        if not 0 <= hand_index < len(hand):
            return False
        card = hand[hand_index]
        if not self.combat.play_card(card):
            return False
        self.collection = increment_card_usage(self.collection, card.id)
        self._finish_combat_if_over()
        return True

    def end_turn(self) -> None:
        if self.phase != GamePhase.COMBAT or self.combat is None:
            return
        self.combat.end_turn()
        self._finish_combat_if_over()

    def fight(self, policy: CardPolicy = greedy_policy, max_rounds: int = 100) -> Optional[BattleResult]:
        """Play out the current battle with a card policy."""
        engine = self.combat
        if self.phase != GamePhase.COMBAT or engine is None:
            return None

        while self.phase == GamePhase.COMBAT and engine.state.round <= max_rounds:
            card = policy(engine.state)
            if card is not None and self.play_card_at(engine.state.player.hand.index(card)):
                continue
            self.end_turn()

        if self.phase == GamePhase.COMBAT:
            # Round cap reached: treat as a loss
            self._end_combat(engine.get_result())
        return self.battle_results[-1]

    def _finish_combat_if_over(self):
        if self.combat is not None and self.combat.is_over:
            self._end_combat(self.combat.get_result())

    def _end_combat(self, result: BattleResult):
        self.battle_results.append(result)
        self.combat = None

        if not result.victory:
            self._log(f"Defeated by {result.enemy_id} in round {result.rounds}")
            self.hp = 0
            self._end_run(won=False)
            return

        self.hp = result.player_hp
        node = self.run_state.current_node
        if node.reward is not None and node.reward.max_hp_bonus:
            self.max_hp += node.reward.max_hp_bonus
            self.hp += node.reward.max_hp_bonus
        self._log(f"Defeated {result.enemy_id} in {result.rounds} rounds, hp {self.hp}/{self.max_hp}")
        self.complete_room()

    # =========================================================================
    # Shop
    # =========================================================================

    def buy(self, item_id: str) -> ShopResult:
        result = buy_card(self.collection, item_id, self.gold, self.spend_gold)
        self.collection = result.collection
        return result

    def sell(self, card_id: str) -> ShopResult:
        result = sell_card(self.collection, card_id, self.add_gold)
        self.collection = result.collection
        return result

    def refresh(self) -> ShopResult:
        act_id = self.run_state.current_act
        result = refresh_shop(
            self.collection,
            lambda: generate_shop_items(act_id, self.rng),
            self.gold,
            self.spend_gold,
        )
        self.collection = result.collection
        return result

    def leave_shop(self) -> None:
        if self.phase != GamePhase.SHOP:
            return
        self.collection = close_shop(self.collection)
        self.complete_room()

    # =========================================================================
    # Rest / event / treasure
    # =========================================================================

    def rest(self) -> int:
        """Heal at a rest node and leave it. Returns hp restored."""
        if self.phase != GamePhase.REST:
            return 0
        node = self.run_state.current_node
        percent = node.reward.healing if node.reward and node.reward.healing else 0
        healed = calculate_rest_healing(self.hp, self.max_hp, percent)
        self.hp += healed
        self._log(f"Rested: healed {healed} hp ({self.hp}/{self.max_hp})")
        self.complete_room()
        return healed

    def complete_room(self) -> None:
        """Complete the current node (collecting its gold) and return to the map."""
        node = self.run_state.current_node
        if node is None:
            return

        self.run_state = run_ops.complete_node(self.run_state)
        self.decision_log.append(DecisionLogEntry(
            act=self.run_state.current_act,
            node_id=node.id,
            node_type=node.node_type,
            gold_after=self.gold,
            hp_after=self.hp,
        ))
        self.phase = GamePhase.MAP_NAVIGATION

        if self.run_state.current_map.boss_defeated:
            self._advance_act()

    def _advance_act(self):
        before = self.run_state.current_act
        self.run_state = run_ops.advance_to_next_act(self.run_state, self.rng, self.map_config)
        if self.run_state.current_act == before:
            self._end_run(won=True)
        else:
            self._log(f"Entering act {self.run_state.current_act}")

    def _end_run(self, won: bool):
        self.game_over = True
        self.game_won = won
        self.phase = GamePhase.RUN_COMPLETE
        self._log("Run won!" if won else "Run lost")

    # =========================================================================
    # Autoplay
    # =========================================================================

    def step(self, policy: CardPolicy = greedy_policy) -> None:
        """Advance the run by one room using simple choices."""
        if self.phase == GamePhase.MAP_NAVIGATION:
            nodes = self.get_available_nodes()
            if not nodes:
                self._end_run(won=False)
                return
            self.select_node(self.rng.choice(nodes).id)
        elif self.phase == GamePhase.COMBAT:
            self.fight(policy)
        elif self.phase == GamePhase.SHOP:
            affordable = get_affordable_items(self.collection, self.gold)
            if affordable:
                self.buy(min(affordable, key=lambda i: i.price).id)
            self.leave_shop()
        elif self.phase == GamePhase.REST:
            self.rest()
        elif self.phase in (GamePhase.EVENT, GamePhase.TREASURE):
            self.complete_room()

    def run(self, policy: CardPolicy = greedy_policy, max_steps: int = 500) -> Dict[str, Any]:
        """Play until the run ends (or max_steps rooms); returns statistics."""
        steps = 0
        while not self.game_over and steps < max_steps:
            self.step(policy)
            steps += 1
        return self.get_run_statistics()

    def get_run_statistics(self) -> Dict[str, Any]:
        return {
            "seed": self.seed_string,
            "act": self.run_state.current_act,
            "game_over": self.game_over,
            "game_won": self.game_won,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "gold": self.gold,
            "nodes_visited": len(self.decision_log),
            "battles": len(self.battle_results),
            "battles_won": sum(1 for r in self.battle_results if r.victory),
            "deck_size": len(self.collection.current_deck),
        }
