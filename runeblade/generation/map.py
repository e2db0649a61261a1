"""
Map Generation - Layered encounter graph for one act.

Layout:
- Rows 0..N-1 where N is the act's node_count (or config.rows)
- Row 0 holds the single START node, row N-1 the single BOSS node
- Row N-2 (just before the boss) holds 2-3 nodes
- Every other row holds act.nodes_per_row.min..max nodes

Edges only run from row r to row r+1. Every node after the start has at
least one incoming edge and every node before the boss at least one
outgoing edge, so the boss is reachable from the start.

Node positions are percentages of the map area (x left to right, y top to
bottom with the start at the bottom) and also drive which nodes connect.

Usage:
    rng = Random(seed)
    game_map = MapGenerator(rng).generate(get_act(1))
    print(map_to_string(game_map))
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..content.acts import Act, RowRange
from ..state.rng import Random

logger = logging.getLogger(__name__)


class NodeType(Enum):
    """Encounter types on the map."""
    START = "start"
    ENEMY = "enemy"
    ELITE = "elite"
    BOSS = "boss"
    REST = "rest"
    SHOP = "shop"
    EVENT = "event"
    TREASURE = "treasure"

    @property
    def is_battle(self) -> bool:
        return self in (NodeType.ENEMY, NodeType.ELITE, NodeType.BOSS)


class NodeStatus(Enum):
    LOCKED = "locked"
    AVAILABLE = "available"
    COMPLETED = "completed"
    CURRENT = "current"


NODE_SYMBOLS = {
    NodeType.START: "S",
    NodeType.ENEMY: "M",
    NodeType.ELITE: "E",
    NodeType.BOSS: "B",
    NodeType.REST: "R",
    NodeType.SHOP: "$",
    NodeType.EVENT: "?",
    NodeType.TREASURE: "T",
}


@dataclass(frozen=True)
class MapReward:
    """Loot granted when a node is completed. Unset fields grant nothing."""
    gold: Optional[int] = None
    card_choices: Optional[int] = None
    healing: Optional[int] = None  # Percent of max hp
    max_hp_bonus: Optional[int] = None


@dataclass(frozen=True)
class MapNode:
    """A node on the act map."""
    id: str
    node_type: NodeType
    row: int
    column: int
    x: float
    y: float
    connections: Tuple[str, ...] = ()
    status: NodeStatus = NodeStatus.LOCKED
    enemy_id: Optional[str] = None
    reward: Optional[MapReward] = None

    @property
    def symbol(self) -> str:
        return NODE_SYMBOLS[self.node_type]


@dataclass(frozen=True)
class MapPath:
    """Directed edge from a node to one in the next row."""
    source: str
    target: str


@dataclass(frozen=True)
class GameMap:
    """A generated act map plus the player's progress through it."""
    id: str
    name: str
    act: int
    nodes: Tuple[MapNode, ...]
    paths: Tuple[MapPath, ...]
    current_node_id: Optional[str] = None
    completed_node_ids: Tuple[str, ...] = ()
    boss_defeated: bool = False

    @property
    def rows(self) -> int:
        return max(n.row for n in self.nodes) + 1

    def row_nodes(self, row: int) -> List[MapNode]:
        return [n for n in self.nodes if n.row == row]


# Encounter weights used by determine_encounter_type
DEFAULT_ENCOUNTER_WEIGHTS: Dict[NodeType, int] = {
    NodeType.ENEMY: 50,
    NodeType.ELITE: 10,
    NodeType.REST: 12,
    NodeType.SHOP: 8,
    NodeType.EVENT: 15,
    NodeType.TREASURE: 5,
}

# Max x distance (percent) for two nodes in adjacent rows to connect
CONNECT_DISTANCE = 40

PRE_BOSS_ROW = RowRange(2, 3)


@dataclass(frozen=True)
class MapGenerationConfig:
    """Configuration for map generation."""
    rows: Optional[int] = None  # Defaults to act.node_count
    nodes_per_row: Optional[RowRange] = None  # Defaults to act.nodes_per_row
    encounter_weights: Dict[NodeType, int] = field(default_factory=lambda: dict(DEFAULT_ENCOUNTER_WEIGHTS))
    elite_min_row: int = 2
    rest_min_row: int = 2
    guaranteed_shop: bool = True

    def __post_init__(self):
        if self.rows is not None and self.rows < 2:
            raise ValueError("a map needs at least a start row and a boss row")


# =============================================================================
# Position helpers
# =============================================================================

def calculate_node_x(column: int, total_in_row: int) -> float:
    """Horizontal position in percent: centered for one node, else spread 10..90."""
    if total_in_row == 1:
        return 50
    return 10 + column * (80 / (total_in_row - 1))


def calculate_node_y(row: int, total_rows: int) -> float:
    """Vertical position in percent: start at 90, boss at 10."""
    return 90 - (row / (total_rows - 1)) * 80


def _nearest(nodes: List[MapNode], x: float) -> MapNode:
    # Ties go to the later node
    best = nodes[0]
    for node in nodes[1:]:
        if not abs(best.x - x) < abs(node.x - x):
            best = node
    return best


# =============================================================================
# Generator
# =============================================================================

class MapGenerator:
    """
    Builds a GameMap for an act.

    Usage:
        generator = MapGenerator(rng, config)
        game_map = generator.generate(act)
    """

    def __init__(self, rng: Random, config: Optional[MapGenerationConfig] = None):
        """
        Initialize map generator.

        Args:
            rng: Random instance; every roll for this map comes from it
            config: Generation configuration
        """
        self.rng = rng
        self.config = config or MapGenerationConfig()

    def generate(self, act: Act) -> GameMap:
        """
        Generate a complete act map.

        Returns:
            GameMap with the start node available and everything else locked
        """
        rows = self.config.rows or act.node_count
        per_row = self.config.nodes_per_row or act.nodes_per_row

        nodes: List[MapNode] = []
        edges: Dict[str, List[str]] = {}
        prev_row: List[MapNode] = []

        for row in range(rows):
            count = self._row_size(row, rows, per_row)
            row_nodes = [self._create_node(act, row, col, count, rows) for col in range(count)]
            for node in row_nodes:
                edges[node.id] = []
            if row > 0:
                self.connect_rows(prev_row, row_nodes, edges)
            nodes.extend(row_nodes)
            prev_row = row_nodes

        if self.config.guaranteed_shop:
            nodes = self.ensure_shop_exists(nodes, rows)

        nodes = [replace(n, connections=tuple(edges[n.id])) for n in nodes]
        paths = tuple(MapPath(n.id, target) for n in nodes for target in n.connections)

        logger.debug("Generated act %d map: %d nodes, %d paths", act.id, len(nodes), len(paths))
        return GameMap(
            id=f"act-{act.id}",
            name=act.name,
            act=act.id,
            nodes=tuple(nodes),
            paths=paths,
        )

    def _row_size(self, row: int, rows: int, per_row: RowRange) -> int:
        if row == 0 or row == rows - 1:
            return 1
        if row == rows - 2:
            return self.rng.random_int_range(PRE_BOSS_ROW.min, PRE_BOSS_ROW.max)
        return self.rng.random_int_range(per_row.min, per_row.max)

    def _create_node(self, act: Act, row: int, col: int, count: int, rows: int) -> MapNode:
        node_type = self.determine_encounter_type(row, rows)
        return MapNode(
            id=f"a{act.id}-r{row}-c{col}",
            node_type=node_type,
            row=row,
            column=col,
            x=calculate_node_x(col, count),
            y=calculate_node_y(row, rows),
            status=NodeStatus.AVAILABLE if row == 0 else NodeStatus.LOCKED,
            enemy_id=self.enemy_id_for(node_type, act),
            reward=self.generate_reward(node_type, row, rows),
        )

    def determine_encounter_type(self, row: int, rows: int) -> NodeType:
        """Pick a node type; elite, rest and shop unlock at their minimum rows."""
        if row == 0:
            return NodeType.START
        if row == rows - 1:
            return NodeType.BOSS

        weights = self.config.encounter_weights
        candidates = [NodeType.ENEMY, NodeType.EVENT, NodeType.TREASURE]
        if row >= self.config.elite_min_row:
            candidates.append(NodeType.ELITE)
        if row >= self.config.rest_min_row:
            candidates.append(NodeType.REST)
        candidates.append(NodeType.SHOP)

        return self.rng.weighted_choice(candidates, [weights.get(t, 0) for t in candidates])

    def enemy_id_for(self, node_type: NodeType, act: Act) -> Optional[str]:
        if node_type == NodeType.ENEMY:
            return self.rng.choice(act.enemy_pool)
        if node_type == NodeType.ELITE:
            return self.rng.choice(act.elite_pool)
        if node_type == NodeType.BOSS:
            return act.boss_id
        return None

    def generate_reward(self, node_type: NodeType, row: int, rows: int) -> Optional[MapReward]:
        """
        Loot for a node; later rows pay more gold for regular and elite fights.

        Returns:
            MapReward, or None for start, shop and event nodes
        """
        progress = row / rows
        rng = self.rng

        if node_type == NodeType.ENEMY:
            return MapReward(gold=rng.random_int_range(10, 20) + math.floor(progress * 10), card_choices=3)
        if node_type == NodeType.ELITE:
            return MapReward(gold=rng.random_int_range(25, 40) + math.floor(progress * 15), card_choices=3)
        if node_type == NodeType.BOSS:
            return MapReward(gold=rng.random_int_range(50, 80), card_choices=3, max_hp_bonus=5)
        if node_type == NodeType.TREASURE:
            return MapReward(gold=rng.random_int_range(30, 50), card_choices=1 if rng.random_boolean(0.5) else 0)
        if node_type == NodeType.REST:
            return MapReward(healing=30)
        return None

    def connect_rows(self, prev_row: List[MapNode], current_row: List[MapNode],
                     edges: Dict[str, List[str]]):
        """
        Add edges from prev_row to current_row.

        Each previous node links to 1-2 nodes within CONNECT_DISTANCE (in
        column order), or to the nearest node when none are that close.
        Then every current node still without a parent gets one from its
        nearest previous node.
        """
        for prev in prev_row:
            nearby = [n for n in current_row if abs(n.x - prev.x) <= CONNECT_DISTANCE]
            if not nearby:
                edges[prev.id].append(_nearest(current_row, prev.x).id)
                continue

            count = min(len(nearby), self.rng.random_int_range(1, 2))
            for node in nearby[:count]:
                if node.id not in edges[prev.id]:
                    edges[prev.id].append(node.id)

        for node in current_row:
            if any(node.id in edges[prev.id] for prev in prev_row):
                continue
            closest = _nearest(prev_row, node.x)
            edges[closest.id].append(node.id)

    def ensure_shop_exists(self, nodes: List[MapNode], rows: int) -> List[MapNode]:
        """
        Turn one node into a shop when the map has none.

        Preference order: an enemy on the middle row, an enemy on any
        interior row, then any interior node. Start and boss rows are never
        touched.
        """
        if any(n.node_type == NodeType.SHOP for n in nodes):
            return nodes

        middle = rows // 2
        interior = [n for n in nodes if 0 < n.row < rows - 1]
        tiers = (
            [n for n in interior if n.row == middle and n.node_type == NodeType.ENEMY],
            [n for n in interior if n.node_type == NodeType.ENEMY],
            interior,
        )
        candidates = next((tier for tier in tiers if tier), None)
        if candidates is None:
            logger.debug("Map of %d rows has no interior node to turn into a shop", rows)
            return nodes

        chosen = self.rng.choice(candidates)
        shop = replace(chosen, node_type=NodeType.SHOP, enemy_id=None, reward=None)
        return [shop if n.id == chosen.id else n for n in nodes]


def generate_map(act: Act, rng: Random, config: Optional[MapGenerationConfig] = None) -> GameMap:
    """Generate the map for an act."""
    return MapGenerator(rng, config).generate(act)


# =============================================================================
# Progress transitions
# =============================================================================

def get_node(game_map: GameMap, node_id: str) -> Optional[MapNode]:
    for node in game_map.nodes:
        if node.id == node_id:
            return node
    return None


def get_available_nodes(game_map: GameMap) -> List[MapNode]:
    return [n for n in game_map.nodes if n.status == NodeStatus.AVAILABLE]


def get_current_node(game_map: GameMap) -> Optional[MapNode]:
    if game_map.current_node_id is None:
        return None
    return get_node(game_map, game_map.current_node_id)


def is_map_completed(game_map: GameMap) -> bool:
    return game_map.boss_defeated


def move_to_node(game_map: GameMap, node_id: str) -> GameMap:
    """
    Enter an available node.

    The target becomes CURRENT; every other AVAILABLE or CURRENT node is
    locked. Unknown or unavailable targets leave the map unchanged.
    """
    target = get_node(game_map, node_id)
    if target is None or target.status != NodeStatus.AVAILABLE:
        return game_map

    def update(node: MapNode) -> MapNode:
        if node.id == node_id:
            return replace(node, status=NodeStatus.CURRENT)
        if node.status in (NodeStatus.AVAILABLE, NodeStatus.CURRENT):
            return replace(node, status=NodeStatus.LOCKED)
        return node

    return replace(game_map, nodes=tuple(update(n) for n in game_map.nodes), current_node_id=node_id)


def complete_current_node(game_map: GameMap) -> GameMap:
    """
    Finish the current node and open its successors.

    Does nothing when no node is current.
    """
    current = get_current_node(game_map)
    if current is None:
        return game_map

    def update(node: MapNode) -> MapNode:
        if node.id == current.id:
            return replace(node, status=NodeStatus.COMPLETED)
        if node.id in current.connections:
            return replace(node, status=NodeStatus.AVAILABLE)
        if node.status in (NodeStatus.AVAILABLE, NodeStatus.CURRENT):
            return replace(node, status=NodeStatus.LOCKED)
        return node

    is_boss = current.node_type == NodeType.BOSS
    if is_boss:
        logger.debug("Boss of act %d defeated", game_map.act)
    return replace(
        game_map,
        nodes=tuple(update(n) for n in game_map.nodes),
        current_node_id=None,
        completed_node_ids=game_map.completed_node_ids + (current.id,),
        boss_defeated=game_map.boss_defeated or is_boss,
    )


# =============================================================================
# Rendering
# =============================================================================

_STATUS_BRACKETS = {
    NodeStatus.LOCKED: (" ", " "),
    NodeStatus.AVAILABLE: ("(", ")"),
    NodeStatus.CURRENT: ("[", "]"),
    NodeStatus.COMPLETED: ("<", ">"),
}


def map_to_string(game_map: GameMap, show_connections: bool = True) -> str:
    """
    Convert map to ASCII string representation, boss row on top.

    Node symbols: S start, M enemy, E elite, R rest, $ shop, ? event,
    T treasure, B boss. Brackets mark status: (available) [current]
    <completed>; locked nodes are bare.

    Args:
        game_map: Map to render
        show_connections: Append each row's outgoing edges as column lists

    Returns:
        ASCII string representation of the map
    """
    lines = [f"{game_map.name} (act {game_map.act})"]
    by_id = {n.id: n for n in game_map.nodes}

    for row in range(game_map.rows - 1, -1, -1):
        row_nodes = sorted(game_map.row_nodes(row), key=lambda n: n.column)
        cells = ""
        for node in row_nodes:
            left, right = _STATUS_BRACKETS[node.status]
            cells += f"{left}{node.symbol}{right} "
        line = f"{row:>2} | {cells.rstrip()}"

        if show_connections and row < game_map.rows - 1:
            links = []
            for node in row_nodes:
                targets = ",".join(str(by_id[t].column) for t in node.connections)
                links.append(f"{node.column}->{targets}")
            line = f"{line:<28} {' '.join(links)}"
        lines.append(line)

    return "\n".join(lines)
