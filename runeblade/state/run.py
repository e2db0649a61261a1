"""
Run State - Progress through the acts of one run.

Tracks:
1. Which act the player is in, and every act map generated so far
2. Which acts have been unlocked
3. The gold wallet shared by rewards and the shop

The RunState is immutable; functions return updated copies. Map
generation draws from the Random handle passed in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from ..content.acts import get_act
from ..generation.map import (
    GameMap,
    MapGenerationConfig,
    MapNode,
    complete_current_node,
    generate_map,
    get_available_nodes,
    get_current_node,
    move_to_node,
)
from .rng import Random

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunState:
    current_act: int = 1
    maps: Tuple[GameMap, ...] = ()
    unlocked_acts: Tuple[int, ...] = (1,)
    total_gold: int = 0

    @property
    def current_map(self) -> Optional[GameMap]:
        for game_map in self.maps:
            if game_map.act == self.current_act:
                return game_map
        return None

    @property
    def current_node(self) -> Optional[MapNode]:
        game_map = self.current_map
        return get_current_node(game_map) if game_map else None

    @property
    def available_nodes(self) -> List[MapNode]:
        game_map = self.current_map
        return get_available_nodes(game_map) if game_map else []


def _with_map(run: RunState, updated: GameMap) -> RunState:
    maps = tuple(updated if m.id == updated.id else m for m in run.maps)
    return replace(run, maps=maps)


def start_new_run(rng: Random, act_id: int = 1, config: Optional[MapGenerationConfig] = None) -> RunState:
    """
    Begin a run at `act_id` with an empty wallet.

    Raises:
        KeyError: if the act does not exist
    """
    act = get_act(act_id)
    if act is None:
        raise KeyError(f"Unknown act: {act_id}")

    logger.info("Starting run at act %d (%s)", act.id, act.name)
    return RunState(
        current_act=act_id,
        maps=(generate_map(act, rng, config),),
        unlocked_acts=tuple(sorted({1, act_id})),
        total_gold=0,
    )


def select_node(run: RunState, node_id: str) -> RunState:
    """Move to a node of the current map (ignored when not available)."""
    game_map = run.current_map
    if game_map is None:
        return run
    return _with_map(run, move_to_node(game_map, node_id))


def complete_node(run: RunState) -> RunState:
    """Collect the current node's gold, then mark it completed."""
    game_map = run.current_map
    if game_map is None:
        return run

    node = get_current_node(game_map)
    if node is not None and node.reward is not None and node.reward.gold:
        run = add_gold(run, node.reward.gold)
    return _with_map(run, complete_current_node(game_map))


def advance_to_next_act(run: RunState, rng: Random, config: Optional[MapGenerationConfig] = None) -> RunState:
    """Generate the next act's map and move there; no-op after the last act."""
    next_id = run.current_act + 1
    act = get_act(next_id)
    if act is None:
        logger.info("No act after %d, run complete", run.current_act)
        return run

    unlocked = run.unlocked_acts if next_id in run.unlocked_acts else run.unlocked_acts + (next_id,)
    logger.info("Advancing to act %d (%s)", act.id, act.name)
    return replace(
        run,
        current_act=next_id,
        maps=run.maps + (generate_map(act, rng, config),),
        unlocked_acts=unlocked,
    )


def add_gold(run: RunState, amount: int) -> RunState:
    return replace(run, total_gold=run.total_gold + amount)


def spend_gold(run: RunState, amount: int) -> Optional[RunState]:
    """Wallet after paying `amount`, or None when the player cannot afford it."""
    if run.total_gold < amount:
        return None
    return replace(run, total_gold=run.total_gold - amount)
