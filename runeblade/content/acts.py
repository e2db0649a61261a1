"""
Act definitions.

Each act has its own enemy pool, elite pool and boss, plus the map shape
(row count and nodes per interior row) used by the map generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class RowRange:
    """Inclusive node-count range for interior map rows."""
    min: int
    max: int

    def __post_init__(self):
        if self.min < 1 or self.max < self.min:
            raise ValueError(f"Invalid row range {self.min}..{self.max}")


@dataclass(frozen=True)
class Act:
    """One act of a run."""
    id: int
    name: str
    description: str
    enemy_pool: Tuple[str, ...]
    elite_pool: Tuple[str, ...]
    boss_id: str
    node_count: int  # Number of map rows, start and boss included
    nodes_per_row: RowRange = field(default_factory=lambda: RowRange(2, 4))


ACT_1 = Act(
    id=1,
    name="Shadow Forest",
    description="An ancient forest inhabited by creatures of darkness.",
    enemy_pool=("goblin", "skeleton"),
    elite_pool=("orc",),
    boss_id="dark-knight",
    node_count=7,
    nodes_per_row=RowRange(2, 4),
)

ACT_2 = Act(
    id=2,
    name="Frozen Mountains",
    description="Frozen peaks where warriors and beasts lie in wait.",
    enemy_pool=("orc", "skeleton"),
    elite_pool=("dark-knight",),
    boss_id="dragon",
    node_count=8,
    nodes_per_row=RowRange(2, 4),
)

ACT_3 = Act(
    id=3,
    name="Fortress of Darkness",
    description="The final lair of the mightiest foes.",
    enemy_pool=("dark-knight", "orc"),
    elite_pool=("dragon",),
    boss_id="dragon",
    node_count=9,
    nodes_per_row=RowRange(3, 5),
)

ALL_ACTS: Dict[int, Act] = {act.id: act for act in (ACT_1, ACT_2, ACT_3)}


def get_act(act_id: int) -> Optional[Act]:
    """Act by id, or None past the last act."""
    return ALL_ACTS.get(act_id)
