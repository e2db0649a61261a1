"""
Runeblade - Command Line Interface

CLI for inspecting the simulator's generators and playing out battles and
whole runs from a seed.

Usage:
    runeblade map --seed ABC123 --act 1
    runeblade shop --seed ABC123 --act 2
    runeblade battle --seed ABC123 --enemy orc
    runeblade odds --simulate 2000
    runeblade run --seed ABC123 --json
"""

import argparse
import json
import logging
import sys
from collections import Counter
from typing import Any, Dict, List, Optional

from .calc.odds import (
    calculate_shop_odds,
    chi_square,
    format_odds_table,
    simulate_rarity_counts,
)
from .combat_engine import CombatEngine
from .content.acts import ALL_ACTS, get_act
from .content.enemies import ALL_ENEMIES, TIER_ENEMIES, get_enemy_template
from .game import GameRunner
from .generation.map import generate_map, map_to_string
from .generation.shop import RARITY_ORDER, generate_shop_items
from .state.rng import Random, seed_to_long

logger = logging.getLogger(__name__)


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_seed_info(seed_string: str, numeric_seed: int) -> str:
    """Format seed information header."""
    return f"Seed: {seed_string} (numeric: {numeric_seed})"


def _parse_seed(raw: str):
    seed_string = raw.upper()
    return seed_string, seed_to_long(seed_string)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_map(args) -> int:
    """Generate and display an act map."""
    seed_string, seed = _parse_seed(args.seed)
    act = get_act(args.act)
    game_map = generate_map(act, Random(seed))

    if args.json:
        print(json.dumps({
            "seed": seed_string,
            "act": act.id,
            "nodes": [
                {
                    "id": n.id,
                    "type": n.node_type.value,
                    "row": n.row,
                    "column": n.column,
                    "enemy_id": n.enemy_id,
                    "connections": list(n.connections),
                }
                for n in game_map.nodes
            ],
        }, indent=2))
        return 0

    print(format_seed_info(seed_string, seed))
    print()
    print(map_to_string(game_map))

    print("\nNode Distribution:")
    counts = Counter(n.node_type.value for n in game_map.nodes)
    for node_type, count in sorted(counts.items()):
        print(f"  {node_type}: {count}")
    return 0


def cmd_shop(args) -> int:
    """Generate a shop inventory."""
    seed_string, seed = _parse_seed(args.seed)
    items = generate_shop_items(args.act, Random(seed), count=args.count)

    if args.json:
        print(json.dumps([
            {
                "card": i.card.id,
                "rarity": i.card.rarity.value,
                "price": i.price,
                "original_price": i.original_price,
                "discount": i.discount,
            }
            for i in items
        ], indent=2))
        return 0

    print(format_seed_info(seed_string, seed))
    print(f"Act {args.act} shop:")
    for item in items:
        sale = f" [-{item.discount}%]" if item.discount else ""
        print(f"  {item.card.name:<16} {item.card.rarity.value:<10} {item.price:>4}g{sale}")
    return 0


def cmd_battle(args) -> int:
    """Play one battle with the greedy card policy."""
    seed_string, seed = _parse_seed(args.seed)
    enemy = get_enemy_template(args.enemy) if args.enemy else None
    engine = CombatEngine.start(Random(seed), enemy=enemy, tier=args.tier)
    result = engine.run(max_rounds=args.max_rounds)

    if args.json:
        print(json.dumps({
            "seed": seed_string,
            "victory": result.victory,
            "rounds": result.rounds,
            "player_hp": result.player_hp,
            "enemy_id": result.enemy_id,
            "cards_played": result.cards_played,
        }, indent=2))
        return 0

    print(format_seed_info(seed_string, seed))
    for entry in engine.state.log:
        print(f"  [{entry.log_type.value}] {entry.message}")
    outcome = "Victory" if result.victory else "Defeat"
    print(f"\n{outcome} after {result.rounds} rounds, hp {result.player_hp}, "
          f"{result.cards_played} cards played")
    return 0


def cmd_odds(args) -> int:
    """Show shop rarity odds, optionally checked against simulated shops."""
    act_ids = sorted(ALL_ACTS)
    print(format_odds_table(act_ids))

    if args.simulate:
        _, seed = _parse_seed(args.seed)
        print(f"\nSimulated {args.simulate} shops per act:")
        for act_id in act_ids:
            counts = simulate_rarity_counts(act_id, seed, shops=args.simulate)
            stat = chi_square(counts, calculate_shop_odds(act_id).rarity_probabilities)
            mix = " ".join(f"{r.value}={c}" for r, c in zip(RARITY_ORDER, counts))
            print(f"  act {act_id}: {mix} (chi2 {stat:.1f})")
    return 0


def cmd_run(args) -> int:
    """Play a full run with simple automatic choices."""
    runner = GameRunner(seed=args.seed, act_id=args.act)
    stats: Dict[str, Any] = runner.run(max_steps=args.max_steps)

    if args.json:
        print(json.dumps(stats, indent=2))
        return 0

    print(format_seed_info(runner.seed_string, runner.seed))
    for key, value in stats.items():
        print(f"  {key}: {value}")
    return 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runeblade",
        description="Runeblade - card battle simulator CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s map --seed ABC123 --act 1
  %(prog)s shop --seed ABC123 --act 2
  %(prog)s battle --seed ABC123 --enemy orc
  %(prog)s odds --simulate 2000
  %(prog)s run --seed ABC123
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    act_choices = sorted(ALL_ACTS)

    map_parser = subparsers.add_parser("map", help="Generate and display an act map")
    map_parser.add_argument("--seed", "-s", required=True, help="Seed")
    map_parser.add_argument("--act", type=int, default=1, choices=act_choices, help="Act number")
    map_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    shop_parser = subparsers.add_parser("shop", help="Generate a shop inventory")
    shop_parser.add_argument("--seed", "-s", required=True, help="Seed")
    shop_parser.add_argument("--act", type=int, default=1, help="Act number")
    shop_parser.add_argument("--count", "-n", type=int, default=5, help="Number of items")
    shop_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    battle_parser = subparsers.add_parser("battle", help="Play one battle automatically")
    battle_parser.add_argument("--seed", "-s", required=True, help="Seed")
    battle_parser.add_argument("--enemy", "-e", choices=sorted(ALL_ENEMIES), help="Enemy id")
    battle_parser.add_argument("--tier", default="tier1", choices=sorted(TIER_ENEMIES),
                               help="Enemy tier when no enemy is given")
    battle_parser.add_argument("--max-rounds", type=int, default=100, help="Round cap")
    battle_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    odds_parser = subparsers.add_parser("odds", help="Show shop rarity odds per act")
    odds_parser.add_argument("--simulate", type=int, default=0,
                             help="Also generate this many shops per act and compare")
    odds_parser.add_argument("--seed", "-s", default="ODDS", help="Seed for simulation")

    run_parser = subparsers.add_parser("run", help="Play a full run automatically")
    run_parser.add_argument("--seed", "-s", required=True, help="Seed")
    run_parser.add_argument("--act", type=int, default=1, choices=act_choices, help="Starting act")
    run_parser.add_argument("--max-steps", type=int, default=500, help="Maximum rooms to visit")
    run_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "map": cmd_map,
        "shop": cmd_shop,
        "battle": cmd_battle,
        "odds": cmd_odds,
        "run": cmd_run,
    }

    handler = commands.get(args.command)
    logger.debug("Running %s", args.command)
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
