#!/usr/bin/env python3
"""
Self-play simulation for the deduction agent.

Usage:
    python scripts/simulate.py                                   # Defaults
    python scripts/simulate.py --config config/quick_test.yaml   # Quick run
    python scripts/simulate.py --games 500 --players 3 --seed 7
    python scripts/simulate.py --single --seed 42 --log-level DEBUG  # One game, full dump
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.agent.player import DeductionPlayer
from src.evaluation.simulation import run_simulations
from src.game.cards import Variant
from src.game.rules import HanabiGame
from src.shared.config_loader import load_config


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Run self-play games with the deduction agent")

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML config file (default: built-in defaults)",
    )
    parser.add_argument("--games", "-n", type=int, default=None, help="Number of games")
    parser.add_argument("--players", "-p", type=int, default=None, help="Seats per game")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Worker processes")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--single",
        action="store_true",
        help="Play one game and dump every move (use with --log-level DEBUG)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override system.log_level",
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Hide the progress bar")

    return parser.parse_args()


def main():
    args = parse_args()

    overrides = {}
    if args.games is not None:
        overrides["simulation__num_games"] = args.games
    if args.players is not None:
        overrides["simulation__num_players"] = args.players
    if args.workers is not None:
        overrides["simulation__num_workers"] = args.workers
    if args.seed is not None:
        overrides["system__seed"] = args.seed
    if args.log_level is not None:
        overrides["system__log_level"] = args.log_level
    if args.quiet:
        overrides["simulation__show_progress"] = False

    try:
        config = load_config(args.config, **overrides)
    except (FileNotFoundError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.system.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.single:
        variant = Variant.from_config(config.rules)
        players = [
            DeductionPlayer.from_config(config) for _ in range(config.simulation.num_players)
        ]
        game = HanabiGame(players, variant=variant, seed=config.system.seed, debug=True)
        score = game.run()
        print(f"Game ended ({game.phase}) with score {score}/{variant.max_score}")
        return 0

    summary = run_simulations(config)
    print(summary)
    print(f"Score histogram: {summary.histogram}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
