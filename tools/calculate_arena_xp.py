#!/usr/bin/env python3
"""
Offline arena XP calculator.

Runs the wave allocator many times per arena with seeded RNGs, averages the XP
earned, and writes the level progression table the game uses when a run starts
past arena 1.

Usage:
    # Defaults: 250 samples per arena, seed 1337, output to data/arena_xp.json
    python tools/calculate_arena_xp.py

    # Quick check with fewer samples
    python tools/calculate_arena_xp.py --samples 50 --seed 7 --output /tmp/arena_xp.json

    # Include the tuner's balance overrides
    python tools/calculate_arena_xp.py --balance config/balance_overrides.json
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def build_parser() -> argparse.ArgumentParser:
    from engine.config import DEFAULT_ARENA_XP_PATH
    from settings import DEFAULT_SIM_SAMPLES, DEFAULT_SIM_SEED

    parser = argparse.ArgumentParser(description="Simulate arena XP and write the level progression table")
    parser.add_argument(
        "--samples",
        type=int,
        default=DEFAULT_SIM_SAMPLES,
        help=f"Simulated runs per arena (default: {DEFAULT_SIM_SAMPLES})"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SIM_SEED,
        help=f"Base RNG seed (default: {DEFAULT_SIM_SEED})"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=str(DEFAULT_ARENA_XP_PATH),
        help="Where to write the JSON table"
    )
    parser.add_argument(
        "--balance",
        type=str,
        default=None,
        help="Balance override file to apply before simulating"
    )
    parser.add_argument(
        "--arena",
        type=int,
        action="append",
        default=None,
        help="Only simulate this arena (repeatable)"
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    from engine.error_handler import logger
    from systems.balance import BalanceStore
    from systems.waves import run_simulation, write_xp_table
    from systems.waves.validation import require_valid_config

    args = build_parser().parse_args(argv)
    if args.samples < 1:
        raise ValueError(f"--samples must be >= 1, got {args.samples}")

    require_valid_config()

    balance = None
    if args.balance:
        balance = BalanceStore(path=Path(args.balance))
        if not balance.load():
            logger.warning(f"No balance overrides applied from {args.balance}")

    results = run_simulation(samples=args.samples, seed=args.seed, arenas=args.arena, balance=balance)
    path = write_xp_table(results, Path(args.output), samples=args.samples, seed=args.seed)

    for arena, reward in sorted(results.items()):
        print(
            f"Arena {arena}: {reward.total_xp} XP -> level {reward.final_level} "
            f"(+{reward.xp_remainder}/{reward.xp_to_next_level})"
        )
    print(f"Wrote {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        return run(argv)
    except Exception:
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
