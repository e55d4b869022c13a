"""
Offline arena XP simulation.

Plays every wave of an arena through the same allocator the live game uses,
but drains each wave's budget in one go: no pacing, no population caps, no
stress pauses. Averaging many seeded runs gives the expected XP per arena,
which the live game uses to pre-award levels when a run starts past arena 1.
"""

import json
import math
import random
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional

from engine.error_handler import logger
from settings import DEFAULT_SIM_SAMPLES, DEFAULT_SIM_SEED
from systems.balance import BalanceStore
from systems.enemies import EnemyArchetype
from systems.progression import ArenaXpReward, calculate_level_progression
from .allocator import ThreatBudgetAllocator
from .arenas import get_arena_config, get_arena_ids

BOSS_XP_BASE = 15
BOSS_XP_PER_ARENA = 5
SEED_STRIDE_PER_ARENA = 1000


def boss_xp(arena: int) -> int:
    return BOSS_XP_BASE + arena * BOSS_XP_PER_ARENA


def arena_seed(seed: int, arena: int, sample: int) -> int:
    """Seed for one sample run; distinct per (arena, sample) for a given base seed."""
    return seed + arena * SEED_STRIDE_PER_ARENA + sample


def simulate_wave(allocator: ThreatBudgetAllocator, arena: int, wave: int) -> int:
    """Drain one wave's budget and return the XP it would award."""
    state = allocator.start_wave(arena, wave)
    allocator.drain(state)
    return state.xp_awarded


def simulate_arena(
    arena: int,
    rng: random.Random,
    catalog: Optional[Dict[str, EnemyArchetype]] = None,
    balance: Optional[BalanceStore] = None,
) -> int:
    """Total XP for one full run of an arena (every wave, then the boss)."""
    allocator = ThreatBudgetAllocator(catalog=catalog, balance=balance, rng=rng)
    total = 0
    for wave in range(1, get_arena_config(arena).waves + 1):
        total += simulate_wave(allocator, arena, wave)
    return total + boss_xp(arena)


def average_arena_xp(
    arena: int,
    samples: int = DEFAULT_SIM_SAMPLES,
    seed: int = DEFAULT_SIM_SEED,
    catalog: Optional[Dict[str, EnemyArchetype]] = None,
    balance: Optional[BalanceStore] = None,
) -> int:
    """Mean XP over `samples` seeded runs, rounded half up."""
    if samples < 1:
        raise ValueError(f"samples must be >= 1, got {samples}")
    total = sum(
        simulate_arena(arena, random.Random(arena_seed(seed, arena, i)), catalog, balance)
        for i in range(samples)
    )
    return math.floor(total / samples + 0.5)


def run_simulation(
    samples: int = DEFAULT_SIM_SAMPLES,
    seed: int = DEFAULT_SIM_SEED,
    arenas: Optional[Iterable[int]] = None,
    catalog: Optional[Dict[str, EnemyArchetype]] = None,
    balance: Optional[BalanceStore] = None,
) -> Dict[int, ArenaXpReward]:
    """Expected XP and level progression for each arena."""
    arena_ids = list(arenas) if arenas is not None else get_arena_ids()
    results: Dict[int, ArenaXpReward] = {}
    for arena in arena_ids:
        avg = average_arena_xp(arena, samples, seed, catalog, balance)
        results[arena] = calculate_level_progression(avg)
        logger.info(
            f"Arena {arena}: avg XP {avg} -> level {results[arena].final_level} "
            f"({samples} samples, seed {seed})"
        )
    return results


def write_xp_table(
    results: Dict[int, ArenaXpReward],
    path: Path,
    samples: int,
    seed: int,
) -> Path:
    """Write the table read by systems.progression.load_arena_xp_rewards."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "generated_by": "tools/calculate_arena_xp.py",
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "samples": samples,
        "seed": seed,
        "arenas": {str(arena): reward.to_dict() for arena, reward in sorted(results.items())},
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
        f.write("\n")
    return path
