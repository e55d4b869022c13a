"""
Arena configuration.

Six themed arenas with tiered wave counts. Arena 1 runs the boss chase:
- Segment 1: waves 1-3, then boss phase 1 (retreats)
- Segment 2: waves 4-5, then boss phase 2 (retreats)
- Segment 3: waves 6-7, then boss phase 3 (final)
"""

from typing import Dict, List

from .types import ArenaConfig, BossChaseConfig


ARENA_CONFIG: Dict[int, ArenaConfig] = {
    1: ArenaConfig(
        id=1,
        name="The Training Grounds",
        waves=7,
        features=("flat", "landmarks"),
        boss_health=1250,
        boss_chase=BossChaseConfig(
            segment_waves={1: 3, 2: 2, 3: 2},
            phase_thresholds={
                1: 833,  # 66% of 1250
                2: 416,  # 33% of 1250
            },
        ),
    ),
    2: ArenaConfig(
        id=2,
        name="Shields & Cover",
        waves=5,
        features=("flat", "pillars"),
        lesson_enemy="shielded",
        boss_health=1600,
    ),
    3: ArenaConfig(
        id=3,
        name="Vertical Loop",
        waves=6,
        features=("flat", "pillars", "vertical", "ramps"),
        lesson_enemy="pillar_police",
        boss_health=2000,
    ),
    4: ArenaConfig(
        id=4,
        name="Platform Gardens",
        waves=8,
        features=("flat", "pillars", "vertical", "platforms", "multi_level"),
        lesson_enemy="fast_bouncer",
        boss_health=2400,
    ),
    5: ArenaConfig(
        id=5,
        name="The Labyrinth",
        waves=8,
        features=("flat", "pillars", "vertical", "platforms", "tunnels"),
        lesson_enemy="splitter",
        corridor_constrained=True,  # tunnels amplify unfair bursts
        boss_health=2800,
    ),
    6: ArenaConfig(
        id=6,
        name="Chaos Realm",
        waves=10,
        features=("flat", "pillars", "vertical", "platforms", "tunnels", "hazards"),
        lesson_enemy="teleporter",
        breather_waves=(3, 6, 9),
        boss_health=3500,
    ),
}

FINAL_ARENA = max(ARENA_CONFIG)


def get_arena_config(arena: int) -> ArenaConfig:
    """Get an arena by number. Numbers past the last arena reuse the last one."""
    return ARENA_CONFIG[min(arena, FINAL_ARENA)]


def get_arena_waves(arena: int) -> int:
    return get_arena_config(arena).waves


def get_arena_ids() -> List[int]:
    return sorted(ARENA_CONFIG)
