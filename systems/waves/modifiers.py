"""
Wave modifiers.

A modifier is picked once when a wave starts and stays for the whole wave.
Selection order:
1. Lesson waves (wave 1) never get one.
2. Arena breather waves are forced to "breather".
3. The final wave of arena 3+ is forced to "harbingers".
4. Otherwise roll 0.10 + arena * 0.05 and pick uniformly among the generic ones.
"""

import random
from typing import Dict, Optional, Tuple

from .arenas import get_arena_config
from .types import WaveModifier


WAVE_MODIFIERS: Dict[str, WaveModifier] = {
    "elite": WaveModifier(
        id="elite",
        name="Elite Wave",
        announcement="ELITE WAVE - Tougher enemies, better rewards",
        budget_mult=0.8,
        xp_mult=1.5,
        elite_only=True,
    ),
    "rush": WaveModifier(
        id="rush",
        name="Rush",
        announcement="RUSH - They're coming fast!",
        interval_mult=0.6,
        xp_mult=1.1,
    ),
    "swarm": WaveModifier(
        id="swarm",
        name="Swarm",
        announcement="SWARM - Weak but numerous",
        force_types=("grunt", "rookie", "fast_bouncer"),
        budget_mult=1.25,
        cognitive_max=70,
    ),
    "breather": WaveModifier(
        id="breather",
        name="Breather",
        announcement="BREATHER - Catch your breath",
        budget_mult=0.6,
        interval_mult=1.5,
        cognitive_max=20,
        no_burst=True,
    ),
    "harbingers": WaveModifier(
        id="harbingers",
        name="Harbingers",
        announcement="HARBINGERS - Everything you've learned",
        force_types=("shielded", "pillar_police", "fast_bouncer", "splitter", "teleporter"),
        budget_mult=1.1,
        xp_mult=1.25,
    ),
}

# Candidates for the random roll, in draw order
GENERIC_MODIFIERS: Tuple[str, ...] = ("elite", "rush", "swarm")

BASE_MODIFIER_CHANCE = 0.10
MODIFIER_CHANCE_PER_ARENA = 0.05
HARBINGERS_MIN_ARENA = 3


def get_modifier(modifier_id: Optional[str]) -> Optional[WaveModifier]:
    if modifier_id is None:
        return None
    return WAVE_MODIFIERS.get(modifier_id)


def modifier_chance(arena: int) -> float:
    return BASE_MODIFIER_CHANCE + arena * MODIFIER_CHANCE_PER_ARENA


def select_wave_modifier(
    arena: int,
    wave: int,
    max_waves: int,
    rng: random.Random,
) -> Optional[WaveModifier]:
    """
    Pick the modifier for a wave that is about to start.

    Consumes RNG draws only on the random branch, so forced picks don't shift
    the pool shuffle that follows.
    """
    if wave == 1:
        return None

    arena_cfg = get_arena_config(arena)
    if wave in arena_cfg.breather_waves:
        return WAVE_MODIFIERS["breather"]

    if wave == max_waves and arena >= HARBINGERS_MIN_ARENA:
        return WAVE_MODIFIERS["harbingers"]

    if rng.random() > modifier_chance(arena):
        return None
    return WAVE_MODIFIERS[rng.choice(GENERIC_MODIFIERS)]
