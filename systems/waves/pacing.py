"""
Live spawn pacing.

All durations are in frames (60 per second). The orchestrator reads these on
every tick; the offline simulator ignores pacing entirely.
"""

import math
from typing import Any, Dict, Optional

from systems.balance import BalanceStore, tuned_value
from .types import ArenaConfig, WaveModifier, WaveType


WAVE_CONFIG: Dict[str, Dict[str, float]] = {
    "lesson": {"interval": 90, "burst_chance": 0.10},
    "exam": {"interval": 45, "burst_chance": 0.30},
    "integration": {
        "interval_base": 80,
        "interval_min": 40,
        "interval_step": 2,
        "burst_chance_base": 0.15,
        "burst_chance_step": 0.02,
        "burst_chance_max": 0.35,
    },
}

PACING_CONFIG: Dict[str, Any] = {
    "stress_pause_threshold": 12,   # live enemies at which spawning pauses
    "micro_breather_interval": 8,   # spawns between micro-breathers
    "micro_breather_duration": 120,  # frames
}

# Picks on a successful burst roll: BURST_PICKS_MIN + floor(rand * BURST_PICKS_RANGE)
BURST_PICKS_MIN = 2
BURST_PICKS_RANGE = 2

CORRIDOR_BURST_MULT = 0.5


def get_spawn_interval(
    wave_type: WaveType,
    wave: int,
    modifier: Optional[WaveModifier] = None,
) -> float:
    """Frames that must pass between spawn attempts."""
    if wave_type == "integration":
        cfg = WAVE_CONFIG["integration"]
        interval = max(cfg["interval_min"], cfg["interval_base"] - wave * cfg["interval_step"])
    else:
        interval = WAVE_CONFIG[wave_type]["interval"]

    if modifier is not None:
        interval *= modifier.interval_mult
    return interval


def get_burst_chance(
    wave_type: WaveType,
    wave: int,
    arena_cfg: ArenaConfig,
    modifier: Optional[WaveModifier] = None,
) -> float:
    if modifier is not None and modifier.no_burst:
        return 0.0

    if wave_type == "integration":
        cfg = WAVE_CONFIG["integration"]
        chance = min(cfg["burst_chance_max"], cfg["burst_chance_base"] + wave * cfg["burst_chance_step"])
    else:
        chance = WAVE_CONFIG[wave_type]["burst_chance"]

    if arena_cfg.corridor_constrained:
        chance *= CORRIDOR_BURST_MULT
    return chance


def get_pacing_value(key: str, balance: Optional[BalanceStore] = None) -> int:
    """PACING_CONFIG entry with any tuner override applied."""
    return int(tuned_value(balance, f"waves.pacing.{key}", PACING_CONFIG[key]))


def roll_burst_picks(rng, burst_chance: float) -> int:
    """How many allocator picks this spawn attempt makes (1, or 2-3 on a burst)."""
    if burst_chance <= 0 or rng.random() >= burst_chance:
        return 1
    return BURST_PICKS_MIN + math.floor(rng.random() * BURST_PICKS_RANGE)
