"""
Threat budget configuration.

Every wave gets a pool of threat points to spend on enemies (durability + damage
per unit) and a separate cognitive cap bounding how much mechanical complexity
the player faces at once.

Budget for a wave:
    total = floor(base.total * arena_scale * modifier.budget_mult)
where base is the wave type's budget with any per-arena override applied first.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

from systems.balance import BalanceStore, tuned_value
from .types import WaveBudget, WaveModifier, WaveType


# ---------------------------------------------------------------------------
# Wave budgets
# ---------------------------------------------------------------------------

WAVE_BUDGETS: Dict[str, WaveBudget] = {
    "lesson": WaveBudget(total=500, max_cognitive=50),
    "integration": WaveBudget(total=800, max_cognitive=45),
    "exam": WaveBudget(total=1200, max_cognitive=70),
}

# Multiplier applied after any per-arena override
ARENA_SCALING: Dict[int, float] = {
    1: 1.0,
    2: 1.15,
    3: 1.3,
    4: 1.45,
    5: 1.6,
    6: 1.8,
}

# arena -> wave type -> fields replacing the base budget's
ARENA_BUDGET_OVERRIDES: Dict[int, Dict[str, Dict[str, int]]] = {
    1: {"exam": {"total": 900}},  # boss chase already stretches arena 1
    6: {"lesson": {"total": 700, "max_cognitive": 40}},
}

# ---------------------------------------------------------------------------
# Cognitive limits
# ---------------------------------------------------------------------------

# Distinct archetypes allowed in one wave's pool
MAX_TYPES_PER_WAVE: Dict[int, int] = {
    1: 2,
    2: 3,
    3: 3,
    4: 4,
    5: 4,
    6: 5,
}
DEFAULT_MAX_TYPES_PER_WAVE = 4

# The arena's lesson enemy gets its weight multiplied by this
FEATURED_TYPE_BONUS = 3.0

# ---------------------------------------------------------------------------
# Schooling (same-type groups spawned as one pick)
# ---------------------------------------------------------------------------

SCHOOLING_ENABLED = True
SCHOOL_EXCLUDE_TYPES = frozenset({"shielded", "pillar_police", "splitter", "teleporter"})
SCHOOL_SIZE_MIN = 3
SCHOOL_SIZE_MAX = 6
MIN_SCHOOL_COUNT = 3  # fewer than this affordable -> single unit instead

# "arena<N>" or "default" -> wave -> chance. Untabulated waves use the wave 3 entry.
SCHOOL_CHANCE_BY_WAVE: Dict[str, Dict[int, float]] = {
    "arena1": {1: 0.0, 2: 0.10, 3: 0.20, 4: 0.25, 5: 0.25, 6: 0.30, 7: 0.30},
    "arena4": {1: 0.15, 2: 0.25, 3: 0.30, 4: 0.35},
    "default": {1: 0.05, 2: 0.10, 3: 0.15, 4: 0.20},
}

# XP bonus per wave index past the first
WAVE_XP_BONUS_STEP = 0.15


def get_wave_type(wave: int, max_waves: int) -> WaveType:
    """Wave 1 is the lesson, the final wave is the exam, the rest integrate."""
    if wave == 1:
        return "lesson"
    if wave == max_waves:
        return "exam"
    return "integration"


def get_base_wave_budget(
    arena: int,
    wave_type: WaveType,
    balance: Optional[BalanceStore] = None,
) -> WaveBudget:
    """
    Base budget for a wave type in an arena, before arena scaling.

    Tuner overrides replace the shared table value; per-arena overrides win over both.
    """
    table = WAVE_BUDGETS[wave_type]
    total = tuned_value(balance, f"waves.budget.{wave_type}_total", table.total)
    max_cognitive = tuned_value(balance, f"waves.budget.{wave_type}_max_cognitive", table.max_cognitive)

    override = ARENA_BUDGET_OVERRIDES.get(arena, {}).get(wave_type, {})
    return WaveBudget(
        total=override.get("total", total),
        max_cognitive=override.get("max_cognitive", max_cognitive),
    )


def get_arena_scale(arena: int) -> float:
    return ARENA_SCALING.get(arena, 1.0)


def compute_wave_budget(
    arena: int,
    wave_type: WaveType,
    modifier: Optional[WaveModifier] = None,
    balance: Optional[BalanceStore] = None,
) -> Tuple[int, int]:
    """
    Returns (budget_total, cognitive_max) for a wave about to start.
    """
    base = get_base_wave_budget(arena, wave_type, balance)
    budget_mult = modifier.budget_mult if modifier is not None else 1.0
    total = math.floor(base.total * get_arena_scale(arena) * budget_mult)

    cognitive_max = base.max_cognitive
    if modifier is not None and modifier.cognitive_max is not None:
        cognitive_max = modifier.cognitive_max
    return total, int(cognitive_max)


def get_max_types_per_wave(arena: int) -> int:
    return MAX_TYPES_PER_WAVE.get(arena, DEFAULT_MAX_TYPES_PER_WAVE)


def get_featured_type_bonus(balance: Optional[BalanceStore] = None) -> float:
    return tuned_value(balance, "waves.featured_type_bonus", FEATURED_TYPE_BONUS)


def get_school_chance(arena: int, wave: int) -> float:
    """
    Chance that a school-eligible pick becomes a school.

    Falls back to the arena's wave-3 entry when the exact wave isn't tabulated.
    """
    table = SCHOOL_CHANCE_BY_WAVE.get(f"arena{arena}", SCHOOL_CHANCE_BY_WAVE["default"])
    if wave in table:
        return table[wave]
    return table.get(3, 0.0)


def can_school(enemy_type: str) -> bool:
    if not SCHOOLING_ENABLED:
        return False
    return enemy_type not in SCHOOL_EXCLUDE_TYPES


def wave_progress_bonus(wave: int) -> float:
    return 1 + (wave - 1) * WAVE_XP_BONUS_STEP


def xp_per_enemy(xp_value: float, xp_mult: float, wave: int) -> int:
    """
    XP awarded for one unit:
        floor(floor(xp_value * xp_mult) * wave_progress_bonus(wave))
    """
    base_xp = math.floor(xp_value * xp_mult)
    return math.floor(base_xp * wave_progress_bonus(wave))
