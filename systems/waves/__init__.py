"""
Wave system module.

This module provides the threat-budget spawning core: arena and budget tables,
wave modifiers, the per-wave pool builder, the allocator and the offline XP
simulator. Live pacing helpers are exported for the orchestrator.

All public APIs are exported from this module.
"""

from .types import (
    WaveType, WaveBudget, BossChaseConfig, ArenaConfig, WaveModifier,
    SpawnDecision, WaveExecutionState,
)
from .arenas import ARENA_CONFIG, FINAL_ARENA, get_arena_config, get_arena_waves, get_arena_ids
from .threat_budget import (
    WAVE_BUDGETS, ARENA_SCALING,
    get_wave_type, get_base_wave_budget, compute_wave_budget,
    get_max_types_per_wave, get_school_chance, can_school, xp_per_enemy,
)
from .modifiers import WAVE_MODIFIERS, GENERIC_MODIFIERS, get_modifier, select_wave_modifier
from .pacing import (
    WAVE_CONFIG, PACING_CONFIG,
    get_spawn_interval, get_burst_chance, get_pacing_value, roll_burst_picks,
)
from .pool import WaveEnemyPoolBuilder
from .allocator import ThreatBudgetAllocator
from .simulation import boss_xp, simulate_wave, simulate_arena, run_simulation, write_xp_table

__all__ = [
    # Types
    "WaveType",
    "WaveBudget",
    "BossChaseConfig",
    "ArenaConfig",
    "WaveModifier",
    "SpawnDecision",
    "WaveExecutionState",
    # Tables
    "ARENA_CONFIG",
    "FINAL_ARENA",
    "WAVE_BUDGETS",
    "ARENA_SCALING",
    "WAVE_MODIFIERS",
    "GENERIC_MODIFIERS",
    "WAVE_CONFIG",
    "PACING_CONFIG",
    # Queries
    "get_arena_config",
    "get_arena_waves",
    "get_arena_ids",
    "get_wave_type",
    "get_base_wave_budget",
    "compute_wave_budget",
    "get_max_types_per_wave",
    "get_school_chance",
    "can_school",
    "xp_per_enemy",
    "get_modifier",
    "select_wave_modifier",
    "get_spawn_interval",
    "get_burst_chance",
    "get_pacing_value",
    "roll_burst_picks",
    # Engines
    "WaveEnemyPoolBuilder",
    "ThreatBudgetAllocator",
    "boss_xp",
    "simulate_wave",
    "simulate_arena",
    "run_simulation",
    "write_xp_table",
]

# Validation is available but not in __all__ to keep the main API clean
# Import it explicitly: from systems.waves.validation import ...
