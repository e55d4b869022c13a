"""
Enemy system module.

This module provides the enemy catalog: archetypes, their threat costs and the
eligibility queries the wave system uses.

All public APIs are exported from this module.
"""

from .types import EnemyArchetype, ThreatCost, FALLBACK_THREAT_COST
from .registry import (
    ENEMY_ARCHETYPES,
    register_archetype, get_archetype,
)
from .selection import (
    tuned_spawn_weight, tuned_xp_value, tuned_threat_cost,
    passes_arena_gates, is_wave_eligible,
    get_available_types_for_arena,
)

# Register all definitions on import
from .definitions import register_all_definitions
register_all_definitions()

__all__ = [
    "EnemyArchetype",
    "ThreatCost",
    "FALLBACK_THREAT_COST",
    "ENEMY_ARCHETYPES",
    "register_archetype",
    "get_archetype",
    "tuned_spawn_weight",
    "tuned_xp_value",
    "tuned_threat_cost",
    "passes_arena_gates",
    "is_wave_eligible",
    "get_available_types_for_arena",
]

# Validation is available but not in __all__ to keep the main API clean
# Import it explicitly: from systems.enemies.validation import ...
