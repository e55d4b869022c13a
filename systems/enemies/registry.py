"""
Enemy registry system.

Manages the global registry of enemy archetypes. Iteration order of
ENEMY_ARCHETYPES is registration order; weighted picks resolve ties in that order.
"""

from typing import Dict
from .types import EnemyArchetype


# Global registry
ENEMY_ARCHETYPES: Dict[str, EnemyArchetype] = {}


def register_archetype(arch: EnemyArchetype) -> EnemyArchetype:
    """Register an enemy archetype."""
    ENEMY_ARCHETYPES[arch.id] = arch
    return arch


def get_archetype(arch_id: str) -> EnemyArchetype:
    """Get an enemy archetype by ID."""
    return ENEMY_ARCHETYPES[arch_id]
