"""
Enemy archetype definitions.

Definitions are organized by where they first show up:
- training_arenas.py: types introduced in arenas 1-2
- advanced_arenas.py: types introduced in arenas 3-6
- boss_minions.py:    boss-summoned types (never in wave pools)

Registration order is the catalog's iteration order.
"""

# Import all definition modules to register their archetypes
from . import training_arenas
from . import advanced_arenas
from . import boss_minions


def register_all_definitions() -> None:
    """Register all enemy archetypes."""
    training_arenas.register_training_arena_archetypes()
    advanced_arenas.register_advanced_arena_archetypes()
    boss_minions.register_boss_minion_archetypes()
