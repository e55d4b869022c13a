"""
Archetypes introduced in arenas 3-6.
"""

from ..types import EnemyArchetype
from ..registry import register_archetype


def register_advanced_arena_archetypes() -> None:
    """Register archetypes introduced in arenas 3 through 6."""

    # Arena 3: vertical loop
    register_archetype(
        EnemyArchetype(
            id="pillar_police",
            name="Pillar Police",
            spawn_weight=1.5,
            xp_value=3,
            durability_cost=25,
            damage_cost=15,
            cognitive_cost=2,
            arena_intro=3,
        )
    )

    # Arena 4: platform gardens
    register_archetype(
        EnemyArchetype(
            id="fast_bouncer",
            name="Fast Bouncer",
            spawn_weight=1.5,
            xp_value=2.5,
            durability_cost=12,
            damage_cost=14,
            cognitive_cost=2,
            arena_intro=4,
        )
    )

    # Arena 5: the labyrinth
    register_archetype(
        EnemyArchetype(
            id="splitter",
            name="Splitter",
            spawn_weight=1.2,
            xp_value=4,
            durability_cost=28,
            damage_cost=12,
            cognitive_cost=3,
            arena_intro=5,
        )
    )

    # Spawned by splitters on death, never picked by a wave directly
    register_archetype(
        EnemyArchetype(
            id="splitterling",
            name="Splitterling",
            spawn_weight=0.0,
            xp_value=0.5,
            durability_cost=5,
            damage_cost=5,
            cognitive_cost=1,
            arena_intro=5,
        )
    )

    # Arena 6: chaos realm
    register_archetype(
        EnemyArchetype(
            id="teleporter",
            name="Teleporter",
            spawn_weight=1.0,
            xp_value=4.5,
            durability_cost=20,
            damage_cost=25,
            cognitive_cost=3,
            arena_intro=6,
        )
    )
