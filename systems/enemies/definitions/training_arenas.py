"""
Archetypes introduced in the training arenas (1-2).

Arena 1 costs are multiples of 10 so a lesson wave can be spent to exactly zero.
"""

from ..types import EnemyArchetype
from ..registry import register_archetype


def register_training_arena_archetypes() -> None:
    """Register archetypes introduced in arenas 1 and 2."""

    # --- Arena 1: fundamentals ---------------------------------------------

    register_archetype(
        EnemyArchetype(
            id="grunt",
            name="Grunt",
            spawn_weight=3.0,  # the bread and butter of every wave
            xp_value=1,
            durability_cost=12,
            damage_cost=8,
            cognitive_cost=1,
            arena_intro=1,
        )
    )

    register_archetype(
        EnemyArchetype(
            id="rookie",
            name="Rookie",
            spawn_weight=1.5,
            xp_value=1,
            durability_cost=6,
            damage_cost=4,
            cognitive_cost=1,
            arena_intro=1,
            max_arena=2,  # retired once the player has learned cover
        )
    )

    register_archetype(
        EnemyArchetype(
            id="water_balloon",
            name="Water Balloon",
            spawn_weight=1.0,
            xp_value=2,
            durability_cost=14,
            damage_cost=16,
            cognitive_cost=1,
            arena_intro=1,
            min_wave=2,
        )
    )

    # --- Arena 2: shields & cover ------------------------------------------

    register_archetype(
        EnemyArchetype(
            id="shielded",
            name="Shielded",
            spawn_weight=2.0,
            xp_value=3,
            durability_cost=30,
            damage_cost=10,
            cognitive_cost=2,
            arena_intro=2,
        )
    )

    register_archetype(
        EnemyArchetype(
            id="shield_breaker",
            name="Shield Breaker",
            spawn_weight=1.0,
            xp_value=3,
            durability_cost=22,
            damage_cost=18,
            cognitive_cost=2,
            arena_intro=2,
            min_wave=3,
        )
    )
