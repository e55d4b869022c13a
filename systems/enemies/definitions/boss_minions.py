"""
Boss-summoned archetypes. Excluded from every wave pool.
"""

from ..types import EnemyArchetype
from ..registry import register_archetype


def register_boss_minion_archetypes() -> None:
    register_archetype(
        EnemyArchetype(
            id="boss_minion",
            name="Boss Minion",
            spawn_weight=1.0,
            xp_value=0.5,
            durability_cost=8,
            damage_cost=6,
            cognitive_cost=1,
            is_boss_minion=True,
        )
    )
