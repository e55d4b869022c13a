"""
Enemy type definitions.

Contains the core dataclasses for enemy archetypes and their threat costs.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ThreatCost:
    """
    What one unit of an archetype costs a wave.

    - durability: threat points for how long it takes to kill
    - damage:     threat points for how much it hurts
    - cognitive:  "complexity" charged against the wave's cognitive cap
    """
    durability: int
    damage: int
    cognitive: int

    @property
    def total(self) -> int:
        """Points deducted from the threat budget per unit."""
        return self.durability + self.damage


# Used whenever an archetype is missing cost data (live mode must keep running).
FALLBACK_THREAT_COST = ThreatCost(durability=20, damage=10, cognitive=1)


@dataclass
class EnemyArchetype:
    """
    Defines a *type* of enemy that waves can spawn.

    - id:            stable internal id (used for lookups and balance keys)
    - name:          display name
    - spawn_weight:  relative pick weight inside a wave pool (0 disables spawning)
    - xp_value:      base XP per kill, before modifier and wave bonuses

    Threat costs (None = missing, resolved to FALLBACK_THREAT_COST):
    - durability_cost, damage_cost, cognitive_cost

    Gating:
    - arena_intro:    first arena this type may appear in
    - max_arena:      last arena this type may appear in (None = unlimited)
    - min_wave:       earliest wave index within an arena
    - is_boss_minion: summoned by bosses only, never part of a wave pool
    """
    id: str
    name: str
    spawn_weight: float
    xp_value: float

    durability_cost: Optional[int] = None
    damage_cost: Optional[int] = None
    cognitive_cost: Optional[int] = None

    arena_intro: Optional[int] = None
    max_arena: Optional[int] = None
    min_wave: Optional[int] = None
    is_boss_minion: bool = False

    @property
    def has_cost_data(self) -> bool:
        return None not in (self.durability_cost, self.damage_cost, self.cognitive_cost)

    def threat_cost(self) -> ThreatCost:
        """Current threat cost, falling back per-field when data is missing."""
        return ThreatCost(
            durability=(
                self.durability_cost if self.durability_cost is not None
                else FALLBACK_THREAT_COST.durability
            ),
            damage=(
                self.damage_cost if self.damage_cost is not None
                else FALLBACK_THREAT_COST.damage
            ),
            cognitive=(
                self.cognitive_cost if self.cognitive_cost is not None
                else FALLBACK_THREAT_COST.cognitive
            ),
        )
