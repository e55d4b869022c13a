"""
Enemy eligibility and live-tuned attribute lookups.

Every lookup goes through an optional BalanceStore so a tuner's overrides are
seen on the very next pool build or pick. Nothing here caches values.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from systems.balance import BalanceStore, tuned_value
from .types import EnemyArchetype, ThreatCost
from .registry import ENEMY_ARCHETYPES


def tuned_spawn_weight(arch: EnemyArchetype, balance: Optional[BalanceStore] = None) -> float:
    return tuned_value(balance, f"enemy.{arch.id}.spawn_weight", arch.spawn_weight)


def tuned_xp_value(arch: EnemyArchetype, balance: Optional[BalanceStore] = None) -> float:
    return tuned_value(balance, f"enemy.{arch.id}.xp_value", arch.xp_value)


def tuned_threat_cost(arch: EnemyArchetype, balance: Optional[BalanceStore] = None) -> ThreatCost:
    """
    Threat cost for one unit, with overrides applied per field.

    Missing cost data resolves to FALLBACK_THREAT_COST instead of raising.
    """
    base = arch.threat_cost()
    return ThreatCost(
        durability=int(tuned_value(balance, f"enemy.{arch.id}.durability_cost", base.durability)),
        damage=int(tuned_value(balance, f"enemy.{arch.id}.damage_cost", base.damage)),
        cognitive=int(tuned_value(balance, f"enemy.{arch.id}.cognitive_cost", base.cognitive)),
    )


def passes_arena_gates(arch: EnemyArchetype, arena: int, wave: Optional[int] = None) -> bool:
    """
    arena_intro / max_arena / min_wave gating.

    wave=None skips the min_wave check (arena-wide queries).
    """
    if arch.arena_intro is not None and arch.arena_intro > arena:
        return False
    if arch.max_arena is not None and arch.max_arena < arena:
        return False
    if wave is not None and arch.min_wave is not None and wave < arch.min_wave:
        return False
    return True


def is_wave_eligible(
    arch: EnemyArchetype,
    arena: int,
    wave: Optional[int] = None,
    balance: Optional[BalanceStore] = None,
) -> bool:
    """Can this archetype be part of a normal wave pool here?"""
    if arch.is_boss_minion:
        return False
    if tuned_spawn_weight(arch, balance) <= 0:
        return False
    return passes_arena_gates(arch, arena, wave)


def get_available_types_for_arena(
    arena: int,
    wave: Optional[int] = None,
    catalog: Optional[Dict[str, EnemyArchetype]] = None,
    balance: Optional[BalanceStore] = None,
) -> List[str]:
    """
    Get all archetype ids that may spawn in this arena (and wave, if given).

    Returns ids in catalog order.
    """
    catalog = ENEMY_ARCHETYPES if catalog is None else catalog
    return [
        arch_id for arch_id, arch in catalog.items()
        if is_wave_eligible(arch, arena, wave, balance)
    ]

