"""
Validation and integrity checking for the enemy catalog.

Provides functions to validate that all registered archetypes are usable by the
threat-budget allocator.
"""

from typing import Dict, List, Optional

from .registry import ENEMY_ARCHETYPES
from .types import EnemyArchetype


def validate_archetype(arch: EnemyArchetype) -> List[str]:
    """
    Validate a single archetype.

    Returns:
        List of errors (empty list if valid)
    """
    errors = []

    # Basic field validation
    if not arch.id or not arch.id.strip():
        errors.append("Missing or empty id")
    if not arch.name or not arch.name.strip():
        errors.append("Missing or empty name")

    if arch.spawn_weight < 0:
        errors.append(f"Invalid spawn_weight: {arch.spawn_weight} (must be >= 0)")
    if arch.xp_value < 0:
        errors.append(f"Invalid xp_value: {arch.xp_value} (must be >= 0)")

    # Cost validation
    if not arch.has_cost_data:
        errors.append("Missing threat cost data (durability/damage/cognitive)")
    else:
        for label, value in (
            ("durability_cost", arch.durability_cost),
            ("damage_cost", arch.damage_cost),
            ("cognitive_cost", arch.cognitive_cost),
        ):
            if value < 0:
                errors.append(f"{label} cannot be negative: {value}")
        if arch.durability_cost + arch.damage_cost <= 0:
            errors.append("Total threat cost must be > 0 (a free enemy never exhausts a budget)")

    # Gating validation
    if arch.arena_intro is not None and arch.arena_intro < 1:
        errors.append(f"arena_intro must be >= 1, got {arch.arena_intro}")
    if arch.arena_intro is not None and arch.max_arena is not None:
        if arch.max_arena < arch.arena_intro:
            errors.append(
                f"max_arena ({arch.max_arena}) < arena_intro ({arch.arena_intro})"
            )
    if arch.min_wave is not None and arch.min_wave < 1:
        errors.append(f"min_wave must be >= 1, got {arch.min_wave}")

    return errors


def validate_all_archetypes(
    catalog: Optional[Dict[str, EnemyArchetype]] = None,
) -> Dict[str, List[str]]:
    """
    Validate all registered archetypes.

    Returns:
        Dict mapping archetype_id to list of errors (empty list if valid)
    """
    catalog = ENEMY_ARCHETYPES if catalog is None else catalog
    results = {}

    for arch_id, arch in catalog.items():
        errors = validate_archetype(arch)
        if arch.id != arch_id:
            errors.append(f"Registered under '{arch_id}' but id is '{arch.id}'")
        results[arch_id] = errors

    return results
