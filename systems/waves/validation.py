"""
Validation and integrity checking for the wave tables.

Checks that the arena, budget, modifier and schooling tables are consistent
with each other and with the enemy catalog. The offline tools call
require_valid_config() before simulating; the live game only logs problems.
"""

from typing import Dict, List, Optional

from engine.error_handler import ValidationError, logger
from systems.enemies import ENEMY_ARCHETYPES, EnemyArchetype
from systems.enemies.validation import validate_all_archetypes
from . import threat_budget
from .arenas import ARENA_CONFIG
from .modifiers import GENERIC_MODIFIERS, WAVE_MODIFIERS

WAVE_TYPES = ("lesson", "integration", "exam")


def validate_arenas(catalog: Dict[str, EnemyArchetype]) -> List[str]:
    errors = []
    for arena_id, arena in ARENA_CONFIG.items():
        prefix = f"arena {arena_id}"
        if arena.id != arena_id:
            errors.append(f"{prefix}: registered under {arena_id} but id is {arena.id}")
        if arena.waves < 1:
            errors.append(f"{prefix}: waves must be >= 1, got {arena.waves}")

        lesson = catalog.get(arena.lesson_enemy)
        if lesson is None:
            errors.append(f"{prefix}: unknown lesson enemy '{arena.lesson_enemy}'")
        elif lesson.is_boss_minion:
            errors.append(f"{prefix}: lesson enemy '{arena.lesson_enemy}' is a boss minion")

        for wave in arena.breather_waves:
            if wave <= 1 or wave > arena.waves:
                errors.append(f"{prefix}: breather wave {wave} outside 2..{arena.waves}")

        if arena.boss_health <= 0:
            errors.append(f"{prefix}: boss_health must be > 0")

        chase = arena.boss_chase
        if chase is not None:
            total = sum(chase.segment_waves.values())
            if total > arena.waves:
                errors.append(
                    f"{prefix}: chase segments cover {total} waves but the arena has {arena.waves}"
                )
            for phase, threshold in chase.phase_thresholds.items():
                if not 0 < threshold < arena.boss_health:
                    errors.append(
                        f"{prefix}: phase {phase} retreat threshold {threshold} "
                        f"outside 1..{arena.boss_health - 1}"
                    )

        if arena_id not in threat_budget.ARENA_SCALING:
            errors.append(f"{prefix}: no arena scaling entry")
    return errors


def validate_budgets() -> List[str]:
    errors = []
    for wave_type in WAVE_TYPES:
        budget = threat_budget.WAVE_BUDGETS.get(wave_type)
        if budget is None:
            errors.append(f"budget: missing wave type '{wave_type}'")
            continue
        if budget.total <= 0:
            errors.append(f"budget: {wave_type} total must be > 0")
        if budget.max_cognitive <= 0:
            errors.append(f"budget: {wave_type} max_cognitive must be > 0")

    for arena_id, overrides in threat_budget.ARENA_BUDGET_OVERRIDES.items():
        if arena_id not in ARENA_CONFIG:
            errors.append(f"budget: override for unknown arena {arena_id}")
        for wave_type, fields in overrides.items():
            if wave_type not in WAVE_TYPES:
                errors.append(f"budget: arena {arena_id} override for unknown wave type '{wave_type}'")
            for key, value in fields.items():
                if key not in ("total", "max_cognitive"):
                    errors.append(f"budget: arena {arena_id} {wave_type} unknown field '{key}'")
                elif value <= 0:
                    errors.append(f"budget: arena {arena_id} {wave_type} {key} must be > 0")

    for arena_id, scale in threat_budget.ARENA_SCALING.items():
        if scale <= 0:
            errors.append(f"budget: arena {arena_id} scale must be > 0")
    for arena_id, max_types in threat_budget.MAX_TYPES_PER_WAVE.items():
        if max_types < 1:
            errors.append(f"budget: arena {arena_id} max types per wave must be >= 1")
    return errors


def validate_modifiers(catalog: Dict[str, EnemyArchetype]) -> List[str]:
    errors = []
    for mod_id, mod in WAVE_MODIFIERS.items():
        prefix = f"modifier {mod_id}"
        if mod.id != mod_id:
            errors.append(f"{prefix}: registered under '{mod_id}' but id is '{mod.id}'")
        for label, value in (
            ("budget_mult", mod.budget_mult),
            ("xp_mult", mod.xp_mult),
            ("interval_mult", mod.interval_mult),
        ):
            if value <= 0:
                errors.append(f"{prefix}: {label} must be > 0, got {value}")
        if mod.cognitive_max is not None and mod.cognitive_max <= 0:
            errors.append(f"{prefix}: cognitive_max must be > 0")
        for type_id in mod.force_types or ():
            if type_id not in catalog:
                errors.append(f"{prefix}: forced type '{type_id}' is not in the catalog")

    for mod_id in GENERIC_MODIFIERS + ("breather", "harbingers"):
        if mod_id not in WAVE_MODIFIERS:
            errors.append(f"modifier: '{mod_id}' is selectable but not defined")
    return errors


def validate_schooling(catalog: Dict[str, EnemyArchetype]) -> List[str]:
    errors = []
    if threat_budget.SCHOOL_SIZE_MIN > threat_budget.SCHOOL_SIZE_MAX:
        errors.append(
            f"school: size min {threat_budget.SCHOOL_SIZE_MIN} > max {threat_budget.SCHOOL_SIZE_MAX}"
        )
    if threat_budget.MIN_SCHOOL_COUNT < 2:
        errors.append("school: MIN_SCHOOL_COUNT must be >= 2")
    for type_id in threat_budget.SCHOOL_EXCLUDE_TYPES:
        if type_id not in catalog:
            errors.append(f"school: excluded type '{type_id}' is not in the catalog")
    if "default" not in threat_budget.SCHOOL_CHANCE_BY_WAVE:
        errors.append("school: chance table has no 'default' entry")
    for key, table in threat_budget.SCHOOL_CHANCE_BY_WAVE.items():
        for wave, chance in table.items():
            if not 0.0 <= chance <= 1.0:
                errors.append(f"school: {key} wave {wave} chance {chance} outside 0..1")
    return errors


def run_full_validation(
    catalog: Optional[Dict[str, EnemyArchetype]] = None,
) -> Dict[str, List[str]]:
    """
    Run every check.

    Returns:
        Dict mapping section name to its list of errors (empty list if valid)
    """
    catalog = ENEMY_ARCHETYPES if catalog is None else catalog

    enemy_errors = [
        f"{arch_id}: {error}"
        for arch_id, errors in validate_all_archetypes(catalog).items()
        for error in errors
    ]
    return {
        "enemies": enemy_errors,
        "arenas": validate_arenas(catalog),
        "budgets": validate_budgets(),
        "modifiers": validate_modifiers(catalog),
        "schooling": validate_schooling(catalog),
    }


def require_valid_config(catalog: Optional[Dict[str, EnemyArchetype]] = None) -> None:
    """Raise ValidationError listing every problem, or return quietly."""
    results = run_full_validation(catalog)
    problems = [error for errors in results.values() for error in errors]
    if not problems:
        return
    for problem in problems:
        logger.error(f"Config problem: {problem}")
    raise ValidationError(
        f"{len(problems)} wave config problem(s): " + "; ".join(problems),
        user_message="Wave configuration is invalid; see the log for details",
    )
