"""
Live balance overrides.

A BalanceStore holds validated numeric overrides for registered tuning
parameters. Wave code never caches a tuned value: it asks the store on every
pool build and pick, so a change made mid-wave is seen on the next decision.

Overrides can be persisted to a JSON file and shared between tuners through an
export/import payload:

    {"version": 1, "created_at": "...", "overrides": {"enemy.grunt.spawn_weight": 4.0}}
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from engine.error_handler import logger

EXPORT_VERSION = 1

# Reason codes returned in BalanceResult.reason
REASON_UNKNOWN_KEY = "unknown_key"
REASON_INVALID_VALUE = "invalid_value"
REASON_INVALID_JSON = "invalid_json"
REASON_MISSING_OVERRIDES = "missing_overrides"

Number = Union[int, float]


@dataclass(frozen=True)
class BalanceParam:
    """
    One tunable number.

    get_default reads the baseline from the static tables each time it is
    called, so the store never holds a stale copy of the defaults.
    """
    key: str
    category: str
    label: str
    min: Number
    max: Number
    step: Number
    get_default: Callable[[], Number]


@dataclass(frozen=True)
class BalanceResult:
    """Outcome of a set/import call. reason is one of the REASON_* codes on failure."""
    ok: bool
    value: Optional[Number] = None
    reason: Optional[str] = None
    count: Optional[int] = None


def tuned_value(balance: Optional["BalanceStore"], key: str, fallback: Any) -> Any:
    """Override for key if a store is given and has one, otherwise fallback."""
    if balance is None:
        return fallback
    value = balance.get(key)
    return fallback if value is None else value


def _coerce_number(value: Any) -> Optional[float]:
    """Finite int/float, or None. Booleans and numeric strings are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


# ---------------------------------------------------------------------------
# Parameter registry
# ---------------------------------------------------------------------------

def build_default_params() -> List[BalanceParam]:
    """
    Build the parameter registry from the current static tables.

    Imports are local: the enemy and wave modules import this module for
    tuned_value.
    """
    from systems.enemies import ENEMY_ARCHETYPES
    from systems.waves.arenas import ARENA_CONFIG
    from systems.waves.pacing import PACING_CONFIG
    from systems.waves import threat_budget

    params: List[BalanceParam] = []

    for arch_id, arch in ENEMY_ARCHETYPES.items():
        if arch.is_boss_minion:
            continue
        cost = arch.threat_cost()
        params.extend([
            BalanceParam(
                key=f"enemy.{arch_id}.spawn_weight",
                category="Enemies",
                label=f"{arch.name} spawn weight",
                min=0, max=20, step=0.1,
                get_default=lambda a=arch: a.spawn_weight,
            ),
            BalanceParam(
                key=f"enemy.{arch_id}.xp_value",
                category="Enemies",
                label=f"{arch.name} XP value",
                min=0, max=1000, step=0.5,
                get_default=lambda a=arch: a.xp_value,
            ),
            BalanceParam(
                key=f"enemy.{arch_id}.durability_cost",
                category="Threat",
                label=f"{arch.name} durability cost",
                min=0, max=500, step=1,
                get_default=lambda c=cost: c.durability,
            ),
            BalanceParam(
                key=f"enemy.{arch_id}.damage_cost",
                category="Threat",
                label=f"{arch.name} damage cost",
                min=0, max=500, step=1,
                get_default=lambda c=cost: c.damage,
            ),
            BalanceParam(
                key=f"enemy.{arch_id}.cognitive_cost",
                category="Threat",
                label=f"{arch.name} cognitive cost",
                min=0, max=20, step=1,
                get_default=lambda c=cost: c.cognitive,
            ),
        ])

    for wave_type, budget in threat_budget.WAVE_BUDGETS.items():
        params.extend([
            BalanceParam(
                key=f"waves.budget.{wave_type}_total",
                category="Waves",
                label=f"{wave_type.title()} budget",
                min=0, max=10000, step=10,
                get_default=lambda b=budget: b.total,
            ),
            BalanceParam(
                key=f"waves.budget.{wave_type}_max_cognitive",
                category="Waves",
                label=f"{wave_type.title()} cognitive cap",
                min=0, max=500, step=1,
                get_default=lambda b=budget: b.max_cognitive,
            ),
        ])

    params.append(BalanceParam(
        key="waves.featured_type_bonus",
        category="Waves",
        label="Lesson enemy weight bonus",
        min=0, max=20, step=0.1,
        get_default=lambda: threat_budget.FEATURED_TYPE_BONUS,
    ))

    params.extend([
        BalanceParam(
            key="waves.pacing.stress_pause_threshold",
            category="Pacing",
            label="Stress pause at live enemies",
            min=1, max=200, step=1,
            get_default=lambda: PACING_CONFIG["stress_pause_threshold"],
        ),
        BalanceParam(
            key="waves.pacing.micro_breather_interval",
            category="Pacing",
            label="Micro-breather every N spawns",
            min=1, max=200, step=1,
            get_default=lambda: PACING_CONFIG["micro_breather_interval"],
        ),
        BalanceParam(
            key="waves.pacing.micro_breather_duration",
            category="Pacing",
            label="Micro-breather length (frames)",
            min=0, max=3600, step=10,
            get_default=lambda: PACING_CONFIG["micro_breather_duration"],
        ),
    ])

    for arena_id, arena in ARENA_CONFIG.items():
        params.append(BalanceParam(
            key=f"arena.{arena_id}.boss_health",
            category="Bosses",
            label=f"Arena {arena_id} boss health",
            min=1, max=99999, step=25,
            get_default=lambda a=arena: a.boss_health,
        ))

    return params


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class BalanceStore:
    """
    Validated override map over a fixed parameter registry.

    set() rejects unknown keys and values that are not finite numbers inside
    the parameter's [min, max]; the previous value is kept on rejection.
    """

    def __init__(
        self,
        params: Optional[List[BalanceParam]] = None,
        path: Optional[Path] = None,
    ) -> None:
        if params is None:
            params = build_default_params()
        self.params: Dict[str, BalanceParam] = {p.key: p for p in params}
        self.path = Path(path) if path is not None else None
        self._overrides: Dict[str, Number] = {}

    # --- Queries -----------------------------------------------------------

    def get(self, key: str) -> Optional[Number]:
        """Current override for key, or None when the default applies."""
        return self._overrides.get(key)

    def get_effective(self, key: str) -> Optional[Number]:
        """Override if present, else the parameter's default, else None for unknown keys."""
        if key in self._overrides:
            return self._overrides[key]
        param = self.params.get(key)
        return param.get_default() if param is not None else None

    def get_override_map(self) -> Dict[str, Number]:
        return dict(self._overrides)

    def categories(self) -> List[str]:
        seen: List[str] = []
        for param in self.params.values():
            if param.category not in seen:
                seen.append(param.category)
        return seen

    def has_overrides(self) -> bool:
        return bool(self._overrides)

    # --- Mutation ----------------------------------------------------------

    def _validate(self, key: str, value: Any) -> BalanceResult:
        param = self.params.get(key)
        if param is None:
            return BalanceResult(ok=False, reason=REASON_UNKNOWN_KEY)
        number = _coerce_number(value)
        if number is None or number < param.min or number > param.max:
            return BalanceResult(ok=False, reason=REASON_INVALID_VALUE)
        return BalanceResult(ok=True, value=number)

    def set(self, key: str, value: Any) -> BalanceResult:
        result = self._validate(key, value)
        if not result.ok:
            logger.warning(f"Rejected balance override {key}={value!r}: {result.reason}")
            return result
        self._overrides[key] = result.value
        logger.debug(f"Balance override {key}={result.value}")
        return result

    def clear(self, key: str) -> bool:
        """Drop one override. Returns True if there was one."""
        return self._overrides.pop(key, None) is not None

    def reset_all(self) -> None:
        self._overrides.clear()

    # --- Export / import ---------------------------------------------------

    def export_payload(self) -> Dict[str, Any]:
        return {
            "version": EXPORT_VERSION,
            "created_at": datetime.now().isoformat(timespec="seconds"),
            "overrides": self.get_override_map(),
        }

    def export_json(self) -> str:
        return json.dumps(self.export_payload(), indent=2, sort_keys=True)

    def import_json(self, text: str) -> BalanceResult:
        """
        Replace the current overrides with those in an export payload.

        Overrides the payload does not mention are dropped, so a preset
        reproduces the exporter's tuning exactly. Fails closed: a malformed
        payload or any invalid value for a known key rejects the whole import
        and leaves the store untouched. Unknown keys are skipped so payloads
        from other builds still load.
        """
        try:
            payload = json.loads(text)
        except (TypeError, ValueError):
            return BalanceResult(ok=False, reason=REASON_INVALID_JSON)

        if not isinstance(payload, dict) or not isinstance(payload.get("overrides"), dict):
            return BalanceResult(ok=False, reason=REASON_MISSING_OVERRIDES)

        staged: Dict[str, Number] = {}
        for key, value in payload["overrides"].items():
            result = self._validate(key, value)
            if result.reason == REASON_UNKNOWN_KEY:
                logger.info(f"Ignoring unknown balance key in import: {key}")
                continue
            if not result.ok:
                return BalanceResult(ok=False, reason=result.reason)
            staged[key] = result.value

        self._overrides = staged
        return BalanceResult(ok=True, count=len(staged))

    # --- Persistence -------------------------------------------------------

    def load(self, path: Optional[Path] = None) -> bool:
        """
        Load overrides from disk, replacing the current ones.

        A missing file is not an error. A corrupt file is logged and ignored.
        """
        path = Path(path) if path is not None else self.path
        if path is None or not path.exists():
            return False
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read balance overrides from {path}: {e}")
            return False

        result = self.import_json(text)
        if not result.ok:
            logger.warning(f"Ignoring balance overrides in {path}: {result.reason}")
            return False
        logger.info(f"Loaded {result.count} balance overrides from {path}")
        return True

    def save(self, path: Optional[Path] = None) -> bool:
        """Write overrides atomically (temp file + replace)."""
        path = Path(path) if path is not None else self.path
        if path is None:
            return False
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(self.export_json(), encoding="utf-8")
            os.replace(tmp, path)
            return True
        except OSError as e:
            logger.warning(f"Could not save balance overrides to {path}: {e}")
            return False
