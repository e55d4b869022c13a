"""
Wave system type definitions.

Contains the dataclasses and type aliases shared by the pool builder, the
threat-budget allocator, the live orchestrator and the offline simulator.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple


# Type aliases
WaveType = Literal["lesson", "integration", "exam"]


@dataclass(frozen=True)
class WaveBudget:
    """Threat budget for one wave type: total points and the cognitive cap."""
    total: int
    max_cognitive: int


@dataclass(frozen=True)
class BossChaseConfig:
    """
    Boss that recurs across wave segments with persistent health.

    - segment_waves:    waves played before each boss encounter, keyed by segment
    - phase_thresholds: HP at or below which the boss retreats in that phase;
                        a phase with no threshold fights to the death
    """
    segment_waves: Dict[int, int] = field(default_factory=dict)
    phase_thresholds: Dict[int, int] = field(default_factory=dict)

    @property
    def max_encounters(self) -> int:
        return len(self.segment_waves)


@dataclass(frozen=True)
class ArenaConfig:
    """
    One themed arena.

    - features:             world-building hints, not read by the wave core
    - lesson_enemy:         featured archetype, weighted up and seeded into the pool
    - breather_waves:       wave indices forced to the "breather" modifier
    - corridor_constrained: narrow layouts halve the burst chance
    """
    id: int
    name: str
    waves: int
    features: Tuple[str, ...] = ()
    lesson_enemy: str = "grunt"
    breather_waves: Tuple[int, ...] = ()
    corridor_constrained: bool = False
    boss_health: int = 1000
    boss_chase: Optional[BossChaseConfig] = None


@dataclass(frozen=True)
class WaveModifier:
    """
    Optional wave-wide effect, picked once at wave start.

    force_types replaces normal pool selection entirely.
    cognitive_max (when set) replaces the wave type's cognitive cap.
    """
    id: str
    name: str
    announcement: str = ""
    force_types: Optional[Tuple[str, ...]] = None
    budget_mult: float = 1.0
    xp_mult: float = 1.0
    interval_mult: float = 1.0
    cognitive_max: Optional[int] = None
    elite_only: bool = False
    no_burst: bool = False


@dataclass(frozen=True)
class SpawnDecision:
    """
    One committed allocator pick.

    count > 1 only for a school (same-type group spawned together).
    """
    enemy_type: str
    count: int
    is_school: bool
    unit_cost: int
    unit_cognitive: int
    xp_per_unit: int
    elite: bool = False

    @property
    def total_cost(self) -> int:
        return self.unit_cost * self.count

    @property
    def total_cognitive(self) -> int:
        return self.unit_cognitive * self.count

    @property
    def total_xp(self) -> int:
        return self.xp_per_unit * self.count


@dataclass
class WaveExecutionState:
    """
    Mutable per-wave state.

    Created when a wave's intro ends, discarded when the wave clears or the run
    restarts. budget_remaining only decreases; cognitive_used only increases.
    The pool is fixed here and never rebuilt mid-wave.
    """
    arena: int
    wave: int
    max_waves: int
    wave_type: WaveType
    modifier: Optional[WaveModifier]
    budget_total: int
    cognitive_max: int
    pool: Tuple[str, ...]

    budget_remaining: int = field(init=False)
    cognitive_used: int = 0

    # Pacing counters (frames, never wall-clock)
    started_frame: int = 0
    last_spawn_frame: Optional[int] = None
    spawn_count: int = 0
    breather_mark: int = 0
    micro_breather_active: bool = False
    micro_breather_timer: int = 0
    stress_pause_active: bool = False
    spawn_warned: bool = False

    decisions: List[SpawnDecision] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.budget_remaining = self.budget_total

    @property
    def modifier_id(self) -> Optional[str]:
        return self.modifier.id if self.modifier is not None else None

    @property
    def budget_exhausted(self) -> bool:
        return self.budget_remaining <= 0

    @property
    def xp_awarded(self) -> int:
        """Total XP of everything committed so far."""
        return sum(d.total_xp for d in self.decisions)
