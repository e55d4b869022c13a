"""
Boss chase bookkeeping.

In a chase arena the boss shows up several times. Each encounter ends when its
health drops to the phase's retreat threshold; the boss flees, its health is
carried over, and the next wave segment starts. Once every segment has been
played, the boss fights to the death as in any other arena.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from systems.waves.types import BossChaseConfig

# Segments with no entry in segment_waves play this many waves
DEFAULT_SEGMENT_WAVES = 2


@dataclass
class BossChaseState:
    """
    Per-arena chase progress.

    - segment:                current wave segment (1-based)
    - boss_phase_to_spawn:    phase the next boss spawn uses
    - boss_encounter_count:   finished (retreated) encounters
    - persistent_boss_health: boss HP carried between encounters (None = full)
    """
    enabled: bool = False
    segment: int = 1
    boss_phase_to_spawn: int = 1
    boss_encounter_count: int = 0
    persistent_boss_health: Optional[int] = None
    segment_waves: Dict[int, int] = field(default_factory=dict)
    phase_thresholds: Dict[int, int] = field(default_factory=dict)
    max_encounters: int = 0

    @classmethod
    def for_arena(cls, config: Optional[BossChaseConfig]) -> "BossChaseState":
        """Fresh chase state, disabled when the arena has no chase config."""
        if config is None:
            return cls()
        return cls(
            enabled=True,
            segment_waves=dict(config.segment_waves),
            phase_thresholds=dict(config.phase_thresholds),
            max_encounters=config.max_encounters,
        )

    @property
    def chase_over(self) -> bool:
        return self.boss_encounter_count >= self.max_encounters

    def segment_wave_target(self, segment: Optional[int] = None) -> int:
        """Cumulative wave number after which the boss returns for this segment."""
        segment = self.segment if segment is None else segment
        return sum(
            self.segment_waves.get(s, DEFAULT_SEGMENT_WAVES)
            for s in range(1, segment + 1)
        )

    def should_boss_return(self, current_wave: int) -> bool:
        if not self.enabled or self.chase_over:
            return False
        return current_wave >= self.segment_wave_target()

    def prepare_return(self) -> int:
        """Set up the next encounter and return the phase it spawns in."""
        self.boss_phase_to_spawn = self.boss_encounter_count + 1
        return self.boss_phase_to_spawn

    def retreat_threshold(self, phase: Optional[int] = None) -> Optional[int]:
        """HP at or below which the boss retreats, or None for a fight to the death."""
        if not self.enabled:
            return None
        phase = self.boss_phase_to_spawn if phase is None else phase
        return self.phase_thresholds.get(phase)

    def should_retreat(self, boss_health: Optional[float]) -> bool:
        threshold = self.retreat_threshold()
        if threshold is None or boss_health is None:
            return False
        return boss_health <= threshold

    def start_retreat(self, boss_health: float) -> None:
        self.persistent_boss_health = int(boss_health)

    def complete_retreat(self) -> None:
        self.segment += 1
        self.boss_encounter_count += 1
