"""
Live wave orchestration.

Drives the wave/boss cycle of a run one frame at a time:

    WAVE_INTRO -> WAVE_ACTIVE -> WAVE_CLEAR -> (next WAVE_INTRO | BOSS_INTRO)
    BOSS_INTRO -> BOSS_ACTIVE -> (BOSS_RETREAT -> WAVE_INTRO | BOSS_DEFEATED)
    BOSS_DEFEATED -> ARENA_TRANSITION -> WAVE_INTRO of the next arena

Every timer is a frame count; tick() never looks at the wall clock and never
blocks. Enemies and bosses are created through injected sinks, so the same
orchestrator runs against the real entity layer, the headless playtest, or a
test double.
"""

from __future__ import annotations

import math
import random
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Protocol, Set

from settings import (
    ARENA_TRANSITION_FRAMES,
    BOSS_DEFEATED_FRAMES,
    BOSS_INTRO_FRAMES,
    BOSS_RETREAT_FRAMES,
    FPS,
    SPEED_BONUS_PER_SECOND,
    SPEED_BONUS_WINDOW_SECONDS,
    WAVE_CLEAR_FRAMES,
    WAVE_INTRO_FRAMES,
)
from systems.balance import BalanceStore, tuned_value
from systems.progression import ArenaXpReward, HeroStats
from systems.waves import (
    FINAL_ARENA,
    SpawnDecision,
    ThreatBudgetAllocator,
    WaveExecutionState,
    WaveModifier,
    get_arena_config,
    get_burst_chance,
    get_pacing_value,
    get_spawn_interval,
    roll_burst_picks,
)
from telemetry.logger import TelemetryLogger
from ..error_handler import StateTransitionError, handle_runtime_error, logger
from .boss_chase import BossChaseState


class WaveState(Enum):
    WAVE_INTRO = "wave_intro"
    WAVE_ACTIVE = "wave_active"
    WAVE_CLEAR = "wave_clear"
    BOSS_INTRO = "boss_intro"
    BOSS_ACTIVE = "boss_active"
    BOSS_RETREAT = "boss_retreat"
    BOSS_DEFEATED = "boss_defeated"
    ARENA_TRANSITION = "arena_transition"


ALLOWED_TRANSITIONS: Dict[WaveState, FrozenSet[WaveState]] = {
    WaveState.WAVE_INTRO: frozenset({WaveState.WAVE_ACTIVE}),
    WaveState.WAVE_ACTIVE: frozenset({WaveState.WAVE_CLEAR}),
    WaveState.WAVE_CLEAR: frozenset({WaveState.WAVE_INTRO, WaveState.BOSS_INTRO}),
    WaveState.BOSS_INTRO: frozenset({WaveState.BOSS_ACTIVE}),
    WaveState.BOSS_ACTIVE: frozenset({WaveState.BOSS_RETREAT, WaveState.BOSS_DEFEATED}),
    WaveState.BOSS_RETREAT: frozenset({WaveState.WAVE_INTRO}),
    WaveState.BOSS_DEFEATED: frozenset({WaveState.ARENA_TRANSITION}),
    WaveState.ARENA_TRANSITION: frozenset({WaveState.WAVE_INTRO}),
}

# Enemy spawning is only allowed here; intros double as the announcement pause
SPAWNING_STATES: FrozenSet[WaveState] = frozenset({WaveState.WAVE_ACTIVE})

# The last arena has no portal; it moves on by itself after this many BOSS_DEFEATED_FRAMES
FINAL_ARENA_CELEBRATION_MULT = 3


class EnemySink(Protocol):
    def spawn_enemy_at(
        self, archetype_id: str, position: Any, elite: bool = False, xp: int = 0,
    ) -> Any: ...

    def live_enemy_count(self) -> int: ...


class BossSink(Protocol):
    def spawn_boss(self, arena: int, phase: int, health: int) -> Any: ...

    def retreat_boss(self, handle: Any) -> None: ...

    def kill_boss(self, handle: Any) -> None: ...

    def boss_active(self) -> bool: ...

    def boss_health(self, handle: Any) -> Optional[float]: ...


PositionProvider = Callable[[str], Any]


def _default_position(archetype_id: str) -> Any:
    return (0.0, 0.0)


def compute_speed_bonus(clear_frames: int) -> int:
    """Score for a fast wave clear: 10 per second under 30s, never negative."""
    clear_seconds = clear_frames / FPS
    return max(0, math.floor((SPEED_BONUS_WINDOW_SECONDS - clear_seconds) * SPEED_BONUS_PER_SECOND))


class WaveOrchestrator:
    """
    Frame-driven wave/boss state machine for one run.

    Responsibilities:
    - Own the current WaveExecutionState and discard it at wave boundaries
    - Pace allocator picks (interval, bursts, stress pause, micro-breathers)
    - Decide when a wave is clear and what follows it (next wave, boss, chase return)
    - Run the boss encounter, the chase retreat and the arena transition
    """

    def __init__(
        self,
        enemy_sink: EnemySink,
        boss_sink: BossSink,
        allocator: Optional[ThreatBudgetAllocator] = None,
        balance: Optional[BalanceStore] = None,
        rng: Optional[random.Random] = None,
        telemetry_logger: Optional[TelemetryLogger] = None,
        hero: Optional[HeroStats] = None,
        position_provider: Optional[PositionProvider] = None,
        arena_xp_rewards: Optional[Mapping[int, ArenaXpReward]] = None,
        start_arena: int = 1,
    ) -> None:
        self.enemy_sink = enemy_sink
        self.boss_sink = boss_sink
        self.balance = balance
        self.rng = rng if rng is not None else random.Random()
        self.allocator = (
            allocator if allocator is not None
            else ThreatBudgetAllocator(balance=balance, rng=self.rng)
        )
        self.telemetry = telemetry_logger if telemetry_logger is not None else TelemetryLogger(enabled=False)
        self.hero = hero if hero is not None else HeroStats()
        self.position_provider = position_provider or _default_position
        self.arena_xp_rewards = arena_xp_rewards
        self.start_arena = start_arena

        # Modifier ids already announced, per arena
        self.shown_modifiers: Dict[int, Set[str]] = {}
        # Announcement texts in the order they were shown (for UI / tests)
        self.announcements: List[str] = []

        self._handlers: Dict[WaveState, Callable[[], None]] = {
            WaveState.WAVE_INTRO: self._tick_wave_intro,
            WaveState.WAVE_ACTIVE: self._tick_wave_active,
            WaveState.WAVE_CLEAR: self._tick_wave_clear,
            WaveState.BOSS_INTRO: self._tick_boss_intro,
            WaveState.BOSS_ACTIVE: self._tick_boss_active,
            WaveState.BOSS_RETREAT: self._tick_boss_retreat,
            WaveState.BOSS_DEFEATED: self._tick_boss_defeated,
            WaveState.ARENA_TRANSITION: self._tick_arena_transition,
        }

        self._reset_run(start_arena)
        self.hero.apply_arena_start(start_arena, arena_xp_rewards)

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def _reset_run(self, arena: int) -> None:
        self.frame = 0
        self.state = WaveState.WAVE_INTRO
        self.state_started_frame = 0
        self.arena = arena
        self.wave = 1
        self.wave_state: Optional[WaveExecutionState] = None
        self.chase = BossChaseState.for_arena(get_arena_config(arena).boss_chase)
        self.boss_handle: Any = None
        self.boss_phase = 1
        self.portal_open = False
        self.run_complete = False
        self.shown_modifiers.clear()

    def restart(self, arena: Optional[int] = None) -> None:
        """
        Abandon the current run and start over at `arena` wave 1.

        Any live boss is killed through the sink; all wave state is dropped.
        """
        arena = self.start_arena if arena is None else arena
        if self.boss_handle is not None:
            self._call_sink("kill_boss", self.boss_sink.kill_boss, self.boss_handle)

        self._reset_run(arena)
        self.hero.apply_arena_start(arena, self.arena_xp_rewards)
        self.telemetry.reset_once()
        self.telemetry.log("run_restart", arena=arena)
        logger.info(f"Run restarted at arena {arena}")

    def award_kill_xp(self, xp: int) -> List[str]:
        """Credit the hero for a dead enemy; `xp` is what the enemy was spawned with."""
        level = self.hero.level
        messages = self.hero.grant_xp(xp)
        if self.hero.level > level:
            self.telemetry.log("hero_level_up", arena=self.arena, wave=self.wave, level=self.hero.level)
        return messages

    # ------------------------------------------------------------------
    # State machine plumbing
    # ------------------------------------------------------------------

    @property
    def state_timer(self) -> int:
        """Frames spent in the current state."""
        return self.frame - self.state_started_frame

    @property
    def can_spawn(self) -> bool:
        return self.state in SPAWNING_STATES and not self.run_complete

    @property
    def max_waves(self) -> int:
        return get_arena_config(self.arena).waves

    def transition(self, new_state: WaveState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise StateTransitionError(
                f"Illegal wave state transition {self.state.name} -> {new_state.name}"
            )
        logger.debug(f"[frame {self.frame}] {self.state.name} -> {new_state.name}")
        self.state = new_state
        self.state_started_frame = self.frame

    def tick(self) -> None:
        """Advance one frame."""
        if self.run_complete:
            return
        self.frame += 1
        self._handlers[self.state]()

    def _call_sink(self, context: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call a collaborator; a failure is logged and the frame loop keeps going."""
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            if not handle_runtime_error(e, context):
                raise
            return None

    # ------------------------------------------------------------------
    # Waves
    # ------------------------------------------------------------------

    def _tick_wave_intro(self) -> None:
        if self.state_timer < WAVE_INTRO_FRAMES:
            return
        self._start_wave()
        self.transition(WaveState.WAVE_ACTIVE)

    def _start_wave(self) -> None:
        state = self.allocator.start_wave(self.arena, self.wave, frame=self.frame)
        self.wave_state = state
        self.telemetry.reset_once("wave-")

        if state.modifier is not None:
            self.telemetry.log(
                "modifier_chosen",
                arena=self.arena,
                wave=self.wave,
                modifier=state.modifier.id,
            )
            self._announce_modifier(state.modifier)

        self.telemetry.log(
            "wave_start",
            arena=self.arena,
            wave=self.wave,
            wave_type=state.wave_type,
            budget=state.budget_total,
            cognitive_max=state.cognitive_max,
            modifier=state.modifier_id or "none",
            pool=list(state.pool),
        )
        logger.info(
            f"Arena {self.arena} wave {self.wave} ({state.wave_type}) started: "
            f"budget={state.budget_total} cognitive_max={state.cognitive_max} "
            f"modifier={state.modifier_id or 'none'} pool={list(state.pool)}"
        )

    def _announce_modifier(self, modifier: WaveModifier) -> bool:
        """Show a modifier's announcement the first time it appears in this arena."""
        shown = self.shown_modifiers.setdefault(self.arena, set())
        if modifier.id in shown:
            return False
        shown.add(modifier.id)
        text = modifier.announcement or modifier.name
        self.announcements.append(text)
        self.telemetry.log("modifier_announced", arena=self.arena, modifier=modifier.id, text=text)
        return True

    def _tick_wave_active(self) -> None:
        state = self.wave_state
        if state is None or not self.can_spawn:
            return

        live = self.enemy_sink.live_enemy_count()
        if live >= get_pacing_value("stress_pause_threshold", self.balance):
            # Hold spawning until the player thins the field
            state.stress_pause_active = True
            self._check_wave_complete(live)
            return
        state.stress_pause_active = False

        if self._micro_breather(state):
            self._check_wave_complete(live)
            return

        interval = get_spawn_interval(state.wave_type, state.wave, state.modifier)
        if not state.budget_exhausted and (
            state.last_spawn_frame is None or self.frame - state.last_spawn_frame > interval
        ):
            burst_chance = get_burst_chance(
                state.wave_type, state.wave, get_arena_config(self.arena), state.modifier,
            )
            for _ in range(roll_burst_picks(self.rng, burst_chance)):
                if state.budget_exhausted:
                    break
                decision = self.allocator.pick_next(state)
                if decision is None:
                    self._handle_stall(state)
                    break
                self._spawn_decision(decision)
            state.last_spawn_frame = self.frame

        self._check_wave_complete(self.enemy_sink.live_enemy_count())

    def _micro_breather(self, state: WaveExecutionState) -> bool:
        """
        Returns True while a micro-breather is holding spawns.

        A breather starts once every `micro_breather_interval` spawns; a school
        that jumps past the mark still triggers only one.
        """
        every = get_pacing_value("micro_breather_interval", self.balance)
        duration = get_pacing_value("micro_breather_duration", self.balance)

        if (
            not state.micro_breather_active
            and not state.budget_exhausted
            and state.spawn_count - state.breather_mark >= every
        ):
            state.micro_breather_active = True
            state.micro_breather_timer = 0
            state.breather_mark = state.spawn_count

        if not state.micro_breather_active:
            return False

        state.micro_breather_timer += 1
        if state.micro_breather_timer < duration:
            return True
        state.micro_breather_active = False
        state.micro_breather_timer = 0
        return False

    def _handle_stall(self, state: WaveExecutionState) -> None:
        """Nothing fits the remaining budget: treat it as spent."""
        if not state.spawn_warned:
            self.telemetry.log_once(
                f"wave-{self.arena}-{self.wave}-no-affordable",
                "no_affordable_enemy",
                arena=self.arena,
                wave=self.wave,
                budget=state.budget_remaining,
                cognitive_used=state.cognitive_used,
                cognitive_max=state.cognitive_max,
            )
            logger.info(
                f"Arena {self.arena} wave {self.wave}: no affordable enemy with "
                f"{state.budget_remaining} budget left "
                f"(cognitive {state.cognitive_used}/{state.cognitive_max}); ending spawns"
            )
            state.spawn_warned = True
        state.budget_remaining = 0

    def _spawn_decision(self, decision: SpawnDecision) -> None:
        for _ in range(decision.count):
            position = self.position_provider(decision.enemy_type)
            self._call_sink(
                "spawn_enemy",
                self.enemy_sink.spawn_enemy_at,
                decision.enemy_type,
                position,
                elite=decision.elite,
                xp=decision.xp_per_unit,
            )

    def _check_wave_complete(self, live: int) -> None:
        state = self.wave_state
        if state is None or not state.budget_exhausted:
            return
        if live > 0 or self.boss_sink.boss_active():
            return

        clear_frames = self.frame - state.started_frame
        bonus = compute_speed_bonus(clear_frames)
        self.hero.add_score(bonus)

        self.telemetry.log(
            "wave_clear",
            arena=self.arena,
            wave=self.wave,
            modifier=state.modifier_id or "none",
            budget_remaining=state.budget_remaining,
            spawned=state.spawn_count,
            xp=state.xp_awarded,
            clear_frames=clear_frames,
            speed_bonus=bonus,
        )
        self.transition(WaveState.WAVE_CLEAR)

    def _tick_wave_clear(self) -> None:
        if self.state_timer < WAVE_CLEAR_FRAMES:
            return
        self.wave_state = None

        if self.chase.should_boss_return(self.wave):
            self.boss_phase = self.chase.prepare_return()
            self.telemetry.log(
                "boss_return_triggered",
                arena=self.arena,
                wave=self.wave,
                phase=self.boss_phase,
                segment=self.chase.segment,
                encounters=self.chase.boss_encounter_count,
                persistent_health=self.chase.persistent_boss_health,
            )
            self.transition(WaveState.BOSS_INTRO)
        elif self.wave >= self.max_waves:
            self.boss_phase = self.chase.boss_phase_to_spawn if self.chase.enabled else 1
            self.transition(WaveState.BOSS_INTRO)
        else:
            self.wave += 1
            self.transition(WaveState.WAVE_INTRO)

    # ------------------------------------------------------------------
    # Boss
    # ------------------------------------------------------------------

    def boss_spawn_health(self) -> int:
        if self.chase.enabled and self.chase.persistent_boss_health is not None:
            return self.chase.persistent_boss_health
        default = get_arena_config(self.arena).boss_health
        return int(tuned_value(self.balance, f"arena.{self.arena}.boss_health", default))

    def _tick_boss_intro(self) -> None:
        if self.state_timer < BOSS_INTRO_FRAMES:
            return
        health = self.boss_spawn_health()
        self.boss_handle = self._call_sink(
            "spawn_boss", self.boss_sink.spawn_boss, self.arena, self.boss_phase, health,
        )
        self.telemetry.log("boss_spawned", arena=self.arena, phase=self.boss_phase, health=health)
        self.transition(WaveState.BOSS_ACTIVE)

    def _tick_boss_active(self) -> None:
        if not self.boss_sink.boss_active():
            threshold = None if self.chase.chase_over else self.chase.retreat_threshold()
            if threshold is not None:
                # Killed from above the threshold in one frame: it still escapes at the threshold
                self.boss_handle = None
                self._start_boss_retreat(threshold)
                return
            self.telemetry.log("boss_defeated", arena=self.arena, phase=self.boss_phase)
            self.boss_handle = None
            self.portal_open = False
            self.transition(WaveState.BOSS_DEFEATED)
            return

        if not self.chase.enabled:
            return
        health = self.boss_sink.boss_health(self.boss_handle)
        if self.chase.should_retreat(health):
            self._call_sink("retreat_boss", self.boss_sink.retreat_boss, self.boss_handle)
            self._start_boss_retreat(health)

    def _start_boss_retreat(self, health: float) -> None:
        self.chase.start_retreat(health)
        self.telemetry.log(
            "boss_retreat_started",
            arena=self.arena,
            phase=self.boss_phase,
            persistent_health=self.chase.persistent_boss_health,
        )
        self.transition(WaveState.BOSS_RETREAT)

    def _tick_boss_retreat(self) -> None:
        if self.state_timer < BOSS_RETREAT_FRAMES:
            return
        self.chase.complete_retreat()
        self.boss_handle = None
        self.wave += 1
        self.telemetry.log(
            "boss_retreat_complete",
            arena=self.arena,
            segment=self.chase.segment,
            encounters=self.chase.boss_encounter_count,
            persistent_health=self.chase.persistent_boss_health,
            next_wave=self.wave,
        )
        self.transition(WaveState.WAVE_INTRO)

    def _tick_boss_defeated(self) -> None:
        if self.arena >= FINAL_ARENA:
            if self.state_timer >= BOSS_DEFEATED_FRAMES * FINAL_ARENA_CELEBRATION_MULT:
                self.transition(WaveState.ARENA_TRANSITION)
            return
        if self.state_timer >= BOSS_DEFEATED_FRAMES:
            self.portal_open = True

    def enter_portal(self) -> bool:
        """Called by the portal collaborator when the player steps in."""
        if self.state is not WaveState.BOSS_DEFEATED or not self.portal_open:
            return False
        self.portal_open = False
        self.transition(WaveState.ARENA_TRANSITION)
        return True

    def _tick_arena_transition(self) -> None:
        if self.state_timer < ARENA_TRANSITION_FRAMES:
            return

        if self.arena >= FINAL_ARENA:
            self.run_complete = True
            self.telemetry.log("run_complete", arena=self.arena, score=self.hero.score, frame=self.frame)
            logger.info(f"Run complete at frame {self.frame} (score {self.hero.score})")
            return

        previous = self.arena
        self.arena += 1
        self.wave = 1
        self.chase = BossChaseState.for_arena(get_arena_config(self.arena).boss_chase)
        self.telemetry.log("arena_transition", from_arena=previous, to_arena=self.arena)
        self.transition(WaveState.WAVE_INTRO)
