"""
Threat-budget allocator.

Spends a wave's threat budget through repeated weighted picks from the wave's
pool. Each pick must fit both the remaining budget and the cognitive headroom.
The same allocator drives the live orchestrator (one pick per pacing slot) and
the offline simulator (drained in a loop).
"""

import math
import random
from typing import Dict, List, Optional, Tuple

from engine.error_handler import logger
from systems.balance import BalanceStore
from systems.enemies import (
    ENEMY_ARCHETYPES,
    EnemyArchetype,
    ThreatCost,
    is_wave_eligible,
    tuned_spawn_weight,
    tuned_threat_cost,
    tuned_xp_value,
)
from .arenas import get_arena_config
from .modifiers import select_wave_modifier
from .pool import WaveEnemyPoolBuilder
from .threat_budget import (
    MIN_SCHOOL_COUNT,
    SCHOOL_SIZE_MAX,
    SCHOOL_SIZE_MIN,
    can_school,
    compute_wave_budget,
    get_featured_type_bonus,
    get_school_chance,
    get_wave_type,
    xp_per_enemy,
)
from .types import SpawnDecision, WaveExecutionState


# (archetype id, archetype, unit cost, weight)
Candidate = Tuple[str, EnemyArchetype, ThreatCost, float]


class ThreatBudgetAllocator:
    """
    Turns a WaveExecutionState into a stream of SpawnDecisions.

    The rng is shared with the pool builder so one seed reproduces a whole
    wave: modifier roll, pool shuffle, then every pick in order.
    """

    def __init__(
        self,
        catalog: Optional[Dict[str, EnemyArchetype]] = None,
        balance: Optional[BalanceStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.catalog = ENEMY_ARCHETYPES if catalog is None else catalog
        self.balance = balance
        self.rng = rng if rng is not None else random.Random()
        self.pool_builder = WaveEnemyPoolBuilder(self.catalog, balance, self.rng)

    def start_wave(self, arena: int, wave: int, frame: int = 0) -> WaveExecutionState:
        """Pick the modifier, compute the budget and fix the pool for a new wave."""
        max_waves = get_arena_config(arena).waves
        wave_type = get_wave_type(wave, max_waves)
        modifier = select_wave_modifier(arena, wave, max_waves, self.rng)
        budget_total, cognitive_max = compute_wave_budget(arena, wave_type, modifier, self.balance)
        pool = self.pool_builder.build_pool(arena, wave, modifier)

        return WaveExecutionState(
            arena=arena,
            wave=wave,
            max_waves=max_waves,
            wave_type=wave_type,
            modifier=modifier,
            budget_total=budget_total,
            cognitive_max=cognitive_max,
            pool=tuple(pool),
            started_frame=frame,
        )

    def get_candidates(self, state: WaveExecutionState) -> List[Candidate]:
        """Affordable pool members in catalog order, with their pick weights."""
        featured = get_arena_config(state.arena).lesson_enemy
        featured_bonus = get_featured_type_bonus(self.balance)

        candidates: List[Candidate] = []
        for arch_id, arch in self.catalog.items():
            if arch_id not in state.pool:
                continue
            if not is_wave_eligible(arch, state.arena, state.wave, self.balance):
                continue
            cost = tuned_threat_cost(arch, self.balance)
            # A free unit would never bring the budget down
            if cost.total <= 0 or cost.total > state.budget_remaining:
                continue
            if state.cognitive_used + cost.cognitive > state.cognitive_max:
                continue

            weight = tuned_spawn_weight(arch, self.balance)
            if arch_id == featured:
                weight *= featured_bonus
            if weight <= 0:
                continue
            candidates.append((arch_id, arch, cost, weight))
        return candidates

    def _roll_weighted(self, candidates: List[Candidate]) -> Candidate:
        total_weight = sum(c[3] for c in candidates)
        roll = self.rng.random() * total_weight
        for candidate in candidates:
            roll -= candidate[3]
            if roll <= 0:
                return candidate
        # Float drift can leave a sliver of roll unspent
        return candidates[0]

    def _roll_school_count(self, state: WaveExecutionState, arch_id: str, cost: ThreatCost) -> int:
        """
        Units for this pick: a school of MIN_SCHOOL_COUNT+ or a single unit.

        The rolled size is truncated to what the budget and cognitive headroom
        allow; a truncated school below the minimum collapses to one unit.
        """
        if not can_school(arch_id):
            return 1
        if self.rng.random() >= get_school_chance(state.arena, state.wave):
            return 1

        size = self.rng.randint(SCHOOL_SIZE_MIN, SCHOOL_SIZE_MAX)
        affordable = min(size, math.floor(state.budget_remaining / cost.total))
        if cost.cognitive > 0:
            headroom = state.cognitive_max - state.cognitive_used
            affordable = min(affordable, math.floor(headroom / cost.cognitive))

        return affordable if affordable >= MIN_SCHOOL_COUNT else 1

    def pick_next(self, state: WaveExecutionState) -> Optional[SpawnDecision]:
        """
        Commit the next pick against state, or return None when nothing fits.

        A returned decision has already been charged to the budget and the
        cognitive counter.
        """
        if state.budget_exhausted:
            return None

        candidates = self.get_candidates(state)
        if not candidates:
            return None

        arch_id, arch, cost, _weight = self._roll_weighted(candidates)
        count = self._roll_school_count(state, arch_id, cost)

        xp_mult = state.modifier.xp_mult if state.modifier is not None else 1.0
        decision = SpawnDecision(
            enemy_type=arch_id,
            count=count,
            is_school=count > 1,
            unit_cost=cost.total,
            unit_cognitive=cost.cognitive,
            xp_per_unit=xp_per_enemy(tuned_xp_value(arch, self.balance), xp_mult, state.wave),
            elite=state.modifier is not None and state.modifier.elite_only,
        )

        state.budget_remaining -= decision.total_cost
        state.cognitive_used += decision.total_cognitive
        state.spawn_count += decision.count
        state.decisions.append(decision)
        return decision

    def drain(self, state: WaveExecutionState) -> List[SpawnDecision]:
        """Pick until nothing fits. Used by the offline simulator."""
        decisions = []
        while True:
            decision = self.pick_next(state)
            if decision is None:
                break
            decisions.append(decision)
        if not state.budget_exhausted:
            logger.debug(
                f"Arena {state.arena} wave {state.wave}: drained with "
                f"{state.budget_remaining} budget unspent "
                f"(cognitive {state.cognitive_used}/{state.cognitive_max})"
            )
        return decisions
