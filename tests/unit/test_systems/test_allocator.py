"""
Unit tests for the threat-budget allocator.
"""

import random

import pytest
from systems.balance import BalanceStore
from systems.enemies import EnemyArchetype
from systems.waves import WAVE_MODIFIERS, ThreatBudgetAllocator, WaveExecutionState


def make_arch(arch_id, weight=1.0, durability=10, damage=10, cognitive=1, xp=1):
    return EnemyArchetype(
        id=arch_id,
        name=arch_id.title(),
        spawn_weight=weight,
        xp_value=xp,
        durability_cost=durability,
        damage_cost=damage,
        cognitive_cost=cognitive,
    )


def make_state(pool, budget=10_000, cognitive_max=10_000, arena=1, wave=1, modifier=None):
    return WaveExecutionState(
        arena=arena,
        wave=wave,
        max_waves=7,
        wave_type="lesson" if wave == 1 else "integration",
        modifier=modifier,
        budget_total=budget,
        cognitive_max=cognitive_max,
        pool=tuple(pool),
    )


class TestCandidates:
    """Tests for candidate filtering."""

    def test_exhausted_budget_returns_none(self, rng):
        """Test that a spent budget yields no pick."""
        allocator = ThreatBudgetAllocator(catalog={"a": make_arch("a")}, rng=rng)
        state = make_state(["a"], budget=0)
        assert allocator.pick_next(state) is None

    def test_empty_pool_returns_none(self, rng):
        """Test that an empty pool yields no pick."""
        allocator = ThreatBudgetAllocator(catalog={"a": make_arch("a")}, rng=rng)
        assert allocator.pick_next(make_state([])) is None

    def test_unaffordable_types_skipped(self, rng):
        """Test that a type costing more than the remaining budget is never picked."""
        catalog = {"big": make_arch("big", durability=50, damage=50), "small": make_arch("small")}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=rng)
        state = make_state(["big", "small"], budget=60)
        decision = allocator.pick_next(state)
        assert decision.enemy_type == "small"

    def test_cognitive_headroom_respected(self, rng):
        """Test that a type exceeding the cognitive headroom is skipped."""
        catalog = {"complex": make_arch("complex", cognitive=5), "simple": make_arch("simple", cognitive=1)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=rng)
        state = make_state(["complex", "simple"], cognitive_max=3)
        assert allocator.pick_next(state).enemy_type == "simple"

    def test_free_types_never_picked(self, rng):
        """Test that a zero-cost archetype can't stall a wave."""
        catalog = {"free": make_arch("free", durability=0, damage=0)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=rng)
        assert allocator.pick_next(make_state(["free"])) is None

    def test_missing_cost_data_uses_fallback(self, rng):
        """Test that an archetype without costs is charged the fallback cost."""
        catalog = {"blank": EnemyArchetype(id="blank", name="Blank", spawn_weight=1, xp_value=1)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=rng)
        decision = allocator.pick_next(make_state(["blank"]))
        assert decision.unit_cost == 30
        assert decision.unit_cognitive == 1

    def test_zero_weight_never_selected(self, rng):
        """Test that a live weight override of 0 removes a type from picks."""
        store = BalanceStore()
        store.set("enemy.rookie.spawn_weight", 0)
        allocator = ThreatBudgetAllocator(balance=store, rng=rng)
        state = make_state(["grunt", "rookie"], budget=2000, cognitive_max=200)
        decisions = allocator.drain(state)
        assert decisions
        assert all(d.enemy_type == "grunt" for d in decisions)

    def test_override_seen_mid_wave(self, rng):
        """Test that a change to the balance store applies to the very next pick."""
        store = BalanceStore()
        allocator = ThreatBudgetAllocator(balance=store, rng=rng)
        state = make_state(["grunt", "rookie"], budget=5000, cognitive_max=500)
        for _ in range(5):
            allocator.pick_next(state)
        store.set("enemy.grunt.spawn_weight", 0)
        later = [allocator.pick_next(state) for _ in range(20)]
        assert all(d.enemy_type == "rookie" for d in later)


class TestWeightedSelection:
    """Tests for the weighted roll."""

    def test_one_to_three_fairness(self):
        """Test that weights 1:3 give the heavier type ~75% of picks."""
        catalog = {"light": make_arch("light", weight=1), "heavy": make_arch("heavy", weight=3)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=random.Random(2024))
        state = make_state(["light", "heavy"], budget=10**9, cognitive_max=10**9)
        picks = [allocator.pick_next(state).enemy_type for _ in range(10_000)]
        assert picks.count("heavy") / len(picks) == pytest.approx(0.75, abs=0.03)

    def test_featured_type_bias(self):
        """Test that the arena's lesson enemy gets the featured bonus."""
        catalog = {"grunt": make_arch("grunt", weight=1), "other": make_arch("other", weight=1)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=random.Random(11))
        state = make_state(["grunt", "other"], budget=10**9, cognitive_max=10**9)
        picks = [allocator.pick_next(state).enemy_type for _ in range(10_000)]
        assert picks.count("grunt") / len(picks) == pytest.approx(0.75, abs=0.03)

    def test_roll_walks_catalog_order(self, stub_rng):
        """Test that a roll in the second weight band picks the second type."""
        catalog = {"first": make_arch("first", weight=1), "second": make_arch("second", weight=1)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=stub_rng([0.75]))
        state = make_state(["second", "first"])
        assert allocator.pick_next(state).enemy_type == "second"


class TestSchooling:
    """Tests for school picks."""

    def test_school_truncated_below_minimum_is_single(self, stub_rng):
        """Test budget 40, cost 20, school size 5: only 2 affordable, so one unit."""
        catalog = {"fish": make_arch("fish", durability=10, damage=10)}
        # weighted roll, then school roll (0.0 < any positive chance)
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=stub_rng([0.1, 0.0], randint_value=5))
        state = make_state(["fish"], budget=40, arena=4, wave=1)
        decision = allocator.pick_next(state)
        assert decision.count == 1
        assert decision.is_school is False
        assert state.budget_remaining == 20

    def test_school_spawned_when_affordable(self, stub_rng):
        """Test that a full school is committed as one decision."""
        catalog = {"fish": make_arch("fish", durability=10, damage=10)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=stub_rng([0.1, 0.0], randint_value=5))
        state = make_state(["fish"], budget=1000, arena=4, wave=1)
        decision = allocator.pick_next(state)
        assert decision.is_school is True
        assert decision.count == 5
        assert state.budget_remaining == 900
        assert state.cognitive_used == 5

    def test_school_clamped_to_cognitive_headroom(self, stub_rng):
        """Test that a school never pushes cognitive load past the cap."""
        catalog = {"fish": make_arch("fish", durability=10, damage=10, cognitive=1)}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=stub_rng([0.1, 0.0], randint_value=6))
        state = make_state(["fish"], budget=1000, cognitive_max=4, arena=4, wave=1)
        decision = allocator.pick_next(state)
        assert decision.count == 4
        assert state.cognitive_used <= state.cognitive_max

    def test_excluded_type_never_schools(self, stub_rng):
        """Test that school-excluded archetypes always come alone."""
        catalog = {"shielded": make_arch("shielded")}
        allocator = ThreatBudgetAllocator(catalog=catalog, rng=stub_rng([0.1, 0.0], randint_value=6))
        decision = allocator.pick_next(make_state(["shielded"], arena=4, wave=1))
        assert decision.count == 1


class TestAllocatorInvariants:
    """Tests for budget/cognitive invariants over whole waves."""

    @pytest.mark.parametrize("arena, wave", [(1, 3), (3, 4), (4, 2), (6, 8)])
    def test_monotonic_and_affordable(self, arena, wave):
        """Test that every pick fits and counters only move one way."""
        allocator = ThreatBudgetAllocator(rng=random.Random(arena * 100 + wave))
        state = allocator.start_wave(arena, wave)
        while True:
            budget_before = state.budget_remaining
            cognitive_before = state.cognitive_used
            decision = allocator.pick_next(state)
            if decision is None:
                break
            assert decision.enemy_type in state.pool
            assert decision.total_cost <= budget_before
            assert state.budget_remaining < budget_before
            assert state.cognitive_used >= cognitive_before
            assert state.cognitive_used <= state.cognitive_max

    def test_elite_modifier_marks_decisions(self, rng):
        """Test that elite waves flag every unit and apply the XP multiplier."""
        allocator = ThreatBudgetAllocator(rng=rng)
        state = make_state(["grunt"], modifier=WAVE_MODIFIERS["elite"])
        decision = allocator.pick_next(state)
        assert decision.elite is True
        # floor(1 * 1.5) = 1 on wave 1
        assert decision.xp_per_unit == 1

    def test_start_wave_state(self, allocator):
        """Test the state built for arena 1 wave 1."""
        state = allocator.start_wave(1, 1, frame=42)
        assert state.modifier is None
        assert state.wave_type == "lesson"
        assert state.budget_total == 500
        assert state.budget_remaining == 500
        assert state.cognitive_max == 50
        assert state.pool == ("grunt", "rookie")
        assert state.started_frame == 42
        assert state.last_spawn_frame is None


class TestEndToEnd:
    """Arena 1 lesson wave drained to completion."""

    def test_arena_one_lesson_drains_budget(self, allocator):
        """Test that the lesson wave spends its whole budget within the caps."""
        state = allocator.start_wave(1, 1)
        decisions = allocator.drain(state)

        assert decisions
        assert state.budget_remaining <= 0
        assert state.cognitive_used <= state.cognitive_max
        assert all(d.enemy_type in ("grunt", "rookie") for d in decisions)
        assert sum(d.total_cost for d in decisions) == 500
        assert allocator.pick_next(state) is None
