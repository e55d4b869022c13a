"""
Unit tests for the enemy catalog.
"""

import pytest
from systems.balance import BalanceStore
from systems.enemies import (
    ENEMY_ARCHETYPES,
    FALLBACK_THREAT_COST,
    EnemyArchetype,
    ThreatCost,
    get_archetype,
    get_available_types_for_arena,
    is_wave_eligible,
    passes_arena_gates,
    tuned_threat_cost,
)
from systems.enemies.validation import validate_all_archetypes, validate_archetype


class TestThreatCost:
    """Tests for ThreatCost and the fallback."""

    def test_total_is_durability_plus_damage(self):
        """Test that cognitive cost does not count against the threat budget."""
        cost = ThreatCost(durability=12, damage=8, cognitive=5)
        assert cost.total == 20

    def test_missing_cost_data_uses_fallback(self):
        """Test that an archetype with no cost data resolves to the fallback cost."""
        arch = EnemyArchetype(id="mystery", name="Mystery", spawn_weight=1.0, xp_value=1)
        assert arch.has_cost_data is False
        assert arch.threat_cost() == FALLBACK_THREAT_COST
        assert arch.threat_cost().total == 30

    def test_partial_cost_data_falls_back_per_field(self):
        """Test that only the missing fields are filled in."""
        arch = EnemyArchetype(
            id="half", name="Half", spawn_weight=1.0, xp_value=1, durability_cost=5,
        )
        cost = arch.threat_cost()
        assert cost.durability == 5
        assert cost.damage == FALLBACK_THREAT_COST.damage
        assert cost.cognitive == FALLBACK_THREAT_COST.cognitive


class TestRegistry:
    """Tests for the registered roster."""

    def test_registered_archetypes_are_valid(self):
        """Test that every shipped archetype passes validation."""
        results = validate_all_archetypes()
        assert {arch_id: errs for arch_id, errs in results.items() if errs} == {}

    def test_get_archetype(self):
        """Test lookup by id."""
        assert get_archetype("grunt").id == "grunt"
        with pytest.raises(KeyError):
            get_archetype("does_not_exist")

    def test_lesson_enemies_exist(self):
        """Test that every arena's lesson enemy is in the catalog."""
        from systems.waves.arenas import ARENA_CONFIG
        for arena in ARENA_CONFIG.values():
            assert arena.lesson_enemy in ENEMY_ARCHETYPES


class TestEligibility:
    """Tests for arena/wave gating."""

    def test_arena_one_wave_one_types(self):
        """Test that arena 1 wave 1 offers only the starter enemies."""
        assert get_available_types_for_arena(1, 1) == ["grunt", "rookie"]

    def test_min_wave_gate(self):
        """Test that min_wave only applies when a wave is given."""
        balloon = get_archetype("water_balloon")
        assert passes_arena_gates(balloon, 1, wave=1) is False
        assert passes_arena_gates(balloon, 1, wave=2) is True
        assert passes_arena_gates(balloon, 1) is True

    def test_max_arena_gate(self):
        """Test that rookies retire after arena 2."""
        rookie = get_archetype("rookie")
        assert passes_arena_gates(rookie, 2) is True
        assert passes_arena_gates(rookie, 3) is False

    def test_boss_minions_never_eligible(self):
        """Test that boss minions are excluded from wave pools."""
        minion = get_archetype("boss_minion")
        assert is_wave_eligible(minion, 6, 5) is False
        assert "boss_minion" not in get_available_types_for_arena(6)

    def test_zero_weight_never_eligible(self):
        """Test that spawn_weight 0 disables an archetype."""
        assert "splitterling" not in get_available_types_for_arena(6)

    def test_balance_override_can_disable_type(self):
        """Test that a live weight override of 0 removes a type."""
        store = BalanceStore()
        assert store.set("enemy.rookie.spawn_weight", 0).ok
        assert get_available_types_for_arena(1, 1, balance=store) == ["grunt"]

    def test_tuned_cost_reads_override(self):
        """Test that cost overrides are read on every lookup."""
        store = BalanceStore()
        grunt = get_archetype("grunt")
        assert tuned_threat_cost(grunt, store).total == 20
        store.set("enemy.grunt.durability_cost", 30)
        assert tuned_threat_cost(grunt, store).total == 38


class TestArchetypeValidation:
    """Tests for validate_archetype."""

    def test_negative_weight_rejected(self):
        """Test that negative spawn weights are reported."""
        arch = EnemyArchetype(
            id="bad", name="Bad", spawn_weight=-1, xp_value=1,
            durability_cost=1, damage_cost=1, cognitive_cost=1,
        )
        errors = validate_archetype(arch)
        assert any("spawn_weight" in e for e in errors)

    def test_free_enemy_rejected(self):
        """Test that a zero-cost archetype is reported."""
        arch = EnemyArchetype(
            id="free", name="Free", spawn_weight=1, xp_value=1,
            durability_cost=0, damage_cost=0, cognitive_cost=1,
        )
        assert any("Total threat cost" in e for e in validate_archetype(arch))

    @pytest.mark.parametrize("intro, max_arena", [(3, 2), (5, 1)])
    def test_inverted_arena_window_rejected(self, intro, max_arena):
        """Test that max_arena below arena_intro is reported."""
        arch = EnemyArchetype(
            id="x", name="X", spawn_weight=1, xp_value=1,
            durability_cost=1, damage_cost=1, cognitive_cost=1,
            arena_intro=intro, max_arena=max_arena,
        )
        assert any("max_arena" in e for e in validate_archetype(arch))
