"""
Unit tests for spawn pacing.
"""

import pytest
from systems.balance import BalanceStore
from systems.waves import WAVE_MODIFIERS, get_arena_config
from systems.waves.pacing import (
    get_burst_chance,
    get_pacing_value,
    get_spawn_interval,
    roll_burst_picks,
)


class TestSpawnInterval:
    """Tests for get_spawn_interval."""

    def test_fixed_intervals(self):
        """Test lesson and exam intervals."""
        assert get_spawn_interval("lesson", 1) == 90
        assert get_spawn_interval("exam", 7) == 45

    def test_integration_tightens_per_wave(self):
        """Test that integration waves speed up and bottom out at the minimum."""
        assert get_spawn_interval("integration", 3) == 74
        assert get_spawn_interval("integration", 20) == 40
        assert get_spawn_interval("integration", 30) == 40

    def test_modifier_multiplier(self):
        """Test that rush shortens and breather lengthens the interval."""
        assert get_spawn_interval("integration", 3, WAVE_MODIFIERS["rush"]) == pytest.approx(74 * 0.6)
        assert get_spawn_interval("integration", 3, WAVE_MODIFIERS["breather"]) == pytest.approx(74 * 1.5)


class TestBurstChance:
    """Tests for get_burst_chance."""

    def test_lesson_and_exam(self):
        """Test the fixed burst chances."""
        arena = get_arena_config(1)
        assert get_burst_chance("lesson", 1, arena) == pytest.approx(0.10)
        assert get_burst_chance("exam", 7, arena) == pytest.approx(0.30)

    def test_integration_grows_and_caps(self):
        """Test the per-wave growth and the cap."""
        arena = get_arena_config(1)
        assert get_burst_chance("integration", 3, arena) == pytest.approx(0.21)
        assert get_burst_chance("integration", 15, arena) == pytest.approx(0.35)

    def test_corridor_arena_halves(self):
        """Test that narrow arenas halve the burst chance."""
        assert get_burst_chance("exam", 8, get_arena_config(5)) == pytest.approx(0.15)

    def test_no_burst_modifier(self):
        """Test that breather waves never burst."""
        arena = get_arena_config(6)
        assert get_burst_chance("integration", 3, arena, WAVE_MODIFIERS["breather"]) == 0.0


class TestBurstPicks:
    """Tests for roll_burst_picks."""

    def test_zero_chance_is_single_pick(self, stub_rng):
        """Test that no burst chance never rolls."""
        scripted = stub_rng([0.5])
        assert roll_burst_picks(scripted, 0.0) == 1
        assert scripted.random() == 0.5

    def test_failed_roll_is_single_pick(self, stub_rng):
        """Test a roll above the chance."""
        assert roll_burst_picks(stub_rng([0.9]), 0.3) == 1

    @pytest.mark.parametrize("second_roll, expected", [(0.0, 2), (0.49, 2), (0.5, 3), (0.99, 3)])
    def test_burst_size(self, stub_rng, second_roll, expected):
        """Test that a burst makes 2 or 3 picks."""
        assert roll_burst_picks(stub_rng([0.1, second_roll]), 0.3) == expected


class TestPacingValues:
    """Tests for tunable pacing thresholds."""

    def test_defaults(self):
        """Test the untuned values."""
        assert get_pacing_value("stress_pause_threshold") == 12
        assert get_pacing_value("micro_breather_interval") == 8
        assert get_pacing_value("micro_breather_duration") == 120

    def test_override(self):
        """Test that a tuned value wins and comes back as an int."""
        store = BalanceStore()
        store.set("waves.pacing.stress_pause_threshold", 20.0)
        value = get_pacing_value("stress_pause_threshold", store)
        assert value == 20
        assert isinstance(value, int)
