"""
Unit tests for wave table validation.
"""

import pytest
from engine.error_handler import ConfigError, ValidationError
from systems.enemies import ENEMY_ARCHETYPES
from systems.waves.validation import require_valid_config, run_full_validation


class TestWaveValidation:
    """Tests for the cross-table checks."""

    def test_shipped_config_is_clean(self):
        """Test that the shipped tables pass every check."""
        results = run_full_validation()
        assert set(results) == {"enemies", "arenas", "budgets", "modifiers", "schooling"}
        assert all(errors == [] for errors in results.values()), results
        require_valid_config()

    def test_missing_archetype_reported(self):
        """Test that dropping a referenced archetype is caught in several places."""
        catalog = {k: v for k, v in ENEMY_ARCHETYPES.items() if k != "shielded"}
        results = run_full_validation(catalog)
        assert any("shielded" in e for e in results["arenas"])
        assert any("shielded" in e for e in results["modifiers"])
        assert any("shielded" in e for e in results["schooling"])

    def test_require_valid_config_raises(self):
        """Test that problems surface as a ValidationError the tools treat as config."""
        catalog = {k: v for k, v in ENEMY_ARCHETYPES.items() if k != "teleporter"}
        with pytest.raises(ConfigError) as exc_info:
            require_valid_config(catalog)
        assert isinstance(exc_info.value, ValidationError)
        assert "teleporter" in str(exc_info.value)
