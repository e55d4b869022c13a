"""
Unit tests for the offline arena XP tool.
"""

import json

from tools import calculate_arena_xp


class TestCalculateArenaXp:
    """Tests for the command-line entry point."""

    def test_writes_table(self, tmp_path, capsys):
        """Test a small run over one arena."""
        output = tmp_path / "arena_xp.json"
        code = calculate_arena_xp.main([
            "--samples", "2", "--seed", "5", "--arena", "1", "--output", str(output),
        ])
        assert code == 0

        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["samples"] == 2
        assert payload["seed"] == 5
        assert list(payload["arenas"]) == ["1"]
        assert "Arena 1:" in capsys.readouterr().out

    def test_same_seed_same_table(self, tmp_path):
        """Test that reruns with the same seed agree."""
        tables = []
        for name in ("a.json", "b.json"):
            output = tmp_path / name
            calculate_arena_xp.main(["--samples", "2", "--arena", "2", "--output", str(output)])
            tables.append(json.loads(output.read_text(encoding="utf-8"))["arenas"])
        assert tables[0] == tables[1]

    def test_balance_file_applied(self, tmp_path):
        """Test that --balance loads tuner overrides before simulating."""
        balance = tmp_path / "balance.json"
        balance.write_text(json.dumps({"overrides": {
            "enemy.grunt.xp_value": 0,
            "enemy.rookie.xp_value": 0,
            "enemy.water_balloon.xp_value": 0,
            "enemy.fast_bouncer.xp_value": 0,
        }}), encoding="utf-8")
        output = tmp_path / "arena_xp.json"
        code = calculate_arena_xp.main([
            "--samples", "1", "--arena", "1", "--balance", str(balance), "--output", str(output),
        ])
        assert code == 0
        # Only the boss XP is left
        assert json.loads(output.read_text(encoding="utf-8"))["arenas"]["1"]["total_xp"] == 20

    def test_bad_sample_count_fails(self, tmp_path, capsys):
        """Test that zero samples exits non-zero with a traceback."""
        code = calculate_arena_xp.main(["--samples", "0", "--output", str(tmp_path / "x.json")])
        assert code == 1
        assert "ValueError" in capsys.readouterr().err
        assert not (tmp_path / "x.json").exists()
