"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import json
import random
from typing import Any, List, Optional

import pytest


class FakeWorld:
    """
    Test double for the enemy and boss sinks.

    Enemies stay alive until a test clears them; the boss keeps whatever
    health the test sets.
    """

    def __init__(self) -> None:
        self.spawned: List[tuple] = []
        self.spawned_xp: List[int] = []
        self.live = 0
        self.boss_spawns: List[tuple] = []
        self.boss_alive = False
        self.current_boss_health: Optional[float] = None
        self.retreated: List[Any] = []
        self.killed: List[Any] = []

    # Enemy sink
    def spawn_enemy_at(
        self, archetype_id: str, position: Any, elite: bool = False, xp: int = 0,
    ) -> None:
        self.spawned.append((archetype_id, position, elite))
        self.spawned_xp.append(xp)
        self.live += 1

    def live_enemy_count(self) -> int:
        return self.live

    def clear_enemies(self) -> None:
        self.live = 0

    # Boss sink
    def spawn_boss(self, arena: int, phase: int, health: int) -> str:
        handle = f"boss-{arena}-{phase}"
        self.boss_spawns.append((arena, phase, health))
        self.boss_alive = True
        self.current_boss_health = health
        return handle

    def retreat_boss(self, handle: Any) -> None:
        self.retreated.append(handle)
        self.boss_alive = False

    def kill_boss(self, handle: Any) -> None:
        self.killed.append(handle)
        self.boss_alive = False

    def boss_active(self) -> bool:
        return self.boss_alive

    def boss_health(self, handle: Any) -> Optional[float]:
        return self.current_boss_health


class StubRng:
    """
    Scripted stand-in for random.Random.

    random() returns the queued values in order (0.0 once exhausted);
    randint() always returns randint_value; shuffle() leaves order alone.
    """

    def __init__(self, randoms=(), randint_value: int = 5) -> None:
        self._randoms = list(randoms)
        self.randint_value = randint_value

    def random(self) -> float:
        return self._randoms.pop(0) if self._randoms else 0.0

    def randint(self, a: int, b: int) -> int:
        return self.randint_value

    def shuffle(self, seq) -> None:
        return None

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def stub_rng():
    """
    Factory for StubRng instances.
    """
    return StubRng


@pytest.fixture
def rng() -> random.Random:
    """
    Seeded RNG so tests are reproducible.
    """
    return random.Random(1337)


@pytest.fixture
def balance_store():
    """
    Create a BalanceStore over the full default parameter registry.
    """
    from systems.balance import BalanceStore
    return BalanceStore()


@pytest.fixture
def allocator(rng):
    """
    Create a ThreatBudgetAllocator over the real catalog.
    """
    from systems.waves import ThreatBudgetAllocator
    return ThreatBudgetAllocator(rng=rng)


@pytest.fixture
def fake_world() -> FakeWorld:
    """
    Create a fresh sink double.
    """
    return FakeWorld()


@pytest.fixture
def telemetry_logger(tmp_path):
    """
    Create a TelemetryLogger writing to a temporary JSONL file.
    """
    from telemetry.logger import TelemetryLogger
    logger = TelemetryLogger()
    logger.init(tmp_path / "telemetry.jsonl")
    return logger


@pytest.fixture
def read_events(telemetry_logger):
    """
    Return a callable listing telemetry event names (optionally filtered).
    """
    def _read(event: Optional[str] = None) -> List[dict]:
        rows = [
            json.loads(line)
            for line in telemetry_logger.path.read_text(encoding="utf-8").splitlines()
            if line.strip()
        ]
        if event is not None:
            rows = [row for row in rows if row["event"] == event]
        return rows
    return _read


@pytest.fixture
def orchestrator(fake_world, rng, telemetry_logger):
    """
    Create a WaveOrchestrator wired to the fake world, starting at arena 1.
    """
    from engine.managers import WaveOrchestrator
    return WaveOrchestrator(
        enemy_sink=fake_world,
        boss_sink=fake_world,
        rng=rng,
        telemetry_logger=telemetry_logger,
    )
