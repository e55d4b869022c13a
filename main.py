"""
Headless playtest.

Runs the live wave orchestrator from a pygame frame clock against a simulated
arena: enemies walk in from the edge and die after a random lifetime, the boss
loses a fixed amount of health per frame, and the portal is entered as soon as
it opens. Useful for eyeballing pacing and checking the full arena cycle
without the real game.

Usage:
    python main.py                      # real-time, from the configured start arena
    python main.py --fast --seed 42     # uncapped frame rate, reproducible
    python main.py --arena 3 --max-frames 20000
"""

import argparse
import os
import random
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
import pygame

from settings import TITLE
from engine.config import load_config
from engine.error_handler import ConfigError, logger
from engine.managers import WaveOrchestrator
from systems.balance import BalanceStore
from systems.progression import load_arena_xp_rewards
from telemetry.logger import telemetry

ARENA_RADIUS = 30.0
ENEMY_LIFETIME_FRAMES = (90, 420)
BOSS_DAMAGE_PER_FRAME = 6


@dataclass
class SimEnemy:
    archetype_id: str
    position: pygame.math.Vector2
    frames_left: int
    elite: bool = False
    xp: int = 0


@dataclass
class SimBoss:
    arena: int
    phase: int
    health: float
    retreated: bool = False

    @property
    def alive(self) -> bool:
        return self.health > 0 and not self.retreated


class PlaytestWorld:
    """Stand-in entity layer: implements both the enemy and the boss sink."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng
        self.enemies: List[SimEnemy] = []
        self.boss: Optional[SimBoss] = None
        self.kills = 0
        self.spawned = 0

    # --- Positions -------------------------------------------------------

    def spawn_position(self, archetype_id: str) -> pygame.math.Vector2:
        """A point on the arena edge, at a random angle."""
        edge = pygame.math.Vector2(ARENA_RADIUS, 0)
        return edge.rotate(self.rng.uniform(0, 360))

    # --- Enemy sink ------------------------------------------------------

    def spawn_enemy_at(
        self, archetype_id: str, position: Any, elite: bool = False, xp: int = 0,
    ) -> SimEnemy:
        lifetime = self.rng.randint(*ENEMY_LIFETIME_FRAMES)
        if elite:
            lifetime = int(lifetime * 1.5)
        enemy = SimEnemy(archetype_id, pygame.math.Vector2(position), lifetime, elite, xp)
        self.enemies.append(enemy)
        self.spawned += 1
        return enemy

    def live_enemy_count(self) -> int:
        return len(self.enemies)

    # --- Boss sink -------------------------------------------------------

    def spawn_boss(self, arena: int, phase: int, health: int) -> SimBoss:
        self.boss = SimBoss(arena, phase, float(health))
        return self.boss

    def retreat_boss(self, handle: SimBoss) -> None:
        handle.retreated = True

    def kill_boss(self, handle: SimBoss) -> None:
        handle.health = 0

    def boss_active(self) -> bool:
        return self.boss is not None and self.boss.alive

    def boss_health(self, handle: SimBoss) -> Optional[float]:
        return handle.health if handle is not None else None

    # --- Simulation ------------------------------------------------------

    def update(self) -> int:
        """Advance one frame; returns the XP carried by enemies that died."""
        survivors = []
        kill_xp = 0
        for enemy in self.enemies:
            enemy.frames_left -= 1
            # Drift toward the center while alive
            if enemy.position.length() > 1:
                enemy.position.scale_to_length(enemy.position.length() - 0.05)
            if enemy.frames_left > 0:
                survivors.append(enemy)
            else:
                self.kills += 1
                kill_xp += enemy.xp
        self.enemies = survivors

        if self.boss is not None and self.boss.alive:
            self.boss.health = max(0.0, self.boss.health - BOSS_DAMAGE_PER_FRAME)
        return kill_xp


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"{TITLE} headless playtest")
    parser.add_argument("--arena", type=int, default=None, help="Start arena (default: from config)")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: from config, else unseeded)")
    parser.add_argument("--fast", action="store_true", help="Don't cap the frame rate")
    parser.add_argument("--max-frames", type=int, default=600_000, help="Stop after this many frames")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config()

    seed = args.seed if args.seed is not None else config.seed
    rng = random.Random(seed) if seed is not None else random.Random()
    start_arena = args.arena if args.arena is not None else config.start_arena

    if config.telemetry_enabled:
        telemetry.init(config.telemetry_path)
    else:
        telemetry.enabled = False

    balance = BalanceStore(path=config.balance_path)
    balance.load()

    try:
        rewards = load_arena_xp_rewards(config.arena_xp_path)
    except ConfigError as e:
        logger.warning(f"{e}; later arenas start at level 1")
        rewards = None

    world = PlaytestWorld(rng)
    orchestrator = WaveOrchestrator(
        enemy_sink=world,
        boss_sink=world,
        balance=balance,
        rng=rng,
        telemetry_logger=telemetry,
        position_provider=world.spawn_position,
        arena_xp_rewards=rewards,
        start_arena=start_arena,
    )

    pygame.init()
    clock = pygame.time.Clock()

    last_arena = orchestrator.arena
    print(f"{TITLE}: playtest from arena {start_arena} (level {orchestrator.hero.level})")

    while not orchestrator.run_complete and orchestrator.frame < args.max_frames:
        if args.fast:
            clock.tick()
        else:
            clock.tick(config.fps)
        pygame.event.pump()

        orchestrator.award_kill_xp(world.update())
        orchestrator.tick()

        if orchestrator.portal_open:
            orchestrator.enter_portal()
        if orchestrator.arena != last_arena:
            print(f"  frame {orchestrator.frame}: arena {last_arena} cleared")
            last_arena = orchestrator.arena

    pygame.quit()

    status = "complete" if orchestrator.run_complete else "stopped"
    print(
        f"Run {status} at frame {orchestrator.frame}: arena {orchestrator.arena} "
        f"wave {orchestrator.wave}, {world.spawned} spawned, {world.kills} killed, "
        f"level {orchestrator.hero.level}, score {orchestrator.hero.score}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
