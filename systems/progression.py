# systems/progression.py

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from engine.error_handler import ConfigError, logger

# Level curve: 10 XP for the first level-up, each next one costs floor(prev * 1.25)
BASE_XP_TO_LEVEL = 10
XP_CURVE_GROWTH = 1.25


def next_xp_to_level(xp_to_level: int) -> int:
    return math.floor(xp_to_level * XP_CURVE_GROWTH)


@dataclass(frozen=True)
class ArenaXpReward:
    """
    Expected XP for clearing one arena, as produced by the offline simulator.

    - total_xp:          average XP earned across the arena (waves + boss)
    - final_level:       level reached from level 1 with that XP
    - pending_level_ups: level-ups that XP buys
    - xp_remainder:      XP left over after the last level-up
    - xp_to_next_level:  threshold for the level after final_level
    """
    total_xp: int
    final_level: int
    pending_level_ups: int
    xp_remainder: int
    xp_to_next_level: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_xp": self.total_xp,
            "final_level": self.final_level,
            "pending_level_ups": self.pending_level_ups,
            "xp_remainder": self.xp_remainder,
            "xp_to_next_level": self.xp_to_next_level,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArenaXpReward":
        return cls(
            total_xp=int(data["total_xp"]),
            final_level=int(data["final_level"]),
            pending_level_ups=int(data["pending_level_ups"]),
            xp_remainder=int(data["xp_remainder"]),
            xp_to_next_level=int(data["xp_to_next_level"]),
        )


def calculate_level_progression(total_xp: int) -> ArenaXpReward:
    """
    Spend total_xp on level-ups starting from level 1.

        10 XP -> level 2, 12 XP -> level 3, 15 XP -> level 4, ...
    """
    xp = total_xp
    xp_to_level = BASE_XP_TO_LEVEL
    level_ups = 0

    while xp >= xp_to_level:
        xp -= xp_to_level
        level_ups += 1
        xp_to_level = next_xp_to_level(xp_to_level)

    return ArenaXpReward(
        total_xp=total_xp,
        final_level=1 + level_ups,
        pending_level_ups=level_ups,
        xp_remainder=xp,
        xp_to_next_level=xp_to_level,
    )


def load_arena_xp_rewards(path: Path) -> Dict[int, ArenaXpReward]:
    """
    Read the table written by tools/calculate_arena_xp.py.

    Raises ConfigError if the file is missing or malformed.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(
            f"Could not read arena XP table {path}: {e}",
            user_message="Arena XP table is missing; run tools/calculate_arena_xp.py",
        ) from e

    rewards = data.get("arenas", data) if isinstance(data, dict) else None
    if not isinstance(rewards, dict):
        raise ConfigError(f"Arena XP table {path} is not a JSON object")

    try:
        return {int(arena): ArenaXpReward.from_dict(entry) for arena, entry in rewards.items()}
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Malformed entry in arena XP table {path}: {e}") from e


def cumulative_arena_xp(rewards: Mapping[int, ArenaXpReward], arena: int) -> int:
    """XP a player would have earned clearing every arena before this one."""
    return sum(
        reward.total_xp
        for reward_arena, reward in rewards.items()
        if reward_arena < arena
    )


@dataclass
class HeroStats:
    """
    Hero progression for the current run.

    - level, xp:   progression
    - xp_to_level: XP needed for the next level (grows by XP_CURVE_GROWTH)
    - score:       run score; wave clear speed bonuses land here
    """
    level: int = 1
    xp: int = 0
    xp_to_level: int = BASE_XP_TO_LEVEL
    score: int = 0

    # ------------------------------------------------------------------
    # XP / Level
    # ------------------------------------------------------------------

    def grant_xp(self, amount: int) -> list[str]:
        """
        Give XP, handle level ups, and return text messages describing what happened.

        The entity layer calls this (through WaveOrchestrator.award_kill_xp)
        with the xp_per_unit an enemy was spawned with when it dies.
        """
        messages: list[str] = []
        if amount <= 0:
            return messages

        self.xp += amount
        messages.append(f"Gained {amount} XP.")

        # May level up multiple times if amount is big
        while self.xp >= self.xp_to_level:
            self.xp -= self.xp_to_level
            self.level += 1
            self.xp_to_level = next_xp_to_level(self.xp_to_level)
            messages.append(f"Level up! You reached level {self.level}.")

        return messages

    def add_score(self, amount: int) -> int:
        """Add to the run score and return how much was actually added."""
        amount = int(amount)
        if amount <= 0:
            return 0
        self.score += amount
        return amount

    # ------------------------------------------------------------------
    # Run setup
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Fresh run at level 1."""
        self.level = 1
        self.xp = 0
        self.xp_to_level = BASE_XP_TO_LEVEL
        self.score = 0

    def apply_arena_start(
        self,
        arena: int,
        rewards: Optional[Mapping[int, ArenaXpReward]] = None,
    ) -> int:
        """
        Pre-award the levels a player would have earned clearing the arenas
        before `arena`. Returns the number of level-ups applied.

        Starting at arena 1, or without a reward table, is a plain fresh run.
        """
        self.reset()
        if arena <= 1 or not rewards:
            return 0

        total = cumulative_arena_xp(rewards, arena)
        progression = calculate_level_progression(total)
        self.level = progression.final_level
        self.xp = progression.xp_remainder
        self.xp_to_level = progression.xp_to_next_level

        logger.info(
            f"Starting at arena {arena}: pre-awarded {total} XP "
            f"({progression.pending_level_ups} level-ups)"
        )
        return progression.pending_level_ups
