"""
Per-wave enemy pool.

A wave only draws from a small, fixed set of archetypes so the player is never
asked to read too many enemy types at once. The arena's lesson enemy leads the
pool; the remaining slots are filled from a shuffle of everything else the
arena allows.
"""

import random
from typing import Dict, List, Optional

from systems.balance import BalanceStore
from systems.enemies import ENEMY_ARCHETYPES, EnemyArchetype, get_available_types_for_arena, is_wave_eligible
from .arenas import get_arena_config
from .threat_budget import get_max_types_per_wave
from .types import WaveModifier


class WaveEnemyPoolBuilder:
    """
    Builds the eligible archetype list for one wave.

    All randomness comes from the injected rng, so the same seed gives the same
    ordered pool.
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

    def build_pool(
        self,
        arena: int,
        wave: int,
        modifier: Optional[WaveModifier] = None,
    ) -> List[str]:
        # Forced composition bypasses every filter
        if modifier is not None and modifier.force_types:
            return list(modifier.force_types)

        max_types = get_max_types_per_wave(arena)
        lesson_enemy = get_arena_config(arena).lesson_enemy

        pool: List[str] = []
        lesson_arch = self.catalog.get(lesson_enemy)
        if lesson_arch is not None and is_wave_eligible(lesson_arch, arena, wave, self.balance):
            pool.append(lesson_enemy)

        others = [
            arch_id
            for arch_id in get_available_types_for_arena(arena, wave, self.catalog, self.balance)
            if arch_id != lesson_enemy
        ]
        # Fisher-Yates, then take from the end
        self.rng.shuffle(others)
        while len(pool) < max_types and others:
            pool.append(others.pop())

        return pool
