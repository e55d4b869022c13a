from .boss_chase import BossChaseState
from .wave_orchestrator import WaveOrchestrator, WaveState

__all__ = [
    "BossChaseState",
    "WaveOrchestrator",
    "WaveState",
]
