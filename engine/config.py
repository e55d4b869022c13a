"""
Configuration for the playtest and the offline tools, saved as JSON.
"""

import json
from pathlib import Path
from typing import Optional, Dict, Any

from settings import FPS
from .error_handler import logger

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Config file location
CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_DIR.mkdir(exist_ok=True)
CONFIG_FILE = CONFIG_DIR / "settings.json"

DEFAULT_TELEMETRY_PATH = PROJECT_ROOT / "logs" / "telemetry.jsonl"
DEFAULT_BALANCE_PATH = CONFIG_DIR / "balance_overrides.json"
DEFAULT_ARENA_XP_PATH = PROJECT_ROOT / "data" / "arena_xp.json"


class GameConfig:
    """Manages game configuration/settings."""

    def __init__(self) -> None:
        self.fps: int = FPS
        self.start_arena: int = 1
        self.seed: Optional[int] = None  # None = fresh unseeded RNG each run
        self.telemetry_enabled: bool = True
        self.telemetry_path: Path = DEFAULT_TELEMETRY_PATH
        self.balance_path: Path = DEFAULT_BALANCE_PATH
        self.arena_xp_path: Path = DEFAULT_ARENA_XP_PATH

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return {
            "fps": self.fps,
            "start_arena": self.start_arena,
            "seed": self.seed,
            "telemetry_enabled": self.telemetry_enabled,
            "telemetry_path": str(self.telemetry_path),
            "balance_path": str(self.balance_path),
            "arena_xp_path": str(self.arena_xp_path),
        }

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Load config from dictionary. Missing keys fall back to defaults."""
        self.fps = int(data.get("fps", FPS))
        self.start_arena = max(1, int(data.get("start_arena", 1)))
        seed = data.get("seed")
        self.seed = int(seed) if seed is not None else None
        self.telemetry_enabled = bool(data.get("telemetry_enabled", True))
        self.telemetry_path = Path(data.get("telemetry_path", DEFAULT_TELEMETRY_PATH))
        self.balance_path = Path(data.get("balance_path", DEFAULT_BALANCE_PATH))
        self.arena_xp_path = Path(data.get("arena_xp_path", DEFAULT_ARENA_XP_PATH))

    def save(self, path: Optional[Path] = None) -> bool:
        """Save config to file."""
        path = Path(path) if path is not None else CONFIG_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.warning(f"Error saving config: {e}")
            return False

    def load(self, path: Optional[Path] = None) -> bool:
        """Load config from file. Returns False (current values kept) if missing or unreadable."""
        path = Path(path) if path is not None else CONFIG_FILE
        if not path.exists():
            return False

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top level is not an object")
            parsed = GameConfig()
            parsed.from_dict(data)
            self.__dict__.update(parsed.__dict__)
            return True
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Error loading config {path}: {e}")
            return False


# Global config instance
_config = GameConfig()


def get_config() -> GameConfig:
    """Get the global config instance."""
    return _config


def load_config() -> GameConfig:
    """Load and return the config."""
    _config.load()
    return _config


def save_config() -> bool:
    """Save the global config."""
    return _config.save()
