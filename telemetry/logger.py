from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Set


def _now_iso() -> str:
    # ISO-ish without importing datetime (fast + good enough for logs)
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """
    Fire-and-forget structured event sink (one JSON object per line).

    Wave start/clear, modifier choice, anti-stall trips and boss segment
    transitions all go through log(). Nothing the core does depends on it.
    """
    path: Optional[Path] = None
    enabled: bool = True
    flush_each_write: bool = False
    _once_keys: Set[str] = field(default_factory=set)
    _started_at: float = field(default_factory=time.time)

    def init(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file (don’t overwrite)
        self.path.touch(exist_ok=True)
        self.log("telemetry_init", file=str(self.path))

    def log(self, event: str, **fields: Any) -> None:
        if not self.enabled or self.path is None:
            return

        row: Dict[str, Any] = {
            "t": time.time(),
            "ts": _now_iso(),
            "event": event,
            **fields,
        }

        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False) + "\n")
                if self.flush_each_write:
                    f.flush()
        except Exception:
            # Telemetry must never break the game.
            return

    def log_once(self, key: str, event: str, **fields: Any) -> bool:
        """
        Log an event only the first time `key` is seen.

        Returns True if the event was emitted.
        """
        if key in self._once_keys:
            return False
        self._once_keys.add(key)
        self.log(event, **fields)
        return True

    def reset_once(self, prefix: str = "") -> None:
        """Forget dedupe keys (all of them, or those starting with prefix)."""
        if not prefix:
            self._once_keys.clear()
            return
        self._once_keys = {k for k in self._once_keys if not k.startswith(prefix)}


# global singleton (easy import everywhere)
telemetry = TelemetryLogger()
