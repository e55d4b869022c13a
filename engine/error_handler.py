"""
Centralized error handling and logging system.

This module provides:
- Centralized error logging to files
- Custom exception types for the wave/threat-budget core
- A recovery helper for the live frame loop (keep playing, skip the spawn)
"""
import logging
import traceback
from pathlib import Path
from typing import Optional, Callable
from datetime import datetime

# Setup logging directory
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)

# Configure logger
logger = logging.getLogger("arena_waves")
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers
if not logger.handlers:
    # File handler for detailed logs
    log_file = LOG_DIR / f"waves_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


class GameError(Exception):
    """Base exception for game-specific errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class ConfigError(GameError):
    """Missing or malformed archetype / budget / arena tables."""
    pass


class ValidationError(ConfigError):
    """The wave tables disagree with each other or with the enemy catalog."""
    pass


class StateTransitionError(GameError):
    """The wave state machine was asked for a transition it doesn't allow."""
    pass


def log_error(
    error: Exception,
    context: str = "",
) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "wave_tick", "balance_load")
    """
    error_type = type(error).__name__
    error_msg = str(error)
    trace = traceback.format_exc()

    logger.error(
        f"Error in {context}: {error_type}: {error_msg}\n{trace}",
        exc_info=True
    )


def handle_runtime_error(
    error: Exception,
    context: str,
    recovery_action: Optional[Callable] = None
) -> bool:
    """
    Handle an error raised inside the live frame loop.

    Configuration errors are never swallowed here: those belong to the offline
    tooling path where a human can fix the input data.

    Args:
        error: The exception that occurred
        context: Where the error occurred
        recovery_action: Optional function to try for recovery

    Returns:
        True if error was handled, False if should re-raise
    """
    if isinstance(error, ConfigError):
        return False

    log_error(error, context)

    # Try recovery action if provided
    if recovery_action:
        try:
            recovery_action()
            logger.info(f"Recovery action executed for {context}")
            return True
        except Exception as recovery_error:
            log_error(recovery_error, f"{context}_recovery")
            return False

    return True
