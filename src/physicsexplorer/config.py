"""
Configuration
=============
This module serves as the central place for global settings of the explorer.

Why is this file needed?
------------------------
1. Abstraction: the tick interval, canvas size and log settings are read in
   one place instead of being hardcoded in every controller and widget.
2. Deployment: the values can be overridden through environment variables
   without touching the code (useful for debugging a single animation).

Exports:
    DEFAULT_TICK_INTERVAL_MS (int): Period of the animation clock.
    DEFAULT_CANVAS_SIZE (tuple[int, int]): Preferred canvas widget size.
    LOG_LEVEL (int): Level passed to `setup_logging`.
    LOG_FILE (str | None): Optional log file path.
"""
import logging
import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"Ignoring {name}={raw!r}: not an integer.")
        return default
    return value if value > 0 else default


def _env_log_level(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


# Global Constants
DEFAULT_TICK_INTERVAL_MS: int = _env_int("PHYSICSEXPLORER_TICK_MS", 50)
DEFAULT_CANVAS_SIZE: tuple[int, int] = (700, 500)
APP_NAME: str = "Physics Explorer"

LOG_LEVEL: int = _env_log_level("PHYSICSEXPLORER_LOG_LEVEL", logging.INFO)
LOG_FILE: str | None = os.environ.get("PHYSICSEXPLORER_LOG_FILE") or None
