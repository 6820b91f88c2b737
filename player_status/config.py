"""Runtime settings for the player status mod.

Environment variables and paths are defined here. Use get_config() to access
settings - it loads dotenv once and caches the result. The notification
configuration edited by server operators (welcome text, scheduled messages)
lives in a JSON file and is handled by config_file.py.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv


def _parse_int_env(name: str, default: int, minimum: int = 1) -> int:
    """Parse an integer environment variable with fallback to default.

    Args:
        name: Environment variable name.
        default: Default value if not set, invalid or below minimum.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer value or default.
    """
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_float_env(name: str, default: float) -> float:
    """Parse a positive float environment variable with fallback to default."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _validate_timezone(tz_str: str, default: str = "UTC") -> str:
    """Validate a timezone string.

    Args:
        tz_str: Timezone string to validate.
        default: Default timezone if invalid.

    Returns:
        Valid timezone string.
    """
    try:
        ZoneInfo(tz_str)
        return tz_str
    except (KeyError, ValueError, OSError):
        return default


def _get_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback to parent of the package directory
    return Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Config:
    """Immutable runtime settings container."""

    # Paths
    project_root: Path
    config_file: Path

    # Scheduler
    tick_seconds: int
    timezone: str

    # Identity resolution
    lookup_timeout: float
    lookup_poll_interval: float
    scan_depth: int

    # Event handling
    event_workers: int

    # Config file reload
    settle_delay: float

    # Startup broadcast
    startup_message: str
    startup_delay: float

    debug: bool


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and return runtime settings. Cached after first call."""
    project_root = _get_project_root()

    # Single load_dotenv call for entire application
    load_dotenv(project_root / ".env")

    config_file_env = os.getenv("PLAYER_STATUS_CONFIG_FILE", "").strip()
    config_file = Path(config_file_env) if config_file_env else project_root / "PlayerStatusConfig.json"

    return Config(
        # Paths
        project_root=project_root,
        config_file=config_file,

        # Scheduler
        tick_seconds=_parse_int_env("SCHEDULER_TICK_SECONDS", 60),
        timezone=_validate_timezone(os.getenv("TIMEZONE", "UTC")),

        # Identity resolution
        lookup_timeout=_parse_float_env("LOOKUP_TIMEOUT_SECONDS", 5.0),
        lookup_poll_interval=_parse_float_env("LOOKUP_POLL_SECONDS", 0.1),
        scan_depth=_parse_int_env("STATISTICS_SCAN_DEPTH", 4),

        # Event handling
        event_workers=_parse_int_env("EVENT_WORKERS", 8),

        # Config file reload (milliseconds in env, seconds here)
        settle_delay=max(_parse_int_env("CONFIG_SETTLE_MS", 100), 100) / 1000,

        # Startup broadcast
        startup_message=os.getenv("STARTUP_MESSAGE", "PlayerStatusMod has loaded successfully!"),
        startup_delay=_parse_float_env("STARTUP_MESSAGE_DELAY", 5.0),

        debug=_parse_bool_env("PLAYER_STATUS_DEBUG"),
    )
