"""Shared test fixtures and configuration."""

import json
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from player_status.clients.game import GameMessageSink
from player_status.config_file import ConfigFile
from player_status.config_store import ConfigStore
from player_status.identity import IdentityCache, IdentityResolver, PendingLookups
from player_status.models import NotificationConfig
from player_status.services import Services

UTC = ZoneInfo("UTC")


@dataclass(frozen=True)
class TestConfig:
    """Test configuration matching the real Config interface."""

    project_root: Path = Path("/tmp/test_project")
    config_file: Path = Path("/tmp/test_project/PlayerStatusConfig.json")
    tick_seconds: int = 60
    timezone: str = "UTC"
    lookup_timeout: float = 0.5
    lookup_poll_interval: float = 0.02
    scan_depth: int = 4
    event_workers: int = 4
    settle_delay: float = 0.1
    startup_message: str = "PlayerStatusMod has loaded successfully!"
    startup_delay: float = 5.0
    debug: bool = False


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> TestConfig:
    """Create a test configuration with temporary paths."""
    return TestConfig(
        project_root=temp_dir,
        config_file=temp_dir / "PlayerStatusConfig.json",
    )


@pytest.fixture
def game_client():
    """Mock game host recording every request."""
    return MagicMock()


@pytest.fixture
def said(game_client):
    """Console commands sent so far through the mock game client."""
    return lambda: [
        c.args[2]
        for c in game_client.game_request.call_args_list
        if c.args[0] == "request_console_command"
    ]


@pytest.fixture
def requested_ids(game_client):
    """Player ids requested so far through the mock game client."""
    return lambda: [
        c.args[2].id
        for c in game_client.game_request.call_args_list
        if c.args[0] == "request_player_info"
    ]


@pytest.fixture
def config_file(temp_dir: Path) -> ConfigFile:
    return ConfigFile(temp_dir / "PlayerStatusConfig.json", UTC)


@pytest.fixture
def services(game_client, config_file, test_config) -> Services:
    """Service container wired to a mock game client."""
    cache = IdentityCache()
    pending = PendingLookups()
    return Services(
        client=game_client,
        cache=cache,
        pending=pending,
        resolver=IdentityResolver.for_client(
            game_client,
            cache,
            pending,
            timeout=test_config.lookup_timeout,
            poll_interval=test_config.lookup_poll_interval,
        ),
        store=ConfigStore(NotificationConfig()),
        config_file=config_file,
        sink=GameMessageSink(game_client),
        tz=UTC,
        scan_depth=test_config.scan_depth,
    )


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    """Configuration file with a never-sent message and a 7-digit fraction timestamp."""
    return {
        "welcome_enabled": True,
        "welcome_message": "Welcome to the galaxy, {playername}!",
        "goodbye_enabled": False,
        "goodbye_message": "Player {playername} has left our galaxy",
        "scheduled_messages": [
            {
                "enabled": True,
                "text": "Join our Discord!",
                "interval_minutes": 30,
                "last_sent": "0001-01-01T00:00:00",
            },
            {
                "enabled": False,
                "text": "Server restarts at 04:00",
                "interval_minutes": 60,
                "last_sent": "2026-01-27T10:15:00.1234567",
            },
        ],
    }


@pytest.fixture
def populated_config_file(config_file: ConfigFile, sample_config_data) -> ConfigFile:
    config_file.path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file.path, "w") as f:
        json.dump(sample_config_data, f)
    return config_file
