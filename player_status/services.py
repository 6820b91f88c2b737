"""Service container and factory for shared state.

Everything event handlers and the scheduler share lives here and is passed
explicitly, instead of module-level globals.
"""

from dataclasses import dataclass
from zoneinfo import ZoneInfo

from player_status.clients.game import GameClient, GameMessageSink
from player_status.config import Config
from player_status.config_file import ConfigFile
from player_status.config_store import ConfigStore
from player_status.errors import ConfigParseError, ConfigPersistError
from player_status.identity import IdentityCache, IdentityResolver, PendingLookups
from player_status.models import NotificationConfig


@dataclass
class Services:
    """Container for shared state and game host clients."""

    client: GameClient
    cache: IdentityCache
    pending: PendingLookups
    resolver: IdentityResolver
    store: ConfigStore
    config_file: ConfigFile
    sink: GameMessageSink
    tz: ZoneInfo
    scan_depth: int = 4


def load_initial_config(config_file: ConfigFile) -> NotificationConfig:
    """Load the notification configuration at startup.

    A missing file is created with defaults. A malformed file is left alone
    for the operator to fix and the defaults are used in memory.
    """
    try:
        loaded = config_file.load()
    except ConfigParseError as e:
        print(f"Error loading configuration, using defaults: {e}")
        return NotificationConfig()

    if loaded is not None:
        print(f"Configuration loaded from {config_file.path}")
        return loaded

    defaults = NotificationConfig()
    try:
        config_file.save(defaults)
        print(f"Created default configuration at {config_file.path}")
    except ConfigPersistError as e:
        print(f"ERROR: {e}")
    return defaults


def create_services(config: Config, client: GameClient) -> Services:
    """Build the service container and load the notification configuration."""
    tz = ZoneInfo(config.timezone)
    config_file = ConfigFile(config.config_file, tz)
    cache = IdentityCache()
    pending = PendingLookups()
    resolver = IdentityResolver.for_client(
        client,
        cache,
        pending,
        timeout=config.lookup_timeout,
        poll_interval=config.lookup_poll_interval,
        debug=config.debug,
    )

    return Services(
        client=client,
        cache=cache,
        pending=pending,
        resolver=resolver,
        store=ConfigStore(load_initial_config(config_file)),
        config_file=config_file,
        sink=GameMessageSink(client),
        tz=tz,
        scan_depth=config.scan_depth,
    )
