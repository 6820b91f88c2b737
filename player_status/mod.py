"""PlayerStatusMod - the entry point called by the game host.

The host calls game_start once, game_event for every event, game_update on
every frame and game_exit on shutdown. Handlers that may wait on a name
lookup run on a thread pool so that the host's event thread never blocks.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from watchdog.observers import Observer

from player_status.clients.game import GameClient
from player_status.config import Config, get_config
from player_status.config_store import ConfigReloader
from player_status.handlers import get_handler, runs_in_background
from player_status.models import GameEvent
from player_status.scheduler import run_scheduler
from player_status.services import Services, create_services


class PlayerStatusMod:
    """Welcome/goodbye broadcasts and scheduled messages for a game server.

    Args:
        config: Runtime settings. Defaults to get_config().
    """

    def __init__(self, config: Config | None = None):
        self.config = config or get_config()
        self.services: Services | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._shutdown = threading.Event()
        self._scheduler_thread: threading.Thread | None = None
        self._observer: Observer | None = None
        self._reloader: ConfigReloader | None = None
        self._startup_timer: threading.Timer | None = None

    def game_start(self, client: GameClient) -> None:
        """Load configuration and start the watcher, scheduler and startup message."""
        print("PlayerStatusMod loaded with configuration support.")
        self.services = create_services(self.config, client)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.event_workers, thread_name_prefix="player-status"
        )
        self._start_config_watcher()
        self._start_scheduler()

        # Announce once the host has settled
        self._startup_timer = threading.Timer(
            self.config.startup_delay, self.services.sink.emit, args=[self.config.startup_message]
        )
        self._startup_timer.daemon = True
        self._startup_timer.start()

    def _start_config_watcher(self) -> None:
        services = self.services
        self._reloader = ConfigReloader(services.store, services.config_file, self.config.settle_delay)
        try:
            self._observer = services.config_file.watch(self._reloader.notify)
            print("Configuration file watcher enabled")
        except Exception as e:
            print(f"Error setting up configuration watcher: {e}")
            self._observer = None

    def _start_scheduler(self) -> None:
        services = self.services
        self._scheduler_thread = threading.Thread(
            target=run_scheduler,
            kwargs={
                "store": services.store,
                "config_file": services.config_file,
                "sink": services.sink,
                "tz": services.tz,
                "tick_seconds": self.config.tick_seconds,
                "shutdown_event": self._shutdown,
            },
            name="player-status-scheduler",
            daemon=True,
        )
        self._scheduler_thread.start()

    def game_event(self, kind: str, seq_nr: int, data: Any) -> None:
        """Dispatch a host event to its handler. Unknown kinds are ignored."""
        if self.services is None:
            return
        if self.config.debug:
            print(f"DEBUG: Event {kind} received (data: {type(data).__name__})")
        handler = get_handler(kind)
        if handler is None:
            return

        event = GameEvent(kind=kind, data=data, seq_nr=seq_nr)
        if runs_in_background(kind) and self._executor is not None:
            self._executor.submit(self._run_handler, handler, event)
        else:
            self._run_handler(handler, event)

    def _run_handler(self, handler, event: GameEvent) -> None:
        # Boundary: a failing handler must not take down the host or the pool
        try:
            handler(event, self.services)
        except Exception as e:
            print(f"Error handling {event.kind}: {e}")

    def game_update(self) -> None:
        pass

    def game_exit(self) -> None:
        """Stop timers, the watcher, the scheduler and the event pool."""
        self._shutdown.set()
        if self._startup_timer is not None:
            self._startup_timer.cancel()
        if self._reloader is not None:
            self._reloader.cancel()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
        if self._scheduler_thread is not None:
            self._scheduler_thread.join(timeout=5)
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
        print("PlayerStatusMod shutting down.")
