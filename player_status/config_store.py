"""Live notification configuration with atomic hot-swap.

Readers call current() and get a frozen NotificationConfig. Writers build a
new instance and replace the reference, so a reader never sees a mix of old
and new fields.
"""

import threading
from datetime import datetime

from player_status.config_file import ConfigFile
from player_status.errors import ConfigParseError
from player_status.models import NotificationConfig


class ConfigStore:
    """Holds the single live NotificationConfig."""

    def __init__(self, initial: NotificationConfig | None = None):
        self._current = initial if initial is not None else NotificationConfig()
        # Serializes writers only; reads are a plain attribute load
        self._swap_lock = threading.Lock()

    def current(self) -> NotificationConfig:
        return self._current

    def reload(self, new_config: NotificationConfig) -> None:
        """Replace the live configuration. The old instance is dropped."""
        with self._swap_lock:
            self._current = new_config

    def record_sent(self, sent: dict[tuple[str, int], datetime]) -> NotificationConfig:
        """Advance last_sent for fired messages in the live configuration.

        Applied to whatever configuration is live at the time of the call, so
        a reload that happened during the tick keeps its other changes and
        still records the firing.

        Args:
            sent: Message key (text, interval_minutes) -> time it was sent.

        Returns:
            The new live configuration.
        """
        with self._swap_lock:
            updated = self._current.with_last_sent(sent)
            self._current = updated
            return updated


def reload_from_file(store: ConfigStore, config_file: ConfigFile) -> bool:
    """Re-read the configuration file into the store.

    Keeps the previous configuration if the file is missing or malformed.

    Returns:
        True if a new configuration was swapped in.
    """
    try:
        new_config = config_file.load()
    except ConfigParseError as e:
        print(f"Error reloading configuration, keeping previous: {e}")
        return False
    if new_config is None:
        print(f"Configuration file {config_file.path} missing, keeping previous")
        return False
    store.reload(new_config)
    print("Configuration reloaded due to file change")
    return True


class ConfigReloader:
    """Debounced reload trigger for file change notifications.

    Each notification (re)arms a timer for ``settle_delay`` seconds so that
    a file still being written is not read. Reloads never run concurrently.
    """

    def __init__(self, store: ConfigStore, config_file: ConfigFile, settle_delay: float = 0.1):
        self.store = store
        self.config_file = config_file
        self.settle_delay = settle_delay
        self._timer: threading.Timer | None = None
        self._timer_lock = threading.Lock()
        self._reload_lock = threading.Lock()

    def notify(self) -> None:
        """Schedule a reload after the settle delay, replacing any pending one."""
        timer = threading.Timer(self.settle_delay, self._run)
        timer.daemon = True
        with self._timer_lock:
            old_timer = self._timer
            if old_timer is not None:
                old_timer.cancel()
            self._timer = timer
        timer.start()

    def _run(self) -> None:
        # Timer callback: an exception here would only kill the timer thread
        try:
            with self._reload_lock:
                reload_from_file(self.store, self.config_file)
        except Exception as e:
            print(f"Error reloading configuration: {e}")

    def cancel(self) -> None:
        """Cancel a pending reload, if any."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
