"""Notification configuration file: load, save and change watching.

The file is JSON edited by server operators and rewritten by the scheduler
whenever a scheduled message fires, so that last_sent survives restarts.
"""

import json
import os
import tempfile
import threading
from datetime import tzinfo
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from player_status.errors import ConfigParseError, ConfigPersistError
from player_status.models import NotificationConfig


def _preview(text: str) -> str:
    return text[:30]


def describe_messages(config: NotificationConfig) -> None:
    """Print the enabled scheduled messages and when each was last sent."""
    for message in config.scheduled_messages:
        if message.enabled:
            last = message.last_sent.strftime("%Y-%m-%d %H:%M:%S") if message.last_sent else "never"
            print(f"  Message '{_preview(message.text)}...' last_sent: {last}")


class ConfigFile:
    """JSON persistence for NotificationConfig.

    Args:
        path: Location of the configuration file.
        tz: Timezone for naive timestamps found in the file.
    """

    def __init__(self, path: Path, tz: tzinfo):
        self.path = path
        self.tz = tz
        self._write_lock = threading.Lock()

    def load(self) -> NotificationConfig | None:
        """Read the configuration.

        Returns:
            The configuration, or None if the file does not exist.

        Raises:
            ConfigParseError: If the file is unreadable or malformed.
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8-sig") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigParseError(self.path, f"invalid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigParseError(self.path, f"cannot read file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigParseError(self.path, "expected a JSON object")
        try:
            config = NotificationConfig.from_dict(data, self.tz)
        except ValueError as e:
            raise ConfigParseError(self.path, str(e)) from e

        print(f"Loaded {len(config.scheduled_messages)} scheduled messages from {self.path}")
        describe_messages(config)
        return config

    def save(self, config: NotificationConfig) -> None:
        """Write the configuration atomically using temp file + rename.

        Raises:
            ConfigPersistError: If the file could not be written.
        """
        with self._write_lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(suffix=".tmp", dir=self.path.parent)
            except OSError as e:
                raise ConfigPersistError(self.path, str(e)) from e
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except (OSError, TypeError, ValueError) as e:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise ConfigPersistError(self.path, str(e)) from e

        print(f"Saved configuration to {self.path}")
        describe_messages(config)

    def watch(self, on_change: Callable[[], None]) -> Observer:
        """Start watching the file. Returns the running observer."""
        observer = Observer()
        observer.schedule(ConfigFileHandler(self.path, on_change), str(self.path.parent), recursive=False)
        observer.start()
        return observer


class ConfigFileHandler(FileSystemEventHandler):
    """Calls on_change for any create/modify/move landing on the config file."""

    def __init__(self, path: Path, on_change: Callable[[], None]):
        self.name = path.name
        self.on_change = on_change

    def _matches(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(os.fsdecode(p)).name == self.name for p in paths)

    def on_modified(self, event):
        if self._matches(event):
            self.on_change()

    def on_created(self, event):
        if self._matches(event):
            self.on_change()

    def on_moved(self, event):
        if self._matches(event):
            self.on_change()
