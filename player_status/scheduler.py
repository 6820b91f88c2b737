"""Scheduler for interval-based broadcast messages.

Runs in a background thread, checking scheduled messages every 60 seconds.
Fired timestamps are written back to the configuration file so that
intervals survive restarts. A crash between sending and saving means the
message is sent again after the restart.
"""

import threading
import time
from datetime import datetime, tzinfo

from player_status.clients.game import GameMessageSink
from player_status.config_file import ConfigFile
from player_status.config_store import ConfigStore
from player_status.errors import ConfigPersistError


def run_scheduler(
    store: ConfigStore,
    config_file: ConfigFile,
    sink: GameMessageSink,
    tz: tzinfo,
    tick_seconds: int = 60,
    shutdown_event: threading.Event | None = None,
) -> None:
    """Main scheduler loop - runs in separate thread.

    The first check happens one tick after start. Ticks run back to back in
    this thread, so they never overlap.

    Args:
        store: Live notification configuration.
        config_file: Where fired timestamps are persisted.
        sink: Broadcast sink.
        tz: Timezone for "now".
        tick_seconds: Seconds between checks.
        shutdown_event: Optional event to signal shutdown.
    """
    print("Scheduled message timer started")
    while True:
        # Use event wait for responsive shutdown, fall back to sleep
        if shutdown_event is not None:
            if shutdown_event.wait(timeout=tick_seconds):
                print("Scheduler shutting down...")
                break
        else:
            time.sleep(tick_seconds)

        try:
            check_scheduled_messages(store, config_file, sink, tz)
        except Exception as e:
            print(f"Error in scheduled message check: {e}")


def check_scheduled_messages(
    store: ConfigStore,
    config_file: ConfigFile,
    sink: GameMessageSink,
    tz: tzinfo,
    now: datetime | None = None,
) -> list[str]:
    """Send every due scheduled message once and persist the new timestamps.

    Messages are evaluated in configuration order. If anything fired, the
    whole configuration is saved once at the end of the tick; a failed save
    is reported and the in-memory timestamps are kept.

    Returns:
        Texts of the messages sent during this tick.
    """
    if now is None:
        now = datetime.now(tz)
    config = store.current()

    fired: dict[tuple[str, int], datetime] = {}
    sent_texts: list[str] = []
    for message in config.scheduled_messages:
        if not message.is_due(now):
            continue
        sink.emit(message.text)
        fired[message.key] = now
        sent_texts.append(message.text)
        print(f"Sent scheduled message: {message.text}")

    if not fired:
        return sent_texts

    updated = store.record_sent(fired)
    try:
        config_file.save(updated)
        print(f"Updated last_sent to {now:%Y-%m-%d %H:%M:%S} for {len(fired)} message(s)")
    except ConfigPersistError as e:
        print(f"ERROR: Failed to save configuration after scheduled message: {e}")
    return sent_texts
