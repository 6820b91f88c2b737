"""Tests for player_status/scheduler.py"""

import json
import threading
from datetime import datetime, timedelta
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from player_status.clients.game import GameMessageSink
from player_status.config_store import ConfigStore
from player_status.errors import ConfigPersistError
from player_status.models import NotificationConfig, ScheduledMessage
from player_status.scheduler import check_scheduled_messages, run_scheduler

UTC = ZoneInfo("UTC")
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def sink(game_client):
    return GameMessageSink(game_client)


def make_store(*messages: ScheduledMessage) -> ConfigStore:
    return ConfigStore(NotificationConfig(scheduled_messages=messages))


class TestCheckScheduledMessages:
    """Tests for a single scheduler tick."""

    def test_never_sent_message_fires_on_first_tick(self, config_file, sink, said):
        store = make_store(ScheduledMessage(enabled=True, text="Join our Discord!", interval_minutes=30))
        sent = check_scheduled_messages(store, config_file, sink, UTC, now=NOW)

        assert sent == ["Join our Discord!"]
        assert said() == ["say 'Join our Discord!'"]
        assert store.current().scheduled_messages[0].last_sent == NOW

    def test_persists_last_sent(self, config_file, sink):
        store = make_store(ScheduledMessage(enabled=True, text="Join our Discord!", interval_minutes=30))
        check_scheduled_messages(store, config_file, sink, UTC, now=NOW)

        data = json.loads(config_file.path.read_text())
        assert data["scheduled_messages"][0]["last_sent"] == NOW.isoformat()
        assert config_file.load().scheduled_messages[0].last_sent == NOW

    def test_interval_boundary(self, config_file, sink, said):
        message = ScheduledMessage(enabled=True, text="Vote!", interval_minutes=30, last_sent=NOW)
        store = make_store(message)

        assert check_scheduled_messages(store, config_file, sink, UTC, now=NOW + timedelta(minutes=29)) == []
        assert check_scheduled_messages(store, config_file, sink, UTC, now=NOW + timedelta(minutes=30)) == ["Vote!"]
        assert said() == ["say 'Vote!'"]

    def test_fires_again_one_interval_after_last_send(self, config_file, sink, said):
        store = make_store(ScheduledMessage(enabled=True, text="Vote!", interval_minutes=10))
        for minute in range(0, 31):
            check_scheduled_messages(store, config_file, sink, UTC, now=NOW + timedelta(minutes=minute))
        # Minutes 0, 10, 20 and 30
        assert len(said()) == 4

    def test_disabled_and_blank_messages_never_fire(self, config_file, sink, said):
        store = make_store(
            ScheduledMessage(enabled=False, text="Off", interval_minutes=1),
            ScheduledMessage(enabled=True, text="   ", interval_minutes=1),
        )
        assert check_scheduled_messages(store, config_file, sink, UTC, now=NOW) == []
        assert said() == []
        assert not config_file.path.exists()

    def test_messages_fire_in_configuration_order(self, config_file, sink, said):
        store = make_store(
            ScheduledMessage(enabled=True, text="First", interval_minutes=5),
            ScheduledMessage(enabled=True, text="Second", interval_minutes=5),
            ScheduledMessage(enabled=True, text="Third", interval_minutes=15),
        )
        check_scheduled_messages(store, config_file, sink, UTC, now=NOW)
        assert said() == ["say 'First'", "say 'Second'", "say 'Third'"]

    def test_duplicate_messages_each_fire(self, config_file, sink, said):
        duplicate = ScheduledMessage(enabled=True, text="Twice", interval_minutes=5)
        store = make_store(duplicate, duplicate)
        assert check_scheduled_messages(store, config_file, sink, UTC, now=NOW) == ["Twice", "Twice"]
        assert said() == ["say 'Twice'", "say 'Twice'"]
        assert all(m.last_sent == NOW for m in store.current().scheduled_messages)

    def test_single_save_per_tick(self, config_file, sink):
        store = make_store(
            ScheduledMessage(enabled=True, text="A", interval_minutes=5),
            ScheduledMessage(enabled=True, text="B", interval_minutes=5),
        )
        with patch.object(config_file, "save", wraps=config_file.save) as save:
            check_scheduled_messages(store, config_file, sink, UTC, now=NOW)
        save.assert_called_once()

    def test_persist_failure_keeps_in_memory_timestamp(self, config_file, sink, capsys):
        store = make_store(ScheduledMessage(enabled=True, text="A", interval_minutes=5))
        with patch.object(config_file, "save", side_effect=ConfigPersistError(config_file.path, "read-only")):
            assert check_scheduled_messages(store, config_file, sink, UTC, now=NOW) == ["A"]

        assert store.current().scheduled_messages[0].last_sent == NOW
        assert "ERROR: Failed to save configuration" in capsys.readouterr().out
        # Not resent on the next tick
        assert check_scheduled_messages(store, config_file, sink, UTC, now=NOW + timedelta(minutes=1)) == []

    def test_emit_failure_still_records_send(self, game_client, config_file, sink):
        game_client.game_request.side_effect = RuntimeError("host gone")
        store = make_store(ScheduledMessage(enabled=True, text="A", interval_minutes=5))
        check_scheduled_messages(store, config_file, sink, UTC, now=NOW)
        assert store.current().scheduled_messages[0].last_sent == NOW

    def test_uses_current_time_in_timezone(self, config_file, sink):
        tz = ZoneInfo("Asia/Tokyo")
        store = make_store(ScheduledMessage(enabled=True, text="A", interval_minutes=5))
        check_scheduled_messages(store, config_file, sink, tz)
        assert store.current().scheduled_messages[0].last_sent.tzinfo == tz


class TestRunScheduler:
    """Tests for the scheduler loop."""

    def test_stops_on_shutdown_event(self, config_file, sink, capsys):
        shutdown = threading.Event()
        thread = threading.Thread(
            target=run_scheduler,
            args=(make_store(), config_file, sink, UTC),
            kwargs={"tick_seconds": 60, "shutdown_event": shutdown},
        )
        thread.start()
        shutdown.set()
        thread.join(timeout=5)

        assert not thread.is_alive()
        out = capsys.readouterr().out
        assert "Scheduled message timer started" in out
        assert "Scheduler shutting down..." in out

    def test_first_check_waits_one_tick(self, config_file, sink, said):
        shutdown = threading.Event()
        store = make_store(ScheduledMessage(enabled=True, text="Tick", interval_minutes=1))
        thread = threading.Thread(
            target=run_scheduler,
            args=(store, config_file, sink, UTC),
            kwargs={"tick_seconds": 1, "shutdown_event": shutdown},
        )
        thread.start()
        try:
            assert said() == []
            deadline = datetime.now() + timedelta(seconds=5)
            while not said() and datetime.now() < deadline:
                shutdown.wait(0.05)
            assert said() == ["say 'Tick'"]
        finally:
            shutdown.set()
            thread.join(timeout=5)

    def test_tick_errors_do_not_stop_loop(self, config_file, sink, capsys):
        shutdown = threading.Event()
        calls = []

        def failing_check(*args, **kwargs):
            calls.append(1)
            if len(calls) >= 2:
                shutdown.set()
            raise RuntimeError("tick failed")

        with patch("player_status.scheduler.check_scheduled_messages", side_effect=failing_check):
            run_scheduler(make_store(), config_file, sink, UTC, tick_seconds=0.01, shutdown_event=shutdown)

        assert len(calls) == 2
        assert "Error in scheduled message check: tick failed" in capsys.readouterr().out
