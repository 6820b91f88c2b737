"""Notification configuration models.

Both models are frozen. Updates build new instances so that a configuration
handed out by the ConfigStore never changes under a reader.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone, tzinfo
from typing import Any

# On-disk representation of "never sent"
NEVER_SENT = "0001-01-01T00:00:00"

DEFAULT_WELCOME_MESSAGE = "Welcome to the galaxy, {playername}!"
DEFAULT_GOODBYE_MESSAGE = "Player {playername} has left our galaxy"
PLAYERNAME_TOKEN = "{playername}"


def parse_last_sent(value: Any, tz: tzinfo) -> datetime | None:
    """Parse a persisted last_sent value.

    Naive timestamps are interpreted in ``tz``. Null and the year-1 sentinel
    both mean never sent.

    Raises:
        ValueError: If the value is not an ISO 8601 timestamp.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"last_sent must be a string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value)
    if parsed.year == 1:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


def _parse_interval(value: Any) -> int:
    """Coerce interval_minutes to a positive int.

    Hand-edited files may hold 30.0 or "30"; both are accepted.

    Raises:
        ValueError: If the value is not a positive whole number.
    """
    parsed = None
    if isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    elif isinstance(value, float) and value.is_integer():
        parsed = int(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            number = None
        if number is not None and number.is_integer():
            parsed = int(number)
    if parsed is None or parsed <= 0:
        raise ValueError(f"interval_minutes must be a positive integer, got {value!r}")
    return parsed


@dataclass(frozen=True)
class ScheduledMessage:
    """A broadcast repeated every ``interval_minutes``."""

    enabled: bool = False
    text: str = ""
    interval_minutes: int = 30
    last_sent: datetime | None = None

    @property
    def key(self) -> tuple[str, int]:
        """Identity of the message across configuration reloads."""
        return (self.text, self.interval_minutes)

    def is_due(self, now: datetime) -> bool:
        """Whether the message should be sent at ``now``."""
        if not self.enabled or not self.text.strip():
            return False
        if self.last_sent is None:
            return True
        # Compare instants; same-zone arithmetic ignores DST offsets
        elapsed = _utc(now) - _utc(self.last_sent)
        return elapsed.total_seconds() >= self.interval_minutes * 60

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "enabled": self.enabled,
            "text": self.text,
            "interval_minutes": self.interval_minutes,
            "last_sent": self.last_sent.isoformat() if self.last_sent else NEVER_SENT,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], tz: tzinfo) -> "ScheduledMessage":
        """Create ScheduledMessage from dictionary.

        Raises:
            ValueError: If a field has the wrong type or the interval is not positive.
        """
        enabled = data.get("enabled", False)
        text = data.get("text", "")
        interval = data.get("interval_minutes", 30)
        if not isinstance(enabled, bool):
            raise ValueError("enabled must be true or false")
        if not isinstance(text, str):
            raise ValueError("text must be a string")
        interval = _parse_interval(interval)

        return cls(
            enabled=enabled,
            text=text,
            interval_minutes=interval,
            last_sent=parse_last_sent(data.get("last_sent"), tz),
        )


@dataclass(frozen=True)
class NotificationConfig:
    """Welcome/goodbye settings plus the scheduled message sequence."""

    welcome_enabled: bool = True
    welcome_message: str = DEFAULT_WELCOME_MESSAGE
    goodbye_enabled: bool = True
    goodbye_message: str = DEFAULT_GOODBYE_MESSAGE
    scheduled_messages: tuple[ScheduledMessage, ...] = field(default_factory=tuple)

    def with_last_sent(self, sent: dict[tuple[str, int], datetime]) -> "NotificationConfig":
        """Return a copy with last_sent advanced for the given message keys.

        A timestamp older than the one already recorded is ignored, so
        last_sent never moves backwards.
        """
        messages = []
        for message in self.scheduled_messages:
            fired_at = sent.get(message.key)
            if fired_at is not None and (message.last_sent is None or _utc(message.last_sent) < _utc(fired_at)):
                message = replace(message, last_sent=fired_at)
            messages.append(message)
        return replace(self, scheduled_messages=tuple(messages))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "welcome_enabled": self.welcome_enabled,
            "welcome_message": self.welcome_message,
            "goodbye_enabled": self.goodbye_enabled,
            "goodbye_message": self.goodbye_message,
            "scheduled_messages": [m.to_dict() for m in self.scheduled_messages],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], tz: tzinfo) -> "NotificationConfig":
        """Create NotificationConfig from dictionary.

        Malformed scheduled message entries are skipped with a warning.

        Raises:
            ValueError: If a top-level field has the wrong type.
        """
        defaults = cls()
        welcome_enabled = data.get("welcome_enabled", defaults.welcome_enabled)
        goodbye_enabled = data.get("goodbye_enabled", defaults.goodbye_enabled)
        welcome_message = data.get("welcome_message", defaults.welcome_message)
        goodbye_message = data.get("goodbye_message", defaults.goodbye_message)
        if not isinstance(welcome_enabled, bool) or not isinstance(goodbye_enabled, bool):
            raise ValueError("welcome_enabled and goodbye_enabled must be true or false")
        if not isinstance(welcome_message, str) or not isinstance(goodbye_message, str):
            raise ValueError("welcome_message and goodbye_message must be strings")

        raw_messages = data.get("scheduled_messages") or []
        if not isinstance(raw_messages, list):
            raise ValueError("scheduled_messages must be a list")

        messages = []
        for i, raw in enumerate(raw_messages):
            if not isinstance(raw, dict):
                print(f"Warning: Scheduled message {i} is not an object, skipping")
                continue
            try:
                messages.append(ScheduledMessage.from_dict(raw, tz))
            except ValueError as e:
                print(f"Warning: Scheduled message {i} is invalid ({e}), skipping")

        return cls(
            welcome_enabled=welcome_enabled,
            welcome_message=welcome_message,
            goodbye_enabled=goodbye_enabled,
            goodbye_message=goodbye_message,
            scheduled_messages=tuple(messages),
        )
