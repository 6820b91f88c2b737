"""Thread-safe player name cache and pending lookup tracker.

Both objects are shared between event handler threads, the response
ingestion path and the resolver's bounded wait. They synchronize internally;
callers never lock around them.
"""

import threading
import time
from datetime import datetime

# Returned when no identifier could be extracted at all. Never cached.
UNKNOWN_PLAYER = "Unknown Player"


class IdentityCache:
    """Maps player id -> resolved name for the lifetime of the process."""

    def __init__(self):
        self._names: dict[int, str] = {}
        self._changed = threading.Condition()

    def get(self, entity_id: int) -> str | None:
        """Return the cached name, or None."""
        with self._changed:
            return self._names.get(entity_id)

    def put(self, entity_id: int, name: str | None) -> bool:
        """Cache a name, overwriting any previous one.

        Non-positive ids, empty names and the unknown-player sentinel are
        ignored.

        Returns:
            True if the name was stored.
        """
        if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id <= 0:
            return False
        if not name or name == UNKNOWN_PLAYER:
            return False
        with self._changed:
            self._names[entity_id] = name
            self._changed.notify_all()
        return True

    def wait_for(self, entity_id: int, timeout: float, poll_interval: float = 0.1) -> str | None:
        """Block the calling thread until a name is cached or timeout elapses.

        Wakes on every put and re-checks at least every ``poll_interval``
        seconds.

        Returns:
            The cached name, or None on timeout.
        """
        deadline = time.monotonic() + timeout
        with self._changed:
            while True:
                name = self._names.get(entity_id)
                if name is not None:
                    return name
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                self._changed.wait(min(remaining, poll_interval))

    def __contains__(self, entity_id: int) -> bool:
        with self._changed:
            return entity_id in self._names

    def __len__(self) -> int:
        with self._changed:
            return len(self._names)


class PendingLookups:
    """Set of player ids with an outstanding info request.

    Advisory dedup state only: the resolver removes its entry when the
    bounded wait ends, whatever the outcome.
    """

    def __init__(self):
        self._pending: dict[int, datetime] = {}
        self._lock = threading.Lock()

    def try_begin(self, entity_id: int) -> bool:
        """Record a lookup for entity_id.

        Returns:
            True if recorded, False if a lookup was already in flight.
        """
        with self._lock:
            if entity_id in self._pending:
                return False
            self._pending[entity_id] = datetime.now()
            return True

    def end(self, entity_id: int) -> None:
        """Forget the lookup for entity_id. Safe to call twice."""
        with self._lock:
            self._pending.pop(entity_id, None)

    def requested_at(self, entity_id: int) -> datetime | None:
        with self._lock:
            return self._pending.get(entity_id)

    def __contains__(self, entity_id: int) -> bool:
        with self._lock:
            return entity_id in self._pending

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
