"""Player name resolution.

Turns an event payload into a display name. Names are looked up through the
game host at most once per id: results are cached for the process lifetime
and concurrent lookups for the same id are collapsed into one request.

The host answers a player info request with a separate event, correlated
only by id. The resolver therefore sends the request and then waits, with a
hard timeout, for the ingestion path to put the name into the cache.
"""

import re
from typing import Any, Callable

from player_status.clients.game import GameClient, request_identity
from player_status.errors import LookupAlreadyPending, LookupTimeout
from player_status.identity.cache import UNKNOWN_PLAYER, IdentityCache, PendingLookups
from player_status.identity.extractor import extract

DEFAULT_LOOKUP_TIMEOUT = 5.0

_PLACEHOLDER_RE = re.compile(r"^Player_\d+$")


def placeholder_name(entity_id: int) -> str:
    """Stand-in name used while a lookup is in progress or has failed."""
    return f"Player_{entity_id}"


def is_placeholder(name: str | None) -> bool:
    return bool(name) and _PLACEHOLDER_RE.match(name) is not None


def is_displayable(name: str | None) -> bool:
    """Whether a resolved name is a real player name worth announcing."""
    return bool(name) and name != UNKNOWN_PLAYER and not is_placeholder(name)


class IdentityResolver:
    """Resolves player names with caching, dedup and a bounded wait.

    Args:
        cache: Shared name cache, also written by response ingestion.
        pending: Shared pending lookup tracker.
        request: Callable sending a player info request for an id.
        timeout: Seconds to wait for the response.
        poll_interval: Upper bound between cache re-checks while waiting.
        debug: Print every resolution step.
    """

    def __init__(
        self,
        cache: IdentityCache,
        pending: PendingLookups,
        request: Callable[[int], None],
        timeout: float = DEFAULT_LOOKUP_TIMEOUT,
        poll_interval: float = 0.1,
        debug: bool = False,
    ):
        self.cache = cache
        self.pending = pending
        self.request = request
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.debug = debug

    @classmethod
    def for_client(cls, client: GameClient, cache: IdentityCache, pending: PendingLookups, **kwargs) -> "IdentityResolver":
        """Build a resolver that sends requests through a game client."""
        return cls(cache, pending, lambda entity_id: request_identity(client, entity_id), **kwargs)

    def _debug(self, message: str) -> None:
        if self.debug:
            print(f"DEBUG: {message}")

    def resolve(self, payload: Any) -> str:
        """Resolve the player name for an event payload. Never raises.

        Returns:
            The player's name; ``Player_<id>`` while a lookup is pending or
            after it failed; ``Unknown Player`` if no id could be found.
        """
        try:
            return self._resolve(payload)
        except Exception as e:
            print(f"Error extracting player name: {e}")
            return UNKNOWN_PLAYER

    def _resolve(self, payload: Any) -> str:
        found = extract(payload)
        if found is None:
            self._debug(f"Could not extract player id from {type(payload).__name__}")
            return UNKNOWN_PLAYER

        entity_id = found.entity_id
        if found.name is not None:
            name = found.name or UNKNOWN_PLAYER
            self.cache.put(entity_id, name)
            self._debug(f"Payload carries name for {entity_id}: {name}")
            return name

        cached = self.cache.get(entity_id)
        if cached is not None:
            self._debug(f"Using cached name for {entity_id}: {cached}")
            return cached

        try:
            name = self._lookup(entity_id)
        except LookupAlreadyPending as e:
            self._debug(str(e))
            return placeholder_name(entity_id)
        except LookupTimeout as e:
            print(f"WARNING: {e}")
            return placeholder_name(entity_id)
        except Exception as e:
            print(f"ERROR: Failed to get player info for {entity_id}: {e}")
            return placeholder_name(entity_id)

        print(f"Resolved player {entity_id} to name: {name}")
        return name

    def _lookup(self, entity_id: int) -> str:
        """Request the name and wait for it to be cached.

        Raises:
            LookupAlreadyPending: Another flow is already looking up this id.
            LookupTimeout: No response within the timeout.
        """
        if not self.pending.try_begin(entity_id):
            raise LookupAlreadyPending(entity_id)
        try:
            self.request(entity_id)
            name = self.cache.wait_for(entity_id, self.timeout, self.poll_interval)
        finally:
            self.pending.end(entity_id)
        if name is None:
            raise LookupTimeout(entity_id, self.timeout)
        return name
