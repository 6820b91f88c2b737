"""Response ingestion: fills the name cache from inbound events.

This is the only path that can satisfy a pending lookup. It runs on the
event thread, concurrently with resolvers waiting on the cache.
"""

from collections.abc import Mapping
from typing import Any

from player_status.identity.cache import IdentityCache
from player_status.identity.extractor import extract_identity, iter_fields

DEFAULT_SCAN_DEPTH = 4


def ingest_identity_response(payload: Any, cache: IdentityCache) -> int:
    """Cache the name from a player info response.

    Returns:
        1 if a name was cached, 0 otherwise.
    """
    identity = extract_identity(payload)
    if identity is None:
        print(f"Player info response not recognized: {type(payload).__name__}")
        return 0
    entity_id, name = identity
    if cache.put(entity_id, name):
        print(f"Cached player info from response: {entity_id} -> {name}")
        return 1
    return 0


def _children(value: Any) -> list[Any]:
    if isinstance(value, (str, bytes)):
        return []
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [v for _, v in iter_fields(value)]


def ingest_statistics(payload: Any, cache: IdentityCache, max_depth: int = DEFAULT_SCAN_DEPTH) -> int:
    """Cache every player found anywhere in a statistics payload.

    Walks fields and nested collections down to ``max_depth`` levels below
    the payload, visiting each object once.

    Returns:
        Number of names cached.
    """
    cached = 0
    seen: set[int] = set()
    stack: list[tuple[Any, int]] = [(payload, 0)]

    while stack:
        value, depth = stack.pop()
        if value is None or id(value) in seen:
            continue
        seen.add(id(value))

        if depth > 0:
            identity = extract_identity(value, strict=True)
            if identity is not None:
                entity_id, name = identity
                if cache.put(entity_id, name):
                    print(f"Cached player from statistics: {entity_id} -> {name}")
                    cached += 1
                continue

        if depth >= max_depth:
            continue
        # Reversed so siblings are visited in payload order
        for child in reversed(_children(value)):
            stack.append((child, depth + 1))

    return cached
