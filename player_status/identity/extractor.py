"""Player id extraction from arbitrarily shaped event payloads.

The game host does not attach a name to every event, and payloads come in
several shapes. Extraction tries a fixed list of strategies in order and
returns the first match:

1. identity-bearing payloads (id and name), which need no lookup
2. id-only payloads
3. conventional id fields: id, playerId, entityId, steamId
4. any other field holding a positive integer

Payload fields are read from mappings, dataclasses and plain objects alike.
"""

from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Callable, Iterator, Mapping

from player_status.models import IdRef, PlayerInfo

ID_FIELDS = ("id", "playerId", "entityId", "steamId")

# Field names that identify a player info response
IDENTITY_ID_FIELDS = ("entityId", "id")
IDENTITY_NAME_FIELDS = ("playerName", "name")

# Bulk payloads use the stricter pair only
STRICT_ID_FIELDS = ("entityId",)
STRICT_NAME_FIELDS = ("playerName",)

_MISSING = object()


@dataclass(frozen=True)
class Extraction:
    """Result of a successful extraction.

    ``name`` is set only when the payload carried the name itself.
    """

    entity_id: int
    name: str | None = None


def parse_positive_int(value: Any) -> int | None:
    """Return value as a positive int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _slot_names(cls: type) -> tuple[str, ...]:
    slots = cls.__dict__.get("__slots__", ())
    return (slots,) if isinstance(slots, str) else tuple(slots)


def iter_fields(payload: Any) -> Iterator[tuple[str, Any]]:
    """Yield (name, value) pairs for the public fields of a payload."""
    if payload is None or isinstance(payload, (str, bytes, int, float, bool)):
        return
    if isinstance(payload, Mapping):
        for key, value in payload.items():
            if isinstance(key, str):
                yield key, value
        return
    if is_dataclass(payload) and not isinstance(payload, type):
        for f in fields(payload):
            yield f.name, getattr(payload, f.name)
        return
    if isinstance(payload, tuple) and hasattr(payload, "_fields"):
        yield from zip(payload._fields, payload)
        return
    slots = [name for cls in type(payload).__mro__ for name in _slot_names(cls)]
    for key in slots:
        if not key.startswith("_") and hasattr(payload, key):
            yield key, getattr(payload, key)
    attrs = getattr(payload, "__dict__", None)
    if isinstance(attrs, dict):
        for key, value in attrs.items():
            if not key.startswith("_"):
                yield key, value


def get_field(payload: Any, name: str) -> Any:
    """Read a single field from a payload, or _MISSING."""
    if isinstance(payload, Mapping):
        return payload.get(name, _MISSING)
    if payload is None or isinstance(payload, (str, bytes, int, float, bool)):
        return _MISSING
    return getattr(payload, name, _MISSING)


def _first_field(payload: Any, names: tuple[str, ...]) -> Any:
    for name in names:
        value = get_field(payload, name)
        if value is not _MISSING:
            return value
    return _MISSING


def extract_identity(payload: Any, strict: bool = False) -> tuple[int, str | None] | None:
    """Extract an (id, name) pair from an identity-bearing payload.

    Args:
        payload: Event payload.
        strict: Only accept PlayerInfo or entityId + playerName fields.

    Returns:
        (entity_id, name) where name may be None if the payload carried an
        empty name, or None if the payload is not identity-bearing.
    """
    if isinstance(payload, PlayerInfo):
        entity_id = parse_positive_int(payload.entity_id)
        if entity_id is None:
            return None
        return entity_id, payload.player_name or None

    id_names = STRICT_ID_FIELDS if strict else IDENTITY_ID_FIELDS
    name_names = STRICT_NAME_FIELDS if strict else IDENTITY_NAME_FIELDS
    raw_id = _first_field(payload, id_names)
    raw_name = _first_field(payload, name_names)
    if raw_id is _MISSING or raw_name is _MISSING:
        return None

    entity_id = parse_positive_int(raw_id)
    if entity_id is None:
        return None
    name = str(raw_name).strip() if raw_name is not None else ""
    return entity_id, name or None


def _from_identity(payload: Any) -> Extraction | None:
    identity = extract_identity(payload)
    if identity is None:
        return None
    entity_id, name = identity
    if name is None and not isinstance(payload, PlayerInfo):
        # Unnamed generic payloads still need a lookup
        return None
    return Extraction(entity_id=entity_id, name=name or "")


def _from_id_ref(payload: Any) -> Extraction | None:
    if isinstance(payload, IdRef):
        entity_id = parse_positive_int(payload.id)
        return Extraction(entity_id) if entity_id else None
    return None


def _from_known_fields(payload: Any) -> Extraction | None:
    for name in ID_FIELDS:
        entity_id = parse_positive_int(get_field(payload, name))
        if entity_id is not None:
            return Extraction(entity_id)
    return None


def _from_any_field(payload: Any) -> Extraction | None:
    for name, value in iter_fields(payload):
        if name in ID_FIELDS:
            continue
        entity_id = parse_positive_int(value)
        if entity_id is not None:
            return Extraction(entity_id)
    return None


STRATEGIES: tuple[Callable[[Any], Extraction | None], ...] = (
    _from_identity,
    _from_id_ref,
    _from_known_fields,
    _from_any_field,
)


def extract(payload: Any) -> Extraction | None:
    """Run the extraction strategies in order, first match wins.

    A PlayerInfo whose name is empty yields an Extraction with ``name == ""``;
    callers treat that as a known-but-unnamed player.

    Returns:
        Extraction, or None when no identifier could be found.
    """
    for strategy in STRATEGIES:
        result = strategy(payload)
        if result is not None:
            return result
    return None


def extract_player_id(payload: Any) -> int | None:
    """Convenience wrapper returning only the player id."""
    result = extract(payload)
    return result.entity_id if result else None
