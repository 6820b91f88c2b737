"""Game event kinds and the payload shapes the mod recognizes."""

from dataclasses import dataclass
from typing import Any

# Event kinds delivered by the game host
PLAYER_CONNECTED = "player_connected"
PLAYER_DISCONNECTED = "player_disconnected"
IDENTITY_RESPONSE = "identity_response"
BULK_STATISTICS = "bulk_statistics"


@dataclass(frozen=True)
class PlayerInfo:
    """Identity-bearing payload: carries both the entity id and the name."""

    entity_id: int
    player_name: str | None = None


@dataclass(frozen=True)
class IdRef:
    """Id-only payload, also used as the body of a player info request."""

    id: int


@dataclass(frozen=True)
class GameEvent:
    """A single event from the game host."""

    kind: str
    data: Any = None
    seq_nr: int = 0
