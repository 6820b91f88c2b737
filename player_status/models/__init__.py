"""Shared data models for the player status mod."""

from player_status.models.events import (
    BULK_STATISTICS,
    IDENTITY_RESPONSE,
    PLAYER_CONNECTED,
    PLAYER_DISCONNECTED,
    GameEvent,
    IdRef,
    PlayerInfo,
)
from player_status.models.notification import NotificationConfig, ScheduledMessage

__all__ = [
    "BULK_STATISTICS",
    "IDENTITY_RESPONSE",
    "PLAYER_CONNECTED",
    "PLAYER_DISCONNECTED",
    "GameEvent",
    "IdRef",
    "NotificationConfig",
    "PlayerInfo",
    "ScheduledMessage",
]
