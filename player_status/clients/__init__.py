"""Clients for the game host."""

from player_status.clients.game import (
    REQUEST_CONSOLE_COMMAND,
    REQUEST_PLAYER_INFO,
    GameClient,
    GameMessageSink,
    request_identity,
    send_global_message,
)

__all__ = [
    "REQUEST_CONSOLE_COMMAND",
    "REQUEST_PLAYER_INFO",
    "GameClient",
    "GameMessageSink",
    "request_identity",
    "send_global_message",
]
