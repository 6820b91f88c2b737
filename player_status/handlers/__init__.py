"""Handler registry and exports."""

from player_status.handlers.base import (
    HANDLERS,
    HandlerFunc,
    get_handler,
    register_handler,
    runs_in_background,
)
from player_status.handlers.identity import handle_identity_response, handle_statistics
from player_status.handlers.players import (
    format_player_message,
    handle_player_connected,
    handle_player_disconnected,
)

__all__ = [
    "HANDLERS",
    "HandlerFunc",
    "get_handler",
    "register_handler",
    "runs_in_background",
    "format_player_message",
    "handle_identity_response",
    "handle_player_connected",
    "handle_player_disconnected",
    "handle_statistics",
]
