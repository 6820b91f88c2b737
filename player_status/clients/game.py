"""Game host client: player info requests and global chat broadcasts.

The host delivers responses asynchronously through the event feed, so every
request here is fire-and-forget.
"""

from datetime import datetime
from typing import Any, Protocol

from player_status.errors import SinkEmitError
from player_status.models import IdRef

REQUEST_PLAYER_INFO = "request_player_info"
REQUEST_CONSOLE_COMMAND = "request_console_command"


class GameClient(Protocol):
    """The request surface the game host exposes to mods."""

    def game_request(self, cmd_id: str, seq_nr: int, data: Any) -> None:
        """Send a request to the game host.

        Args:
            cmd_id: Request kind.
            seq_nr: Sequence number echoed back by the host (0-65535).
            data: Request body.
        """
        ...


def next_seq_nr() -> int:
    """Sequence number derived from the current millisecond."""
    return datetime.now().microsecond // 1000


def request_identity(client: GameClient, entity_id: int) -> None:
    """Ask the host for player info. The answer arrives as an identity_response event."""
    client.game_request(REQUEST_PLAYER_INFO, next_seq_nr(), IdRef(entity_id))


def send_global_message(client: GameClient, message: str) -> None:
    """Broadcast a chat message to every player via the say console command.

    Raises:
        SinkEmitError: If the host rejected the request.
    """
    try:
        client.game_request(REQUEST_CONSOLE_COMMAND, next_seq_nr(), f"say '{message}'")
    except Exception as e:
        raise SinkEmitError(f"Error sending message '{message}': {e}") from e


class GameMessageSink:
    """Best-effort outbound notification sink.

    Failures are reported and dropped; there is no retry.
    """

    def __init__(self, client: GameClient):
        self.client = client

    def emit(self, text: str) -> bool:
        """Broadcast text.

        Returns:
            True if the request was handed to the host, False otherwise.
        """
        try:
            send_global_message(self.client, text)
        except SinkEmitError as e:
            print(str(e))
            return False
        print(f"Sent global message: {text}")
        return True
