"""Handlers feeding player names into the identity cache."""

from player_status.handlers.base import register_handler
from player_status.identity import ingest_identity_response, ingest_statistics
from player_status.models import BULK_STATISTICS, IDENTITY_RESPONSE, GameEvent
from player_status.services import Services


@register_handler(IDENTITY_RESPONSE)
def handle_identity_response(event: GameEvent, services: Services) -> None:
    """Cache the name from a player info response."""
    ingest_identity_response(event.data, services.cache)


@register_handler(BULK_STATISTICS)
def handle_statistics(event: GameEvent, services: Services) -> None:
    """Cache any player names found in a statistics event."""
    ingest_statistics(event.data, services.cache, max_depth=services.scan_depth)
