"""Welcome and goodbye broadcasts for connecting and leaving players."""

from player_status.handlers.base import register_handler
from player_status.identity import is_displayable
from player_status.models import PLAYER_CONNECTED, PLAYER_DISCONNECTED, GameEvent
from player_status.models.notification import PLAYERNAME_TOKEN
from player_status.services import Services


def format_player_message(template: str, player_name: str) -> str:
    """Fill the {playername} token of a message template."""
    return template.replace(PLAYERNAME_TOKEN, player_name)


def _announce(event: GameEvent, services: Services, template: str, label: str) -> None:
    player_name = services.resolver.resolve(event.data)
    if not is_displayable(player_name):
        print(f"Skipping {label} message - could not resolve player name (got: {player_name})")
        return
    services.sink.emit(format_player_message(template, player_name))
    print(f"Sent {label} message for {player_name}")


@register_handler(PLAYER_CONNECTED, background=True)
def handle_player_connected(event: GameEvent, services: Services) -> None:
    """Broadcast the welcome message for a player who just joined."""
    config = services.store.current()
    if not config.welcome_enabled:
        return
    _announce(event, services, config.welcome_message, "welcome")


@register_handler(PLAYER_DISCONNECTED, background=True)
def handle_player_disconnected(event: GameEvent, services: Services) -> None:
    """Broadcast the goodbye message for a player who just left."""
    config = services.store.current()
    if not config.goodbye_enabled:
        return
    _announce(event, services, config.goodbye_message, "goodbye")
