"""Event handler protocol and registry."""

from typing import TYPE_CHECKING, Callable, Protocol

from player_status.models import GameEvent

if TYPE_CHECKING:
    from player_status.services import Services


class HandlerFunc(Protocol):
    """Protocol defining handler function signature."""

    def __call__(self, event: GameEvent, services: "Services") -> None:
        """Handle an event.

        Args:
            event: The event to handle.
            services: Shared state and game host clients.
        """
        ...


# Global handler registry, keyed by event kind
HANDLERS: dict[str, HandlerFunc] = {}

# Kinds whose handlers may block (name lookups) and run off the event thread
BACKGROUND_KINDS: set[str] = set()


def register_handler(kind: str, background: bool = False) -> Callable[[HandlerFunc], HandlerFunc]:
    """Decorator to register a handler for an event kind.

    Example:
        @register_handler(PLAYER_CONNECTED, background=True)
        def handle_player_connected(event: GameEvent, services: Services) -> None:
            ...
    """

    def decorator(func: HandlerFunc) -> HandlerFunc:
        HANDLERS[kind] = func
        if background:
            BACKGROUND_KINDS.add(kind)
        else:
            BACKGROUND_KINDS.discard(kind)
        return func

    return decorator


def get_handler(kind: str) -> HandlerFunc | None:
    """Get the handler for an event kind, or None if the kind is ignored."""
    return HANDLERS.get(kind)


def runs_in_background(kind: str) -> bool:
    return kind in BACKGROUND_KINDS
