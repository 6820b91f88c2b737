"""Error types for identity resolution, notifications and configuration.

None of these are fatal. Each is caught where it is recovered: lookups fall
back to a placeholder name, configuration errors keep the previous
configuration, and emit failures are reported and dropped.

A missing identifier is not an error; extraction simply returns None.
"""


class PlayerStatusError(Exception):
    """Base class for all player status errors."""


class LookupTimeout(PlayerStatusError):
    """No identity response arrived within the bounded wait."""

    def __init__(self, entity_id: int, timeout: float):
        self.entity_id = entity_id
        self.timeout = timeout
        super().__init__(f"No player info for {entity_id} after {timeout:.1f}s")


class LookupAlreadyPending(PlayerStatusError):
    """A lookup for this identifier is already in flight."""

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"Player lookup already pending for {entity_id}")


class ConfigParseError(PlayerStatusError):
    """The persisted notification configuration could not be read."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


class ConfigPersistError(PlayerStatusError):
    """The notification configuration could not be written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save configuration to {path}: {reason}")


class SinkEmitError(PlayerStatusError):
    """A broadcast message could not be handed to the game."""
