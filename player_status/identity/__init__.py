"""Player identity resolution."""

from player_status.identity.cache import UNKNOWN_PLAYER, IdentityCache, PendingLookups
from player_status.identity.extractor import Extraction, extract, extract_identity, extract_player_id
from player_status.identity.ingestion import ingest_identity_response, ingest_statistics
from player_status.identity.resolver import (
    IdentityResolver,
    is_displayable,
    is_placeholder,
    placeholder_name,
)

__all__ = [
    "UNKNOWN_PLAYER",
    "Extraction",
    "IdentityCache",
    "IdentityResolver",
    "PendingLookups",
    "extract",
    "extract_identity",
    "extract_player_id",
    "ingest_identity_response",
    "ingest_statistics",
    "is_displayable",
    "is_placeholder",
    "placeholder_name",
]
