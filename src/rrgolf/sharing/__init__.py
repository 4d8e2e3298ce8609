"""
Spectator sharing.

Owners publish a 4-digit code; spectators use it to poll a read-only
snapshot of the owner's persisted match.
"""

from rrgolf.sharing.codes import (
    generate_share_code,
    normalize_share_code,
    validate_share_code_format,
)
from rrgolf.sharing.spectator import SpectatorSync
from rrgolf.sharing.store import ShareCodeStore

__all__ = [
    "generate_share_code",
    "normalize_share_code",
    "validate_share_code_format",
    "SpectatorSync",
    "ShareCodeStore",
]
