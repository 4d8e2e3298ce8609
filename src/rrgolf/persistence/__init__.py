"""
Match persistence.

Two stores with a fixed precedence:
- Local cache: synchronous JSON file, always written, fallback on load
- Remote store: SQLAlchemy table keyed by owner, authoritative when reachable

The PersistenceSynchronizer ties them to a MatchStateMachine with
immediate local writes and debounced remote writes.
"""

from rrgolf.persistence.local import LocalMatchCache
from rrgolf.persistence.remote import RemoteMatchStore
from rrgolf.persistence.repository import LoadResult, MatchRepository
from rrgolf.persistence.scheduler import DebouncedSaveScheduler
from rrgolf.persistence.schema import state_from_record, state_to_record
from rrgolf.persistence.synchronizer import PersistenceSynchronizer

__all__ = [
    "LocalMatchCache",
    "RemoteMatchStore",
    "LoadResult",
    "MatchRepository",
    "DebouncedSaveScheduler",
    "state_from_record",
    "state_to_record",
    "PersistenceSynchronizer",
]
