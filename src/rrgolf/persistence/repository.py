"""
Two-tier match repository.

Precedence on load:
  1. Remote store (only with an owner identity) - authoritative
  2. Local cache - fallback when the remote is unreachable or empty
  3. Nothing - caller starts from the initial state

A record that fails validation in either tier is deleted from that tier
and treated as absent. Remote calls are blocking SQLAlchemy work and run
in a worker thread via asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Protocol

from rrgolf.errors import CorruptStateError, PersistenceError
from rrgolf.match.models import MatchState
from rrgolf.persistence.schema import state_from_record, state_to_record

logger = logging.getLogger(__name__)

LoadSource = Literal["remote", "local", "none"]


class LocalStore(Protocol):
    def load(self) -> Optional[dict[str, Any]]: ...
    def save(self, match_data: dict[str, Any]) -> None: ...
    def delete(self) -> None: ...
    def exists(self) -> bool: ...


class RemoteStore(Protocol):
    def load(self, user_id: str) -> Optional[dict[str, Any]]: ...
    def save(self, user_id: str, match_data: dict[str, Any]) -> None: ...
    def delete(self, user_id: str) -> None: ...
    def has_saved(self, user_id: str) -> bool: ...


@dataclass
class LoadResult:
    """Outcome of a tiered load."""

    state: Optional[MatchState]
    source: LoadSource
    warnings: list[str] = field(default_factory=list)


class MatchRepository:
    """
    Local cache + remote store behind one interface.

    Usage:
        repo = MatchRepository(LocalMatchCache(), RemoteMatchStore())
        result = await repo.load(user_id)
        if result.state is not None:
            machine.load_state(result.state)
    """

    def __init__(self, local: LocalStore, remote: Optional[RemoteStore] = None):
        self.local = local
        self.remote = remote

    def _uses_remote(self, user_id: Optional[str]) -> bool:
        return self.remote is not None and bool(user_id)

    # =========================================================
    # LOAD
    # =========================================================

    async def load(self, user_id: Optional[str]) -> LoadResult:
        warnings: list[str] = []

        if self._uses_remote(user_id):
            try:
                state = await self._load_remote(user_id)
            except PersistenceError as exc:
                logger.warning("Remote load failed for %s, falling back to local cache: %s", user_id, exc)
                warnings.append(str(exc))
            else:
                if state is not None:
                    return LoadResult(state=state, source="remote", warnings=warnings)

        try:
            state = self._load_local()
        except PersistenceError as exc:
            logger.warning("Local cache load failed: %s", exc)
            warnings.append(str(exc))
            state = None

        if state is not None:
            return LoadResult(state=state, source="local", warnings=warnings)
        return LoadResult(state=None, source="none", warnings=warnings)

    async def _load_remote(self, user_id: str) -> Optional[MatchState]:
        data = await asyncio.to_thread(self.remote.load, user_id)
        if data is None:
            return None
        try:
            return state_from_record(data)
        except CorruptStateError as exc:
            logger.warning("Invalid match state found in remote store for %s, clearing it: %s", user_id, exc)
            try:
                await asyncio.to_thread(self.remote.delete, user_id)
            except PersistenceError as delete_exc:
                logger.warning("Could not clear corrupt remote match for %s: %s", user_id, delete_exc)
            return None

    def _load_local(self) -> Optional[MatchState]:
        try:
            data = self.local.load()
            if data is None:
                return None
            return state_from_record(data)
        except CorruptStateError as exc:
            logger.warning("Invalid match state found in local cache, clearing it: %s", exc)
            self.local.delete()
            return None

    # =========================================================
    # SAVE
    # =========================================================

    def save_local(self, state: MatchState) -> None:
        self.local.save(state_to_record(state))

    async def save_remote(self, user_id: str, state: MatchState) -> None:
        if not self._uses_remote(user_id):
            return
        await asyncio.to_thread(self.remote.save, user_id, state_to_record(state))

    # =========================================================
    # CLEAR / QUERY
    # =========================================================

    async def clear(self, user_id: Optional[str]) -> list[str]:
        """
        Delete the match from both tiers.

        Best-effort: both deletions are always attempted. Returns the error
        messages of any that failed.
        """
        errors: list[str] = []
        try:
            self.local.delete()
        except PersistenceError as exc:
            logger.warning("Failed to clear local cache: %s", exc)
            errors.append(str(exc))

        if self._uses_remote(user_id):
            try:
                await asyncio.to_thread(self.remote.delete, user_id)
            except PersistenceError as exc:
                logger.warning("Failed to clear remote match for %s: %s", user_id, exc)
                errors.append(str(exc))
        return errors

    async def has_saved(self, user_id: Optional[str]) -> bool:
        if self._uses_remote(user_id):
            try:
                if await asyncio.to_thread(self.remote.has_saved, user_id):
                    return True
            except PersistenceError as exc:
                logger.warning("Error checking for saved match for %s: %s", user_id, exc)
        return self.local.exists()
