"""
Keeps a MatchStateMachine durable across sessions and devices.

The synchronizer subscribes to the state machine and reacts to every
committed snapshot:

- local cache: written immediately, synchronously
- remote store: written after a debounce window, only with an owner identity

Transitions never wait for persistence and persistence failures never
propagate into them. Failures are logged and exposed through ``error``
(a short user-facing message) while the in-memory state stays as is.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from rrgolf.config import settings
from rrgolf.errors import PersistenceError, ShareCodeError
from rrgolf.match.models import MatchState
from rrgolf.match.state_machine import MatchStateMachine
from rrgolf.persistence.repository import LoadResult, MatchRepository
from rrgolf.persistence.scheduler import DebouncedSaveScheduler

if TYPE_CHECKING:
    from rrgolf.sharing.store import ShareCodeStore

logger = logging.getLogger(__name__)

CONNECTION_LOST = "Connection lost."
SHARE_FAILED = "Failed to create share code"

PendingSave = tuple[str, MatchState]


class PersistenceSynchronizer:
    """
    Save-on-change / load-on-start wrapper around a state machine.

    Must be driven from a running event loop: remote writes are scheduled
    as asyncio tasks.

    Usage:
        machine = MatchStateMachine()
        sync = PersistenceSynchronizer(machine, repository, user_id="user-123")
        await sync.load()

        machine.start_match(["Alice", "Bob", "Charlie", "David"])  # saved automatically

        await sync.aclose()
    """

    def __init__(
        self,
        machine: MatchStateMachine,
        repository: MatchRepository,
        user_id: Optional[str] = None,
        share_codes: Optional["ShareCodeStore"] = None,
        debounce_seconds: Optional[float] = None,
    ):
        """
        Args:
            machine: The state machine to persist
            repository: Two-tier store used for load/save/clear
            user_id: Owner identity; without it only the local cache is used
            share_codes: Optional ShareCodeStore for sharing and reset cleanup
            debounce_seconds: Remote write quiet period (defaults to settings)
        """
        self.machine = machine
        self.repository = repository
        self.user_id = user_id
        self.share_codes = share_codes

        self.loading = False
        self.error: Optional[str] = None

        self._suspended = False
        self._scheduler: DebouncedSaveScheduler[PendingSave] = DebouncedSaveScheduler(
            self._save_remote,
            debounce_seconds if debounce_seconds is not None else settings.save_debounce_seconds,
        )
        machine.subscribe(self._on_state_change)

    # =========================================================
    # LOAD
    # =========================================================

    async def load(self) -> MatchState:
        """
        Restore the owner's match: remote first, then local cache, then a
        fresh setup state. The restored state is not written back.

        A pending remote write for the current match is pushed out first so it
        cannot land on top of what gets loaded.
        """
        await self._scheduler.flush()
        self.loading = True
        self.error = None
        try:
            result: LoadResult = await self.repository.load(self.user_id)
        finally:
            self.loading = False

        if result.warnings:
            self.error = CONNECTION_LOST

        self._suspended = True
        try:
            if result.state is not None:
                logger.info("Restored match from %s store (phase=%s)", result.source, result.state.phase)
                self.machine.load_state(result.state)
            else:
                self.machine.reset_match_state()
        finally:
            self._suspended = False
        return self.machine.state

    async def switch_identity(self, user_id: Optional[str]) -> MatchState:
        """Flush writes owed to the previous owner, then load for the new one."""
        await self._scheduler.flush()
        self.user_id = user_id
        return await self.load()

    # =========================================================
    # SAVE
    # =========================================================

    def _on_state_change(self, state: MatchState) -> None:
        if self._suspended or state.is_blank:
            return

        try:
            self.repository.save_local(state)
        except PersistenceError as exc:
            logger.warning("Failed to save match state to local cache: %s", exc)
            self.error = CONNECTION_LOST

        if self.user_id:
            self._scheduler.schedule((self.user_id, state))

    async def _save_remote(self, pending: PendingSave) -> None:
        user_id, state = pending
        try:
            await self.repository.save_remote(user_id, state)
        except PersistenceError as exc:
            logger.warning("Error saving match state for %s: %s", user_id, exc)
            self.error = CONNECTION_LOST

    async def flush(self) -> None:
        """Push any debounced remote write out now."""
        await self._scheduler.flush()

    async def aclose(self) -> None:
        await self.flush()
        self.machine.unsubscribe(self._on_state_change)

    # =========================================================
    # CLEAR / RESET
    # =========================================================

    async def clear(self) -> bool:
        """Delete the persisted match from both tiers. Returns True if both succeeded."""
        self.loading = True
        self.error = None
        try:
            await self._scheduler.cancel()
            errors = await self.repository.clear(self.user_id)
        finally:
            self.loading = False
        if errors:
            self.error = CONNECTION_LOST
        return not errors

    async def reset(self) -> MatchState:
        """
        Start over in memory, then clear persisted copies and retire share codes.

        Memory goes back to setup first so no scoring can slip in while the
        stores are being cleared.
        """
        state = self.machine.reset_match_state()
        await self.clear()
        if self.share_codes is not None and self.user_id:
            try:
                await asyncio.to_thread(self.share_codes.deactivate_share_codes, self.user_id)
            except (PersistenceError, ShareCodeError) as exc:
                logger.warning("Failed to deactivate share codes for %s: %s", self.user_id, exc)
                self.error = CONNECTION_LOST
        return state

    async def can_resume(self) -> bool:
        """Whether a saved match exists to offer before starting a new one."""
        return await self.repository.has_saved(self.user_id)

    # =========================================================
    # SHARING
    # =========================================================

    async def share_match(self) -> Optional[str]:
        """
        Issue a fresh spectator code for the owner and record it on the state.

        Returns None (and sets ``error``) when sharing is unavailable or fails.
        """
        if self.share_codes is None or not self.user_id:
            self.error = SHARE_FAILED
            return None
        try:
            code = await asyncio.to_thread(self.share_codes.create_share_code, self.user_id)
        except (PersistenceError, ShareCodeError) as exc:
            logger.warning("Failed to create share code for %s: %s", self.user_id, exc)
            self.error = SHARE_FAILED
            return None

        self.machine.set_share_code(code)
        return code
