"""
Read-only spectator view of a shared match.

A SpectatorSync polls the match behind a share code: once immediately
when started, then on a fixed interval until stopped. Each failure sets a
user-facing ``error`` and clears ``snapshot`` but does not stop the poll.
Nothing here ever writes to a store.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from rrgolf.config import settings
from rrgolf.errors import ShareCodeError
from rrgolf.match.models import MatchState
from rrgolf.sharing.codes import normalize_share_code

logger = logging.getLogger(__name__)

NO_CODE = "No share code provided"
LOAD_FAILED = "Failed to load match"

Fetcher = Callable[[str], MatchState]


class SpectatorSync:
    """
    Polls a shared match for display.

    Usage:
        async with SpectatorSync("0427", store.fetch_by_share_code) as view:
            ...
            print(view.snapshot, view.last_updated, view.error)
            await view.refresh()   # on demand, outside the interval
    """

    def __init__(
        self,
        share_code: str,
        fetch: Fetcher,
        interval_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        """
        Args:
            share_code: Raw code as typed by the spectator (trimmed here)
            fetch: Blocking lookup, usually ShareCodeStore.fetch_by_share_code
            interval_seconds: Poll period (defaults to settings)
            clock: Source of ``last_updated`` timestamps
        """
        self.share_code = normalize_share_code(share_code)
        self.interval_seconds = interval_seconds or settings.spectator_poll_interval_seconds
        self._fetch = fetch
        self._clock = clock

        self.snapshot: Optional[MatchState] = None
        self.loading = True
        self.error: Optional[str] = None
        self.last_updated: Optional[datetime] = None

        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin polling; the first fetch happens right away."""
        if self.is_polling:
            return
        self._stopped = False
        self._task = asyncio.get_running_loop().create_task(self._poll())

    async def stop(self) -> None:
        """Cancel the poll. No state changes happen after this returns."""
        self._stopped = True
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def refresh(self) -> None:
        """Fetch once, now."""
        if self._stopped:
            return
        if not self.share_code:
            self.error = NO_CODE
            self.loading = False
            return

        try:
            snapshot = await asyncio.to_thread(self._fetch, self.share_code)
        except ShareCodeError as exc:
            self._apply_failure(str(exc))
        except Exception:
            logger.exception("Error getting match by share code")
            self._apply_failure(LOAD_FAILED)
        else:
            if not self._stopped:
                self.snapshot = snapshot
                self.error = None
                self.last_updated = self._clock()
        finally:
            if not self._stopped:
                self.loading = False

    def _apply_failure(self, message: str) -> None:
        if self._stopped:
            return
        self.error = message
        self.snapshot = None

    async def _poll(self) -> None:
        while not self._stopped:
            await self.refresh()
            await asyncio.sleep(self.interval_seconds)

    async def __aenter__(self) -> "SpectatorSync":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
