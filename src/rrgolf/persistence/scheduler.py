"""
Debounced save scheduling.

Rapid successive state changes (auto-advance, quick edits) collapse into
a single remote write: each ``schedule()`` replaces the pending item and
restarts the quiet-period timer. Writes are serialized by a lock, so
they land in the order they were scheduled even when a slow write is
still running as the next timer fires.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DebouncedSaveScheduler(Generic[T]):
    """
    Coalescing timer in front of an async save function.

    Must be used from inside a running event loop.

    Usage:
        scheduler = DebouncedSaveScheduler(save_remote, delay_seconds=0.8)
        scheduler.schedule(snapshot)   # returns immediately
        await scheduler.flush()        # write now, e.g. before shutdown
    """

    def __init__(self, save: Callable[[T], Awaitable[None]], delay_seconds: float):
        self._save = save
        self.delay_seconds = delay_seconds
        self._pending: Optional[T] = None
        self._has_pending = False
        self._timer: Optional[asyncio.Task] = None
        # held until done, including after the timer hands off to the save
        self._tasks: set[asyncio.Task] = set()
        self._lock = asyncio.Lock()

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    @property
    def in_flight(self) -> int:
        """Timer or save tasks that have not finished yet."""
        return len(self._tasks)

    def schedule(self, item: T) -> None:
        """Replace the pending item and restart the quiet-period timer."""
        self._pending = item
        self._has_pending = True
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_save())
        self._tasks.add(self._timer)
        self._timer.add_done_callback(self._tasks.discard)
        logger.debug("Save scheduled in %.2fs", self.delay_seconds)

    async def flush(self) -> None:
        """Write the pending item immediately, if there is one."""
        self._cancel_timer()
        await self._save_pending()

    async def cancel(self) -> None:
        """
        Drop the pending item.

        Returns only after any write already in progress has finished, so a
        delete issued afterwards cannot be overtaken by it.
        """
        self._cancel_timer()
        self._pending = None
        self._has_pending = False
        async with self._lock:
            pass

    async def _wait_then_save(self) -> None:
        await asyncio.sleep(self.delay_seconds)
        # From here on the write belongs to _save_pending; a newer
        # schedule() starts its own timer instead of cancelling this one.
        self._timer = None
        await self._save_pending()

    async def _save_pending(self) -> None:
        async with self._lock:
            if not self._has_pending:
                return
            item = self._pending
            self._pending = None
            self._has_pending = False
            try:
                await self._save(item)
            except Exception:
                logger.exception("Scheduled save failed")

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
