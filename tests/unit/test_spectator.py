"""Unit tests for SpectatorSync polling."""

import asyncio
from datetime import datetime

import pytest

from rrgolf.errors import CorruptStateError, ShareCodeNotFoundError
from rrgolf.match.state_machine import MatchStateMachine
from rrgolf.sharing.spectator import LOAD_FAILED, NO_CODE, SpectatorSync

INTERVAL = 0.03


class FakeFetch:
    """Stands in for ShareCodeStore.fetch_by_share_code."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def __call__(self, code):
        self.calls.append(code)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def snapshot():
    machine = MatchStateMachine()
    machine.start_match(["Alice", "Bob", "Charlie", "David"])
    return machine.state


@pytest.mark.asyncio
async def test_start_fetches_immediately(snapshot):
    fetch = FakeFetch([snapshot])
    stamp = datetime(2026, 10, 18, 12, 0, 0)
    view = SpectatorSync(" 0427 ", fetch, interval_seconds=10, clock=lambda: stamp)

    assert view.loading
    view.start()
    await asyncio.sleep(0.02)

    assert fetch.calls == ["0427"]
    assert view.snapshot == snapshot
    assert view.last_updated == stamp
    assert view.error is None
    assert not view.loading
    await view.stop()


@pytest.mark.asyncio
async def test_polls_on_interval(snapshot):
    fetch = FakeFetch([snapshot])
    async with SpectatorSync("0427", fetch, interval_seconds=INTERVAL):
        await asyncio.sleep(INTERVAL * 3.5)
    assert len(fetch.calls) >= 3


@pytest.mark.asyncio
async def test_failure_clears_snapshot_and_keeps_polling(snapshot):
    fetch = FakeFetch([snapshot, ShareCodeNotFoundError(), snapshot])
    view = SpectatorSync("0427", fetch, interval_seconds=INTERVAL)

    await view.refresh()
    assert view.snapshot == snapshot

    await view.refresh()
    assert view.snapshot is None
    assert view.error == "Invalid or expired code"

    await view.refresh()
    assert view.snapshot == snapshot
    assert view.error is None


@pytest.mark.asyncio
async def test_unexpected_errors_get_generic_message():
    view = SpectatorSync("0427", FakeFetch([CorruptStateError("bad record")]), interval_seconds=INTERVAL)
    await view.refresh()
    assert view.error == LOAD_FAILED
    assert view.snapshot is None


@pytest.mark.asyncio
async def test_errors_do_not_stop_polling():
    fetch = FakeFetch([ShareCodeNotFoundError()])
    view = SpectatorSync("0427", fetch, interval_seconds=INTERVAL)
    view.start()
    await asyncio.sleep(INTERVAL * 3.5)

    assert view.is_polling
    assert len(fetch.calls) >= 3
    await view.stop()


@pytest.mark.asyncio
async def test_stop_prevents_updates(snapshot):
    fetch = FakeFetch([snapshot])
    view = SpectatorSync("0427", fetch, interval_seconds=INTERVAL)
    view.start()
    await asyncio.sleep(0.01)
    await view.stop()

    calls = len(fetch.calls)
    view.snapshot = None
    await view.refresh()
    await asyncio.sleep(INTERVAL * 2)

    assert not view.is_polling
    assert len(fetch.calls) == calls
    assert view.snapshot is None


@pytest.mark.asyncio
async def test_missing_code():
    fetch = FakeFetch([None])
    view = SpectatorSync("   ", fetch, interval_seconds=INTERVAL)
    await view.refresh()

    assert view.error == NO_CODE
    assert not view.loading
    assert fetch.calls == []
