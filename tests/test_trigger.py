"""Tests for the manual and viewport-driven fetch trigger."""

import asyncio

from vidshare_bot.pagination.accumulator import PageAccumulator
from vidshare_bot.pagination.trigger import FetchTrigger, TriggerMode, TriggerState

from helpers import FakeListing, items


class TestManualTrigger:
    async def test_state_machine(self):
        listing = FakeListing(items(3, 2, 1))
        trigger = FetchTrigger(PageAccumulator(listing, limit=2))

        assert trigger.state == TriggerState.IDLE
        assert await trigger.request() is True
        assert trigger.state == TriggerState.IDLE
        assert await trigger.request() is True
        assert trigger.state == TriggerState.EXHAUSTED
        assert trigger.enabled is False
        assert await trigger.request() is False
        assert listing.calls == [None, "2"]

    async def test_disabled_while_fetching(self):
        listing = FakeListing(items(3, 2, 1))
        listing.gate = asyncio.Event()
        trigger = FetchTrigger(PageAccumulator(listing, limit=2))

        pending = asyncio.create_task(trigger.request())
        await asyncio.sleep(0)

        assert trigger.state == TriggerState.FETCHING
        assert await trigger.request() is False

        listing.gate.set()
        await pending
        assert trigger.state == TriggerState.IDLE

    async def test_failure_returns_to_idle_without_retry(self):
        listing = FakeListing(items(2, 1), fail_at=[1])
        trigger = FetchTrigger(PageAccumulator(listing, limit=1))

        assert await trigger.request() is False
        assert trigger.state == TriggerState.IDLE
        assert listing.calls == [None]

    async def test_visibility_is_ignored(self):
        listing = FakeListing(items(1))
        trigger = FetchTrigger(PageAccumulator(listing, limit=1), TriggerMode.MANUAL)

        assert await trigger.observe(True) is False
        assert listing.calls == []


class TestAutomaticTrigger:
    async def test_fires_once_per_transition(self):
        """Staying visible does not flood the backend with requests."""
        listing = FakeListing(items(5, 4, 3, 2, 1))
        trigger = FetchTrigger(PageAccumulator(listing, limit=2), TriggerMode.AUTOMATIC)

        assert await trigger.observe(True) is True
        assert await trigger.observe(True) is False
        assert await trigger.observe(False) is False
        assert await trigger.observe(True) is True
        assert listing.calls == [None, "2"]

    async def test_refires_after_failure_on_next_transition(self):
        listing = FakeListing(items(2, 1), fail_at=[1])
        trigger = FetchTrigger(PageAccumulator(listing, limit=1), TriggerMode.AUTOMATIC)

        assert await trigger.observe(True) is False
        await trigger.observe(False)
        assert await trigger.observe(True) is True
        assert listing.calls == [None, None]

    async def test_lookahead_fetches_before_the_end(self):
        listing = FakeListing(items(4, 3, 2, 1))
        trigger = FetchTrigger(PageAccumulator(listing, limit=2), TriggerMode.AUTOMATIC, lookahead=1)

        assert await trigger.observe_remaining(3) is False
        assert await trigger.observe_remaining(1) is True
        assert listing.calls == [None]

    async def test_stops_when_exhausted(self):
        listing = FakeListing(items(1))
        trigger = FetchTrigger(PageAccumulator(listing, limit=5), TriggerMode.AUTOMATIC)

        await trigger.observe(True)
        await trigger.observe(False)

        assert await trigger.observe(True) is False
        assert trigger.state == TriggerState.EXHAUSTED
