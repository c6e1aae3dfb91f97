"""
Unit tests for pdf_generator/network_idle.py
"""

import asyncio

import pytest
from unittest.mock import MagicMock

from pdf_generator.network_idle import InflightRequestTracker, track_network

QUIET = 0.02


async def settles(tracker, timeout=0.2) -> bool:
    try:
        await asyncio.wait_for(tracker.settled(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


class TestInflightRequestTracker:
    """Tests for InflightRequestTracker."""

    @pytest.mark.asyncio
    async def test_settles_with_no_requests(self):
        tracker = InflightRequestTracker(max_inflight=2, quiet_seconds=QUIET)
        tracker.start()

        assert await settles(tracker)

    @pytest.mark.asyncio
    async def test_settles_with_two_requests_open(self):
        tracker = InflightRequestTracker(max_inflight=2, quiet_seconds=QUIET)
        tracker.start()
        tracker.on_request("a")
        tracker.on_request("b")

        assert await settles(tracker)
        assert tracker.inflight == 2

    @pytest.mark.asyncio
    async def test_does_not_settle_with_three_requests_open(self):
        tracker = InflightRequestTracker(max_inflight=2, quiet_seconds=QUIET)
        tracker.start()
        for request in ("a", "b", "c"):
            tracker.on_request(request)

        assert not await settles(tracker, timeout=0.1)
        tracker.stop()

    @pytest.mark.asyncio
    async def test_settles_once_count_drops_back(self):
        tracker = InflightRequestTracker(max_inflight=2, quiet_seconds=QUIET)
        tracker.start()
        for request in ("a", "b", "c"):
            tracker.on_request(request)
        tracker.on_request_done("a")

        assert await settles(tracker)

    @pytest.mark.asyncio
    async def test_new_burst_unsettles(self):
        tracker = InflightRequestTracker(max_inflight=2, quiet_seconds=QUIET)
        tracker.start()
        assert await settles(tracker)

        for request in ("a", "b", "c"):
            tracker.on_request(request)

        assert not await settles(tracker, timeout=0.1)
        tracker.stop()

    @pytest.mark.asyncio
    async def test_finishing_unknown_request_is_ignored(self):
        tracker = InflightRequestTracker(max_inflight=0, quiet_seconds=QUIET)
        tracker.start()
        tracker.on_request_done("never-started")

        assert tracker.inflight == 0
        assert await settles(tracker)

    def test_events_before_start_are_counted(self):
        tracker = InflightRequestTracker()
        tracker.on_request("a")

        assert tracker.inflight == 1


class TestTrackNetwork:
    """Tests for the track_network() context manager."""

    @pytest.mark.asyncio
    async def test_registers_and_removes_listeners(self):
        page = MagicMock()

        async with track_network(page, quiet_seconds=QUIET) as tracker:
            assert await settles(tracker)

        registered = [call.args for call in page.on.call_args_list]
        removed = [call.args for call in page.remove_listener.call_args_list]
        assert [event for event, _ in registered] == ["request", "requestfinished", "requestfailed"]
        assert removed == registered

    @pytest.mark.asyncio
    async def test_listeners_removed_on_error(self):
        page = MagicMock()

        with pytest.raises(RuntimeError):
            async with track_network(page, quiet_seconds=QUIET):
                raise RuntimeError("navigation failed")

        assert page.remove_listener.call_count == 3

    @pytest.mark.asyncio
    async def test_request_events_drive_the_count(self):
        page = MagicMock()

        async with track_network(page, max_inflight=2, quiet_seconds=QUIET) as tracker:
            handlers = {call.args[0]: call.args[1] for call in page.on.call_args_list}
            for request in ("a", "b", "c"):
                handlers["request"](request)
            assert tracker.inflight == 3

            handlers["requestfailed"]("a")
            handlers["requestfinished"]("b")
            assert tracker.inflight == 1
