"""
Network-idle heuristic for page loads.

A page counts as settled once no more than `max_inflight` requests have
been open for a full quiet window. Pages that keep a long-poll or beacon
connection open therefore still settle.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_MAX_INFLIGHT = 2
DEFAULT_QUIET_SECONDS = 0.5


class InflightRequestTracker:
    """
    Counts a page's in-flight requests from its request events.

    Args:
        max_inflight: Open requests tolerated while settling
        quiet_seconds: How long the count must stay at or under max_inflight
    """

    def __init__(
        self,
        max_inflight: int = DEFAULT_MAX_INFLIGHT,
        quiet_seconds: float = DEFAULT_QUIET_SECONDS,
    ):
        self.max_inflight = max_inflight
        self.quiet_seconds = quiet_seconds
        self._inflight: Set[Any] = set()
        self._settled = asyncio.Event()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    def start(self) -> None:
        """Begin the first quiet window; must be called on the running loop."""
        self._loop = asyncio.get_running_loop()
        self._update()

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def on_request(self, request: Any) -> None:
        self._inflight.add(request)
        self._update()

    def on_request_done(self, request: Any) -> None:
        self._inflight.discard(request)
        self._update()

    async def settled(self) -> None:
        """Wait until the quiet window has elapsed."""
        await self._settled.wait()

    def _update(self) -> None:
        if self._loop is None:
            return
        if len(self._inflight) > self.max_inflight:
            self.stop()
            self._settled.clear()
        elif self._timer is None and not self._settled.is_set():
            self._timer = self._loop.call_later(self.quiet_seconds, self._settle)

    def _settle(self) -> None:
        self._timer = None
        logger.debug(f"Network settled with {self.inflight} request(s) in flight")
        self._settled.set()


@asynccontextmanager
async def track_network(
    page: Any,
    max_inflight: int = DEFAULT_MAX_INFLIGHT,
    quiet_seconds: float = DEFAULT_QUIET_SECONDS,
) -> AsyncIterator[InflightRequestTracker]:
    """
    Attach an InflightRequestTracker to page for the duration of the block.

    Listeners are removed and the pending timer cancelled on exit.
    """
    tracker = InflightRequestTracker(max_inflight, quiet_seconds)
    listeners = [
        ("request", tracker.on_request),
        ("requestfinished", tracker.on_request_done),
        ("requestfailed", tracker.on_request_done),
    ]
    for event, handler in listeners:
        page.on(event, handler)
    tracker.start()
    try:
        yield tracker
    finally:
        tracker.stop()
        for event, handler in listeners:
            page.remove_listener(event, handler)
