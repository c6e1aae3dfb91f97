"""
In-memory cache for the browser's control endpoint.

Holds a single WebSocket debugger URL with an expiry. Concurrent refreshes
are not serialized: any endpoint discovered for the running browser is
equally valid, so the last writer wins.
"""

import time
from datetime import timedelta
from typing import Callable, Optional, Tuple


class EndpointCache:
    """
    Single-slot cache with absolute expiry.

    The clock is injectable so tests can move time forward without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        # (value, expires_at) replaced as one tuple so readers never see a
        # value paired with another value's expiry
        self._entry: Optional[Tuple[str, float]] = None

    def get(self) -> Optional[str]:
        """Return the cached endpoint, or None if empty or expired."""
        entry = self._entry
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            return None
        return value

    def set(self, value: str, ttl: timedelta) -> None:
        """Store value, expiring ttl from now."""
        self._entry = (value, self._clock() + ttl.total_seconds())

    def invalidate(self) -> None:
        """Drop the cached value regardless of expiry."""
        self._entry = None

    @property
    def expires_at(self) -> Optional[float]:
        """Clock reading at which the current value expires, if any."""
        entry = self._entry
        return entry[1] if entry else None
