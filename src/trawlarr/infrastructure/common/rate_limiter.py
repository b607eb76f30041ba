"""Per-indexer request spacing.

A definition may declare ``request_delay`` (seconds).  ``RequestThrottle``
tracks the earliest moment the next request to that indexer may be sent;
each indexer owns its own throttle, so a slow site never delays another.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

import structlog

log = structlog.get_logger(__name__)


class RequestThrottle:
    """Earliest-next-request-time limiter for a single indexer.

    The first ``acquire`` waits the full delay (requests are always
    preceded by the declared pause); subsequent calls wait only for the
    remainder since the previous request.

    Args:
        delay: Minimum seconds between requests. ``None``/``<= 0`` disables.
        clock: Monotonic time source.
        sleep: Coroutine used to wait.
    """

    def __init__(
        self,
        delay: float | None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._delay = delay if delay and delay > 0 else 0.0
        self._clock = clock
        self._sleep = sleep
        self._next_allowed: float | None = None
        self._lock = asyncio.Lock()

    @property
    def delay(self) -> float:
        return self._delay

    async def acquire(self) -> None:
        """Sleep until the next request may be sent, then reserve the slot."""
        if self._delay <= 0:
            return

        async with self._lock:
            if self._next_allowed is None:
                wait = self._delay
            else:
                wait = max(0.0, self._next_allowed - self._clock())
            if wait > 0:
                log.debug("request_throttled", wait_seconds=round(wait, 3))
                await self._sleep(wait)
            self._next_allowed = self._clock() + self._delay
