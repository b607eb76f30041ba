"""Per-indexer circuit breaker to skip sites that keep failing.

An indexer opens after ``failure_threshold`` consecutive failures, or
immediately when it answers 429, and is then skipped for
``cooldown_seconds``.  After the cooldown one probe search is let through
(half-open); success closes the breaker, failure restarts the cooldown.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum

import structlog

log = structlog.get_logger(__name__)


class BreakerState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class IndexerCircuitBreaker:
    """Track consecutive failures per indexer name.

    Not thread-safe; only touched from the event loop running the search.

    Args:
        failure_threshold: Consecutive failures that open the breaker.
        cooldown_seconds: How long an open breaker blocks the indexer.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        *,
        failure_threshold: int = 5,
        cooldown_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._threshold = max(1, failure_threshold)
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._failures: dict[str, int] = {}
        self._states: dict[str, BreakerState] = {}
        self._opened_at: dict[str, float] = {}

    def allow(self, name: str) -> bool:
        """Return ``True`` if *name* may be searched right now."""
        state = self._states.get(name, BreakerState.CLOSED)

        if state == BreakerState.OPEN:
            elapsed = self._clock() - self._opened_at.get(name, 0.0)
            if elapsed < self._cooldown:
                return False
            self._states[name] = BreakerState.HALF_OPEN
            log.debug("circuit_half_open", indexer=name)

        return True

    def record_success(self, name: str) -> None:
        if self._states.get(name) is not None:
            log.info("circuit_closed", indexer=name)
        self._failures.pop(name, None)
        self._states.pop(name, None)
        self._opened_at.pop(name, None)

    def record_failure(self, name: str, *, rate_limited: bool = False) -> None:
        """Count a failure; a half-open probe failure or a 429 reopens at once."""
        count = self._failures.get(name, 0) + 1
        self._failures[name] = count

        state = self._states.get(name, BreakerState.CLOSED)
        if (
            rate_limited
            or state == BreakerState.HALF_OPEN
            or count >= self._threshold
        ):
            self._open(name, failures=count, rate_limited=rate_limited)

    def _open(self, name: str, *, failures: int, rate_limited: bool) -> None:
        self._states[name] = BreakerState.OPEN
        self._opened_at[name] = self._clock()
        log.warning(
            "circuit_opened",
            indexer=name,
            failures=failures,
            rate_limited=rate_limited,
            cooldown_seconds=self._cooldown,
        )

    def state(self, name: str) -> str:
        return self._states.get(name, BreakerState.CLOSED).value

    def reset(self, name: str) -> None:
        self.record_success(name)

    def snapshot(self) -> dict[str, dict[str, object]]:
        """Diagnostic view of every tracked indexer."""
        names = set(self._failures) | set(self._states)
        return {
            n: {"state": self.state(n), "failures": self._failures.get(n, 0)}
            for n in sorted(names)
        }
