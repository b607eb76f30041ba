"""Tests for IndexerCircuitBreaker."""

from __future__ import annotations

from trawlarr.infrastructure.circuit_breaker import BreakerState, IndexerCircuitBreaker


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _open(cb: IndexerCircuitBreaker, name: str = "foo", times: int = 3) -> None:
    for _ in range(times):
        cb.record_failure(name)


class TestInitialState:
    def test_new_indexer_is_allowed(self) -> None:
        cb = IndexerCircuitBreaker()
        assert cb.allow("foo") is True
        assert cb.state("foo") == "closed"

    def test_snapshot_empty(self) -> None:
        assert IndexerCircuitBreaker().snapshot() == {}


class TestClosedState:
    def test_failures_below_threshold_stay_closed(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=3)
        _open(cb, times=2)
        assert cb.allow("foo") is True
        assert cb.state("foo") == BreakerState.CLOSED.value

    def test_success_resets_failure_count(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=3)
        _open(cb, times=2)
        cb.record_success("foo")
        cb.record_failure("foo")
        assert cb.state("foo") == "closed"


class TestOpenState:
    def test_opens_at_threshold(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=3)
        _open(cb)
        assert cb.state("foo") == "open"
        assert cb.allow("foo") is False

    def test_rate_limit_opens_immediately(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=5)
        cb.record_failure("foo", rate_limited=True)
        assert cb.allow("foo") is False

    def test_other_indexers_unaffected(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=1)
        cb.record_failure("foo")
        assert cb.allow("bar") is True

    def test_half_open_after_cooldown(self) -> None:
        clock = _Clock()
        cb = IndexerCircuitBreaker(failure_threshold=2, cooldown_seconds=10, clock=clock)
        _open(cb, times=2)

        clock.now += 9
        assert cb.allow("foo") is False

        clock.now += 2
        assert cb.allow("foo") is True
        assert cb.state("foo") == "half_open"


class TestHalfOpenState:
    def _half_open(self) -> tuple[IndexerCircuitBreaker, _Clock]:
        clock = _Clock()
        cb = IndexerCircuitBreaker(failure_threshold=3, cooldown_seconds=10, clock=clock)
        _open(cb)
        clock.now += 11
        assert cb.allow("foo") is True
        return cb, clock

    def test_success_closes(self) -> None:
        cb, _ = self._half_open()
        cb.record_success("foo")
        assert cb.state("foo") == "closed"
        assert cb.allow("foo") is True

    def test_single_failure_reopens(self) -> None:
        cb, clock = self._half_open()
        cb.record_failure("foo")
        assert cb.state("foo") == "open"
        assert cb.allow("foo") is False

        clock.now += 11
        assert cb.allow("foo") is True


class TestReset:
    def test_reset_closes(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=1)
        cb.record_failure("foo")
        cb.reset("foo")
        assert cb.allow("foo") is True

    def test_snapshot(self) -> None:
        cb = IndexerCircuitBreaker(failure_threshold=2)
        cb.record_failure("b")
        _open(cb, "a", times=2)
        assert cb.snapshot() == {
            "a": {"state": "open", "failures": 2},
            "b": {"state": "closed", "failures": 1},
        }
