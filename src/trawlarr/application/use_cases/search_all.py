"""Search every configured indexer and merge the answers into one list."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

import structlog

from trawlarr.domain.entities import (
    IndexerConfig,
    IndexerError,
    IndexerErrorKind,
    RankedResult,
    RateLimitedError,
    SearchQuery,
    SearchResult,
)
from trawlarr.domain.ports import IndexerSearchPort
from trawlarr.infrastructure.circuit_breaker import IndexerCircuitBreaker
from trawlarr.infrastructure.ranking.deduplicator import deduplicate
from trawlarr.infrastructure.ranking.result_ranker import ResultRanker

log = structlog.get_logger(__name__)


class SearchAllUseCase:
    """Fan a query out to all enabled indexers and aggregate the results.

    Flow:
        1. Keep enabled indexers, stable-sorted by priority (lower first)
        2. Skip indexers whose circuit breaker is open
        3. Search the rest in parallel (bounded by ``max_concurrent``), each
           under its own timeout; failures contribute an empty list
        4. Merge in priority order, deduplicate, drop results below
           ``min_seeders``, rank, truncate to ``max_results``

    A single indexer failing, timing out or being cut off by the overall
    deadline never fails the search as a whole.

    Args:
        search_port: Searches one indexer (build, send, validate, parse).
        ranker: Result ranker; defaults to the standard weights.
        circuit_breaker: Optional breaker shared across searches.
        max_concurrent: Max indexers searched in parallel.
        indexer_timeout: Seconds allowed for one indexer's pipeline.
        deadline: Optional seconds for the whole fan-out.
    """

    def __init__(
        self,
        *,
        search_port: IndexerSearchPort,
        ranker: ResultRanker | None = None,
        circuit_breaker: IndexerCircuitBreaker | None = None,
        max_concurrent: int = 10,
        indexer_timeout: float = 30.0,
        deadline: float | None = None,
    ) -> None:
        self._search_port = search_port
        self._ranker = ranker or ResultRanker()
        self._circuit_breaker = circuit_breaker
        self._max_concurrent = max(1, max_concurrent)
        self._indexer_timeout = indexer_timeout
        self._deadline = deadline

    async def execute(
        self, indexers: Iterable[IndexerConfig], query: SearchQuery
    ) -> list[SearchResult]:
        ranked = await self.execute_ranked(indexers, query)
        return [r.result for r in ranked]

    async def execute_ranked(
        self, indexers: Iterable[IndexerConfig], query: SearchQuery
    ) -> list[RankedResult]:
        active = self._select(indexers)
        if not active:
            log.info("search_all_no_indexers", keywords=query.keywords)
            return []

        per_indexer = await self._fan_out(active, query)

        merged: list[SearchResult] = []
        for results in per_indexer:
            merged.extend(results)
        total = len(merged)

        if query.deduplicate:
            merged = deduplicate(merged)
        if query.min_seeders > 0:
            merged = [r for r in merged if r.seeders >= query.min_seeders]

        ranked = self._ranker.rank(merged)
        if query.max_results is not None:
            ranked = ranked[: max(0, query.max_results)]

        log.info(
            "search_all_completed",
            keywords=query.keywords,
            indexers=len(active),
            raw_count=total,
            result_count=len(ranked),
        )
        return ranked

    def _select(self, indexers: Iterable[IndexerConfig]) -> list[IndexerConfig]:
        enabled = sorted((i for i in indexers if i.enabled), key=lambda i: i.priority)
        if self._circuit_breaker is None:
            return enabled

        allowed: list[IndexerConfig] = []
        for indexer in enabled:
            if self._circuit_breaker.allow(indexer.definition.id):
                allowed.append(indexer)
            else:
                log.info(
                    "indexer_skipped_circuit_open",
                    indexer=indexer.name,
                    state=self._circuit_breaker.state(indexer.definition.id),
                )
        return allowed

    async def _fan_out(
        self, indexers: Sequence[IndexerConfig], query: SearchQuery
    ) -> list[list[SearchResult]]:
        """Search all indexers; result lists come back in input order."""
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _search_one(indexer: IndexerConfig) -> list[SearchResult]:
            async with semaphore:
                return await self._search_isolated(indexer, query)

        tasks = [asyncio.create_task(_search_one(i)) for i in indexers]
        try:
            if self._deadline is None:
                return list(await asyncio.gather(*tasks))

            done, pending = await asyncio.wait(tasks, timeout=self._deadline)
            for indexer, task in zip(indexers, tasks):
                if task in pending:
                    log.warning(
                        "indexer_search_failed",
                        indexer=indexer.name,
                        error_kind=IndexerErrorKind.CONNECTION_FAILED.value,
                        error="search deadline exceeded",
                        deadline=self._deadline,
                    )
            return [task.result() if task in done else [] for task in tasks]
        finally:
            # Deadline hit or caller cancelled: stop whatever is still running.
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def _search_isolated(
        self, indexer: IndexerConfig, query: SearchQuery
    ) -> list[SearchResult]:
        """Run one indexer; every failure becomes ``[]`` plus a log event."""
        key = indexer.definition.id
        try:
            results = await asyncio.wait_for(
                self._search_port.search(indexer, query),
                timeout=self._indexer_timeout,
            )
        except TimeoutError:
            log.warning(
                "indexer_search_failed",
                indexer=indexer.name,
                error_kind=IndexerErrorKind.CONNECTION_FAILED.value,
                error="timeout",
                timeout=self._indexer_timeout,
            )
            self._record_failure(key)
            return []
        except IndexerError as e:
            log.warning(
                "indexer_search_failed",
                indexer=indexer.name,
                error_kind=e.kind.value,
                error=str(e),
                status_code=getattr(e, "status_code", None),
            )
            self._record_failure(key, rate_limited=isinstance(e, RateLimitedError))
            return []
        except Exception as e:  # noqa: BLE001
            log.error(
                "indexer_search_failed",
                indexer=indexer.name,
                error_kind=IndexerErrorKind.SEARCH_FAILED.value,
                error=repr(e),
                exc_info=True,
            )
            self._record_failure(key)
            return []

        if self._circuit_breaker is not None:
            self._circuit_breaker.record_success(key)
        return results

    def _record_failure(self, key: str, *, rate_limited: bool = False) -> None:
        if self._circuit_breaker is not None:
            self._circuit_breaker.record_failure(key, rate_limited=rate_limited)
