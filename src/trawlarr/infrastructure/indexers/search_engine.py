"""Definition-driven single-indexer search (default ``IndexerSearchPort``)."""

from __future__ import annotations

import structlog

from trawlarr.domain.definitions import IndexerDefinition
from trawlarr.domain.entities import IndexerConfig, SearchQuery, SearchResult
from trawlarr.domain.ports import HttpTransportPort
from trawlarr.infrastructure.common.rate_limiter import RequestThrottle
from trawlarr.infrastructure.indexers.request_builder import build_request
from trawlarr.infrastructure.indexers.response_validator import validate_status
from trawlarr.infrastructure.indexers.result_extractor import ResultExtractor

log = structlog.get_logger(__name__)


class DefinitionSearchEngine:
    """Runs throttle -> build -> send -> validate -> parse for one indexer.

    Throttles and compiled extractors are kept per definition id for the
    lifetime of the engine, so consecutive searches against the same site
    honour its ``request_delay`` while other sites are never held back.

    Args:
        transport: HTTP transport port implementation.
        timeout_seconds: Per-request timeout handed to the transport.
    """

    def __init__(
        self,
        *,
        transport: HttpTransportPort,
        timeout_seconds: float | None = None,
    ) -> None:
        self._transport = transport
        self._timeout = timeout_seconds
        self._throttles: dict[str, RequestThrottle] = {}
        self._extractors: dict[str, ResultExtractor] = {}

    def _throttle_for(self, definition: IndexerDefinition) -> RequestThrottle:
        throttle = self._throttles.get(definition.id)
        if throttle is None:
            throttle = RequestThrottle(definition.request_delay)
            self._throttles[definition.id] = throttle
        return throttle

    def _extractor_for(self, definition: IndexerDefinition) -> ResultExtractor:
        extractor = self._extractors.get(definition.id)
        if extractor is None:
            extractor = ResultExtractor(definition)
            self._extractors[definition.id] = extractor
        return extractor

    async def search(
        self, indexer: IndexerConfig, query: SearchQuery
    ) -> list[SearchResult]:
        """Search one indexer.

        Raises:
            IndexerError: Any subclass, for build/transport/status/parse
                failures. The aggregator is responsible for isolating them.
        """
        definition = indexer.definition
        await self._throttle_for(definition).acquire()

        request = build_request(
            definition,
            query,
            extra_headers=indexer.headers,
            cookies=indexer.cookies,
        )

        log.debug(
            "indexer_request",
            indexer=indexer.name,
            method=request.method,
            url=request.url,
        )
        response = await self._transport.send(
            request,
            timeout=self._timeout,
            follow_redirects=definition.follow_redirect,
        )
        validate_status(response.status_code)

        results = self._extractor_for(definition).parse(response.body, indexer.name)
        log.info(
            "indexer_search_completed",
            indexer=indexer.name,
            status=response.status_code,
            results=len(results),
        )
        return results
