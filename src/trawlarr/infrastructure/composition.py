from __future__ import annotations

from collections.abc import Iterable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

import httpx
import structlog

from trawlarr.application.use_cases.search_all import SearchAllUseCase
from trawlarr.domain.definitions import IndexerDefinition
from trawlarr.domain.entities import IndexerConfig
from trawlarr.infrastructure.circuit_breaker import IndexerCircuitBreaker
from trawlarr.infrastructure.config.schema import AppConfig, IndexerSettings
from trawlarr.infrastructure.definitions import DefinitionRegistry
from trawlarr.infrastructure.indexers.search_engine import DefinitionSearchEngine
from trawlarr.infrastructure.ranking.result_ranker import ResultRanker
from trawlarr.infrastructure.transport.httpx_transport import HttpxTransport

log = structlog.get_logger(__name__)


@dataclass
class SearchServices:
    """Wired-up collaborators for one CLI/API session."""

    config: AppConfig
    registry: DefinitionRegistry
    use_case: SearchAllUseCase
    indexers: list[IndexerConfig] = field(default_factory=list)


def build_indexer_configs(
    definitions: Iterable[IndexerDefinition],
    settings: Mapping[str, IndexerSettings],
    *,
    indexer_timeout: float | None = None,
) -> list[IndexerConfig]:
    """Pair each definition with its per-indexer settings (defaults if absent).

    The first request to an indexer waits its full ``request_delay`` inside
    the per-indexer timeout, so a delay that is not shorter than
    *indexer_timeout* could never finish; such indexers are disabled.
    """
    configs: list[IndexerConfig] = []
    for definition in definitions:
        s = settings.get(definition.id) or IndexerSettings()
        enabled = s.enabled
        delay = definition.request_delay or 0.0
        if enabled and indexer_timeout is not None and delay >= indexer_timeout:
            log.warning(
                "indexer_disabled_delay_exceeds_timeout",
                indexer=definition.id,
                request_delay=delay,
                indexer_timeout=indexer_timeout,
            )
            enabled = False
        configs.append(
            IndexerConfig(
                definition=definition,
                enabled=enabled,
                priority=s.priority,
                headers=dict(s.headers),
                cookies=dict(s.cookies),
                display_name=s.name,
            )
        )

    unknown = sorted(set(settings) - {c.definition.id for c in configs})
    if unknown:
        log.warning("indexer_settings_without_definition", indexers=unknown)
    return configs


def build_use_case(
    config: AppConfig, http_client: httpx.AsyncClient
) -> SearchAllUseCase:
    engine = DefinitionSearchEngine(
        transport=HttpxTransport(http_client),
        timeout_seconds=config.http_timeout_seconds,
    )
    breaker = (
        IndexerCircuitBreaker(
            failure_threshold=config.circuit_breaker_threshold,
            cooldown_seconds=config.circuit_breaker_cooldown_seconds,
        )
        if config.circuit_breaker_enabled
        else None
    )
    return SearchAllUseCase(
        search_port=engine,
        ranker=ResultRanker(config.ranking),
        circuit_breaker=breaker,
        max_concurrent=config.max_concurrent_indexers,
        indexer_timeout=config.indexer_timeout_seconds,
        deadline=config.search_deadline_seconds,
    )


@asynccontextmanager
async def open_services(config: AppConfig) -> AsyncIterator[SearchServices]:
    """Composition root: create shared resources and close them on exit.

    Order matters:
        1. Definition registry (broken files are skipped, not fatal)
        2. HTTP client (shared by every indexer)
        3. Search engine + aggregator
    """
    registry = DefinitionRegistry(config.definitions_dir)
    definitions = registry.load_valid()
    indexers = build_indexer_configs(
        definitions, config.indexers, indexer_timeout=config.indexer_timeout_seconds
    )
    log.info("definitions_loaded", count=len(definitions))

    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.debug("http_client_initialized")

    try:
        yield SearchServices(
            config=config,
            registry=registry,
            use_case=build_use_case(config, http_client),
            indexers=indexers,
        )
    finally:
        await http_client.aclose()
        log.debug("http_client_closed")
