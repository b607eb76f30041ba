"""Port for searching a single indexer."""

from __future__ import annotations

from typing import Protocol

from trawlarr.domain.entities import IndexerConfig, SearchQuery, SearchResult


class IndexerSearchPort(Protocol):
    """Runs build -> transport -> validate -> extract for one indexer.

    Raises ``IndexerError`` subclasses on failure.
    """

    async def search(
        self, indexer: IndexerConfig, query: SearchQuery
    ) -> list[SearchResult]: ...
