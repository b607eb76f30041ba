"""Errors surfaced by a single indexer's search pipeline.

The aggregator catches every one of these at the task boundary; they never
reach the caller of a multi-indexer search.
"""

from __future__ import annotations

from enum import Enum


class IndexerErrorKind(str, Enum):
    CONNECTION_FAILED = "connection_failed"
    RATE_LIMITED = "rate_limited"
    SEARCH_FAILED = "search_failed"
    PARSE_ERROR = "parse_error"


class IndexerError(Exception):
    """Base error for one indexer's pipeline."""

    kind: IndexerErrorKind = IndexerErrorKind.SEARCH_FAILED


class ConnectionFailedError(IndexerError):
    """Network failure, timeout, or the site rejected our credentials."""

    kind = IndexerErrorKind.CONNECTION_FAILED


class RateLimitedError(IndexerError):
    """Site answered 429; back off this indexer only."""

    kind = IndexerErrorKind.RATE_LIMITED


class SearchFailedError(IndexerError):
    """Generic, server-side or HTTP-status failure."""

    kind = IndexerErrorKind.SEARCH_FAILED

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RequestBuildError(SearchFailedError):
    """No request can be constructed from the definition."""


class ParseError(IndexerError):
    """Response body could not be interpreted at all."""

    kind = IndexerErrorKind.PARSE_ERROR
