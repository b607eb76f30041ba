from .errors import (
    ConnectionFailedError,
    IndexerError,
    IndexerErrorKind,
    ParseError,
    RateLimitedError,
    RequestBuildError,
    SearchFailedError,
)
from .search import (
    IndexerConfig,
    QualityInfo,
    RankedResult,
    SearchQuery,
    SearchResult,
    format_bytes,
)

__all__ = [
    "ConnectionFailedError",
    "IndexerConfig",
    "IndexerError",
    "IndexerErrorKind",
    "ParseError",
    "QualityInfo",
    "RankedResult",
    "RateLimitedError",
    "RequestBuildError",
    "SearchFailedError",
    "SearchQuery",
    "SearchResult",
    "format_bytes",
]
