"""HTTP status classification for indexer responses."""

from __future__ import annotations

from trawlarr.domain.entities import (
    ConnectionFailedError,
    RateLimitedError,
    SearchFailedError,
)


def validate_status(status_code: int) -> None:
    """Raise the matching ``IndexerError`` for a non-2xx status.

    The body is never inspected; sites that answer 200 with an error page
    simply yield no rows.
    """
    if 200 <= status_code < 300:
        return
    if status_code in (401, 403):
        raise ConnectionFailedError(f"Authentication rejected (HTTP {status_code})")
    if status_code == 429:
        raise RateLimitedError("Rate limited by indexer (HTTP 429)")
    if status_code >= 500:
        raise SearchFailedError(
            f"Indexer server error (HTTP {status_code})", status_code=status_code
        )
    raise SearchFailedError(
        f"Unexpected HTTP status {status_code}", status_code=status_code
    )
