"""Collapse duplicate releases reported by several indexers."""

from __future__ import annotations

import re
from collections.abc import Iterable

from trawlarr.domain.entities import SearchResult

_BTIH_RE = re.compile(
    r"xt=urn:btih:([0-9a-f]{40}|[a-z2-7]{32})(?![0-9a-z])", re.IGNORECASE
)
_SEP_RE = re.compile(r"[\s._-]+")
_PUNCT_RE = re.compile(r"[^\w\s]")

# Same title within one bucket counts as the same release.
SIZE_BUCKET_BYTES = 100 * 1024 * 1024


def info_hash(download_url: str) -> str | None:
    """BitTorrent info-hash from a magnet URI (lowercased), else ``None``."""
    if not download_url.lower().startswith("magnet:"):
        return None
    match = _BTIH_RE.search(download_url)
    return match.group(1).lower() if match else None


def normalize_title(title: str) -> str:
    """Lowercase, turn separators into spaces and strip other punctuation.

    ``.``, ``_`` and ``-`` separate words; anything else (apostrophes,
    brackets, colons) is deleted, so ``Don't.Look.Up`` and ``Dont Look Up``
    normalize alike.
    """
    spaced = _SEP_RE.sub(" ", title.lower())
    return " ".join(_PUNCT_RE.sub("", spaced).split())


def dedup_key(result: SearchResult) -> str:
    btih = info_hash(result.download_url)
    if btih is not None:
        return f"btih:{btih}"
    bucket = round(result.size / SIZE_BUCKET_BYTES)
    return f"title:{normalize_title(result.title)}:{bucket}"


def deduplicate(results: Iterable[SearchResult]) -> list[SearchResult]:
    """Keep one result per release.

    The survivor of each group is the one with the most seeders; on a tie
    the earliest seen wins.  Output keeps first-appearance order of groups.
    """
    best: dict[str, SearchResult] = {}
    for result in results:
        key = dedup_key(result)
        current = best.get(key)
        if current is None or result.seeders > current.seeders:
            best[key] = result
    return list(best.values())
