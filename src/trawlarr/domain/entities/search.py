from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from trawlarr.domain.definitions import IndexerDefinition


@dataclass(frozen=True)
class SearchQuery:
    keywords: str
    categories: tuple[int, ...] = ()
    # Named extras referenced as {{ .Query.<Name> }} (Season, Ep, IMDBID, ...)
    params: dict[str, str | int] = field(default_factory=dict)

    # Result shaping
    min_seeders: int = 0
    max_results: int | None = None
    deduplicate: bool = True


@dataclass(frozen=True)
class QualityInfo:
    resolution: str | None = None  # "2160p", "1080p", ...
    source: str | None = None  # "BluRay", "WEB-DL", ...
    codec: str | None = None  # "H.265", "Xvid", ...
    audio: str | None = None  # "DTS-HD MA", "DDP5.1", ...
    hdr: str | None = None  # "DolbyVision", "HDR10+", ...
    proper: bool = False
    repack: bool = False

    def is_empty(self) -> bool:
        return self == QualityInfo()


@dataclass(frozen=True)
class SearchResult:
    """Normalized search result from one indexer.

    Only constructed with a non-empty title and fetch URL.
    """

    title: str
    download_url: str  # magnet URI or direct link
    indexer: str

    size: int = 0  # bytes
    seeders: int = 0
    leechers: int = 0
    grabs: int = 0
    category: int | None = None
    published_at: datetime | None = None
    quality: QualityInfo = field(default_factory=QualityInfo)

    # Extended fields
    info_url: str | None = None  # Detail page URL
    imdb_id: str | None = None
    tmdb_id: int | None = None

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("SearchResult requires a non-empty title")
        if not self.download_url:
            raise ValueError("SearchResult requires a non-empty download_url")

    @property
    def is_magnet(self) -> bool:
        return self.download_url.lower().startswith("magnet:")

    def health_score(self) -> float:
        """Swarm health between 0.0 and 1.0 (higher is better)."""
        total = self.seeders + self.leechers
        if total == 0:
            return 0.0
        if self.seeders == 0:
            return 0.1
        return min(1.0, self.seeders / total + self.seeders / 100)

    def format_size(self) -> str:
        return format_bytes(self.size)

    def quality_description(self) -> str:
        q = self.quality
        parts = [
            q.resolution,
            q.source,
            q.codec,
            q.audio,
            q.hdr,
            "PROPER" if q.proper else None,
            "REPACK" if q.repack else None,
        ]
        description = " ".join(p for p in parts if p)
        return description or "Unknown"


@dataclass(frozen=True)
class RankedResult:
    result: SearchResult
    quality_score: float
    seeder_score: float
    final_score: float


@dataclass(frozen=True)
class IndexerConfig:
    """Caller-owned settings for one configured indexer."""

    definition: IndexerDefinition
    enabled: bool = True
    priority: int = 25  # lower = searched and merged first
    # Supplied by the session/login collaborator; win over definition headers.
    headers: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    display_name: str | None = None

    @property
    def name(self) -> str:
        return self.display_name or self.definition.name


def format_bytes(size: int) -> str:
    """Human-readable binary size ("1.5 GB")."""
    if size < 1024:
        return f"{size} B"
    if size < 1024**2:
        return f"{round(size / 1024, 1)} KB"
    if size < 1024**3:
        return f"{round(size / 1024**2, 1)} MB"
    if size < 1024**4:
        return f"{round(size / 1024**3, 1)} GB"
    return f"{round(size / 1024**4, 1)} TB"
