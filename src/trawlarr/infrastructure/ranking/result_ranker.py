"""Score and order search results by quality and swarm size.

All weights and tiers come from ``RankingConfig``.  With the defaults,
``final = 0.6 * quality + 0.4 * seeder`` where:

- quality = 0.5 * resolution + 0.4 * source + 0.05 * HDR
  + 0.05 * preferred audio, clamped to [0, 1]
- seeder = log10(1 + seeders) / log10(1 + 1000), capped at 1
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from trawlarr.domain.entities import QualityInfo, RankedResult, SearchResult
from trawlarr.infrastructure.config.schema import RankingConfig


class ResultRanker:
    def __init__(self, config: RankingConfig | None = None) -> None:
        config = config or RankingConfig()
        self._quality_weight = config.quality_weight
        self._seeder_weight = config.seeder_weight
        self._resolution_weight = config.resolution_weight
        self._source_weight = config.source_weight
        self._hdr_weight = config.hdr_weight
        self._audio_weight = config.audio_weight
        self._resolution_scores = config.resolution_scores
        self._source_scores = config.source_scores
        self._preferred_audio = tuple(config.preferred_audio)
        self._seeder_norm = math.log10(1 + config.seeder_reference)

    def quality_score(self, quality: QualityInfo) -> float:
        score = 0.0
        if quality.resolution:
            score += self._resolution_weight * self._resolution_scores.get(
                quality.resolution, 0.0
            )
        if quality.source:
            score += self._source_weight * self._source_scores.get(quality.source, 0.0)
        if quality.hdr:
            score += self._hdr_weight
        if quality.audio and quality.audio.startswith(self._preferred_audio):
            score += self._audio_weight
        return min(1.0, max(0.0, score))

    def seeder_score(self, seeders: int) -> float:
        if seeders <= 0:
            return 0.0
        return min(1.0, math.log10(1 + seeders) / self._seeder_norm)

    def score(self, result: SearchResult) -> RankedResult:
        quality = self.quality_score(result.quality)
        seeder = self.seeder_score(result.seeders)
        return RankedResult(
            result=result,
            quality_score=quality,
            seeder_score=seeder,
            final_score=self._quality_weight * quality + self._seeder_weight * seeder,
        )

    def rank(self, results: Iterable[SearchResult]) -> list[RankedResult]:
        """Score every result and sort descending (stable for equal scores)."""
        scored = [self.score(r) for r in results]
        scored.sort(key=lambda r: r.final_score, reverse=True)
        return scored
