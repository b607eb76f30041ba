from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, IndexerSettings, RankingConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "IndexerSettings",
    "RankingConfig",
    "load_config",
]
