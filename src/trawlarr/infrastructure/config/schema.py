"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class RankingConfig(BaseModel):
    """Weights and tiers for result ranking (YAML section: ranking.*).

    final = quality_weight * quality + seeder_weight * seeder, where
    quality mixes resolution, source, HDR and preferred-audio scores and
    seeder is log-scaled against ``seeder_reference``.
    """

    quality_weight: float = Field(default=0.6, ge=0.0)
    seeder_weight: float = Field(default=0.4, ge=0.0)

    resolution_weight: float = Field(default=0.5, ge=0.0)
    source_weight: float = Field(default=0.4, ge=0.0)
    hdr_weight: float = Field(default=0.05, ge=0.0)
    audio_weight: float = Field(default=0.05, ge=0.0)

    resolution_scores: dict[str, float] = Field(
        default={
            "2160p": 1.0,
            "1080p": 0.85,
            "720p": 0.7,
            "576p": 0.55,
            "480p": 0.5,
        },
        description="Score per detected resolution (missing = 0).",
    )
    source_scores: dict[str, float] = Field(
        default={
            "REMUX": 1.0,
            "BluRay": 0.9,
            "WEB-DL": 0.85,
            "WEB": 0.8,
            "WEBRip": 0.75,
            "BDRip": 0.75,
            "HDTV": 0.6,
            "DVDRip": 0.5,
            "DVD": 0.45,
        },
        description="Score per detected source (missing = 0).",
    )
    preferred_audio: list[str] = Field(
        default=["TrueHD", "Atmos", "DTS-HD MA", "DTS-X", "DTS-HD", "DDP"],
        description="Audio label prefixes that earn the audio bonus.",
    )

    seeder_reference: int = Field(
        default=1000,
        gt=0,
        description="Seeder count that maps to a full seeder score.",
    )


class IndexerSettings(BaseModel):
    """Per-indexer settings (YAML section: indexers.<definition id>)."""

    enabled: bool = True
    priority: int = Field(default=25, description="Lower runs and merges first.")
    name: str | None = Field(default=None, description="Display name override.")
    headers: dict[str, str] = Field(default_factory=dict)
    cookies: dict[str, str] = Field(default_factory=dict)


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (definitions/http/logging/search/...).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="trawlarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Definitions (YAML section: definitions.dir)
    definitions_dir: Path = Field(
        default=Path("./definitions"),
        validation_alias=AliasChoices(
            "definitions_dir",
            AliasPath("definitions", "dir"),
        ),
        description="Directory containing YAML indexer definitions.",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request HTTP timeout in seconds.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Client-wide redirect default (definitions may override).",
    )
    http_user_agent: str = Field(
        default="Trawlarr/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Search fan-out (YAML section: search.*)
    max_concurrent_indexers: int = Field(
        default=10,
        validation_alias=AliasChoices(
            "max_concurrent_indexers",
            AliasPath("search", "max_concurrent_indexers"),
        ),
        description="Max indexers searched in parallel.",
    )
    indexer_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "indexer_timeout_seconds",
            AliasPath("search", "indexer_timeout_seconds"),
        ),
        description="Timeout for one indexer's whole pipeline.",
    )
    search_deadline_seconds: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "search_deadline_seconds",
            AliasPath("search", "deadline_seconds"),
        ),
        description="Overall deadline; unfinished indexers are cancelled.",
    )
    circuit_breaker_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "circuit_breaker_enabled",
            AliasPath("search", "circuit_breaker_enabled"),
        ),
    )
    circuit_breaker_threshold: int = Field(
        default=5,
        validation_alias=AliasChoices(
            "circuit_breaker_threshold",
            AliasPath("search", "circuit_breaker_threshold"),
        ),
        description="Consecutive failures before an indexer is skipped.",
    )
    circuit_breaker_cooldown_seconds: float = Field(
        default=60.0,
        validation_alias=AliasChoices(
            "circuit_breaker_cooldown_seconds",
            AliasPath("search", "circuit_breaker_cooldown_seconds"),
        ),
        description="How long a tripped indexer is skipped.",
    )

    # Ranking (YAML section: ranking.*)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    # Per-indexer settings keyed by definition id (YAML section: indexers.*)
    indexers: dict[str, IndexerSettings] = Field(default_factory=dict)

    @field_validator("definitions_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds", "indexer_timeout_seconds")
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("search_deadline_seconds")
    @classmethod
    def _validate_deadline(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("search_deadline_seconds must be > 0")
        return v

    @field_validator("max_concurrent_indexers", "circuit_breaker_threshold")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "definitions": {"dir": str(self.definitions_dir)},
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "search": {
                "max_concurrent_indexers": self.max_concurrent_indexers,
                "indexer_timeout_seconds": self.indexer_timeout_seconds,
                "deadline_seconds": self.search_deadline_seconds,
                "circuit_breaker_enabled": self.circuit_breaker_enabled,
                "circuit_breaker_threshold": self.circuit_breaker_threshold,
                "circuit_breaker_cooldown_seconds": (
                    self.circuit_breaker_cooldown_seconds
                ),
            },
            "ranking": self.ranking.model_dump(),
            "indexers": {
                key: settings.model_dump() for key, settings in self.indexers.items()
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read TRAWLARR_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - TRAWLARR_DEFINITIONS_DIR
    - TRAWLARR_HTTP_TIMEOUT_SECONDS
    - TRAWLARR_MAX_CONCURRENT_INDEXERS
    - TRAWLARR_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAWLARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    definitions_dir: Optional[Path] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    max_concurrent_indexers: Optional[int] = None
    indexer_timeout_seconds: Optional[float] = None
    search_deadline_seconds: Optional[float] = None
    circuit_breaker_enabled: Optional[bool] = None
    circuit_breaker_threshold: Optional[int] = None
    circuit_breaker_cooldown_seconds: Optional[float] = None

    @field_validator("definitions_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
