"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "trawlarr",
    "environment": "dev",
    "definitions": {
        "dir": "./definitions",
    },
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "Trawlarr/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "search": {
        "max_concurrent_indexers": 10,
        "indexer_timeout_seconds": 30.0,
        "deadline_seconds": None,
        "circuit_breaker_enabled": True,
        "circuit_breaker_threshold": 5,
        "circuit_breaker_cooldown_seconds": 60.0,
    },
    "ranking": {},
    "indexers": {},
}
