"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_count, to_imdb_id, to_int
from .filters import apply_filters
from .parsers import parse_datetime, parse_size_to_bytes
from .rate_limiter import RequestThrottle
from .templating import TemplateVariables, resolve_template

__all__ = [
    "RequestThrottle",
    "TemplateVariables",
    "apply_filters",
    "parse_datetime",
    "parse_size_to_bytes",
    "resolve_template",
    "to_count",
    "to_imdb_id",
    "to_int",
]
