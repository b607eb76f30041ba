# src/trawlarr/domain/definitions/indexer_definition.py
"""Pure domain models for indexer definitions (framework-free)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

RAW_MARKER = "$raw:"

HttpMethod = Literal["get", "post"]
IndexerType = Literal["public", "semi-private", "private"]


@dataclass(frozen=True)
class FilterSpec:
    """Single post-extraction text transform (name + positional args)."""

    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class FieldSpec:
    """
    How to pull one value out of a result row.

    Example:
      download:
        selector: "a[href^='magnet:']"
        attribute: "href"
        filters:
          - name: trim
    """

    selector: str = ""
    attribute: str | None = None
    filters: tuple[FilterSpec, ...] = ()


@dataclass(frozen=True)
class RowsSpec:
    """Selector for the repeating result elements."""

    selector: str
    # Leading matches to discard (table header rows).
    after: int = 0


@dataclass(frozen=True)
class SearchPath:
    """One candidate search endpoint of a definition."""

    path: str
    method: HttpMethod = "get"
    categories: tuple[int, ...] = ()


@dataclass(frozen=True)
class SearchSpec:
    """Everything needed to build a request and parse its response."""

    paths: tuple[SearchPath, ...]
    rows: RowsSpec
    fields: dict[str, FieldSpec] = field(default_factory=dict)
    inputs: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Capabilities:
    """Declared category IDs and search modes of an indexer."""

    categories: tuple[int, ...] = ()
    modes: tuple[str, ...] = ("search",)


@dataclass(frozen=True)
class IndexerDefinition:
    """
    Declarative indexer definition (domain model - no validation).

    Loaded from YAML by infrastructure; read-only for the search core.
    """

    id: str
    name: str
    links: tuple[str, ...]
    search: SearchSpec
    capabilities: Capabilities = field(default_factory=Capabilities)
    description: str | None = None
    language: str = "en-US"
    type: IndexerType = "public"
    request_delay: float | None = None
    follow_redirect: bool = True
