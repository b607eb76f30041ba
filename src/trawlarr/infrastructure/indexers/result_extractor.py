"""Definition-driven extraction of search results from response bodies."""

from __future__ import annotations

import json
from urllib.parse import urljoin

import soupsieve as sv
import structlog
from bs4 import Tag

from trawlarr.domain.definitions import FieldSpec, IndexerDefinition
from trawlarr.domain.entities import ParseError, SearchResult
from trawlarr.infrastructure.common.converters import to_count, to_imdb_id, to_int
from trawlarr.infrastructure.common.filters import apply_filters
from trawlarr.infrastructure.common.html_selectors import (
    element_attr,
    element_text,
    parse_html,
)
from trawlarr.infrastructure.common.parsers import (
    parse_datetime,
    parse_size_to_bytes,
)
from trawlarr.infrastructure.indexers.selectors import (
    CssSelector,
    JsonPathSelector,
    RowSelector,
    compile_css,
    compile_rows_selector,
    json_field_value,
)
from trawlarr.infrastructure.quality.quality_extractor import extract_quality

log = structlog.get_logger(__name__)

RowValues = dict[str, str | None]


class ResultExtractor:
    """Extract ``SearchResult`` rows from a body using one definition.

    Selectors are compiled once at construction.  A field selector that
    fails to compile makes that field permanently missing; a rows selector
    that fails to compile turns every :meth:`parse` into a ``ParseError``.
    """

    def __init__(self, definition: IndexerDefinition) -> None:
        self._definition = definition
        self._fields = definition.search.fields
        self._skip = max(0, definition.search.rows.after)
        self._base_url = definition.links[0] if definition.links else ""

        self._rows: RowSelector | None
        self._rows_error: str | None = None
        try:
            self._rows = compile_rows_selector(definition.search.rows.selector)
        except (ValueError, sv.SelectorSyntaxError) as e:
            self._rows = None
            self._rows_error = str(e)

        self._css: dict[str, CssSelector | None] = {}
        if isinstance(self._rows, CssSelector):
            for name, spec in self._fields.items():
                try:
                    self._css[name] = compile_css(spec.selector)
                except sv.SelectorSyntaxError as e:
                    log.warning(
                        "field_selector_invalid",
                        definition=definition.id,
                        field=name,
                        error=str(e),
                    )
                    self._css[name] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, body: str, indexer_name: str) -> list[SearchResult]:
        """Extract results; raises ``ParseError`` for uninterpretable bodies."""
        if self._rows is None:
            raise ParseError(f"Invalid rows selector: {self._rows_error}")

        if isinstance(self._rows, JsonPathSelector):
            rows = self._json_rows(self._rows, body)
        else:
            rows = self._html_rows(self._rows, body)

        results: list[SearchResult] = []
        for values in rows:
            result = self._to_result(values, indexer_name)
            if result is not None:
                results.append(result)

        log.debug(
            "results_extracted",
            indexer=indexer_name,
            rows=len(rows),
            results=len(results),
        )
        return results

    def extract(self, body: str, indexer_name: str) -> list[SearchResult]:
        """Like :meth:`parse` but returns ``[]`` instead of raising."""
        try:
            return self.parse(body, indexer_name)
        except ParseError as e:
            log.warning("results_unparsable", indexer=indexer_name, error=str(e))
            return []

    # ------------------------------------------------------------------
    # Row sources
    # ------------------------------------------------------------------

    def _html_rows(self, selector: CssSelector, body: str) -> list[RowValues]:
        soup = parse_html(body)
        rows = selector.select(soup)[self._skip :]
        return [
            {
                name: self._html_value(row, name, spec)
                for name, spec in self._fields.items()
            }
            for row in rows
        ]

    def _html_value(self, row: Tag, name: str, spec: FieldSpec) -> str | None:
        selector = self._css.get(name)
        if selector is None:
            return None
        match = selector.select_one(row)
        if match is None:
            return None
        if spec.attribute:
            raw = element_attr(match, spec.attribute)
        else:
            raw = element_text(match)
        return self._finish(raw, spec)

    def _json_rows(self, selector: JsonPathSelector, body: str) -> list[RowValues]:
        try:
            document = json.loads(body)
        except (ValueError, TypeError, RecursionError) as e:
            # ValueError covers JSONDecodeError; RecursionError is nesting depth.
            raise ParseError(f"Invalid JSON response: {e}") from e

        rows = selector.rows(document)[self._skip :]
        return [
            {
                name: self._finish(json_field_value(row, spec.selector), spec)
                for name, spec in self._fields.items()
            }
            for row in rows
        ]

    @staticmethod
    def _finish(raw: str | None, spec: FieldSpec) -> str | None:
        if not raw:
            return None
        value = apply_filters(raw, spec.filters)
        return value or None

    # ------------------------------------------------------------------
    # Typed conversion
    # ------------------------------------------------------------------

    def _absolute(self, url: str) -> str:
        if url.startswith("magnet:") or not self._base_url:
            return url
        return urljoin(self._base_url, url)

    def _to_result(self, values: RowValues, indexer_name: str) -> SearchResult | None:
        title = values.get("title")
        download = values.get("download") or values.get("magnet")
        if not title or not download:
            return None

        details = values.get("details")
        try:
            return SearchResult(
                title=title,
                download_url=self._absolute(download),
                indexer=indexer_name,
                size=parse_size_to_bytes(values.get("size")),
                seeders=to_count(values.get("seeders")),
                leechers=to_count(values.get("leechers")),
                grabs=to_count(values.get("grabs")),
                category=to_int(values.get("category")),
                published_at=parse_datetime(values.get("date")),
                quality=extract_quality(title),
                info_url=self._absolute(details) if details else None,
                imdb_id=to_imdb_id(values.get("imdbid")),
                tmdb_id=to_int(values.get("tmdbid")),
            )
        except ValueError as e:
            log.debug("row_dropped", indexer=indexer_name, error=str(e))
            return None


def extract_results(
    definition: IndexerDefinition, body: str, indexer_name: str
) -> list[SearchResult]:
    """One-shot extraction; never raises."""
    return ResultExtractor(definition).extract(body, indexer_name)


def parse_results(
    definition: IndexerDefinition, body: str, indexer_name: str
) -> list[SearchResult]:
    """One-shot extraction; raises ``ParseError`` for uninterpretable bodies."""
    return ResultExtractor(definition).parse(body, indexer_name)

