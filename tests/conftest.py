"""Shared test fixtures for the trawlarr test suite."""

from __future__ import annotations

from typing import Any

import pytest

from trawlarr.domain.definitions import (
    FieldSpec,
    FilterSpec,
    IndexerDefinition,
    RowsSpec,
    SearchPath,
    SearchSpec,
)
from trawlarr.domain.entities import (
    IndexerConfig,
    QualityInfo,
    SearchQuery,
    SearchResult,
)

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

HTML_FIELDS: dict[str, FieldSpec] = {
    "title": FieldSpec(selector="td.name a"),
    "details": FieldSpec(selector="td.name a", attribute="href"),
    "download": FieldSpec(selector="td.dl a", attribute="href"),
    "size": FieldSpec(selector="td.size"),
    "seeders": FieldSpec(selector="td.seeds"),
    "leechers": FieldSpec(selector="td.peers"),
}

JSON_FIELDS: dict[str, FieldSpec] = {
    "title": FieldSpec(selector="name"),
    "download": FieldSpec(selector="magnet"),
    "size": FieldSpec(selector="size"),
    "seeders": FieldSpec(selector="stats.seeders"),
    "leechers": FieldSpec(selector="stats.leechers"),
    "date": FieldSpec(selector="added"),
}


def _make_definition(
    definition_id: str = "demo",
    *,
    name: str | None = None,
    links: tuple[str, ...] = ("https://tracker.example.org/",),
    paths: tuple[SearchPath, ...] = (SearchPath(path="/search"),),
    rows: RowsSpec | None = None,
    fields: dict[str, FieldSpec] | None = None,
    inputs: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    request_delay: float | None = None,
) -> IndexerDefinition:
    return IndexerDefinition(
        id=definition_id,
        name=name or definition_id.title(),
        links=links,
        search=SearchSpec(
            paths=paths,
            rows=rows or RowsSpec(selector="table.results tr", after=1),
            fields=HTML_FIELDS if fields is None else fields,
            inputs={"q": "{{ .Keywords }}"} if inputs is None else inputs,
            headers=headers or {},
        ),
        request_delay=request_delay,
    )


def _make_result(
    title: str = "Movie.2020.1080p.BluRay.x264-GRP",
    *,
    download_url: str | None = None,
    indexer: str = "Demo",
    seeders: int = 10,
    size: int = 4 * 1024**3,
    quality: QualityInfo | None = None,
    **kwargs: Any,
) -> SearchResult:
    return SearchResult(
        title=title,
        download_url=download_url or f"https://dl.example.org/{abs(hash(title))}",
        indexer=indexer,
        seeders=seeders,
        size=size,
        quality=quality or QualityInfo(),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_definition():
    """Factory for ``IndexerDefinition`` objects with HTML-table defaults."""
    return _make_definition


@pytest.fixture()
def make_result():
    """Factory for ``SearchResult`` objects with sensible defaults."""
    return _make_result


@pytest.fixture()
def html_definition() -> IndexerDefinition:
    """Definition for a classic HTML results table with one header row."""
    return _make_definition()


@pytest.fixture()
def json_definition() -> IndexerDefinition:
    """Definition for a JSON API returning ``{"data": {"results": [...]}}``."""
    return _make_definition(
        "jsonapi",
        name="JSON API",
        links=("https://api.example.net",),
        paths=(SearchPath(path="/api/search"),),
        rows=RowsSpec(selector="$.data.results"),
        fields=JSON_FIELDS,
    )


@pytest.fixture()
def trim_filter() -> FilterSpec:
    return FilterSpec(name="trim")


@pytest.fixture()
def search_query() -> SearchQuery:
    return SearchQuery(keywords="iron man")


@pytest.fixture()
def indexer_config(html_definition: IndexerDefinition) -> IndexerConfig:
    return IndexerConfig(definition=html_definition)


@pytest.fixture()
def results_table_html() -> str:
    """Three data rows under one header row; the middle row has no link."""
    return """
    <html><body>
    <table class="results">
      <tr><th>Name</th><th>DL</th><th>Size</th><th>S</th><th>L</th></tr>
      <tr>
        <td class="name"><a href="/torrent/1">Iron.Man.2008.2160p.UHD.BluRay.x265.HDR</a></td>
        <td class="dl"><a href="magnet:?xt=urn:btih:AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA">m</a></td>
        <td class="size">15.2 GB</td>
        <td class="seeds">1,024</td>
        <td class="peers">12</td>
      </tr>
      <tr>
        <td class="name"><a href="/torrent/2">Iron.Man.2008.720p.WEBRip</a></td>
        <td class="dl"></td>
        <td class="size">900 MB</td>
        <td class="seeds">3</td>
        <td class="peers">0</td>
      </tr>
      <tr>
        <td class="name"><a href="/torrent/3">  Iron Man   2008
          1080p WEB-DL </a></td>
        <td class="dl"><a href="/download/3.torrent">t</a></td>
        <td class="size">4.5 GB</td>
        <td class="seeds">n/a</td>
        <td class="peers">5</td>
      </tr>
    </table>
    </body></html>
    """
