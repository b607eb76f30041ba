"""Tests for definition-driven result extraction."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from trawlarr.domain.definitions import FieldSpec, FilterSpec, RowsSpec
from trawlarr.domain.entities import ParseError
from trawlarr.infrastructure.indexers.result_extractor import (
    ResultExtractor,
    extract_results,
    parse_results,
)


def _json_body(*rows: dict) -> str:
    return json.dumps({"data": {"results": list(rows)}})


class TestHtmlExtraction:
    def test_rows_without_download_dropped(
        self, html_definition, results_table_html
    ) -> None:
        results = parse_results(html_definition, results_table_html, "Demo")
        assert [r.title for r in results] == [
            "Iron.Man.2008.2160p.UHD.BluRay.x265.HDR",
            "Iron Man 2008 1080p WEB-DL",
        ]

    def test_typed_fields(self, html_definition, results_table_html) -> None:
        first, second = parse_results(html_definition, results_table_html, "Demo")

        assert first.download_url.startswith("magnet:?xt=urn:btih:")
        assert first.info_url == "https://tracker.example.org/torrent/1"
        assert first.size == int(15.2 * 1024**3)
        assert first.seeders == 1024
        assert first.leechers == 12
        assert first.indexer == "Demo"

        assert second.download_url == "https://tracker.example.org/download/3.torrent"
        assert second.seeders == 0
        assert second.leechers == 5

    def test_quality_from_title(self, html_definition, results_table_html) -> None:
        first, second = parse_results(html_definition, results_table_html, "Demo")
        assert first.quality.resolution == "2160p"
        assert first.quality.codec == "H.265"
        assert second.quality.resolution == "1080p"
        assert second.quality.source == "WEB-DL"

    def test_after_skips_leading_rows(
        self, make_definition, results_table_html
    ) -> None:
        definition = make_definition(rows=RowsSpec(selector="table.results tr", after=2))
        results = parse_results(definition, results_table_html, "Demo")
        assert [r.title for r in results] == ["Iron Man 2008 1080p WEB-DL"]

    def test_no_rows_is_empty(self, html_definition) -> None:
        assert parse_results(html_definition, "<html><p>none</p></html>", "Demo") == []

    def test_filters_applied(self, make_definition, results_table_html) -> None:
        fields = {
            "title": FieldSpec(
                selector="td.name a",
                filters=(
                    FilterSpec(name="re_replace", args=(r"\.", " ")),
                    FilterSpec(name="append", args=(" [demo]",)),
                ),
            ),
            "download": FieldSpec(selector="td.dl a", attribute="href"),
        }
        results = parse_results(
            make_definition(fields=fields), results_table_html, "Demo"
        )
        assert results[0].title == "Iron Man 2008 2160p UHD BluRay x265 HDR [demo]"

    def test_filter_emptying_title_drops_row(
        self, make_definition, results_table_html
    ) -> None:
        fields = {
            "title": FieldSpec(
                selector="td.name a",
                filters=(FilterSpec(name="re_replace", args=(".*", "")),),
            ),
            "download": FieldSpec(selector="td.dl a", attribute="href"),
        }
        assert parse_results(make_definition(fields=fields), results_table_html, "D") == []

    def test_invalid_field_selector_leaves_field_missing(
        self, make_definition, results_table_html
    ) -> None:
        fields = {
            "title": FieldSpec(selector="td.name a"),
            "download": FieldSpec(selector="td.dl a", attribute="href"),
            "size": FieldSpec(selector="td["),
        }
        results = parse_results(
            make_definition(fields=fields), results_table_html, "Demo"
        )
        assert len(results) == 2
        assert all(r.size == 0 for r in results)

    def test_invalid_rows_selector(self, make_definition) -> None:
        definition = make_definition(rows=RowsSpec(selector="tr["))
        extractor = ResultExtractor(definition)
        with pytest.raises(ParseError):
            extractor.parse("<table></table>", "Demo")
        assert extractor.extract("<table></table>", "Demo") == []


class TestJsonExtraction:
    def test_basic_rows(self, json_definition) -> None:
        body = _json_body(
            {
                "name": "Movie.2020.1080p.WEB-DL",
                "magnet": "magnet:?xt=urn:btih:" + "b" * 40,
                "size": 1073741824,
                "stats": {"seeders": 7, "leechers": 1},
                "added": "2024-01-02T03:04:05Z",
            },
            {"name": "No link"},
        )
        (result,) = parse_results(json_definition, body, "JSON API")

        assert result.title == "Movie.2020.1080p.WEB-DL"
        assert result.size == 1073741824
        assert result.seeders == 7
        assert result.leechers == 1
        assert result.published_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert result.is_magnet

    def test_empty_result_list(self, json_definition) -> None:
        assert parse_results(json_definition, _json_body(), "JSON API") == []

    def test_missing_rows_path(self, json_definition) -> None:
        body = json.dumps({"error": "maintenance"})
        with pytest.raises(ParseError):
            parse_results(json_definition, body, "JSON API")
        assert extract_results(json_definition, body, "JSON API") == []

    def test_invalid_json(self, json_definition) -> None:
        with pytest.raises(ParseError):
            parse_results(json_definition, "<html>oops</html>", "JSON API")
        assert extract_results(json_definition, "<html>oops</html>", "JSON API") == []

    def test_too_deeply_nested_json(self, json_definition) -> None:
        body = "[" * 200_000 + "]" * 200_000
        with pytest.raises(ParseError):
            parse_results(json_definition, body, "JSON API")
        assert extract_results(json_definition, body, "JSON API") == []

    def test_relative_download_joined(self, make_definition) -> None:
        definition = make_definition(
            links=("https://api.example.net/",),
            rows=RowsSpec(selector="$"),
            fields={
                "title": FieldSpec(selector="title"),
                "download": FieldSpec(selector="link"),
            },
        )
        body = json.dumps([{"title": "Movie", "link": "dl/1.torrent"}])
        (result,) = parse_results(definition, body, "API")
        assert result.download_url == "https://api.example.net/dl/1.torrent"

    def test_magnet_field_fallback(self, make_definition) -> None:
        definition = make_definition(
            rows=RowsSpec(selector="$.items"),
            fields={
                "title": FieldSpec(selector="title"),
                "magnet": FieldSpec(selector="hash"),
            },
        )
        body = json.dumps(
            {"items": [{"title": "Movie", "hash": "magnet:?xt=urn:btih:abc"}]}
        )
        (result,) = parse_results(definition, body, "API")
        assert result.download_url == "magnet:?xt=urn:btih:abc"

    def test_ids_and_category(self, make_definition) -> None:
        definition = make_definition(
            rows=RowsSpec(selector="$"),
            fields={
                "title": FieldSpec(selector="t"),
                "download": FieldSpec(selector="d"),
                "imdbid": FieldSpec(selector="imdb"),
                "tmdbid": FieldSpec(selector="tmdb"),
                "category": FieldSpec(selector="cat"),
                "grabs": FieldSpec(selector="snatched"),
            },
        )
        body = json.dumps(
            [
                {
                    "t": "Movie",
                    "d": "https://x.example/1",
                    "imdb": "133093",
                    "tmdb": 603,
                    "cat": "2040",
                    "snatched": 12,
                }
            ]
        )
        (result,) = parse_results(definition, body, "API")
        assert result.imdb_id == "tt0133093"
        assert result.tmdb_id == 603
        assert result.category == 2040
        assert result.grabs == 12

    def test_extractor_is_reusable(self, json_definition) -> None:
        extractor = ResultExtractor(json_definition)
        body = _json_body({"name": "A", "magnet": "magnet:?xt=urn:btih:x"})
        assert len(extractor.parse(body, "JSON API")) == 1
        assert len(extractor.parse(body, "JSON API")) == 1
