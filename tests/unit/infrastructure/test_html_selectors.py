"""Tests for HTML parsing and element value helpers."""

from __future__ import annotations

from trawlarr.infrastructure.common.html_selectors import (
    element_attr,
    element_text,
    normalize_text,
    parse_html,
)

_ROW_HTML = """\
<table><tr class="row odd" data-id=" 42 ">
  <td class="name">
    <a href="/t/1">The
       Batman</a>
    <span>2022</span>
  </td>
</tr></table>
"""


class TestNormalizeText:
    def test_collapses_whitespace(self) -> None:
        assert normalize_text("  a \n\t b  ") == "a b"

    def test_empty(self) -> None:
        assert normalize_text("   ") == ""


class TestElementText:
    def test_nested_text_joined_and_normalized(self) -> None:
        soup = parse_html(_ROW_HTML)
        cell = soup.select_one("td.name")
        assert cell is not None
        assert element_text(cell) == "The Batman 2022"


class TestElementAttr:
    def test_plain_attribute_is_stripped(self) -> None:
        row = parse_html(_ROW_HTML).select_one("tr")
        assert row is not None
        assert element_attr(row, "data-id") == "42"

    def test_multi_valued_attribute_joined(self) -> None:
        row = parse_html(_ROW_HTML).select_one("tr")
        assert row is not None
        assert element_attr(row, "class") == "row odd"

    def test_missing_attribute_is_none(self) -> None:
        link = parse_html(_ROW_HTML).select_one("a")
        assert link is not None
        assert element_attr(link, "title") is None
