"""Compiled row/field selectors for definition-driven extraction.

A rows selector starting with ``$`` addresses a JSON document, anything
else is a CSS selector evaluated against HTML.  Both variants are compiled
once per definition by the result extractor.

Supported JSON paths::

    $                 the document itself
    $.data.results    nested keys
    $.data[0].items   list index
    $.data[*].torrents  wildcard (flattens one level)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import soupsieve as sv
from bs4 import BeautifulSoup, Tag

from trawlarr.domain.entities import ParseError

WILDCARD = "*"

_STEP_RE = re.compile(r"\.([^.\[\]]+)|\[(\d+|\*)\]|\['([^']*)'\]")


@dataclass(frozen=True)
class CssSelector:
    """CSS selector; an empty selector stands for the element itself."""

    selector: str
    compiled: sv.SoupSieve | None = None

    def select(self, root: BeautifulSoup | Tag) -> list[Tag]:
        if self.compiled is None:
            return [root]
        return list(self.compiled.select(root))

    def select_one(self, root: Tag) -> Tag | None:
        if self.compiled is None:
            return root
        return self.compiled.select_one(root)


@dataclass(frozen=True)
class JsonPathSelector:
    """Minimal JSONPath (``$``-rooted keys, indexes and ``[*]``)."""

    selector: str
    steps: tuple[str | int, ...] = ()

    def rows(self, document: Any) -> list[dict[str, Any]]:
        """Resolve the row list; raises ``ParseError`` when the path is absent."""
        nodes = [document]
        for step in self.steps:
            if not nodes:
                # An empty list under [*] is "no results", not a missing path.
                break
            nodes = _advance(nodes, step)
            if not nodes and step != WILDCARD:
                raise ParseError(f"JSON path {self.selector!r} not found")

        rows: list[Any] = []
        for node in nodes:
            if isinstance(node, list):
                rows.extend(node)
            else:
                rows.append(node)
        return [row for row in rows if isinstance(row, dict)]


RowSelector = CssSelector | JsonPathSelector


def _advance(nodes: list[Any], step: str | int) -> list[Any]:
    out: list[Any] = []
    for node in nodes:
        if step == WILDCARD:
            if isinstance(node, list):
                out.extend(node)
            elif isinstance(node, dict):
                out.extend(node.values())
        elif isinstance(step, int):
            if isinstance(node, list) and -len(node) <= step < len(node):
                out.append(node[step])
        elif isinstance(node, dict) and step in node:
            out.append(node[step])
    return out


def is_json_selector(selector: str) -> bool:
    return selector.strip().startswith("$")


def compile_json_path(selector: str) -> JsonPathSelector:
    """Tokenize a ``$``-rooted path; raises ``ValueError`` on bad syntax."""
    path = selector.strip()
    if not path.startswith("$"):
        raise ValueError(f"JSON path must start with '$': {selector!r}")

    steps: list[str | int] = []
    pos = 1
    while pos < len(path):
        match = _STEP_RE.match(path, pos)
        if match is None:
            raise ValueError(f"Invalid JSON path {selector!r} at offset {pos}")
        key, index, quoted = match.groups()
        if index is not None:
            steps.append(WILDCARD if index == WILDCARD else int(index))
        else:
            steps.append(key if key is not None else quoted)
        pos = match.end()
    return JsonPathSelector(selector=selector, steps=tuple(steps))


def compile_css(selector: str) -> CssSelector:
    """Compile a CSS selector; raises ``soupsieve.SelectorSyntaxError``."""
    selector = selector.strip()
    if not selector:
        return CssSelector(selector="")
    return CssSelector(selector=selector, compiled=sv.compile(selector))


def compile_rows_selector(selector: str) -> RowSelector:
    if is_json_selector(selector):
        return compile_json_path(selector)
    return compile_css(selector)


def json_field_value(row: dict[str, Any], key: str) -> str | None:
    """Look up *key* in a JSON row and stringify scalar values.

    A literal key wins; otherwise a dotted key walks nested objects.
    Booleans, nulls and containers count as missing.
    """
    key = key.strip()
    if key.startswith("$."):
        key = key[2:]
    if not key:
        return None

    if key in row:
        value = row[key]
    else:
        value = row
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None
