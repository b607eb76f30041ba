"""HTML parsing and element value helpers (BeautifulSoup + lxml)."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def normalize_text(text: str) -> str:
    """Collapse every whitespace run into one space and strip the ends."""
    return " ".join(text.split())


def element_text(element: Tag) -> str:
    """Whitespace-normalised text content of *element*."""
    return normalize_text(element.get_text(" "))


def element_attr(element: Tag, attr: str) -> str | None:
    """Attribute value of *element*, ``None`` when absent.

    Multi-valued attributes (``class``, ``rel``) are space-joined.
    """
    val = element.get(attr)
    if val is None:
        return None
    if isinstance(val, list):
        return " ".join(val)
    return str(val).strip()
