"""Go-template style variable substitution for definition strings.

Supported markers::

    {{ .Keywords }}        search keywords
    {{ .Categories }}      requested category IDs, comma-joined
    {{ .Query.<Name> }}    named extra query parameter (Season, Ep, IMDBID, ...)

Markers that cannot be resolved render as an empty string.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from urllib.parse import quote

from trawlarr.domain.entities import SearchQuery

_MARKER_RE = re.compile(
    r"\{\{\s*\.([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)?)\s*\}\}"
)

TemplateValue = str | int | Sequence[str | int] | None


@dataclass(frozen=True)
class TemplateVariables:
    keywords: str = ""
    categories: tuple[int, ...] = ()
    query: Mapping[str, TemplateValue] = field(default_factory=dict)

    @classmethod
    def from_query(cls, q: SearchQuery) -> TemplateVariables:
        params: dict[str, TemplateValue] = {
            "Keywords": q.keywords,
            "Series": q.keywords,
        }
        params.update(q.params)
        return cls(keywords=q.keywords, categories=q.categories, query=params)

    def lookup(self, name: str) -> TemplateValue:
        if name == "Keywords":
            return self.keywords
        if name == "Categories":
            return self.categories

        scope, _, key = name.partition(".")
        if scope != "Query" or not key:
            return None
        if key in self.query:
            return self.query[key]
        folded = key.casefold()
        for candidate, value in self.query.items():
            if candidate.casefold() == folded:
                return value
        return None


def _render(value: TemplateValue) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return ",".join(str(v) for v in value)
    return str(value)


def resolve_template(
    template: str, variables: TemplateVariables, *, raw: bool = False
) -> str:
    """Substitute every marker in *template*.

    Escaped mode (default) percent-encodes everything outside the RFC 3986
    unreserved set; raw mode inserts values verbatim.
    """

    def _sub(match: re.Match[str]) -> str:
        rendered = _render(variables.lookup(match.group(1)))
        return rendered if raw else quote(rendered, safe="")

    return _MARKER_RE.sub(_sub, template)
