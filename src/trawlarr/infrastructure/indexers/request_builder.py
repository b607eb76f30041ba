"""Turn an indexer definition plus a search query into an HTTP request.

Every parameter value leaves this module wire-ready: inputs are escaped
unless they carry the ``$raw:`` marker, in which case they are substituted
verbatim.  Transports send ``params`` as-is.
"""

from __future__ import annotations

from collections.abc import Mapping

from trawlarr.domain.definitions import RAW_MARKER, IndexerDefinition, SearchPath
from trawlarr.domain.entities import RequestBuildError, SearchQuery
from trawlarr.domain.ports import PreparedRequest
from trawlarr.infrastructure.common.templating import (
    TemplateVariables,
    resolve_template,
)


def select_path(
    paths: tuple[SearchPath, ...], categories: tuple[int, ...]
) -> SearchPath:
    """Pick the search path for the requested categories.

    The first path whose categories intersect the request wins.  Without
    requested categories, or when nothing intersects, the first path is
    used.
    """
    if not paths:
        raise RequestBuildError("Definition has no search paths")

    if categories:
        wanted = set(categories)
        for path in paths:
            if wanted.intersection(path.categories):
                return path
    return paths[0]


def _base_url(definition: IndexerDefinition) -> str:
    if not definition.links:
        raise RequestBuildError(f"Definition {definition.id!r} has no links")
    return definition.links[0].rstrip("/")


def _join(base_url: str, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path


def _resolve_input(template: str, variables: TemplateVariables) -> str:
    if template.startswith(RAW_MARKER):
        return resolve_template(template[len(RAW_MARKER) :], variables, raw=True)
    return resolve_template(template, variables)


def _cookie_header(cookies: Mapping[str, str]) -> str:
    return "; ".join(f"{name}={value}" for name, value in cookies.items())


def build_request(
    definition: IndexerDefinition,
    query: SearchQuery,
    *,
    extra_headers: Mapping[str, str] | None = None,
    cookies: Mapping[str, str] | None = None,
) -> PreparedRequest:
    """Build the search request for *query* against *definition*.

    Raises:
        RequestBuildError: The definition has no links or no search paths.
    """
    base_url = _base_url(definition)
    path = select_path(definition.search.paths, query.categories)
    variables = TemplateVariables.from_query(query)

    url = _join(base_url, resolve_template(path.path, variables))
    params = {
        name: _resolve_input(template, variables)
        for name, template in definition.search.inputs.items()
    }

    headers = dict(definition.search.headers)
    if extra_headers:
        headers.update(extra_headers)
    if cookies:
        headers["Cookie"] = _cookie_header(cookies)

    return PreparedRequest(
        url=url, method=path.method, headers=headers, params=params
    )
