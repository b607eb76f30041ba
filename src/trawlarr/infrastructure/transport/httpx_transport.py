"""httpx adapter for the HTTP transport port."""

from __future__ import annotations

from urllib.parse import quote

import httpx
import structlog

from trawlarr.domain.entities import ConnectionFailedError, SearchFailedError
from trawlarr.domain.ports import PreparedRequest, TransportResponse

log = structlog.get_logger(__name__)

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def encode_params(params: dict[str, str]) -> str:
    """Join already-encoded values into ``k=v&k=v`` (names are escaped)."""
    return "&".join(
        f"{quote(name, safe='')}={value}" for name, value in params.items()
    )


class HttpxTransport:
    """Sends ``PreparedRequest`` objects through a shared ``httpx.AsyncClient``.

    Parameter values arrive wire-encoded from the request builder, so the
    query string (GET) or form body (POST) is assembled here verbatim
    instead of letting httpx encode them a second time.

    Args:
        http_client: Shared client (owned by the composition root).
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def send(
        self,
        request: PreparedRequest,
        *,
        timeout: float | None = None,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        method = request.method.upper()
        url = request.url
        headers = dict(request.headers)
        content: str | None = None

        encoded = encode_params(request.params)
        if method == "POST":
            content = encoded
            headers.setdefault("Content-Type", _FORM_CONTENT_TYPE)
        elif encoded:
            url = f"{url}{'&' if '?' in url else '?'}{encoded}"

        request_timeout = (
            httpx.Timeout(timeout) if timeout is not None else httpx.USE_CLIENT_DEFAULT
        )
        try:
            resp = await self._client.request(
                method,
                url,
                headers=headers,
                content=content,
                timeout=request_timeout,
                follow_redirects=follow_redirects,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            log.debug("http_connection_failed", url=url, error=repr(e))
            raise ConnectionFailedError(f"{type(e).__name__}: {e}") from e
        except httpx.HTTPError as e:
            log.debug("http_request_failed", url=url, error=repr(e))
            raise SearchFailedError(f"{type(e).__name__}: {e}") from e

        return TransportResponse(
            status_code=resp.status_code,
            body=resp.text,
            headers=dict(resp.headers),
        )
