"""Port for performing one HTTP request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class PreparedRequest:
    """Request produced by the request builder.

    ``params`` values are already wire-encoded (percent-escaped or raw as the
    definition asked); transports must not encode them again.
    """

    url: str
    method: str = "get"
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class HttpTransportPort(Protocol):
    """Async interface for sending a prepared request."""

    async def send(
        self,
        request: PreparedRequest,
        *,
        timeout: float | None = None,
        follow_redirects: bool = True,
    ) -> TransportResponse: ...
