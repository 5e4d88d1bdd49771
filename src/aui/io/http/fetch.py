"""Default network-fetch capability for execution contexts.

Handlers reach the network only through `ctx.fetch`, which returns parsed
data or raises. `HttpFetch` implements it on httpx: JSON responses are
decoded, anything else comes back as text, and HTTP error statuses raise
`httpx.HTTPStatusError`.

Example:
    >>> data = await ctx.fetch("https://api.example.com/weather", params={"city": "Oslo"})
    >>> await ctx.fetch("https://api.example.com/items", method="POST", json={"name": "x"})
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from aui.foundation.config import get_settings

if TYPE_CHECKING:
    from aui.foundation.config import HttpSettings


@runtime_checkable
class Fetch(Protocol):
    """Async request capability returning parsed data or raising on failure."""

    async def __call__(self, url: str, *, method: str = "GET", **options: Any) -> Any: ...


class HttpFetch:
    """httpx-backed fetch.

    Opens a short-lived AsyncClient per request unless a shared `client` is
    supplied (the caller then owns its lifecycle). `transport` is passed to
    the per-request client, which lets tests plug in `httpx.MockTransport`.

    Args:
        settings: HTTP defaults (default: from get_settings())
        client: Optional shared AsyncClient
        transport: Optional transport for per-request clients
    """

    __slots__ = ("_settings", "_client", "_transport")

    def __init__(
        self,
        settings: HttpSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings().http
        self._client = client
        self._transport = transport

    async def __call__(self, url: str, *, method: str = "GET", **options: Any) -> Any:
        if self._client is not None:
            return self._parse(await self._client.request(method, url, **options))
        async with httpx.AsyncClient(
            timeout=self._settings.timeout,
            follow_redirects=self._settings.follow_redirects,
            headers={"User-Agent": self._settings.user_agent},
            transport=self._transport,
        ) as client:
            return self._parse(await client.request(method, url, **options))

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        response.raise_for_status()
        if not response.content:
            return None
        if "json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text
