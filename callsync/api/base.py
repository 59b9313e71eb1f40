"""Shared httpx plumbing for the upstream API clients."""

from __future__ import annotations

from typing import Any

import httpx

from ..config import settings


class APIClient:
    """Async context manager owning one ``httpx.AsyncClient``.

    Subclasses set ``base_url`` and provide auth headers. Every helper calls
    ``raise_for_status()`` so callers see ``httpx.HTTPStatusError`` on non-2xx.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _auth_headers(self) -> dict[str, str]:
        raise NotImplementedError

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                **self._auth_headers(),
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._client

    async def _get(self, endpoint: str, **params) -> Any:
        """Make GET request."""
        resp = await self.http.get(endpoint, params=params or None)
        resp.raise_for_status()
        return resp.json()

    async def _post(self, endpoint: str, data: dict | None = None) -> Any:
        """Make POST request."""
        resp = await self.http.post(endpoint, json=data)
        resp.raise_for_status()
        return resp.json()
