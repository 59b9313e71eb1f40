"""Gong API client - call listing and call detail."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Any

import httpx

from ..config import settings
from .base import APIClient


def format_gong_datetime(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. ``2026-01-01T10:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class GongClient(APIClient):
    """Gong API client.

    Usage:
        async with GongClient(api_key) as gong:
            calls = await gong.list_calls(from_datetime=since)
            call = await gong.get_call(calls[0]["id"])
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url or settings.gong_base_url, timeout=timeout, transport=transport)
        self._api_key = api_key

    def _auth_headers(self) -> dict[str, str]:
        encoded = base64.b64encode(f"{self._api_key}:".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {encoded}"}

    async def get_call(self, call_id: str) -> dict[str, Any]:
        """Fetch full call detail. The response body is the call record."""
        data = await self._get(f"/calls/{call_id}")
        return data if isinstance(data, dict) else {}

    async def list_calls(self, from_datetime: datetime, status: str = "done") -> list[dict[str, Any]]:
        """List calls started at or after ``from_datetime`` with the given status."""
        data = await self._get(
            "/calls",
            fromDateTime=format_gong_datetime(from_datetime),
            status=status,
        )
        calls = data.get("calls") if isinstance(data, dict) else None
        if not isinstance(calls, list):
            return []
        return [c for c in calls if isinstance(c, dict)]
