"""Velaris API client - entity search, batch reads and activity creation."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx

from ..config import settings
from .base import APIClient

logger = logging.getLogger(__name__)


def _data(resp: Any) -> list[dict[str, Any]]:
    """Extract the ``data`` list from a Velaris response."""
    if not isinstance(resp, dict):
        return []
    items = resp.get("data")
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, dict)]


class VelarisClient(APIClient):
    """Velaris API client.

    Usage:
        async with VelarisClient(token) as velaris:
            orgs = await velaris.search_organisations("domain", "acme.com")
            created = await velaris.create_activity(payload)
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url or settings.velaris_base_url, timeout=timeout, transport=transport)
        self._token = token

    def _auth_headers(self) -> dict[str, str]:
        return {settings.velaris_token_header: self._token}

    # =========================================================================
    # Search / batch read
    # =========================================================================

    @staticmethod
    def _includes_filter(field_name: str, value: str) -> dict[str, Any]:
        return {"filters": [{"fieldName": field_name, "operator": "includes", "value": [value]}]}

    async def search_organisations(self, field_name: str, value: str) -> list[dict[str, Any]]:
        """Organisations whose ``field_name`` includes ``value``."""
        resp = await self._post("/v2/organizations/search", self._includes_filter(field_name, value))
        return _data(resp)

    async def search_accounts(self, field_name: str, value: str) -> list[dict[str, Any]]:
        """Accounts whose ``field_name`` includes ``value``."""
        resp = await self._post("/v2/accounts/search", self._includes_filter(field_name, value))
        return _data(resp)

    async def read_contacts_by_email(self, emails: Iterable[str]) -> list[dict[str, Any]]:
        resp = await self._post(
            "/v2/contacts/batch/read", {"property": "email", "values": list(emails)}
        )
        return _data(resp)

    async def read_users_by_email(self, emails: Iterable[str]) -> list[dict[str, Any]]:
        resp = await self._post(
            "/v2/users/batch/read", {"property": "email", "values": list(emails)}
        )
        return _data(resp)

    # =========================================================================
    # Activities and metadata
    # =========================================================================

    async def create_activity(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create an activity. Returns the created entity (``{"id": ...}``).

        Any 2xx means Velaris accepted the activity, so an empty or non-JSON
        body yields ``{}`` rather than an error.
        """
        resp = await self.http.post("/activities", json=payload)
        resp.raise_for_status()
        if not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError:
            logger.warning("Velaris accepted activity %s with a non-JSON body", payload.get("external_id"))
            return {}
        return body if isinstance(body, dict) else {}

    async def activity_types_response(self) -> Any:
        """Raw ``GET /activity-type`` body."""
        return await self._get("/activity-type")

    async def list_activity_types(self) -> list[dict[str, Any]]:
        return _data(await self.activity_types_response())

    async def field_definitions(
        self, entity_types: Iterable[str] = ("organisation", "account")
    ) -> dict[str, Any]:
        """Raw field definitions keyed by entity type."""
        resp = await self._get("/field-definitions", entityType=",".join(entity_types))
        return resp if isinstance(resp, dict) else {}
