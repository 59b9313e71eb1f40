"""Velaris metadata for the configuration UI: activity types, field definitions, token checks."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..api.velaris import VelarisClient
from ..schemas.velaris import ActivityType, FieldDefinition, TokenCheckResult

logger = logging.getLogger(__name__)

RULE_ENTITY_TYPES = ("organisation", "account")


def field_label(name: str) -> str:
    """``renewal_date`` -> ``Renewal date``."""
    if not name:
        return name
    return name[0].upper() + name[1:].replace("_", " ")


def map_activity_types(raw_types: list[dict[str, Any]]) -> list[ActivityType]:
    """Active types only, renamed for the picker."""
    mapped: list[ActivityType] = []
    for item in raw_types:
        if not item.get("isActive"):
            continue
        type_id = item.get("activityTypeId")
        if type_id is None:
            continue
        mapped.append(
            ActivityType(
                id=str(type_id),
                name=item.get("displayName"),
                description=item.get("description"),
                iconName=item.get("iconName"),
            )
        )
    return mapped


def map_field_definitions(raw: dict[str, Any]) -> list[FieldDefinition]:
    definitions: list[FieldDefinition] = []
    for entity_type in RULE_ENTITY_TYPES:
        block = raw.get(entity_type)
        fields = block.get("fields") if isinstance(block, dict) else None
        if not isinstance(fields, list):
            continue
        for name in fields:
            if not isinstance(name, str) or not name:
                continue
            definitions.append(
                FieldDefinition(name=name, label=field_label(name), entity_type=entity_type)
            )
    return definitions


async def fetch_activity_types(velaris: VelarisClient) -> list[ActivityType]:
    return map_activity_types(await velaris.list_activity_types())


async def fetch_field_definitions(velaris: VelarisClient) -> list[FieldDefinition]:
    """Upstream errors propagate; no placeholder definitions are substituted."""
    return map_field_definitions(await velaris.field_definitions(RULE_ENTITY_TYPES))


async def verify_token(token: str, transport: httpx.AsyncBaseTransport | None = None) -> TokenCheckResult:
    """Check a Velaris token by listing activity types with it."""
    if not token or not token.strip():
        return TokenCheckResult(valid=False, error="Token is required")

    try:
        async with VelarisClient(token.strip(), transport=transport) as velaris:
            types = await velaris.activity_types_response()
    except (httpx.HTTPError, ValueError) as exc:
        logger.info("Velaris token check failed: %s", exc)
        return TokenCheckResult(valid=False, error="Invalid token or insufficient permissions")

    return TokenCheckResult(valid=True, activityTypes=types)
