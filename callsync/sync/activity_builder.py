"""Build the Velaris activity payload for a Gong call."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from ..api.gong import format_gong_datetime
from ..schemas.activity import ActivityPayload
from .field_extractor import extract
from .resolver import ResolvedLinks

DEFAULT_TITLE = "Gong Call"
DEFAULT_ACTIVITY_TYPE = "default"
DEFAULT_DESCRIPTION = "Call synced from Gong"


class CallRecordError(ValueError):
    """Raised when a call record lacks a field the activity requires."""


def _first(call: Mapping[str, Any], *paths: str) -> str | None:
    for path in paths:
        value = extract(call, path)
        if value is not None:
            return value
    return None


def _utc_timestamp(now: datetime | None) -> str:
    return format_gong_datetime(now or datetime.now(timezone.utc))


def build_activity(
    call: Mapping[str, Any],
    activity_type_id: str | None,
    links: ResolvedLinks,
    now: datetime | None = None,
) -> ActivityPayload:
    """Assemble the activity for ``call``. ``now`` only feeds the start_time fallback."""
    external_id = extract(call, "id")
    if external_id is None:
        raise CallRecordError("Call record has no id")

    return ActivityPayload(
        title=_first(call, "title") or DEFAULT_TITLE,
        type=activity_type_id or DEFAULT_ACTIVITY_TYPE,
        description=_first(call, "purpose", "summary") or DEFAULT_DESCRIPTION,
        start_time=_first(call, "scheduledTime", "actualStart") or _utc_timestamp(now),
        linked_organisations=tuple(sorted(links.organisation_ids)),
        linked_accounts=tuple(sorted(links.account_ids)),
        linked_contacts=tuple(sorted(links.contact_ids)),
        linked_users=tuple(sorted(links.user_ids)),
        external_id=external_id,
    )
