"""Dotted-path lookups against raw Gong call records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def _scalar_to_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value or None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def extract(record: Any, path: str) -> str | None:
    """Resolve ``path`` (e.g. ``"context.account.name"``) against ``record``.

    Returns ``None`` as soon as a segment is missing or the current value is
    not a container. List segments take a decimal index. Never raises.
    """
    if not path:
        return None

    current = record
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not part.isdigit() or int(part) >= len(current):
                return None
            current = current[int(part)]
        else:
            return None

    return _scalar_to_str(current)


def participant_emails(record: Any) -> list[str]:
    """Non-empty ``participants[].emailAddress`` values, deduplicated in order."""
    participants = record.get("participants") if isinstance(record, Mapping) else None
    if not isinstance(participants, list):
        return []

    emails: list[str] = []
    seen: set[str] = set()
    for participant in participants:
        if not isinstance(participant, Mapping):
            continue
        email = participant.get("emailAddress")
        if not isinstance(email, str) or not email.strip():
            continue
        email = email.strip()
        if email in seen:
            continue
        seen.add(email)
        emails.append(email)
    return emails
