"""Velaris activity payload."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ActivityPayload(BaseModel):
    """Body for ``POST /activities``. Frozen once built."""

    model_config = ConfigDict(frozen=True)

    title: str
    type: str
    description: str
    start_time: str
    linked_organisations: tuple[str, ...] = ()
    linked_accounts: tuple[str, ...] = ()
    linked_contacts: tuple[str, ...] = ()
    linked_users: tuple[str, ...] = ()
    external_id: str

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
