"""Sync log and sweep report schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SyncLogEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    gong_call_id: str | None = None
    gong_call_title: str | None = None
    velaris_activity_id: str | None = None
    status: str
    error_message: str | None = None
    sync_type: str
    created_at: datetime | None = None


class UserSweepReport(BaseModel):
    user_id: str
    calls_found: int = 0
    synced: int = 0
    skipped: int = 0
    failed: int = 0
    error: str | None = None


class SweepReport(BaseModel):
    success: bool = True
    processed_configs: int = 0
    users: list[UserSweepReport] = []

    @property
    def failed_calls(self) -> int:
        return sum(u.failed for u in self.users)
