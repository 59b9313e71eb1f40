"""Inbound Gong webhook schemas."""

from __future__ import annotations

from pydantic import BaseModel


class WebhookParticipant(BaseModel):
    email: str
    name: str | None = None


class GongWebhookEvent(BaseModel):
    callId: str
    status: str
    title: str | None = None
    startTime: str | None = None
    participants: list[WebhookParticipant] = []

    @property
    def is_done(self) -> bool:
        return self.status == "done"
