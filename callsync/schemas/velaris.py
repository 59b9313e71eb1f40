"""Velaris lookup schemas exposed to the configuration UI."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ActivityType(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    iconName: str | None = None


class FieldDefinition(BaseModel):
    name: str
    label: str
    entity_type: str


class TokenCheckRequest(BaseModel):
    token: str


class TokenCheckResult(BaseModel):
    valid: bool
    activityTypes: Any = None
    error: str | None = None
