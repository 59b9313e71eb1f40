"""Per-unit sync context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.integration import IntegrationConfig
from .rules import RuleSet, rules_for

SyncType = Literal["webhook", "scheduled"]


@dataclass(frozen=True)
class SyncContext:
    """What the engine needs for one user's sync unit. Credentials stay in the clients."""

    user_id: str
    sync_type: SyncType
    activity_type_id: str | None = None
    rules: RuleSet = RuleSet()


async def build_context(
    db: AsyncSession,
    config: IntegrationConfig,
    sync_type: SyncType,
) -> SyncContext:
    return SyncContext(
        user_id=config.user_id,
        sync_type=sync_type,
        activity_type_id=config.selected_activity_type_id,
        rules=await rules_for(db, config.user_id),
    )
