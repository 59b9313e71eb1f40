"""Sync log service - append and list audit rows."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.sync_log import SyncLog

logger = logging.getLogger(__name__)

UNTITLED_CALL = "Untitled Call"


async def record_success(
    db: AsyncSession,
    user_id: str,
    call_id: str,
    title: str | None,
    activity_id: str | None,
    sync_type: str,
) -> SyncLog | None:
    """Append a success row.

    Returns ``None`` when another success row for the same call won the race
    (rejected by the partial unique index).
    """
    entry = SyncLog(
        user_id=user_id,
        gong_call_id=call_id,
        gong_call_title=title or UNTITLED_CALL,
        velaris_activity_id=activity_id,
        status="success",
        sync_type=sync_type,
    )
    db.add(entry)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Duplicate success log for call %s (user %s) rejected", call_id, user_id)
        return None
    await db.refresh(entry)
    return entry


async def record_error(
    db: AsyncSession,
    user_id: str,
    call_id: str | None,
    title: str | None,
    error: str,
    sync_type: str,
) -> SyncLog:
    """Append an error row. ``call_id`` is ``None`` for user-level sweep failures."""
    entry = SyncLog(
        user_id=user_id,
        gong_call_id=call_id,
        gong_call_title=(title or UNTITLED_CALL) if call_id else title,
        status="error",
        error_message=error,
        sync_type=sync_type,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def list_logs(
    db: AsyncSession,
    user_id: str | None = None,
    limit: int = 50,
) -> list[SyncLog]:
    """Newest-first sync log rows, optionally for one user."""
    stmt = select(SyncLog).order_by(SyncLog.created_at.desc()).limit(limit)
    if user_id:
        stmt = stmt.where(SyncLog.user_id == user_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())
