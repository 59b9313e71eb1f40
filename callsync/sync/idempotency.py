"""Has a call already been synced successfully for a user?"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.sync_log import SyncLog

SUCCESS = "success"


async def already_synced(db: AsyncSession, user_id: str, call_id: str) -> bool:
    """True iff a success log exists for (user_id, call_id).

    Not transactional with the later insert; the partial unique index on
    success rows catches the concurrent case.
    """
    stmt = (
        select(SyncLog.id)
        .where(
            SyncLog.user_id == user_id,
            SyncLog.gong_call_id == call_id,
            SyncLog.status == SUCCESS,
        )
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None
