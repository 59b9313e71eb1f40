"""Sweep trigger and sync log routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.sync import SweepReport, SyncLogEntry
from ..security import require_admin_api_key
from ..services import sync_log_svc
from ..sync.sweep import run_sweep

router = APIRouter(prefix="/sync", tags=["sync"], dependencies=[Depends(require_admin_api_key)])


@router.post("/run", response_model=SweepReport)
async def run_scheduled_sync(db: AsyncSession = Depends(get_db)):
    return await run_sweep(db)


@router.get("/logs", response_model=list[SyncLogEntry])
async def sync_logs(
    user_id: str | None = None,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    return await sync_log_svc.list_logs(db, user_id=user_id, limit=limit)
