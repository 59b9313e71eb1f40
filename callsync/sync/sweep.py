"""Scheduled sweep across all active integrations."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ..api.gong import GongClient
from ..api.velaris import VelarisClient
from ..config import settings
from ..models.integration import IntegrationConfig
from ..schemas.sync import SweepReport, UserSweepReport
from ..services import config_svc, sync_log_svc
from .context import build_context
from .field_extractor import extract
from .orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)

SCHEDULED = "scheduled"


def sync_window_start(
    sync_frequency: str | None,
    custom_sync_hours: int | None,
    now: datetime,
) -> datetime:
    """Earliest call start time the sweep asks Gong for."""
    if sync_frequency == "daily":
        hours = settings.daily_sync_hours
    elif custom_sync_hours and custom_sync_hours > 0:
        hours = custom_sync_hours
    else:
        hours = settings.default_sync_hours
    return now - timedelta(hours=hours)


async def sweep_user(
    db: AsyncSession,
    config: IntegrationConfig,
    now: datetime | None = None,
) -> UserSweepReport:
    """Sync one user's recent finished calls, one call at a time.

    Exceptions raised before the per-call loop (listing, auth, rule loading)
    propagate and abort this user only.
    """
    now = now or datetime.now(timezone.utc)
    context = await build_context(db, config, SCHEDULED)
    from_datetime = sync_window_start(config.sync_frequency, config.custom_sync_hours, now)
    gong_api_key = config.gong_api_key or ""
    velaris_token = config.velaris_token or ""

    report = UserSweepReport(user_id=context.user_id)
    logger.info("Syncing calls for user %s since %s", context.user_id, from_datetime.isoformat())

    async with GongClient(gong_api_key) as gong, VelarisClient(velaris_token) as velaris:
        calls = await gong.list_calls(from_datetime=from_datetime, status="done")
        calls = [c for c in calls if c.get("status", "done") == "done"]
        report.calls_found = len(calls)
        logger.info("Found %d calls to sync for user %s", len(calls), context.user_id)

        orchestrator = SyncOrchestrator(db, context, gong, velaris)
        for call in calls:
            call_id = extract(call, "id")
            if call_id is None:
                logger.warning("Skipping listed call without id for user %s", context.user_id)
                report.skipped += 1
                continue

            listed_title = extract(call, "title")
            try:
                outcome = await orchestrator.sync_call(call_id, fallback_title=listed_title)
            except Exception as exc:
                logger.exception("Error syncing call %s for user %s", call_id, context.user_id)
                await db.rollback()
                await sync_log_svc.record_error(
                    db,
                    user_id=context.user_id,
                    call_id=call_id,
                    title=listed_title,
                    error=str(exc),
                    sync_type=SCHEDULED,
                )
                report.failed += 1
                continue

            if outcome.status == "success":
                report.synced += 1
            elif outcome.status == "skipped":
                report.skipped += 1
            else:
                report.failed += 1

    return report


async def run_sweep(db: AsyncSession, now: datetime | None = None) -> SweepReport:
    """One sweep over every active integration. Users never abort each other."""
    now = now or datetime.now(timezone.utc)
    configs = await config_svc.list_active_configs(db)
    # Detached so a rollback after a failed call or user cannot expire them.
    for config in configs:
        db.expunge(config)
    logger.info("Found %d active integrations", len(configs))

    report = SweepReport(processed_configs=len(configs))
    for config in configs:
        user_id = config.user_id
        try:
            user_report = await sweep_user(db, config, now=now)
        except Exception as exc:
            logger.exception("Error syncing calls for user %s", user_id)
            await db.rollback()
            await sync_log_svc.record_error(
                db,
                user_id=user_id,
                call_id=None,
                title=None,
                error=str(exc),
                sync_type=SCHEDULED,
            )
            user_report = UserSweepReport(user_id=user_id, error=str(exc))
        report.users.append(user_report)

    return report
