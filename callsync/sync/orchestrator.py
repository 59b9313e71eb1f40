"""Per-call sync state machine shared by the webhook and scheduled triggers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.gong import GongClient
from ..api.velaris import VelarisClient
from ..services import sync_log_svc
from .activity_builder import CallRecordError, build_activity
from .context import SyncContext
from .field_extractor import extract
from .idempotency import already_synced
from .resolver import EntityResolver

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["skipped", "success", "failed"]


@dataclass(frozen=True)
class SyncOutcome:
    call_id: str
    status: OutcomeStatus
    activity_id: str | None = None
    error: str | None = None


class SyncOrchestrator:
    """Idempotency check → detail fetch → resolve → build → submit → log.

    The status guard belongs to the triggers: the webhook checks the event
    status and the sweep asks Gong for finished calls only.
    """

    def __init__(
        self,
        db: AsyncSession,
        context: SyncContext,
        gong: GongClient,
        velaris: VelarisClient,
    ):
        self.db = db
        self.context = context
        self._gong = gong
        self._velaris = velaris
        self._resolver = EntityResolver(velaris, context.rules)

    async def _fail(self, call_id: str, title: str | None, error: str) -> SyncOutcome:
        logger.error(
            "Sync of call %s failed for user %s (%s): %s",
            call_id, self.context.user_id, self.context.sync_type, error,
        )
        await sync_log_svc.record_error(
            self.db,
            user_id=self.context.user_id,
            call_id=call_id,
            title=title,
            error=error,
            sync_type=self.context.sync_type,
        )
        return SyncOutcome(call_id=call_id, status="failed", error=error)

    async def sync_call(self, call_id: str, fallback_title: str | None = None) -> SyncOutcome:
        ctx = self.context

        if await already_synced(self.db, ctx.user_id, call_id):
            logger.info("Call %s already synced for user %s, skipping", call_id, ctx.user_id)
            return SyncOutcome(call_id=call_id, status="skipped")

        try:
            call = await self._gong.get_call(call_id)
        except httpx.HTTPError as exc:
            return await self._fail(call_id, fallback_title, str(exc))

        title = extract(call, "title")
        links = await self._resolver.resolve(call)

        try:
            payload = build_activity(call, ctx.activity_type_id, links)
        except CallRecordError as exc:
            return await self._fail(call_id, title or fallback_title, str(exc))

        try:
            created = await self._velaris.create_activity(payload.to_request())
        except httpx.HTTPError as exc:
            return await self._fail(call_id, title or fallback_title, str(exc))

        raw_id = created.get("id")
        activity_id = str(raw_id) if raw_id is not None else None

        entry = await sync_log_svc.record_success(
            self.db,
            user_id=ctx.user_id,
            call_id=call_id,
            title=title,
            activity_id=activity_id,
            sync_type=ctx.sync_type,
        )
        if entry is None:
            return SyncOutcome(call_id=call_id, status="skipped", activity_id=activity_id)

        logger.info(
            "Synced call %s for user %s as activity %s (%s)",
            call_id, ctx.user_id, activity_id, ctx.sync_type,
        )
        return SyncOutcome(call_id=call_id, status="success", activity_id=activity_id)
