"""Gong call-completed webhook."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..api import GongClient, VelarisClient
from ..database import get_db
from ..schemas.webhook import GongWebhookEvent
from ..security import verify_webhook_request
from ..services.config_svc import (
    IntegrationNotFoundError,
    MissingCredentialsError,
    get_config,
    require_credentials,
)
from ..sync.context import build_context
from ..sync.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/gong")
async def gong_webhook(
    request: Request,
    user_id: str = "",
    db: AsyncSession = Depends(get_db),
):
    """Sync one finished call for ``user_id``."""
    raw_body = await request.body()
    verify_webhook_request(request, raw_body)

    if not user_id:
        raise HTTPException(status_code=400, detail="user_id parameter is required")
    logger.info("Webhook received for user %s", user_id)

    try:
        config = await get_config(db, user_id)
        require_credentials(config)
    except IntegrationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except MissingCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc))

    try:
        event = GongWebhookEvent.model_validate_json(raw_body or b"{}")
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail="Invalid webhook payload") from exc

    if not event.is_done:
        logger.info("Call %s not completed yet (%s), skipping", event.callId, event.status)
        return {"message": "Call not completed"}

    context = await build_context(db, config, "webhook")
    gong_api_key = config.gong_api_key or ""
    velaris_token = config.velaris_token or ""

    async with GongClient(gong_api_key) as gong, VelarisClient(velaris_token) as velaris:
        orchestrator = SyncOrchestrator(db, context, gong, velaris)
        outcome = await orchestrator.sync_call(event.callId, fallback_title=event.title)

    if outcome.status == "failed":
        raise HTTPException(status_code=502, detail=outcome.error)
    if outcome.status == "skipped":
        return {"message": "Call already synced"}
    return {"success": True, "activityId": outcome.activity_id}
