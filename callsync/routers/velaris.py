"""Velaris lookups backing the activity-type picker and rule editor."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..api import VelarisClient
from ..database import get_db
from ..schemas.velaris import ActivityType, FieldDefinition, TokenCheckRequest, TokenCheckResult
from ..security import require_admin_api_key
from ..services import velaris_svc
from ..services.config_svc import (
    IntegrationNotFoundError,
    MissingCredentialsError,
    get_config,
    require_velaris_token,
)

router = APIRouter(prefix="/velaris", tags=["velaris"], dependencies=[Depends(require_admin_api_key)])


async def _velaris_token(db: AsyncSession, user_id: str) -> str:
    try:
        return require_velaris_token(await get_config(db, user_id))
    except IntegrationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except MissingCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc))


@router.get("/activity-types", response_model=list[ActivityType])
async def activity_types(user_id: str, db: AsyncSession = Depends(get_db)):
    token = await _velaris_token(db, user_id)
    try:
        async with VelarisClient(token) as velaris:
            return await velaris_svc.fetch_activity_types(velaris)
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail=f"Velaris API error: {exc}")


@router.get("/field-definitions", response_model=list[FieldDefinition])
async def field_definitions(user_id: str, db: AsyncSession = Depends(get_db)):
    token = await _velaris_token(db, user_id)
    try:
        async with VelarisClient(token) as velaris:
            return await velaris_svc.fetch_field_definitions(velaris)
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail=f"Velaris API error: {exc}")


@router.post("/token/verify", response_model=TokenCheckResult)
async def verify_token(body: TokenCheckRequest):
    return await velaris_svc.verify_token(body.token)
