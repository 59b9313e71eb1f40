"""Integration config lookups."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.integration import IntegrationConfig


class IntegrationNotFoundError(Exception):
    """Raised when a user has no integration config."""


class MissingCredentialsError(Exception):
    """Raised when the Gong key or Velaris token is not configured."""


async def get_config(db: AsyncSession, user_id: str) -> IntegrationConfig:
    result = await db.execute(select(IntegrationConfig).where(IntegrationConfig.user_id == user_id))
    config = result.scalar_one_or_none()
    if config is None:
        raise IntegrationNotFoundError("Integration config not found")
    return config


def require_credentials(config: IntegrationConfig) -> None:
    if not config.has_credentials:
        raise MissingCredentialsError("Missing API credentials")


def require_velaris_token(config: IntegrationConfig) -> str:
    if not config.velaris_token:
        raise MissingCredentialsError(
            "Velaris token not found. Please configure your integration first."
        )
    return config.velaris_token


async def list_active_configs(db: AsyncSession) -> list[IntegrationConfig]:
    """Active integrations with both credentials present."""
    stmt = (
        select(IntegrationConfig)
        .where(
            IntegrationConfig.is_active.is_(True),
            IntegrationConfig.gong_api_key.is_not(None),
            IntegrationConfig.velaris_token.is_not(None),
        )
        .order_by(IntegrationConfig.created_at.asc())
    )
    result = await db.execute(stmt)
    return [c for c in result.scalars().all() if c.has_credentials]
