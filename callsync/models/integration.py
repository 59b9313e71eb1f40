"""Per-user integration settings (credentials, activity type, sweep cadence)."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin


class IntegrationConfig(Base, UUIDMixin, TimestampMixin):
    """Owned by the configuration UI; read-only to the sync engine."""

    __tablename__ = "integration_config"

    user_id: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    velaris_token: Mapped[str | None] = mapped_column(Text, default=None)
    gong_api_key: Mapped[str | None] = mapped_column(Text, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    sync_frequency: Mapped[str | None] = mapped_column(String(20), default=None)  # daily/custom
    custom_sync_hours: Mapped[int | None] = mapped_column(Integer, default=None)
    selected_activity_type_id: Mapped[str | None] = mapped_column(String(100), default=None)

    @property
    def has_credentials(self) -> bool:
        return bool(self.velaris_token and self.gong_api_key)

    def __repr__(self) -> str:
        return f"<IntegrationConfig user={self.user_id} active={self.is_active}>"
