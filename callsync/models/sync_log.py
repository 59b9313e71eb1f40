"""Append-only audit log of sync attempts."""

from __future__ import annotations

from sqlalchemy import Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin


class SyncLog(Base, UUIDMixin, TimestampMixin):
    """One row per attempted call per trigger.

    Success rows are unique per (user_id, gong_call_id).
    """

    __tablename__ = "sync_log"
    __table_args__ = (
        Index(
            "uq_sync_log_user_call_success",
            "user_id",
            "gong_call_id",
            unique=True,
            sqlite_where=text("status = 'success'"),
            postgresql_where=text("status = 'success'"),
        ),
    )

    user_id: Mapped[str] = mapped_column(String(100), index=True)
    gong_call_id: Mapped[str | None] = mapped_column(String(100), default=None, index=True)
    gong_call_title: Mapped[str | None] = mapped_column(Text, default=None)
    velaris_activity_id: Mapped[str | None] = mapped_column(String(100), default=None)
    status: Mapped[str] = mapped_column(String(20))  # success/error
    error_message: Mapped[str | None] = mapped_column(Text, default=None)
    sync_type: Mapped[str] = mapped_column(String(20))  # webhook/scheduled

    def __repr__(self) -> str:
        return f"<SyncLog {self.sync_type} {self.gong_call_id} [{self.status}]>"
