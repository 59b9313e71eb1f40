"""Deduplication rule model."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UUIDMixin, TimestampMixin


class DeduplicationRule(Base, UUIDMixin, TimestampMixin):
    """Maps a Gong call field onto a Velaris organisation/account field.

    Duplicate rows are allowed; each one runs its own search.
    """

    __tablename__ = "deduplication_rule"

    user_id: Mapped[str] = mapped_column(String(100), index=True)
    entity_type: Mapped[str] = mapped_column(String(20))  # organisation/account
    gong_field: Mapped[str] = mapped_column(String(255))
    velaris_field: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<DeduplicationRule {self.entity_type} {self.gong_field}->{self.velaris_field}>"
