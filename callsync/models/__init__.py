"""Call sync models - re-exports all models and Base.metadata."""

from .base import Base, UUIDMixin, TimestampMixin
from .integration import IntegrationConfig
from .rule import DeduplicationRule
from .sync_log import SyncLog

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "IntegrationConfig",
    "DeduplicationRule",
    "SyncLog",
]
