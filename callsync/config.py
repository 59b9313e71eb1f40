"""Call sync configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class SyncSettings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///callsync.db"
    echo_sql: bool = False
    app_title: str = "Gong Velaris Sync"

    # Upstream APIs
    gong_base_url: str = "https://api.gong.io/v2"
    velaris_base_url: str = "https://ua4t4so3ba.execute-api.eu-west-2.amazonaws.com/prod"
    velaris_token_header: str = "x-velaris-internal-token"
    http_timeout_seconds: float = 30.0

    # Scheduled sweep window
    default_sync_hours: int = 6
    daily_sync_hours: int = 24
    resolver_max_concurrency: int = 8

    # Inbound auth (both optional; HMAC wins when set)
    webhook_api_key: str = ""
    webhook_signing_secret: str = ""
    webhook_signature_ttl_seconds: int = 300
    admin_api_key: str = ""

    sweep_worker_enabled: bool = False
    sweep_interval_seconds: float = 3600.0

    model_config = {"env_prefix": "CALLSYNC_", "env_file": ".env", "extra": "ignore"}

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent

    @property
    def alembic_ini(self) -> Path:
        return self.base_dir / "alembic.ini"


settings = SyncSettings()
