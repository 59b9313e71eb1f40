"""FastAPI application factory for the call sync service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .worker import sweep_worker


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Auto-create tables for SQLite (local dev); other databases use Alembic migrations
    if "sqlite" in settings.database_url:
        from .database import engine
        from .models import Base
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    sweep_worker.start()
    try:
        yield
    finally:
        await sweep_worker.stop()


app = FastAPI(title=settings.app_title, lifespan=lifespan)

# Import and register routers
from .routers import health, sync, velaris, webhooks  # noqa: E402

app.include_router(webhooks.router)
app.include_router(sync.router)
app.include_router(velaris.router)
app.include_router(health.router)
