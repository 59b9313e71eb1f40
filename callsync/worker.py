"""Background worker running the scheduled sweep on an interval."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import settings
from .database import async_session_factory
from .sync.sweep import run_sweep

logger = logging.getLogger(__name__)


class SweepWorker:
    """Runs one sweep, then waits ``sweep_interval_seconds`` (or until stopped)."""

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        if self._task is not None or not settings.sweep_worker_enabled:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop(), name="callsync-sweep-worker")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

    async def run_once(self) -> None:
        async with async_session_factory() as db:
            report = await run_sweep(db)
        logger.info(
            "Sweep finished: %d integrations, %d failed calls",
            report.processed_configs,
            report.failed_calls,
        )

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Sweep worker loop failed")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=settings.sweep_interval_seconds)
            except asyncio.TimeoutError:
                pass


sweep_worker = SweepWorker()
