"""
Background expiry sweep.

Runs SessionRegistry.sweep_expired on a fixed cadence: once at start, then
after every `interval` seconds. Uses the registry's normal exclusive access,
the same path close() takes.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Optional

from store import SessionRegistry

logger = logging.getLogger(__name__)


class ExpirySweeper:
    def __init__(self, registry: SessionRegistry, ttl: timedelta, interval: float):
        self.registry = registry
        self.ttl = ttl
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> int:
        return await self.registry.sweep_expired(self.ttl)

    async def _loop(self) -> None:
        while True:
            try:
                await self.sweep_once()
            except Exception:
                # One bad pass must not end the loop
                logger.exception("Session sweep failed")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        logger.info(
            "Expiry sweeper started (ttl=%ss, interval=%ss)",
            int(self.ttl.total_seconds()), self.interval,
        )
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        task, self._task = self._task, None
        try:
            await task
        except asyncio.CancelledError:
            # Swallow only the sweep task's cancellation, not our caller's
            if asyncio.current_task().cancelling():
                raise
        logger.info("Expiry sweeper stopped")
