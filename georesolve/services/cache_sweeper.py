"""Periodic removal of expired cache entries.

Reads already evict expired entries lazily, so the sweeper is not needed
for correctness; it only stops entries that are never read again from
accumulating in the store.
"""

from __future__ import annotations

import asyncio

from georesolve.services.cache_service import CacheService
from georesolve.utils.logging import get_logger


class CacheSweeper:
    """Background task calling :meth:`CacheService.sweep_expired` every *interval* seconds.

    Usable as an async context manager::

        async with CacheSweeper(cache, interval=900):
            ...
    """

    def __init__(self, cache: CacheService, interval: float) -> None:
        self._cache = cache
        self._interval = interval
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._logger = get_logger(__name__)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start sweeping.  A non-positive interval leaves the sweeper off."""
        if self._interval <= 0:
            self._logger.info("cache_sweeper_disabled")
            return
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())
        self._logger.info("cache_sweeper_started", interval=self._interval)

    async def stop(self) -> None:
        """Signal the loop to exit and wait for it."""
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        self._logger.info("cache_sweeper_stopped")

    async def sweep_once(self) -> int:
        removed = await self._cache.sweep_expired()
        self._logger.debug("cache_sweep_pass", removed=removed)
        return removed

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                try:
                    await self.sweep_once()
                except Exception as exc:
                    # A failed pass does not end the loop.
                    self._logger.error("cache_sweep_error", error=str(exc))

    async def __aenter__(self) -> CacheSweeper:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
