"""In-memory expiring key-value store.

Fast store for development, tests and single-process deployments.  Entries
live in a ``cachetools.LRUCache`` that bounds memory use; expiry is tracked
per entry so each call site can choose its own TTL.
"""

from __future__ import annotations

import copy
import time
from typing import Any, Callable

import structlog
from cachetools import LRUCache

from georesolve.interfaces.cache_provider import ICacheProvider
from georesolve.models.cache import CacheEntry

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """Process-local store backed by ``cachetools.LRUCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    clock:
        Returns the current time in epoch seconds.  Tests inject a fake.
    """

    def __init__(
        self,
        max_size: int = 10_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache: LRUCache[str, CacheEntry] = LRUCache(maxsize=max_size)
        self._clock = clock

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the value for *key*, or ``None`` if missing or expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        if entry.is_expired(self._clock()):
            self._cache.pop(key, None)
            logger.debug("cache_expired", key=key)
            return None
        logger.debug("cache_hit", key=key)
        # Callers get a copy so they cannot mutate the stored value.
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Replace the entry for *key* with *value*, expiring ``ttl`` seconds from now."""
        self._cache[key] = CacheEntry(
            key=key,
            value=copy.deepcopy(value),
            expires_at=self._clock() + ttl,
        )
        logger.debug("cache_set", key=key, ttl=ttl)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        self._cache.pop(key, None)
        logger.debug("cache_delete", key=key)

    async def sweep_expired(self) -> int:
        """Drop every expired entry; return the count removed."""
        now = self._clock()
        expired = [k for k, entry in self._cache.items() if entry.is_expired(now)]
        for key in expired:
            self._cache.pop(key, None)
        logger.info("cache_swept", backend="memory", removed=len(expired))
        return len(expired)

    def get_provider_name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        return len(self._cache)
