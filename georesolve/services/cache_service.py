"""Cache-aside facade over an expiring key-value store.

Every component that caches goes through :class:`CacheService`; nothing
calls an :class:`ICacheProvider` directly.  The facade owns two pieces of
policy:

Key derivation
    ``make_key(operation, text)`` -> ``"geocode:<sha256>"``.  Text is
    normalized first (see ``georesolve/utils/text_normalizer.py``), so the
    same request always maps to the same key.

TTL per call site
    =====================  =========  =====================================
    call site              default    rationale
    =====================  =========  =====================================
    successful geocode     24 h       coordinates of a named place are stable
    failed geocode         1 h        bounds retries for places that fail now
    location extraction    1 h        includes cached "NONE" answers
    =====================  =========  =====================================

Store errors are contained here as well as in the stores themselves: a
backend that breaks its no-raise contract still only costs a cache miss.
"""

from __future__ import annotations

from typing import Any

from georesolve.interfaces.cache_provider import ICacheProvider
from georesolve.utils.logging import get_logger
from georesolve.utils.text_normalizer import make_cache_key

GEOCODE_OPERATION = "geocode"
EXTRACTION_OPERATION = "location_extract"

DEFAULT_GEOCODE_TTL = 24 * 60 * 60
DEFAULT_GEOCODE_FAILURE_TTL = 60 * 60
DEFAULT_EXTRACTION_TTL = 60 * 60


class CacheService:
    """TTL policy and key derivation in front of an :class:`ICacheProvider`."""

    def __init__(
        self,
        store: ICacheProvider,
        geocode_ttl: int = DEFAULT_GEOCODE_TTL,
        geocode_failure_ttl: int = DEFAULT_GEOCODE_FAILURE_TTL,
        extraction_ttl: int = DEFAULT_EXTRACTION_TTL,
    ) -> None:
        self._store = store
        self._geocode_ttl = geocode_ttl
        self._geocode_failure_ttl = geocode_failure_ttl
        self._extraction_ttl = extraction_ttl
        self._logger = get_logger(__name__)

    @property
    def backend(self) -> str:
        return self._store.get_provider_name()

    @property
    def geocode_ttl(self) -> int:
        return self._geocode_ttl

    @property
    def geocode_failure_ttl(self) -> int:
        return self._geocode_failure_ttl

    @property
    def extraction_ttl(self) -> int:
        return self._extraction_ttl

    @staticmethod
    def make_key(operation: str, text: str) -> str:
        """Deterministic key for *operation* applied to *text*."""
        return make_cache_key(operation, text)

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the cached value for *key*, or ``None`` on miss or store failure."""
        try:
            return await self._store.get(key)
        except Exception as exc:
            self._logger.warning("cache_read_failed", key=key, error=str(exc))
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store *value* under *key* for *ttl* seconds; failures are logged and dropped."""
        if ttl <= 0:
            # An entry that expires immediately would never be read.
            self._logger.debug("cache_write_skipped", key=key, ttl=ttl)
            return
        try:
            await self._store.set(key, value, ttl)
        except Exception as exc:
            self._logger.warning("cache_write_failed", key=key, error=str(exc))

    async def delete(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception as exc:
            self._logger.warning("cache_delete_failed", key=key, error=str(exc))

    async def sweep_expired(self) -> int:
        """Remove every expired entry from the store; return how many went."""
        try:
            return await self._store.sweep_expired()
        except Exception as exc:
            self._logger.warning("cache_sweep_failed", error=str(exc))
            return 0

    # ------------------------------------------------------------------
    # Call-site policies
    # ------------------------------------------------------------------

    async def set_geocode(self, key: str, value: dict[str, Any], resolved: bool) -> None:
        """Cache a geocode payload: long TTL when *resolved*, short TTL otherwise."""
        ttl = self._geocode_ttl if resolved else self._geocode_failure_ttl
        await self.set(key, value, ttl)

    async def set_extraction(self, key: str, value: str) -> None:
        """Cache an extraction answer (a place name or the ``NONE`` sentinel)."""
        await self.set(key, value, self._extraction_ttl)
