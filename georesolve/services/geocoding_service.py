"""Geocoding orchestration with a multi-provider fallback chain.

Resolves a location name to coordinates by trying an ordered list of
geocoding adapters until one returns a match.

Architecture: Fallback Chain Pattern
-------------------------------------
Unlike a scored chain, the first adapter in priority order that returns
*any* match wins outright; there is no cross-provider scoring or merging.

    1. Cache lookup.  A hit is returned immediately, including a cached
       negative result, and no adapter is called.
    2. Each adapter is skipped if it is not configured, and tried
       otherwise.  Zero matches, an error, or a timeout all move on to the
       next adapter; nothing aborts the loop.
    3. The first match is normalized into a GeocodeResult, cached for the
       long TTL and returned.
    4. If every adapter comes up empty, a negative result (no coordinates,
       provider "none", confidence unknown) is cached for the short TTL and
       returned.  Callers never receive ``None`` or a provider exception.

Concurrent requests for the same name may both miss and both call
providers; the cache write is a whole-value upsert, so the last writer
wins with an equivalent value.
"""

from __future__ import annotations

from pydantic import ValidationError

from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.models.geocode import GeocodeResult, OutcomeStatus
from georesolve.services.cache_service import GEOCODE_OPERATION, CacheService
from georesolve.utils.logging import get_logger
from georesolve.utils.text_normalizer import require_text

_DEFAULT_PROVIDER_TIMEOUT = 10.0


class GeocodingService:
    """Cached, ordered fallback across geocoding providers."""

    def __init__(
        self,
        providers: list[IGeocodingProvider],
        cache: CacheService,
        provider_timeout: float = _DEFAULT_PROVIDER_TIMEOUT,
    ) -> None:
        # Priority order is decided by the caller (main.py reads it from
        # config.yaml); this class never reorders.
        self._providers = list(providers)
        self._cache = cache
        self._provider_timeout = provider_timeout
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def geocode(self, location_name: str) -> GeocodeResult:
        """Resolve *location_name* to a :class:`GeocodeResult`.

        Raises
        ------
        InputValidationError
            If *location_name* is blank or longer than 1000 characters.
        """
        location_name = require_text(location_name, "location_name")
        key = self._cache.make_key(GEOCODE_OPERATION, location_name)

        cached = await self._cached_result(key)
        if cached is not None:
            self._logger.info(
                "geocode_cache_hit",
                location=location_name,
                provider=cached.provider,
                resolved=cached.is_resolved,
            )
            return cached

        for provider in self._providers:
            name = provider.get_provider_name()
            if not provider.is_available():
                self._logger.debug("geocoding_provider_disabled", provider=name)
                continue

            outcome = await provider.attempt(location_name, timeout=self._provider_timeout)
            if outcome.status is OutcomeStatus.FAILED:
                self._logger.warning(
                    "geocoding_provider_skipped",
                    provider=name,
                    location=location_name,
                    reason=outcome.reason,
                )
                continue
            if outcome.status is OutcomeStatus.NO_MATCH:
                self._logger.info("geocoding_provider_no_match", provider=name, location=location_name)
                continue

            try:
                result = GeocodeResult.from_match(outcome.best, provider=name)
            except ValidationError as exc:
                # e.g. latitude outside [-90, 90]
                self._logger.warning(
                    "geocoding_provider_invalid_match", provider=name, error=str(exc)
                )
                continue

            await self._cache.set_geocode(key, result.model_dump(mode="json"), resolved=True)
            self._logger.info(
                "geocode_resolved",
                location=location_name,
                provider=name,
                confidence=result.confidence.value,
            )
            return result

        result = GeocodeResult.unresolved(location_name)
        await self._cache.set_geocode(key, result.model_dump(mode="json"), resolved=False)
        self._logger.warning("geocoding_exhausted", location=location_name)
        return result

    def get_provider_order(self) -> list[str]:
        """Names of all providers in priority order."""
        return [p.get_provider_name() for p in self._providers]

    def get_available_providers(self) -> list[str]:
        """Names of the providers that are currently configured, in priority order."""
        return [p.get_provider_name() for p in self._providers if p.is_available()]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _cached_result(self, key: str) -> GeocodeResult | None:
        cached = await self._cache.get(key)
        if cached is None:
            return None
        try:
            return GeocodeResult.model_validate(cached)
        except ValidationError as exc:
            self._logger.warning("geocode_cache_corrupt", key=key, error=str(exc))
            await self._cache.delete(key)
            return None
