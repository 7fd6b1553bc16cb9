"""OpenStreetMap Nominatim geocoding provider.

The keyless last resort in the default chain.  Nominatim's usage policy
asks clients to identify themselves (we send a contact e-mail) and to stay
at or below 1 request per second, which this adapter enforces with
asyncio-based throttling.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import structlog

from georesolve.config.settings import Settings
from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.models.geocode import Confidence, GeocodeMatch
from georesolve.providers.geocoding._http import build_http_client, fetch_json
from georesolve.utils.errors import GeocodingError, ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)


class NominatimProvider(IGeocodingProvider):
    """Geocoding via an OpenStreetMap Nominatim server.

    Nominatim has no notion of match confidence, so every match is
    reported as ``medium``.

    Attributes
    ----------
    _last_request_time : float
        Monotonic timestamp of the most recent request, used for throttling.
    """

    _MIN_REQUEST_INTERVAL: float = 1.0  # seconds between requests

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        limit: int = 1,
    ) -> None:
        self._enabled = settings.nominatim_enabled
        self._search_url = f"{settings.nominatim_base_url.rstrip('/')}/search"
        self._email = settings.nominatim_email
        self._client = http_client or build_http_client(settings.provider_timeout)
        self._limit = limit
        self._last_request_time: float = 0.0
        self._throttle_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Rate-limiting helper
    # ------------------------------------------------------------------

    async def wait_for_request_slot(self) -> None:
        """Enforce the Nominatim 1 req/sec usage policy across concurrent callers.

        Called by :meth:`attempt` outside the timed region; a direct
        :meth:`search` call does not queue here.
        """
        async with self._throttle_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._MIN_REQUEST_INTERVAL:
                await asyncio.sleep(self._MIN_REQUEST_INTERVAL - elapsed)
            self._last_request_time = time.monotonic()

    # ------------------------------------------------------------------
    # IGeocodingProvider implementation
    # ------------------------------------------------------------------

    async def search(self, location_name: str) -> list[GeocodeMatch]:
        """Geocode *location_name* with Nominatim."""
        if not self.is_available():
            raise ProviderUnavailableError(provider_name=self.get_provider_name())

        params: dict[str, Any] = {"format": "json", "q": location_name, "limit": self._limit}
        if self._email:
            params["email"] = self._email

        data = await fetch_json(
            self._client,
            self._search_url,
            params=params,
            provider_name=self.get_provider_name(),
        )
        if not isinstance(data, list):
            raise GeocodingError(
                message="Unexpected response shape",
                provider_name=self.get_provider_name(),
            )

        mapped = (self._map_place(place, location_name) for place in data)
        matches = [match for match in mapped if match is not None]
        if data and not matches:
            raise GeocodingError(
                message="Malformed response: no usable place",
                provider_name=self.get_provider_name(),
            )
        logger.debug("nominatim_geocode", query=location_name, result_count=len(matches))
        return matches

    def _map_place(self, place: dict[str, Any], location_name: str) -> GeocodeMatch | None:
        # lat/lon arrive as strings, e.g. {"lat": "40.7150", "lon": "-73.9843"}
        try:
            return GeocodeMatch(
                latitude=float(place["lat"]),
                longitude=float(place["lon"]),
                formatted_address=place.get("display_name") or location_name,
                confidence=Confidence.MEDIUM,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.debug("nominatim_place_skipped", error=repr(exc))
            return None

    def get_provider_name(self) -> str:
        return "openstreetmap"

    def is_available(self) -> bool:
        """Available unless switched off with ``NOMINATIM_ENABLED=false``."""
        return self._enabled
