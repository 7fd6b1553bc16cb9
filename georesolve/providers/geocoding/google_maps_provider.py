"""Google Maps Geocoding API provider.

Highest-precision geocoder in the default chain.  Requires
``GOOGLE_MAPS_API_KEY``; without it the adapter reports itself unavailable
and the resolver moves straight on to the next provider.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from georesolve.config.settings import Settings
from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.models.geocode import Confidence, GeocodeMatch
from georesolve.providers.geocoding._http import build_http_client, fetch_json
from georesolve.utils.errors import GeocodingError, ProviderUnavailableError, RateLimitError

logger = structlog.get_logger(logger_name=__name__)

_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GoogleMapsProvider(IGeocodingProvider):
    """Geocoding via the Google Maps Geocoding JSON API.

    Google returns a ``status`` field alongside the results:

        OK                -> one or more results
        ZERO_RESULTS      -> valid request, nothing found (zero matches)
        OVER_QUERY_LIMIT  -> quota exhausted (RateLimitError)
        anything else     -> REQUEST_DENIED / INVALID_REQUEST / UNKNOWN_ERROR

    Every result is a precise match (confidence ``high``) unless Google
    flags it as a ``partial_match``, which is downgraded to ``medium``.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._api_key = settings.google_maps_api_key
        self._client = http_client or build_http_client(settings.provider_timeout)

    async def search(self, location_name: str) -> list[GeocodeMatch]:
        """Geocode *location_name* with Google Maps."""
        if not self.is_available():
            raise ProviderUnavailableError(provider_name=self.get_provider_name())

        data = await fetch_json(
            self._client,
            _GEOCODE_URL,
            params={"address": location_name, "key": self._api_key},
            provider_name=self.get_provider_name(),
        )
        if not isinstance(data, dict):
            raise GeocodingError(
                message="Unexpected response shape",
                provider_name=self.get_provider_name(),
            )

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status == "OVER_QUERY_LIMIT":
            raise RateLimitError(
                message=data.get("error_message") or "OVER_QUERY_LIMIT",
                provider_name=self.get_provider_name(),
            )
        if status != "OK":
            raise GeocodingError(
                message=f"{status}: {data.get('error_message', '')}".rstrip(": "),
                provider_name=self.get_provider_name(),
            )

        results = data.get("results") or []
        mapped = (self._map_result(result, location_name) for result in results)
        matches = [match for match in mapped if match is not None]
        if results and not matches:
            raise GeocodingError(
                message="Malformed response: no usable result",
                provider_name=self.get_provider_name(),
            )
        logger.debug("google_maps_geocode", query=location_name, result_count=len(matches))
        return matches

    def _map_result(self, result: dict[str, Any], location_name: str) -> GeocodeMatch | None:
        try:
            location = result["geometry"]["location"]
            return GeocodeMatch(
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
                formatted_address=result.get("formatted_address") or location_name,
                confidence=(
                    Confidence.MEDIUM if result.get("partial_match") else Confidence.HIGH
                ),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.debug("google_maps_result_skipped", error=repr(exc))
            return None

    def get_provider_name(self) -> str:
        return "google_maps"

    def is_available(self) -> bool:
        """Available when an API key is configured."""
        return bool(self._api_key)
