"""Mapbox Geocoding API (v5, ``mapbox.places``) provider."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from georesolve.config.settings import Settings
from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.models.geocode import Confidence, GeocodeMatch
from georesolve.providers.geocoding._http import build_http_client, fetch_json
from georesolve.utils.errors import GeocodingError, ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"

# Features whose relevance is above this are reported as high confidence.
_HIGH_RELEVANCE = 0.8


class MapboxProvider(IGeocodingProvider):
    """Geocoding via Mapbox.

    Mapbox scores each feature with a ``relevance`` in [0, 1]; a feature
    above 0.8 is ``high`` confidence, anything else ``medium``.  Note that
    Mapbox ``center`` coordinates are ``[longitude, latitude]``.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        limit: int = 1,
    ) -> None:
        self._access_token = settings.mapbox_api_key
        self._client = http_client or build_http_client(settings.provider_timeout)
        self._limit = limit

    async def search(self, location_name: str) -> list[GeocodeMatch]:
        """Geocode *location_name* with Mapbox."""
        if not self.is_available():
            raise ProviderUnavailableError(provider_name=self.get_provider_name())

        # The query is a path segment, so "/" must be escaped too.
        url = _GEOCODE_URL.format(query=quote(location_name, safe=""))
        data = await fetch_json(
            self._client,
            url,
            params={"access_token": self._access_token, "limit": self._limit},
            provider_name=self.get_provider_name(),
        )
        if not isinstance(data, dict):
            raise GeocodingError(
                message="Unexpected response shape",
                provider_name=self.get_provider_name(),
            )

        features = data.get("features") or []
        mapped = (self._map_feature(feature, location_name) for feature in features)
        matches = [match for match in mapped if match is not None]
        if features and not matches:
            raise GeocodingError(
                message="Malformed response: no usable feature",
                provider_name=self.get_provider_name(),
            )
        logger.debug("mapbox_geocode", query=location_name, result_count=len(matches))
        return matches

    def _map_feature(self, feature: dict[str, Any], location_name: str) -> GeocodeMatch | None:
        try:
            longitude, latitude = feature["center"][:2]
            relevance = float(feature.get("relevance", 0.0))
            return GeocodeMatch(
                latitude=float(latitude),
                longitude=float(longitude),
                formatted_address=feature.get("place_name") or location_name,
                confidence=Confidence.HIGH if relevance > _HIGH_RELEVANCE else Confidence.MEDIUM,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.debug("mapbox_feature_skipped", error=repr(exc))
            return None

    def get_provider_name(self) -> str:
        return "mapbox"

    def is_available(self) -> bool:
        """Available when an access token is configured."""
        return bool(self._access_token)
