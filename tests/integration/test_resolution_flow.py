"""End-to-end resolution flows over real stores and real adapter classes.

Geocoding adapters are the production classes driven through an
``httpx.MockTransport``; only the language model is mocked.  Each flow
checks both the returned value and what ended up in the cache.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from georesolve.interfaces.llm_provider import ILLMProvider
from georesolve.models.geocode import Confidence
from georesolve.providers.cache.sqlite_cache import SQLiteCacheProvider
from georesolve.providers.geocoding.google_maps_provider import GoogleMapsProvider
from georesolve.providers.geocoding.mapbox_provider import MapboxProvider
from georesolve.providers.geocoding.nominatim_provider import NominatimProvider
from georesolve.services.cache_service import GEOCODE_OPERATION, CacheService
from georesolve.services.description_geocoder import DescriptionGeocoder
from georesolve.services.geocoding_service import GeocodingService
from georesolve.services.location_extractor import LocationExtractor
from tests.conftest import FakeClock, make_settings


class _FakeGeocodingAPIs:
    """One MockTransport handler standing in for all three geocoding APIs."""

    def __init__(self) -> None:
        self.google_status = "OK"
        self.mapbox_status_code = 200
        self.hits: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.hits.append(host)
        if host == "maps.googleapis.com":
            if self.google_status != "OK":
                return httpx.Response(200, json={"status": self.google_status, "results": []})
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "results": [
                        {
                            "formatted_address": "Lower East Side, New York, NY, USA",
                            "geometry": {"location": {"lat": 40.715, "lng": -73.98}},
                        }
                    ],
                },
            )
        if host == "api.mapbox.com":
            return httpx.Response(self.mapbox_status_code, json={"features": []})
        if host == "nominatim.test":
            return httpx.Response(200, json=[])
        return httpx.Response(404)


@pytest.fixture
def apis() -> _FakeGeocodingAPIs:
    return _FakeGeocodingAPIs()


@pytest_asyncio.fixture
async def cache(tmp_path: Path, clock: FakeClock) -> CacheService:
    store = SQLiteCacheProvider(db_path=tmp_path / "cache.db", clock=clock)
    await store.initialize()
    return CacheService(store)


@pytest.fixture
def llm() -> MagicMock:
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.is_available.return_value = True
    mock.complete = AsyncMock(return_value="Lower East Side, Manhattan")
    return mock


def _geocoder(apis: _FakeGeocodingAPIs, cache: CacheService, llm: MagicMock) -> DescriptionGeocoder:
    settings = make_settings(
        google_maps_api_key="gm-key", mapbox_api_key="pk.test", nominatim_enabled=True
    )
    client = httpx.AsyncClient(transport=httpx.MockTransport(apis))
    nominatim = NominatimProvider(settings, http_client=client)
    nominatim._MIN_REQUEST_INTERVAL = 0.0
    resolver = GeocodingService(
        [
            GoogleMapsProvider(settings, http_client=client),
            MapboxProvider(settings, http_client=client),
            nominatim,
        ],
        cache,
    )
    return DescriptionGeocoder(LocationExtractor(llm, cache), resolver)


@pytest.mark.asyncio
async def test_description_resolves_and_is_cached(
    apis: _FakeGeocodingAPIs, cache: CacheService, llm: MagicMock, clock: FakeClock
) -> None:
    geocoder = _geocoder(apis, cache, llm)

    resolution = await geocoder.geocode_description("Flooding near Lower East Side, Manhattan")

    assert resolution.extracted_location == "Lower East Side, Manhattan"
    assert resolution.latitude == 40.715
    assert resolution.longitude == -73.98
    assert resolution.provider == "google_maps"
    assert resolution.confidence is Confidence.HIGH
    assert apis.hits == ["maps.googleapis.com"]

    # Same request within 24h: no LLM call, no HTTP call.
    clock.advance(3000)
    again = await geocoder.geocode_description("Flooding near Lower East Side, Manhattan")
    assert again == resolution
    assert llm.complete.await_count == 1
    assert apis.hits == ["maps.googleapis.com"]

    key = CacheService.make_key(GEOCODE_OPERATION, "Lower East Side, Manhattan")
    assert (await cache.get(key))["provider"] == "google_maps"

    # Geocode entry outlives the 1h extraction entry.
    clock.advance(3600)
    await geocoder.geocode_description("Flooding near Lower East Side, Manhattan")
    assert llm.complete.await_count == 2
    assert apis.hits == ["maps.googleapis.com"]


@pytest.mark.asyncio
async def test_unknown_place_is_negatively_cached(
    apis: _FakeGeocodingAPIs, cache: CacheService, llm: MagicMock, clock: FakeClock
) -> None:
    apis.google_status = "ZERO_RESULTS"
    llm.complete.return_value = "Nowhereland"
    geocoder = _geocoder(apis, cache, llm)

    first = await geocoder.geocode_description("Strange lights over Nowhereland")
    assert first.latitude is None
    assert first.provider == "none"
    assert first.confidence is Confidence.UNKNOWN
    assert apis.hits == ["maps.googleapis.com", "api.mapbox.com", "nominatim.test"]

    clock.advance(1800)
    await geocoder.geocode_description("Strange lights over Nowhereland")
    assert len(apis.hits) == 3

    clock.advance(1800)
    await geocoder.geocode_description("Strange lights over Nowhereland")
    assert len(apis.hits) == 6


@pytest.mark.asyncio
async def test_provider_outage_falls_through(
    apis: _FakeGeocodingAPIs, cache: CacheService, llm: MagicMock
) -> None:
    apis.google_status = "OVER_QUERY_LIMIT"
    apis.mapbox_status_code = 503
    geocoder = _geocoder(apis, cache, llm)

    resolution = await geocoder.geocode_description("Flooding near Lower East Side, Manhattan")

    assert resolution.provider == "none"
    assert apis.hits == ["maps.googleapis.com", "api.mapbox.com", "nominatim.test"]


@pytest.mark.asyncio
async def test_no_location_in_text_geocodes_description(
    apis: _FakeGeocodingAPIs, cache: CacheService, llm: MagicMock
) -> None:
    llm.complete.return_value = "NONE"
    geocoder = _geocoder(apis, cache, llm)

    resolution = await geocoder.geocode_description("send help now")

    assert resolution.extracted_location is None
    assert resolution.location_name == "send help now"
    # The fake Google API resolves any query.
    assert resolution.provider == "google_maps"
