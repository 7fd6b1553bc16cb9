"""Shared pytest fixtures for the georesolve test suite."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from georesolve.config.settings import Settings
from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.interfaces.llm_provider import ILLMProvider
from georesolve.models.geocode import Confidence, GeocodeMatch
from georesolve.providers.cache.memory_cache import MemoryCacheProvider
from georesolve.services.cache_service import CacheService

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_settings(**overrides) -> Settings:
    """Build a Settings instance isolated from .env and real credentials.

    Every credential defaults to empty so tests opt in to each provider.
    """
    defaults = {
        "_env_file": None,
        "google_maps_api_key": "",
        "mapbox_api_key": "",
        "nominatim_enabled": False,
        "nominatim_base_url": "https://nominatim.test",
        "nominatim_email": "ops@example.org",
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_text_model": "",
        "anthropic_api_key": "",
        "ollama_base_url": "http://localhost:11434",
        "cache_backend": "memory",
        "cache_db_path": "data/cache.db",
        "app_env": "test",
        "log_level": "WARNING",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class FakeClock:
    """Manually advanced epoch clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedGeocoder(IGeocodingProvider):
    """Geocoding adapter double with a fixed answer.

    *response* is either a list of matches or an exception instance to
    raise.  Calls are recorded so tests can assert which adapters ran.
    """

    def __init__(
        self,
        name: str,
        response: list[GeocodeMatch] | Exception | None = None,
        available: bool = True,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._response = response if response is not None else []
        self._available = available
        self._delay = delay
        self.calls: list[str] = []

    async def search(self, location_name: str) -> list[GeocodeMatch]:
        self.calls.append(location_name)
        if self._delay:
            await asyncio.sleep(self._delay)
        if isinstance(self._response, Exception):
            raise self._response
        return list(self._response)

    def get_provider_name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        return self._available


def lower_east_side(confidence: Confidence = Confidence.HIGH) -> GeocodeMatch:
    return GeocodeMatch(
        latitude=40.715,
        longitude=-73.98,
        formatted_address="Lower East Side, Manhattan, NY, USA",
        confidence=confidence,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def quiet_logging() -> None:
    """Send structlog output to an in-memory logger, WARNING and above only."""
    structlog.configure(
        processors=[structlog.processors.add_log_level, structlog.processors.KeyValueRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True, scope="session")
def _quiet_structlog() -> None:
    quiet_logging()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=100, clock=clock)


@pytest.fixture
def cache_service(memory_store: MemoryCacheProvider) -> CacheService:
    """CacheService with the default 24h / 1h / 1h TTL policy over a memory store."""
    return CacheService(memory_store)


@pytest.fixture
def mock_llm_provider() -> ILLMProvider:
    """Mock ILLMProvider answering with a place name.

    Override with ``mock_llm_provider.complete.return_value = "..."`` or
    ``.side_effect`` for specific tests.
    """
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.is_available.return_value = True
    mock.validate_credentials = AsyncMock(return_value=True)
    mock.complete = AsyncMock(return_value="Lower East Side, Manhattan")
    return mock
