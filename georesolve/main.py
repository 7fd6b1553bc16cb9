"""georesolve composition root.

Wires settings -> providers -> services.  Nothing else in the package
constructs a concrete adapter; every service receives its collaborators
through its constructor, so tests can substitute any of them.

Typical usage::

    stack = await build_resolution_stack()
    try:
        resolution = await stack.geocoder.geocode_description("Flooding near Lower East Side")
    finally:
        await stack.aclose()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from georesolve.config.loader import load_config
from georesolve.config.settings import Settings
from georesolve.interfaces.cache_provider import ICacheProvider
from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.interfaces.llm_provider import ILLMProvider
from georesolve.providers.cache.memory_cache import MemoryCacheProvider
from georesolve.providers.cache.sqlite_cache import SQLiteCacheProvider
from georesolve.providers.geocoding._http import build_http_client
from georesolve.providers.geocoding.google_maps_provider import GoogleMapsProvider
from georesolve.providers.geocoding.mapbox_provider import MapboxProvider
from georesolve.providers.geocoding.nominatim_provider import NominatimProvider
from georesolve.providers.llm.anthropic_provider import AnthropicLLMProvider
from georesolve.providers.llm.ollama_provider import OllamaLLMProvider
from georesolve.providers.llm.openai_provider import OpenAILLMProvider
from georesolve.services.cache_service import CacheService
from georesolve.services.cache_sweeper import CacheSweeper
from georesolve.services.description_geocoder import DescriptionGeocoder
from georesolve.services.geocoding_service import GeocodingService
from georesolve.services.location_extractor import LocationExtractor
from georesolve.utils.errors import ConfigurationError
from georesolve.utils.logging import get_logger

_logger = get_logger(__name__)

# Adapter constructors keyed by the names used in config.yaml's
# geocoding.provider_priority list.
_GEOCODER_FACTORIES = {
    "google_maps": GoogleMapsProvider,
    "mapbox": MapboxProvider,
    "openstreetmap": NominatimProvider,
}


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first available LLM provider based on configured API keys.

    Priority order: OpenAI (or OpenAI-compatible) -> Anthropic -> Ollama.
    """
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    return OllamaLLMProvider(settings=app_settings)


def _build_geocoding_providers(
    app_settings: Settings,
    config: dict[str, Any],
    http_client: httpx.AsyncClient,
) -> list[IGeocodingProvider]:
    """Instantiate every geocoding adapter in configured priority order.

    Unconfigured adapters are still built; they report themselves
    unavailable and the resolver skips them.

    Raises
    ------
    ConfigurationError
        If the priority list names an unknown provider or repeats one.
    """
    priority = config.get("geocoding", {}).get("provider_priority") or list(_GEOCODER_FACTORIES)
    providers: list[IGeocodingProvider] = []
    seen: set[str] = set()
    for name in priority:
        factory = _GEOCODER_FACTORIES.get(name)
        if factory is None:
            raise ConfigurationError(
                f"Unknown geocoding provider in provider_priority: {name!r} "
                f"(expected one of {', '.join(_GEOCODER_FACTORIES)})"
            )
        if name in seen:
            raise ConfigurationError(f"Geocoding provider listed twice: {name!r}")
        seen.add(name)
        providers.append(factory(settings=app_settings, http_client=http_client))
    return providers


async def _build_cache_store(cache_config: dict[str, Any]) -> ICacheProvider:
    """Create the configured cache backend from the ``cache`` config section.

    A SQLite store whose database cannot be opened falls back to the
    in-memory store so resolution keeps working uncached-on-restart.
    """
    backend = str(cache_config.get("backend", "sqlite")).lower()
    max_entries = cache_config.get("max_entries", 10_000)
    if backend == "memory":
        return MemoryCacheProvider(max_size=max_entries)
    if backend != "sqlite":
        raise ConfigurationError(f"Unknown cache backend: {cache_config.get('backend')!r}")

    db_path = cache_config.get("db_path", "data/cache.db")
    store = SQLiteCacheProvider(db_path=db_path)
    if await store.initialize():
        return store
    _logger.warning(
        "cache_backend_fallback",
        requested="sqlite",
        using="memory",
        db_path=db_path,
    )
    return MemoryCacheProvider(max_size=max_entries)


# ---------------------------------------------------------------------------
# Full assembly
# ---------------------------------------------------------------------------


@dataclass
class ResolutionStack:
    """Every long-lived component of one running resolver."""

    cache: CacheService
    extractor: LocationExtractor
    resolver: GeocodingService
    geocoder: DescriptionGeocoder
    sweeper: CacheSweeper
    http_client: httpx.AsyncClient

    async def aclose(self) -> None:
        """Stop the sweeper and release the shared HTTP client."""
        await self.sweeper.stop()
        await self.http_client.aclose()


async def build_resolution_stack(
    custom_settings: Settings | None = None,
    config_path: str = "config/config.yaml",
) -> ResolutionStack:
    """Construct and return all services with injected dependencies.

    The sweeper is created but not started; long-running callers start it
    themselves (one-shot CLI commands don't need it).
    """
    s = custom_settings or Settings()
    config = load_config(config_path, settings=s)

    cache_config = config["cache"]
    ttl = cache_config["ttl"]
    provider_timeout = config["geocoding"]["timeout"]

    http_client = build_http_client(provider_timeout)
    try:
        geocoding_providers = _build_geocoding_providers(s, config, http_client)
        store = await _build_cache_store(cache_config)
    except Exception:
        await http_client.aclose()
        raise

    cache = CacheService(
        store,
        geocode_ttl=ttl["geocode"],
        geocode_failure_ttl=ttl["geocode_failure"],
        extraction_ttl=ttl["extraction"],
    )
    llm = _build_llm_provider(s)
    extractor = LocationExtractor(llm, cache, timeout=config["llm"]["timeout"])
    resolver = GeocodingService(geocoding_providers, cache, provider_timeout=provider_timeout)
    geocoder = DescriptionGeocoder(extractor, resolver)
    sweeper = CacheSweeper(cache, interval=cache_config["sweep_interval"])

    _logger.info(
        "resolution_stack_ready",
        cache_backend=cache.backend,
        llm_provider=llm.get_provider_name(),
        geocoding_providers=resolver.get_available_providers(),
    )
    return ResolutionStack(
        cache=cache,
        extractor=extractor,
        resolver=resolver,
        geocoder=geocoder,
        sweeper=sweeper,
        http_client=http_client,
    )
