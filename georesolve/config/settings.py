"""Application settings loaded from environment variables via pydantic-settings.

# --- HOW SETTINGS WORK ------------------------------------------------
#
# Values come from two sources, highest priority first:
#
#   1. Environment variables  -- e.g. MAPBOX_API_KEY=pk.abc123
#   2. .env file              -- key=value lines in the project root
#
# Field `mapbox_api_key` maps to env var `MAPBOX_API_KEY`.
#
# Settings is read ONCE at startup and passed explicitly into every
# provider adapter.  Adapters never look at os.environ themselves.
# ----------------------------------------------------------------------
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """georesolve settings.

    Environment variables override defaults.  Loaded from .env when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Geocoding providers ===
    # Empty string = "not configured" -> the adapter reports itself as
    # unavailable and the resolver skips it without counting a failure.
    google_maps_api_key: str = ""
    mapbox_api_key: str = ""
    # Nominatim needs no key; it is switched on/off by flag instead.
    nominatim_enabled: bool = True
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_email: str = "disaster-response@example.com"

    # === Language-understanding providers (location extraction) ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # Any OpenAI-compatible endpoint (Gemini, TogetherAI, ...)
    openai_text_model: str = ""
    anthropic_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # === Cache ===
    cache_backend: str = "sqlite"  # "sqlite" | "memory"
    cache_db_path: str = "data/cache.db"
    cache_max_entries: int = 10_000  # memory backend only
    geocode_cache_ttl: int = 24 * 60 * 60
    geocode_failure_cache_ttl: int = 60 * 60
    extraction_cache_ttl: int = 60 * 60
    cache_sweep_interval: int = 15 * 60  # seconds; 0 disables the sweeper

    # === Timeouts (seconds) ===
    provider_timeout: float = 10.0
    extraction_timeout: float = 20.0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_geocoding_providers(self) -> list[str]:
        """Return the geocoding provider names whose credentials are configured."""
        providers: list[str] = []
        if self.google_maps_api_key:
            providers.append("google_maps")
        if self.mapbox_api_key:
            providers.append("mapbox")
        if self.nominatim_enabled:
            providers.append("openstreetmap")
        return providers

    def get_available_llm_providers(self) -> list[str]:
        """Return a list of LLM provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
