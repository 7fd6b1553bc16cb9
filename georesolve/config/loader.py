"""YAML configuration loader with environment variable overrides.

# --- CONFIGURATION HIERARCHY ------------------------------------------
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  -- static defaults checked into the repo
#   2. .env file           -- local developer overrides (not committed)
#   3. Environment vars    -- set at deploy time
#
# The YAML file owns the things that are policy rather than secrets
# (provider priority order).  Secrets and TTLs come from Settings.
# ----------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path

import yaml

from georesolve.config.settings import Settings

DEFAULT_PROVIDER_PRIORITY = ["google_maps", "mapbox", "openstreetmap"]


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is not an
            error; built-in defaults are used instead.
        settings: Settings to merge; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    yaml_config.setdefault("geocoding", {}).setdefault(
        "provider_priority", list(DEFAULT_PROVIDER_PRIORITY)
    )

    settings = settings or Settings()
    env_overrides = {
        "geocoding": {
            "timeout": settings.provider_timeout,
        },
        "llm": {
            "timeout": settings.extraction_timeout,
        },
        "cache": {
            "backend": settings.cache_backend,
            "db_path": settings.cache_db_path,
            "max_entries": settings.cache_max_entries,
            "sweep_interval": settings.cache_sweep_interval,
            "ttl": {
                "geocode": settings.geocode_cache_ttl,
                "geocode_failure": settings.geocode_failure_cache_ttl,
                "extraction": settings.extraction_cache_ttl,
            },
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
