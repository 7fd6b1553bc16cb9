"""Configuration: pydantic-settings ``Settings`` plus the YAML loader."""

from georesolve.config.loader import load_config
from georesolve.config.settings import Settings

__all__ = ["Settings", "load_config"]
