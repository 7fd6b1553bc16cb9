"""Utility modules for georesolve.

- **errors** -- Exception hierarchy rooted at GeoResolveError; adapters
  raise provider-specific subclasses that the resolution layer converts
  into outcome values.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- cache-key normalization and hashing, request text
  validation, and cleanup of language-model answers.
"""

from georesolve.utils.errors import (
    ConfigurationError,
    GeocodingError,
    GeoResolveError,
    InputValidationError,
    LLMError,
    ProviderUnavailableError,
    RateLimitError,
)
from georesolve.utils.logging import configure_logging, get_logger
from georesolve.utils.text_normalizer import (
    clean_model_answer,
    make_cache_key,
    normalize_query,
    require_text,
)

__all__ = [
    "ConfigurationError",
    "GeoResolveError",
    "GeocodingError",
    "InputValidationError",
    "LLMError",
    "ProviderUnavailableError",
    "RateLimitError",
    "clean_model_answer",
    "configure_logging",
    "get_logger",
    "make_cache_key",
    "normalize_query",
    "require_text",
]
