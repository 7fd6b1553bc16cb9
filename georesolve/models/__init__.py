"""Data models for the georesolve resolution layer.

- ``cache`` -- :class:`CacheEntry`, the (value, expiry) record kept by every
  cache store.
- ``geocode`` -- the confidence scale, adapter matches and outcomes, the
  normalized :class:`GeocodeResult`, and :class:`LocationResolution`.
"""

from georesolve.models.cache import CacheEntry
from georesolve.models.geocode import (
    NO_LOCATION,
    NO_PROVIDER,
    Confidence,
    GeocodeMatch,
    GeocodeResult,
    LocationResolution,
    OutcomeStatus,
    ProviderOutcome,
)

__all__ = [
    "NO_LOCATION",
    "NO_PROVIDER",
    "CacheEntry",
    "Confidence",
    "GeocodeMatch",
    "GeocodeResult",
    "LocationResolution",
    "OutcomeStatus",
    "ProviderOutcome",
]
