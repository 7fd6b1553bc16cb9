"""Resolution services.

    CacheService         -- cache-aside facade: key derivation + TTL policy
    LocationExtractor    -- LLM place-name extraction, cached
    GeocodingService     -- ordered provider fallback, cached (incl. failures)
    DescriptionGeocoder  -- extractor -> geocoder chain for free text
    CacheSweeper         -- periodic deletion of expired entries
"""

from georesolve.services.cache_service import CacheService
from georesolve.services.cache_sweeper import CacheSweeper
from georesolve.services.description_geocoder import DescriptionGeocoder
from georesolve.services.geocoding_service import GeocodingService
from georesolve.services.location_extractor import LocationExtractor

__all__ = [
    "CacheService",
    "CacheSweeper",
    "DescriptionGeocoder",
    "GeocodingService",
    "LocationExtractor",
]
