"""Geocoding provider adapters.

Three concrete implementations of IGeocodingProvider
(georesolve/interfaces/geocoding_provider.py):
    - GoogleMapsProvider  -- "google_maps", needs GOOGLE_MAPS_API_KEY
    - MapboxProvider      -- "mapbox", needs MAPBOX_API_KEY
    - NominatimProvider   -- "openstreetmap", keyless, NOMINATIM_ENABLED flag

main.py builds them in the order given by ``geocoding.provider_priority``
in config/config.yaml and hands the list to GeocodingService.
"""

from georesolve.providers.geocoding.google_maps_provider import GoogleMapsProvider
from georesolve.providers.geocoding.mapbox_provider import MapboxProvider
from georesolve.providers.geocoding.nominatim_provider import NominatimProvider

__all__ = ["GoogleMapsProvider", "MapboxProvider", "NominatimProvider"]
