"""Public interface definitions for every external dependency.

The resolution layer reaches external services only through the abstract
base classes in this package.  Concrete adapters implement them and are
injected at startup by ``georesolve/main.py``, so:

    - swapping Mapbox for another geocoder touches one factory function,
    - unit tests inject fakes instead of making network calls,
    - the resolver holds an ordered list of interchangeable geocoders.

CONCRETE PROVIDER MAP:
    Interface              ->  Concrete implementations (georesolve/providers/)
    ----------------------------------------------------------------------
    IGeocodingProvider     ->  GoogleMapsProvider, MapboxProvider,
                               NominatimProvider
    ILLMProvider           ->  OpenAILLMProvider, AnthropicLLMProvider,
                               OllamaLLMProvider
    ICacheProvider         ->  SQLiteCacheProvider, MemoryCacheProvider
"""

from georesolve.interfaces.cache_provider import ICacheProvider
from georesolve.interfaces.geocoding_provider import IGeocodingProvider
from georesolve.interfaces.llm_provider import ILLMProvider

__all__ = [
    "ICacheProvider",
    "IGeocodingProvider",
    "ILLMProvider",
]
