"""Abstract base class for geocoding service providers.

Every external geocoder (Google Maps, Mapbox, OpenStreetMap Nominatim) is
wrapped in an adapter implementing :class:`IGeocodingProvider`.  Adapters
implement :meth:`search`, which may raise; the resolver only ever calls
:meth:`attempt`, which turns every error and timeout into a
:class:`~georesolve.models.geocode.ProviderOutcome` value so the fallback
loop can branch on a result instead of catching exceptions itself.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

import structlog

from georesolve.models.geocode import GeocodeMatch, ProviderOutcome

logger = structlog.get_logger(logger_name=__name__)


# Concrete implementations: GoogleMapsProvider, MapboxProvider, NominatimProvider
# Located in: georesolve/providers/geocoding/
class IGeocodingProvider(ABC):
    """Contract for forward-geocoding services (place name -> coordinates)."""

    @abstractmethod
    async def search(self, location_name: str) -> list[GeocodeMatch]:
        """Look up *location_name* and return zero or more matches.

        Parameters
        ----------
        location_name:
            Free-form place name, e.g. ``"Lower East Side, Manhattan"``.

        Returns
        -------
        list[GeocodeMatch]
            Matches ranked best-first, each carrying the confidence the
            adapter assigns from the provider's own precision signals.

        Raises
        ------
        georesolve.utils.errors.GeocodingError
            Transport failure, non-success status, or malformed payload.
        georesolve.utils.errors.RateLimitError
            The provider reported its quota as exhausted.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the identifier recorded on results, e.g. ``"mapbox"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the adapter has the credentials it needs.

        A provider that is not available is skipped by the resolver and is
        not counted as a failure.
        """

    async def wait_for_request_slot(self) -> None:
        """Block until the provider's rate limit admits another request.

        No-op by default.  Adapters with a client-side request budget
        override this; :meth:`attempt` awaits it before starting the
        timed call, so queueing never counts against the timeout.
        """

    async def attempt(
        self,
        location_name: str,
        timeout: float | None = None,
    ) -> ProviderOutcome:
        """Run :meth:`search` and report the outcome as a value.

        Never raises (cancellation excepted).  A call exceeding *timeout*
        seconds is abandoned and reported as a failure.  The timeout covers
        the request itself, not the wait in :meth:`wait_for_request_slot`.
        """
        name = self.get_provider_name()
        if self.is_available():
            await self.wait_for_request_slot()
        try:
            matches = await asyncio.wait_for(self.search(location_name), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("geocoding_provider_timeout", provider=name, timeout=timeout)
            return ProviderOutcome.failure(name, f"timed out after {timeout}s")
        except Exception as exc:
            # Adapter bugs are isolated the same way as remote failures.
            logger.warning("geocoding_provider_failed", provider=name, error=str(exc))
            return ProviderOutcome.failure(name, str(exc) or type(exc).__name__)
        return ProviderOutcome.success(name, matches)
