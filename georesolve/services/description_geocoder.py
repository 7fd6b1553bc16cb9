"""Description -> coordinates chain.

Runs the location extractor (optional) and then the geocoding fallback
chain.  When extraction is skipped or finds no place, the original
description itself is geocoded.
"""

from __future__ import annotations

from georesolve.models.geocode import LocationResolution
from georesolve.services.geocoding_service import GeocodingService
from georesolve.services.location_extractor import LocationExtractor
from georesolve.utils.logging import get_logger
from georesolve.utils.text_normalizer import require_text


class DescriptionGeocoder:
    """Geocode a free-text description end to end."""

    def __init__(self, extractor: LocationExtractor, geocoder: GeocodingService) -> None:
        self._extractor = extractor
        self._geocoder = geocoder
        self._logger = get_logger(__name__)

    async def geocode_description(
        self,
        description: str,
        extract_location: bool = True,
    ) -> LocationResolution:
        """Resolve *description* to a :class:`LocationResolution`.

        Raises
        ------
        InputValidationError
            If *description* is blank or longer than 1000 characters.
        """
        description = require_text(description, "description")

        extracted: str | None = None
        location_name = description
        if extract_location:
            answer = await self._extractor.extract(description)
            if LocationExtractor.is_location(answer):
                extracted = answer
                location_name = answer

        result = await self._geocoder.geocode(location_name)
        self._logger.info(
            "description_geocoded",
            location=location_name,
            extracted=extracted is not None,
            provider=result.provider,
        )
        return LocationResolution.build(description, extracted, location_name, result)
