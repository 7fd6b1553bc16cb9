"""Location extraction from free-text disaster descriptions.

Asks a language model to pull a single place name out of a description
such as "Flooding near Lower East Side, Manhattan" before the text is
geocoded.  The model is told to answer ``NONE`` when no place is named.

Failure policy: any LLM failure (API error, timeout, empty or unusable
answer) yields the ``NONE`` sentinel instead of an exception, and that
answer is cached for the extraction TTL just like a real one, so a flaky
provider is not retried on every request.
"""

from __future__ import annotations

import asyncio

from georesolve.interfaces.llm_provider import ILLMProvider
from georesolve.models.geocode import NO_LOCATION
from georesolve.services.cache_service import EXTRACTION_OPERATION, CacheService
from georesolve.utils.logging import get_logger
from georesolve.utils.text_normalizer import MAX_TEXT_LENGTH, clean_model_answer, require_text

_DEFAULT_TIMEOUT = 20.0

_SYSTEM_PROMPT = (
    "You extract locations from disaster reports. Reply with the location "
    "name only, on one line, with no explanation."
)

_USER_PROMPT_TEMPLATE = """\
Extract the specific location name from this disaster description. Return \
only the location name (city, state/province, country) or "NONE" if no clear \
location is found:

Description: "{description}"

Location:"""


class LocationExtractor:
    """Cached LLM-backed place-name extraction.

    Parameters
    ----------
    llm:
        Language-understanding provider.  ``None`` or an unavailable
        provider makes every extraction answer ``NONE``.
    cache:
        Cache-aside facade shared with the geocoder.
    timeout:
        Upper bound in seconds on one LLM call.
    """

    def __init__(
        self,
        llm: ILLMProvider | None,
        cache: CacheService,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._llm = llm
        self._cache = cache
        self._timeout = timeout
        self._logger = get_logger(__name__)

    @staticmethod
    def is_location(answer: str) -> bool:
        """``True`` unless *answer* is the no-location sentinel."""
        return answer != NO_LOCATION

    async def extract(self, description: str) -> str:
        """Return the place named in *description*, or ``"NONE"``.

        Raises
        ------
        InputValidationError
            If *description* is blank or longer than 1000 characters.
        """
        description = require_text(description, "description")
        key = self._cache.make_key(EXTRACTION_OPERATION, description)

        cached = await self._cache.get(key)
        if isinstance(cached, str) and cached:
            self._logger.debug("location_extraction_cache_hit", location=cached)
            return cached

        location = await self._ask_llm(description)
        await self._cache.set_extraction(key, location)
        self._logger.info(
            "location_extracted",
            location=location,
            found=self.is_location(location),
        )
        return location

    async def _ask_llm(self, description: str) -> str:
        if self._llm is None or not self._llm.is_available():
            self._logger.warning("location_extraction_no_provider")
            return NO_LOCATION

        provider = self._llm.get_provider_name()
        try:
            raw = await asyncio.wait_for(
                self._llm.complete(
                    system_prompt=_SYSTEM_PROMPT,
                    user_prompt=_USER_PROMPT_TEMPLATE.format(description=description),
                    temperature=0.0,
                    max_tokens=60,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            self._logger.warning(
                "location_extraction_timeout", provider=provider, timeout=self._timeout
            )
            return NO_LOCATION
        except Exception as exc:
            self._logger.warning("location_extraction_failed", provider=provider, error=str(exc))
            return NO_LOCATION

        if not isinstance(raw, str):
            self._logger.warning("location_extraction_malformed", provider=provider)
            return NO_LOCATION

        answer = clean_model_answer(raw)
        if not answer or answer.upper() == NO_LOCATION:
            return NO_LOCATION
        if len(answer) > MAX_TEXT_LENGTH:
            self._logger.warning(
                "location_extraction_malformed", provider=provider, length=len(answer)
            )
            return NO_LOCATION
        return answer
