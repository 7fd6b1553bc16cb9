"""Custom exception hierarchy for georesolve.

All application exceptions inherit from :class:`GeoResolveError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "google_maps", "mapbox", "openai") caused the failure.

    GeoResolveError  (base -- catch-all for any georesolve error)
    +-- InputValidationError     (caller input rejected before any I/O)
    +-- GeocodingError           (geocoding adapter call failed)
    +-- RateLimitError           (provider quota exceeded)
    +-- ProviderUnavailableError (adapter invoked while disabled)
    +-- LLMError                 (language-model call failure)
    +-- ConfigurationError       (startup / invalid config)

Adapters raise these internally.  The resolution layer converts every
provider-side error into a failed ``ProviderOutcome``; only
:class:`InputValidationError` and :class:`ConfigurationError` ever reach a
caller.
"""


class GeoResolveError(Exception):
    """Base exception for all georesolve errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[mapbox] HTTP 401``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class InputValidationError(GeoResolveError):
    """Raised when caller input is empty, too long, or otherwise invalid."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class GeocodingError(GeoResolveError):
    """Raised when a geocoding adapter gets a transport error, a non-success
    status, or a payload it cannot interpret."""

    def __init__(
        self,
        message: str = "Geocoding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(GeoResolveError):
    """Raised when a provider reports that its quota has been exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(GeoResolveError):
    """Raised when a disabled (unconfigured) provider is asked to do work."""

    def __init__(
        self,
        message: str = "Provider is not configured",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(GeoResolveError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(GeoResolveError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
