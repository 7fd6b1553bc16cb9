"""HTTP plumbing shared by the geocoding adapters.

Translates every way an HTTP round-trip can go wrong into the project's
exception hierarchy, so each adapter only has to interpret a decoded body.
"""

from __future__ import annotations

from typing import Any

import httpx

from georesolve.utils.errors import GeocodingError, RateLimitError

DEFAULT_TIMEOUT = 10.0
DEFAULT_HEADERS = {
    "User-Agent": "georesolve/0.1 (disaster location geocoding)",
    "Accept": "application/json",
}


def build_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create the client shared by all geocoding adapters."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers=DEFAULT_HEADERS,
        follow_redirects=True,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any],
    provider_name: str,
) -> Any:
    """GET *url* and return the decoded JSON body.

    Raises
    ------
    RateLimitError
        On HTTP 429.
    GeocodingError
        On timeout, transport error, any other non-2xx status, or a body
        that is not JSON.
    """
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
    except httpx.TimeoutException as exc:
        raise GeocodingError(
            message=f"Timeout calling {provider_name}: {exc}",
            provider_name=provider_name,
        ) from exc
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status == 429:
            raise RateLimitError(
                message="HTTP 429 Too Many Requests",
                provider_name=provider_name,
            ) from exc
        raise GeocodingError(
            message=f"HTTP {status}",
            provider_name=provider_name,
        ) from exc
    except httpx.HTTPError as exc:
        raise GeocodingError(
            message=f"HTTP error: {exc}",
            provider_name=provider_name,
        ) from exc

    try:
        return response.json()
    except ValueError as exc:
        raise GeocodingError(
            message="Response body is not valid JSON",
            provider_name=provider_name,
        ) from exc
