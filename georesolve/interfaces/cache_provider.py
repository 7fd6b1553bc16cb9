"""Abstract base class for expiring key-value stores.

Defines the contract every cache backend (in-memory, SQLite, or a future
network store) must honour.  The cache-aside facade in
``georesolve/services/cache_service.py`` is the only caller; business logic
never talks to a store directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for expiring key-value stores.

    Implementations must never raise from these methods: a storage failure
    is reported as a miss (``get``) or silently skipped (``set``,
    ``delete``, ``sweep_expired``) after being logged.  Cache trouble must
    degrade to "always recompute", never to a failed request.

    All operations are async so network- or disk-backed stores do not
    block the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        An entry whose expiry time has been reached is treated as a miss
        and removed before this method returns.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store *value* under *key* until ``now + ttl``.

        Any existing entry for *key* is replaced as a whole (upsert).

        Parameters
        ----------
        key:
            The cache key.
        value:
            A JSON-compatible value (dict, list, str, int, float, bool).
        ttl:
            Time-to-live in seconds.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Delete every expired entry and return how many were removed."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this backend, e.g. ``"sqlite"``."""
