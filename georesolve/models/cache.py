"""Cache entry model shared by the cache store implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """A stored value and the absolute time (epoch seconds) it stops being valid.

    Entries are replaced whole on every write; nothing updates one in place.
    """

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """An entry is expired from the instant ``now`` reaches ``expires_at``."""
        return now >= self.expires_at
