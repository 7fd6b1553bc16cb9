"""Geocoding domain models.

Defines the confidence scale, the normalized :class:`GeocodeResult` the
resolver always returns (never ``None``), the per-adapter
:class:`ProviderOutcome` result value, and the :class:`LocationResolution`
produced by the full description -> coordinates chain.

GeocodeResult and LocationResolution are Pydantic v2 models with frozen
config: they are cached as JSON (``model_dump(mode="json")``) and rebuilt
with ``model_validate`` on a cache hit, so the validator below also guards
against corrupt cache payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Provider identifier recorded on a result no adapter produced.
NO_PROVIDER = "none"

# Sentinel the location extractor returns when the text names no place.
NO_LOCATION = "NONE"


class Confidence(str, Enum):  # noqa: UP042: StrEnum requires Python 3.11+
    """Ordinal confidence of a geocode: unknown < low < medium < high.

    Values serialize as lowercase strings.  Use :attr:`rank` (or the
    comparison operators) for ordering -- plain ``str`` comparison would
    order alphabetically.
    """

    UNKNOWN = "unknown"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank >= other.rank


_CONFIDENCE_RANK = {
    Confidence.UNKNOWN: 0,
    Confidence.LOW: 1,
    Confidence.MEDIUM: 2,
    Confidence.HIGH: 3,
}


@dataclass(frozen=True)
class GeocodeMatch:
    """One candidate location returned by a geocoding adapter.

    Attributes
    ----------
    latitude, longitude:
        WGS84 decimal degrees.
    formatted_address:
        Human-readable address as the provider spells it.
    confidence:
        Set by the adapter according to its own precision signals.
    """

    latitude: float
    longitude: float
    formatted_address: str
    confidence: Confidence = Confidence.MEDIUM


class GeocodeResult(BaseModel):
    """Normalized outcome of resolving one location name.

    ``latitude`` and ``longitude`` are both set or both ``None``.  An
    unresolved result carries the input name as ``formatted_address``,
    ``provider == "none"`` and ``confidence == unknown``.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    formatted_address: str
    provider: str = NO_PROVIDER
    confidence: Confidence = Confidence.UNKNOWN

    @model_validator(mode="after")
    def _coordinates_paired(self) -> GeocodeResult:
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be set or both be null")
        return self

    @property
    def is_resolved(self) -> bool:
        """``True`` when coordinates are present."""
        return self.latitude is not None

    @classmethod
    def from_match(cls, match: GeocodeMatch, provider: str) -> GeocodeResult:
        """Build a resolved result from an adapter's winning match."""
        return cls(
            latitude=match.latitude,
            longitude=match.longitude,
            formatted_address=match.formatted_address,
            provider=provider,
            confidence=match.confidence,
        )

    @classmethod
    def unresolved(cls, location_name: str) -> GeocodeResult:
        """Build the terminal negative result for *location_name*."""
        return cls(formatted_address=location_name)


class OutcomeStatus(str, Enum):  # noqa: UP042
    """How a single adapter attempt ended."""

    MATCHED = "MATCHED"
    NO_MATCH = "NO_MATCH"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ProviderOutcome:
    """Result value of one adapter attempt.

    Adapters never let exceptions escape :meth:`attempt`; instead they
    report ``success(matches)`` (possibly with zero matches) or
    ``failure(reason)``, and the resolver branches on :attr:`status`.
    """

    provider: str
    matches: tuple[GeocodeMatch, ...] = field(default_factory=tuple)
    reason: str | None = None

    @classmethod
    def success(cls, provider: str, matches: list[GeocodeMatch]) -> ProviderOutcome:
        return cls(provider=provider, matches=tuple(matches))

    @classmethod
    def failure(cls, provider: str, reason: str) -> ProviderOutcome:
        return cls(provider=provider, reason=reason)

    @property
    def status(self) -> OutcomeStatus:
        if self.reason is not None:
            return OutcomeStatus.FAILED
        if self.matches:
            return OutcomeStatus.MATCHED
        return OutcomeStatus.NO_MATCH

    @property
    def best(self) -> GeocodeMatch | None:
        """The first (highest-ranked) match, if any."""
        return self.matches[0] if self.matches else None


class LocationResolution(BaseModel):
    """Full answer for a free-text description.

    ``extracted_location`` is the place name the location extractor found, or
    ``None`` when extraction was skipped or found nothing -- in which case
    ``location_name`` is the original description itself.
    """

    model_config = ConfigDict(frozen=True)

    original_description: str
    extracted_location: str | None = None
    location_name: str
    latitude: float | None = None
    longitude: float | None = None
    formatted_address: str
    provider: str = NO_PROVIDER
    confidence: Confidence = Confidence.UNKNOWN

    @classmethod
    def build(
        cls,
        description: str,
        extracted: str | None,
        location_name: str,
        result: GeocodeResult,
    ) -> LocationResolution:
        return cls(
            original_description=description,
            extracted_location=extracted,
            location_name=location_name,
            **result.model_dump(),
        )
