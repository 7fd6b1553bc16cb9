"""Unit tests for the geocoding and cache domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from georesolve.models.cache import CacheEntry
from georesolve.models.geocode import (
    NO_PROVIDER,
    Confidence,
    GeocodeMatch,
    GeocodeResult,
    LocationResolution,
    OutcomeStatus,
    ProviderOutcome,
)


# ======================================================================
# Confidence
# ======================================================================


class TestConfidence:
    def test_ordinal_ordering(self) -> None:
        assert Confidence.UNKNOWN < Confidence.LOW < Confidence.MEDIUM < Confidence.HIGH
        assert Confidence.HIGH >= Confidence.HIGH
        assert max([Confidence.LOW, Confidence.HIGH, Confidence.MEDIUM]) is Confidence.HIGH

    def test_values_serialize_lowercase(self) -> None:
        assert Confidence.HIGH.value == "high"
        assert Confidence("unknown") is Confidence.UNKNOWN


# ======================================================================
# GeocodeResult
# ======================================================================


class TestGeocodeResult:
    def test_from_match(self) -> None:
        match = GeocodeMatch(40.715, -73.98, "Lower East Side, NY", Confidence.HIGH)
        result = GeocodeResult.from_match(match, provider="google_maps")

        assert result.latitude == 40.715
        assert result.longitude == -73.98
        assert result.provider == "google_maps"
        assert result.confidence is Confidence.HIGH
        assert result.is_resolved is True

    def test_unresolved(self) -> None:
        result = GeocodeResult.unresolved("Nowhereland")

        assert result.latitude is None
        assert result.longitude is None
        assert result.formatted_address == "Nowhereland"
        assert result.provider == NO_PROVIDER
        assert result.confidence is Confidence.UNKNOWN
        assert result.is_resolved is False

    def test_coordinates_must_be_paired(self) -> None:
        with pytest.raises(ValidationError):
            GeocodeResult(latitude=10.0, formatted_address="half")

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.1), (0.0, -181.0)],
    )
    def test_out_of_range_coordinates_rejected(self, lat: float, lon: float) -> None:
        with pytest.raises(ValidationError):
            GeocodeResult(latitude=lat, longitude=lon, formatted_address="x")

    def test_json_round_trip_through_cache_payload(self) -> None:
        original = GeocodeResult(
            latitude=48.8566,
            longitude=2.3522,
            formatted_address="Paris, France",
            provider="mapbox",
            confidence=Confidence.MEDIUM,
        )
        payload = original.model_dump(mode="json")

        assert payload["confidence"] == "medium"
        assert GeocodeResult.model_validate(payload) == original

    def test_frozen(self) -> None:
        result = GeocodeResult.unresolved("x")
        with pytest.raises(ValidationError):
            result.provider = "mapbox"  # type: ignore[misc]


# ======================================================================
# ProviderOutcome
# ======================================================================


class TestProviderOutcome:
    def test_matched(self) -> None:
        match = GeocodeMatch(1.0, 2.0, "A")
        outcome = ProviderOutcome.success("mapbox", [match, GeocodeMatch(3.0, 4.0, "B")])
        assert outcome.status is OutcomeStatus.MATCHED
        assert outcome.best == match

    def test_no_match(self) -> None:
        outcome = ProviderOutcome.success("mapbox", [])
        assert outcome.status is OutcomeStatus.NO_MATCH
        assert outcome.best is None

    def test_failed(self) -> None:
        outcome = ProviderOutcome.failure("mapbox", "HTTP 500")
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.reason == "HTTP 500"


# ======================================================================
# LocationResolution
# ======================================================================


class TestLocationResolution:
    def test_build_copies_geocode_fields(self) -> None:
        result = GeocodeResult(
            latitude=40.715,
            longitude=-73.98,
            formatted_address="Lower East Side",
            provider="google_maps",
            confidence=Confidence.HIGH,
        )
        resolution = LocationResolution.build(
            "Flooding near Lower East Side", "Lower East Side", "Lower East Side", result
        )

        assert resolution.original_description == "Flooding near Lower East Side"
        assert resolution.extracted_location == "Lower East Side"
        assert resolution.latitude == 40.715
        assert resolution.provider == "google_maps"
        assert resolution.confidence is Confidence.HIGH


# ======================================================================
# CacheEntry
# ======================================================================


class TestCacheEntry:
    def test_expiry_boundary_is_inclusive(self) -> None:
        entry = CacheEntry(key="k", value=1, expires_at=100.0)
        assert entry.is_expired(99.9) is False
        assert entry.is_expired(100.0) is True
        assert entry.is_expired(150.0) is True
