"""
Domain value objects for proximity search.

``Coordinate`` validates itself on construction, so everything downstream
(distance, radius filter, bounding box) can assume well-formed input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable


class GeoValidationError(ValueError):
    """Base class for invalid geospatial input."""


class InvalidCoordinate(GeoValidationError):
    """Raised for a non-finite or out-of-range latitude / longitude."""


class InvalidRadius(GeoValidationError):
    """Raised for a negative or non-finite search radius."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        _check_component("latitude", self.latitude, 90.0)
        _check_component("longitude", self.longitude, 180.0)


def _check_component(name: str, value: float, limit: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidCoordinate(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidCoordinate(f"{name} must be finite, got {value!r}")
    if not -limit <= value <= limit:
        raise InvalidCoordinate(
            f"{name} must be between {-limit:g} and {limit:g}, got {value!r}"
        )


@dataclass(frozen=True)
class StationPoint:
    """A station identifier paired with its position. ``id`` is opaque."""

    id: Hashable
    coordinate: Coordinate


@dataclass(frozen=True)
class DistanceResult:
    station_id: Hashable
    distance_km: float


@dataclass(frozen=True)
class BoundingBox:
    """Lat/lng window; ``None`` longitude bounds mean "any longitude"."""

    min_lat: float
    max_lat: float
    min_lng: float | None = None
    max_lng: float | None = None

    @property
    def bounds_longitude(self) -> bool:
        return self.min_lng is not None and self.max_lng is not None

    def contains(self, point: Coordinate) -> bool:
        if not self.min_lat <= point.latitude <= self.max_lat:
            return False
        if not self.bounds_longitude:
            return True
        return self.min_lng <= point.longitude <= self.max_lng
