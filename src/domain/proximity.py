"""
Proximity filtering of charging stations around a reference point.

All functions are pure: they read the caller's points, never mutate them,
and return fresh ``DistanceResult`` lists.  Input order is preserved
unless a sort is explicitly requested, and the sort is stable so stations
at identical distances keep their original relative order.
"""

from __future__ import annotations

import math
from operator import attrgetter
from typing import Iterable, Optional, Sequence

from .distance import haversine_km
from .entities import Coordinate, DistanceResult, InvalidRadius, StationPoint


def validate_radius(radius_km: float) -> float:
    if isinstance(radius_km, bool) or not isinstance(radius_km, (int, float)):
        raise InvalidRadius(f"radius must be a number, got {radius_km!r}")
    if not math.isfinite(radius_km) or radius_km < 0:
        raise InvalidRadius(
            f"radius must be a non-negative finite number, got {radius_km!r}"
        )
    return float(radius_km)


def measure_distances(
    reference: Coordinate, points: Iterable[StationPoint]
) -> list[DistanceResult]:
    """Pair every point with its distance from *reference*, in input order."""
    return [
        DistanceResult(station_id=p.id, distance_km=haversine_km(reference, p.coordinate))
        for p in points
    ]


def filter_by_radius(
    reference: Coordinate, points: Iterable[StationPoint], radius_km: float
) -> list[DistanceResult]:
    """Keep points within *radius_km* (inclusive), in input order."""
    radius_km = validate_radius(radius_km)
    return [
        r for r in measure_distances(reference, points) if r.distance_km <= radius_km
    ]


def sort_by_distance(results: Iterable[DistanceResult]) -> list[DistanceResult]:
    """Nearest first; ties keep their relative order."""
    return sorted(results, key=attrgetter("distance_km"))


def search(
    reference: Coordinate,
    points: Sequence[StationPoint],
    radius_km: Optional[float] = None,
) -> list[DistanceResult]:
    """
    Read-path composition used by the station listing.

    With a radius: filter to the radius, then sort nearest first.
    Without one: attach distances for display, keeping input order.
    """
    if radius_km is None:
        return measure_distances(reference, points)
    return sort_by_distance(filter_by_radius(reference, points, radius_km))
