"""
Distance calculation using the Haversine formula.

Assumption
----------
Stations are compared by great-circle distance on a spherical Earth of
mean radius 6371 km.  That is accurate to well under 0.5 % which is plenty
for "nearest charger" listings; no road routing is involved.

Complexity: O(1) per call.
"""

import math

from .entities import BoundingBox, Coordinate

EARTH_RADIUS_KM = 6_371.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(a.latitude), math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # rounding can push h just outside [0, 1] at identical / antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """
    Smallest lat/lng window guaranteed to contain the circle of
    *radius_km* around *center*.

    Used as a cheap index-friendly pre-filter only; callers must still
    apply ``haversine_km`` to the candidates.  When the circle reaches a
    pole or crosses the antimeridian the longitude bound is dropped, so
    the box may over-include but never excludes a point inside the circle.
    """
    angular = radius_km / EARTH_RADIUS_KM
    delta_lat = math.degrees(angular)
    min_lat = center.latitude - delta_lat
    max_lat = center.latitude + delta_lat

    if min_lat <= -90.0 or max_lat >= 90.0:
        return BoundingBox(min_lat=max(min_lat, -90.0), max_lat=min(max_lat, 90.0))

    delta_lng = math.degrees(
        math.asin(math.sin(angular) / math.cos(math.radians(center.latitude)))
    )
    min_lng = center.longitude - delta_lng
    max_lng = center.longitude + delta_lng
    if min_lng < -180.0 or max_lng > 180.0:
        return BoundingBox(min_lat=min_lat, max_lat=max_lat)

    return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)
