"""Unit tests for radius filtering, stable sorting and the composed search."""

import math

import pytest

from src.domain.distance import EARTH_RADIUS_KM, haversine_km
from src.domain.entities import (
    Coordinate,
    DistanceResult,
    InvalidRadius,
    StationPoint,
)
from src.domain.proximity import (
    filter_by_radius,
    measure_distances,
    search,
    sort_by_distance,
)

REFERENCE = Coordinate(0.0, 0.0)


def _north_of_reference(km: float) -> Coordinate:
    """A point *km* due north of REFERENCE along the prime meridian."""
    return Coordinate(math.degrees(km / EARTH_RADIUS_KM), 0.0)


@pytest.fixture
def ladder() -> list[StationPoint]:
    """Points at 0, 5, 10, 15, 20 km, deliberately listed out of order."""
    return [
        StationPoint(id="s15", coordinate=_north_of_reference(15)),
        StationPoint(id="s0", coordinate=_north_of_reference(0)),
        StationPoint(id="s10", coordinate=_north_of_reference(10)),
        StationPoint(id="s20", coordinate=_north_of_reference(20)),
        StationPoint(id="s5", coordinate=_north_of_reference(5)),
    ]


class TestFilterByRadius:
    def test_keeps_points_within_radius_in_input_order(self, ladder):
        ten_km = haversine_km(REFERENCE, ladder[2].coordinate)
        assert ten_km == pytest.approx(10.0)

        results = filter_by_radius(REFERENCE, ladder, ten_km)

        assert [r.station_id for r in results] == ["s0", "s10", "s5"]

    def test_boundary_is_inclusive(self):
        point = StationPoint(id=1, coordinate=Coordinate(0.0, 1.0))
        exact = haversine_km(REFERENCE, point.coordinate)
        assert filter_by_radius(REFERENCE, [point], exact)[0].station_id == 1

    def test_results_carry_distances(self, ladder):
        results = filter_by_radius(REFERENCE, ladder, 12)
        by_id = {r.station_id: r.distance_km for r in results}
        assert by_id["s0"] == 0.0
        assert by_id["s5"] == pytest.approx(5.0)
        assert by_id["s10"] == pytest.approx(10.0)

    def test_empty_input(self):
        assert filter_by_radius(REFERENCE, [], 50) == []

    def test_zero_radius_keeps_only_colocated_points(self, ladder):
        assert [r.station_id for r in filter_by_radius(REFERENCE, ladder, 0)] == ["s0"]

    def test_accepts_generators(self, ladder):
        results = filter_by_radius(REFERENCE, (p for p in ladder), 100)
        assert len(results) == 5

    def test_does_not_mutate_input(self, ladder):
        before = list(ladder)
        filter_by_radius(REFERENCE, ladder, 7)
        assert ladder == before

    @pytest.mark.parametrize("radius", [-1, -0.0001, math.inf, math.nan, "10", True])
    def test_rejects_invalid_radius(self, ladder, radius):
        with pytest.raises(InvalidRadius):
            filter_by_radius(REFERENCE, ladder, radius)


class TestSortByDistance:
    def test_ascending(self):
        results = [
            DistanceResult("far", 20.0),
            DistanceResult("near", 1.0),
            DistanceResult("mid", 7.5),
        ]
        assert [r.station_id for r in sort_by_distance(results)] == ["near", "mid", "far"]

    def test_ties_keep_input_order(self):
        same_spot = Coordinate(10.0, 10.0)
        points = [
            StationPoint(id="b", coordinate=same_spot),
            StationPoint(id="z", coordinate=Coordinate(11.0, 10.0)),
            StationPoint(id="a", coordinate=same_spot),
        ]
        ordered = sort_by_distance(measure_distances(REFERENCE, points))
        assert [r.station_id for r in ordered] == ["b", "a", "z"]

    def test_returns_new_list(self):
        results = [DistanceResult(2, 2.0), DistanceResult(1, 1.0)]
        ordered = sort_by_distance(results)
        assert ordered is not results
        assert [r.station_id for r in results] == [2, 1]

    def test_empty(self):
        assert sort_by_distance([]) == []


class TestSearch:
    def test_reference_only_attaches_distances_without_reordering(self, ladder):
        results = search(REFERENCE, ladder)
        assert [r.station_id for r in results] == ["s15", "s0", "s10", "s20", "s5"]
        assert results[0].distance_km == pytest.approx(15.0)

    def test_reference_and_radius_filters_then_sorts(self, ladder):
        results = search(REFERENCE, ladder, radius_km=16)
        assert [r.station_id for r in results] == ["s0", "s5", "s10", "s15"]

    def test_radius_is_validated(self, ladder):
        with pytest.raises(InvalidRadius):
            search(REFERENCE, ladder, radius_km=-5)

    def test_empty(self):
        assert search(REFERENCE, [], radius_km=10) == []
        assert search(REFERENCE, []) == []
