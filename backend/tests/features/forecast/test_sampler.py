"""
Tests for RouteSampler.

Tests point count, endpoint handling, interpolation and edge cases.
"""

import math

import pytest

from app.features.forecast import RouteSampler, TrackPoint
from app.shared.errors import SamplingError, ValidationError


# =============================================================================
# Test Data
# =============================================================================

def make_track(distances, elevations=None):
    """Straight northbound track with the given cumulative distances."""
    elevations = elevations or [1000.0] * len(distances)
    return [
        TrackPoint(
            lat=43.0 + d / 111.0,
            lon=76.0,
            elevation=ele,
            cumulative_distance_km=d,
        )
        for d, ele in zip(distances, elevations)
    ]


# Two-point line: lat/lon/elevation all move linearly over 10 km
LINE_TRACK = [
    TrackPoint(lat=0.0, lon=0.0, elevation=100.0, cumulative_distance_km=0.0),
    TrackPoint(lat=1.0, lon=2.0, elevation=200.0, cumulative_distance_km=10.0),
]


# =============================================================================
# Test Point Count
# =============================================================================

class TestPointCount:
    """Number of forecast points for length L and interval I."""

    def test_not_multiple_adds_endpoint(self):
        """23 km every 5 km: 0, 5, 10, 15, 20 and 23."""
        points = RouteSampler.sample(make_track([0, 7, 14, 23]), 5)

        assert [p.distance_km for p in points] == [0, 5, 10, 15, 20, 23]

    def test_exact_multiple(self):
        """20 km every 5 km: last target already lands on the end."""
        points = RouteSampler.sample(make_track([0, 8, 20]), 5)

        assert len(points) == 5
        assert points[-1].distance_km == 20

    def test_interval_longer_than_route(self):
        """Interval >= L gives exactly start and end."""
        points = RouteSampler.sample(make_track([0, 1, 3]), 5)

        assert len(points) == 2
        assert points[0].distance_km == 0
        assert points[1].distance_km == 3

    def test_interval_equal_to_route(self):
        points = RouteSampler.sample(make_track([0, 2, 5]), 5)

        assert [p.distance_km for p in points] == [0, 5]

    @pytest.mark.parametrize("total", [1.0, 4.5, 10.0, 12.3, 37.0, 100.0])
    @pytest.mark.parametrize("interval", [1, 3, 5, 20])
    def test_count_formula(self, total, interval):
        """floor(L/I) + 1, plus one when L is not a multiple of I."""
        points = RouteSampler.sample(make_track([0, total / 2, total]), interval)

        expected = math.floor(total / interval) + 1
        if (expected - 1) * interval < total:
            expected += 1

        assert len(points) == expected
        assert points[-1].distance_km == total


# =============================================================================
# Test Endpoints and Interpolation
# =============================================================================

class TestInterpolation:
    """Positions between track points."""

    def test_midpoint(self):
        """Halfway along a segment is halfway in lat, lon and elevation."""
        points = RouteSampler.sample(LINE_TRACK, 5)

        mid = points[1]
        assert mid.distance_km == 5
        assert mid.lat == pytest.approx(0.5)
        assert mid.lon == pytest.approx(1.0)
        assert mid.elevation == pytest.approx(150.0)

    def test_endpoints_copied_exactly(self):
        """First and last track points appear unchanged."""
        track = make_track([0, 3.3, 6.7, 11.1], [900.0, 950.0, 1010.0, 1200.0])
        points = RouteSampler.sample(track, 5)

        first, last = points[0], points[-1]
        assert (first.lat, first.lon, first.elevation) == (track[0].lat, track[0].lon, 900.0)
        assert (last.lat, last.lon, last.elevation) == (track[-1].lat, track[-1].lon, 1200.0)
        assert last.distance_km == 11.1

    def test_bracketing_segment(self):
        """Target is interpolated within the segment that contains it."""
        track = make_track([0, 4, 8], [0.0, 400.0, 0.0])
        points = RouteSampler.sample(track, 5)

        # 5 km is a quarter of the way into the descending 4-8 km segment
        assert points[1].elevation == pytest.approx(300.0)

    def test_target_on_track_point(self):
        """Target that coincides with a track point takes its values."""
        track = make_track([0, 5, 10], [100.0, 555.0, 100.0])
        points = RouteSampler.sample(track, 5)

        assert points[1].elevation == pytest.approx(555.0)
        assert points[1].lat == pytest.approx(track[1].lat)

    def test_zero_length_segment(self):
        """Duplicate distances (GPS pause) do not divide by zero."""
        track = make_track([0, 2, 2, 2, 9])
        points = RouteSampler.sample(track, 5)

        assert [p.distance_km for p in points] == [0, 5, 9]
        assert all(math.isfinite(p.lat) for p in points)


# =============================================================================
# Test Invariants
# =============================================================================

class TestInvariants:
    """Ordering, indexing, determinism."""

    def test_dense_indices(self):
        points = RouteSampler.sample(make_track([0, 10, 42]), 3)
        assert [p.index for p in points] == list(range(len(points)))

    def test_non_decreasing_distance(self):
        points = RouteSampler.sample(make_track([0, 10, 42]), 3)
        distances = [p.distance_km for p in points]
        assert distances == sorted(distances)

    def test_no_timestamps_yet(self):
        points = RouteSampler.sample(LINE_TRACK, 5)
        assert all(p.timestamp is None for p in points)

    def test_deterministic(self):
        """Same track and interval always give identical points."""
        track = make_track([0, 3.7, 9.2, 15.5], [100.0, 180.0, 90.0, 300.0])

        first = RouteSampler.sample(track, 2)
        second = RouteSampler.sample(track, 2)

        assert first == second


# =============================================================================
# Test Edge Cases
# =============================================================================

class TestEdgeCases:
    """Degenerate input."""

    def test_single_point(self):
        with pytest.raises(SamplingError, match="insufficient route data"):
            RouteSampler.sample(make_track([0]), 5)

    def test_empty_track(self):
        with pytest.raises(SamplingError):
            RouteSampler.sample([], 5)

    def test_zero_length_loop(self):
        """L = 0 gives one point at distance 0."""
        points = RouteSampler.sample(make_track([0, 0, 0]), 5)

        assert len(points) == 1
        assert points[0].distance_km == 0
        assert points[0].index == 0

    def test_decreasing_distance(self):
        with pytest.raises(SamplingError):
            RouteSampler.sample(make_track([0, 5, 3]), 1)

    @pytest.mark.parametrize("interval", [0, 0.5, 21, -5])
    def test_interval_out_of_range(self, interval):
        with pytest.raises(ValidationError):
            RouteSampler.sample(make_track([0, 10]), interval)

    def test_target_distances(self):
        assert RouteSampler.target_distances(0, 5) == [0.0]
        assert RouteSampler.target_distances(7, 5) == [0, 5, 7]
