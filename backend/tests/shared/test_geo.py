"""
Tests for shared geographic functions.

Tests the haversine distance, cumulative distance and interpolation helpers.
"""

import pytest

from app.shared.geo import (
    haversine,
    cumulative_distances,
    lerp,
    EARTH_RADIUS_KM,
)


# =============================================================================
# Test Haversine Distance
# =============================================================================

class TestHaversine:
    """Tests for haversine function."""

    def test_same_point(self):
        """Distance between same point should be 0."""
        dist = haversine(43.0, 76.0, 43.0, 76.0)
        assert dist == 0.0

    def test_known_distance_almaty_astana(self):
        """Test with known distance (Almaty to Astana ~974km)."""
        dist = haversine(43.238949, 76.945465, 51.169392, 71.449074)
        assert 950 < dist < 1000

    def test_symmetry(self):
        """Distance A->B should equal B->A."""
        dist_ab = haversine(43.0, 76.0, 44.0, 77.0)
        dist_ba = haversine(44.0, 77.0, 43.0, 76.0)
        assert dist_ab == pytest.approx(dist_ba, rel=0.0001)

    def test_north_south_distance(self):
        """1 degree latitude ≈ 111 km everywhere."""
        dist = haversine(0.0, 0.0, 1.0, 0.0)
        assert 110 < dist < 112

    def test_antimeridian(self):
        """Test distance across the antimeridian (180° longitude)."""
        dist = haversine(0.0, 179.0, 0.0, -179.0)
        assert 220 < dist < 225

    def test_earth_radius_constant(self):
        assert EARTH_RADIUS_KM == 6371.0


# =============================================================================
# Test Cumulative Distances
# =============================================================================

class TestCumulativeDistances:
    """Tests for cumulative_distances function."""

    def test_empty_list(self):
        assert cumulative_distances([]) == []

    def test_single_point(self):
        """Single point is at distance zero."""
        assert cumulative_distances([(43.0, 76.0, 1000)]) == [0.0]

    def test_running_sum(self):
        """Each value adds the leg to the previous point."""
        points = [
            (43.0, 76.0, 1000),
            (43.001, 76.0, 1000),
            (43.002, 76.0, 1000),
        ]
        dists = cumulative_distances(points)

        assert dists[0] == 0.0
        leg = haversine(43.0, 76.0, 43.001, 76.0)
        assert dists[1] == pytest.approx(leg)
        assert dists[2] == pytest.approx(2 * leg, rel=0.001)

    def test_non_decreasing(self):
        """Out-and-back route still has growing distance."""
        points = [
            (43.0, 76.0, 1000),
            (43.01, 76.0, 1000),
            (43.0, 76.0, 1000),
        ]
        dists = cumulative_distances(points)
        assert dists == sorted(dists)
        assert dists[-1] == pytest.approx(2 * dists[1], rel=0.001)

    def test_elevation_ignored(self):
        flat = cumulative_distances([(43.0, 76.0, 0), (43.01, 76.0, 0)])
        climb = cumulative_distances([(43.0, 76.0, 0), (43.01, 76.0, 2000)])
        assert flat[-1] == pytest.approx(climb[-1])


# =============================================================================
# Test Lerp
# =============================================================================

class TestLerp:
    """Tests for lerp function."""

    def test_endpoints(self):
        assert lerp(10.0, 20.0, 0.0) == 10.0
        assert lerp(10.0, 20.0, 1.0) == 20.0

    def test_midpoint(self):
        assert lerp(10.0, 20.0, 0.5) == pytest.approx(15.0)

    def test_descending(self):
        assert lerp(100.0, 0.0, 0.25) == pytest.approx(75.0)
