"""
Route Sampler

Resamples a raw track into evenly spaced forecast points.
Used by ForecastSession before scheduling and weather enrichment.
"""

import bisect
import logging
from typing import List, Sequence

from app.shared.errors import SamplingError
from app.shared.geo import lerp
from .models import ForecastPoint, TrackPoint, check_interval

logger = logging.getLogger(__name__)


class RouteSampler:
    """
    Places forecast points every `interval_km` along a track.

    Targets are 0, I, 2I, ... up to the total distance L, plus a final
    point at exactly L when L is not a multiple of I. Positions between
    track points are linearly interpolated by cumulative distance.
    The first and last track points are always reproduced exactly.
    """

    @classmethod
    def sample(
        cls,
        track: Sequence[TrackPoint],
        interval_km: float
    ) -> List[ForecastPoint]:
        """
        Resample a track.

        Args:
            track: Ordered track points with cumulative distance
            interval_km: Spacing between forecast points (1-20 km)

        Returns:
            ForecastPoints without timestamps, index == position

        Raises:
            SamplingError: Fewer than two points or decreasing distances
            ValidationError: Interval out of range
        """
        distances = cls.check_track(track)
        check_interval(interval_km)

        total = distances[-1]
        targets = cls.target_distances(total, interval_km)

        points = [
            cls._point_at(track, distances, index, target)
            for index, target in enumerate(targets)
        ]

        logger.debug(
            f"Sampled {len(track)} track points into {len(points)} "
            f"forecast points ({total:.2f} km, every {interval_km} km)"
        )
        return points

    @classmethod
    def check_track(cls, track: Sequence[TrackPoint]) -> List[float]:
        """
        Make sure a track can be sampled.

        Returns:
            Cumulative distances of the track points

        Raises:
            SamplingError: Fewer than two points or decreasing distances
        """
        if len(track) < 2:
            raise SamplingError("insufficient route data")

        distances = [p.cumulative_distance_km for p in track]
        cls._check_monotonic(distances)
        return distances

    @staticmethod
    def target_distances(total_km: float, interval_km: float) -> List[float]:
        """Distances at which forecast points are placed."""
        if total_km <= 0:
            return [0.0]

        targets = []
        step = 0
        while step * interval_km <= total_km:
            targets.append(step * interval_km)
            step += 1

        if targets[-1] < total_km:
            targets.append(total_km)

        return targets

    @staticmethod
    def _check_monotonic(distances: List[float]) -> None:
        for i in range(1, len(distances)):
            if distances[i] < distances[i - 1]:
                raise SamplingError(
                    f"Track distance decreases at point {i} "
                    f"({distances[i - 1]:.3f} -> {distances[i]:.3f} km)"
                )

    @classmethod
    def _point_at(
        cls,
        track: Sequence[TrackPoint],
        distances: List[float],
        index: int,
        target: float
    ) -> ForecastPoint:
        """Interpolate a ForecastPoint at `target` km along the track."""
        # Endpoints are copied, not interpolated
        if index == 0:
            return cls._from_track_point(track[0], index, target)
        if target >= distances[-1]:
            return cls._from_track_point(track[-1], index, distances[-1])

        # Bracketing pair: distances[i] <= target < distances[i + 1]
        i = bisect.bisect_right(distances, target) - 1
        i = max(0, min(i, len(track) - 2))
        start, end = track[i], track[i + 1]

        span = distances[i + 1] - distances[i]
        fraction = (target - distances[i]) / span if span > 0 else 0.0

        return ForecastPoint(
            index=index,
            lat=lerp(start.lat, end.lat, fraction),
            lon=lerp(start.lon, end.lon, fraction),
            elevation=lerp(start.elevation, end.elevation, fraction),
            distance_km=target,
        )

    @staticmethod
    def _from_track_point(
        point: TrackPoint,
        index: int,
        distance_km: float
    ) -> ForecastPoint:
        return ForecastPoint(
            index=index,
            lat=point.lat,
            lon=point.lon,
            elevation=point.elevation,
            distance_km=distance_km,
        )
