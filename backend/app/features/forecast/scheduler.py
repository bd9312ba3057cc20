"""
Forecast Scheduler

Assigns projected arrival times to forecast points.
"""

from datetime import datetime, timedelta
from typing import List, Sequence

from .models import ForecastPoint, check_speed


class ForecastScheduler:
    """Constant-speed arrival model: t = start + distance / speed."""

    @staticmethod
    def arrival_time(
        start_time: datetime,
        distance_km: float,
        avg_speed_kmh: float
    ) -> datetime:
        """Arrival time at `distance_km` from the start."""
        check_speed(avg_speed_kmh)
        return start_time + timedelta(hours=distance_km / avg_speed_kmh)

    @classmethod
    def schedule(
        cls,
        points: Sequence[ForecastPoint],
        start_time: datetime,
        avg_speed_kmh: float
    ) -> List[ForecastPoint]:
        """
        Stamp every point with its arrival time.

        Args:
            points: Sampled forecast points
            start_time: Departure time
            avg_speed_kmh: Average moving speed, must be > 0

        Returns:
            New ForecastPoints with timestamps; input is not modified

        Raises:
            ValidationError: If avg_speed_kmh <= 0
        """
        check_speed(avg_speed_kmh)
        return [
            p.with_timestamp(cls.arrival_time(start_time, p.distance_km, avg_speed_kmh))
            for p in points
        ]
