"""
Forecast data model.

Plain dataclasses shared by the sampler, scheduler and session.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from app.shared.constants import (
    MIN_WEATHER_INTERVAL_KM,
    MAX_WEATHER_INTERVAL_KM,
    MIN_AVG_SPEED_KMH,
    MAX_AVG_SPEED_KMH,
    DEFAULT_WEATHER_INTERVAL_KM,
    DEFAULT_AVG_SPEED_KMH,
)
from app.shared.errors import ValidationError


@dataclass(frozen=True)
class TrackPoint:
    """A raw point of the uploaded track."""
    lat: float
    lon: float
    elevation: float
    cumulative_distance_km: float = 0.0


@dataclass(frozen=True)
class ForecastPoint:
    """
    A resampled location at which weather is evaluated.

    timestamp stays None until the point is scheduled.
    """
    index: int
    lat: float
    lon: float
    elevation: float
    distance_km: float
    timestamp: Optional[datetime] = None

    def with_timestamp(self, timestamp: datetime) -> "ForecastPoint":
        return replace(self, timestamp=timestamp)

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return {
            "index": self.index,
            "lat": self.lat,
            "lon": self.lon,
            "elevation": round(self.elevation, 1),
            "distance_km": round(self.distance_km, 3),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


def check_interval(interval_km: float) -> None:
    """Raise ValidationError unless the sampling interval is in range."""
    if not (MIN_WEATHER_INTERVAL_KM <= interval_km <= MAX_WEATHER_INTERVAL_KM):
        raise ValidationError(
            f"Weather interval must be between {MIN_WEATHER_INTERVAL_KM} and "
            f"{MAX_WEATHER_INTERVAL_KM} km, got {interval_km}"
        )


def check_speed(avg_speed_kmh: float) -> None:
    """Raise ValidationError unless the speed is positive."""
    if avg_speed_kmh <= 0:
        raise ValidationError(
            f"Average speed must be positive, got {avg_speed_kmh}"
        )


@dataclass(frozen=True)
class RouteSettings:
    """User choices that drive a forecast generation."""
    start_time: datetime
    weather_interval_km: float = DEFAULT_WEATHER_INTERVAL_KM
    avg_speed_kmh: float = DEFAULT_AVG_SPEED_KMH

    def validate(self) -> "RouteSettings":
        """
        Check every field against its allowed range.

        Returns:
            self, so calls can be chained

        Raises:
            ValidationError: On the first field out of range
        """
        if not isinstance(self.start_time, datetime):
            raise ValidationError("Start time must be a datetime")

        check_interval(self.weather_interval_km)
        check_speed(self.avg_speed_kmh)

        if not (MIN_AVG_SPEED_KMH <= self.avg_speed_kmh <= MAX_AVG_SPEED_KMH):
            raise ValidationError(
                f"Average speed must be between {MIN_AVG_SPEED_KMH} and "
                f"{MAX_AVG_SPEED_KMH} km/h, got {self.avg_speed_kmh}"
            )
        return self


class ForecastStatus(str, Enum):
    """Lifecycle of one forecast generation."""
    EMPTY = "empty"
    SAMPLING = "sampling"
    SCHEDULED = "scheduled"
    ENRICHING = "enriching"
    READY = "ready"
    ERROR = "error"
