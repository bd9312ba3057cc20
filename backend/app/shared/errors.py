"""
Forecast pipeline exceptions.

Validation and sampling errors abort a generation. Provider errors are
recovered per point and only surfaced in aggregate. Mismatch errors mean
an internal invariant was broken.
"""

from typing import Optional


class ForecastError(Exception):
    """Base forecast error."""
    pass


class ValidationError(ForecastError):
    """Route settings are malformed (speed, interval)."""
    pass


class SamplingError(ForecastError):
    """Track cannot be sampled (empty or degenerate)."""
    pass


class ProviderError(ForecastError):
    """
    Weather provider failed.

    status_code is set for HTTP failures, failed_points for the aggregate
    error raised when every point failed.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        failed_points: int = 0
    ):
        super().__init__(message)
        self.status_code = status_code
        self.failed_points = failed_points


class MismatchError(ForecastError):
    """Forecast points and weather slots are out of alignment."""

    def __init__(self, points_count: int, weather_count: int):
        super().__init__(
            f"Forecast points ({points_count}) and weather slots "
            f"({weather_count}) diverged"
        )
        self.points_count = points_count
        self.weather_count = weather_count


def ensure_aligned(points: list, weather: list) -> None:
    """Raise MismatchError unless both lists have the same length."""
    if len(points) != len(weather):
        raise MismatchError(len(points), len(weather))
