"""
Route weather summary.

Aggregate figures over the resolved samples of a route. Missing points are
counted, never treated as zero.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .models import WeatherSample


@dataclass
class RouteWeatherSummary:
    """Summary statistics for a forecast."""
    resolved_points: int
    missing_points: int
    avg_temperature: Optional[float] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    max_wind_speed: Optional[float] = None
    max_wind_gust: Optional[float] = None
    max_precipitation_probability: Optional[float] = None
    total_precipitation: Optional[float] = None
    max_uv_index: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        def r(value: Optional[float]) -> Optional[float]:
            return round(value, 1) if value is not None else None

        return {
            "resolved_points": self.resolved_points,
            "missing_points": self.missing_points,
            "avg_temperature": r(self.avg_temperature),
            "min_temperature": r(self.min_temperature),
            "max_temperature": r(self.max_temperature),
            "max_wind_speed": r(self.max_wind_speed),
            "max_wind_gust": r(self.max_wind_gust),
            "max_precipitation_probability": r(self.max_precipitation_probability),
            "total_precipitation": r(self.total_precipitation),
            "max_uv_index": r(self.max_uv_index),
        }


def _max_of(samples: list[WeatherSample], name: str) -> Optional[float]:
    values = [getattr(s, name) for s in samples if getattr(s, name) is not None]
    return max(values) if values else None


def summarize(weather: Sequence[Optional[WeatherSample]]) -> RouteWeatherSummary:
    """
    Summarize weather along a route.

    Args:
        weather: One sample (or None) per forecast point

    Returns:
        RouteWeatherSummary; all figures are None when nothing resolved
    """
    samples = [s for s in weather if s is not None]
    summary = RouteWeatherSummary(
        resolved_points=len(samples),
        missing_points=len(weather) - len(samples),
    )
    if not samples:
        return summary

    temperatures = [s.temperature for s in samples]
    summary.avg_temperature = sum(temperatures) / len(temperatures)
    summary.min_temperature = min(temperatures)
    summary.max_temperature = max(temperatures)
    summary.max_wind_speed = _max_of(samples, "wind_speed")
    summary.max_wind_gust = _max_of(samples, "wind_gust")
    summary.max_precipitation_probability = _max_of(samples, "precipitation_probability")
    summary.total_precipitation = sum(s.value("precipitation") for s in samples)
    summary.max_uv_index = _max_of(samples, "uv_index")
    return summary
