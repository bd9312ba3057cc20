"""
Weather data model.

WeatherSample is the weather at one forecast point. Optional fields are
real None values; FIELD_DEFAULTS is the one place that decides what a
consumer sees when a field is missing.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from app.shared.constants import AlertSeverity, AlertType


# Fallback policy for missing sample fields
FIELD_DEFAULTS: dict[str, Any] = {
    "wind_gust": None,
    "precipitation": 0.0,
    "precipitation_probability": 0.0,
    "uv_index": None,
    "cloud_cover": None,
    "weather_code": None,
    "weather_description": "Unknown",
}


@dataclass(frozen=True)
class WeatherSample:
    """
    Weather at a single forecast point and time.

    Units: temperature degC, humidity %, pressure hPa, wind km/h,
    direction degrees (0 = north), precipitation mm,
    probability 0-100 %, cloud cover %.
    """
    temperature: float
    feels_like: float
    humidity: float
    pressure: float
    wind_speed: float
    wind_direction: float
    wind_gust: Optional[float] = None
    precipitation: Optional[float] = None
    precipitation_probability: Optional[float] = None
    uv_index: Optional[float] = None
    cloud_cover: Optional[float] = None
    weather_code: Optional[int] = None
    weather_description: Optional[str] = None

    def value(self, name: str, default: Any = None) -> Any:
        """
        Field value with the shared fallback applied.

        An explicit default wins over FIELD_DEFAULTS.
        """
        raw = getattr(self, name)
        if raw is not None:
            return raw
        if default is not None:
            return default
        return FIELD_DEFAULTS.get(name)

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return asdict(self)


@dataclass(frozen=True)
class Alert:
    """A hazard detected at one forecast point."""
    type: AlertType
    point_index: int
    severity: AlertSeverity
    value: float
    message: str = ""

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return {
            "type": self.type.value,
            "point_index": self.point_index,
            "severity": self.severity.value,
            "value": self.value,
            "message": self.message,
        }


@dataclass
class AlertReport:
    """Alerts in point order plus the same alerts grouped by type."""
    alerts: list[Alert] = field(default_factory=list)
    by_type: dict[AlertType, list[Alert]] = field(default_factory=dict)

    @property
    def counts(self) -> dict[AlertType, int]:
        return {alert_type: len(items) for alert_type, items in self.by_type.items()}

    def by_severity(self) -> list[Alert]:
        """Most severe first, then route order."""
        return sorted(self.alerts, key=lambda a: (a.severity.rank, a.point_index))

    def for_point(self, index: int) -> list[Alert]:
        return [a for a in self.alerts if a.point_index == index]

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return {
            "alerts": [a.to_dict() for a in self.alerts],
            "counts": {t.value: n for t, n in self.counts.items()},
        }
