"""
Unified constants for route settings and weather hazards.

This module provides a single source of truth for the tunable limits
and alert thresholds used across the application.
"""

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Route Settings Bounds
# =============================================================================

MIN_WEATHER_INTERVAL_KM = 1
MAX_WEATHER_INTERVAL_KM = 20
DEFAULT_WEATHER_INTERVAL_KM = 5

MIN_AVG_SPEED_KMH = 5
MAX_AVG_SPEED_KMH = 50
DEFAULT_AVG_SPEED_KMH = 20


# =============================================================================
# Hazard Alerts
# =============================================================================

class AlertType(str, Enum):
    """Hazard conditions detected along the route."""
    EXTREME_HEAT = "extreme_heat"
    FREEZING = "freezing"
    HIGH_WIND = "high_wind"
    HEAVY_RAIN = "heavy_rain"


class AlertSeverity(str, Enum):
    """
    How loud an alert should be.

    Ordered from most to least severe.
    """
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """0 for the most severe level."""
        return list(AlertSeverity).index(self)


class Comparison(str, Enum):
    """Direction in which a threshold is crossed."""
    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class HazardThreshold:
    """
    A single hazard rule applied to one WeatherSample field.

    Boundary behaviour is explicit: with inclusive=False a value equal
    to the limit does not trigger.
    """
    field: str
    limit: float
    comparison: Comparison
    severity: AlertSeverity
    inclusive: bool = False

    def is_triggered(self, value: float) -> bool:
        if self.comparison == Comparison.ABOVE:
            return value >= self.limit if self.inclusive else value > self.limit
        return value <= self.limit if self.inclusive else value < self.limit


# Default rules. Units: degC, km/h, mm.
HAZARD_THRESHOLDS: dict[AlertType, HazardThreshold] = {
    AlertType.EXTREME_HEAT: HazardThreshold(
        field="temperature",
        limit=35.0,
        comparison=Comparison.ABOVE,
        severity=AlertSeverity.CRITICAL,
    ),
    AlertType.FREEZING: HazardThreshold(
        field="temperature",
        limit=0.0,
        comparison=Comparison.BELOW,
        severity=AlertSeverity.WARNING,
    ),
    AlertType.HIGH_WIND: HazardThreshold(
        field="wind_speed",
        limit=30.0,
        comparison=Comparison.ABOVE,
        severity=AlertSeverity.WARNING,
    ),
    AlertType.HEAVY_RAIN: HazardThreshold(
        field="precipitation",
        limit=5.0,
        comparison=Comparison.ABOVE,
        severity=AlertSeverity.INFO,
    ),
}
