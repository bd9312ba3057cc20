"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import haversine, ValidationError
    from app.shared.constants import HAZARD_THRESHOLDS
"""
from .geo import (
    haversine,
    cumulative_distances,
    lerp,
    EARTH_RADIUS_KM,
)
from .formatters import (
    format_distance_km,
    format_temperature,
    format_wind_speed,
)
from .constants import (
    AlertType,
    AlertSeverity,
    HazardThreshold,
    HAZARD_THRESHOLDS,
)
from .errors import (
    ForecastError,
    ValidationError,
    SamplingError,
    ProviderError,
    MismatchError,
    ensure_aligned,
)

__all__ = [
    # geo
    "haversine",
    "cumulative_distances",
    "lerp",
    "EARTH_RADIUS_KM",
    # formatters
    "format_distance_km",
    "format_temperature",
    "format_wind_speed",
    # constants
    "AlertType",
    "AlertSeverity",
    "HazardThreshold",
    "HAZARD_THRESHOLDS",
    # errors
    "ForecastError",
    "ValidationError",
    "SamplingError",
    "ProviderError",
    "MismatchError",
    "ensure_aligned",
]
