"""
Route forecast module.

Usage:
    from app.features.forecast import RouteSampler, ForecastScheduler
    from app.features.forecast.service import ForecastSession

Components:
- TrackPoint / ForecastPoint / RouteSettings: data model
- RouteSampler: evenly spaced forecast points along a track
- ForecastScheduler: arrival time per point
- SelectionCoordinator: shared selected point
- ForecastSession (service.py): generation lifecycle, imported directly
  because it depends on app.features.weather, which depends on this package
"""

from .models import (
    TrackPoint,
    ForecastPoint,
    RouteSettings,
    ForecastStatus,
)
from .sampler import RouteSampler
from .scheduler import ForecastScheduler
from .selection import SelectionCoordinator

__all__ = [
    # Models
    "TrackPoint",
    "ForecastPoint",
    "RouteSettings",
    "ForecastStatus",
    # Services
    "RouteSampler",
    "ForecastScheduler",
    "SelectionCoordinator",
]
