"""
Weather module.

Usage:
    from app.features.weather import WeatherEnrichment, AlertDetector
    from app.features.weather import get_weather_provider

Components:
- WeatherSample / Alert / AlertReport: data model
- WeatherProvider: OpenMeteoProvider, MockWeatherProvider
- WeatherEnrichment: bounded, retrying, generation-aware fetching
- AlertDetector: hazard thresholds
- summarize: route-level statistics
"""

from .models import WeatherSample, Alert, AlertReport, FIELD_DEFAULTS
from .providers import (
    WeatherProvider,
    OpenMeteoProvider,
    MockWeatherProvider,
    get_weather_provider,
)
from .enrichment import (
    WeatherEnrichment,
    EnrichmentResult,
    GenerationGuard,
    WeatherCache,
    get_weather_cache,
)
from .alerts import AlertDetector
from .summary import RouteWeatherSummary, summarize

__all__ = [
    # Models
    "WeatherSample",
    "Alert",
    "AlertReport",
    "FIELD_DEFAULTS",
    # Providers
    "WeatherProvider",
    "OpenMeteoProvider",
    "MockWeatherProvider",
    "get_weather_provider",
    # Enrichment
    "WeatherEnrichment",
    "EnrichmentResult",
    "GenerationGuard",
    "WeatherCache",
    "get_weather_cache",
    # Alerts
    "AlertDetector",
    # Summary
    "RouteWeatherSummary",
    "summarize",
]
