"""
Weather providers.

A provider turns (lat, lon, time) into a WeatherSample or raises
ProviderError. Retry, deduplication and concurrency are handled by
WeatherEnrichment, not here.

Providers:
- OpenMeteoProvider: hourly forecast from api.open-meteo.com (no API key)
- MockWeatherProvider: deterministic offline data for development and tests
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

import httpx

from app.config import settings
from app.shared.errors import ProviderError
from .models import WeatherSample

logger = logging.getLogger(__name__)


# WMO weather interpretation codes used by Open-Meteo
WMO_DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def describe_weather_code(code: Optional[int]) -> str:
    """Human readable text for a WMO code."""
    if code is None:
        return "Unknown"
    return WMO_DESCRIPTIONS.get(code, "Unknown")


def as_utc(timestamp: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


class WeatherProvider(ABC):
    """Source of weather samples."""

    name: str = "base"

    @abstractmethod
    async def fetch(
        self,
        lat: float,
        lon: float,
        timestamp: datetime
    ) -> WeatherSample:
        """
        Get weather at a place and time.

        Raises:
            ProviderError: If no sample can be produced
        """

    async def aclose(self) -> None:
        """Release network resources, if any."""
        return None


# =============================================================================
# Open-Meteo
# =============================================================================

class OpenMeteoProvider(WeatherProvider):
    """
    Async client for the Open-Meteo hourly forecast API.

    Requests one UTC day of hourly data and picks the hour nearest to the
    requested time.

    Usage:
        provider = OpenMeteoProvider()
        sample = await provider.fetch(43.23, 76.94, datetime.now(timezone.utc))
    """

    name = "open_meteo"

    HOURLY_FIELDS = (
        "temperature_2m",
        "apparent_temperature",
        "relative_humidity_2m",
        "surface_pressure",
        "wind_speed_10m",
        "wind_direction_10m",
        "wind_gusts_10m",
        "precipitation",
        "precipitation_probability",
        "uv_index",
        "cloud_cover",
        "weather_code",
    )

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url or settings.weather_api_url
        self.timeout = timeout or settings.weather_request_timeout_seconds
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self,
        lat: float,
        lon: float,
        timestamp: datetime
    ) -> WeatherSample:
        when = as_utc(timestamp)
        day = when.date().isoformat()
        params = {
            "latitude": round(lat, 4),
            "longitude": round(lon, 4),
            "hourly": ",".join(self.HOURLY_FIELDS),
            "wind_speed_unit": "kmh",
            "precipitation_unit": "mm",
            "timezone": "UTC",
            "start_date": day,
            "end_date": day,
        }

        try:
            response = await self._get_client().get(self.base_url, params=params)
        except httpx.TimeoutException:
            raise ProviderError("Weather service timed out")
        except httpx.HTTPError as e:
            raise ProviderError(f"Weather service unreachable: {e}")

        if response.status_code != 200:
            raise ProviderError(
                self._status_message(response.status_code),
                status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError:
            raise ProviderError("Weather service returned invalid JSON")

        return self.parse_hourly(payload, when)

    @staticmethod
    def _status_message(status_code: int) -> str:
        if status_code == 400:
            return "Weather request rejected (bad coordinates or date)"
        if status_code == 429:
            return "Weather API rate limit exceeded"
        if status_code >= 500:
            return "Weather service is currently unavailable"
        return f"Weather API error: {status_code}"

    @classmethod
    def parse_hourly(cls, payload: dict, when: datetime) -> WeatherSample:
        """
        Build a WeatherSample from an Open-Meteo response.

        Args:
            payload: Decoded JSON with an "hourly" block
            when: Target time (UTC)

        Raises:
            ProviderError: If the response has no usable hours or an
                unexpected shape
        """
        try:
            return cls._parse_hourly(payload, when)
        except (ValueError, TypeError, AttributeError, KeyError, IndexError) as e:
            logger.warning(f"Unexpected Open-Meteo response: {e!r}")
            raise ProviderError("Weather service returned an unexpected response") from e

    @staticmethod
    def _parse_hourly(payload: dict, when: datetime) -> WeatherSample:
        hourly = payload.get("hourly") or {}
        times = hourly.get("time") or []
        if not times:
            raise ProviderError("No hourly weather data for the requested time")

        target = when.replace(tzinfo=None)
        idx = min(
            range(len(times)),
            key=lambda i: abs((datetime.fromisoformat(times[i]) - target).total_seconds())
        )

        def at(key: str):
            values = hourly.get(key) or []
            return values[idx] if idx < len(values) else None

        temperature = at("temperature_2m")
        if temperature is None:
            raise ProviderError("Weather response has no temperature")

        code = at("weather_code")
        code = int(code) if code is not None else None
        feels_like = at("apparent_temperature")

        return WeatherSample(
            temperature=float(temperature),
            feels_like=feels_like if feels_like is not None else temperature,
            humidity=at("relative_humidity_2m") or 0.0,
            pressure=at("surface_pressure") or 0.0,
            wind_speed=at("wind_speed_10m") or 0.0,
            wind_direction=at("wind_direction_10m") or 0.0,
            wind_gust=at("wind_gusts_10m"),
            precipitation=at("precipitation"),
            precipitation_probability=at("precipitation_probability"),
            uv_index=at("uv_index"),
            cloud_cover=at("cloud_cover"),
            weather_code=code,
            weather_description=describe_weather_code(code),
        )


# =============================================================================
# Mock
# =============================================================================

class MockWeatherProvider(WeatherProvider):
    """
    Deterministic weather derived from coordinates and hour.

    Same inputs always give the same sample, so forecasts are reproducible
    without network access.
    """

    name = "mock"

    _CONDITIONS = (0, 1, 2, 3, 45, 61, 63, 71, 95)

    async def fetch(
        self,
        lat: float,
        lon: float,
        timestamp: datetime
    ) -> WeatherSample:
        hours = as_utc(timestamp).timestamp() / 3600
        seed = abs(lat * 10 + lon * 5 + hours) % 100

        temperature = round(5 + seed % 25, 1)
        code = self._CONDITIONS[int(seed) % len(self._CONDITIONS)]
        rainy = code in (61, 63, 95)

        return WeatherSample(
            temperature=temperature,
            feels_like=round(temperature - 1.5, 1),
            humidity=round(40 + seed % 50, 0),
            pressure=round(1000 + seed % 30, 1),
            wind_speed=round(5 + seed % 20, 1),
            wind_direction=round(seed * 3.6 % 360, 0),
            wind_gust=round(10 + seed % 25, 1),
            precipitation=round(seed % 4, 1) if rainy else 0.0,
            precipitation_probability=round(seed % 100, 0),
            uv_index=round(seed % 11, 0),
            cloud_cover=round(seed, 0),
            weather_code=code,
            weather_description=describe_weather_code(code),
        )


# Global instance (lazy initialization)
_provider: Optional[WeatherProvider] = None


def get_weather_provider() -> WeatherProvider:
    """Get or create the configured global WeatherProvider."""
    global _provider
    if _provider is None:
        if settings.weather_provider == "mock":
            _provider = MockWeatherProvider()
        else:
            _provider = OpenMeteoProvider()
        logger.info(f"Weather provider: {_provider.name}")
    return _provider
