"""
Forecast API schemas.

Pydantic models for forecast requests and responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.features.gpx.schemas import GPXPoint
from app.shared.constants import DEFAULT_AVG_SPEED_KMH, DEFAULT_WEATHER_INTERVAL_KM


class ForecastSettingsSchema(BaseModel):
    """Route settings as sent by the settings form."""

    start_time: datetime
    weather_interval_km: float = DEFAULT_WEATHER_INTERVAL_KM
    avg_speed_kmh: float = DEFAULT_AVG_SPEED_KMH


class TrackForecastRequest(ForecastSettingsSchema):
    """Forecast for a track that was already parsed by the client."""

    points: List[GPXPoint] = Field(default_factory=list)


class ForecastPointSchema(BaseModel):
    """Forecast point in a response."""

    index: int
    lat: float
    lon: float
    elevation: float
    distance_km: float
    timestamp: Optional[datetime] = None


class WeatherSampleSchema(BaseModel):
    """Weather at one forecast point."""

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


class AlertSchema(BaseModel):
    """Hazard alert."""

    type: str
    point_index: int
    severity: str
    value: float
    message: str


class ForecastResponse(BaseModel):
    """Complete forecast for a route."""

    generation_id: int
    status: str
    track_name: Optional[str] = None
    points: List[ForecastPointSchema]
    weather: List[Optional[WeatherSampleSchema]]
    alerts: List[AlertSchema]
    alert_counts: dict[str, int]
    summary: dict
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot, track_name: Optional[str] = None) -> "ForecastResponse":
        """Build a response from a ForecastSnapshot."""
        data = snapshot.to_dict()
        return cls(
            generation_id=data["generation_id"],
            status=data["status"],
            track_name=track_name,
            points=data["points"],
            weather=data["weather"],
            alerts=data["alerts"]["alerts"],
            alert_counts=data["alerts"]["counts"],
            summary=data["summary"],
            warnings=data["warnings"],
        )
