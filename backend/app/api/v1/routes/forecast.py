"""
Forecast Routes

Endpoints for weather forecasts along a route.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.config import settings
from app.features.forecast import RouteSettings, TrackPoint
from app.features.forecast.schemas import ForecastResponse, TrackForecastRequest
from app.features.forecast.service import ForecastSession
from app.features.gpx import GPXTrackParser, build_track
from app.features.weather import WeatherProvider, get_weather_provider
from app.shared.errors import SamplingError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _run_forecast(
    provider: WeatherProvider,
    track: List[TrackPoint],
    route_settings: RouteSettings,
    track_name: Optional[str] = None
) -> ForecastResponse:
    session = ForecastSession(provider)
    try:
        snapshot = await session.run(track, route_settings)
    except (SamplingError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=f"Cannot generate forecast: {e}")

    return ForecastResponse.from_snapshot(snapshot, track_name=track_name)


@router.post("", response_model=ForecastResponse)
async def forecast_gpx(
    file: UploadFile = File(...),
    start_time: datetime = Form(...),
    weather_interval_km: float = Form(5),
    avg_speed_kmh: float = Form(20),
    provider: WeatherProvider = Depends(get_weather_provider)
):
    """
    Upload a GPX file and get the weather along it.

    Points where weather could not be fetched are null and listed in
    `warnings`; the rest of the forecast is still returned.
    """
    if not file.filename or not file.filename.lower().endswith('.gpx'):
        raise HTTPException(status_code=400, detail="Only .gpx files are allowed")

    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large (max {settings.max_upload_mb}MB)"
        )

    try:
        parsed = GPXTrackParser.parse(content)
    except SamplingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    route_settings = RouteSettings(
        start_time=start_time,
        weather_interval_km=weather_interval_km,
        avg_speed_kmh=avg_speed_kmh,
    )
    return await _run_forecast(provider, parsed.points, route_settings, parsed.name)


@router.post("/track", response_model=ForecastResponse)
async def forecast_track(
    request: TrackForecastRequest,
    provider: WeatherProvider = Depends(get_weather_provider)
):
    """
    Forecast for track points parsed by the client.

    If any point lacks cumulative_distance_km, distances are computed
    from the coordinates for the whole track.
    """
    if any(p.cumulative_distance_km is None for p in request.points):
        track = build_track([(p.lat, p.lon, p.elevation) for p in request.points])
    else:
        track = [
            TrackPoint(
                lat=p.lat,
                lon=p.lon,
                elevation=p.elevation,
                cumulative_distance_km=p.cumulative_distance_km,
            )
            for p in request.points
        ]

    route_settings = RouteSettings(
        start_time=request.start_time,
        weather_interval_km=request.weather_interval_km,
        avg_speed_kmh=request.avg_speed_kmh,
    )
    return await _run_forecast(provider, track, route_settings)
