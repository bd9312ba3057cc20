"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import forecast

api_router = APIRouter()

api_router.include_router(forecast.router, prefix="/forecast", tags=["Forecast"])
