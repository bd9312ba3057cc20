"""
Route Weather API

FastAPI application for weather forecasts along GPS tracks.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1.router import api_router
from app.features.weather import get_weather_provider
from app.shared.errors import MismatchError


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting Route Weather API...")
    provider = get_weather_provider()

    yield

    # Shutdown
    await provider.aclose()
    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Route Weather API",
    description="Weather forecast distributed along a GPS track",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "0.1.0",
        "weather_provider": settings.weather_provider,
    }


# === Error Handlers ===
@app.exception_handler(MismatchError)
async def mismatch_error_handler(request: Request, exc: MismatchError):
    """Points and weather diverged: internal error, never a partial response."""
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Forecast data is inconsistent"})
