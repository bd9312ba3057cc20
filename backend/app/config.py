"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Uploads ===
    max_upload_mb: int = Field(default=20, ge=1, description="Max GPX upload size")

    # === Weather provider ===
    weather_provider: str = Field(
        default="open_meteo",
        description="Weather backend: open_meteo or mock"
    )
    weather_api_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        description="Open-Meteo forecast endpoint"
    )
    weather_request_timeout_seconds: float = Field(default=10.0, gt=0)

    # === Weather enrichment ===
    weather_max_concurrency: int = Field(
        default=4, ge=1, le=16,
        description="Max weather fetches in flight at once"
    )
    weather_max_attempts: int = Field(
        default=3, ge=1,
        description="Attempts per point before giving up"
    )
    weather_backoff_base_seconds: float = Field(default=1.0, ge=0)
    weather_backoff_max_seconds: float = Field(default=8.0, ge=0)
    weather_coordinate_precision: int = Field(
        default=4, ge=0,
        description="Decimal places used to deduplicate weather requests"
    )
    weather_time_bucket_minutes: int = Field(default=60, ge=1)
    weather_cache_ttl_seconds: int = Field(default=3600, ge=0)
    weather_cache_max_entries: int = Field(
        default=10000, ge=1,
        description="Oldest cached samples are dropped beyond this size"
    )

    @field_validator('weather_provider')
    @classmethod
    def check_provider(cls, v: str) -> str:
        """Only known providers are accepted."""
        v = v.strip().lower()
        if v not in ("open_meteo", "mock"):
            raise ValueError(f"Unknown weather provider: {v}")
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
