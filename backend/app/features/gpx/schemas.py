"""
GPX-related schemas.

Pydantic models for track input.
"""

from pydantic import BaseModel, Field
from typing import Optional


class GPXPoint(BaseModel):
    """
    Single point in a track.

    cumulative_distance_km may be omitted; it is then computed from
    the coordinates.
    """

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    elevation: float = 0.0
    cumulative_distance_km: Optional[float] = Field(default=None, ge=0)
