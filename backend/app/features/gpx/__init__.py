"""
GPX file handling module.

Usage:
    from app.features.gpx import GPXTrackParser, build_track

Components:
- GPXTrackParser: Parse GPX content into TrackPoints
- build_track: Attach cumulative distance to raw (lat, lon, ele) points
- GPXPoint: Pydantic schema for JSON track input
"""

from .parser import GPXTrackParser, ParsedTrack, build_track
from .schemas import GPXPoint

__all__ = [
    # Services
    "GPXTrackParser",
    "ParsedTrack",
    "build_track",
    # Schemas
    "GPXPoint",
]
