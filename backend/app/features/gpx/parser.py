"""
GPX Parser

Turns GPX content into TrackPoints with cumulative distance.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import gpxpy
import gpxpy.gpx

from app.features.forecast.models import TrackPoint
from app.shared.errors import SamplingError
from app.shared.geo import cumulative_distances

logger = logging.getLogger(__name__)


@dataclass
class ParsedTrack:
    """Track extracted from a GPX file."""
    name: Optional[str]
    points: List[TrackPoint] = field(default_factory=list)

    @property
    def distance_km(self) -> float:
        return self.points[-1].cumulative_distance_km if self.points else 0.0


def build_track(points: Sequence[Tuple[float, float, float]]) -> List[TrackPoint]:
    """
    Attach cumulative haversine distance to raw points.

    Args:
        points: List of (lat, lon, elevation) tuples

    Returns:
        TrackPoints, first one at distance 0
    """
    distances = cumulative_distances(points)
    return [
        TrackPoint(lat=lat, lon=lon, elevation=ele, cumulative_distance_km=dist)
        for (lat, lon, ele), dist in zip(points, distances)
    ]


class GPXTrackParser:
    """Service for parsing GPX files into tracks."""

    @staticmethod
    def extract_points(gpx: gpxpy.gpx.GPX) -> List[Tuple[float, float, float]]:
        """Track points first; route points only when there are no tracks."""
        points: List[Tuple[float, float, float]] = []

        for track in gpx.tracks:
            for segment in track.segments:
                for point in segment.points:
                    ele = point.elevation if point.elevation else 0
                    points.append((point.latitude, point.longitude, ele))

        if not points:
            for route in gpx.routes:
                for point in route.points:
                    ele = point.elevation if point.elevation else 0
                    points.append((point.latitude, point.longitude, ele))

        return points

    @classmethod
    def parse(cls, content: bytes) -> ParsedTrack:
        """
        Parse GPX content.

        Args:
            content: GPX file content as bytes

        Returns:
            ParsedTrack with name and TrackPoints

        Raises:
            SamplingError: If GPX is invalid or has no points
        """
        try:
            gpx = gpxpy.parse(content.decode('utf-8'))
        except (UnicodeDecodeError, gpxpy.gpx.GPXException) as e:
            logger.error(f"Failed to parse GPX: {e}")
            raise SamplingError(f"Invalid GPX file: {e}")

        points = cls.extract_points(gpx)
        if not points:
            raise SamplingError("GPX file contains no track or route points")

        name = gpx.name or (gpx.tracks[0].name if gpx.tracks else None)
        track = build_track(points)

        logger.info(
            f"Parsed GPX '{name or 'unnamed'}': {len(track)} points, "
            f"{track[-1].cumulative_distance_km:.2f} km"
        )
        return ParsedTrack(name=name, points=track)
