"""
Forecast Session

Orchestrates one user's forecast:
- Route sampling (RouteSampler)
- Arrival times (ForecastScheduler)
- Weather enrichment (WeatherEnrichment)
- Hazard alerts (AlertDetector)
- Shared point selection (SelectionCoordinator)

Every new track or settings change starts a new generation. Work still
running for an older generation is cancelled, and anything it returns is
ignored.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from app.features.weather import (
    AlertDetector,
    AlertReport,
    GenerationGuard,
    RouteWeatherSummary,
    WeatherEnrichment,
    WeatherProvider,
    WeatherSample,
    get_weather_cache,
    get_weather_provider,
    summarize,
)
from app.shared.errors import ForecastError, ProviderError, ensure_aligned
from .models import ForecastPoint, ForecastStatus, RouteSettings, TrackPoint
from .sampler import RouteSampler
from .scheduler import ForecastScheduler
from .selection import SelectionCoordinator

logger = logging.getLogger(__name__)


StatusListener = Callable[[ForecastStatus, int], None]


@dataclass
class ForecastSnapshot:
    """Consistent view of a session at one moment."""
    generation_id: int
    status: ForecastStatus
    points: List[ForecastPoint]
    weather: List[Optional[WeatherSample]]
    alerts: AlertReport
    summary: RouteWeatherSummary
    selected_index: Optional[int] = None
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return {
            "generation_id": self.generation_id,
            "status": self.status.value,
            "points": [p.to_dict() for p in self.points],
            "weather": [w.to_dict() if w is not None else None for w in self.weather],
            "alerts": self.alerts.to_dict(),
            "summary": self.summary.to_dict(),
            "selected_index": self.selected_index,
            "warnings": self.warnings,
            "error": self.error,
        }


class ForecastSession:
    """
    Owns the state of one active forecast.

    Usage:
        session = ForecastSession(provider)
        session.selection.subscribe(on_select)
        snapshot = await session.run(track, settings)
        session.select(3)
    """

    def __init__(
        self,
        provider: Optional[WeatherProvider] = None,
        enrichment: Optional[WeatherEnrichment] = None,
        detector: Optional[AlertDetector] = None
    ):
        if enrichment is not None:
            self.guard = enrichment.guard
            self.enrichment = enrichment
        else:
            self.guard = GenerationGuard()
            self.enrichment = WeatherEnrichment(
                provider or get_weather_provider(),
                self.guard,
                cache=get_weather_cache()
            )
        self.detector = detector or AlertDetector()
        self.selection = SelectionCoordinator()

        self.status = ForecastStatus.EMPTY
        self.track: List[TrackPoint] = []
        self.settings: Optional[RouteSettings] = None
        self.points: List[ForecastPoint] = []
        self.weather: List[Optional[WeatherSample]] = []
        self.warnings: List[str] = []
        self.error: Optional[ForecastError] = None
        self.provider_error: Optional[ProviderError] = None

        self._task: Optional[asyncio.Task] = None
        self._status_listeners: List[StatusListener] = []

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    @property
    def generation_id(self) -> int:
        return self.guard.current

    @property
    def selected_index(self) -> Optional[int]:
        return self.selection.selected_index

    @property
    def alerts(self) -> AlertReport:
        """Alerts derived from the current weather slots."""
        ensure_aligned(self.points, self.weather)
        return self.detector.detect(
            self.weather,
            [p.distance_km for p in self.points]
        )

    def subscribe_status(self, listener: StatusListener) -> Callable[[], None]:
        """Register a status listener; returns an unsubscribe callable."""
        self._status_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

        return unsubscribe

    def select(self, index: int) -> bool:
        """Entry point for map, timeline and chart clicks."""
        return self.selection.select(index)

    def clear_selection(self) -> None:
        self.selection.clear()

    # -------------------------------------------------------------------------
    # Generations
    # -------------------------------------------------------------------------

    def load_track(
        self,
        track: Sequence[TrackPoint],
        settings: Optional[RouteSettings] = None
    ) -> int:
        """
        Replace the track and start a new generation.

        Without settings (and none stored yet) the session waits in EMPTY.

        Returns:
            The new generation id

        Raises:
            SamplingError: Track is empty or degenerate
            ValidationError: Settings are malformed
        """
        self.track = list(track)
        if settings is not None:
            self.settings = settings
        return self._regenerate()

    def update_settings(self, settings: RouteSettings) -> int:
        """Replace the settings and start a new generation."""
        self.settings = settings
        return self._regenerate()

    def _regenerate(self) -> int:
        generation_id = self.guard.advance()
        self._cancel_inflight()

        self.points = []
        self.weather = []
        self.warnings = []
        self.error = None
        self.provider_error = None
        self.selection.reset(0)

        if not self.track or self.settings is None:
            self._set_status(ForecastStatus.EMPTY)
            return generation_id

        logger.info(
            f"Generation {generation_id}: {len(self.track)} track points, "
            f"every {self.settings.weather_interval_km} km at "
            f"{self.settings.avg_speed_kmh} km/h"
        )

        # Bad track fails from SAMPLING, bad settings from SCHEDULED
        self._set_status(ForecastStatus.SAMPLING)
        try:
            RouteSampler.check_track(self.track)
        except ForecastError as e:
            return self._fail(e)

        try:
            self.settings.validate()
        except ForecastError as e:
            self._set_status(ForecastStatus.SCHEDULED)
            return self._fail(e)

        sampled = RouteSampler.sample(self.track, self.settings.weather_interval_km)
        self._set_status(ForecastStatus.SCHEDULED)
        scheduled = ForecastScheduler.schedule(
            sampled,
            self.settings.start_time,
            self.settings.avg_speed_kmh
        )

        self.points = scheduled
        self.weather = [None] * len(scheduled)
        self.selection.reset(len(scheduled))
        return generation_id

    def _fail(self, error: ForecastError) -> int:
        logger.warning(f"Generation {self.guard.current} failed: {error}")
        self.error = error
        self._set_status(ForecastStatus.ERROR)
        raise error

    def _cancel_inflight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _set_status(self, status: ForecastStatus) -> None:
        self.status = status
        for listener in list(self._status_listeners):
            listener(status, self.guard.current)

    # -------------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------------

    async def enrich(self) -> ForecastSnapshot:
        """
        Fetch weather for the current generation.

        Returns immediately (with the current snapshot) unless the session
        is SCHEDULED. If the generation is superseded while waiting, the
        late results are dropped and the newer state is returned.
        """
        if self.status != ForecastStatus.SCHEDULED:
            return self.snapshot()

        generation_id = self.guard.current
        self._set_status(ForecastStatus.ENRICHING)

        task = asyncio.create_task(
            self.enrichment.enrich(
                self.points,
                generation_id,
                on_sample=self._slot_writer(generation_id)
            )
        )
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if not self.guard.is_current(generation_id):
                return self.snapshot()
            self._abandon_enrichment()
            raise
        except Exception:
            if self.guard.is_current(generation_id):
                self._abandon_enrichment()
            raise

        if not self.guard.is_current(generation_id) or result.stale:
            return self.snapshot()

        self._task = None
        ensure_aligned(self.points, result.samples)
        self.weather = result.samples

        if result.failed_indices:
            self.warnings.append(
                "Weather unavailable for points "
                + ", ".join(str(i) for i in result.failed_indices)
            )
        if result.error is not None:
            self.provider_error = result.error
            self.warnings.append(str(result.error))

        self._set_status(ForecastStatus.READY)
        logger.info(
            f"Generation {generation_id}: ready, "
            f"{result.resolved_count}/{len(self.points)} points with weather"
        )
        return self.snapshot()

    def _abandon_enrichment(self) -> None:
        """Back to SCHEDULED with empty slots, so enrich() can run again."""
        self._cancel_inflight()
        self.weather = [None] * len(self.points)
        logger.info(f"Generation {self.guard.current}: enrichment abandoned")
        self._set_status(ForecastStatus.SCHEDULED)

    def _slot_writer(self, generation_id: int) -> Callable[[int, Optional[WeatherSample]], None]:
        """Progressive writer: each slot is written at most once per generation."""
        written: set[int] = set()

        def write(index: int, sample: Optional[WeatherSample]) -> None:
            if not self.guard.is_current(generation_id) or index in written:
                return
            written.add(index)
            self.weather[index] = sample

        return write

    async def run(
        self,
        track: Sequence[TrackPoint],
        settings: RouteSettings
    ) -> ForecastSnapshot:
        """Full pipeline: new generation, then enrichment."""
        self.load_track(track, settings)
        return await self.enrich()

    async def close(self) -> None:
        """Cancel in-flight work and release the provider."""
        task = self._task
        self._cancel_inflight()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        await self.enrichment.provider.aclose()

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def snapshot(self) -> ForecastSnapshot:
        """Copy of the current state for consumers."""
        weather = list(self.weather)
        return ForecastSnapshot(
            generation_id=self.guard.current,
            status=self.status,
            points=list(self.points),
            weather=weather,
            alerts=self.alerts,
            summary=summarize(weather),
            selected_index=self.selection.selected_index,
            warnings=list(self.warnings),
            error=str(self.error) if self.error is not None else None,
        )
