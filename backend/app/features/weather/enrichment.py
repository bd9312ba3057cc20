"""
Weather Enrichment

Fetches one WeatherSample per forecast point:
- requests with the same rounded position and time bucket are made once
- at most K fetches are in flight (asyncio.Semaphore)
- failed fetches (provider errors or anything unexpected) are retried with
  exponential backoff, then left as None
- work from a superseded generation is dropped, never written

Partial failure is not fatal. Only when every point fails is an aggregate
ProviderError attached to the result.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from app.config import settings
from app.features.forecast.models import ForecastPoint
from app.shared.errors import ProviderError
from .models import WeatherSample
from .providers import WeatherProvider, as_utc

logger = logging.getLogger(__name__)


RequestKey = Tuple[float, float, int]
SampleCallback = Callable[[int, Optional[WeatherSample]], None]


# =============================================================================
# Generation Guard
# =============================================================================

class GenerationGuard:
    """
    Monotonic generation counter.

    The owner advances it when a new track or settings arrive; in-flight
    work compares its own id against `current` before writing anything.
    """

    def __init__(self):
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def advance(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, generation_id: int) -> bool:
        return generation_id == self._current


# =============================================================================
# Cache
# =============================================================================

class WeatherCache:
    """
    In-memory TTL cache of samples keyed by request key.

    Entries are kept in insertion order, so the oldest sit at the front:
    expired ones are pruned from there on every write, and the cache never
    holds more than `max_entries`.
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = (
            settings.weather_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self.max_entries = max_entries or settings.weather_cache_max_entries
        self._clock = clock
        self._entries: Dict[RequestKey, Tuple[float, WeatherSample]] = {}

    def get(self, key: RequestKey) -> Optional[WeatherSample]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, sample = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return sample

    def set(self, key: RequestKey, sample: WeatherSample) -> None:
        if self.ttl_seconds <= 0:
            return

        now = self._clock()
        self._prune(now)
        self._entries.pop(key, None)
        self._entries[key] = (now, sample)

        while len(self._entries) > self.max_entries:
            del self._entries[next(iter(self._entries))]

    def _prune(self, now: float) -> None:
        while self._entries:
            oldest = next(iter(self._entries))
            stored_at, _ = self._entries[oldest]
            if now - stored_at <= self.ttl_seconds:
                break
            del self._entries[oldest]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# Global instance (lazy initialization)
_cache: Optional[WeatherCache] = None


def get_weather_cache() -> WeatherCache:
    """Get or create the process-wide WeatherCache."""
    global _cache
    if _cache is None:
        _cache = WeatherCache()
    return _cache


# =============================================================================
# Result
# =============================================================================

@dataclass
class EnrichmentResult:
    """Outcome of one enrichment run."""
    generation_id: int
    samples: List[Optional[WeatherSample]]
    failed_indices: List[int] = field(default_factory=list)
    requests_made: int = 0
    stale: bool = False
    error: Optional[ProviderError] = None

    @property
    def resolved_count(self) -> int:
        return sum(1 for s in self.samples if s is not None)

    @property
    def all_failed(self) -> bool:
        return bool(self.samples) and self.resolved_count == 0


# =============================================================================
# Enrichment
# =============================================================================

class WeatherEnrichment:
    """
    Bounded, retrying, generation-aware weather fetcher.

    Usage:
        guard = GenerationGuard()
        enrichment = WeatherEnrichment(provider, guard)
        result = await enrichment.enrich(points, guard.advance())
    """

    def __init__(
        self,
        provider: WeatherProvider,
        guard: Optional[GenerationGuard] = None,
        max_concurrency: Optional[int] = None,
        max_attempts: Optional[int] = None,
        backoff_base_seconds: Optional[float] = None,
        backoff_max_seconds: Optional[float] = None,
        coordinate_precision: Optional[int] = None,
        time_bucket_minutes: Optional[int] = None,
        cache: Optional[WeatherCache] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.provider = provider
        self.guard = guard or GenerationGuard()
        self.max_concurrency = max_concurrency or settings.weather_max_concurrency
        self.max_attempts = max_attempts or settings.weather_max_attempts
        self.backoff_base_seconds = (
            settings.weather_backoff_base_seconds
            if backoff_base_seconds is None else backoff_base_seconds
        )
        self.backoff_max_seconds = (
            settings.weather_backoff_max_seconds
            if backoff_max_seconds is None else backoff_max_seconds
        )
        self.coordinate_precision = (
            settings.weather_coordinate_precision
            if coordinate_precision is None else coordinate_precision
        )
        self.time_bucket_minutes = time_bucket_minutes or settings.weather_time_bucket_minutes
        self.cache = cache
        self._sleep = sleep
        self._limiter: Optional[asyncio.Semaphore] = None
        self._limiter_loop: Optional[asyncio.AbstractEventLoop] = None

    def _get_limiter(self) -> asyncio.Semaphore:
        """One semaphore per event loop, shared by every run on that loop."""
        loop = asyncio.get_running_loop()
        if self._limiter is None or self._limiter_loop is not loop:
            self._limiter = asyncio.Semaphore(self.max_concurrency)
            self._limiter_loop = loop
        return self._limiter

    def request_key(self, point: ForecastPoint) -> RequestKey:
        """Deduplication key: rounded position plus time bucket."""
        if point.timestamp is None:
            raise ValueError(f"Forecast point {point.index} has no timestamp")

        bucket_seconds = self.time_bucket_minutes * 60
        bucket = int(as_utc(point.timestamp).timestamp() // bucket_seconds)
        return (
            round(point.lat, self.coordinate_precision),
            round(point.lon, self.coordinate_precision),
            bucket,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay after failed attempt number `attempt` (0-based)."""
        return min(self.backoff_base_seconds * (2 ** attempt), self.backoff_max_seconds)

    async def enrich(
        self,
        points: Sequence[ForecastPoint],
        generation_id: Optional[int] = None,
        on_sample: Optional[SampleCallback] = None
    ) -> EnrichmentResult:
        """
        Resolve weather for every point.

        Args:
            points: Scheduled forecast points
            generation_id: Generation the work belongs to (defaults to current)
            on_sample: Called once per index as soon as its slot settles,
                only while the generation is still current

        Returns:
            EnrichmentResult with one slot per point; `stale` is set when the
            generation was superseded, in which case no slot is filled
        """
        if generation_id is None:
            generation_id = self.guard.current

        samples: List[Optional[WeatherSample]] = [None] * len(points)
        result = EnrichmentResult(generation_id=generation_id, samples=samples)

        groups: Dict[RequestKey, List[int]] = {}
        for point in points:
            groups.setdefault(self.request_key(point), []).append(point.index)

        logger.info(
            f"Generation {generation_id}: enriching {len(points)} points "
            f"with {len(groups)} distinct requests"
        )

        async def resolve(key: RequestKey, indices: List[int]) -> None:
            sample = self.cache.get(key) if self.cache is not None else None
            if sample is not None:
                logger.debug(f"Cache hit for {key}")
            else:
                sample = await self._fetch_with_retry(points[indices[0]], generation_id, result)

            # Superseded: completion is a no-op
            if not self.guard.is_current(generation_id):
                return

            if sample is not None and self.cache is not None:
                self.cache.set(key, sample)

            for index in indices:
                samples[index] = sample
                if sample is None:
                    result.failed_indices.append(index)
                if on_sample is not None:
                    on_sample(index, sample)

        tasks = [
            asyncio.create_task(resolve(key, indices))
            for key, indices in groups.items()
        ]
        try:
            await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            logger.info(f"Generation {generation_id}: enrichment cancelled")
            raise
        finally:
            # No child task outlives the run, however gather exits
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if not self.guard.is_current(generation_id):
            logger.info(f"Generation {generation_id}: superseded, results discarded")
            result.stale = True
            result.samples = [None] * len(points)
            result.failed_indices = []
            return result

        result.failed_indices.sort()
        if result.all_failed:
            result.error = ProviderError(
                f"Weather unavailable for all {len(points)} forecast points",
                failed_points=len(points)
            )
            logger.warning(f"Generation {generation_id}: {result.error}")
        elif result.failed_indices:
            logger.warning(
                f"Generation {generation_id}: weather unavailable for "
                f"{len(result.failed_indices)}/{len(points)} points"
            )

        return result

    async def _fetch_with_retry(
        self,
        point: ForecastPoint,
        generation_id: int,
        result: EnrichmentResult
    ) -> Optional[WeatherSample]:
        """Fetch one sample; None after the retry budget is spent."""
        limiter = self._get_limiter()

        for attempt in range(self.max_attempts):
            async with limiter:
                # Re-checked after the wait for a slot
                if not self.guard.is_current(generation_id):
                    return None

                result.requests_made += 1
                try:
                    return await self.provider.fetch(point.lat, point.lon, point.timestamp)
                except ProviderError as e:
                    error = e
                except Exception as e:
                    logger.exception(
                        f"Unexpected error fetching weather for point {point.index}"
                    )
                    error = e

            if attempt < self.max_attempts - 1:
                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"Weather fetch for point {point.index} failed "
                    f"(attempt {attempt + 1}/{self.max_attempts}): {error}; "
                    f"retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        logger.warning(
            f"Weather fetch for point {point.index} gave up after "
            f"{self.max_attempts} attempts: {error}"
        )
        return None
