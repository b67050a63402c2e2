import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Optional

from .cache import CacheService, generate_batch_key, preferences_fingerprint
from .config import RankerSettings
from .errors import AttributeStoreError
from .filters import FallbackResult, has_preferences_set, relax_must_haves, sort_businesses_with_fallback
from .fusion import ScoreFusion
from .inference import distance_between, infer_business_attributes
from .schemas import (
    AverageMetrics,
    BusinessAttributes,
    BusinessWithScore,
    CacheStats,
    DiningPreferences,
    Location,
    PerformanceMetrics,
    PerformanceStats,
    PersistResult,
    PlaceRecord,
    RankResult,
    TotalMetrics,
)
from .store import AttributeStore, InMemoryAttributeStore

logger = logging.getLogger(__name__)


@dataclass
class _RunCounters:
    """Cache lookups made during one ranking run."""
    hits: int = 0
    lookups: int = 0
    batches: int = 0

    def record(self, hit: bool, count: int = 1) -> None:
        self.lookups += count
        if hit:
            self.hits += count

    @property
    def hit_rate(self) -> float:
        return self.hits / self.lookups if self.lookups else 0.0


def _chunks(items: list, size: int) -> Iterator[list]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class DiningRanker:
    """Rank candidate businesses against a user's dining preferences.

    Attributes are resolved cache-first, then from the attribute store, then
    by inference. Scoring runs in fixed-size batches with a cap on how many
    batches are in flight, and every score is cached per
    (business id, preferences fingerprint).
    """

    def __init__(
        self,
        store: Optional[AttributeStore] = None,
        cache: Optional[CacheService] = None,
        fusion: Optional[ScoreFusion] = None,
        settings: Optional[RankerSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings if settings is not None else RankerSettings()
        self.store = store if store is not None else InMemoryAttributeStore()
        self.cache = cache if cache is not None else CacheService.from_settings(self.settings)
        self.fusion = fusion if fusion is not None else ScoreFusion()
        self._clock = clock
        self._metrics_history: list[PerformanceMetrics] = []
        self._pending_writes: set[asyncio.Task] = set()

    async def rank(
        self,
        candidates: list[PlaceRecord],
        preferences: DiningPreferences,
        user_location: Optional[Location] = None,
    ) -> RankResult:
        """Resolve attributes, score, filter and sort the candidates.

        Flow:
        1. Resolve attributes → batch cache, attribute cache, store, inference
        2. No preferences set → sort by rating then distance
        3. Score in bounded-concurrency batches, score cache first
        4. Must-have filter, relaxing once if nothing survives
        5. Sort by score, rating, distance
        """
        start = time.perf_counter()
        counters = _RunCounters()

        businesses = [c for c in candidates if c.place_id]
        if len(businesses) < len(candidates):
            logger.warning(f"Skipping {len(candidates) - len(businesses)} candidates without a place_id")

        # Stage 1: Attributes
        fetch_start = time.perf_counter()
        attributes = await self.batch_fetch_attributes(businesses, user_location, counters)
        batch_fetch_time = _elapsed_ms(fetch_start)

        items = [
            BusinessWithScore(
                business=business,
                attributes=attributes[business.place_id],
                google_rating=business.rating,
                community_score=business.community_score,
            )
            for business in businesses
        ]

        scoring_time = 0.0
        used_fallback = not has_preferences_set(preferences)

        if used_fallback:
            # Stage 2: Nothing to match against, skip scoring entirely
            sort_start = time.perf_counter()
            result = sort_businesses_with_fallback(items, preferences)
            sorting_time = _elapsed_ms(sort_start)
        else:
            # Stage 3: Score
            scoring_start = time.perf_counter()
            hour = self._clock().hour
            scored = await self.score_businesses(items, preferences, hour, counters)
            scoring_time = _elapsed_ms(scoring_start)

            # Stages 4-5: Filter and sort
            sort_start = time.perf_counter()
            result = sort_businesses_with_fallback(scored, preferences)
            sorting_time = _elapsed_ms(sort_start)

            if result.relaxed:
                relaxed_preferences = relax_must_haves(preferences)
                scoring_start = time.perf_counter()
                rescored = await self.score_businesses(result.businesses, relaxed_preferences, hour, counters)
                scoring_time += _elapsed_ms(scoring_start)

                sort_start = time.perf_counter()
                result = FallbackResult(businesses=self.fusion.rank(rescored), relaxed=True)
                sorting_time += _elapsed_ms(sort_start)

        total_time = _elapsed_ms(start)
        metrics = PerformanceMetrics(
            total_time=total_time,
            batch_fetch_time=batch_fetch_time,
            parallel_scoring_time=scoring_time,
            sorting_time=sorting_time,
            cache_hit_rate=counters.hit_rate,
            businesses_processed=len(businesses),
            batches_processed=counters.batches,
            average_time_per_business=total_time / len(businesses) if businesses else 0.0,
        )
        self._record_metrics(metrics)

        logger.info(
            f"Ranked {len(businesses)} businesses in {total_time:.1f}ms "
            f"(cache hit rate {counters.hit_rate:.0%}, relaxed={result.relaxed}, fallback={used_fallback})"
        )
        return RankResult(
            ranked=result.businesses,
            relaxed=result.relaxed,
            used_fallback=used_fallback,
            metrics=metrics,
        )

    async def batch_fetch_attributes(
        self,
        businesses: list[PlaceRecord],
        user_location: Optional[Location] = None,
        counters: Optional[_RunCounters] = None,
    ) -> dict[str, BusinessAttributes]:
        """Resolve attributes for every business, inferring only what no cache or store has."""
        counters = counters if counters is not None else _RunCounters()
        ids = [b.place_id for b in businesses]
        if not ids:
            return {}

        batch_key = generate_batch_key(ids)
        cached_batch = self.cache.get_batch_result(batch_key)
        if cached_batch is not None:
            counters.record(hit=True, count=len(ids))
            logger.debug(f"Batch cache hit for {len(ids)} businesses")
            return self._localize(cached_batch, businesses, user_location)

        resolved: dict[str, BusinessAttributes] = {}
        misses: list[PlaceRecord] = []
        for business in businesses:
            cached = self.cache.get_business_attributes(business.place_id)
            counters.record(hit=cached is not None)
            if cached is not None:
                resolved[business.place_id] = cached
            else:
                misses.append(business)

        if misses:
            stored, store_available = await self._load_from_store([b.place_id for b in misses])
            for business_id, attributes in stored.items():
                resolved[business_id] = attributes
                self.cache.set_business_attributes(business_id, attributes)

            to_infer = [b for b in misses if b.place_id not in stored]
            inferred: dict[str, BusinessAttributes] = {}
            for batch in _chunks(to_infer, self.settings.batch_size):
                results = await asyncio.gather(*(self._infer(b) for b in batch))
                for business, attributes in zip(batch, results):
                    inferred[business.place_id] = attributes
                    self.cache.set_business_attributes(business.place_id, attributes)
                counters.batches += 1
            resolved.update(inferred)

            if inferred:
                logger.debug(f"Inferred attributes for {len(inferred)} businesses")
                if store_available:
                    self._persist_in_background(inferred)

        self.cache.set_batch_result(batch_key, resolved)
        return self._localize(resolved, businesses, user_location)

    async def score_businesses(
        self,
        items: list[BusinessWithScore],
        preferences: DiningPreferences,
        hour: Optional[int] = None,
        counters: Optional[_RunCounters] = None,
    ) -> list[BusinessWithScore]:
        """Score items in batches, running at most max_concurrent_batches at once."""
        counters = counters if counters is not None else _RunCounters()
        fingerprint = preferences_fingerprint(preferences)
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_batches)

        async def run(batch: list[BusinessWithScore]) -> list[BusinessWithScore]:
            async with semaphore:
                return await asyncio.gather(
                    *(self._score_one(item, preferences, fingerprint, hour, counters) for item in batch)
                )

        batches = list(_chunks(items, self.settings.batch_size))
        counters.batches += len(batches)
        results = await asyncio.gather(*(run(batch) for batch in batches))
        return [item for batch in results for item in batch]

    async def _score_one(
        self,
        item: BusinessWithScore,
        preferences: DiningPreferences,
        fingerprint: str,
        hour: Optional[int],
        counters: _RunCounters,
    ) -> BusinessWithScore:
        business_id = item.business_id
        score = self.cache.get_relevance_score(business_id, fingerprint)
        counters.record(hit=score is not None)

        if score is None:
            score = self.fusion.fuse(
                business_id=business_id,
                attributes=item.attributes,
                preferences=preferences,
                google_rating=item.google_rating,
                community_score=item.community_score,
                business_name=item.business.name,
                hour=hour,
            )
            self.cache.set_relevance_score(business_id, fingerprint, score)

        return item.model_copy(update={"score": score})

    async def _infer(self, business: PlaceRecord) -> BusinessAttributes:
        # Location-independent; _localize sets distance per request
        return infer_business_attributes(business)

    async def _load_from_store(self, business_ids: list[str]) -> tuple[dict[str, BusinessAttributes], bool]:
        """Bulk-load from the store. Returns (found, store_available)."""
        try:
            return await self.store.batch_get(business_ids), True
        except AttributeStoreError as e:
            logger.warning(f"⚠️  Attribute store unavailable, inferring locally without persisting: {e}")
            return {}, False

    def _localize(
        self,
        resolved: dict[str, BusinessAttributes],
        businesses: list[PlaceRecord],
        user_location: Optional[Location],
    ) -> dict[str, BusinessAttributes]:
        """Set each business's distance from the caller, or None when either location is unknown."""
        localized = dict(resolved)
        for business in businesses:
            attributes = localized.get(business.place_id)
            if attributes is None:
                continue
            distance = distance_between(user_location, business)
            if attributes.distance_from_user != distance:
                localized[business.place_id] = attributes.model_copy(update={"distance_from_user": distance})
        return localized

    # Background persistence

    def _persist_in_background(self, attributes_by_id: dict[str, BusinessAttributes]) -> None:
        task = asyncio.create_task(self._persist(attributes_by_id))
        self._pending_writes.add(task)
        task.add_done_callback(self._on_persisted)

    async def _persist(self, attributes_by_id: dict[str, BusinessAttributes]) -> PersistResult:
        business_ids = list(attributes_by_id)
        try:
            await self.store.batch_put(attributes_by_id)
            return PersistResult(ok=True, business_ids=business_ids)
        except AttributeStoreError as e:
            return PersistResult(ok=False, business_ids=business_ids, error=str(e))

    def _on_persisted(self, task: asyncio.Task) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            return
        if task.exception() is not None:
            logger.error(f"Attribute persistence crashed: {task.exception()}")
            return
        result: PersistResult = task.result()
        if result.ok:
            logger.debug(f"Persisted attributes for {len(result.business_ids)} businesses")
        else:
            logger.warning(f"⚠️  Failed to persist attributes for {len(result.business_ids)} businesses: {result.error}")

    async def drain(self) -> None:
        """Wait for background writes to finish."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes, return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        await self.store.aclose()

    # Introspection

    def _record_metrics(self, metrics: PerformanceMetrics) -> None:
        self._metrics_history.append(metrics)
        overflow = len(self._metrics_history) - self.settings.metrics_history_size
        if overflow > 0:
            del self._metrics_history[:overflow]

    def get_cache_stats(self) -> dict[str, CacheStats]:
        return self.cache.get_all_stats()

    def get_performance_stats(self) -> PerformanceStats:
        """Latest run, averages over the kept history, and running totals."""
        history = self._metrics_history
        if not history:
            return PerformanceStats()

        count = len(history)
        average = AverageMetrics(
            total_time=sum(m.total_time for m in history) / count,
            batch_fetch_time=sum(m.batch_fetch_time for m in history) / count,
            parallel_scoring_time=sum(m.parallel_scoring_time for m in history) / count,
            sorting_time=sum(m.sorting_time for m in history) / count,
            cache_hit_rate=sum(m.cache_hit_rate for m in history) / count,
            average_time_per_business=sum(m.average_time_per_business for m in history) / count,
        )
        total = TotalMetrics(
            businesses_processed=sum(m.businesses_processed for m in history),
            batches_processed=sum(m.batches_processed for m in history),
        )
        return PerformanceStats(recent=history[-1], average=average, total=total)

    def invalidate_preferences(self, preferences: DiningPreferences) -> int:
        """Drop cached scores computed for preferences that are about to change."""
        return self.cache.invalidate_scores_by_preferences(preferences_fingerprint(preferences))

    def clear_caches(self) -> None:
        self.cache.clear_all()

    def clear_metrics(self) -> None:
        self._metrics_history.clear()
