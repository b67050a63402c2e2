from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Generic, Optional, TypeVar

from .schemas import BusinessAttributes, CacheStats, DiningPreferences, RelevanceScore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Rough per-entry sizes in bytes, for monitoring only
ATTRIBUTE_ENTRY_BYTES = 1024
SCORE_ENTRY_BYTES = 512
BATCH_ENTRY_BYTES = 10240


def preferences_fingerprint(preferences: DiningPreferences) -> str:
    """Stable hash over the full preference structure."""
    normalized = json.dumps(preferences.model_dump(mode="json"), sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()


def generate_batch_key(business_ids: list[str]) -> str:
    return ",".join(sorted(business_ids))


def score_key(business_id: str, fingerprint: str) -> str:
    return f"{business_id}:{fingerprint}"


class TTLCache(Generic[T]):
    """Bounded in-memory map whose entries expire after a fixed TTL.

    When full, the oldest inserted entry is evicted to make room.
    """

    def __init__(self, ttl_sec: float, max_size: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_sec = ttl_sec
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, tuple[T, float]] = OrderedDict()  # key -> (value, expires_at)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry and self._clock() < entry[1]:
                self._hits += 1
                return entry[0]
            if entry:
                del self._entries[key]
            self._misses += 1
            return None

    def set(self, key: str, value: T, ttl_sec: Optional[float] = None) -> None:
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            ttl = self.ttl_sec if ttl_sec is None else ttl_sec
            self._entries[key] = (value, self._clock() + ttl)

    def has(self, key: str) -> bool:
        """Check for a live entry without touching the hit/miss counters."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._clock() >= entry[1]:
                del self._entries[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def cleanup(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def stats(self) -> CacheStats:
        with self._lock:
            total = self._hits + self._misses
            return CacheStats(
                size=len(self._entries),
                hits=self._hits,
                misses=self._misses,
                hit_rate=self._hits / total if total > 0 else 0.0,
            )

    def __len__(self) -> int:
        return len(self._entries)


class CacheService:
    """The three caches used while ranking: attributes, scores and batch results."""

    def __init__(
        self,
        attributes_ttl_sec: float = 60 * 60,
        attributes_max_size: int = 1000,
        scores_ttl_sec: float = 30 * 60,
        scores_max_size: int = 500,
        batch_ttl_sec: float = 5 * 60,
        batch_max_size: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.attributes: TTLCache[BusinessAttributes] = TTLCache(attributes_ttl_sec, attributes_max_size, clock)
        self.scores: TTLCache[RelevanceScore] = TTLCache(scores_ttl_sec, scores_max_size, clock)
        self.batch: TTLCache[dict[str, BusinessAttributes]] = TTLCache(batch_ttl_sec, batch_max_size, clock)

    @classmethod
    def from_settings(cls, settings: Any) -> "CacheService":
        return cls(
            attributes_ttl_sec=settings.attributes_ttl_seconds,
            attributes_max_size=settings.attributes_max_entries,
            scores_ttl_sec=settings.scores_ttl_seconds,
            scores_max_size=settings.scores_max_entries,
            batch_ttl_sec=settings.batch_ttl_seconds,
            batch_max_size=settings.batch_max_entries,
        )

    # Business attributes

    def get_business_attributes(self, business_id: str) -> Optional[BusinessAttributes]:
        return self.attributes.get(business_id)

    def set_business_attributes(self, business_id: str, attributes: BusinessAttributes) -> None:
        self.attributes.set(business_id, attributes)

    def has_business_attributes(self, business_id: str) -> bool:
        return self.attributes.has(business_id)

    def delete_business_attributes(self, business_id: str) -> bool:
        return self.attributes.delete(business_id)

    # Relevance scores

    def get_relevance_score(self, business_id: str, fingerprint: str) -> Optional[RelevanceScore]:
        return self.scores.get(score_key(business_id, fingerprint))

    def set_relevance_score(self, business_id: str, fingerprint: str, score: RelevanceScore) -> None:
        self.scores.set(score_key(business_id, fingerprint), score)

    def has_relevance_score(self, business_id: str, fingerprint: str) -> bool:
        return self.scores.has(score_key(business_id, fingerprint))

    def delete_relevance_score(self, business_id: str, fingerprint: str) -> bool:
        return self.scores.delete(score_key(business_id, fingerprint))

    def invalidate_scores_by_preferences(self, fingerprint: str) -> int:
        """Drop every cached score computed for the given preferences fingerprint."""
        suffix = f":{fingerprint}"
        removed = 0
        for key in self.scores.keys():
            if key.endswith(suffix) and self.scores.delete(key):
                removed += 1
        logger.debug(f"Invalidated {removed} cached scores for fingerprint {fingerprint[:12]}")
        return removed

    # Batch results

    def get_batch_result(self, batch_key: str) -> Optional[dict[str, BusinessAttributes]]:
        return self.batch.get(batch_key)

    def set_batch_result(self, batch_key: str, result: dict[str, BusinessAttributes]) -> None:
        self.batch.set(batch_key, result)

    # Maintenance

    def clear_cache(self, kind: str) -> None:
        caches = {"attributes": self.attributes, "scores": self.scores, "batch": self.batch}
        if kind not in caches:
            raise ValueError(f"Unknown cache: {kind}")
        caches[kind].clear()

    def clear_all(self) -> None:
        self.attributes.clear()
        self.scores.clear()
        self.batch.clear()
        logger.info("All caches cleared")

    def cleanup(self) -> dict[str, int]:
        removed = {
            "attributes": self.attributes.cleanup(),
            "scores": self.scores.cleanup(),
            "batch": self.batch.cleanup(),
        }
        logger.debug(f"Cache cleanup removed {removed}")
        return removed

    def get_all_stats(self) -> dict[str, CacheStats]:
        return {
            "attributes": self.attributes.stats(),
            "scores": self.scores.stats(),
            "batch": self.batch.stats(),
        }

    def memory_usage_estimate(self) -> dict[str, int]:
        usage = {
            "attributes": len(self.attributes) * ATTRIBUTE_ENTRY_BYTES,
            "scores": len(self.scores) * SCORE_ENTRY_BYTES,
            "batch": len(self.batch) * BATCH_ENTRY_BYTES,
        }
        usage["total"] = sum(usage.values())
        return usage
