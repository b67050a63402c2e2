from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from .business import BusinessAttributes, PlaceRecord


CATEGORY_NAMES = ["cuisine", "price", "dietary", "ambiance", "distance", "rating", "features"]


class ScoreBreakdown(BaseModel):
    """Per-category sub-scores, each 0-100."""
    model_config = ConfigDict(frozen=True)

    cuisine: float = Field(ge=0, le=100)
    price: float = Field(ge=0, le=100)
    dietary: float = Field(ge=0, le=100)
    ambiance: float = Field(ge=0, le=100)
    distance: float = Field(ge=0, le=100)
    rating: float = Field(ge=0, le=100)
    features: float = Field(ge=0, le=100)
    time: float = Field(ge=0, le=100)
    niche: float = Field(ge=0, le=100)


class RelevanceScore(BaseModel):
    """How well one business fits one set of preferences."""
    model_config = ConfigDict(frozen=True)

    business_id: str = ""
    total_score: float = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
    matched_preferences: list[str] = Field(default_factory=list)
    unmatched_preferences: list[str] = Field(default_factory=list)


class BusinessWithScore(BaseModel):
    """A candidate bundled with its resolved attributes and score."""
    business: PlaceRecord
    attributes: BusinessAttributes
    score: Optional[RelevanceScore] = None  # None when ranked without preferences
    google_rating: Optional[float] = None
    community_score: Optional[float] = None

    @property
    def business_id(self) -> str:
        return self.business.place_id or ""

    @property
    def total_score(self) -> float:
        return self.score.total_score if self.score else 0.0


class PerformanceMetrics(BaseModel):
    """Timings (milliseconds) and counters for one ranking run."""
    total_time: float = 0.0
    batch_fetch_time: float = 0.0
    parallel_scoring_time: float = 0.0
    sorting_time: float = 0.0
    cache_hit_rate: float = Field(default=0.0, ge=0, le=1)
    businesses_processed: int = 0
    batches_processed: int = 0
    average_time_per_business: float = 0.0
    timestamp: datetime = Field(default_factory=datetime.now)


class AverageMetrics(BaseModel):
    total_time: float = 0.0
    batch_fetch_time: float = 0.0
    parallel_scoring_time: float = 0.0
    sorting_time: float = 0.0
    cache_hit_rate: float = 0.0
    average_time_per_business: float = 0.0


class TotalMetrics(BaseModel):
    businesses_processed: int = 0
    batches_processed: int = 0


class PerformanceStats(BaseModel):
    recent: Optional[PerformanceMetrics] = None
    average: AverageMetrics = Field(default_factory=AverageMetrics)
    total: TotalMetrics = Field(default_factory=TotalMetrics)


class RankResult(BaseModel):
    """Output of one ranking run."""
    ranked: list[BusinessWithScore] = Field(default_factory=list)
    relaxed: bool = False  # must-haves were downgraded to find results
    used_fallback: bool = False  # no preferences, sorted by rating and distance
    metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)


class CacheStats(BaseModel):
    size: int = 0
    hits: int = 0
    misses: int = 0
    hit_rate: float = 0.0


class PersistResult(BaseModel):
    """Outcome of a background attribute write."""
    ok: bool
    business_ids: list[str] = Field(default_factory=list)
    error: Optional[str] = None
