from .pipeline import DiningRanker
from .cache import CacheService, TTLCache, preferences_fingerprint
from .config import RankerSettings
from .filters import (
    MustHaveFilter,
    filter_by_must_haves,
    has_preferences_set,
    relax_must_haves,
    sort_businesses_with_fallback,
)
from .fusion import ScoreFusion, calculate_relevance_score
from .inference import infer_business_attributes
from .store import AttributeStore, InMemoryAttributeStore, HttpAttributeStore
from .validation import parse_preferences, sanitize_dining_preferences, validate_dining_preferences

__all__ = [
    "DiningRanker",
    "CacheService",
    "TTLCache",
    "preferences_fingerprint",
    "RankerSettings",
    "MustHaveFilter",
    "filter_by_must_haves",
    "has_preferences_set",
    "relax_must_haves",
    "sort_businesses_with_fallback",
    "ScoreFusion",
    "calculate_relevance_score",
    "infer_business_attributes",
    "AttributeStore",
    "InMemoryAttributeStore",
    "HttpAttributeStore",
    "parse_preferences",
    "sanitize_dining_preferences",
    "validate_dining_preferences",
]
