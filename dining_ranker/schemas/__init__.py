from .preferences import (
    DiningPreferences,
    CuisinePreference,
    PriceRangePreference,
    DietaryPreference,
    AmbiancePreference,
    DistancePreference,
    RatingPreference,
    FeaturePreference,
    LearningData,
    Importance,
    SoftImportance,
    PoliticalView,
    MIN_PRICE_LEVEL,
    MAX_PRICE_LEVEL,
    DEFAULT_MAX_DISTANCE,
)
from .business import BusinessAttributes, Location, PlaceRecord
from .response import (
    CATEGORY_NAMES,
    ScoreBreakdown,
    RelevanceScore,
    BusinessWithScore,
    PerformanceMetrics,
    PerformanceStats,
    AverageMetrics,
    TotalMetrics,
    RankResult,
    CacheStats,
    PersistResult,
)

__all__ = [
    "DiningPreferences",
    "CuisinePreference",
    "PriceRangePreference",
    "DietaryPreference",
    "AmbiancePreference",
    "DistancePreference",
    "RatingPreference",
    "FeaturePreference",
    "LearningData",
    "Importance",
    "SoftImportance",
    "PoliticalView",
    "MIN_PRICE_LEVEL",
    "MAX_PRICE_LEVEL",
    "DEFAULT_MAX_DISTANCE",
    "BusinessAttributes",
    "Location",
    "PlaceRecord",
    "CATEGORY_NAMES",
    "ScoreBreakdown",
    "RelevanceScore",
    "BusinessWithScore",
    "PerformanceMetrics",
    "PerformanceStats",
    "AverageMetrics",
    "TotalMetrics",
    "RankResult",
    "CacheStats",
    "PersistResult",
]
