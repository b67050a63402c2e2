import math
from typing import Optional

from .schemas import (
    DEFAULT_MAX_DISTANCE,
    MAX_PRICE_LEVEL,
    MIN_PRICE_LEVEL,
    BusinessAttributes,
    BusinessWithScore,
    DiningPreferences,
    RelevanceScore,
    ScoreBreakdown,
    CATEGORY_NAMES,
)
from .scorers import (
    calculate_cuisine_score,
    calculate_price_score,
    calculate_dietary_score,
    calculate_ambiance_score,
    calculate_distance_score,
    calculate_rating_score,
    calculate_features_score,
    calculate_time_score,
    calculate_niche_score,
)


# Product-tuned constants; changing them is a product decision.
DEFAULT_CATEGORY_WEIGHTS = {
    "cuisine": 30.0,
    "price": 15.0,
    "dietary": 25.0,
    "ambiance": 15.0,
    "distance": 10.0,
    "rating": 0.0,  # rating acts as a multiplier instead
    "features": 5.0,
}

IMPORTANCE_MULTIPLIERS = {
    "must-have": 0.0,  # enforced by MustHaveFilter
    "high": 1.5,
    "medium": 1.0,
    "low": 0.5,
}

WEIGHTED_CATEGORIES = ["cuisine", "price", "dietary", "ambiance", "distance", "features"]

MATCH_THRESHOLD = 60.0

# (base, span): multiplier = base + score / 100 * span
RATING_MULTIPLIER = (0.7, 0.6)
TIME_MULTIPLIER = (0.2, 0.8)
NICHE_MULTIPLIER = (0.5, 0.5)


def _multiplier(score: float, shape: tuple[float, float]) -> float:
    base, span = shape
    return base + score / 100 * span


def _category_importance(preferences: DiningPreferences, category: str) -> str:
    return {
        "cuisine": preferences.cuisines.importance,
        "price": preferences.price_range.importance,
        "dietary": preferences.dietary.importance,
        "ambiance": preferences.ambiance.importance,
        "distance": preferences.distance.importance,
        "rating": preferences.rating.importance,
        "features": preferences.features.importance,
    }[category]


def category_has_preference(preferences: DiningPreferences, category: str) -> bool:
    """Whether the user expressed anything in this category."""
    if category == "cuisine":
        return bool(preferences.cuisines.preferred)
    if category == "price":
        return preferences.price_range.min > MIN_PRICE_LEVEL or preferences.price_range.max < MAX_PRICE_LEVEL
    if category == "dietary":
        return bool(preferences.dietary.restrictions)
    if category == "ambiance":
        return bool(preferences.ambiance.preferred)
    if category == "distance":
        return preferences.distance.max_distance < DEFAULT_MAX_DISTANCE
    if category == "rating":
        return preferences.rating.min_rating > 0 or preferences.rating.min_winks_score is not None
    if category == "features":
        return bool(preferences.features.preferred)
    raise ValueError(f"Unknown category: {category}")


def calculate_relevance_score(
    attributes: BusinessAttributes,
    google_rating: Optional[float],
    community_score: Optional[float],
    preferences: DiningPreferences,
    category_weights: Optional[dict[str, float]] = None,
    business_name: str = "",
    *,
    hour: Optional[int] = None,
    business_id: str = "",
) -> RelevanceScore:
    """Compute a business's 0-100 relevance for a set of preferences.

    Six categories are weighted and summed into a preference match score.
    Rating, time-of-day and chain-ness then scale that sum through bounded
    multipliers, so none of them can zero out or double a good match.
    """
    weights = category_weights or DEFAULT_CATEGORY_WEIGHTS
    types = attributes.category_types

    breakdown = ScoreBreakdown(
        cuisine=calculate_cuisine_score(attributes.cuisine_types, preferences.cuisines),
        price=calculate_price_score(attributes.price_level, preferences.price_range),
        dietary=calculate_dietary_score(attributes.dietary_options, preferences.dietary),
        ambiance=calculate_ambiance_score(attributes.ambiance_tags, preferences.ambiance),
        distance=calculate_distance_score(attributes.distance_from_user, preferences.distance),
        rating=calculate_rating_score(google_rating, community_score, preferences),
        features=calculate_features_score(attributes.features, preferences.features),
        time=calculate_time_score(types, hour=hour),
        niche=calculate_niche_score(attributes.rating_count, types, business_name),
    )

    preference_match_score = 0.0
    for category in WEIGHTED_CATEGORIES:
        multiplier = IMPORTANCE_MULTIPLIERS[_category_importance(preferences, category)]
        preference_match_score += getattr(breakdown, category) * weights.get(category, 0.0) * multiplier / 100

    total_score = (
        preference_match_score
        * _multiplier(breakdown.rating, RATING_MULTIPLIER)
        * _multiplier(breakdown.time, TIME_MULTIPLIER)
        * _multiplier(breakdown.niche, NICHE_MULTIPLIER)
    )
    total_score = min(100.0, max(0.0, total_score))

    matched = []
    unmatched = []
    for category in CATEGORY_NAMES:
        if getattr(breakdown, category) >= MATCH_THRESHOLD:
            matched.append(category)
        elif category_has_preference(preferences, category):
            unmatched.append(category)

    return RelevanceScore(
        business_id=business_id,
        total_score=total_score,
        breakdown=breakdown,
        matched_preferences=matched,
        unmatched_preferences=unmatched,
    )


def ranking_key(item: BusinessWithScore) -> tuple[float, float, float]:
    """Sort key: score desc, then Google rating desc, then distance asc."""
    distance = item.attributes.distance_from_user
    return (
        -item.total_score,
        -(item.google_rating or 0.0),
        distance if distance is not None else math.inf,
    )


class ScoreFusion:
    """Combine category scores into a final ranking."""

    def __init__(self, category_weights: Optional[dict[str, float]] = None):
        self.category_weights = {**DEFAULT_CATEGORY_WEIGHTS, **(category_weights or {})}

    def fuse(
        self,
        business_id: str,
        attributes: BusinessAttributes,
        preferences: DiningPreferences,
        google_rating: Optional[float] = None,
        community_score: Optional[float] = None,
        business_name: str = "",
        hour: Optional[int] = None,
    ) -> RelevanceScore:
        return calculate_relevance_score(
            attributes,
            google_rating,
            community_score,
            preferences,
            self.category_weights,
            business_name,
            hour=hour,
            business_id=business_id,
        )

    def rank(self, scored: list[BusinessWithScore]) -> list[BusinessWithScore]:
        """Rank businesses by total score, breaking ties by rating then distance."""
        return sorted(scored, key=ranking_key)
