import logging
import math
from dataclasses import dataclass, field

from .schemas import (
    DEFAULT_MAX_DISTANCE,
    MAX_PRICE_LEVEL,
    MIN_PRICE_LEVEL,
    BusinessAttributes,
    BusinessWithScore,
    DiningPreferences,
)
from .scorers import matches_any, restrictions_met
from .fusion import ranking_key

logger = logging.getLogger(__name__)


@dataclass
class FallbackResult:
    """Sorted businesses plus whether must-haves had to be relaxed."""
    businesses: list[BusinessWithScore] = field(default_factory=list)
    relaxed: bool = False


class MustHaveFilter:
    """Drop businesses that violate a preference marked must-have."""

    def filter(self, businesses: list[BusinessWithScore], preferences: DiningPreferences) -> list[BusinessWithScore]:
        """Keep businesses that satisfy every must-have preference."""
        candidates = []

        for business in businesses:
            if self.passes(business.attributes, preferences):
                candidates.append(business)

        return candidates

    def passes(self, attributes: BusinessAttributes, preferences: DiningPreferences) -> bool:
        """Check one business against the cuisine, price and dietary must-haves."""
        cuisines = preferences.cuisines
        if cuisines.importance == "must-have":
            if any(matches_any(cuisine, cuisines.disliked) for cuisine in attributes.cuisine_types):
                return False
            if cuisines.preferred and not any(
                matches_any(cuisine, cuisines.preferred) for cuisine in attributes.cuisine_types
            ):
                return False

        # Unknown price or dietary data passes
        price_range = preferences.price_range
        if price_range.importance == "must-have" and attributes.price_level is not None:
            if not price_range.min <= attributes.price_level <= price_range.max:
                return False

        dietary = preferences.dietary
        if dietary.importance == "must-have" and dietary.restrictions and attributes.dietary_options:
            if restrictions_met(attributes.dietary_options, dietary.restrictions) < len(dietary.restrictions):
                return False

        return True


def filter_by_must_haves(businesses: list[BusinessWithScore], preferences: DiningPreferences) -> list[BusinessWithScore]:
    return MustHaveFilter().filter(businesses, preferences)


def has_preferences_set(preferences: DiningPreferences) -> bool:
    """True if any preference deviates from the defaults."""
    return bool(
        preferences.cuisines.preferred
        or preferences.cuisines.disliked
        or preferences.price_range.min > MIN_PRICE_LEVEL
        or preferences.price_range.max < MAX_PRICE_LEVEL
        or preferences.dietary.restrictions
        or preferences.ambiance.preferred
        or preferences.distance.max_distance < DEFAULT_MAX_DISTANCE
        or preferences.rating.min_rating > 0
        or preferences.rating.min_winks_score is not None
        or preferences.features.preferred
    )


def has_must_haves(preferences: DiningPreferences) -> bool:
    return "must-have" in (
        preferences.cuisines.importance,
        preferences.price_range.importance,
        preferences.dietary.importance,
    )


def relax_must_haves(preferences: DiningPreferences) -> DiningPreferences:
    """Return a copy with every must-have downgraded to high."""
    def relax(block):
        if block.importance == "must-have":
            return block.model_copy(update={"importance": "high"})
        return block

    return preferences.model_copy(update={
        "cuisines": relax(preferences.cuisines),
        "price_range": relax(preferences.price_range),
        "dietary": relax(preferences.dietary),
    })


def sort_by_rating_then_distance(businesses: list[BusinessWithScore]) -> list[BusinessWithScore]:
    def key(item: BusinessWithScore) -> tuple[float, float]:
        distance = item.attributes.distance_from_user
        return (-(item.google_rating or 0.0), distance if distance is not None else math.inf)

    return sorted(businesses, key=key)


def sort_by_relevance(businesses: list[BusinessWithScore]) -> list[BusinessWithScore]:
    return sorted(businesses, key=ranking_key)


def sort_businesses_with_fallback(
    businesses: list[BusinessWithScore],
    preferences: DiningPreferences,
) -> FallbackResult:
    """Filter by must-haves and sort, relaxing must-haves once if nothing survives.

    Without any preferences the relevance score is ignored and businesses are
    ordered by Google rating, then distance.
    """
    if not has_preferences_set(preferences):
        return FallbackResult(businesses=sort_by_rating_then_distance(businesses), relaxed=False)

    must_have_filter = MustHaveFilter()
    filtered = must_have_filter.filter(businesses, preferences)
    relaxed = False

    if not filtered and businesses:
        logger.info(f"No businesses satisfy must-haves; relaxing to high importance ({len(businesses)} candidates)")
        filtered = must_have_filter.filter(businesses, relax_must_haves(preferences))
        relaxed = True

    return FallbackResult(businesses=sort_by_relevance(filtered or businesses), relaxed=relaxed)
