from __future__ import annotations

from datetime import datetime

import pytest

from dining_ranker.schemas import (
    BusinessAttributes,
    BusinessWithScore,
    CuisinePreference,
    DietaryPreference,
    DiningPreferences,
    PlaceRecord,
    PriceRangePreference,
    RelevanceScore,
    ScoreBreakdown,
)

LUNCH_HOUR = 13


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def lunch_clock():
    return lambda: datetime(2024, 5, 1, LUNCH_HOUR, 30)


@pytest.fixture
def trattoria() -> BusinessAttributes:
    """Local Italian place, open for lunch, close by, no ratings yet."""
    return BusinessAttributes(
        cuisine_types=["italian"],
        price_level=2,
        dietary_options=["vegetarian-options"],
        raw_types=["restaurant", "italian_restaurant"],
        rating_count=120,
        distance_from_user=0.4,
    )


@pytest.fixture
def italian_preferences() -> DiningPreferences:
    return DiningPreferences(
        cuisines=CuisinePreference(preferred=["italian"], importance="high"),
        price_range=PriceRangePreference(min=1, max=3, importance="medium"),
        dietary=DietaryPreference(restrictions=["vegan-options"], importance="medium"),
    )


@pytest.fixture
def make_place():
    def _make(place_id: str, **overrides) -> PlaceRecord:
        data = {
            "place_id": place_id,
            "name": f"Place {place_id}",
            "types": ["restaurant", "italian_restaurant"],
            "price_level": 2,
            "user_ratings_total": 120,
        }
        data.update(overrides)
        return PlaceRecord(**data)

    return _make


@pytest.fixture
def make_item():
    def _make(
        place_id: str,
        rating: float | None = None,
        distance: float | None = None,
        total: float | None = None,
        **attribute_overrides,
    ) -> BusinessWithScore:
        attributes = BusinessAttributes(distance_from_user=distance, **attribute_overrides)
        score = None
        if total is not None:
            breakdown = ScoreBreakdown(
                cuisine=50, price=50, dietary=50, ambiance=50, distance=50,
                rating=50, features=50, time=50, niche=50,
            )
            score = RelevanceScore(business_id=place_id, total_score=total, breakdown=breakdown)
        return BusinessWithScore(
            business=PlaceRecord(place_id=place_id, name=place_id, rating=rating),
            attributes=attributes,
            score=score,
            google_rating=rating,
        )

    return _make
