from __future__ import annotations

import pytest

from dining_ranker.filters import (
    MustHaveFilter,
    filter_by_must_haves,
    has_preferences_set,
    relax_must_haves,
    sort_businesses_with_fallback,
)
from dining_ranker.fusion import category_has_preference
from dining_ranker.schemas import (
    DEFAULT_MAX_DISTANCE,
    MAX_PRICE_LEVEL,
    MIN_PRICE_LEVEL,
    AmbiancePreference,
    CuisinePreference,
    DietaryPreference,
    DiningPreferences,
    DistancePreference,
    FeaturePreference,
    PriceRangePreference,
    RatingPreference,
)


def must_have_cuisine(*preferred: str, disliked: tuple[str, ...] = ()) -> DiningPreferences:
    return DiningPreferences(
        cuisines=CuisinePreference(preferred=list(preferred), disliked=list(disliked), importance="must-have"),
    )


def test_must_have_cuisine_filters_mismatches(make_item):
    items = [
        make_item("it", cuisine_types=["italian"]),
        make_item("mx", cuisine_types=["mexican"]),
    ]
    kept = filter_by_must_haves(items, must_have_cuisine("italian"))
    assert [i.business_id for i in kept] == ["it"]


def test_must_have_cuisine_rejects_disliked(make_item):
    items = [make_item("sushi", cuisine_types=["sushi", "japanese"])]
    assert filter_by_must_haves(items, must_have_cuisine(disliked=("sushi",))) == []


def test_non_must_have_preferences_never_filter(make_item):
    prefs = DiningPreferences(cuisines=CuisinePreference(preferred=["italian"], importance="high"))
    items = [make_item("mx", cuisine_types=["mexican"])]
    assert filter_by_must_haves(items, prefs) == items


def test_must_have_price_gives_unknown_price_benefit_of_doubt(make_item):
    prefs = DiningPreferences(price_range=PriceRangePreference(min=1, max=2, importance="must-have"))
    items = [
        make_item("cheap", price_level=1),
        make_item("pricey", price_level=4),
        make_item("unknown"),
    ]
    kept = filter_by_must_haves(items, prefs)
    assert [i.business_id for i in kept] == ["cheap", "unknown"]


def test_must_have_dietary_requires_every_restriction(make_item):
    prefs = DiningPreferences(
        dietary=DietaryPreference(restrictions=["vegan-options", "gluten-free-options"], importance="must-have"),
    )
    items = [
        make_item("both", dietary_options=["vegan-options", "gluten-free-options"]),
        make_item("one", dietary_options=["vegan-options"]),
        make_item("unknown"),
    ]
    kept = filter_by_must_haves(items, prefs)
    assert [i.business_id for i in kept] == ["both", "unknown"]


def test_filtering_is_idempotent(make_item):
    prefs = must_have_cuisine("italian")
    items = [
        make_item("a", cuisine_types=["italian"]),
        make_item("b", cuisine_types=["thai"]),
        make_item("c", cuisine_types=["italian", "pizza"]),
    ]
    once = MustHaveFilter().filter(items, prefs)
    assert MustHaveFilter().filter(once, prefs) == once


def test_relax_must_haves_downgrades_to_high_only():
    prefs = DiningPreferences(
        cuisines=CuisinePreference(preferred=["italian"], importance="must-have"),
        price_range=PriceRangePreference(importance="low"),
        dietary=DietaryPreference(restrictions=["halal"], importance="must-have"),
    )
    relaxed = relax_must_haves(prefs)

    assert relaxed.cuisines.importance == "high"
    assert relaxed.dietary.importance == "high"
    assert relaxed.price_range.importance == "low"
    assert relaxed.cuisines.preferred == ["italian"]
    assert prefs.cuisines.importance == "must-have"


def test_defaults_mean_no_preferences():
    assert not has_preferences_set(DiningPreferences())
    assert not has_preferences_set(DiningPreferences(political_view="liberal"))


@pytest.mark.parametrize("prefs", [
    DiningPreferences(cuisines=CuisinePreference(preferred=["thai"])),
    DiningPreferences(cuisines=CuisinePreference(disliked=["thai"])),
    DiningPreferences(price_range=PriceRangePreference(min=2)),
    DiningPreferences(price_range=PriceRangePreference(max=3)),
    DiningPreferences(dietary=DietaryPreference(restrictions=["halal"])),
    DiningPreferences(ambiance=AmbiancePreference(preferred=["cozy"])),
    DiningPreferences(distance=DistancePreference(max_distance=5)),
    DiningPreferences(rating=RatingPreference(min_rating=4)),
    DiningPreferences(rating=RatingPreference(min_winks_score=0)),
    DiningPreferences(features=FeaturePreference(preferred=["wifi"])),
])
def test_any_deviation_counts_as_preferences(prefs):
    assert has_preferences_set(prefs)


def test_fallback_sort_without_preferences(make_item):
    items = [
        make_item("mid", rating=4.0, distance=1.0),
        make_item("unrated", rating=None, distance=0.1),
        make_item("top_far", rating=4.8, distance=5.0),
        make_item("top_near", rating=4.8, distance=0.5),
        make_item("top_unknown", rating=4.8),
    ]
    result = sort_businesses_with_fallback(items, DiningPreferences())

    assert not result.relaxed
    assert [i.business_id for i in result.businesses] == ["top_near", "top_far", "top_unknown", "mid", "unrated"]


def test_fallback_relaxes_when_filter_empties_results(make_item):
    items = [
        make_item("it", cuisine_types=["italian"], total=40),
        make_item("fr", cuisine_types=["french"], total=60),
    ]
    result = sort_businesses_with_fallback(items, must_have_cuisine("japanese"))

    assert result.relaxed
    assert [i.business_id for i in result.businesses] == ["fr", "it"]


def test_fallback_does_not_relax_when_something_survives(make_item):
    items = [
        make_item("jp", cuisine_types=["japanese"], total=40),
        make_item("fr", cuisine_types=["french"], total=60),
    ]
    result = sort_businesses_with_fallback(items, must_have_cuisine("japanese"))

    assert not result.relaxed
    assert [i.business_id for i in result.businesses] == ["jp"]


def test_fallback_with_empty_input_is_not_relaxed():
    result = sort_businesses_with_fallback([], must_have_cuisine("japanese"))
    assert result.businesses == []
    assert not result.relaxed


@pytest.mark.parametrize("prefs, category, expected", [
    (DiningPreferences(distance=DistancePreference(max_distance=DEFAULT_MAX_DISTANCE)), "distance", False),
    (DiningPreferences(distance=DistancePreference(max_distance=DEFAULT_MAX_DISTANCE - 0.5)), "distance", True),
    (DiningPreferences(price_range=PriceRangePreference(min=MIN_PRICE_LEVEL, max=MAX_PRICE_LEVEL)), "price", False),
    (DiningPreferences(price_range=PriceRangePreference(min=MIN_PRICE_LEVEL + 1)), "price", True),
    (DiningPreferences(price_range=PriceRangePreference(max=MAX_PRICE_LEVEL - 1)), "price", True),
])
def test_category_preference_agrees_with_preferences_set(prefs, category, expected):
    assert category_has_preference(prefs, category) is expected
    assert has_preferences_set(prefs) is expected
