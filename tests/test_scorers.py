from __future__ import annotations

import pytest

from dining_ranker.schemas import (
    AmbiancePreference,
    CuisinePreference,
    DietaryPreference,
    DiningPreferences,
    DistancePreference,
    FeaturePreference,
    PriceRangePreference,
    RatingPreference,
)
from dining_ranker.scorers import (
    calculate_ambiance_score,
    calculate_cuisine_score,
    calculate_dietary_score,
    calculate_distance_score,
    calculate_features_score,
    calculate_niche_score,
    calculate_price_score,
    calculate_rating_score,
    calculate_time_score,
    daypart_for_hour,
)


# Cuisine

def test_disliked_cuisine_scores_zero_even_when_preferred():
    prefs = CuisinePreference(preferred=["italian"], disliked=["pizza"])
    assert calculate_cuisine_score(["italian", "pizza"], prefs) == 0


def test_disliked_match_is_substring_either_direction():
    prefs = CuisinePreference(disliked=["sushi"])
    assert calculate_cuisine_score(["sushi bar"], prefs) == 0


def test_cuisine_neutral_values():
    assert calculate_cuisine_score(["italian"], CuisinePreference()) == 75
    assert calculate_cuisine_score([], CuisinePreference(preferred=["italian"])) == 50


def test_cuisine_exact_match_scales_with_coverage():
    assert calculate_cuisine_score(["italian"], CuisinePreference(preferred=["italian"])) == 100
    prefs = CuisinePreference(preferred=["italian", "mexican"])
    assert calculate_cuisine_score(["italian"], prefs) == 87.5


def test_cuisine_related_group_and_no_match():
    assert calculate_cuisine_score(["thai"], CuisinePreference(preferred=["japanese"])) == 50
    assert calculate_cuisine_score(["italian"], CuisinePreference(preferred=["mexican", "chinese"])) == 25


# Price

@pytest.mark.parametrize("level,expected", [(1, 50), (2, 100), (3, 100), (4, 50)])
def test_price_within_and_one_off(level, expected):
    assert calculate_price_score(level, PriceRangePreference(min=2, max=3)) == expected


@pytest.mark.parametrize("level", [3, 4])
def test_price_far_outside_scores_zero(level):
    assert calculate_price_score(level, PriceRangePreference(min=1, max=1)) == 0


def test_price_unknown_is_neutral():
    assert calculate_price_score(None, PriceRangePreference(min=1, max=1)) == 50


# Dietary

def test_dietary_neutral_values():
    assert calculate_dietary_score([], DietaryPreference()) == 100
    assert calculate_dietary_score([], DietaryPreference(restrictions=["halal"])) == 50


def test_dietary_is_proportional_and_monotonic():
    restrictions = ["vegan-options", "halal", "kosher", "gluten-free-options"]
    prefs = DietaryPreference(restrictions=restrictions)
    scores = [calculate_dietary_score(restrictions[:n] or ["dairy-free-options"], prefs) for n in range(5)]
    assert scores == sorted(scores)
    assert scores[2] == 50
    assert scores[-1] == 100


# Ambiance

def test_ambiance_is_binary():
    prefs = AmbiancePreference(preferred=["romantic", "quiet"])
    assert calculate_ambiance_score(["romantic", "upscale"], prefs) == 100
    assert calculate_ambiance_score(["lively"], prefs) == 0
    assert calculate_ambiance_score([], prefs) == 50
    assert calculate_ambiance_score(["lively"], AmbiancePreference()) == 100


# Distance

@pytest.mark.parametrize("miles,expected", [
    (None, 50),
    (0.2, 100),
    (0.5, 100),
    (0.8, 75),
    (1.0, 75),
    (2.0, 50),
    (3.0, 25),
    (11.0, 0),
])
def test_distance_bands(miles, expected):
    assert calculate_distance_score(miles, DistancePreference(max_distance=10)) == expected


def test_distance_beyond_tight_maximum():
    assert calculate_distance_score(0.8, DistancePreference(max_distance=0.5)) == 0


# Rating

def test_rating_neutral_without_data():
    assert calculate_rating_score(None, None, DiningPreferences()) == 50


def test_rating_single_source():
    assert calculate_rating_score(4.0, None, DiningPreferences()) == 80
    assert calculate_rating_score(None, 90, DiningPreferences()) == 90


def test_rating_blends_community_and_google():
    assert calculate_rating_score(4.0, 90, DiningPreferences()) == pytest.approx(87)


def test_rating_below_google_floor_is_halved():
    prefs = DiningPreferences(rating=RatingPreference(min_rating=4.5))
    assert calculate_rating_score(4.0, None, prefs) == 40


def test_rating_below_community_floor_is_halved():
    prefs = DiningPreferences(rating=RatingPreference(min_winks_score=70))
    assert calculate_rating_score(None, 60, prefs) == 30


def test_political_view_overrides_community_floor():
    liberal = DiningPreferences(political_view="liberal")
    assert calculate_rating_score(None, 60, liberal) == 30

    conservative = DiningPreferences(political_view="conservative", rating=RatingPreference(min_winks_score=10))
    assert calculate_rating_score(None, 20, conservative) == 10
    assert calculate_rating_score(None, 40, conservative) == 40


# Features

def test_features_proportional():
    prefs = FeaturePreference(preferred=["wifi", "parking"])
    assert calculate_features_score(["wifi", "takeout"], prefs) == 50
    assert calculate_features_score(["wifi", "parking"], prefs) == 100
    assert calculate_features_score([], prefs) == 50
    assert calculate_features_score(["wifi"], FeaturePreference()) == 100


# Time of day

@pytest.mark.parametrize("hour,daypart", [
    (4, "late_night"),
    (5, "morning"),
    (10, "morning"),
    (11, "lunch"),
    (16, "dinner"),
    (21, "dinner"),
    (22, "late_night"),
    (0, "late_night"),
])
def test_daypart_boundaries(hour, daypart):
    assert daypart_for_hour(hour) == daypart


@pytest.mark.parametrize("types,hour,expected", [
    (["cafe"], 8, 100),
    (["bar"], 8, 0),
    (["museum"], 8, 60),
    (["restaurant"], 13, 100),
    (["night_club"], 13, 20),
    (["museum"], 13, 80),
    (["steak_house"], 19, 100),
    (["bakery"], 19, 40),
    (["museum"], 19, 80),
    (["bar"], 23, 100),
    (["coffee_shop"], 2, 10),
    (["museum"], 3, 50),
])
def test_time_score_by_daypart(types, hour, expected):
    assert calculate_time_score(types, hour=hour) == expected


def test_time_score_ignores_case():
    assert calculate_time_score(["Cafe"], hour=8) == 100


# Niche

@pytest.mark.parametrize("count,types,name,expected", [
    (120, ["restaurant"], "Starbucks Reserve", 10),
    (1500, ["fast_food_restaurant"], "Burger Barn", 30),
    (120, ["restaurant"], "Nonna's", 100),
    (3000, ["restaurant"], "Grand Diner", 50),
    (None, ["restaurant"], "New Spot", 80),
    (10, ["restaurant"], "Tiny Spot", 80),
    (700, ["restaurant"], "Steady Spot", 80),
])
def test_niche_score(count, types, name, expected):
    assert calculate_niche_score(count, types, name) == expected
