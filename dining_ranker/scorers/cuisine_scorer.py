from ._matching import matches_any
from ..schemas import CuisinePreference
from ..vocabulary import RELATED_CUISINE_GROUPS


DISLIKED_SCORE = 0.0
NO_PREFERENCE_SCORE = 75.0  # below 100 so an empty preference doesn't out-rank a real match
NO_DATA_SCORE = 50.0
EXACT_MATCH_BASE = 75.0
EXACT_MATCH_SPAN = 25.0
RELATED_MATCH_SCORE = 50.0
NO_MATCH_SCORE = 25.0


def _in_group(cuisines: list[str], group: list[str]) -> bool:
    for cuisine in cuisines:
        lowered = cuisine.lower()
        if any(member in lowered or lowered in member for member in group):
            return True
    return False


def has_related_cuisine(business_cuisines: list[str], preferred: list[str]) -> bool:
    """Check whether a preferred and a business cuisine share a regional group."""
    for group in RELATED_CUISINE_GROUPS.values():
        if _in_group(preferred, group) and _in_group(business_cuisines, group):
            return True
    return False


def calculate_cuisine_score(business_cuisines: list[str], preferences: CuisinePreference) -> float:
    """Score cuisine fit from 0 to 100.

    A disliked cuisine always scores 0. Exact (substring) matches scale from
    75 to 100 by the share of preferred cuisines covered; cuisines from the
    same regional group get 50; anything else gets 25.
    """
    if any(matches_any(cuisine, preferences.disliked) for cuisine in business_cuisines):
        return DISLIKED_SCORE

    if not preferences.preferred:
        return NO_PREFERENCE_SCORE

    if not business_cuisines:
        return NO_DATA_SCORE

    exact_matches = sum(1 for cuisine in business_cuisines if matches_any(cuisine, preferences.preferred))
    if exact_matches > 0:
        match_ratio = min(exact_matches / len(preferences.preferred), 1.0)
        return EXACT_MATCH_BASE + match_ratio * EXACT_MATCH_SPAN

    if has_related_cuisine(business_cuisines, preferences.preferred):
        return RELATED_MATCH_SCORE
    return NO_MATCH_SCORE
