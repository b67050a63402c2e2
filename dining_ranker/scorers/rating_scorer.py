from typing import Optional

from ..schemas import DiningPreferences


NO_DATA_SCORE = 50.0
COMMUNITY_WEIGHT = 0.7
GOOGLE_WEIGHT = 0.3
BELOW_THRESHOLD_PENALTY = 0.5

# Community score floors implied by a political view
POLITICAL_VIEW_FLOORS = {
    "conservative": 30.0,  # mid to lower community scores
    "liberal": 70.0,  # mid to higher community scores
}


def effective_community_floor(preferences: DiningPreferences) -> Optional[float]:
    return POLITICAL_VIEW_FLOORS.get(preferences.political_view, preferences.rating.min_winks_score)


def calculate_rating_score(
    google_rating: Optional[float],
    community_score: Optional[float],
    preferences: DiningPreferences,
) -> float:
    """Blend the Google rating (0-5) and community score (0-100) into a 0-100 score.

    Community score carries 70% of the blend when both are present. Falling below
    either the minimum Google rating or the effective community floor halves
    the result.
    """
    google_score = google_rating / 5 * 100 if google_rating is not None else None

    if community_score is not None and google_score is not None:
        blended = community_score * COMMUNITY_WEIGHT + google_score * GOOGLE_WEIGHT
    elif community_score is not None:
        blended = community_score
    elif google_score is not None:
        blended = google_score
    else:
        return NO_DATA_SCORE

    community_floor = effective_community_floor(preferences)
    meets_google = google_rating is None or google_rating >= preferences.rating.min_rating
    meets_community = community_floor is None or community_score is None or community_score >= community_floor

    if not meets_google or not meets_community:
        blended *= BELOW_THRESHOLD_PENALTY

    return min(100.0, max(0.0, blended))
