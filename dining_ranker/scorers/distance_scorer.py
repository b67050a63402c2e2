from typing import Optional

from ..schemas import DistancePreference


NO_DATA_SCORE = 50.0
BEYOND_MAX_SCORE = 0.0

# (upper bound in miles, score), checked in order
DISTANCE_BANDS = [
    (0.5, 100.0),
    (1.0, 75.0),
    (2.0, 50.0),
]
FAR_SCORE = 25.0


def calculate_distance_score(distance: Optional[float], preferences: DistancePreference) -> float:
    """Score proximity in miles; anything past the user's maximum scores 0."""
    if distance is None:
        return NO_DATA_SCORE

    if distance > preferences.max_distance:
        return BEYOND_MAX_SCORE

    for limit, score in DISTANCE_BANDS:
        if distance <= limit:
            return score
    return FAR_SCORE
