from ._matching import matches_any
from ..schemas import AmbiancePreference


NO_PREFERENCE_SCORE = 100.0
NO_DATA_SCORE = 50.0
MATCH_SCORE = 100.0
NO_MATCH_SCORE = 0.0


def calculate_ambiance_score(ambiance_tags: list[str], preferences: AmbiancePreference) -> float:
    if not preferences.preferred:
        return NO_PREFERENCE_SCORE

    if not ambiance_tags:
        return NO_DATA_SCORE

    if any(matches_any(tag, preferences.preferred) for tag in ambiance_tags):
        return MATCH_SCORE
    return NO_MATCH_SCORE
