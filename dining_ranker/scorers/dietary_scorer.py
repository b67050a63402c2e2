from ._matching import matches_any
from ..schemas import DietaryPreference


NO_PREFERENCE_SCORE = 100.0
NO_DATA_SCORE = 50.0


def restrictions_met(dietary_options: list[str], restrictions: list[str]) -> int:
    return sum(1 for restriction in restrictions if matches_any(restriction, dietary_options))


def calculate_dietary_score(dietary_options: list[str], preferences: DietaryPreference) -> float:
    """Score the share of dietary restrictions the business can serve."""
    if not preferences.restrictions:
        return NO_PREFERENCE_SCORE

    if not dietary_options:
        return NO_DATA_SCORE

    met = restrictions_met(dietary_options, preferences.restrictions)
    return met / len(preferences.restrictions) * 100
