from ._matching import matches_any
from ..schemas import FeaturePreference


NO_PREFERENCE_SCORE = 100.0
NO_DATA_SCORE = 50.0


def calculate_features_score(features: list[str], preferences: FeaturePreference) -> float:
    """Score the share of preferred features the business offers."""
    if not preferences.preferred:
        return NO_PREFERENCE_SCORE

    if not features:
        return NO_DATA_SCORE

    available = sum(1 for feature in preferences.preferred if matches_any(feature, features))
    return available / len(preferences.preferred) * 100
