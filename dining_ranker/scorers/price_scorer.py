from typing import Optional

from ..schemas import PriceRangePreference


NO_DATA_SCORE = 50.0
IN_RANGE_SCORE = 100.0
ONE_LEVEL_OFF_SCORE = 50.0
OUT_OF_RANGE_SCORE = 0.0


def calculate_price_score(price_level: Optional[int], preferences: PriceRangePreference) -> float:
    """Score price fit: full credit inside the range, half credit one level outside."""
    if price_level is None:
        return NO_DATA_SCORE

    if preferences.min <= price_level <= preferences.max:
        return IN_RANGE_SCORE

    if price_level == preferences.min - 1 or price_level == preferences.max + 1:
        return ONE_LEVEL_OFF_SCORE

    return OUT_OF_RANGE_SCORE
