from typing import Optional

from ..vocabulary import CHAIN_NAMES


CHAIN_SCORE = 10.0
FAST_FOOD_CHAIN_SCORE = 30.0
LOCAL_GEM_SCORE = 100.0
ESTABLISHED_SCORE = 50.0
DEFAULT_SCORE = 80.0

FAST_FOOD_RATING_COUNT = 1000
LOCAL_GEM_RATING_COUNT = (10, 500)  # exclusive bounds
ESTABLISHED_RATING_COUNT = 2000


def is_chain(name: str) -> bool:
    lower_name = name.lower()
    return any(chain in lower_name for chain in CHAIN_NAMES)


def calculate_niche_score(rating_count: Optional[int], types: list[str], name: str) -> float:
    """Penalize known chains and boost likely local spots."""
    if is_chain(name):
        return CHAIN_SCORE

    count = rating_count or 0

    if count > FAST_FOOD_RATING_COUNT and "fast_food_restaurant" in types:
        return FAST_FOOD_CHAIN_SCORE

    low, high = LOCAL_GEM_RATING_COUNT
    if low < count < high:
        return LOCAL_GEM_SCORE

    if count > ESTABLISHED_RATING_COUNT:
        return ESTABLISHED_SCORE

    return DEFAULT_SCORE
