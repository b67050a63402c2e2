from .cuisine_scorer import calculate_cuisine_score, has_related_cuisine
from .price_scorer import calculate_price_score
from .dietary_scorer import calculate_dietary_score, restrictions_met
from .ambiance_scorer import calculate_ambiance_score
from .distance_scorer import calculate_distance_score
from .rating_scorer import calculate_rating_score, effective_community_floor
from .feature_scorer import calculate_features_score
from .time_scorer import calculate_time_score, daypart_for_hour
from .niche_scorer import calculate_niche_score, is_chain
from ._matching import loosely_matches, matches_any

__all__ = [
    "calculate_cuisine_score",
    "has_related_cuisine",
    "calculate_price_score",
    "calculate_dietary_score",
    "restrictions_met",
    "calculate_ambiance_score",
    "calculate_distance_score",
    "calculate_rating_score",
    "effective_community_floor",
    "calculate_features_score",
    "calculate_time_score",
    "daypart_for_hour",
    "calculate_niche_score",
    "is_chain",
    "loosely_matches",
    "matches_any",
]
