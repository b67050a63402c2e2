"""Validate and sanitize raw preference payloads before they reach the scorers.

Payloads arrive as plain dicts using the camelCase keys of the client
(``priceRange``, ``maxDistance``...); snake_case keys are accepted as well.
``validate_dining_preferences`` reports every problem, while
``sanitize_dining_preferences`` repairs what it can and falls back to the
defaults for the rest.
"""
import logging
import math
from typing import Any, Optional, get_args

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.alias_generators import to_snake

from .errors import PreferenceValidationError
from .schemas import (
    DEFAULT_MAX_DISTANCE,
    MAX_PRICE_LEVEL,
    MIN_PRICE_LEVEL,
    AmbiancePreference,
    CuisinePreference,
    DietaryPreference,
    DiningPreferences,
    DistancePreference,
    FeaturePreference,
    Importance,
    LearningData,
    PoliticalView,
    PriceRangePreference,
    RatingPreference,
    SoftImportance,
)
from .vocabulary import AMBIANCE_TAGS, CUISINE_TYPES, DIETARY_OPTIONS, FEATURE_OPTIONS

logger = logging.getLogger(__name__)

ALL_IMPORTANCE = list(get_args(Importance))
SOFT_IMPORTANCE = list(get_args(SoftImportance))
POLITICAL_VIEWS = list(get_args(PoliticalView))

ERROR_MESSAGES = {
    "importance": "Importance level must be one of: must-have, high, medium, low",
    "price_range": "Price range must be between 1 and 4",
    "price_min_max": "Minimum price must be less than or equal to maximum price",
    "cuisine": "Invalid cuisine type",
    "dietary": "Invalid dietary restriction",
    "ambiance": "Invalid ambiance tag",
    "ambiance_importance": "Ambiance importance cannot be must-have",
    "feature": "Invalid feature option",
    "feature_importance": "Feature importance cannot be must-have",
    "distance": "Distance must be a positive number",
    "distance_importance": "Distance importance cannot be must-have",
    "rating": "Rating must be between 0 and 5",
    "rating_importance": "Rating importance cannot be must-have",
    "winks_score": "Winks score must be a positive number or null",
    "political_view": "Political view must be one of: liberal, conservative, none",
    "list": "Expected a list of text values",
}


def _block(raw: dict[str, Any], camel: str, snake: str) -> Optional[dict[str, Any]]:
    value = raw.get(camel, raw.get(snake))
    return value if isinstance(value, dict) else None


def _field(block: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    return block.get(camel, block.get(snake, default))


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


# Validation

# label, payload keys, model, field -> message key, field -> (message key, vocabulary)
SECTIONS = [
    ("Cuisine", ("cuisines", "cuisines"), CuisinePreference,
     {"importance": "importance"},
     {"preferred": ("cuisine", CUISINE_TYPES), "disliked": ("cuisine", CUISINE_TYPES)}),
    ("Price", ("priceRange", "price_range"), PriceRangePreference,
     {"importance": "importance", "min": "price_range", "max": "price_range"},
     {}),
    ("Dietary", ("dietary", "dietary"), DietaryPreference,
     {"importance": "importance"},
     {"restrictions": ("dietary", DIETARY_OPTIONS)}),
    ("Ambiance", ("ambiance", "ambiance"), AmbiancePreference,
     {"importance": "ambiance_importance"},
     {"preferred": ("ambiance", AMBIANCE_TAGS)}),
    ("Distance", ("distance", "distance"), DistancePreference,
     {"importance": "distance_importance", "max_distance": "distance"},
     {}),
    ("Rating", ("rating", "rating"), RatingPreference,
     {"importance": "rating_importance", "min_rating": "rating", "min_winks_score": "winks_score"},
     {}),
    ("Features", ("features", "features"), FeaturePreference,
     {"importance": "feature_importance"},
     {"preferred": ("feature", FEATURE_OPTIONS)}),
]

_political_view_adapter = TypeAdapter(PoliticalView)


def _model_errors(model: type[BaseModel], block: dict[str, Any], field_messages: dict[str, str]) -> list[str]:
    """Translate the model's own validation errors into user-facing messages."""
    try:
        model.model_validate(block)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            if not error["loc"]:
                # model-level check, e.g. min > max
                message = str(error.get("ctx", {}).get("error", error["msg"]))
            else:
                field = to_snake(str(error["loc"][0]))
                key = field_messages.get(field)
                if key == "price_range":
                    message = f"{ERROR_MESSAGES[key]} ({field}: {error['input']})"
                elif key is not None:
                    message = ERROR_MESSAGES[key]
                else:
                    message = f"{ERROR_MESSAGES['list']} ({field})"
            if message not in errors:
                errors.append(message)
        return errors
    return []


def _vocabulary_errors(block: dict[str, Any], checks: dict[str, tuple[str, list[str]]]) -> list[str]:
    errors = []
    for field, (key, known) in checks.items():
        invalid = [v for v in _string_list(block.get(field)) if v not in known]
        if invalid:
            errors.append(f"{ERROR_MESSAGES[key]}: {', '.join(invalid)}")
    return errors


def validate_dining_preferences(raw: dict[str, Any]) -> list[str]:
    """Return every problem found in a raw preferences payload, prefixed by section."""
    errors = []
    for label, (camel, snake), model, field_messages, vocabulary in SECTIONS:
        block = _block(raw, camel, snake)
        if block is None:
            continue
        section_errors = _model_errors(model, block, field_messages) + _vocabulary_errors(block, vocabulary)
        errors.extend(f"{label}: {error}" for error in section_errors)

    try:
        _political_view_adapter.validate_python(_field(raw, "politicalView", "political_view", "none"))
    except ValidationError:
        errors.append(f"Political view: {ERROR_MESSAGES['political_view']}")
    return errors


# Sanitization

def _pick(value: Any, allowed: list[str], default: str) -> str:
    return value if value in allowed else default


def _price_level(value: Any, default: int) -> int:
    number = _number(value)
    if number is None:
        return default
    return max(MIN_PRICE_LEVEL, min(MAX_PRICE_LEVEL, math.floor(number)))


def sanitize_dining_preferences(raw: dict[str, Any]) -> DiningPreferences:
    """Coerce a raw payload into valid preferences, dropping what can't be repaired."""
    sections: dict[str, Any] = {}

    cuisines = _block(raw, "cuisines", "cuisines")
    if cuisines is not None:
        sections["cuisines"] = CuisinePreference(
            preferred=[c for c in _string_list(cuisines.get("preferred")) if c in CUISINE_TYPES],
            disliked=[c for c in _string_list(cuisines.get("disliked")) if c in CUISINE_TYPES],
            importance=_pick(cuisines.get("importance"), ALL_IMPORTANCE, "medium"),
        )

    price_range = _block(raw, "priceRange", "price_range")
    if price_range is not None:
        low = _price_level(price_range.get("min"), MIN_PRICE_LEVEL)
        high = _price_level(price_range.get("max"), MAX_PRICE_LEVEL)
        sections["price_range"] = PriceRangePreference(
            min=min(low, high),
            max=max(low, high),
            importance=_pick(price_range.get("importance"), ALL_IMPORTANCE, "medium"),
        )

    dietary = _block(raw, "dietary", "dietary")
    if dietary is not None:
        sections["dietary"] = DietaryPreference(
            restrictions=[r for r in _string_list(dietary.get("restrictions")) if r in DIETARY_OPTIONS],
            importance=_pick(dietary.get("importance"), ALL_IMPORTANCE, "medium"),
        )

    ambiance = _block(raw, "ambiance", "ambiance")
    if ambiance is not None:
        sections["ambiance"] = AmbiancePreference(
            preferred=[a for a in _string_list(ambiance.get("preferred")) if a in AMBIANCE_TAGS],
            importance=_pick(ambiance.get("importance"), SOFT_IMPORTANCE, "medium"),
        )

    distance = _block(raw, "distance", "distance")
    if distance is not None:
        max_distance = _number(_field(distance, "maxDistance", "max_distance"))
        sections["distance"] = DistancePreference(
            max_distance=max(0.1, max_distance) if max_distance is not None else DEFAULT_MAX_DISTANCE,
            importance=_pick(distance.get("importance"), SOFT_IMPORTANCE, "medium"),
        )

    rating = _block(raw, "rating", "rating")
    if rating is not None:
        min_rating = _number(_field(rating, "minRating", "min_rating")) or 0.0
        winks = _number(_field(rating, "minWinksScore", "min_winks_score"))
        sections["rating"] = RatingPreference(
            min_rating=max(0.0, min(5.0, min_rating)),
            min_winks_score=max(0.0, winks) if winks is not None else None,
            importance=_pick(rating.get("importance"), SOFT_IMPORTANCE, "medium"),
        )

    features = _block(raw, "features", "features")
    if features is not None:
        sections["features"] = FeaturePreference(
            preferred=[f for f in _string_list(features.get("preferred")) if f in FEATURE_OPTIONS],
            importance=_pick(features.get("importance"), SOFT_IMPORTANCE, "low"),
        )

    sections["political_view"] = _pick(
        _field(raw, "politicalView", "political_view"), POLITICAL_VIEWS, "none"
    )

    learning_data = _block(raw, "learningData", "learning_data")
    if learning_data is not None:
        try:
            sections["learning_data"] = LearningData.model_validate(learning_data)
        except ValidationError:
            logger.warning("Discarding malformed learning data")

    return DiningPreferences(**sections)


def parse_preferences(raw: dict[str, Any], strict: bool = False) -> DiningPreferences:
    """Validate a payload, then sanitize it.

    With ``strict`` any validation error raises PreferenceValidationError;
    otherwise errors are logged and the sanitized result is returned.
    """
    errors = validate_dining_preferences(raw)
    if errors:
        if strict:
            raise PreferenceValidationError(errors)
        logger.warning(f"Sanitizing preferences with {len(errors)} problem(s): {'; '.join(errors)}")
    return sanitize_dining_preferences(raw)
