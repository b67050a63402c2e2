"""Derive BusinessAttributes from a raw place record.

Inference is deliberately lightweight: it works from provider category tags
and the business name only, so it can run inline during ranking whenever no
stored attributes exist.
"""
import math
from typing import Optional

from .schemas import BusinessAttributes, Location, PlaceRecord


EARTH_RADIUS_MILES = 3959.0

CUISINE_BY_TYPE = {
    # Specific restaurant types
    "italian_restaurant": "italian",
    "mexican_restaurant": "mexican",
    "chinese_restaurant": "chinese",
    "japanese_restaurant": "japanese",
    "thai_restaurant": "thai",
    "indian_restaurant": "indian",
    "french_restaurant": "french",
    "mediterranean_restaurant": "mediterranean",
    "greek_restaurant": "greek",
    "korean_restaurant": "korean",
    "vietnamese_restaurant": "vietnamese",
    "spanish_restaurant": "spanish",
    "middle_eastern_restaurant": "middle-eastern",
    "seafood_restaurant": "seafood",
    "steak_house": "steakhouse",
    "pizza_restaurant": "pizza",
    "hamburger_restaurant": "burger",
    "sushi_restaurant": "sushi",
    "barbecue_restaurant": "bbq",
    "american_restaurant": "american",
    # Cafes and casual
    "cafe": "cafe",
    "coffee_shop": "cafe",
    "bakery": "bakery",
    "dessert_shop": "dessert",
    "ice_cream_shop": "dessert",
    "sandwich_shop": "american",
    "deli": "american",
    # Quick service
    "fast_food_restaurant": "american",
    "meal_takeaway": "takeout",
    # Bars
    "bar": "bar",
    "pub": "bar",
    "sports_bar": "bar",
    "wine_bar": "bar",
    # Asian
    "ramen_restaurant": "japanese",
    "noodle_house": "asian",
    "asian_restaurant": "asian",
    "dim_sum_restaurant": "chinese",
    # Other
    "brazilian_restaurant": "brazilian",
    "turkish_restaurant": "turkish",
    "lebanese_restaurant": "middle-eastern",
    "ethiopian_restaurant": "ethiopian",
    "caribbean_restaurant": "caribbean",
    "soul_food_restaurant": "american",
    "southern_restaurant": "american",
}

GENERIC_CUISINE_TYPES = ["restaurant", "food"]

# (tag, type triggers); a tag is added once when any trigger type is present
AMBIANCE_RULES = [
    ("fine-dining", {"fine_dining_restaurant", "french_restaurant"}),
    ("upscale", {"fine_dining_restaurant", "french_restaurant", "wine_bar", "cocktail_bar"}),
    ("casual", {"cafe", "fast_food_restaurant", "sandwich_shop", "deli", "bakery"}),
    ("family-friendly", {"family_restaurant", "pizza_restaurant", "ice_cream_shop"}),
    ("romantic", {"fine_dining_restaurant", "wine_bar", "french_restaurant", "italian_restaurant"}),
    ("lively", {"bar", "night_club", "live_music_venue", "sports_bar"}),
    ("sports-bar", {"sports_bar"}),
    ("dive-bar", {"dive_bar"}),
    ("cozy", {"cafe", "coffee_shop", "bakery"}),
    ("trendy", {"cocktail_bar", "wine_bar", "sushi_restaurant", "ramen_restaurant"}),
    ("quiet", {"library", "tea_house"}),
]

FEATURE_RULES = [
    ("outdoor-seating", {"outdoor_seating"}),
    ("takeout", {"meal_takeaway", "takeout"}),
    ("delivery", {"meal_delivery", "delivery"}),
    ("bar", {"bar", "liquor_store"}),
    ("parking", {"parking"}),
    ("wheelchair-accessible", {"wheelchair_accessible_entrance"}),
    ("wifi", {"cafe", "coffee_shop"}),
    ("reservations", {"fine_dining_restaurant", "french_restaurant"}),
    ("live-music", {"live_music_venue", "night_club"}),
    ("pet-friendly", {"outdoor_seating", "park"}),
    ("happy-hour", {"bar", "pub", "sports_bar"}),
]

# (option, type triggers, name keywords)
DIETARY_RULES = [
    ("gluten-free-options", set(), ["gluten-free", "gluten free", "gf ", " gf"]),
    ("halal", {"halal_restaurant"}, ["halal", "middle eastern", "turkish", "lebanese"]),
    ("kosher", {"kosher_restaurant"}, ["kosher", "jewish"]),
    ("dairy-free-options", set(), ["dairy-free", "dairy free", "lactose-free"]),
    ("nut-free-options", set(), ["nut-free", "nut free", "allergy-friendly"]),
]

VEGETARIAN_TYPES = {"vegan_restaurant", "vegetarian_restaurant", "salad_bar", "health_food_restaurant"}
VEGETARIAN_NAME_HINTS = ["vegetarian", "salad", "juice bar"]


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in miles."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_between(origin: Optional[Location], place: PlaceRecord) -> Optional[float]:
    if origin is None or place.location is None:
        return None
    return haversine_miles(origin.lat, origin.lng, place.location.lat, place.location.lng)


def infer_cuisine_types(types: list[str]) -> list[str]:
    cuisines = []
    for place_type in types:
        cuisine = CUISINE_BY_TYPE.get(place_type)
        if cuisine and cuisine not in cuisines:
            cuisines.append(cuisine)

    if not cuisines:
        cuisines = [t for t in GENERIC_CUISINE_TYPES if t in types]
    return cuisines


def infer_dietary_options(types: list[str], name: str) -> list[str]:
    options = []
    name_lower = name.lower()
    type_set = set(types)

    if "vegan" in name_lower or "vegan_restaurant" in type_set:
        options += ["vegan-options", "vegetarian-options"]
    elif type_set & VEGETARIAN_TYPES or any(hint in name_lower for hint in VEGETARIAN_NAME_HINTS):
        options.append("vegetarian-options")

    for option, trigger_types, keywords in DIETARY_RULES:
        if type_set & trigger_types or any(keyword in name_lower for keyword in keywords):
            options.append(option)

    return options


def _apply_rules(types: list[str], rules: list[tuple[str, set[str]]]) -> list[str]:
    type_set = set(types)
    return [tag for tag, triggers in rules if type_set & triggers]


def infer_ambiance_tags(types: list[str]) -> list[str]:
    return _apply_rules(types, AMBIANCE_RULES)


def infer_features(types: list[str]) -> list[str]:
    return _apply_rules(types, FEATURE_RULES)


def infer_business_attributes(place: PlaceRecord, user_location: Optional[Location] = None) -> BusinessAttributes:
    """Build attributes for a place that has nothing stored yet."""
    types = place.types
    price_level = place.price_level if place.price_level and 1 <= place.price_level <= 4 else None

    return BusinessAttributes(
        cuisine_types=infer_cuisine_types(types),
        price_level=price_level,
        dietary_options=infer_dietary_options(types, place.name),
        ambiance_tags=infer_ambiance_tags(types),
        features=infer_features(types),
        distance_from_user=distance_between(user_location, place),
        rating_count=place.user_ratings_total,
        raw_types=list(types),
        source="inferred",
    )
