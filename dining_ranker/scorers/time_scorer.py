from datetime import datetime
from typing import Optional


# daypart: (start hour, end hour, [(types, score), ...], default score)
DAYPARTS = {
    "morning": (5, 11, [
        ({"bakery", "cafe", "coffee_shop", "breakfast_restaurant"}, 100.0),
        ({"bar", "night_club", "pub"}, 0.0),
    ], 60.0),
    "lunch": (11, 16, [
        ({"sandwich_shop", "meal_takeaway", "restaurant"}, 100.0),
        ({"bar", "night_club"}, 20.0),
    ], 80.0),
    "dinner": (16, 22, [
        ({"restaurant", "fine_dining_restaurant", "steak_house", "bar"}, 100.0),
        ({"cafe", "bakery"}, 40.0),
    ], 80.0),
    "late_night": (22, 5, [
        ({"bar", "night_club", "casino", "meal_delivery"}, 100.0),
        ({"bakery", "cafe", "coffee_shop"}, 10.0),  # mostly closed
    ], 50.0),
}


def daypart_for_hour(hour: int) -> str:
    for name, (start, end, _, _) in DAYPARTS.items():
        if start < end and start <= hour < end:
            return name
    return "late_night"


def calculate_time_score(types: list[str], hour: Optional[int] = None) -> float:
    """Score how well a business fits the current time of day.

    Args:
        types: Provider category tags for the business.
        hour: Hour of day (0-23). Defaults to the local clock.
    """
    if hour is None:
        hour = datetime.now().hour

    lower_types = {t.lower() for t in types}
    _, _, rules, default = DAYPARTS[daypart_for_hour(hour)]

    for rule_types, score in rules:
        if lower_types & rule_types:
            return score
    return default
