"""Known values for cuisines, dietary options, ambiance tags and features."""

CUISINE_TYPES = [
    "american", "italian", "mexican", "chinese", "japanese", "thai", "indian",
    "french", "mediterranean", "greek", "korean", "vietnamese", "spanish",
    "middle-eastern", "seafood", "steakhouse", "pizza", "burger", "sushi",
    "bbq", "cafe", "bakery", "dessert",
]

DIETARY_OPTIONS = [
    "vegetarian-options",
    "vegan-options",
    "gluten-free-options",
    "halal",
    "kosher",
    "dairy-free-options",
    "nut-free-options",
]

AMBIANCE_TAGS = [
    "casual", "fine-dining", "family-friendly", "romantic", "lively", "quiet",
    "trendy", "cozy", "upscale", "dive-bar", "sports-bar",
]

FEATURE_OPTIONS = [
    "outdoor-seating", "wifi", "parking", "wheelchair-accessible", "takeout",
    "delivery", "reservations", "live-music", "pet-friendly", "bar", "happy-hour",
]

# Cuisines considered close enough to earn partial credit when nothing matches exactly
RELATED_CUISINE_GROUPS = {
    "asian": ["japanese", "chinese", "thai", "vietnamese", "korean", "indian"],
    "european": ["italian", "french", "spanish", "greek", "german"],
    "latin": ["mexican", "spanish", "cuban", "brazilian", "peruvian"],
    "mediterranean": ["greek", "turkish", "lebanese", "moroccan", "italian"],
}

CHAIN_NAMES = [
    "dunkin", "starbucks", "mcdonald", "subway", "burger king", "wendy",
    "taco bell", "kfc", "pizza hut", "domino", "papa john", "chick-fil-a",
    "chipotle", "panera", "panda express", "sonic", "dairy queen",
]
