def loosely_matches(a: str, b: str) -> bool:
    """Case-insensitive substring match in either direction."""
    a, b = a.lower(), b.lower()
    return a in b or b in a


def matches_any(value: str, candidates: list[str]) -> bool:
    return any(loosely_matches(value, candidate) for candidate in candidates)
