class RankerError(Exception):
    """Base exception for dining_ranker."""


class AttributeStoreError(RankerError):
    """Reading from or writing to the attribute store failed."""


class PreferenceValidationError(RankerError):
    """Preferences failed validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors) or "Invalid preferences")
