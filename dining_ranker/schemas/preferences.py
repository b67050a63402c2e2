from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Literal, Optional


Importance = Literal["must-have", "high", "medium", "low"]
SoftImportance = Literal["high", "medium", "low"]  # categories that never filter
PoliticalView = Literal["liberal", "conservative", "none"]

MIN_PRICE_LEVEL = 1
MAX_PRICE_LEVEL = 4
DEFAULT_MAX_DISTANCE = 10.0  # miles


class _PreferenceModel(BaseModel):
    """Immutable preference block; accepts both camelCase payload keys and snake_case names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CuisinePreference(_PreferenceModel):
    preferred: list[str] = Field(default_factory=list)
    disliked: list[str] = Field(default_factory=list)
    importance: Importance = "medium"


class PriceRangePreference(_PreferenceModel):
    min: int = Field(default=MIN_PRICE_LEVEL, ge=MIN_PRICE_LEVEL, le=MAX_PRICE_LEVEL)
    max: int = Field(default=MAX_PRICE_LEVEL, ge=MIN_PRICE_LEVEL, le=MAX_PRICE_LEVEL)
    importance: Importance = "medium"

    @model_validator(mode="after")
    def _check_bounds(self) -> "PriceRangePreference":
        if self.min > self.max:
            raise ValueError("Minimum price must be less than or equal to maximum price")
        return self


class DietaryPreference(_PreferenceModel):
    restrictions: list[str] = Field(default_factory=list)
    importance: Importance = "medium"


class AmbiancePreference(_PreferenceModel):
    preferred: list[str] = Field(default_factory=list)
    importance: SoftImportance = "medium"


class DistancePreference(_PreferenceModel):
    max_distance: float = Field(default=DEFAULT_MAX_DISTANCE, gt=0)
    importance: SoftImportance = "medium"


class RatingPreference(_PreferenceModel):
    min_rating: float = Field(default=0.0, ge=0, le=5)
    min_winks_score: Optional[float] = Field(default=None, ge=0)  # community score floor, 0-100
    importance: SoftImportance = "medium"


class FeaturePreference(_PreferenceModel):
    preferred: list[str] = Field(default_factory=list)
    importance: SoftImportance = "low"


class LearningData(_PreferenceModel):
    """Interaction history carried along with preferences. Not used for ranking."""
    viewed_businesses: list[str] = Field(default_factory=list)
    saved_businesses: list[str] = Field(default_factory=list)
    rated_businesses: list[dict[str, Any]] = Field(default_factory=list)


class DiningPreferences(_PreferenceModel):
    """A user's dining preferences, one block per scored category."""
    cuisines: CuisinePreference = Field(default_factory=CuisinePreference)
    price_range: PriceRangePreference = Field(default_factory=PriceRangePreference)
    dietary: DietaryPreference = Field(default_factory=DietaryPreference)
    ambiance: AmbiancePreference = Field(default_factory=AmbiancePreference)
    distance: DistancePreference = Field(default_factory=DistancePreference)
    rating: RatingPreference = Field(default_factory=RatingPreference)
    features: FeaturePreference = Field(default_factory=FeaturePreference)
    political_view: PoliticalView = "none"
    learning_data: LearningData = Field(default_factory=LearningData)
