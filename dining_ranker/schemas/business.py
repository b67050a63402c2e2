from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Literal, Optional
from datetime import datetime


class BusinessAttributes(BaseModel):
    """Normalized facts about a business used by the scorers."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    cuisine_types: list[str] = Field(default_factory=list)  # italian, sushi, cafe
    price_level: Optional[int] = Field(default=None, ge=1, le=4)
    dietary_options: list[str] = Field(default_factory=list)  # vegan-options, halal
    ambiance_tags: list[str] = Field(default_factory=list)  # cozy, romantic
    features: list[str] = Field(default_factory=list)  # wifi, outdoor-seating
    distance_from_user: Optional[float] = Field(default=None, ge=0)  # miles
    rating_count: Optional[int] = Field(default=None, ge=0)
    raw_types: list[str] = Field(default_factory=list)  # provider category tags

    # Metadata
    source: Literal["google", "inferred", "manual"] = "inferred"
    last_updated: datetime = Field(default_factory=datetime.now)

    @field_validator("cuisine_types", "dietary_options", "ambiance_tags", "features", mode="after")
    @classmethod
    def _dedupe(cls, values: list[str]) -> list[str]:
        return list(dict.fromkeys(values))

    @property
    def category_types(self) -> list[str]:
        """Lowercased provider types, falling back to cuisine types."""
        types = self.raw_types or self.cuisine_types
        return [t.lower() for t in types]


class Location(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class PlaceRecord(BaseModel):
    """Raw candidate business as returned by the place-search provider."""
    place_id: Optional[str] = None
    name: str = ""
    types: list[str] = Field(default_factory=list)
    price_level: Optional[int] = Field(default=None, ge=0, le=4)  # 0 means free
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    user_ratings_total: Optional[int] = Field(default=None, ge=0)
    location: Optional[Location] = None

    # Community ("Winks") score, 0-100
    community_score: Optional[float] = Field(default=None, ge=0, le=100)
