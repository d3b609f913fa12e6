"""
Filter criteria for product listings.

Every dimension is independently optional. ``None`` means "no constraint" and
is ignored by the engine; a non-empty value constrains the result. Criteria
that cannot constrain anything meaningfully (empty id collection, blank search,
inverted price range) are treated as unset rather than rejected.
"""
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PriceBounds(BaseModel):
    """Inclusive price range."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(0.0, description="Lowest price (inclusive)")
    max: float = Field(float("inf"), description="Highest price (inclusive)")

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max


class ProductFilters(BaseModel):
    """
    Listing criteria. All set fields compose with AND.

    - categories / sizes / colors / tags: product matches if it has ANY of the ids
    - brands: product's single brand must be one of the ids
    - price_range: inclusive bounds on price
    - search: case-insensitive substring of name, description or a tag
    - flag fields: exact equality on the product flag
    """
    model_config = ConfigDict(extra="ignore")

    categories: Optional[FrozenSet[str]] = None
    brands: Optional[FrozenSet[str]] = None
    sizes: Optional[FrozenSet[str]] = None
    colors: Optional[FrozenSet[str]] = None
    tags: Optional[FrozenSet[str]] = None
    price_range: Optional[PriceBounds] = None
    search: Optional[str] = None

    sale: Optional[bool] = None
    featured: Optional[bool] = None
    new_arrival: Optional[bool] = None
    hot_sale: Optional[bool] = None
    best_seller: Optional[bool] = None

    @field_validator("categories", "brands", "sizes", "colors", "tags")
    @classmethod
    def _empty_collection_is_unset(cls, v: Optional[FrozenSet[str]]) -> Optional[FrozenSet[str]]:
        return v or None

    @field_validator("search")
    @classmethod
    def _blank_search_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _inverted_price_range_is_unset(self) -> "ProductFilters":
        if self.price_range is not None and self.price_range.min > self.price_range.max:
            self.price_range = None
        return self

    def is_empty(self) -> bool:
        """True when no dimension is set."""
        return all(value is None for value in self.__dict__.values())
