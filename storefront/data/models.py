"""
Pydantic v2 models for the catalog document (shop.json).

Wire names are camelCase; Python attributes are snake_case. Models accept
either name and ignore unknown keys so that newer documents still load.
Relations from a product into the vocabularies (categories, brands, colors,
sizes) are plain id matches and are never validated against each other.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base for every catalog model: camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


#
# Vocabularies
#

class Category(CatalogModel):
    id: str
    name: str
    count: int = 0


class Brand(CatalogModel):
    id: str
    name: str


class Color(CatalogModel):
    id: str
    name: str
    css_class: str = Field(default="", alias="class", description="Theme CSS class for the swatch")
    hex: str = ""


class PriceRange(CatalogModel):
    """Price preset offered by the shop sidebar, e.g. "$0.00 - $50.00"."""
    id: str
    label: str
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)


class DetailedDescription(CatalogModel):
    products_info: str = ""
    material_used: str = ""


#
# Products
#

class Product(CatalogModel):
    """
    Canonical catalog entry.

    ``id`` is the stable numeric identity used for relations and for the
    "newest" ordering; ``uuid`` is an alternate opaque key.
    """
    id: int = Field(..., ge=0)
    uuid: str = ""
    sku: str = ""
    name: str
    slug: str = ""
    description: str = ""
    short_description: str = ""

    price: float = Field(0.0, ge=0)
    original_price: float = Field(0.0, ge=0)
    sale: bool = False
    sale_percentage: float = 0

    brand: str = ""
    category_id: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    thumbnail: str = ""
    thumbnails: Optional[List[str]] = None
    colors: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)

    rating: float = 0
    review_count: int = 0
    stock: int = 0

    # Merchandising flags (independent of each other)
    featured: bool = False
    new_arrival: bool = False
    hot_sale: bool = False
    best_seller: bool = False

    material: str = ""
    additional_info: str = ""
    video_url: Optional[str] = None
    detailed_description: Optional[DetailedDescription] = None

    # Ids of other products; may reference ids missing from the collection
    related_products: List[int] = Field(default_factory=list)


class CatalogDocument(CatalogModel):
    """One fetched snapshot: the product collection plus reference vocabularies."""
    categories: List[Category] = Field(default_factory=list)
    brands: List[Brand] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[Color] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    price_ranges: List[PriceRange] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Serialize back to the wire shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
