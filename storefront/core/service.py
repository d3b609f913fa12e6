"""
Storefront service: the entry point UI collaborators call into.

Owns one CatalogLoader and one set of session collections. Every lookup is
derived from the cached catalog plus the query engine; none of them issue
their own network requests. Not-found lookups return None or [].

Usage:
    async with CatalogService() as shop:
        page = await shop.query_products(ProductFilters(brands={"gucci"}), "price-asc")
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

import httpx

from storefront.core.config import StorefrontConfig, get_config
from storefront.data.catalog_loader import CatalogLoader
from storefront.data.models import Brand, CatalogDocument, Category, PriceRange, Product
from storefront.query import engine
from storefront.query.engine import ProductPage, SortOption
from storefront.query.filters import PriceBounds, ProductFilters
from storefront.recommendation import highlights
from storefront.session.collections import ProductCollection, SessionCollections
from storefront.utils.logger import get_logger

logger = get_logger("core.service")

T = TypeVar("T")


def parse_numeric_id(value: Union[int, str]) -> Optional[int]:
    """
    Return `value` as a product id when it is written as a plain number.

    "7" and " 7 " → 7; "07", "7.5", "abc" and "" → None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isascii() and text.isdigit() and str(int(text)) == text:
        return int(text)
    return None


class CatalogService:
    """
    Catalog lookups, listings, highlights and session collections.

    Args:
        config: Settings; defaults to the global config.
        transport: Optional httpx transport forwarded to the loader.
        loader: Pre-built loader (overrides config/transport).
    """

    def __init__(
        self,
        config: Optional[StorefrontConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        loader: Optional[CatalogLoader] = None,
    ) -> None:
        self.config = config or get_config()
        self.loader = loader or CatalogLoader(self.config, transport=transport)
        self.sessions = SessionCollections()

    async def __aenter__(self) -> "CatalogService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Tear down: stop any fetch, drop the cached catalog and empty the session collections."""
        await self.loader.aclose()
        self.sessions.clear()

    #
    # Catalog access
    #

    async def get_catalog(self) -> CatalogDocument:
        return await self.loader.get_catalog()

    async def get_catalog_within(self, timeout: float) -> Optional[CatalogDocument]:
        """
        Wait at most `timeout` seconds for the catalog.

        Returns None when the ceiling is hit. The fetch itself keeps running and
        still fills the cache for later callers.
        """
        try:
            return await asyncio.wait_for(self.loader.get_catalog(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Catalog not ready after %.1fs, continuing without it", timeout)
            return None

    async def get_editable_catalog(self) -> CatalogDocument:
        """Deep copy of the catalog for editing; changes never reach the cache."""
        catalog = await self.get_catalog()
        return catalog.model_copy(deep=True)

    async def _project(self, transform: Callable[[CatalogDocument], T]) -> T:
        """Apply `transform` to the cached catalog; a failing transform re-arms the cache."""
        catalog = await self.get_catalog()
        try:
            return transform(catalog)
        except Exception:
            logger.exception("Catalog transform failed, resetting cache")
            self.loader.invalidate()
            raise

    async def get_products(self) -> List[Product]:
        return await self._project(lambda c: list(c.products))

    #
    # Single-product lookups
    #

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return await self._project(
            lambda c: next((p for p in c.products if p.id == product_id), None)
        )

    async def get_product_by_id_or_uuid(self, value: Union[int, str]) -> Optional[Product]:
        """
        Resolve a route parameter that may be an id or a uuid.

        Numeric input is matched against ids first; only when no id matches is it
        compared with uuids.
        """
        numeric_id = parse_numeric_id(value)
        key = str(value).strip()

        def find(catalog: CatalogDocument) -> Optional[Product]:
            if numeric_id is not None:
                by_id = next((p for p in catalog.products if p.id == numeric_id), None)
                if by_id is not None:
                    return by_id
            return next((p for p in catalog.products if p.uuid == key), None)

        return await self._project(find)

    async def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return await self._project(
            lambda c: next((p for p in c.products if p.slug == slug), None)
        )

    #
    # Multi-product lookups
    #

    async def get_products_by_ids(self, ids: Iterable[int]) -> List[Product]:
        """Products whose id is in `ids`, in catalog order (not input order)."""
        wanted = set(ids)
        return await self._project(lambda c: [p for p in c.products if p.id in wanted])

    async def get_products_by_category(self, category_id: str) -> List[Product]:
        return await self._project(
            lambda c: [p for p in c.products if category_id in p.category_id]
        )

    async def get_products_by_brand(self, brand_id: str) -> List[Product]:
        return await self._project(lambda c: [p for p in c.products if p.brand == brand_id])

    async def get_related_products(self, product_id: int) -> List[Product]:
        """Related products of `product_id`; ids missing from the catalog are skipped."""

        def related(catalog: CatalogDocument) -> List[Product]:
            product = next((p for p in catalog.products if p.id == product_id), None)
            if product is None:
                return []
            wanted = set(product.related_products)
            return [p for p in catalog.products if p.id in wanted]

        return await self._project(related)

    async def search_products(self, term: str) -> List[Product]:
        return await self._project(lambda c: engine.search_products(c.products, term))

    async def _flagged(self, flag: str) -> List[Product]:
        return await self._project(lambda c: [p for p in c.products if getattr(p, flag)])

    async def get_featured_products(self) -> List[Product]:
        return await self._flagged("featured")

    async def get_new_arrivals(self) -> List[Product]:
        return await self._flagged("new_arrival")

    async def get_hot_sales(self) -> List[Product]:
        return await self._flagged("hot_sale")

    async def get_best_sellers(self) -> List[Product]:
        return await self._flagged("best_seller")

    async def get_sale_products(self) -> List[Product]:
        return await self._flagged("sale")

    #
    # Listings
    #

    async def filter_products(self, criteria: Optional[ProductFilters] = None) -> List[Product]:
        return await self._project(lambda c: engine.filter_products(c.products, criteria))

    async def query_products(
        self,
        criteria: Optional[ProductFilters] = None,
        sort_by: Union[SortOption, str, None] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ProductPage:
        size = self.config.page_size if page_size is None else page_size
        return await self._project(
            lambda c: engine.query_products(c.products, criteria, sort_by, page, size)
        )

    # Synchronous helpers for callers that already hold a product list
    sort_products = staticmethod(engine.sort_products)
    paginate = staticmethod(engine.paginate)
    page_count = staticmethod(engine.page_count)

    #
    # Home page sections
    #

    async def get_highlights(self, limit: Optional[int] = None) -> List[Product]:
        n = self.config.highlight_limit if limit is None else limit
        return await self._project(lambda c: highlights.rank_highlights(c.products, n))

    async def get_featured_section(self, limit: Optional[int] = None) -> List[Product]:
        n = self.config.section_limit if limit is None else limit
        return await self._project(lambda c: highlights.featured_section(c.products, n))

    async def get_best_seller_section(self, limit: Optional[int] = None) -> List[Product]:
        n = self.config.section_limit if limit is None else limit
        return await self._project(lambda c: highlights.best_seller_section(c.products, n))

    async def get_hot_sale_section(self, limit: Optional[int] = None) -> List[Product]:
        n = self.config.section_limit if limit is None else limit
        return await self._project(lambda c: highlights.hot_sale_section(c.products, n))

    #
    # Vocabularies
    #

    async def get_categories(self) -> List[Category]:
        return await self._project(lambda c: list(c.categories))

    async def get_brands(self) -> List[Brand]:
        return await self._project(lambda c: list(c.brands))

    async def get_price_ranges(self) -> List[PriceRange]:
        return await self._project(lambda c: list(c.price_ranges))

    async def get_category(self, category_id: str) -> Optional[Category]:
        return await self._project(
            lambda c: next((cat for cat in c.categories if cat.id == category_id), None)
        )

    async def get_brand(self, brand_id: str) -> Optional[Brand]:
        return await self._project(lambda c: next((b for b in c.brands if b.id == brand_id), None))

    async def filters_for_price_range(self, range_id: str) -> ProductFilters:
        """Criteria for a price preset; an unknown preset yields unconstrained criteria."""
        preset = next((r for r in await self.get_price_ranges() if r.id == range_id), None)
        if preset is None:
            return ProductFilters()
        return ProductFilters(price_range=PriceBounds(min=preset.min, max=preset.max))

    #
    # Cart / wishlist
    #

    @property
    def cart(self) -> ProductCollection:
        return self.sessions.cart

    @property
    def wishlist(self) -> ProductCollection:
        return self.sessions.wishlist

    def add_to_cart(self, product: Product) -> bool:
        return self.cart.add(product)

    def remove_from_cart(self, product_id: int) -> bool:
        return self.cart.remove(product_id)

    def clear_cart(self) -> None:
        self.cart.clear()

    def add_to_wishlist(self, product: Product) -> bool:
        return self.wishlist.add(product)

    def remove_from_wishlist(self, product_id: int) -> bool:
        return self.wishlist.remove(product_id)

    def clear_wishlist(self) -> None:
        self.wishlist.clear()
