"""
Product query engine: filter → sort → paginate over an in-memory collection.
"""
from storefront.query.engine import (
    SortOption,
    ProductPage,
    filter_products,
    search_products,
    sort_products,
    paginate,
    page_count,
    query_products,
)
from storefront.query.filters import ProductFilters, PriceBounds

__all__ = [
    "SortOption",
    "ProductPage",
    "ProductFilters",
    "PriceBounds",
    "filter_products",
    "search_products",
    "sort_products",
    "paginate",
    "page_count",
    "query_products",
]
