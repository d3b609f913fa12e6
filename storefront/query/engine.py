"""
In-memory query engine over a product collection.

All functions are pure: they never mutate the input sequence or its products
and always return a new list. Callers compose them as

    filter_products → sort_products → paginate

(sort the filtered, unpaginated set; paginate the sorted set). query_products
does exactly that and reports the page metadata alongside the slice.
"""
from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from storefront.data.models import Product
from storefront.query.filters import ProductFilters
from storefront.utils.logger import get_logger

logger = get_logger("query.engine")


class SortOption(str, Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    RATING_DESC = "rating-desc"
    NEWEST = "newest"


@dataclass(frozen=True)
class ProductPage:
    """One page of a filtered, sorted listing."""
    items: List[Product]
    total: int          # matches before pagination
    page: int
    page_size: int
    page_count: int


def collation_key(text: str) -> Tuple[str, str]:
    """
    Sort key approximating locale-aware collation.

    Primary: accents stripped and case folded ("Écharpe" sorts with "echarpe").
    Secondary: the raw string, so the order stays total.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), text)


#
# Filtering
#

def matches_search(product: Product, term: str) -> bool:
    """Case-insensitive substring match against name, description or any tag."""
    term = term.lower()
    return (
        term in product.name.lower()
        or term in product.description.lower()
        or any(term in tag.lower() for tag in product.tags)
    )


def search_products(products: Sequence[Product], term: str) -> List[Product]:
    """Products whose name, description or tags contain `term` (not brand, sku or material)."""
    return [p for p in products if matches_search(p, term)]


def _any_of(wanted: Iterable[str], present: Sequence[str]) -> bool:
    return any(value in present for value in wanted)


def _build_predicates(criteria: ProductFilters) -> List[Callable[[Product], bool]]:
    predicates: List[Callable[[Product], bool]] = []

    if criteria.categories is not None:
        predicates.append(lambda p: _any_of(criteria.categories, p.category_id))
    if criteria.brands is not None:
        predicates.append(lambda p: p.brand in criteria.brands)
    if criteria.sizes is not None:
        predicates.append(lambda p: _any_of(criteria.sizes, p.sizes))
    if criteria.colors is not None:
        predicates.append(lambda p: _any_of(criteria.colors, p.colors))
    if criteria.tags is not None:
        predicates.append(lambda p: _any_of(criteria.tags, p.tags))
    if criteria.price_range is not None:
        predicates.append(lambda p: criteria.price_range.contains(p.price))
    if criteria.search is not None:
        predicates.append(lambda p: matches_search(p, criteria.search))

    for flag in ("sale", "featured", "new_arrival", "hot_sale", "best_seller"):
        expected = getattr(criteria, flag)
        if expected is not None:
            predicates.append(lambda p, flag=flag, expected=expected: getattr(p, flag) == expected)

    return predicates


def filter_products(
    products: Sequence[Product], criteria: Optional[ProductFilters] = None
) -> List[Product]:
    """
    Narrow `products` to those matching every set criterion.

    Unset criteria are ignored; with nothing set the result equals the input.
    Order is preserved.
    """
    if criteria is None:
        return list(products)
    predicates = _build_predicates(criteria)
    return [p for p in products if all(pred(p) for pred in predicates)]


#
# Sorting
#

_SORT_SPECS = {
    SortOption.PRICE_ASC: (lambda p: p.price, False),
    SortOption.PRICE_DESC: (lambda p: p.price, True),
    SortOption.NAME_ASC: (lambda p: collation_key(p.name), False),
    SortOption.NAME_DESC: (lambda p: collation_key(p.name), True),
    SortOption.RATING_DESC: (lambda p: p.rating, True),
    SortOption.NEWEST: (lambda p: p.id, True),
}


def sort_products(
    products: Sequence[Product], sort_by: Union[SortOption, str, None]
) -> List[Product]:
    """
    Stable sort by one of the SortOption keys.

    Equal keys keep their incoming order (also for descending keys). An unknown
    or missing key returns the products in their incoming order.
    """
    try:
        option = SortOption(sort_by)
    except ValueError:
        if sort_by is not None:
            logger.debug("Unknown sort option %r, keeping input order", sort_by)
        return list(products)

    key, reverse = _SORT_SPECS[option]
    return sorted(products, key=key, reverse=reverse)


#
# Pagination
#

def paginate(products: Sequence[Product], page: int, page_size: int) -> List[Product]:
    """Return 1-indexed page `page`; out-of-range pages are empty."""
    if page < 1 or page_size < 1:
        return []
    start = (page - 1) * page_size
    return list(products[start:start + page_size])


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for `total` items (ceil)."""
    if page_size < 1:
        return 0
    return math.ceil(total / page_size)


def query_products(
    products: Sequence[Product],
    criteria: Optional[ProductFilters] = None,
    sort_by: Union[SortOption, str, None] = None,
    page: int = 1,
    page_size: int = 9,
) -> ProductPage:
    """Filter, then sort, then paginate."""
    matched = filter_products(products, criteria)
    ordered = sort_products(matched, sort_by)
    return ProductPage(
        items=paginate(ordered, page, page_size),
        total=len(ordered),
        page=page,
        page_size=page_size,
        page_count=page_count(len(ordered), page_size),
    )
