"""
Home page highlight ranking.

Blends the three merchandising flags into one composite score:

    score = 3 * featured + 2 * best_seller + 1 * hot_sale

Products with score 0 are dropped; the rest are ordered by score, then rating,
then id (all descending, so newer products win ties). When no product carries
any of the flags the ranking falls back to the head of the catalog instead of
returning nothing.
"""
from typing import List, Sequence, Tuple

from storefront.data.models import Product
from storefront.utils.logger import get_logger

logger = get_logger("recommendation.highlights")

FLAG_WEIGHTS: Tuple[Tuple[str, int], ...] = (
    ("featured", 3),
    ("best_seller", 2),
    ("hot_sale", 1),
)


def composite_score(product: Product) -> int:
    """Weighted sum of the merchandising flags (0-6)."""
    return sum(weight for flag, weight in FLAG_WEIGHTS if getattr(product, flag))


def rank_highlights(products: Sequence[Product], limit: int = 3) -> List[Product]:
    """
    Top `limit` products by composite score.

    Args:
        products: Catalog products in insertion order
        limit: Number of highlights to return

    Returns:
        Ranked products, or the first `limit` products of `products` when none
        has a non-zero score
    """
    scored = [(composite_score(p), p) for p in products]
    scored = [(score, p) for score, p in scored if score > 0]

    if not scored:
        logger.debug("No flagged products, falling back to first %d of catalog", limit)
        return list(products[:limit])

    scored.sort(key=lambda item: (item[0], item[1].rating, item[1].id), reverse=True)
    return [p for _, p in scored[:limit]]


def flag_section(products: Sequence[Product], flag: str, limit: int = 4) -> List[Product]:
    """First `limit` products with `flag` set, in catalog order (no blending)."""
    return [p for p in products if getattr(p, flag)][:limit]


def featured_section(products: Sequence[Product], limit: int = 4) -> List[Product]:
    return flag_section(products, "featured", limit)


def best_seller_section(products: Sequence[Product], limit: int = 4) -> List[Product]:
    return flag_section(products, "best_seller", limit)


def hot_sale_section(products: Sequence[Product], limit: int = 4) -> List[Product]:
    return flag_section(products, "hot_sale", limit)
