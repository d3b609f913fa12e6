"""
Highlight ranking for the home page.

- rank_highlights: composite flag score with rating/id tie-breaks
- featured/best seller/hot sale sections: first N flagged products, catalog order
"""
from storefront.recommendation.highlights import (
    composite_score,
    rank_highlights,
    featured_section,
    best_seller_section,
    hot_sale_section,
)

__all__ = [
    "composite_score",
    "rank_highlights",
    "featured_section",
    "best_seller_section",
    "hot_sale_section",
]
