"""
Storefront catalog core.

Data-access layer behind the shop pages:
- Resilient, cached catalog loading (primary + fallback source, bounded retries)
- In-memory filtering, sorting and pagination of products
- Home page highlight ranking
- Cart and wishlist collections with observers
"""

from storefront.core.config import StorefrontConfig, get_config, set_config
from storefront.core.service import CatalogService
from storefront.data.catalog_loader import (
    CachePhase,
    CatalogError,
    CatalogLoader,
    CatalogUnavailable,
    TransportError,
)
from storefront.data.models import CatalogDocument, Product
from storefront.query.engine import ProductPage, SortOption
from storefront.query.filters import PriceBounds, ProductFilters

__all__ = [
    'CatalogService',
    'CatalogLoader',
    'CachePhase',
    'CatalogError',
    'CatalogUnavailable',
    'TransportError',
    'CatalogDocument',
    'Product',
    'ProductFilters',
    'PriceBounds',
    'ProductPage',
    'SortOption',
    'StorefrontConfig',
    'get_config',
    'set_config',
]

__version__ = '0.1.0'
