"""Pytest configuration for storefront tests."""

import copy
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from storefront.core.config import StorefrontConfig, set_config
from storefront.data.models import CatalogDocument, Product

PRIMARY_URL = "http://primary.test/assets/json/shop.json"
FALLBACK_URL = "http://fallback.test/assets/json/shop.json"


# ---------------------------------------------------------------------------
# Sample catalog: a trimmed shop.json with every vocabulary populated.
# Product 9 references related ids 1 and 99 (99 does not exist).
# ---------------------------------------------------------------------------

def _product(id: int, name: str, **overrides: Any) -> Dict[str, Any]:
    data = {
        "id": id,
        "uuid": f"uuid-{id}",
        "sku": str(3812900 + id),
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "description": f"{name} description",
        "shortDescription": name,
        "price": 50.0,
        "originalPrice": 50.0,
        "sale": False,
        "salePercentage": 0,
        "brand": "gucci",
        "categoryId": ["clothing"],
        "tags": ["Product"],
        "images": [f"assets/theme/img/product/product-{id}.jpg"],
        "thumbnail": f"assets/theme/img/product/product-{id}.jpg",
        "colors": ["color-1"],
        "sizes": ["m"],
        "rating": 4.0,
        "reviewCount": 10,
        "stock": 5,
        "featured": False,
        "newArrival": False,
        "hotSale": False,
        "bestSeller": False,
        "material": "Cotton",
        "additionalInfo": "",
        "relatedProducts": [],
    }
    data.update(overrides)
    return data


SAMPLE_CATALOG: Dict[str, Any] = {
    "categories": [
        {"id": "clothing", "name": "Clothing", "count": 5},
        {"id": "bags", "name": "Bags", "count": 2},
        {"id": "shoes", "name": "Shoes", "count": 2},
    ],
    "brands": [
        {"id": "gucci", "name": "Gucci"},
        {"id": "prada", "name": "Prada"},
        {"id": "louis-vuitton", "name": "Louis Vuitton"},
    ],
    "sizes": ["xs", "s", "m", "l", "xl"],
    "colors": [
        {"id": "color-1", "name": "Black", "class": "c-1", "hex": "#0b090c"},
        {"id": "color-2", "name": "Red", "class": "c-2", "hex": "#e1251b"},
    ],
    "tags": ["Product", "Bags", "Shoes", "Fashion", "Clothing"],
    "priceRanges": [
        {"id": "range-1", "label": "$0.00 - $50.00", "min": 0, "max": 50},
        {"id": "range-2", "label": "$50.00 - $100.00", "min": 50, "max": 100},
    ],
    "products": [
        _product(1, "Piqué Biker Jacket", price=67.24, originalPrice=80.0, sale=True,
                 salePercentage=16, featured=True, rating=4.5, colors=["color-1", "color-2"]),
        _product(2, "Multi-pocket Chest Bag", price=43.48, brand="prada", categoryId=["bags"],
                 tags=["Bags", "Fashion"], bestSeller=True, rating=4.0, sizes=["s"]),
        _product(3, "Diagonal Textured Cap", price=60.9, categoryId=["clothing", "accessories"],
                 hotSale=True, rating=3.5, newArrival=True),
        _product(4, "Lether Backpack", price=31.37, brand="louis-vuitton", categoryId=["bags"],
                 tags=["Bags"], rating=5.0, sizes=["l"], colors=["color-2"]),
        _product(5, "Ankle Boots", price=98.49, brand="prada", categoryId=["shoes"],
                 tags=["Shoes"], featured=True, bestSeller=True, rating=4.5),
        _product(6, "T-shirt Contrast Pocket", price=49.66, newArrival=True, rating=2.0,
                 description="Soft cotton tee with a contrast pocket"),
        _product(7, "Basic Flowing Scarf", price=26.28, categoryId=["accessories"],
                 tags=["Fashion"], hotSale=True, rating=4.0, uuid="9"),
        _product(8, "Écharpe en laine", price=35.0, brand="louis-vuitton", rating=3.0,
                 categoryId=["unknown-category"]),
        _product(9, "Running Sneakers", price=120.0, categoryId=["shoes"], tags=["Shoes"],
                 rating=4.0, relatedProducts=[1, 99], sale=True, originalPrice=150.0),
    ],
}


@pytest.fixture
def catalog_payload() -> Dict[str, Any]:
    """Fresh deep copy of the sample catalog JSON."""
    return copy.deepcopy(SAMPLE_CATALOG)


@pytest.fixture
def catalog(catalog_payload) -> CatalogDocument:
    return CatalogDocument.model_validate(catalog_payload)


@pytest.fixture
def products(catalog) -> List[Product]:
    return list(catalog.products)


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Build a Product from keyword overrides (camelCase or snake_case)."""
    def _make(id: int, name: str = None, **overrides: Any) -> Product:
        return Product.model_validate(_product(id, name or f"Product {id}", **overrides))
    return _make


@pytest.fixture
def config() -> StorefrontConfig:
    """Fast config: absolute test URLs and no delay between retries."""
    return StorefrontConfig(
        base_url="http://primary.test",
        primary_url=PRIMARY_URL,
        fallback_url=FALLBACK_URL,
        retry_delay=0.0,
        request_timeout=5.0,
    )


@pytest.fixture(autouse=True)
def _isolate_global_config():
    """Reset the process-wide config before and after every test."""
    set_config(None)
    yield
    set_config(None)


class RecordingTransport(httpx.MockTransport):
    """
    MockTransport that records every requested URL.

    `responders` maps a URL to a callable returning an httpx.Response (or
    raising an httpx error); unknown URLs get a 404.
    """

    def __init__(self, responders: Dict[str, Callable[[httpx.Request], httpx.Response]]):
        self.requests: List[str] = []
        self.responders = responders
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        responder = self.responders.get(url)
        if responder is None:
            return httpx.Response(404, text="not found")
        return responder(request)

    def count(self, url: str) -> int:
        return self.requests.count(url)


def ok_json(payload: Dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, content=json.dumps(payload).encode(),
                                          headers={"Content-Type": "application/json"})


def server_error(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, text="unavailable")


def connection_refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
