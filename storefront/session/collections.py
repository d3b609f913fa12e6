"""
Session collections: cart and wishlist.

Each collection is an ordered list of products, unique by product id. UI code
observes a collection by subscribing a callback; the callback receives the
current snapshot immediately and a fresh snapshot after every change
(replay-latest, then broadcast).
"""
from dataclasses import dataclass, field
from typing import Callable, List, Tuple, Union

from storefront.data.models import Product
from storefront.utils.logger import get_logger

logger = get_logger("session.collections")

Snapshot = Tuple[Product, ...]
Observer = Callable[[Snapshot], None]


class ProductCollection:
    """Ordered, id-unique product collection with observers."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._items: List[Product] = []
        self._observers: List[Observer] = []

    @property
    def items(self) -> Snapshot:
        return tuple(self._items)

    @property
    def ids(self) -> List[int]:
        return [p.id for p in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: Union[Product, int]) -> bool:
        product_id = item.id if isinstance(item, Product) else item
        return any(p.id == product_id for p in self._items)

    def add(self, product: Product) -> bool:
        """Append `product` unless its id is already present. Returns True if added."""
        if product in self:
            return False
        self._items.append(product)
        logger.debug("%s: added product_id=%s", self.name, product.id)
        self._notify()
        return True

    def remove(self, product_id: int) -> bool:
        """Remove the product with `product_id`. Returns True if something was removed."""
        remaining = [p for p in self._items if p.id != product_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        logger.debug("%s: removed product_id=%s", self.name, product_id)
        self._notify()
        return True

    def clear(self) -> None:
        self._items = []
        logger.debug("%s: cleared", self.name)
        self._notify()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register `observer` and replay the current snapshot to it.

        Returns:
            A callable that unsubscribes the observer (safe to call twice)
        """
        self._observers.append(observer)
        observer(self.items)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.items
        # Copy: an observer may unsubscribe while being notified
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("%s: observer %r failed, notifying the rest", self.name, observer)


@dataclass
class SessionCollections:
    """The cart and wishlist of one storefront session."""
    cart: ProductCollection = field(default_factory=lambda: ProductCollection("cart"))
    wishlist: ProductCollection = field(default_factory=lambda: ProductCollection("wishlist"))

    def clear(self) -> None:
        self.cart.clear()
        self.wishlist.clear()
