from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, List, Optional, Union

import structlog
from pydantic import TypeAdapter, ValidationError

from storefront.core.config import settings
from storefront.models.cart import CartLineItem, CartState, ProductSnapshot, make_line_item_id
from storefront.services.notifications import Notifier
from storefront.services.storage import LocalStorage

log = structlog.get_logger(__name__)

_line_items = TypeAdapter(List[CartLineItem])


class CartContextError(RuntimeError):
    """The cart was accessed outside of a cart_provider block."""


def calculate_totals(items: List[CartLineItem]) -> CartState:
    """Full recompute of the derived values. Carts hold tens of items, not thousands."""
    total = sum(item.product.price * item.quantity for item in items)
    item_count = sum(item.quantity for item in items)
    return CartState(items=items, total=total, item_count=item_count)


class CartStore:
    """Authoritative cart for one client session.

    The store is built once per session from its storage slot and is the only
    writer of ``state``. Every mutation recomputes ``total``/``item_count`` and
    writes the full item list back to storage before returning. Two stores on
    the same storage (two tabs) only converge when one of them reloads.
    """

    def __init__(
        self,
        storage: LocalStorage,
        is_authenticated: Callable[[], bool],
        notifier: Notifier,
        storage_key: Optional[str] = None,
    ):
        self.storage = storage
        self.is_authenticated = is_authenticated
        self.notifier = notifier
        self.storage_key = storage_key or settings.CART_STORAGE_KEY
        self.state = CartState()
        self.reload()

    @property
    def items(self) -> List[CartLineItem]:
        return list(self.state.items)

    @property
    def total(self) -> float:
        return self.state.total

    @property
    def item_count(self) -> int:
        return self.state.item_count

    def reload(self):
        """Re-read the storage slot, dropping any in-memory state."""
        self.state = calculate_totals(self._load())

    def add_item(
        self,
        product: Union[ProductSnapshot, dict],
        quantity: int = 1,
        size: str = "",
        color: str = "",
        fabric: str = "",
    ) -> bool:
        """Add a product configuration to the cart, merging with an identical line.

        Returns False when the session is not logged in; nothing is validated
        or changed then.
        """
        if not self.is_authenticated():
            log.info("add_item_rejected", reason="unauthenticated")
            self.notifier.error("Please login to add items to the cart")
            return False

        if not isinstance(product, ProductSnapshot):
            product = ProductSnapshot.model_validate(product)
        if quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {quantity}")

        line_item_id = make_line_item_id(product.id, size, color, fabric)
        items = self.items
        for index, item in enumerate(items):
            if item.matches(product.id, size, color, fabric):
                items[index] = item.model_copy(update={"quantity": item.quantity + quantity})
                break
        else:
            items.append(CartLineItem(
                id=line_item_id,
                product=product.model_copy(deep=True),
                quantity=quantity,
                size=size,
                color=color,
                fabric=fabric,
            ))

        log.info("adding_item", line_item_id=line_item_id, quantity=quantity)
        self._commit(items)
        self.notifier.success(f"{product.name} added to cart!")
        return True

    def remove_item(self, line_item_id: str):
        items = [item for item in self.state.items if item.id != line_item_id]
        log.info("removing_item", line_item_id=line_item_id, found=len(items) != len(self.state.items))
        self._commit(items)
        self.notifier.success("Item removed from cart")

    def update_quantity(self, line_item_id: str, quantity: int):
        """Set a line item's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_item(line_item_id)
            return

        items = [
            item.model_copy(update={"quantity": quantity}) if item.id == line_item_id else item
            for item in self.state.items
        ]
        log.info("updating_quantity", line_item_id=line_item_id, new_quantity=quantity)
        self._commit(items)

    def clear(self):
        log.info("clearing_cart", item_count=self.item_count)
        self._commit([])
        self.notifier.success("Cart cleared")

    def get_item_quantity(self, product_id: str, size: str = "", color: str = "", fabric: str = "") -> int:
        item = self._find(product_id, size, color, fabric)
        return item.quantity if item else 0

    def is_in_cart(self, product_id: str, size: str = "", color: str = "", fabric: str = "") -> bool:
        return self._find(product_id, size, color, fabric) is not None

    def _find(self, product_id, size, color, fabric) -> Optional[CartLineItem]:
        for item in self.state.items:
            if item.matches(product_id, size, color, fabric):
                return item
        return None

    def _commit(self, items: List[CartLineItem]):
        self.state = calculate_totals(items)
        self.storage.set_item(self.storage_key, _line_items.dump_json(items, by_alias=True).decode())

    def _load(self) -> List[CartLineItem]:
        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            return []
        try:
            loaded = _line_items.validate_json(raw)
        except ValidationError as e:
            log.warning("cart_storage_corrupt", key=self.storage_key, errors=e.error_count())
            return []

        # Hand-edited storage may repeat a configuration; fold it into the first line.
        # Identity is the variant tuple: hyphenated ids can collide across products.
        items: List[CartLineItem] = []
        positions = {}
        for item in loaded:
            identity = (item.product.id, item.size, item.color, item.fabric)
            if identity in positions:
                index = positions[identity]
                items[index] = items[index].model_copy(update={"quantity": items[index].quantity + item.quantity})
            else:
                positions[identity] = len(items)
                items.append(item)
        return items


_current_store: ContextVar[Optional[CartStore]] = ContextVar("cart_store", default=None)


@contextmanager
def cart_provider(store: CartStore) -> Iterator[CartStore]:
    """Make ``store`` the cart returned by use_cart() for the enclosed block."""
    token = _current_store.set(store)
    try:
        yield store
    finally:
        _current_store.reset(token)


def use_cart() -> CartStore:
    store = _current_store.get()
    if store is None:
        raise CartContextError("use_cart must be used within a cart_provider")
    return store
