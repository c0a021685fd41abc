# Import all models to register them with SQLModel
from storefront.models.user import User
from storefront.models.storage import StorageSlot
from storefront.models.cart import CartLineItem, CartState, ProductSnapshot, make_line_item_id

__all__ = [
    "User",
    "StorageSlot",
    "CartLineItem",
    "CartState",
    "ProductSnapshot",
    "make_line_item_id",
]
