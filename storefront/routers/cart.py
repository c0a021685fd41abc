from typing import List, Optional
from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field
from sqlmodel import Session
from storefront.core.config import settings
from storefront.db.session import get_session
from storefront.models.cart import CartLineItem, ProductSnapshot
from storefront.models.user import User
from storefront.routers.auth import get_current_user_optional
from storefront.services.cart import CartStore
from storefront.services.notifications import Notification, Notifier
from storefront.services.pricing import CartSummary, CheckoutPreview, build_checkout, summarize_cart
from storefront.services.storage import LocalStorage

router = APIRouter()

class CartItemCreate(BaseModel):
    product: ProductSnapshot
    quantity: int = Field(default=1, ge=1)
    size: str = ""
    color: str = ""
    fabric: str = ""

class CartItemUpdate(BaseModel):
    quantity: int

class CartResponse(BaseModel):
    items: List[CartLineItem]
    total: float
    itemCount: int
    notifications: List[Notification] = []

class ItemQuantityResponse(BaseModel):
    product_id: str
    quantity: int
    in_cart: bool

def get_storage_origin(x_storage_origin: Optional[str] = Header(default=None)) -> str:
    return x_storage_origin or settings.DEFAULT_STORAGE_ORIGIN

def get_cart_store(
    origin: str = Depends(get_storage_origin),
    current_user: Optional[User] = Depends(get_current_user_optional),
    session: Session = Depends(get_session),
) -> CartStore:
    return CartStore(
        storage=LocalStorage(session, origin),
        is_authenticated=lambda: current_user is not None,
        notifier=Notifier(),
    )

def to_response(store: CartStore) -> CartResponse:
    return CartResponse(
        items=store.items,
        total=store.total,
        itemCount=store.item_count,
        notifications=store.notifier.drain(),
    )

@router.get("/", response_model=CartResponse)
def get_cart(store: CartStore = Depends(get_cart_store)):
    """Get the cart for this storage origin"""
    return to_response(store)

@router.post("/add", response_model=CartResponse)
def add_to_cart(cart_item: CartItemCreate, store: CartStore = Depends(get_cart_store)):
    """Add item to cart (login required)"""
    store.add_item(
        cart_item.product,
        quantity=cart_item.quantity,
        size=cart_item.size,
        color=cart_item.color,
        fabric=cart_item.fabric,
    )
    return to_response(store)

@router.put("/update/{line_item_id}", response_model=CartResponse)
def update_cart_item(line_item_id: str, cart_update: CartItemUpdate, store: CartStore = Depends(get_cart_store)):
    """Set item quantity; zero or less removes it"""
    store.update_quantity(line_item_id, cart_update.quantity)
    return to_response(store)

@router.delete("/remove/{line_item_id}", response_model=CartResponse)
def remove_from_cart(line_item_id: str, store: CartStore = Depends(get_cart_store)):
    """Remove item from cart"""
    store.remove_item(line_item_id)
    return to_response(store)

@router.delete("/clear", response_model=CartResponse)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    """Clear entire cart"""
    store.clear()
    return to_response(store)

@router.get("/quantity/{product_id}", response_model=ItemQuantityResponse)
def get_item_quantity(
    product_id: str,
    size: str = "",
    color: str = "",
    fabric: str = "",
    store: CartStore = Depends(get_cart_store),
):
    return ItemQuantityResponse(
        product_id=product_id,
        quantity=store.get_item_quantity(product_id, size, color, fabric),
        in_cart=store.is_in_cart(product_id, size, color, fabric),
    )

@router.get("/summary", response_model=CartSummary)
def get_cart_summary(store: CartStore = Depends(get_cart_store)):
    return summarize_cart(store.state)

@router.get("/checkout", response_model=CheckoutPreview)
def get_checkout_preview(shipping_option: str = "standard", store: CartStore = Depends(get_cart_store)):
    """Order payload and totals for the selected shipping option"""
    return build_checkout(store.state, shipping_option)
