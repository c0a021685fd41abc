from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from storefront.core.config import settings
from storefront.models.cart import CartLineItem, CartState

class ShippingOption(BaseModel):
    id: str
    name: str
    description: str
    price: float

SHIPPING_OPTIONS: Dict[str, ShippingOption] = {
    option.id: option
    for option in [
        ShippingOption(id="standard", name="Standard Delivery", description="3-5 business days", price=500),
        ShippingOption(id="express", name="Express Delivery", description="1-2 business days", price=1000),
        ShippingOption(id="same-day", name="Same Day Delivery", description="Within Nairobi only", price=1500),
    ]
}

class CartSummary(BaseModel):
    item_count: int
    subtotal: float
    shipping: float
    tax: float
    final_total: float
    free_shipping_remaining: float
    formatted_total: str

class CheckoutItem(BaseModel):
    """Order line in the shape the order endpoint expects."""
    model_config = ConfigDict(populate_by_name=True)

    product: str
    name_snapshot: str = Field(alias="nameSnapshot")
    price_snapshot: float = Field(alias="priceSnapshot")
    qty: int
    size: str
    color: str

class CheckoutPreview(BaseModel):
    items: List[CheckoutItem]
    shipping_option: str
    subtotal: float
    shipping: float
    total: float
    formatted_total: str

def format_price(amount: float, currency: Optional[str] = None) -> str:
    """Whole-unit price with thousands separators, e.g. ``KES 10,500``."""
    return f"{currency or settings.CURRENCY} {amount:,.0f}"

def summarize_cart(state: CartState) -> CartSummary:
    """Totals shown on the cart page: flat shipping unless over the free threshold, plus tax."""
    subtotal = state.total
    if not state.items or subtotal > settings.FREE_SHIPPING_THRESHOLD:
        shipping = 0.0
    else:
        shipping = settings.FLAT_SHIPPING_FEE
    tax = subtotal * settings.TAX_RATE
    final_total = subtotal + shipping + tax

    return CartSummary(
        item_count=state.item_count,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        final_total=final_total,
        free_shipping_remaining=max(0.0, settings.FREE_SHIPPING_THRESHOLD - subtotal),
        formatted_total=format_price(final_total),
    )

def get_shipping_cost(shipping_option: str) -> float:
    option = SHIPPING_OPTIONS.get(shipping_option)
    return option.price if option else 0.0

def to_checkout_item(item: CartLineItem) -> CheckoutItem:
    return CheckoutItem(
        product=item.product.id,
        name_snapshot=item.product.name,
        price_snapshot=item.product.price,
        qty=item.quantity,
        size=item.size,
        color=item.color,
    )

def build_checkout(state: CartState, shipping_option: str = "standard") -> CheckoutPreview:
    shipping = get_shipping_cost(shipping_option)
    total = state.total + shipping
    return CheckoutPreview(
        items=[to_checkout_item(item) for item in state.items],
        shipping_option=shipping_option,
        subtotal=state.total,
        shipping=shipping,
        total=total,
        formatted_total=format_price(total),
    )
