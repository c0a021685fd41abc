from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def make_line_item_id(product_id: str, size: str = "", color: str = "", fabric: str = "") -> str:
    """Identity key of a cart line item, e.g. ``"p1-M-Red-"``."""
    return f"{product_id}-{size}-{color}-{fabric}"


class ProductSnapshot(BaseModel):
    """Product display data copied into the cart when the item is added.

    Catalog records name their identifier either ``_id`` or ``id``; both are
    accepted here and the snapshot is always stored with ``_id``. Any other
    catalog fields ride along untouched.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id")
    name: str
    price: float = Field(ge=0)
    image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class CartLineItem(BaseModel):
    id: str
    product: ProductSnapshot
    quantity: int = Field(ge=1)
    size: str = ""
    color: str = ""
    fabric: str = ""

    def matches(self, product_id: str, size: str = "", color: str = "", fabric: str = "") -> bool:
        return (
            self.product.id == product_id
            and self.size == size
            and self.color == color
            and self.fabric == fabric
        )


class CartState(BaseModel):
    items: List[CartLineItem] = []

    # Derived from items, see calculate_totals
    total: float = 0
    item_count: int = 0
