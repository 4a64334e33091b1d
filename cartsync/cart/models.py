"""Cart models: inventory records, line items and operation outcomes."""
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Product(BaseModel):
    """Product record as served by the inventory API."""
    # Keep unknown display fields so they survive the snapshot round-trip
    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    title: str
    price: Decimal
    image: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        # str() first so 179.9 stays Decimal("179.9")
        return Decimal(str(v)) if isinstance(v, float) else v


class Stock(BaseModel):
    """Available amount for one product at query time."""
    model_config = ConfigDict(extra="ignore")

    id: int
    amount: int = Field(ge=0)


class LineItem(Product):
    """One distinct product in the cart with the requested amount."""

    amount: int = Field(ge=1, strict=True)

    @classmethod
    def from_product(cls, product: Product, amount: int = 1) -> "LineItem":
        data = product.model_dump()
        data["amount"] = amount
        return cls.model_validate(data)

    def with_amount(self, amount: int) -> "LineItem":
        """Copy of this line item with a new (validated) amount."""
        data = self.model_dump()
        data["amount"] = amount
        return LineItem.model_validate(data)

    def to_dict(self) -> dict:
        """Convert to the JSON-ready snapshot entry."""
        return self.model_dump(mode="json")


def parse_snapshot(data: Any) -> tuple[LineItem, ...]:
    """
    Build cart items from a stored snapshot.

    Raises:
        ValueError: snapshot is not a list of valid line items, or lists
            a product more than once
    """
    if not isinstance(data, list):
        raise ValueError(f"Cart snapshot must be a list, got {type(data).__name__}")

    items = tuple(LineItem.model_validate(entry) for entry in data)

    seen: set[int] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate product {item.id} in cart snapshot")
        seen.add(item.id)

    return items


class CartOutcome(str, Enum):
    """Result of a cart operation."""
    SUCCESS = "success"
    NOOP = "noop"
    OUT_OF_STOCK = "out_of_stock"
    PRODUCT_NOT_IN_CART = "product_not_in_cart"
    ADD_PRODUCT_ERROR = "add_product_error"
    UPDATE_AMOUNT_ERROR = "update_amount_error"

    @property
    def ok(self) -> bool:
        """Operation did not fail (NOOP counts as not failing)."""
        return self in (CartOutcome.SUCCESS, CartOutcome.NOOP)
