"""
Cart errors.

Raised inside cart operations and converted to a CartOutcome plus a
user notification at the operation boundary. Callers of CartManager
never see them.
"""
from typing import Any

# Error codes (shared by exceptions and outcomes)
ERROR_OUT_OF_STOCK = "OUT_OF_STOCK"
ERROR_PRODUCT_NOT_IN_CART = "PRODUCT_NOT_IN_CART"
ERROR_PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
ERROR_INVENTORY_UNAVAILABLE = "INVENTORY_UNAVAILABLE"


class CartError(Exception):
    """Base error for cart operations."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class OutOfStockError(CartError):
    """Requested amount exceeds the stock reported by the inventory."""

    def __init__(self, product_id: int, requested: int, available: int) -> None:
        super().__init__(
            f"Product {product_id}: requested {requested}, available {available}",
            code=ERROR_OUT_OF_STOCK,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ProductNotInCartError(CartError):
    """Operation needs an existing line item and there is none."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} is not in the cart", code=ERROR_PRODUCT_NOT_IN_CART)
        self.product_id = product_id


class InventoryError(CartError):
    """Error talking to the inventory service."""

    def __init__(self, message: str, code: str | None = None, raw_error: Any = None) -> None:
        super().__init__(message, code=code)
        self.raw_error = raw_error


class ProductNotFoundError(InventoryError):
    """Inventory has no stock or product record for the id."""

    def __init__(self, product_id: int, resource: str = "product") -> None:
        super().__init__(f"{resource} {product_id} not found", code=ERROR_PRODUCT_NOT_FOUND)
        self.product_id = product_id
        self.resource = resource


class InventoryUnavailableError(InventoryError):
    """Transport failure, server error or unreadable payload."""

    def __init__(self, message: str = "Inventory service unavailable", raw_error: Any = None) -> None:
        super().__init__(message, code=ERROR_INVENTORY_UNAVAILABLE, raw_error=raw_error)
