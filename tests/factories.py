"""Test data builders shared by fixtures and tests"""
from decimal import Decimal

from cartsync.cart import Product


def make_product(product_id: int, **extra) -> Product:
    """Product as the inventory API would return it."""
    return Product(
        id=product_id,
        title=f"Tênis {product_id}",
        price=Decimal("179.90"),
        image=f"https://cdn.example.com/shoes/{product_id}.jpg",
        **extra,
    )


def line_item_dict(product_id: int, amount: int, **extra) -> dict:
    """Stored snapshot entry."""
    data = make_product(product_id, **extra).model_dump(mode="json")
    data["amount"] = amount
    return data
