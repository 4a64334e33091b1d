"""Pytest configuration and fixtures"""
import json
import os
from typing import Optional
from unittest.mock import AsyncMock, Mock

import pytest

# Keep test output quiet
os.environ.setdefault("LOG_LEVEL", "WARNING")

from cartsync.cart import CartManager, MemoryCartStore, Product, Stock  # noqa: E402
from cartsync.errors import ProductNotFoundError  # noqa: E402
from tests.factories import make_product  # noqa: E402


class FakeInventory:
    """In-memory inventory; lookups are AsyncMocks so calls can be asserted."""

    def __init__(self):
        self.stock: dict[int, int] = {}
        self.products: dict[int, Product] = {}
        self.get_stock = AsyncMock(side_effect=self._get_stock)
        self.get_product = AsyncMock(side_effect=self._get_product)

    def set_stock(self, product_id: int, amount: int, product: Optional[Product] = None) -> None:
        self.stock[product_id] = amount
        self.products[product_id] = product or make_product(product_id)

    async def _get_stock(self, product_id: int) -> Stock:
        if product_id not in self.stock:
            raise ProductNotFoundError(product_id, resource="stock")
        return Stock(id=product_id, amount=self.stock[product_id])

    async def _get_product(self, product_id: int) -> Product:
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        return self.products[product_id]


@pytest.fixture
def inventory():
    """Fake inventory with no products"""
    return FakeInventory()


@pytest.fixture
def store():
    """Empty in-memory cart store"""
    return MemoryCartStore()


@pytest.fixture
def notifier():
    """Sync notification sink"""
    return Mock()


@pytest.fixture
def manager(inventory, store, notifier):
    """CartManager over an empty store"""
    return CartManager(inventory, store, notifier=notifier)


@pytest.fixture
def seeded_manager(inventory, notifier):
    """Factory: CartManager hydrated from the given snapshot entries"""

    def _build(*entries: dict, language: Optional[str] = None) -> CartManager:
        seeded = MemoryCartStore(initial=json.dumps(list(entries)))
        return CartManager(inventory, seeded, notifier=notifier, language=language)

    return _build
