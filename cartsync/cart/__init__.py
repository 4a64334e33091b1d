"""Cart package: models, storage, and manager facade."""
from .models import CartOutcome, LineItem, Product, Stock
from .storage import CartStore, FileCartStore, MemoryCartStore, RedisCartStore
from .service import CartManager, build_cart_manager, get_cart_manager, reset_cart_manager

__all__ = [
    "CartOutcome",
    "LineItem",
    "Product",
    "Stock",
    "CartStore",
    "FileCartStore",
    "MemoryCartStore",
    "RedisCartStore",
    "CartManager",
    "build_cart_manager",
    "get_cart_manager",
    "reset_cart_manager",
]
