"""Cart manager: stock-checked mutations with a persisted snapshot."""
import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Optional

from cartsync.errors import OutOfStockError, ProductNotInCartError
from cartsync.i18n import detect_language, get_text
from cartsync.logging import get_logger, sanitize_id_for_logging
from cartsync.services.notifications import LogNotifier
from .models import CartOutcome, LineItem, Stock, parse_snapshot
from .storage import CartStore

if TYPE_CHECKING:
    from cartsync.config import Settings
    from cartsync.services.inventory import Inventory

logger = get_logger(__name__)


class CartManager:
    """
    Owns one session's cart.

    - Hydrates from the store on construction (bad snapshot -> empty cart)
    - add/remove/update validate against the inventory's current stock
    - Every successful mutation replaces the cart and saves the full snapshot
    - Mutations are serialized per instance; reads never wait

    Operations never raise: failures are reported through the notifier
    and returned as a CartOutcome.
    """

    def __init__(
        self,
        inventory: "Inventory",
        store: CartStore,
        notifier: Any = None,
        language: Optional[str] = None,
    ):
        self.inventory = inventory
        self.store = store
        self.notifier = notifier if notifier is not None else LogNotifier()
        self.language = detect_language(language)
        self._lock = asyncio.Lock()
        self._items: tuple[LineItem, ...] = self._hydrate()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def cart(self) -> tuple[LineItem, ...]:
        """Current cart as deep copies; nested display fields cannot reach the live items."""
        return tuple(item.model_copy(deep=True) for item in self._items)

    def get_cart(self) -> list[LineItem]:
        return list(self.cart)

    @property
    def cart_size(self) -> int:
        """Number of distinct products in the cart."""
        return len(self._items)

    def amount_in_cart(self, product_id: int) -> int:
        item = self._find(product_id)
        return item.amount if item else 0

    def amounts_by_product(self) -> dict[int, int]:
        return {item.id: item.amount for item in self._items}

    def to_snapshot(self) -> list[dict]:
        """Cart in its stored form."""
        return [item.to_dict() for item in self._items]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_product(self, product_id: int) -> CartOutcome:
        """Add one unit of a product, appending it if it is not in the cart yet."""
        message_key = None
        async with self._lock:
            try:
                await self._add_product(product_id)
                outcome = CartOutcome.SUCCESS
            except OutOfStockError as e:
                logger.info(f"Add rejected: {e}")
                outcome, message_key = CartOutcome.OUT_OF_STOCK, "cart.out_of_stock"
            except Exception as e:
                logger.error(f"Failed to add product {sanitize_id_for_logging(product_id)}: {e}")
                outcome, message_key = CartOutcome.ADD_PRODUCT_ERROR, "cart.add_error"

        # Notified after the lock is released
        if message_key:
            await self._notify(message_key)
        return outcome

    async def remove_product(self, product_id: int) -> CartOutcome:
        """Drop a product's line item entirely, whatever its amount."""
        async with self._lock:
            found = self._find(product_id) is not None
            if found:
                self._commit(tuple(item for item in self._items if item.id != product_id))

        if not found:
            logger.info(f"Remove rejected: product {sanitize_id_for_logging(product_id)} is not in the cart")
            await self._notify("cart.remove_error")
            return CartOutcome.PRODUCT_NOT_IN_CART
        return CartOutcome.SUCCESS

    async def update_product_amount(self, product_id: int, amount: int) -> CartOutcome:
        """
        Set the amount of a product already in the cart.

        Amounts <= 0 are ignored (use remove_product to drop an item).
        Anything but a plain int (bool included) is an update error.
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            logger.error(f"Invalid amount {amount!r} for product {sanitize_id_for_logging(product_id)}")
            await self._notify("cart.update_error")
            return CartOutcome.UPDATE_AMOUNT_ERROR

        if amount <= 0:
            return CartOutcome.NOOP

        message_key = None
        async with self._lock:
            try:
                await self._update_product_amount(product_id, amount)
                outcome = CartOutcome.SUCCESS
            except OutOfStockError as e:
                logger.info(f"Update rejected: {e}")
                outcome, message_key = CartOutcome.OUT_OF_STOCK, "cart.out_of_stock"
            except ProductNotInCartError as e:
                logger.info(f"Update rejected: {e}")
                outcome, message_key = CartOutcome.PRODUCT_NOT_IN_CART, "cart.update_error"
            except Exception as e:
                logger.error(f"Failed to update amount of product {sanitize_id_for_logging(product_id)}: {e}")
                outcome, message_key = CartOutcome.UPDATE_AMOUNT_ERROR, "cart.update_error"

        if message_key:
            await self._notify(message_key)
        return outcome

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _add_product(self, product_id: int) -> None:
        current = self._find(product_id)
        desired = (current.amount if current else 0) + 1

        stock = await self.inventory.get_stock(product_id)
        self._ensure_in_stock(product_id, desired, stock)

        if current is not None:
            updated = current.with_amount(desired)
            items = tuple(updated if item.id == product_id else item for item in self._items)
        else:
            product = await self.inventory.get_product(product_id)
            if product.id != product_id:
                raise ValueError(f"Inventory returned product {product.id} for id {product_id}")
            items = (*self._items, LineItem.from_product(product))

        self._commit(items)

    async def _update_product_amount(self, product_id: int, amount: int) -> None:
        current = self._find(product_id)
        if current is None:
            raise ProductNotInCartError(product_id)

        stock = await self.inventory.get_stock(product_id)
        self._ensure_in_stock(product_id, amount, stock)

        updated = current.with_amount(amount)
        self._commit(tuple(updated if item.id == product_id else item for item in self._items))

    @staticmethod
    def _ensure_in_stock(product_id: int, desired: int, stock: Stock) -> None:
        if stock.id != product_id:
            raise ValueError(f"Inventory returned stock for product {stock.id} for id {product_id}")
        if desired > stock.amount:
            raise OutOfStockError(product_id, desired, stock.amount)

    def _find(self, product_id: int) -> Optional[LineItem]:
        return next((item for item in self._items if item.id == product_id), None)

    def _hydrate(self) -> tuple[LineItem, ...]:
        try:
            data = self.store.load()
        except Exception as e:
            logger.warning(f"Failed to load cart snapshot, starting empty: {e}")
            return ()

        if data is None:
            return ()

        try:
            items = parse_snapshot(data)
        except ValueError as e:
            # pydantic's ValidationError is a ValueError
            logger.warning(f"Discarding malformed cart snapshot: {e}")
            return ()

        logger.debug(f"Cart hydrated with {len(items)} item(s)")
        return items

    def _commit(self, items: tuple[LineItem, ...]) -> None:
        """Replace the in-memory cart and save the full snapshot."""
        self._items = items
        try:
            self.store.save(self.to_snapshot())
        except Exception:
            logger.exception("Failed to save cart snapshot")

    async def _notify(self, key: str) -> None:
        message = get_text(key, self.language)
        notify = getattr(self.notifier, "notify", self.notifier)
        try:
            result = notify(message)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Notifier failed")


# Session-scoped instance
_cart_manager: Optional[CartManager] = None


def build_cart_manager(settings: "Settings") -> CartManager:
    """Wire a CartManager from settings: httpx inventory, Redis or file store, notifier."""
    from cartsync.db import get_redis
    from cartsync.services.inventory import InventoryClient
    from cartsync.services.notifications import TelegramNotifier
    from .storage import FileCartStore, RedisCartStore

    inventory = InventoryClient(settings.inventory_api_url, timeout=settings.inventory_timeout)

    store: CartStore
    if settings.redis_configured:
        store = RedisCartStore(get_redis(settings), key=settings.storage_key)
    else:
        store = FileCartStore(settings.data_dir, key=settings.storage_key)

    if settings.telegram_configured:
        notifier: Any = TelegramNotifier(settings.telegram_token, settings.telegram_chat_id)
    else:
        notifier = LogNotifier()

    return CartManager(inventory, store, notifier=notifier, language=settings.language)


def get_cart_manager() -> CartManager:
    """Get the session's CartManager, building it from the environment on first use."""
    global _cart_manager
    if _cart_manager is None:
        from cartsync.config import load_settings

        _cart_manager = build_cart_manager(load_settings())
    return _cart_manager


def reset_cart_manager() -> None:
    """Forget the session's CartManager (session end, tests)."""
    global _cart_manager
    _cart_manager = None
