"""
Inventory API client.

Talks to the storefront's REST inventory:
- GET /stock/{id}     -> {"id": 1, "amount": 3}
- GET /products/{id}  -> {"id": 1, "title": "...", "price": 179.9, "image": "..."}

Every failure is raised as an InventoryError subclass; nothing is cached.
"""
from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError

from cartsync.cart.models import Product, Stock
from cartsync.errors import InventoryUnavailableError, ProductNotFoundError
from cartsync.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class Inventory(Protocol):
    """What CartManager needs from an inventory source."""

    async def get_stock(self, product_id: int) -> Stock:
        ...

    async def get_product(self, product_id: int) -> Product:
        ...


class InventoryClient:
    """Async httpx client for the inventory API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: API root, e.g. "http://localhost:3333"
            timeout: Per-request timeout in seconds
            client: Shared AsyncClient; when omitted a client is opened per request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def get_stock(self, product_id: int) -> Stock:
        """Current available amount for a product."""
        data = await self._get_json(f"/stock/{product_id}", product_id, "stock")
        try:
            return Stock.model_validate(data)
        except ValidationError as e:
            raise InventoryUnavailableError(f"Malformed stock payload for product {product_id}", raw_error=e) from e

    async def get_product(self, product_id: int) -> Product:
        """Display fields for a product."""
        data = await self._get_json(f"/products/{product_id}", product_id, "product")
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            raise InventoryUnavailableError(f"Malformed product payload for product {product_id}", raw_error=e) from e

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _request(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, timeout=self.timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, timeout=self.timeout)

    async def _get_json(self, path: str, product_id: int, resource: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._request(url)
        except httpx.TimeoutException as e:
            logger.warning(f"Inventory timeout for {resource} {sanitize_id_for_logging(product_id)}")
            raise InventoryUnavailableError(f"Timeout fetching {resource} {product_id}", raw_error=e) from e
        except httpx.HTTPError as e:
            logger.warning(f"Inventory request failed for {resource} {sanitize_id_for_logging(product_id)}: {e}")
            raise InventoryUnavailableError(f"Error fetching {resource} {product_id}: {e}", raw_error=e) from e

        if response.status_code == 404:
            raise ProductNotFoundError(product_id, resource=resource)
        if response.status_code != 200:
            body = response.text[:200] if response.text else "No response body"
            raise InventoryUnavailableError(
                f"Inventory returned HTTP {response.status_code} for {resource} {product_id}: {body}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise InventoryUnavailableError(f"Invalid JSON for {resource} {product_id}", raw_error=e) from e

        # json-server answers unknown ids with an empty object on some routes
        if not data:
            raise ProductNotFoundError(product_id, resource=resource)
        return data
