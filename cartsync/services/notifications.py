"""
User-facing notifications for failed cart operations.

A notifier is anything with `notify(message)`; it may be sync or async.
Notification is fire-and-forget: failures are logged, never raised.
"""
import asyncio
from typing import Awaitable, Optional, Protocol, Union

import httpx

from cartsync.logging import get_logger

logger = get_logger(__name__)

NO_RESPONSE_BODY = "No response body"
PERMANENT_ERROR_CODES = {400, 401, 403, 404}
TELEGRAM_MAX_LENGTH = 4096


class Notifier(Protocol):
    def notify(self, message: str) -> Union[None, Awaitable[None]]:
        ...


class LogNotifier:
    """Writes notifications to the log (default when nothing else is configured)."""

    def __init__(self, name: str = "cartsync.notifications"):
        self.logger = get_logger(name)

    def notify(self, message: str) -> None:
        self.logger.warning(f"[notify] {message}")


def _is_permanent_error(status_code: int) -> bool:
    """Check if error is permanent (no retry needed)."""
    return status_code in PERMANENT_ERROR_CODES


def _calculate_backoff_delay(attempt: int) -> float:
    """Calculate exponential backoff delay."""
    return float(0.5 * (2 ** attempt))


def _truncate_message(text: str, max_length: int = TELEGRAM_MAX_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


class TelegramNotifier:
    """Sends notifications to a Telegram chat through the Bot API."""

    def __init__(
        self,
        token: str,
        chat_id: Union[int, str],
        retries: int = 2,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.token = token
        self.chat_id = chat_id
        self.retries = retries
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return f"https://api.telegram.org/bot{self.token}/sendMessage"

    async def notify(self, message: str) -> None:
        await self.send(message)

    async def send(self, text: str) -> bool:
        """
        Send a message with retry on transient errors.

        Returns:
            True if sent successfully, False otherwise
        """
        payload = {"chat_id": self.chat_id, "text": _truncate_message(text)}
        last_error = None

        for attempt in range(self.retries + 1):
            try:
                response = await self._post(payload)
                if response.status_code == 200:
                    logger.debug(f"Notification sent to {self.chat_id}")
                    return True

                error_text = response.text[:200] if response.text else NO_RESPONSE_BODY
                logger.warning(f"Telegram API error for {self.chat_id}: status={response.status_code}, response={error_text}")
                if _is_permanent_error(response.status_code):
                    return False
                last_error = f"HTTP {response.status_code}"
            except httpx.TimeoutException:
                last_error = "Timeout"
                logger.warning(f"Timeout sending notification to {self.chat_id} (attempt {attempt + 1}/{self.retries + 1})")
            except httpx.HTTPError as e:
                last_error = f"Connection error: {e}"
                logger.warning(f"Connection error sending notification to {self.chat_id}: {e}")

            if attempt < self.retries:
                await asyncio.sleep(_calculate_backoff_delay(attempt))

        logger.error(f"Failed to send notification to {self.chat_id} after {self.retries + 1} attempts: {last_error}")
        return False

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient() as client:
            return await client.post(self.url, json=payload, timeout=self.timeout)
