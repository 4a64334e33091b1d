"""Runtime configuration read from environment variables."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_INVENTORY_API_URL = "http://localhost:3333"
DEFAULT_STORAGE_KEY = "@RocketShoes:cart"
DEFAULT_LANGUAGE = "pt"


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first non-blank value among the given variables."""
    for key in keys:
        value = os.environ.get(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    value = _get_env(*keys)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{keys[0]} must be a number, got {value!r}")


@dataclass(frozen=True)
class Settings:
    """Settings for one cart session."""
    inventory_api_url: str
    inventory_timeout: float
    storage_key: str
    data_dir: Path
    language: str
    redis_url: str
    redis_token: str
    telegram_token: str
    telegram_chat_id: str

    @property
    def redis_configured(self) -> bool:
        return bool(self.redis_url and self.redis_token)

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_token and self.telegram_chat_id)


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        inventory_api_url=(_get_env("INVENTORY_API_URL", default=DEFAULT_INVENTORY_API_URL) or "").rstrip("/"),
        inventory_timeout=_get_float("INVENTORY_TIMEOUT", default=5.0),
        storage_key=_get_env("CART_STORAGE_KEY", default=DEFAULT_STORAGE_KEY) or DEFAULT_STORAGE_KEY,
        data_dir=Path(_get_env("CART_DATA_DIR", default=str(Path.home() / ".cartsync")) or "."),
        language=_get_env("CART_LANGUAGE", default=DEFAULT_LANGUAGE) or DEFAULT_LANGUAGE,
        # Upstash uses REST_URL and REST_TOKEN
        redis_url=_get_env("UPSTASH_REDIS_REST_URL", default="") or "",
        redis_token=_get_env("UPSTASH_REDIS_REST_TOKEN", default="") or "",
        telegram_token=_get_env("TELEGRAM_TOKEN", default="") or "",
        telegram_chat_id=_get_env("TELEGRAM_CHAT_ID", default="") or "",
    )
