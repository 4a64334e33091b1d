"""
Redis client for hosted cart snapshots.

Provides a singleton Upstash Redis client. The local file store needs
none of this; it is only used when UPSTASH_REDIS_REST_URL and
UPSTASH_REDIS_REST_TOKEN are set.
"""
from typing import Optional

from upstash_redis import Redis

from cartsync.config import Settings, load_settings

_redis_client: Optional[Redis] = None


def get_redis(settings: Optional[Settings] = None) -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Cart persistence is synchronous, so the sync client is used.
    """
    global _redis_client

    if _redis_client is None:
        settings = settings or load_settings()
        if not settings.redis_configured:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


def reset_redis() -> None:
    """Drop the cached client (tests, credential rotation)."""
    global _redis_client
    _redis_client = None


class RedisKeys:
    """Redis key prefixes."""

    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"
