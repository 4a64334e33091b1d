"""
Cart snapshot stores.

A store keeps one JSON array of line items under a single key and is
overwritten wholesale on every commit. `load` returns the decoded JSON
value (validation is the manager's job) or None when nothing usable is
stored.
"""
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from upstash_redis import Redis

from cartsync.config import DEFAULT_STORAGE_KEY
from cartsync.db import RedisKeys
from cartsync.logging import get_logger

logger = get_logger(__name__)


class CartStore(Protocol):
    """Persistent mirror of the cart."""

    def load(self) -> Optional[Any]:
        ...

    def save(self, snapshot: list[dict]) -> None:
        ...


def _decode(raw: Optional[str], source: str) -> Optional[Any]:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Corrupted cart snapshot in {source}: {e}")
        return None


class MemoryCartStore:
    """Store kept in process memory, holding the serialized text like the other stores."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY, initial: Optional[str] = None):
        self.key = key
        self._data: dict[str, str] = {}
        if initial is not None:
            self._data[key] = initial
        self.save_count = 0

    @property
    def raw(self) -> Optional[str]:
        return self._data.get(self.key)

    def load(self) -> Optional[Any]:
        return _decode(self._data.get(self.key), "memory")

    def save(self, snapshot: list[dict]) -> None:
        self._data[self.key] = json.dumps(snapshot)
        self.save_count += 1


class FileCartStore:
    """
    Store backed by a JSON file on local disk.

    The file name is derived from the key, so several namespaces can
    share one directory. Writes go to a temp file that replaces the
    target, so a crash mid-write never leaves a half-written snapshot.
    """

    def __init__(self, directory: Path | str, key: str = DEFAULT_STORAGE_KEY):
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        slug = re.sub(r"[^A-Za-z0-9._-]+", "_", self.key).strip("_") or "cart"
        return self.directory / f"{slug}.json"

    def load(self) -> Optional[Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return _decode(raw, str(self.path))

    def save(self, snapshot: list[dict]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".cart-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class RedisCartStore:
    """Store backed by an Upstash Redis key (no TTL: the snapshot outlives the session)."""

    def __init__(self, redis: Redis, key: str = DEFAULT_STORAGE_KEY):
        self.redis = redis
        self.key = key

    @property
    def redis_key(self) -> str:
        return RedisKeys.cart_key(self.key)

    def load(self) -> Optional[Any]:
        raw = self.redis.get(self.redis_key)
        return _decode(raw, f"redis key {self.redis_key}")

    def save(self, snapshot: list[dict]) -> None:
        self.redis.set(self.redis_key, json.dumps(snapshot))
