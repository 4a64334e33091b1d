"""Tests for settings and manager wiring"""
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from cartsync.cart import FileCartStore, RedisCartStore, build_cart_manager, get_cart_manager, reset_cart_manager
from cartsync.config import DEFAULT_STORAGE_KEY, load_settings
from cartsync.services import InventoryClient, LogNotifier, TelegramNotifier

ENV_KEYS = [
    "INVENTORY_API_URL",
    "INVENTORY_TIMEOUT",
    "CART_STORAGE_KEY",
    "CART_DATA_DIR",
    "CART_LANGUAGE",
    "UPSTASH_REDIS_REST_URL",
    "UPSTASH_REDIS_REST_TOKEN",
    "TELEGRAM_TOKEN",
    "TELEGRAM_CHAT_ID",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CART_DATA_DIR", str(tmp_path))
    yield monkeypatch
    reset_cart_manager()


def test_defaults(clean_env, tmp_path):
    settings = load_settings()

    assert settings.inventory_api_url == "http://localhost:3333"
    assert settings.inventory_timeout == 5.0
    assert settings.storage_key == DEFAULT_STORAGE_KEY
    assert settings.data_dir == Path(tmp_path)
    assert settings.language == "pt"
    assert not settings.redis_configured
    assert not settings.telegram_configured


def test_overrides(clean_env):
    clean_env.setenv("INVENTORY_API_URL", "https://api.shop.test/")
    clean_env.setenv("INVENTORY_TIMEOUT", "2.5")
    clean_env.setenv("CART_LANGUAGE", "en")
    clean_env.setenv("CART_STORAGE_KEY", "  ")

    settings = load_settings()

    assert settings.inventory_api_url == "https://api.shop.test"
    assert settings.inventory_timeout == 2.5
    assert settings.language == "en"
    assert settings.storage_key == DEFAULT_STORAGE_KEY


def test_invalid_timeout(clean_env):
    clean_env.setenv("INVENTORY_TIMEOUT", "soon")

    with pytest.raises(ValueError):
        load_settings()


def test_build_local_manager(clean_env, tmp_path):
    manager = build_cart_manager(load_settings())

    assert isinstance(manager.inventory, InventoryClient)
    assert isinstance(manager.store, FileCartStore)
    assert manager.store.directory == Path(tmp_path)
    assert isinstance(manager.notifier, LogNotifier)
    assert manager.cart == ()


def test_build_hosted_manager(clean_env):
    clean_env.setenv("UPSTASH_REDIS_REST_URL", "https://redis.test")
    clean_env.setenv("UPSTASH_REDIS_REST_TOKEN", "token")
    clean_env.setenv("TELEGRAM_TOKEN", "bot-token")
    clean_env.setenv("TELEGRAM_CHAT_ID", "42")
    redis = Mock()
    redis.get.return_value = None

    with patch("cartsync.db.get_redis", return_value=redis):
        manager = build_cart_manager(load_settings())

    assert isinstance(manager.store, RedisCartStore)
    assert manager.store.redis is redis
    assert isinstance(manager.notifier, TelegramNotifier)
    assert manager.notifier.chat_id == "42"


def test_get_cart_manager_is_session_scoped(clean_env):
    first = get_cart_manager()

    assert get_cart_manager() is first

    reset_cart_manager()
    assert get_cart_manager() is not first
