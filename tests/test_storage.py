"""Tests for cart snapshot stores"""
import json
from unittest.mock import Mock

from cartsync.cart import FileCartStore, MemoryCartStore, RedisCartStore
from tests.factories import line_item_dict


def test_file_store_missing_file(tmp_path):
    """Test loading before anything was saved"""
    store = FileCartStore(tmp_path / "data")
    assert store.load() is None


def test_file_store_round_trip(tmp_path):
    """Test saved snapshot is read back as-is"""
    store = FileCartStore(tmp_path / "data")
    snapshot = [line_item_dict(1, 2), line_item_dict(2, 1)]

    store.save(snapshot)

    assert store.load() == snapshot
    assert FileCartStore(tmp_path / "data").load() == snapshot


def test_file_store_overwrites_whole_snapshot(tmp_path):
    """Test each save replaces the previous snapshot"""
    store = FileCartStore(tmp_path)
    store.save([line_item_dict(1, 2), line_item_dict(2, 1)])
    store.save([line_item_dict(2, 1)])

    assert store.load() == [line_item_dict(2, 1)]
    # No temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == [store.path.name]


def test_file_store_key_to_file_name(tmp_path):
    """Test namespaced keys map to safe file names"""
    store = FileCartStore(tmp_path, key="@RocketShoes:cart")
    assert store.path == tmp_path / "RocketShoes_cart.json"


def test_file_store_corrupted_file(tmp_path):
    """Test unreadable JSON is treated as no snapshot"""
    store = FileCartStore(tmp_path)
    store.path.write_text("{not json", encoding="utf-8")

    assert store.load() is None


def test_file_store_keeps_unicode(tmp_path):
    """Test titles are written unescaped"""
    store = FileCartStore(tmp_path)
    store.save([line_item_dict(1, 1)])

    assert "Tênis" in store.path.read_text(encoding="utf-8")


def test_memory_store():
    """Test memory store keeps the serialized text"""
    store = MemoryCartStore()
    store.save([line_item_dict(1, 1)])

    assert json.loads(store.raw) == [line_item_dict(1, 1)]
    assert store.load() == [line_item_dict(1, 1)]
    assert store.save_count == 1


def test_redis_store_save():
    """Test snapshot is written under the namespaced key"""
    redis = Mock()
    store = RedisCartStore(redis, key="@RocketShoes:cart")

    store.save([line_item_dict(1, 1)])

    key, value = redis.set.call_args.args
    assert key == "cart:@RocketShoes:cart"
    assert json.loads(value) == [line_item_dict(1, 1)]


def test_redis_store_load():
    """Test snapshot is read back from Redis"""
    redis = Mock()
    redis.get.return_value = json.dumps([line_item_dict(3, 2)])
    store = RedisCartStore(redis)

    assert store.load() == [line_item_dict(3, 2)]
    redis.get.assert_called_once_with("cart:@RocketShoes:cart")


def test_redis_store_empty_and_corrupted():
    """Test missing or corrupted Redis values load as None"""
    redis = Mock()
    store = RedisCartStore(redis)

    redis.get.return_value = None
    assert store.load() is None

    redis.get.return_value = "[{"
    assert store.load() is None
