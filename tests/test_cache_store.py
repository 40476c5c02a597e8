"""
Testes do CacheStore (best-effort sobre Redis)
"""
import json

from agro_registry.cache import CacheStore, dashboard_key, entity_key, relation_key

from conftest import FailingRedis, FakeRedis


def test_key_namespaces():
    assert entity_key("producer", "abc") == "producer:abc"
    assert relation_key("crops", "farm", "f1") == "crops:farm:f1"
    assert dashboard_key("byState") == "dashboard:byState"


def test_set_without_ttl_persists(cache_store, fake_redis):
    cache_store.set("producer:1", "value")
    assert cache_store.get("producer:1") == "value"
    assert fake_redis.ttl("producer:1") == -1


def test_set_with_ttl_expires(cache_store, fake_redis):
    cache_store.set("crops:farm:1", "[]", ttl_seconds=60)
    assert fake_redis.ttl("crops:farm:1") == 60
    fake_redis.advance(61)
    assert cache_store.get("crops:farm:1") is None


def test_json_helpers_keep_utf8(cache_store, fake_redis):
    cache_store.set_json("farm:1", {"name": "Fazenda São João", "total_area": 10.5})
    assert "São João" in fake_redis.store["farm:1"]
    assert cache_store.get_json("farm:1") == {"name": "Fazenda São João", "total_area": 10.5}


def test_invalid_json_is_a_miss(cache_store, fake_redis):
    fake_redis.store["farm:1"] = "{not json"
    assert cache_store.get_json("farm:1") is None


def test_delete_and_delete_by_pattern(cache_store, fake_redis):
    for key in ("crops:farm:1", "crops:farm:2", "planteds:crop:1"):
        cache_store.set(key, json.dumps([1]))
    cache_store.delete("planteds:crop:1")
    assert cache_store.get("planteds:crop:1") is None

    cache_store.delete_by_pattern("crops:farm:*")
    assert fake_redis.store == {}


def test_delete_by_pattern_without_matches(cache_store, fake_redis):
    cache_store.set("producer:1", "x")
    cache_store.delete_by_pattern("farm:*")
    assert cache_store.get("producer:1") == "x"


def test_backend_failures_are_swallowed():
    store = CacheStore(client=FailingRedis())
    assert store.connect() is False
    assert store.get("producer:1") is None
    assert store.get_json("producer:1") is None
    store.set("producer:1", "x")
    store.set_json("producer:1", {"a": 1}, ttl_seconds=10)
    store.delete("producer:1")
    store.delete_by_pattern("producer:*")
    assert store.ping() is False


def test_operations_without_client_are_noops():
    store = CacheStore(url=None)
    assert store.connect() is False
    assert store.is_connected is False
    store.set("k", "v")
    assert store.get("k") is None
    assert store.ping() is False


def test_injected_client_is_not_closed():
    client = FakeRedis()
    store = CacheStore(client=client)
    assert store.connect() is True
    store.close()
    assert client.closed is False
    assert store.is_connected is True
