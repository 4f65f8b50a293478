"""
Tests for RequestCache over the in-memory FakeKVStore.
"""

from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from weather_gateway.cache.request_cache import NO_TTL, RequestCache


@pytest.fixture
def cache(kv_store) -> RequestCache:
    return RequestCache(kv_store, prefix="test")


class TestPrefixKey:
    def test_prefix(self):
        assert RequestCache(None, prefix="app").prefix_key("weather:current") == "app:weather:current"

    def test_empty_prefix_leaves_key_bare(self):
        assert RequestCache(None).prefix_key("weather:current") == "weather:current"


class TestReadWrite:
    @pytest.mark.asyncio
    async def test_get_miss_returns_none(self, cache):
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache, kv_store):
        await cache.set("key", b"value", 60)

        assert await cache.get("key") == b"value"
        assert kv_store.data == {"test:key": b"value"}

    @pytest.mark.asyncio
    async def test_namespaces_do_not_collide(self, kv_store):
        first = RequestCache(kv_store, prefix="a")
        second = RequestCache(kv_store, prefix="b")

        await first.set("key", b"one", 60)
        await second.set("key", b"two", 60)

        assert await first.get("key") == b"one"
        assert await second.get("key") == b"two"

    @pytest.mark.asyncio
    async def test_delete_and_exists(self, cache):
        await cache.set("key", b"value", 60)
        assert await cache.exists("key")

        await cache.delete("key")

        assert not await cache.exists("key")
        await cache.delete("key")

    @pytest.mark.asyncio
    async def test_value_expires(self, cache, clock):
        await cache.set("key", b"value", 10)

        clock.advance(9.5)
        assert await cache.get("key") == b"value"

        clock.advance(1)
        assert await cache.get("key") is None
        assert not await cache.exists("key")


class TestSetNx:
    @pytest.mark.asyncio
    async def test_first_writer_wins(self, cache):
        assert await cache.set_nx("lock", b"first", 10)
        assert not await cache.set_nx("lock", b"second", 10)
        assert await cache.get("lock") == b"first"

    @pytest.mark.asyncio
    async def test_free_again_after_expiry(self, cache, clock):
        assert await cache.set_nx("lock", b"first", 10)

        clock.advance(11)

        assert await cache.set_nx("lock", b"second", 10)
        assert await cache.get("lock") == b"second"


class TestDeleteIfValue:
    @pytest.mark.asyncio
    async def test_deletes_matching_value(self, cache):
        await cache.set_nx("lock", b"token-a", 10)

        assert await cache.delete_if_value("lock", b"token-a")
        assert not await cache.exists("lock")

    @pytest.mark.asyncio
    async def test_keeps_other_value(self, cache):
        await cache.set_nx("lock", b"token-b", 10)

        assert not await cache.delete_if_value("lock", b"token-a")
        assert await cache.get("lock") == b"token-b"

    @pytest.mark.asyncio
    async def test_missing_key(self, cache):
        assert not await cache.delete_if_value("lock", b"token-a")


class TestGetTtl:
    @pytest.mark.asyncio
    async def test_remaining_ttl(self, cache, clock):
        await cache.set("key", b"value", 60)
        clock.advance(15)

        assert await cache.get_ttl("key") == pytest.approx(45)

    @pytest.mark.asyncio
    async def test_no_expiry(self, cache):
        await cache.set("key", b"value", 0)

        assert await cache.get_ttl("key") == NO_TTL

    @pytest.mark.asyncio
    async def test_missing_key(self, cache):
        assert await cache.get_ttl("missing") == NO_TTL


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_clear_removes_all_namespaces(self, cache, kv_store):
        await cache.set("key", b"value", 60)
        await RequestCache(kv_store, prefix="other").set("key", b"value", 60)

        await cache.clear()

        assert kv_store.data == {}

    @pytest.mark.asyncio
    async def test_close_closes_store(self, cache, kv_store):
        await cache.close()
        assert kv_store.closed


class TestErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation,args", [
        ("get", ("key",)),
        ("set", ("key", b"value", 60)),
        ("delete", ("key",)),
        ("exists", ("key",)),
        ("set_nx", ("key", b"value", 60)),
        ("delete_if_value", ("key", b"value")),
        ("get_ttl", ("key",)),
        ("clear", ()),
        ("close", ()),
    ])
    async def test_store_errors_propagate(self, cache, kv_store, operation, args):
        kv_store.error = RedisConnectionError("connection refused")

        with pytest.raises(RedisConnectionError, match="connection refused"):
            await getattr(cache, operation)(*args)
