"""Tests for cache storage providers.

Covers:
- InMemoryCacheProvider: JSON isolation, TTL expiry, prefix clear, persist
- RedisCacheProvider against a fake async client: JSON values, setex on
  TTL, prefix clear via scan_iter, errors propagate, client ownership
"""
from __future__ import annotations

import fnmatch
from typing import Any, Dict, Optional

import pytest

from ingestkit.providers.cache.memory import InMemoryCacheProvider
from ingestkit.providers.cache.redis import RedisCacheProvider


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class TestInMemoryCacheProvider:
    async def test_set_get_roundtrip(self):
        provider = InMemoryCacheProvider()
        await provider.set("k", {"nodes": [1, 2]})
        assert await provider.get("k") == {"nodes": [1, 2]}

    async def test_values_are_copies(self):
        provider = InMemoryCacheProvider()
        value = {"nodes": [1]}
        await provider.set("k", value)

        value["nodes"].append(2)
        fetched = await provider.get("k")
        fetched["nodes"].append(3)

        assert await provider.get("k") == {"nodes": [1]}

    async def test_ttl_expiry(self):
        provider = InMemoryCacheProvider()

        await provider.set("fresh", 1, ttl=3600)
        await provider.set("stale", 2, ttl=0)

        assert await provider.get("fresh") == 1
        assert await provider.get("stale") is None
        assert len(provider) == 1

    async def test_clear_with_prefix(self):
        provider = InMemoryCacheProvider()
        await provider.set("a:1", 1)
        await provider.set("b:1", 2)

        await provider.clear(prefix="a:")

        assert await provider.get("a:1") is None
        assert await provider.get("b:1") == 2

    async def test_clear_all(self):
        provider = InMemoryCacheProvider()
        await provider.set("a", 1)
        await provider.clear()
        assert len(provider) == 0

    async def test_delete(self):
        provider = InMemoryCacheProvider()
        await provider.set("a", 1)
        await provider.delete("a")
        await provider.delete("never-set")
        assert await provider.get("a") is None

    async def test_persist_and_load(self, tmp_path):
        provider = InMemoryCacheProvider()
        await provider.set("k", {"x": 1})
        path = tmp_path / "cache.json"

        provider.persist(path)
        loaded = InMemoryCacheProvider.from_persist_path(path)

        assert await loaded.get("k") == {"x": 1}


# ---------------------------------------------------------------------------
# Redis
# ---------------------------------------------------------------------------


class FakeRedis:
    """Subset of redis.asyncio.Redis used by the provider."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}
        self.closed = False
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def ping(self) -> bool:
        self._check()
        return True

    async def get(self, key: str) -> Optional[str]:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._check()
        self.data[key] = value

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self._check()
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, *keys: str) -> int:
        self._check()
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def scan_iter(self, match: str = "*"):
        for key in list(self.data):
            if fnmatch.fnmatch(key, match):
                yield key

    async def flushdb(self) -> None:
        self.data.clear()

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
async def redis_provider(fake_redis) -> RedisCacheProvider:
    provider = RedisCacheProvider(client=fake_redis)
    await provider.initialize()
    return provider


class TestRedisCacheProvider:
    async def test_json_roundtrip(self, redis_provider, fake_redis):
        await redis_provider.set("k", {"nodes": []})

        assert fake_redis.data["k"] == '{"nodes": []}'
        assert await redis_provider.get("k") == {"nodes": []}

    async def test_miss(self, redis_provider):
        assert await redis_provider.get("nope") is None

    async def test_ttl_uses_setex(self, redis_provider, fake_redis):
        await redis_provider.set("k", 1, ttl=30)
        assert fake_redis.ttls == {"k": 30}

    async def test_default_ttl(self, fake_redis):
        provider = RedisCacheProvider(client=fake_redis, default_ttl=60)
        await provider.initialize()

        await provider.set("k", 1)

        assert fake_redis.ttls == {"k": 60}

    async def test_clear_with_prefix(self, redis_provider, fake_redis):
        await redis_provider.set("ingestion_cache:a", 1)
        await redis_provider.set("other:b", 2)

        await redis_provider.clear(prefix="ingestion_cache:")

        assert list(fake_redis.data) == ["other:b"]

    async def test_errors_propagate(self, redis_provider, fake_redis):
        fake_redis.fail_with = ConnectionError("redis down")

        with pytest.raises(ConnectionError):
            await redis_provider.get("k")

    async def test_requires_initialize(self):
        provider = RedisCacheProvider(redis_url="redis://unused")
        with pytest.raises(RuntimeError):
            await provider.get("k")

    async def test_shutdown_leaves_shared_client_open(self, redis_provider, fake_redis):
        await redis_provider.shutdown()
        assert not fake_redis.closed
