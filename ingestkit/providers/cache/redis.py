"""
FILE: ingestkit/providers/cache/redis.py

Redis cache provider implementation.

Unlike a best-effort query cache, errors from Redis are NOT swallowed here:
the pipeline surfaces collaborator failures to its caller unchanged.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis

from ingestkit.providers.cache.base import ICacheProvider

logger = logging.getLogger(__name__)


class RedisCacheProvider(ICacheProvider):
    """Redis cache provider implementation."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        client: Optional[Any] = None,
        default_ttl: Optional[int] = None,
    ) -> None:
        self.redis_url = redis_url
        self.client = client
        self.default_ttl = default_ttl
        self._owns_client = client is None
        self.initialized = False

    async def initialize(self) -> None:
        """Initialize Redis connection."""
        if self.client is None:
            self.client = aioredis.from_url(self.redis_url, decode_responses=True)
        await self.client.ping()
        self.initialized = True
        logger.info("✓ RedisCacheProvider initialized (Redis connected)")

    def _require_client(self) -> Any:
        if self.client is None:
            raise RuntimeError("RedisCacheProvider not initialized")
        return self.client

    async def get(self, key: str) -> Optional[Any]:
        """Get value from Redis."""
        value = await self._require_client().get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return json.loads(value)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        """Set value in Redis."""
        client = self._require_client()
        serialized = json.dumps(value)
        ttl = ttl if ttl is not None else self.default_ttl

        if ttl is not None:
            await client.setex(key, ttl, serialized)
        else:
            await client.set(key, serialized)

    async def delete(self, key: str) -> None:
        """Delete from Redis."""
        await self._require_client().delete(key)

    async def clear(self, prefix: Optional[str] = None) -> None:
        """Clear cached keys (only `prefix*` when a prefix is given)."""
        client = self._require_client()
        if prefix is None:
            await client.flushdb()
        else:
            keys = [key async for key in client.scan_iter(match=f"{prefix}*")]
            if keys:
                await client.delete(*keys)
        logger.info("Cache cleared")

    async def shutdown(self) -> None:
        """Shutdown Redis connection."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
        self.initialized = False
        logger.info("RedisCacheProvider shutdown")
