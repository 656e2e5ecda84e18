"""Cache provider package."""

from ingestkit.providers.cache.base import ICacheProvider
from ingestkit.providers.cache.memory import InMemoryCacheProvider
from ingestkit.providers.cache.redis import RedisCacheProvider

__all__ = [
    "ICacheProvider",
    "InMemoryCacheProvider",
    "RedisCacheProvider",
]
