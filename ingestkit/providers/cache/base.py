"""
FILE: ingestkit/providers/cache/base.py

Cache storage provider interface (contract).
The transformation cache stores JSON-serializable values through this.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ICacheProvider(ABC):
    """Abstract base class for all cache providers."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the cache provider."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a value from cache. Returns None when absent."""
        pass

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        """Store a value in cache."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value from cache."""
        pass

    @abstractmethod
    async def clear(self, prefix: Optional[str] = None) -> None:
        """Clear all entries, or only those whose key starts with prefix."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Shutdown cache provider and release resources."""
        pass

    def persist(self, persist_path: Union[str, Path]) -> None:
        """Write cache contents to disk. Remote providers are already durable."""
        logger.debug(f"{self.__class__.__name__}: nothing to persist")
