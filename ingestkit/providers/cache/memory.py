"""In-memory cache provider (default; optionally persisted to a JSON file)."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ingestkit.providers.cache.base import ICacheProvider
from ingestkit.utils.helpers import read_json, write_json

logger = logging.getLogger(__name__)


class InMemoryCacheProvider(ICacheProvider):
    """
    Process-local cache.

    Values are stored as JSON strings so callers never share mutable state
    with the cache, the same contract Redis gives.
    """

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        # key -> (serialized value, expiry timestamp or None)
        self._data: Dict[str, Tuple[str, Optional[float]]] = {
            key: (value, None) for key, value in (data or {}).items()
        }
        self.initialized = False

    async def initialize(self) -> None:
        self.initialized = True
        logger.info("✓ InMemoryCacheProvider initialized")

    async def get(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            return None

        serialized, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._data[key]
            return None
        return json.loads(serialized)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        expires_at = time.monotonic() + ttl if ttl is not None else None
        self._data[key] = (json.dumps(value), expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self, prefix: Optional[str] = None) -> None:
        if prefix is None:
            self._data.clear()
        else:
            for key in [k for k in self._data if k.startswith(prefix)]:
                del self._data[key]
        logger.info("Cache cleared")

    async def shutdown(self) -> None:
        self.initialized = False
        logger.info("InMemoryCacheProvider shutdown")

    def __len__(self) -> int:
        return len(self._data)

    # ------------------------------------------------------------------
    # Persistence (TTL is not persisted)
    # ------------------------------------------------------------------

    def persist(self, persist_path: Union[str, Path]) -> None:
        write_json(persist_path, {key: value for key, (value, _) in self._data.items()})
        logger.info(f"Persisted {len(self._data)} cache entries to {persist_path}")

    @classmethod
    def from_persist_path(cls, persist_path: Union[str, Path]) -> "InMemoryCacheProvider":
        data = read_json(persist_path)
        logger.info(f"Loaded {len(data)} cache entries from {persist_path}")
        return cls(data=data)
