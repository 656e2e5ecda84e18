"""
================================================================================
FILE: ingestkit/pipeline/cache.py
================================================================================

PURPOSE:
    Content-addressed result cache for transformation stages.

WORKFLOW:
    1. get_transformation_hash(nodes, stage) -> fingerprint
    2. IngestionCache.get(fingerprint) -> cached output or None (miss)
    3. On a miss the runner executes the stage and calls put(fingerprint, out)

KEY FACTS:
    - The fingerprint covers every node's class, full content (text +
      metadata) and image payload, one record per node, plus the stage's
      identity (class name + configuration)
    - Object reprs like "<Foo object at 0x7f...>" are stripped from the stage
      identity so fingerprints survive process restarts
    - Keys are namespaced "{collection}:{fingerprint}" in the provider
    - Nodes are stored serialized; a hit returns fresh node objects
================================================================================
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ingestkit.config.constants import (
    CACHE_KEY_SEPARATOR,
    CACHE_PERSIST_FILENAME,
    DEFAULT_CACHE_COLLECTION,
)
from ingestkit.core.schema import (
    BaseNode,
    ImageNode,
    MetadataMode,
    node_from_dict,
    node_to_dict,
)
from ingestkit.core.transform import TransformComponent
from ingestkit.providers.cache.base import ICacheProvider
from ingestkit.providers.cache.memory import InMemoryCacheProvider

logger = logging.getLogger(__name__)

_UNSTABLE_REPR = re.compile(r"<[\w\s_\. ]+ at 0x[a-z0-9]+>")

# record / field separators keep node boundaries out of the content string
_NODE_SEPARATOR = "\x1e"
_FIELD_SEPARATOR = "\x1f"


# ================================================================================
# FINGERPRINT
# ================================================================================


def remove_unstable_values(s: str) -> str:
    """Remove memory addresses from object reprs."""
    return _UNSTABLE_REPR.sub("", s)


def _node_content_str(node: BaseNode) -> str:
    """Class name, text with metadata, and any image payload of one node."""
    parts = [node.class_name(), node.get_content(MetadataMode.ALL)]
    if isinstance(node, ImageNode):
        parts.extend([node.image or "", node.image_path or "", node.image_url or ""])
    return _FIELD_SEPARATOR.join(parts)


def get_transformation_hash(nodes: Sequence[BaseNode], transform: TransformComponent) -> str:
    """Fingerprint of (input content, stage identity)."""
    nodes_str = _NODE_SEPARATOR.join(_node_content_str(node) for node in nodes)

    transform_string = remove_unstable_values(
        json.dumps(transform.to_dict(), sort_keys=True, default=str)
    )

    return hashlib.sha256((nodes_str + transform_string).encode("utf-8", "surrogatepass")).hexdigest()


# ================================================================================
# CACHE
# ================================================================================


class IngestionCache:
    """
    Fingerprint -> node list store on top of an ICacheProvider.

    Usage:
        cache = IngestionCache()
        hit = await cache.get(key)
        if hit is None:
            await cache.put(key, nodes)
    """

    def __init__(
        self,
        provider: Optional[ICacheProvider] = None,
        collection: str = DEFAULT_CACHE_COLLECTION,
        ttl: Optional[int] = None,
    ) -> None:
        self.provider = provider if provider is not None else InMemoryCacheProvider()
        self.collection = collection
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self.collection}{CACHE_KEY_SEPARATOR}{key}"

    async def get(self, key: str) -> Optional[List[BaseNode]]:
        value = await self.provider.get(self._key(key))
        if value is None:
            return None
        return [node_from_dict(data) for data in value["nodes"]]

    async def put(self, key: str, nodes: Sequence[BaseNode]) -> None:
        value = {"nodes": [node_to_dict(node) for node in nodes]}
        await self.provider.set(self._key(key), value, ttl=self.ttl)

    async def clear(self) -> None:
        """Drop every entry of this collection."""
        await self.provider.clear(prefix=f"{self.collection}{CACHE_KEY_SEPARATOR}")

    def persist(self, persist_dir: Union[str, Path]) -> None:
        self.provider.persist(Path(persist_dir) / CACHE_PERSIST_FILENAME)

    @classmethod
    def from_persist_dir(
        cls,
        persist_dir: Union[str, Path],
        collection: str = DEFAULT_CACHE_COLLECTION,
    ) -> "IngestionCache":
        provider = InMemoryCacheProvider.from_persist_path(Path(persist_dir) / CACHE_PERSIST_FILENAME)
        return cls(provider=provider, collection=collection)
