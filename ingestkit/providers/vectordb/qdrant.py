"""
FILE: ingestkit/providers/vectordb/qdrant.py

Qdrant vector store.

Settings (see ingestkit.config.settings):
- QDRANT_URL=http://localhost:6333 (":memory:" for a local in-process store)
- QDRANT_API_KEY=... (optional)
- QDRANT_COLLECTION=ingestkit
- QDRANT_TIMEOUT=10

Design:
- The collection is created on the first add(), sized to the first vector
- Qdrant point ids must be UUIDs: non-UUID node ids are mapped with uuid5
- Payload carries "ref_doc_id" (used by delete) and the serialized node
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from qdrant_client import AsyncQdrantClient
from qdrant_client import models

from ingestkit.core.schema import BaseNode, node_from_dict, node_to_dict
from ingestkit.providers.vectordb.base import IVectorStore, ref_key

logger = logging.getLogger(__name__)

_POINT_NAMESPACE = uuid.UUID("6f1c3a52-8d0e-4f5b-9a51-0c2b7de4a0a1")


def to_point_id(node_id: str) -> str:
    try:
        return str(uuid.UUID(node_id))
    except ValueError:
        return str(uuid.uuid5(_POINT_NAMESPACE, node_id))


@dataclass(frozen=True)
class QdrantConfig:
    url: str
    api_key: Optional[str]
    collection: str
    timeout_s: int


class QdrantVectorStore(IVectorStore):
    def __init__(self, config: QdrantConfig, client: Optional[AsyncQdrantClient] = None):
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._collection_ready = False
        logger.info("QdrantVectorStore created: url=%s", self.config.url)

    async def initialize(self) -> None:
        if self._client is None:
            if self.config.url == ":memory:":
                self._client = AsyncQdrantClient(location=":memory:")
            else:
                self._client = AsyncQdrantClient(
                    url=self.config.url,
                    api_key=self.config.api_key,
                    timeout=self.config.timeout_s,
                )
        self._collection_ready = await self._client.collection_exists(self.config.collection)
        logger.info("✓ Qdrant initialized: %s (collection=%s)", self.config.url, self.config.collection)

    def _require_client(self) -> AsyncQdrantClient:
        if self._client is None:
            raise RuntimeError("QdrantVectorStore not initialized")
        return self._client

    async def _ensure_collection(self, dim: int) -> None:
        if self._collection_ready:
            return
        client = self._require_client()
        if not await client.collection_exists(self.config.collection):
            await client.create_collection(
                collection_name=self.config.collection,
                vectors_config=models.VectorParams(size=dim, distance=models.Distance.COSINE),
            )
            logger.info("Created Qdrant collection %s (dim=%s)", self.config.collection, dim)
        self._collection_ready = True

    async def add(self, nodes: Sequence[BaseNode]) -> List[str]:
        if not nodes:
            return []

        points = []
        for node in nodes:
            if node.embedding is None:
                raise ValueError(f"Node {node.node_id} has no embedding")
            points.append(
                models.PointStruct(
                    id=to_point_id(node.node_id),
                    vector=list(node.embedding),
                    payload={"ref_doc_id": ref_key(node), "node": node_to_dict(node)},
                )
            )

        await self._ensure_collection(len(points[0].vector))
        await self._require_client().upsert(collection_name=self.config.collection, points=points)
        return [node.node_id for node in nodes]

    async def delete(self, ref_doc_id: str) -> None:
        client = self._require_client()
        if not await client.collection_exists(self.config.collection):
            return

        await client.delete(
            collection_name=self.config.collection,
            points_selector=models.FilterSelector(
                filter=models.Filter(
                    must=[
                        models.FieldCondition(
                            key="ref_doc_id",
                            match=models.MatchValue(value=ref_doc_id),
                        )
                    ]
                )
            ),
        )

    async def query(self, embedding: List[float], top_k: int = 5) -> List[Dict[str, Any]]:
        client = self._require_client()
        if not await client.collection_exists(self.config.collection):
            return []

        response = await client.query_points(
            collection_name=self.config.collection,
            query=list(embedding),
            limit=int(top_k),
            with_payload=True,
        )

        out: List[Dict[str, Any]] = []
        for point in response.points:
            node = node_from_dict(point.payload["node"])
            out.append({"id": node.node_id, "score": float(point.score), "node": node})
        return out

    async def shutdown(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.close()
            self._client = None
        logger.info("QdrantVectorStore shutdown complete")
