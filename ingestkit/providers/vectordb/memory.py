"""
FILE: ingestkit/providers/vectordb/memory.py

In-memory vector store.

Design:
- node_id -> serialized node, embedding and reference key
- Cosine similarity via numpy over the full matrix (fine for local use)
- persist() writes one JSON file; from_persist_path() reloads it
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from ingestkit.core.schema import BaseNode, node_from_dict, node_to_dict
from ingestkit.providers.vectordb.base import IVectorStore, ref_key
from ingestkit.utils.helpers import read_json, write_json

logger = logging.getLogger(__name__)


class SimpleVectorStore(IVectorStore):
    def __init__(
        self,
        embeddings: Optional[Dict[str, List[float]]] = None,
        nodes: Optional[Dict[str, Dict[str, Any]]] = None,
        ref_doc_ids: Optional[Dict[str, str]] = None,
    ) -> None:
        self._embeddings: Dict[str, List[float]] = embeddings or {}
        self._nodes: Dict[str, Dict[str, Any]] = nodes or {}
        self._ref_doc_ids: Dict[str, str] = ref_doc_ids or {}

    def __len__(self) -> int:
        return len(self._embeddings)

    @property
    def node_ids(self) -> List[str]:
        return list(self._embeddings.keys())

    def get(self, node_id: str) -> Optional[BaseNode]:
        data = self._nodes.get(node_id)
        return node_from_dict(data) if data is not None else None

    async def add(self, nodes: Sequence[BaseNode]) -> List[str]:
        ids: List[str] = []
        for node in nodes:
            if node.embedding is None:
                raise ValueError(f"Node {node.node_id} has no embedding")
            self._embeddings[node.node_id] = list(node.embedding)
            self._nodes[node.node_id] = node_to_dict(node)
            self._ref_doc_ids[node.node_id] = ref_key(node)
            ids.append(node.node_id)

        logger.debug(f"SimpleVectorStore added {len(ids)} nodes (total={len(self)})")
        return ids

    async def delete(self, ref_doc_id: str) -> None:
        doomed = [nid for nid, ref in self._ref_doc_ids.items() if ref == ref_doc_id]
        for node_id in doomed:
            self._embeddings.pop(node_id, None)
            self._nodes.pop(node_id, None)
            self._ref_doc_ids.pop(node_id, None)

        if doomed:
            logger.debug(f"SimpleVectorStore deleted {len(doomed)} nodes for {ref_doc_id}")

    async def query(self, embedding: List[float], top_k: int = 5) -> List[Dict[str, Any]]:
        if not self._embeddings or top_k <= 0:
            return []

        ids = list(self._embeddings.keys())
        matrix = np.asarray([self._embeddings[i] for i in ids], dtype=np.float32)
        query = np.asarray(embedding, dtype=np.float32)

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        norms[norms == 0] = 1.0
        scores = matrix @ query / norms

        order = np.argsort(-scores)[:top_k]
        return [
            {"id": ids[i], "score": float(scores[i]), "node": self.get(ids[i])}
            for i in order
        ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self, persist_path: Union[str, Path]) -> None:
        write_json(
            persist_path,
            {
                "embeddings": self._embeddings,
                "nodes": self._nodes,
                "ref_doc_ids": self._ref_doc_ids,
            },
        )
        logger.info(f"Persisted {len(self)} vectors to {persist_path}")

    @classmethod
    def from_persist_path(cls, persist_path: Union[str, Path]) -> "SimpleVectorStore":
        data = read_json(persist_path)
        return cls(
            embeddings=data.get("embeddings"),
            nodes=data.get("nodes"),
            ref_doc_ids=data.get("ref_doc_ids"),
        )
