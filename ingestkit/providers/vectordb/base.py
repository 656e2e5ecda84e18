"""
FILE: ingestkit/providers/vectordb/base.py

Vector store (destination store) interface (contract).
All destination store implementations must implement this.

Nodes are keyed by their reference document: `ref_doc_id` when the node
was derived from a source document, the node's own id otherwise. `delete`
removes every vector stored under that key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from ingestkit.core.schema import BaseNode


def ref_key(node: BaseNode) -> str:
    """Key a node is deleted by."""
    return node.ref_doc_id or node.node_id


class IVectorStore(ABC):
    """Abstract base class for vector stores."""

    @abstractmethod
    async def add(self, nodes: Sequence[BaseNode]) -> List[str]:
        """Insert nodes (with embeddings); return the stored ids."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, ref_doc_id: str) -> None:
        """Remove every vector stored for `ref_doc_id` (no-op if unknown)."""
        raise NotImplementedError

    @abstractmethod
    async def query(self, embedding: List[float], top_k: int = 5) -> List[Dict[str, Any]]:
        """
        Similarity search.

        Returns list of:
          { "id": str, "score": float, "node": BaseNode }
        """
        raise NotImplementedError

    def persist(self, persist_path: Union[str, Path]) -> None:
        """Write store contents to disk (no-op for remote stores)."""
        return None

    async def shutdown(self) -> None:
        """Cleanup resources."""
        return None
