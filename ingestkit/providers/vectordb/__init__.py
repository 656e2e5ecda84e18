"""Vector (destination) store package."""

from ingestkit.providers.vectordb.base import IVectorStore, ref_key
from ingestkit.providers.vectordb.memory import SimpleVectorStore
from ingestkit.providers.vectordb.qdrant import QdrantConfig, QdrantVectorStore

__all__ = [
    "IVectorStore",
    "QdrantConfig",
    "QdrantVectorStore",
    "SimpleVectorStore",
    "ref_key",
]
