"""Embedding stages. HuggingFaceEmbedding is imported from its module directly."""

from ingestkit.providers.embeddings.base import BaseEmbedding
from ingestkit.providers.embeddings.mock import MockEmbedding

__all__ = ["BaseEmbedding", "MockEmbedding"]
