"""
FILE: ingestkit/providers/embeddings/base.py

Embedding stage interface (contract).

An embedding model is a transformation stage: it returns copies of its
input nodes with `embedding` filled for every modality it supports.
Nodes of other modalities pass through unchanged (and therefore are not
written to any vector store).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, ClassVar, FrozenSet, List, Sequence

from pydantic import Field

from ingestkit.config.constants import DEFAULT_EMBED_BATCH_SIZE
from ingestkit.core.schema import BaseNode, ImageNode, MetadataMode, ModalityType
from ingestkit.core.transform import TransformComponent
from ingestkit.utils.helpers import chunks


class BaseEmbedding(TransformComponent):
    """Abstract base class for embedding stages."""

    supported_modalities: ClassVar[FrozenSet[ModalityType]] = frozenset({ModalityType.TEXT})

    model_name: str = "unknown"
    embed_batch_size: int = Field(default=DEFAULT_EMBED_BATCH_SIZE, gt=0)

    async def initialize(self) -> None:
        """Load model / warmup (optional)."""
        return None

    async def shutdown(self) -> None:
        return None

    @abstractmethod
    async def aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts."""
        raise NotImplementedError

    async def aget_image_embeddings(self, images: List[ImageNode]) -> List[List[float]]:
        raise NotImplementedError(f"{self.class_name()} does not embed images")

    async def aget_query_embedding(self, query: str) -> List[float]:
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")
        return (await self.aget_text_embeddings([query]))[0]

    async def _embed_modality(
        self, modality: ModalityType, nodes: List[BaseNode]
    ) -> List[List[float]]:
        vectors: List[List[float]] = []
        for batch in chunks(nodes, self.embed_batch_size):
            if modality == ModalityType.IMAGE:
                vectors.extend(await self.aget_image_embeddings(batch))  # type: ignore[arg-type]
            else:
                texts = [node.get_content(metadata_mode=MetadataMode.EMBED) for node in batch]
                vectors.extend(await self.aget_text_embeddings(texts))
        return vectors

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        result = list(nodes)

        for modality in self.supported_modalities:
            positions = [i for i, node in enumerate(result) if node.modality == modality]
            if not positions:
                continue

            vectors = await self._embed_modality(modality, [result[i] for i in positions])
            if len(vectors) != len(positions):
                raise ValueError(
                    f"{self.class_name()} returned {len(vectors)} embeddings "
                    f"for {len(positions)} nodes"
                )
            for i, vector in zip(positions, vectors):
                result[i] = result[i].model_copy(update={"embedding": list(vector)})

        return result
