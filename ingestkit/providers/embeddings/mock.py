"""
Deterministic mock embeddings (no model download).

Vectors are seeded from a sha256 of the content, so the same text always
maps to the same unit vector. Embeds both text and image nodes.
"""

from __future__ import annotations

import hashlib
from typing import ClassVar, FrozenSet, List

import numpy as np
from pydantic import Field

from ingestkit.config.constants import DEFAULT_EMBED_DIMENSION
from ingestkit.core.schema import ImageNode, ModalityType
from ingestkit.providers.embeddings.base import BaseEmbedding


class MockEmbedding(BaseEmbedding):
    supported_modalities: ClassVar[FrozenSet[ModalityType]] = frozenset(
        {ModalityType.TEXT, ModalityType.IMAGE}
    )

    model_name: str = "mock"
    embed_dim: int = Field(default=DEFAULT_EMBED_DIMENSION, gt=0)

    def _vector(self, content: str) -> List[float]:
        seed = int(hashlib.sha256(content.encode("utf-8")).hexdigest()[:8], 16)
        vector = np.random.RandomState(seed).standard_normal(self.embed_dim)
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.astype(float).tolist()

    async def aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        return [self._vector(text) for text in texts]

    async def aget_image_embeddings(self, images: List[ImageNode]) -> List[List[float]]:
        return [
            self._vector(image.image or image.image_path or image.image_url or image.text)
            for image in images
        ]
