"""
FILE: ingestkit/providers/embeddings/huggingface.py

HuggingFace embedding stage using sentence-transformers.

Settings (see ingestkit.config.settings):
- EMBEDDINGS_MODEL=BAAI/bge-small-en-v1.5
- EMBEDDINGS_DEVICE=cpu
- EMBEDDINGS_BATCH_SIZE=32
- EMBEDDINGS_NORMALIZE=True
- EMBEDDINGS_DIMENSION=384

Install with the `huggingface` extra (pulls in torch).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from pydantic import PrivateAttr

from ingestkit.providers.embeddings.base import BaseEmbedding

logger = logging.getLogger(__name__)


class HuggingFaceEmbedding(BaseEmbedding):
    """
    SentenceTransformer-based embedding stage.

    Notes:
    - Uses asyncio.to_thread because model loading and encode are blocking.
    - The model is loaded lazily on first use if initialize() was not called.
    - Only text nodes are embedded.
    """

    model_name: str = "BAAI/bge-small-en-v1.5"
    device: str = "cpu"
    normalize: bool = True
    dimension: Optional[int] = None

    _model: Any = PrivateAttr(default=None)

    async def initialize(self) -> None:
        if self._model is not None:
            return

        from sentence_transformers import SentenceTransformer

        self._model = await asyncio.to_thread(
            SentenceTransformer,
            self.model_name,
            device=self.device,
        )

        model_dim = self._model.get_sentence_embedding_dimension()
        if self.dimension and model_dim and int(model_dim) != self.dimension:
            logger.warning(
                "Embeddings dimension mismatch: configured=%s model=%s",
                self.dimension,
                model_dim,
            )
        logger.info("✓ HuggingFaceEmbedding initialized: %s (%s)", self.model_name, self.device)

    async def aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        if self._model is None:
            await self.initialize()

        def _encode() -> List[List[float]]:
            vectors = self._model.encode(
                texts,
                batch_size=self.embed_batch_size,
                show_progress_bar=False,
                convert_to_numpy=True,
                normalize_embeddings=self.normalize,
            )
            return vectors.tolist()

        embeddings = await asyncio.to_thread(_encode)

        if self.dimension:
            for idx, vector in enumerate(embeddings):
                if len(vector) != self.dimension:
                    raise ValueError(
                        f"Embedding dimension mismatch at index={idx}: "
                        f"got={len(vector)} expected={self.dimension}"
                    )

        logger.debug("Generated %d embeddings", len(embeddings))
        return embeddings

    async def shutdown(self) -> None:
        if self._model is not None:
            self._model = None
            logger.info("✓ HuggingFaceEmbedding shutdown complete")
