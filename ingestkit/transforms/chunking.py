"""
================================================================================
SLIDING WINDOW SPLITTER
ingestkit/transforms/chunking.py

MODULE PURPOSE:
───────────────
Fixed-size, character-based sliding window splitting of text nodes into
TextNode chunks.

WORKING & METHODOLOGY:
──────────────────────
   - stride = chunk_size - chunk_overlap
   - Slide the window across the text; the last window may be shorter
   - Each chunk inherits the parent's metadata (+ chunk_index, start/end
     char offsets) and a SOURCE relationship to the parent, so
     chunk.ref_doc_id is the parent's id
   - Chunk ids are derived from the parent id and chunk index, so
     re-splitting the same document yields the same ids
   - Image nodes pass through unchanged
================================================================================
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, List, Sequence, Tuple

from pydantic import Field, model_validator

from ingestkit.config.constants import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE
from ingestkit.core.schema import BaseNode, ModalityType, NodeRelationship, TextNode
from ingestkit.core.transform import TransformComponent

logger = logging.getLogger(__name__)

_CHUNK_NAMESPACE = uuid.UUID("2b0f9a0e-4a57-4c59-8f3e-1d6f6c2e9b41")


class SlidingWindowSplitter(TransformComponent):
    """
    Fixed-size sliding window splitter.

    Example:
        >>> splitter = SlidingWindowSplitter(chunk_size=512, chunk_overlap=50)
        >>> chunks = await splitter.acall(documents)
    """

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    chunk_overlap: int = Field(default=DEFAULT_CHUNK_OVERLAP, ge=0)
    include_metadata: bool = True

    @model_validator(mode="after")
    def _check_overlap(self) -> "SlidingWindowSplitter":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self

    @property
    def stride(self) -> int:
        return self.chunk_size - self.chunk_overlap

    def split_text(self, text: str) -> List[Tuple[int, int, str]]:
        """Return (start, end, chunk_text) windows."""
        windows = []
        for start in range(0, len(text), self.stride):
            end = min(start + self.chunk_size, len(text))
            windows.append((start, end, text[start:end]))
            if end == len(text):
                break
        return windows

    def _split_node(self, node: BaseNode) -> List[BaseNode]:
        source = node.as_related_node_info()
        chunks: List[BaseNode] = []

        for index, (start, end, chunk_text) in enumerate(self.split_text(node.text)):
            metadata = dict(node.metadata) if self.include_metadata else {}
            metadata.update({"chunk_index": index, "start_char_idx": start, "end_char_idx": end})
            chunks.append(
                TextNode(
                    id_=str(uuid.uuid5(_CHUNK_NAMESPACE, f"{node.node_id}:{index}")),
                    text=chunk_text,
                    metadata=metadata,
                    excluded_embed_metadata_keys=list(node.excluded_embed_metadata_keys),
                    excluded_llm_metadata_keys=list(node.excluded_llm_metadata_keys),
                    relationships={NodeRelationship.SOURCE: source},
                )
            )
        return chunks

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        result: List[BaseNode] = []
        for node in nodes:
            if node.modality != ModalityType.TEXT:
                result.append(node)
                continue
            result.extend(self._split_node(node))

        logger.info(f"Split {len(nodes)} nodes into {len(result)} nodes (window={self.chunk_size}, stride={self.stride})")
        return result
