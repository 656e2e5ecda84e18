"""
================================================================================
FILE: ingestkit/core/schema.py
================================================================================

PURPOSE:
    Pydantic node models that flow through the ingestion pipeline. A node is
    a unit of content (text or image) with an identity, metadata, optional
    relationships to other nodes and an optional computed embedding.

WORKFLOW:
    1. Readers and callers create Documents / ImageDocuments
    2. Transformation stages derive TextNodes / ImageNodes from them
    3. Embedding stages fill node.embedding
    4. Fan-out routes nodes to vector stores by node.modality

KEY FACTS:
    - Every node class carries a class-level modality tag (TEXT or IMAGE)
    - node.hash identifies content (text + metadata, plus image payload)
    - node_to_dict / node_from_dict round-trip through JSON-safe dicts and
      are used by the result cache and the document store
    - ref_doc_id is the id of the SOURCE relationship (the parent document)
"""

from __future__ import annotations

import hashlib
import uuid
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, Field

# ================================================================================
# ENUMERATIONS
# ================================================================================


class ModalityType(str, Enum):
    """Closed set of modality tags used to route nodes to vector stores."""

    TEXT = "TEXT"
    IMAGE = "IMAGE"


class MetadataMode(str, Enum):
    """Which metadata keys to render with the node content."""

    ALL = "all"
    EMBED = "embed"
    LLM = "llm"
    NONE = "none"


class NodeRelationship(str, Enum):
    """Relationship of a node to another node."""

    SOURCE = "1"
    PREVIOUS = "2"
    NEXT = "3"
    PARENT = "4"
    CHILD = "5"


class RelatedNodeInfo(BaseModel):
    """Lightweight pointer to another node."""

    node_id: str
    class_name: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    hash: Optional[str] = None


# ================================================================================
# NODE MODELS
# ================================================================================


class BaseNode(BaseModel):
    """
    Base content unit.

    Attributes:
        id_: Unique node identifier (uuid4 unless given)
        embedding: Computed embedding vector (None until an embedding stage runs)
        metadata: Free-form metadata, rendered with the content
        excluded_embed_metadata_keys: Metadata keys hidden in EMBED mode
        excluded_llm_metadata_keys: Metadata keys hidden in LLM mode
        relationships: Pointers to related nodes
        text: Text content
    """

    modality: ClassVar[ModalityType] = ModalityType.TEXT

    id_: str = Field(default_factory=lambda: str(uuid.uuid4()))
    embedding: Optional[List[float]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    excluded_embed_metadata_keys: List[str] = Field(default_factory=list)
    excluded_llm_metadata_keys: List[str] = Field(default_factory=list)
    relationships: Dict[NodeRelationship, RelatedNodeInfo] = Field(default_factory=dict)
    text: str = ""

    @classmethod
    def class_name(cls) -> str:
        return cls.__name__

    @property
    def node_id(self) -> str:
        return self.id_

    @property
    def ref_doc_id(self) -> Optional[str]:
        """Id of the source document this node was derived from, if any."""
        source = self.relationships.get(NodeRelationship.SOURCE)
        return source.node_id if source is not None else None

    @property
    def source_node(self) -> Optional[RelatedNodeInfo]:
        return self.relationships.get(NodeRelationship.SOURCE)

    def get_metadata_str(self, mode: MetadataMode = MetadataMode.ALL) -> str:
        """Render metadata as "key: value" lines, honouring excluded keys."""
        if mode == MetadataMode.NONE:
            return ""

        usable_keys = set(self.metadata.keys())
        if mode == MetadataMode.EMBED:
            usable_keys -= set(self.excluded_embed_metadata_keys)
        elif mode == MetadataMode.LLM:
            usable_keys -= set(self.excluded_llm_metadata_keys)

        return "\n".join(
            f"{key}: {value}"
            for key, value in self.metadata.items()
            if key in usable_keys
        )

    def get_content(self, metadata_mode: MetadataMode = MetadataMode.NONE) -> str:
        """Return the text content, prefixed with rendered metadata."""
        metadata_str = self.get_metadata_str(metadata_mode).strip()
        if not metadata_str:
            return self.text
        return f"{metadata_str}\n\n{self.text}".strip()

    def _identity_parts(self) -> List[str]:
        return [self.text, str(sorted(self.metadata.items(), key=lambda kv: kv[0]))]

    @property
    def hash(self) -> str:
        """sha256 of the node's content identity."""
        doc_identity = "".join(self._identity_parts())
        return hashlib.sha256(doc_identity.encode("utf-8", "surrogatepass")).hexdigest()

    def as_related_node_info(self) -> RelatedNodeInfo:
        return RelatedNodeInfo(
            node_id=self.id_,
            class_name=self.class_name(),
            metadata=dict(self.metadata),
            hash=self.hash,
        )


class TextNode(BaseNode):
    """A chunk of text."""

    modality: ClassVar[ModalityType] = ModalityType.TEXT


class ImageNode(TextNode):
    """
    An image, optionally with a text caption in `text`.

    The image payload is carried as base64 (`image`) or referenced by
    `image_path` / `image_url`.
    """

    modality: ClassVar[ModalityType] = ModalityType.IMAGE

    image: Optional[str] = None
    image_path: Optional[str] = None
    image_url: Optional[str] = None
    image_mimetype: Optional[str] = None

    def _identity_parts(self) -> List[str]:
        payload = self.image or self.image_path or self.image_url or ""
        return super()._identity_parts() + [payload]


class Document(TextNode):
    """A whole source document (text modality)."""


class ImageDocument(ImageNode):
    """A whole source image (image modality)."""


# ================================================================================
# HELPERS
# ================================================================================

_NODE_CLASSES: Dict[str, Type[BaseNode]] = {
    cls.class_name(): cls
    for cls in (BaseNode, TextNode, ImageNode, Document, ImageDocument)
}


def node_to_dict(node: BaseNode) -> Dict[str, Any]:
    """Serialize a node to a JSON-safe dict tagged with its class name."""
    data = node.model_dump(mode="json")
    data["class_name"] = node.class_name()
    return data


def node_from_dict(data: Dict[str, Any]) -> BaseNode:
    """Rebuild a node from node_to_dict output."""
    payload = dict(data)
    class_name = payload.pop("class_name", TextNode.class_name())
    node_cls = _NODE_CLASSES.get(class_name)
    if node_cls is None:
        raise ValueError(f"Unknown node class: {class_name}")
    return node_cls.model_validate(payload)


def split_nodes_by_type(nodes: Sequence[BaseNode]) -> Dict[ModalityType, List[BaseNode]]:
    """Partition nodes by modality, in order of first appearance."""
    result: Dict[ModalityType, List[BaseNode]] = {}
    for node in nodes:
        result.setdefault(node.modality, []).append(node)
    return result
