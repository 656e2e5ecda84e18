"""
Core layer: node schema, stage contract and exceptions.

Kept import-light so providers and pipeline modules can depend on it
without cycles.
"""

from ingestkit.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    IngestionPipelineException,
    MissingVectorStoreError,
    ServiceInitializationError,
    UnknownStrategyError,
)
from ingestkit.core.schema import (
    BaseNode,
    Document,
    ImageDocument,
    ImageNode,
    MetadataMode,
    ModalityType,
    NodeRelationship,
    RelatedNodeInfo,
    TextNode,
    node_from_dict,
    node_to_dict,
    split_nodes_by_type,
)
from ingestkit.core.transform import TransformComponent

__all__ = [
    "BaseNode",
    "ConfigurationError",
    "Document",
    "DocumentNotFoundError",
    "ImageDocument",
    "ImageNode",
    "IngestionPipelineException",
    "MetadataMode",
    "MissingVectorStoreError",
    "ModalityType",
    "NodeRelationship",
    "RelatedNodeInfo",
    "ServiceInitializationError",
    "TextNode",
    "TransformComponent",
    "UnknownStrategyError",
    "node_from_dict",
    "node_to_dict",
    "split_nodes_by_type",
]
