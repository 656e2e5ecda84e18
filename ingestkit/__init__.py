"""
ingestkit - async document ingestion pipeline.

Nodes go through an optional docstore dedup pass, a list of cached
transformation stages, and are fanned out to vector stores by modality.
"""

__version__ = "0.1.0"

from ingestkit.core.schema import (
    BaseNode,
    Document,
    ImageDocument,
    ImageNode,
    MetadataMode,
    ModalityType,
    TextNode,
)
from ingestkit.core.transform import TransformComponent
from ingestkit.pipeline import (
    DocStoreStrategy,
    IngestionCache,
    IngestionPipeline,
    add_nodes_to_vector_stores,
    create_docstore_strategy,
    get_transformation_hash,
    run_transformations,
)

__all__ = [
    "BaseNode",
    "DocStoreStrategy",
    "Document",
    "ImageDocument",
    "ImageNode",
    "IngestionCache",
    "IngestionPipeline",
    "MetadataMode",
    "ModalityType",
    "TextNode",
    "TransformComponent",
    "__version__",
    "add_nodes_to_vector_stores",
    "create_docstore_strategy",
    "get_transformation_hash",
    "run_transformations",
]
