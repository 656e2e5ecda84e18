"""Pipeline layer: fingerprinting, caching, dedup, runner, fan-out, façade."""

from ingestkit.pipeline.cache import IngestionCache, get_transformation_hash
from ingestkit.pipeline.ingestion import IngestionPipeline
from ingestkit.pipeline.runner import run_transformations
from ingestkit.pipeline.strategies import (
    DocStoreStrategy,
    DuplicatesStrategy,
    NoOpDocStoreStrategy,
    UpsertsAndDeleteStrategy,
    UpsertsStrategy,
    create_docstore_strategy,
)
from ingestkit.pipeline.vector_stores import add_nodes_to_vector_stores

__all__ = [
    "DocStoreStrategy",
    "DuplicatesStrategy",
    "IngestionCache",
    "IngestionPipeline",
    "NoOpDocStoreStrategy",
    "UpsertsAndDeleteStrategy",
    "UpsertsStrategy",
    "add_nodes_to_vector_stores",
    "create_docstore_strategy",
    "get_transformation_hash",
    "run_transformations",
]
