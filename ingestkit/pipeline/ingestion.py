"""
================================================================================
FILE: ingestkit/pipeline/ingestion.py
================================================================================

PURPOSE:
    IngestionPipeline: the public entry point. Gathers input, runs the dedup
    strategy and transformation stages, and writes embedded nodes to the
    destination vector stores.

WORKFLOW:
    1. Resolve cache / dedup strategy (per-run override else instance)
    2. Gather input: explicit documents, explicit nodes, configured
       documents, then reader.load_data()
    3. run_transformations(...)
    4. Fan out nodes that carry an embedding (if vector stores are set)
    5. Return every transformed node

CONSTRUCTION RULES:
    - No docstore: the strategy is forced to NONE
    - A single vector_store becomes {TEXT: vector_store}
    - Caching is on by default; disable_cache=True turns it off
    - The strategy stage is built once, from kind + docstore + stores
================================================================================
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from ingestkit.config.constants import (
    CACHE_PERSIST_FILENAME,
    DEFAULT_NUM_WORKERS,
    DEFAULT_PERSIST_DIR,
    DOCSTORE_PERSIST_FILENAME,
)
from ingestkit.core.schema import BaseNode, Document, ModalityType
from ingestkit.core.transform import TransformComponent
from ingestkit.pipeline.cache import IngestionCache
from ingestkit.pipeline.runner import run_transformations
from ingestkit.pipeline.strategies import DocStoreStrategy, create_docstore_strategy
from ingestkit.pipeline.vector_stores import NodesAddedCallback, add_nodes_to_vector_stores
from ingestkit.providers.cache.memory import InMemoryCacheProvider
from ingestkit.providers.docstore.base import IDocumentStore
from ingestkit.providers.docstore.memory import SimpleDocumentStore
from ingestkit.providers.vectordb.base import IVectorStore
from ingestkit.readers.base import BaseReader
from ingestkit.utils.helpers import measure_time

if TYPE_CHECKING:
    from ingestkit.container.service_container import ServiceContainer

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    An ingestion pipeline that can be applied to data.

    Example:
        >>> pipeline = IngestionPipeline(
        >>>     transformations=[SlidingWindowSplitter(), MockEmbedding()],
        >>>     vector_store=SimpleVectorStore(),
        >>> )
        >>> nodes = await pipeline.run(documents=[Document(text="...")])
    """

    def __init__(
        self,
        transformations: Optional[Sequence[TransformComponent]] = None,
        documents: Optional[Sequence[Document]] = None,
        reader: Optional[BaseReader] = None,
        vector_store: Optional[IVectorStore] = None,
        vector_stores: Optional[Dict[ModalityType, IVectorStore]] = None,
        docstore: Optional[IDocumentStore] = None,
        docstore_strategy: Union[DocStoreStrategy, str] = DocStoreStrategy.UPSERTS,
        cache: Optional[IngestionCache] = None,
        disable_cache: bool = False,
        num_workers: int = DEFAULT_NUM_WORKERS,
        nodes_added: Optional[NodesAddedCallback] = None,
    ) -> None:
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")

        self.transformations: List[TransformComponent] = list(transformations or [])
        self.documents: Optional[List[Document]] = list(documents) if documents else None
        self.reader = reader
        self.docstore = docstore
        self.num_workers = num_workers
        self.nodes_added = nodes_added

        if vector_stores is None and vector_store is not None:
            vector_stores = {ModalityType.TEXT: vector_store}
        self.vector_stores: Optional[Dict[ModalityType, IVectorStore]] = vector_stores

        if docstore is None:
            docstore_strategy = DocStoreStrategy.NONE
        self.docstore_strategy = DocStoreStrategy(docstore_strategy)

        if disable_cache:
            self.cache: Optional[IngestionCache] = None
        else:
            self.cache = cache if cache is not None else IngestionCache()

        self._strategy_stage = self._build_strategy_stage()

    def _build_strategy_stage(self) -> TransformComponent:
        return create_docstore_strategy(
            self.docstore_strategy,
            docstore=self.docstore,
            vector_stores=self.vector_stores,
        )

    @property
    def strategy_stage(self) -> TransformComponent:
        return self._strategy_stage

    # ========================================================================
    # CONSTRUCTION FROM CONFIGURED PROVIDERS
    # ========================================================================

    @classmethod
    def from_container(
        cls,
        container: "ServiceContainer",
        transformations: Optional[Sequence[TransformComponent]] = None,
        **kwargs: Any,
    ) -> "IngestionPipeline":
        """Build a pipeline from an initialized ServiceContainer."""
        settings = container.settings
        cache = container.get_cache()

        params: Dict[str, Any] = {
            "transformations": transformations,
            "vector_stores": container.get_vector_stores(),
            "docstore": container.get_docstore(),
            "docstore_strategy": settings.docstore_strategy,
            "cache": cache,
            "disable_cache": cache is None,
            "num_workers": settings.num_workers,
        }
        if "vector_store" in kwargs:
            # an explicit single store replaces the container's modality map
            params.pop("vector_stores")
        params.update(kwargs)
        return cls(**params)

    # ========================================================================
    # RUN
    # ========================================================================

    async def prepare_input(
        self,
        documents: Optional[Sequence[Document]] = None,
        nodes: Optional[Sequence[BaseNode]] = None,
    ) -> List[BaseNode]:
        """Gather input in order: documents, nodes, configured documents, reader."""
        input_nodes: List[BaseNode] = []

        if documents is not None:
            input_nodes.extend(documents)
        if nodes is not None:
            input_nodes.extend(nodes)
        if self.documents is not None:
            input_nodes.extend(self.documents)
        if self.reader is not None:
            input_nodes.extend(await self.reader.load_data())

        return input_nodes

    async def run(
        self,
        documents: Optional[Sequence[Document]] = None,
        nodes: Optional[Sequence[BaseNode]] = None,
        *,
        cache: Optional[IngestionCache] = None,
        docstore_strategy: Optional[TransformComponent] = None,
        in_place: bool = True,
        num_workers: Optional[int] = None,
        transform_options: Optional[Dict[str, Any]] = None,
    ) -> List[BaseNode]:
        """
        Run the pipeline.

        Args:
            documents: Documents to ingest (placed first)
            nodes: Nodes to ingest (after documents)
            cache: Per-run cache override
            docstore_strategy: Per-run strategy stage override
            in_place: When False the gathered input list is copied first
            num_workers: Per-run worker override (> 1 enables parallel mode)
            transform_options: Extra keyword arguments for every stage

        Returns:
            Transformed nodes
        """
        run_cache = cache if cache is not None else self.cache
        strategy_stage = docstore_strategy if docstore_strategy is not None else self._strategy_stage
        workers = num_workers if num_workers is not None else self.num_workers

        with measure_time("Ingestion run"):
            input_nodes = await self.prepare_input(documents, nodes)
            logger.info(
                f"Running {len(self.transformations)} transformations on "
                f"{len(input_nodes)} input nodes (workers={workers}, "
                f"cache={'on' if run_cache is not None else 'off'}, "
                f"strategy={self.docstore_strategy.value})"
            )

            result = await run_transformations(
                input_nodes,
                self.transformations,
                transform_options,
                in_place=in_place,
                cache=run_cache,
                docstore_strategy=strategy_stage,
                num_workers=workers,
            )

            if self.vector_stores:
                nodes_with_embeddings = [n for n in result if n.embedding is not None]
                if nodes_with_embeddings:
                    await add_nodes_to_vector_stores(
                        nodes_with_embeddings,
                        self.vector_stores,
                        self.nodes_added,
                    )
                logger.info(f"Stored {len(nodes_with_embeddings)} embedded nodes")

        logger.info(f"✓ Ingestion produced {len(result)} nodes")
        return result

    # ========================================================================
    # PERSISTENCE
    # ========================================================================

    def persist(self, persist_dir: Union[str, Path] = DEFAULT_PERSIST_DIR) -> None:
        """Save the cache and the docstore to `persist_dir`."""
        persist_dir = Path(persist_dir)
        if self.cache is not None:
            self.cache.persist(persist_dir)
        if self.docstore is not None:
            self.docstore.persist(persist_dir / DOCSTORE_PERSIST_FILENAME)

    def load(self, persist_dir: Union[str, Path] = DEFAULT_PERSIST_DIR) -> None:
        """Restore the in-memory cache and docstore saved by persist()."""
        persist_dir = Path(persist_dir)

        cache_path = persist_dir / CACHE_PERSIST_FILENAME
        if (
            self.cache is not None
            and isinstance(self.cache.provider, InMemoryCacheProvider)
            and cache_path.exists()
        ):
            self.cache = IngestionCache.from_persist_dir(persist_dir, collection=self.cache.collection)

        docstore_path = persist_dir / DOCSTORE_PERSIST_FILENAME
        if isinstance(self.docstore, SimpleDocumentStore) and docstore_path.exists():
            self.docstore = SimpleDocumentStore.from_persist_path(docstore_path)
            self._strategy_stage = self._build_strategy_stage()

        logger.info(f"Loaded pipeline state from {persist_dir}")
