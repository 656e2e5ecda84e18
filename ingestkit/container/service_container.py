"""
================================================================================
SERVICE CONTAINER - PROVIDER SELECTION & INITIALIZATION
================================================================================

Dependency injection container for the pipeline's collaborators.

Settings choose the provider TYPE; each builder below applies that
provider's configuration from the same Settings object.

  CACHE_PROVIDER=memory|redis|none        -> IngestionCache (or None)
  (always)                                -> SimpleDocumentStore
  VECTOR_STORE_PROVIDER=memory|qdrant     -> SimpleVectorStore / QdrantVectorStore
                                             (one store per modality: TEXT, IMAGE)
  EMBEDDINGS_PROVIDER=mock|huggingface    -> MockEmbedding / HuggingFaceEmbedding

USAGE:

  container = ServiceContainer(settings, persist_dir="./storage")
  await container.initialize()
  pipeline = IngestionPipeline.from_container(container, transformations)
  ...
  container.persist()
  await container.shutdown()

When persist_dir is set, the in-memory cache, docstore and vector stores
are reloaded from it on initialize() (if files exist) and written back by
persist().
================================================================================
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ingestkit.config.constants import (
    CACHE_PERSIST_FILENAME,
    DOCSTORE_PERSIST_FILENAME,
    IMAGE_VECTOR_STORE_PERSIST_FILENAME,
    VECTOR_STORE_PERSIST_FILENAME,
)
from ingestkit.config.settings import Settings
from ingestkit.core.exceptions import ServiceInitializationError
from ingestkit.core.schema import ModalityType
from ingestkit.pipeline.cache import IngestionCache
from ingestkit.providers.cache.base import ICacheProvider
from ingestkit.providers.cache.memory import InMemoryCacheProvider
from ingestkit.providers.cache.redis import RedisCacheProvider
from ingestkit.providers.docstore.memory import SimpleDocumentStore
from ingestkit.providers.embeddings.base import BaseEmbedding
from ingestkit.providers.embeddings.mock import MockEmbedding
from ingestkit.providers.vectordb.base import IVectorStore
from ingestkit.providers.vectordb.memory import SimpleVectorStore
from ingestkit.providers.vectordb.qdrant import QdrantConfig, QdrantVectorStore

logger = logging.getLogger(__name__)

_VECTOR_STORE_FILENAMES = {
    ModalityType.TEXT: VECTOR_STORE_PERSIST_FILENAME,
    ModalityType.IMAGE: IMAGE_VECTOR_STORE_PERSIST_FILENAME,
}


class ServiceContainer:
    """
    Dependency injection container for all pipeline providers.
    """

    def __init__(
        self,
        settings: Settings,
        persist_dir: Optional[Union[str, Path]] = None,
        cache_provider: Optional[ICacheProvider] = None,
    ) -> None:
        """
        Initialize container with settings.

        Args:
            settings: Configuration object (from .env)
            persist_dir: Directory for in-memory store persistence (optional)
            cache_provider: Optional pre-built cache provider (e.g. a Redis
                            provider with a shared client)
        """
        self.settings = settings
        self.persist_dir = Path(persist_dir) if persist_dir is not None else None

        self._cache_provider: Optional[ICacheProvider] = cache_provider
        self._cache: Optional[IngestionCache] = None
        self._docstore: Optional[SimpleDocumentStore] = None
        self._vector_stores: Dict[ModalityType, IVectorStore] = {}
        self._embeddings: Optional[BaseEmbedding] = None
        self.initialized = False

        logger.info("ServiceContainer instantiated")

    async def initialize(self) -> None:
        """Build and initialize every provider."""
        logger.info("=" * 80)
        logger.info("INITIALIZING SERVICE CONTAINER")
        logger.info("=" * 80)

        self._cache = await self._load_provider(
            "cache", self.settings.cache_provider, self._build_cache
        )
        self._docstore = await self._load_provider("docstore", "memory", self._build_docstore)
        self._vector_stores = await self._load_provider(
            "vectordb", self.settings.vector_store_provider, self._build_vector_stores
        )
        self._embeddings = await self._load_provider(
            "embeddings", self.settings.embeddings_provider, self._build_embeddings
        )

        self.initialized = True
        logger.info("=" * 80)
        logger.info("✓ ServiceContainer initialized successfully")
        logger.info("=" * 80)

    async def _load_provider(
        self,
        provider_type: str,
        provider_name: str,
        builder: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run one provider builder, normalizing failures."""
        logger.info(f"Loading {provider_type} provider: {provider_name}")
        try:
            provider = await builder()
        except ServiceInitializationError:
            raise
        except Exception as e:
            logger.error(
                f"Failed to initialize {provider_type} provider '{provider_name}': {e}",
                exc_info=True,
            )
            raise ServiceInitializationError(
                f"Failed to initialize {provider_type} provider '{provider_name}': {e}",
                context={"provider_type": provider_type, "provider_name": provider_name},
            ) from e

        logger.info(f"✓ {provider_type.upper()} initialized: {provider_name}")
        return provider

    # ========================================================================
    # BUILDERS
    # ========================================================================

    async def _build_cache(self) -> Optional[IngestionCache]:
        name = self.settings.cache_provider
        if name == "none":
            return None

        if self._cache_provider is None:
            if name == "redis":
                self._cache_provider = RedisCacheProvider(
                    redis_url=self.settings.redis_url,
                    default_ttl=self.settings.cache_ttl,
                )
            else:
                path = self.persist_dir / CACHE_PERSIST_FILENAME if self.persist_dir else None
                if path is not None and path.exists():
                    self._cache_provider = InMemoryCacheProvider.from_persist_path(path)
                else:
                    self._cache_provider = InMemoryCacheProvider()

        await self._cache_provider.initialize()
        return IngestionCache(
            provider=self._cache_provider,
            collection=self.settings.cache_collection,
            ttl=self.settings.cache_ttl,
        )

    async def _build_docstore(self) -> SimpleDocumentStore:
        path = self.persist_dir / DOCSTORE_PERSIST_FILENAME if self.persist_dir else None
        if path is not None and path.exists():
            return SimpleDocumentStore.from_persist_path(path)
        return SimpleDocumentStore()

    async def _build_vector_stores(self) -> Dict[ModalityType, IVectorStore]:
        collections = {
            ModalityType.TEXT: self.settings.qdrant_collection,
            ModalityType.IMAGE: self.settings.qdrant_image_collection,
        }
        stores: Dict[ModalityType, IVectorStore] = {}

        for modality, collection in collections.items():
            if self.settings.vector_store_provider == "qdrant":
                store = QdrantVectorStore(
                    QdrantConfig(
                        url=self.settings.qdrant_url,
                        api_key=self.settings.qdrant_api_key,
                        collection=collection,
                        timeout_s=self.settings.qdrant_timeout,
                    )
                )
                await store.initialize()
                stores[modality] = store
                continue

            path = self._vector_store_path(modality)
            if path is not None and path.exists():
                stores[modality] = SimpleVectorStore.from_persist_path(path)
            else:
                stores[modality] = SimpleVectorStore()

        return stores

    def _vector_store_path(self, modality: ModalityType) -> Optional[Path]:
        if self.persist_dir is None:
            return None
        return self.persist_dir / _VECTOR_STORE_FILENAMES[modality]

    async def _build_embeddings(self) -> BaseEmbedding:
        if self.settings.embeddings_provider == "huggingface":
            from ingestkit.providers.embeddings.huggingface import HuggingFaceEmbedding

            embeddings: BaseEmbedding = HuggingFaceEmbedding(
                model_name=self.settings.embeddings_model,
                device=self.settings.embeddings_device,
                normalize=self.settings.embeddings_normalize,
                dimension=self.settings.embeddings_dimension,
                embed_batch_size=self.settings.embeddings_batch_size,
            )
        else:
            embeddings = MockEmbedding(
                embed_dim=self.settings.embeddings_dimension,
                embed_batch_size=self.settings.embeddings_batch_size,
            )

        await embeddings.initialize()
        return embeddings

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def persist(self) -> None:
        """Write the cache, docstore and vector stores to persist_dir."""
        if self.persist_dir is None:
            return
        if self._cache is not None:
            self._cache.persist(self.persist_dir)
        if self._docstore is not None:
            self._docstore.persist(self.persist_dir / DOCSTORE_PERSIST_FILENAME)
        for modality, store in self._vector_stores.items():
            store.persist(self._vector_store_path(modality))

    async def shutdown(self) -> None:
        """Shutdown all providers."""
        logger.info("Shutting down ServiceContainer...")

        providers: List[Tuple[str, Any]] = [("Embeddings", self._embeddings)]
        for modality, store in self._vector_stores.items():
            providers.append((f"VectorDB[{modality.value}]", store))
        providers.append(("Cache", self._cache_provider))

        for name, provider in providers:
            if provider is None:
                continue
            try:
                await provider.shutdown()
                logger.info(f"✓ {name} shutdown complete")
            except Exception as e:
                logger.error(f"Error shutting down {name}: {e}")

        self.initialized = False
        logger.info("✓ ServiceContainer shutdown complete")

    # ========================================================================
    # ACCESSOR METHODS
    # ========================================================================

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise RuntimeError("ServiceContainer not initialized")

    def get_cache(self) -> Optional[IngestionCache]:
        """Get the result cache (None when CACHE_PROVIDER=none)."""
        self._require_initialized()
        return self._cache

    def get_docstore(self) -> SimpleDocumentStore:
        """Get the document store."""
        self._require_initialized()
        return self._docstore

    def get_vector_store(self, modality: ModalityType = ModalityType.TEXT) -> IVectorStore:
        """Get the vector store for one modality (TEXT by default)."""
        self._require_initialized()
        return self._vector_stores[modality]

    def get_vector_stores(self) -> Dict[ModalityType, IVectorStore]:
        """Get the modality -> vector store map used for fan-out."""
        self._require_initialized()
        return dict(self._vector_stores)

    def get_embeddings(self) -> BaseEmbedding:
        """Get the embedding stage."""
        self._require_initialized()
        return self._embeddings
