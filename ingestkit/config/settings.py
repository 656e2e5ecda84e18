"""
================================================================================
FILE: ingestkit/config/settings.py
================================================================================

PURPOSE:
    Application settings loaded from environment variables (and an optional
    .env file). Uses Pydantic BaseSettings for validation and type hints.

WORKFLOW:
    1. get_settings() builds Settings once (cached)
    2. Values come from env vars / .env, falling back to defaults
    3. ServiceContainer and CLI read providers and pipeline knobs from here

CONFIGURATION CATEGORIES:
    1. Logging: LOG_LEVEL, LOG_FORMAT
    2. Pipeline: INGEST_NUM_WORKERS, DOCSTORE_STRATEGY, PERSIST_DIR
    3. Cache: CACHE_PROVIDER, CACHE_COLLECTION, CACHE_TTL, REDIS_URL
    4. Vector store: VECTOR_STORE_PROVIDER, QDRANT_* (TEXT and IMAGE collections)
    5. Embeddings: EMBEDDINGS_*
    6. Chunking: CHUNK_SIZE, CHUNK_OVERLAP

TESTING ENVIRONMENT:
    - Override settings in tests: Settings(INGEST_NUM_WORKERS=4)
    - Call get_settings.cache_clear() after monkeypatching env vars
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ingestkit.config import constants


class Settings(BaseSettings):
    """
    Settings for the ingestion pipeline.

    All fields have aliases matching their environment variable names.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )

    log_format: Literal["json", "text"] = Field(
        default="text",
        alias="LOG_FORMAT",
        description="Logging format: json or text",
    )

    # ========================================================================
    # PIPELINE
    # ========================================================================

    num_workers: int = Field(
        default=constants.DEFAULT_NUM_WORKERS,
        ge=1,
        le=256,
        alias="INGEST_NUM_WORKERS",
        description="Concurrency width; >1 runs stages in parallel on the same input",
    )

    docstore_strategy: Literal["none", "duplicates_only", "upserts", "upserts_and_delete"] = Field(
        default="upserts",
        alias="DOCSTORE_STRATEGY",
        description="Dedup strategy applied before the transformations",
    )

    persist_dir: str = Field(
        default=constants.DEFAULT_PERSIST_DIR,
        alias="PERSIST_DIR",
        description="Directory for persisted cache / docstore / vector store",
    )

    # ========================================================================
    # CACHE
    # ========================================================================

    cache_provider: Literal["memory", "redis", "none"] = Field(
        default="memory",
        alias="CACHE_PROVIDER",
        description="Cache backend: memory | redis | none (disables caching)",
    )

    cache_collection: str = Field(
        default=constants.DEFAULT_CACHE_COLLECTION,
        alias="CACHE_COLLECTION",
        description="Namespace for transformation cache keys",
    )

    cache_ttl: Optional[int] = Field(
        default=None,
        ge=1,
        alias="CACHE_TTL",
        description="TTL (seconds) for cache entries; unset = no expiry",
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        alias="REDIS_URL",
        description="Redis connection URL",
    )

    # ========================================================================
    # VECTOR STORE
    # ========================================================================

    vector_store_provider: Literal["memory", "qdrant"] = Field(
        default="memory",
        alias="VECTOR_STORE_PROVIDER",
        description="Vector store backend for TEXT and IMAGE nodes: memory | qdrant",
    )

    qdrant_url: str = Field(
        default="http://localhost:6333",
        alias="QDRANT_URL",
        description="Qdrant URL (':memory:' for local in-process mode)",
    )

    qdrant_api_key: Optional[str] = Field(
        default=None,
        alias="QDRANT_API_KEY",
        description="Qdrant API key (optional)",
    )

    qdrant_collection: str = Field(
        default="documents",
        alias="QDRANT_COLLECTION",
        description="Qdrant collection name",
    )

    qdrant_image_collection: str = Field(
        default="images",
        alias="QDRANT_IMAGE_COLLECTION",
        description="Qdrant collection for IMAGE nodes",
    )

    qdrant_timeout: int = Field(
        default=5,
        ge=1,
        le=120,
        alias="QDRANT_TIMEOUT",
        description="Qdrant request timeout (seconds)",
    )

    # ========================================================================
    # EMBEDDINGS
    # ========================================================================

    embeddings_provider: Literal["mock", "huggingface"] = Field(
        default="mock",
        alias="EMBEDDINGS_PROVIDER",
        description="Embedding stage: mock | huggingface",
    )

    embeddings_model: str = Field(
        default="BAAI/bge-small-en-v1.5",
        alias="EMBEDDINGS_MODEL",
        description="Embeddings model (HF repo id)",
    )

    embeddings_dimension: int = Field(
        default=constants.DEFAULT_EMBED_DIMENSION,
        ge=1,
        le=8192,
        alias="EMBEDDINGS_DIMENSION",
        description="Embedding vector dimension",
    )

    embeddings_batch_size: int = Field(
        default=constants.DEFAULT_EMBED_BATCH_SIZE,
        ge=1,
        le=1000,
        alias="EMBEDDINGS_BATCH_SIZE",
        description="Batch size for embeddings",
    )

    embeddings_device: str = Field(
        default="cpu",
        alias="EMBEDDINGS_DEVICE",
        description="Device for sentence-transformers",
    )

    embeddings_normalize: bool = Field(
        default=True,
        alias="EMBEDDINGS_NORMALIZE",
        description="L2-normalize embeddings",
    )

    # ========================================================================
    # CHUNKING
    # ========================================================================

    chunk_size: int = Field(
        default=constants.DEFAULT_CHUNK_SIZE,
        ge=1,
        alias="CHUNK_SIZE",
        description="Characters per chunk",
    )

    chunk_overlap: int = Field(
        default=constants.DEFAULT_CHUNK_OVERLAP,
        ge=0,
        alias="CHUNK_OVERLAP",
        description="Characters shared by consecutive chunks",
    )

    # ========================================================================
    # VALIDATORS
    # ========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("cache_collection", "qdrant_collection", "qdrant_image_collection")
    @classmethod
    def _validate_names(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Collection name must be non-empty string")
        return v

    @field_validator("chunk_overlap")
    @classmethod
    def _validate_overlap(cls, v: int, info) -> int:
        chunk_size = info.data.get("chunk_size")
        if chunk_size is not None and v >= chunk_size:
            raise ValueError("CHUNK_OVERLAP must be smaller than CHUNK_SIZE")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
