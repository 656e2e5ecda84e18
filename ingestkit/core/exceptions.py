"""
================================================================================
FILE: ingestkit/core/exceptions.py
================================================================================

PURPOSE:
    Custom exception hierarchy for the ingestion pipeline.

KEY FACTS:
    - NO imports from ingestkit modules (prevents circular dependencies)
    - All exceptions inherit from IngestionPipelineException
    - Each exception has an error_code for categorization
    - Only configuration problems are raised by the core itself. Failures of
      readers, stages, stores and cache providers propagate unchanged; the
      pipeline never wraps or retries them.
"""

from typing import Any, Dict, Optional

# ================================================================================
# SECTION 1: BASE EXCEPTION
# ================================================================================


class IngestionPipelineException(Exception):
    """
    Root exception for all ingestion pipeline errors.

    Attributes:
        message (str): Human-readable error message
        error_code (str): Machine-readable error code for categorization
        context (dict): Additional context (optional)
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dict for structured logging"""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# ================================================================================
# SECTION 2: CONFIGURATION EXCEPTIONS
# ================================================================================


class ConfigurationError(IngestionPipelineException):
    """Invalid pipeline configuration (fatal)"""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        context: Optional[Dict] = None,
    ):
        super().__init__(message, error_code=error_code, context=context)


class MissingVectorStoreError(ConfigurationError):
    """Nodes of a modality have no destination vector store"""

    def __init__(self, modality: Any, context: Optional[Dict] = None):
        self.modality = getattr(modality, "value", modality)
        super().__init__(
            f"Cannot insert nodes of type {self.modality} without assigned vector store",
            error_code="MISSING_VECTOR_STORE",
            context={"modality": self.modality, **(context or {})},
        )


class UnknownStrategyError(ConfigurationError):
    """Requested docstore strategy is not one of the known kinds"""

    def __init__(self, strategy: Any, context: Optional[Dict] = None):
        self.strategy = strategy
        super().__init__(
            f"Invalid docstore strategy: {strategy!r}",
            error_code="UNKNOWN_STRATEGY",
            context={"strategy": str(strategy), **(context or {})},
        )


# ================================================================================
# SECTION 3: STORAGE & SERVICE EXCEPTIONS
# ================================================================================


class DocumentNotFoundError(IngestionPipelineException):
    """Document id is not present in the document store"""

    def __init__(self, doc_id: str, context: Optional[Dict] = None):
        self.doc_id = doc_id
        super().__init__(
            f"Document {doc_id!r} not found in document store",
            error_code="DOCUMENT_NOT_FOUND",
            context={"doc_id": doc_id, **(context or {})},
        )


class ServiceInitializationError(IngestionPipelineException):
    """Raised when a service/provider fails to initialize (fatal)."""

    def __init__(self, message: str, context: Optional[Dict] = None):
        super().__init__(message, error_code="SERVICE_INIT_ERROR", context=context)
