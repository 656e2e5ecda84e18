"""
FILE: ingestkit/providers/docstore/base.py

Document (tracking) store interface (contract).

The dedup strategies use it to remember which node ids / content hashes
have already been ingested.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ingestkit.core.schema import BaseNode


class IDocumentStore(ABC):
    """Abstract base class for document stores."""

    @abstractmethod
    async def add_documents(
        self,
        nodes: Sequence[BaseNode],
        allow_update: bool = True,
    ) -> None:
        """Store nodes and record their content hashes."""
        raise NotImplementedError

    @abstractmethod
    async def get_document(
        self,
        doc_id: str,
        raise_error: bool = True,
    ) -> Optional[BaseNode]:
        raise NotImplementedError

    @abstractmethod
    async def delete_document(self, doc_id: str, raise_error: bool = True) -> None:
        raise NotImplementedError

    @abstractmethod
    async def document_exists(self, doc_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def set_document_hash(self, doc_id: str, doc_hash: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_document_hash(self, doc_id: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    async def get_all_document_hashes(self) -> Dict[str, str]:
        """Return a {hash: doc_id} mapping of every tracked id."""
        raise NotImplementedError

    @abstractmethod
    async def get_all_document_ids(self) -> List[str]:
        """Return every id that has a recorded hash, one entry per id."""
        raise NotImplementedError

    @abstractmethod
    async def delete_ref_doc(self, ref_doc_id: str, raise_error: bool = True) -> None:
        """Forget a source document and every node derived from it."""
        raise NotImplementedError

    def persist(self, persist_path: Union[str, Path]) -> None:
        """Write store contents to disk (no-op for remote stores)."""
        return None
