"""
================================================================================
FILE: ingestkit/pipeline/strategies.py
================================================================================

PURPOSE:
    Deduplication pre-pass. Decides which input nodes flow through the
    transformation stages, using a document (tracking) store, and keeps the
    tracking store and destination stores consistent with the input.

STRATEGIES:
    none                pass through, tracking store untouched
    duplicates_only     drop nodes whose content hash is already tracked
                        (or repeated earlier in the batch)
    upserts             key by ref_doc_id or id; new -> keep, changed ->
                        purge old entries + vectors and keep, unchanged -> drop
    upserts_and_delete  upserts, plus purge identities absent from the input

KEY FACTS:
    - Strategies are TransformComponents so the runner can call them like
      any stage, but they run once, first, and are never cached
    - A docstore is required for every variant except none
================================================================================
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

from pydantic import Field

from ingestkit.core.exceptions import UnknownStrategyError
from ingestkit.core.schema import BaseNode, ModalityType
from ingestkit.core.transform import TransformComponent
from ingestkit.providers.docstore.base import IDocumentStore
from ingestkit.providers.vectordb.base import IVectorStore

logger = logging.getLogger(__name__)


class DocStoreStrategy(str, Enum):
    """Document de-duplication strategy."""

    NONE = "none"
    DUPLICATES_ONLY = "duplicates_only"
    UPSERTS = "upserts"
    UPSERTS_AND_DELETE = "upserts_and_delete"


# ================================================================================
# STRATEGY STAGES
# ================================================================================


class NoOpDocStoreStrategy(TransformComponent):
    """Pass nodes through unchanged."""

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        return list(nodes)


class DuplicatesStrategy(TransformComponent):
    """Skip nodes whose content hash has been seen before."""

    docstore: IDocumentStore

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        existing_hashes = await self.docstore.get_all_document_hashes()
        current_hashes: Set[str] = set()
        nodes_to_run: List[BaseNode] = []

        for node in nodes:
            node_hash = node.hash
            if node_hash in existing_hashes or node_hash in current_hashes:
                continue
            await self.docstore.set_document_hash(node.node_id, node_hash)
            nodes_to_run.append(node)
            current_hashes.add(node_hash)

        await self.docstore.add_documents(nodes_to_run)

        logger.debug(f"Duplicates strategy kept {len(nodes_to_run)}/{len(nodes)} nodes")
        return nodes_to_run


class UpsertsStrategy(TransformComponent):
    """Insert new, replace changed, skip unchanged."""

    docstore: IDocumentStore
    vector_stores: Dict[ModalityType, IVectorStore] = Field(default_factory=dict)

    async def _purge(self, ref_doc_id: str) -> None:
        await self.docstore.delete_ref_doc(ref_doc_id, raise_error=False)
        for vector_store in self.vector_stores.values():
            await vector_store.delete(ref_doc_id)

    async def classify_nodes(
        self, nodes: Sequence[BaseNode]
    ) -> Tuple[List[BaseNode], Set[str], Set[str]]:
        """
        Split input into (nodes_to_run, changed_ref_doc_ids, missing_ref_doc_ids).

        changed: identities tracked with a different hash
        missing: tracked identities not present in the input
        """
        existing_ids = set(await self.docstore.get_all_document_ids())
        seen_ids: Set[str] = set()
        changed: Set[str] = set()
        nodes_to_run: List[BaseNode] = []

        for node in nodes:
            ref_doc_id = node.ref_doc_id or node.node_id
            seen_ids.add(ref_doc_id)

            existing_hash = await self.docstore.get_document_hash(ref_doc_id)
            if existing_hash is None:
                await self.docstore.set_document_hash(ref_doc_id, node.hash)
                nodes_to_run.append(node)
            elif existing_hash != node.hash:
                changed.add(ref_doc_id)
                await self._purge(ref_doc_id)
                await self.docstore.set_document_hash(ref_doc_id, node.hash)
                nodes_to_run.append(node)

        return nodes_to_run, changed, existing_ids - seen_ids

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        nodes_to_run, changed, _ = await self.classify_nodes(nodes)
        await self.docstore.add_documents(nodes_to_run)

        logger.debug(
            f"Upserts strategy kept {len(nodes_to_run)}/{len(nodes)} nodes "
            f"({len(changed)} changed)"
        )
        return nodes_to_run


class UpsertsAndDeleteStrategy(UpsertsStrategy):
    """Upserts, and delete documents that no longer appear in the input."""

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        nodes_to_run, changed, missing = await self.classify_nodes(nodes)

        for ref_doc_id in sorted(missing):
            await self._purge(ref_doc_id)

        await self.docstore.add_documents(nodes_to_run)

        logger.debug(
            f"Upserts-and-delete strategy kept {len(nodes_to_run)}/{len(nodes)} nodes "
            f"({len(changed)} changed, {len(missing)} deleted)"
        )
        return nodes_to_run


# ================================================================================
# FACTORY
# ================================================================================


def create_docstore_strategy(
    strategy: Union[DocStoreStrategy, str],
    docstore: Optional[IDocumentStore] = None,
    vector_stores: Optional[Dict[ModalityType, IVectorStore]] = None,
) -> TransformComponent:
    """Build the strategy stage for `strategy`; no docstore means no-op."""
    try:
        kind = DocStoreStrategy(strategy)
    except ValueError:
        raise UnknownStrategyError(strategy) from None

    if docstore is None or kind == DocStoreStrategy.NONE:
        return NoOpDocStoreStrategy()

    if kind == DocStoreStrategy.DUPLICATES_ONLY:
        return DuplicatesStrategy(docstore=docstore)
    if kind == DocStoreStrategy.UPSERTS:
        return UpsertsStrategy(docstore=docstore, vector_stores=vector_stores or {})
    return UpsertsAndDeleteStrategy(docstore=docstore, vector_stores=vector_stores or {})
