"""In-memory document store with JSON persistence."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ingestkit.core.exceptions import DocumentNotFoundError
from ingestkit.core.schema import BaseNode, node_from_dict, node_to_dict
from ingestkit.providers.docstore.base import IDocumentStore
from ingestkit.utils.helpers import read_json, write_json

logger = logging.getLogger(__name__)


class SimpleDocumentStore(IDocumentStore):
    """
    Dict-backed document store.

    Three collections are kept:
        docs:         node_id -> serialized node
        metadata:     doc_id  -> {"doc_hash": ..., "ref_doc_id": ...}
        ref_doc_info: ref_doc_id -> {"node_ids": [...]}
    """

    def __init__(
        self,
        docs: Optional[Dict[str, Dict[str, Any]]] = None,
        metadata: Optional[Dict[str, Dict[str, Any]]] = None,
        ref_doc_info: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        self._docs: Dict[str, Dict[str, Any]] = docs or {}
        self._metadata: Dict[str, Dict[str, Any]] = metadata or {}
        self._ref_doc_info: Dict[str, Dict[str, Any]] = ref_doc_info or {}

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def add_documents(
        self,
        nodes: Sequence[BaseNode],
        allow_update: bool = True,
    ) -> None:
        for node in nodes:
            if not allow_update and node.node_id in self._docs:
                raise ValueError(
                    f"node_id {node.node_id} already exists. "
                    "Set allow_update to True to overwrite."
                )

            self._docs[node.node_id] = node_to_dict(node)
            meta = self._metadata.setdefault(node.node_id, {})

            ref_doc_id = node.ref_doc_id
            if ref_doc_id is not None and ref_doc_id != node.node_id:
                # derived nodes are tracked under their source document
                meta["ref_doc_id"] = ref_doc_id
                info = self._ref_doc_info.setdefault(ref_doc_id, {"node_ids": []})
                if node.node_id not in info["node_ids"]:
                    info["node_ids"].append(node.node_id)
            else:
                meta["doc_hash"] = node.hash

    async def get_document(
        self,
        doc_id: str,
        raise_error: bool = True,
    ) -> Optional[BaseNode]:
        data = self._docs.get(doc_id)
        if data is None:
            if raise_error:
                raise DocumentNotFoundError(doc_id)
            return None
        return node_from_dict(data)

    async def document_exists(self, doc_id: str) -> bool:
        return doc_id in self._docs

    async def delete_document(self, doc_id: str, raise_error: bool = True) -> None:
        if doc_id not in self._docs and doc_id not in self._metadata:
            if raise_error:
                raise DocumentNotFoundError(doc_id)
            return

        self._docs.pop(doc_id, None)
        meta = self._metadata.pop(doc_id, None) or {}

        ref_doc_id = meta.get("ref_doc_id")
        if ref_doc_id is not None and ref_doc_id in self._ref_doc_info:
            node_ids: List[str] = self._ref_doc_info[ref_doc_id]["node_ids"]
            if doc_id in node_ids:
                node_ids.remove(doc_id)
            if not node_ids:
                del self._ref_doc_info[ref_doc_id]

    async def delete_ref_doc(self, ref_doc_id: str, raise_error: bool = True) -> None:
        info = self._ref_doc_info.pop(ref_doc_id, None)
        tracked_directly = ref_doc_id in self._docs or ref_doc_id in self._metadata

        if info is None and not tracked_directly:
            if raise_error:
                raise DocumentNotFoundError(ref_doc_id)
            logger.debug(f"ref_doc_id {ref_doc_id} not tracked; nothing to delete")
            return

        for node_id in (info or {}).get("node_ids", []):
            self._docs.pop(node_id, None)
            self._metadata.pop(node_id, None)

        self._docs.pop(ref_doc_id, None)
        self._metadata.pop(ref_doc_id, None)

    # ------------------------------------------------------------------
    # Hashes
    # ------------------------------------------------------------------

    async def set_document_hash(self, doc_id: str, doc_hash: str) -> None:
        self._metadata.setdefault(doc_id, {})["doc_hash"] = doc_hash

    async def get_document_hash(self, doc_id: str) -> Optional[str]:
        meta = self._metadata.get(doc_id)
        return meta.get("doc_hash") if meta else None

    async def get_all_document_hashes(self) -> Dict[str, str]:
        return {
            meta["doc_hash"]: doc_id
            for doc_id, meta in self._metadata.items()
            if "doc_hash" in meta
        }

    async def get_all_document_ids(self) -> List[str]:
        return [doc_id for doc_id, meta in self._metadata.items() if "doc_hash" in meta]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def docs(self) -> Dict[str, BaseNode]:
        return {doc_id: node_from_dict(data) for doc_id, data in self._docs.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "docs": self._docs,
            "metadata": self._metadata,
            "ref_doc_info": self._ref_doc_info,
        }

    def persist(self, persist_path: Union[str, Path]) -> None:
        write_json(persist_path, self.to_dict())
        logger.info(f"Persisted docstore ({len(self._metadata)} tracked ids) to {persist_path}")

    @classmethod
    def from_persist_path(cls, persist_path: Union[str, Path]) -> "SimpleDocumentStore":
        data = read_json(persist_path)
        return cls(
            docs=data.get("docs"),
            metadata=data.get("metadata"),
            ref_doc_info=data.get("ref_doc_info"),
        )
