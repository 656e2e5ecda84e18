"""
Destination fan-out: route nodes to vector stores by modality.

Every modality present in the batch must have a store; this is checked for
the whole batch before anything is inserted.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from ingestkit.core.exceptions import MissingVectorStoreError
from ingestkit.core.schema import BaseNode, ModalityType, split_nodes_by_type
from ingestkit.providers.vectordb.base import IVectorStore

logger = logging.getLogger(__name__)

NodesAddedCallback = Callable[[List[str], List[BaseNode], IVectorStore], Awaitable[None]]


async def add_nodes_to_vector_stores(
    nodes: Sequence[BaseNode],
    vector_stores: Dict[ModalityType, IVectorStore],
    nodes_added: Optional[NodesAddedCallback] = None,
) -> None:
    """
    Insert each modality partition into its store.

    Raises:
        MissingVectorStoreError: a modality in `nodes` has no store
    """
    nodes_by_type = split_nodes_by_type(nodes)

    for modality in nodes_by_type:
        if modality not in vector_stores:
            raise MissingVectorStoreError(modality)

    for modality, partition in nodes_by_type.items():
        vector_store = vector_stores[modality]
        new_ids = await vector_store.add(partition)
        logger.debug(f"Added {len(new_ids)} {modality.value} nodes to {type(vector_store).__name__}")
        if nodes_added is not None:
            await nodes_added(new_ids, partition, vector_store)
