"""Tests for add_nodes_to_vector_stores.

Covers:
- routing by modality
- missing store detected before any insert
- nodes_added observer
"""
from __future__ import annotations

import pytest

from ingestkit.core.exceptions import ConfigurationError, MissingVectorStoreError
from ingestkit.core.schema import ImageNode, ModalityType, TextNode
from ingestkit.pipeline.vector_stores import add_nodes_to_vector_stores
from ingestkit.providers.vectordb.memory import SimpleVectorStore


def _text(node_id: str) -> TextNode:
    return TextNode(id_=node_id, text=node_id, embedding=[1.0, 0.0])


def _image(node_id: str) -> ImageNode:
    return ImageNode(id_=node_id, image="AAAA", embedding=[0.0, 1.0])


async def test_routes_by_modality():
    text_store, image_store = SimpleVectorStore(), SimpleVectorStore()

    await add_nodes_to_vector_stores(
        [_text("t1"), _image("i1"), _text("t2")],
        {ModalityType.TEXT: text_store, ModalityType.IMAGE: image_store},
    )

    assert text_store.node_ids == ["t1", "t2"]
    assert image_store.node_ids == ["i1"]


async def test_missing_store_raises_before_inserting():
    text_store = SimpleVectorStore()

    with pytest.raises(MissingVectorStoreError) as exc_info:
        await add_nodes_to_vector_stores(
            [_text("t1"), _image("i1")],
            {ModalityType.TEXT: text_store},
        )

    assert exc_info.value.modality == "IMAGE"
    assert "Cannot insert nodes of type IMAGE without assigned vector store" in str(exc_info.value)
    assert isinstance(exc_info.value, ConfigurationError)
    assert len(text_store) == 0


async def test_empty_input_is_a_no_op():
    store = SimpleVectorStore()
    await add_nodes_to_vector_stores([], {ModalityType.TEXT: store})
    assert len(store) == 0


async def test_observer_called_per_partition():
    text_store, image_store = SimpleVectorStore(), SimpleVectorStore()
    calls = []

    async def nodes_added(new_ids, nodes, store):
        calls.append((new_ids, [n.node_id for n in nodes], store))

    await add_nodes_to_vector_stores(
        [_image("i1"), _text("t1")],
        {ModalityType.TEXT: text_store, ModalityType.IMAGE: image_store},
        nodes_added,
    )

    assert calls == [(["i1"], ["i1"], image_store), (["t1"], ["t1"], text_store)]
