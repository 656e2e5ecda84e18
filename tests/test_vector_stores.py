"""Tests for destination vector stores.

Covers:
- SimpleVectorStore: add, delete by ref doc, cosine query, persistence
- QdrantVectorStore in local ":memory:" mode: lazy collection creation,
  non-UUID ids, delete by ref doc, query
"""
from __future__ import annotations

import uuid

import pytest

from ingestkit.core.schema import Document, NodeRelationship, TextNode
from ingestkit.providers.vectordb.memory import SimpleVectorStore
from ingestkit.providers.vectordb.qdrant import QdrantConfig, QdrantVectorStore, to_point_id


def _node(node_id: str, embedding, ref_doc_id=None) -> TextNode:
    relationships = {}
    if ref_doc_id is not None:
        relationships[NodeRelationship.SOURCE] = Document(id_=ref_doc_id).as_related_node_info()
    return TextNode(id_=node_id, text=node_id, embedding=embedding, relationships=relationships)


# ---------------------------------------------------------------------------
# SimpleVectorStore
# ---------------------------------------------------------------------------


class TestSimpleVectorStore:
    async def test_add_returns_ids(self, vector_store):
        ids = await vector_store.add([_node("a", [1.0, 0.0]), _node("b", [0.0, 1.0])])
        assert ids == ["a", "b"]
        assert len(vector_store) == 2

    async def test_add_requires_embedding(self, vector_store):
        with pytest.raises(ValueError):
            await vector_store.add([TextNode(text="no vector")])

    async def test_delete_by_ref_doc(self, vector_store):
        await vector_store.add(
            [
                _node("c1", [1.0, 0.0], ref_doc_id="doc-1"),
                _node("c2", [1.0, 0.0], ref_doc_id="doc-1"),
                _node("c3", [1.0, 0.0], ref_doc_id="doc-2"),
            ]
        )

        await vector_store.delete("doc-1")

        assert vector_store.node_ids == ["c3"]

    async def test_delete_unreferenced_node_by_own_id(self, vector_store):
        await vector_store.add([_node("solo", [1.0, 0.0])])
        await vector_store.delete("solo")
        assert len(vector_store) == 0

    async def test_delete_unknown_is_no_op(self, vector_store):
        await vector_store.delete("never")

    async def test_query_orders_by_cosine(self, vector_store):
        await vector_store.add(
            [
                _node("east", [1.0, 0.0]),
                _node("north", [0.0, 1.0]),
                _node("north-east", [1.0, 1.0]),
            ]
        )

        hits = await vector_store.query([0.9, 0.1], top_k=2)

        assert [h["id"] for h in hits] == ["east", "north-east"]
        assert hits[0]["score"] == pytest.approx(0.9939, abs=1e-3)
        assert hits[0]["node"].text == "east"

    async def test_query_empty_store(self, vector_store):
        assert await vector_store.query([1.0, 0.0]) == []

    async def test_persist_roundtrip(self, tmp_path, vector_store):
        await vector_store.add([_node("c1", [1.0, 0.0], ref_doc_id="doc-1")])
        path = tmp_path / "vectors.json"

        vector_store.persist(path)
        loaded = SimpleVectorStore.from_persist_path(path)

        assert loaded.node_ids == ["c1"]
        await loaded.delete("doc-1")
        assert len(loaded) == 0


# ---------------------------------------------------------------------------
# Qdrant (local in-process mode)
# ---------------------------------------------------------------------------


@pytest.fixture()
async def qdrant_store():
    store = QdrantVectorStore(
        QdrantConfig(url=":memory:", api_key=None, collection="test_nodes", timeout_s=5)
    )
    await store.initialize()
    yield store
    await store.shutdown()


def test_point_ids():
    existing = str(uuid.uuid4())
    assert to_point_id(existing) == existing
    assert to_point_id("doc.txt") == to_point_id("doc.txt")
    uuid.UUID(to_point_id("doc.txt"))


class TestQdrantVectorStore:
    async def test_query_before_first_add(self, qdrant_store):
        assert await qdrant_store.query([1.0, 0.0]) == []

    async def test_add_and_query(self, qdrant_store):
        ids = await qdrant_store.add(
            [_node("east", [1.0, 0.0]), _node("north", [0.0, 1.0])]
        )

        hits = await qdrant_store.query([1.0, 0.1], top_k=1)

        assert ids == ["east", "north"]
        assert hits[0]["id"] == "east"
        assert hits[0]["node"].text == "east"

    async def test_delete_by_ref_doc(self, qdrant_store):
        await qdrant_store.add(
            [
                _node("c1", [1.0, 0.0], ref_doc_id="doc-1"),
                _node("c2", [0.0, 1.0], ref_doc_id="doc-2"),
            ]
        )

        await qdrant_store.delete("doc-1")

        hits = await qdrant_store.query([1.0, 0.0], top_k=10)
        assert [h["id"] for h in hits] == ["c2"]

    async def test_delete_before_collection_exists(self, qdrant_store):
        await qdrant_store.delete("doc-1")
