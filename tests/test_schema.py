"""Tests for the node schema.

Covers:
- modality tags per node class
- get_content() metadata rendering per MetadataMode
- hash sensitivity (text, metadata, image payload)
- ref_doc_id via the SOURCE relationship
- node_to_dict / node_from_dict class restoration
- split_nodes_by_type ordering
"""
from __future__ import annotations

import pytest

from ingestkit.core.schema import (
    Document,
    ImageDocument,
    ImageNode,
    MetadataMode,
    ModalityType,
    NodeRelationship,
    TextNode,
    node_from_dict,
    node_to_dict,
    split_nodes_by_type,
)


def test_modality_tags():
    assert TextNode().modality == ModalityType.TEXT
    assert Document().modality == ModalityType.TEXT
    assert ImageNode().modality == ModalityType.IMAGE
    assert ImageDocument().modality == ModalityType.IMAGE


def test_default_ids_are_unique():
    assert TextNode().node_id != TextNode().node_id


class TestGetContent:
    def test_none_mode_returns_text_only(self):
        node = TextNode(text="body", metadata={"title": "T"})
        assert node.get_content() == "body"

    def test_all_mode_prefixes_metadata(self):
        node = TextNode(text="body", metadata={"title": "T"})
        assert node.get_content(MetadataMode.ALL) == "title: T\n\nbody"

    def test_embed_mode_honours_exclusions(self):
        node = TextNode(
            text="body",
            metadata={"title": "T", "secret": "x"},
            excluded_embed_metadata_keys=["secret"],
        )
        assert node.get_content(MetadataMode.EMBED) == "title: T\n\nbody"
        assert "secret: x" in node.get_content(MetadataMode.ALL)

    def test_llm_mode_honours_exclusions(self):
        node = TextNode(
            text="body",
            metadata={"title": "T"},
            excluded_llm_metadata_keys=["title"],
        )
        assert node.get_content(MetadataMode.LLM) == "body"


class TestHash:
    def test_same_content_same_hash(self):
        assert TextNode(id_="a", text="x").hash == TextNode(id_="b", text="x").hash

    def test_text_changes_hash(self):
        assert TextNode(text="x").hash != TextNode(text="y").hash

    def test_metadata_changes_hash(self):
        assert TextNode(text="x", metadata={"k": 1}).hash != TextNode(text="x").hash

    def test_image_payload_changes_hash(self):
        assert ImageNode(image="AAAA").hash != ImageNode(image="BBBB").hash


def test_ref_doc_id_follows_source_relationship():
    doc = Document(id_="doc-1", text="parent")
    chunk = TextNode(text="child", relationships={NodeRelationship.SOURCE: doc.as_related_node_info()})

    assert chunk.ref_doc_id == "doc-1"
    assert doc.ref_doc_id is None


class TestSerialization:
    @pytest.mark.parametrize(
        "node",
        [
            TextNode(id_="t", text="hello", metadata={"a": 1}, embedding=[0.5, 0.25]),
            Document(id_="d", text="doc"),
            ImageDocument(id_="i", image="AAAA", image_mimetype="image/png"),
        ],
    )
    def test_restores_class_and_fields(self, node):
        restored = node_from_dict(node_to_dict(node))

        assert type(restored) is type(node)
        assert restored == node

    def test_relationships_survive(self):
        chunk = TextNode(
            text="child",
            relationships={NodeRelationship.SOURCE: Document(id_="p").as_related_node_info()},
        )
        assert node_from_dict(node_to_dict(chunk)).ref_doc_id == "p"

    def test_unknown_class_rejected(self):
        with pytest.raises(ValueError):
            node_from_dict({"class_name": "Nope", "text": "x"})


def test_split_nodes_by_type_keeps_first_appearance_order():
    image = ImageNode(id_="img")
    text_a = TextNode(id_="a")
    text_b = TextNode(id_="b")

    groups = split_nodes_by_type([image, text_a, text_b])

    assert list(groups.keys()) == [ModalityType.IMAGE, ModalityType.TEXT]
    assert [n.node_id for n in groups[ModalityType.TEXT]] == ["a", "b"]
