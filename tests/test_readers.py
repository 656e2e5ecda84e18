"""Tests for DirectoryReader."""
from __future__ import annotations

import base64

import pytest

from ingestkit.core.schema import Document, ImageDocument, ModalityType
from ingestkit.readers.directory import DirectoryReader


@pytest.fixture()
def corpus(tmp_path):
    (tmp_path / "a.txt").write_text("plain text file", encoding="utf-8")
    (tmp_path / "b.md").write_text("# Heading\n\nbody", encoding="utf-8")
    (tmp_path / "latin.txt").write_bytes("café crème brûlée, déjà vu".encode("latin-1"))
    (tmp_path / "pic.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    (tmp_path / "ignored.bin").write_bytes(b"\x00\x01")
    (tmp_path / ".hidden.txt").write_text("secret", encoding="utf-8")
    nested = tmp_path / "sub"
    nested.mkdir()
    (nested / "c.txt").write_text("nested", encoding="utf-8")
    return tmp_path


async def test_loads_supported_files_sorted(corpus):
    docs = await DirectoryReader(corpus).load_data()

    assert [d.metadata["file_name"] for d in docs] == ["a.txt", "b.md", "latin.txt", "pic.png"]


async def test_filename_as_id(corpus):
    docs = await DirectoryReader(corpus).load_data()
    assert docs[0].node_id == str(corpus / "a.txt")


async def test_random_ids_when_disabled(corpus):
    docs = await DirectoryReader(corpus, filename_as_id=False).load_data()
    assert docs[0].node_id != str(corpus / "a.txt")


async def test_text_metadata(corpus):
    docs = await DirectoryReader(input_files=[corpus / "a.txt"]).load_data()

    doc = docs[0]
    assert isinstance(doc, Document)
    assert doc.text == "plain text file"
    assert doc.metadata["file_size"] == len("plain text file")
    assert doc.metadata["file_type"] == "text/plain"


async def test_non_utf8_text_is_decoded(corpus):
    docs = await DirectoryReader(input_files=[corpus / "latin.txt"]).load_data()
    assert "caf" in docs[0].text
    assert docs[0].metadata["encoding"]


async def test_images_become_image_documents(corpus):
    docs = await DirectoryReader(input_files=[corpus / "pic.png"]).load_data()

    image = docs[0]
    assert isinstance(image, ImageDocument)
    assert image.modality == ModalityType.IMAGE
    assert base64.b64decode(image.image) == b"\x89PNG\r\n\x1a\nfake"
    assert image.image_mimetype == "image/png"


async def test_recursive(corpus):
    docs = await DirectoryReader(corpus, recursive=True).load_data()
    assert "c.txt" in [d.metadata["file_name"] for d in docs]


async def test_required_exts(corpus):
    docs = await DirectoryReader(corpus, required_exts=[".md"]).load_data()
    assert [d.metadata["file_name"] for d in docs] == ["b.md"]


async def test_num_files_limit(corpus):
    docs = await DirectoryReader(corpus, num_files_limit=2).load_data()
    assert len(docs) == 2


def test_missing_directory(tmp_path):
    with pytest.raises(ValueError):
        DirectoryReader(tmp_path / "nope")


def test_empty_directory(tmp_path):
    with pytest.raises(ValueError):
        DirectoryReader(tmp_path)


def test_requires_a_source():
    with pytest.raises(ValueError):
        DirectoryReader()
