"""Shared fixtures and helper stages for the ingestkit test suite."""
from __future__ import annotations

import asyncio
from typing import Any, List, Sequence

import pytest
from pydantic import PrivateAttr

from ingestkit.config.settings import get_settings
from ingestkit.core.schema import BaseNode, Document, TextNode
from ingestkit.core.transform import TransformComponent
from ingestkit.pipeline.cache import IngestionCache
from ingestkit.providers.cache.memory import InMemoryCacheProvider
from ingestkit.providers.docstore.memory import SimpleDocumentStore
from ingestkit.providers.vectordb.memory import SimpleVectorStore


# ---------------------------------------------------------------------------
# Helper stages
# ---------------------------------------------------------------------------


class SuffixStage(TransformComponent):
    """Appends `suffix` to every node's text; counts invocations."""

    suffix: str = "!"
    _calls: int = PrivateAttr(default=0)

    @property
    def calls(self) -> int:
        return self._calls

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        self._calls += 1
        return [node.model_copy(update={"text": node.text + self.suffix}) for node in nodes]


class FixedEmbedding(TransformComponent):
    """Sets the same embedding on every node."""

    vector: List[float] = [0.1, 0.2, 0.3]

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        return [node.model_copy(update={"embedding": list(self.vector)}) for node in nodes]


class FailingStage(TransformComponent):
    message: str = "stage failed"

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        raise RuntimeError(self.message)


class ConcurrencyTracker:
    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self.started: List[str] = []


class SlowStage(TransformComponent):
    """Sleeps while recording how many stages run at once."""

    name: str
    delay: float = 0.02
    tracker: ConcurrencyTracker

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        self.tracker.active += 1
        self.tracker.peak = max(self.tracker.peak, self.tracker.active)
        self.tracker.started.append(self.name)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.tracker.active -= 1
        return [node.model_copy(update={"text": f"{node.text}|{self.name}"}) for node in nodes]


class OptionsRecorder(TransformComponent):
    _seen: List[dict] = PrivateAttr(default_factory=list)

    @property
    def seen(self) -> List[dict]:
        return self._seen

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        self._seen.append(dict(kwargs))
        return list(nodes)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def cache() -> IngestionCache:
    return IngestionCache(provider=InMemoryCacheProvider())


@pytest.fixture()
def docstore() -> SimpleDocumentStore:
    return SimpleDocumentStore()


@pytest.fixture()
def vector_store() -> SimpleVectorStore:
    return SimpleVectorStore()


@pytest.fixture()
def text_nodes() -> List[TextNode]:
    return [
        TextNode(id_="n1", text="alpha"),
        TextNode(id_="n2", text="beta"),
        TextNode(id_="n3", text="gamma"),
    ]


@pytest.fixture()
def documents() -> List[Document]:
    return [
        Document(id_="doc-a", text="first document", metadata={"source": "a.txt"}),
        Document(id_="doc-b", text="second document", metadata={"source": "b.txt"}),
    ]
