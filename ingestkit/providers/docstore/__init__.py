"""Document (tracking) store package."""

from ingestkit.providers.docstore.base import IDocumentStore
from ingestkit.providers.docstore.memory import SimpleDocumentStore

__all__ = [
    "IDocumentStore",
    "SimpleDocumentStore",
]
