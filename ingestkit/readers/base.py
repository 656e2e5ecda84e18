"""
FILE: ingestkit/readers/base.py

Reader interface (contract). A reader produces the documents a pipeline
ingests when none are passed explicitly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ingestkit.core.schema import Document


class BaseReader(ABC):
    """Abstract base class for readers."""

    @abstractmethod
    async def load_data(self) -> List[Document]:
        """Load documents from the configured source."""
        raise NotImplementedError
