"""
================================================================================
TEXT CLEANER STAGE
ingestkit/transforms/cleaning.py

SUMMARY:
--------
Text normalization stage. Returns new nodes with cleaned text; the input
nodes are not modified. Image nodes pass through untouched.

CLEANING LEVELS:
----------------
   MINIMAL  - line endings, BOM, control characters
   STANDARD - + trailing whitespace per line, repeated spaces, 3+ newlines
   DEEP     - + consecutive duplicate lines removed
================================================================================
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, List, Sequence

from ingestkit.core.schema import BaseNode, ModalityType
from ingestkit.core.transform import TransformComponent

logger = logging.getLogger(__name__)

_MIXED_LINE_ENDINGS = re.compile(r"\r\n|\r")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_MULTIPLE_SPACES = re.compile(r"[ \t]{2,}")
_TRAILING_SPACES = re.compile(r"[ \t]+$", re.MULTILINE)
_MULTIPLE_NEWLINES = re.compile(r"\n{3,}")


class CleaningLevel(str, Enum):
    """Text cleaning intensity levels."""

    MINIMAL = "minimal"
    STANDARD = "standard"
    DEEP = "deep"


class TextCleaner(TransformComponent):
    """
    Normalize node text.

    Example:
        >>> cleaner = TextCleaner(level="deep")
        >>> cleaned = await cleaner.acall(nodes)
    """

    level: CleaningLevel = CleaningLevel.STANDARD
    strip: bool = True

    def clean(self, text: str) -> str:
        text = text.lstrip("\ufeff")
        text = _MIXED_LINE_ENDINGS.sub("\n", text)
        text = _CONTROL_CHARS.sub("", text)

        if self.level in (CleaningLevel.STANDARD, CleaningLevel.DEEP):
            text = _TRAILING_SPACES.sub("", text)
            text = _MULTIPLE_SPACES.sub(" ", text)
            text = _MULTIPLE_NEWLINES.sub("\n\n", text)

        if self.level == CleaningLevel.DEEP:
            lines: List[str] = []
            for line in text.split("\n"):
                if lines and line and line == lines[-1]:
                    continue
                lines.append(line)
            text = "\n".join(lines)

        return text.strip() if self.strip else text

    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        cleaned: List[BaseNode] = []
        for node in nodes:
            if node.modality != ModalityType.TEXT:
                cleaned.append(node)
                continue
            cleaned.append(node.model_copy(update={"text": self.clean(node.text)}))

        logger.debug(f"Cleaned {len(cleaned)} nodes (level={self.level.value})")
        return cleaned
