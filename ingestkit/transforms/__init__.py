"""Reference transformation stages."""

from ingestkit.transforms.chunking import SlidingWindowSplitter
from ingestkit.transforms.cleaning import CleaningLevel, TextCleaner

__all__ = ["CleaningLevel", "SlidingWindowSplitter", "TextCleaner"]
