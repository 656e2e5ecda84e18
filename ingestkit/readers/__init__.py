from ingestkit.readers.base import BaseReader
from ingestkit.readers.directory import DirectoryReader

__all__ = ["BaseReader", "DirectoryReader"]
