"""
===============================================================================
Directory Reader Implementation
===============================================================================

SUMMARY:
--------
Loads every supported file under a directory (or an explicit file list)
into Documents. Text files become `Document`s, images become
`ImageDocument`s carrying the base64 payload.

WORKING & METHODOLOGY:
----------------------
- Inherits from BaseReader ABC
- Reads bytes off the event loop (asyncio.to_thread)
- Decodes text with chardet-detected encoding, utf-8 fallback
- filename_as_id=True makes the file path the document id, so upsert
  strategies recognise a re-read file as the same document

OUTPUTS:
--------
- List[Document] in sorted path order, metadata: file_path, file_name,
  file_type, file_size, encoding (text only)
"""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import chardet

from ingestkit.config.constants import IMAGE_FILE_EXTENSIONS, TEXT_FILE_EXTENSIONS
from ingestkit.core.schema import Document, ImageDocument
from ingestkit.readers.base import BaseReader

logger = logging.getLogger(__name__)


class DirectoryReader(BaseReader):
    """
    Read text and image files from a directory.

    Args:
        input_dir: Directory to scan
        input_files: Explicit files (alternative to input_dir)
        recursive: Descend into sub-directories
        required_exts: Only load these extensions (e.g. [".md"])
        exclude_hidden: Skip dot-files and dot-directories
        filename_as_id: Use the file path as document id
        num_files_limit: Stop after this many files
    """

    def __init__(
        self,
        input_dir: Optional[Union[str, Path]] = None,
        input_files: Optional[Sequence[Union[str, Path]]] = None,
        recursive: bool = False,
        required_exts: Optional[Iterable[str]] = None,
        exclude_hidden: bool = True,
        filename_as_id: bool = True,
        num_files_limit: Optional[int] = None,
    ) -> None:
        if input_dir is None and not input_files:
            raise ValueError("Must provide either `input_dir` or `input_files`.")

        self.input_dir = Path(input_dir) if input_dir is not None else None
        self.recursive = recursive
        self.required_exts = {e.lower() for e in required_exts} if required_exts else None
        self.exclude_hidden = exclude_hidden
        self.filename_as_id = filename_as_id
        self.num_files_limit = num_files_limit

        if input_files:
            self.input_files = [Path(f) for f in input_files]
            for path in self.input_files:
                if not path.is_file():
                    raise ValueError(f"File {path} does not exist.")
        else:
            if not self.input_dir.is_dir():
                raise ValueError(f"Directory {self.input_dir} does not exist.")
            self.input_files = self._discover_files()

    def _supported(self, path: Path) -> bool:
        ext = path.suffix.lower()
        if self.required_exts is not None:
            return ext in self.required_exts
        return ext in TEXT_FILE_EXTENSIONS or ext in IMAGE_FILE_EXTENSIONS

    def _discover_files(self) -> List[Path]:
        pattern = "**/*" if self.recursive else "*"
        files: List[Path] = []

        for path in sorted(self.input_dir.glob(pattern)):
            if not path.is_file():
                continue
            rel_parts = path.relative_to(self.input_dir).parts
            if self.exclude_hidden and any(part.startswith(".") for part in rel_parts):
                continue
            if not self._supported(path):
                continue
            files.append(path)
            if self.num_files_limit is not None and len(files) >= self.num_files_limit:
                break

        if not files:
            raise ValueError(f"No files found in {self.input_dir}.")
        return files

    def _load_file(self, path: Path) -> Document:
        raw = path.read_bytes()
        mimetype = mimetypes.guess_type(path.name)[0]
        metadata = {
            "file_path": str(path),
            "file_name": path.name,
            "file_type": mimetype,
            "file_size": len(raw),
        }
        doc_id = {"id_": str(path)} if self.filename_as_id else {}

        if path.suffix.lower() in IMAGE_FILE_EXTENSIONS:
            return ImageDocument(
                image=base64.b64encode(raw).decode("ascii"),
                image_path=str(path),
                image_mimetype=mimetype,
                metadata=metadata,
                **doc_id,
            )

        encoding = chardet.detect(raw)["encoding"] if raw else "utf-8"
        text = raw.decode(encoding or "utf-8", errors="replace")
        metadata["encoding"] = encoding
        return Document(text=text, metadata=metadata, **doc_id)

    async def load_data(self) -> List[Document]:
        documents: List[Document] = []
        for path in self.input_files:
            documents.append(await asyncio.to_thread(self._load_file, path))

        logger.info(f"Loaded {len(documents)} documents from {self.input_dir or 'input files'}")
        return documents
