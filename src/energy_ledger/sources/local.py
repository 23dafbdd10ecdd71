"""Bill documents stored in local folders, one folder per source type."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

import structlog
from pydantic import BaseModel

from ..models.records import SourceType

logger = structlog.get_logger(__name__)

DOCUMENT_SUFFIXES = (".pdf", ".txt")


class DocumentRef(BaseModel):
    """A bill document available for extraction."""

    name: str
    path: Path
    source_type: SourceType


class LocalDocumentSource:
    """Lists and reads bill documents under ``root/<folder>``."""

    def __init__(self, root: Path | str, folders: Mapping[SourceType, str]):
        self.root = Path(root)
        self.folders = dict(folders)

    def list_documents(self, source_type: SourceType) -> list[DocumentRef]:
        """Return the documents for *source_type*, sorted by file name."""
        folder = self.root / self.folders[source_type]
        if not folder.is_dir():
            logger.warning("document_folder_missing", source_type=source_type.value, folder=str(folder))
            return []

        refs = [
            DocumentRef(name=path.name, path=path, source_type=source_type)
            for path in sorted(folder.iterdir(), key=lambda p: p.name)
            if path.is_file() and path.suffix.lower() in DOCUMENT_SUFFIXES
        ]
        logger.info("documents_listed", source_type=source_type.value, folder=str(folder), count=len(refs))
        return refs

    def read(self, ref: DocumentRef) -> bytes:
        return ref.path.read_bytes()
