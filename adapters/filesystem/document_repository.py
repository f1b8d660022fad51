from __future__ import annotations

import logging
from pathlib import Path

from filelock import FileLock

from adapters.filesystem.json_utils import load_json_object, write_json_atomic
from domain.models import DesignDocument
from domain.ports.repositories import DocumentRepository

logger = logging.getLogger(__name__)


class FileSystemDocumentRepository(DocumentRepository):
    def load(self, path: Path) -> DesignDocument:
        return DesignDocument.model_validate(load_json_object(path))

    def save(self, document: DesignDocument, path: Path) -> None:
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_json_atomic(path, document.model_dump(mode="json"))
        logger.debug("Saved document %s (%d elements)", path, len(document.elements))
