from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from domain.models import DesignDocument


class DocumentRepository(Protocol):
    def load(self, path: Path) -> DesignDocument: ...

    def save(self, document: DesignDocument, path: Path) -> None: ...


class ProjectWriter(Protocol):
    def write(self, files: Mapping[str, str], output_dir: Path) -> list[Path]: ...
