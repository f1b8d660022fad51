from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from adapters.filesystem.json_utils import write_bytes_atomic
from domain.ports.repositories import ProjectWriter


def _safe_relative_path(relative: str) -> Path:
    candidate = PurePosixPath(relative)
    if candidate.is_absolute() or ".." in candidate.parts or not candidate.parts:
        msg = f"Refusing to write outside the output directory: {relative!r}"
        raise ValueError(msg)
    return Path(*candidate.parts)


class FileSystemProjectWriter(ProjectWriter):
    def write(self, files: Mapping[str, str], output_dir: Path) -> list[Path]:
        written: list[Path] = []
        for relative in sorted(files):
            target = output_dir / _safe_relative_path(relative)
            write_bytes_atomic(target, files[relative].encode("utf-8"))
            written.append(target)
        return written
