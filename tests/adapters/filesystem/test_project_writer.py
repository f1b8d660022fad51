from __future__ import annotations

from pathlib import Path

import pytest

from adapters.filesystem.project_writer import FileSystemProjectWriter


def test_writes_nested_files_in_sorted_order(tmp_path: Path) -> None:
    files = {"src/App.jsx": "export default App;\n", "index.html": "<html></html>\n"}

    written = FileSystemProjectWriter().write(files, tmp_path / "out")

    assert written == [tmp_path / "out" / "index.html", tmp_path / "out" / "src" / "App.jsx"]
    assert (tmp_path / "out" / "src" / "App.jsx").read_text(encoding="utf-8") == (
        "export default App;\n"
    )


def test_overwrites_existing_files(tmp_path: Path) -> None:
    writer = FileSystemProjectWriter()
    writer.write({"a.txt": "one"}, tmp_path)
    writer.write({"a.txt": "two"}, tmp_path)

    assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "two"


@pytest.mark.parametrize("relative", ["../escape.js", "/etc/passwd", "src/../../x.js", ""])
def test_rejects_paths_outside_output_dir(tmp_path: Path, relative: str) -> None:
    with pytest.raises(ValueError, match="outside the output directory"):
        FileSystemProjectWriter().write({relative: "x"}, tmp_path / "out")

    assert not (tmp_path / "escape.js").exists()
