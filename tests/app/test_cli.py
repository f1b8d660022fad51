from __future__ import annotations

from pathlib import Path

import orjson
import pytest
from typer.testing import CliRunner, Result

from adapters.filesystem.document_repository import FileSystemDocumentRepository
from app.cli import app

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "app.yaml"
    path.write_text(
        "compiler:\n"
        "  project_title: CLI Shop\n"
        "  package_name: cli-shop\n"
        f"  output_dir: {tmp_path / 'generated'}\n",
        encoding="utf-8",
    )
    return path


def _invoke(config_path: Path, *args: str) -> Result:
    return runner.invoke(app, ["--config", str(config_path), *args])


def test_new_ingest_compile_flow(tmp_path: Path, config_path: Path) -> None:
    document = tmp_path / "document.json"
    payload = tmp_path / "payload.json"
    payload.write_bytes(
        orjson.dumps(
            [
                {"type": "section", "name": "Hero", "children": [{"type": "text", "text": "Hi"}]},
                {"name": "missing type"},
            ]
        )
    )

    created = _invoke(config_path, "new", str(document), "--name", "Shop")
    assert created.exit_code == 0, created.output
    ingested = _invoke(config_path, "ingest", str(payload), "--document", str(document))
    assert ingested.exit_code == 0, ingested.output
    assert "Created 2 elements" in ingested.output
    assert "Skipped [1]" in ingested.output

    compiled = _invoke(config_path, "compile", str(document))

    assert compiled.exit_code == 0, compiled.output
    app_source = (tmp_path / "generated" / "src" / "App.jsx").read_text(encoding="utf-8")
    assert "Hi" in app_source
    package = orjson.loads((tmp_path / "generated" / "package.json").read_bytes())
    assert package["name"] == "cli-shop"


def test_new_refuses_to_overwrite(tmp_path: Path, config_path: Path) -> None:
    document = tmp_path / "document.json"
    document.write_text("{}", encoding="utf-8")

    result = _invoke(config_path, "new", str(document))

    assert result.exit_code == 1
    assert "Refusing to overwrite" in result.output


def test_compile_missing_document(tmp_path: Path, config_path: Path) -> None:
    result = _invoke(config_path, "compile", str(tmp_path / "nope.json"))

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_compile_unknown_page(tmp_path: Path, config_path: Path) -> None:
    document = tmp_path / "document.json"
    _invoke(config_path, "new", str(document))

    result = _invoke(config_path, "compile", str(document), "--page", "missing")

    assert result.exit_code == 1
    assert "Compile failed" in result.output


def test_resolve_prints_cascaded_styles(tmp_path: Path, config_path: Path) -> None:
    document = tmp_path / "document.json"
    payload = tmp_path / "payload.json"
    payload.write_bytes(
        orjson.dumps({"elements": [{"type": "text", "styles": {"fontSize": 40}}]})
    )
    _invoke(config_path, "ingest", str(payload), "--output", str(document))
    loaded = FileSystemDocumentRepository().load(document)
    text_id = next(item.id for item in loaded.elements.values() if item.type == "text")

    result = _invoke(config_path, "resolve", str(document), text_id, "--breakpoint", "mobile")

    assert result.exit_code == 0, result.output
    assert '"fontSize": 40' in result.output


def test_validate_reports_broken_tree(tmp_path: Path, config_path: Path) -> None:
    document = tmp_path / "document.json"
    _invoke(config_path, "new", str(document))
    assert _invoke(config_path, "validate", str(document)).exit_code == 0

    data = orjson.loads(document.read_bytes())
    root_id = next(iter(data["pages"].values()))["root_element_id"]
    data["elements"][root_id]["children"] = ["ghost"]
    document.write_bytes(orjson.dumps(data))

    result = _invoke(config_path, "validate", str(document))

    assert result.exit_code == 1
    assert "ghost" in result.output


def test_invalid_config_exits(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "validate", "x"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
