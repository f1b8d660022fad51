from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from adapters.filesystem.document_repository import FileSystemDocumentRepository
from adapters.filesystem.json_utils import load_json_object, write_json_atomic
from domain.services.scene_graph_store import SceneGraphStore


def test_save_and_load_round_trip(tmp_path: Path, store: SceneGraphStore) -> None:
    page = store.current_page()
    assert page is not None
    text_id = store.create_element("text", page.root_element_id)
    store.save_to_history("Add text")
    path = tmp_path / "nested" / "document.json"
    repository = FileSystemDocumentRepository()

    repository.save(store.to_document(), path)
    loaded = repository.load(path)

    assert loaded.elements[text_id].type == "text"
    assert loaded.history_index == store.history_index
    assert not path.with_suffix(".json.tmp").exists()
    restored = SceneGraphStore.from_document(loaded)
    assert restored.get_element(text_id).content == "Add your text here"


def test_saved_file_is_indented_json(tmp_path: Path, store: SceneGraphStore) -> None:
    path = tmp_path / "document.json"

    FileSystemDocumentRepository().save(store.to_document(), path)

    text = path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert '\n  "' in text
    assert orjson.loads(text)["project_name"] == store.project_name


def test_load_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    write_json_atomic(path, [1, 2, 3])

    with pytest.raises(ValueError, match="must contain a JSON object"):
        load_json_object(path)
