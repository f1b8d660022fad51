from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, CompilerSettings
from domain.services.scene_graph_store import SceneGraphStore
from tests.helpers.document_builders import sequential_ids


def _clear_canvas_env() -> None:
    for key in list(os.environ):
        if key.startswith("CANVAS_"):
            os.environ.pop(key, None)


_clear_canvas_env()


@pytest.fixture(autouse=True)
def clear_canvas_env() -> Generator[None, None, None]:
    _clear_canvas_env()
    yield
    _clear_canvas_env()


@pytest.fixture
def compiler_settings(tmp_path: Path) -> CompilerSettings:
    return CompilerSettings(
        project_title="Test Canvas",
        package_name="test-canvas",
        document_path=tmp_path / "document.json",
        output_dir=tmp_path / "generated",
    )


@pytest.fixture
def app_settings(compiler_settings: CompilerSettings) -> AppSettings:
    return AppSettings(compiler=compiler_settings)


@pytest.fixture
def app_settings_factory(
    compiler_settings: CompilerSettings,
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(compiler=compiler_settings.model_copy(update=overrides))

    return _factory


@pytest.fixture
def store() -> SceneGraphStore:
    return SceneGraphStore(id_factory=sequential_ids(), clock=lambda: 1_700_000_000.0)
