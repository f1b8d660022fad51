from __future__ import annotations

from collections.abc import Callable

from app.config import AppSettings
from app.wiring import build_compiler
from tests.helpers.document_builders import ROOT_ID, build_snapshot, element, page_root


def test_compiler_uses_configured_image_placeholder(
    app_settings_factory: Callable[..., AppSettings],
) -> None:
    settings = app_settings_factory(default_image_src="https://cdn.example.com/blank.png")
    photo = element("photo", "image", parent_id=ROOT_ID, src="")
    snapshot = build_snapshot(page_root(["photo"]), photo)

    app = build_compiler(settings).compile(snapshot).entry_file()

    assert 'src="https://cdn.example.com/blank.png"' in app
