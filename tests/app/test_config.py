from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import AppSettings, CompilerSettings, load_settings


def test_defaults_use_standard_breakpoints(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert [bp.id for bp in settings.compiler.resolved_breakpoints()] == [
        "desktop",
        "tablet",
        "mobile",
    ]
    assert settings.compiler.log_level == "INFO"
    assert settings.compiler.repair_limits().header_max_height == 96


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    config = tmp_path / "app.yaml"
    config.write_text(
        "compiler:\n"
        "  project_title: Yaml Shop\n"
        "  history_limit: 10\n"
        "  repair:\n"
        "    header_max_height: 72\n",
        encoding="utf-8",
    )

    settings = load_settings(config)

    assert settings.compiler.project_title == "Yaml Shop"
    assert settings.compiler.history_limit == 10
    assert settings.compiler.repair_limits().header_max_height == 72


def test_environment_overrides_yaml(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config = tmp_path / "app.yaml"
    config.write_text("compiler:\n  project_title: From yaml\n", encoding="utf-8")
    monkeypatch.setenv("CANVAS_CONFIG_PATH", str(config))
    monkeypatch.setenv("CANVAS_COMPILER__PROJECT_TITLE", "From env")

    assert load_settings().compiler.project_title == "From env"


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_enabled_breakpoints_accept_comma_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CANVAS_COMPILER__ENABLED_BREAKPOINTS", "desktop, mobile")

    settings = AppSettings()

    assert settings.compiler.enabled_breakpoints == ["desktop", "mobile"]
    assert [bp.id for bp in settings.compiler.resolved_breakpoints()] == ["desktop", "mobile"]


def test_no_enabled_breakpoint_is_an_error() -> None:
    compiler = CompilerSettings(enabled_breakpoints=["watch"])

    with pytest.raises(ValueError, match="At least one breakpoint"):
        compiler.resolved_breakpoints()


def test_log_level_is_validated() -> None:
    assert CompilerSettings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        CompilerSettings(log_level="chatty")


def test_image_url_is_validated() -> None:
    with pytest.raises(ValidationError):
        CompilerSettings(default_image_src="not a url")
    limits = CompilerSettings(default_image_src="https://example.com/a.png").repair_limits()
    assert limits.default_image_src == "https://example.com/a.png"
