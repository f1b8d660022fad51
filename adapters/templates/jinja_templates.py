from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from domain.ports.templates import ProjectTemplates

PROJECT_TEMPLATES_DIR = Path(__file__).parent / "project"


def _js_string(value: Any) -> str:
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _html_text(value: Any) -> str:
    return (
        str(value).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    )


def build_environment(directory: Path = PROJECT_TEMPLATES_DIR) -> Environment:
    environment = Environment(
        loader=FileSystemLoader(str(directory)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters["js_string"] = _js_string
    environment.filters["html_text"] = _html_text
    return environment


class JinjaProjectTemplates(ProjectTemplates):
    def __init__(self, directory: Path | None = None) -> None:
        self.environment = build_environment(directory or PROJECT_TEMPLATES_DIR)

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        template = self.environment.get_template(template_name)
        return template.render(**context)
