from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class ProjectTemplates(Protocol):
    def render(self, template_name: str, context: Mapping[str, Any]) -> str: ...
