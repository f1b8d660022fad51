from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional, Protocol

from domain.models import CompileDiagnostic, ConcreteSize, Element, SceneSnapshot, Size


@dataclass(frozen=True)
class LayoutResolution:
    sizes: Mapping[str, ConcreteSize] = field(default_factory=dict)
    diagnostics: tuple[CompileDiagnostic, ...] = ()

    def size_of(self, element_id: str) -> Optional[ConcreteSize]:
        return self.sizes.get(element_id)


class IntrinsicMeasurer(Protocol):
    def measure(self, element: Element, max_width: Optional[float] = None) -> Size: ...


class LayoutEngine(Protocol):
    def resolve_tree(
        self,
        snapshot: SceneSnapshot,
        root_id: str,
        breakpoint_id: Optional[str] = None,
    ) -> LayoutResolution: ...
