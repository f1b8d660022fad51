from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from domain.errors import NothingToCompileError, PageNotFound
from domain.models import (
    Breakpoint,
    CompileDiagnostic,
    Element,
    GeneratedProject,
    Page,
    SceneSnapshot,
)
from domain.ports.layout import LayoutEngine, LayoutResolution
from domain.ports.templates import ProjectTemplates
from domain.services.compile_utility_classes import (
    breakpoint_prefix,
    compile_utility_classes,
    default_type_classes,
    interaction_tokens,
    responsive_tokens,
)
from domain.services.compile_variants import compile_stylesheet_rules
from domain.services.emit_markup import MarkupEmitter
from domain.services.resolve_breakpoint_styles import (
    resolve_breakpoint_geometry,
    resolve_breakpoint_styles,
)
from domain.services.scene_graph_store import collect_subtree

logger = logging.getLogger(__name__)

PROJECT_FILE_TEMPLATES: Mapping[str, str] = {
    "src/App.jsx": "App.jsx.j2",
    "src/main.jsx": "main.jsx.j2",
    "src/index.css": "index.css.j2",
    "index.html": "index.html.j2",
    "package.json": "package.json.j2",
    "vite.config.js": "vite.config.js.j2",
    "tailwind.config.js": "tailwind.config.js.j2",
    "postcss.config.js": "postcss.config.js.j2",
}
ROOT_CLASSES = ("min-h-screen", "w-full")
MARKUP_BASE_DEPTH = 3
DEFAULT_PROJECT_TITLE = "Canvas Preview"
DEFAULT_PACKAGE_NAME = "canvas-preview"


@dataclass(frozen=True)
class CompileOptions:
    project_title: str = DEFAULT_PROJECT_TITLE
    package_name: str = DEFAULT_PACKAGE_NAME
    responsive: bool = True


def _dedupe_diagnostics(items: Sequence[CompileDiagnostic]) -> list[CompileDiagnostic]:
    seen: set[tuple[str, Optional[str], str]] = set()
    unique: list[CompileDiagnostic] = []
    for item in items:
        key = (item.kind, item.element_id, item.message)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def _visible_in_cascade(
    element: Element, snapshot: SceneSnapshot, cascade: Sequence[Breakpoint]
) -> bool:
    return any(
        resolve_breakpoint_geometry(element, snapshot.breakpoints, breakpoint.id)[2]
        for breakpoint in cascade
    )


class ProjectCompiler:
    def __init__(
        self,
        layout_engine: LayoutEngine,
        templates: ProjectTemplates,
        emitter: MarkupEmitter | None = None,
        options: CompileOptions | None = None,
    ) -> None:
        self.layout_engine = layout_engine
        self.templates = templates
        self.emitter = emitter or MarkupEmitter()
        self.options = options or CompileOptions()

    def compile(
        self,
        snapshot: SceneSnapshot,
        page_id: str | None = None,
        breakpoint_id: str | None = None,
    ) -> GeneratedProject:
        page = self._select_page(snapshot, page_id)
        root = snapshot.elements.get(page.root_element_id)
        if root is None:
            msg = f"Page {page.id} has no root element {page.root_element_id}"
            raise NothingToCompileError(msg)

        cascade = self._cascade(snapshot, breakpoint_id)
        diagnostics: list[CompileDiagnostic] = []
        layouts: dict[str, LayoutResolution] = {}
        for breakpoint in cascade:
            resolution = self.layout_engine.resolve_tree(snapshot, root.id, breakpoint.id)
            layouts[breakpoint.id] = resolution
            diagnostics.extend(resolution.diagnostics)

        subtree = collect_subtree(snapshot.elements, root.id)
        class_lists: dict[str, list[str]] = {}
        for element_id in subtree:
            element = snapshot.elements[element_id]
            class_lists[element_id] = self._element_classes(
                element, snapshot, cascade, layouts, diagnostics, is_root=element_id == root.id
            )

        visible_ids = {
            element_id
            for element_id in subtree
            if _visible_in_cascade(snapshot.elements[element_id], snapshot, cascade)
        }
        visible_children = [child_id for child_id in root.children if child_id in visible_ids]
        emitted = self.emitter.emit(
            snapshot,
            root.id,
            class_lists,
            depth=MARKUP_BASE_DEPTH,
            visible_ids=visible_ids,
        )
        diagnostics.extend(emitted.diagnostics)
        emitted_ids = set(emitted.emitted_ids)
        stylesheet_rules = compile_stylesheet_rules(
            snapshot.elements[element_id] for element_id in subtree if element_id in emitted_ids
        )

        context: dict[str, Any] = {
            "markup": emitted.markup,
            "empty": not visible_children,
            "page_name": page.name,
            "background_color": root.styles.get("backgroundColor") or page.background_color,
            "stylesheet_rules": stylesheet_rules,
            "uses_model_viewer": any(
                snapshot.elements[element_id].type == "model3d" for element_id in emitted_ids
            ),
            "project_title": self.options.project_title,
            "package_name": self.options.package_name,
        }
        files = {
            path: self.templates.render(template_name, context)
            for path, template_name in PROJECT_FILE_TEMPLATES.items()
        }
        unique = _dedupe_diagnostics(diagnostics)
        logger.info(
            "Compiled page %s: %d elements, %d diagnostics",
            page.id,
            len(emitted_ids),
            len(unique),
        )
        return GeneratedProject(files=files, diagnostics=unique)

    def _select_page(self, snapshot: SceneSnapshot, page_id: str | None) -> Page:
        if page_id is not None:
            page = snapshot.pages.get(page_id)
            if page is None:
                raise PageNotFound(page_id)
            return page
        page = snapshot.current_page()
        if page is None:
            msg = "No current page to compile"
            raise NothingToCompileError(msg)
        return page

    def _cascade(self, snapshot: SceneSnapshot, breakpoint_id: str | None) -> list[Breakpoint]:
        ordered = list(snapshot.breakpoints)
        if not ordered:
            msg = "Document declares no breakpoints"
            raise NothingToCompileError(msg)
        start = 0
        if breakpoint_id is not None:
            ids = [bp.id for bp in ordered]
            if breakpoint_id not in ids:
                msg = f"Unknown breakpoint: {breakpoint_id}"
                raise ValueError(msg)
            start = ids.index(breakpoint_id)
        cascade = ordered[start:]
        return cascade if self.options.responsive else cascade[:1]

    def _element_classes(
        self,
        element: Element,
        snapshot: SceneSnapshot,
        cascade: Sequence[Breakpoint],
        layouts: Mapping[str, LayoutResolution],
        diagnostics: list[CompileDiagnostic],
        *,
        is_root: bool,
    ) -> list[str]:
        try:
            return self._responsive_classes(element, snapshot, cascade, layouts, is_root=is_root)
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning("Falling back to default classes for %s: %s", element.id, exc)
            diagnostics.append(
                CompileDiagnostic(
                    kind="class_fallback",
                    element_id=element.id,
                    message=f"Could not compile classes: {exc}",
                )
            )
            return list(default_type_classes(element.type)[0])

    def _breakpoint_tokens(
        self,
        element: Element,
        snapshot: SceneSnapshot,
        breakpoint: Breakpoint,
        layout: LayoutResolution,
        *,
        is_root: bool,
    ) -> tuple[list[str], bool]:
        styles = resolve_breakpoint_styles(
            element.styles, element.responsive_styles, snapshot.breakpoints, breakpoint.id
        )
        _, _, visible = resolve_breakpoint_geometry(element, snapshot.breakpoints, breakpoint.id)
        size = None if is_root else layout.size_of(element.id)
        tokens = compile_utility_classes(
            styles, size, element.type, is_container=element.is_container()
        )
        if is_root:
            tokens.extend(token for token in ROOT_CLASSES if token not in tokens)
        return tokens, visible

    def _responsive_classes(
        self,
        element: Element,
        snapshot: SceneSnapshot,
        cascade: Sequence[Breakpoint],
        layouts: Mapping[str, LayoutResolution],
        *,
        is_root: bool,
    ) -> list[str]:
        base = cascade[0]
        tokens, visible = self._breakpoint_tokens(
            element, snapshot, base, layouts[base.id], is_root=is_root
        )
        classes = list(tokens)
        if not visible:
            classes.append("hidden")
        wider_tokens, wider_visible = tokens, visible
        for breakpoint in cascade[1:]:
            narrower_tokens, narrower_visible = self._breakpoint_tokens(
                element, snapshot, breakpoint, layouts[breakpoint.id], is_root=is_root
            )
            prefix = breakpoint_prefix(breakpoint)
            if narrower_visible:
                classes.extend(responsive_tokens(wider_tokens, narrower_tokens, breakpoint))
                if not wider_visible:
                    display = next(
                        (t for t in narrower_tokens if t in ("flex", "grid", "block", "inline")),
                        "block",
                    )
                    classes.append(f"{prefix}{display}")
            elif wider_visible:
                classes.append(f"{prefix}hidden")
            wider_tokens, wider_visible = narrower_tokens, narrower_visible

        base_styles = resolve_breakpoint_styles(
            element.styles, element.responsive_styles, snapshot.breakpoints, base.id
        )
        for token in interaction_tokens(
            element.type, base_styles, has_variants=bool(element.variants)
        ):
            if token not in classes:
                classes.append(token)
        return classes
