from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Optional

from domain.element_defaults import default_element_config, default_element_name
from domain.errors import ElementNotFound, PageNotFound, StructuralError
from domain.models import (
    AUTO_LAYOUT_DISPLAYS,
    DEFAULT_BREAKPOINTS,
    Animation,
    Breakpoint,
    DesignDocument,
    Element,
    HistoryEntry,
    Page,
    Position,
    SceneSnapshot,
    Size,
    Variant,
    order_breakpoints,
)

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

DEFAULT_HISTORY_LIMIT = 50
INITIAL_HISTORY_LABEL = "Initial"
UPDATABLE_ELEMENT_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "content",
        "src",
        "alt",
        "crop",
        "href",
        "target",
        "placeholder",
        "input_type",
        "icon_name",
        "video_src",
        "autoplay",
        "loop",
        "muted",
        "controls",
        "model_src",
        "aria_label",
        "visible",
        "locked",
        "position_type",
    }
)


def default_id_factory() -> str:
    return f"el_{uuid.uuid4().hex[:12]}"


def collect_subtree(elements: Mapping[str, Element], root_id: str) -> list[str]:
    ordered: list[str] = []
    visited: set[str] = set()
    stack = [root_id]
    while stack:
        current = stack.pop()
        if current in visited or current not in elements:
            continue
        visited.add(current)
        ordered.append(current)
        stack.extend(reversed(elements[current].children))
    return ordered


def check_tree_integrity(elements: Mapping[str, Element]) -> list[str]:
    problems: list[str] = []
    for element in elements.values():
        for child_id in element.children:
            child = elements.get(child_id)
            if child is None:
                problems.append(f"{element.id}: child {child_id} is missing")
            elif child.parent_id != element.id:
                problems.append(
                    f"{element.id}: child {child_id} points to parent {child.parent_id}"
                )
        if element.parent_id is not None:
            parent = elements.get(element.parent_id)
            if parent is None:
                problems.append(f"{element.id}: parent {element.parent_id} is missing")
            elif element.id not in parent.children:
                problems.append(f"{element.id}: not listed by parent {element.parent_id}")
    for element_id in elements:
        seen: set[str] = set()
        current: Optional[str] = element_id
        while current is not None and current in elements:
            if current in seen:
                problems.append(f"{element_id}: parent chain contains a cycle")
                break
            seen.add(current)
            current = elements[current].parent_id
    return problems


def is_auto_layout_container(element: Optional[Element]) -> bool:
    if element is None:
        return False
    return element.styles.get("display") in AUTO_LAYOUT_DISPLAYS


def _merge_patch(current: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(current)
    for key, value in patch.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


class SceneGraphStore:
    def __init__(
        self,
        *,
        project_name: str = "Untitled",
        breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        id_factory: IdFactory | None = None,
        clock: Callable[[], float] | None = None,
        create_initial_page: bool = True,
    ) -> None:
        if history_limit < 1:
            msg = "history_limit must be at least 1"
            raise ValueError(msg)
        self.project_name = project_name
        self._breakpoints = order_breakpoints(breakpoints or DEFAULT_BREAKPOINTS)
        self._history_limit = history_limit
        self._id_factory = id_factory or default_id_factory
        self._clock = clock or time.time
        self._elements: dict[str, Element] = {}
        self._pages: dict[str, Page] = {}
        self._history: list[HistoryEntry] = []
        self._history_index = -1
        self._gesture_depth = 0
        self.current_page_id: Optional[str] = None
        self.current_breakpoint_id: Optional[str] = self._breakpoints[0].id
        self.selected_ids: list[str] = []
        if create_initial_page:
            self.add_page("Page 1")
            self.save_to_history(INITIAL_HISTORY_LABEL)

    @property
    def elements(self) -> Mapping[str, Element]:
        return MappingProxyType(self._elements)

    @property
    def pages(self) -> Mapping[str, Page]:
        return MappingProxyType(self._pages)

    @property
    def breakpoints(self) -> tuple[Breakpoint, ...]:
        return self._breakpoints

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def history_limit(self) -> int:
        return self._history_limit

    def can_undo(self) -> bool:
        return self._history_index > 0

    def can_redo(self) -> bool:
        return self._history_index < len(self._history) - 1

    def get_element(self, element_id: str) -> Element:
        element = self._elements.get(element_id)
        if element is None:
            raise ElementNotFound(element_id)
        return element

    def get_page(self, page_id: str) -> Page:
        page = self._pages.get(page_id)
        if page is None:
            raise PageNotFound(page_id)
        return page

    def current_page(self) -> Optional[Page]:
        if self.current_page_id is None:
            return None
        return self._pages.get(self.current_page_id)

    def page_for_element(self, element_id: str) -> Optional[Page]:
        root_id = self._root_of(element_id)
        for page in self._pages.values():
            if page.root_element_id == root_id:
                return page
        return None

    # Elements

    def create_element(
        self,
        element_type: str,
        parent_id: str,
        position: Position | Mapping[str, float] | None = None,
        *,
        index: int | None = None,
    ) -> str:
        parent = self.get_element(parent_id)
        config = default_element_config(element_type)
        element_id = self._id_factory()
        element = Element.model_validate(
            {
                **config,
                "id": element_id,
                "type": element_type,
                "name": default_element_name(element_type),
                "parent_id": parent.id,
                "position": self._coerce_position(position, Position()),
                "position_type": "relative" if is_auto_layout_container(parent) else "absolute",
            }
        )
        self.insert_element(element, index=index)
        return element_id

    def insert_element(self, element: Element, *, index: int | None = None) -> str:
        if element.parent_id is None:
            msg = f"Element {element.id} needs a parent to be inserted"
            raise StructuralError(msg)
        parent = self.get_element(element.parent_id)
        if element.id in self._elements:
            msg = f"Element id already exists: {element.id}"
            raise StructuralError(msg)
        self._elements[element.id] = element.model_copy(update={"children": []})
        self._elements[parent.id] = parent.model_copy(
            update={"children": self._insert_id(parent.children, element.id, index)}
        )
        return element.id

    def new_element_id(self) -> str:
        return self._id_factory()

    def delete_element(self, element_id: str) -> list[str]:
        element = self.get_element(element_id)
        if self._is_page_root(element_id):
            msg = f"Element {element_id} is a page root; delete the page instead"
            raise StructuralError(msg)
        removed = collect_subtree(self._elements, element_id)
        parent = self._elements.get(element.parent_id or "")
        if parent is not None:
            self._elements[parent.id] = parent.model_copy(
                update={"children": [cid for cid in parent.children if cid != element_id]}
            )
        for removed_id in removed:
            self._elements.pop(removed_id, None)
        removed_set = set(removed)
        self.selected_ids = [sid for sid in self.selected_ids if sid not in removed_set]
        return removed

    def move_element(self, element_id: str, position: Position | Mapping[str, float]) -> None:
        element = self.get_element(element_id)
        self._elements[element_id] = element.model_copy(
            update={"position": self._coerce_position(position, element.position)}
        )

    def resize_element(self, element_id: str, size: Size | Mapping[str, float]) -> None:
        element = self.get_element(element_id)
        if isinstance(size, Size):
            new_size = size
        else:
            new_size = Size(
                width=max(0.0, float(size.get("width", element.size.width))),
                height=max(0.0, float(size.get("height", element.size.height))),
            )
        self._elements[element_id] = element.model_copy(update={"size": new_size})

    def update_element_styles(self, element_id: str, patch: Mapping[str, Any]) -> None:
        element = self.get_element(element_id)
        self._elements[element_id] = element.model_copy(
            update={"styles": _merge_patch(element.styles, patch)}
        )

    def update_responsive_styles(
        self, element_id: str, breakpoint_id: str, patch: Mapping[str, Any]
    ) -> None:
        element = self.get_element(element_id)
        if breakpoint_id not in {bp.id for bp in self._breakpoints}:
            msg = f"Unknown breakpoint: {breakpoint_id}"
            raise ValueError(msg)
        layers = {key: dict(value) for key, value in element.responsive_styles.items()}
        layer = _merge_patch(layers.get(breakpoint_id, {}), patch)
        if layer:
            layers[breakpoint_id] = layer
        else:
            layers.pop(breakpoint_id, None)
        self._elements[element_id] = element.model_copy(update={"responsive_styles": layers})

    def clear_responsive_styles(self, element_id: str, breakpoint_id: str) -> None:
        element = self.get_element(element_id)
        layers = {
            key: dict(value)
            for key, value in element.responsive_styles.items()
            if key != breakpoint_id
        }
        self._elements[element_id] = element.model_copy(update={"responsive_styles": layers})

    def update_element(self, element_id: str, **fields: Any) -> None:
        element = self.get_element(element_id)
        unknown = sorted(set(fields) - UPDATABLE_ELEMENT_FIELDS)
        if unknown:
            msg = f"Fields cannot be updated directly: {', '.join(unknown)}"
            raise ValueError(msg)
        payload = element.model_dump()
        payload.update(fields)
        self._elements[element_id] = Element.model_validate(payload)

    def add_variant(self, element_id: str, variant: Variant | Mapping[str, Any]) -> None:
        element = self.get_element(element_id)
        parsed = variant if isinstance(variant, Variant) else Variant.model_validate(variant)
        variants = [item for item in element.variants if item.id != parsed.id]
        variants.append(parsed)
        self._elements[element_id] = element.model_copy(update={"variants": variants})

    def remove_variant(self, element_id: str, variant_id: str) -> bool:
        element = self.get_element(element_id)
        variants = [item for item in element.variants if item.id != variant_id]
        if len(variants) == len(element.variants):
            return False
        self._elements[element_id] = element.model_copy(update={"variants": variants})
        return True

    def add_animation(self, element_id: str, animation: Animation | Mapping[str, Any]) -> None:
        element = self.get_element(element_id)
        parsed = (
            animation if isinstance(animation, Animation) else Animation.model_validate(animation)
        )
        animations = [item for item in element.animations if item.id != parsed.id]
        animations.append(parsed)
        self._elements[element_id] = element.model_copy(update={"animations": animations})

    def remove_animation(self, element_id: str, animation_id: str) -> bool:
        element = self.get_element(element_id)
        animations = [item for item in element.animations if item.id != animation_id]
        if len(animations) == len(element.animations):
            return False
        self._elements[element_id] = element.model_copy(update={"animations": animations})
        return True

    def reparent_element(
        self, element_id: str, new_parent_id: str, index: int | None = None
    ) -> None:
        element = self.get_element(element_id)
        new_parent = self.get_element(new_parent_id)
        if self._is_page_root(element_id):
            msg = f"Page root {element_id} cannot be reparented"
            raise StructuralError(msg)
        if new_parent_id in collect_subtree(self._elements, element_id):
            msg = f"Cannot move {element_id} under its own subtree ({new_parent_id})"
            raise StructuralError(msg)
        old_parent = self._elements.get(element.parent_id or "")
        if old_parent is not None:
            remaining = [cid for cid in old_parent.children if cid != element_id]
            self._elements[old_parent.id] = old_parent.model_copy(update={"children": remaining})
            if old_parent.id == new_parent_id:
                new_parent = self._elements[new_parent_id]
        self._elements[new_parent_id] = new_parent.model_copy(
            update={"children": self._insert_id(new_parent.children, element_id, index)}
        )
        self._elements[element_id] = element.model_copy(
            update={
                "parent_id": new_parent_id,
                "position_type": (
                    "relative" if is_auto_layout_container(new_parent) else "absolute"
                ),
            }
        )

    def clear_children(self, element_id: str) -> list[str]:
        element = self.get_element(element_id)
        removed: list[str] = []
        for child_id in list(element.children):
            if child_id in self._elements:
                removed.extend(self.delete_element(child_id))
        self._elements[element_id] = self._elements[element_id].model_copy(
            update={"children": []}
        )
        return removed

    # Pages

    def add_page(self, name: str | None = None) -> str:
        page_id = f"page_{uuid.uuid4().hex[:12]}"
        root_id = self._id_factory()
        base = self._breakpoints[0]
        config = default_element_config("page")
        config["size"] = {"width": base.width, "height": base.height or 900.0}
        offset_x = sum(page.width + 100.0 for page in self._pages.values())
        page_name = name or f"Page {len(self._pages) + 1}"
        self._elements[root_id] = Element.model_validate(
            {**config, "id": root_id, "type": "page", "name": page_name, "parent_id": None}
        )
        self._pages[page_id] = Page(
            id=page_id,
            name=page_name,
            root_element_id=root_id,
            width=base.width,
            height=base.height or 900.0,
            x=offset_x,
        )
        if self.current_page_id is None:
            self.current_page_id = page_id
        return page_id

    def rename_page(self, page_id: str, name: str) -> None:
        page = self.get_page(page_id)
        self._pages[page_id] = page.model_copy(update={"name": name})
        root = self._elements.get(page.root_element_id)
        if root is not None:
            self._elements[root.id] = root.model_copy(update={"name": name})

    def delete_page(self, page_id: str) -> list[str]:
        page = self.get_page(page_id)
        if len(self._pages) <= 1:
            msg = "Cannot delete the last page"
            raise StructuralError(msg)
        removed = collect_subtree(self._elements, page.root_element_id)
        for removed_id in removed:
            self._elements.pop(removed_id, None)
        del self._pages[page_id]
        removed_set = set(removed)
        self.selected_ids = [sid for sid in self.selected_ids if sid not in removed_set]
        if self.current_page_id == page_id:
            self.current_page_id = next(iter(self._pages))
        return removed

    def duplicate_page(self, page_id: str) -> str:
        page = self.get_page(page_id)
        subtree = collect_subtree(self._elements, page.root_element_id)
        id_map = {old_id: self._id_factory() for old_id in subtree}
        for old_id in subtree:
            source = self._elements[old_id]
            self._elements[id_map[old_id]] = source.model_copy(
                update={
                    "id": id_map[old_id],
                    "parent_id": id_map.get(source.parent_id or ""),
                    "children": [id_map[cid] for cid in source.children if cid in id_map],
                },
                deep=True,
            )
        new_page_id = f"page_{uuid.uuid4().hex[:12]}"
        offset_x = max((item.x + item.width for item in self._pages.values()), default=0.0)
        self._pages[new_page_id] = page.model_copy(
            update={
                "id": new_page_id,
                "name": f"{page.name} (Copy)",
                "root_element_id": id_map[page.root_element_id],
                "x": offset_x + 100.0,
            }
        )
        return new_page_id

    # Selection and view state

    def set_current_page(self, page_id: str) -> None:
        self.get_page(page_id)
        self.current_page_id = page_id
        self.selected_ids = []

    def set_current_breakpoint(self, breakpoint_id: str) -> None:
        if breakpoint_id not in {bp.id for bp in self._breakpoints}:
            msg = f"Unknown breakpoint: {breakpoint_id}"
            raise ValueError(msg)
        self.current_breakpoint_id = breakpoint_id

    def select(self, element_ids: Iterable[str], *, additive: bool = False) -> None:
        ids = list(element_ids)
        for element_id in ids:
            self.get_element(element_id)
        selected = list(self.selected_ids) if additive else []
        for element_id in ids:
            if element_id not in selected:
                selected.append(element_id)
        self.selected_ids = selected

    def deselect_all(self) -> None:
        self.selected_ids = []

    # History

    def save_to_history(self, label: str) -> None:
        if self._gesture_depth > 0:
            return
        entry = HistoryEntry(
            elements=dict(self._elements),
            pages=dict(self._pages),
            timestamp=self._clock(),
            action=label,
        )
        del self._history[self._history_index + 1 :]
        self._history.append(entry)
        overflow = len(self._history) - self._history_limit
        if overflow > 0:
            del self._history[:overflow]
        self._history_index = len(self._history) - 1
        logger.debug("History saved: %s (%d entries)", label, len(self._history))

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._history_index -= 1
        self._restore(self._history[self._history_index])
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._history_index += 1
        self._restore(self._history[self._history_index])
        return True

    @contextmanager
    def gesture(self, label: str) -> Iterator[SceneGraphStore]:
        self._gesture_depth += 1
        try:
            yield self
        except BaseException:
            self._gesture_depth -= 1
            if self._gesture_depth == 0 and 0 <= self._history_index < len(self._history):
                self._restore(self._history[self._history_index])
            raise
        self._gesture_depth -= 1
        if self._gesture_depth == 0:
            self.save_to_history(label)

    # Snapshots and persistence

    def snapshot(self) -> SceneSnapshot:
        return SceneSnapshot.capture(
            self._elements,
            self._pages,
            self._breakpoints,
            self.current_page_id,
            self.current_breakpoint_id,
        )

    def to_document(self) -> DesignDocument:
        return DesignDocument(
            project_name=self.project_name,
            pages=dict(self._pages),
            elements=dict(self._elements),
            current_page_id=self.current_page_id,
            breakpoints=list(self._breakpoints),
            history=list(self._history),
            history_index=self._history_index,
        )

    @classmethod
    def from_document(
        cls,
        document: DesignDocument,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        id_factory: IdFactory | None = None,
        clock: Callable[[], float] | None = None,
    ) -> SceneGraphStore:
        store = cls(
            project_name=document.project_name,
            breakpoints=document.breakpoints or DEFAULT_BREAKPOINTS,
            history_limit=history_limit,
            id_factory=id_factory,
            clock=clock,
            create_initial_page=False,
        )
        store._elements = dict(document.elements)
        store._pages = dict(document.pages)
        store.current_page_id = document.current_page_id
        if store.current_page_id not in store._pages:
            store.current_page_id = next(iter(store._pages), None)
        if not store._pages:
            store.add_page("Page 1")
        history = list(document.history)[-history_limit:]
        if history:
            store._history = history
            store._history_index = min(max(document.history_index, 0), len(history) - 1)
        else:
            store.save_to_history(INITIAL_HISTORY_LABEL)
        return store

    # Internals

    def _restore(self, entry: HistoryEntry) -> None:
        self._elements = dict(entry.elements)
        self._pages = dict(entry.pages)
        if self.current_page_id not in self._pages:
            self.current_page_id = next(iter(self._pages), None)
        self.selected_ids = [sid for sid in self.selected_ids if sid in self._elements]

    def _is_page_root(self, element_id: str) -> bool:
        return any(page.root_element_id == element_id for page in self._pages.values())

    def _root_of(self, element_id: str) -> Optional[str]:
        current = self._elements.get(element_id)
        visited: set[str] = set()
        while current is not None and current.parent_id is not None:
            if current.id in visited:
                return None
            visited.add(current.id)
            current = self._elements.get(current.parent_id)
        return current.id if current is not None else None

    @staticmethod
    def _insert_id(children: Sequence[str], element_id: str, index: int | None) -> list[str]:
        updated = [cid for cid in children if cid != element_id]
        if index is None or index >= len(updated):
            updated.append(element_id)
        else:
            updated.insert(max(0, index), element_id)
        return updated

    @staticmethod
    def _coerce_position(
        position: Position | Mapping[str, float] | None, current: Position
    ) -> Position:
        if position is None:
            return current
        if isinstance(position, Position):
            return position
        return Position(
            x=float(position.get("x", current.x)), y=float(position.get("y", current.y))
        )
