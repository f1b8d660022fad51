from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from adapters.layout.text_metrics import StoredSizeMeasurer
from domain.errors import AmbiguousSizingError
from domain.models import (
    AUTO_LAYOUT_DISPLAYS,
    CompileDiagnostic,
    ConcreteSize,
    Element,
    SceneSnapshot,
    Size,
)
from domain.ports.layout import IntrinsicMeasurer, LayoutEngine, LayoutResolution
from domain.services.resolve_breakpoint_styles import (
    resolve_breakpoint_geometry,
    resolve_breakpoint_styles,
)
from domain.styles import LayoutStyles, SizingStyles, gap_value, padding_box

logger = logging.getLogger(__name__)

AXES = ("width", "height")
_REPEAT_RE = re.compile(r"repeat\(\s*(\d+)\s*,")


@dataclass(frozen=True)
class ParentContext:
    display: str = "block"
    direction: str = "row"
    width_mode: str = "fixed"
    height_mode: str = "fixed"
    inner_width: Optional[float] = None
    inner_height: Optional[float] = None
    main_fill_share: Optional[float] = None

    @classmethod
    def page(cls, width: float, height: float) -> ParentContext:
        return cls(
            display="flex",
            direction="column",
            inner_width=width,
            inner_height=height,
        )

    def is_auto_layout(self) -> bool:
        return self.display in AUTO_LAYOUT_DISPLAYS

    def main_axis(self) -> Optional[str]:
        if self.display != "flex":
            return None
        return "height" if self.direction in {"column", "column-reverse"} else "width"

    def axis_mode(self, axis: str) -> str:
        return self.width_mode if axis == "width" else self.height_mode

    def inner_extent(self, axis: str) -> Optional[float]:
        return self.inner_width if axis == "width" else self.inner_height


@dataclass(frozen=True)
class _Modes:
    width: str
    height: str
    fallback_axes: tuple[str, ...] = ()

    def of(self, axis: str) -> str:
        return self.width if axis == "width" else self.height


@dataclass
class _LayoutPass:
    snapshot: SceneSnapshot
    breakpoint_id: Optional[str]
    measurer: IntrinsicMeasurer
    root_id: Optional[str] = None
    root_width: Optional[float] = None
    sizes: Dict[str, ConcreteSize] = field(default_factory=dict)
    diagnostics: List[CompileDiagnostic] = field(default_factory=list)
    visiting: set[str] = field(default_factory=set)
    reported: set[tuple[str, str]] = field(default_factory=set)

    def styles_of(self, element: Element) -> dict:
        return resolve_breakpoint_styles(
            element.styles,
            element.responsive_styles,
            self.snapshot.breakpoints,
            self.breakpoint_id,
        )

    def geometry_of(self, element: Element) -> tuple[Size, bool]:
        size, _, visible = resolve_breakpoint_geometry(
            element, self.snapshot.breakpoints, self.breakpoint_id
        )
        if element.id == self.root_id and self.root_width is not None:
            has_override = any(
                isinstance(layer.get("size"), dict)
                for layer in element.responsive_styles.values()
            )
            if not has_override:
                size = Size(width=self.root_width, height=size.height)
        return size, visible

    def report(self, kind: str, element_id: Optional[str], message: str) -> None:
        key = (kind, f"{element_id}:{message}")
        if key in self.reported:
            return
        self.reported.add(key)
        self.diagnostics.append(
            CompileDiagnostic(kind=kind, element_id=element_id, message=message)
        )

    def effective_modes(self, element: Element, styles: dict, ctx: ParentContext) -> _Modes:
        sizing = SizingStyles.from_styles(styles)
        own_layout = LayoutStyles.from_styles(styles)
        in_flow = ctx.is_auto_layout() and element.position_type != "absolute"
        degrade_container = element.is_container() and not own_layout.is_auto_layout()
        modes: dict[str, str] = {}
        fallback: list[str] = []
        for axis in AXES:
            requested = sizing.mode(axis)
            if not in_flow:
                mode = "fixed"
            elif degrade_container and requested != "fixed":
                mode = "fixed"
            else:
                mode = requested
            if mode == "fill" and ctx.axis_mode(axis) == "hug":
                mode = "hug"
                fallback.append(axis)
            modes[axis] = mode
        return _Modes(modes["width"], modes["height"], tuple(fallback))

    def resolve(self, element_id: str, ctx: ParentContext) -> ConcreteSize:
        cached = self.sizes.get(element_id)
        if cached is not None:
            return cached
        element = self.snapshot.elements.get(element_id)
        if element is None:
            self.report("missing_element", element_id, f"Element {element_id} is missing")
            return ConcreteSize(width=0.0, height=0.0)
        if element_id in self.visiting:
            self.report("cycle", element_id, f"Element {element_id} is its own ancestor")
            return ConcreteSize(width=element.size.width, height=element.size.height)
        self.visiting.add(element_id)
        try:
            result = self._resolve_element(element, ctx)
        finally:
            self.visiting.discard(element_id)
        self.sizes[element_id] = result
        return result

    def _resolve_element(self, element: Element, ctx: ParentContext) -> ConcreteSize:
        styles = self.styles_of(element)
        stored, _ = self.geometry_of(element)
        modes = self.effective_modes(element, styles, ctx)
        sizing = SizingStyles.from_styles(styles)
        for axis in modes.fallback_axes:
            error = AmbiguousSizingError(element.id, axis)
            logger.warning("%s", error)
            self.report("ambiguous_sizing", element.id, str(error))

        values: dict[str, Optional[float]] = {}
        grow = False
        stretch = {"width": False, "height": False}
        for axis in AXES:
            mode = modes.of(axis)
            stored_value = stored.width if axis == "width" else stored.height
            if mode == "fixed":
                values[axis] = stored_value
            elif mode == "fill":
                filled = self._fill_extent(axis, ctx)
                if ctx.display == "flex" and axis == ctx.main_axis():
                    grow = True
                elif ctx.display == "flex":
                    stretch[axis] = True
                values[axis] = filled if filled is not None else stored_value
            else:
                values[axis] = None

        own_layout = LayoutStyles.from_styles(styles)
        if element.children:
            hugged = self._resolve_children(element, styles, own_layout, modes, values)
        else:
            hugged = None
        for axis in AXES:
            if values[axis] is not None:
                continue
            if hugged is not None and element.is_container():
                values[axis] = hugged[axis]
            elif element.is_container():
                top, right, bottom, left = padding_box(styles)
                values[axis] = (left + right) if axis == "width" else (top + bottom)
            else:
                measured = self.measurer.measure(
                    element.model_copy(update={"styles": styles}),
                    max_width=values["width"] if values["width"] is not None else ctx.inner_width,
                )
                values[axis] = measured.width if axis == "width" else measured.height

        width = sizing.clamp("width", max(0.0, float(values["width"] or 0.0)))
        height = sizing.clamp("height", max(0.0, float(values["height"] or 0.0)))
        return ConcreteSize(
            width=round(width, 4),
            height=round(height, 4),
            width_mode=modes.width,
            height_mode=modes.height,
            grow=grow,
            stretch_width=stretch["width"],
            stretch_height=stretch["height"],
            fallback_axes=modes.fallback_axes,
        )

    def _fill_extent(self, axis: str, ctx: ParentContext) -> Optional[float]:
        if ctx.display == "flex" and axis == ctx.main_axis():
            return ctx.main_fill_share
        return ctx.inner_extent(axis)

    def _resolve_children(
        self,
        element: Element,
        styles: dict,
        own_layout: LayoutStyles,
        modes: _Modes,
        values: dict[str, Optional[float]],
    ) -> Optional[dict[str, float]]:
        top, right, bottom, left = padding_box(styles)
        inner = {
            "width": None if values["width"] is None else max(0.0, values["width"] - left - right),
            "height": (
                None if values["height"] is None else max(0.0, values["height"] - top - bottom)
            ),
        }
        display = own_layout.display if own_layout.is_auto_layout() else "block"
        direction = own_layout.flex_direction or "row"
        children: list[Element] = []
        for child_id in element.children:
            child = self.snapshot.elements.get(child_id)
            if child is None:
                self.report(
                    "missing_child", element.id, f"Child {child_id} of {element.id} is missing"
                )
                continue
            children.append(child)

        if display == "grid":
            return self._resolve_grid_children(element, styles, own_layout, modes, inner, children)

        base_ctx = ParentContext(
            display=display or "block",
            direction=direction,
            width_mode=modes.width,
            height_mode=modes.height,
            inner_width=inner["width"],
            inner_height=inner["height"],
        )
        main_axis = base_ctx.main_axis()
        flow: list[Element] = []
        fill_main: list[Element] = []
        for child in children:
            child_styles = self.styles_of(child)
            _, visible = self.geometry_of(child)
            in_flow = base_ctx.is_auto_layout() and child.position_type != "absolute" and visible
            if in_flow:
                flow.append(child)
            child_modes = self.effective_modes(child, child_styles, base_ctx)
            if in_flow and main_axis is not None and child_modes.of(main_axis) == "fill":
                fill_main.append(child)
            else:
                self.resolve(child.id, base_ctx)

        gap = gap_value(styles, main_axis or "width")
        if fill_main and main_axis is not None:
            used = sum(
                self._axis_size(self.sizes[child.id], main_axis)
                for child in flow
                if child not in fill_main and child.id in self.sizes
            )
            gaps = gap * max(len(flow) - 1, 0)
            available = inner[main_axis]
            share = None
            if available is not None:
                share = max(0.0, (available - used - gaps) / len(fill_main))
            fill_ctx = ParentContext(
                display=base_ctx.display,
                direction=base_ctx.direction,
                width_mode=base_ctx.width_mode,
                height_mode=base_ctx.height_mode,
                inner_width=base_ctx.inner_width,
                inner_height=base_ctx.inner_height,
                main_fill_share=share,
            )
            for child in fill_main:
                self.resolve(child.id, fill_ctx)

        if not base_ctx.is_auto_layout():
            return None
        flow_sizes = [self.sizes[child.id] for child in flow if child.id in self.sizes]
        cross_axis = "height" if main_axis == "width" else "width"
        main_total = sum(self._axis_size(size, main_axis or "width") for size in flow_sizes)
        main_total += gap * max(len(flow_sizes) - 1, 0)
        cross_total = max((self._axis_size(size, cross_axis) for size in flow_sizes), default=0.0)
        hugged = {main_axis or "width": main_total, cross_axis: cross_total}
        return {
            "width": hugged["width"] + left + right,
            "height": hugged["height"] + top + bottom,
        }

    def _resolve_grid_children(
        self,
        element: Element,
        styles: dict,
        own_layout: LayoutStyles,
        modes: _Modes,
        inner: dict[str, Optional[float]],
        children: list[Element],
    ) -> dict[str, float]:
        top, right, bottom, left = padding_box(styles)
        flow = [
            child
            for child in children
            if child.position_type != "absolute" and self.geometry_of(child)[1]
        ]
        columns = grid_column_count(own_layout.grid_template_columns)
        rows = max(1, math.ceil(len(flow) / columns)) if flow else 1
        column_gap = gap_value(styles, "width")
        row_gap = gap_value(styles, "height")
        cell_width = None
        if inner["width"] is not None:
            cell_width = max(0.0, (inner["width"] - column_gap * (columns - 1)) / columns)
        cell_height = None
        if inner["height"] is not None:
            cell_height = max(0.0, (inner["height"] - row_gap * (rows - 1)) / rows)
        cell_ctx = ParentContext(
            display="grid",
            width_mode=modes.width,
            height_mode=modes.height,
            inner_width=cell_width,
            inner_height=cell_height,
        )
        for child in children:
            self.resolve(child.id, cell_ctx)
        flow_sizes = [self.sizes[child.id] for child in flow if child.id in self.sizes]
        widest = max((size.width for size in flow_sizes), default=0.0)
        tallest = max((size.height for size in flow_sizes), default=0.0)
        used_columns = min(columns, len(flow_sizes)) or 1
        return {
            "width": used_columns * widest + column_gap * (used_columns - 1) + left + right,
            "height": rows * tallest + row_gap * (rows - 1) + top + bottom,
        }

    @staticmethod
    def _axis_size(size: ConcreteSize, axis: str) -> float:
        return size.width if axis == "width" else size.height


def grid_column_count(template: Optional[str]) -> int:
    if not template:
        return 1
    match = _REPEAT_RE.search(template)
    if match:
        return max(1, int(match.group(1)))
    return max(1, len(template.split()))


class AutoLayoutEngine(LayoutEngine):
    def __init__(self, measurer: IntrinsicMeasurer | None = None) -> None:
        self.measurer = measurer or StoredSizeMeasurer()

    def resolve_tree(
        self,
        snapshot: SceneSnapshot,
        root_id: str,
        breakpoint_id: Optional[str] = None,
    ) -> LayoutResolution:
        target = breakpoint_id or snapshot.current_breakpoint_id or snapshot.base_breakpoint_id()
        viewport = next((bp for bp in snapshot.breakpoints if bp.id == target), None)
        page = next(
            (page for page in snapshot.pages.values() if page.root_element_id == root_id), None
        )
        width = viewport.width if viewport is not None else (page.width if page else 0.0)
        height = page.height if page is not None else (viewport.height if viewport else 0.0)
        layout_pass = _LayoutPass(
            snapshot=snapshot,
            breakpoint_id=target,
            measurer=self.measurer,
            root_id=root_id,
            root_width=width,
        )
        layout_pass.resolve(root_id, ParentContext.page(width, height))
        return LayoutResolution(
            sizes=dict(layout_pass.sizes), diagnostics=tuple(layout_pass.diagnostics)
        )


def resolve_size(
    element: Element,
    parent_context: ParentContext,
    snapshot: SceneSnapshot | None = None,
    *,
    breakpoint_id: Optional[str] = None,
    measurer: IntrinsicMeasurer | None = None,
    diagnostics: List[CompileDiagnostic] | None = None,
) -> ConcreteSize:
    if snapshot is None or element.id not in snapshot.elements:
        if snapshot is None:
            snapshot = SceneSnapshot.capture({element.id: element}, {})
        else:
            snapshot = SceneSnapshot.capture(
                {**snapshot.elements, element.id: element},
                snapshot.pages,
                snapshot.breakpoints,
                snapshot.current_page_id,
                snapshot.current_breakpoint_id,
            )
    layout_pass = _LayoutPass(
        snapshot=snapshot,
        breakpoint_id=breakpoint_id or snapshot.base_breakpoint_id(),
        measurer=measurer or StoredSizeMeasurer(),
    )
    result = layout_pass.resolve(element.id, parent_context)
    if diagnostics is not None:
        diagnostics.extend(layout_pass.diagnostics)
    return result
