from __future__ import annotations

import math

import pytest

from adapters.layout.auto_layout import (
    AutoLayoutEngine,
    ParentContext,
    grid_column_count,
    resolve_size,
)
from domain.models import SIZING_MODES, Element
from tests.helpers.document_builders import ROOT_ID, build_snapshot, element, page_root


def _text(
    element_id: str, parent_id: str, width: float, height: float, **styles: object
) -> Element:
    return element(
        element_id,
        "text",
        parent_id=parent_id,
        content=element_id,
        size={"width": width, "height": height},
        styles=dict(styles),
    )


def test_fill_child_inside_hugging_row_falls_back_to_hug() -> None:
    bar = element(
        "bar",
        "row",
        parent_id=ROOT_ID,
        children=["label", "icon"],
        size={"width": 400, "height": 40},
        styles={"display": "flex", "flexDirection": "row", "gap": 8, "resizeX": "hug"},
    )
    label = _text("label", "bar", 80, 24, resizeX="fill")
    icon = element("icon", "icon", parent_id="bar", size={"width": 24, "height": 24})
    snapshot = build_snapshot(page_root(["bar"]), bar, label, icon)

    resolution = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID)

    label_size = resolution.size_of("label")
    assert label_size is not None
    assert label_size.width_mode == "hug"
    assert label_size.fallback_axes == ("width",)
    assert label_size.width == 80
    bar_size = resolution.size_of("bar")
    assert bar_size is not None
    assert bar_size.width == 112
    assert bar_size.height == 40
    assert [diagnostic.kind for diagnostic in resolution.diagnostics] == ["ambiguous_sizing"]


def test_fill_children_share_remaining_main_axis() -> None:
    row = element(
        "row",
        "row",
        parent_id=ROOT_ID,
        children=["a", "b", "c"],
        size={"width": 600, "height": 50},
        styles={"display": "flex", "flexDirection": "row", "gap": 20},
    )
    snapshot = build_snapshot(
        page_root(["row"]),
        row,
        _text("a", "row", 100, 20),
        _text("b", "row", 10, 20, resizeX="fill"),
        _text("c", "row", 10, 20, resizeX="fill"),
    )

    resolution = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID)

    for element_id in ("b", "c"):
        size = resolution.size_of(element_id)
        assert size is not None
        assert size.width == 230
        assert size.grow
    assert resolution.diagnostics == ()


def test_fill_on_cross_axis_stretches_to_inner_width() -> None:
    column = element(
        "col",
        "stack",
        parent_id=ROOT_ID,
        children=["line"],
        size={"width": 400, "height": 300},
        styles={"display": "flex", "flexDirection": "column", "padding": 16},
    )
    snapshot = build_snapshot(
        page_root(["col"]), column, _text("line", "col", 50, 20, resizeX="fill")
    )

    size = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID).size_of("line")

    assert size is not None
    assert size.width == 368
    assert size.stretch_width
    assert not size.grow


def test_hugging_column_sums_children_gaps_and_padding() -> None:
    column = element(
        "col",
        "stack",
        parent_id=ROOT_ID,
        children=["one", "two", "floating"],
        size={"width": 300, "height": 999},
        styles={
            "display": "flex",
            "flexDirection": "column",
            "padding": 10,
            "gap": 5,
            "resizeY": "hug",
        },
    )
    floating = _text("floating", "col", 40, 400).model_copy(update={"position_type": "absolute"})
    snapshot = build_snapshot(
        page_root(["col"]),
        column,
        _text("one", "col", 100, 24),
        _text("two", "col", 100, 30),
        floating,
    )

    resolution = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID)

    col = resolution.size_of("col")
    assert col is not None
    assert col.height == 79
    assert col.height_mode == "hug"
    floating_size = resolution.size_of("floating")
    assert floating_size is not None
    assert floating_size.height == 400


def test_grid_cells_split_inner_width() -> None:
    grid = element(
        "grid",
        "grid",
        parent_id=ROOT_ID,
        children=["g1", "g2", "g3", "g4"],
        size={"width": 620, "height": 200},
        styles={"display": "grid", "gridTemplateColumns": "repeat(3, 1fr)", "gap": 10},
    )
    cells = [_text(f"g{index}", "grid", 50, 40, resizeX="fill") for index in range(1, 5)]
    snapshot = build_snapshot(page_root(["grid"]), grid, *cells)

    resolution = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID)

    for index in range(1, 5):
        size = resolution.size_of(f"g{index}")
        assert size is not None
        assert size.width == 200


def test_breakpoint_viewport_sets_root_width() -> None:
    snapshot = build_snapshot(page_root())

    desktop = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID, "desktop").size_of(ROOT_ID)
    mobile = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID, "mobile").size_of(ROOT_ID)

    assert desktop is not None
    assert mobile is not None
    assert desktop.width == 1440
    assert mobile.width == 375


def test_missing_child_is_reported() -> None:
    snapshot = build_snapshot(page_root(["ghost"]))

    resolution = AutoLayoutEngine().resolve_tree(snapshot, ROOT_ID)

    assert [diagnostic.kind for diagnostic in resolution.diagnostics] == ["missing_child"]


@pytest.mark.parametrize(
    ("template", "expected"),
    [(None, 1), ("repeat(4, 1fr)", 4), ("1fr 2fr", 2), ("200px", 1)],
)
def test_grid_column_count(template: str | None, expected: int) -> None:
    assert grid_column_count(template) == expected


@pytest.mark.parametrize("direction", ["row", "column"])
@pytest.mark.parametrize("child_mode", SIZING_MODES)
@pytest.mark.parametrize("parent_mode", SIZING_MODES)
def test_every_sizing_combination_resolves(
    parent_mode: str, child_mode: str, direction: str
) -> None:
    ctx = ParentContext(
        display="flex",
        direction=direction,
        width_mode=parent_mode,
        inner_width=500,
        inner_height=300,
        main_fill_share=250,
    )
    child = _text("child", "parent", 120, 40, resizeX=child_mode)

    size = resolve_size(child, ctx)

    assert size.width_mode in SIZING_MODES
    assert math.isfinite(size.width)
    assert size.width >= 0
    if child_mode == "fill" and parent_mode == "hug":
        assert size.width_mode == "hug"
        assert size.fallback_axes == ("width",)
    elif child_mode == "fill":
        assert size.width == (250 if direction == "row" else 500)
    else:
        assert size.width == 120
