from __future__ import annotations

from domain.models import DEFAULT_BREAKPOINTS, Size, Variant
from domain.services.resolve_breakpoint_styles import (
    resolve_breakpoint_geometry,
    resolve_breakpoint_styles,
    resolve_preview_styles,
)
from tests.helpers.document_builders import build_snapshot, element, page_root

BASE = {"fontSize": 32, "color": "#111111", "padding": 24}


def _font_size(overrides: dict[str, dict[str, object]], breakpoint_id: str) -> object:
    resolved = resolve_breakpoint_styles(BASE, overrides, DEFAULT_BREAKPOINTS, breakpoint_id)
    return resolved["fontSize"]


def test_widest_breakpoint_uses_base_and_its_own_layer() -> None:
    overrides = {"desktop": {"color": "#222222"}, "mobile": {"fontSize": 18}}

    resolved = resolve_breakpoint_styles(BASE, overrides, DEFAULT_BREAKPOINTS, "desktop")

    assert resolved == {"fontSize": 32, "color": "#222222", "padding": 24}


def test_intermediate_override_cascades_to_narrower_breakpoints() -> None:
    overrides = {"tablet": {"fontSize": 24}}

    assert _font_size(overrides, "tablet") == 24
    assert _font_size(overrides, "mobile") == 24
    assert _font_size(overrides, "desktop") == 32


def test_narrower_layer_wins_over_wider_layer() -> None:
    overrides = {"tablet": {"fontSize": 24, "padding": 16}, "mobile": {"fontSize": 18}}

    resolved = resolve_breakpoint_styles(BASE, overrides, DEFAULT_BREAKPOINTS, "mobile")

    assert resolved["fontSize"] == 18
    assert resolved["padding"] == 16


def test_monotonic_cascade_keys_never_disappear() -> None:
    overrides = {"desktop": {"gap": 8}, "tablet": {"margin": 4}, "mobile": {"opacity": 0.5}}
    previous: set[str] = set()
    for breakpoint in DEFAULT_BREAKPOINTS:
        keys = set(resolve_breakpoint_styles(BASE, overrides, DEFAULT_BREAKPOINTS, breakpoint.id))
        assert previous <= keys
        previous = keys


def test_unknown_breakpoint_returns_base_copy() -> None:
    overrides = {"mobile": {"fontSize": 1}}
    resolved = resolve_breakpoint_styles(BASE, overrides, DEFAULT_BREAKPOINTS, "tv")

    assert resolved == BASE
    assert resolved is not BASE


def test_geometry_keys_are_not_styles() -> None:
    overrides = {"mobile": {"size": {"width": 300}, "visible": False, "color": "red"}}

    resolved = resolve_breakpoint_styles(BASE, overrides, DEFAULT_BREAKPOINTS, "mobile")

    assert "size" not in resolved
    assert "visible" not in resolved
    assert resolved["color"] == "red"


def test_geometry_cascade() -> None:
    card = element(
        "card",
        "card",
        size={"width": 600, "height": 200},
        responsive_styles={
            "tablet": {"size": {"width": 400}},
            "mobile": {"visible": False, "position": {"x": 5}},
        },
    )

    size, _, visible = resolve_breakpoint_geometry(card, DEFAULT_BREAKPOINTS, "tablet")
    assert size == Size(width=400, height=200)
    assert visible

    size, position, visible = resolve_breakpoint_geometry(card, DEFAULT_BREAKPOINTS, "mobile")
    assert size == Size(width=400, height=200)
    assert position.x == 5
    assert not visible


def test_preview_applies_variant_on_top() -> None:
    button = element(
        "btn",
        "button",
        styles={"backgroundColor": "#8b5cf6", "opacity": 1},
        responsive_styles={"mobile": {"opacity": 0.9}},
        variants=[Variant(id="hover", styles={"backgroundColor": "#7c3aed"})],
    )
    snapshot = build_snapshot(page_root(["btn"]), button)

    preview = resolve_preview_styles(button, snapshot, "mobile", "hover")

    assert preview == {"backgroundColor": "#7c3aed", "opacity": 0.9}
    assert resolve_preview_styles(button, snapshot, "mobile", "missing")["backgroundColor"] == (
        "#8b5cf6"
    )
