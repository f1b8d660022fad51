from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from domain.models import (
    GEOMETRY_OVERRIDE_KEYS,
    Breakpoint,
    Element,
    Position,
    SceneSnapshot,
    Size,
    Variant,
    order_breakpoints,
)


def _cascade_layers(
    overrides: Mapping[str, Mapping[str, Any]],
    breakpoints: Sequence[Breakpoint],
    target_id: Optional[str],
) -> list[Mapping[str, Any]]:
    ordered = order_breakpoints(breakpoints)
    if target_id is None or target_id not in {bp.id for bp in ordered}:
        return []
    layers: list[Mapping[str, Any]] = []
    for breakpoint in ordered:
        layer = overrides.get(breakpoint.id)
        if layer:
            layers.append(layer)
        if breakpoint.id == target_id:
            break
    return layers


def resolve_breakpoint_styles(
    base: Mapping[str, Any],
    overrides: Mapping[str, Mapping[str, Any]],
    breakpoints: Sequence[Breakpoint],
    target_id: Optional[str],
    active_variant: Optional[Variant] = None,
) -> dict[str, Any]:
    resolved = dict(base)
    for layer in _cascade_layers(overrides, breakpoints, target_id):
        for key, value in layer.items():
            if key in GEOMETRY_OVERRIDE_KEYS:
                continue
            resolved[key] = value
    if active_variant is not None:
        resolved.update(active_variant.styles)
    return resolved


def resolve_breakpoint_geometry(
    element: Element,
    breakpoints: Sequence[Breakpoint],
    target_id: Optional[str],
) -> tuple[Size, Position, bool]:
    size = element.size
    position = element.position
    visible = element.visible
    for layer in _cascade_layers(element.responsive_styles, breakpoints, target_id):
        raw_size = layer.get("size")
        if isinstance(raw_size, Mapping):
            size = Size(
                width=float(raw_size.get("width", size.width)),
                height=float(raw_size.get("height", size.height)),
            )
        raw_position = layer.get("position")
        if isinstance(raw_position, Mapping):
            position = Position(
                x=float(raw_position.get("x", position.x)),
                y=float(raw_position.get("y", position.y)),
            )
        if isinstance(layer.get("visible"), bool):
            visible = layer["visible"]
    return size, position, visible


def resolve_element_styles(
    element: Element, snapshot: SceneSnapshot, breakpoint_id: Optional[str] = None
) -> dict[str, Any]:
    target = breakpoint_id or snapshot.current_breakpoint_id or snapshot.base_breakpoint_id()
    return resolve_breakpoint_styles(
        element.styles, element.responsive_styles, snapshot.breakpoints, target
    )


def resolve_preview_styles(
    element: Element,
    snapshot: SceneSnapshot,
    breakpoint_id: Optional[str] = None,
    variant_id: Optional[str] = None,
) -> dict[str, Any]:
    active_variant = None
    if variant_id is not None:
        active_variant = next((item for item in element.variants if item.id == variant_id), None)
    target = breakpoint_id or snapshot.current_breakpoint_id or snapshot.base_breakpoint_id()
    return resolve_breakpoint_styles(
        element.styles,
        element.responsive_styles,
        snapshot.breakpoints,
        target,
        active_variant,
    )
