from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from domain.element_defaults import DEFAULT_IMAGE_SRC
from domain.models import CONTAINER_TYPES, Element, Size
from domain.styles import as_number, parse_box_shorthand

PADDING_SIDES = ("paddingTop", "paddingRight", "paddingBottom", "paddingLeft")
HEADER_NAME_MARKERS = ("header", "navbar", "nav bar", "navigation", "top bar", "topbar")
AUTO_LAYOUT_DEFAULTS: Mapping[str, Mapping[str, Any]] = {
    "row": {"display": "flex", "flexDirection": "row", "alignItems": "center"},
    "stack": {"display": "flex", "flexDirection": "column"},
    "card": {"display": "flex", "flexDirection": "column"},
    "grid": {"display": "grid", "gridTemplateColumns": "repeat(2, 1fr)"},
}


@dataclass(frozen=True)
class RepairLimits:
    header_max_height: float = 96.0
    button_min_height: float = 32.0
    button_max_height: float = 64.0
    button_max_padding_y: float = 20.0
    button_max_padding_x: float = 48.0
    button_min_font_size: float = 12.0
    button_max_font_size: float = 24.0
    section_max_padding: float = 120.0
    default_image_src: str = DEFAULT_IMAGE_SRC


RepairFunction = Callable[[Element, RepairLimits], Element]


@dataclass(frozen=True)
class RepairRule:
    name: str
    apply: RepairFunction


def _clamp(value: float, lower: Optional[float], upper: Optional[float]) -> float:
    if upper is not None:
        value = min(value, upper)
    if lower is not None:
        value = max(value, lower)
    return value


def _expanded_padding(styles: Mapping[str, Any]) -> Optional[dict[str, float]]:
    """Per-side numeric padding, or None when the padding cannot be read as numbers."""
    box = parse_box_shorthand(styles.get("padding")) if "padding" in styles else None
    if "padding" in styles and box is None:
        return None
    sides: dict[str, float] = {}
    for index, key in enumerate(PADDING_SIDES):
        explicit = styles.get(key)
        if explicit is not None:
            number = as_number(explicit)
            if number is None:
                return None
            sides[key] = number
        elif box is not None and isinstance(box[index], (int, float)):
            sides[key] = float(box[index])
    return sides


def _clamp_padding(
    styles: Mapping[str, Any],
    limits: Mapping[str, float],
) -> Optional[dict[str, Any]]:
    sides = _expanded_padding(styles)
    if sides is None:
        return None
    clamped = {key: min(value, limits[key]) for key, value in sides.items()}
    if clamped == sides:
        return None
    updated = {key: value for key, value in styles.items() if key != "padding"}
    updated.update(sides)
    updated.update(clamped)
    return updated


def is_header_like(element: Element) -> bool:
    if element.type not in CONTAINER_TYPES or element.type == "page":
        return False
    name = element.name.lower()
    return any(marker in name for marker in HEADER_NAME_MARKERS)


def clamp_header_height(element: Element, limits: RepairLimits) -> Element:
    if not is_header_like(element):
        return element
    updates: dict[str, Any] = {}
    if element.size.height > limits.header_max_height:
        updates["size"] = Size(width=element.size.width, height=limits.header_max_height)
    max_height = as_number(element.styles.get("maxHeight"))
    if max_height is None or max_height > limits.header_max_height:
        updates["styles"] = {**element.styles, "maxHeight": limits.header_max_height}
    if not updates:
        return element
    return element.model_copy(update=updates)


def clamp_button_metrics(element: Element, limits: RepairLimits) -> Element:
    if element.type != "button":
        return element
    updates: dict[str, Any] = {}
    height = _clamp(element.size.height, limits.button_min_height, limits.button_max_height)
    if height != element.size.height:
        updates["size"] = Size(width=element.size.width, height=height)

    styles = dict(element.styles)
    padding = _clamp_padding(
        styles,
        {
            "paddingTop": limits.button_max_padding_y,
            "paddingBottom": limits.button_max_padding_y,
            "paddingLeft": limits.button_max_padding_x,
            "paddingRight": limits.button_max_padding_x,
        },
    )
    if padding is not None:
        styles = padding
    font_size = as_number(styles.get("fontSize"))
    if font_size is not None:
        clamped = _clamp(font_size, limits.button_min_font_size, limits.button_max_font_size)
        if clamped != font_size:
            styles["fontSize"] = clamped
    if styles != element.styles:
        updates["styles"] = styles
    if not updates:
        return element
    return element.model_copy(update=updates)


def enforce_auto_layout_defaults(element: Element, limits: RepairLimits) -> Element:
    defaults = AUTO_LAYOUT_DEFAULTS.get(element.type)
    if defaults is None:
        return element
    styles = dict(element.styles)
    if styles.get("display") not in (None, "", defaults["display"]):
        # An explicit non-auto-layout display is kept; only missing flags are filled.
        return element
    for key, value in defaults.items():
        if styles.get(key) in (None, ""):
            styles[key] = value
    if styles == element.styles:
        return element
    return element.model_copy(update={"styles": styles})


def clamp_section_padding(element: Element, limits: RepairLimits) -> Element:
    if element.type != "section":
        return element
    padding = _clamp_padding(
        element.styles, {key: limits.section_max_padding for key in PADDING_SIDES}
    )
    if padding is None:
        return element
    return element.model_copy(update={"styles": padding})


def default_image_source(element: Element, limits: RepairLimits) -> Element:
    if element.type != "image" or (element.src and element.src.strip()):
        return element
    return element.model_copy(update={"src": limits.default_image_src})


DEFAULT_REPAIR_RULES: tuple[RepairRule, ...] = (
    RepairRule("clamp_header_height", clamp_header_height),
    RepairRule("clamp_button_metrics", clamp_button_metrics),
    RepairRule("enforce_auto_layout_defaults", enforce_auto_layout_defaults),
    RepairRule("clamp_section_padding", clamp_section_padding),
    RepairRule("default_image_source", default_image_source),
)


def apply_repair_rules(
    element: Element,
    rules: Sequence[RepairRule] = DEFAULT_REPAIR_RULES,
    limits: RepairLimits | None = None,
) -> Element:
    limits = limits or RepairLimits()
    for rule in rules:
        element = rule.apply(element, limits)
    return element
