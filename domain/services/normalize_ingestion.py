from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from domain.element_defaults import default_element_config, default_element_name
from domain.errors import MalformedIngestionInput, StructuralError
from domain.models import ELEMENT_TYPES, Animation, Element, Position, Size, Variant
from domain.services.compile_variants import PRESET_ANIMATIONS, preset_animation
from domain.services.repair_rules import (
    DEFAULT_REPAIR_RULES,
    RepairLimits,
    RepairRule,
    apply_repair_rules,
)
from domain.services.scene_graph_store import SceneGraphStore, is_auto_layout_container
from domain.styles import as_number

logger = logging.getLogger(__name__)

INGESTION_HISTORY_LABEL = "AI: Added elements"
INGESTION_FALLBACK_TYPE = "frame"
INGESTION_TYPE_ALIASES: Mapping[str, str] = {
    "divider": "frame",
    "page": "frame",
}
FILL_WIDTH_IN_COLUMN_TYPES: frozenset[str] = frozenset({"section", "frame", "stack", "container"})
DEFAULT_INGESTED_POSITION = Position(x=100, y=100)

SIZING_KEYWORDS: Mapping[str, str] = {
    "fixed": "fixed",
    "fill": "fill",
    "hug": "hug",
    "fit": "hug",
    "auto": "hug",
    "100%": "fill",
}
ALIGN_VALUES: Mapping[str, str] = {
    "start": "flex-start",
    "end": "flex-end",
    "center": "center",
    "stretch": "stretch",
    "baseline": "baseline",
}
JUSTIFY_VALUES: Mapping[str, str] = {
    "start": "flex-start",
    "end": "flex-end",
    "center": "center",
    "between": "space-between",
    "space-between": "space-between",
    "around": "space-around",
    "space-around": "space-around",
    "evenly": "space-evenly",
    "space-evenly": "space-evenly",
}
LAYOUT_PADDING_KEYS = ("padding", "paddingTop", "paddingRight", "paddingBottom", "paddingLeft")
PAYLOAD_FIELDS: Mapping[str, str] = {
    "name": "name",
    "content": "content",
    "text": "content",
    "src": "src",
    "alt": "alt",
    "href": "href",
    "target": "target",
    "placeholder": "placeholder",
    "inputType": "input_type",
    "input_type": "input_type",
    "iconName": "icon_name",
    "icon_name": "icon_name",
    "icon": "icon_name",
    "videoSrc": "video_src",
    "video_src": "video_src",
    "autoplay": "autoplay",
    "loop": "loop",
    "muted": "muted",
    "controls": "controls",
    "modelSrc": "model_src",
    "model_src": "model_src",
    "ariaLabel": "aria_label",
    "aria_label": "aria_label",
}
ANIMATION_FIELD_ALIASES: Mapping[str, str] = {
    "fillMode": "fill_mode",
    "iterationCount": "iterations",
    "timingFunction": "easing",
}


@dataclass(frozen=True)
class SkippedNode:
    path: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


@dataclass(frozen=True)
class IngestionResult:
    created_ids: tuple[str, ...] = ()
    element_ids: tuple[str, ...] = ()
    skipped: tuple[SkippedNode, ...] = ()
    page_id: Optional[str] = None


def map_ingestion_type(raw_type: str) -> str:
    normalized = raw_type.strip().lower()
    if normalized in ELEMENT_TYPES and normalized != "page":
        return normalized
    return INGESTION_TYPE_ALIASES.get(normalized, INGESTION_FALLBACK_TYPE)


def _preset_key(name: str) -> Optional[str]:
    wanted = name.replace("-", "").replace("_", "").lower()
    for key in PRESET_ANIMATIONS:
        if key.lower() == wanted:
            return key
    return None


def _sizing_mode(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return SIZING_KEYWORDS.get(value.strip().lower())


def convert_flat_styles(raw: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, float]]:
    """Split a flat style dictionary into base styles and explicit size values."""
    styles: dict[str, Any] = {}
    size: dict[str, float] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if key in ("width", "height"):
            number = as_number(value)
            if number is not None:
                size[key] = number
                continue
            mode = _sizing_mode(value)
            if mode is not None:
                styles["resizeX" if key == "width" else "resizeY"] = mode
            continue
        if key in ("resizeX", "resizeY"):
            mode = _sizing_mode(value)
            if mode is not None:
                styles[key] = mode
            continue
        styles[key] = value
    return styles, size


def convert_semantic_sizing(sizing: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, float]]:
    styles: dict[str, Any] = {}
    size: dict[str, float] = {}
    for axis, style_key, fixed_key in (
        ("width", "resizeX", "fixedWidth"),
        ("height", "resizeY", "fixedHeight"),
    ):
        mode = _sizing_mode(sizing.get(axis))
        if mode is not None:
            styles[style_key] = mode
        fixed = as_number(sizing.get(fixed_key))
        if fixed is None and as_number(sizing.get(axis)) is not None:
            fixed = as_number(sizing.get(axis))
            styles[style_key] = "fixed"
        if fixed is not None:
            size[axis] = fixed
    for key in ("minWidth", "maxWidth", "minHeight", "maxHeight"):
        if sizing.get(key) is not None:
            styles[key] = sizing[key]
    return styles, size


def convert_semantic_layout(layout: Mapping[str, Any]) -> dict[str, Any]:
    styles: dict[str, Any] = {}
    direction = layout.get("direction")
    if direction in ("row", "column", "row-reverse", "column-reverse"):
        styles["display"] = "flex"
        styles["flexDirection"] = direction
    elif direction == "grid" or layout.get("columns") is not None:
        styles["display"] = "grid"
        columns = as_number(layout.get("columns"))
        styles["gridTemplateColumns"] = f"repeat({int(columns or 2)}, 1fr)"
    elif direction == "none":
        styles["display"] = "block"
    if layout.get("gap") is not None:
        styles["gap"] = layout["gap"]
    for key in LAYOUT_PADDING_KEYS:
        if layout.get(key) is not None:
            styles[key] = layout[key]
    align = ALIGN_VALUES.get(str(layout.get("align", "")).lower())
    if align:
        styles["alignItems"] = align
    justify = JUSTIFY_VALUES.get(str(layout.get("justify", "")).lower())
    if justify:
        styles["justifyContent"] = justify
    align_self = ALIGN_VALUES.get(str(layout.get("alignSelf", "")).lower())
    if align_self:
        styles["alignSelf"] = align_self
    wrap = layout.get("wrap")
    if isinstance(wrap, bool):
        styles["flexWrap"] = "wrap" if wrap else "nowrap"
    elif isinstance(wrap, str):
        styles["flexWrap"] = wrap
    return styles


def convert_animations(raw: Any, id_prefix: str) -> list[Animation]:
    items = raw if isinstance(raw, list) else [raw]
    animations: list[Animation] = []
    for index, item in enumerate(items):
        animation_id = f"{id_prefix}_anim{index}"
        if isinstance(item, str):
            item = {"preset": item}
        if not isinstance(item, Mapping):
            logger.warning("Ignoring animation %s: expected an object", animation_id)
            continue
        payload = {ANIMATION_FIELD_ALIASES.get(key, key): value for key, value in item.items()}
        preset_name = payload.pop("preset", None) or payload.pop("type", None)
        try:
            if "keyframes" in payload:
                payload.setdefault("id", animation_id)
                animations.append(Animation.model_validate(payload))
                continue
            preset = _preset_key(str(preset_name or payload.get("name") or ""))
            if preset is None:
                logger.warning(
                    "Ignoring animation %s: unknown preset %r", animation_id, preset_name
                )
                continue
            overrides = {
                key: payload.get(key)
                for key in ("duration", "delay", "easing", "iterations", "direction", "fill_mode")
            }
            animation = preset_animation(preset, animation_id, **overrides)
        except ValidationError as exc:
            logger.warning("Ignoring animation %s: %s", animation_id, exc)
            continue
        if animation is not None:
            animations.append(animation)
    return animations


def convert_variants(raw: Any, id_prefix: str) -> list[Variant]:
    if not isinstance(raw, list):
        return []
    variants: list[Variant] = []
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping):
            continue
        payload = dict(item)
        payload.setdefault("id", f"{id_prefix}_var{index}")
        try:
            variants.append(Variant.model_validate(payload))
        except ValidationError as exc:
            logger.warning("Ignoring variant %s: %s", payload["id"], exc)
    return variants


def normalize_element(
    node: Mapping[str, Any],
    element_id: str,
    parent: Element,
    *,
    path: str = "[0]",
) -> Element:
    raw_type = node.get("type")
    if not isinstance(raw_type, str) or not raw_type.strip():
        raise MalformedIngestionInput(path, "missing element type")
    element_type = map_ingestion_type(raw_type)
    config = default_element_config(element_type)
    styles: dict[str, Any] = dict(config.pop("styles", {}))
    size: dict[str, float] = dict(config.pop("size", {}))

    explicit: dict[str, Any] = {}
    explicit_size: dict[str, float] = {}
    if isinstance(node.get("styles"), Mapping):
        flat, flat_size = convert_flat_styles(node["styles"])
        explicit.update(flat)
        explicit_size.update(flat_size)
    if isinstance(node.get("sizing"), Mapping):
        sizing_styles, sizing_size = convert_semantic_sizing(node["sizing"])
        explicit.update(sizing_styles)
        explicit_size.update(sizing_size)
    if isinstance(node.get("layout"), Mapping):
        explicit.update(convert_semantic_layout(node["layout"]))
    if isinstance(node.get("style"), Mapping):
        visual, visual_size = convert_flat_styles(node["style"])
        explicit.update(visual)
        explicit_size.update(visual_size)

    parent_auto_layout = is_auto_layout_container(parent)
    parent_direction = str(parent.styles.get("flexDirection") or "column")
    if (
        parent_auto_layout
        and parent_direction == "column"
        and element_type in FILL_WIDTH_IN_COLUMN_TYPES
        and "resizeX" not in explicit
    ):
        explicit["resizeX"] = "fill"
    styles.update(explicit)
    size.update(explicit_size)

    payload: dict[str, Any] = dict(config)
    for source_key, field_name in PAYLOAD_FIELDS.items():
        value = node.get(source_key)
        if value is not None:
            payload[field_name] = value
    if node.get("type") == "divider" and "name" not in payload:
        payload["name"] = "Divider"

    animation_source = node.get("animation", node.get("animations"))
    animations = convert_animations(animation_source, element_id) if animation_source else []

    try:
        return Element.model_validate(
            {
                **payload,
                "id": element_id,
                "type": element_type,
                "name": payload.get("name") or default_element_name(element_type),
                "parent_id": parent.id,
                "children": [],
                "position": DEFAULT_INGESTED_POSITION,
                "size": Size(**size),
                "position_type": "relative" if parent_auto_layout else "absolute",
                "styles": styles,
                "variants": convert_variants(node.get("variants"), element_id),
                "animations": animations,
            }
        )
    except ValidationError as exc:
        raise MalformedIngestionInput(path, f"invalid element fields: {exc}") from exc


class IngestionNormalizer:
    def __init__(
        self,
        store: SceneGraphStore,
        *,
        rules: Sequence[RepairRule] = DEFAULT_REPAIR_RULES,
        limits: RepairLimits | None = None,
    ) -> None:
        self.store = store
        self.rules = tuple(rules)
        self.limits = limits or RepairLimits()

    def ingest(
        self,
        nodes: Sequence[Mapping[str, Any]],
        parent_id: str | None = None,
    ) -> IngestionResult:
        if parent_id is None:
            page = self.store.current_page()
            if page is None:
                msg = "No current page to add elements to"
                raise StructuralError(msg)
            parent_id = page.root_element_id
        self.store.get_element(parent_id)

        created: list[str] = []
        every: list[str] = []
        skipped: list[SkippedNode] = []
        for index, node in enumerate(nodes):
            element_id = self._ingest_node(node, parent_id, f"[{index}]", every, skipped)
            if element_id is not None:
                created.append(element_id)

        if created:
            self.store.deselect_all()
            self.store.select(created)
        self.store.save_to_history(INGESTION_HISTORY_LABEL)
        return IngestionResult(
            created_ids=tuple(created),
            element_ids=tuple(every),
            skipped=tuple(skipped),
        )

    def ingest_design_response(self, response: Mapping[str, Any]) -> IngestionResult:
        parent_id: str | None = None
        page_id: str | None = None
        if response.get("create_new_page") or response.get("createNewPage"):
            page_id = self.store.add_page()
            page_name = response.get("page_name") or response.get("pageName")
            if page_name:
                self.store.rename_page(page_id, str(page_name))
            self.store.set_current_page(page_id)
            parent_id = self.store.get_page(page_id).root_element_id
        elements = response.get("elements") or []
        if not isinstance(elements, list):
            raise MalformedIngestionInput("elements", "expected a list of element descriptors")
        result = self.ingest(elements, parent_id)
        return IngestionResult(
            created_ids=result.created_ids,
            element_ids=result.element_ids,
            skipped=result.skipped,
            page_id=page_id,
        )

    def replace_page_content(
        self, nodes: Sequence[Mapping[str, Any]], page_id: str | None = None
    ) -> IngestionResult:
        page = self.store.get_page(page_id) if page_id else self.store.current_page()
        if page is None:
            msg = "No current page to replace"
            raise StructuralError(msg)
        self.store.clear_children(page.root_element_id)
        return self.ingest(nodes, page.root_element_id)

    def _ingest_node(
        self,
        node: Any,
        parent_id: str,
        path: str,
        every: list[str],
        skipped: list[SkippedNode],
    ) -> Optional[str]:
        try:
            if not isinstance(node, Mapping):
                raise MalformedIngestionInput(path, "expected an object")
            parent = self.store.get_element(parent_id)
            element = normalize_element(node, self.store.new_element_id(), parent, path=path)
        except MalformedIngestionInput as exc:
            logger.warning("Skipping ingestion node %s", exc)
            skipped.append(SkippedNode(path=exc.path, reason=exc.reason))
            return None
        element = apply_repair_rules(element, self.rules, self.limits)
        self.store.insert_element(element)
        every.append(element.id)
        children = node.get("children") or []
        if not isinstance(children, list):
            skipped.append(SkippedNode(path=f"{path}.children", reason="expected a list"))
            return element.id
        for index, child in enumerate(children):
            self._ingest_node(child, element.id, f"{path}.children[{index}]", every, skipped)
        return element.id
