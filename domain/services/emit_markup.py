from __future__ import annotations

import logging
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

from domain.element_defaults import DEFAULT_CONTENT, DEFAULT_IMAGE_SRC, display_content
from domain.errors import UnsupportedTypeError
from domain.models import (
    CONTAINER_TYPES,
    STABLE_ID_ATTRIBUTE,
    CompileDiagnostic,
    Element,
    SceneSnapshot,
)
from domain.services.compile_utility_classes import default_type_classes

logger = logging.getLogger(__name__)

FALLBACK_TAG = "div"
TAG_NAMES: Mapping[str, str] = {
    **{container: "div" for container in sorted(CONTAINER_TYPES)},
    "text": "p",
    "button": "button",
    "image": "img",
    "input": "input",
    "link": "a",
    "icon": "span",
    "video": "video",
    "model3d": "model-viewer",
}
VOID_TAGS: frozenset[str] = frozenset({"img", "input"})
# Custom elements take plain HTML attribute names in React.
CUSTOM_ELEMENT_TAGS: frozenset[str] = frozenset({"model-viewer"})

DEFAULT_IMAGE_ALT = "Image"
DEFAULT_INPUT_PLACEHOLDER = "Enter text..."
DEFAULT_INPUT_TYPE = "text"
DEFAULT_LINK_HREF = "#"

_JSX_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("{", "&#123;"),
    ("}", "&#125;"),
)


def escape_jsx(text: str) -> str:
    for raw, escaped in _JSX_ESCAPES:
        text = text.replace(raw, escaped)
    return text


def tag_for(element_type: str) -> tuple[str, bool]:
    tag = TAG_NAMES.get(element_type)
    if tag is None:
        return FALLBACK_TAG, False
    return tag, True


@dataclass(frozen=True)
class EmittedMarkup:
    markup: str
    emitted_ids: tuple[str, ...] = ()
    diagnostics: tuple[CompileDiagnostic, ...] = ()


@dataclass
class _EmitPass:
    snapshot: SceneSnapshot
    class_lists: Mapping[str, Sequence[str]]
    indent_unit: str
    default_image_src: str = DEFAULT_IMAGE_SRC
    visible_ids: Optional[Collection[str]] = None
    emitted: list[str] = field(default_factory=list)
    diagnostics: list[CompileDiagnostic] = field(default_factory=list)
    visiting: set[str] = field(default_factory=set)

    def render(self, element_id: str, depth: int) -> Optional[str]:
        element = self.snapshot.elements.get(element_id)
        if element is None:
            self.diagnostics.append(
                CompileDiagnostic(
                    kind="missing_element",
                    element_id=element_id,
                    message=f"Element {element_id} is missing",
                )
            )
            return None
        if not self._is_visible(element):
            return None
        if element_id in self.visiting:
            self.diagnostics.append(
                CompileDiagnostic(
                    kind="cycle",
                    element_id=element_id,
                    message=f"Element {element_id} is its own ancestor; subtree skipped",
                )
            )
            return None
        self.visiting.add(element_id)
        try:
            children: list[str] = []
            for child_id in element.children:
                rendered = self.render(child_id, depth + 1)
                if rendered is not None:
                    children.append(rendered)
        finally:
            self.visiting.discard(element_id)
        self.emitted.append(element_id)
        return self._render_node(element, children, depth)

    def _is_visible(self, element: Element) -> bool:
        if self.visible_ids is None:
            return element.visible
        return element.id in self.visible_ids

    def _render_node(self, element: Element, children: list[str], depth: int) -> str:
        indent = self.indent_unit * depth
        tag, known = tag_for(element.type)
        if not known:
            error = UnsupportedTypeError(element.type)
            logger.warning("Element %s: %s", element.id, error)
            self.diagnostics.append(
                CompileDiagnostic(
                    kind="unsupported_type", element_id=element.id, message=str(error)
                )
            )
        attributes = [f'{STABLE_ID_ATTRIBUTE}="{escape_jsx(element.id)}"']
        attributes.extend(_payload_attributes(element, tag, self.default_image_src))
        if element.aria_label:
            attributes.append(f'aria-label="{escape_jsx(element.aria_label)}"')
        classes = self.class_lists.get(element.id)
        if not classes:
            classes = default_type_classes(element.type)[0]
        class_attribute = "class" if tag in CUSTOM_ELEMENT_TAGS else "className"
        attributes.append(f'{class_attribute}="{escape_jsx(" ".join(classes))}"')
        opening = f"{indent}<{tag} {' '.join(attributes)}"

        if tag in VOID_TAGS:
            return f"{opening} />"
        body: list[str] = []
        text = _text_content(element)
        if text is not None:
            body.extend(f"{indent}{self.indent_unit}{line}" for line in text)
        body.extend(children)
        if not body:
            return f"{opening} />"
        return "\n".join([f"{opening}>", *body, f"{indent}</{tag}>"])


def _text_content(element: Element) -> Optional[list[str]]:
    if element.type in DEFAULT_CONTENT:
        content = display_content(element.type, element.content)
    elif element.content and element.type not in CONTAINER_TYPES and element.type != "icon":
        content = element.content
    else:
        return None
    lines = [escape_jsx(line) for line in content.split("\n")]
    joined: list[str] = []
    for index, line in enumerate(lines):
        joined.append(line if index == len(lines) - 1 else f"{line}<br />")
    return joined


def _payload_attributes(element: Element, tag: str, default_image_src: str) -> list[str]:
    attributes: list[str] = []
    if tag == "img":
        attributes.append(f'src="{escape_jsx(element.src or default_image_src)}"')
        attributes.append(f'alt="{escape_jsx(element.alt or element.name or DEFAULT_IMAGE_ALT)}"')
    elif tag == "input":
        input_type = element.input_type or DEFAULT_INPUT_TYPE
        placeholder = element.placeholder or DEFAULT_INPUT_PLACEHOLDER
        attributes.append(f'type="{escape_jsx(input_type)}"')
        attributes.append(f'placeholder="{escape_jsx(placeholder)}"')
    elif tag == "a":
        attributes.append(f'href="{escape_jsx(element.href or DEFAULT_LINK_HREF)}"')
        if element.target:
            attributes.append(f'target="{element.target}"')
            if element.target == "_blank":
                attributes.append('rel="noopener noreferrer"')
    elif tag == "video":
        source = element.video_src or element.src
        if source:
            attributes.append(f'src="{escape_jsx(source)}"')
        for flag, attribute in (
            (element.autoplay, "autoPlay"),
            (element.loop, "loop"),
            (element.muted, "muted"),
            (element.controls, "controls"),
        ):
            if flag:
                attributes.append(attribute)
        if element.autoplay:
            attributes.append("playsInline")
    elif tag == "model-viewer":
        source = element.model_src or element.src
        if source:
            attributes.append(f'src="{escape_jsx(source)}"')
        attributes.append("camera-controls")
        attributes.append("auto-rotate")
    elif tag == "span" and element.type == "icon":
        icon_name = element.icon_name or element.content or "star"
        attributes.append(f'data-icon="{escape_jsx(icon_name)}"')
        if not element.aria_label:
            attributes.append('aria-hidden="true"')
    return attributes


class MarkupEmitter:
    def __init__(
        self, indent_unit: str = "  ", default_image_src: str = DEFAULT_IMAGE_SRC
    ) -> None:
        self.indent_unit = indent_unit
        self.default_image_src = default_image_src

    def emit(
        self,
        snapshot: SceneSnapshot,
        root_id: str,
        class_lists: Mapping[str, Sequence[str]] | None = None,
        *,
        depth: int = 0,
        visible_ids: Collection[str] | None = None,
    ) -> EmittedMarkup:
        emit_pass = _EmitPass(
            snapshot=snapshot,
            class_lists=class_lists or {},
            indent_unit=self.indent_unit,
            default_image_src=self.default_image_src,
            visible_ids=visible_ids,
        )
        markup = emit_pass.render(root_id, depth)
        return EmittedMarkup(
            markup=markup or "",
            emitted_ids=tuple(emit_pass.emitted),
            diagnostics=tuple(emit_pass.diagnostics),
        )
