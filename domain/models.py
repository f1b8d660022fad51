from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DOCUMENT_SCHEMA_VERSION = "1.0"
STABLE_ID_ATTRIBUTE = "data-element-id"

CONTAINER_TYPES: frozenset[str] = frozenset(
    {"page", "frame", "stack", "grid", "section", "container", "row", "card"}
)
LEAF_TYPES: frozenset[str] = frozenset(
    {"text", "button", "image", "input", "link", "icon", "video", "model3d"}
)
ELEMENT_TYPES: frozenset[str] = CONTAINER_TYPES | LEAF_TYPES
TEXT_LIKE_TYPES: frozenset[str] = frozenset({"text", "button", "link"})

SIZING_MODES = ("fixed", "fill", "hug")
AUTO_LAYOUT_DISPLAYS: frozenset[str] = frozenset({"flex", "grid"})
GEOMETRY_OVERRIDE_KEYS: frozenset[str] = frozenset({"size", "position", "visible"})

SizingMode = Literal["fixed", "fill", "hug"]
VariantType = Literal["hover", "active", "focus", "disabled", "custom"]


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class Size(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: float = 0.0
    height: float = 0.0


class Crop(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0


class TransitionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    property: str | List[str] = "all"
    duration: float = 200.0
    delay: float = 0.0
    easing: str = "ease"


class VariantCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["state", "prop", "breakpoint"] = "state"
    operator: Literal["equals", "not_equals", "contains", "greater", "less"] = "equals"
    value: str | int | float | bool = ""
    variable: Optional[str] = None


class Variant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    type: VariantType = "hover"
    condition: Optional[VariantCondition] = None
    styles: Dict[str, Any] = Field(default_factory=dict)
    transition: Optional[TransitionConfig] = None


class AnimationKeyframe(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: float = Field(..., ge=0.0, le=1.0)
    styles: Dict[str, Any] = Field(default_factory=dict)
    easing: Optional[str] = None


class Animation(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    keyframes: List[AnimationKeyframe] = Field(default_factory=list)
    duration: float = 300.0
    delay: float = 0.0
    easing: str = "ease"
    iterations: int | Literal["infinite"] = 1
    direction: Literal["normal", "reverse", "alternate", "alternate-reverse"] = "normal"
    fill_mode: Literal["none", "forwards", "backwards", "both"] = "none"


class Element(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    type: str
    name: str = ""
    parent_id: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    position: Position = Field(default_factory=Position)
    size: Size = Field(default_factory=Size)
    position_type: Literal["relative", "absolute"] = "relative"
    styles: Dict[str, Any] = Field(default_factory=dict)
    responsive_styles: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    variants: List[Variant] = Field(default_factory=list)
    animations: List[Animation] = Field(default_factory=list)
    content: Optional[str] = None
    src: Optional[str] = None
    alt: Optional[str] = None
    crop: Optional[Crop] = None
    href: Optional[str] = None
    target: Optional[Literal["_self", "_blank"]] = None
    placeholder: Optional[str] = None
    input_type: Optional[str] = None
    icon_name: Optional[str] = None
    video_src: Optional[str] = None
    autoplay: Optional[bool] = None
    loop: Optional[bool] = None
    muted: Optional[bool] = None
    controls: Optional[bool] = None
    model_src: Optional[str] = None
    aria_label: Optional[str] = None
    visible: bool = True
    locked: bool = False

    @field_validator("children", mode="after")
    @classmethod
    def ensure_unique_children(cls, children: List[str]) -> List[str]:
        seen: set[str] = set()
        unique: List[str] = []
        for child_id in children:
            if child_id in seen:
                continue
            seen.add(child_id)
            unique.append(child_id)
        return unique

    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = "Page"
    root_element_id: str
    width: float = 1440.0
    height: float = 900.0
    background_color: Optional[str] = "#ffffff"
    x: float = 0.0
    y: float = 0.0
    notes: Optional[str] = None


class Breakpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    width: float
    height: float = 0.0
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    is_default: bool = False


DEFAULT_BREAKPOINTS: tuple[Breakpoint, ...] = (
    Breakpoint(
        id="desktop", name="Desktop", width=1440, height=900, min_width=1024, is_default=True
    ),
    Breakpoint(id="tablet", name="Tablet", width=768, height=1024, min_width=768, max_width=1023),
    Breakpoint(id="mobile", name="Mobile", width=375, height=812, max_width=767),
)


class HistoryEntry(BaseModel):
    elements: Dict[str, Element] = Field(default_factory=dict)
    pages: Dict[str, Page] = Field(default_factory=dict)
    timestamp: float = 0.0
    action: str = ""


class DesignDocument(BaseModel):
    schema_version: str = DOCUMENT_SCHEMA_VERSION
    project_name: str = "Untitled"
    pages: Dict[str, Page] = Field(default_factory=dict)
    elements: Dict[str, Element] = Field(default_factory=dict)
    current_page_id: Optional[str] = None
    breakpoints: List[Breakpoint] = Field(default_factory=lambda: list(DEFAULT_BREAKPOINTS))
    history: List[HistoryEntry] = Field(default_factory=list)
    history_index: int = -1

    @field_validator("breakpoints", mode="after")
    @classmethod
    def ensure_unique_breakpoint_ids(cls, breakpoints: List[Breakpoint]) -> List[Breakpoint]:
        seen: set[str] = set()
        for breakpoint in breakpoints:
            if breakpoint.id in seen:
                msg = f"Duplicate breakpoint id found: {breakpoint.id}"
                raise ValueError(msg)
            seen.add(breakpoint.id)
        return breakpoints


def order_breakpoints(breakpoints: Sequence[Breakpoint]) -> tuple[Breakpoint, ...]:
    return tuple(sorted(breakpoints, key=lambda bp: -bp.width))


@dataclass(frozen=True)
class SceneSnapshot:
    elements: Mapping[str, Element]
    pages: Mapping[str, Page]
    breakpoints: tuple[Breakpoint, ...] = DEFAULT_BREAKPOINTS
    current_page_id: Optional[str] = None
    current_breakpoint_id: Optional[str] = None

    @classmethod
    def capture(
        cls,
        elements: Mapping[str, Element],
        pages: Mapping[str, Page],
        breakpoints: Sequence[Breakpoint] = DEFAULT_BREAKPOINTS,
        current_page_id: Optional[str] = None,
        current_breakpoint_id: Optional[str] = None,
    ) -> SceneSnapshot:
        return cls(
            elements=MappingProxyType(dict(elements)),
            pages=MappingProxyType(dict(pages)),
            breakpoints=order_breakpoints(breakpoints),
            current_page_id=current_page_id,
            current_breakpoint_id=current_breakpoint_id,
        )

    @classmethod
    def from_document(cls, document: DesignDocument) -> SceneSnapshot:
        return cls.capture(
            document.elements,
            document.pages,
            document.breakpoints or DEFAULT_BREAKPOINTS,
            document.current_page_id,
        )

    def base_breakpoint_id(self) -> Optional[str]:
        return self.breakpoints[0].id if self.breakpoints else None

    def current_page(self) -> Optional[Page]:
        if self.current_page_id is None:
            return None
        return self.pages.get(self.current_page_id)


@dataclass(frozen=True)
class ConcreteSize:
    width: float
    height: float
    width_mode: str = "fixed"
    height_mode: str = "fixed"
    grow: bool = False
    stretch_width: bool = False
    stretch_height: bool = False
    fallback_axes: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CompileDiagnostic:
    kind: str
    element_id: Optional[str]
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "element_id": self.element_id, "message": self.message}


@dataclass(frozen=True)
class GeneratedProject:
    files: Dict[str, str]
    diagnostics: List[CompileDiagnostic] = field(default_factory=list)

    def entry_file(self) -> str:
        return self.files["src/App.jsx"]

    def stylesheet(self) -> str:
        return self.files["src/index.css"]
