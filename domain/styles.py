from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, TypeVar

from domain.utility_class_tables import ARBITRARY_PROPERTY_KEYS

SIZING_STYLE_KEYS: frozenset[str] = frozenset(
    {"resizeX", "resizeY", "minWidth", "maxWidth", "minHeight", "maxHeight"}
)

_GroupT = TypeVar("_GroupT", bound="_StyleGroup")

Box = tuple[Any, Any, Any, Any]

_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_PX_RE = re.compile(r"^(-?\d+(?:\.\d+)?)px$")


def camel_to_snake(name: str) -> str:
    chars: list[str] = []
    for char in name:
        if char.isupper():
            chars.append("_")
            chars.append(char.lower())
        else:
            chars.append(char)
    return "".join(chars)


def snake_to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def camel_to_kebab(name: str) -> str:
    return camel_to_snake(name).replace("_", "-")


class _StyleGroup:
    style_keys: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def from_styles(cls: type[_GroupT], styles: Mapping[str, Any]) -> _GroupT:
        values = {
            camel_to_snake(key): value
            for key, value in styles.items()
            if key in cls.style_keys and value is not None
        }
        return cls(**values)


@dataclass(frozen=True)
class LayoutStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = frozenset(
        {
            "display",
            "flexDirection",
            "justifyContent",
            "alignItems",
            "alignSelf",
            "flexWrap",
            "flexGrow",
            "position",
            "gap",
            "rowGap",
            "columnGap",
            "gridTemplateColumns",
            "overflow",
            "zIndex",
        }
    )

    display: Optional[str] = None
    flex_direction: Optional[str] = None
    justify_content: Optional[str] = None
    align_items: Optional[str] = None
    align_self: Optional[str] = None
    flex_wrap: Optional[str] = None
    flex_grow: Optional[float | str] = None
    position: Optional[str] = None
    gap: Optional[float] = None
    row_gap: Optional[float] = None
    column_gap: Optional[float] = None
    grid_template_columns: Optional[str] = None
    overflow: Optional[str] = None
    z_index: Optional[float | str] = None

    def is_auto_layout(self) -> bool:
        return self.display in {"flex", "grid"}


@dataclass(frozen=True)
class SpacingStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = frozenset(
        {
            "padding",
            "paddingTop",
            "paddingRight",
            "paddingBottom",
            "paddingLeft",
            "margin",
            "marginTop",
            "marginRight",
            "marginBottom",
            "marginLeft",
        }
    )

    padding: Optional[float | str] = None
    padding_top: Optional[float] = None
    padding_right: Optional[float] = None
    padding_bottom: Optional[float] = None
    padding_left: Optional[float] = None
    margin: Optional[float | str] = None
    margin_top: Optional[float] = None
    margin_right: Optional[float] = None
    margin_bottom: Optional[float] = None
    margin_left: Optional[float] = None


@dataclass(frozen=True)
class ColorStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = frozenset({"backgroundColor", "color"})

    background_color: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class BorderStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = frozenset(
        {"border", "borderWidth", "borderColor", "borderStyle", "borderRadius"}
    )

    border: Optional[str] = None
    border_width: Optional[float] = None
    border_color: Optional[str] = None
    border_style: Optional[str] = None
    border_radius: Optional[float | str] = None


@dataclass(frozen=True)
class TypographyStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = frozenset(
        {
            "fontSize",
            "fontWeight",
            "lineHeight",
            "letterSpacing",
            "textAlign",
            "textDecoration",
            "textTransform",
            "fontStyle",
            "whiteSpace",
        }
    )

    font_size: Optional[float | str] = None
    font_weight: Optional[float | str] = None
    line_height: Optional[float | str] = None
    letter_spacing: Optional[float | str] = None
    text_align: Optional[str] = None
    text_decoration: Optional[str] = None
    text_transform: Optional[str] = None
    font_style: Optional[str] = None
    white_space: Optional[str] = None


@dataclass(frozen=True)
class EffectStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = frozenset(
        {
            "opacity",
            "boxShadow",
            "cursor",
            "objectFit",
            "blur",
            "brightness",
            "contrast",
            "saturation",
            "grayscale",
            "hueRotate",
            "invert",
            "sepia",
        }
    )

    opacity: Optional[float | str] = None
    box_shadow: Optional[str] = None
    cursor: Optional[str] = None
    object_fit: Optional[str] = None
    blur: Optional[float | str] = None
    brightness: Optional[float | str] = None
    contrast: Optional[float | str] = None
    saturation: Optional[float | str] = None
    grayscale: Optional[float | str] = None
    hue_rotate: Optional[float | str] = None
    invert: Optional[float | str] = None
    sepia: Optional[float | str] = None


@dataclass(frozen=True)
class SizingStyles(_StyleGroup):
    style_keys: ClassVar[frozenset[str]] = SIZING_STYLE_KEYS

    resize_x: Optional[str] = None
    resize_y: Optional[str] = None
    min_width: Optional[float | str] = None
    max_width: Optional[float | str] = None
    min_height: Optional[float | str] = None
    max_height: Optional[float | str] = None

    def mode(self, axis: str) -> str:
        raw = self.resize_x if axis == "width" else self.resize_y
        return raw if raw in {"fixed", "fill", "hug"} else "fixed"

    def clamp(self, axis: str, value: float) -> float:
        lower = self.min_width if axis == "width" else self.min_height
        upper = self.max_width if axis == "width" else self.max_height
        upper_number = as_number(upper)
        lower_number = as_number(lower)
        if upper_number is not None:
            value = min(value, upper_number)
        if lower_number is not None:
            value = max(value, lower_number)
        return value


@dataclass(frozen=True)
class StyleGroups:
    layout: LayoutStyles = field(default_factory=LayoutStyles)
    spacing: SpacingStyles = field(default_factory=SpacingStyles)
    color: ColorStyles = field(default_factory=ColorStyles)
    border: BorderStyles = field(default_factory=BorderStyles)
    typography: TypographyStyles = field(default_factory=TypographyStyles)
    effects: EffectStyles = field(default_factory=EffectStyles)
    sizing: SizingStyles = field(default_factory=SizingStyles)
    arbitrary: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def from_styles(cls, styles: Mapping[str, Any]) -> StyleGroups:
        arbitrary = tuple(
            (key, styles[key])
            for key in sorted(styles)
            if key in ARBITRARY_PROPERTY_KEYS and styles[key] not in (None, "")
        )
        return cls(
            layout=LayoutStyles.from_styles(styles),
            spacing=SpacingStyles.from_styles(styles),
            color=ColorStyles.from_styles(styles),
            border=BorderStyles.from_styles(styles),
            typography=TypographyStyles.from_styles(styles),
            effects=EffectStyles.from_styles(styles),
            sizing=SizingStyles.from_styles(styles),
            arbitrary=arbitrary,
        )


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        raw = value.strip()
        match = _PX_RE.match(raw)
        if match:
            return float(match.group(1))
        if _NUMBER_RE.match(raw):
            return float(raw)
    return None


def parse_box_shorthand(value: Any) -> Optional[Box]:
    number = as_number(value)
    if number is not None:
        return (number, number, number, number)
    if not isinstance(value, str):
        return None
    parts = value.split()
    if not 1 <= len(parts) <= 4:
        return None
    parsed: list[Any] = []
    for part in parts:
        part_number = as_number(part)
        if part_number is not None:
            parsed.append(part_number)
        elif part == "auto":
            parsed.append("auto")
        else:
            return None
    if len(parsed) == 1:
        return (parsed[0], parsed[0], parsed[0], parsed[0])
    if len(parsed) == 2:
        return (parsed[0], parsed[1], parsed[0], parsed[1])
    if len(parsed) == 3:
        return (parsed[0], parsed[1], parsed[2], parsed[1])
    return (parsed[0], parsed[1], parsed[2], parsed[3])


def padding_box(styles: Mapping[str, Any]) -> tuple[float, float, float, float]:
    box = parse_box_shorthand(styles.get("padding")) or (0.0, 0.0, 0.0, 0.0)
    sides = []
    for index, key in enumerate(("paddingTop", "paddingRight", "paddingBottom", "paddingLeft")):
        side = as_number(styles.get(key))
        base = box[index] if isinstance(box[index], (int, float)) else 0.0
        sides.append(side if side is not None else float(base))
    return sides[0], sides[1], sides[2], sides[3]


def gap_value(styles: Mapping[str, Any], axis: str) -> float:
    specific = styles.get("columnGap") if axis == "width" else styles.get("rowGap")
    value = as_number(specific) if specific is not None else as_number(styles.get("gap"))
    return value if value is not None else 0.0
