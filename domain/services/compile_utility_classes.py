from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from functools import lru_cache
from typing import Any, Optional

from domain.models import Breakpoint, ConcreteSize
from domain.styles import (
    Box,
    BorderStyles,
    ColorStyles,
    EffectStyles,
    LayoutStyles,
    SizingStyles,
    SpacingStyles,
    StyleGroups,
    TypographyStyles,
    as_number,
    camel_to_kebab,
    parse_box_shorthand,
    snake_to_camel,
)
from domain.utility_class_tables import (
    ALIGN_ITEMS_CLASSES,
    ALIGN_SELF_CLASSES,
    BLUR_CLASSES,
    BORDER_RADIUS_CLASSES,
    BORDER_STYLE_CLASSES,
    BORDER_WIDTH_CLASSES,
    BRIGHTNESS_CLASSES,
    COLOR_NAMES,
    CONTRAST_CLASSES,
    CURSOR_CLASSES,
    DEFAULT_TYPE_CLASSES,
    DISPLAY_CLASSES,
    FALLBACK_TYPE_CLASSES,
    FLEX_DIRECTION_CLASSES,
    FLEX_WRAP_CLASSES,
    FONT_SIZE_CLASSES,
    FONT_STYLE_CLASSES,
    FONT_WEIGHT_CLASSES,
    FONT_WEIGHT_KEYWORDS,
    GRAYSCALE_CLASSES,
    GRID_COLUMN_LIMIT,
    HUE_ROTATE_CLASSES,
    INVERT_CLASSES,
    JUSTIFY_CONTENT_CLASSES,
    LINE_HEIGHT_CLASSES,
    OBJECT_FIT_CLASSES,
    OPACITY_CLASSES,
    OVERFLOW_CLASSES,
    POSITION_CLASSES,
    SATURATION_CLASSES,
    SEPIA_CLASSES,
    SHADOW_CLASSES,
    SPACING_SCALE,
    TEXT_ALIGN_CLASSES,
    TEXT_DECORATION_CLASSES,
    TEXT_TRANSFORM_CLASSES,
    WHITE_SPACE_CLASSES,
    Z_INDEX_CLASSES,
)

_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_PX_RE = re.compile(r"^(-?\d+(?:\.\d+)?)px$")
_CSS_LENGTH_RE = re.compile(r"^-?\d+(?:\.\d+)?(?:rem|em|%|vw|vh|vmin|vmax|ch|pt)$")
_REPEAT_RE = re.compile(r"^repeat\(\s*(\d+)\s*,\s*1fr\s*\)$")
_VARIANT_PREFIX_RE = re.compile(r"^[a-z0-9-]+(?:\[[^\]]*\])?:")
_SHADE_RE = re.compile(r"^(bg|text|border)-([a-z]+)-(\d+)$")
_SPACING_TOKEN_RE = re.compile(
    r"^(-)?(px|py|pt|pr|pb|pl|p|mx|my|mt|mr|mb|ml|m|gap-x|gap-y|gap)-(.+)$"
)

# Enum-valued style keys and the table that maps them to a single token.
_ENUM_TABLES: tuple[tuple[str, Mapping[Any, str]], ...] = (
    ("display", DISPLAY_CLASSES),
    ("flexDirection", FLEX_DIRECTION_CLASSES),
    ("justifyContent", JUSTIFY_CONTENT_CLASSES),
    ("alignItems", ALIGN_ITEMS_CLASSES),
    ("alignSelf", ALIGN_SELF_CLASSES),
    ("flexWrap", FLEX_WRAP_CLASSES),
    ("position", POSITION_CLASSES),
    ("overflow", OVERFLOW_CLASSES),
    ("zIndex", Z_INDEX_CLASSES),
    ("borderRadius", BORDER_RADIUS_CLASSES),
    ("borderWidth", BORDER_WIDTH_CLASSES),
    ("borderStyle", BORDER_STYLE_CLASSES),
    ("fontSize", FONT_SIZE_CLASSES),
    ("fontWeight", FONT_WEIGHT_CLASSES),
    ("lineHeight", LINE_HEIGHT_CLASSES),
    ("textAlign", TEXT_ALIGN_CLASSES),
    ("textDecoration", TEXT_DECORATION_CLASSES),
    ("textTransform", TEXT_TRANSFORM_CLASSES),
    ("fontStyle", FONT_STYLE_CLASSES),
    ("whiteSpace", WHITE_SPACE_CLASSES),
    ("opacity", OPACITY_CLASSES),
    ("boxShadow", SHADOW_CLASSES),
    ("cursor", CURSOR_CLASSES),
    ("objectFit", OBJECT_FIT_CLASSES),
    ("blur", BLUR_CLASSES),
    ("brightness", BRIGHTNESS_CLASSES),
    ("contrast", CONTRAST_CLASSES),
    ("saturation", SATURATION_CLASSES),
    ("grayscale", GRAYSCALE_CLASSES),
    ("hueRotate", HUE_ROTATE_CLASSES),
    ("invert", INVERT_CLASSES),
    ("sepia", SEPIA_CLASSES),
)

_SPACING_PREFIX_KEYS: Mapping[str, tuple[str, ...]] = {
    "p": ("padding",),
    "px": ("paddingLeft", "paddingRight"),
    "py": ("paddingTop", "paddingBottom"),
    "pt": ("paddingTop",),
    "pr": ("paddingRight",),
    "pb": ("paddingBottom",),
    "pl": ("paddingLeft",),
    "m": ("margin",),
    "mx": ("marginLeft", "marginRight"),
    "my": ("marginTop", "marginBottom"),
    "mt": ("marginTop",),
    "mr": ("marginRight",),
    "mb": ("marginBottom",),
    "ml": ("marginLeft",),
    "gap": ("gap",),
    "gap-x": ("columnGap",),
    "gap-y": ("rowGap",),
}
_COLOR_PREFIX_KEYS: Mapping[str, str] = {
    "bg": "backgroundColor",
    "text": "color",
    "border": "borderColor",
}
_PERCENT_ESCAPE_KEYS: Mapping[str, str] = {
    "grayscale": "grayscale",
    "invert": "invert",
    "sepia": "sepia",
}


def _clean_number(value: float) -> float | int:
    return int(value) if float(value).is_integer() else float(value)


def _fmt(value: float) -> str:
    number = _clean_number(value)
    return str(number)


def _unit_number(value: Any, unit: str) -> Optional[float]:
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw.endswith(unit):
        return None
    number = raw[: -len(unit)].strip()
    return float(number) if _NUMBER_RE.match(number) else None


def _escape_value(value: Any) -> str:
    return str(value).strip().replace(" ", "_")


def _unescape_value(raw: str) -> Any:
    px_match = _PX_RE.match(raw)
    if px_match:
        return _clean_number(float(px_match.group(1)))
    if _NUMBER_RE.match(raw):
        return _clean_number(float(raw))
    return raw.replace("_", " ")


def _length_token(prefix: str, value: Any) -> Optional[str]:
    number = as_number(value)
    if number is not None:
        if number < 0 and -number in SPACING_SCALE:
            return f"-{prefix}-{SPACING_SCALE[-number]}"
        if number in SPACING_SCALE:
            return f"{prefix}-{SPACING_SCALE[number]}"
        return f"{prefix}-[{_fmt(number)}px]"
    if isinstance(value, str) and value.strip() == "auto" and prefix.startswith("m"):
        return f"{prefix}-auto"
    if isinstance(value, str) and value.strip():
        return f"{prefix}-[{_escape_value(value)}]"
    return None


def color_token(prefix: str, value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    name = COLOR_NAMES.get(value.strip().lower())
    if name is not None:
        return f"{prefix}-{name}"
    return f"{prefix}-[{_escape_value(value)}]"


def _table_token(table: Mapping[Any, str], value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return table.get(float(value))
    return table.get(value)


def _arbitrary_property(key: str, value: Any) -> str:
    return f"[{camel_to_kebab(key)}:{_escape_value(value)}]"


def _box_tokens(prefix: str, box: Box) -> list[str]:
    top, right, bottom, left = box
    if top == right == bottom == left:
        token = _length_token(prefix, top)
        return [token] if token else []
    if top == bottom and left == right:
        return [
            token
            for token in (_length_token(f"{prefix}y", top), _length_token(f"{prefix}x", left))
            if token
        ]
    return [
        token
        for token in (
            _length_token(f"{prefix}t", top),
            _length_token(f"{prefix}r", right),
            _length_token(f"{prefix}b", bottom),
            _length_token(f"{prefix}l", left),
        )
        if token
    ]


def _spacing_side_tokens(
    prefix: str, shorthand: Any, sides: Sequence[Any]
) -> list[str]:
    tokens: list[str] = []
    uniform: Optional[float] = None
    if shorthand is not None:
        box = parse_box_shorthand(shorthand)
        if box is None:
            token = _length_token(prefix, shorthand)
            if token:
                tokens.append(token)
        elif as_number(shorthand) is not None:
            uniform = as_number(shorthand)
            tokens.extend(_box_tokens(prefix, box))
        else:
            tokens.extend(_box_tokens(prefix, box))
    for suffix, side in zip(("t", "r", "b", "l"), sides, strict=True):
        if side is None:
            continue
        if uniform is not None and as_number(side) == uniform:
            continue
        token = _length_token(f"{prefix}{suffix}", side)
        if token:
            tokens.append(token)
    return tokens


def parse_grid_columns(value: str) -> str:
    raw = value.strip()
    match = _REPEAT_RE.match(raw)
    if match:
        count = int(match.group(1))
        if 1 <= count <= GRID_COLUMN_LIMIT:
            return f"grid-cols-{count}"
        return f"grid-cols-[repeat({count},minmax(0,1fr))]"
    parts = raw.split()
    if 1 <= len(parts) <= GRID_COLUMN_LIMIT and all(part == "1fr" for part in parts):
        return f"grid-cols-{len(parts)}"
    return f"grid-cols-[{_escape_value(raw)}]"


def parse_border_shorthand(value: str) -> tuple[Optional[float], Optional[str], Optional[str]]:
    width: Optional[float] = None
    style: Optional[str] = None
    color: Optional[str] = None
    for part in value.split():
        number = as_number(part)
        if number is not None and width is None:
            width = number
        elif part in BORDER_STYLE_CLASSES and style is None:
            style = part
        elif color is None:
            color = part
    return width, style, color


def _layout_tokens(layout: LayoutStyles) -> list[str]:
    tokens: list[str] = []
    if layout.display is not None:
        tokens.append(
            _table_token(DISPLAY_CLASSES, layout.display)
            or _arbitrary_property("display", layout.display)
        )
    for key, table, value in (
        ("flexDirection", FLEX_DIRECTION_CLASSES, layout.flex_direction),
        ("flexWrap", FLEX_WRAP_CLASSES, layout.flex_wrap),
        ("justifyContent", JUSTIFY_CONTENT_CLASSES, layout.justify_content),
        ("alignItems", ALIGN_ITEMS_CLASSES, layout.align_items),
        ("alignSelf", ALIGN_SELF_CLASSES, layout.align_self),
    ):
        if value is not None:
            tokens.append(_table_token(table, value) or _arbitrary_property(key, value))
    if layout.flex_grow is not None:
        grow = as_number(layout.flex_grow)
        if grow == 1:
            tokens.append("grow")
        elif grow == 0:
            tokens.append("grow-0")
        elif grow is not None:
            tokens.append(f"grow-[{_fmt(grow)}]")
        elif str(layout.flex_grow).strip():
            tokens.append(_arbitrary_property("flexGrow", layout.flex_grow))
    if layout.grid_template_columns:
        tokens.append(parse_grid_columns(str(layout.grid_template_columns)))
    for prefix, value in (
        ("gap", layout.gap),
        ("gap-x", layout.column_gap),
        ("gap-y", layout.row_gap),
    ):
        if value is not None:
            token = _length_token(prefix, value)
            if token:
                tokens.append(token)
    if layout.position is not None:
        tokens.append(
            _table_token(POSITION_CLASSES, layout.position)
            or _arbitrary_property("position", layout.position)
        )
    if layout.overflow is not None:
        tokens.append(
            _table_token(OVERFLOW_CLASSES, layout.overflow)
            or _arbitrary_property("overflow", layout.overflow)
        )
    if layout.z_index is not None:
        z_number = as_number(layout.z_index)
        token = _table_token(Z_INDEX_CLASSES, z_number) if z_number is not None else None
        if token is None and z_number is not None:
            token = f"z-[{_fmt(z_number)}]"
        elif token is None and str(layout.z_index).strip():
            token = _arbitrary_property("zIndex", layout.z_index)
        if token:
            tokens.append(token)
    return tokens


def _spacing_tokens(spacing: SpacingStyles) -> list[str]:
    tokens = _spacing_side_tokens(
        "p",
        spacing.padding,
        (spacing.padding_top, spacing.padding_right, spacing.padding_bottom, spacing.padding_left),
    )
    tokens.extend(
        _spacing_side_tokens(
            "m",
            spacing.margin,
            (spacing.margin_top, spacing.margin_right, spacing.margin_bottom, spacing.margin_left),
        )
    )
    return tokens


def _color_tokens(colors: ColorStyles) -> list[str]:
    return [
        token
        for token in (
            color_token("bg", colors.background_color),
            color_token("text", colors.color),
        )
        if token
    ]


def _border_tokens(border: BorderStyles) -> list[str]:
    width = as_number(border.border_width) if border.border_width is not None else None
    style = border.border_style
    color = border.border_color
    if border.border:
        short_width, short_style, short_color = parse_border_shorthand(str(border.border))
        width = width if width is not None else short_width
        style = style or short_style
        color = color or short_color
    tokens: list[str] = []
    if width is not None:
        tokens.append(_table_token(BORDER_WIDTH_CLASSES, width) or f"border-[{_fmt(width)}px]")
    if style is not None:
        tokens.append(
            _table_token(BORDER_STYLE_CLASSES, style) or _arbitrary_property("borderStyle", style)
        )
    border_color = color_token("border", color)
    if border_color:
        tokens.append(border_color)
    if border.border_radius is not None:
        radius = as_number(border.border_radius)
        if radius is not None:
            tokens.append(
                _table_token(BORDER_RADIUS_CLASSES, radius) or f"rounded-[{_fmt(radius)}px]"
            )
        else:
            tokens.append(f"rounded-[{_escape_value(border.border_radius)}]")
    return tokens


def _typography_tokens(typography: TypographyStyles) -> list[str]:
    tokens: list[str] = []
    if typography.font_size is not None:
        size = as_number(typography.font_size)
        raw_size = str(typography.font_size).strip()
        if size is not None:
            tokens.append(_table_token(FONT_SIZE_CLASSES, size) or f"text-[{_fmt(size)}px]")
        elif _CSS_LENGTH_RE.match(raw_size):
            tokens.append(f"text-[{raw_size}]")
        elif raw_size:
            tokens.append(_arbitrary_property("fontSize", raw_size))
    if typography.font_weight is not None:
        weight: Any = typography.font_weight
        if isinstance(weight, str):
            weight = FONT_WEIGHT_KEYWORDS.get(weight.strip(), as_number(weight) or weight)
        token = _table_token(FONT_WEIGHT_CLASSES, weight)
        tokens.append(token or f"font-[{_escape_value(weight)}]")
    if typography.line_height is not None:
        line_height = as_number(typography.line_height)
        token = _table_token(LINE_HEIGHT_CLASSES, line_height) if line_height is not None else None
        if token is None:
            raw = typography.line_height
            value = _fmt(raw) if isinstance(raw, (int, float)) else _escape_value(raw)
            token = f"leading-[{value}]"
        tokens.append(token)
    if typography.letter_spacing is not None:
        spacing = as_number(typography.letter_spacing)
        if spacing is not None:
            tokens.append(f"tracking-[{_fmt(spacing)}px]")
        else:
            tokens.append(f"tracking-[{_escape_value(typography.letter_spacing)}]")
    for key, table, value in (
        ("textAlign", TEXT_ALIGN_CLASSES, typography.text_align),
        ("textDecoration", TEXT_DECORATION_CLASSES, typography.text_decoration),
        ("textTransform", TEXT_TRANSFORM_CLASSES, typography.text_transform),
        ("fontStyle", FONT_STYLE_CLASSES, typography.font_style),
        ("whiteSpace", WHITE_SPACE_CLASSES, typography.white_space),
    ):
        if value is not None:
            tokens.append(_table_token(table, value) or _arbitrary_property(key, value))
    return tokens


def _effect_tokens(effects: EffectStyles) -> list[str]:
    tokens: list[str] = []
    if effects.opacity is not None:
        opacity = as_number(effects.opacity)
        percent = _unit_number(effects.opacity, "%")
        if opacity is None and percent is not None:
            opacity = percent / 100
        if opacity is not None:
            tokens.append(
                _table_token(OPACITY_CLASSES, round(opacity, 4))
                or f"opacity-[{_fmt(round(opacity * 100, 2))}%]"
            )
        elif str(effects.opacity).strip():
            tokens.append(_arbitrary_property("opacity", effects.opacity))
    if effects.box_shadow is not None:
        tokens.append(
            _table_token(SHADOW_CLASSES, effects.box_shadow)
            or f"shadow-[{_escape_value(effects.box_shadow)}]"
        )
    if effects.cursor is not None:
        tokens.append(
            _table_token(CURSOR_CLASSES, effects.cursor)
            or f"cursor-[{_escape_value(effects.cursor)}]"
        )
    if effects.object_fit is not None:
        tokens.append(
            _table_token(OBJECT_FIT_CLASSES, effects.object_fit)
            or _arbitrary_property("objectFit", effects.object_fit)
        )
    for prefix, table, value, unit in (
        ("blur", BLUR_CLASSES, effects.blur, "px"),
        ("brightness", BRIGHTNESS_CLASSES, effects.brightness, "ratio"),
        ("contrast", CONTRAST_CLASSES, effects.contrast, "ratio"),
        ("saturate", SATURATION_CLASSES, effects.saturation, "ratio"),
        ("grayscale", GRAYSCALE_CLASSES, effects.grayscale, "%"),
        ("hue-rotate", HUE_ROTATE_CLASSES, effects.hue_rotate, "deg"),
        ("invert", INVERT_CLASSES, effects.invert, "%"),
        ("sepia", SEPIA_CLASSES, effects.sepia, "%"),
    ):
        if value is None:
            continue
        number = as_number(value)
        if number is None:
            number = _unit_number(value, "%" if unit == "ratio" else unit)
        if number is None:
            if str(value).strip():
                tokens.append(f"{prefix}-[{_escape_value(value)}]")
            continue
        token = _table_token(table, number)
        if token is None:
            if unit == "ratio":
                token = f"{prefix}-[{_fmt(round(number / 100, 4))}]"
            else:
                token = f"{prefix}-[{_fmt(number)}{unit}]"
        tokens.append(token)
    return tokens


def _constraint_token(prefix: str, value: Any) -> Optional[str]:
    number = as_number(value)
    if number is not None:
        return f"{prefix}-[{_fmt(number)}px]"
    if isinstance(value, str) and value.strip():
        return f"{prefix}-[{_escape_value(value)}]"
    return None


def _axis_token(prefix: str, value: float, allow_zero: bool) -> Optional[str]:
    if value <= 0 and not allow_zero:
        return None
    if value in SPACING_SCALE and SPACING_SCALE[value] != "px":
        return f"{prefix}-{SPACING_SCALE[value]}"
    return f"{prefix}-[{_fmt(round(value, 2))}px]"


def sizing_tokens(
    size: ConcreteSize,
    sizing: SizingStyles | None = None,
    *,
    is_container: bool = False,
) -> list[str]:
    tokens: list[str] = []
    for axis, prefix in (("width", "w"), ("height", "h")):
        mode = size.width_mode if axis == "width" else size.height_mode
        stretch = size.stretch_width if axis == "width" else size.stretch_height
        value = size.width if axis == "width" else size.height
        if mode == "fill" and stretch:
            tokens.append("w-full" if axis == "width" else "self-stretch")
        elif mode == "fill" and size.grow:
            tokens.append("flex-1")
        elif mode == "fill":
            tokens.append(f"{prefix}-full")
        elif mode == "hug" or axis in size.fallback_axes:
            tokens.append(f"{prefix}-fit")
        else:
            token = _axis_token(prefix, value, allow_zero=not is_container)
            if token:
                tokens.append(token)
    if sizing is not None:
        for prefix, value in (
            ("min-w", sizing.min_width),
            ("max-w", sizing.max_width),
            ("min-h", sizing.min_height),
            ("max-h", sizing.max_height),
        ):
            if value is not None:
                token = _constraint_token(prefix, value)
                if token:
                    tokens.append(token)
    return tokens


def default_type_classes(element_type: str) -> tuple[tuple[str, ...], bool]:
    defaults = DEFAULT_TYPE_CLASSES.get(element_type)
    if defaults is None:
        return FALLBACK_TYPE_CLASSES, False
    return defaults, True


def _dedupe(tokens: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for token in tokens:
        if token and token not in seen:
            seen.add(token)
            ordered.append(token)
    return ordered


def compile_style_tokens(styles: Mapping[str, Any]) -> list[str]:
    groups = StyleGroups.from_styles(styles)
    tokens: list[str] = []
    tokens.extend(_layout_tokens(groups.layout))
    tokens.extend(_spacing_tokens(groups.spacing))
    tokens.extend(_color_tokens(groups.color))
    tokens.extend(_border_tokens(groups.border))
    tokens.extend(_typography_tokens(groups.typography))
    tokens.extend(_effect_tokens(groups.effects))
    tokens.extend(_arbitrary_property(key, value) for key, value in groups.arbitrary)
    return _dedupe(tokens)


def compile_utility_classes(
    styles: Mapping[str, Any],
    size: ConcreteSize | None = None,
    element_type: str | None = None,
    *,
    is_container: bool = False,
) -> list[str]:
    tokens = compile_style_tokens(styles)
    if size is not None:
        tokens.extend(
            sizing_tokens(size, SizingStyles.from_styles(styles), is_container=is_container)
        )
    tokens = _dedupe(tokens)
    if not tokens and element_type is not None:
        defaults, _ = default_type_classes(element_type)
        tokens = list(defaults)
    return tokens


def breakpoint_prefix(breakpoint: Breakpoint) -> str:
    limit = breakpoint.max_width if breakpoint.max_width is not None else breakpoint.width
    return f"max-[{_fmt(limit)}px]:"


def responsive_tokens(
    wider_tokens: Sequence[str], narrower_tokens: Sequence[str], breakpoint: Breakpoint
) -> list[str]:
    wider = set(wider_tokens)
    prefix = breakpoint_prefix(breakpoint)
    return [f"{prefix}{token}" for token in narrower_tokens if token not in wider]


def _darker_shade(token: Optional[str]) -> Optional[str]:
    match = _SHADE_RE.match(token or "")
    if match is None:
        return None
    prefix, color, shade = match.groups()
    return f"{prefix}-{color}-{min(int(shade) + 100, 900)}"


def interaction_tokens(
    element_type: str, styles: Mapping[str, Any], *, has_variants: bool = False
) -> list[str]:
    """Default state classes for interactive types that declare no variants of their own."""
    if has_variants:
        return ["cursor-pointer"] if element_type in ("button", "link") else []
    if element_type == "button":
        tokens: list[str] = []
        if styles.get("backgroundColor"):
            darker = _darker_shade(color_token("bg", styles["backgroundColor"]))
            tokens.append(f"hover:{darker}" if darker else "hover:opacity-90")
        tokens.extend(["transition-colors", "cursor-pointer", "active:scale-[0.98]"])
        return tokens
    if element_type == "link":
        tokens = []
        darker = _darker_shade(color_token("text", styles.get("color")))
        if darker:
            tokens.append(f"hover:{darker}")
        tokens.extend(["transition-colors", "cursor-pointer"])
        return tokens
    if element_type == "input":
        return [
            "focus:outline-none",
            "focus:ring-2",
            "focus:ring-violet-500",
            "focus:border-transparent",
            "transition-all",
        ]
    return []


@lru_cache(maxsize=1)
def _reverse_table() -> dict[str, tuple[str, Any]]:
    reverse: dict[str, tuple[str, Any]] = {}
    for key, table in _ENUM_TABLES:
        for value, token in table.items():
            stored = _clean_number(value) if isinstance(value, float) else value
            reverse.setdefault(token, (key, stored))
    reverse["grow"] = ("flexGrow", 1)
    reverse["grow-0"] = ("flexGrow", 0)
    return reverse


@lru_cache(maxsize=1)
def _reverse_colors() -> dict[str, str]:
    return {name: value for value, name in COLOR_NAMES.items()}


@lru_cache(maxsize=1)
def _reverse_spacing() -> dict[str, float | int]:
    return {suffix: _clean_number(value) for value, suffix in SPACING_SCALE.items()}


def _bracket(token: str, prefix: str) -> Optional[str]:
    head = f"{prefix}-["
    if token.startswith(head) and token.endswith("]"):
        return token[len(head) : -1]
    return None


def _reverse_spacing_token(token: str) -> Optional[dict[str, Any]]:
    match = _SPACING_TOKEN_RE.match(token)
    if not match:
        return None
    negative, prefix, rest = match.groups()
    if rest == "auto":
        value: Any = "auto"
    elif rest.startswith("[") and rest.endswith("]"):
        value = _unescape_value(rest[1:-1])
    elif rest in _reverse_spacing():
        value = _reverse_spacing()[rest]
    else:
        return None
    if negative and isinstance(value, (int, float)):
        value = -value
    return {key: value for key in _SPACING_PREFIX_KEYS[prefix]}


def _reverse_escape_token(token: str) -> Optional[dict[str, Any]]:
    if token.startswith("[") and token.endswith("]") and ":" in token:
        prop, _, raw = token[1:-1].partition(":")
        return {snake_to_camel(prop.replace("-", "_")): raw.replace("_", " ")}
    for prefix, key in _COLOR_PREFIX_KEYS.items():
        if token.startswith(f"{prefix}-"):
            name = token[len(prefix) + 1 :]
            if name in _reverse_colors():
                return {key: _reverse_colors()[name]}
            inner = _bracket(token, prefix)
            if inner is None:
                continue
            if _PX_RE.match(inner) or _CSS_LENGTH_RE.match(inner):
                numeric_key = {"text": "fontSize", "border": "borderWidth"}.get(prefix)
                if numeric_key:
                    return {numeric_key: _unescape_value(inner)}
            return {key: inner.replace("_", " ")}
    for prefix, key in (
        ("rounded", "borderRadius"),
        ("leading", "lineHeight"),
        ("tracking", "letterSpacing"),
        ("z", "zIndex"),
        ("font", "fontWeight"),
        ("shadow", "boxShadow"),
        ("cursor", "cursor"),
        ("blur", "blur"),
        ("hue-rotate", "hueRotate"),
        ("grow", "flexGrow"),
    ):
        inner = _bracket(token, prefix)
        if inner is not None:
            if key == "hueRotate" and inner.endswith("deg"):
                return {key: _unescape_value(inner[:-3])}
            return {key: _unescape_value(inner)}
    opacity = _bracket(token, "opacity")
    if opacity is not None and opacity.endswith("%"):
        return {"opacity": _clean_number(round(float(opacity[:-1]) / 100, 4))}
    for prefix, key in _PERCENT_ESCAPE_KEYS.items():
        inner = _bracket(token, prefix)
        if inner is None:
            continue
        if inner.endswith("%"):
            return {key: _unescape_value(inner[:-1])}
        return {key: _unescape_value(inner)}
    filters = (("brightness", "brightness"), ("contrast", "contrast"), ("saturate", "saturation"))
    for prefix, key in filters:
        inner = _bracket(token, prefix)
        if inner is None:
            continue
        if _NUMBER_RE.match(inner):
            return {key: _clean_number(round(float(inner) * 100, 4))}
        return {key: _unescape_value(inner)}
    if token.startswith("grid-cols-"):
        rest = token[len("grid-cols-") :]
        if rest.isdigit():
            return {"gridTemplateColumns": f"repeat({int(rest)}, 1fr)"}
        if rest.startswith("[") and rest.endswith("]"):
            return {"gridTemplateColumns": rest[1:-1].replace("_", " ")}
    return None


def classes_to_styles(tokens: Iterable[str]) -> dict[str, Any]:
    styles: dict[str, Any] = {}
    for token in tokens:
        if not token or _VARIANT_PREFIX_RE.match(token):
            continue
        table_hit = _reverse_table().get(token)
        if table_hit is not None:
            key, value = table_hit
            styles[key] = value
            continue
        resolved = _reverse_spacing_token(token) or _reverse_escape_token(token)
        if resolved:
            styles.update(resolved)
    return styles
