from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from domain.models import (
    STABLE_ID_ATTRIBUTE,
    Animation,
    AnimationKeyframe,
    Element,
    TransitionConfig,
    Variant,
    VariantCondition,
)
from domain.styles import camel_to_kebab

EASING_VALUES: Mapping[str, str] = {
    "linear": "linear",
    "ease": "ease",
    "ease-in": "ease-in",
    "ease-out": "ease-out",
    "ease-in-out": "ease-in-out",
    "ease-in-quad": "cubic-bezier(0.55, 0.085, 0.68, 0.53)",
    "ease-out-quad": "cubic-bezier(0.25, 0.46, 0.45, 0.94)",
    "ease-in-out-quad": "cubic-bezier(0.455, 0.03, 0.515, 0.955)",
    "ease-in-cubic": "cubic-bezier(0.55, 0.055, 0.675, 0.19)",
    "ease-out-cubic": "cubic-bezier(0.215, 0.61, 0.355, 1)",
    "ease-in-out-cubic": "cubic-bezier(0.645, 0.045, 0.355, 1)",
    "ease-in-quart": "cubic-bezier(0.895, 0.03, 0.685, 0.22)",
    "ease-out-quart": "cubic-bezier(0.165, 0.84, 0.44, 1)",
    "ease-in-out-quart": "cubic-bezier(0.77, 0, 0.175, 1)",
    "ease-in-back": "cubic-bezier(0.6, -0.28, 0.735, 0.045)",
    "ease-out-back": "cubic-bezier(0.175, 0.885, 0.32, 1.275)",
    "ease-in-out-back": "cubic-bezier(0.68, -0.55, 0.265, 1.55)",
    "ease-in-elastic": "cubic-bezier(0.5, -0.5, 0.1, 1.5)",
    "ease-out-elastic": "cubic-bezier(0.5, 1.5, 0.5, 1)",
    "spring": "cubic-bezier(0.175, 0.885, 0.32, 1.275)",
}

PSEUDO_CLASSES: Mapping[str, str] = {
    "hover": ":hover",
    "active": ":active",
    "focus": ":focus",
    "disabled": ":disabled",
}

UNITLESS_CSS_KEYS: frozenset[str] = frozenset({"opacity", "fontWeight", "lineHeight", "zIndex"})

# (style key, transform function, unit) in emission order.
TRANSFORM_COMPONENTS: tuple[tuple[str, str, str], ...] = (
    ("x", "translateX", "px"),
    ("y", "translateY", "px"),
    ("scale", "scale", ""),
    ("scaleX", "scaleX", ""),
    ("scaleY", "scaleY", ""),
    ("rotate", "rotate", "deg"),
    ("rotateX", "rotateX", "deg"),
    ("rotateY", "rotateY", "deg"),
    ("skewX", "skewX", "deg"),
    ("skewY", "skewY", "deg"),
)
TRANSFORM_KEYS: frozenset[str] = frozenset(key for key, _, _ in TRANSFORM_COMPONENTS)


def _preset(
    name: str,
    keyframes: Sequence[tuple[float, dict[str, Any]]],
    duration: float,
    easing: str,
    iterations: int | str = 1,
    fill_mode: str = "none",
) -> dict[str, Any]:
    return {
        "name": name,
        "keyframes": [{"offset": offset, "styles": styles} for offset, styles in keyframes],
        "duration": duration,
        "delay": 0,
        "easing": easing,
        "iterations": iterations,
        "direction": "normal",
        "fill_mode": fill_mode,
    }


PRESET_ANIMATIONS: Mapping[str, dict[str, Any]] = {
    "fadeIn": _preset(
        "Fade In",
        [(0, {"opacity": 0}), (1, {"opacity": 1})],
        300,
        "ease-out",
        fill_mode="forwards",
    ),
    "fadeOut": _preset(
        "Fade Out",
        [(0, {"opacity": 1}), (1, {"opacity": 0})],
        300,
        "ease-out",
        fill_mode="forwards",
    ),
    "slideInLeft": _preset(
        "Slide In Left",
        [(0, {"x": -50, "opacity": 0}), (1, {"x": 0, "opacity": 1})],
        400,
        "ease-out-cubic",
        fill_mode="forwards",
    ),
    "slideInRight": _preset(
        "Slide In Right",
        [(0, {"x": 50, "opacity": 0}), (1, {"x": 0, "opacity": 1})],
        400,
        "ease-out-cubic",
        fill_mode="forwards",
    ),
    "slideInUp": _preset(
        "Slide In Up",
        [(0, {"y": 30, "opacity": 0}), (1, {"y": 0, "opacity": 1})],
        400,
        "ease-out-cubic",
        fill_mode="forwards",
    ),
    "slideInDown": _preset(
        "Slide In Down",
        [(0, {"y": -30, "opacity": 0}), (1, {"y": 0, "opacity": 1})],
        400,
        "ease-out-cubic",
        fill_mode="forwards",
    ),
    "scaleIn": _preset(
        "Scale In",
        [(0, {"scale": 0.8, "opacity": 0}), (1, {"scale": 1, "opacity": 1})],
        300,
        "ease-out-back",
        fill_mode="forwards",
    ),
    "scaleOut": _preset(
        "Scale Out",
        [(0, {"scale": 1, "opacity": 1}), (1, {"scale": 0.8, "opacity": 0})],
        200,
        "ease-in",
        fill_mode="forwards",
    ),
    "bounce": _preset("Bounce", [(0, {"y": 0}), (0.5, {"y": -20}), (1, {"y": 0})], 500, "ease-out"),
    "pulse": _preset(
        "Pulse",
        [(0, {"scale": 1}), (0.5, {"scale": 1.05}), (1, {"scale": 1})],
        600,
        "ease-in-out",
        iterations="infinite",
    ),
    "shake": _preset(
        "Shake",
        [(0, {"x": 0}), (0.25, {"x": -10}), (0.5, {"x": 10}), (0.75, {"x": -10}), (1, {"x": 0})],
        400,
        "ease-in-out",
    ),
    "rotate": _preset(
        "Rotate",
        [(0, {"rotate": 0}), (1, {"rotate": 360})],
        1000,
        "linear",
        iterations="infinite",
    ),
    "float": _preset(
        "Float",
        [(0, {"y": 0}), (0.5, {"y": -10}), (1, {"y": 0})],
        2000,
        "ease-in-out",
        iterations="infinite",
    ),
}


def preset_animation(preset_name: str, animation_id: str, **overrides: Any) -> Optional[Animation]:
    preset = PRESET_ANIMATIONS.get(preset_name)
    if preset is None:
        return None
    payload = {**preset, **{key: value for key, value in overrides.items() if value is not None}}
    payload["id"] = animation_id
    return Animation.model_validate(payload)


def format_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(round(number, 6))


def element_selector(element_id: str) -> str:
    escaped = element_id.replace("\\", "\\\\").replace('"', '\\"')
    return f'[{STABLE_ID_ATTRIBUTE}="{escaped}"]'


def css_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if key in UNITLESS_CSS_KEYS:
            return format_number(value)
        return f"{format_number(value)}px"
    return str(value)


def easing_value(easing: Optional[str]) -> str:
    if not easing:
        return EASING_VALUES["ease"]
    return EASING_VALUES.get(easing, easing)


def transition_to_css(transition: TransitionConfig) -> str:
    properties = (
        [transition.property] if isinstance(transition.property, str) else transition.property
    )
    delay = f" {format_number(transition.delay)}ms" if transition.delay else ""
    segments = [
        f"{camel_to_kebab(prop) if prop != 'all' else 'all'} "
        f"{format_number(transition.duration)}ms {easing_value(transition.easing)}{delay}"
        for prop in (properties or ["all"])
    ]
    return ", ".join(segments)


def _condition_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def condition_selector(variant: Variant) -> str:
    condition: Optional[VariantCondition] = variant.condition
    if condition is None:
        return f'[data-variant="{_condition_value(variant.id)}"]'
    attribute = f"data-{condition.type}"
    if condition.variable:
        attribute = f"{attribute}-{camel_to_kebab(condition.variable)}"
    value = _condition_value(condition.value)
    if condition.operator == "not_equals":
        return f':not([{attribute}="{value}"])'
    if condition.operator == "contains":
        return f'[{attribute}*="{value}"]'
    if condition.operator == "greater":
        return f'[{attribute}-gt="{value}"]'
    if condition.operator == "less":
        return f'[{attribute}-lt="{value}"]'
    return f'[{attribute}="{value}"]'


def variant_state_selector(variant: Variant, selector: str) -> str:
    if variant.type == "custom":
        return f"{selector}{condition_selector(variant)}"
    return f"{selector}{PSEUDO_CLASSES.get(variant.type, '')}"


def _declarations(styles: Mapping[str, Any], indent: str = "  ") -> list[str]:
    lines: list[str] = []
    for key in sorted(styles):
        value = styles[key]
        if value is None:
            continue
        lines.append(f"{indent}{camel_to_kebab(key)}: {css_value(key, value)};")
    return lines


def _transform_value(value: Any, unit: str) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return f"{format_number(value)}{unit}"
    text = str(value).strip()
    return text or None


def _style_declarations(styles: Mapping[str, Any], indent: str) -> list[str]:
    """Declarations with transform keys folded into one ``transform`` in component order."""
    parts = [str(styles["transform"])] if styles.get("transform") else []
    for key, function, unit in TRANSFORM_COMPONENTS:
        value = _transform_value(styles.get(key), unit)
        if value is not None:
            parts.append(f"{function}({value})")
    lines = [f"{indent}transform: {' '.join(parts)};"] if parts else []
    remaining = {
        key: value
        for key, value in styles.items()
        if key not in TRANSFORM_KEYS and key != "transform"
    }
    lines.extend(_declarations(remaining, indent=indent))
    return lines


def variant_to_css(variant: Variant, selector: str) -> str:
    blocks: list[str] = []
    if variant.transition is not None:
        transition = transition_to_css(variant.transition)
        blocks.append(f"{selector} {{\n  transition: {transition};\n}}\n")
    body = "\n".join(_style_declarations(variant.styles, indent="  "))
    state_selector = variant_state_selector(variant, selector)
    if body:
        blocks.append(f"{state_selector} {{\n{body}\n}}\n")
    else:
        blocks.append(f"{state_selector} {{\n}}\n")
    return "\n".join(blocks)


def keyframe_name(animation: Animation) -> str:
    return f"anim-{animation.id}"


def _keyframe_body(keyframe: AnimationKeyframe) -> list[str]:
    lines = _style_declarations(keyframe.styles, indent="    ")
    if keyframe.easing:
        lines.append(f"    animation-timing-function: {easing_value(keyframe.easing)};")
    return lines


def keyframes_to_css(animation: Animation) -> str:
    lines = [f"@keyframes {keyframe_name(animation)} {{"]
    for keyframe in sorted(animation.keyframes, key=lambda item: item.offset):
        lines.append(f"  {format_number(round(keyframe.offset * 100, 2))}% {{")
        lines.extend(_keyframe_body(keyframe))
        lines.append("  }")
    lines.append("}")
    return "\n".join(lines) + "\n"


def animation_shorthand(animation: Animation) -> str:
    iterations = (
        "infinite" if animation.iterations == "infinite" else format_number(animation.iterations)
    )
    return (
        f"{keyframe_name(animation)} {format_number(animation.duration)}ms "
        f"{easing_value(animation.easing)} {format_number(animation.delay)}ms "
        f"{iterations} {animation.direction} {animation.fill_mode}"
    )


def animations_to_css(animations: Sequence[Animation], selector: str) -> str:
    if not animations:
        return ""
    blocks = [keyframes_to_css(animation) for animation in animations]
    shorthand = ", ".join(animation_shorthand(animation) for animation in animations)
    blocks.append(f"{selector} {{\n  animation: {shorthand};\n}}\n")
    return "\n".join(blocks)


def animation_to_css(animation: Animation, selector: str) -> str:
    return animations_to_css([animation], selector)


def element_css(element: Element) -> str:
    selector = element_selector(element.id)
    blocks = [variant_to_css(variant, selector) for variant in element.variants]
    animations = animations_to_css(element.animations, selector)
    if animations:
        blocks.append(animations)
    return "\n".join(blocks)


def compile_stylesheet_rules(elements: Iterable[Element]) -> str:
    blocks = [css for css in (element_css(element) for element in elements) if css]
    return "\n".join(blocks)
