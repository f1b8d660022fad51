from __future__ import annotations

from domain.models import Animation, TransitionConfig, Variant, VariantCondition
from domain.services.compile_variants import (
    PRESET_ANIMATIONS,
    animation_to_css,
    compile_stylesheet_rules,
    condition_selector,
    css_value,
    element_selector,
    keyframes_to_css,
    preset_animation,
    transition_to_css,
    variant_to_css,
)
from tests.helpers.document_builders import element

SELECTOR = '[data-element-id="btn"]'


def test_element_selector_uses_stable_id_attribute() -> None:
    assert element_selector("btn") == SELECTOR
    assert element_selector('a"b') == '[data-element-id="a\\"b"]'


def test_css_value_units() -> None:
    assert css_value("width", 12) == "12px"
    assert css_value("opacity", 0.5) == "0.5"
    assert css_value("fontWeight", 600) == "600"
    assert css_value("color", "#fff") == "#fff"


def test_hover_variant_with_transition() -> None:
    variant = Variant(
        id="hover",
        type="hover",
        styles={"opacity": 0.9, "backgroundColor": "#7c3aed"},
        transition=TransitionConfig(duration=150),
    )

    css = variant_to_css(variant, SELECTOR)

    assert css == (
        f"{SELECTOR} {{\n  transition: all 150ms ease;\n}}\n"
        "\n"
        f"{SELECTOR}:hover {{\n  background-color: #7c3aed;\n  opacity: 0.9;\n}}\n"
    )


def test_transition_lists_properties_with_delay() -> None:
    transition = TransitionConfig(
        property=["backgroundColor", "opacity"], duration=200, delay=50, easing="spring"
    )

    assert transition_to_css(transition) == (
        "background-color 200ms cubic-bezier(0.175, 0.885, 0.32, 1.275) 50ms, "
        "opacity 200ms cubic-bezier(0.175, 0.885, 0.32, 1.275) 50ms"
    )


def test_variant_transform_keys_compose_like_keyframes() -> None:
    variant = Variant(
        id="hover",
        type="hover",
        styles={"scale": 1.05, "rotate": 3, "y": -2, "x": "10%", "opacity": 0.9},
    )

    css = variant_to_css(variant, SELECTOR)

    assert css == (
        f"{SELECTOR}:hover {{\n"
        "  transform: translateX(10%) translateY(-2px) scale(1.05) rotate(3deg);\n"
        "  opacity: 0.9;\n"
        "}\n"
    )
    assert "px;" not in css


def test_custom_variant_condition_selectors() -> None:
    equals = Variant(
        id="selected",
        type="custom",
        condition=VariantCondition(type="prop", variable="isSelected", value=True),
    )
    not_equals = Variant(
        id="other",
        type="custom",
        condition=VariantCondition(type="state", operator="not_equals", value="open"),
    )

    assert condition_selector(equals) == '[data-prop-is-selected="true"]'
    assert condition_selector(not_equals) == ':not([data-state="open"])'
    assert condition_selector(Variant(id="plain", type="custom")) == '[data-variant="plain"]'


def test_keyframes_sorted_and_transforms_combined() -> None:
    animation = Animation(
        id="a1",
        keyframes=[
            {"offset": 1, "styles": {"x": 0, "opacity": 1}},
            {"offset": 0, "styles": {"x": -50, "scale": 0.8, "opacity": 0}},
        ],
    )

    assert keyframes_to_css(animation) == (
        "@keyframes anim-a1 {\n"
        "  0% {\n"
        "    transform: translateX(-50px) scale(0.8);\n"
        "    opacity: 0;\n"
        "  }\n"
        "  100% {\n"
        "    transform: translateX(0px);\n"
        "    opacity: 1;\n"
        "  }\n"
        "}\n"
    )


def test_preset_animation_shorthand() -> None:
    animation = preset_animation("fadeIn", "a1")
    assert animation is not None

    css = animation_to_css(animation, SELECTOR)

    assert f"{SELECTOR} {{\n  animation: anim-a1 300ms ease-out 0ms 1 normal forwards;\n}}\n" in css
    assert "@keyframes anim-a1" in css


def test_preset_overrides_and_unknown_preset() -> None:
    animation = preset_animation("pulse", "a2", duration=900, delay=None)

    assert animation is not None
    assert animation.duration == 900
    assert animation.iterations == "infinite"
    assert preset_animation("wobble", "a3") is None
    assert "fadeIn" in PRESET_ANIMATIONS


def test_stylesheet_rules_are_deterministic() -> None:
    button = element(
        "btn",
        "button",
        variants=[Variant(id="hover", styles={"opacity": 0.8, "color": "#fff"})],
        animations=[preset_animation("bounce", "btn_anim0")],
    )
    plain = element("plain", "text")

    first = compile_stylesheet_rules([button, plain])
    second = compile_stylesheet_rules([button, plain])

    assert first == second
    assert first.index(":hover") < first.index("@keyframes anim-btn_anim0")
    assert "plain" not in first


def test_variant_without_styles_emits_empty_block() -> None:
    css = variant_to_css(Variant(id="focus", type="focus"), SELECTOR)

    assert css == f"{SELECTOR}:focus {{\n}}\n"
