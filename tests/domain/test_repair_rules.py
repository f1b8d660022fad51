from __future__ import annotations

import pytest

from domain.element_defaults import DEFAULT_IMAGE_SRC
from domain.models import Element
from domain.services.repair_rules import (
    DEFAULT_REPAIR_RULES,
    RepairLimits,
    apply_repair_rules,
    clamp_button_metrics,
    clamp_header_height,
    clamp_section_padding,
    default_image_source,
    enforce_auto_layout_defaults,
    is_header_like,
)
from tests.helpers.document_builders import element

LIMITS = RepairLimits()


def test_header_height_and_max_height_are_clamped() -> None:
    header = element("h", "row", name="Site Header", size={"width": 1200, "height": 240})

    repaired = clamp_header_height(header, LIMITS)

    assert repaired.size.height == 96
    assert repaired.size.width == 1200
    assert repaired.styles["maxHeight"] == 96


@pytest.mark.parametrize(
    ("element_type", "name", "expected"),
    [
        ("frame", "Navbar", True),
        ("section", "Top Bar", True),
        ("text", "Header title", False),
        ("page", "Header", False),
        ("card", "Pricing", False),
    ],
)
def test_header_detection(element_type: str, name: str, expected: bool) -> None:
    assert is_header_like(element("x", element_type, name=name)) is expected


def test_button_height_padding_and_font_are_clamped() -> None:
    button = element(
        "b",
        "button",
        size={"width": 200, "height": 12},
        styles={"padding": "30px 60px", "fontSize": 8},
    )

    repaired = clamp_button_metrics(button, LIMITS)

    assert repaired.size.height == 32
    assert "padding" not in repaired.styles
    assert repaired.styles["paddingTop"] == 20
    assert repaired.styles["paddingBottom"] == 20
    assert repaired.styles["paddingLeft"] == 48
    assert repaired.styles["paddingRight"] == 48
    assert repaired.styles["fontSize"] == 12


def test_button_within_limits_is_unchanged() -> None:
    button = element(
        "b", "button", size={"width": 120, "height": 44}, styles={"padding": 12, "fontSize": 14}
    )

    assert clamp_button_metrics(button, LIMITS) is button


def test_unreadable_padding_is_left_alone() -> None:
    button = element(
        "b", "button", size={"width": 120, "height": 44}, styles={"padding": "1rem 2rem"}
    )

    assert clamp_button_metrics(button, LIMITS).styles == {"padding": "1rem 2rem"}


def test_auto_layout_defaults_fill_missing_flags() -> None:
    row = element("r", "row", styles={"gap": 8})
    grid = element("g", "grid")

    assert enforce_auto_layout_defaults(row, LIMITS).styles == {
        "gap": 8,
        "display": "flex",
        "flexDirection": "row",
        "alignItems": "center",
    }
    assert enforce_auto_layout_defaults(grid, LIMITS).styles["gridTemplateColumns"] == (
        "repeat(2, 1fr)"
    )


def test_explicit_display_is_respected() -> None:
    stack = element("s", "stack", styles={"display": "block"})

    assert enforce_auto_layout_defaults(stack, LIMITS) is stack


def test_section_padding_is_clamped() -> None:
    section = element("s", "section", styles={"padding": 200, "paddingTop": 40})

    repaired = clamp_section_padding(section, LIMITS)

    assert repaired.styles == {
        "paddingTop": 40,
        "paddingRight": 120,
        "paddingBottom": 120,
        "paddingLeft": 120,
    }


def test_image_without_source_gets_placeholder() -> None:
    image = element("i", "image", src="  ")

    assert default_image_source(image, LIMITS).src == DEFAULT_IMAGE_SRC
    assert default_image_source(element("j", "image", src="/a.png"), LIMITS).src == "/a.png"


def test_custom_limits() -> None:
    header = element("h", "frame", name="header", size={"width": 800, "height": 100})

    repaired = apply_repair_rules(header, limits=RepairLimits(header_max_height=64))

    assert repaired.size.height == 64


@pytest.mark.parametrize(
    "candidate",
    [
        element("h", "row", name="Header", size={"width": 900, "height": 300}),
        element("b", "button", size={"height": 90}, styles={"padding": 40, "fontSize": 30}),
        element("s", "section", styles={"padding": "160px 24px"}),
        element("g", "grid"),
        element("i", "image"),
    ],
)
def test_rules_are_idempotent(candidate: Element) -> None:
    once = apply_repair_rules(candidate, DEFAULT_REPAIR_RULES, LIMITS)

    assert apply_repair_rules(once, DEFAULT_REPAIR_RULES, LIMITS) == once
