from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from typing import Any

from domain.models import DEFAULT_BREAKPOINTS, Breakpoint, Element, Page, SceneSnapshot

PAGE_ID = "page_1"
ROOT_ID = "root"


def sequential_ids(prefix: str = "el") -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"{prefix}_{next(counter)}"


def element(element_id: str, element_type: str = "frame", **fields: Any) -> Element:
    payload: dict[str, Any] = {"id": element_id, "type": element_type, "name": element_id}
    payload.update(fields)
    return Element.model_validate(payload)


def page_root(children: Iterable[str] = (), **fields: Any) -> Element:
    payload: dict[str, Any] = {
        "size": {"width": 1440, "height": 900},
        "styles": {
            "backgroundColor": "#ffffff",
            "display": "flex",
            "flexDirection": "column",
            "resizeY": "hug",
        },
    }
    payload.update(fields)
    return element(ROOT_ID, "page", children=list(children), **payload)


def build_snapshot(
    *elements: Element,
    breakpoints: Iterable[Breakpoint] = DEFAULT_BREAKPOINTS,
    page_name: str = "Home",
) -> SceneSnapshot:
    """Snapshot with one page whose root is the element with id ``root``."""
    by_id = {item.id: item for item in elements}
    page = Page(id=PAGE_ID, name=page_name, root_element_id=ROOT_ID)
    return SceneSnapshot.capture(
        by_id, {PAGE_ID: page}, tuple(breakpoints), current_page_id=PAGE_ID
    )
