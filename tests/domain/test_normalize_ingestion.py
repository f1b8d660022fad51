from __future__ import annotations

import pytest

from domain.errors import ElementNotFound, MalformedIngestionInput
from domain.services.normalize_ingestion import (
    INGESTION_HISTORY_LABEL,
    IngestionNormalizer,
    SkippedNode,
    convert_animations,
    convert_flat_styles,
    convert_semantic_layout,
    convert_semantic_sizing,
    map_ingestion_type,
)
from domain.services.scene_graph_store import SceneGraphStore


def _root_id(store: SceneGraphStore) -> str:
    page = store.current_page()
    assert page is not None
    return page.root_element_id


def test_ingest_builds_nested_tree_and_selects_top_level(store: SceneGraphStore) -> None:
    normalizer = IngestionNormalizer(store)
    result = normalizer.ingest(
        [
            {
                "type": "section",
                "name": "Hero",
                "children": [
                    {"type": "text", "content": "Welcome"},
                    {"type": "button", "text": "Start"},
                ],
            }
        ]
    )

    section_id, text_id, button_id = result.element_ids
    assert result.created_ids == (section_id,)
    assert store.get_element(_root_id(store)).children == [section_id]
    assert store.get_element(section_id).children == [text_id, button_id]
    assert store.get_element(text_id).content == "Welcome"
    assert store.get_element(button_id).content == "Start"
    assert store.selected_ids == [section_id]
    assert [entry.action for entry in store.history][-1] == INGESTION_HISTORY_LABEL
    assert len(store.history) == 2


def test_containers_fill_width_inside_column_parent(store: SceneGraphStore) -> None:
    result = IngestionNormalizer(store).ingest([{"type": "section"}, {"type": "card"}])
    section = store.get_element(result.created_ids[0])
    card = store.get_element(result.created_ids[1])

    assert section.styles["resizeX"] == "fill"
    assert section.position_type == "relative"
    assert "resizeX" not in card.styles


def test_explicit_sizing_is_not_overridden(store: SceneGraphStore) -> None:
    result = IngestionNormalizer(store).ingest(
        [{"type": "section", "sizing": {"width": "hug"}}]
    )

    assert store.get_element(result.created_ids[0]).styles["resizeX"] == "hug"


def test_malformed_nodes_are_skipped_with_paths(store: SceneGraphStore) -> None:
    result = IngestionNormalizer(store).ingest(
        [
            {"name": "no type"},
            {"type": "stack", "children": [{"type": "text"}, {"type": ""}]},
            "not an object",
        ]
    )

    assert result.skipped == (
        SkippedNode(path="[0]", reason="missing element type"),
        SkippedNode(path="[1].children[1]", reason="missing element type"),
        SkippedNode(path="[2]", reason="expected an object"),
    )
    assert len(result.created_ids) == 1
    assert len(result.element_ids) == 2


def test_children_must_be_a_list(store: SceneGraphStore) -> None:
    result = IngestionNormalizer(store).ingest([{"type": "stack", "children": "nope"}])

    assert result.skipped == (SkippedNode(path="[0].children", reason="expected a list"),)
    assert len(result.created_ids) == 1


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Button ", "button"),
        ("divider", "frame"),
        ("page", "frame"),
        ("carousel", "frame"),
        ("model3d", "model3d"),
    ],
)
def test_type_mapping(raw: str, expected: str) -> None:
    assert map_ingestion_type(raw) == expected


def test_divider_gets_a_readable_name(store: SceneGraphStore) -> None:
    result = IngestionNormalizer(store).ingest([{"type": "divider"}])

    divider = store.get_element(result.created_ids[0])
    assert divider.type == "frame"
    assert divider.name == "Divider"


def test_flat_styles_split_size_from_styles() -> None:
    styles, size = convert_flat_styles(
        {"width": "100%", "height": 48, "color": "red", "fontSize": None}
    )

    assert styles == {"resizeX": "fill", "color": "red"}
    assert size == {"height": 48}


def test_semantic_sizing() -> None:
    styles, size = convert_semantic_sizing({"width": 320, "height": "fit", "maxWidth": 640})

    assert styles == {"resizeX": "fixed", "resizeY": "hug", "maxWidth": 640}
    assert size == {"width": 320}


def test_semantic_layout() -> None:
    assert convert_semantic_layout(
        {"direction": "row", "gap": 8, "align": "center", "justify": "between", "wrap": True}
    ) == {
        "display": "flex",
        "flexDirection": "row",
        "gap": 8,
        "alignItems": "center",
        "justifyContent": "space-between",
        "flexWrap": "wrap",
    }
    assert convert_semantic_layout({"columns": 3, "gap": 16}) == {
        "display": "grid",
        "gridTemplateColumns": "repeat(3, 1fr)",
        "gap": 16,
    }


def test_animation_presets_and_explicit_keyframes() -> None:
    animations = convert_animations(
        [
            "fade-in",
            {"preset": "slideInUp", "duration": 800},
            {"keyframes": [{"offset": 0, "styles": {"opacity": 0}}], "fillMode": "both"},
            {"preset": "wobble"},
            42,
        ],
        "el_9",
    )

    assert [animation.id for animation in animations] == ["el_9_anim0", "el_9_anim1", "el_9_anim2"]
    assert animations[0].name == "Fade In"
    assert animations[1].duration == 800
    assert animations[2].fill_mode == "both"


def test_repair_rules_run_on_ingested_elements(store: SceneGraphStore) -> None:
    result = IngestionNormalizer(store).ingest(
        [
            {"type": "button", "styles": {"height": 200, "fontSize": 40}},
            {"type": "image"},
            {"type": "row", "name": "Main navbar", "styles": {"height": 300}},
        ]
    )
    button, image, navbar = (store.get_element(item) for item in result.created_ids)

    assert button.size.height == 64
    assert button.styles["fontSize"] == 24
    assert image.src
    assert navbar.size.height == 96
    assert navbar.styles["maxHeight"] == 96


def test_design_response_can_create_a_new_page(store: SceneGraphStore) -> None:
    first_page = store.current_page_id
    result = IngestionNormalizer(store).ingest_design_response(
        {"createNewPage": True, "pageName": "Pricing", "elements": [{"type": "card"}]}
    )

    assert result.page_id is not None
    assert result.page_id != first_page
    assert store.current_page_id == result.page_id
    page = store.get_page(result.page_id)
    assert page.name == "Pricing"
    assert store.get_element(page.root_element_id).children == list(result.created_ids)


def test_design_response_rejects_non_list_elements(store: SceneGraphStore) -> None:
    with pytest.raises(MalformedIngestionInput):
        IngestionNormalizer(store).ingest_design_response({"elements": {"type": "text"}})


def test_replace_page_content_clears_existing_children(store: SceneGraphStore) -> None:
    normalizer = IngestionNormalizer(store)
    first = normalizer.ingest([{"type": "text"}, {"type": "text"}])

    second = normalizer.replace_page_content([{"type": "button"}])

    root = store.get_element(_root_id(store))
    assert root.children == list(second.created_ids)
    assert all(item not in store.elements for item in first.created_ids)


def test_unknown_parent_raises(store: SceneGraphStore) -> None:
    with pytest.raises(ElementNotFound):
        IngestionNormalizer(store).ingest([{"type": "text"}], parent_id="missing")
