from __future__ import annotations

import pytest

from domain.errors import ElementNotFound, PageNotFound, StructuralError
from domain.models import Position
from domain.services.scene_graph_store import (
    INITIAL_HISTORY_LABEL,
    SceneGraphStore,
    check_tree_integrity,
)


def _root_id(store: SceneGraphStore) -> str:
    page = store.current_page()
    assert page is not None
    return page.root_element_id


def test_new_store_has_one_page_and_initial_history(store: SceneGraphStore) -> None:
    assert len(store.pages) == 1
    assert [entry.action for entry in store.history] == [INITIAL_HISTORY_LABEL]
    assert store.current_breakpoint_id == "desktop"
    assert not store.can_undo()
    assert not store.can_redo()


def test_create_element_under_auto_layout_parent_is_relative(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    button_id = store.create_element("button", root_id)
    button = store.get_element(button_id)

    assert button.parent_id == root_id
    assert button.position_type == "relative"
    assert button.content == "Button"
    assert store.get_element(root_id).children == [button_id]


def test_create_element_under_plain_frame_is_absolute(store: SceneGraphStore) -> None:
    frame_id = store.create_element("frame", _root_id(store))
    text_id = store.create_element("text", frame_id, {"x": 12, "y": 30})
    text = store.get_element(text_id)

    assert text.position_type == "absolute"
    assert text.position == Position(x=12, y=30)


def test_mutations_do_not_save_history(store: SceneGraphStore) -> None:
    element_id = store.create_element("frame", _root_id(store))
    store.update_element_styles(element_id, {"backgroundColor": "#123456"})

    assert len(store.history) == 1


def test_style_edits_undo_redo_and_truncate_redo(store: SceneGraphStore) -> None:
    element_id = store.create_element("frame", _root_id(store))
    store.save_to_history("Add frame")
    for color in ("#111111", "#222222", "#333333"):
        store.update_element_styles(element_id, {"backgroundColor": color})
        store.save_to_history(f"Set {color}")

    assert store.undo()
    assert store.get_element(element_id).styles["backgroundColor"] == "#222222"

    assert store.redo()
    assert store.get_element(element_id).styles["backgroundColor"] == "#333333"

    store.undo()
    store.update_element_styles(element_id, {"backgroundColor": "#444444"})
    store.save_to_history("Set #444444")

    assert not store.can_redo()
    assert store.get_element(element_id).styles["backgroundColor"] == "#444444"
    assert store.history[-1].action == "Set #444444"


def test_history_is_bounded() -> None:
    store = SceneGraphStore(history_limit=3)
    root_id = _root_id(store)
    for index in range(5):
        store.update_element_styles(root_id, {"gap": index})
        store.save_to_history(f"Gap {index}")

    assert len(store.history) == 3
    assert store.history_index == 2
    assert [entry.action for entry in store.history] == ["Gap 2", "Gap 3", "Gap 4"]


def test_update_styles_none_removes_key(store: SceneGraphStore) -> None:
    element_id = store.create_element("frame", _root_id(store))
    store.update_element_styles(element_id, {"borderRadius": None, "opacity": 0.5})
    styles = store.get_element(element_id).styles

    assert "borderRadius" not in styles
    assert styles["opacity"] == 0.5


def test_unknown_element_raises_and_leaves_store_untouched(store: SceneGraphStore) -> None:
    before = dict(store.elements)

    with pytest.raises(ElementNotFound):
        store.update_element_styles("missing", {"color": "red"})
    with pytest.raises(ElementNotFound):
        store.create_element("text", "missing")

    assert dict(store.elements) == before


def test_delete_removes_subtree_and_selection(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    card_id = store.create_element("card", root_id)
    text_id = store.create_element("text", card_id)
    store.select([card_id, text_id])

    removed = store.delete_element(card_id)

    assert set(removed) == {card_id, text_id}
    assert card_id not in store.elements
    assert text_id not in store.elements
    assert store.get_element(root_id).children == []
    assert store.selected_ids == []
    assert check_tree_integrity(store.elements) == []


def test_page_root_cannot_be_deleted(store: SceneGraphStore) -> None:
    with pytest.raises(StructuralError):
        store.delete_element(_root_id(store))


def test_reparent_moves_child_and_updates_position_type(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    frame_id = store.create_element("frame", root_id)
    stack_id = store.create_element("stack", root_id)
    text_id = store.create_element("text", frame_id)

    store.reparent_element(text_id, stack_id)

    assert store.get_element(frame_id).children == []
    assert store.get_element(stack_id).children == [text_id]
    assert store.get_element(text_id).parent_id == stack_id
    assert store.get_element(text_id).position_type == "relative"
    assert check_tree_integrity(store.elements) == []


def test_reparent_into_own_subtree_is_rejected(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    outer_id = store.create_element("stack", root_id)
    inner_id = store.create_element("stack", outer_id)

    with pytest.raises(StructuralError):
        store.reparent_element(outer_id, inner_id)
    assert store.get_element(outer_id).parent_id == root_id


def test_reparent_within_same_parent_reorders(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    first = store.create_element("text", root_id)
    second = store.create_element("text", root_id)

    store.reparent_element(second, root_id, 0)

    assert store.get_element(root_id).children == [second, first]


def test_responsive_styles_reject_unknown_breakpoint(store: SceneGraphStore) -> None:
    element_id = store.create_element("text", _root_id(store))
    with pytest.raises(ValueError, match="Unknown breakpoint"):
        store.update_responsive_styles(element_id, "watch", {"fontSize": 10})


def test_responsive_styles_patch_and_clear(store: SceneGraphStore) -> None:
    element_id = store.create_element("text", _root_id(store))
    store.update_responsive_styles(element_id, "mobile", {"fontSize": 12})
    assert store.get_element(element_id).responsive_styles == {"mobile": {"fontSize": 12}}

    store.clear_responsive_styles(element_id, "mobile")
    assert store.get_element(element_id).responsive_styles == {}


def test_update_element_rejects_structural_fields(store: SceneGraphStore) -> None:
    element_id = store.create_element("text", _root_id(store))
    with pytest.raises(ValueError, match="children"):
        store.update_element(element_id, children=["x"])

    store.update_element(element_id, content="Hello", aria_label="Greeting")
    updated = store.get_element(element_id)
    assert updated.content == "Hello"
    assert updated.aria_label == "Greeting"


def test_variants_and_animations_replace_by_id(store: SceneGraphStore) -> None:
    element_id = store.create_element("button", _root_id(store))
    store.add_variant(element_id, {"id": "hover", "styles": {"opacity": 0.8}})
    store.add_variant(element_id, {"id": "hover", "styles": {"opacity": 0.6}})
    store.add_animation(element_id, {"id": "a1", "keyframes": [{"offset": 0}, {"offset": 1}]})

    button = store.get_element(element_id)
    assert [variant.styles for variant in button.variants] == [{"opacity": 0.6}]
    assert [animation.id for animation in button.animations] == ["a1"]
    assert store.remove_variant(element_id, "hover")
    assert not store.remove_variant(element_id, "hover")
    assert store.remove_animation(element_id, "a1")


def test_pages_add_rename_duplicate_delete(store: SceneGraphStore) -> None:
    first_page = store.current_page()
    assert first_page is not None
    text_id = store.create_element("text", first_page.root_element_id)

    second = store.add_page("About")
    store.rename_page(second, "About us")
    copy_id = store.duplicate_page(first_page.id)
    copy = store.get_page(copy_id)

    assert store.get_page(second).name == "About us"
    assert copy.name == f"{first_page.name} (Copy)"
    copied_root = store.get_element(copy.root_element_id)
    assert len(copied_root.children) == 1
    assert copied_root.children[0] != text_id
    assert check_tree_integrity(store.elements) == []

    store.set_current_page(second)
    removed = store.delete_page(second)
    assert store.current_page_id != second
    assert all(element_id not in store.elements for element_id in removed)


def test_last_page_cannot_be_deleted(store: SceneGraphStore) -> None:
    page = store.current_page()
    assert page is not None
    with pytest.raises(StructuralError):
        store.delete_page(page.id)


def test_unknown_page_raises(store: SceneGraphStore) -> None:
    with pytest.raises(PageNotFound):
        store.set_current_page("nope")


def test_gesture_saves_one_entry(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    with store.gesture("Drag") as editing:
        element_id = editing.create_element("frame", root_id)
        editing.move_element(element_id, {"x": 10})
        editing.move_element(element_id, {"x": 20})
        editing.save_to_history("ignored inside gesture")

    assert [entry.action for entry in store.history] == [INITIAL_HISTORY_LABEL, "Drag"]
    assert store.get_element(element_id).position.x == 20


def test_gesture_rolls_back_on_error(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    with pytest.raises(ElementNotFound):
        with store.gesture("Broken") as editing:
            editing.create_element("frame", root_id)
            editing.move_element("missing", {"x": 1})

    assert store.get_element(root_id).children == []
    assert len(store.history) == 1


def test_document_round_trip_keeps_history(store: SceneGraphStore) -> None:
    element_id = store.create_element("text", _root_id(store))
    store.save_to_history("Add text")

    restored = SceneGraphStore.from_document(store.to_document())

    assert restored.get_element(element_id).type == "text"
    assert restored.history_index == store.history_index
    assert restored.undo()
    assert element_id not in restored.elements


def test_check_tree_integrity_reports_broken_links(store: SceneGraphStore) -> None:
    root_id = _root_id(store)
    element_id = store.create_element("text", root_id)
    elements = dict(store.elements)
    elements[element_id] = elements[element_id].model_copy(update={"parent_id": "ghost"})

    problems = check_tree_integrity(elements)

    assert any("ghost" in problem for problem in problems)
    assert any("points to parent" in problem for problem in problems)
