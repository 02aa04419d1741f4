"""
Selection -- interaction state machine

Covers:
  - Hover enter / leave, independent of selection
  - Single selection: clicking replaces, empty canvas clears
  - delete_selected / duplicate_selected and their failure paths
  - Drag start, cancel, drop (valid and invalid targets)
  - reconcile after the document changes
  - overlay_flags and mode
"""

from editor.kernel.mutations import find
from editor.kernel.nodes import collect_ids
from editor.kernel.selection import (
    IDLE,
    click,
    delete_selected,
    drag_cancel,
    drag_start,
    drop,
    duplicate_selected,
    overlay_flags,
    pointer_enter,
    pointer_leave,
    reconcile,
)
from editor.kernel.types import SelectionState


class TestHover:
    def test_enter(self):
        assert pointer_enter(IDLE, "t1").hovered == "t1"

    def test_enter_moves_hover(self):
        state = pointer_enter(pointer_enter(IDLE, "t1"), "img")
        assert state.hovered == "img"

    def test_leave_clears(self):
        assert pointer_leave(pointer_enter(IDLE, "t1"), "t1") == IDLE

    def test_stale_leave_ignored(self):
        state = pointer_enter(IDLE, "img")
        assert pointer_leave(state, "t1") is state

    def test_hover_keeps_selection(self):
        state = pointer_enter(click(IDLE, "t1"), "img")
        assert state.selected == "t1"
        assert state.hovered == "img"


class TestClick:
    def test_select(self):
        state = click(IDLE, "t1")
        assert state.selected == "t1"
        assert state.mode == "selected"

    def test_single_selection(self):
        state = click(click(IDLE, "t1"), "img")
        assert state.selected == "img"

    def test_empty_canvas_clears(self):
        assert click(click(IDLE, "t1"), None).selected is None

    def test_states_are_immutable(self):
        state = click(IDLE, "t1")
        click(state, "img")
        assert state.selected == "t1"
        assert IDLE == SelectionState()


class TestCommands:
    def test_delete_selected(self, page):
        state, result = delete_selected(click(IDLE, "inner"), page)
        assert result.applied
        assert state.selected is None
        assert "inner" not in collect_ids(result.document)

    def test_delete_selected_drops_hover_inside_subtree(self, page):
        state = pointer_enter(click(IDLE, "inner"), "img")
        state, result = delete_selected(state, page)
        assert state == IDLE

    def test_delete_without_selection(self, page):
        state, result = delete_selected(IDLE, page)
        assert state is IDLE
        assert result.code == "NO_SELECTION"
        assert result.document is page

    def test_delete_stale_selection(self, page):
        before = click(IDLE, "ghost")
        state, result = delete_selected(before, page)
        assert state is before
        assert result.code == "NOT_FOUND"

    def test_duplicate_selects_copy(self, page):
        state, result = duplicate_selected(click(IDLE, "t1"), page)
        assert result.applied
        assert state.selected == result.node_id
        assert state.selected != "t1"
        assert find(result.document, state.selected)["props"]["content"] == "Hello"

    def test_duplicate_without_selection(self, page):
        state, result = duplicate_selected(IDLE, page)
        assert state is IDLE
        assert result.code == "NO_SELECTION"


class TestDrag:
    def test_drag_start_selects(self):
        state = drag_start(IDLE, "img")
        assert state.dragging == "img"
        assert state.selected == "img"
        assert state.mode == "dragging"

    def test_drag_cancel(self):
        state = drag_cancel(drag_start(IDLE, "img"))
        assert state.dragging is None
        assert state.selected == "img"

    def test_drop_moves(self, page):
        state, result = drop(drag_start(IDLE, "img"), page, "foot", 0)
        assert result.applied
        assert find(result.document, "foot")["children"][0]["id"] == "img"
        assert state.dragging is None
        assert state.selected == "img"

    def test_drop_on_invalid_target_ends_drag(self, page):
        state, result = drop(drag_start(IDLE, "c"), page, "inner")
        assert result.code == "INVALID_MOVE"
        assert result.document is page
        assert state.dragging is None

    def test_drop_without_drag(self, page):
        state, result = drop(IDLE, page, "foot")
        assert state is IDLE
        assert result.code == "NO_SELECTION"
        assert "dragged" in result.error


class TestReconcile:
    def test_keeps_present_ids(self, page):
        state = SelectionState(hovered="t1", selected="img")
        assert reconcile(state, page) == state

    def test_drops_missing_ids(self, page):
        state = SelectionState(hovered="ghost", selected="img", dragging="gone")
        assert reconcile(state, page) == SelectionState(selected="img")


class TestOverlayFlags:
    def test_none_state(self):
        assert overlay_flags(None, "t1") == frozenset()

    def test_all_flags(self):
        state = SelectionState(hovered="t1", selected="t1", dragging="t1")
        assert overlay_flags(state, "t1") == {"selected", "hovered", "dragging"}

    def test_other_node(self):
        assert overlay_flags(click(IDLE, "t1"), "img") == frozenset()

    def test_none_node(self):
        assert overlay_flags(SelectionState(selected=None), None) == frozenset()

    def test_modes(self):
        assert IDLE.mode == "idle"
        assert pointer_enter(IDLE, "t1").mode == "hovered"
