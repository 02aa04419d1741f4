"""
Editor Kernel — Selection & Interaction State Machine

Pure transitions over an immutable SelectionState. Commands that change the
document (delete, duplicate, drop) call the mutation engine and return
(new_state, MutationResult); a rejected mutation leaves the state as it was.

The renderer reads overlay_flags() per node to decide on outlines and
controls. Selection never feeds into props or style resolution.
"""

from __future__ import annotations

from dataclasses import replace

from editor.kernel import mutations
from editor.kernel.nodes import collect_ids
from editor.kernel.registry import Registry
from editor.kernel.types import NO_SELECTION, Document, MutationResult, SelectionState

IDLE = SelectionState()


# ---------------------------------------------------------------------------
# Pointer
# ---------------------------------------------------------------------------


def pointer_enter(state: SelectionState, node_id: str) -> SelectionState:
    return replace(state, hovered=node_id)


def pointer_leave(state: SelectionState, node_id: str) -> SelectionState:
    """Clear hover only if it is still on `node_id`."""
    if state.hovered != node_id:
        return state
    return replace(state, hovered=None)


def click(state: SelectionState, node_id: str | None) -> SelectionState:
    """Select `node_id`, replacing any prior selection. None = empty canvas."""
    return replace(state, selected=node_id)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def delete_selected(state: SelectionState, doc: Document) -> tuple[SelectionState, MutationResult]:
    if state.selected is None:
        return state, _nothing(doc, "no node selected")

    result = mutations.delete(doc, state.selected)
    if not result.applied:
        return state, result
    return reconcile(replace(state, selected=None), result.document), result


def duplicate_selected(state: SelectionState, doc: Document) -> tuple[SelectionState, MutationResult]:
    """Duplicate the selected node and select the copy."""
    if state.selected is None:
        return state, _nothing(doc, "no node selected")

    result = mutations.duplicate(doc, state.selected)
    if not result.applied:
        return state, result
    return replace(state, selected=result.node_id), result


def drag_start(state: SelectionState, node_id: str) -> SelectionState:
    return replace(state, dragging=node_id, selected=node_id)


def drag_cancel(state: SelectionState) -> SelectionState:
    return replace(state, dragging=None)


def drop(
    state: SelectionState,
    doc: Document,
    parent_id: str | None,
    index: int | None = None,
    *,
    registry: Registry | None = None,
) -> tuple[SelectionState, MutationResult]:
    """
    Move the dragged node under `parent_id`. Dragging ends either way;
    the moved node stays selected.
    """
    if state.dragging is None:
        return state, _nothing(doc, "no node is being dragged")

    result = mutations.move(doc, state.dragging, parent_id, index, registry=registry)
    return replace(state, dragging=None), result


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def reconcile(state: SelectionState, doc: Document) -> SelectionState:
    """Drop ids that no longer exist in `doc` (after delete, undo or redo)."""
    present = collect_ids(doc)
    return SelectionState(
        hovered=state.hovered if state.hovered in present else None,
        selected=state.selected if state.selected in present else None,
        dragging=state.dragging if state.dragging in present else None,
    )


def overlay_flags(state: SelectionState | None, node_id: str | None) -> frozenset[str]:
    """Which overlays to draw on `node_id`: any of "selected", "hovered", "dragging"."""
    if state is None or node_id is None:
        return frozenset()
    flags = set()
    if state.selected == node_id:
        flags.add("selected")
    if state.hovered == node_id:
        flags.add("hovered")
    if state.dragging == node_id:
        flags.add("dragging")
    return frozenset(flags)


def _nothing(doc: Document, msg: str) -> MutationResult:
    return MutationResult(document=doc, applied=False, error=f"{NO_SELECTION}: {msg}")
