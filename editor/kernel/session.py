"""
Editor Kernel — Editing Session

Sits between the pure functions (mutations, selection, renderer) and the
interaction handlers of one editing session. Owns exactly one document, its
selection state and its undo history.

Every handler runs synchronously to completion. A successful mutation becomes
the new present document and is recorded in history; a rejected one changes
nothing and its MutationResult is handed back to the caller.

Collaborators (persistence, content generation) only ever receive snapshot(),
an already-serialized copy of the document.
"""

from __future__ import annotations

import logging
from typing import Any

from editor.kernel import mutations, selection
from editor.kernel.config import settings
from editor.kernel.history import History
from editor.kernel.nodes import dump_document
from editor.kernel.registry import BUILTIN_REGISTRY, Registry
from editor.kernel.renderer import render
from editor.kernel.styles import is_valid_tier
from editor.kernel.types import Document, MutationResult, Node, RenderOptions, SelectionState

logger = logging.getLogger(__name__)


class EditorSession:
    """
    One user's editing session over one document.
    Coordinates mutations + selection + history + rendering.
    """

    def __init__(
        self,
        document: Document | None = None,
        registry: Registry | None = None,
        tier: str | None = None,
        history_limit: int | None = None,
    ) -> None:
        self.registry = registry or BUILTIN_REGISTRY
        self.tier = next((t for t in (tier, settings.DEFAULT_TIER) if t and is_valid_tier(t)), "desktop")
        self.selection: SelectionState = selection.IDLE
        self.history = History(document if document is not None else [], limit=history_limit)
        self.dirty = False

    @property
    def document(self) -> Document:
        return self.history.present

    # -- document lifecycle --

    def load(self, document: Document) -> None:
        """Replace the document wholesale (import, template applied). Clears history."""
        self.history.clear(document)
        self.selection = selection.IDLE
        self.dirty = False

    def snapshot(self) -> str:
        """Serialized document for collaborators."""
        return dump_document(self.document)

    def mark_saved(self) -> None:
        self.dirty = False

    # -- pointer --

    def pointer_enter(self, node_id: str) -> None:
        self.selection = selection.pointer_enter(self.selection, node_id)

    def pointer_leave(self, node_id: str) -> None:
        self.selection = selection.pointer_leave(self.selection, node_id)

    def click(self, node_id: str | None) -> None:
        self.selection = selection.click(self.selection, node_id)

    @property
    def selected_node(self) -> Node | None:
        if self.selection.selected is None:
            return None
        return mutations.find(self.document, self.selection.selected)

    # -- mutations --

    def insert(self, parent_id: str | None, node: Node, index: int | None = None) -> MutationResult:
        """Insert and select the new node."""
        result = self._commit(mutations.insert(self.document, parent_id, node, index, registry=self.registry))
        if result.applied:
            self.selection = selection.click(self.selection, result.node_id)
        return result

    def update(self, node_id: str, patch: dict[str, Any], *, replace: bool = False) -> MutationResult:
        return self._commit(mutations.update(self.document, node_id, patch, replace=replace))

    def delete(self, node_id: str) -> MutationResult:
        result = self._commit(mutations.delete(self.document, node_id))
        if result.applied:
            self.selection = selection.reconcile(self.selection, self.document)
        return result

    def duplicate(self, node_id: str) -> MutationResult:
        return self._commit(mutations.duplicate(self.document, node_id))

    def move(self, node_id: str, parent_id: str | None, index: int | None = None) -> MutationResult:
        return self._commit(mutations.move(self.document, node_id, parent_id, index, registry=self.registry))

    def apply(self, operation: dict[str, Any]) -> MutationResult:
        result = self._commit(mutations.apply(self.document, operation, registry=self.registry))
        if result.applied:
            self.selection = selection.reconcile(self.selection, self.document)
        return result

    def delete_selected(self) -> MutationResult:
        self.selection, result = selection.delete_selected(self.selection, self.document)
        return self._commit(result)

    def duplicate_selected(self) -> MutationResult:
        self.selection, result = selection.duplicate_selected(self.selection, self.document)
        return self._commit(result)

    # -- drag --

    def drag_start(self, node_id: str) -> None:
        self.selection = selection.drag_start(self.selection, node_id)

    def drag_cancel(self) -> None:
        self.selection = selection.drag_cancel(self.selection)

    def drop(self, parent_id: str | None, index: int | None = None) -> MutationResult:
        self.selection, result = selection.drop(
            self.selection, self.document, parent_id, index, registry=self.registry
        )
        return self._commit(result)

    # -- history --

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        doc = self.history.undo()
        if doc is None:
            return False
        logger.info("session: undo (%d left)", len(self.history.past))
        self._after_history_move()
        return True

    def redo(self) -> bool:
        doc = self.history.redo()
        if doc is None:
            return False
        logger.info("session: redo (%d left)", len(self.history.future))
        self._after_history_move()
        return True

    # -- view --

    def set_tier(self, tier: str) -> bool:
        if not is_valid_tier(tier):
            logger.warning("session: ignoring unknown tier %r", tier)
            return False
        self.tier = tier
        return True

    def render(self, *, title: str = "Untitled page", channel: str = "html", overlays: bool = True) -> str:
        options = RenderOptions(title=title, tier=self.tier, channel=channel, include_overlays=overlays)
        return render(self.document, options, self.selection, self.registry)

    # -- internals --

    def _commit(self, result: MutationResult) -> MutationResult:
        if result.applied and self.history.record(result.document):
            self.dirty = True
        return result

    def _after_history_move(self) -> None:
        self.selection = selection.reconcile(self.selection, self.document)
        self.dirty = True
