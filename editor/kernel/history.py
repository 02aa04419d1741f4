"""
Editor Kernel — History

Linear undo/redo over document values. Documents are immutable and share
untouched branches, so keeping whole snapshots is cheap.
"""

from __future__ import annotations

from editor.kernel.config import settings
from editor.kernel.types import Document


class History:
    """past ← present → future. Recording a new document clears the redo stack."""

    def __init__(self, initial: Document, limit: int | None = None) -> None:
        self.limit = max(1, limit if limit is not None else settings.HISTORY_LIMIT)
        self.past: list[Document] = []
        self.present: Document = initial
        self.future: list[Document] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def record(self, doc: Document) -> bool:
        """Make `doc` the present. Returns False when it already is (by identity)."""
        if doc is self.present:
            return False
        self.past.append(self.present)
        if len(self.past) > self.limit:
            # Oldest entry falls off
            del self.past[0]
        self.present = doc
        self.future.clear()
        return True

    def undo(self) -> Document | None:
        if not self.past:
            return None
        self.future.append(self.present)
        self.present = self.past.pop()
        return self.present

    def redo(self) -> Document | None:
        if not self.future:
            return None
        self.past.append(self.present)
        self.present = self.future.pop()
        return self.present

    def clear(self, doc: Document | None = None) -> None:
        self.past.clear()
        self.future.clear()
        if doc is not None:
            self.present = doc
