"""
Editor Kernel — Shared Types

Data classes used across nodes, mutations, registry, renderer and session.
These are the contracts that bind the kernel together.

Nodes themselves are plain dicts in the interchange shape:

    {"id": str, "type": str, "props": {}, "style": {},
     "responsive": {"tablet": {}, "mobile": {}},   # optional
     "children": []}

A document is a list of root nodes. Nodes are never mutated in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable

# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

Node = dict[str, Any]
Document = list[Node]

# props, resolved style, pre-rendered children -> HTML fragment
Renderer = Callable[[dict[str, Any], dict[str, Any], str], str]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ID_PATTERN = re.compile(r"^[a-z0-9-]+$")

TIERS: tuple[str, ...] = ("desktop", "tablet", "mobile")

NODE_FIELDS: tuple[str, ...] = ("id", "type", "props", "style", "children")

# Fields an update patch may touch
PATCHABLE_FIELDS: tuple[str, ...] = ("props", "style", "responsive")

# Result error codes
NOT_FOUND = "NOT_FOUND"
NOT_CONTAINER = "NOT_CONTAINER"
INVALID_MOVE = "INVALID_MOVE"
UNKNOWN_OPERATION = "UNKNOWN_OPERATION"
INVALID_OPERATION = "INVALID_OPERATION"
NO_SELECTION = "NO_SELECTION"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class MutationResult:
    """
    Result of applying one mutation to a document.
    Mutations never throw. They always return one of these.

    On failure `document` is the input document (same object).
    `node_id` names the node the mutation produced or touched, when there is one
    (the copy's root for duplicate, the inserted node for insert).
    """

    document: Document
    applied: bool
    error: str | None = None
    node_id: str | None = None

    @property
    def code(self) -> str | None:
        """Error code without its detail, e.g. "NOT_FOUND"."""
        if self.error is None:
            return None
        return self.error.split(":", 1)[0]


@dataclass(frozen=True)
class SelectionState:
    """
    Editing-session interaction state overlaying the tree.

    Single-select. Hover is tracked independently of selection. All None is Idle.
    """

    hovered: str | None = None
    selected: str | None = None
    dragging: str | None = None

    @property
    def mode(self) -> str:
        """Dominant state: "dragging", "selected", "hovered" or "idle"."""
        if self.dragging is not None:
            return "dragging"
        if self.selected is not None:
            return "selected"
        if self.hovered is not None:
            return "hovered"
        return "idle"


@dataclass(frozen=True)
class RenderContract:
    """How one node type renders, and whether it takes children."""

    renderer: Renderer
    accepts_children: bool = False
    label: str = ""


@dataclass
class RenderOptions:
    """Options controlling what the page renderer includes in output."""

    title: str = "Untitled page"
    tier: str = "desktop"
    channel: str = "html"  # "html" or "text"
    include_overlays: bool = True
    include_base_css: bool = True


@dataclass
class ValidationReport:
    """Structural problems found in an inbound document. Never raised."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DocumentParseError(Exception):
    """Serialized document is not valid JSON or not a list of nodes."""

    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_valid_id(value: Any) -> bool:
    """Check if a value is a valid node id (lowercase letters, digits, hyphens)."""
    return isinstance(value, str) and bool(ID_PATTERN.match(value))
