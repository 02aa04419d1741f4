"""
Editor Kernel — Element Nodes

Construction, tolerant field access and traversal for the element tree.

Every accessor reads a missing or mistyped field as its empty default, so a
document that fails validation can still be walked, mutated and rendered.
Nothing in here mutates a node.
"""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Iterable, Iterator
from typing import Any

from editor.kernel.config import MAX_ID_SUFFIX_LENGTH, MIN_ID_SUFFIX_LENGTH, settings
from editor.kernel.types import Document, DocumentParseError, Node

_SLUG_RE = re.compile(r"[^a-z0-9]+")

# ---------------------------------------------------------------------------
# Ids
# ---------------------------------------------------------------------------


def new_id(node_type: str = "node", taken: Iterable[str] = ()) -> str:
    """
    Generate a fresh node id: "<type-slug>-<hex>".

    The result matches ^[a-z0-9-]+$ and is not in `taken`.
    """
    slug = _SLUG_RE.sub("-", str(node_type).lower()).strip("-") or "node"
    taken_set = taken if isinstance(taken, set | frozenset) else set(taken)
    length = min(MAX_ID_SUFFIX_LENGTH, max(MIN_ID_SUFFIX_LENGTH, settings.ID_SUFFIX_LENGTH))
    while True:
        candidate = f"{slug}-{uuid.uuid4().hex[:length]}"
        if candidate not in taken_set:
            return candidate


def make_node(
    type: str,
    props: dict[str, Any] | None = None,
    style: dict[str, Any] | None = None,
    responsive: dict[str, Any] | None = None,
    children: list[Node] | None = None,
    id: str | None = None,
) -> Node:
    """Build a well-formed node. A fresh id is generated when none is given."""
    node: Node = {
        "id": id or new_id(type),
        "type": type,
        "props": dict(props or {}),
        "style": dict(style or {}),
        "children": list(children or []),
    }
    if responsive:
        node["responsive"] = dict(responsive)
    return node


# ---------------------------------------------------------------------------
# Tolerant accessors
# ---------------------------------------------------------------------------


def node_id(node: Any) -> str | None:
    if not isinstance(node, dict):
        return None
    value = node.get("id")
    return value if isinstance(value, str) else None


def node_type(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    value = node.get("type")
    return value if isinstance(value, str) else ""


def node_props(node: Any) -> dict[str, Any]:
    value = node.get("props") if isinstance(node, dict) else None
    return value if isinstance(value, dict) else {}


def node_style(node: Any) -> dict[str, Any]:
    value = node.get("style") if isinstance(node, dict) else None
    return value if isinstance(value, dict) else {}


def node_responsive(node: Any) -> dict[str, Any]:
    value = node.get("responsive") if isinstance(node, dict) else None
    return value if isinstance(value, dict) else {}


def node_children(node: Any) -> list[Any]:
    value = node.get("children") if isinstance(node, dict) else None
    return value if isinstance(value, list) else []


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def iter_nodes(nodes: Iterable[Any]) -> Iterator[Node]:
    """Depth-first, pre-order walk. Entries that are not dicts are skipped."""
    for node in nodes:
        if not isinstance(node, dict):
            continue
        yield node
        yield from iter_nodes(node_children(node))


def collect_ids(nodes: Iterable[Any]) -> set[str]:
    """Every id present in a document or subtree list."""
    return {nid for nid in (node_id(n) for n in iter_nodes(nodes)) if nid is not None}


def node_count(doc: Document) -> int:
    return sum(1 for _ in iter_nodes(doc))


def subtree_size(node: Node) -> int:
    """Number of nodes in the subtree rooted at `node`, itself included."""
    return sum(1 for _ in iter_nodes([node]))


def outline(doc: Document) -> list[tuple[int, Node]]:
    """
    Flatten the tree into (depth, node) pairs in document order.
    Drives the layers panel and the text render channel.
    """
    rows: list[tuple[int, Node]] = []

    def walk(nodes: list[Any], depth: int) -> None:
        for node in nodes:
            if not isinstance(node, dict):
                continue
            rows.append((depth, node))
            walk(node_children(node), depth + 1)

    walk(doc, 0)
    return rows


# ---------------------------------------------------------------------------
# Interchange
# ---------------------------------------------------------------------------


def dump_document(doc: Document) -> str:
    """Serialize a document for the persistence collaborator. Deterministic."""
    return json.dumps(doc, sort_keys=True, ensure_ascii=False)


def load_document(text: str) -> Document:
    """
    Parse a serialized document.

    Raises DocumentParseError when the text is not JSON or the root is not a
    list. Node contents are not validated here; see validation.validate_document.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DocumentParseError(f"Document is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise DocumentParseError(f"Document root must be a list, got {type(data).__name__}")
    return data
