"""
Editor Kernel — Tree Mutation Engine

Pure functions: (document, ...) → MutationResult
No side effects. No IO. Never raises. The input document is never modified.

Every operation is a depth-first rewrite that rebuilds only the path from the
root list down to the target. Branches that do not contain the target are
returned by reference, so a view layer can skip re-rendering them with an
identity check. On failure the result carries the input document itself.

Operations: find, find_parent, update, delete, duplicate, insert, move, apply
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from editor.kernel.nodes import collect_ids, new_id, node_children, node_id, node_type
from editor.kernel.registry import BUILTIN_REGISTRY, Registry
from editor.kernel.types import (
    INVALID_MOVE,
    INVALID_OPERATION,
    NOT_CONTAINER,
    NOT_FOUND,
    PATCHABLE_FIELDS,
    UNKNOWN_OPERATION,
    Document,
    MutationResult,
    Node,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def find(doc: Document, target_id: str) -> Node | None:
    """Return the node with `target_id`, or None when absent."""
    for node in doc:
        if not isinstance(node, dict):
            continue
        if node_id(node) == target_id:
            return node
        found = find(node_children(node), target_id)
        if found is not None:
            return found
    return None


def find_parent(doc: Document, target_id: str) -> tuple[Node | None, int] | None:
    """
    Locate `target_id` within its parent.
    Returns (parent, index), with parent None for root nodes, or None when absent.
    """

    def walk(nodes: list[Any], parent: Node | None) -> tuple[Node | None, int] | None:
        for index, node in enumerate(nodes):
            if not isinstance(node, dict):
                continue
            if node_id(node) == target_id:
                return parent, index
            hit = walk(node_children(node), node)
            if hit is not None:
                return hit
        return None

    return walk(doc, None)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def update(doc: Document, target_id: str, patch: dict[str, Any], *, replace: bool = False) -> MutationResult:
    """
    Patch a node's props, style and/or responsive mappings.

    Each field present in `patch` is shallow-merged into the node's mapping;
    a None value removes that key. With replace=True the present fields are
    replaced wholesale. Fields absent from the patch are untouched.
    """
    if not isinstance(patch, dict):
        return _reject(doc, INVALID_OPERATION, "patch must be an object")

    changes = {k: v for k, v in patch.items() if k in PATCHABLE_FIELDS and isinstance(v, dict)}
    if not changes:
        # Nothing to patch: the document comes back as-is
        if find(doc, target_id) is None:
            return _reject(doc, NOT_FOUND, target_id)
        return _ok(doc, target_id)

    def apply_patch(node: Node) -> list[Node]:
        updated = dict(node)
        for key, value in changes.items():
            if replace:
                updated[key] = dict(value)
            else:
                current = node.get(key)
                merged = dict(current) if isinstance(current, dict) else {}
                for k, v in value.items():
                    if v is None:
                        merged.pop(k, None)
                    else:
                        merged[k] = v
                updated[key] = merged
        return [updated]

    new_doc, found = _rewrite(doc, target_id, apply_patch)
    if not found:
        return _reject(doc, NOT_FOUND, target_id)
    return _ok(new_doc, target_id)


def delete(doc: Document, target_id: str) -> MutationResult:
    """Remove a node and its whole subtree."""
    new_doc, found = _rewrite(doc, target_id, lambda node: [])
    if not found:
        return _reject(doc, NOT_FOUND, target_id)
    return _ok(new_doc, target_id)


def duplicate(doc: Document, target_id: str) -> MutationResult:
    """
    Insert a copy of the subtree rooted at `target_id` as its next sibling.
    Every node in the copy gets a fresh id; everything else is copied verbatim.
    The result's node_id is the copy's root id.
    """
    original = find(doc, target_id)
    if original is None:
        return _reject(doc, NOT_FOUND, target_id)

    taken = collect_ids(doc)
    clone = _with_fresh_ids(original, taken, force=True)
    new_doc, _ = _rewrite(doc, target_id, lambda node: [node, clone])
    return _ok(new_doc, node_id(clone))


def insert(
    doc: Document,
    parent_id: str | None,
    node: Node,
    index: int | None = None,
    *,
    registry: Registry | None = None,
) -> MutationResult:
    """
    Insert `node` under `parent_id` (None = root list) at `index`.

    index is clamped to the valid range; None appends. Nodes in the inserted
    subtree keep their ids unless missing or already used in the document.
    """
    if not isinstance(node, dict):
        return _reject(doc, INVALID_OPERATION, "node must be an object")

    reg = registry or BUILTIN_REGISTRY
    if parent_id is not None:
        parent = find(doc, parent_id)
        if parent is None:
            return _reject(doc, NOT_FOUND, parent_id)
        if not reg.accepts_children(node_type(parent)):
            return _reject(doc, NOT_CONTAINER, f"{parent_id} ({node_type(parent) or 'untyped'})")

    prepared = _with_fresh_ids(node, collect_ids(doc), force=False)
    return _ok(_place(doc, parent_id, prepared, index), node_id(prepared))


def move(
    doc: Document,
    target_id: str,
    parent_id: str | None,
    index: int | None = None,
    *,
    registry: Registry | None = None,
) -> MutationResult:
    """
    Detach a subtree and re-insert it under `parent_id` at `index`.

    Ids are kept. index counts positions in the target list after the node has
    been detached. Moving a node into itself or its own descendant is rejected.
    """
    node = find(doc, target_id)
    if node is None:
        return _reject(doc, NOT_FOUND, target_id)

    reg = registry or BUILTIN_REGISTRY
    if parent_id is not None:
        parent = find(doc, parent_id)
        if parent is None:
            return _reject(doc, NOT_FOUND, parent_id)
        if parent_id in collect_ids([node]):
            return _reject(doc, INVALID_MOVE, f"{target_id} cannot move into its own subtree")
        if not reg.accepts_children(node_type(parent)):
            return _reject(doc, NOT_CONTAINER, f"{parent_id} ({node_type(parent) or 'untyped'})")

    detached, _ = _rewrite(doc, target_id, lambda n: [])
    return _ok(_place(detached, parent_id, node, index), target_id)


# ---------------------------------------------------------------------------
# Operation dispatch
# ---------------------------------------------------------------------------


def validate_operation(operation: Any) -> list[str]:
    """
    Structural check of an operation dict. Returns error strings; empty = valid.
    Does not check whether the ids exist; that is the handler's job.
    """
    if not isinstance(operation, dict):
        return ["Operation must be an object"]

    op = operation.get("op")
    if not isinstance(op, str) or op not in _HANDLERS:
        return [f"Unknown operation: {op}"]

    errors: list[str] = []
    for key in _REQUIRED[op]:
        if key not in operation:
            errors.append(f"{op} requires '{key}'")
    if "id" in operation and not isinstance(operation["id"], str):
        errors.append("'id' must be a string")
    if operation.get("parent") is not None and not isinstance(operation["parent"], str):
        errors.append("'parent' must be a string or null")
    if op == "node.update" and not isinstance(operation.get("patch"), dict):
        errors.append("'patch' must be an object")
    if op == "node.insert" and not isinstance(operation.get("node"), dict):
        errors.append("'node' must be an object")
    index = operation.get("index")
    if index is not None and (not isinstance(index, int) or isinstance(index, bool)):
        errors.append("'index' must be an integer")
    return errors


def apply(doc: Document, operation: dict[str, Any], *, registry: Registry | None = None) -> MutationResult:
    """
    Apply one operation dict, e.g. {"op": "node.delete", "id": "hero-1"}.
    Pure. Unknown or malformed operations are rejected, never raised.
    """
    op = operation.get("op") if isinstance(operation, dict) else None
    if not isinstance(op, str) or op not in _HANDLERS:
        return _reject(doc, UNKNOWN_OPERATION, str(op))

    errors = validate_operation(operation)
    if errors:
        return _reject(doc, INVALID_OPERATION, "; ".join(errors))

    return _HANDLERS[op](doc, operation, registry)


def _handle_update(doc: Document, p: dict[str, Any], registry: Registry | None) -> MutationResult:
    return update(doc, p["id"], p["patch"], replace=bool(p.get("replace", False)))


def _handle_delete(doc: Document, p: dict[str, Any], registry: Registry | None) -> MutationResult:
    return delete(doc, p["id"])


def _handle_duplicate(doc: Document, p: dict[str, Any], registry: Registry | None) -> MutationResult:
    return duplicate(doc, p["id"])


def _handle_insert(doc: Document, p: dict[str, Any], registry: Registry | None) -> MutationResult:
    return insert(doc, p.get("parent"), p["node"], p.get("index"), registry=registry)


def _handle_move(doc: Document, p: dict[str, Any], registry: Registry | None) -> MutationResult:
    return move(doc, p["id"], p.get("parent"), p.get("index"), registry=registry)


_HANDLERS: dict[str, Callable[[Document, dict[str, Any], Registry | None], MutationResult]] = {
    "node.update": _handle_update,
    "node.delete": _handle_delete,
    "node.duplicate": _handle_duplicate,
    "node.insert": _handle_insert,
    "node.move": _handle_move,
}

_REQUIRED: dict[str, tuple[str, ...]] = {
    "node.update": ("id", "patch"),
    "node.delete": ("id",),
    "node.duplicate": ("id",),
    "node.insert": ("node",),
    "node.move": ("id",),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _reject(doc: Document, code: str, msg: str) -> MutationResult:
    logger.debug("mutations: rejected %s: %s", code, msg)
    return MutationResult(document=doc, applied=False, error=f"{code}: {msg}")


def _ok(doc: Document, target_id: str | None = None) -> MutationResult:
    return MutationResult(document=doc, applied=True, node_id=target_id)


def _rewrite(
    nodes: list[Any],
    target_id: str,
    replace_with: Callable[[Node], list[Node]],
) -> tuple[list[Any], bool]:
    """
    Replace the node `target_id` by replace_with(node) (zero or more nodes).

    Only lists on the path to the target are rebuilt; returns the original
    list object and False when the target is not in this subtree.
    """
    for index, node in enumerate(nodes):
        if not isinstance(node, dict):
            continue
        if node_id(node) == target_id:
            rebuilt = list(nodes)
            rebuilt[index : index + 1] = replace_with(node)
            return rebuilt, True
        children = node_children(node)
        if not children:
            continue
        new_children, found = _rewrite(children, target_id, replace_with)
        if found:
            rebuilt = list(nodes)
            rebuilt[index] = {**node, "children": new_children}
            return rebuilt, True
    return nodes, False


def _place(doc: Document, parent_id: str | None, node: Node, index: int | None) -> Document:
    """Insert `node` into the root list or under an existing `parent_id`."""

    def insert_into(children: list[Any]) -> list[Any]:
        position = len(children) if index is None else max(0, min(index, len(children)))
        return [*children[:position], node, *children[position:]]

    if parent_id is None:
        return insert_into(doc)
    new_doc, _ = _rewrite(doc, parent_id, lambda parent: [{**parent, "children": insert_into(node_children(parent))}])
    return new_doc


def _with_fresh_ids(node: Node, taken: set[str], *, force: bool) -> Node:
    """
    Deep copy of a subtree. Ids are regenerated when `force` is set, or when
    missing or already in `taken`. Every id used is added to `taken`.
    """
    copied: Node = {k: copy.deepcopy(v) for k, v in node.items() if k != "children"}
    current = node_id(node)
    if force or not current or current in taken:
        current = new_id(node_type(node) or "node", taken)
    taken.add(current)
    copied["id"] = current
    copied["children"] = [
        _with_fresh_ids(child, taken, force=force) if isinstance(child, dict) else copy.deepcopy(child)
        for child in node_children(node)
    ]
    return copied
