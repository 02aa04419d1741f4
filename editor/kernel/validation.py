"""
Editor Kernel — Document Validation

Structural checks for documents arriving from outside (template assembly,
persistence). Validation is advisory: the kernel walks, mutates and renders
documents that fail it. Callers decide whether to surface the report.

Errors:   missing fields, id not ^[a-z0-9-]+$, props/style not objects,
          children not a list, duplicate ids.
Warnings: unknown node types.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from editor.kernel.registry import BUILTIN_REGISTRY, Registry
from editor.kernel.types import ID_PATTERN, ValidationReport


class ResponsiveOverrides(BaseModel):
    """Per-tier partial style overrides."""

    model_config = {"extra": "allow"}

    tablet: dict[str, Any] | None = None
    mobile: dict[str, Any] | None = None


class ElementNodeModel(BaseModel):
    """One node of the interchange format. Children are checked node by node."""

    model_config = {"extra": "allow"}

    id: str = Field(pattern=ID_PATTERN.pattern)
    type: str = Field(min_length=1)
    props: dict[str, Any]
    style: dict[str, Any]
    responsive: ResponsiveOverrides | None = None
    children: list[Any]


def validate_document(doc: Any, registry: Registry | None = None) -> ValidationReport:
    """
    Validate a whole document. Returns a report; never raises.
    Each message is prefixed with the node's path, e.g. "[0].children[2]".
    """
    reg = registry or BUILTIN_REGISTRY
    report = ValidationReport()

    if not isinstance(doc, list):
        report.errors.append("Document must be a list of nodes")
        return report

    seen: set[str] = set()
    _validate_nodes(doc, "", reg, seen, report)
    return report


def validate_node(node: Any, path: str = "node") -> list[str]:
    """Validate one node's own fields (not its descendants). Returns error strings."""
    if not isinstance(node, dict):
        return [f"{path}: must be an object"]
    try:
        ElementNodeModel.model_validate(node)
    except ValidationError as e:
        return [f"{path}: {_describe(err)}" for err in e.errors()]
    return []


def _validate_nodes(
    nodes: list[Any],
    prefix: str,
    registry: Registry,
    seen: set[str],
    report: ValidationReport,
) -> None:
    for index, node in enumerate(nodes):
        path = f"{prefix}[{index}]"
        report.errors.extend(validate_node(node, path))
        if not isinstance(node, dict):
            continue

        nid = node.get("id")
        if isinstance(nid, str):
            if nid in seen:
                report.errors.append(f"{path}: duplicate id '{nid}'")
            seen.add(nid)

        ntype = node.get("type")
        if isinstance(ntype, str) and ntype and ntype not in registry:
            report.warnings.append(f"{path}: unknown node type '{ntype}'")

        children = node.get("children")
        if isinstance(children, list):
            _validate_nodes(children, f"{path}.children", registry, seen, report)


def _describe(err: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    if err.get("type") == "missing":
        return f"missing required field '{loc}'"
    return f"{loc}: {err.get('msg', 'invalid')}"
