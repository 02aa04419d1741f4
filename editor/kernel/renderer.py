"""
Editor Kernel — Renderer

Pure function: (document, options?, selection?, registry?) → HTML string (or text string)
No IO. Deterministic: same input → same output, always.

One generic walker drives every node type: look up the node's contract, render
its children first (in array order) if the contract accepts them, then hand the
node's props, tier-resolved style and rendered children to the contract's
renderer. Unknown types render as placeholders; malformed nodes render with
empty defaults. Nothing here raises for bad documents.

Selection overlays wrap each node in a frame; they never change the node's
own markup.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Any

from editor.kernel.nodes import node_children, node_id, node_props, node_type, outline
from editor.kernel.registry import BUILTIN_REGISTRY, Registry
from editor.kernel.selection import overlay_flags
from editor.kernel.styles import resolve_style
from editor.kernel.types import Document, RenderOptions, SelectionState

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render(
    doc: Document,
    options: RenderOptions | None = None,
    selection: SelectionState | None = None,
    registry: Registry | None = None,
) -> str:
    """
    Render a complete page (channel "html") or a layers outline (channel "text").
    """
    opts = options or RenderOptions()
    reg = registry or BUILTIN_REGISTRY

    if opts.channel == "text":
        return _render_text(doc, selection, reg)

    return _render_page(doc, opts, selection, reg)


def render_document(
    doc: Document,
    tier: str = "desktop",
    selection: SelectionState | None = None,
    registry: Registry | None = None,
    *,
    overlays: bool = True,
) -> str:
    """Render every root node in order. Returns an HTML fragment."""
    reg = registry or BUILTIN_REGISTRY
    parts = [render_node(node, tier, selection, reg, overlays=overlays) for node in doc]
    return "\n".join(p for p in parts if p)


def render_node(
    node: Any,
    tier: str = "desktop",
    selection: SelectionState | None = None,
    registry: Registry | None = None,
    *,
    overlays: bool = True,
) -> str:
    """Render one node and, for container types, its subtree."""
    reg = registry or BUILTIN_REGISTRY

    if not isinstance(node, dict):
        logger.warning("renderer: skipping malformed node of type %s", type(node).__name__)
        return ""

    ntype = node_type(node)
    children_html = ""
    if reg.accepts_children(ntype):
        if "children" in node and not isinstance(node["children"], list):
            logger.warning("renderer: node %r has malformed children, rendering none", node_id(node))
        children_html = render_document(node_children(node), tier, selection, reg, overlays=overlays)

    body = reg.dispatch(ntype, node_props(node), resolve_style(node, tier), children_html)

    if not overlays:
        return body
    return _frame(node, body, selection, reg)


# ---------------------------------------------------------------------------
# HTML page (primary channel)
# ---------------------------------------------------------------------------

BASE_CSS = """
*, *::before, *::after { box-sizing: border-box; }
body { margin: 0; font-family: system-ui, sans-serif; line-height: 1.5; }
.pb-page { margin: 0 auto; }
.pb-tier-desktop { max-width: 1200px; }
.pb-tier-tablet { max-width: 768px; }
.pb-tier-mobile { max-width: 375px; }
.pb-empty { color: #888; font-style: italic; text-align: center; }
.pb-node { position: relative; }
.pb-hovered { outline: 1px solid #cbd5e1; }
.pb-selected { outline: 2px solid #2563eb; outline-offset: 2px; }
.pb-dragging { opacity: 0.5; outline: 2px solid #4ade80; }
.pb-controls {
  position: absolute;
  top: -2rem;
  left: 0;
  display: flex;
  gap: 4px;
  padding: 2px 6px;
  background: #fff;
  border: 1px solid #e2e8f0;
  border-radius: 4px;
  font-size: 12px;
  z-index: 50;
}
.pb-placeholder {
  padding: 1rem;
  border: 1px dashed #94a3b8;
  border-radius: 4px;
  color: #64748b;
  font-size: 14px;
}
""".strip()


def _render_page(
    doc: Document,
    opts: RenderOptions,
    selection: SelectionState | None,
    registry: Registry,
) -> str:
    parts: list[str] = []

    parts.append("<!DOCTYPE html>")
    parts.append('<html lang="en">')
    parts.append("<head>")
    parts.append('  <meta charset="utf-8">')
    parts.append('  <meta name="viewport" content="width=device-width, initial-scale=1">')
    parts.append(f"  <title>{escape(opts.title)}</title>")
    if opts.include_base_css:
        parts.append("  <style>")
        parts.append(BASE_CSS)
        parts.append("  </style>")
    parts.append("</head>")
    parts.append("<body>")
    parts.append(f'  <main class="pb-page pb-tier-{escape(opts.tier)}">')

    body_html = render_document(
        doc,
        opts.tier,
        selection if opts.include_overlays else None,
        registry,
        overlays=opts.include_overlays,
    )
    if body_html:
        parts.append(body_html)
    else:
        parts.append('    <p class="pb-empty">This page is empty.</p>')

    parts.append("  </main>")
    parts.append("</body>")
    parts.append("</html>")

    return "\n".join(parts)


def _frame(node: dict[str, Any], body: str, selection: SelectionState | None, registry: Registry) -> str:
    """Wrap rendered markup in the editing frame carrying overlay state."""
    nid = node_id(node) or ""
    ntype = node_type(node)
    flags = overlay_flags(selection, nid or None)

    classes = ["pb-node", *(f"pb-{flag}" for flag in sorted(flags))]
    opening = f'<div class="{" ".join(classes)}" data-node-id="{escape(nid)}" data-type="{escape(ntype)}">'

    controls = ""
    if flags & {"selected", "hovered"}:
        label = escape(registry.contract_for(ntype).label or ntype)
        controls = (
            '<div class="pb-controls">'
            f'<span class="pb-controls-label">{label}</span>'
            '<button type="button" data-action="duplicate">Duplicate</button>'
            '<button type="button" data-action="delete">Delete</button>'
            "</div>"
        )

    return f"{opening}{controls}{body}</div>"


# ---------------------------------------------------------------------------
# Text rendering (layers outline)
# ---------------------------------------------------------------------------


def _render_text(doc: Document, selection: SelectionState | None, registry: Registry) -> str:
    rows = outline(doc)
    if not rows:
        return "(empty page)"

    lines: list[str] = []
    for depth, node in rows:
        ntype = node_type(node)
        contract = registry.lookup(ntype)
        label = contract.label if contract is not None else f"Unknown ({ntype or 'untyped'})"
        marker = "*" if "selected" in overlay_flags(selection, node_id(node)) else "-"
        lines.append(f"{'  ' * depth}{marker} {label} #{node_id(node) or '?'}")
    return "\n".join(lines)
