"""
Page Editor Kernel — the pure engine behind the visual page builder.

Components:
  nodes       — element tree model, tolerant accessors, JSON interchange
  mutations   — (document, ...) → MutationResult  (pure, structural sharing)
  styles      — responsive style resolver (desktop base + tier overrides)
  registry    — type tag → render contract, placeholder fallback
  renderer    — generic tree walker → HTML page or text outline
  selection   — hover / select / drag state machine
  history     — undo / redo over document values
  session     — coordinates the above for one editing session
  validation  — structural checks at the import boundary
"""

from editor.kernel.mutations import apply, delete, duplicate, find, insert, move, update
from editor.kernel.nodes import dump_document, load_document, make_node
from editor.kernel.registry import Registry, default_registry, dispatch
from editor.kernel.renderer import render, render_document
from editor.kernel.session import EditorSession
from editor.kernel.styles import resolve_style
from editor.kernel.validation import validate_document

__all__ = [
    "find",
    "update",
    "delete",
    "duplicate",
    "insert",
    "move",
    "apply",
    "make_node",
    "dump_document",
    "load_document",
    "resolve_style",
    "Registry",
    "default_registry",
    "dispatch",
    "render",
    "render_document",
    "EditorSession",
    "validate_document",
]
