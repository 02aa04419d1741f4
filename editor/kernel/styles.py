"""
Editor Kernel — Responsive Style Resolver

Pure function: (node, tier) → effective style dict.

desktop is the base: node["style"] as-is.
tablet and mobile shallow-merge their own override over the base. Overrides do
not cascade: mobile merges against the desktop base, never against tablet.

Which overrides apply to which tier lives in TIER_OVERRIDES alone. To make
mobile fall back through tablet, change its entry to ("tablet", "mobile");
callers never see the difference.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from editor.kernel.nodes import node_responsive, node_style
from editor.kernel.types import TIERS

logger = logging.getLogger(__name__)

# tier -> override keys merged over the base, in order
TIER_OVERRIDES: dict[str, tuple[str, ...]] = {
    "desktop": (),
    "tablet": ("tablet",),
    "mobile": ("mobile",),
}

# CSS properties that take bare numbers
UNITLESS_PROPERTIES: set[str] = {
    "opacity",
    "z-index",
    "font-weight",
    "line-height",
    "flex",
    "flex-grow",
    "flex-shrink",
    "order",
    "zoom",
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_style(node: Any, tier: str = "desktop") -> dict[str, Any]:
    """
    Effective style of `node` at viewport `tier`.

    Returns node["style"] itself when no override applies, so an untouched
    style keeps its identity. Unknown tiers resolve as desktop.
    """
    base = node_style(node)
    keys = TIER_OVERRIDES.get(tier)
    if keys is None:
        logger.warning("styles: unknown tier %r, resolving as desktop", tier)
        return base

    responsive = node_responsive(node)
    overrides = [responsive[k] for k in keys if isinstance(responsive.get(k), dict)]
    if not overrides:
        return base
    return merge_styles(base, *overrides)


def merge_styles(base: dict[str, Any], *overrides: dict[str, Any]) -> dict[str, Any]:
    """Shallow merge: later mappings win key by key. Inputs are not modified."""
    merged = dict(base)
    for override in overrides:
        merged.update(override)
    return merged


def to_css(style: dict[str, Any]) -> str:
    """
    Render a style mapping as an inline CSS declaration list.

    camelCase keys become kebab-case ("fontSize" → "font-size"); numbers get
    "px" unless the property is unitless. None values are skipped.
    """
    declarations: list[str] = []
    for key, value in style.items():
        if value is None or isinstance(value, bool | dict | list):
            continue
        prop = css_property(str(key))
        if isinstance(value, int | float) and prop not in UNITLESS_PROPERTIES and value != 0:
            value = f"{value}px"
        declarations.append(f"{prop}: {value}")
    return "; ".join(declarations)


def css_property(key: str) -> str:
    if key.startswith("--") or "-" in key:
        return key
    return _CAMEL_RE.sub("-", key).lower()


def is_valid_tier(tier: str) -> bool:
    return tier in TIERS
