"""
Editor Kernel — Renderer Dispatch Registry

Maps a node type tag to a RenderContract: a renderer function plus whether the
type accepts children. New block types are added by registration; nothing
dispatches on type with a conditional.

Lookups of unknown tags fall back to the placeholder contract, which renders
the literal type string and never raises. A registered renderer that raises
is treated the same way.

Built-in block types render from Mustache templates (chevron), which
HTML-escapes every {{value}}. Pre-rendered children arrive as {{{children}}}.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from html import escape
from typing import Any

import chevron

from editor.kernel.styles import to_css
from editor.kernel.types import RenderContract, Renderer

logger = logging.getLogger(__name__)

# Context keys owned by the renderer; props never override them
_RESERVED_KEYS = ("type", "css", "children")


# ---------------------------------------------------------------------------
# Renderer builders
# ---------------------------------------------------------------------------


def template_renderer(
    node_type: str,
    template: str,
    defaults: dict[str, Any] | None = None,
    lists: Iterable[str] = (),
) -> Renderer:
    """
    Build a renderer from a Mustache template.

    Context = defaults, then props, then {type, css, children}.
    Keys named in `lists` are coerced to lists of dicts so that item sections
    render the same for ["a", "b"] and [{"text": "a"}, {"text": "b"}].
    """
    base = dict(defaults or {})
    list_keys = tuple(lists)

    def render(props: dict[str, Any], style: dict[str, Any], children: str) -> str:
        context: dict[str, Any] = {**base, **props}
        for key in list_keys:
            context[key] = _as_items(context.get(key))
        context["type"] = node_type
        context["css"] = to_css(style)
        context["children"] = children
        return chevron.render(template, context)

    return render


def _as_items(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {"text": str(item)} for item in value]


def placeholder_renderer(node_type: str) -> Renderer:
    """Renderer for tags with no registry entry. Deterministic, never raises."""
    label = escape(str(node_type))

    def render(props: dict[str, Any], style: dict[str, Any], children: str) -> str:
        return f'<div class="pb-placeholder" data-type="{label}">Unknown block type: {label}</div>'

    return render


def placeholder_contract(node_type: str) -> RenderContract:
    return RenderContract(renderer=placeholder_renderer(node_type), accepts_children=False, label=str(node_type))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class Registry:
    """Type tag → RenderContract lookup table."""

    def __init__(self, contracts: dict[str, RenderContract] | None = None) -> None:
        self._contracts: dict[str, RenderContract] = dict(contracts or {})

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)

    def register(
        self,
        node_type: str,
        renderer: Renderer,
        *,
        accepts_children: bool = False,
        label: str | None = None,
    ) -> RenderContract:
        """Add or replace the contract for `node_type`."""
        contract = RenderContract(
            renderer=renderer,
            accepts_children=accepts_children,
            label=label or node_type.replace("-", " ").title(),
        )
        self._contracts[node_type] = contract
        return contract

    def register_template(
        self,
        node_type: str,
        template: str,
        *,
        accepts_children: bool = False,
        defaults: dict[str, Any] | None = None,
        lists: Iterable[str] = (),
        label: str | None = None,
    ) -> RenderContract:
        return self.register(
            node_type,
            template_renderer(node_type, template, defaults, lists),
            accepts_children=accepts_children,
            label=label,
        )

    def unregister(self, node_type: str) -> None:
        self._contracts.pop(node_type, None)

    def lookup(self, node_type: str) -> RenderContract | None:
        return self._contracts.get(node_type)

    def contract_for(self, node_type: str) -> RenderContract:
        """Registered contract, or the placeholder for unknown tags."""
        contract = self._contracts.get(node_type)
        if contract is None:
            return placeholder_contract(node_type)
        return contract

    def accepts_children(self, node_type: str) -> bool:
        contract = self._contracts.get(node_type)
        return contract is not None and contract.accepts_children

    def known_types(self) -> list[str]:
        return sorted(self._contracts)

    def copy(self) -> Registry:
        return Registry(self._contracts)

    def dispatch(
        self,
        node_type: str,
        props: dict[str, Any] | None = None,
        style: dict[str, Any] | None = None,
        children: str = "",
    ) -> str:
        """
        Render one node's own markup. Never raises.

        Unknown tags and renderers that fail both produce the placeholder.
        """
        contract = self._contracts.get(node_type)
        if contract is None:
            logger.warning("registry: unknown node type %r, rendering placeholder", node_type)
            contract = placeholder_contract(node_type)

        try:
            return contract.renderer(props or {}, style or {}, children)
        except Exception:
            logger.warning("registry: renderer for %r failed, rendering placeholder", node_type, exc_info=True)
            return placeholder_renderer(node_type)(props or {}, style or {}, children)


# ---------------------------------------------------------------------------
# Built-in block types
# ---------------------------------------------------------------------------

_CONTAINER_TAGS: dict[str, str] = {
    "container": "div",
    "section": "section",
    "row": "div",
    "column": "div",
    "grid": "div",
    "flexbox": "div",
    "navbar": "nav",
    "sidebar": "aside",
    "footer": "footer",
    "popup": "div",
}

_TEMPLATES: dict[str, tuple[str, dict[str, Any], tuple[str, ...]]] = {
    "text": ('<p class="pb-text" style="{{css}}">{{content}}</p>', {"content": ""}, ()),
    "image": (
        '<figure class="pb-image" style="{{css}}"><img src="{{src}}" alt="{{alt}}" loading="lazy">'
        "{{#caption}}<figcaption>{{.}}</figcaption>{{/caption}}</figure>",
        {"src": "", "alt": ""},
        (),
    ),
    "button": ('<a class="pb-button" href="{{href}}" style="{{css}}">{{text}}</a>', {"href": "#", "text": "Button"}, ()),
    "video": ('<video class="pb-video" src="{{src}}" controls style="{{css}}"></video>', {"src": ""}, ()),
    "divider": ('<hr class="pb-divider" style="{{css}}">', {}, ()),
    "spacer": ('<div class="pb-spacer" style="height: {{height}}; {{css}}"></div>', {"height": "2rem"}, ()),
    "icon": ('<span class="pb-icon" style="{{css}}">{{name}}</span>', {"name": ""}, ()),
    "hero": (
        '<section class="pb-hero" style="{{css}}">'
        "{{#title}}<h1>{{.}}</h1>{{/title}}"
        "{{#subtitle}}<p>{{.}}</p>{{/subtitle}}"
        '{{#buttonText}}<a class="pb-button" href="{{buttonLink}}">{{.}}</a>{{/buttonText}}'
        "</section>",
        {"buttonLink": "#"},
        (),
    ),
    "cta": (
        '<div class="pb-cta" style="{{css}}">'
        "{{#title}}<h2>{{.}}</h2>{{/title}}"
        "{{#description}}<p>{{.}}</p>{{/description}}"
        '{{#buttonText}}<a class="pb-button" href="{{buttonLink}}">{{.}}</a>{{/buttonText}}'
        "</div>",
        {"buttonLink": "#"},
        (),
    ),
    "features": (
        '<div class="pb-features" style="{{css}}">'
        '{{#items}}<div class="pb-feature"><h3>{{heading}}</h3><p>{{description}}{{text}}</p></div>{{/items}}'
        "</div>",
        {},
        ("items",),
    ),
    "stats": (
        '<div class="pb-stats" style="{{css}}">'
        '{{#items}}<div class="pb-stat"><strong>{{value}}</strong><span>{{label}}{{text}}</span></div>{{/items}}'
        "</div>",
        {},
        ("items",),
    ),
    "timeline": (
        '<ol class="pb-timeline" style="{{css}}">'
        "{{#items}}<li><time>{{date}}</time><p>{{description}}{{text}}</p></li>{{/items}}"
        "</ol>",
        {},
        ("items",),
    ),
    "faq": (
        '<dl class="pb-faq" style="{{css}}">{{#items}}<dt>{{question}}{{text}}</dt><dd>{{answer}}</dd>{{/items}}</dl>',
        {},
        ("items",),
    ),
    "accordion": (
        '<div class="pb-accordion" style="{{css}}">'
        "{{#items}}<details><summary>{{heading}}{{text}}</summary><p>{{content}}</p></details>{{/items}}"
        "</div>",
        {},
        ("items",),
    ),
    "tabs": (
        '<div class="pb-tabs" style="{{css}}">'
        '{{#items}}<div class="pb-tab"><h4>{{label}}{{text}}</h4><div>{{content}}</div></div>{{/items}}'
        "</div>",
        {},
        ("items",),
    ),
    "testimonial": (
        '<blockquote class="pb-testimonial" style="{{css}}"><p>{{quote}}</p><cite>{{author}}</cite></blockquote>',
        {"quote": "", "author": ""},
        (),
    ),
    "pricing": (
        '<div class="pb-pricing" style="{{css}}">'
        '{{#plans}}<div class="pb-plan"><h3>{{name}}{{text}}</h3><p class="pb-price">{{price}}</p></div>{{/plans}}'
        "</div>",
        {},
        ("plans",),
    ),
    "team": (
        '<div class="pb-team" style="{{css}}">'
        '{{#members}}<div class="pb-member"><strong>{{name}}{{text}}</strong><span>{{role}}</span></div>{{/members}}'
        "</div>",
        {},
        ("members",),
    ),
    "progress": (
        '<div class="pb-progress" style="{{css}}"><span>{{label}}</span><progress value="{{value}}" max="100"></progress></div>',
        {"label": "", "value": 0},
        (),
    ),
    "countdown": ('<div class="pb-countdown" data-target="{{targetDate}}" style="{{css}}">{{label}}</div>', {"targetDate": "", "label": ""}, ()),
    "map": ('<div class="pb-map" data-address="{{address}}" style="{{css}}">{{address}}</div>', {"address": ""}, ()),
    "embed": ('<div class="pb-embed" data-src="{{src}}" style="{{css}}"></div>', {"src": ""}, ()),
    "code": ('<pre class="pb-code" style="{{css}}"><code>{{code}}</code></pre>', {"code": ""}, ()),
}

# Palette blocks that share the generic card markup
_GENERIC_TYPES: tuple[str, ...] = (
    "gallery",
    "social",
    "newsletter",
    "slider",
    "carousel",
    "about",
    "contact",
    "blog",
    "portfolio",
    "services",
    "clients",
    "partners",
    "awards",
    "banner",
    "notification",
    "search",
    "filter",
    "table",
    "chart",
    "audio",
    "pdf",
    "download",
    "breadcrumb",
    "pagination",
    "comments",
    "rating",
    "share",
    "login",
    "register",
    "checkout",
    "cart",
    "wishlist",
    "compare",
    "quickview",
)

_GENERIC_TEMPLATE = (
    '<div class="pb-block pb-{{type}}" style="{{css}}">'
    "{{#heading}}<h3>{{.}}</h3>{{/heading}}"
    "{{#content}}<p>{{.}}</p>{{/content}}"
    "</div>"
)

_CONTAINER_TEMPLATE = '<{tag} class="pb-{{{{type}}}}" style="{{{{css}}}}">{{{{{{children}}}}}}</{tag}>'

_FORM_TEMPLATE = (
    '<form class="pb-form" action="{{action}}" method="post" style="{{css}}">{{{children}}}'
    '{{#submitText}}<button type="submit">{{.}}</button>{{/submitText}}</form>'
)


def _render_heading(props: dict[str, Any], style: dict[str, Any], children: str) -> str:
    level = props.get("level", 2)
    if not isinstance(level, int) or isinstance(level, bool) or not 1 <= level <= 6:
        level = 2
    text = escape(str(props.get("content", props.get("text", ""))))
    return f'<h{level} class="pb-heading" style="{escape(to_css(style))}">{text}</h{level}>'


def build_builtin_registry() -> Registry:
    registry = Registry()
    for node_type, tag in _CONTAINER_TAGS.items():
        registry.register_template(node_type, _CONTAINER_TEMPLATE.format(tag=tag), accepts_children=True)
    registry.register_template("form", _FORM_TEMPLATE, accepts_children=True, defaults={"action": ""})
    registry.register("heading", _render_heading)
    for node_type, (template, defaults, lists) in _TEMPLATES.items():
        registry.register_template(node_type, template, defaults=defaults, lists=lists)
    for node_type in _GENERIC_TYPES:
        registry.register_template(node_type, _GENERIC_TEMPLATE)
    return registry


BUILTIN_REGISTRY = build_builtin_registry()


def default_registry() -> Registry:
    """A private copy of the built-in registry, safe to extend."""
    return BUILTIN_REGISTRY.copy()


def dispatch(
    node_type: str,
    props: dict[str, Any] | None = None,
    style: dict[str, Any] | None = None,
    children: str = "",
    registry: Registry | None = None,
) -> str:
    """Render one node's own markup through `registry` (built-ins by default)."""
    return (registry or BUILTIN_REGISTRY).dispatch(node_type, props, style, children)
