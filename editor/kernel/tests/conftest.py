"""
Editor kernel test configuration.

Shared document fixtures. Every fixture builds a fresh document, so tests can
compare identities against it without interference.
"""

import pytest

from editor.kernel.nodes import make_node


def build_page():
    """
    nav (navbar)
      nav-cta (button)
    c (section)
      t1 (text, content "Hello", style color blue)
      inner (container)
        img (image)
    foot (footer)
      t2 (text)
    """
    return [
        make_node("navbar", id="nav", children=[make_node("button", id="nav-cta", props={"text": "Sign up"})]),
        make_node(
            "section",
            id="c",
            children=[
                make_node("text", id="t1", props={"content": "Hello"}, style={"color": "blue", "padding": "1rem"}),
                make_node(
                    "container",
                    id="inner",
                    children=[make_node("image", id="img", props={"src": "/a.png", "alt": "A"})],
                ),
            ],
        ),
        make_node("footer", id="foot", children=[make_node("text", id="t2", props={"content": "Bye"})]),
    ]


@pytest.fixture
def page():
    return build_page()


@pytest.fixture
def empty_page():
    return []
