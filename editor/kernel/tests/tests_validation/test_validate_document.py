"""
Validation -- advisory structural checks on inbound documents

Covers:
  - A well-formed document is valid
  - Missing fields, bad ids, mistyped props / style / children
  - Duplicate ids anywhere in the tree
  - Unknown types are warnings, not errors
  - Paths point at the offending node
"""

from editor.kernel.nodes import make_node
from editor.kernel.registry import default_registry
from editor.kernel.validation import validate_document, validate_node


class TestValidDocuments:
    def test_fixture_page(self, page):
        report = validate_document(page)
        assert report.is_valid
        assert report.errors == []
        assert report.warnings == []

    def test_empty(self, empty_page):
        assert validate_document(empty_page).is_valid

    def test_responsive_and_extra_fields(self):
        node = make_node("text", id="t", responsive={"mobile": {"color": "red"}})
        node["locked"] = True
        assert validate_document([node]).is_valid


class TestInvalidDocuments:
    def test_root_not_a_list(self):
        report = validate_document({"id": "a"})
        assert report.errors == ["Document must be a list of nodes"]

    def test_missing_field(self):
        report = validate_document([{"id": "a", "type": "text", "props": {}, "style": {}}])
        assert report.errors == ["[0]: missing required field 'children'"]

    def test_bad_id(self):
        report = validate_document([make_node("text", id="Bad_Id")])
        assert not report.is_valid
        assert report.errors[0].startswith("[0]: id:")

    def test_empty_type(self):
        report = validate_document([make_node("", id="a")])
        assert any(e.startswith("[0]: type:") for e in report.errors)

    def test_props_not_object(self):
        node = make_node("text", id="a")
        node["props"] = "hello"
        report = validate_document([node])
        assert any(e.startswith("[0]: props:") for e in report.errors)

    def test_non_dict_node(self):
        report = validate_document([make_node("text", id="a"), "junk"])
        assert report.errors == ["[1]: must be an object"]

    def test_nested_path(self, page):
        page[1]["children"][1]["children"][0]["style"] = []
        report = validate_document(page)
        assert any(e.startswith("[1].children[1].children[0]: style:") for e in report.errors)

    def test_duplicate_ids(self):
        doc = [make_node("section", id="a", children=[make_node("text", id="a")])]
        report = validate_document(doc)
        assert report.errors == ["[0].children[0]: duplicate id 'a'"]


class TestWarnings:
    def test_unknown_type_warns(self):
        report = validate_document([make_node("hologram", id="h")])
        assert report.is_valid
        assert report.warnings == ["[0]: unknown node type 'hologram'"]

    def test_registry_decides_known_types(self):
        registry = default_registry()
        registry.register("hologram", lambda props, style, children: "")
        assert validate_document([make_node("hologram", id="h")], registry).warnings == []


class TestValidateNode:
    def test_valid(self):
        assert validate_node(make_node("text", id="a")) == []

    def test_default_path(self):
        assert validate_node(None) == ["node: must be an object"]

    def test_descendants_not_checked(self):
        node = make_node("section", id="a", children=["junk"])
        assert validate_node(node) == []
