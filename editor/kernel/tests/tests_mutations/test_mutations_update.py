"""
Mutations -- update

Covers:
  - The container/text scenario: props change, style kept, new document,
    untouched siblings reference-identical
  - Structural sharing along and off the rewritten path
  - Shallow merge per field, None removes a key, replace=True
  - responsive patches
  - Fields outside props/style/responsive are ignored
  - NOT_FOUND and bad patches return the input document by identity
  - The input document is never modified
"""

from editor.kernel.mutations import find, update

# ============================================================================
# The container / text scenario
# ============================================================================


class TestUpdateScenario:
    def test_props_content_changes(self, page):
        result = update(page, "t1", {"props": {"content": "Hi"}})
        assert result.applied
        assert find(result.document, "t1")["props"]["content"] == "Hi"

    def test_style_is_unchanged(self, page):
        original_style = find(page, "t1")["style"]
        result = update(page, "t1", {"props": {"content": "Hi"}})
        assert find(result.document, "t1")["style"] is original_style

    def test_document_reference_differs(self, page):
        result = update(page, "t1", {"props": {"content": "Hi"}})
        assert result.document is not page

    def test_siblings_of_container_are_reference_identical(self, page):
        result = update(page, "t1", {"props": {"content": "Hi"}})
        assert result.document[0] is page[0]
        assert result.document[2] is page[2]

    def test_input_document_not_modified(self, page):
        update(page, "t1", {"props": {"content": "Hi"}})
        assert find(page, "t1")["props"]["content"] == "Hello"


# ============================================================================
# Structural sharing
# ============================================================================


class TestStructuralSharing:
    def test_sibling_subtree_inside_changed_branch_is_shared(self, page):
        result = update(page, "t1", {"style": {"color": "red"}})
        # "inner" is a sibling of t1 inside the rebuilt container
        assert result.document[1]["children"][1] is page[1]["children"][1]

    def test_path_to_target_is_rebuilt(self, page):
        result = update(page, "img", {"props": {"alt": "B"}})
        assert result.document[1] is not page[1]
        assert result.document[1]["children"][1] is not page[1]["children"][1]
        assert result.document[1]["children"][0] is page[1]["children"][0]

    def test_deep_update_keeps_other_roots(self, page):
        result = update(page, "img", {"props": {"alt": "B"}})
        assert result.document[0] is page[0]
        assert result.document[2] is page[2]


# ============================================================================
# Merge semantics
# ============================================================================


class TestMergeSemantics:
    def test_style_shallow_merge_keeps_other_keys(self, page):
        result = update(page, "t1", {"style": {"color": "red"}})
        assert find(result.document, "t1")["style"] == {"color": "red", "padding": "1rem"}

    def test_none_value_removes_key(self, page):
        result = update(page, "t1", {"style": {"padding": None}})
        assert find(result.document, "t1")["style"] == {"color": "blue"}

    def test_replace_swaps_mapping_wholesale(self, page):
        result = update(page, "t1", {"style": {"margin": 0}}, replace=True)
        assert find(result.document, "t1")["style"] == {"margin": 0}

    def test_replace_only_touches_present_fields(self, page):
        result = update(page, "t1", {"style": {"margin": 0}}, replace=True)
        assert find(result.document, "t1")["props"] == {"content": "Hello"}

    def test_responsive_patch_added(self, page):
        result = update(page, "t1", {"responsive": {"mobile": {"color": "red"}}})
        assert find(result.document, "t1")["responsive"] == {"mobile": {"color": "red"}}

    def test_responsive_tier_entries_merge_shallowly(self, page):
        r1 = update(page, "t1", {"responsive": {"mobile": {"color": "red"}}})
        r2 = update(r1.document, "t1", {"responsive": {"tablet": {"color": "green"}}})
        assert find(r2.document, "t1")["responsive"] == {
            "mobile": {"color": "red"},
            "tablet": {"color": "green"},
        }

    def test_unpatchable_fields_are_ignored(self, page):
        result = update(page, "t1", {"type": "heading", "id": "other", "props": {"content": "Hi"}})
        node = find(result.document, "t1")
        assert node["type"] == "text"
        assert node["id"] == "t1"

    def test_result_names_target(self, page):
        assert update(page, "t1", {"props": {}}).node_id == "t1"

    def test_patch_without_patchable_fields_returns_same_document(self, page):
        result = update(page, "t1", {"foo": 1, "props": "not-a-mapping"})
        assert result.applied
        assert result.node_id == "t1"
        assert result.document is page

    def test_patch_without_patchable_fields_on_missing_node(self, page):
        result = update(page, "missing", {"foo": 1})
        assert result.code == "NOT_FOUND"
        assert result.document is page


# ============================================================================
# Failures
# ============================================================================


class TestUpdateFailures:
    def test_not_found_returns_input_identity(self, page):
        result = update(page, "missing", {"props": {"content": "x"}})
        assert not result.applied
        assert result.code == "NOT_FOUND"
        assert result.document is page

    def test_patch_must_be_mapping(self, page):
        result = update(page, "t1", ["props"])
        assert not result.applied
        assert result.code == "INVALID_OPERATION"
        assert result.document is page

    def test_update_on_malformed_node_fills_defaults(self):
        doc = [{"id": "bare", "type": "text"}]
        result = update(doc, "bare", {"props": {"content": "x"}})
        assert result.applied
        assert result.document[0]["props"] == {"content": "x"}
        assert "props" not in doc[0]
