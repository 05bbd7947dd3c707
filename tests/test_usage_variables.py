"""Tests for dashboard template variable resolution."""

from promusage.usage.variables import (
    GLOBAL_VARIABLES,
    Template,
    Variable,
    as_value_list,
    build_variable_table,
    first_non_empty,
    resolve_template,
)


class TestAsValueList:
    """Tests for current value coercion."""

    def test_scalar_becomes_single_element_list(self):
        assert as_value_list("prod") == ["prod"]

    def test_list_kept(self):
        assert as_value_list(["a", "b"]) == ["a", "b"]

    def test_none_is_empty(self):
        assert as_value_list(None) == []

    def test_non_string_items_are_empty(self):
        assert as_value_list([1, "b"]) == ["", "b"]

    def test_mapping_is_empty(self):
        assert as_value_list({"text": "x"}) == []


class TestResolveTemplate:
    """Tests for resolve_template."""

    def test_first_current_value_wins(self):
        template = Template(name="ns", current_values=["a", "b"], query="q")
        assert resolve_template(template) == Variable("ns", "a")

    def test_falls_back_to_query(self):
        template = Template(name="ns", current_values=[], query="label_values(ns)")
        assert resolve_template(template).value == "label_values(ns)"

    def test_empty_first_value_falls_back_to_query(self):
        template = Template(name="ns", current_values=["", "b"], query="q")
        assert resolve_template(template).value == "q"

    def test_all_sentinel_uses_all_value(self):
        template = Template(name="ns", current_values=["?"], all_value=".*")
        assert resolve_template(template).value == ".*"

    def test_nothing_resolves_to_empty(self):
        assert resolve_template(Template(name="ns")).value == ""

    def test_first_non_empty(self):
        assert first_non_empty("", None, "x", "y") == "x"
        assert first_non_empty("", "") == ""


class TestBuildVariableTable:
    """Tests for build_variable_table."""

    def test_preserves_declaration_order(self):
        templates = [
            Template(name="b", current_values=["2"]),
            Template(name="a", current_values=["1"]),
        ]
        assert [v.name for v in build_variable_table(templates)] == ["b", "a"]

    def test_global_table(self):
        names = [v.name for v in GLOBAL_VARIABLES]
        assert names[:2] == ["__rate_interval", "__interval_ms"]
        assert names.index("__interval_ms") < names.index("__interval")
        assert names[-4:] == ["A", "B", "C", "D"]
        assert dict((v.name, v.value) for v in GLOBAL_VARIABLES)["__all"] == "ALL"
