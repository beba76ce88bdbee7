"""
Tests for the form tree node models.

Focus Areas:
1. Building tagged trees from nested mappings
2. Field attribute validation
3. Snapshot cloning
"""

import pytest
from pydantic import ValidationError

from formtree.core.field_node import (
    FieldNode,
    FieldTree,
    build_node,
    build_tree,
    clone_node,
)
from formtree.core.validation import CallableRule


class TestBuildTree:
    """Test conversion of caller-supplied shapes into tagged nodes."""

    def test_mapping_with_value_becomes_field(self):
        tree = build_tree({"email": {"value": "a@b.c"}})

        assert isinstance(tree["email"], FieldNode)
        assert tree["email"].kind == "field"
        assert tree["email"].value == "a@b.c"

    def test_mapping_without_value_becomes_group(self):
        tree = build_tree({"address": {"city": {"value": ""}}})

        assert isinstance(tree["address"], FieldTree)
        assert tree["address"].kind == "group"
        assert isinstance(tree["address"]["city"], FieldNode)

    def test_none_value_still_makes_a_field(self):
        tree = build_tree({"start": {"value": None}})

        assert isinstance(tree["start"], FieldNode)
        assert tree["start"].value is None

    def test_camel_case_flags_are_accepted(self):
        tree = build_tree(
            {
                "notes": {
                    "value": "",
                    "excludeFromFillPercent": True,
                    "excludeFromRequestData": True,
                }
            }
        )

        assert tree["notes"].exclude_from_fill_percent is True
        assert tree["notes"].exclude_from_request_data is True

    def test_explicit_group_kind_carries_attributes(self):
        tree = build_tree(
            {
                "spouse": {
                    "kind": "group",
                    "hidden": True,
                    "children": {"name": {"value": ""}},
                }
            }
        )

        assert tree["spouse"].hidden is True
        assert "name" in tree["spouse"]

    def test_child_order_is_preserved(self):
        tree = build_tree({"b": {"value": 1}, "a": {"value": 2}, "c": {"value": 3}})

        assert list(tree.keys()) == ["b", "a", "c"]

    def test_existing_nodes_pass_through(self):
        field = FieldNode(value="x")
        tree = build_tree({"x": field})

        assert tree["x"] is field

    def test_existing_tree_is_returned_as_is(self):
        tree = FieldTree(children={"x": FieldNode(value="x")})

        assert build_tree(tree) is tree

    def test_scalar_entry_is_rejected(self):
        with pytest.raises(TypeError) as exc_info:
            build_tree({"address": {"city": "Lisbon"}})

        assert "address.city" in str(exc_info.value)

    def test_root_must_be_a_group(self):
        with pytest.raises(TypeError):
            build_tree({"value": "lonely"})

    def test_unknown_field_attribute_is_rejected(self):
        with pytest.raises(ValidationError):
            build_node({"value": "", "colour": "red"})


class TestFieldNode:
    """Test field defaults and validation rule checks."""

    def test_defaults(self):
        field = FieldNode()

        assert field.value == ""
        assert field.error is None
        assert field.warning is None
        assert field.hidden is False
        assert field.validation is None

    def test_rule_without_protocol_methods_is_rejected(self):
        with pytest.raises(ValidationError):
            FieldNode(value="", validation=object())

    def test_rule_is_kept_by_reference(self):
        rule = CallableRule(bool, "required")
        field = FieldNode(value="", validation=rule)

        assert field.validation is rule

    def test_to_dict_omits_rule_and_tag(self):
        field = FieldNode(value="x", warning="w", validation=CallableRule(bool, "r"))

        plain = field.to_dict()

        assert plain["value"] == "x"
        assert plain["warning"] == "w"
        assert "validation" not in plain
        assert "kind" not in plain

    def test_tree_to_dict_nests_children(self):
        tree = build_tree({"address": {"city": {"value": "Porto"}}})

        assert tree.to_dict()["address"]["city"]["value"] == "Porto"


class TestCloneNode:
    """Test structural independence of clones."""

    def test_clone_is_independent(self):
        tree = build_tree({"tags": {"value": ["a"]}, "group": {"x": {"value": 1}}})

        clone = clone_node(tree)
        clone["tags"].value.append("b")
        clone["group"]["x"].value = 2

        assert tree["tags"].value == ["a"]
        assert tree["group"]["x"].value == 1

    def test_clone_shares_validation_rule(self):
        rule = CallableRule(bool, "required")
        tree = build_tree({"name": {"value": "", "validation": rule}})

        clone = clone_node(tree)

        assert clone["name"] is not tree["name"]
        assert clone["name"].validation is rule

    def test_clone_keeps_group_flags(self):
        tree = build_tree(
            {"spouse": {"kind": "group", "hidden": True, "children": {}}}
        )

        assert clone_node(tree)["spouse"].hidden is True

    def test_clone_rejects_foreign_objects(self):
        with pytest.raises(TypeError):
            clone_node({"value": 1})
