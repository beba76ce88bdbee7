"""
Tests for whole-form validity aggregation.
"""

from unittest.mock import Mock

import pytest

from formtree.aggregation.validity import ValidityAggregator
from formtree.core.field_node import build_tree
from formtree.core.validation import CallableRule


@pytest.fixture
def aggregator():
    return ValidityAggregator()


@pytest.fixture
def required():
    return CallableRule(lambda value: bool(value), "Required")


class TestValidityAggregator:
    """Test the depth-first validity walk."""

    def test_fields_without_rules_never_fail(self, aggregator):
        tree = build_tree({"a": {"value": ""}, "g": {"b": {"value": None}}})

        report = aggregator.aggregate(tree)

        assert report.is_valid
        assert report.invalid_items == []

    def test_failing_nested_rule_is_reported(self, aggregator, required):
        tree = build_tree(
            {
                "name": {"value": "Ada", "validation": required},
                "address": {"city": {"value": "", "validation": required}},
            }
        )

        report = aggregator.aggregate(tree)

        assert not report.is_valid
        assert [item.path for item in report.invalid_items] == ["address.city"]
        assert report.invalid_items[0].message == "Required"
        assert report.invalid_items[0].field is tree["address"]["city"]

    def test_hidden_field_is_ignored(self, aggregator, required):
        tree = build_tree({"name": {"value": "", "validation": required, "hidden": True}})

        assert aggregator.aggregate(tree).is_valid

    def test_hidden_group_hides_whole_subtree(self, aggregator, required):
        tree = build_tree(
            {
                "spouse": {
                    "kind": "group",
                    "hidden": True,
                    "children": {
                        "name": {"value": "", "validation": required, "hidden": False}
                    },
                }
            }
        )

        assert aggregator.aggregate(tree).is_valid

    def test_any_exception_counts_as_failure(self, aggregator):
        rule = Mock()
        rule.validate_sync.side_effect = RuntimeError("schema exploded")

        tree = build_tree({"x": {"value": 1}})
        tree["x"].validation = rule

        report = aggregator.aggregate(tree)

        assert not report.is_valid
        assert report.invalid_items[0].message == "schema exploded"
        rule.validate_sync.assert_called_once_with(1)

    def test_walk_order_is_depth_first(self, aggregator, required):
        tree = build_tree(
            {
                "a": {"value": "", "validation": required},
                "g": {"b": {"value": "", "validation": required}},
                "c": {"value": "", "validation": required},
            }
        )

        paths = [item.path for item in aggregator.aggregate(tree).invalid_items]

        assert paths == ["a", "g.b", "c"]
