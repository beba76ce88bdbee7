"""
Tests for completion percentage aggregation.
"""

import pytest

from formtree.aggregation.completion import (
    CompletionAggregator,
    CompletionReport,
    has_content,
)
from formtree.core.field_node import build_tree
from formtree.core.validation import CallableRule


@pytest.fixture
def aggregator():
    return CompletionAggregator()


class TestCompletionAggregator:
    """Test counting of eligible and filled fields."""

    def test_three_of_four_is_seventy_five(self, aggregator):
        tree = build_tree(
            {
                "a": {"value": "x"},
                "b": {"value": "y"},
                "g": {"c": {"value": "z"}, "d": {"value": ""}},
            }
        )

        report = aggregator.aggregate(tree)

        assert (report.count, report.filled) == (4, 3)
        assert report.not_filled == ["g.d"]
        assert report.percent() == 75

    def test_no_eligible_fields_uses_empty_percent(self, aggregator):
        tree = build_tree({"notes": {"value": "", "excludeFromFillPercent": True}})

        report = aggregator.aggregate(tree)

        assert report.count == 0
        assert report.percent() == 100
        assert report.percent(empty_percent=0) == 0

    def test_hidden_and_excluded_fields_are_not_counted(self, aggregator):
        tree = build_tree(
            {
                "a": {"value": "x"},
                "b": {"value": "", "hidden": True},
                "c": {"value": "", "excludeFromFillPercent": True},
                "g": {"kind": "group", "hidden": True, "children": {"d": {"value": ""}}},
            }
        )

        report = aggregator.aggregate(tree)

        assert report.count == 1
        assert report.percent() == 100

    def test_field_with_error_is_not_filled(self, aggregator):
        tree = build_tree({"a": {"value": "x", "error": "Bad"}})

        assert aggregator.aggregate(tree).filled == 0

    def test_blank_and_none_values_are_not_filled(self, aggregator):
        tree = build_tree({"a": {"value": "   "}, "b": {"value": None}, "c": {"value": 0}})

        report = aggregator.aggregate(tree)

        assert report.count == 3
        assert report.not_filled == ["a", "b"]

    def test_rule_decides_for_rule_bearing_fields(self, aggregator):
        at_least_three = CallableRule(lambda v: len(v) >= 3, "Too short")
        tree = build_tree(
            {
                "short": {"value": "ab", "validation": at_least_three},
                # a passing rule counts as filled even with a stale error
                "long": {"value": "abc", "validation": at_least_three, "error": "old"},
            }
        )

        report = aggregator.aggregate(tree)

        assert report.filled == 1
        assert report.not_filled == ["short"]


class TestCompletionReport:
    """Test percentage rounding."""

    @pytest.mark.parametrize(
        "filled,count,expected",
        [(1, 8, 13), (2, 3, 67), (1, 3, 33), (0, 5, 0), (5, 5, 100), (1, 200, 1)],
    )
    def test_rounds_half_up(self, filled, count, expected):
        assert CompletionReport(count=count, filled=filled).percent() == expected


class TestHasContent:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("x", True),
            ("", False),
            (" \t", False),
            (None, False),
            (0, True),
            (False, True),
            ([], False),
            ({}, False),
            (["a"], True),
        ],
    )
    def test_has_content(self, value, expected):
        assert has_content(value) is expected
