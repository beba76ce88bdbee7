"""
Read-only aggregations over a form tree: validity and completion.
"""

from formtree.aggregation.completion import (
    CompletionAggregator,
    CompletionReport,
    has_content,
)
from formtree.aggregation.validity import InvalidItem, ValidityAggregator, ValidityReport

__all__ = [
    "CompletionAggregator",
    "CompletionReport",
    "has_content",
    "InvalidItem",
    "ValidityAggregator",
    "ValidityReport",
]
