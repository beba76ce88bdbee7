"""
Completion percentage.

Counts eligible fields (visible, not excluded from the fill percentage) and
how many of them are complete. A field with a validation rule is complete when
its value passes synchronous validation; any other field is complete when it
holds a non-blank value and carries no error.
"""

from dataclasses import dataclass, field
from typing import Any

from formtree.core.field_node import FieldNode, FieldTree
from formtree.core.path_utils import PathResolver
from formtree.core.types import PathParts


@dataclass
class CompletionReport:
    """Counters gathered by a completion walk."""

    count: int = 0
    filled: int = 0
    not_filled: list[str] = field(default_factory=list)

    def percent(self, empty_percent: int = 100) -> int:
        """
        Percentage of filled fields, rounded half up.

        Params:
            empty_percent: Result when no field is eligible

        Returns:
            Integer percentage between 0 and 100
        """
        if self.count == 0:
            return empty_percent
        return (200 * self.filled + self.count) // (2 * self.count)


def has_content(value: Any) -> bool:
    """Whether a value counts as filled in: not None, not blank, not an empty container."""
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return bool(value)
    text = value if isinstance(value, str) else str(value)
    return bool(text.strip())


class CompletionAggregator:
    """Recursive completion walk over a form tree."""

    def aggregate(self, tree: FieldTree) -> CompletionReport:
        report = CompletionReport()
        self._walk(tree, (), report)
        return report

    def _walk(self, tree: FieldTree, path: PathParts, report: CompletionReport) -> None:
        for key, node in tree.items():
            if node.hidden:
                continue
            node_path = path + (key,)
            if isinstance(node, FieldTree):
                self._walk(node, node_path, report)
                continue
            if not isinstance(node, FieldNode):
                raise TypeError(f"Not a form node: {type(node).__name__}")
            if node.exclude_from_fill_percent:
                continue

            report.count += 1
            if self._is_filled(node):
                report.filled += 1
            else:
                report.not_filled.append(PathResolver.join(node_path))

    @staticmethod
    def _is_filled(node: FieldNode) -> bool:
        if node.validation is not None:
            try:
                node.validation.validate_sync(node.value)
            except Exception:
                return False
            return True
        return has_content(node.value) and not node.error
