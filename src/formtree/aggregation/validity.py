"""
Whole-form validity.

Validity is decided by running the synchronous check of every visible field
that carries a validation rule. Fields without a rule never make the form
invalid, and hidden nodes (with their whole subtree) are skipped.
"""

import logging
from dataclasses import dataclass, field

from formtree.core.field_node import FieldNode, FieldTree
from formtree.core.path_utils import PathResolver
from formtree.core.types import PathParts
from formtree.core.validation import failure_message

logger = logging.getLogger(__name__)


@dataclass
class InvalidItem:
    """A field that failed synchronous validation."""

    path: str
    field: FieldNode
    message: str


@dataclass
class ValidityReport:
    """Outcome of a validity walk."""

    invalid_items: list[InvalidItem] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.invalid_items


class ValidityAggregator:
    """Depth-first validity walk over a form tree."""

    def aggregate(self, tree: FieldTree) -> ValidityReport:
        """
        Validate every visible rule-bearing field.

        Params:
            tree: Root of the form tree

        Returns:
            ValidityReport listing the failing fields in walk order
        """
        report = ValidityReport()
        self._walk(tree, (), report)
        if report.invalid_items:
            logger.debug(
                "Form invalid: %s", [item.path for item in report.invalid_items]
            )
        return report

    def _walk(self, tree: FieldTree, path: PathParts, report: ValidityReport) -> None:
        for key, node in tree.items():
            if node.hidden:
                continue
            node_path = path + (key,)
            if isinstance(node, FieldNode):
                if node.validation is None:
                    continue
                try:
                    node.validation.validate_sync(node.value)
                except Exception as e:
                    report.invalid_items.append(
                        InvalidItem(
                            path=PathResolver.join(node_path),
                            field=node,
                            message=failure_message(e),
                        )
                    )
            elif isinstance(node, FieldTree):
                self._walk(node, node_path, report)
            else:
                raise TypeError(f"Not a form node: {type(node).__name__}")
