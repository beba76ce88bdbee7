"""
Submission payload projection.

Projects a form tree onto a plain nested dict: groups become dicts, fields
are unwrapped to their raw values. Hidden nodes and fields excluded from
request data are omitted; groups are kept even when they project to `{}`.
"""

import copy

from formtree.core.field_node import FieldNode, FieldTree
from formtree.core.types import JSONPayload


class PayloadProjector:
    """Builds the submission-ready payload of a form tree."""

    def project(self, tree: FieldTree) -> JSONPayload:
        """
        Project a tree onto its submission payload.

        Params:
            tree: Root of the form tree

        Returns:
            New nested dict; values are copies, never shared with the tree
        """
        payload: JSONPayload = {}
        for key, node in tree.items():
            if node.hidden:
                continue
            if isinstance(node, FieldNode):
                if not node.exclude_from_request_data:
                    payload[key] = copy.deepcopy(node.value)
            elif isinstance(node, FieldTree):
                payload[key] = self.project(node)
            else:
                raise TypeError(f"Not a form node: {type(node).__name__}")
        return payload
