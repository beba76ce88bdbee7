"""
Core formtree components.

This package provides the form tree data model, path resolution and the
validation rule collaborators.
"""

from formtree.core.field_node import (
    FieldNode,
    FieldTree,
    Node,
    build_node,
    build_tree,
    clone_node,
)
from formtree.core.path_utils import (
    PathComponents,
    PathResolver,
    validate_path_format,
)
from formtree.core.types import FieldValue, JSONPayload, PathParts, ResponseData
from formtree.core.validation import (
    CallableRule,
    TypeAdapterRule,
    ValidationRule,
    failure_message,
)

__all__ = [
    "FieldNode",
    "FieldTree",
    "Node",
    "build_node",
    "build_tree",
    "clone_node",
    "PathComponents",
    "PathResolver",
    "validate_path_format",
    "FieldValue",
    "JSONPayload",
    "PathParts",
    "ResponseData",
    "CallableRule",
    "TypeAdapterRule",
    "ValidationRule",
    "failure_message",
]
