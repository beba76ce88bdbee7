"""
formtree - hierarchical state container for interactive forms

A form is a tree of typed fields grouped into nested branches and addressed by
dot paths. formtree handles per-field mutation and validation, whole-form
validity and completion, projection onto a submission payload and the merge
of server responses back into the tree.
"""

from importlib.metadata import version

from formtree.binding import FieldBinding, FieldStatus
from formtree.core import (
    CallableRule,
    FieldNode,
    FieldTree,
    PathResolver,
    TypeAdapterRule,
    ValidationRule,
    build_tree,
)
from formtree.options import StoreOptions
from formtree.store import FormErrorData, FormStore, FormWarningData

__version__ = version("formtree")

__all__ = [
    "__version__",
    "FormStore",
    "FormErrorData",
    "FormWarningData",
    "FieldNode",
    "FieldTree",
    "FieldBinding",
    "FieldStatus",
    "PathResolver",
    "StoreOptions",
    "ValidationRule",
    "TypeAdapterRule",
    "CallableRule",
    "build_tree",
]
