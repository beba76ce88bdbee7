"""
formtree exception classes.

This package provides all exception types used throughout formtree for
consistent error handling and reporting.
"""

from formtree.exceptions.core import (
    FieldTypeError,
    FieldValidationError,
    FormTreeError,
    PathResolutionError,
    PathValidationError,
    ResponseShapeError,
)

__all__ = [
    "FormTreeError",
    "FieldTypeError",
    "FieldValidationError",
    "PathResolutionError",
    "PathValidationError",
    "ResponseShapeError",
]
