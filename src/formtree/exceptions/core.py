"""
Exception classes for formtree.

This module defines specific exception types for the error conditions that
can occur while addressing, mutating, validating and reconciling a form tree.
Field validation failures are not represented here as control flow: they are
converted into node-local error strings by the aggregators and validators.
"""


class FormTreeError(Exception):
    """Base exception for all formtree errors."""

    pass


class PathValidationError(FormTreeError):
    """Raised when a path string is malformed."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: The invalid path
            reason: Why the path is invalid
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


class PathResolutionError(FormTreeError, KeyError):
    """Raised when a path does not resolve to a node of the tree."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: The path that failed to resolve
            reason: Which segment was missing and where
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot resolve path '{path}': {reason}")

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return self.args[0]


class FieldTypeError(FormTreeError):
    """Raised when a path resolves to a node of the wrong kind."""

    def __init__(self, path: str, expected: str, actual: str):
        """
        Initialize the exception.

        Params:
            path: The resolved path
            expected: Node kind the caller required ("field" or "group")
            actual: Node kind found at the path
        """
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Node at '{path}' is a {actual}, expected a {expected}")


class ResponseShapeError(FormTreeError):
    """Raised when inbound response data does not fit the form tree."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: Dot path of the offending response key
            reason: Description of the mismatch
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Response data at '{path}' does not fit the form: {reason}")


class FieldValidationError(FormTreeError):
    """Raised by validation rules when a value fails validation.

    The `message` attribute carries the human-readable text that ends up in
    the field's `error`.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
