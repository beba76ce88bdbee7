"""
Path resolution utilities for formtree.

Paths are dot-joined sequences of keys identifying a node from the root of a
form tree (e.g. "applicant.address.city"). Resolution returns the live node,
shared with the tree, so callers can read or mutate it in place.
"""

from dataclasses import dataclass

from formtree.core.field_node import FieldNode, FieldTree
from formtree.core.types import PathParts
from formtree.exceptions import FieldTypeError, PathResolutionError, PathValidationError

PATH_SEPARATOR = "."


@dataclass
class PathComponents:
    """Result of splitting a path into its components."""

    first_part: str
    remainder: str
    has_remainder: bool

    @classmethod
    def split_path(cls, path: str) -> "PathComponents":
        """
        Split a path at the first dot separator.

        Params:
            path: Path string to split (e.g., "applicant.address.city")

        Returns:
            PathComponents with first_part, remainder, and has_remainder flag

        Examples:
            "applicant.address.city" -> PathComponents("applicant", "address.city", True)
            "email" -> PathComponents("email", "", False)
        """
        if not path or PATH_SEPARATOR not in path:
            return cls(first_part=path, remainder="", has_remainder=False)

        first_part, remainder = path.split(PATH_SEPARATOR, 1)
        return cls(first_part=first_part, remainder=remainder, has_remainder=True)


def validate_path_format(path: str, path_type: str = "path") -> None:
    """
    Validate basic path format requirements.

    Params:
        path: Path string to validate
        path_type: Type description for error messages

    Raises:
        PathValidationError: If path format is invalid
    """
    if not path or not isinstance(path, str):
        raise PathValidationError(path, f"{path_type} must be a non-empty string")

    if path.strip() != path:
        raise PathValidationError(
            path, f"{path_type} must not have leading or trailing whitespace"
        )

    if "" in path.split(PATH_SEPARATOR):
        raise PathValidationError(path, f"{path_type} must not contain empty segments")


class PathResolver:
    """Dot-path resolution against a form tree."""

    @staticmethod
    def split_path_components(path: str) -> list[str]:
        """
        Split a path into all its components.

        Examples:
            "applicant.address.city" -> ["applicant", "address", "city"]
            "email" -> ["email"]
        """
        if not path:
            return []
        return path.split(PATH_SEPARATOR)

    @staticmethod
    def join(parts: PathParts) -> str:
        """Join path components back into a dot path."""
        return PATH_SEPARATOR.join(parts)

    @staticmethod
    def find(tree: FieldTree, path: str) -> FieldNode | FieldTree | None:
        """
        Look up a node without raising.

        Params:
            tree: Root of the form tree
            path: Dot path; the empty path denotes the root itself

        Returns:
            The live node at `path`, or None when any segment is missing
        """
        node: FieldNode | FieldTree = tree
        remaining = path
        while remaining:
            components = PathComponents.split_path(remaining)
            if not isinstance(node, FieldTree) or components.first_part not in node:
                return None
            node = node[components.first_part]
            remaining = components.remainder
        return node

    @staticmethod
    def resolve(tree: FieldTree, path: str) -> FieldNode | FieldTree:
        """
        Resolve a path to the live node it identifies.

        Params:
            tree: Root of the form tree
            path: Dot path of an existing node

        Returns:
            The node at `path`, shared with the tree (not a copy)

        Raises:
            PathValidationError: If the path is malformed
            PathResolutionError: If any segment does not exist
        """
        validate_path_format(path)

        node: FieldNode | FieldTree = tree
        walked: list[str] = []
        for part in PathResolver.split_path_components(path):
            if isinstance(node, FieldNode):
                raise PathResolutionError(
                    path,
                    f"'{PathResolver.join(tuple(walked))}' is a field and has no children",
                )
            if part not in node:
                location = PathResolver.join(tuple(walked)) or "<root>"
                raise PathResolutionError(path, f"no key '{part}' under {location}")
            node = node[part]
            walked.append(part)
        return node

    @staticmethod
    def resolve_field(tree: FieldTree, path: str) -> FieldNode:
        """
        Resolve a path that must identify a field.

        Raises:
            PathResolutionError: If the path does not exist
            FieldTypeError: If the path identifies a group
        """
        node = PathResolver.resolve(tree, path)
        if not isinstance(node, FieldNode):
            raise FieldTypeError(path, expected="field", actual=node.kind)
        return node
