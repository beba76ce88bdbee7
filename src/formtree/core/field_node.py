"""
Form tree node models.

A form is a tree whose leaves are `FieldNode` instances and whose branches are
`FieldTree` instances. The two kinds form an explicit tagged union on `kind`,
so every recursive walk dispatches on the node type instead of probing for a
`value` attribute.
"""

import copy
from collections.abc import ItemsView, KeysView, Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formtree.core.validation import ValidationRule


class FieldNode(BaseModel):
    """
    A single form field: its value plus status and visibility metadata.

    Params:
        value: Current field value; the empty string marks an unfilled field
        error: Diagnostic set by validation, cleared on successful validation
        warning: Advisory message, independent of `error`
        hidden: Hidden fields are ignored by validity, completion and payload walks
        exclude_from_fill_percent: Skip the field when computing completion
        exclude_from_request_data: Omit the field from the submission payload
        validation: External rule with `validate_sync` and async `validate`
    """

    model_config = ConfigDict(
        extra="forbid", arbitrary_types_allowed=True, populate_by_name=True
    )

    kind: Literal["field"] = "field"
    value: Any = ""
    error: str | None = None
    warning: str | None = None
    hidden: bool = False
    exclude_from_fill_percent: bool = Field(
        default=False, alias="excludeFromFillPercent"
    )
    exclude_from_request_data: bool = Field(
        default=False, alias="excludeFromRequestData"
    )
    validation: Any = None

    @field_validator("validation")
    @classmethod
    def _check_rule(cls, rule: Any) -> Any:
        if rule is not None and not isinstance(rule, ValidationRule):
            raise ValueError(
                f"{type(rule).__name__} is not a validation rule "
                "(expected validate_sync() and validate())"
            )
        return rule

    def attributes(self) -> dict[str, Any]:
        """Return the field's attributes by name, sharing values by reference."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def to_dict(self) -> dict[str, Any]:
        """Plain snapshot of the field without its validation rule."""
        return self.model_dump(exclude={"kind", "validation"})


class FieldTree(BaseModel):
    """
    A named grouping of child nodes, arbitrarily nested.

    Children keep insertion order. A hidden group hides its whole subtree
    regardless of the descendants' own `hidden` flags.
    """

    model_config = ConfigDict(extra="forbid")

    kind: Literal["group"] = "group"
    hidden: bool = False
    children: dict[str, "Node"] = Field(default_factory=dict)

    def __getitem__(self, key: str) -> "Node":
        return self.children[key]

    def __contains__(self, key: object) -> bool:
        return key in self.children

    def __len__(self) -> int:
        return len(self.children)

    def keys(self) -> KeysView[str]:
        return self.children.keys()

    def items(self) -> ItemsView[str, "Node"]:
        return self.children.items()

    def to_dict(self) -> dict[str, Any]:
        """Plain nested snapshot of the subtree without validation rules."""
        return {key: child.to_dict() for key, child in self.children.items()}


Node = Annotated[Union[FieldNode, FieldTree], Field(discriminator="kind")]

FieldTree.model_rebuild()


def build_node(shape: Any, path: str = "") -> FieldNode | FieldTree:
    """
    Build a tagged node from a caller-supplied shape.

    A mapping with a `value` key becomes a `FieldNode`; any other mapping
    becomes a `FieldTree` of its entries. An explicit `kind` key selects the
    node type directly, which allows group-level attributes such as
    `{"kind": "group", "hidden": True, "children": {...}}`. Existing node
    instances are returned as they are.

    Params:
        shape: Node instance or nested mapping
        path: Dot path of the shape, used in error messages

    Returns:
        The built node

    Raises:
        TypeError: If a shape entry is neither a mapping nor a node
        pydantic.ValidationError: If leaf attributes are invalid
    """
    if isinstance(shape, (FieldNode, FieldTree)):
        return shape
    if not isinstance(shape, Mapping):
        raise TypeError(
            f"Cannot build a form node at '{path or '<root>'}' from "
            f"{type(shape).__name__}; expected a mapping"
        )

    kind = shape.get("kind")
    if kind == "field" or (kind is None and "value" in shape):
        return FieldNode.model_validate(dict(shape))
    if kind == "group":
        attributes = {k: v for k, v in shape.items() if k not in ("kind", "children")}
        return FieldTree(
            children=_build_children(shape.get("children", {}), path), **attributes
        )
    return FieldTree(children=_build_children(shape, path))


def _build_children(shape: Mapping, path: str) -> dict[str, FieldNode | FieldTree]:
    return {
        key: build_node(child, f"{path}.{key}" if path else key)
        for key, child in shape.items()
    }


def build_tree(shape: Any) -> FieldTree:
    """
    Build the root `FieldTree` of a form.

    Params:
        shape: `FieldTree` instance or nested mapping of field shapes

    Returns:
        Root group of the form

    Raises:
        TypeError: If the shape describes a single field instead of a group
    """
    root = build_node(shape)
    if not isinstance(root, FieldTree):
        raise TypeError("The root of a form must be a group, not a single field")
    return root


def clone_node(node: FieldNode | FieldTree) -> FieldNode | FieldTree:
    """
    Return a structurally independent copy of a node.

    Values are deep-copied; validation rules are externally owned and shared
    by reference.
    """
    if isinstance(node, FieldNode):
        return node.model_copy(update={"value": copy.deepcopy(node.value)})
    if isinstance(node, FieldTree):
        return node.model_copy(
            update={
                "children": {key: clone_node(child) for key, child in node.items()}
            }
        )
    raise TypeError(f"Not a form node: {type(node).__name__}")
