"""
Response reconciliation.

Merges an inbound response (a plain nested mapping) into a form tree and
returns a new tree. Field metadata absent from the response (warning,
hidden, exclusion flags, validation rule) is preserved; only values and
errors are refreshed.

Per response entry:
    - mapping: merged recursively into the group at the same path
    - mapping with the set-as-is marker: adopted verbatim over the existing node
    - None: the existing node is carried over unchanged
    - anything else: becomes the field's new value and clears its error; the
      empty-date sentinel is stored as None

The current path is threaded through every recursive call as an explicit
tuple, so lookups into the existing tree never depend on sibling order.
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from formtree.core.field_node import FieldNode, FieldTree, build_node, clone_node
from formtree.core.path_utils import PathResolver
from formtree.core.types import PathParts
from formtree.exceptions import ResponseShapeError
from formtree.options import DEFAULT_OPTIONS, StoreOptions

logger = logging.getLogger(__name__)


def _field_attribute_names(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases in a field payload to attribute names."""
    aliases = {
        info.alias: name
        for name, info in FieldNode.model_fields.items()
        if info.alias is not None
    }
    return {aliases.get(key, key): value for key, value in payload.items()}


class ResponseReconciler:
    """Merges server responses into form trees.

    Params:
        options: Sentinel, marker and strictness settings
    """

    def __init__(self, options: StoreOptions = DEFAULT_OPTIONS):
        self.options = options

    def reconcile(self, tree: FieldTree, response: Mapping[str, Any]) -> FieldTree:
        """
        Merge a response into a tree.

        Params:
            tree: Current form tree; left untouched
            response: Inbound nested mapping; left untouched

        Returns:
            A new tree with the response merged in. Nodes the response does not
            mention are carried over as copies.

        Raises:
            ResponseShapeError: If the response is not a mapping, if a set-as-is
                payload is invalid, or (with `strict_reconcile`) if a response
                key does not fit the tree
        """
        if not isinstance(response, Mapping):
            raise ResponseShapeError(
                "<root>", f"expected a mapping, got {type(response).__name__}"
            )
        merged = self._merge_group(tree, response, ())
        logger.debug("Reconciled response with %d top-level keys", len(response))
        return merged

    def _merge_group(
        self, group: FieldTree, incoming: Mapping[str, Any], path: PathParts
    ) -> FieldTree:
        children = {key: clone_node(child) for key, child in group.items()}
        for key, value in incoming.items():
            merged = self._merge_entry(group.children.get(key), value, path + (key,))
            if merged is not None:
                children[key] = merged
        return group.model_copy(update={"children": children})

    def _merge_entry(
        self, existing: FieldNode | FieldTree | None, value: Any, path: PathParts
    ) -> FieldNode | FieldTree | None:
        """Return the replacement node for `path`, or None to keep what is there."""
        if isinstance(value, Mapping):
            marker = self.options.set_as_is_marker
            if marker in value:
                payload = {k: v for k, v in value.items() if k != marker}
                return self._adopt(existing, payload, path)
            if isinstance(existing, FieldTree):
                return self._merge_group(existing, value, path)
            if existing is None:
                return self._unmatched(path, "no group exists at this path")
            return self._unmatched(path, "nested data cannot be merged into a field")

        if value is None:
            return None

        if isinstance(existing, FieldNode):
            return existing.model_copy(
                update={"value": self._translate(value), "error": None}
            )
        if existing is None:
            return self._unmatched(path, "no field exists at this path")
        return self._unmatched(path, "a group cannot take a scalar value")

    def _translate(self, value: Any) -> Any:
        sentinel = self.options.empty_date_sentinel
        if sentinel is not None and isinstance(value, str) and value == sentinel:
            return None
        return copy.deepcopy(value)

    def _adopt(
        self,
        existing: FieldNode | FieldTree | None,
        payload: dict[str, Any],
        path: PathParts,
    ) -> FieldNode | FieldTree:
        """
        Merge a set-as-is payload shallowly over the existing node.

        For a field, payload keys are field attributes; keys that are not
        field attributes are skipped (or raise under `strict_reconcile`).
        A field-shaped payload (one with a `value` or `kind="field"` key) for a
        group or a path the tree does not have yet becomes a new field. Any
        other payload is a tree shape whose top-level entries replace
        same-named children.
        """
        dotted = PathResolver.join(path)
        if isinstance(existing, FieldNode):
            attributes = self._known_attributes(payload, path)
            if "value" in attributes:
                attributes["value"] = copy.deepcopy(attributes["value"])
            try:
                return FieldNode.model_validate({**existing.attributes(), **attributes})
            except ValidationError as e:
                raise ResponseShapeError(
                    dotted, f"invalid field attributes: {e.errors()[0]['msg']}"
                ) from e

        if payload.get("kind") == "field" or (
            "kind" not in payload and "value" in payload
        ):
            attributes = self._known_attributes(payload, path)
            try:
                return build_node(copy.deepcopy(attributes), dotted)
            except (TypeError, ValidationError) as e:
                raise ResponseShapeError(dotted, str(e)) from e

        base = existing if isinstance(existing, FieldTree) else FieldTree()
        children = {key: clone_node(child) for key, child in base.items()}
        for key, entry in payload.items():
            current = children.get(key)
            if not isinstance(entry, Mapping) and isinstance(current, FieldNode):
                children[key] = current.model_copy(
                    update={"value": copy.deepcopy(entry)}
                )
                continue
            try:
                children[key] = build_node(copy.deepcopy(entry), f"{dotted}.{key}")
            except (TypeError, ValidationError) as e:
                raise ResponseShapeError(f"{dotted}.{key}", str(e)) from e
        return base.model_copy(update={"children": children})

    def _known_attributes(
        self, payload: Mapping[str, Any], path: PathParts
    ) -> dict[str, Any]:
        """Field attributes of a set-as-is payload, minus keys a field does not have."""
        attributes = _field_attribute_names(payload)
        unknown = [key for key in attributes if key not in FieldNode.model_fields]
        if unknown:
            reason = f"not field attributes: {', '.join(sorted(unknown))}"
            if self.options.strict_reconcile:
                raise ResponseShapeError(PathResolver.join(path), reason)
            logger.warning(
                "Dropping set-as-is keys at '%s': %s", PathResolver.join(path), reason
            )
        return {key: value for key, value in attributes.items() if key not in unknown}

    def _unmatched(self, path: PathParts, reason: str) -> None:
        dotted = PathResolver.join(path)
        if self.options.strict_reconcile:
            raise ResponseShapeError(dotted, reason)
        logger.warning("Skipping response key '%s': %s", dotted, reason)
        return None
