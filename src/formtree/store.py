"""
The form store.

`FormStore` owns a form tree for the interactive lifetime of a form. UI
events call the mutation methods; aggregations and the submission payload
are pulled on demand; server data is merged back with `set_form_data`.

Every mutation bumps `version` and notifies subscribers once. Computed
getters are memoized against `version`, and every export is an independent
copy so that holders of an export cannot observe or cause later mutation.
"""

import asyncio
import copy
import dataclasses
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from attrs import frozen

from formtree.aggregation.completion import CompletionAggregator, CompletionReport
from formtree.aggregation.validity import InvalidItem, ValidityAggregator, ValidityReport
from formtree.binding import FieldBinding, FieldStatus
from formtree.core.field_node import FieldNode, FieldTree, build_tree, clone_node
from formtree.core.path_utils import PathResolver
from formtree.core.types import FieldValue, JSONPayload, PathParts
from formtree.core.validation import failure_message
from formtree.options import DEFAULT_OPTIONS, StoreOptions
from formtree.transform.payload import PayloadProjector
from formtree.transform.reconcile import ResponseReconciler

logger = logging.getLogger(__name__)

Subscriber = Callable[["FormStore", str], None]


@frozen
class FormErrorData:
    """Form-wide error banner."""

    is_error: bool = False
    message: str = ""


@frozen
class FormWarningData:
    """Form-wide warning banner."""

    is_warning: bool = False
    message: str = ""


def _visible_fields(
    tree: FieldTree, path: PathParts = ()
) -> Iterator[tuple[str, FieldNode]]:
    for key, node in tree.items():
        if node.hidden:
            continue
        if isinstance(node, FieldTree):
            yield from _visible_fields(node, path + (key,))
        else:
            yield PathResolver.join(path + (key,)), node


def _rule_outcome(field: FieldNode) -> str | None:
    """Run a field's synchronous rule; return the failure message or None."""
    if field.validation is None:
        return None
    try:
        field.validation.validate_sync(field.value)
    except Exception as e:
        return failure_message(e)
    return None


class FormStore:
    """
    Hierarchical state container for an interactive form.

    Params:
        form: Initial tree, as a `FieldTree` or a nested mapping of field shapes.
            The store takes ownership of it.
        options: Store configuration; defaults to `DEFAULT_OPTIONS`
    """

    def __init__(
        self,
        form: FieldTree | Mapping[str, Any],
        options: StoreOptions | None = None,
    ):
        self.options = options or DEFAULT_OPTIONS
        self._form = build_tree(form)
        self._initial_form = clone_node(self._form)

        self.is_validating = False
        self.is_form_loading = False
        self.form_error_data = FormErrorData()
        self.form_warning_data = FormWarningData()

        self.version = 0
        self._subscribers: list[Subscriber] = []
        self._memo: dict[str, tuple[int, Any]] = {}
        self._pending: set[asyncio.Task] = set()

        self._validity = ValidityAggregator()
        self._completion = CompletionAggregator()
        self._projector = PayloadProjector()
        self._reconciler = ResponseReconciler(self.options)

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback fired after every mutation.

        Params:
            callback: Called as `callback(store, reason)`

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def touch(self) -> None:
        """Publish a change made in place on a node obtained from `get_field`."""
        self._commit("touch")

    def _commit(self, reason: str) -> None:
        self.version += 1
        logger.debug("Form store v%d: %s", self.version, reason)
        for callback in list(self._subscribers):
            callback(self, reason)

    def _computed(self, name: str, compute: Callable[[], Any]) -> Any:
        cached = self._memo.get(name)
        if cached is not None and cached[0] == self.version:
            return cached[1]
        result = compute()
        self._memo[name] = (self.version, result)
        return result

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def form(self) -> FieldTree:
        """The live tree. Prefer the mutation methods over editing it directly."""
        return self._form

    @property
    def initial_form(self) -> FieldTree:
        """Copy of the tree as it was at construction."""
        return clone_node(self._initial_form)

    def get_node(self, path: str) -> FieldNode | FieldTree:
        """Return the live node at `path`; raises `PathResolutionError` if absent."""
        return PathResolver.resolve(self._form, path)

    def get_field(self, path: str) -> FieldNode:
        """
        Return the live field at `path`.

        The node is shared with the tree. Edits made on it directly are not
        published; call `touch()` afterwards.

        Raises:
            PathResolutionError: If the path does not exist
            FieldTypeError: If the path identifies a group
        """
        return PathResolver.resolve_field(self._form, path)

    @property
    def form_values(self) -> FieldTree:
        """Independent snapshot of the whole tree."""
        return clone_node(self._form)

    def _validity_report(self) -> ValidityReport:
        return self._computed("validity", lambda: self._validity.aggregate(self._form))

    @property
    def is_form_valid(self) -> bool:
        return self._validity_report().is_valid

    @property
    def invalid_items(self) -> list[InvalidItem]:
        """Fields failing synchronous validation, for diagnostics."""
        return [
            dataclasses.replace(item, field=clone_node(item.field))
            for item in self._validity_report().invalid_items
        ]

    def _completion_report(self) -> CompletionReport:
        return self._computed(
            "completion", lambda: self._completion.aggregate(self._form)
        )

    def completion_report(self) -> CompletionReport:
        """Copy of the completion counters, for diagnostics."""
        report = self._completion_report()
        return dataclasses.replace(report, not_filled=list(report.not_filled))

    @property
    def form_success_percent(self) -> int:
        return self._completion_report().percent(self.options.empty_completion_percent)

    @property
    def form_json_data(self) -> JSONPayload:
        """Submission payload: hidden and excluded fields omitted, values unwrapped."""
        payload = self._computed("payload", lambda: self._projector.project(self._form))
        return copy.deepcopy(payload)

    @property
    def form_error(self) -> FormErrorData:
        return self.form_error_data

    @property
    def form_warning(self) -> FormWarningData:
        return self.form_warning_data

    @property
    def pending_validations(self) -> frozenset[asyncio.Task]:
        """Validation tasks scheduled by `change_input` or blur and not yet done."""
        return frozenset(self._pending)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def change_input(self, path: str, value: FieldValue) -> asyncio.Task | None:
        """
        Set a field's value.

        A field that currently carries an error is re-validated right away.
        Any form-wide error or warning banner is dismissed.

        Returns:
            The scheduled validation task when re-validation runs inside an
            event loop, otherwise None
        """
        field = self.get_field(path)
        field.value = value
        task = None
        if field.error:
            task = self._schedule_validation(path, field)
        self.form_error_data = FormErrorData()
        self.form_warning_data = FormWarningData()
        self._commit(f"change_input {path}")
        return task

    def change_hidden(self, path: str, is_hidden: bool) -> None:
        """Show or hide a field or a whole group."""
        self.get_node(path).hidden = is_hidden
        self._commit(f"change_hidden {path}")

    def set_form_error(self, message: str) -> None:
        self.form_error_data = FormErrorData(is_error=True, message=message)
        self._commit("set_form_error")

    def set_form_warning(self, message: str) -> None:
        self.form_warning_data = FormWarningData(is_warning=True, message=message)
        self._commit("set_form_warning")

    def set_form_loading(self, value: bool) -> None:
        self.is_form_loading = value
        self._commit("set_form_loading")

    def reset_form(self) -> None:
        """Restore the tree to its construction-time state and clear both banners."""
        self._form = clone_node(self._initial_form)
        self.form_error_data = FormErrorData()
        self.form_warning_data = FormWarningData()
        self._commit("reset_form")

    def set_form_data(self, data: Mapping[str, Any]) -> None:
        """
        Merge server data into the form.

        See `ResponseReconciler` for the merge rules. The live tree is replaced
        by the merged tree.

        Raises:
            ResponseShapeError: See `ResponseReconciler.reconcile`
        """
        self._form = self._reconciler.reconcile(self._form, data)
        self._commit("set_form_data")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def validate(self, path: str) -> None:
        """
        Validate one field with its rule's asynchronous check.

        On success the field's error is cleared, on failure it is set to the
        failure message. Concurrent calls for one field are not cancelled: the
        last one to finish decides the error.
        """
        field = self.get_field(path)
        error = None
        if field.validation is not None:
            try:
                await field.validation.validate(field.value)
            except Exception as e:
                error = failure_message(e)
        self._write_error(path, error)

    def validate_sync(self, path: str) -> bool:
        """Validate one field synchronously; returns whether it passed."""
        field = self.get_field(path)
        field.error = _rule_outcome(field)
        self._commit(f"validate {path}")
        return field.error is None

    async def validate_all(self) -> bool:
        """
        Validate every visible field carrying a rule, concurrently.

        `is_validating` is set while the checks run.

        Returns:
            Whole-form validity after the run
        """
        paths = [
            path
            for path, field in _visible_fields(self._form)
            if field.validation is not None
        ]
        self.is_validating = True
        self._commit("validating")
        try:
            await asyncio.gather(*(self.validate(path) for path in paths))
        finally:
            self.is_validating = False
            self._commit("validated")
        return self.is_form_valid

    def _schedule_validation(self, path: str, field: FieldNode) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            field.error = _rule_outcome(field)
            return None
        task = loop.create_task(self.validate(path))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _write_error(self, path: str, error: str | None) -> None:
        # the tree may have been swapped while the rule was running
        field = PathResolver.find(self._form, path)
        if not isinstance(field, FieldNode):
            logger.warning("Discarding validation result for missing field '%s'", path)
            return
        field.error = error
        self._commit(f"validate {path}")

    # ------------------------------------------------------------------
    # UI binding
    # ------------------------------------------------------------------

    def register(self, path: str, on_change_value: FieldValue = None) -> FieldBinding:
        """
        Bind a widget to a field.

        Params:
            path: Dot path of the field
            on_change_value: Fixed value written on change instead of the
                widget's value (e.g. for checkbox-like widgets)

        Returns:
            FieldBinding with callbacks and the current status
        """
        field = self.get_field(path)
        status = None
        help_text = ""
        if field.error or self.form_error_data.is_error:
            status = FieldStatus.ERROR
            help_text = field.error or self.form_error_data.message
        elif field.warning or self.form_warning_data.is_warning:
            status = FieldStatus.WARNING
            help_text = field.warning or self.form_warning_data.message

        def on_change(value: FieldValue = None) -> asyncio.Task | None:
            return self.change_input(
                path, on_change_value if on_change_value is not None else value
            )

        def on_blur(*_event: Any) -> asyncio.Task | None:
            task = self._schedule_validation(path, self.get_field(path))
            if task is None:
                self._commit(f"validate {path}")
            return task

        return FieldBinding(
            path=path,
            on_change=on_change,
            on_blur=on_blur,
            value=field.value,
            status=status,
            help_text=help_text,
        )
