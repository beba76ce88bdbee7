"""
Validation rule collaborators.

Form fields reference validation rules; they never implement them. A rule is
any object exposing a synchronous `validate_sync(value)` and an asynchronous
`validate(value)`, both raising on failure with a human-readable `message`.
Two thin adapters are provided: one over pydantic type adapters and one over
plain predicates.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from formtree.exceptions import FieldValidationError


@runtime_checkable
class ValidationRule(Protocol):
    """Protocol for externally owned validation rules."""

    def validate_sync(self, value: Any) -> Any: ...

    async def validate(self, value: Any) -> Any: ...


def failure_message(exc: BaseException) -> str:
    """
    Extract the human-readable message from a validation failure.

    Params:
        exc: Exception raised by a validation rule

    Returns:
        The exception's `message` attribute when it is a string, else `str(exc)`
    """
    message = getattr(exc, "message", None)
    if isinstance(message, str):
        return message
    return str(exc)


class TypeAdapterRule:
    """Validation rule backed by a pydantic `TypeAdapter`.

    Any annotation pydantic understands may be used, including `Annotated`
    constraints, e.g. `Annotated[str, StringConstraints(min_length=1)]`.

    Params:
        annotation: Type annotation the value must satisfy
        message: Optional message replacing pydantic's own error text
    """

    def __init__(self, annotation: Any, message: str | None = None):
        self.annotation = annotation
        self.message = message
        self._adapter = TypeAdapter(annotation)

    def validate_sync(self, value: Any) -> Any:
        try:
            return self._adapter.validate_python(value)
        except ValidationError as e:
            raise FieldValidationError(self.message or e.errors()[0]["msg"]) from e

    async def validate(self, value: Any) -> Any:
        return self.validate_sync(value)

    def __repr__(self) -> str:
        return f"TypeAdapterRule({self.annotation!r})"


class CallableRule:
    """Validation rule built from a predicate.

    Params:
        check: Synchronous predicate returning True for valid values
        message: Failure message
        async_check: Optional coroutine predicate used by `validate` instead of `check`
    """

    def __init__(
        self,
        check: Callable[[Any], bool],
        message: str,
        async_check: Callable[[Any], Awaitable[bool]] | None = None,
    ):
        self.check = check
        self.message = message
        self.async_check = async_check

    def validate_sync(self, value: Any) -> Any:
        if not self.check(value):
            raise FieldValidationError(self.message)
        return value

    async def validate(self, value: Any) -> Any:
        if self.async_check is None:
            return self.validate_sync(value)
        if not await self.async_check(value):
            raise FieldValidationError(self.message)
        return value
