"""
UI binding descriptors.

`FormStore.register` derives a `FieldBinding` for one field: the callbacks a
widget wires to its change and blur events, plus the value and status to
display.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from attrs import frozen


class FieldStatus(Enum):
    """Display status of a bound field."""

    ERROR = "error"
    WARNING = "warning"


@frozen
class FieldBinding:
    """Widget-facing view of a single field.

    Params:
        path: Dot path of the bound field
        on_change: Call with the widget's new value
        on_blur: Call when the widget loses focus; triggers field validation
        value: Field value at registration time
        status: ERROR, WARNING or None
        help_text: Message matching `status`
    """

    path: str
    on_change: Callable[[Any], Any]
    on_blur: Callable[..., Any]
    value: Any
    status: FieldStatus | None = None
    help_text: str = ""
