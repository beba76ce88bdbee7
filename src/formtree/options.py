"""
Store configuration.

Options are immutable parameter records; a store is configured once at
construction and never reconfigured.
"""

from attrs import frozen

EMPTY_DATE_SENTINEL = "0001-01-01T00:00:00Z"
SET_AS_IS_MARKER = "setAsItIs"


@frozen
class StoreOptions:
    """Behavioural knobs of a `FormStore`.

    Params:
        empty_date_sentinel: Inbound response value meaning "no date"; stored as None
        set_as_is_marker: Inbound mapping key requesting verbatim adoption of the mapping
        strict_reconcile: Raise on response keys that do not fit the tree instead of
            skipping them with a warning
        empty_completion_percent: Completion reported when no field is eligible
    """

    empty_date_sentinel: str | None = EMPTY_DATE_SENTINEL
    set_as_is_marker: str = SET_AS_IS_MARKER
    strict_reconcile: bool = False
    empty_completion_percent: int = 100


DEFAULT_OPTIONS = StoreOptions()
