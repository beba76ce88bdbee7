"""
Shared test fixtures and utilities for the formtree test suite.
"""

import asyncio

import pytest

from formtree import CallableRule, FormStore
from formtree.exceptions import FieldValidationError


def is_present(value):
    return value is not None and bool(str(value).strip())


class GatedRule:
    """Validation rule whose async checks finish only when released.

    Each `validate` call appends `(event, value)` to `gates` and waits on the
    event; the value "bad" fails once released.
    """

    def __init__(self):
        self.gates = []

    def validate_sync(self, value):
        if value == "bad":
            raise FieldValidationError("Bad value")
        return value

    async def validate(self, value):
        gate = asyncio.Event()
        self.gates.append((gate, value))
        await gate.wait()
        return self.validate_sync(value)


@pytest.fixture
def required_rule():
    return CallableRule(is_present, "This field is required")


@pytest.fixture
def applicant_shape(required_rule):
    """Small two-level form used across store tests."""
    return {
        "name": {"value": "", "validation": required_rule},
        "email": {"value": "old@example.com", "warning": "Unverified"},
        "address": {
            "city": {"value": ""},
            "zip": {"value": "1000", "excludeFromRequestData": True},
        },
        "notes": {"value": "", "excludeFromFillPercent": True},
    }


@pytest.fixture
def store(applicant_shape):
    return FormStore(applicant_shape)


@pytest.fixture
def gated_rule():
    return GatedRule()
