"""
Core type definitions for formtree.

This module contains type aliases used throughout formtree for the values
that flow in and out of a form tree.
"""

from typing import Any

FieldValue = Any

JSONPayload = dict[str, Any]

ResponseData = dict[str, Any]

PathParts = tuple[str, ...]
