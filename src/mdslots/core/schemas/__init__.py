"""Schema validation utilities for mdslots.

Centralized JSON schema loading and validation for config payloads.
"""
from __future__ import annotations

from .validation import (
    load_schema,
    validate_payload,
    validate_payload_safe,
    SchemaValidationError,
)

__all__ = [
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
