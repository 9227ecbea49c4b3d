"""Shared schema validation utilities.

Schemas are JSON Schema documents stored as YAML under
``mdslots/data/schemas/`` and loaded through ``importlib.resources``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from mdslots.core.exceptions import SchemaValidationError
from mdslots.data import get_data_path, read_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    if not get_data_path("schemas", schema_name).exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate ``payload`` and return error messages (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    errors = validate_payload_safe(payload, schema_name)
    if errors:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}':\n  " + "\n  ".join(errors),
            context={"schema": schema_name, "errors": errors},
        )


__all__ = ["load_schema", "validate_payload", "validate_payload_safe", "SchemaValidationError"]
