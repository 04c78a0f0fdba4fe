"""
Manifest validation — check a manifest against the schema constraints.

Reports problems, never fixes them. Keys the schema does not know about
are not violations: manifests routinely carry third-party configuration
blocks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from npm_operate.core.models.schema import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    child_schema,
    item_schema_for,
    json_type,
)

logger = logging.getLogger(__name__)

_FORMAT_PATTERNS = {
    "email": re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$"),
    "uri": re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://\S+$"),
    "phone": re.compile(r"^\+?[0-9][0-9 ()-]{5,}$"),
}


@dataclass(frozen=True)
class SchemaViolation:
    """One constraint a manifest value fails.

    ``path`` is dotted, with list indexes in brackets:
    ``contributors[1].email``. The root is ``"$"``.
    """

    path: str
    message: str

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message}

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def validate_manifest(manifest: dict[str, Any], schema: ObjectSchema) -> list[SchemaViolation]:
    """Validate a manifest; an empty list means it is valid."""
    violations: list[SchemaViolation] = []
    _check(manifest, schema, "$", violations)
    logger.debug("Validation found %d violation(s)", len(violations))
    return violations


def _join(path: str, key: str) -> str:
    return key if path == "$" else f"{path}.{key}"


def _check(value: Any, schema: SchemaNode, path: str, out: list[SchemaViolation]) -> None:
    tag = json_type(value)

    if isinstance(schema, ObjectSchema) and tag == "string" and schema.shorthand is not None:
        _check(value, schema.shorthand, path, out)
        return

    if tag != schema.type:
        out.append(SchemaViolation(path, f"expected {schema.type}, got {tag or 'null'}"))
        return

    if isinstance(schema, StringSchema):
        _check_string(value, schema, path, out)
    elif isinstance(schema, NumberSchema):
        _check_number(value, schema, path, out)
    elif isinstance(schema, ObjectSchema):
        _check_object(value, schema, path, out)
    elif isinstance(schema, ArraySchema):
        _check_array(value, schema, path, out)
    elif isinstance(schema, BooleanSchema):
        pass  # the type check is the whole contract


def _check_string(value: str, schema: StringSchema, path: str, out: list[SchemaViolation]) -> None:
    if schema.min_length is not None and len(value) < schema.min_length:
        out.append(SchemaViolation(path, f"shorter than {schema.min_length} characters"))
    if schema.max_length is not None and len(value) > schema.max_length:
        out.append(SchemaViolation(path, f"longer than {schema.max_length} characters"))
    if schema.pattern is not None and re.search(schema.pattern, value) is None:
        out.append(SchemaViolation(path, f"does not match pattern {schema.pattern}"))
    if schema.format is not None and _FORMAT_PATTERNS[schema.format].match(value) is None:
        out.append(SchemaViolation(path, f"not a valid {schema.format}"))
    if schema.enum is not None and value not in schema.enum:
        out.append(SchemaViolation(path, f"must be one of {', '.join(schema.enum)}"))


def _check_number(value: float, schema: NumberSchema, path: str, out: list[SchemaViolation]) -> None:
    if schema.minimum is not None and value < schema.minimum:
        out.append(SchemaViolation(path, f"less than {schema.minimum:g}"))
    if schema.maximum is not None and value > schema.maximum:
        out.append(SchemaViolation(path, f"greater than {schema.maximum:g}"))
    if schema.enum is not None and value not in schema.enum:
        out.append(SchemaViolation(path, f"must be one of {', '.join(f'{v:g}' for v in schema.enum)}"))


def _check_object(value: dict, schema: ObjectSchema, path: str, out: list[SchemaViolation]) -> None:
    for key in schema.required:
        if key not in value:
            out.append(SchemaViolation(_join(path, key), "required field is missing"))

    for key, item in value.items():
        sub = child_schema(schema, key)
        if sub is not None:
            _check(item, sub, _join(path, key), out)


def _check_array(value: list, schema: ArraySchema, path: str, out: list[SchemaViolation]) -> None:
    if not schema.items:
        return
    for index, item in enumerate(value):
        item_path = f"{path}[{index}]"
        item_schema = item_schema_for(schema, item)
        if item_schema is None:
            allowed = " or ".join(s.type for s in schema.items)
            out.append(SchemaViolation(item_path, f"expected {allowed}, got {json_type(item) or 'null'}"))
            continue
        _check(item, item_schema, item_path, out)
