"""
Manifest normalizer — schema-driven canonical key order.

Walks the schema depth-first. Keys the schema declares come first, in
declaration order; every other key follows in its original relative
order, so custom blocks (tool configuration and the like) survive a
round trip untouched. Nothing is ever dropped.

Pure logic — no I/O, never mutates its input.
"""

from __future__ import annotations

from typing import Any

from npm_operate.core.models.schema import (
    ArraySchema,
    ObjectSchema,
    SchemaNode,
    child_schema,
    field_order,
    item_schema_for,
)


def normalize(manifest: dict[str, Any], schema: ObjectSchema) -> dict[str, Any]:
    """Return a copy of ``manifest`` with keys in canonical order.

    Idempotent: ``normalize(normalize(m, s), s) == normalize(m, s)``.
    The key set of the result equals the key set of the input.
    """
    result: dict[str, Any] = {}

    for name in field_order(schema):
        if name in manifest:
            result[name] = _normalize_value(manifest[name], child_schema(schema, name))

    for name, value in manifest.items():
        if name not in result:
            result[name] = _normalize_value(value, child_schema(schema, name))

    return result


def _normalize_value(value: Any, schema: SchemaNode | None) -> Any:
    """Normalize one value against its schema; unmatched shapes pass through."""
    if isinstance(value, dict) and isinstance(schema, ObjectSchema):
        return normalize(value, schema)

    if isinstance(value, list) and isinstance(schema, ArraySchema):
        return [_normalize_item(item, schema) for item in value]

    return value


def _normalize_item(item: Any, schema: ArraySchema) -> Any:
    # Only object items are reordered; scalars pass through.
    if not isinstance(item, dict):
        return item
    item_schema = item_schema_for(schema, item)
    if isinstance(item_schema, ObjectSchema):
        return normalize(item, item_schema)
    return item
