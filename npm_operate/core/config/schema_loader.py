"""
Schema loader — loads a manifest schema from a YAML file.

The file holds a single object node (see ``core/models/schema.py``).
Validation is done by pydantic, so a malformed schema fails at load
time rather than during normalization.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import TypeAdapter, ValidationError

from npm_operate.core.config.loader import ConfigError
from npm_operate.core.models.schema import ObjectSchema, SchemaNode

logger = logging.getLogger(__name__)

_NODE_ADAPTER: TypeAdapter[SchemaNode] = TypeAdapter(SchemaNode)


def load_schema(path: Path) -> ObjectSchema:
    """Load and validate an object schema from a YAML file.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, not a
            valid schema, or its root is not an object node.
    """
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load schema {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Schema file {path} is not a mapping")

    try:
        node = _NODE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid schema in {path}: {e}") from e

    if not isinstance(node, ObjectSchema):
        raise ConfigError(f"Schema root in {path} must be an object, got {node.type}")

    logger.debug("Loaded schema '%s' with %d fields from %s", node.title, len(node.properties), path)
    return node
