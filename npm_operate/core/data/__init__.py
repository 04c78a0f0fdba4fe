"""
Central data registry for static schema data.

Loads bundled data files from ``npm_operate/core/data/`` on first
access and caches them for the lifetime of the instance.

Usage::

    from npm_operate.core.data import DataRegistry

    registry = DataRegistry()
    schema = registry.package_schema   # ObjectSchema
"""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path

from npm_operate.core.config.schema_loader import load_schema
from npm_operate.core.models.schema import ObjectSchema

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent

PACKAGE_SCHEMA_FILE = _DATA_DIR / "package_schema.yml"


class DataRegistry:
    """Lazily loaded, cached access to bundled data files."""

    @cached_property
    def package_schema(self) -> ObjectSchema:
        """The package.json field schema (field order, constraints)."""
        schema = load_schema(PACKAGE_SCHEMA_FILE)
        logger.debug("Loaded package schema: %d top-level fields", len(schema.properties))
        return schema


_default_registry: DataRegistry | None = None


def default_registry() -> DataRegistry:
    """Process-wide registry used by the CLI and use cases."""
    global _default_registry
    if _default_registry is None:
        _default_registry = DataRegistry()
    return _default_registry
