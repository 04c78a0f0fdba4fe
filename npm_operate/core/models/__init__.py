"""
Domain models for npm-operate.

All models are re-exported here for convenient access:

    from npm_operate.core.models import ObjectSchema, PackageEntry, ProjectTopology
"""

from npm_operate.core.models.action import Action, Receipt
from npm_operate.core.models.package import (
    Intent,
    Orchestrator,
    PackageEntry,
    PackageTool,
    ProjectTopology,
    Scope,
    ToolSelection,
)
from npm_operate.core.models.schema import (
    WILDCARD,
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    child_schema,
    field_order,
)

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # package.py
    "Intent",
    "Orchestrator",
    "PackageEntry",
    "PackageTool",
    "ProjectTopology",
    "Scope",
    "ToolSelection",
    # schema.py
    "WILDCARD",
    "ArraySchema",
    "BooleanSchema",
    "NumberSchema",
    "ObjectSchema",
    "SchemaNode",
    "StringSchema",
    "child_schema",
    "field_order",
]
