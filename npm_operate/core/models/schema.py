"""
Schema model — a recursive, self-describing description of manifest fields.

Each node is exactly one of five variants, discriminated by ``type``:

    string   min_length, max_length, pattern, format, enum, default
    number   minimum, maximum, enum, default
    boolean  default
    object   properties (ordered), required, shorthand
    array    items (ordered list of alternative item schemas)

Variants only accept their own constraint fields, so an array node can
never carry a string pattern. Object ``properties`` may contain the
wildcard key ``"*"``, which matches any field name not listed explicitly
(open maps such as dependency lists).

Nodes are frozen values. Consumers traverse them with ``field_order``
and ``child_schema``; a lookup miss is ``None``, never an exception.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

WILDCARD = "*"


class _SchemaBase(BaseModel):
    """Attributes shared by every schema variant."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = ""
    description: str = ""
    tags: dict[str, str] = Field(default_factory=dict)


class StringSchema(_SchemaBase):
    type: Literal["string"] = "string"
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: Literal["email", "uri", "phone"] | None = None
    enum: list[str] | None = None
    default: str | None = None


class NumberSchema(_SchemaBase):
    type: Literal["number"] = "number"
    minimum: float | None = None
    maximum: float | None = None
    enum: list[float] | None = None
    default: float | None = None


class BooleanSchema(_SchemaBase):
    type: Literal["boolean"] = "boolean"
    default: bool | None = None


class ObjectSchema(_SchemaBase):
    """An object node; ``properties`` order is the canonical field order."""

    type: Literal["object"] = "object"
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    # String form the field may take instead, e.g. author: "Jo <jo@x.io>"
    shorthand: StringSchema | None = None

    @property
    def wildcard(self) -> SchemaNode | None:
        """The schema matching undeclared member names, if any."""
        return self.properties.get(WILDCARD)


class ArraySchema(_SchemaBase):
    """An array node; ``items`` lists alternative schemas for heterogeneous arrays."""

    type: Literal["array"] = "array"
    items: list[SchemaNode] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _wrap_single_item(cls, value: Any) -> Any:
        # A single item schema is shorthand for a one-element list.
        if isinstance(value, (dict, BaseModel)):
            return [value]
        return value


SchemaNode = Annotated[
    Union[StringSchema, NumberSchema, BooleanSchema, ObjectSchema, ArraySchema],
    Field(discriminator="type"),
]

ObjectSchema.model_rebuild()
ArraySchema.model_rebuild()


# ── Traversal ───────────────────────────────────────────────────


def field_order(schema: SchemaNode | None) -> Iterator[str]:
    """Yield declared field names in order, wildcard excluded.

    Lazy and finite. Call again to restart. Non-object schemas
    yield nothing.
    """
    if not isinstance(schema, ObjectSchema):
        return
    for name in schema.properties:
        if name != WILDCARD:
            yield name


def child_schema(schema: SchemaNode | None, field_name: str) -> SchemaNode | None:
    """Schema for a named field: explicit, else wildcard, else None."""
    if not isinstance(schema, ObjectSchema):
        return None
    if field_name != WILDCARD and field_name in schema.properties:
        return schema.properties[field_name]
    return schema.wildcard


def json_type(value: Any) -> str | None:
    """The schema tag matching a decoded JSON value (None for null)."""
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return None


def item_schema_for(schema: SchemaNode | None, value: Any) -> SchemaNode | None:
    """First alternative item schema whose tag matches ``value``."""
    if not isinstance(schema, ArraySchema):
        return None
    tag = json_type(value)
    for candidate in schema.items:
        if candidate.type == tag:
            return candidate
    return None
