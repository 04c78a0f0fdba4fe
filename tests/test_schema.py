"""
Tests for the schema model, traversal helpers, and the schema loader.
"""

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from npm_operate.core.config.loader import ConfigError
from npm_operate.core.config.schema_loader import load_schema
from npm_operate.core.models.schema import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    SchemaNode,
    StringSchema,
    child_schema,
    field_order,
    item_schema_for,
    json_type,
)

NODE = TypeAdapter(SchemaNode)


# ── Variants ─────────────────────────────────────────────────────────


class TestSchemaVariants:
    def test_discriminated_by_type(self):
        assert isinstance(NODE.validate_python({"type": "string"}), StringSchema)
        assert isinstance(NODE.validate_python({"type": "number"}), NumberSchema)
        assert isinstance(NODE.validate_python({"type": "boolean"}), BooleanSchema)
        assert isinstance(NODE.validate_python({"type": "object"}), ObjectSchema)
        assert isinstance(NODE.validate_python({"type": "array"}), ArraySchema)

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            NODE.validate_python({"type": "date"})

    def test_array_rejects_string_constraints(self):
        with pytest.raises(ValidationError):
            NODE.validate_python({"type": "array", "pattern": "^a"})

    def test_boolean_rejects_number_constraints(self):
        with pytest.raises(ValidationError):
            NODE.validate_python({"type": "boolean", "minimum": 0})

    def test_string_format_is_closed(self):
        with pytest.raises(ValidationError):
            StringSchema(format="date")

    def test_single_item_wrapped_in_list(self):
        node = NODE.validate_python({"type": "array", "items": {"type": "string"}})
        assert len(node.items) == 1
        assert isinstance(node.items[0], StringSchema)

    def test_item_alternatives_kept_in_order(self):
        node = NODE.validate_python({
            "type": "array",
            "items": [{"type": "string"}, {"type": "object"}],
        })
        assert [i.type for i in node.items] == ["string", "object"]

    def test_nested_properties_keep_declared_order(self):
        node = NODE.validate_python({
            "type": "object",
            "properties": {
                "z": {"type": "string"},
                "a": {"type": "object", "properties": {"y": {"type": "number"}}},
            },
        })
        assert list(node.properties) == ["z", "a"]
        assert isinstance(node.properties["a"].properties["y"], NumberSchema)

    def test_frozen(self):
        node = StringSchema(title="Name")
        with pytest.raises(ValidationError):
            node.title = "Other"


# ── Traversal ────────────────────────────────────────────────────────


class TestTraversal:
    def _schema(self) -> ObjectSchema:
        return ObjectSchema(properties={
            "name": StringSchema(),
            "*": StringSchema(title="any"),
            "version": StringSchema(),
        })

    def test_field_order_excludes_wildcard(self):
        assert list(field_order(self._schema())) == ["name", "version"]

    def test_field_order_is_restartable(self):
        schema = self._schema()
        assert list(field_order(schema)) == list(field_order(schema))

    def test_field_order_of_non_object_is_empty(self):
        assert list(field_order(StringSchema())) == []
        assert list(field_order(None)) == []

    def test_child_schema_explicit(self):
        schema = self._schema()
        assert child_schema(schema, "name") is schema.properties["name"]

    def test_child_schema_falls_back_to_wildcard(self):
        assert child_schema(self._schema(), "lodash").title == "any"

    def test_child_schema_miss_is_none(self):
        schema = ObjectSchema(properties={"name": StringSchema()})
        assert child_schema(schema, "other") is None
        assert child_schema(StringSchema(), "name") is None

    def test_json_type_bool_is_not_number(self):
        assert json_type(True) == "boolean"
        assert json_type(1) == "number"
        assert json_type(1.5) == "number"
        assert json_type(None) is None

    def test_item_schema_for_picks_matching_alternative(self):
        schema = ArraySchema(items=[StringSchema(), ObjectSchema()])
        assert isinstance(item_schema_for(schema, {"name": "x"}), ObjectSchema)
        assert isinstance(item_schema_for(schema, "x"), StringSchema)
        assert item_schema_for(schema, 3) is None


# ── Loader ───────────────────────────────────────────────────────────


class TestSchemaLoader:
    def test_bundled_schema(self, package_schema):
        order = list(field_order(package_schema))
        assert order[:3] == ["name", "version", "description"]
        assert order.index("scripts") < order.index("dependencies")
        assert package_schema.required == ["name", "version"]

    def test_bundled_dependency_maps_use_wildcard(self, package_schema):
        deps = package_schema.properties["dependencies"]
        assert isinstance(deps.wildcard, StringSchema)

    def test_bundled_author_has_shorthand(self, package_schema):
        assert isinstance(package_schema.properties["author"].shorthand, StringSchema)

    def test_load_custom(self, tmp_path: Path):
        path = tmp_path / "schema.yml"
        path.write_text(
            "type: object\n"
            "properties:\n"
            "  name: {type: string}\n"
            "  version: {type: string}\n"
        )
        schema = load_schema(path)
        assert list(field_order(schema)) == ["name", "version"]

    def test_non_object_root(self, tmp_path: Path):
        path = tmp_path / "schema.yml"
        path.write_text("type: string\n")
        with pytest.raises(ConfigError, match="must be an object"):
            load_schema(path)

    def test_invalid_node(self, tmp_path: Path):
        path = tmp_path / "schema.yml"
        path.write_text("type: object\nproperties:\n  x: {type: array, max_length: 3}\n")
        with pytest.raises(ConfigError, match="Invalid schema"):
            load_schema(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "schema.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_schema(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_schema(tmp_path / "nope.yml")
