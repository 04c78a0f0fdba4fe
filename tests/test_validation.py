"""
Tests for manifest validation against the schema.
"""

from npm_operate.core.models.schema import (
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    StringSchema,
)
from npm_operate.core.services.validation import SchemaViolation, validate_manifest


def _paths(violations: list[SchemaViolation]) -> list[str]:
    return [v.path for v in violations]


class TestValidateManifest:
    def test_valid_manifest(self, package_schema):
        manifest = {
            "name": "@acme/web",
            "version": "1.2.3",
            "author": "Jo <jo@acme.io>",
            "contributors": [{"name": "Al", "email": "al@acme.io"}],
            "private": True,
            "dependencies": {"react": "^18.2.0"},
            "os": ["linux", "!win32"],
            "custom": {"anything": [1, 2]},
        }
        assert validate_manifest(manifest, package_schema) == []

    def test_required_fields(self, package_schema):
        violations = validate_manifest({"description": "x"}, package_schema)
        assert _paths(violations) == ["name", "version"]
        assert "required" in violations[0].message

    def test_name_pattern(self, package_schema):
        violations = validate_manifest({"name": "Bad Name", "version": "1"}, package_schema)
        assert _paths(violations) == ["name"]
        assert "pattern" in violations[0].message

    def test_type_mismatch(self, package_schema):
        violations = validate_manifest({"name": "x", "version": "1", "private": "yes"}, package_schema)
        assert len(violations) == 1
        assert violations[0].path == "private"
        assert violations[0].message == "expected boolean, got string"

    def test_wildcard_values_checked(self, package_schema):
        manifest = {"name": "x", "version": "1", "dependencies": {"react": 18}}
        violations = validate_manifest(manifest, package_schema)
        assert _paths(violations) == ["dependencies.react"]

    def test_nested_format(self, package_schema):
        manifest = {"name": "x", "version": "1", "author": {"name": "Jo", "email": "not-an-email"}}
        violations = validate_manifest(manifest, package_schema)
        assert _paths(violations) == ["author.email"]
        assert "email" in violations[0].message

    def test_array_item_paths(self, package_schema):
        manifest = {"name": "x", "version": "1", "cpu": ["x64", "z80"]}
        violations = validate_manifest(manifest, package_schema)
        assert _paths(violations) == ["cpu[1]"]

    def test_array_item_without_matching_alternative(self, package_schema):
        manifest = {"name": "x", "version": "1", "contributors": ["Al", 7]}
        violations = validate_manifest(manifest, package_schema)
        assert _paths(violations) == ["contributors[1]"]
        assert violations[0].message == "expected string or object, got number"

    def test_number_constraints(self):
        schema = ObjectSchema(properties={"n": NumberSchema(minimum=1, maximum=3, enum=[1, 2])})
        assert _paths(validate_manifest({"n": 0}, schema)) == ["n", "n"]
        assert validate_manifest({"n": 2}, schema) == []

    def test_string_length_and_enum(self):
        schema = ObjectSchema(properties={
            "t": StringSchema(min_length=2, max_length=3, enum=["ab", "abc"]),
        })
        messages = [v.message for v in validate_manifest({"t": "abcd"}, schema)]
        assert messages == ["longer than 3 characters", "must be one of ab, abc"]

    def test_unknown_keys_are_not_violations(self):
        schema = ObjectSchema(properties={"a": StringSchema()})
        assert validate_manifest({"zzz": [None]}, schema) == []

    def test_empty_item_list_accepts_anything(self):
        schema = ObjectSchema(properties={"a": ArraySchema()})
        assert validate_manifest({"a": [1, "x", None]}, schema) == []

    def test_violation_str_and_dict(self):
        v = SchemaViolation("author.email", "not a valid email")
        assert str(v) == "author.email: not a valid email"
        assert v.to_dict() == {"path": "author.email", "message": "not a valid email"}
