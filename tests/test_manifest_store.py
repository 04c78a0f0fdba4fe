"""
Tests for reading and writing package.json files.
"""

from pathlib import Path

import pytest

from npm_operate.core.errors import ConfigNotFoundError, ManifestError
from npm_operate.core.services.manifest_store import (
    declared_dependencies,
    dump_manifest,
    read_manifest,
    update_manifest,
    write_manifest,
)


class TestReadManifest:
    def test_read(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text('{"name": "x", "version": "1.0.0"}', encoding="utf-8")
        assert read_manifest(path) == {"name": "x", "version": "1.0.0"}

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError) as exc:
            read_manifest(tmp_path / "package.json")
        assert exc.value.path == tmp_path / "package.json"

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text("{name: x}", encoding="utf-8")
        with pytest.raises(ManifestError, match="invalid JSON"):
            read_manifest(path)

    def test_not_an_object(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ManifestError, match="expected a JSON object"):
            read_manifest(path)


class TestWriteManifest:
    def test_format(self):
        text = dump_manifest({"name": "café", "version": "1"})
        assert text == '{\n  "name": "café",\n  "version": "1"\n}\n'

    def test_write_and_skip_unchanged(self, tmp_path: Path):
        path = tmp_path / "package.json"
        assert write_manifest(path, {"name": "x"}) is True
        assert write_manifest(path, {"name": "x"}) is False
        assert write_manifest(path, {"name": "y"}) is True
        assert read_manifest(path) == {"name": "y"}

    def test_key_order_preserved(self, tmp_path: Path):
        path = tmp_path / "package.json"
        write_manifest(path, {"version": "1", "name": "x"})
        assert list(read_manifest(path)) == ["version", "name"]

    def test_update_is_shallow_merge(self, tmp_path: Path):
        path = tmp_path / "package.json"
        write_manifest(path, {"name": "x", "scripts": {"a": "1"}})
        merged = update_manifest(path, {"scripts": {"b": "2"}, "private": True})
        assert merged == {"name": "x", "scripts": {"b": "2"}, "private": True}
        assert list(read_manifest(path)) == ["name", "scripts", "private"]


class TestDeclaredDependencies:
    def test_both_maps(self):
        manifest = {
            "dependencies": {"react": "18"},
            "devDependencies": {"jest": "29"},
            "peerDependencies": {"vue": "3"},
        }
        assert declared_dependencies(manifest) == {"react", "jest"}

    def test_missing_or_malformed_maps(self):
        assert declared_dependencies({}) == set()
        assert declared_dependencies({"dependencies": ["react"]}) == set()
