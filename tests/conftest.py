"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from npm_operate.core.data import DataRegistry


def write_package(directory: Path, manifest: dict) -> Path:
    """Write ``manifest`` as ``directory/package.json`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return path


def read_package(directory: Path) -> dict:
    return json.loads((directory / "package.json").read_text(encoding="utf-8"))


@pytest.fixture
def package_schema():
    """The bundled package.json schema."""
    return DataRegistry().package_schema


@pytest.fixture
def single_project(tmp_path: Path) -> Path:
    """A plain, non-workspace package."""
    write_package(tmp_path, {
        "version": "1.0.0",
        "name": "solo",
        "dependencies": {"lodash": "^4.17.21"},
        "devDependencies": {"jest": "^29.0.0"},
    })
    return tmp_path


@pytest.fixture
def workspace_project(tmp_path: Path) -> Path:
    """A workspace root with members ``a`` and ``b`` under packages/."""
    write_package(tmp_path, {
        "name": "root",
        "version": "1.0.0",
        "workspaces": ["packages/*"],
        "private": True,
    })
    write_package(tmp_path / "packages" / "b", {
        "name": "b",
        "version": "0.2.0",
        "dependencies": {"react": "^18.2.0"},
    })
    write_package(tmp_path / "packages" / "a", {
        "name": "a",
        "version": "0.1.0",
        "devDependencies": {"typescript": "^5.0.0"},
    })
    return tmp_path


@pytest.fixture
def lerna_project(workspace_project: Path) -> Path:
    """The workspace project with a Lerna marker on top."""
    (workspace_project / "lerna.json").write_text(
        json.dumps({"packages": ["packages/*"], "version": "independent"}),
        encoding="utf-8",
    )
    return workspace_project


@pytest.fixture
def lerna_only_project(tmp_path: Path) -> Path:
    """A Lerna repo whose root manifest declares no ``workspaces``."""
    write_package(tmp_path, {"name": "root", "private": True})
    (tmp_path / "lerna.json").write_text(
        json.dumps({"packages": ["packages/*"]}), encoding="utf-8"
    )
    write_package(tmp_path / "packages" / "a", {
        "name": "a",
        "version": "0.1.0",
        "dependencies": {"zod": "^3.22.0"},
    })
    return tmp_path
