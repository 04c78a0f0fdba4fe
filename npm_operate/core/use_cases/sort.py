"""
Sort use case — normalize the field order of package manifests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from npm_operate.core.data import default_registry
from npm_operate.core.errors import OperateError
from npm_operate.core.models.schema import ObjectSchema
from npm_operate.core.services.manifest_store import write_manifest
from npm_operate.core.services.normalizer import normalize
from npm_operate.core.use_cases.project import open_project, select_packages

logger = logging.getLogger(__name__)


@dataclass
class SortedManifest:
    package: str
    manifest_path: Path
    changed: bool

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "manifest_path": str(self.manifest_path),
            "changed": self.changed,
        }


@dataclass
class SortResult:
    """Result of the sort use case."""

    sorted: list[SortedManifest] = field(default_factory=list)
    error: str | None = None

    @property
    def changed_count(self) -> int:
        return sum(1 for s in self.sorted if s.changed)

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "sorted": [s.to_dict() for s in self.sorted],
            "changed": self.changed_count,
        }


def run_sort(
    root_dir: Path,
    packages: Iterable[str] | None = None,
    schema: ObjectSchema | None = None,
) -> SortResult:
    """Rewrite each selected manifest in schema order.

    Args:
        root_dir: Project root.
        packages: Package names to sort; ``None`` sorts every package.
        schema: Override the bundled package.json schema.

    Returns:
        SortResult listing each manifest and whether it changed on disk.
    """
    result = SortResult()

    try:
        project = open_project(root_dir)
        entries = select_packages(project.topology, packages)
        if schema is None:
            schema = default_registry().package_schema

        for entry in entries:
            changed = write_manifest(entry.manifest_path, normalize(entry.manifest, schema))
            logger.info("%s %s", "Sorted" if changed else "Already sorted:", entry.manifest_path)
            result.sorted.append(
                SortedManifest(package=entry.name, manifest_path=entry.manifest_path, changed=changed)
            )
    except OperateError as e:
        result.error = str(e)

    return result
