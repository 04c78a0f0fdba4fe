"""
Check use case — validate package manifests against the schema.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from npm_operate.core.data import default_registry
from npm_operate.core.errors import OperateError
from npm_operate.core.models.schema import ObjectSchema
from npm_operate.core.services.validation import SchemaViolation, validate_manifest
from npm_operate.core.use_cases.project import open_project, select_packages


@dataclass
class ManifestReport:
    package: str
    manifest_path: Path
    violations: list[SchemaViolation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "manifest_path": str(self.manifest_path),
            "valid": self.valid,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass
class CheckResult:
    """Result of manifest validation."""

    reports: list[ManifestReport] = field(default_factory=list)
    error: str | None = None

    @property
    def valid(self) -> bool:
        return self.error is None and all(r.valid for r in self.reports)

    @property
    def violation_count(self) -> int:
        return sum(len(r.violations) for r in self.reports)

    def to_dict(self) -> dict:
        if self.error:
            return {"valid": False, "error": self.error}
        return {
            "valid": self.valid,
            "violations": self.violation_count,
            "packages": [r.to_dict() for r in self.reports],
        }


def check_manifests(
    root_dir: Path,
    packages: Iterable[str] | None = None,
    schema: ObjectSchema | None = None,
) -> CheckResult:
    """Validate the selected manifests (default: every package)."""
    result = CheckResult()

    try:
        project = open_project(root_dir)
        entries = select_packages(project.topology, packages)
        if schema is None:
            schema = default_registry().package_schema
    except OperateError as e:
        result.error = str(e)
        return result

    for entry in entries:
        result.reports.append(
            ManifestReport(
                package=entry.name,
                manifest_path=entry.manifest_path,
                violations=validate_manifest(entry.manifest, schema),
            )
        )

    return result
