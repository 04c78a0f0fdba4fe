"""
Project use case — settings, topology and tool selection in one call.

Every other use case starts here: load ``.npm-operate.yml``, discover
the workspace, and decide which package manager governs it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from npm_operate.core.config.loader import OperateSettings, load_settings
from npm_operate.core.errors import OperateError, WorkspaceDiscoveryError
from npm_operate.core.models.package import (
    PackageEntry,
    PackageTool,
    ProjectTopology,
    ToolSelection,
)
from npm_operate.core.services.package_manager import FallbackResolver, resolve_tool
from npm_operate.core.services.workspace import discover

logger = logging.getLogger(__name__)


@dataclass
class ProjectContext:
    """A discovered project, ready for operations."""

    root_dir: Path
    settings: OperateSettings
    topology: ProjectTopology
    selection: ToolSelection


def open_project(root_dir: Path, tool: PackageTool | str | None = None) -> ProjectContext:
    """Load settings, discover packages and resolve the package manager.

    Args:
        root_dir: Project root (where the root package.json lives).
        tool: Package manager to use when no lockfile decides. Takes
            precedence over ``default_tool`` from the settings file.

    Raises:
        OperateError: Any settings, manifest or discovery failure.
    """
    root_dir = root_dir.resolve()
    settings = load_settings(root_dir)

    topology = discover(
        root_dir,
        config_file_name=settings.config_file_name,
        lerna_marker=settings.lerna_marker,
        default_pattern=settings.default_workspace_pattern,
    )

    preferred = tool or settings.default_tool
    selection = resolve_tool(
        root_dir,
        _fixed(PackageTool(preferred)) if preferred else None,
        lerna_marker=settings.lerna_marker,
    )
    return ProjectContext(
        root_dir=root_dir,
        settings=settings,
        topology=topology,
        selection=selection,
    )


def select_packages(
    topology: ProjectTopology,
    names: Iterable[str] | None = None,
) -> list[PackageEntry]:
    """Pick packages by name; ``None`` selects the root and every member.

    Raises:
        WorkspaceDiscoveryError: If a name matches no package.
    """
    if names is None:
        return topology.packages

    selected: list[PackageEntry] = []
    for name in names:
        entry = topology.get(name)
        if entry is None:
            raise WorkspaceDiscoveryError(f"Unknown package '{name}'", topology.root_dir)
        if entry not in selected:
            selected.append(entry)
    return selected


def _fixed(tool: PackageTool) -> FallbackResolver:
    def choose(_tools: type[PackageTool]) -> PackageTool:
        return tool

    return choose


@dataclass
class InfoResult:
    """Result of the info use case."""

    project: ProjectContext | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        if self.error or self.project is None:
            return {"error": self.error}
        return {
            "root_dir": str(self.project.root_dir),
            "topology": self.project.topology.to_dict(),
            "tool": self.project.selection.to_dict(),
            "warnings": list(self.warnings),
        }


def get_info(root_dir: Path) -> InfoResult:
    """Describe the project: packages, workspace layout and tooling."""
    result = InfoResult()

    try:
        project = open_project(root_dir)
    except OperateError as e:
        result.error = str(e)
        return result

    result.project = project

    topology = project.topology
    if topology.is_workspace_root and not topology.members:
        result.warnings.append("Workspace declares no member packages.")
    if project.selection.source == "default":
        result.warnings.append(
            f"No lockfile found; assuming {project.selection.tool}."
        )

    return result
