"""
Package models — packages, project topology, and tool selection.

A discovery pass produces one ``ProjectTopology``: the root package plus,
for a workspace root, its member packages. Entries are immutable for the
lifetime of that pass; re-run discovery to observe on-disk changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from npm_operate.core.errors import WorkspaceDiscoveryError


class PackageTool(StrEnum):
    """External package managers that can govern a project."""

    NPM = "npm"
    YARN = "yarn"


class Orchestrator(StrEnum):
    """Multi-package tools layered above the package manager."""

    LERNA = "lerna"


class Scope(StrEnum):
    """Which part of a project a command targets."""

    SINGLE = "single"          # a plain, non-workspace project
    ROOT = "workspace-root"    # the root of a workspace
    MEMBER = "workspace-member"


class Intent(StrEnum):
    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True)
class PackageEntry:
    """One package in a project.

    ``relative_dir`` is the POSIX path of ``directory`` relative to the
    project root (``"."`` for the root itself).
    """

    name: str
    directory: Path
    relative_dir: str
    manifest_path: Path
    manifest: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def dir_name(self) -> str:
        return self.directory.name

    @property
    def version(self) -> str | None:
        value = self.manifest.get("version")
        return str(value) if value is not None else None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "directory": str(self.directory),
            "relative_dir": self.relative_dir,
            "manifest_path": str(self.manifest_path),
        }


@dataclass(frozen=True)
class ProjectTopology:
    """A single package, or a workspace root with its member packages."""

    root: PackageEntry
    members: tuple[PackageEntry, ...] = ()
    is_workspace_root: bool = False
    orchestrated: bool = False
    patterns: tuple[str, ...] = ()
    # Members come from the Lerna marker; the root declares no workspaces
    lerna_only: bool = False

    @property
    def root_dir(self) -> Path:
        return self.root.directory

    @property
    def packages(self) -> list[PackageEntry]:
        """Root first, then members in discovery order."""
        return [self.root, *self.members]

    def get(self, name: str) -> PackageEntry | None:
        """Look up the root or a member by package name."""
        for entry in self.packages:
            if entry.name == name:
                return entry
        return None

    def member(self, name: str) -> PackageEntry:
        """Look up a member by name, failing loudly for unknown names."""
        for entry in self.members:
            if entry.name == name:
                return entry
        raise WorkspaceDiscoveryError(
            f"Unknown workspace member '{name}'", self.root.directory
        )

    def to_dict(self) -> dict:
        return {
            "root": self.root.to_dict(),
            "is_workspace_root": self.is_workspace_root,
            "orchestrated": self.orchestrated,
            "lerna_only": self.lerna_only,
            "patterns": list(self.patterns),
            "members": [m.to_dict() for m in self.members],
        }


@dataclass(frozen=True)
class ToolSelection:
    """Which package manager governs a project, and how it was chosen.

    ``source`` is one of ``lockfile``, ``fallback`` or ``default``.
    """

    tool: PackageTool
    orchestrator: Orchestrator | None = None
    source: str = "default"
    lockfile: str | None = None

    @property
    def is_orchestrated(self) -> bool:
        return self.orchestrator is not None

    def to_dict(self) -> dict:
        return {
            "tool": self.tool.value,
            "orchestrator": self.orchestrator.value if self.orchestrator else None,
            "source": self.source,
            "lockfile": self.lockfile,
        }
