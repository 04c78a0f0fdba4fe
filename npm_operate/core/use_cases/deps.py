"""
Dependency use cases — add and remove dependencies on a project.

Wires settings, discovery and tool selection into
``DependencyOperations`` and picks the targets:

    no members      the root package (or the single package)
    members=[...]   those workspace members, in the given order
    all_members     every workspace member, in discovery order

``dry_run`` swaps the shell adapter for the recording mock, so the
commands are rendered but never executed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from npm_operate.adapters.base import Adapter
from npm_operate.adapters.mock import MockAdapter
from npm_operate.adapters.shell.command import ShellCommandAdapter
from npm_operate.core.config.loader import load_settings
from npm_operate.core.data import default_registry
from npm_operate.core.errors import CommandFailedError, OperateError
from npm_operate.core.models.action import Receipt
from npm_operate.core.models.package import Intent, PackageTool, ToolSelection
from npm_operate.core.services.dependency_ops import DependencyOperations, ManifestEdit
from npm_operate.core.services.registry import latest_version
from npm_operate.core.use_cases.project import ProjectContext, open_project

logger = logging.getLogger(__name__)


@dataclass
class DepsResult:
    """Result of an add or remove run."""

    intent: Intent
    selection: ToolSelection | None = None
    dry_run: bool = False
    manifest_only: bool = False
    receipts: list[Receipt] = field(default_factory=list)
    edits: list[ManifestEdit] = field(default_factory=list)
    failed_command: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(e.ok for e in self.edits)

    @property
    def commands(self) -> list[str]:
        return [r.command for r in self.receipts]

    def to_dict(self) -> dict:
        result: dict = {
            "intent": str(self.intent),
            "ok": self.ok,
            "dry_run": self.dry_run,
            "manifest_only": self.manifest_only,
        }
        if self.selection:
            result["tool"] = self.selection.to_dict()
        if self.manifest_only:
            result["edits"] = [e.to_dict() for e in self.edits]
        else:
            result["commands"] = self.commands
        if self.failed_command:
            result["failed_command"] = self.failed_command
        if self.error:
            result["error"] = self.error
        return result


def _operations(project: ProjectContext, adapter: Adapter) -> DependencyOperations:
    settings = project.settings
    return DependencyOperations(
        project.topology,
        project.selection,
        adapter,
        schema=default_registry().package_schema,
        registry_url=settings.registry_url,
        registry_timeout=settings.registry_timeout,
        save_prefix=settings.save_prefix,
    )


def _targets(project: ProjectContext, members: list[str] | None, all_members: bool) -> list[str | None]:
    if all_members:
        return [m.name for m in project.topology.members]
    if members:
        return list(members)
    return [None]


def _run(
    intent: Intent,
    root_dir: Path,
    names: list[str],
    *,
    dev: bool,
    members: Iterable[str] | None,
    all_members: bool,
    manifest_only: bool,
    tool: PackageTool | str | None,
    dry_run: bool,
    adapter: Adapter | None,
) -> DepsResult:
    result = DepsResult(intent=intent, dry_run=dry_run, manifest_only=manifest_only)

    if adapter is None:
        adapter = MockAdapter() if dry_run else ShellCommandAdapter()
    members = list(members) if members else None

    try:
        project = open_project(root_dir, tool=tool)
        result.selection = project.selection
        ops = _operations(project, adapter)

        if manifest_only:
            for target in _targets(project, members, all_members):
                if intent is Intent.INSTALL:
                    result.edits.append(ops.add_to_manifest(names, dev=dev, target=target))
                else:
                    result.edits.append(ops.remove_from_manifest(names, target=target))
        elif members or all_members:
            selected = None if all_members else members
            if intent is Intent.INSTALL:
                result.receipts = ops.install_members(names, dev=dev, members=selected)
            else:
                result.receipts = ops.uninstall_members(names, members=selected)
        elif intent is Intent.INSTALL:
            result.receipts = ops.install(names, dev=dev)
        else:
            result.receipts = ops.uninstall(names)
    except CommandFailedError as e:
        logger.debug("Aborted after failed command: %s", e.command)
        result.receipts = list(e.completed)
        result.failed_command = e.command
        result.error = str(e)
    except OperateError as e:
        result.error = str(e)

    return result


def add_dependencies(
    root_dir: Path,
    names: Iterable[str],
    *,
    dev: bool = False,
    members: Iterable[str] | None = None,
    all_members: bool = False,
    manifest_only: bool = False,
    tool: PackageTool | str | None = None,
    dry_run: bool = False,
    adapter: Adapter | None = None,
) -> DepsResult:
    """Install dependencies, or declare them in the manifest only."""
    return _run(
        Intent.INSTALL,
        root_dir,
        list(names),
        dev=dev,
        members=members,
        all_members=all_members,
        manifest_only=manifest_only,
        tool=tool,
        dry_run=dry_run,
        adapter=adapter,
    )


def remove_dependencies(
    root_dir: Path,
    names: Iterable[str],
    *,
    members: Iterable[str] | None = None,
    all_members: bool = False,
    manifest_only: bool = False,
    tool: PackageTool | str | None = None,
    dry_run: bool = False,
    adapter: Adapter | None = None,
) -> DepsResult:
    """Uninstall dependencies the targets actually declare."""
    return _run(
        Intent.UNINSTALL,
        root_dir,
        list(names),
        dev=False,
        members=members,
        all_members=all_members,
        manifest_only=manifest_only,
        tool=tool,
        dry_run=dry_run,
        adapter=adapter,
    )


@dataclass
class LatestResult:
    package: str
    version: str | None = None
    registry_url: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {"package": self.package, "registry_url": self.registry_url}
        if self.error:
            result["error"] = self.error
        else:
            result["version"] = self.version
        return result


def get_latest(root_dir: Path, name: str) -> LatestResult:
    """Look up the latest published version using the project's registry."""
    result = LatestResult(package=name)

    try:
        settings = load_settings(root_dir.resolve())
        result.registry_url = settings.registry_url
        result.version = latest_version(
            name,
            registry_url=settings.registry_url,
            timeout=settings.registry_timeout,
        )
    except OperateError as e:
        result.error = str(e)

    return result
