"""
Package manager adapter — which tool runs, and what command it gets.

Two concerns:

    resolve_tool    Pick npm or yarn from lockfiles (or a fallback), and
                    note whether Lerna sits on top.
    render_command  Turn "install/uninstall <pkg>" into the exact command
                    line for a tool and a target scope.

Commands live in one flat table keyed by (tool, scope, intent), so the
full set of combinations can be read and tested at a glance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from npm_operate.core.models.package import (
    Intent,
    Orchestrator,
    PackageEntry,
    PackageTool,
    ProjectTopology,
    Scope,
    ToolSelection,
)

logger = logging.getLogger(__name__)

DEFAULT_TOOL = PackageTool.NPM

LOCKFILES: tuple[tuple[str, PackageTool], ...] = (
    ("package-lock.json", PackageTool.NPM),
    ("yarn.lock", PackageTool.YARN),
)

FallbackResolver = Callable[[type[PackageTool]], PackageTool]


# ── Command table ───────────────────────────────────────────────
#
# (tool, scope, intent) → (regular template, dev template)
# Placeholders: {pkg} dependency name, {member} workspace member name.

_COMMANDS: dict[tuple[str, Scope, Intent], tuple[str, str]] = {
    # npm
    ("npm", Scope.SINGLE, Intent.INSTALL): (
        "npm install {pkg}",
        "npm install {pkg} --save-dev",
    ),
    ("npm", Scope.SINGLE, Intent.UNINSTALL): (
        "npm uninstall {pkg}",
        "npm uninstall {pkg} --save-dev",
    ),
    ("npm", Scope.ROOT, Intent.INSTALL): (
        "npm install {pkg}",
        "npm install {pkg} --save-dev",
    ),
    ("npm", Scope.ROOT, Intent.UNINSTALL): (
        "npm uninstall {pkg}",
        "npm uninstall {pkg} --save-dev",
    ),
    ("npm", Scope.MEMBER, Intent.INSTALL): (
        "npm install {pkg} -w {member}",
        "npm install {pkg} -w {member} --save-dev",
    ),
    ("npm", Scope.MEMBER, Intent.UNINSTALL): (
        "npm uninstall {pkg} -w {member}",
        "npm uninstall {pkg} -w {member} --save-dev",
    ),
    # yarn
    ("yarn", Scope.SINGLE, Intent.INSTALL): (
        "yarn add {pkg}",
        "yarn add {pkg} --dev",
    ),
    ("yarn", Scope.SINGLE, Intent.UNINSTALL): (
        "yarn remove {pkg}",
        "yarn remove {pkg} --dev",
    ),
    ("yarn", Scope.ROOT, Intent.INSTALL): (
        "yarn add {pkg} -W",
        "yarn add {pkg} -W --dev",
    ),
    ("yarn", Scope.ROOT, Intent.UNINSTALL): (
        "yarn remove {pkg} -W",
        "yarn remove {pkg} -W --dev",
    ),
    ("yarn", Scope.MEMBER, Intent.INSTALL): (
        "yarn workspace {member} add {pkg}",
        "yarn workspace {member} add {pkg} --dev",
    ),
    ("yarn", Scope.MEMBER, Intent.UNINSTALL): (
        "yarn workspace {member} remove {pkg}",
        "yarn workspace {member} remove {pkg} --dev",
    ),
    # lerna: member installs only; lerna has no remove command.
    # Its dev token is --dev even when npm (--save-dev) is underneath.
    ("lerna", Scope.MEMBER, Intent.INSTALL): (
        "lerna add {pkg} --scope={member}",
        "lerna add {pkg} --scope={member} --dev",
    ),
}


# ── Tool detection ──────────────────────────────────────────────


def resolve_tool(
    root_dir: Path,
    fallback: FallbackResolver | None = None,
    *,
    lerna_marker: str = "lerna.json",
) -> ToolSelection:
    """Determine the package manager for a project.

    Order: package-lock.json → npm, yarn.lock → yarn, then
    ``fallback(PackageTool)`` if given, then the default (npm).
    Lerna detection is independent: the marker file alone decides.
    """
    orchestrator = Orchestrator.LERNA if (root_dir / lerna_marker).is_file() else None

    for lockfile, tool in LOCKFILES:
        if (root_dir / lockfile).is_file():
            logger.debug("Found %s, using %s", lockfile, tool)
            return ToolSelection(tool=tool, orchestrator=orchestrator, source="lockfile", lockfile=lockfile)

    if fallback is not None:
        tool = PackageTool(fallback(PackageTool))
        logger.info("No lockfile in %s, fallback chose %s", root_dir, tool)
        return ToolSelection(tool=tool, orchestrator=orchestrator, source="fallback")

    logger.info("No lockfile in %s, defaulting to %s", root_dir, DEFAULT_TOOL)
    return ToolSelection(tool=DEFAULT_TOOL, orchestrator=orchestrator, source="default")


# ── Rendering ───────────────────────────────────────────────────


def render_command(
    intent: Intent,
    scope: Scope,
    tool: PackageTool,
    package_name: str,
    member: str | None = None,
    dev: bool = False,
    *,
    orchestrator: Orchestrator | None = None,
) -> str:
    """Render the command line for one dependency operation.

    Lerna takes precedence for member installs whenever it is active.

    Raises:
        ValueError: If ``scope`` is a member scope and ``member`` is missing.
    """
    if scope is Scope.MEMBER and not member:
        raise ValueError("A workspace member name is required for member commands")

    key: tuple[str, Scope, Intent] = (tool.value, scope, intent)
    if orchestrator is not None and (orchestrator.value, scope, intent) in _COMMANDS:
        key = (orchestrator.value, scope, intent)

    regular, dev_template = _COMMANDS[key]
    template = dev_template if dev else regular
    return template.format(pkg=package_name, member=member or "")


def scope_for(
    topology: ProjectTopology,
    target: PackageEntry,
    intent: Intent = Intent.INSTALL,
) -> Scope:
    """The command scope for operating on ``target`` within ``topology``.

    Lerna has no remove command, and in a Lerna-only project neither npm
    nor yarn knows the members as workspaces. A member uninstall there is
    a plain single-package command run from the member directory.
    """
    if not topology.is_workspace_root:
        return Scope.SINGLE
    if target is topology.root or target.directory == topology.root_dir:
        return Scope.ROOT
    if topology.lerna_only and intent is Intent.UNINSTALL:
        return Scope.SINGLE
    return Scope.MEMBER


def command_cwd(scope: Scope, topology: ProjectTopology, target: PackageEntry) -> Path:
    """Member commands run from the workspace root, others from the package."""
    if scope is Scope.MEMBER:
        return topology.root_dir
    return target.directory
