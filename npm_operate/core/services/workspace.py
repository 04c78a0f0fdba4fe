"""
Workspace resolver — build the project topology from the file tree.

A project is a workspace root when its manifest declares ``workspaces``
or a Lerna marker file sits next to it. Each workspace pattern has the
form ``<baseDir>/*``: every immediate subdirectory of ``baseDir`` is a
member package. Members are leaves; their own ``workspaces`` fields are
not expanded.

Member order is reproducible: patterns in declared order, then
subdirectories in lexicographic order. The order carries no meaning
beyond that, but operations that touch several members run in it.

Missing directories and manifests are fatal. A member without a
manifest means a corrupt or partial checkout, not something to skip.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from npm_operate.core.errors import WorkspaceDiscoveryError
from npm_operate.core.models.package import PackageEntry, ProjectTopology
from npm_operate.core.services.manifest_store import read_manifest

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "package.json"
DEFAULT_LERNA_MARKER = "lerna.json"
DEFAULT_PATTERN = "packages/*"

_GLOB_CHARS = frozenset("*?[]{}!")


def discover(
    root_dir: Path,
    *,
    config_file_name: str = DEFAULT_CONFIG_FILE,
    lerna_marker: str = DEFAULT_LERNA_MARKER,
    default_pattern: str = DEFAULT_PATTERN,
) -> ProjectTopology:
    """Discover the packages of the project rooted at ``root_dir``.

    Raises:
        ConfigNotFoundError: If the root manifest does not exist.
        WorkspaceDiscoveryError: If a workspace base directory or a
            member manifest is missing, a pattern is unsupported, or two
            members share a name.
    """
    root_dir = root_dir.resolve()
    root = _load_entry(root_dir, root_dir, config_file_name)

    marker = root_dir / lerna_marker
    orchestrated = marker.is_file()
    declared = "workspaces" in root.manifest

    if not declared and not orchestrated:
        logger.debug("Single package project: %s", root.name)
        return ProjectTopology(root=root)

    if declared:
        patterns = _declared_patterns(root.manifest["workspaces"], root.manifest_path)
    else:
        patterns = _lerna_patterns(marker, default_pattern)

    members: list[PackageEntry] = []
    seen: dict[str, Path] = {}

    for pattern in patterns:
        base = root_dir / _base_dir(pattern, root_dir)
        if not base.is_dir():
            raise WorkspaceDiscoveryError(
                f"Workspace directory for pattern '{pattern}' does not exist", base
            )

        for child in sorted(base.iterdir(), key=lambda p: p.name):
            if not child.is_dir():
                continue
            entry = _load_entry(child, root_dir, config_file_name, member=True)
            if entry.name in seen:
                raise WorkspaceDiscoveryError(
                    f"Duplicate workspace member name '{entry.name}' "
                    f"(also in {seen[entry.name]})",
                    child,
                )
            seen[entry.name] = child
            members.append(entry)

    logger.info(
        "Discovered workspace '%s' with %d member(s)%s",
        root.name,
        len(members),
        " (lerna)" if orchestrated else "",
    )

    return ProjectTopology(
        root=root,
        members=tuple(members),
        is_workspace_root=True,
        orchestrated=orchestrated,
        patterns=tuple(patterns),
        lerna_only=not declared,
    )


def _load_entry(
    directory: Path,
    root_dir: Path,
    config_file_name: str,
    member: bool = False,
) -> PackageEntry:
    manifest_path = directory / config_file_name

    if member and not manifest_path.is_file():
        raise WorkspaceDiscoveryError(
            f"Workspace member has no {config_file_name}", directory
        )

    manifest = read_manifest(manifest_path)
    name = manifest.get("name")
    if not isinstance(name, str) or not name:
        # Unnamed packages are addressed by their directory name
        name = directory.name

    relative = directory.relative_to(root_dir).as_posix()
    return PackageEntry(
        name=name,
        directory=directory,
        relative_dir=relative,
        manifest_path=manifest_path,
        manifest=manifest,
    )


def _declared_patterns(value: Any, manifest_path: Path) -> list[str]:
    """Patterns from ``workspaces``: a list, or yarn's ``{"packages": [...]}``."""
    if isinstance(value, dict):
        value = value.get("packages", [])

    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise WorkspaceDiscoveryError(
            "'workspaces' must be a list of directory patterns", manifest_path.parent
        )
    return list(value)


def _lerna_patterns(marker: Path, default_pattern: str) -> list[str]:
    """Patterns from the Lerna marker's ``packages``, else the default."""
    try:
        data = json.loads(marker.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Cannot read %s (%s), using '%s'", marker, e, default_pattern)
        return [default_pattern]

    packages = data.get("packages") if isinstance(data, dict) else None
    if isinstance(packages, list) and packages and all(isinstance(p, str) for p in packages):
        return list(packages)
    return [default_pattern]


def _base_dir(pattern: str, root_dir: Path) -> str:
    """Strip the trailing ``/*`` from a pattern; reject any other glob."""
    base = pattern.strip()
    if base.endswith("/*"):
        base = base[:-2]
    base = base.rstrip("/")

    if not base or _GLOB_CHARS.intersection(base):
        raise WorkspaceDiscoveryError(
            f"Unsupported workspace pattern '{pattern}' (expected '<dir>/*')", root_dir
        )
    return base
