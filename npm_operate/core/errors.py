"""
Error taxonomy — every failure the core can surface to a caller.

All errors derive from ``OperateError`` so entrypoints can catch one
type and report it. Each error carries enough context (path, directory,
package name, command) to locate the cause.

Not represented here:
    - an unknown package manager falls back to a default tool
    - uninstalling a dependency that is not declared is a logged no-op
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from npm_operate.core.models.action import Receipt


class OperateError(Exception):
    """Base class for all npm-operate errors."""


class ConfigNotFoundError(OperateError):
    """The manifest file does not exist at the expected location."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Manifest not found: {self.path}")


class ManifestError(OperateError):
    """The manifest file exists but is not a JSON object."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid manifest {self.path}: {reason}")


class WorkspaceDiscoveryError(OperateError):
    """A declared workspace directory or member manifest is missing."""

    def __init__(self, message: str, directory: Path | str | None = None):
        self.directory = Path(directory) if directory is not None else None
        if self.directory is not None:
            message = f"{message} ({self.directory})"
        super().__init__(message)


class CommandFailedError(OperateError):
    """An external package-manager command exited non-zero.

    ``completed`` holds the receipts of the commands that ran before it
    in the same batch.
    """

    def __init__(
        self,
        command: str,
        return_code: int | None,
        error: str = "",
        completed: list[Receipt] | None = None,
    ):
        self.command = command
        self.return_code = return_code
        self.error = error
        self.completed: list[Receipt] = list(completed or [])
        detail = f": {error}" if error else ""
        super().__init__(f"Command failed (exit {return_code}): {command}{detail}")


class RegistryLookupError(OperateError):
    """The package registry yielded no resolvable version for a name."""

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"Registry lookup failed for '{package}': {reason}")
