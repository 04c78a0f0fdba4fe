"""
Manifest store — read and write package.json files.

Manifests are UTF-8 JSON objects. They are written back with a two-space
indent and a trailing newline, keeping the key order of the dict they
were given (so a normalized manifest stays normalized on disk).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from npm_operate.core.errors import ConfigNotFoundError, ManifestError

logger = logging.getLogger(__name__)

DEPENDENCY_FIELDS = ("dependencies", "devDependencies")


def read_manifest(path: Path) -> dict[str, Any]:
    """Read a manifest file.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ManifestError: If it is not valid JSON or not a JSON object.
    """
    if not path.is_file():
        raise ConfigNotFoundError(path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(path, f"cannot read: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(path, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(path, f"expected a JSON object, got {type(data).__name__}")

    return data


def dump_manifest(manifest: dict[str, Any]) -> str:
    """Serialize a manifest exactly as it is written to disk."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifest(path: Path, manifest: dict[str, Any]) -> bool:
    """Write a manifest, skipping the write if the text is unchanged.

    Returns:
        True if the file was (re)written.
    """
    text = dump_manifest(manifest)

    if path.is_file():
        try:
            if path.read_text(encoding="utf-8") == text:
                logger.debug("Manifest unchanged: %s", path)
                return False
        except OSError:
            logger.debug("Could not compare %s before writing", path, exc_info=True)

    path.write_text(text, encoding="utf-8")
    logger.debug("Wrote manifest %s", path)
    return True


def update_manifest(path: Path, changes: dict[str, Any]) -> dict[str, Any]:
    """Shallow-merge ``changes`` into the stored manifest and write it back.

    Existing keys keep their position; new keys are appended.
    """
    merged = {**read_manifest(path), **changes}
    write_manifest(path, merged)
    return merged


def declared_dependencies(manifest: dict[str, Any]) -> set[str]:
    """Names in the manifest's ``dependencies`` and ``devDependencies`` maps."""
    names: set[str] = set()
    for field in DEPENDENCY_FIELDS:
        section = manifest.get(field)
        if isinstance(section, dict):
            names.update(section)
    return names
