"""
Settings loader — reads .npm-operate.yml into an OperateSettings model.

The settings file is optional. When it is absent every setting takes
its default; when present it must be a YAML mapping whose keys match
``OperateSettings`` fields.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from npm_operate.core.errors import OperateError
from npm_operate.core.models.package import PackageTool

logger = logging.getLogger(__name__)

# Default settings filename, looked up in the project root
SETTINGS_FILE = ".npm-operate.yml"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


class ConfigError(OperateError):
    """Raised when settings or schema data are invalid."""


class OperateSettings(BaseModel):
    """Per-project settings.

    ``default_tool`` is only consulted when no lockfile identifies the
    package manager; leaving it unset means the built-in default (npm).
    """

    model_config = ConfigDict(extra="forbid")

    config_file_name: str = "package.json"
    default_tool: PackageTool | None = None
    registry_url: str = DEFAULT_REGISTRY_URL
    registry_timeout: float = 10.0
    save_prefix: str = "^"
    lerna_marker: str = "lerna.json"
    default_workspace_pattern: str = "packages/*"


def load_settings(root_dir: Path, path: Path | None = None) -> OperateSettings:
    """Load settings for a project.

    Args:
        root_dir: Project root; ``.npm-operate.yml`` is looked up here.
        path: Explicit settings file. Unlike the implicit lookup, an
            explicit path that does not exist is an error.

    Raises:
        ConfigError: If the file cannot be read, is not a YAML mapping,
            or contains unknown or invalid settings.
    """
    if path is None:
        path = root_dir / SETTINGS_FILE
        if not path.is_file():
            logger.debug("No %s in %s, using defaults", SETTINGS_FILE, root_dir)
            return OperateSettings()
    elif not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return OperateSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = OperateSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
