"""
Configuration loader — reads .iupipes.yml into domain models.

The document is optional: a repository without one is planned entirely
from its files.  A document that exists but cannot be parsed is a hard
error; a broken config is a bug to fix, not something to guess around.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from pipeplan.core.models.project import PipelineConfig

logger = logging.getLogger(__name__)

# Looked up at the workspace root, first match wins
CONFIG_FILENAMES = (".iupipes.yml", ".iupipes.yaml")

WORKSPACE_ENV = "GITHUB_WORKSPACE"


class ConfigError(Exception):
    """Raised when the pipeline configuration is invalid or unreadable."""


def default_workspace() -> Path:
    """The repository checkout: $GITHUB_WORKSPACE, else the current directory."""
    env = os.environ.get(WORKSPACE_ENV, "").strip()
    return Path(env) if env else Path.cwd()


def find_config_file(workspace: Path) -> Path | None:
    """Return the configuration document at the workspace root, if any."""
    for name in CONFIG_FILENAMES:
        candidate = workspace / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None) -> PipelineConfig:
    """Load and validate the pipeline configuration.

    Args:
        path: Path to the document, or None when the repository has none.

    Returns:
        Validated PipelineConfig (all defaults when there is no document).

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or its
            structure does not match the expected shape.
    """
    if path is None:
        logger.debug("No pipeline config found, using defaults")
        return PipelineConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading pipeline config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path.name}: {e}") from e

    if data is None:
        return PipelineConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    project_data = data.get("project")
    if project_data is None:
        # `project:` with nothing under it
        data = {**data, "project": {}}
    elif not isinstance(project_data, dict):
        raise ConfigError(
            f"Expected 'project' to be a mapping in {path}, got {type(project_data).__name__}"
        )

    try:
        config = PipelineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid pipeline configuration in {path}: {e}") from e

    logger.info("Loaded pipeline config from %s", path)
    return config
