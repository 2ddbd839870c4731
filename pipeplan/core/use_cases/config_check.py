"""
Config check use case — validate .iupipes.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pipeplan.core.config.loader import (
    ConfigError,
    default_workspace,
    find_config_file,
    load_config,
)
from pipeplan.core.models.project import Goal, PipelineConfig, UnsupportedRuntimeError
from pipeplan.core.services import probe


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: PipelineConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        project = self.config.project if self.config else None
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "project": project.echo() if project else None,
            "working_directory": project.normalized_working_directory() if project else None,
            "goal": project.normalized_goal().value if project else None,
        }


def check_config(
    workspace: Path | None = None,
    config_path: Path | None = None,
) -> ConfigCheckResult:
    """Validate the pipeline configuration and report issues.

    A missing document is valid (everything is inferred) but noted as a
    warning.

    Args:
        workspace: Repository root (default: $GITHUB_WORKSPACE or cwd).
        config_path: Optional explicit path to the document.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()
    workspace = (workspace or default_workspace()).resolve()

    if config_path is None:
        config_path = find_config_file(workspace)
        if config_path is None:
            result.warnings.append("No .iupipes.yml found; runtime and version will be inferred.")
    result.config_path = config_path

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.config = config

    project = config.project
    try:
        project.requested_runtime()
    except UnsupportedRuntimeError as e:
        result.errors.append(str(e))

    raw_goal = (project.goal or "").strip().lower()
    if raw_goal and raw_goal not in {g.value for g in Goal}:
        result.warnings.append(f"Unknown goal '{project.goal}', using 'ci'.")

    working_directory = project.normalized_working_directory()
    if not probe.project_dir(workspace, working_directory).is_dir():
        result.warnings.append(f"working-directory '{working_directory}' does not exist.")

    result.valid = not result.errors
    return result
