"""
Plan use case — orchestrate config loading, detection and planning.

Ties together the config loader, runtime detection, version resolution,
the plan builder and the matrix projector.  Services raise; this layer
turns their errors into ``PlanResult.error`` for the UI to report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pipeplan.core.config.loader import (
    ConfigError,
    default_workspace,
    find_config_file,
    load_config,
)
from pipeplan.core.models.plan import PHASE_NAMES, DetectedProject, Matrix, Plan
from pipeplan.core.models.project import PipelineConfig, ProjectConfig, UnsupportedRuntimeError
from pipeplan.core.services import probe
from pipeplan.core.services.detection import RuntimeDetectionError, detect_runtime
from pipeplan.core.services.matrix import project_matrix
from pipeplan.core.services.plan_builder import build_plan
from pipeplan.core.services.runtime_version import normalize_version, resolve_runtime_version

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """Result of the plan use case."""

    workspace: Path | None = None
    config_path: Path | None = None
    config: PipelineConfig | None = None
    detected: DetectedProject | None = None
    plan: Plan | None = None
    matrix: Matrix | None = None
    warnings: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.plan is not None

    def outputs(self) -> dict[str, str]:
        """Flat string outputs for the CI runner.

        Returns {} when planning failed.
        """
        if not self.ok:
            return {}
        assert self.plan is not None and self.matrix is not None
        detected = self.plan.detected
        outputs = {
            "runtime": detected.runtime.value,
            "runtime_version": detected.runtime_version,
            "working_directory": detected.working_directory,
            "goal": detected.goal.value,
            "plan_json": self.plan.to_json(),
            "matrix": self.matrix.to_json(),
        }
        for name in PHASE_NAMES:
            outputs[f"cmd_{name}"] = self.plan.phases.joined(name)
        return outputs

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["workspace"] = str(self.workspace)
        result["config_path"] = str(self.config_path) if self.config_path else None
        result["warnings"] = self.warnings
        if self.plan:
            result["plan"] = self.plan.model_dump(mode="json", by_alias=True)
        if self.matrix:
            result["matrix"] = self.matrix.model_dump(mode="json")
        return result


def resolve_project(workspace: Path, project: ProjectConfig) -> DetectedProject:
    """Turn the declared settings into concrete runtime facts.

    Explicit values win; "auto" (or nothing) is inferred from the files.

    Raises:
        UnsupportedRuntimeError: If an explicit runtime is not supported.
        RuntimeDetectionError: If the runtime must be inferred and cannot be.
    """
    working_directory = project.normalized_working_directory()
    goal = project.normalized_goal()

    runtime = project.requested_runtime()
    if runtime is None:
        runtime = detect_runtime(workspace, working_directory)
    else:
        logger.info("Using configured runtime '%s'", runtime)

    requested_version = project.requested_version()
    if requested_version is None:
        runtime_version = resolve_runtime_version(workspace, working_directory, runtime)
    else:
        runtime_version = normalize_version(requested_version)
        logger.info("Using configured %s version %s", runtime, runtime_version)

    return DetectedProject(
        runtime=runtime,
        runtime_version=runtime_version,
        working_directory=working_directory,
        goal=goal,
    )


def run_plan(workspace: Path | None = None, config_path: Path | None = None) -> PlanResult:
    """Detect the project and build its plan and matrix.

    Args:
        workspace: Repository root (default: $GITHUB_WORKSPACE or cwd).
        config_path: Explicit config document; default is
            ``.iupipes.yml`` at the workspace root when present.

    Returns:
        PlanResult with the plan, or an error message.
    """
    workspace = (workspace or default_workspace()).resolve()
    result = PlanResult(workspace=workspace)

    try:
        if config_path is None:
            config_path = find_config_file(workspace)
        result.config_path = config_path
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.error = str(e)
        return result

    working_directory = config.project.normalized_working_directory()
    if not probe.exists(probe.project_dir(workspace, working_directory)):
        message = (
            f"working-directory '{working_directory}' does not exist; "
            "files will be looked up at the repository root"
        )
        logger.warning(message)
        result.warnings.append(message)

    try:
        detected = resolve_project(workspace, config.project)
    except (UnsupportedRuntimeError, RuntimeDetectionError) as e:
        result.error = str(e)
        return result

    result.detected = detected
    result.plan = build_plan(workspace, detected, config.project.echo())
    result.matrix = project_matrix(result.plan.phases)

    logger.info(
        "Planned %s %s in %s (goal=%s)",
        detected.runtime,
        detected.runtime_version,
        detected.working_directory,
        detected.goal,
    )
    return result
