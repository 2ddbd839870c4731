"""
Plan builder — turn (runtime, toolchain, goal) into phase commands.

Commands are plain shell strings meant to run from the project's working
directory.  Nothing is executed here.  Every branch has a fallback, so a
missing lockfile or requirements file yields fewer commands, never an
error.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pipeplan.core.models.plan import DetectedProject, Phases, Plan
from pipeplan.core.models.project import Goal, Runtime
from pipeplan.core.services import probe
from pipeplan.core.services.detection import (
    JavaToolchain,
    detect_java_toolchain,
    requirements_variants,
)

logger = logging.getLogger(__name__)

NODE_MEMORY_LIMIT = 'echo "NODE_OPTIONS=--max-old-space-size=4096" >> $GITHUB_ENV'

# Collected after the build when present; advisory only
DEFAULT_ARTIFACTS: dict[Runtime, tuple[str, ...]] = {
    Runtime.NODE: ("dist/**", "coverage/**"),
    Runtime.PYTHON: ("coverage/**", "test-results/**"),
    Runtime.GO: ("coverage/**",),
    Runtime.JAVA: ("target/**", "build/**", "**/surefire-reports/**", "**/test-results/**"),
}

# (test, build) commands per JVM toolchain
_JAVA_COMMANDS: dict[JavaToolchain, tuple[str, str]] = {
    JavaToolchain.MAVEN: ("mvn -B test", "mvn -B -DskipTests package"),
    JavaToolchain.GRADLE_WRAPPER: ("./gradlew test", "./gradlew build -x test"),
    JavaToolchain.GRADLE: ("gradle test", "gradle build -x test"),
}


@dataclass(frozen=True)
class _BuildContext:
    workspace: Path
    working_directory: str
    goal: Goal

    @property
    def bases(self) -> list[Path]:
        return probe.candidate_bases(self.workspace, self.working_directory)


def find_requirements_file(workspace: Path, working_directory: str) -> str | None:
    """Requirements file to install from, relative to the working directory.

    Looks in the working directory, then the root.  In each directory an
    exact ``requirements.txt`` beats variants like ``requirements-dev.txt``;
    among variants the alphabetically first wins.
    """
    wd = probe.project_dir(workspace, working_directory)
    for base in probe.candidate_bases(workspace, working_directory):
        if probe.exists(base / "requirements.txt"):
            name = "requirements.txt"
        else:
            variants = requirements_variants(base)
            if not variants:
                continue
            name = variants[0]

        if base == wd:
            return name
        return Path(os.path.relpath(base / name, wd)).as_posix()
    return None


def _node_phases(ctx: _BuildContext, phases: Phases) -> None:
    has_lock = any(probe.exists(base / "package-lock.json") for base in ctx.bases)
    phases.pre_install.append(NODE_MEMORY_LIMIT)
    phases.install.append("npm ci" if has_lock else "npm install")
    # --if-present: only when package.json declares the script
    phases.test.append("npm test --if-present")
    phases.build.append("npm run build --if-present")


def _python_phases(ctx: _BuildContext, phases: Phases) -> None:
    requirements = find_requirements_file(ctx.workspace, ctx.working_directory)
    if requirements:
        phases.install.append(f"python -m pip install -r {requirements}")
    else:
        logger.debug("No requirements file found, install phase left empty")
    phases.test.append("pytest -q")


def _go_phases(ctx: _BuildContext, phases: Phases) -> None:
    phases.test.append("go test ./...")
    # PR checks only need tests to pass, not a binary
    if ctx.goal != Goal.PR_CHECK:
        phases.build.append("go build ./...")


def _java_phases(ctx: _BuildContext, phases: Phases) -> None:
    toolchain = detect_java_toolchain(ctx.workspace, ctx.working_directory)
    logger.info("Java toolchain: %s", toolchain)
    test_cmd, build_cmd = _JAVA_COMMANDS[toolchain]
    phases.test.append(test_cmd)
    phases.build.append(build_cmd)


_PHASE_BUILDERS: dict[Runtime, Callable[[_BuildContext, Phases], None]] = {
    Runtime.NODE: _node_phases,
    Runtime.PYTHON: _python_phases,
    Runtime.GO: _go_phases,
    Runtime.JAVA: _java_phases,
}


def build_phases(
    workspace: Path,
    working_directory: str,
    runtime: Runtime,
    goal: Goal,
) -> Phases:
    """Commands for every lifecycle phase (unused phases stay empty)."""
    phases = Phases()
    ctx = _BuildContext(workspace=workspace, working_directory=working_directory, goal=goal)
    _PHASE_BUILDERS[runtime](ctx, phases)
    return phases


def default_artifacts(runtime: Runtime) -> list[str]:
    return list(DEFAULT_ARTIFACTS[runtime])


def build_plan(
    workspace: Path,
    detected: DetectedProject,
    project: dict[str, Any] | None = None,
) -> Plan:
    """Assemble the full plan for an already-resolved project.

    Args:
        workspace: Repository root.
        detected: Resolved runtime, version, working directory and goal.
        project: The user's ``project:`` block, echoed for traceability.
    """
    phases = build_phases(
        workspace,
        detected.working_directory,
        detected.runtime,
        detected.goal,
    )
    return Plan(
        detected=detected,
        project=dict(project or {}),
        phases=phases,
        artifacts=default_artifacts(detected.runtime),
    )
