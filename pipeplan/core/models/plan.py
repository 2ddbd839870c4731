"""
Plan model — the resolved project and the commands to build it.

A plan is a value object: created once per invocation from static
repository state and serialized for the CI runner.  Nothing here touches
the filesystem.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pipeplan.core.models.project import Goal, Runtime

# Fixed lifecycle order.  install comes before build and test; build and
# test do not depend on each other.
PHASE_NAMES: tuple[str, ...] = (
    "pre_install",
    "install",
    "pre_build",
    "build",
    "test",
    "post",
    "publish",
)

PLAN_FORMAT_VERSION = 1


class DetectedProject(BaseModel):
    """Concrete runtime facts.  ``runtime`` is never "auto" here."""

    model_config = ConfigDict(frozen=True)

    runtime: Runtime
    runtime_version: str = Field(serialization_alias="runtimeVersion")
    working_directory: str = Field(serialization_alias="workingDirectory")
    goal: Goal


class Phases(BaseModel):
    """Shell commands per lifecycle phase, each list run in order."""

    pre_install: list[str] = Field(default_factory=list)
    install: list[str] = Field(default_factory=list)
    pre_build: list[str] = Field(default_factory=list)
    build: list[str] = Field(default_factory=list)
    test: list[str] = Field(default_factory=list)
    post: list[str] = Field(default_factory=list)
    publish: list[str] = Field(default_factory=list)

    def items(self) -> list[tuple[str, list[str]]]:
        """(phase, commands) pairs in lifecycle order."""
        return [(name, getattr(self, name)) for name in PHASE_NAMES]

    def joined(self, name: str) -> str:
        """Commands of one phase as a multi-line script ("" when empty)."""
        if name not in PHASE_NAMES:
            raise KeyError(name)
        return "\n".join(getattr(self, name))


class Plan(BaseModel):
    """Everything the runner needs: what was detected and what to run."""

    version: int = PLAN_FORMAT_VERSION
    detected: DetectedProject
    project: dict[str, Any] = Field(default_factory=dict)
    phases: Phases = Field(default_factory=Phases)
    artifacts: list[str] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class MatrixEntry(BaseModel):
    """One CI job step: a label, its phase key and the script to run."""

    step_name: str
    stage: str
    run: str = ""


class Matrix(BaseModel):
    """Job matrix in the shape ``strategy.matrix`` expects."""

    include: list[MatrixEntry] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json()
