"""
Project configuration model — what the user asked for.

Loaded from the ``project:`` block of ``.iupipes.yml``.  Every setting is
optional; "auto" (or nothing) means the engine infers the value from the
repository.  The sentinel never leaves this module: callers get ``None``
for "infer" and a concrete value otherwise.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

AUTO = "auto"


class Runtime(StrEnum):
    """Language toolchains the planner knows how to build."""

    NODE = "node"
    JAVA = "java"
    PYTHON = "python"
    GO = "go"


SUPPORTED_RUNTIMES: tuple[str, ...] = tuple(r.value for r in Runtime)


class Goal(StrEnum):
    """Why the pipeline is running."""

    PR_CHECK = "pr-check"
    CI = "ci"
    RELEASE = "release"


class UnsupportedRuntimeError(ValueError):
    """Raised when the configuration names a runtime we cannot plan for."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"Unsupported runtime '{value}'. "
            f"Supported: {'|'.join(SUPPORTED_RUNTIMES)}."
        )


class ProjectConfig(BaseModel):
    """The ``project:`` block as declared by the user.

    The mapping is also kept exactly as written so it can be echoed back
    into the plan.  Use the ``requested_*`` / ``normalized_*`` accessors to get
    values the engine can act on.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = None
    runtime: str | None = None
    runtime_version: str | None = Field(
        default=None,
        validation_alias=AliasChoices("runtime-version", "runtimeVersion", "runtime_version"),
        serialization_alias="runtime-version",
    )
    working_directory: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "working-directory", "workingDirectory", "working_directory"
        ),
        serialization_alias="working-directory",
    )
    goal: str | None = None

    _declared: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_declared(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        model = handler(data)
        if isinstance(data, dict) and isinstance(model, cls):
            model._declared = dict(data)
        return model

    @field_validator("name", "runtime", "runtime_version", "working_directory", "goal", mode="before")
    @classmethod
    def _scalar_to_str(cls, value: Any) -> Any:
        # YAML hands us ints/floats for things like `runtime-version: 20`
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value

    def requested_runtime(self) -> Runtime | None:
        """The explicit runtime, or None when it should be detected.

        Raises:
            UnsupportedRuntimeError: If the value names an unknown runtime.
        """
        raw = (self.runtime or AUTO).strip().lower()
        if raw in ("", AUTO):
            return None
        try:
            return Runtime(raw)
        except ValueError:
            raise UnsupportedRuntimeError(raw) from None

    def requested_version(self) -> str | None:
        """The explicit runtime version (not yet normalized), or None."""
        raw = (self.runtime_version or "").strip()
        if not raw or raw.lower() == AUTO:
            return None
        return raw

    def normalized_working_directory(self) -> str:
        return normalize_working_directory(self.working_directory)

    def normalized_goal(self) -> Goal:
        return normalize_goal(self.goal)

    def echo(self) -> dict[str, Any]:
        """The block exactly as declared: original keys and YAML types."""
        return dict(self._declared)


class PipelineConfig(BaseModel):
    """The whole ``.iupipes.yml`` document.

    Only ``project`` is interpreted here.  Other sections (sonar, sast,
    deploy, ...) belong to later pipeline stages and are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    project: ProjectConfig = Field(default_factory=ProjectConfig)


def normalize_working_directory(value: str | None) -> str:
    """Relative working directory with forward slashes and no leading or trailing slash."""
    raw = (value or ".").strip()
    # always relative to the workspace, even when written as "/api"
    cleaned = raw.replace("\\", "/").strip("/")
    return cleaned or "."


def normalize_goal(value: str | None) -> Goal:
    """Map a goal string onto :class:`Goal`; anything unknown means ``ci``."""
    raw = (value or "").strip().lower()
    try:
        return Goal(raw)
    except ValueError:
        return Goal.CI
