"""
Domain models — Pydantic types for the planner.

All models are re-exported here for convenient access:

    from pipeplan.core.models import ProjectConfig, DetectedProject, Plan, Matrix
"""

from pipeplan.core.models.plan import (
    PHASE_NAMES,
    DetectedProject,
    Matrix,
    MatrixEntry,
    Phases,
    Plan,
)
from pipeplan.core.models.project import (
    SUPPORTED_RUNTIMES,
    Goal,
    PipelineConfig,
    ProjectConfig,
    Runtime,
    UnsupportedRuntimeError,
)

__all__ = [
    # plan.py
    "DetectedProject",
    "Matrix",
    "MatrixEntry",
    "PHASE_NAMES",
    "Phases",
    "Plan",
    # project.py
    "Goal",
    "PipelineConfig",
    "ProjectConfig",
    "Runtime",
    "SUPPORTED_RUNTIMES",
    "UnsupportedRuntimeError",
]
