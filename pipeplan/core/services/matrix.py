"""
Matrix projection — one CI job step per plan phase.
"""

from __future__ import annotations

from pipeplan.core.models.plan import PHASE_NAMES, Matrix, MatrixEntry, Phases

STEP_LABELS: dict[str, str] = {
    "pre_install": "PRE-INSTALL",
    "install": "INSTALL",
    "pre_build": "PRE-BUILD",
    "build": "BUILD",
    "test": "TEST",
    "post": "POST",
    "publish": "PUBLISH",
}


def project_matrix(phases: Phases) -> Matrix:
    """Flatten phases into matrix steps, in lifecycle order.

    Every phase gets a step, even an empty one (``run`` is then "");
    consumers skip empty scripts themselves.
    """
    return Matrix(
        include=[
            MatrixEntry(
                step_name=STEP_LABELS[stage],
                stage=stage,
                run=phases.joined(stage),
            )
            for stage in PHASE_NAMES
        ]
    )
