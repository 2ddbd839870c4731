"""
GitHub Actions step outputs — hand the plan back to the workflow.

Appends ``name=value`` records to the file named by ``$GITHUB_OUTPUT``.
Multi-line values (phase scripts) use the heredoc form:

    cmd_test<<ghadelimiter_<uuid>
    pytest -q
    ghadelimiter_<uuid>
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_ENV = "GITHUB_OUTPUT"


def output_file() -> Path | None:
    """The step output file configured by the runner, if any."""
    env = os.environ.get(OUTPUT_ENV, "").strip()
    return Path(env) if env else None


def format_output(name: str, value: str) -> str:
    """Serialize one output record (always newline-terminated)."""
    if not name or "\n" in name or "=" in name:
        raise ValueError(f"Invalid output name: {name!r}")

    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in value:
        raise ValueError(f"Output value for {name!r} contains the delimiter")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(outputs: Mapping[str, str], path: Path | None = None) -> Path | None:
    """Append ``outputs`` to the step output file.

    Args:
        outputs: Output name → value.
        path: Target file (default: ``$GITHUB_OUTPUT``).

    Returns:
        The file written, or None when no target is configured.
    """
    target = path or output_file()
    if target is None:
        logger.debug("No %s configured, outputs not written", OUTPUT_ENV)
        return None

    records = "".join(format_output(name, value) for name, value in outputs.items())
    with target.open("a", encoding="utf-8") as fh:
        fh.write(records)

    logger.info("Wrote %d outputs to %s", len(outputs), target)
    return target
