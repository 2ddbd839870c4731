"""
Filesystem probe — speculative, read-only file checks.

Every lookup here is a guess ("is there a go.mod?"), so failures are
answers, not errors: a missing file, a permission problem or an
undecodable file all read as "not there".
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def exists(path: Path) -> bool:
    """Whether anything exists at ``path``."""
    try:
        return path.exists()
    except (OSError, ValueError):
        return False


def read_text(path: Path) -> str | None:
    """File contents as text, or None when the file cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        # UnicodeDecodeError is a ValueError
        if exists(path):
            logger.debug("Cannot read %s: %s", path, e)
        return None


def list_dir(path: Path) -> list[str]:
    """Entry names in ``path`` (sorted), or [] when it cannot be listed."""
    try:
        return sorted(child.name for child in path.iterdir())
    except (OSError, ValueError):
        return []


def project_dir(workspace: Path, working_directory: str) -> Path:
    """The working directory inside the workspace; a leading "/" does not escape it."""
    return workspace / working_directory.lstrip("/")


def candidate_bases(workspace: Path, working_directory: str) -> list[Path]:
    """Directories to probe, most specific first.

    The declared working directory wins over the repository root so a
    sub-project in a monorepo is not shadowed by files at the top.
    """
    bases = [project_dir(workspace, working_directory), workspace]
    # working_directory "." collapses onto the root
    return list(dict.fromkeys(bases))
