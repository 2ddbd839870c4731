"""
Runtime version resolution — which toolchain version to set up.

Each runtime reads one conventional file (working directory first, then
the repository root) and falls back to a fixed default.  The resolver
never checks that a version exists or is installable.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pipeplan.core.models.project import Runtime
from pipeplan.core.services import probe

logger = logging.getLogger(__name__)

DEFAULT_VERSIONS: dict[Runtime, str] = {
    Runtime.NODE: "20",
    Runtime.GO: "1.22",
    Runtime.PYTHON: "3.11",
    Runtime.JAVA: "17",
}

_LEADING_V = re.compile(r"^v", re.IGNORECASE)
_TRAILING_X = re.compile(r"\.x$", re.IGNORECASE)

# `go 1.22` on a line of its own; `go 1.22.3` does not match
_GO_DIRECTIVE = re.compile(r"^\s*go\s+(\d+\.\d+)\s*$", re.MULTILINE)

# First two-digit run in an engines range (">=18 <21" -> "18")
_NODE_MAJOR = re.compile(r"(\d{2})")


def normalize_version(version: str) -> str:
    """Strip whitespace, a leading "v" and a trailing ".x"."""
    cleaned = _LEADING_V.sub("", version.strip())
    return _TRAILING_X.sub("", cleaned)


def _read_first(bases: list[Path], filename: str) -> str | None:
    """Contents of the first readable ``filename`` across ``bases``."""
    for base in bases:
        content = probe.read_text(base / filename)
        if content is not None:
            logger.debug("Reading version hint from %s", base / filename)
            return content
    return None


def _node_version(bases: list[Path]) -> str | None:
    nvmrc = _read_first(bases, ".nvmrc")
    if nvmrc:
        version = normalize_version(nvmrc)
        if version:
            return version

    package_json = _read_first(bases, "package.json")
    if package_json:
        try:
            data = json.loads(package_json)
        except json.JSONDecodeError:
            logger.debug("package.json is not valid JSON, ignoring engines")
            return None
        engines = data.get("engines") if isinstance(data, dict) else None
        node_range = engines.get("node") if isinstance(engines, dict) else None
        if isinstance(node_range, str):
            match = _NODE_MAJOR.search(node_range)
            if match:
                return match.group(1)
    return None


def _go_version(bases: list[Path]) -> str | None:
    go_mod = _read_first(bases, "go.mod")
    if go_mod:
        match = _GO_DIRECTIVE.search(go_mod)
        if match:
            return match.group(1)
    return None


def _python_version(bases: list[Path]) -> str | None:
    pinned = _read_first(bases, ".python-version")
    if pinned and pinned.strip():
        return pinned.strip()
    return None


def _java_version(bases: list[Path]) -> str | None:
    # Compiler/toolchain pinning (maven-compiler-plugin, gradle toolchains)
    # is not read; the default always applies.
    return None


_RESOLVERS = {
    Runtime.NODE: _node_version,
    Runtime.GO: _go_version,
    Runtime.PYTHON: _python_version,
    Runtime.JAVA: _java_version,
}


def resolve_runtime_version(workspace: Path, working_directory: str, runtime: Runtime) -> str:
    """Version for ``runtime`` from project files, else the default.

    Args:
        workspace: Repository root.
        working_directory: Normalized path relative to ``workspace``.
        runtime: A concrete runtime.

    Returns:
        Version string without a leading "v" or trailing ".x".
    """
    bases = probe.candidate_bases(workspace, working_directory)
    version = _RESOLVERS[runtime](bases)
    if version:
        logger.info("Resolved %s version %s from project files", runtime, version)
        return version

    default = DEFAULT_VERSIONS[runtime]
    logger.info("No %s version pinned, using default %s", runtime, default)
    return default
