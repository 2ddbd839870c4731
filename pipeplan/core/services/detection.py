"""
Detection service — work out which runtime a repository uses.

Pure logic over the filesystem probe: an ordered table of marker checks
is evaluated per candidate directory and the first hit decides.  The
order matters and is part of the contract: go.mod and package.json are
single-purpose manifests and are trusted before the more ambiguous JVM
and Python markers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path

from pipeplan.core.models.project import SUPPORTED_RUNTIMES, Runtime
from pipeplan.core.services import probe

logger = logging.getLogger(__name__)

REQUIREMENTS_PATTERN = re.compile(r"^requirements.*\.txt$", re.IGNORECASE)

GRADLE_BUILD_FILES = ("build.gradle", "build.gradle.kts")
GRADLE_SETTINGS_FILES = ("settings.gradle", "settings.gradle.kts")
GRADLE_WRAPPER = "gradlew"


class RuntimeDetectionError(Exception):
    """Raised when no marker file identifies the runtime."""

    def __init__(self, searched: list[Path] | None = None) -> None:
        self.searched = searched or []
        super().__init__(
            "Unable to detect runtime. Set project.runtime in .iupipes.yml "
            f"({'|'.join(SUPPORTED_RUNTIMES)}) or add a recognizable config file."
        )


class JavaToolchain(StrEnum):
    """How a JVM project is built."""

    MAVEN = "maven"
    GRADLE = "gradle"
    GRADLE_WRAPPER = "gradle-wrapper"


MarkerCheck = Callable[[Path], bool]


def _has_any(*names: str) -> MarkerCheck:
    def check(base: Path) -> bool:
        return any(probe.exists(base / name) for name in names)

    return check


def requirements_variants(base: Path) -> list[str]:
    """Names in ``base`` matching ``requirements*.txt`` (case-insensitive)."""
    return [name for name in probe.list_dir(base) if REQUIREMENTS_PATTERN.match(name)]


def _has_requirements_variant(base: Path) -> bool:
    return bool(requirements_variants(base))


# (label, check, runtime), evaluated top to bottom; first match wins
RUNTIME_MARKERS: tuple[tuple[str, MarkerCheck, Runtime], ...] = (
    ("go.mod", _has_any("go.mod"), Runtime.GO),
    ("package.json", _has_any("package.json"), Runtime.NODE),
    ("pom.xml", _has_any("pom.xml"), Runtime.JAVA),
    ("build.gradle", _has_any(*GRADLE_BUILD_FILES), Runtime.JAVA),
    ("settings.gradle", _has_any(*GRADLE_SETTINGS_FILES), Runtime.JAVA),
    ("pyproject.toml", _has_any("pyproject.toml"), Runtime.PYTHON),
    ("requirements.txt", _has_any("requirements.txt"), Runtime.PYTHON),
    ("requirements*.txt", _has_requirements_variant, Runtime.PYTHON),
    ("setup.py/Pipfile", _has_any("setup.py", "Pipfile"), Runtime.PYTHON),
)


def match_runtime(base: Path) -> Runtime | None:
    """Runtime indicated by the markers in a single directory, or None."""
    for label, check, runtime in RUNTIME_MARKERS:
        if check(base):
            logger.debug("Marker %s found in %s -> %s", label, base, runtime)
            return runtime
    return None


def detect_runtime(workspace: Path, working_directory: str) -> Runtime:
    """Detect the runtime, preferring the working directory over the root.

    Args:
        workspace: Repository root.
        working_directory: Normalized path relative to ``workspace``.

    Returns:
        The detected runtime.

    Raises:
        RuntimeDetectionError: If no candidate directory has a marker.
    """
    bases = probe.candidate_bases(workspace, working_directory)
    for base in bases:
        runtime = match_runtime(base)
        if runtime is not None:
            logger.info("Detected runtime '%s' in %s", runtime, base)
            return runtime

    raise RuntimeDetectionError(bases)


def detect_java_toolchain(workspace: Path, working_directory: str) -> JavaToolchain:
    """Maven vs Gradle (with or without wrapper) for a JVM project.

    pom.xml beats Gradle files in the same directory.  A wrapper only
    counts when it sits next to the Gradle build file that matched.
    Defaults to Maven when nothing matches.
    """
    for base in probe.candidate_bases(workspace, working_directory):
        if probe.exists(base / "pom.xml"):
            return JavaToolchain.MAVEN
        if any(probe.exists(base / name) for name in GRADLE_BUILD_FILES):
            if probe.exists(base / GRADLE_WRAPPER):
                return JavaToolchain.GRADLE_WRAPPER
            return JavaToolchain.GRADLE

    logger.debug("No Maven or Gradle build file found, assuming maven")
    return JavaToolchain.MAVEN
