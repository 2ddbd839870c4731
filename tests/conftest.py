"""
Shared test fixtures and configuration.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_ci_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests must not pick up the runner's own workspace or output file."""
    for name in ("GITHUB_WORKSPACE", "GITHUB_OUTPUT", "GITHUB_ACTIONS", "PIPEPLAN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., Path]:
    """Create empty files under tmp_path: ``make_files("go.mod", "api/pom.xml")``.

    Returns the repository root.
    """

    def _make(*paths: str) -> Path:
        for rel in paths:
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("")
        return tmp_path

    return _make


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``rel`` under tmp_path and return its path."""

    def _write(rel: str, content: str = "") -> Path:
        target = tmp_path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        return target

    return _write


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """The CLI reconfigures the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
