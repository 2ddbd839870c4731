"""
Tests for the plan use case — config + detection + planning end to end.
"""

import json
import textwrap
from pathlib import Path

import pytest

from pipeplan.core.models.plan import PHASE_NAMES
from pipeplan.core.models.project import Goal, ProjectConfig, Runtime, UnsupportedRuntimeError
from pipeplan.core.services.detection import RuntimeDetectionError
from pipeplan.core.use_cases.plan import resolve_project, run_plan


def _config(root: Path, body: str) -> Path:
    path = root / ".iupipes.yml"
    path.write_text(textwrap.dedent(body))
    return path


class TestResolveProject:
    def test_auto_everything(self, write_file, tmp_path: Path):
        write_file("go.mod", "module m\n\ngo 1.21\n")
        detected = resolve_project(tmp_path, ProjectConfig())
        assert detected.runtime == Runtime.GO
        assert detected.runtime_version == "1.21"
        assert detected.working_directory == "."
        assert detected.goal == Goal.CI

    def test_explicit_runtime_skips_detection(self, tmp_path: Path):
        detected = resolve_project(tmp_path, ProjectConfig(runtime="python"))
        assert detected.runtime == Runtime.PYTHON
        assert detected.runtime_version == "3.11"

    @pytest.mark.parametrize("raw", ["v20.x", "20", "V20", " 20.x "])
    def test_explicit_version_normalized(self, tmp_path: Path, raw):
        project = ProjectConfig(runtime="node", runtime_version=raw)
        assert resolve_project(tmp_path, project).runtime_version == "20"

    def test_explicit_version_beats_files(self, write_file, tmp_path: Path):
        write_file(".nvmrc", "16")
        project = ProjectConfig(runtime="node", runtime_version="22")
        assert resolve_project(tmp_path, project).runtime_version == "22"

    def test_undetected(self, tmp_path: Path):
        with pytest.raises(RuntimeDetectionError):
            resolve_project(tmp_path, ProjectConfig())

    def test_unsupported(self, tmp_path: Path):
        with pytest.raises(UnsupportedRuntimeError):
            resolve_project(tmp_path, ProjectConfig(runtime="ruby"))


class TestRunPlan:
    def test_without_config(self, make_files):
        root = make_files("package.json", "package-lock.json")
        result = run_plan(root)
        assert result.ok
        assert result.config_path is None
        assert result.plan.detected.runtime == Runtime.NODE
        assert result.plan.phases.install == ["npm ci"]
        assert [e.stage for e in result.matrix.include] == list(PHASE_NAMES)

    def test_monorepo_working_directory(self, make_files, tmp_path: Path):
        root = make_files("package.json", "services/api/go.mod")
        _config(root, """\
            project:
              working-directory: services/api/
              goal: pr-check
        """)
        result = run_plan(root)
        assert result.ok
        detected = result.plan.detected
        assert detected.runtime == Runtime.GO
        assert detected.working_directory == "services/api"
        assert result.plan.phases.build == []
        assert result.plan.project == {"working-directory": "services/api/", "goal": "pr-check"}

    def test_absolute_looking_working_directory(self, make_files):
        root = make_files("go.mod", "api/package.json")
        _config(root, """\
            project:
              working-directory: /api
              runtimeVersion: 18
        """)
        result = run_plan(root)
        assert result.ok
        assert result.warnings == []
        assert result.plan.detected.runtime == Runtime.NODE
        assert result.plan.detected.working_directory == "api"
        assert result.plan.detected.runtime_version == "18"
        assert result.plan.project == {"working-directory": "/api", "runtimeVersion": 18}
        assert json.loads(result.plan.to_json())["project"]["runtimeVersion"] == 18

    def test_explicit_config_path(self, make_files, tmp_path: Path):
        root = make_files("pom.xml")
        cfg = tmp_path / "ci" / "pipeline.yml"
        cfg.parent.mkdir()
        cfg.write_text("project:\n  goal: release\n")
        result = run_plan(root, config_path=cfg)
        assert result.ok
        assert result.config_path == cfg
        assert result.plan.detected.goal == Goal.RELEASE

    def test_missing_working_directory_warns(self, make_files, caplog):
        root = make_files("requirements.txt")
        _config(root, "project:\n  working-directory: nope\n")
        with caplog.at_level("WARNING"):
            result = run_plan(root)
        assert result.ok
        assert result.plan.detected.working_directory == "nope"
        assert result.plan.detected.runtime == Runtime.PYTHON
        assert any("does not exist" in w for w in result.warnings)
        assert "does not exist" in caplog.text

    def test_config_error(self, tmp_path: Path):
        _config(tmp_path, "project: [\n")
        result = run_plan(tmp_path)
        assert not result.ok
        assert "Failed to parse" in result.error
        assert result.outputs() == {}

    def test_undetected_error(self, tmp_path: Path):
        result = run_plan(tmp_path)
        assert not result.ok
        assert "Unable to detect runtime" in result.error
        assert result.to_dict() == {"error": result.error}

    def test_unsupported_error(self, make_files):
        root = make_files("go.mod")
        _config(root, "project:\n  runtime: dotnet\n")
        result = run_plan(root)
        assert "Unsupported runtime 'dotnet'" in result.error

    def test_workspace_from_env(self, make_files, monkeypatch):
        root = make_files("go.mod")
        monkeypatch.setenv("GITHUB_WORKSPACE", str(root))
        result = run_plan()
        assert result.workspace == root.resolve()
        assert result.plan.detected.runtime == Runtime.GO


class TestOutputs:
    def test_keys_and_values(self, write_file, tmp_path: Path):
        write_file("go.mod", "module m\ngo 1.21\n")
        outputs = run_plan(tmp_path).outputs()

        assert outputs["runtime"] == "go"
        assert outputs["runtime_version"] == "1.21"
        assert outputs["working_directory"] == "."
        assert outputs["goal"] == "ci"
        for name in PHASE_NAMES:
            assert f"cmd_{name}" in outputs
        assert outputs["cmd_test"] == "go test ./..."
        assert outputs["cmd_build"] == "go build ./..."
        assert outputs["cmd_install"] == ""

    def test_json_blobs(self, make_files):
        root = make_files("build.gradle", "gradlew")
        outputs = run_plan(root).outputs()

        plan = json.loads(outputs["plan_json"])
        assert plan["version"] == 1
        assert plan["detected"]["runtimeVersion"] == "17"
        assert plan["phases"]["test"] == ["./gradlew test"]

        matrix = json.loads(outputs["matrix"])
        assert len(matrix["include"]) == 7
        assert matrix["include"][3] == {
            "step_name": "BUILD",
            "stage": "build",
            "run": "./gradlew build -x test",
        }

    def test_to_dict(self, make_files):
        root = make_files("go.mod")
        data = run_plan(root).to_dict()
        assert data["plan"]["detected"]["runtime"] == "go"
        assert len(data["matrix"]["include"]) == 7
        assert data["warnings"] == []
