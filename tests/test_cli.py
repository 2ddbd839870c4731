"""
Tests for CLI commands — detect, plan, config check and global options.
"""

import json
import re
from pathlib import Path

from click.testing import CliRunner

from pipeplan.main import cli


def _invoke(root: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--workspace", str(root), *args])


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "pipeplan" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestDetectCommand:
    def test_detect(self, write_file, tmp_path: Path):
        write_file("go.mod", "module m\ngo 1.21\n")
        result = _invoke(tmp_path, "detect")
        assert result.exit_code == 0
        assert "go" in result.output
        assert "1.21" in result.output

    def test_detect_json(self, make_files):
        root = make_files("pom.xml")
        result = _invoke(root, "detect", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "runtime": "java",
            "runtimeVersion": "17",
            "workingDirectory": ".",
            "goal": "ci",
        }

    def test_detect_failure(self, tmp_path: Path):
        result = _invoke(tmp_path, "detect")
        assert result.exit_code == 1
        assert "Unable to detect runtime" in result.output

    def test_workspace_from_env(self, make_files):
        root = make_files("package.json")
        result = CliRunner().invoke(cli, ["detect", "--json"], env={"GITHUB_WORKSPACE": str(root)})
        assert result.exit_code == 0
        assert json.loads(result.output)["runtime"] == "node"


class TestPlanCommands:
    def test_show(self, make_files):
        root = make_files("package.json")
        result = _invoke(root, "plan", "show")
        assert result.exit_code == 0
        assert "npm install" in result.output
        assert "dist/**" in result.output

    def test_show_json(self, make_files):
        root = make_files("requirements.txt")
        result = _invoke(root, "plan", "show", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["plan"]["phases"]["install"] == ["python -m pip install -r requirements.txt"]
        assert data["plan"]["detected"]["runtimeVersion"] == "3.11"
        assert len(data["matrix"]["include"]) == 7
        assert data["warnings"] == []

    def test_matrix(self, make_files):
        root = make_files("go.mod")
        result = _invoke(root, "plan", "matrix")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [e["stage"] for e in data["include"]] == [
            "pre_install",
            "install",
            "pre_build",
            "build",
            "test",
            "post",
            "publish",
        ]

    def test_emit_to_file(self, make_files, tmp_path: Path):
        root = make_files("go.mod")
        out = tmp_path / "gh_output"
        result = _invoke(root, "plan", "emit", "--github-output", str(out))
        assert result.exit_code == 0
        content = out.read_text()
        assert "runtime=go\n" in content
        assert "cmd_test=go test ./...\n" in content
        assert "cmd_publish=\n" in content
        plan_line = re.search(r"^plan_json=(.*)$", content, re.MULTILINE).group(1)
        assert json.loads(plan_line)["detected"]["runtime"] == "go"

    def test_emit_env_target(self, make_files, tmp_path: Path):
        root = make_files("build.gradle")
        out = tmp_path / "gh_output"
        result = CliRunner().invoke(
            cli,
            ["--workspace", str(root), "plan", "emit"],
            env={"GITHUB_OUTPUT": str(out)},
        )
        assert result.exit_code == 0
        assert "cmd_build=gradle build -x test\n" in out.read_text()

    def test_emit_without_target_prints(self, make_files):
        root = make_files("go.mod")
        result = _invoke(root, "plan", "emit")
        assert result.exit_code == 0
        assert "runtime_version=1.22" in result.output

    def test_plan_failure(self, tmp_path: Path):
        (tmp_path / ".iupipes.yml").write_text("project:\n  runtime: cobol\n")
        result = _invoke(tmp_path, "plan", "show")
        assert result.exit_code == 1
        assert "Unsupported runtime 'cobol'" in result.output


class TestConfigCheckCommand:
    def test_valid(self, tmp_path: Path):
        (tmp_path / ".iupipes.yml").write_text("project:\n  runtime: node\n  goal: release\n")
        result = _invoke(tmp_path, "config", "check")
        assert result.exit_code == 0
        assert "valid" in result.output
        assert "release" in result.output

    def test_missing_config_is_valid_with_warning(self, tmp_path: Path):
        result = _invoke(tmp_path, "config", "check", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert any("No .iupipes.yml" in w for w in data["warnings"])

    def test_unknown_goal_warns(self, tmp_path: Path):
        (tmp_path / ".iupipes.yml").write_text("project:\n  goal: nightly\n")
        result = _invoke(tmp_path, "config", "check", "--json")
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["goal"] == "ci"
        assert any("nightly" in w for w in data["warnings"])

    def test_unsupported_runtime(self, tmp_path: Path):
        (tmp_path / ".iupipes.yml").write_text("project:\n  runtime: rust\n")
        result = _invoke(tmp_path, "config", "check")
        assert result.exit_code == 1
        assert "Unsupported runtime 'rust'" in result.output

    def test_broken_yaml(self, tmp_path: Path):
        (tmp_path / ".iupipes.yml").write_text("project: {\n")
        result = _invoke(tmp_path, "config", "check", "--json")
        assert result.exit_code == 1
        assert json.loads(result.output)["valid"] is False

    def test_explicit_config_path(self, tmp_path: Path):
        cfg = tmp_path / "custom.yml"
        cfg.write_text("project:\n  working-directory: missing\n")
        result = CliRunner().invoke(
            cli, ["--workspace", str(tmp_path), "--config", str(cfg), "config", "check", "--json"]
        )
        data = json.loads(result.output)
        assert data["config_path"] == str(cfg)
        assert any("does not exist" in w for w in data["warnings"])
