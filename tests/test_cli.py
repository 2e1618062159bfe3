"""CLI 통합 테스트."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from pytest_httpx import HTTPXMock

from milestone_assigner.cli import main
from milestone_assigner.config import __version__

MILESTONES_URL = "https://api.github.com/repos/pseudolab/test-repo/milestones?state=open&per_page=100"
ISSUE_URL = "https://api.github.com/repos/pseudolab/test-repo/issues/7"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def env(action_env: dict[str, str], monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    for key, value in action_env.items():
        monkeypatch.setenv(key, value)
    return action_env


class TestMainCommand:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_assign_success(self, runner: CliRunner, env: dict[str, str], httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=MILESTONES_URL, json=[{"title": "v1.0", "number": 42, "due_on": None}])
        httpx_mock.add_response(method="PATCH", url=ISSUE_URL, json={"number": 7})

        result = runner.invoke(main, [])

        assert result.exit_code == 0, f"Output: {result.output}\nException: {result.exception}"
        assert '"status":"assigned"' in result.output
        assert "Updated pull request #7 with milestone #42" in result.output
        patch_request = httpx_mock.get_request(method="PATCH")
        assert patch_request is not None
        assert json.loads(patch_request.content) == {"milestone": 42}

    def test_unsupported_event_fails(
        self, runner: CliRunner, env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITHUB_EVENT_NAME", "issues")
        result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert "::error::" in result.output
        assert "issues is not a supported event" in result.output

    def test_missing_token_fails(
        self, runner: CliRunner, env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("INPUT_REPO-TOKEN")
        result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert "Input required and not supplied: repo-token" in result.output

    def test_milestone_not_found_fails(
        self, runner: CliRunner, env: dict[str, str], httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=MILESTONES_URL, json=[{"title": "v2.0", "number": 43}])
        result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert 'Milestone with the name "v1.0" was not found.' in result.output

    def test_user_not_allowed_skips(
        self,
        runner: CliRunner,
        env: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        (tmp_path / "users.txt").write_text("username1\nusername3\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("INPUT_USERS-FILE-PATH", "users.txt")
        monkeypatch.setenv("INPUT_USERS-SOURCE", "local")

        result = runner.invoke(main, [])

        assert result.exit_code == 0, f"Output: {result.output}\nException: {result.exception}"
        assert '"status":"skipped"' in result.output

    def test_json_log_format(self, runner: CliRunner, env: dict[str, str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_EVENT_NAME", "push")
        result = runner.invoke(main, ["--log-format", "json"])
        assert result.exit_code == 1
        assert '"event_code": "ASSIGNMENT_FAILED"' in result.output

    def test_malformed_config_fails_with_error_line(
        self, runner: CliRunner, env: dict[str, str], tmp_path: Path
    ) -> None:
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("milestone: [unclosed\n", encoding="utf-8")

        result = runner.invoke(main, ["--config", str(config_path)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "::error::Invalid YAML in config file" in result.output
