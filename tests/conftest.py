"""공통 fixture."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import pytest
import yaml


@pytest.fixture(autouse=True)
def _clean_action_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """실제 runner 환경변수가 테스트에 섞이지 않도록 제거한다."""
    for key in list(os.environ):
        if key.startswith("INPUT_") or key.startswith("GITHUB_") or key == "RUNNER_DEBUG":
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logger() -> None:
    """CLI 테스트가 추가한 핸들러를 정리한다."""
    yield
    logger = logging.getLogger("milestone_assigner")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def sample_pr_payload() -> dict[str, Any]:
    """pull_request 이벤트 payload 샘플."""
    return {
        "action": "opened",
        "number": 7,
        "pull_request": {
            "number": 7,
            "title": "Add feature",
            "user": {"login": "username2", "id": 2},
            "base": {"ref": "main"},
        },
        "repository": {"full_name": "pseudolab/test-repo"},
    }


@pytest.fixture()
def event_file(tmp_path: Path, sample_pr_payload: dict[str, Any]) -> Path:
    """임시 이벤트 payload 파일."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps(sample_pr_payload), encoding="utf-8")
    return path


@pytest.fixture()
def action_env(event_file: Path) -> dict[str, str]:
    """runner가 주입하는 환경변수 세트."""
    return {
        "INPUT_REPO-TOKEN": "ghp_test_token_12345",
        "INPUT_MILESTONE": "v1.0",
        "INPUT_USE-EXPRESSION": "false",
        "INPUT_ALLOW-INACTIVE": "false",
        "INPUT_USERS-FILE-PATH": "",
        "GITHUB_EVENT_NAME": "pull_request",
        "GITHUB_EVENT_PATH": str(event_file),
        "GITHUB_REPOSITORY": "pseudolab/test-repo",
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """임시 YAML 설정 파일."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump(
            {
                "milestone": "Sprint *",
                "use_expression": True,
                "users_file_path": ".github/users.txt",
                "api": {"request_timeout_sec": 5},
            }
        ),
        encoding="utf-8",
    )
    return config_path
