"""Action 입력 + YAML 설정 로딩 (Pydantic 모델)."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

try:
    __version__ = version("milestone-assigner")
except PackageNotFoundError:
    # 설치되지 않은 소스 트리에서 실행
    __version__ = "0.0.0"

# GitHub Actions core.getBooleanInput과 동일한 YAML 1.2 core schema
_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")

# action 입력 이름 → 설정 필드
_INPUT_FIELDS = {
    "repo-token": "access_token",
    "milestone": "milestone",
    "use-expression": "use_expression",
    "allow-inactive": "allow_inactive",
    "users-file-path": "users_file_path",
    "users-source": "users_source",
    "users-file-ref": "users_file_ref",
}
_REQUIRED_INPUTS = ("repo-token", "milestone")


# ── 설정 모델 ──────────────────────────────────────────


class ApiConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.github.com"
    request_timeout_sec: float = 30.0
    rate_limit_buffer: int = 10
    user_agent: str = f"milestone-assigner/{__version__}"


class AssignerConfig(BaseModel):
    """실행 1회분 설정. 로딩 후에는 변경하지 않는다."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1, repr=False)
    milestone: str = Field(min_length=1, description="마일스톤 제목 또는 glob 패턴")
    use_expression: bool = False
    allow_inactive: bool = False
    users_file_path: str = ""
    users_source: Literal["repo", "local"] = "repo"
    users_file_ref: str = ""
    api: ApiConfig = Field(default_factory=ApiConfig)

    @field_validator("use_expression", "allow_inactive", mode="before")
    @classmethod
    def parse_boolean_input(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return v
        if v in _TRUE_VALUES:
            return True
        if v in _FALSE_VALUES:
            return False
        raise ValueError(
            "Input does not meet YAML 1.2 \"Core Schema\" specification. "
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        )

    @field_validator("users_file_path", "users_file_ref")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


# ── 로딩 ───────────────────────────────────────────────


def _input_env_name(name: str) -> str:
    """action 입력 이름을 runner가 주입하는 환경변수 이름으로 변환한다."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """action 입력값을 읽는다. 미설정이면 빈 문자열."""
    env = os.environ if environ is None else environ
    return env.get(_input_env_name(name), "").strip()


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> AssignerConfig:
    """설정을 로딩하고 Pydantic 모델로 검증한다.

    우선순위: action 입력(INPUT_*) > YAML 설정 파일 > 모델 기본값
    """
    raw: dict[str, Any] = {}

    if path is not None:
        # .env 파일 로딩: 설정 파일과 같은 디렉터리의 .env를 탐색
        load_dotenv(dotenv_path=path.parent / ".env", override=False)

        with open(path) as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file {path}: {exc}") from exc
        if loaded is None:
            raise ValueError(f"Empty config file: {path}")
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        raw.update(loaded)

    env = os.environ if environ is None else environ

    for input_name, field_name in _INPUT_FIELDS.items():
        if value := get_input(input_name, env):
            raw[field_name] = value

    for input_name in _REQUIRED_INPUTS:
        if not raw.get(_INPUT_FIELDS[input_name]):
            raise ValueError(f"Input required and not supplied: {input_name}")

    # 환경변수 오버라이드 (GitHub Enterprise 등)
    if api_url := env.get("GITHUB_API_URL"):
        api = raw.get("api") or {}
        if not isinstance(api, dict):
            raise ValueError("Config key 'api' must be a mapping")
        raw["api"] = {**api, "base_url": api_url}

    return AssignerConfig.model_validate(raw)
