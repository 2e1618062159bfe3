"""로깅 설정: GitHub Actions 워크플로 명령 / JSON 구조화 / 텍스트."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, Literal

LogFormat = Literal["actions", "json", "text"]

_EXTRA_KEYS = ("event_code", "pr_number", "milestone_number", "author")


class JsonFormatter(logging.Formatter):
    """JSON 형태로 로그 레코드를 포매팅한다."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        # extra 필드 병합 (event_code, pr_number, milestone_number 등)
        for key in _EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsFormatter(logging.Formatter):
    """GitHub Actions 워크플로 명령(::debug:: 등) 형태로 포매팅한다.

    INFO는 명령 없이 그대로 출력하고, 나머지 레벨은 runner가 주석으로
    표시할 수 있도록 명령으로 감싼다. 명령 메시지의 개행은 이스케이프한다.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        if record.levelno >= logging.ERROR:
            return f"::error::{_escape_data(message)}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{_escape_data(message)}"
        if record.levelno >= logging.INFO:
            return message
        return f"::debug::{_escape_data(message)}"


def setup_logging(*, log_format: LogFormat = "actions", level: int = logging.INFO) -> None:
    """milestone_assigner 로거에 포매터를 설정한다.

    Args:
        log_format: actions(워크플로 명령), json, text 중 택1
        level: 로그 레벨
    """
    root = logging.getLogger("milestone_assigner")
    root.setLevel(level)

    # 기존 핸들러 제거 (중복 방지)
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    elif log_format == "actions":
        handler.setFormatter(ActionsFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root.addHandler(handler)
