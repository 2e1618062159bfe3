"""워크플로 트리거 이벤트 로딩 및 검증."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from milestone_assigner.errors import MissingPullRequestError, UnsupportedEventError
from milestone_assigner.models import EventContext, Found, NotApplicable, PullRequestRef

logger = logging.getLogger(__name__)

SUPPORTED_EVENTS = frozenset({"pull_request", "pull_request_target"})


def load_event_context(environ: Mapping[str, str] | None = None) -> EventContext:
    """runner 환경변수와 이벤트 payload 파일에서 EventContext를 만든다.

    - GITHUB_EVENT_NAME: 이벤트 종류
    - GITHUB_REPOSITORY: owner/repo
    - GITHUB_EVENT_PATH: payload JSON 경로 (없으면 빈 payload)
    """
    env = os.environ if environ is None else environ

    payload: dict[str, Any] = {}
    event_path = env.get("GITHUB_EVENT_PATH", "")
    if event_path and Path(event_path).is_file():
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    elif event_path:
        logger.warning("GITHUB_EVENT_PATH %s does not exist", event_path)

    return EventContext.model_validate(
        {
            "event_name": env.get("GITHUB_EVENT_NAME", ""),
            "repository": env.get("GITHUB_REPOSITORY", ""),
            "pull_request": payload.get("pull_request"),
        }
    )


def extract_pull_request(context: EventContext) -> PullRequestRef:
    """payload에서 PR 번호와 작성자를 꺼낸다. 없으면 NotApplicable."""
    pr = context.pull_request
    if pr is None or pr.number is None:
        return NotApplicable()
    author = pr.user.login if pr.user else ""
    return Found(number=pr.number, author=author)


def validate_event(context: EventContext) -> Found:
    """이벤트 종류를 검증하고 PR 번호/작성자를 반환한다.

    Raises:
        UnsupportedEventError: pull_request / pull_request_target 이외 이벤트
        MissingPullRequestError: payload에 PR 번호가 없음
    """
    if context.event_name not in SUPPORTED_EVENTS:
        raise UnsupportedEventError(context.event_name)

    logger.debug(
        "PR context: %s",
        context.pull_request.model_dump_json() if context.pull_request else "null",
    )

    ref = extract_pull_request(context)
    if isinstance(ref, NotApplicable):
        raise MissingPullRequestError()
    return ref
