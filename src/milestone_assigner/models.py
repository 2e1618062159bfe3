"""GitHub 이벤트/마일스톤 데이터 모델 (Pydantic)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    login: str


class PullRequest(BaseModel):
    number: int | None = None
    user: User | None = None


class EventContext(BaseModel):
    """워크플로 트리거 컨텍스트.

    - pull_request는 선택 필드: PR 이외 이벤트나 잘못 설정된 트리거에서는 없음
    - payload 원본의 나머지 필드는 무시한다
    """

    model_config = ConfigDict(frozen=True)

    event_name: str
    repository: str = ""
    pull_request: PullRequest | None = None

    @property
    def owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.repository.partition("/")[2]


class Milestone(BaseModel):
    """GET /repos/{owner}/{repo}/milestones 응답 항목."""

    model_config = ConfigDict(frozen=True)

    title: str
    number: int
    due_on: datetime | None = Field(default=None, description="마감일 (없으면 항상 활성)")


@dataclass(frozen=True)
class Found:
    """PR 번호와 작성자를 확인한 검증 결과."""

    number: int
    author: str


@dataclass(frozen=True)
class NotApplicable:
    """payload에 PR 정보가 없는 검증 결과."""


PullRequestRef = Found | NotApplicable


@dataclass
class AssignmentResult:
    """마일스톤 지정 실행 결과."""

    status: Literal["assigned", "skipped"]
    pr_number: int
    milestone_number: int | None = None
    milestone_title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "pr_number": self.pr_number,
            "milestone_number": self.milestone_number,
            "milestone_title": self.milestone_title,
        }
