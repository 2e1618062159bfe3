"""마일스톤 자동 지정 실행 흐름.

이벤트 검증 → 작성자 게이트 → 마일스톤 선택 → PR 갱신 순으로 엄격히 순차 실행한다.
어느 단계든 예외가 나면 이후 단계는 실행하지 않는다.
"""

from __future__ import annotations

import logging
from datetime import date

from milestone_assigner.config import AssignerConfig
from milestone_assigner.event import validate_event
from milestone_assigner.github_api import GitHubApiClient
from milestone_assigner.models import AssignmentResult, EventContext
from milestone_assigner.resolver import resolve_milestone
from milestone_assigner.users import TextResourceProvider, build_provider, is_author_permitted

logger = logging.getLogger(__name__)


def update_issue_with_milestone(
    client: GitHubApiClient,
    owner: str,
    repo: str,
    pr_number: int,
    milestone_number: int,
) -> None:
    """PR에 마일스톤을 적용한다. 실패 시 UpdateFailedError 전파."""
    extra = {"pr_number": pr_number, "milestone_number": milestone_number}
    logger.info("Updating pull request #%d with milestone #%d", pr_number, milestone_number, extra=extra)
    client.update_issue_milestone(owner, repo, pr_number, milestone_number)
    logger.info(
        "Updated pull request #%d with milestone #%d",
        pr_number,
        milestone_number,
        extra={**extra, "event_code": "MILESTONE_ASSIGNED"},
    )


def assign_milestone(
    config: AssignerConfig,
    context: EventContext,
    client: GitHubApiClient,
    *,
    provider: TextResourceProvider | None = None,
    today: date | None = None,
) -> AssignmentResult:
    """이벤트 1건에 대해 마일스톤을 지정한다.

    Args:
        config: 실행 설정
        context: 트리거 이벤트 컨텍스트
        client: GitHub API 클라이언트
        provider: 허용 목록 공급자 (기본: users_source 설정으로 선택)
        today: 마감일 비교 기준일 (기본: UTC 오늘)

    Returns:
        AssignmentResult (허용 목록에 없는 작성자면 status="skipped")
    """
    pr = validate_event(context)

    if config.users_file_path and provider is None:
        provider = build_provider(config, client, context.owner, context.repo)

    if not is_author_permitted(config.users_file_path, pr.author, provider):
        logger.info(
            "User %s is not listed in %s, skipping",
            pr.author,
            config.users_file_path,
            extra={"event_code": "AUTHOR_NOT_ALLOWED", "author": pr.author, "pr_number": pr.number},
        )
        return AssignmentResult(status="skipped", pr_number=pr.number)

    milestones = client.list_milestones(context.owner, context.repo)
    milestone = resolve_milestone(
        milestones,
        config.milestone,
        use_expression=config.use_expression,
        allow_inactive=config.allow_inactive,
        today=today,
    )

    update_issue_with_milestone(client, context.owner, context.repo, pr.number, milestone.number)

    return AssignmentResult(
        status="assigned",
        pr_number=pr.number,
        milestone_number=milestone.number,
        milestone_title=milestone.title,
    )
