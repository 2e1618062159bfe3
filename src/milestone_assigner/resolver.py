"""마일스톤 선택 로직."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime

import orjson

from milestone_assigner.errors import MilestoneNotFoundError
from milestone_assigner.models import Milestone

logger = logging.getLogger(__name__)


def is_active(milestone: Milestone, today: date, allow_inactive: bool = False) -> bool:
    """마감일이 지나지 않은 마일스톤인지 확인한다 (일 단위 비교, 당일 마감은 활성)."""
    if milestone.due_on is None or allow_inactive:
        return True
    due_on = milestone.due_on
    if due_on.tzinfo is not None:
        due_on = due_on.astimezone(UTC)
    return due_on.date() >= today


def title_matches(title: str, selector: str, use_expression: bool = False) -> bool:
    """정확 일치(대소문자 구분) 또는 glob 패턴 일치(대소문자 무시)."""
    if use_expression:
        return fnmatch.fnmatchcase(title.lower(), selector.lower())
    return title == selector


def resolve_milestone(
    milestones: Iterable[Milestone],
    selector: str,
    *,
    use_expression: bool = False,
    allow_inactive: bool = False,
    today: date | None = None,
) -> Milestone:
    """활성 필터 → 이름 일치 순으로 적용해 첫 번째 마일스톤을 반환한다.

    순서는 API 응답 순서를 따른다 (별도 정렬 없음).

    Raises:
        MilestoneNotFoundError: 두 필터를 모두 통과한 마일스톤이 없음
    """
    today = today or datetime.now(tz=UTC).date()
    milestones = list(milestones)

    logger.info(
        "Milestones available:\n%s",
        orjson.dumps([m.title for m in milestones]).decode(),
    )

    candidates = [m for m in milestones if is_active(m, today, allow_inactive)]
    if len(candidates) < len(milestones):
        logger.debug(
            "Filtered out %d past-due milestones",
            len(milestones) - len(candidates),
        )

    for milestone in candidates:
        if title_matches(milestone.title, selector, use_expression):
            logger.info(
                'Using milestone #%d: "%s"',
                milestone.number,
                milestone.title,
                extra={"milestone_number": milestone.number},
            )
            return milestone

    raise MilestoneNotFoundError(selector)
