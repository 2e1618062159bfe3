"""마일스톤 자동 지정 과정에서 발생하는 예외 정의."""

from __future__ import annotations


class MilestoneAssignerError(Exception):
    """milestone_assigner 공통 예외."""


class UnsupportedEventError(MilestoneAssignerError):
    """PR 이벤트가 아닌 트리거로 실행됨."""

    def __init__(self, event_name: str):
        self.event_name = event_name
        super().__init__(
            'Please run this only for "pull_request" or "pull_request_target" events, '
            f"{event_name} is not a supported event."
        )


class MissingPullRequestError(MilestoneAssignerError):
    """이벤트 payload에 PR 정보가 없음."""

    def __init__(self) -> None:
        super().__init__("Could not get PR number from the payload.")


class MilestoneNotFoundError(MilestoneAssignerError):
    """필터링 후 selector와 일치하는 마일스톤이 없음."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f'Milestone with the name "{selector}" was not found.')


class UpdateFailedError(MilestoneAssignerError):
    """이슈(PR) 마일스톤 갱신 호출 실패."""

    def __init__(self, issue_number: int, reason: str):
        self.issue_number = issue_number
        super().__init__(f"Failed to update pull request #{issue_number}: {reason}")


class GitHubApiError(MilestoneAssignerError):
    """GitHub API 조회 실패 (마일스톤 목록, 파일 내용)."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"GitHub API error {status_code}: {message}")
