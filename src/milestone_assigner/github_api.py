"""GitHub REST API 동기 클라이언트.

마일스톤 목록 조회, 저장소 파일 내용 조회, 이슈(PR) 마일스톤 갱신을 수행한다.
- rate limit 사전 대기 (buffer 기반)
- 재시도 없음: 모든 실패는 호출자에게 예외로 전달
- 마일스톤 목록은 첫 페이지만 사용 (다음 페이지 존재 시 경고)
"""

from __future__ import annotations

import base64
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from milestone_assigner.config import ApiConfig
from milestone_assigner.errors import GitHubApiError, UpdateFailedError
from milestone_assigner.models import Milestone

logger = logging.getLogger(__name__)


@dataclass
class GitHubApiResult:
    """API 호출 결과."""

    status_code: int
    data: dict[str, Any] | list[Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    error: str | None = None


class GitHubApiClient:
    """GitHub REST API 동기 클라이언트."""

    def __init__(self, config: ApiConfig, token: str) -> None:
        if not token:
            raise RuntimeError("GitHub 토큰이 설정되지 않았습니다")

        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": config.user_agent,
            },
            timeout=config.request_timeout_sec,
        )
        self._rate_remaining: int | None = None
        self._rate_reset: float | None = None

    def _update_rate_limit(self, response: httpx.Response) -> None:
        """응답 헤더에서 rate limit 정보를 갱신한다."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset_at = response.headers.get("X-RateLimit-Reset")

        if remaining is not None:
            self._rate_remaining = int(remaining)
        if reset_at is not None:
            self._rate_reset = float(reset_at)

    def _wait_for_rate_limit(self) -> None:
        """직전 응답 기준으로 남은 호출이 buffer 이하이면 reset까지 대기한다.

        다음 요청을 보내기 직전에만 호출하므로 마지막 요청 뒤에는 대기하지 않는다.
        """
        if (
            self._rate_remaining is not None
            and self._rate_remaining <= self._config.rate_limit_buffer
            and self._rate_reset is not None
        ):
            wait_seconds = max(0, self._rate_reset - time.time()) + 1
            logger.warning(
                "Rate limit approaching (%d remaining), waiting %.0fs until reset",
                self._rate_remaining,
                wait_seconds,
            )
            time.sleep(wait_seconds)

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        """에러 응답 본문의 message 필드를 추출한다."""
        try:
            body = resp.json()
        except ValueError:
            return resp.text[:200]
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return resp.text[:200]

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> GitHubApiResult:
        """공통 요청 메서드 (rate limit 대기 → 요청 → 결과 변환). 재시도하지 않는다."""
        self._wait_for_rate_limit()

        try:
            resp = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            return GitHubApiResult(status_code=0, error=f"Transport error: {exc}")

        self._update_rate_limit(resp)

        if resp.status_code == 404:
            return GitHubApiResult(
                status_code=404,
                headers=dict(resp.headers),
                error=f"Not found (404): {self._error_message(resp)}",
            )

        if resp.status_code == 403:
            return GitHubApiResult(
                status_code=403,
                headers=dict(resp.headers),
                error=f"Forbidden (403): {self._error_message(resp)}",
            )

        if 400 <= resp.status_code < 500:
            return GitHubApiResult(
                status_code=resp.status_code,
                headers=dict(resp.headers),
                error=f"Client error ({resp.status_code}): {self._error_message(resp)}",
            )

        if resp.status_code >= 500:
            return GitHubApiResult(
                status_code=resp.status_code,
                headers=dict(resp.headers),
                error=f"Server error ({resp.status_code})",
            )

        # 성공 (2xx)
        data = resp.json() if resp.content else None
        return GitHubApiResult(
            status_code=resp.status_code,
            data=data,
            headers=dict(resp.headers),
        )

    @staticmethod
    def _parse_next_link(headers: dict[str, str]) -> str | None:
        """Link 헤더에서 rel="next" URL을 추출한다."""
        link_header = headers.get("link") or headers.get("Link")
        if not link_header:
            return None

        for part in link_header.split(","):
            match = re.search(r'<([^>]+)>;\s*rel="next"', part)
            if match:
                return match.group(1)
        return None

    # ── 공개 API 메서드 ──────────────────────────────────────

    def list_milestones(self, owner: str, repo: str, *, per_page: int = 100) -> list[Milestone]:
        """GET /repos/{owner}/{repo}/milestones — 열린 마일스톤 첫 페이지.

        Raises:
            GitHubApiError: 조회 실패
        """
        result = self._request(
            "GET",
            f"/repos/{owner}/{repo}/milestones",
            params={"state": "open", "per_page": per_page},
        )
        if result.error:
            raise GitHubApiError(result.status_code, result.error)

        if self._parse_next_link(result.headers):
            logger.warning(
                "More than %d milestones found; only the first page is considered",
                per_page,
            )

        items = result.data if isinstance(result.data, list) else []
        return [Milestone.model_validate(m) for m in items]

    def get_content(self, owner: str, repo: str, path: str, *, ref: str | None = None) -> str:
        """GET /repos/{owner}/{repo}/contents/{path} — 파일 내용을 텍스트로 반환.

        Raises:
            GitHubApiError: 조회 실패 또는 파일이 아닌 경로
        """
        params = {"ref": ref} if ref else None
        result = self._request("GET", f"/repos/{owner}/{repo}/contents/{path.lstrip('/')}", params=params)
        if result.error:
            raise GitHubApiError(result.status_code, result.error)

        if not isinstance(result.data, dict) or "content" not in result.data:
            raise GitHubApiError(result.status_code, f"{path} is not a file")

        content = result.data.get("content") or ""
        if result.data.get("encoding") == "base64":
            return base64.b64decode(content).decode("utf-8")
        return content

    def update_issue_milestone(
        self, owner: str, repo: str, issue_number: int, milestone_number: int
    ) -> GitHubApiResult:
        """PATCH /repos/{owner}/{repo}/issues/{n} — 마일스톤 필드만 갱신.

        Raises:
            UpdateFailedError: 갱신 실패
        """
        result = self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/{issue_number}",
            json={"milestone": milestone_number},
        )
        if result.error:
            raise UpdateFailedError(issue_number, result.error)
        return result

    @property
    def rate_remaining(self) -> int | None:
        """현재 남은 rate limit."""
        return self._rate_remaining

    def close(self) -> None:
        """httpx.Client를 종료한다."""
        self._client.close()

    def __enter__(self) -> GitHubApiClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
