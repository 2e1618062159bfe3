"""작성자 허용 목록(allow-list) 게이트.

허용 목록은 줄 단위 텍스트 리소스이며, 저장소 content API 또는
로컬 파일에서 읽는다. 조회 실패는 그대로 전파한다 (허용/거부로 간주하지 않음).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from milestone_assigner.config import AssignerConfig
from milestone_assigner.github_api import GitHubApiClient

logger = logging.getLogger(__name__)


class TextResourceProvider(Protocol):
    """경로로 텍스트 리소스를 읽는 공급자."""

    def read_text(self, path: str) -> str: ...


class RepositoryContentProvider:
    """GitHub 저장소 content API에서 파일을 읽는다."""

    def __init__(self, client: GitHubApiClient, owner: str, repo: str, ref: str | None = None) -> None:
        self._client = client
        self._owner = owner
        self._repo = repo
        self._ref = ref or None

    def read_text(self, path: str) -> str:
        return self._client.get_content(self._owner, self._repo, path, ref=self._ref)


class LocalFileProvider:
    """체크아웃된 워크스페이스의 로컬 파일을 읽는다."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self._base_dir = base_dir or Path.cwd()

    def read_text(self, path: str) -> str:
        return (self._base_dir / path).read_text(encoding="utf-8")


def build_provider(
    config: AssignerConfig,
    client: GitHubApiClient,
    owner: str,
    repo: str,
    *,
    workspace: Path | None = None,
) -> TextResourceProvider:
    """users_source 설정에 따라 공급자를 선택한다."""
    if config.users_source == "local":
        return LocalFileProvider(workspace)
    return RepositoryContentProvider(client, owner, repo, ref=config.users_file_ref)


def parse_allow_list(text: str) -> set[str]:
    """줄 단위로 나누고 앞뒤 공백을 제거한다. 빈 줄은 버린다."""
    return {line.strip() for line in text.splitlines() if line.strip()}


def is_author_permitted(
    users_file_path: str,
    author: str,
    provider: TextResourceProvider | None,
) -> bool:
    """작성자가 허용 목록에 있는지 확인한다.

    - users_file_path가 비어 있으면 항상 허용 (공급자 호출 없음)
    - 대소문자를 구분하는 정확 일치
    """
    if not users_file_path:
        return True
    if provider is None:
        raise ValueError("users_file_path is set but no text resource provider was given")

    allowed = parse_allow_list(provider.read_text(users_file_path))
    logger.debug("Allowed users from %s: %s", users_file_path, sorted(allowed))
    return author in allowed
