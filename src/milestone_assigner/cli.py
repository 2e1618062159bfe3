"""click CLI 엔트리포인트.

milestone-assigner 명령으로 트리거된 PR에 마일스톤을 지정합니다.
GitHub Actions runner가 주입한 INPUT_* / GITHUB_* 환경변수를 사용합니다.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click
import orjson

from milestone_assigner.config import __version__, load_config
from milestone_assigner.errors import MilestoneAssignerError
from milestone_assigner.event import load_event_context
from milestone_assigner.github_api import GitHubApiClient
from milestone_assigner.logging_config import setup_logging
from milestone_assigner.runner import assign_milestone

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="milestone-assigner")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="설정 파일 경로 (action 입력이 우선)",
)
@click.option(
    "--log-format",
    type=click.Choice(["actions", "json", "text"]),
    default="actions",
    help="로그 포맷 (기본: actions 워크플로 명령)",
)
def main(config_path: Path | None, log_format: str) -> None:
    """PR 이벤트에 맞는 마일스톤을 찾아 PR에 지정합니다.

    작성자가 허용 목록에 없으면 아무것도 하지 않고 정상 종료합니다.
    """
    debug = os.environ.get("RUNNER_DEBUG") == "1"
    setup_logging(log_format=log_format, level=logging.DEBUG if debug else logging.INFO)  # type: ignore[arg-type]

    try:
        config = load_config(config_path)
        context = load_event_context()
        logger.debug(
            "Inputs: %s",
            config.model_dump_json(include={"milestone", "use_expression", "allow_inactive", "users_file_path"}),
        )

        with GitHubApiClient(config.api, config.access_token) as client:
            result = assign_milestone(config, context, client)
    except (MilestoneAssignerError, ValueError, OSError) as exc:
        logger.error("%s", exc, extra={"event_code": "ASSIGNMENT_FAILED"})
        sys.exit(1)

    click.echo(orjson.dumps(result.to_dict()).decode())
