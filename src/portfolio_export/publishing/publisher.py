"""Push generated files to a GitHub repository through the contents API."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

import httpx

from ..config import settings
from ..models import GeneratedFile
from ..utils.logging import get_logger
from .github import GitHubAPIError, GitHubClient

logger = get_logger(__name__)

PublishStatus = Literal["validating", "checking-repo", "uploading", "done", "error"]
BasePath = Literal["/", "/docs"]


@dataclass(frozen=True)
class PublishConfig:
    """Destination of a publish."""

    owner: str
    repo: str
    branch: str
    base_path: BasePath = "/"
    message: str | None = None

    def target_path(self, path: str) -> str:
        """Repository path for a generated file under the base path."""
        base = self.base_path.strip("/")
        path = path.lstrip("/")
        return f"{base}/{path}" if base else path


@dataclass(frozen=True)
class PublishProgress:
    status: PublishStatus
    message: str
    current: int | None = None
    total: int | None = None


@dataclass
class PublishResult:
    """Outcome of a publish.

    ``failed_path`` is set when a file write failed; it stays None when a
    precondition (token, repository, branch) failed and nothing was written.
    """

    success: bool
    error: str | None = None
    commit_url: str | None = None
    files_updated: int = 0
    failed_path: str | None = None


ProgressCallback = Callable[[PublishProgress], None]


def default_commit_message() -> str:
    return f"chore: portfolio export {datetime.now(UTC).isoformat(timespec='seconds')}"


class GitHubPublisher:
    """Publishes a file list file-by-file, in order.

    Supports dependency injection for testing:
        publisher = GitHubPublisher(token, transport=httpx.MockTransport(handler), delay=0)
    """

    def __init__(
        self,
        token: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
        delay: float | None = None,
    ) -> None:
        self._token = token
        self._transport = transport
        self.delay = delay if delay is not None else settings.publish_delay_seconds

    async def push(
        self,
        config: PublishConfig,
        files: list[GeneratedFile],
        on_progress: ProgressCallback | None = None,
    ) -> PublishResult:
        """Push files to the configured repository and branch. Never raises."""

        def report(status: PublishStatus, message: str, current=None, total=None) -> None:
            if on_progress is not None:
                on_progress(PublishProgress(status, message, current, total))

        def fail(message: str, **extra) -> PublishResult:
            logger.error("Publish to %s/%s failed: %s", config.owner, config.repo, message)
            report("error", message)
            return PublishResult(success=False, error=message, **extra)

        report("validating", "Validating GitHub connection...")
        if not self._token:
            return fail("GitHub token not found. Run `portfolio-export auth login` first.")

        async with GitHubClient(self._token, transport=self._transport) as client:
            report("checking-repo", "Checking repository...")
            try:
                await client.get_repo(config.owner, config.repo)
            except GitHubAPIError as e:
                return fail(f"Repository {config.owner}/{config.repo} not available: {e}")
            try:
                await client.get_branch(config.owner, config.repo, config.branch)
            except GitHubAPIError as e:
                return fail(f'Branch "{config.branch}" not found in repository: {e}')

            message = config.message or default_commit_message()
            total = len(files)
            updated = 0
            report("uploading", "Uploading files...", 0, total)

            for file in files:
                path = config.target_path(file.path)
                try:
                    sha = await client.get_file_sha(config.owner, config.repo, path, config.branch)
                    await client.put_file(
                        config.owner,
                        config.repo,
                        path,
                        file.content,
                        message,
                        config.branch,
                        sha=sha,
                    )
                except GitHubAPIError as e:
                    return fail(
                        f"Failed to write {path}: {e}", files_updated=updated, failed_path=path
                    )

                updated += 1
                report("uploading", "Uploading files...", updated, total)
                await asyncio.sleep(self.delay)

        report("done", "Successfully pushed to GitHub!")
        logger.info("Pushed %d file(s) to %s/%s@%s", updated, config.owner, config.repo, config.branch)
        return PublishResult(
            success=True,
            commit_url=f"https://github.com/{config.owner}/{config.repo}/tree/{config.branch}",
            files_updated=updated,
        )
