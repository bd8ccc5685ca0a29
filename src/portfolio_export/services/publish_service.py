"""Publish service - generate the site and push it to GitHub."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import httpx

from ..models import Portfolio
from ..publishing import (
    GitHubPublisher,
    KeyValueStore,
    LastPushSettings,
    ProgressCallback,
    PublishConfig,
    PublishResult,
    get_last_push_settings,
    resolve_token,
    save_last_push_settings,
)
from ..utils.logging import get_logger
from ..validation import ValidationError
from .exceptions import PublishError
from .export_service import ExportService

logger = get_logger(__name__)


@dataclass
class PublishOutcome:
    """Publish result plus the validation errors that blocked it, if any."""

    result: PublishResult
    errors: list[ValidationError] = field(default_factory=list)


class PublishService:
    """Service for publishing portfolios.

    Supports dependency injection for testing:
        service = PublishService(store=MemoryStore(), export_service=..., transport=...)
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        export_service: ExportService | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        delay: float | None = None,
    ) -> None:
        self._store = store
        self._export_service = export_service or ExportService()
        self._transport = transport
        self._delay = delay

    async def publish(
        self,
        portfolio: Portfolio,
        has_unsaved_changes: bool,
        config: PublishConfig,
        include_readme: bool = False,
        include_assets: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> PublishOutcome:
        """Validate, render and push. Never raises."""
        file_map = await self._export_service.generate_files(
            portfolio,
            has_unsaved_changes,
            include_readme=include_readme,
            include_assets=include_assets,
        )
        if not file_map.success:
            logger.info("Publish of %s refused: %d error(s)", portfolio.id, len(file_map.errors))
            message = file_map.errors[0].message if file_map.errors else "Failed to generate files"
            return PublishOutcome(
                result=PublishResult(success=False, error=message), errors=file_map.errors
            )

        publisher = GitHubPublisher(
            resolve_token(self._store), transport=self._transport, delay=self._delay
        )
        result = await publisher.push(config, file_map.files, on_progress)

        if result.success and self._store is not None:
            save_last_push_settings(
                self._store,
                LastPushSettings(
                    project_id=portfolio.id,
                    owner=config.owner,
                    repo=config.repo,
                    branch=config.branch,
                    base_path=config.base_path,
                    last_push_at=datetime.now(UTC).isoformat(timespec="seconds"),
                ),
            )
        return PublishOutcome(result=result)

    def last_config(self, portfolio: Portfolio, message: str | None = None) -> PublishConfig:
        """Destination of this portfolio's previous successful publish.

        Raises:
            PublishError: If the portfolio has no saved destination
        """
        saved = None
        if self._store is not None:
            saved = get_last_push_settings(self._store, portfolio.id)
        if saved is None:
            raise PublishError(f"No previous publish found for '{portfolio.name}'")
        return PublishConfig(
            owner=saved.owner,
            repo=saved.repo,
            branch=saved.branch,
            base_path="/docs" if saved.base_path == "/docs" else "/",
            message=message,
        )
