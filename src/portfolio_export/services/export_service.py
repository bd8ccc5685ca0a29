"""Export service - the static-site export pipeline.

Validation runs first and can stop the pipeline. After it passes, assets are
collected, every file is rendered from scratch and the archive is packaged.
Any unexpected failure is turned into a single validation-shaped error so
callers only ever render one kind of report.
"""

from dataclasses import dataclass
from pathlib import Path

from ..assets import AssetCollector, CollectedAssets, ImageSource
from ..models import ExportResult, FileMapResult, Portfolio, SectionType
from ..packaging import archive_entries, archive_filename, package
from ..rendering import generate_css, generate_js, generate_pages, generate_readme
from ..utils.logging import get_logger
from ..validation import ExportValidator, ValidationError, ValidationKind
from .exceptions import ExportError

logger = get_logger(__name__)


def pipeline_error(error: Exception) -> ValidationError:
    """Wrap an unexpected failure as a validation error for uniform reporting."""
    return ValidationError(
        kind=ValidationKind.REQUIRED_FIELD,
        section_id="",
        section_type=SectionType.HERO.value,
        field="",
        message=f"Export failed: {error}",
    )


@dataclass(frozen=True)
class CompiledSite:
    """Every text file of a site, before packaging."""

    css: str
    js: str
    readme: str
    pages: dict[str, str]  # locale -> HTML


def compile_site(portfolio: Portfolio, asset_map: dict[str, str]) -> CompiledSite:
    """Render all text outputs. Pure: no network or filesystem access."""
    return CompiledSite(
        css=generate_css(portfolio.theme),
        js=generate_js(),
        readme=generate_readme(portfolio),
        pages=generate_pages(portfolio, asset_map),
    )


class ExportService:
    """Service for exporting portfolios as static sites.

    Supports dependency injection for testing:
        service = ExportService(image_source=fake_source)
    """

    def __init__(
        self,
        validator: ExportValidator | None = None,
        collector: AssetCollector | None = None,
        image_source: ImageSource | None = None,
    ) -> None:
        self._validator = validator or ExportValidator(source=image_source)
        self._collector = collector or AssetCollector(source=image_source)

    async def validate(
        self, portfolio: Portfolio, has_unsaved_changes: bool
    ) -> list[ValidationError]:
        return await self._validator.validate(portfolio, has_unsaved_changes)

    async def export(self, portfolio: Portfolio, has_unsaved_changes: bool) -> ExportResult:
        """Validate, collect, render and package. Never raises."""
        try:
            errors = await self._validator.validate(portfolio, has_unsaved_changes)
            if errors:
                logger.info("Export of %s refused: %d validation error(s)", portfolio.id, len(errors))
                return ExportResult(success=False, errors=errors)

            collected = await self._collector.collect(portfolio)
            site = compile_site(portfolio, collected.asset_map)
            archive = await package(site.css, site.js, site.readme, site.pages, collected.blobs)
        except Exception as e:
            logger.exception("Export of %s failed", portfolio.id)
            return ExportResult(success=False, errors=[pipeline_error(e)])

        return ExportResult(
            success=True,
            archive=archive.data,
            filename=archive_filename(portfolio.name),
            stats=archive.stats,
        )

    async def generate_files(
        self,
        portfolio: Portfolio,
        has_unsaved_changes: bool,
        include_readme: bool = False,
        include_assets: bool = False,
    ) -> FileMapResult:
        """Produce the file list used for publishing. Never raises.

        Without assets, pages keep the original image URLs.
        """
        try:
            errors = await self._validator.validate(portfolio, has_unsaved_changes)
            if errors:
                return FileMapResult(success=False, errors=errors)

            collected = (
                await self._collector.collect(portfolio) if include_assets else CollectedAssets()
            )
            site = compile_site(portfolio, collected.asset_map)
            files = archive_entries(
                site.css,
                site.js,
                site.readme if include_readme else None,
                site.pages,
                collected.blobs,
            )
        except Exception as e:
            logger.exception("Generating files for %s failed", portfolio.id)
            return FileMapResult(success=False, errors=[pipeline_error(e)])

        return FileMapResult(success=True, files=files)


def save_archive(result: ExportResult, output_dir: Path) -> Path:
    """Write a successful export's archive into output_dir.

    Raises:
        ExportError: If the result holds no archive, or its file name would
            land outside output_dir
    """
    if not result.success or result.archive is None or result.filename is None:
        raise ExportError("Export result has no archive to save")
    path = output_dir / result.filename
    if path.resolve().parent != output_dir.resolve():
        raise ExportError(f"Archive name '{result.filename}' is not a plain file name")
    output_dir.mkdir(parents=True, exist_ok=True)
    path.write_bytes(result.archive)
    logger.info("Saved archive to %s", path)
    return path

