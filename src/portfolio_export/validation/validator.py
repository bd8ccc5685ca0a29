"""Pre-flight validation of a portfolio before export.

Three passes run over the document: required fields per enabled locale,
alt text on images, and reachability of every referenced image. Their
errors are concatenated; only the unsaved-changes check short-circuits.
"""

import asyncio

from ..assets.fetcher import AssetFetcher, ImageSource
from ..models import (
    AboutSection,
    ContactSection,
    HeroSection,
    LocalizedString,
    Portfolio,
    ProjectsSection,
    SectionType,
    SkillsSection,
    iter_image_refs,
)
from ..utils.logging import get_logger
from .errors import ValidationError, ValidationKind

logger = get_logger(__name__)

UNSAVED_CHANGES_MESSAGE = "Project has unsaved changes. Please wait for autosave to complete."

# (attribute, field name in paths, label used in messages)
_HERO_FIELDS = (
    ("headline", "headline", "headline"),
    ("subheadline", "subheadline", "subheadline"),
    ("cta_button", "ctaButton", "CTA button text"),
)
_ABOUT_FIELDS = (
    ("title", "title", "title"),
    ("paragraph", "paragraph", "paragraph"),
)
_TITLE_FIELD = (("title", "title", "title"),)


def unsaved_changes_error() -> ValidationError:
    """The single error reported when the editor has unsaved changes."""
    return ValidationError(
        kind=ValidationKind.UNSAVED_CHANGES,
        section_id="",
        section_type=SectionType.HERO.value,
        field="",
        message=UNSAVED_CHANGES_MESSAGE,
    )


def _section_label(section_type: SectionType) -> str:
    return section_type.value.capitalize()


def _missing_locales(value: LocalizedString, locales: list[str]) -> list[str]:
    return [locale for locale in locales if not value.is_filled(locale)]


def _required_error(section, path: str, locale: str, message: str) -> ValidationError:
    return ValidationError(
        kind=ValidationKind.REQUIRED_FIELD,
        section_id=section.id,
        section_type=section.type.value,
        field=f"{path}.{locale}",
        message=f'{message} for locale "{locale}"',
    )


def _check_localized(section, fields, locales: list[str]) -> list[ValidationError]:
    """Check localized fields, locale-major: every field for en, then ua, ..."""
    label = _section_label(section.type)
    return [
        _required_error(section, path, locale, f"{label} section missing {name}")
        for locale in locales
        for attr, path, name in fields
        if not getattr(section.data, attr).is_filled(locale)
    ]


def check_required_fields(portfolio: Portfolio) -> list[ValidationError]:
    """Check that required strings are filled for every enabled locale."""
    errors: list[ValidationError] = []
    locales = list(portfolio.enabled_locales)

    for section in portfolio.sections:
        match section:
            case HeroSection():
                errors.extend(_check_localized(section, _HERO_FIELDS, locales))
            case AboutSection():
                errors.extend(_check_localized(section, _ABOUT_FIELDS, locales))
            case SkillsSection():
                errors.extend(_check_localized(section, _TITLE_FIELD, locales))
            case ProjectsSection():
                errors.extend(_check_localized(section, _TITLE_FIELD, locales))
                for index, project in enumerate(section.data.projects):
                    errors.extend(
                        _required_error(
                            section,
                            f"projects[{index}].title",
                            locale,
                            f"Project #{index + 1} missing title",
                        )
                        for locale in _missing_locales(project.title, locales)
                    )
            case ContactSection():
                errors.extend(_check_localized(section, _TITLE_FIELD, locales))
                # Locale-independent; presence only, the address format is not checked
                if not section.data.email.strip():
                    errors.append(
                        ValidationError(
                            kind=ValidationKind.REQUIRED_FIELD,
                            section_id=section.id,
                            section_type=section.type.value,
                            field="email",
                            message="Contact section missing email address",
                        )
                    )

    return errors


def check_alt_text(portfolio: Portfolio) -> list[ValidationError]:
    """Check that every image has alt text (legacy URLs never do)."""
    errors: list[ValidationError] = []
    for ref in iter_image_refs(portfolio):
        if ref.alt.strip():
            continue
        if ref.kind == "avatar":
            message = "About section avatar image missing alt text"
        else:
            message = f"Project #{ref.index + 1} image missing alt text"
        errors.append(
            ValidationError(
                kind=ValidationKind.MISSING_ALT,
                section_id=ref.section_id,
                section_type=ref.section_type,
                field=ref.field,
                message=message,
            )
        )
    return errors


async def check_reachability(portfolio: Portfolio, source: ImageSource) -> list[ValidationError]:
    """HEAD-check each distinct image URL concurrently.

    Every slot that references an unreachable URL gets its own error.
    """
    refs = list(iter_image_refs(portfolio))
    urls = list(dict.fromkeys(ref.url for ref in refs))
    if not urls:
        return []

    results = await asyncio.gather(*(source.is_reachable(url) for url in urls))
    unreachable = {url for url, ok in zip(urls, results, strict=True) if not ok}
    if unreachable:
        logger.info("%d of %d image URL(s) unreachable", len(unreachable), len(urls))

    errors: list[ValidationError] = []
    for ref in refs:
        if ref.url not in unreachable:
            continue
        if ref.kind == "avatar":
            message = f"About section avatar image unreachable: {ref.url}"
        else:
            message = f"Project #{ref.index + 1} image unreachable: {ref.url}"
        errors.append(
            ValidationError(
                kind=ValidationKind.UNREACHABLE_MEDIA,
                section_id=ref.section_id,
                section_type=ref.section_type,
                field=ref.field,
                message=message,
            )
        )
    return errors


class ExportValidator:
    """Runs all pre-flight checks for an export.

    Supports dependency injection for testing:
        validator = ExportValidator(source=fake_image_source)
    """

    def __init__(self, source: ImageSource | None = None) -> None:
        self._source = source

    async def validate(
        self, portfolio: Portfolio, has_unsaved_changes: bool
    ) -> list[ValidationError]:
        """Validate a portfolio. An empty list means export may proceed."""
        if has_unsaved_changes:
            return [unsaved_changes_error()]

        errors = check_required_fields(portfolio)
        errors.extend(check_alt_text(portfolio))
        errors.extend(await self._check_reachability(portfolio))
        return errors

    async def _check_reachability(self, portfolio: Portfolio) -> list[ValidationError]:
        if self._source is not None:
            return await check_reachability(portfolio, self._source)
        async with AssetFetcher() as fetcher:
            return await check_reachability(portfolio, fetcher)


async def validate(portfolio: Portfolio, has_unsaved_changes: bool) -> list[ValidationError]:
    """Validate with a default HTTP fetcher."""
    return await ExportValidator().validate(portfolio, has_unsaved_changes)
