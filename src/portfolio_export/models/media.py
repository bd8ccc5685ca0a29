"""Effective image resolution shared by validation, collection and rendering."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from .document import AboutSection, MediaRef, Portfolio, ProjectsSection

ImageKind = Literal["avatar", "project"]


def effective_image(media: MediaRef | None, legacy_url: str | None) -> str | None:
    """Return the URL an image slot actually points at.

    The media reference wins; the legacy plain URL is only a fallback.
    """
    if media is not None and media.url:
        return media.url
    return legacy_url or None


def effective_alt(media: MediaRef | None) -> str:
    """Return the alt text for an image slot (legacy URLs never carry one)."""
    if media is None:
        return ""
    return media.alt


@dataclass(frozen=True)
class ImageRef:
    """One image slot in the document."""

    section_id: str
    section_type: str
    field: str
    url: str
    alt: str
    kind: ImageKind
    index: int | None = None


def iter_image_refs(portfolio: Portfolio) -> Iterator[ImageRef]:
    """Yield every image slot with an effective URL, in document order."""
    for section in portfolio.sections:
        if isinstance(section, AboutSection):
            url = effective_image(section.data.avatar, section.data.image_url)
            if url:
                yield ImageRef(
                    section_id=section.id,
                    section_type=section.type.value,
                    field="avatar",
                    url=url,
                    alt=effective_alt(section.data.avatar),
                    kind="avatar",
                )
        elif isinstance(section, ProjectsSection):
            for index, project in enumerate(section.data.projects):
                url = effective_image(project.image, project.image_url)
                if url:
                    yield ImageRef(
                        section_id=section.id,
                        section_type=section.type.value,
                        field=f"projects[{index}].image",
                        url=url,
                        alt=effective_alt(project.image),
                        kind="project",
                        index=index,
                    )
