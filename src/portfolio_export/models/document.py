"""Portfolio document model.

The editor stores documents as camelCase JSON. These models accept that shape
(and snake_case field names) and expose each section type as its own class,
so the validator and renderers can match on ``SectionType`` exhaustively.
"""

import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Locale = Literal["en", "ua", "ru", "pl"]

SUPPORTED_LOCALES: tuple[Locale, ...] = ("en", "ua", "ru", "pl")

LOCALE_NAMES: dict[str, str] = {
    "en": "English",
    "ua": "Українська",
    "ru": "Русский",
    "pl": "Polski",
}


class SectionType(StrEnum):
    """Section type tags."""

    HERO = "hero"
    ABOUT = "about"
    SKILLS = "skills"
    PROJECTS = "projects"
    CONTACT = "contact"


class DocumentModel(BaseModel):
    """Base for document models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LocalizedString(DocumentModel):
    """One display string per supported locale."""

    en: str = ""
    ua: str = ""
    ru: str = ""
    pl: str = ""

    @field_validator("en", "ua", "ru", "pl", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def get(self, locale: str) -> str:
        """Return the string for a locale, empty if the locale is unknown."""
        if locale not in SUPPORTED_LOCALES:
            return ""
        return getattr(self, locale)

    def is_filled(self, locale: str) -> bool:
        """True when the locale's string is non-empty after trimming."""
        return bool(self.get(locale).strip())


class MediaMetadata(DocumentModel):
    filename: str | None = None
    size: int | None = None
    mime: str | None = None
    width: int | None = None
    height: int | None = None


class MediaRef(DocumentModel):
    """Reference to an uploaded image."""

    url: str = ""
    alt: str = ""
    id: str | None = None
    metadata: MediaMetadata | None = None

    @field_validator("url", "alt", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Effects(DocumentModel):
    """Visual effects applied to a section."""

    parallax: float = Field(default=0.0, ge=0.0, le=1.0)
    blur: bool = False
    has3d: bool = False


class Skill(DocumentModel):
    id: str = ""
    name: str = ""
    level: int = Field(default=0, ge=0, le=100)


class ProjectItem(DocumentModel):
    id: str = ""
    title: LocalizedString = Field(default_factory=LocalizedString)
    description: LocalizedString = Field(default_factory=LocalizedString)
    image: MediaRef | None = None
    image_url: str | None = None  # Legacy plain URL, superseded by ``image``
    tags: list[str] = Field(default_factory=list)
    link: str = ""


class SocialLink(DocumentModel):
    id: str = ""
    platform: str = ""
    url: str = ""


class HeroData(DocumentModel):
    headline: LocalizedString = Field(default_factory=LocalizedString)
    subheadline: LocalizedString = Field(default_factory=LocalizedString)
    cta_button: LocalizedString = Field(default_factory=LocalizedString)
    cta_link: str | None = None
    cta_color: str | None = None


class AboutData(DocumentModel):
    title: LocalizedString = Field(default_factory=LocalizedString)
    paragraph: LocalizedString = Field(default_factory=LocalizedString)
    avatar: MediaRef | None = None
    image_url: str | None = None  # Legacy plain URL, superseded by ``avatar``
    tags: list[str] = Field(default_factory=list)
    layout: Literal["default", "centered", "split"] = "default"


class SkillsData(DocumentModel):
    title: LocalizedString = Field(default_factory=LocalizedString)
    skills: list[Skill] = Field(default_factory=list)


class ProjectsData(DocumentModel):
    title: LocalizedString = Field(default_factory=LocalizedString)
    projects: list[ProjectItem] = Field(default_factory=list)


class ContactData(DocumentModel):
    title: LocalizedString = Field(default_factory=LocalizedString)
    email: str = ""
    social_links: list[SocialLink] = Field(default_factory=list)


class BaseSection(DocumentModel):
    id: str
    effects: Effects = Field(default_factory=Effects)


class HeroSection(BaseSection):
    type: Literal[SectionType.HERO] = SectionType.HERO
    data: HeroData = Field(default_factory=HeroData)


class AboutSection(BaseSection):
    type: Literal[SectionType.ABOUT] = SectionType.ABOUT
    data: AboutData = Field(default_factory=AboutData)


class SkillsSection(BaseSection):
    type: Literal[SectionType.SKILLS] = SectionType.SKILLS
    data: SkillsData = Field(default_factory=SkillsData)


class ProjectsSection(BaseSection):
    type: Literal[SectionType.PROJECTS] = SectionType.PROJECTS
    data: ProjectsData = Field(default_factory=ProjectsData)


class ContactSection(BaseSection):
    type: Literal[SectionType.CONTACT] = SectionType.CONTACT
    data: ContactData = Field(default_factory=ContactData)


Section = Annotated[
    HeroSection | AboutSection | SkillsSection | ProjectsSection | ContactSection,
    Field(discriminator="type"),
]


class Theme(DocumentModel):
    primary_color: str = "#7c3aed"
    mode: Literal["dark", "light"] = "dark"


class Portfolio(DocumentModel):
    """Root portfolio document."""

    id: str
    name: str
    slug: str | None = None
    sections: list[Section] = Field(default_factory=list)
    theme: Theme = Field(default_factory=Theme)
    default_locale: Locale = "en"
    enabled_locales: list[Locale] = Field(default_factory=lambda: ["en"], min_length=1)

    @model_validator(mode="after")
    def check_invariants(self) -> "Portfolio":
        """Enforce locale and section-id invariants."""
        if len(set(self.enabled_locales)) != len(self.enabled_locales):
            raise ValueError("enabled_locales must not contain duplicates")
        if self.default_locale not in self.enabled_locales:
            raise ValueError(
                f"default_locale '{self.default_locale}' must be one of the enabled locales"
            )
        seen: set[str] = set()
        for section in self.sections:
            if section.id in seen:
                raise ValueError(f"Duplicate section id: '{section.id}'")
            seen.add(section.id)
        return self

    @classmethod
    def from_json_file(cls, path: str | Path) -> "Portfolio":
        """Load a portfolio from an editor JSON document."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)
