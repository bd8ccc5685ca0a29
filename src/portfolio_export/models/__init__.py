"""Portfolio document model and export result types."""

from .document import (
    LOCALE_NAMES,
    SUPPORTED_LOCALES,
    AboutData,
    AboutSection,
    ContactData,
    ContactSection,
    Effects,
    HeroData,
    HeroSection,
    Locale,
    LocalizedString,
    MediaMetadata,
    MediaRef,
    Portfolio,
    ProjectItem,
    ProjectsData,
    ProjectsSection,
    Section,
    SectionType,
    Skill,
    SkillsData,
    SkillsSection,
    SocialLink,
    Theme,
)
from .export import ExportResult, ExportStats, FileMapResult, GeneratedFile
from .media import ImageRef, effective_alt, effective_image, iter_image_refs

__all__ = [
    "LOCALE_NAMES",
    "SUPPORTED_LOCALES",
    "AboutData",
    "AboutSection",
    "ContactData",
    "ContactSection",
    "Effects",
    "ExportResult",
    "ExportStats",
    "FileMapResult",
    "GeneratedFile",
    "HeroData",
    "HeroSection",
    "ImageRef",
    "Locale",
    "LocalizedString",
    "MediaMetadata",
    "MediaRef",
    "Portfolio",
    "ProjectItem",
    "ProjectsData",
    "ProjectsSection",
    "Section",
    "SectionType",
    "Skill",
    "SkillsData",
    "SkillsSection",
    "SocialLink",
    "Theme",
    "effective_alt",
    "effective_image",
    "iter_image_refs",
]
