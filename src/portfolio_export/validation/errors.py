"""Validation error values and report helpers."""

from dataclasses import dataclass
from enum import StrEnum


class ValidationKind(StrEnum):
    """Kinds of pre-flight validation errors."""

    REQUIRED_FIELD = "required_field"
    MISSING_ALT = "missing_alt"
    UNREACHABLE_MEDIA = "unreachable_media"
    UNSAVED_CHANGES = "unsaved_changes"
    DUPLICATE_SLUG = "duplicate_slug"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'required field'."""
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class ValidationError:
    """A user-fixable problem that blocks export.

    ``field`` is a dot/bracket path into the section data, e.g.
    ``headline.en`` or ``projects[0].title.ua``.
    """

    kind: ValidationKind
    section_id: str
    section_type: str
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "sectionId": self.section_id,
            "sectionType": self.section_type,
            "field": self.field,
            "message": self.message,
        }


def group_by_kind(errors: list[ValidationError]) -> dict[ValidationKind, list[ValidationError]]:
    """Group errors by kind, keeping the order in which kinds first appear."""
    groups: dict[ValidationKind, list[ValidationError]] = {}
    for error in errors:
        groups.setdefault(error.kind, []).append(error)
    return groups


def count_by_kind(errors: list[ValidationError]) -> dict[ValidationKind, int]:
    """Per-kind error counts for the report summary."""
    return {kind: len(items) for kind, items in group_by_kind(errors).items()}
