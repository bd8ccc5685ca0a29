"""Export output types."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..validation.errors import ValidationError


@dataclass(frozen=True)
class GeneratedFile:
    """A file produced by the export pipeline.

    ``path`` is relative and POSIX-style; ``content`` is text for generated
    files and bytes for downloaded assets.
    """

    path: str
    content: str | bytes

    @property
    def is_binary(self) -> bool:
        return isinstance(self.content, bytes)

    def to_bytes(self) -> bytes:
        """Return the content as bytes, encoding text as UTF-8."""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


@dataclass(frozen=True)
class ExportStats:
    """Informational numbers shown after an export."""

    file_size: int
    page_count: int
    asset_count: int


@dataclass
class ExportResult:
    """Outcome of an export: an archive with stats, or a list of errors."""

    success: bool
    errors: list["ValidationError"] = field(default_factory=list)
    archive: bytes | None = None
    filename: str | None = None
    stats: ExportStats | None = None


@dataclass
class FileMapResult:
    """Outcome of generating the publishable file list."""

    success: bool
    errors: list["ValidationError"] = field(default_factory=list)
    files: list[GeneratedFile] = field(default_factory=list)
