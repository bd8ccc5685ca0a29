"""Archive packaging."""

from .archive import (
    CSS_PATH,
    JS_PATH,
    README_PATH,
    PackagedArchive,
    archive_entries,
    archive_filename,
    package,
    page_path,
    write_zip,
)

__all__ = [
    "CSS_PATH",
    "JS_PATH",
    "README_PATH",
    "PackagedArchive",
    "archive_entries",
    "archive_filename",
    "package",
    "page_path",
    "write_zip",
]
