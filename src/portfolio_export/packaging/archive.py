"""Zip packaging of the generated site.

Archives are reproducible: entries are written in a fixed order with a fixed
timestamp and permissions, so identical inputs give identical bytes.
"""

import asyncio
import io
import re
import zipfile
from collections.abc import Mapping
from dataclasses import dataclass

from ..config import settings
from ..models import ExportStats, GeneratedFile
from ..utils.logging import get_logger

logger = get_logger(__name__)

CSS_PATH = "assets/css/style.css"
JS_PATH = "assets/js/main.js"
README_PATH = "README.txt"

# Earliest timestamp the zip format can store
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644

UNSAFE_NAME_CHARS = re.compile(r"[\s\\/:\x00]+")


def page_path(locale: str) -> str:
    return f"{locale}/index.html"


def archive_filename(name: str) -> str:
    """File name for a portfolio's archive: 'My Site' -> 'my-site-portfolio.zip'.

    Whitespace and path separators become hyphens, so the result is always a
    single path component.
    """
    return f"{UNSAFE_NAME_CHARS.sub('-', name.lower())}-portfolio.zip"


def archive_entries(
    css: str,
    js: str,
    readme: str | None,
    html_by_locale: Mapping[str, str],
    blobs_by_path: Mapping[str, bytes],
) -> list[GeneratedFile]:
    """Order the generated files the way they are written to the archive."""
    files = [GeneratedFile(CSS_PATH, css), GeneratedFile(JS_PATH, js)]
    files.extend(GeneratedFile(path, blob) for path, blob in blobs_by_path.items())
    files.extend(GeneratedFile(page_path(locale), html) for locale, html in html_by_locale.items())
    if readme is not None:
        files.append(GeneratedFile(README_PATH, readme))
    return files


@dataclass(frozen=True)
class PackagedArchive:
    data: bytes
    stats: ExportStats


def _zip_info(path: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(path, date_time=FIXED_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.create_system = 3  # Unix, so external_attr is read as a mode
    info.external_attr = FILE_MODE << 16
    return info


async def write_zip(files: list[GeneratedFile], compression_level: int | None = None) -> bytes:
    """Write files into a DEFLATE zip, yielding to the event loop between entries."""
    level = compression_level if compression_level is not None else settings.archive_compression_level
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=level) as zf:
        for file in files:
            zf.writestr(_zip_info(file.path), file.to_bytes(), compresslevel=level)
            await asyncio.sleep(0)
    return buffer.getvalue()


async def package(
    css: str,
    js: str,
    readme: str,
    html_by_locale: Mapping[str, str],
    blobs_by_path: Mapping[str, bytes],
    compression_level: int | None = None,
) -> PackagedArchive:
    """Build the export archive and its stats."""
    files = archive_entries(css, js, readme, html_by_locale, blobs_by_path)
    data = await write_zip(files, compression_level)
    stats = ExportStats(
        file_size=len(data),
        page_count=len(html_by_locale),
        asset_count=len(blobs_by_path),
    )
    logger.info(
        "Packaged %d file(s): %d page(s), %d asset(s), %d bytes",
        len(files),
        stats.page_count,
        stats.asset_count,
        stats.file_size,
    )
    return PackagedArchive(data=data, stats=stats)
