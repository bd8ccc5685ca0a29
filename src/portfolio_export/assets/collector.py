"""Collect remote images into the export archive.

Downloads run one at a time in document order: local file names carry a
counter, so the order of successful downloads decides every path.
"""

import re
from dataclasses import dataclass, field
from urllib.parse import urlparse

from ..config import settings
from ..models import Portfolio, iter_image_refs
from ..utils.logging import get_logger
from .fetcher import AssetFetcher, ImageSource

logger = get_logger(__name__)

MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/avif": "avif",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}

DEFAULT_EXTENSION = "jpg"

_URL_EXTENSION = re.compile(r"\.([a-z0-9]+)$", re.IGNORECASE)


def infer_extension(url: str, content_type: str | None) -> str:
    """Pick a file extension for a downloaded image.

    Order: known content type, then the URL path's trailing extension,
    then ``jpg``.
    """
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in MIME_EXTENSIONS:
            return MIME_EXTENSIONS[mime]

    match = _URL_EXTENSION.search(urlparse(url).path)
    if match:
        return match.group(1).lower()
    return DEFAULT_EXTENSION


@dataclass
class CollectedAssets:
    """Result of asset collection for one export."""

    asset_map: dict[str, str] = field(default_factory=dict)  # original URL -> local path
    blobs: dict[str, bytes] = field(default_factory=dict)  # local path -> bytes

    def resolve(self, url: str) -> str:
        """Local path for url, or url itself when it was not collected."""
        return self.asset_map.get(url, url)


class AssetCollector:
    """Download every referenced image once and assign it a local path.

    Follows Dependency Inversion - the image source can be injected for testing.
    """

    def __init__(self, source: ImageSource | None = None, prefix: str | None = None) -> None:
        """Initialize collector.

        Args:
            source: Image source to download from (an ``AssetFetcher`` is
                opened per collection if not provided)
            prefix: Archive directory for images (defaults to settings)
        """
        self._source = source
        self.prefix = (prefix or settings.asset_dir_prefix).rstrip("/")

    async def collect(self, portfolio: Portfolio) -> CollectedAssets:
        """Download all images referenced by the portfolio.

        A failed download is logged and skipped; the renderer then keeps the
        original URL for that image.
        """
        if self._source is not None:
            return await self._collect_from(self._source, portfolio)

        async with AssetFetcher() as fetcher:
            return await self._collect_from(fetcher, portfolio)

    async def _collect_from(self, source: ImageSource, portfolio: Portfolio) -> CollectedAssets:
        collected = CollectedAssets()
        counter = 0

        for ref in iter_image_refs(portfolio):
            if ref.url in collected.asset_map:
                continue

            try:
                asset = await source.download(ref.url)
            except Exception as e:
                logger.warning("Failed to download %s image %s: %s", ref.kind, ref.url, e)
                continue

            ext = infer_extension(ref.url, asset.content_type)
            path = f"{self.prefix}/{ref.kind}-{counter}.{ext}"
            counter += 1

            collected.asset_map[ref.url] = path
            collected.blobs[path] = asset.content

        logger.info("Collected %d asset(s)", len(collected.blobs))
        return collected
