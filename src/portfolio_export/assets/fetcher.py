"""HTTP access to remote images.

Single Responsibility: HEAD-check and download image URLs with proper
headers/timeouts. Used by the validator (reachability) and the collector
(downloads).
"""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlparse

import httpx

from ..config import settings
from ..utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class FetchedAsset:
    """Downloaded image bytes and their declared content type."""

    url: str
    content: bytes
    content_type: str


class ImageSource(Protocol):
    """Protocol for image access - enables dependency injection."""

    async def is_reachable(self, url: str) -> bool:
        """Return True when a HEAD request for url succeeds."""
        ...

    async def download(self, url: str) -> FetchedAsset:
        """Download url, raising on any failure."""
        ...


class AssetFetcher:
    """Async HTTP client for image URLs.

    Implements an async context manager for proper resource cleanup.
    A transport can be injected for tests (``httpx.MockTransport``).
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            timeout: HTTP request timeout in seconds (defaults to settings)
            transport: Optional httpx transport override
        """
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AssetFetcher":
        """Enter context manager, create HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=5,
            headers={"User-Agent": settings.http_user_agent},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        """Exit context manager, close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("AssetFetcher must be used as an async context manager")
        return self._client

    @staticmethod
    def _check_url(url: str) -> None:
        """Reject URLs that cannot be fetched over HTTP.

        Raises:
            ValueError: If the URL has no host or a non-HTTP scheme
        """
        parsed = urlparse(url)
        if parsed.scheme not in ALLOWED_SCHEMES:
            raise ValueError(f"Unsupported URL scheme '{parsed.scheme}': {url}")
        if not parsed.hostname:
            raise ValueError(f"URL has no host: {url}")

    async def is_reachable(self, url: str) -> bool:
        """HEAD-check a URL. Any error or non-2xx status means unreachable."""
        client = self._ensure_client()
        try:
            self._check_url(url)
            response = await client.head(url)
        except (ValueError, httpx.HTTPError) as e:
            logger.info("Reachability check failed for %s: %s", url, e)
            return False

        if not response.is_success:
            logger.info("Reachability check for %s returned %d", url, response.status_code)
            return False
        return True

    async def download(self, url: str) -> FetchedAsset:
        """Download an image.

        Raises:
            RuntimeError: If fetcher not used as context manager
            ValueError: If the URL is not an HTTP(S) URL
            httpx.HTTPError: On network/HTTP errors
        """
        client = self._ensure_client()
        self._check_url(url)

        logger.debug("Downloading: %s", url)
        response = await client.get(url)
        response.raise_for_status()

        logger.debug("Downloaded %d bytes from %s", len(response.content), url)
        return FetchedAsset(
            url=url,
            content=response.content,
            content_type=response.headers.get("content-type", ""),
        )
