"""GitHub REST API client.

Consolidates what the publisher needs from GitHub:
- Connection lifecycle (connect, disconnect, async context manager)
- Authenticated requests with the API version header
- Error mapping to ``GitHubAPIError`` with GitHub's own message

Usage:
    async with GitHubClient(token) as client:
        await client.get_branch("octocat", "portfolio", "main")
"""

import base64
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from ..config import settings
from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class GitHubAPIError(Exception):
    """Raised when GitHub answers with a non-success status or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


@dataclass(frozen=True)
class GitHubUser:
    login: str
    id: int
    name: str | None = None
    email: str | None = None
    avatar_url: str = ""


@dataclass(frozen=True)
class GitHubRepo:
    id: int
    name: str
    full_name: str
    owner: str
    private: bool
    default_branch: str
    html_url: str = ""
    description: str | None = None


@dataclass(frozen=True)
class GitHubBranch:
    name: str
    sha: str
    protected: bool = False


def _payload(build: Callable[[Any], T], data: Any, what: str) -> T:
    """Map a decoded response body, raising GitHubAPIError if it has the wrong shape."""
    try:
        return build(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise GitHubAPIError(f"Malformed {what} response from GitHub") from e


def _user_from_json(data: dict[str, Any]) -> GitHubUser:
    return GitHubUser(
        login=data["login"],
        id=data["id"],
        name=data.get("name"),
        email=data.get("email"),
        avatar_url=data.get("avatar_url", ""),
    )


def _repo_from_json(data: dict[str, Any]) -> GitHubRepo:
    return GitHubRepo(
        id=data["id"],
        name=data["name"],
        full_name=data["full_name"],
        owner=data.get("owner", {}).get("login", ""),
        private=bool(data.get("private", False)),
        default_branch=data.get("default_branch", "main"),
        html_url=data.get("html_url", ""),
        description=data.get("description"),
    )


def _branch_from_json(data: dict[str, Any]) -> GitHubBranch:
    return GitHubBranch(
        name=data["name"],
        sha=data.get("commit", {}).get("sha", ""),
        protected=bool(data.get("protected", False)),
    )


def _repos_from_json(items: list[dict[str, Any]]) -> list[GitHubRepo]:
    return [_repo_from_json(item) for item in items]


def _branches_from_json(items: list[dict[str, Any]]) -> list[GitHubBranch]:
    return [_branch_from_json(item) for item in items]


def github_pages_url(owner: str, repo: str) -> str:
    """Public GitHub Pages URL for a repository."""
    host = f"{owner.lower()}.github.io"
    if repo.lower() == host:
        return f"https://{host}"
    return f"https://{host}/{repo}"


def encode_content(content: str | bytes) -> str:
    """Base64 envelope for the contents API (text is encoded as UTF-8 first)."""
    raw = content.encode("utf-8") if isinstance(content, str) else content
    return base64.b64encode(raw).decode("ascii")


class GitHubClient:
    """Async client for the subset of the GitHub API used for publishing."""

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub personal access token
            base_url: API root (defaults to settings)
            transport: Optional httpx transport override for tests
        """
        self._token = token
        self._base_url = (base_url or settings.github_api_url).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": settings.github_api_version,
            "User-Agent": settings.http_user_agent,
        }

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=settings.http_timeout,
            headers=self._get_headers(),
            transport=self._transport,
        )

    async def disconnect(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        await self.connect()
        return self

    async def __aexit__(self, *args) -> None:
        await self.disconnect()

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("GitHubClient is not connected")
        return self._client

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an API request and return the decoded JSON body.

        Raises:
            GitHubAPIError: On transport errors, non-2xx or non-JSON responses
        """
        client = self._ensure_client()
        try:
            response = await client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        if not response.is_success:
            message = f"GitHub API error: {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = body["message"]
            raise GitHubAPIError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(
                f"GitHub returned a non-JSON response to {method} {endpoint}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    async def get_user(self) -> GitHubUser:
        """Get the authenticated user (validates the token)."""
        return _payload(_user_from_json, await self._request("GET", "/user"), "user")

    async def list_repos(self, page: int = 1, per_page: int = 30) -> list[GitHubRepo]:
        data = await self._request(
            "GET", "/user/repos", params={"page": page, "per_page": per_page, "sort": "updated"}
        )
        return _payload(_repos_from_json, data, "repository list")

    async def get_repo(self, owner: str, repo: str) -> GitHubRepo:
        data = await self._request("GET", self._repo_path(owner, repo))
        return _payload(_repo_from_json, data, "repository")

    async def create_repo(
        self, name: str, private: bool = False, description: str | None = None
    ) -> GitHubRepo:
        """Create a repository for the authenticated user, initialized with a README."""
        data = await self._request(
            "POST",
            "/user/repos",
            json={
                "name": name,
                "private": private,
                "description": description or "Portfolio site",
                "auto_init": True,
            },
        )
        return _payload(_repo_from_json, data, "repository")

    async def list_branches(self, owner: str, repo: str) -> list[GitHubBranch]:
        data = await self._request("GET", f"{self._repo_path(owner, repo)}/branches")
        return _payload(_branches_from_json, data, "branch list")

    async def get_branch(self, owner: str, repo: str, branch: str) -> GitHubBranch:
        data = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/branches/{quote(branch, safe='')}"
        )
        return _payload(_branch_from_json, data, "branch")

    async def create_branch(
        self, owner: str, repo: str, branch: str, from_branch: str = "main"
    ) -> GitHubBranch:
        """Create a branch pointing at the head of from_branch."""
        source = await self.get_branch(owner, repo, from_branch)
        await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": source.sha},
        )
        return GitHubBranch(name=branch, sha=source.sha)

    async def get_file_sha(self, owner: str, repo: str, path: str, branch: str) -> str | None:
        """Current blob sha of a file, or None if the file does not exist."""
        try:
            data = await self._request(
                "GET",
                f"{self._repo_path(owner, repo)}/contents/{quote(path)}",
                params={"ref": branch},
            )
        except GitHubAPIError as e:
            if e.is_not_found:
                return None
            raise
        if isinstance(data, dict):
            return data.get("sha")
        return None

    async def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str | bytes,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        """Create or update a file; sha is required when the file exists."""
        payload: dict[str, Any] = {
            "message": message,
            "content": encode_content(content),
            "branch": branch,
        }
        if sha:
            payload["sha"] = sha
        await self._request(
            "PUT", f"{self._repo_path(owner, repo)}/contents/{quote(path)}", json=payload
        )
        logger.debug("Wrote %s to %s/%s@%s", path, owner, repo, branch)
