"""Shared test fixtures for Portfolio Export."""

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from portfolio_export.assets import FetchedAsset
from portfolio_export.models import Portfolio

AVATAR_URL = "https://cdn.example.com/avatar.png"
PROJECT_URL = "https://cdn.example.com/shot.webp"


class FakeImageSource:
    """In-memory image source: every URL is reachable and downloadable unless listed."""

    def __init__(
        self,
        unreachable: set[str] | None = None,
        failing: set[str] | None = None,
        content_types: dict[str, str] | None = None,
    ) -> None:
        self.unreachable = unreachable or set()
        self.failing = failing or set()
        self.content_types = content_types or {}
        self.head_calls: list[str] = []
        self.download_calls: list[str] = []

    async def is_reachable(self, url: str) -> bool:
        self.head_calls.append(url)
        return url not in self.unreachable

    async def download(self, url: str) -> FetchedAsset:
        self.download_calls.append(url)
        if url in self.failing:
            raise httpx.ConnectError(f"connection refused: {url}")
        return FetchedAsset(
            url=url,
            content=f"bytes of {url}".encode(),
            content_type=self.content_types.get(url, "image/png"),
        )


def repo_json(name: str, private: bool = False) -> dict:
    return {
        "id": 7,
        "name": name,
        "full_name": f"octocat/{name}",
        "owner": {"login": "octocat"},
        "private": private,
        "default_branch": "main",
        "html_url": f"https://github.com/octocat/{name}",
    }


class FakeGitHub:
    """Minimal in-memory GitHub contents API."""

    def __init__(
        self,
        existing: dict[str, str] | None = None,
        repo_exists: bool = True,
        branch_exists: bool = True,
        fail_put: str | None = None,
    ) -> None:
        self.existing = existing or {}  # path -> sha
        self.repo_exists = repo_exists
        self.branch_exists = branch_exists
        self.fail_put = fail_put
        self.puts: list[tuple[str, dict]] = []
        self.posts: list[tuple[str, dict]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/user":
            return httpx.Response(200, json={"login": "octocat", "id": 1})
        if path == "/user/repos":
            if request.method == "POST":
                body = json.loads(request.content)
                self.posts.append((path, body))
                return httpx.Response(201, json=repo_json(body["name"], private=body["private"]))
            return httpx.Response(200, json=[repo_json("site"), repo_json("notes", private=True)])
        if path == "/repos/octocat/site/branches":
            return httpx.Response(
                200,
                json=[
                    {"name": "main", "commit": {"sha": "head"}, "protected": True},
                    {"name": "gh-pages", "commit": {"sha": "pages"}},
                ],
            )
        if path == "/repos/octocat/site/git/refs":
            self.posts.append((path, json.loads(request.content)))
            return httpx.Response(201, json={"ref": "refs/heads/new"})
        if path == "/repos/octocat/site":
            if not self.repo_exists:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=repo_json("site"))
        if path.startswith("/repos/octocat/site/branches/"):
            if not self.branch_exists:
                return httpx.Response(404, json={"message": "Branch not found"})
            return httpx.Response(
                200, json={"name": path.rsplit("/", 1)[1], "commit": {"sha": "head"}}
            )
        prefix = "/repos/octocat/site/contents/"
        if path.startswith(prefix):
            file_path = path[len(prefix) :]
            if request.method == "GET":
                if file_path in self.existing:
                    return httpx.Response(200, json={"sha": self.existing[file_path]})
                return httpx.Response(404, json={"message": "Not Found"})
            if request.method == "PUT":
                if file_path == self.fail_put:
                    return httpx.Response(409, json={"message": "sha mismatch"})
                self.puts.append((file_path, json.loads(request.content)))
                return httpx.Response(201, json={"content": {"path": file_path}})
        return httpx.Response(404, json={"message": "Not Found"})


def _localized(en: str, ua: str) -> dict[str, str]:
    return {"en": en, "ua": ua, "ru": "", "pl": ""}


@pytest.fixture
def portfolio_data() -> dict[str, Any]:
    """Editor JSON for a complete five-section portfolio in en and ua."""
    return {
        "id": "portfolio-1",
        "name": "Jane Doe",
        "slug": "jane-doe",
        "theme": {"primaryColor": "#2563eb", "mode": "dark"},
        "defaultLocale": "en",
        "enabledLocales": ["en", "ua"],
        "sections": [
            {
                "id": "hero-1",
                "type": "hero",
                "effects": {"parallax": 0.5, "blur": False, "has3d": False},
                "data": {
                    "headline": _localized("Hello, I build things", "Привіт, я створюю речі"),
                    "subheadline": _localized("Backend engineer", "Бекенд-інженер"),
                    "ctaButton": _localized("Contact me", "Напишіть мені"),
                    "ctaLink": "#contact-1",
                    "ctaColor": "#ff5500",
                },
            },
            {
                "id": "about-1",
                "type": "about",
                "data": {
                    "title": _localized("About", "Про мене"),
                    "paragraph": _localized("I like APIs.", "Я люблю API."),
                    "avatar": {"url": AVATAR_URL, "alt": "Portrait of Jane"},
                    "tags": ["python", "rust"],
                },
            },
            {
                "id": "skills-1",
                "type": "skills",
                "data": {
                    "title": _localized("Skills", "Навички"),
                    "skills": [
                        {"id": "s1", "name": "Python", "level": 90},
                        {"id": "s2", "name": "SQL", "level": 75},
                    ],
                },
            },
            {
                "id": "projects-1",
                "type": "projects",
                "data": {
                    "title": _localized("Projects", "Проєкти"),
                    "projects": [
                        {
                            "id": "p1",
                            "title": _localized("Scheduler", "Планувальник"),
                            "description": _localized("Cron as a service", "Cron як сервіс"),
                            "image": {"url": PROJECT_URL, "alt": "Scheduler dashboard"},
                            "tags": ["go"],
                            "link": "https://example.com/scheduler",
                        }
                    ],
                },
            },
            {
                "id": "contact-1",
                "type": "contact",
                "effects": {"parallax": 0, "blur": True, "has3d": False},
                "data": {
                    "title": _localized("Contact", "Контакти"),
                    "email": "jane@example.com",
                    "socialLinks": [
                        {"id": "l1", "platform": "github", "url": "https://github.com/jane"},
                        {"id": "l2", "platform": "mastodon", "url": "https://mastodon.social/@jane"},
                    ],
                },
            },
        ],
    }


@pytest.fixture
def make_portfolio(portfolio_data: dict[str, Any]) -> Callable[..., Portfolio]:
    """Build a portfolio from the fixture data after applying an edit function."""

    def _make(edit: Callable[[dict[str, Any]], None] | None = None) -> Portfolio:
        data = copy.deepcopy(portfolio_data)
        if edit is not None:
            edit(data)
        return Portfolio.model_validate(data)

    return _make


@pytest.fixture
def portfolio(make_portfolio: Callable[..., Portfolio]) -> Portfolio:
    """The complete portfolio, valid for export."""
    return make_portfolio()


@pytest.fixture
def image_source() -> FakeImageSource:
    return FakeImageSource()


@pytest.fixture
def portfolio_file(tmp_path: Path, portfolio_data: dict[str, Any]) -> Path:
    """The complete portfolio written as an editor JSON document."""
    path = tmp_path / "portfolio.json"
    path.write_text(json.dumps(portfolio_data, ensure_ascii=False), encoding="utf-8")
    return path


def section(data: dict[str, Any], section_id: str) -> dict[str, Any]:
    """Find a section dict by id in editor JSON."""
    return next(s for s in data["sections"] if s["id"] == section_id)


@pytest.fixture
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for an httpx.MockTransport that records requests.

    The handler receives each request; recorded requests are on ``transport.requests``.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(_record)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return _make
