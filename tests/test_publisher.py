"""Tests for GitHub publishing against a mock GitHub API."""

import asyncio
import base64
from collections.abc import Callable

import httpx
import pytest

from portfolio_export.config import settings
from portfolio_export.models import GeneratedFile
from portfolio_export.publishing import (
    GitHubAPIError,
    GitHubClient,
    GitHubPublisher,
    MemoryStore,
    PublishConfig,
    PublishProgress,
    get_last_push_settings,
    github_pages_url,
    save_token,
)
from portfolio_export.services import ExportService, PublishError, PublishService

from conftest import FakeGitHub, FakeImageSource, section

TOKEN = "ghp_" + "a" * 36


FILES = [
    GeneratedFile("assets/css/style.css", "body {}"),
    GeneratedFile("en/index.html", "<p>Привіт</p>"),
    GeneratedFile("assets/img/avatar-0.png", b"\x89PNG"),
]


def push(github: FakeGitHub, config: PublishConfig, token: str | None = TOKEN, files=FILES):
    progress: list[PublishProgress] = []
    publisher = GitHubPublisher(token, transport=httpx.MockTransport(github), delay=0)
    result = asyncio.run(publisher.push(config, files, progress.append))
    return result, progress


@pytest.fixture
def config() -> PublishConfig:
    return PublishConfig(owner="octocat", repo="site", branch="main", message="Publish site")


class TestPreconditions:
    """Test failures that must stop before any write."""

    def test_missing_token(self, config) -> None:
        github = FakeGitHub()
        result, progress = push(github, config, token=None)
        assert not result.success
        assert "token" in result.error.lower()
        assert result.failed_path is None
        assert github.puts == []
        assert progress[-1].status == "error"

    def test_missing_repository(self, config) -> None:
        github = FakeGitHub(repo_exists=False)
        result, _ = push(github, config)
        assert not result.success
        assert "octocat/site" in result.error
        assert "Not Found" in result.error
        assert github.puts == []

    def test_missing_branch(self, config) -> None:
        github = FakeGitHub(branch_exists=False)
        result, _ = push(github, config)
        assert not result.success
        assert 'Branch "main"' in result.error
        assert result.files_updated == 0
        assert github.puts == []

    def test_non_json_response_is_reported(self, config) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy</html>")

        publisher = GitHubPublisher(TOKEN, transport=httpx.MockTransport(handler), delay=0)
        result = asyncio.run(publisher.push(config, FILES))
        assert not result.success
        assert "non-JSON response" in result.error
        assert result.files_updated == 0


class TestPush:
    """Test per-file writes."""

    def test_creates_files_in_order(self, config) -> None:
        github = FakeGitHub()
        result, _ = push(github, config)
        assert result.success
        assert result.files_updated == 3
        assert result.commit_url == "https://github.com/octocat/site/tree/main"
        assert [path for path, _ in github.puts] == [f.path for f in FILES]

    def test_payload_encoding(self, config) -> None:
        github = FakeGitHub()
        push(github, config)
        _, html_payload = github.puts[1]
        assert html_payload["message"] == "Publish site"
        assert html_payload["branch"] == "main"
        assert base64.b64decode(html_payload["content"]).decode("utf-8") == "<p>Привіт</p>"
        assert "sha" not in html_payload
        assert base64.b64decode(github.puts[2][1]["content"]) == b"\x89PNG"

    def test_existing_file_updated_with_sha(self, config) -> None:
        github = FakeGitHub(existing={"en/index.html": "abc123"})
        push(github, config)
        assert github.puts[1][1]["sha"] == "abc123"

    def test_docs_base_path(self) -> None:
        github = FakeGitHub()
        config = PublishConfig(owner="octocat", repo="site", branch="main", base_path="/docs")
        push(github, config)
        assert [path for path, _ in github.puts] == [
            "docs/assets/css/style.css",
            "docs/en/index.html",
            "docs/assets/img/avatar-0.png",
        ]

    def test_default_commit_message(self) -> None:
        github = FakeGitHub()
        push(github, PublishConfig(owner="octocat", repo="site", branch="main"))
        assert github.puts[0][1]["message"].startswith("chore: portfolio export ")

    def test_write_failure_stops_push(self, config) -> None:
        github = FakeGitHub(fail_put="en/index.html")
        result, progress = push(github, config)
        assert not result.success
        assert result.failed_path == "en/index.html"
        assert result.files_updated == 1
        assert "sha mismatch" in result.error
        assert [path for path, _ in github.puts] == ["assets/css/style.css"]
        assert progress[-1].status == "error"

    def test_progress_sequence(self, config) -> None:
        _, progress = push(FakeGitHub(), config)
        assert [p.status for p in progress] == [
            "validating",
            "checking-repo",
            "uploading",
            "uploading",
            "uploading",
            "uploading",
            "done",
        ]
        uploads = [(p.current, p.total) for p in progress if p.status == "uploading"]
        assert uploads == [(0, 3), (1, 3), (2, 3), (3, 3)]


class TestPublishConfig:
    @pytest.mark.parametrize(
        ("base_path", "expected"),
        [("/", "en/index.html"), ("/docs", "docs/en/index.html")],
    )
    def test_target_path(self, base_path: str, expected: str) -> None:
        config = PublishConfig(owner="o", repo="r", branch="main", base_path=base_path)
        assert config.target_path("en/index.html") == expected


class TestGitHubClient:
    """Test client operations and error mapping."""

    def run(self, handler: Callable[[httpx.Request], httpx.Response], operation):
        async def _run():
            async with GitHubClient(TOKEN, transport=httpx.MockTransport(handler)) as client:
                return await operation(client)

        return asyncio.run(_run())

    def test_get_user(self) -> None:
        user = self.run(FakeGitHub(), lambda c: c.get_user())
        assert user.login == "octocat"

    def test_get_repo(self) -> None:
        repo = self.run(FakeGitHub(), lambda c: c.get_repo("octocat", "site"))
        assert repo.full_name == "octocat/site"
        assert repo.owner == "octocat"

    def test_error_uses_github_message(self) -> None:
        with pytest.raises(GitHubAPIError, match="Not Found") as exc_info:
            self.run(FakeGitHub(repo_exists=False), lambda c: c.get_repo("octocat", "site"))
        assert exc_info.value.is_not_found

    def test_error_without_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502)

        async def _run():
            async with GitHubClient(TOKEN, transport=httpx.MockTransport(handler)) as client:
                await client.get_user()

        with pytest.raises(GitHubAPIError, match="GitHub API error: 502"):
            asyncio.run(_run())

    def test_file_sha_none_when_missing(self) -> None:
        sha = self.run(
            FakeGitHub(), lambda c: c.get_file_sha("octocat", "site", "en/index.html", "main")
        )
        assert sha is None

    def test_headers(self, mock_transport) -> None:
        transport = mock_transport(lambda request: httpx.Response(200, json={"login": "x", "id": 2}))

        async def _run():
            async with GitHubClient(TOKEN, transport=transport) as client:
                await client.get_user()

        asyncio.run(_run())
        request = transport.requests[0]
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert request.headers["X-GitHub-Api-Version"] == settings.github_api_version

    def test_list_repos(self, mock_transport) -> None:
        transport = mock_transport(FakeGitHub())

        async def _run():
            async with GitHubClient(TOKEN, transport=transport) as client:
                return await client.list_repos(page=2)

        repos = asyncio.run(_run())
        assert [(r.full_name, r.private) for r in repos] == [
            ("octocat/site", False),
            ("octocat/notes", True),
        ]
        assert transport.requests[0].url.params["page"] == "2"

    def test_create_repo(self) -> None:
        github = FakeGitHub()
        repo = self.run(github, lambda c: c.create_repo("portfolio", private=True))
        assert repo.full_name == "octocat/portfolio"
        assert repo.private
        path, body = github.posts[0]
        assert path == "/user/repos"
        assert body["auto_init"] is True
        assert body["description"] == "Portfolio site"

    def test_list_branches(self) -> None:
        branches = self.run(FakeGitHub(), lambda c: c.list_branches("octocat", "site"))
        assert [(b.name, b.sha, b.protected) for b in branches] == [
            ("main", "head", True),
            ("gh-pages", "pages", False),
        ]

    def test_create_branch_from_source_head(self) -> None:
        github = FakeGitHub()
        branch = self.run(github, lambda c: c.create_branch("octocat", "site", "preview"))
        assert (branch.name, branch.sha) == ("preview", "head")
        assert github.posts == [
            ("/repos/octocat/site/git/refs", {"ref": "refs/heads/preview", "sha": "head"})
        ]

    def test_non_json_body_raises_api_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy</html>")

        with pytest.raises(GitHubAPIError, match="non-JSON response") as exc_info:
            self.run(handler, lambda c: c.get_user())
        assert exc_info.value.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"full_name": "octocat/site"},
            [],
            {"id": 7, "name": "site", "full_name": "octocat/site", "owner": None},
        ],
        ids=["missing-keys", "wrong-type", "null-owner"],
    )
    def test_malformed_repository_raises_api_error(self, body) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        with pytest.raises(GitHubAPIError, match="Malformed repository response"):
            self.run(handler, lambda c: c.get_repo("octocat", "site"))


@pytest.mark.parametrize(
    ("owner", "repo", "expected"),
    [
        ("Octocat", "site", "https://octocat.github.io/site"),
        ("octocat", "octocat.github.io", "https://octocat.github.io"),
    ],
)
def test_github_pages_url(owner: str, repo: str, expected: str) -> None:
    assert github_pages_url(owner, repo) == expected


class TestPublishService:
    """Test generating and publishing in one step."""

    @pytest.fixture(autouse=True)
    def no_env_token(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "github_token", "")

    def make_service(self, store, github: FakeGitHub) -> PublishService:
        return PublishService(
            store=store,
            export_service=ExportService(image_source=FakeImageSource()),
            transport=httpx.MockTransport(github),
            delay=0,
        )

    def test_publishes_and_remembers_settings(self, portfolio, config) -> None:
        store = MemoryStore()
        save_token(store, TOKEN)
        github = FakeGitHub()
        outcome = asyncio.run(self.make_service(store, github).publish(portfolio, False, config))
        assert outcome.result.success
        assert outcome.errors == []
        assert [path for path, _ in github.puts] == [
            "assets/css/style.css",
            "assets/js/main.js",
            "en/index.html",
            "ua/index.html",
        ]
        saved = get_last_push_settings(store, "portfolio-1")
        assert saved is not None
        assert (saved.owner, saved.repo, saved.branch) == ("octocat", "site", "main")

    def test_validation_errors_block_publish(self, make_portfolio, config) -> None:
        def edit(data: dict) -> None:
            section(data, "contact-1")["data"]["email"] = ""

        store = MemoryStore()
        save_token(store, TOKEN)
        github = FakeGitHub()
        outcome = asyncio.run(
            self.make_service(store, github).publish(make_portfolio(edit), False, config)
        )
        assert not outcome.result.success
        assert outcome.result.error == "Contact section missing email address"
        assert len(outcome.errors) == 1
        assert github.puts == []

    def test_missing_token(self, portfolio, config) -> None:
        store = MemoryStore()
        github = FakeGitHub()
        outcome = asyncio.run(self.make_service(store, github).publish(portfolio, False, config))
        assert not outcome.result.success
        assert get_last_push_settings(store, "portfolio-1") is None
        assert github.puts == []

    def test_last_config_without_history(self, portfolio) -> None:
        service = self.make_service(MemoryStore(), FakeGitHub())
        with pytest.raises(PublishError, match="No previous publish"):
            service.last_config(portfolio)

    def test_last_config_after_publish(self, portfolio, config) -> None:
        store = MemoryStore()
        save_token(store, TOKEN)
        service = self.make_service(store, FakeGitHub())
        asyncio.run(service.publish(portfolio, False, config))

        again = service.last_config(portfolio, message="Refresh")
        assert (again.owner, again.repo, again.branch, again.base_path) == (
            "octocat",
            "site",
            "main",
            "/",
        )
        assert again.message == "Refresh"
