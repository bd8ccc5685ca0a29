"""Publishing generated sites to GitHub."""

from .credentials import (
    LastPushSettings,
    get_last_push_settings,
    has_token,
    load_token,
    remove_token,
    resolve_token,
    save_last_push_settings,
    save_token,
)
from .github import (
    GitHubAPIError,
    GitHubBranch,
    GitHubClient,
    GitHubRepo,
    GitHubUser,
    encode_content,
    github_pages_url,
)
from .publisher import (
    GitHubPublisher,
    ProgressCallback,
    PublishConfig,
    PublishProgress,
    PublishResult,
    default_commit_message,
)
from .store import JSONFileStore, KeyValueStore, MemoryStore

__all__ = [
    "GitHubAPIError",
    "GitHubBranch",
    "GitHubClient",
    "GitHubPublisher",
    "GitHubRepo",
    "GitHubUser",
    "JSONFileStore",
    "KeyValueStore",
    "LastPushSettings",
    "MemoryStore",
    "ProgressCallback",
    "PublishConfig",
    "PublishProgress",
    "PublishResult",
    "default_commit_message",
    "encode_content",
    "get_last_push_settings",
    "github_pages_url",
    "has_token",
    "load_token",
    "remove_token",
    "resolve_token",
    "save_last_push_settings",
    "save_token",
]
