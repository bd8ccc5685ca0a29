"""Input validation models using Pydantic.

These models validate user inputs before they reach the services,
preventing invalid states and providing user-friendly error messages.
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Classic PATs (ghp_ + 36), fine-grained PATs (github_pat_ + 82), legacy 40-hex tokens
TOKEN_PATTERNS = (
    re.compile(r"^ghp_[a-zA-Z0-9]{36}$"),
    re.compile(r"^github_pat_[a-zA-Z0-9_]{82}$"),
    re.compile(r"^[a-fA-F0-9]{40}$"),
)
REPO_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")
BRANCH_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9/_-]+$")
OWNER_PATTERN = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9]|-(?=[a-zA-Z0-9])){0,38}$")


def is_valid_token(token: str) -> bool:
    """Check a GitHub token has a recognized format."""
    return any(pattern.match(token) for pattern in TOKEN_PATTERNS)


def is_valid_repo_name(name: str) -> bool:
    """Check a GitHub repository name."""
    return (
        0 < len(name) <= 100
        and bool(REPO_NAME_PATTERN.match(name))
        and not name.startswith(".")
        and not name.endswith(".git")
    )


def is_valid_branch_name(name: str) -> bool:
    """Check a branch name (conservative subset of git's rules)."""
    return (
        0 < len(name) <= 250
        and bool(BRANCH_NAME_PATTERN.match(name))
        and not name.startswith("/")
        and not name.endswith("/")
        and ".." not in name
    )


class DocumentInput(BaseModel):
    """Validated path to a portfolio JSON document."""

    path: Path = Field(description="Path to the portfolio JSON document")

    @field_validator("path")
    @classmethod
    def validate_exists(cls, v: Path) -> Path:
        if not v.is_file():
            raise ValueError(f"Document not found: {v}")
        return v


class PublishInput(BaseModel):
    """Validated input for publishing to GitHub."""

    repo: str = Field(description="Repository as owner/name")
    branch: str = Field(default="main", description="Target branch")
    base_path: Literal["/", "/docs"] = Field(default="/", description="Directory in the repo")

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        """Validate owner/name format."""
        owner, sep, name = v.partition("/")
        if not sep or not OWNER_PATTERN.match(owner) or not is_valid_repo_name(name):
            raise ValueError(
                "Invalid repository. Use owner/name, e.g. 'octocat/portfolio'."
            )
        return v

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, v: str) -> str:
        if not is_valid_branch_name(v):
            raise ValueError(f"Invalid branch name: '{v}'")
        return v

    @property
    def owner(self) -> str:
        return self.repo.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repo.split("/", 1)[1]


class RepositoryInput(BaseModel):
    """Validated input for creating a repository."""

    name: str = Field(description="Repository name, without the owner")
    private: bool = False
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not is_valid_repo_name(v):
            raise ValueError(f"Invalid repository name: '{v}'")
        return v


class TokenInput(BaseModel):
    """Validated GitHub token for `auth login`."""

    token: str = Field(min_length=1)

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        v = v.strip()
        if not is_valid_token(v):
            raise ValueError("Invalid token format. Please check your token.")
        return v
