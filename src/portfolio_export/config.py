"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HTTP (reachability checks and asset downloads)
    http_timeout: float = 30.0
    http_user_agent: str = f"PortfolioExport/{__version__}"

    # Archive
    archive_compression_level: int = Field(default=6, ge=1, le=9)
    asset_dir_prefix: str = "assets/img"

    # GitHub publishing
    github_api_url: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    github_token: str = ""  # Takes precedence over a token saved with `auth login`
    publish_delay_seconds: float = 0.1  # Pause between file writes (rate limits)

    # Optional path overrides; empty means "use the project data directory"
    state_path: str = ""
    output_path: str = ""

    @property
    def has_github_token(self) -> bool:
        """Check if a GitHub token is configured in the environment."""
        return bool(self.github_token)

    # Paths (computed from project root)
    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        # config.py is at src/portfolio_export/config.py, so go up 3 levels
        return Path(__file__).parent.parent.parent

    @property
    def data_dir(self) -> Path:
        """Get the data directory."""
        return self.project_root / "data"

    @property
    def state_file(self) -> Path:
        """Get the JSON file backing the key-value store."""
        if self.state_path:
            return Path(self.state_path)
        return self.data_dir / "state.json"

    @property
    def output_dir(self) -> Path:
        """Get the default archive output directory."""
        if self.output_path:
            return Path(self.output_path)
        return self.data_dir / "output"

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for dir_path in [self.output_dir, self.state_file.parent]:
            dir_path.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
