"""Configuration loading and validation."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class AuthConfig(BaseModel):
    """GitHub authentication configuration."""

    token_env: str = "GITHUB_TOKEN"


class GitHubConfig(BaseModel):
    """GitHub configuration section."""

    organization: str = Field(min_length=1)
    api_url: str = "https://api.github.com"
    auth: AuthConfig = Field(default_factory=AuthConfig)


class WindowConfig(BaseModel):
    """Trailing window configuration."""

    days: int = Field(default=365, ge=1)
    as_of: datetime | None = Field(
        default=None, description="Reference instant; defaults to now at run start"
    )

    @field_validator("as_of")
    @classmethod
    def normalize_as_of(cls, v: datetime | None) -> datetime | None:
        """Interpret naive timestamps as UTC."""
        if v is None:
            return None
        return v.replace(tzinfo=UTC) if v.tzinfo is None else v.astimezone(UTC)


class CollectionConfig(BaseModel):
    """Collection configuration section."""

    max_concurrency: int = Field(default=1, ge=1, le=10)
    max_commit_pages: int = Field(default=20, ge=1, description="Pages of commits per repo")
    max_pull_pages: int = Field(default=10, ge=1, description="Pages of pull requests per repo")
    max_issue_pages: int = Field(default=10, ge=1, description="Pages of issues per repo")
    per_page: int = Field(default=100, ge=1, le=100)
    include_code_frequency: bool = True
    per_repo_reports: bool = True


class BotConfig(BaseModel):
    """Bot detection patterns."""

    exclude_patterns: list[str] = Field(
        default_factory=lambda: [r".*\[bot\]$", r"^dependabot$", r"^github-actions$"]
    )
    include_overrides: list[str] = Field(default_factory=list)


class IdentityConfig(BaseModel):
    """Identity handling for contributor ranking."""

    exclude_bots: bool = False
    bots: BotConfig = Field(default_factory=BotConfig)


class RankingConfig(BaseModel):
    """Contributor ranking caps."""

    org_top_n: int = Field(default=20, ge=1)
    repo_top_n: int = Field(default=10, ge=1)
    fetch_avatars: bool = True


class ReportConfig(BaseModel):
    """Report output configuration."""

    title: str = "Contribution Report"
    output_dir: Path = Field(default=Path("./reports"))
    html: bool = True
    pdf: bool = True


class Config(BaseModel):
    """Root configuration model."""

    github: GitHubConfig
    window: WindowConfig = Field(default_factory=WindowConfig)
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    def resolve_as_of(self) -> datetime:
        """Return the frozen reference instant for a run.

        Returns:
            The configured as_of, or the current UTC time.
        """
        return self.window.as_of or datetime.now(UTC)


def load_config(path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] = yaml.safe_load(f) or {}

    return Config.model_validate(raw_config)
