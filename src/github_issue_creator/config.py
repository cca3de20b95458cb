"""Configuration for the issue creator.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The token is normally kept in the credential store (see `configure-token`). To avoid
collisions with other tools that also read `GITHUB_TOKEN`, an environment override uses
a dedicated variable: `GITHUB_ISSUE_CREATOR_TOKEN`.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CREDENTIALS_PATH = Path("~/.config/github-issue-creator/credentials.json")


class IssueCreatorSettings(BaseSettings):
    """Settings for the issue creator.

    Environment variables:
    - GITHUB_ISSUE_CREATOR_TOKEN             (optional)
    - GITHUB_BASE_URL                        (optional)
    - LOG_LEVEL                              (optional)
    - GITHUB_ISSUE_CREATOR_CREDENTIALS_PATH  (optional)
    - GITHUB_ISSUE_CREATOR_TIMEOUT           (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `IssueCreatorSettings(_env_file=path_to_env)`.
    """

    github_token: str | None = Field(
        default=None,
        validation_alias="GITHUB_ISSUE_CREATOR_TOKEN",
        description="Token that takes precedence over the stored credential",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    credentials_path: Path = Field(
        default=DEFAULT_CREDENTIALS_PATH,
        validation_alias="GITHUB_ISSUE_CREATOR_CREDENTIALS_PATH",
        description="JSON file where the personal access token is stored",
    )

    request_timeout: float | None = Field(
        default=None,
        gt=0,
        validation_alias="GITHUB_ISSUE_CREATOR_TIMEOUT",
        description="HTTP timeout in seconds (unset means no client-side timeout)",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    @field_validator("github_token")
    @classmethod
    def _blank_token_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def credentials_file(self) -> Path:
        """Credential store location with `~` expanded."""

        return self.credentials_path.expanduser()
