"""Test configuration and fixtures."""

from __future__ import annotations

import logging

import pytest

from github_issue_creator.git.remote_parser import RepositoryRef
from github_issue_creator.logging import JsonFormatter


@pytest.fixture
def repository() -> RepositoryRef:
    """Provide the repository most tests act on."""
    return RepositoryRef(owner="octo-org", name="octo-repo")


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's own configuration out of the tests."""
    for name in (
        "GITHUB_ISSUE_CREATOR_TOKEN",
        "GITHUB_BASE_URL",
        "LOG_LEVEL",
        "GITHUB_ISSUE_CREATOR_CREDENTIALS_PATH",
        "GITHUB_ISSUE_CREATOR_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """`configure_logging` installs a root JSON handler; remove it after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
