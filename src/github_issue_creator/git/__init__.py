"""Git remote discovery and GitHub repository detection."""

from github_issue_creator.git.remote_parser import (
    GitRemote,
    RepositoryRef,
    detect_repository,
    parse_github_url,
    select_remote,
)
from github_issue_creator.git.remotes import detect_repository_at, read_remotes

__all__ = [
    "GitRemote",
    "RepositoryRef",
    "detect_repository",
    "detect_repository_at",
    "parse_github_url",
    "read_remotes",
    "select_remote",
]
