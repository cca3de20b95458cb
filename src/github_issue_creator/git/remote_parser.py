"""GitHub repository detection from Git remote URLs.

Supports both HTTPS and SSH remotes:
- https://github.com/owner/repo.git
- git@github.com:owner/repo.git
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

_HTTPS_PATTERN = re.compile(r"https://github\.com/([^/]+)/([^/.]+)(?:\.git)?")
_SSH_PATTERN = re.compile(r"git@github\.com:([^/]+)/([^/.]+)(?:\.git)?")

PREFERRED_REMOTE = "origin"


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """A GitHub repository identified by owner and name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True, slots=True)
class GitRemote:
    """A named remote and its (first) URL."""

    name: str
    url: str


def parse_github_url(url: str) -> RepositoryRef | None:
    """Extract owner and repository name from a GitHub remote URL.

    Returns None when the URL is not one of the recognized GitHub shapes.
    """

    for pattern in (_HTTPS_PATTERN, _SSH_PATTERN):
        match = pattern.search(url)
        if match is not None:
            owner, name = match.groups()
            return RepositoryRef(owner=owner, name=name)
    return None


def select_remote(remotes: Sequence[GitRemote]) -> GitRemote | None:
    """Pick `origin` when present, otherwise the first remote."""

    for remote in remotes:
        if remote.name == PREFERRED_REMOTE:
            return remote
    return remotes[0] if remotes else None


def detect_repository(remotes: Sequence[GitRemote]) -> RepositoryRef | None:
    """Resolve the GitHub repository for a set of remotes.

    Only the selected remote is parsed; other remotes are not consulted when its URL
    is not a GitHub URL.
    """

    remote = select_remote(remotes)
    if remote is None:
        return None
    return parse_github_url(remote.url)
