"""Read named remotes from a Git working tree."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from github_issue_creator.git.remote_parser import GitRemote, RepositoryRef, detect_repository

logger = logging.getLogger(__name__)

_REMOTE_URL_KEY = r"^remote\..*\.url$"


def read_remotes(path: Path) -> list[GitRemote]:
    """Return the remotes configured for the repository containing `path`.

    Remotes keep the order in which git reports them; only the first URL of a remote
    with several `url` entries is kept. Anything that prevents reading remotes (not a
    repository, no remotes, no git executable) yields an empty list.
    """

    try:
        result = subprocess.run(
            ["git", "config", "--get-regexp", _REMOTE_URL_KEY],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError:
        logger.debug("git executable not found", extra={"path": str(path)})
        return []
    except subprocess.CalledProcessError as e:
        # Exit status 1 means "no matching keys"; anything else is not a repository.
        logger.debug(
            "No git remotes found",
            extra={"path": str(path), "returncode": e.returncode, "stderr": e.stderr.strip()},
        )
        return []

    return parse_remote_config(result.stdout)


def parse_remote_config(output: str) -> list[GitRemote]:
    """Parse `git config --get-regexp` output into remotes."""

    remotes: list[GitRemote] = []
    seen: set[str] = set()
    for line in output.splitlines():
        key, _, url = line.strip().partition(" ")
        if not key.startswith("remote.") or not key.endswith(".url") or not url:
            continue
        name = key[len("remote.") : -len(".url")]
        if not name or name in seen:
            continue
        seen.add(name)
        remotes.append(GitRemote(name=name, url=url.strip()))
    return remotes


def detect_repository_at(path: Path) -> RepositoryRef | None:
    """Detect the GitHub repository for the working tree at `path`."""

    remotes = read_remotes(path)
    repository = detect_repository(remotes)
    logger.debug(
        "Repository detection finished",
        extra={
            "path": str(path),
            "remotes": [r.name for r in remotes],
            "repository": repository.full_name if repository else None,
        },
    )
    return repository
