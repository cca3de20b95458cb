#!/usr/bin/env python3
"""Programmatic issue creation example.

This demonstrates using the components directly, without the interactive flow:

* load settings from the environment / `.env`
* resolve the token from the credential store
* detect the GitHub repository of a working tree
* create an issue

Run `github-issue-creator configure-token` once before using it.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from github_issue_creator.auth.token_store import JsonFileSecretStore, TokenManager
from github_issue_creator.config import IssueCreatorSettings
from github_issue_creator.git.remotes import detect_repository_at
from github_issue_creator.github.client import GitHubApiClient, GitHubApiError, IssueRequest
from github_issue_creator.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a GitHub issue (programmatic example).")
    parser.add_argument("--path", default=".", help="Directory inside the Git working tree")
    parser.add_argument("--title", required=True, help="Issue title")
    parser.add_argument("--body", default="", help="Issue body")
    parser.add_argument(
        "--labels",
        default="",
        help='Comma-separated labels, e.g. "bug,docs" (optional)',
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    labels = [label.strip() for label in args.labels.split(",") if label.strip()]

    settings = IssueCreatorSettings()
    configure_logging(settings.log_level)

    tokens = TokenManager(
        JsonFileSecretStore(settings.credentials_file), env_token=settings.github_token
    )
    token = tokens.get_token()
    if token is None:
        print("No GitHub token configured.")
        return 2

    repository = detect_repository_at(Path(args.path))
    if repository is None:
        print("No GitHub repository detected.")
        return 3

    client = GitHubApiClient(token=token, base_url=settings.github_base_url)
    print(f"Known labels: {', '.join(client.list_labels(repository)) or 'none'}")

    try:
        issue = client.create_issue(
            repository,
            IssueRequest(title=args.title, body=args.body or None, labels=labels),
        )
    except GitHubApiError as exc:
        print(str(exc))
        return 1

    print(f"Created issue #{issue.number}: {issue.title}")
    print(f"URL: {issue.url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
