"""GitHub REST API access."""

from github_issue_creator.github.client import (
    GitHubApiClient,
    GitHubApiError,
    IssueRequest,
    IssueResult,
    Milestone,
)

__all__ = [
    "GitHubApiClient",
    "GitHubApiError",
    "IssueRequest",
    "IssueResult",
    "Milestone",
]
