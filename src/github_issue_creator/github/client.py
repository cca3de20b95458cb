"""GitHub REST API client for issue creation.

Each call opens its own `requests.Session` and closes it before returning, so no
connection outlives the request that used it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import requests

from github_issue_creator import __version__
from github_issue_creator.git.remote_parser import RepositoryRef

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubApiError(RuntimeError):
    """Raised when the GitHub API rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class IssueRequest:
    """Fields of an issue to be created."""

    title: str
    body: str | None = None
    labels: Sequence[str] = field(default_factory=tuple)
    assignees: Sequence[str] = field(default_factory=tuple)
    milestone_number: int | None = None

    def to_payload(self) -> dict[str, Any]:
        """Request body; optional fields are omitted rather than sent empty."""

        payload: dict[str, Any] = {"title": self.title}
        if self.body:
            payload["body"] = self.body
        if self.labels:
            payload["labels"] = list(self.labels)
        if self.assignees:
            payload["assignees"] = list(self.assignees)
        if self.milestone_number is not None:
            payload["milestone"] = self.milestone_number
        return payload


@dataclass(frozen=True, slots=True)
class IssueResult:
    """Minimal issue metadata returned from GitHub."""

    number: int
    title: str
    url: str
    state: str


@dataclass(frozen=True, slots=True)
class Milestone:
    number: int
    title: str
    state: str

    @property
    def is_open(self) -> bool:
        return self.state == "open"


class GitHubApiClient:
    """Small client for the three issue-related endpoints we need."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._token = token
        self._rest_base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session_factory = session_factory

    def _repo_url(self, ref: RepositoryRef, path: str) -> str:
        path = path.lstrip("/")
        return f"{self._rest_base_url}/repos/{ref.owner}/{ref.name}/{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": f"github-issue-creator/{__version__}",
        }

    def create_issue(self, ref: RepositoryRef, request: IssueRequest) -> IssueResult:
        """Create an issue and return its number, title, URL and state.

        Raises:
            GitHubApiError: On any response other than 201 Created, or when GitHub
                cannot be reached.
        """

        url = self._repo_url(ref, "issues")
        headers = {**self._headers(), "Content-Type": "application/json"}
        payload = request.to_payload()

        logger.info(
            "Creating issue",
            extra={"repository": ref.full_name, "fields": sorted(payload)},
        )
        try:
            with self._session_factory() as session:
                resp = session.post(url, json=payload, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning(
                "Issue creation request failed", extra={"repository": ref.full_name}
            )
            raise GitHubApiError(f"Failed to create issue: {e}") from e

        if resp.status_code != 201:
            detail = _error_detail(resp)
            logger.warning(
                "Issue creation rejected",
                extra={"repository": ref.full_name, "status": resp.status_code},
            )
            raise GitHubApiError(
                f"Failed to create issue (HTTP {resp.status_code}): {detail}",
                status_code=resp.status_code,
            )

        result = _parse_issue(resp)
        logger.info(
            "Issue created", extra={"repository": ref.full_name, "issue_number": result.number}
        )
        return result

    def list_labels(self, ref: RepositoryRef) -> list[str]:
        """Label names defined in the repository; empty when they cannot be fetched."""

        items = self._get_json_list(ref, "labels")
        names: list[str] = []
        for item in items:
            name = item.get("name")
            if isinstance(name, str) and name:
                names.append(name)
        return names

    def list_milestones(self, ref: RepositoryRef) -> list[Milestone]:
        """Milestones of the repository; empty when they cannot be fetched."""

        milestones: list[Milestone] = []
        for item in self._get_json_list(ref, "milestones"):
            number = item.get("number")
            title = item.get("title")
            state = item.get("state")
            if not isinstance(number, int) or not isinstance(title, str):
                continue
            milestones.append(
                Milestone(number=number, title=title, state=state if isinstance(state, str) else "")
            )
        return milestones

    def _get_json_list(self, ref: RepositoryRef, path: str) -> list[dict[str, Any]]:
        """GET a repository endpoint returning a JSON list.

        Never raises: these lists only enrich the issue form, so failures are logged and
        reported as an empty list.
        """

        url = self._repo_url(ref, path)
        try:
            with self._session_factory() as session:
                resp = session.get(url, headers=self._headers(), timeout=self._timeout)
            if resp.status_code != 200:
                logger.warning(
                    "Could not fetch repository %s",
                    path,
                    extra={"repository": ref.full_name, "status": resp.status_code},
                )
                return []
            payload = resp.json()
        except (requests.RequestException, ValueError):
            logger.warning(
                "Could not fetch repository %s",
                path,
                extra={"repository": ref.full_name},
                exc_info=True,
            )
            return []

        if not isinstance(payload, list):
            logger.warning(
                "Unexpected %s response shape", path, extra={"repository": ref.full_name}
            )
            return []
        return [p for p in payload if isinstance(p, dict)]


def _error_detail(resp: requests.Response) -> str:
    """GitHub's error `message` when the body is JSON, otherwise the raw body."""

    text = resp.text
    try:
        data = resp.json()
    except ValueError:
        return text or "Unknown error"
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return text or "Unknown error"


def _parse_issue(resp: requests.Response) -> IssueResult:
    try:
        data = resp.json()
    except ValueError as e:
        raise GitHubApiError(
            "Unexpected create issue response: body is not JSON", status_code=resp.status_code
        ) from e
    if not isinstance(data, dict):
        raise GitHubApiError(
            "Unexpected create issue response: expected an object", status_code=resp.status_code
        )

    number = data.get("number")
    html_url = data.get("html_url")
    if not isinstance(number, int) or not isinstance(html_url, str):
        raise GitHubApiError(
            "Unexpected create issue response: missing number or html_url",
            status_code=resp.status_code,
        )
    title = data.get("title")
    state = data.get("state")
    return IssueResult(
        number=number,
        title=title if isinstance(title, str) else "",
        url=html_url,
        state=state if isinstance(state, str) else "",
    )
