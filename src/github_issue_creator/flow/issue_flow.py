"""The issue-creation flow.

find repository -> ensure token -> collect issue fields -> create issue -> report result

All user interaction goes through an `IssuePresenter`, so the flow runs the same way
behind a terminal prompt, a test double or any other front end.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from github_issue_creator.auth.token_store import TokenManager
from github_issue_creator.flow.metadata import RepositoryMetadataLoader
from github_issue_creator.flow.state_machine import FlowState, FlowStateMachine
from github_issue_creator.git.remote_parser import GitRemote, RepositoryRef, detect_repository
from github_issue_creator.github.client import (
    GitHubApiClient,
    GitHubApiError,
    IssueRequest,
    IssueResult,
    Milestone,
)

logger = logging.getLogger(__name__)

NO_REPOSITORY_MESSAGE = (
    "No GitHub repository detected. "
    "Please make sure your project has a Git remote pointing to GitHub."
)


class IssueValidationError(ValueError):
    """Raised when issue fields are rejected before anything is sent."""


@dataclass(frozen=True, slots=True)
class FlowResult:
    state: FlowState
    repository: RepositoryRef | None = None
    issue: IssueResult | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class IssueForm:
    """What a presenter needs to render the issue form.

    Label and milestone choices fill in asynchronously; until then they are empty.
    """

    repository: RepositoryRef
    metadata: RepositoryMetadataLoader

    def labels(self) -> list[str]:
        return self.metadata.labels()

    def open_milestones(self) -> list[Milestone]:
        return self.metadata.open_milestones()

    def wait(self, timeout: float | None = None) -> bool:
        return self.metadata.wait(timeout)


class IssuePresenter(Protocol):
    def confirm_configure_token(self) -> bool: ...

    def prompt_token(self) -> str | None: ...

    def notify_no_repository(self, message: str) -> None: ...

    def collect_fields(self, form: IssueForm) -> IssueRequest | None:
        """Return the entered fields, or None when the user dismissed the form."""
        ...

    def report_validation_error(self, message: str) -> None: ...

    def report_result(self, result: FlowResult) -> None: ...


def validate_request(request: IssueRequest) -> IssueRequest:
    """Return `request` with trimmed title and body; reject blank titles.

    A body that is empty after trimming is dropped so it is not sent.
    """

    title = request.title.strip()
    if not title:
        raise IssueValidationError("Issue title cannot be empty")
    body = (request.body or "").strip() or None
    return dataclasses.replace(request, title=title, body=body)


class IssueCreationFlow:
    def __init__(
        self,
        *,
        tokens: TokenManager,
        presenter: IssuePresenter,
        remotes: Callable[[], Sequence[GitRemote]],
        client_factory: Callable[[str], GitHubApiClient],
    ) -> None:
        self._tokens = tokens
        self._presenter = presenter
        self._remotes = remotes
        self._client_factory = client_factory
        self.machine = FlowStateMachine()

    def run(self) -> FlowResult:
        token = self._ensure_token()
        if token is None:
            self.machine.advance(FlowState.ABORTED)
            logger.info("Token configuration declined; nothing to do")
            return FlowResult(state=FlowState.ABORTED)

        self.machine.advance(FlowState.REPO_DETECTION)
        repository = detect_repository(self._remotes())
        if repository is None:
            self.machine.advance(FlowState.NO_REPOSITORY)
            self._presenter.notify_no_repository(NO_REPOSITORY_MESSAGE)
            return FlowResult(state=FlowState.NO_REPOSITORY, message=NO_REPOSITORY_MESSAGE)

        logger.info("Detected repository", extra={"repository": repository.full_name})
        client = self._client_factory(token)

        self.machine.advance(FlowState.FORM_COLLECTION)
        metadata = RepositoryMetadataLoader(client=client, repository=repository)
        metadata.start()
        form = IssueForm(repository=repository, metadata=metadata)

        while True:
            request = self._presenter.collect_fields(form)
            if request is None:
                self.machine.advance(FlowState.ABORTED)
                return FlowResult(state=FlowState.ABORTED, repository=repository)

            self.machine.advance(FlowState.SUBMITTING)
            try:
                request = validate_request(request)
            except IssueValidationError as e:
                self._presenter.report_validation_error(str(e))
                self.machine.advance(FlowState.FORM_COLLECTION)
                continue

            result = self._submit(client, repository, request)
            self._presenter.report_result(result)
            return result

    def _ensure_token(self) -> str | None:
        token = self._tokens.get_token()
        if token is not None:
            return token

        self.machine.advance(FlowState.AWAITING_TOKEN)
        if not self._presenter.confirm_configure_token():
            return None

        entered = self._presenter.prompt_token()
        if entered is None or not entered.strip():
            return None
        self._tokens.store_token(entered)
        return self._tokens.get_token()

    def _submit(
        self, client: GitHubApiClient, repository: RepositoryRef, request: IssueRequest
    ) -> FlowResult:
        try:
            issue = client.create_issue(repository, request)
        except KeyboardInterrupt:
            self.machine.advance(FlowState.CANCELLED)
            logger.info("Issue creation cancelled", extra={"repository": repository.full_name})
            return FlowResult(
                state=FlowState.CANCELLED,
                repository=repository,
                message="Issue creation cancelled",
            )
        except GitHubApiError as e:
            self.machine.advance(FlowState.FAILED)
            return FlowResult(state=FlowState.FAILED, repository=repository, message=str(e))
        except Exception as e:
            logger.exception("Issue creation failed", extra={"repository": repository.full_name})
            self.machine.advance(FlowState.FAILED)
            return FlowResult(
                state=FlowState.FAILED,
                repository=repository,
                message=f"Unexpected error: {e}",
            )

        self.machine.advance(FlowState.SUCCESS)
        return FlowResult(state=FlowState.SUCCESS, repository=repository, issue=issue)
