"""Unit tests for the issue-creation flow (mocked presenter and API client)."""

from __future__ import annotations

import threading
from unittest.mock import Mock

import pytest
from fakes import InMemorySecretStore

from github_issue_creator.auth.token_store import TOKEN_KEY, TokenManager
from github_issue_creator.flow.issue_flow import (
    FlowResult,
    IssueCreationFlow,
    IssueForm,
    IssueValidationError,
    validate_request,
)
from github_issue_creator.flow.metadata import RepositoryMetadataLoader
from github_issue_creator.flow.state_machine import FlowState
from github_issue_creator.git.remote_parser import GitRemote, RepositoryRef
from github_issue_creator.github.client import (
    GitHubApiClient,
    GitHubApiError,
    IssueRequest,
    IssueResult,
    Milestone,
)

ORIGIN = [GitRemote(name="origin", url="git@github.com:octo-org/octo-repo.git")]

CREATED = IssueResult(
    number=5, title="Bug", url="https://github.com/octo-org/octo-repo/issues/5", state="open"
)


class ScriptedPresenter:
    """Presenter double that replays scripted answers and records what it was shown."""

    def __init__(
        self,
        *requests: IssueRequest | None,
        configure: bool = False,
        token: str | None = None,
    ) -> None:
        self._requests = list(requests)
        self._configure = configure
        self._token = token
        self.forms: list[IssueForm] = []
        self.validation_errors: list[str] = []
        self.results: list[FlowResult] = []
        self.no_repository: list[str] = []
        self.token_prompts = 0

    def confirm_configure_token(self) -> bool:
        return self._configure

    def prompt_token(self) -> str | None:
        self.token_prompts += 1
        return self._token

    def notify_no_repository(self, message: str) -> None:
        self.no_repository.append(message)

    def collect_fields(self, form: IssueForm) -> IssueRequest | None:
        self.forms.append(form)
        return self._requests.pop(0) if self._requests else None

    def report_validation_error(self, message: str) -> None:
        self.validation_errors.append(message)

    def report_result(self, result: FlowResult) -> None:
        self.results.append(result)


def _tokens(token: str | None = "test-token") -> TokenManager:
    store = InMemorySecretStore()
    if token is not None:
        store.set(TOKEN_KEY, token)
    return TokenManager(store)


def _api_client() -> Mock:
    client = Mock(spec=GitHubApiClient)
    client.list_labels.return_value = ["bug", "docs"]
    client.list_milestones.return_value = [
        Milestone(number=1, title="v1.0", state="open"),
        Milestone(number=2, title="v0.9", state="closed"),
    ]
    client.create_issue.return_value = CREATED
    return client


def _flow(
    presenter: ScriptedPresenter,
    client: Mock,
    *,
    tokens: TokenManager | None = None,
    remotes: list[GitRemote] = ORIGIN,
) -> IssueCreationFlow:
    return IssueCreationFlow(
        tokens=tokens or _tokens(),
        presenter=presenter,
        remotes=lambda: remotes,
        client_factory=lambda token: client,
    )


def test_successful_submission_reports_created_issue() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title="  Bug  ", labels=["bug"]))
    flow = _flow(presenter, client)

    result = flow.run()

    assert result.state == FlowState.SUCCESS
    assert result.issue == CREATED
    assert result.repository == RepositoryRef(owner="octo-org", name="octo-repo")
    assert presenter.results == [result]
    client.create_issue.assert_called_once_with(
        RepositoryRef(owner="octo-org", name="octo-repo"),
        IssueRequest(title="Bug", labels=["bug"]),
    )
    assert flow.machine.history == [
        FlowState.NO_TOKEN,
        FlowState.REPO_DETECTION,
        FlowState.FORM_COLLECTION,
        FlowState.SUBMITTING,
        FlowState.SUCCESS,
    ]


def test_form_is_enriched_with_labels_and_open_milestones() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title="Bug"))

    _flow(presenter, client).run()

    form = presenter.forms[0]
    assert form.wait(timeout=5.0)
    assert form.labels() == ["bug", "docs"]
    assert form.open_milestones() == [Milestone(number=1, title="v1.0", state="open")]


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_blank_title_never_reaches_the_api(title: str) -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title=title))
    flow = _flow(presenter, client)

    result = flow.run()

    client.create_issue.assert_not_called()
    assert presenter.validation_errors == ["Issue title cannot be empty"]
    assert result.state == FlowState.ABORTED
    assert presenter.results == []


def test_user_can_correct_title_after_validation_error() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title=" "), IssueRequest(title="Bug"))
    flow = _flow(presenter, client)

    result = flow.run()

    assert result.state == FlowState.SUCCESS
    assert len(presenter.forms) == 2
    assert client.create_issue.call_count == 1


def test_api_error_is_reported_verbatim() -> None:
    client = _api_client()
    client.create_issue.side_effect = GitHubApiError(
        "Failed to create issue (HTTP 401): Bad credentials", status_code=401
    )
    presenter = ScriptedPresenter(IssueRequest(title="Bug"))

    result = _flow(presenter, client).run()

    assert result.state == FlowState.FAILED
    assert result.message == "Failed to create issue (HTTP 401): Bad credentials"
    assert presenter.results == [result]


def test_unexpected_error_is_reported_as_failure() -> None:
    client = _api_client()
    client.create_issue.side_effect = RuntimeError("boom")
    presenter = ScriptedPresenter(IssueRequest(title="Bug"))

    result = _flow(presenter, client).run()

    assert result.state == FlowState.FAILED
    assert result.message == "Unexpected error: boom"


def test_interrupt_during_submission_is_cancellation() -> None:
    client = _api_client()
    client.create_issue.side_effect = KeyboardInterrupt()
    presenter = ScriptedPresenter(IssueRequest(title="Bug"))

    result = _flow(presenter, client).run()

    assert result.state == FlowState.CANCELLED
    assert result.message == "Issue creation cancelled"
    assert presenter.results == [result]


def test_dismissed_form_creates_nothing() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(None)

    result = _flow(presenter, client).run()

    assert result.state == FlowState.ABORTED
    client.create_issue.assert_not_called()
    assert presenter.results == []


def test_no_repository_is_reported() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title="Bug"))
    remotes = [GitRemote(name="origin", url="https://gitlab.com/octo-org/octo-repo.git")]

    result = _flow(presenter, client, remotes=remotes).run()

    assert result.state == FlowState.NO_REPOSITORY
    assert len(presenter.no_repository) == 1
    assert presenter.forms == []
    client.create_issue.assert_not_called()


def test_declining_token_configuration_ends_silently() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title="Bug"), configure=False)

    result = _flow(presenter, client, tokens=_tokens(None)).run()

    assert result.state == FlowState.ABORTED
    assert presenter.token_prompts == 0
    assert presenter.results == []
    assert presenter.no_repository == []
    client.create_issue.assert_not_called()
    client.list_labels.assert_not_called()


def test_empty_token_entry_ends_silently() -> None:
    client = _api_client()
    tokens = _tokens(None)
    presenter = ScriptedPresenter(IssueRequest(title="Bug"), configure=True, token="  ")

    result = _flow(presenter, client, tokens=tokens).run()

    assert result.state == FlowState.ABORTED
    assert not tokens.has_token()
    client.create_issue.assert_not_called()


def test_configured_token_is_stored_and_used() -> None:
    client = _api_client()
    tokens = _tokens(None)
    presenter = ScriptedPresenter(IssueRequest(title="Bug"), configure=True, token="ghp_new")
    seen_tokens: list[str] = []

    def client_factory(token: str) -> Mock:
        seen_tokens.append(token)
        return client

    flow = IssueCreationFlow(
        tokens=tokens,
        presenter=presenter,
        remotes=lambda: ORIGIN,
        client_factory=client_factory,
    )
    result = flow.run()

    assert result.state == FlowState.SUCCESS
    assert tokens.get_token() == "ghp_new"
    assert seen_tokens == ["ghp_new"]
    assert flow.machine.history[:3] == [
        FlowState.NO_TOKEN,
        FlowState.AWAITING_TOKEN,
        FlowState.REPO_DETECTION,
    ]


def test_validate_request_trims_title() -> None:
    assert validate_request(IssueRequest(title=" Bug ")).title == "Bug"
    with pytest.raises(IssueValidationError):
        validate_request(IssueRequest(title=""))


def test_validate_request_trims_body_and_drops_blank_body() -> None:
    assert validate_request(IssueRequest(title="Bug", body="  Steps  \n")).body == "Steps"
    assert validate_request(IssueRequest(title="Bug", body=" \n\t ")).body is None


def test_whitespace_body_is_not_sent() -> None:
    client = _api_client()
    presenter = ScriptedPresenter(IssueRequest(title="Bug", body="   "))

    result = _flow(presenter, client).run()

    assert result.state == FlowState.SUCCESS
    client.create_issue.assert_called_once_with(
        RepositoryRef(owner="octo-org", name="octo-repo"), IssueRequest(title="Bug")
    )


def test_metadata_loader_swallows_failures(repository: RepositoryRef) -> None:
    client = Mock(spec=GitHubApiClient)
    client.list_labels.side_effect = RuntimeError("network down")

    loader = RepositoryMetadataLoader(client=client, repository=repository)
    loader.start()

    assert loader.wait(timeout=5.0)
    assert loader.labels() == []
    assert loader.milestones() == []


def test_metadata_loader_does_not_block_form(repository: RepositoryRef) -> None:
    release = threading.Event()
    client = Mock(spec=GitHubApiClient)
    client.list_labels.side_effect = lambda _ref: release.wait(5.0) and ["bug"]
    client.list_milestones.return_value = []

    loader = RepositoryMetadataLoader(client=client, repository=repository)
    loader.start()

    assert not loader.loaded
    assert loader.labels() == []

    release.set()
    assert loader.wait(timeout=5.0)
    assert loader.labels() == ["bug"]
