"""Issue-creation flow and its state machine."""

from github_issue_creator.flow.issue_flow import (
    FlowResult,
    IssueCreationFlow,
    IssueForm,
    IssuePresenter,
    IssueValidationError,
    validate_request,
)
from github_issue_creator.flow.metadata import RepositoryMetadataLoader
from github_issue_creator.flow.state_machine import (
    FlowState,
    FlowStateMachine,
    IllegalTransitionError,
)

__all__ = [
    "FlowResult",
    "FlowState",
    "FlowStateMachine",
    "IllegalTransitionError",
    "IssueCreationFlow",
    "IssueForm",
    "IssuePresenter",
    "IssueValidationError",
    "RepositoryMetadataLoader",
    "validate_request",
]
