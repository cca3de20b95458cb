from __future__ import annotations

from enum import Enum


class FlowState(str, Enum):
    NO_TOKEN = "no_token"
    AWAITING_TOKEN = "awaiting_token"
    REPO_DETECTION = "repo_detection"
    FORM_COLLECTION = "form_collection"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    NO_REPOSITORY = "no_repository"
    ABORTED = "aborted"


TERMINAL_STATES: frozenset[FlowState] = frozenset(
    {
        FlowState.SUCCESS,
        FlowState.FAILED,
        FlowState.CANCELLED,
        FlowState.NO_REPOSITORY,
        FlowState.ABORTED,
    }
)

ALLOWED_TRANSITIONS: dict[FlowState, set[FlowState]] = {
    FlowState.NO_TOKEN: {FlowState.AWAITING_TOKEN, FlowState.REPO_DETECTION},
    FlowState.AWAITING_TOKEN: {FlowState.REPO_DETECTION, FlowState.ABORTED},
    FlowState.REPO_DETECTION: {FlowState.FORM_COLLECTION, FlowState.NO_REPOSITORY},
    FlowState.FORM_COLLECTION: {FlowState.SUBMITTING, FlowState.ABORTED},
    # A title that fails local validation sends the user back to the form.
    FlowState.SUBMITTING: {
        FlowState.SUCCESS,
        FlowState.FAILED,
        FlowState.CANCELLED,
        FlowState.FORM_COLLECTION,
    },
}


class IllegalTransitionError(ValueError):
    pass


class FlowStateMachine:
    """Tracks the state of one issue-creation run.

    Every run starts in `NO_TOKEN`; the recorded history makes runs inspectable.
    """

    def __init__(self) -> None:
        self._history: list[FlowState] = [FlowState.NO_TOKEN]

    @property
    def state(self) -> FlowState:
        return self._history[-1]

    @property
    def history(self) -> list[FlowState]:
        return list(self._history)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, to: FlowState) -> FlowState:
        allowed = ALLOWED_TRANSITIONS.get(self.state, set())
        if to not in allowed:
            raise IllegalTransitionError(f"Illegal transition: {self.state.value} -> {to.value}")
        self._history.append(to)
        return to
