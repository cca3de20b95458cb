"""Terminal front ends for the issue-creation flow."""

from __future__ import annotations

import getpass
import sys
from collections.abc import Callable
from typing import TextIO

from github_issue_creator.auth.token_store import TOKEN_HELP
from github_issue_creator.flow.issue_flow import FlowResult, IssueForm
from github_issue_creator.flow.state_machine import FlowState
from github_issue_creator.github.client import IssueRequest, Milestone


def parse_csv(value: str | None) -> list[str]:
    """Split a comma-separated field, dropping blanks."""

    if value is None:
        return []
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p]


class ConsoleReporter:
    """Result and notice output shared by the terminal presenters."""

    def __init__(self, *, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    def notify_no_repository(self, message: str) -> None:
        print(message, file=self._err)

    def report_validation_error(self, message: str) -> None:
        print(f"Validation error: {message}", file=self._err)

    def report_result(self, result: FlowResult) -> None:
        if result.state == FlowState.SUCCESS and result.issue is not None:
            print(f"Issue created successfully!\n\n{result.issue.url}", file=self._out)
        elif result.state == FlowState.CANCELLED:
            print(result.message or "Issue creation cancelled", file=self._out)
        elif result.state == FlowState.FAILED:
            print(result.message or "Failed to create issue", file=self._err)


class TerminalPresenter(ConsoleReporter):
    """Prompt for the token and the issue fields on the terminal.

    Values passed in `prefill` are offered as defaults; pressing enter keeps them.
    """

    def __init__(
        self,
        prefill: IssueRequest | None = None,
        *,
        input_func: Callable[[str], str] = input,
        secret_func: Callable[[str], str] = getpass.getpass,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        super().__init__(out=out, err=err)
        self._prefill = prefill or IssueRequest(title="")
        self._input = input_func
        self._secret = secret_func

    def _ask(self, label: str, default: str = "") -> str:
        prompt = f"{label} [{default}]: " if default else f"{label}: "
        answer = self._input(prompt).strip()
        return answer or default

    def confirm_configure_token(self) -> bool:
        print("GitHub token is not configured.", file=self._out)
        try:
            answer = self._input("Would you like to configure it now? [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() in {"y", "yes"}

    def prompt_token(self) -> str | None:
        print(TOKEN_HELP, file=self._out)
        try:
            token = self._secret("GitHub Token: ").strip()
        except EOFError:
            return None
        return token or None

    def collect_fields(self, form: IssueForm) -> IssueRequest | None:
        print(f"Create GitHub Issue - {form.repository.full_name}", file=self._out)
        try:
            title = self._ask("Title", self._prefill.title)
            body = self._ask("Description", self._prefill.body or "")

            available = form.labels()
            if available:
                print(f"Available labels: {', '.join(available)}", file=self._out)
            labels = parse_csv(
                self._ask("Labels (comma-separated)", ", ".join(self._prefill.labels))
            )
            assignees = parse_csv(
                self._ask("Assignees (comma-separated)", ", ".join(self._prefill.assignees))
            )
            milestone = self._choose_milestone(form.open_milestones())
        except EOFError:
            return None

        return IssueRequest(
            title=title,
            body=body or None,
            labels=labels,
            assignees=assignees,
            milestone_number=milestone,
        )

    def _choose_milestone(self, milestones: list[Milestone]) -> int | None:
        default = self._prefill.milestone_number
        if not milestones:
            # Metadata not loaded (or none exist): accept a milestone number directly.
            while True:
                raw = self._ask("Milestone number (blank for none)", _str_or_empty(default))
                if not raw:
                    return None
                if raw.isdecimal() and int(raw) > 0:
                    return int(raw)
                print("Please enter a positive milestone number.", file=self._err)

        print("Milestone:", file=self._out)
        print("  0) None", file=self._out)
        for index, milestone in enumerate(milestones, start=1):
            print(f"  {index}) {milestone.title} (#{milestone.number})", file=self._out)

        default_choice = ""
        for index, milestone in enumerate(milestones, start=1):
            if milestone.number == default:
                default_choice = str(index)
        while True:
            raw = self._ask("Choose milestone", default_choice or "0")
            if raw.isdecimal() and int(raw) <= len(milestones):
                choice = int(raw)
                return milestones[choice - 1].number if choice else None
            print(f"Please choose a number between 0 and {len(milestones)}.", file=self._err)


class PrefilledPresenter(ConsoleReporter):
    """Submit fields given up front without prompting.

    The fields are handed to the flow once; if they are rejected the form counts as
    dismissed, since there is nobody to correct them.
    """

    def __init__(
        self,
        request: IssueRequest,
        *,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        super().__init__(out=out, err=err)
        self._request: IssueRequest | None = request

    def confirm_configure_token(self) -> bool:
        print(
            "GitHub token is not configured. Run 'github-issue-creator configure-token' first.",
            file=self._err,
        )
        return False

    def prompt_token(self) -> str | None:
        return None

    def collect_fields(self, form: IssueForm) -> IssueRequest | None:
        request, self._request = self._request, None
        return request


def _str_or_empty(value: int | None) -> str:
    return "" if value is None else str(value)
