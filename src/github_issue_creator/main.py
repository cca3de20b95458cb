"""CLI entrypoint for the issue creator."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from github_issue_creator import __version__
from github_issue_creator.auth.token_store import JsonFileSecretStore, TokenManager
from github_issue_creator.config import IssueCreatorSettings
from github_issue_creator.flow.issue_flow import NO_REPOSITORY_MESSAGE, IssueCreationFlow
from github_issue_creator.flow.state_machine import FlowState
from github_issue_creator.git.remotes import detect_repository_at, read_remotes
from github_issue_creator.github.client import GitHubApiClient, IssueRequest
from github_issue_creator.logging import configure_logging
from github_issue_creator.presenter import PrefilledPresenter, TerminalPresenter, parse_csv

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_NO_REPOSITORY = 3
EXIT_CANCELLED = 130

_EXIT_CODES: dict[FlowState, int] = {
    FlowState.SUCCESS: EXIT_OK,
    FlowState.ABORTED: EXIT_OK,
    FlowState.FAILED: EXIT_FAILED,
    FlowState.NO_REPOSITORY: EXIT_NO_REPOSITORY,
    FlowState.CANCELLED: EXIT_CANCELLED,
}


def _positive_int(value: str) -> int:
    if not value.isdecimal() or int(value) <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive milestone number, got {value!r}")
    return int(value)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--path",
        type=Path,
        default=Path("."),
        help="Directory inside the Git working tree (defaults to the current directory)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-issue-creator",
        description="Create GitHub issues for the repository in the current working tree",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-issue-creator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a GitHub issue interactively")
    _add_path_argument(create)
    create.add_argument("--title", default="", help="Issue title")
    create.add_argument("--body", default=None, help="Issue body")
    create.add_argument(
        "--labels",
        default=None,
        help="Comma-separated labels, e.g. 'bug,enhancement'",
    )
    create.add_argument(
        "--assignees",
        default=None,
        help="Comma-separated GitHub usernames, e.g. 'user1,user2'",
    )
    create.add_argument(
        "--milestone", type=_positive_int, default=None, help="Milestone number"
    )
    create.add_argument(
        "--yes",
        action="store_true",
        help="Submit the given fields without prompting",
    )

    configure = subparsers.add_parser(
        "configure-token", help="Store the GitHub personal access token"
    )
    configure.add_argument(
        "--token",
        default=None,
        help="Token to store (prompted for when omitted)",
    )

    subparsers.add_parser("clear-token", help="Remove the stored GitHub token")

    detect = subparsers.add_parser("detect", help="Print the detected GitHub repository")
    _add_path_argument(detect)

    labels = subparsers.add_parser("labels", help="List the repository's labels")
    _add_path_argument(labels)

    milestones = subparsers.add_parser("milestones", help="List the repository's milestones")
    _add_path_argument(milestones)

    return parser


def _token_manager(settings: IssueCreatorSettings) -> TokenManager:
    store = JsonFileSecretStore(settings.credentials_file)
    return TokenManager(store, env_token=settings.github_token)


def _client_factory(settings: IssueCreatorSettings) -> Callable[[str], GitHubApiClient]:
    def factory(token: str) -> GitHubApiClient:
        return GitHubApiClient(
            token=token,
            base_url=settings.github_base_url,
            timeout=settings.request_timeout,
        )

    return factory


def _run_create(args: argparse.Namespace, settings: IssueCreatorSettings) -> int:
    prefill = IssueRequest(
        title=args.title,
        body=args.body,
        labels=parse_csv(args.labels),
        assignees=parse_csv(args.assignees),
        milestone_number=args.milestone,
    )
    if args.yes:
        presenter: TerminalPresenter | PrefilledPresenter = PrefilledPresenter(prefill)
    else:
        presenter = TerminalPresenter(prefill)

    path: Path = args.path
    flow = IssueCreationFlow(
        tokens=_token_manager(settings),
        presenter=presenter,
        remotes=lambda: read_remotes(path),
        client_factory=_client_factory(settings),
    )
    result = flow.run()
    logger.info(
        "Flow finished",
        extra={
            "state": result.state.value,
            "issue_number": result.issue.number if result.issue else None,
        },
    )
    return _EXIT_CODES[result.state]


def _run_configure_token(args: argparse.Namespace, settings: IssueCreatorSettings) -> int:
    token = args.token
    if token is None:
        token = TerminalPresenter().prompt_token()
    if token is None or not token.strip():
        print("No token entered; nothing stored.", file=sys.stderr)
        return EXIT_CONFIG

    _token_manager(settings).store_token(token)
    print(f"Token stored in {settings.credentials_file}")
    return EXIT_OK


def _run_reference_listing(args: argparse.Namespace, settings: IssueCreatorSettings) -> int:
    repository = detect_repository_at(args.path)
    if repository is None:
        print(NO_REPOSITORY_MESSAGE, file=sys.stderr)
        return EXIT_NO_REPOSITORY

    token = _token_manager(settings).get_token()
    if token is None:
        print(
            "GitHub token is not configured. Run 'github-issue-creator configure-token' first.",
            file=sys.stderr,
        )
        return EXIT_CONFIG

    client = _client_factory(settings)(token)
    if args.command == "labels":
        for name in client.list_labels(repository):
            print(name)
    else:
        for milestone in client.list_milestones(repository):
            print(f"#{milestone.number}\t{milestone.state}\t{milestone.title}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = IssueCreatorSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment and .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(settings.log_level)

    try:
        if args.command == "create":
            return _run_create(args, settings)

        if args.command == "configure-token":
            return _run_configure_token(args, settings)

        if args.command == "clear-token":
            _token_manager(settings).clear_token()
            print("Stored token removed")
            return EXIT_OK

        if args.command == "detect":
            repository = detect_repository_at(args.path)
            if repository is None:
                print(NO_REPOSITORY_MESSAGE, file=sys.stderr)
                return EXIT_NO_REPOSITORY
            print(repository.full_name)
            return EXIT_OK

        if args.command in {"labels", "milestones"}:
            return _run_reference_listing(args, settings)

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_CONFIG

    except KeyboardInterrupt:
        print("Cancelled", file=sys.stderr)
        return EXIT_CANCELLED

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
