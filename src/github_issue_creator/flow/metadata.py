"""Background loading of labels and milestones for the issue form."""

from __future__ import annotations

import logging
import threading

from github_issue_creator.git.remote_parser import RepositoryRef
from github_issue_creator.github.client import GitHubApiClient, Milestone

logger = logging.getLogger(__name__)


class RepositoryMetadataLoader:
    """Fetch labels and milestones off the thread that renders the form.

    Results start out empty and are filled in once the background fetch finishes. A
    failed fetch leaves them empty; the form stays usable with manual entry.
    """

    def __init__(self, *, client: GitHubApiClient, repository: RepositoryRef) -> None:
        self._client = client
        self._repository = repository
        self._lock = threading.Lock()
        self._loaded = threading.Event()
        self._labels: list[str] = []
        self._milestones: list[Milestone] = []
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name=f"load-metadata-{self._repository.full_name}",
            daemon=True,
        )
        self._thread.start()

    def _run(self) -> None:
        try:
            labels = self._client.list_labels(self._repository)
            milestones = self._client.list_milestones(self._repository)
            with self._lock:
                self._labels = labels
                self._milestones = milestones
            logger.debug(
                "Repository metadata loaded",
                extra={
                    "repository": self._repository.full_name,
                    "labels": len(labels),
                    "milestones": len(milestones),
                },
            )
        except Exception:
            logger.warning(
                "Loading repository metadata failed",
                extra={"repository": self._repository.full_name},
                exc_info=True,
            )
        finally:
            self._loaded.set()

    @property
    def loaded(self) -> bool:
        return self._loaded.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until loading finished (or `timeout` elapsed); True when finished."""

        return self._loaded.wait(timeout)

    def labels(self) -> list[str]:
        with self._lock:
            return list(self._labels)

    def milestones(self) -> list[Milestone]:
        with self._lock:
            return list(self._milestones)

    def open_milestones(self) -> list[Milestone]:
        return [m for m in self.milestones() if m.is_open]
