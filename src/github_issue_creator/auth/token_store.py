"""Personal access token storage.

The token lives in a secret store keyed by a fixed service/account pair. The default
store is a JSON file readable only by its owner; tests and embedders can supply any
object implementing `SecretStore`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

TOKEN_HELP = (
    "Enter your GitHub Personal Access Token (PAT).\n"
    "The token needs 'repo' scope to create issues.\n"
    "Create a token at: https://github.com/settings/tokens"
)


@dataclass(frozen=True, slots=True)
class CredentialKey:
    service: str
    account: str

    def __str__(self) -> str:
        return f"{self.service}/{self.account}"


TOKEN_KEY = CredentialKey(service="GitHubIssueCreator", account="github-pat")


class SecretStore(Protocol):
    def get(self, key: CredentialKey) -> str | None: ...

    def set(self, key: CredentialKey, value: str | None) -> None:
        """Store `value` under `key`; None removes the entry."""
        ...


class JsonFileSecretStore:
    """JSON-file backed secret store with owner-only permissions."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Credential file is not readable JSON; treating as empty",
                extra={"path": str(self._path)},
            )
            return {}

        if not isinstance(raw, dict):
            logger.warning(
                "Credential file has unexpected shape; treating as empty",
                extra={"path": str(self._path)},
            )
            return {}
        return {k: v for k, v in raw.items() if isinstance(k, str) and isinstance(v, str)}

    def _save(self, secrets: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(secrets, indent=2, ensure_ascii=False) + "\n")
        # O_CREAT's mode only applies to new files.
        os.chmod(self._path, 0o600)

    def get(self, key: CredentialKey) -> str | None:
        return self._load().get(str(key))

    def set(self, key: CredentialKey, value: str | None) -> None:
        secrets = self._load()
        if value is None:
            if secrets.pop(str(key), None) is None:
                return
        else:
            secrets[str(key)] = value
        self._save(secrets)


class TokenManager:
    """Read and write the GitHub personal access token."""

    def __init__(self, store: SecretStore, *, env_token: str | None = None) -> None:
        self._store = store
        self._env_token = env_token.strip() if env_token else None

    def get_token(self) -> str | None:
        """The token to authenticate with, or None when none is configured.

        A token supplied through the environment takes precedence over the stored one.
        """

        if self._env_token:
            return self._env_token
        token = self._store.get(TOKEN_KEY)
        return token or None

    def has_token(self) -> bool:
        return self.get_token() is not None

    def store_token(self, token: str) -> None:
        normalized = token.strip()
        if not normalized:
            raise ValueError("Token must not be empty")
        self._store.set(TOKEN_KEY, normalized)
        logger.info("Stored GitHub token", extra={"key": str(TOKEN_KEY)})

    def clear_token(self) -> None:
        self._store.set(TOKEN_KEY, None)
        logger.info("Cleared GitHub token", extra={"key": str(TOKEN_KEY)})
