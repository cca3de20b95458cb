"""Token storage."""

from github_issue_creator.auth.token_store import (
    TOKEN_KEY,
    CredentialKey,
    JsonFileSecretStore,
    SecretStore,
    TokenManager,
)

__all__ = [
    "TOKEN_KEY",
    "CredentialKey",
    "JsonFileSecretStore",
    "SecretStore",
    "TokenManager",
]
