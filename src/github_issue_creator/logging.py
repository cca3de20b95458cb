"""JSON logging for the CLI.

Records go to stderr so stdout stays reserved for the messages shown to the user.
GitHub tokens must never reach a log line: values under credential-looking keys in
`extra` are masked, and token-shaped strings are scrubbed from messages and
tracebacks.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

REDACTED = "[REDACTED]"

# Every attribute a bare record carries; anything else arrived through `extra`.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_SENSITIVE_KEY = re.compile(r"token|authorization|secret|password|credential", re.IGNORECASE)

_TOKEN_PATTERNS = (
    re.compile(r"(?i)\b(bearer)\s+[A-Za-z0-9_\-.=]+"),
    re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9]{10,}|github_pat_[A-Za-z0-9_]{10,})"),
)


def redact_text(text: str) -> str:
    """Mask bearer credentials and GitHub token literals inside `text`."""

    text = _TOKEN_PATTERNS[0].sub(lambda m: f"{m.group(1)} {REDACTED}", text)
    return _TOKEN_PATTERNS[1].sub(REDACTED, text)


def _redact_value(key: str, value: Any) -> Any:
    if _SENSITIVE_KEY.search(key):
        return REDACTED
    if isinstance(value, Mapping):
        return {str(k): _redact_value(str(k), v) for k, v in value.items()}
    if isinstance(value, str):
        return redact_text(value)
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_text(record.getMessage()),
        }

        extra = {
            key: _redact_value(key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = redact_text(self.formatException(record.exc_info))

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send JSON records at `level` and above to stderr, replacing other root handlers."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(max(root.level, logging.INFO))
