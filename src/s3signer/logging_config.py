"""Logging configuration for s3signer."""

import json
import logging
import re
import sys
from datetime import datetime, timezone

# Extra record attributes attached by the signer.
_EXTRA_FIELDS = ("operation", "method", "host", "scope", "signed_headers")

# Signatures and session tokens grant access; mask them wherever they appear.
_SECRET_VALUE_RE = re.compile(
    r"(?P<key>Signature=|X-Amz-Security-Token[=:]\s*)(?P<value>[^,&\s]+)",
    re.IGNORECASE,
)

MASK = "***"


def redact(text: str) -> str:
    """Mask signature and security-token values in ``text``.

    Covers the ``Authorization`` header (``Signature=...``), presigned query
    strings (``X-Amz-Signature=...``, ``X-Amz-Security-Token=...``) and
    canonical header lines (``x-amz-security-token:...``).
    """
    return _SECRET_VALUE_RE.sub(rf"\g<key>{MASK}", text)


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RedactingFormatter(logging.Formatter):
    """Text formatter that applies :func:`redact` to the finished line.

    Redacting the formatted output rather than the record covers the
    message, its arguments and any traceback alike.
    """

    def format(self, record: logging.LogRecord) -> str:
        return redact(super().format(record))


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Fields: timestamp, level, logger, message, optional exception, plus the
    signer extras in ``_EXTRA_FIELDS``. Message and exception text are
    passed through :func:`redact`.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = redact(self.formatException(record.exc_info))
        entry.update(
            (key, getattr(record, key))
            for key in _EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        return json.dumps(entry, default=str)


def build_handler(level: int, fmt: str = "text") -> logging.Handler:
    """Return a stderr handler at ``level`` with a redacting formatter.

    Args:
        level: Numeric log level.
        fmt: 'text' for human-readable output, 'json' for structured.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if fmt == "json" else RedactingFormatter(TEXT_FORMAT))
    return handler


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure root logging with the specified level and format.

    Replaces any handlers already on the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        fmt: 'text' for human-readable output, 'json' for structured.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    root.addHandler(build_handler(numeric_level, fmt))
