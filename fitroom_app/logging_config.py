"""JSON logging with per-request correlation ids and PII scrubbing.

User photos arrive as data URIs or hosted URLs and bearer tokens ride along
with most requests, so everything that reaches a log line goes through
:func:`redact_for_log` first.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator, Mapping

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fitroom_correlation_id", default=None
)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

SENSITIVE_KEYS = frozenset(
    {
        "email",
        "user_photo",
        "userPhoto",
        "photo_url",
        "photoUrl",
        "access_token",
        "authorization",
        "api_key",
        "token",
    }
)
MAX_LOGGED_CHARS = 500
_EMAIL = re.compile(r"[\w.\-]+@[\w.\-]+\.\w+")
_BEARER = re.compile(r"\bBearer\s+\S+", re.I)


class JsonFormatter(logging.Formatter):
    """One JSON object per line: level, logger, event, correlation id and extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in entry
        }
        entry.update(redact_for_log(extras))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Send root logging to stderr as JSON at ``LOG_LEVEL`` (default INFO)."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def _scrub_text(value: str) -> str:
    if value.startswith("data:"):
        return "[redacted-data-uri]"
    value = _BEARER.sub("Bearer [redacted]", value)
    value = _EMAIL.sub("[redacted-email]", value)
    if len(value) > MAX_LOGGED_CHARS:
        value = value[:MAX_LOGGED_CHARS] + "...[truncated]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Return a copy of ``payload`` safe to log.

    Sensitive keys are masked wholesale; strings lose inline images, bearer
    tokens and email addresses, and long model replies are truncated.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, Mapping):
        return {
            key: "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Bind ``correlation_id`` (or keep the current one, or mint one) and return it."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with scrubbed ``fields`` attached as structured extras."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={**redact_for_log(fields), "event": event, "correlation_id": correlation_id},
    )


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Run one named operation under a fresh correlation id and log its duration."""

    operations = logging.getLogger("fitroom.operations")
    with correlation_context(correlation_id or uuid.uuid4().hex) as scoped_id:
        started = time.perf_counter()
        try:
            yield scoped_id
        except Exception:
            log_event(
                operations,
                logging.DEBUG,
                "operation_failed",
                operation=name,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        log_event(
            operations,
            logging.DEBUG,
            "operation_completed",
            operation=name,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
