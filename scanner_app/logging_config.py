"""Structured JSON logging for the shopping scanner app.

Every record carries the active correlation id so a single scan can be
followed from URL validation through scoring to persistence. Fields passed
through :func:`log_event` are scrubbed first: user ids are replaced with a
short stable digest, product and image URLs are masked, and secrets never
leave the process.
"""

from __future__ import annotations

import contextlib
import contextvars
import hashlib
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator

SERVICE_NAME = "wardrobe-compatibility"

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.makeLogRecord({})).keys() | {"message", "asctime", "taskName"}
)
_HASHED_KEYS = frozenset({"user_id"})
_MASKED_KEYS = frozenset(
    {
        "email",
        "url",
        "product_url",
        "image_url",
        "product_image_url",
        "image_bytes",
        "api_key",
        "gemini_api_key",
    }
)
_EMAIL_PATTERN = re.compile(r"[\w.\-]+@[\w.\-]+")
_HANDLER_MARKER = "_scanner_json_handler"


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key in payload:
                continue
            payload[key] = redact_for_log(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install the JSON handler on the root logger, replacing a previous one.

    Handlers installed by other code (test harnesses, uvicorn) are left alone.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    setattr(handler, _HANDLER_MARKER, True)
    root.addHandler(handler)
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))


def hash_identifier(value: Any) -> str:
    """Stable, non-reversible short token for a user identifier."""

    digest = hashlib.sha256(str(value).encode("utf-8")).hexdigest()
    return f"user:{digest[:10]}"


def _redact_string(value: str) -> str:
    if _EMAIL_PATTERN.search(value):
        return _EMAIL_PATTERN.sub("[redacted-email]", value)
    if value.lower().startswith(("http://", "https://")):
        return "[redacted-url]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Recursively scrub user identifiers, URLs, emails and secrets."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, (bytes, bytearray)):
        return f"<{len(payload)} bytes>"
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        scrubbed: Dict[str, Any] = {}
        for key, value in payload.items():
            if key in _HASHED_KEYS and value is not None:
                scrubbed[key] = hash_identifier(value)
            elif key in _MASKED_KEYS:
                scrubbed[key] = "[redacted]"
            else:
                scrubbed[key] = redact_for_log(value)
        return scrubbed
    return str(payload)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, installing the JSON handler on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active correlation id, assigning ``correlation_id`` or a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    new_id = uuid.uuid4().hex
    CORRELATION_ID.set(new_id)
    return new_id


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Temporarily bind a correlation id, restoring the previous one on exit."""

    token = CORRELATION_ID.set(correlation_id or ensure_correlation_id())
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with scrubbed ``fields`` and the active correlation id."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Run one named operation under the active correlation id, or a fresh one.

    Emits ``operation_completed`` with the elapsed time, or ``operation_failed``
    before re-raising whatever the block raised.
    """

    logger = logging.getLogger("scanner_app.operations")
    start = time.perf_counter()
    with correlation_context(attributes.pop("correlation_id", None)) as scoped_id:
        try:
            yield scoped_id
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "operation_failed",
                operation=name,
                error_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                correlation_id=scoped_id,
                **attributes,
            )
            raise
        log_event(
            logger,
            logging.DEBUG,
            "operation_completed",
            operation=name,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            correlation_id=scoped_id,
            **attributes,
        )


__all__ = [
    "SERVICE_NAME",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "hash_identifier",
    "log_event",
    "redact_for_log",
    "operation_context",
]
