"""Structured call logging for collaborator boundaries (stores, page fetches)."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from scanner_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

MAX_PREVIEW_KEYS = 6


def _kwargs_preview(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    keys = list(kwargs)[:MAX_PREVIEW_KEYS]
    preview = {key: kwargs[key] for key in keys}
    if len(kwargs) > MAX_PREVIEW_KEYS:
        preview["truncated"] = True
    return preview


def _result_summary(result: Any) -> Dict[str, Any]:
    """Describe a return value without logging its contents."""

    if result is None:
        return {"result": None}
    if isinstance(result, (list, tuple)):
        return {"result_count": len(result)}
    if isinstance(result, bool):
        return {"result": result}
    return {"result_type": type(result).__name__}


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_tool(tool_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log ``tool_call_started``, ``tool_call_completed`` and ``tool_call_failed`` around a call.

    Keyword arguments are previewed through the redaction helpers; positional
    arguments are never logged. Exceptions always propagate.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            log_event(
                LOGGER,
                logging.DEBUG,
                "tool_call_started",
                tool=tool_name,
                correlation_id=correlation_id,
                kwargs=_kwargs_preview(kwargs),
            )
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "tool_call_failed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "tool_call_completed",
                tool=tool_name,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
                **_result_summary(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_tool"]
