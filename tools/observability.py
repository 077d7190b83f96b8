"""Call instrumentation for upstream APIs and store operations."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from fitroom_app.errors import UpstreamServiceError
from fitroom_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger("fitroom.calls")
P = ParamSpec("P")
R = TypeVar("R")

_PREVIEWED_KWARGS = 6


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def instrument_tool(
    tool_name: str,
    input_model: type[BaseModel] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, outcome and latency of every call to the wrapped function.

    When ``input_model`` is given, keyword arguments are validated (and
    coerced) through it before the call. Upstream failures are logged with
    their HTTP status so quota and auth problems stand out.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            if input_model is not None:
                try:
                    kwargs = input_model.model_validate(kwargs).model_dump()
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "call_rejected",
                        call=tool_name,
                        correlation_id=correlation_id,
                        errors=exc.errors(),
                    )
                    raise

            preview = dict(list(kwargs.items())[:_PREVIEWED_KWARGS])
            log_event(LOGGER, logging.DEBUG, "call_started", call=tool_name, kwargs=preview)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except UpstreamServiceError as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "call_upstream_error",
                    call=tool_name,
                    status_code=exc.status_code,
                    duration_ms=_elapsed_ms(started),
                )
                raise
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "call_failed",
                    call=tool_name,
                    duration_ms=_elapsed_ms(started),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                call=tool_name,
                duration_ms=_elapsed_ms(started),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_tool"]
