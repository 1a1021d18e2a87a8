"""Structured lifecycle events for the flashcard pipeline."""

from __future__ import annotations

import logging
import os
import platform
import socket
import sys
import traceback
from typing import Any, Optional

LOGGER = logging.getLogger("flashcards.telemetry")

_ENV_KEYS_TO_LOG: tuple[str, ...] = (
    "SPLIT_THRESHOLD_PAGES",
    "CHUNK_SIZE_PAGES",
    "GENERATOR_PROVIDER",
    "GPT_MODEL",
    "GENERATOR_TIMEOUT_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "CSV_INCLUDE_HEADER",
    "LOG_LEVEL",
)


def _format_exception(error: BaseException) -> str:
    return "".join(traceback.format_exception(error.__class__, error, error.__traceback__))


def log_event(
    logger: Optional[logging.Logger],
    step: str,
    *,
    level: str = "info",
    req_id: str | None = None,
    duration_ms: float | None = None,
    exc: BaseException | str | None = None,
    details: dict[str, Any] | None = None,
    **payload: Any,
) -> None:
    """Emit a structured log event with the shared schema."""

    logger = logger or LOGGER
    event: dict[str, Any] = {"step": step, "module": logger.name}
    if req_id:
        event["req_id"] = req_id
    if duration_ms is not None:
        event["duration_ms"] = round(duration_ms, 3)
    if details is not None:
        event["details"] = details
    event.update(payload)

    exc_info = None
    if exc is not None:
        if isinstance(exc, BaseException):
            event["exc"] = _format_exception(exc)
            exc_info = (exc.__class__, exc, exc.__traceback__)
        else:
            event["exc"] = str(exc)

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(event, exc_info=exc_info)


def emit_app_startup_event(settings: Any = None) -> None:
    env_values = {key: os.getenv(key) for key in _ENV_KEYS_TO_LOG if os.getenv(key) is not None}
    details: dict[str, Any] = {
        "env": env_values,
        "python": sys.version.split()[0],
        "platform": platform.platform(),
    }
    if settings is not None:
        details["threshold_pages"] = settings.threshold_pages
        details["chunk_size_pages"] = settings.chunk_size_pages
        details["generator_provider"] = settings.generator_provider
    log_event(
        LOGGER,
        "app.startup",
        details=details,
        pid=os.getpid(),
        hostname=socket.gethostname(),
    )


def emit_pipeline_event(
    step: str,
    *,
    req_id: str | None = None,
    file_name: str | None = None,
    size_bytes: int | None = None,
    pages: int | None = None,
    chunks: int | None = None,
    records: int | None = None,
    duration_ms: float | None = None,
) -> None:
    details = {
        "file": file_name,
        "size_bytes": size_bytes,
        "pages": pages,
        "chunks": chunks,
        "records": records,
    }
    log_event(
        LOGGER,
        step,
        req_id=req_id,
        duration_ms=duration_ms,
        details={key: value for key, value in details.items() if value is not None},
    )


def emit_generation_request(
    *,
    req_id: str | None,
    position: int,
    start_page: int,
    end_page: int,
    size_bytes: int,
) -> None:
    log_event(
        LOGGER,
        "generation.request",
        req_id=req_id,
        details={
            "position": position,
            "pages": [start_page, end_page],
            "size_bytes": size_bytes,
        },
    )


def emit_generation_result(
    *,
    req_id: str | None,
    position: int,
    records: int,
    duration_ms: float,
) -> None:
    log_event(
        LOGGER,
        "generation.result",
        req_id=req_id,
        duration_ms=duration_ms,
        details={"position": position, "records": records},
    )


def emit_exception(
    *,
    module: str,
    error: BaseException,
    req_id: str | None = None,
    suggestion: str | None = None,
) -> None:
    details = {"module": module, "error_type": type(error).__name__}
    if suggestion:
        details["suggestion"] = suggestion
    log_event(
        LOGGER,
        "exception",
        level="error",
        req_id=req_id,
        details=details,
        exc=error,
    )
