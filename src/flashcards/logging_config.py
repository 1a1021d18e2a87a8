"""Logging setup for the flashcard service."""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

AUDIT_LOGGER_NAME = "flashcards.audit"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class MinimalJSONFormatter(logging.Formatter):
    """Render each record as one line of JSON."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z")
        )
        payload: dict[str, Any] = {
            "ts": timestamp,
            "level": record.levelname,
            "logger": record.name,
        }

        # Structured events are logged as dicts and merged as-is.
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            message = record.getMessage()
            if message:
                payload["message"] = message

        if record.exc_info and "exc" not in payload:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key.startswith("_"):
                continue
            payload.setdefault(key, value)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(log_dir: Path | None = None) -> None:
    """Install JSON logging on the root logger and the audit file handler."""

    log_dir = log_dir or Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": MinimalJSONFormatter}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
                "audit": {
                    "class": "logging.FileHandler",
                    "filename": str(log_dir / "flashcards_audit.log"),
                    "mode": "a",
                    "encoding": "utf-8",
                    "formatter": "json",
                },
            },
            "root": {"level": level, "handlers": ["default"]},
            "loggers": {
                AUDIT_LOGGER_NAME: {
                    "level": "INFO",
                    "handlers": ["audit"],
                    "propagate": False,
                }
            },
        }
    )
