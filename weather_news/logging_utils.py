"""Logging setup: rich console output plus an optional JSONL event file.

Structured fields are passed through ``extra`` by log_event() and end up as
top-level keys of each JSONL record.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from .config import LoggingConfig

PACKAGE_LOGGER = "weather_news"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def setup_logging(cfg: LoggingConfig) -> logging.Logger:
    """Attach the configured handlers to the package logger, replacing old ones."""
    level = logging.getLevelName(cfg.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(RichHandler(rich_tracebacks=True, show_time=False))
    if cfg.file:
        path = Path(cfg.filename).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        if cfg.format == "jsonl":
            file_handler.setFormatter(JsonlFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
            )
        handlers.append(file_handler)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in logger.handlers:
        old.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger | None,
    message: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    if logger is not None:
        logger.log(level, message, extra=fields)


class JsonlFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)
