# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for rseval.

Every log entry is a single JSON line with a timestamp, a level, the source
module and the message. Extra context passed through the `extra` kwarg is
merged into the same object.

Logs always go to stderr. Stdout belongs to the evaluated snippet: whatever
the user's program prints must come through untouched, so nothing of ours
is allowed to land there.

The JSON structure looks like:
  {"ts": "2026-...", "level": "ERROR", "module": "rseval.project.cache", "msg": "...", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# LogRecord attributes that are plumbing rather than caller context.
_STANDARD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     : ISO 8601 UTC timestamp
      level  : log level name
      module : the logger name
      msg    : the formatted message string

    Exception info, when present, is rendered into an "exc" field so a
    traceback never breaks the one-line-per-entry shape.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

DEFAULT_LOG_LEVEL = "WARNING"


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def get_logger(
    name: str,
    log_level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    This is the only sanctioned way to get a logger in rseval. Modules call
    it once at import time with their `__name__`; the CLI calls it again
    with the user's level, which updates the level on the existing handlers.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stderr and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    formatter = JsonFormatter()

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_logging(log_level: str, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Apply the run's log level to the whole `rseval` logger tree.

    Module loggers are created at import time with the default level, so
    the CLI calls this once after parsing arguments. Child loggers
    (`rseval.project.cache`, ...) are switched to propagate into the root
    `rseval` logger, which owns the handlers from then on.
    """
    root = get_logger("rseval", log_level=log_level, log_file=log_file)
    level = root.level

    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith("rseval."):
            continue
        child = logging.getLogger(name)
        child.handlers.clear()
        child.setLevel(level)
        child.propagate = True

    return root
