"""
Logging setup for tokensync.

Console output is human-readable; when a log directory is configured every
record is also written as one JSON object per line, including the
structured ``context`` passed via ``extra={"context": {...}}``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

ROOT_LOGGER = "tokensync"
LOG_FILENAME = "tokensync.log"

_NO_COLOR = bool(os.environ.get("NO_COLOR")) or not sys.stderr.isatty()


class Colors:
    """ANSI color codes, blank when NO_COLOR is set or stderr is not a tty."""

    RESET = "" if _NO_COLOR else "\033[0m"
    DIM = "" if _NO_COLOR else "\033[2m"
    COMPONENT = "" if _NO_COLOR else "\033[35m"

    DEBUG = "" if _NO_COLOR else "\033[36m"
    WARNING = "" if _NO_COLOR else "\033[33m"
    ERROR = "" if _NO_COLOR else "\033[31m"
    CRITICAL = "" if _NO_COLOR else "\033[1;31m"


def _component(record: logging.LogRecord) -> str:
    """``tokensync.reconcile`` -> ``reconcile``."""
    name = record.name
    if name.startswith(ROOT_LOGGER + "."):
        return name[len(ROOT_LOGGER) + 1 :]
    return name


class JSONLFormatter(logging.Formatter):
    """
    One JSON object per line.

    Example output:
    {"timestamp":"2025-01-15T10:30:45.123000Z","level":"INFO","component":"reconcile","message":"Rebuilt row text:Heading","context":{"key":"text:Heading"}}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "component": _component(record),
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str, separators=(",", ":"))


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS [component] LEVEL: message``; the level is omitted for INFO."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        component = _component(record)

        if _NO_COLOR:
            prefix = f"[{timestamp}] [{component}]"
        else:
            prefix = (
                f"{Colors.DIM}{timestamp}{Colors.RESET} "
                f"{Colors.COMPONENT}[{component}]{Colors.RESET}"
            )

        if record.levelno != logging.INFO:
            level_name = record.levelname
            if not _NO_COLOR:
                level_name = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level_name}{Colors.RESET}"
            prefix = f"{prefix} {level_name}:"

        message = f"{prefix} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(
    level: str | int = logging.INFO,
    log_dir: Path | str | None = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> Path | None:
    """
    Configure the ``tokensync`` logger hierarchy.

    Installs a console handler on stderr and, when *log_dir* is given, a
    rotating JSONL file handler. Calling it again replaces both handlers.

    Args:
        level: Minimum level, as a name or number
        log_dir: Directory for ``tokensync.log``; no file logging when None
        max_bytes: Max size per log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Path to the log file, or None when only console logging is active
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ConsoleFormatter())
    root.addHandler(console)

    if log_dir is None:
        return None

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / LOG_FILENAME
    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setFormatter(JSONLFormatter())
    root.addHandler(file_handler)

    root.debug(
        "File logging initialized",
        extra={"context": {"log_format": "jsonl", "log_file": str(log_file)}},
    )
    return log_file
