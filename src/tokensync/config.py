"""
Project configuration loaded from ``tokensync.toml``.

Every section and key is optional; a missing file yields the defaults.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError, ErrorContext

CONFIG_FILENAME = "tokensync.toml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SyncConfig:
    """Live sync timing."""

    debounce_seconds: float = 0.5
    poll_interval_seconds: float = 3.0


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: Path | None = None  # JSONL file logging is off when unset


@dataclass
class DocsConfig:
    collection_name: str = "Variables"


@dataclass
class TokenSyncConfig:
    sync: SyncConfig = field(default_factory=SyncConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)


def _positive(section: dict[str, Any], key: str, default: float, path: Path) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        raise ConfigError(
            f"{key} must be a positive number, got {value!r}",
            ErrorContext(file=path, entity=key),
        )
    return float(value)


def load_config(path: Path) -> TokenSyncConfig:
    """Parse a ``tokensync.toml`` file.

    Raises:
        ConfigError: If the file is not valid TOML or a value is out of range.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", ErrorContext(file=path)) from e

    sync_data = data.get("sync", {})
    logging_data = data.get("logging", {})
    docs_data = data.get("docs", {})

    sync_config = SyncConfig(
        debounce_seconds=_positive(sync_data, "debounce_seconds", 0.5, path),
        poll_interval_seconds=_positive(sync_data, "poll_interval_seconds", 3.0, path),
    )

    level = str(logging_data.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level {level!r}", ErrorContext(file=path, entity="level")
        )
    log_dir = logging_data.get("log_dir")
    logging_config = LoggingConfig(
        level=level,
        log_dir=(path.parent / log_dir) if log_dir else None,
    )

    docs_config = DocsConfig(
        collection_name=docs_data.get("collection_name", "Variables"),
    )

    return TokenSyncConfig(sync=sync_config, logging=logging_config, docs=docs_config)


def find_config(start: Path | None = None) -> TokenSyncConfig:
    """Load ``tokensync.toml`` from *start* (default: cwd), or return defaults."""
    path = (start or Path.cwd()) / CONFIG_FILENAME
    if not path.exists():
        return TokenSyncConfig()
    return load_config(path)
