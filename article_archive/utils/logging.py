"""
Logging setup for lint runs.

Console output goes through rich so it interleaves cleanly with the
progress bar; the optional run log is written next to the lint report,
one JSON object per line by default.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from ..config import LoggingConfig

LOGGER_NAME = "article_archive"

# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def setup_logging(
    cfg: LoggingConfig,
    report_dir: Path | None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the package logger for one run.

    Args:
        cfg: Logging settings
        report_dir: Directory receiving the run log; no file log when None
        console: Rich console shared with the progress display

    Returns:
        The configured package logger
    """
    level = _parse_level(cfg.level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if cfg.console:
        handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
        handler.setLevel(level)
        logger.addHandler(handler)

    if cfg.file and report_dir is not None:
        report_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(report_dir / cfg.filename, encoding="utf-8")
        handler.setLevel(level)
        if cfg.format == "jsonl":
            handler.setFormatter(JsonlFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)

    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log a message with structured fields (event name, path, counts)."""
    if logger is None:
        return
    logger.log(level, message, extra=fields)


class JsonlFormatter(logging.Formatter):
    """Render a record and its structured fields as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        payload.update((key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.WARNING
