"""Logging bootstrap for the sqlterm process.

All module loggers live under the ``sqlterm`` logger. ``configure`` wires it
once per process: a rotating file handler always, a stderr handler in batch
mode only (the TUI owns the terminal), and the in-app handler that feeds the
Logs tab is attached by the app itself.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sqlterm.config import LOG_DIR

from .state import LogsTabState

ROOT_LOGGER = "sqlterm"


@dataclass(frozen=True)
class LoggingRuntime:
    """Resolved runtime logging configuration."""

    level_name: str
    level: int
    file_path: str


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str) -> tuple[str, int]:
    normalized = str(raw or "INFO").strip().upper()
    level = getattr(logging, normalized, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    return logging.getLevelName(level), level


def _make_stream_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(max(level, logging.WARNING))
    handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
    return handler


def _make_file_handler(level: int, file_path: str) -> logging.Handler:
    handler = RotatingFileHandler(
        file_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


class LogsTabHandler(logging.Handler):
    """Copies records into the Logs tab state.

    Records may arrive from query worker threads; ``deque.append`` is atomic,
    so no extra locking is needed.
    """

    def __init__(self, logs: LogsTabState) -> None:
        super().__init__(logging.DEBUG)
        self.logs = logs
        self.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < self.logs.level:
            return
        try:
            self.logs.lines.append(self.format(record))
        except Exception:
            self.handleError(record)


def configure(batch: bool = False) -> LoggingRuntime:
    """Configure the sqlterm logger hierarchy.

    Idempotent: repeated calls return the originally configured runtime.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level = _parse_level(os.environ.get("SQLTERM_LOG_LEVEL", "INFO"))
    file_path = os.environ.get("SQLTERM_LOG_FILE", str(LOG_DIR / "sqlterm.log"))
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(_make_file_handler(level, file_path))
    if batch:
        logger.addHandler(_make_stream_handler(level))

    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name=level_name, level=level, file_path=file_path)
    return _RUNTIME


def attach_logs_tab(logs: LogsTabState) -> LogsTabHandler:
    handler = LogsTabHandler(logs)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > logging.DEBUG:
        logger.setLevel(logging.DEBUG)
    return handler


def detach_logs_tab(handler: LogsTabHandler) -> None:
    logging.getLogger(ROOT_LOGGER).removeHandler(handler)


def get_runtime() -> LoggingRuntime | None:
    """Return configured logging runtime, if configure() has run."""
    return _RUNTIME
