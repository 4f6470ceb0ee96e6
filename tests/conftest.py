"""Shared pytest fixtures for sqlterm tests."""

from __future__ import annotations

import logging

import pytest

from sqlterm.config import AppConfig, ExecutionConfig
from sqlterm.core import logging_setup
from sqlterm.core.dispatcher import EventDispatcher
from sqlterm.core.state import AppState
from sqlterm.db.engine import EngineHandle


class FakeRunner:
    """Records submissions instead of running them."""

    def __init__(self) -> None:
        self.submitted: list[tuple[str, int]] = []
        self.background: list[str] = []

    def submit(self, sql: str, generation: int) -> None:
        self.submitted.append((sql, generation))

    def run_background(self, sql: str) -> None:
        self.background.append(sql)


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Keep log files out of the home directory and reset handlers between tests."""
    monkeypatch.setenv("SQLTERM_LOG_FILE", str(tmp_path / "logs" / "sqlterm.log"))
    yield
    logger = logging.getLogger(logging_setup.ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging.captureWarnings(False)
    logging_setup._RUNTIME = None


@pytest.fixture
def config(tmp_path) -> AppConfig:
    # Point the startup DDL at a file that does not exist
    return AppConfig(execution=ExecutionConfig(ddl_path=str(tmp_path / "no-ddl.sql")))


@pytest.fixture
def engine():
    handle = EngineHandle()
    yield handle
    handle.close()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def state(config) -> AppState:
    return AppState.from_config(config)


@pytest.fixture
def dispatcher(state, runner, config) -> EventDispatcher:
    return EventDispatcher(state, runner, config)
