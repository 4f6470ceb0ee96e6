"""Shared handle to the DuckDB query engine.

The handle owns one DuckDB connection. Query tasks never use that connection
directly: each call takes its own cursor (a duplicate connection onto the
same database), so queries can run on worker threads concurrently while the
lock only guards installing or replacing the connection.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import duckdb

from .exceptions import EngineClosedError, QueryExecutionError

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


@dataclass
class QueryResult:
    """Rows returned by a single statement."""

    columns: list[str] = field(default_factory=list)
    rows: list[tuple] = field(default_factory=list)
    row_count: int = 0
    truncated: bool = False


class EngineHandle:
    """Lazily connected, thread-safe access to a DuckDB database."""

    def __init__(
        self,
        database: str = MEMORY_DATABASE,
        connect: Callable[[str], Any] | None = None,
    ) -> None:
        self.database = database
        self._connect = connect or duckdb.connect
        self._lock = threading.Lock()
        self._connection: Any | None = None
        self._closed = False

    @property
    def is_connected(self) -> bool:
        with self._lock:
            return self._connection is not None

    @property
    def version(self) -> str:
        return duckdb.__version__

    def connection(self) -> Any:
        """Return the installed connection, establishing it on first use."""
        with self._lock:
            if self._closed:
                raise EngineClosedError(self.database)
            if self._connection is not None:
                return self._connection

        fresh = self._open()
        with self._lock:
            if self._connection is None and not self._closed:
                self._connection = fresh
                return fresh
            existing = self._connection
        # Another caller won the race (or the handle was closed meanwhile).
        fresh.close()
        if existing is None:
            raise EngineClosedError(self.database)
        return existing

    def reconnect(self) -> Any:
        """Open a new connection and replace the current one."""
        fresh = self._open()
        with self._lock:
            previous, self._connection = self._connection, fresh
            self._closed = False
        if previous is not None:
            previous.close()
        return fresh

    def cursor(self) -> Any:
        return self.connection().cursor()

    def execute(self, sql: str, max_rows: int | None = None) -> QueryResult:
        """Run ``sql`` on a private cursor and fetch its result set.

        Raises:
            QueryExecutionError: If DuckDB fails to parse or execute ``sql``.
        """
        try:
            cursor = self.cursor()
        except duckdb.Error as exc:
            raise QueryExecutionError(str(exc), sql=sql) from exc
        try:
            cursor.execute(sql)
            if cursor.description is None:
                return QueryResult()
            columns = [str(column[0]) for column in cursor.description]
            if max_rows:
                rows = cursor.fetchmany(max_rows + 1)
                truncated = len(rows) > max_rows
                rows = rows[:max_rows]
            else:
                rows = cursor.fetchall()
                truncated = False
            return QueryResult(columns=columns, rows=rows, row_count=len(rows), truncated=truncated)
        except duckdb.Error as exc:
            raise QueryExecutionError(str(exc), sql=sql) from exc
        finally:
            cursor.close()

    def close(self) -> None:
        with self._lock:
            connection, self._connection = self._connection, None
            self._closed = True
        if connection is not None:
            connection.close()

    def _open(self) -> Any:
        logger.info("Connecting to DuckDB database %s", self.database)
        return self._connect(self.database)
