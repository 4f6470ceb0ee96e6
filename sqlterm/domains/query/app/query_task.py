"""Query submission and its outcome.

A query task turns submitted SQL into exactly one ``QueryOutcome``. Tasks do
not touch UI state; the dispatcher applies outcomes to the active ``Query``
and to the session history on the UI loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace

from sqlterm.db.engine import EngineHandle
from sqlterm.db.exceptions import EngineClosedError, QueryExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryOutcome:
    """What a finished query task reports back to the UI loop."""

    sql: str
    generation: int
    elapsed: float
    columns: list[str] = field(default_factory=list)
    rows: list[tuple] = field(default_factory=list)
    row_count: int = 0
    truncated: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Query:
    """A submitted query and, once completed, its result or error."""

    sql: str
    generation: int = 0
    columns: list[str] | None = None
    rows: list[tuple] | None = None
    num_rows: int | None = None
    truncated: bool = False
    error: str | None = None
    elapsed_time: float = 0.0
    completed: bool = False

    def with_outcome(self, outcome: QueryOutcome) -> Query:
        """Return the completed form of this query."""
        if outcome.succeeded:
            return replace(
                self,
                columns=list(outcome.columns),
                rows=list(outcome.rows),
                num_rows=outcome.row_count,
                truncated=outcome.truncated,
                elapsed_time=outcome.elapsed,
                completed=True,
            )
        return replace(self, error=outcome.error, elapsed_time=outcome.elapsed, completed=True)

    @classmethod
    def from_outcome(cls, outcome: QueryOutcome) -> Query:
        return cls(outcome.sql, outcome.generation).with_outcome(outcome)

    @property
    def has_results(self) -> bool:
        return bool(self.columns)


def execute_query(
    engine: EngineHandle,
    sql: str,
    generation: int = 0,
    max_rows: int | None = None,
) -> QueryOutcome:
    """Run ``sql`` and describe the result. Blocks the calling thread."""
    start = time.perf_counter()
    try:
        result = engine.execute(sql, max_rows=max_rows)
    except (QueryExecutionError, EngineClosedError) as exc:
        elapsed = time.perf_counter() - start
        logger.error("Error executing query (generation %d): %s", generation, exc)
        return QueryOutcome(sql=sql, generation=generation, elapsed=elapsed, error=str(exc))

    elapsed = time.perf_counter() - start
    logger.info("Query (generation %d) returned %d rows in %.3fs", generation, result.row_count, elapsed)
    return QueryOutcome(
        sql=sql,
        generation=generation,
        elapsed=elapsed,
        columns=result.columns,
        rows=result.rows,
        row_count=result.row_count,
        truncated=result.truncated,
    )


async def run_query(
    engine: EngineHandle,
    sql: str,
    generation: int = 0,
    max_rows: int | None = None,
) -> QueryOutcome:
    """Run ``sql`` on a worker thread so the UI loop keeps processing events."""
    return await asyncio.to_thread(execute_query, engine, sql, generation, max_rows)
