"""Query execution mixin for SqlTermApp.

Implements the dispatcher's ``QueryRunner`` with Textual workers. Every
submission gets its own worker; nothing is cancelled, and stale outcomes are
sorted out by generation when they come back.
"""

from __future__ import annotations

import logging

from textual.message import Message

from sqlterm.core.events import QueryCompleted
from sqlterm.domains.query.app.query_task import QueryOutcome, run_query
from sqlterm.ui.protocols import AppProtocol

logger = logging.getLogger(__name__)


class QueryResultMessage(Message):
    """Posted by a query worker when its task finishes."""

    def __init__(self, outcome: QueryOutcome) -> None:
        super().__init__()
        self.outcome = outcome


class QueryMixin:
    """Mixin providing query execution functionality."""

    def submit(self: AppProtocol, sql: str, generation: int) -> None:
        self.run_worker(
            self._run_query_async(sql, generation),
            name=f"query-{generation}",
            group="query",
        )

    def run_background(self: AppProtocol, sql: str) -> None:
        self.run_worker(self._run_background_async(sql), name="ddl", group="ddl")

    async def _run_query_async(self: AppProtocol, sql: str, generation: int) -> None:
        max_rows = self.config.execution.max_rows or None
        outcome = await run_query(self.engine, sql, generation, max_rows)
        self.post_message(QueryResultMessage(outcome))

    async def _run_background_async(self: AppProtocol, sql: str) -> None:
        outcome = await run_query(self.engine, sql)
        if outcome.succeeded:
            logger.info("DDL statement executed in %.3fs", outcome.elapsed)
        else:
            logger.error("DDL statement failed: %s", outcome.error)

    def on_query_result_message(self: AppProtocol, message: QueryResultMessage) -> None:
        self.dispatcher.handle(QueryCompleted(message.outcome))
        self.refresh_view()
