"""Event dispatcher: routes application events to state changes.

The dispatcher runs on the UI loop only. Key presses are routed by the
selected tab and the query tab's input mode; query submissions are handed to
a ``QueryRunner`` and come back later as ``QueryCompleted`` events.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

from sqlterm.config import AppConfig
from sqlterm.domains.query.app.query_task import QueryOutcome
from sqlterm.domains.query.app.statements import split_statements

from .events import AppEvent, ExecuteDDL, KeyPressed, QueryCompleted, Tick
from .keys import Key, KeyCode
from .state import TAB_KEYS, AppState, Tab

logger = logging.getLogger(__name__)

LOG_PAGE_SIZE = 10


class QueryRunner(Protocol):
    """Starts query tasks off the UI loop."""

    def submit(self, sql: str, generation: int) -> None:
        """Run ``sql``; its outcome must come back as ``QueryCompleted``."""

    def run_background(self, sql: str) -> None:
        """Run ``sql`` without reporting an outcome to the UI."""


class EventDispatcher:
    """Applies ``AppEvent`` values to ``AppState``."""

    def __init__(self, state: AppState, runner: QueryRunner, config: AppConfig | None = None) -> None:
        self.state = state
        self.runner = runner
        self.config = config or AppConfig()

    def handle(self, event: AppEvent) -> None:
        start = time.perf_counter()
        if isinstance(event, KeyPressed):
            self.state.notice = None
            self._handle_key(event.key)
        elif isinstance(event, QueryCompleted):
            self._apply_outcome(event.outcome)
        elif isinstance(event, ExecuteDDL):
            self._execute_ddl(event.sql)
        elif isinstance(event, Tick):
            pass
        logger.debug("Handling %s took %.3fms", type(event).__name__, (time.perf_counter() - start) * 1000)

    def submit(self, sql: str) -> int | None:
        """Start a query for ``sql`` and return its generation."""
        if not sql.strip():
            self.state.notice = "No query to execute"
            logger.warning("Ignoring empty query submission")
            return None
        explore = self.state.explore
        query = explore.start_query(sql)
        explore.session.statement_terminated = False
        logger.info("Run query (generation %d): %s", query.generation, sql.strip())
        self.runner.submit(sql, query.generation)
        return query.generation

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _handle_key(self, key: Key) -> None:
        logger.debug("Key: %s", key)
        state = self.state

        if state.selected_tab is Tab.QUERY and state.explore.editable:
            self._explore_editable_handler(key)
            return

        if key.is_char("q"):
            state.should_quit = True
            return
        if key.code is KeyCode.CHAR and key.char in TAB_KEYS:
            state.select_tab(TAB_KEYS[key.char])
            return

        if state.selected_tab is Tab.QUERY:
            self._explore_normal_handler(key)
        elif state.selected_tab is Tab.HISTORY:
            self._history_handler(key)
        elif state.selected_tab is Tab.LOGS:
            self._logs_handler(key)

    def _explore_normal_handler(self, key: Key) -> None:
        explore = self.state.explore
        if key.is_char("c"):
            explore.clear_editor()
        elif key.is_char("e"):
            explore.edit()
        elif key.code is KeyCode.DOWN:
            if explore.query is not None and explore.query.has_results:
                explore.results.select_next(explore.result_row_count())
        elif key.code is KeyCode.UP:
            if explore.query is not None and explore.query.has_results:
                explore.results.select_previous(explore.result_row_count())
        elif key.code is KeyCode.ENTER:
            self.submit(explore.session.text())

    def _explore_editable_handler(self, key: Key) -> None:
        explore = self.state.explore
        session = explore.session
        buffer = session.input

        if key.code is KeyCode.ESC:
            explore.exit_edit()
        elif self._is_submit_key(key):
            self.submit(session.text())
        elif key.code is KeyCode.ENTER:
            if self.config.interaction.run_on_terminated_enter and session.statement_terminated:
                self.submit(session.text())
            else:
                session.append_char("\n")
        elif key.code is KeyCode.CHAR:
            session.append_char(key.char)
        elif key.code is KeyCode.LEFT:
            buffer.previous_char()
        elif key.code is KeyCode.RIGHT:
            buffer.next_char()
        elif key.code is KeyCode.UP:
            buffer.up_row()
        elif key.code is KeyCode.DOWN:
            buffer.down_row()
        elif key.code is KeyCode.TAB:
            buffer.tab()
        elif key.code is KeyCode.BACKSPACE:
            buffer.backspace()

    @staticmethod
    def _is_submit_key(key: Key) -> bool:
        return key.code is KeyCode.F5 or (key.code is KeyCode.ENTER and key.control)

    def _history_handler(self, key: Key) -> None:
        entries = self.state.history_entries()
        selection = self.state.history.selection
        if key.code is KeyCode.DOWN:
            selection.select_next(len(entries))
        elif key.code is KeyCode.UP:
            selection.select_previous(len(entries))
        elif key.code is KeyCode.ENTER and selection.selected is not None:
            query = entries[selection.selected]
            self.state.session.load_text(query.sql)
            self.state.select_tab(Tab.QUERY)

    def _logs_handler(self, key: Key) -> None:
        logs = self.state.logs
        if key.code is KeyCode.UP:
            logs.scroll_back()
        elif key.code is KeyCode.DOWN:
            logs.scroll_forward()
        elif key.code is KeyCode.PAGE_UP:
            logs.scroll_back(LOG_PAGE_SIZE)
        elif key.code is KeyCode.PAGE_DOWN:
            logs.scroll_forward(LOG_PAGE_SIZE)
        elif key.is_char("+"):
            logs.more_verbose()
        elif key.is_char("-"):
            logs.less_verbose()

    # ------------------------------------------------------------------
    # Query completion and DDL
    # ------------------------------------------------------------------

    def _apply_outcome(self, outcome: QueryOutcome) -> None:
        logger.info("Query results: generation %d, %d rows", outcome.generation, outcome.row_count)
        self.state.explore.apply_outcome(outcome)
        self.state.history.selection.reset()

    def _execute_ddl(self, sql: str) -> None:
        statements = split_statements(sql)
        logger.info("Executing %d DDL statements", len(statements))
        for statement in statements:
            self.runner.run_background(statement)
