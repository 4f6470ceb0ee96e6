"""Tests for the event dispatcher."""

from __future__ import annotations

import logging

from sqlterm.config import AppConfig, DisplayConfig, InteractionConfig
from sqlterm.core.dispatcher import EventDispatcher
from sqlterm.core.events import ExecuteDDL, KeyPressed, QueryCompleted, Tick
from sqlterm.core.keys import Key, KeyCode, Modifier
from sqlterm.core.state import AppState, InputMode, Tab
from sqlterm.domains.query.app.query_task import QueryOutcome

ENTER = Key(KeyCode.ENTER)
CTRL_ENTER = Key(KeyCode.ENTER, modifiers=Modifier.CONTROL)
ESC = Key(KeyCode.ESC)
UP = Key(KeyCode.UP)
DOWN = Key(KeyCode.DOWN)
F5 = Key(KeyCode.F5)


def press(dispatcher: EventDispatcher, *keys: Key | str) -> None:
    for key in keys:
        if isinstance(key, str):
            for char in key:
                dispatcher.handle(KeyPressed(Key.of(char)))
        else:
            dispatcher.handle(KeyPressed(key))


def outcome(generation: int, rows: int = 3, sql: str = "SELECT a FROM t") -> QueryOutcome:
    return QueryOutcome(
        sql=sql,
        generation=generation,
        elapsed=0.01,
        columns=["a"],
        rows=[(i,) for i in range(rows)],
        row_count=rows,
    )


class TestModes:
    """Normal/Editable mode transitions."""

    def test_edit_and_escape(self, dispatcher, state):
        assert state.explore.mode is InputMode.NORMAL
        press(dispatcher, "e")
        assert state.explore.mode is InputMode.EDITABLE
        press(dispatcher, ESC)
        assert state.explore.mode is InputMode.NORMAL

    def test_typing_in_edit_mode_goes_to_buffer(self, dispatcher, state):
        press(dispatcher, "e", "select q;", ENTER, "x")
        assert state.session.text() == "select q;\nx"
        assert not state.should_quit

    def test_characters_ignored_in_normal_mode(self, dispatcher, state):
        press(dispatcher, "z")
        assert state.session.text() == ""

    def test_q_quits_in_normal_mode(self, dispatcher, state):
        press(dispatcher, "q")
        assert state.should_quit

    def test_clear_in_normal_mode(self, dispatcher, state):
        press(dispatcher, "e", "select 1", ESC, "c")
        assert state.session.text() == ""

    def test_editing_keys(self, dispatcher, state):
        press(dispatcher, "e", "ab", Key(KeyCode.LEFT), Key(KeyCode.BACKSPACE), Key(KeyCode.RIGHT), Key(KeyCode.TAB))
        assert state.session.text() == "b    "


class TestTabs:
    """Tab selection."""

    def test_tab_keys(self, dispatcher, state):
        press(dispatcher, "h")
        assert state.selected_tab is Tab.HISTORY
        press(dispatcher, "l")
        assert state.selected_tab is Tab.LOGS
        press(dispatcher, "x")
        assert state.selected_tab is Tab.CONTEXT
        press(dispatcher, "s")
        assert state.selected_tab is Tab.QUERY

    def test_tab_keys_are_text_in_edit_mode(self, dispatcher, state):
        press(dispatcher, "e", "h")
        assert state.selected_tab is Tab.QUERY
        assert state.session.text() == "h"

    def test_disabled_tab_cannot_be_selected(self, runner):
        config = AppConfig(display=DisplayConfig(show_logs_tab=False))
        state = AppState.from_config(config)
        dispatcher = EventDispatcher(state, runner, config)

        press(dispatcher, "l")

        assert Tab.LOGS not in state.tabs
        assert state.selected_tab is Tab.QUERY


class TestSubmission:
    """Query submission and completion."""

    def test_enter_in_normal_mode_submits(self, dispatcher, state, runner):
        press(dispatcher, "e", "select 1", ESC, ENTER)

        assert runner.submitted == [("select 1", 1)]
        assert state.explore.query is not None
        assert not state.explore.query.completed
        assert state.explore.mode is InputMode.NORMAL

    def test_f5_submits_and_stays_editable(self, dispatcher, state, runner):
        press(dispatcher, "e", "select 1;", F5)

        assert runner.submitted == [("select 1;", 1)]
        assert state.explore.mode is InputMode.EDITABLE
        assert not state.session.statement_terminated

    def test_ctrl_enter_submits(self, dispatcher, runner):
        press(dispatcher, "e", "select 1", CTRL_ENTER)
        assert runner.submitted == [("select 1", 1)]

    def test_blank_submission_sets_notice(self, dispatcher, state, runner):
        press(dispatcher, ENTER)

        assert runner.submitted == []
        assert state.notice == "No query to execute"
        assert state.explore.query is None

        press(dispatcher, "h")
        assert state.notice is None

    def test_enter_runs_terminated_statement_when_enabled(self, runner):
        config = AppConfig(interaction=InteractionConfig(run_on_terminated_enter=True))
        state = AppState.from_config(config)
        dispatcher = EventDispatcher(state, runner, config)

        press(dispatcher, "e", "select 1", ENTER)
        assert runner.submitted == []
        assert state.session.text() == "select 1\n"

        press(dispatcher, ";", ENTER)
        assert runner.submitted == [("select 1\n;", 1)]

    def test_completion_fills_active_slot(self, dispatcher, state):
        press(dispatcher, "e", "select a from t", F5)
        dispatcher.handle(QueryCompleted(outcome(1)))

        query = state.explore.query
        assert query.completed
        assert query.sql == "select a from t"
        assert query.num_rows == 3
        assert len(state.session.history) == 1

    def test_stale_completion_only_recorded(self, dispatcher, state, caplog):
        press(dispatcher, "e", "select 1", F5, "0", F5)
        assert state.explore.generation == 2

        with caplog.at_level(logging.INFO, logger="sqlterm"):
            dispatcher.handle(QueryCompleted(outcome(1, sql="select 1")))

        assert state.explore.query.generation == 2
        assert not state.explore.query.completed
        assert [q.sql for q in state.session.history] == ["select 1"]
        assert "Discarding stale result" in caplog.text

        dispatcher.handle(QueryCompleted(outcome(2, sql="select 10")))
        assert state.explore.query.completed
        assert len(state.session.history) == 2

    def test_error_outcome(self, dispatcher, state):
        press(dispatcher, "e", "bad", F5)
        failed = QueryOutcome(sql="bad", generation=1, elapsed=0.0, error="Parser Error: boom")
        dispatcher.handle(QueryCompleted(failed))

        assert state.explore.query.error == "Parser Error: boom"
        assert not state.explore.query.has_results

    def test_completion_handled_on_any_tab(self, dispatcher, state):
        press(dispatcher, "e", "select 1", F5, ESC, "h")
        dispatcher.handle(QueryCompleted(outcome(1)))
        assert state.explore.query.completed


class TestResultsSelection:
    """Up/Down over the result rows in normal mode."""

    def test_select_rows(self, dispatcher, state):
        press(dispatcher, "e", "select a from t", F5, ESC)
        dispatcher.handle(QueryCompleted(outcome(1, rows=3)))
        results = state.explore.results

        press(dispatcher, DOWN)
        assert results.selected == 0
        press(dispatcher, DOWN, DOWN, DOWN)
        assert results.selected == 2
        press(dispatcher, UP)
        assert results.selected == 1

    def test_up_without_selection_picks_last_row(self, dispatcher, state):
        press(dispatcher, "e", "select a from t", F5, ESC)
        dispatcher.handle(QueryCompleted(outcome(1, rows=3)))

        press(dispatcher, UP)
        assert state.explore.results.selected == 2

    def test_no_selection_without_results(self, dispatcher, state):
        press(dispatcher, DOWN)
        assert state.explore.results.selected is None

    def test_new_submission_resets_selection(self, dispatcher, state):
        press(dispatcher, "e", "select a from t", F5, ESC)
        dispatcher.handle(QueryCompleted(outcome(1)))
        press(dispatcher, DOWN, ENTER)
        assert state.explore.results.selected is None


class TestHistoryTab:
    """History tab navigation."""

    def test_enter_loads_selected_query(self, dispatcher, state):
        press(dispatcher, "e", "select 1", F5)
        dispatcher.handle(QueryCompleted(outcome(1, sql="select 1")))
        press(dispatcher, "0", F5)
        dispatcher.handle(QueryCompleted(outcome(2, sql="select 10")))
        press(dispatcher, ESC, "h")

        press(dispatcher, DOWN, DOWN, ENTER)

        assert state.selected_tab is Tab.QUERY
        assert state.session.text() == "select 1\n"

    def test_entries_newest_first(self, dispatcher, state):
        dispatcher.handle(QueryCompleted(outcome(1, sql="first")))
        dispatcher.handle(QueryCompleted(outcome(2, sql="second")))
        assert [q.sql for q in state.history_entries()] == ["second", "first"]

    def test_enter_without_selection_is_noop(self, dispatcher, state):
        dispatcher.handle(QueryCompleted(outcome(1)))
        press(dispatcher, "h", ENTER)
        assert state.selected_tab is Tab.HISTORY


class TestLogsTab:
    """Logs tab scrolling and level changes."""

    def test_level_changes(self, dispatcher, state):
        press(dispatcher, "l")
        assert state.logs.level == logging.INFO
        press(dispatcher, "+")
        assert state.logs.level == logging.DEBUG
        press(dispatcher, "+")
        assert state.logs.level == logging.DEBUG
        press(dispatcher, "-", "-", "-", "-")
        assert state.logs.level == logging.ERROR

    def test_scrolling(self, dispatcher, state):
        state.logs.lines.extend(f"line {i}" for i in range(30))
        press(dispatcher, "l", UP, UP)
        assert state.logs.offset == 2
        press(dispatcher, Key(KeyCode.PAGE_UP))
        assert state.logs.offset == 12
        press(dispatcher, Key(KeyCode.PAGE_DOWN), Key(KeyCode.PAGE_DOWN))
        assert state.logs.offset == 0
        press(dispatcher, DOWN)
        assert state.logs.offset == 0


class TestOtherEvents:
    """DDL and tick events."""

    def test_execute_ddl_runs_each_statement(self, dispatcher, runner):
        dispatcher.handle(ExecuteDDL("-- setup\nCREATE TABLE t (a INT);\nINSERT INTO t VALUES (1);\n"))
        assert runner.background == ["CREATE TABLE t (a INT)", "INSERT INTO t VALUES (1)"]
        assert runner.submitted == []

    def test_tick_changes_nothing(self, dispatcher, state):
        dispatcher.handle(Tick())
        assert state.selected_tab is Tab.QUERY
        assert state.explore.query is None
