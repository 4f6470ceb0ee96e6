"""Tests for query execution against DuckDB."""

from __future__ import annotations

import pytest

from sqlterm.db.engine import EngineHandle
from sqlterm.db.exceptions import EngineClosedError, QueryExecutionError
from sqlterm.domains.query.app.query_task import Query, QueryOutcome, execute_query, run_query


class TestExecuteQuery:
    """Tests for execute_query."""

    @pytest.mark.parametrize("sql", ["SELECT 1 + 1", "SELECT 1 + 1;"])
    def test_simple_select(self, engine, sql):
        outcome = execute_query(engine, sql, generation=3)

        assert outcome.succeeded
        assert outcome.generation == 3
        assert outcome.row_count == 1
        assert outcome.rows == [(2,)]
        assert len(outcome.columns) == 1
        assert outcome.elapsed >= 0

    def test_parser_error(self, engine):
        outcome = execute_query(engine, "SELECT this is not valid SQL")

        assert not outcome.succeeded
        assert "Parser Error" in outcome.error
        assert outcome.rows == []

    def test_row_limit_truncates(self, engine):
        outcome = execute_query(engine, "SELECT * FROM range(10)", max_rows=3)

        assert outcome.row_count == 3
        assert outcome.truncated

    def test_statements_share_the_database(self, engine):
        assert execute_query(engine, "CREATE TABLE t (a INTEGER)").succeeded
        assert execute_query(engine, "INSERT INTO t VALUES (1), (2)").succeeded

        outcome = execute_query(engine, "SELECT count(*) FROM t")

        assert outcome.rows == [(2,)]

    def test_closed_engine_reports_error(self):
        engine = EngineHandle()
        engine.close()

        outcome = execute_query(engine, "SELECT 1")

        assert not outcome.succeeded
        assert "closed" in outcome.error


async def test_run_query_off_loop(engine):
    outcome = await run_query(engine, "SELECT 40 + 2", generation=7)

    assert outcome.succeeded
    assert outcome.generation == 7
    assert outcome.rows == [(42,)]


class TestEngineHandle:
    """Tests for EngineHandle."""

    def test_connects_lazily(self):
        engine = EngineHandle()
        assert not engine.is_connected
        engine.execute("SELECT 1")
        assert engine.is_connected
        engine.close()

    def test_execute_raises_query_execution_error(self, engine):
        with pytest.raises(QueryExecutionError) as exc_info:
            engine.execute("SELEC 1")
        assert exc_info.value.sql == "SELEC 1"

    def test_closed_engine_raises(self):
        engine = EngineHandle()
        engine.close()
        with pytest.raises(EngineClosedError):
            engine.connection()

    def test_reconnect_reopens(self):
        engine = EngineHandle()
        engine.close()
        engine.reconnect()
        assert engine.execute("SELECT 5").rows == [(5,)]
        engine.close()

    def test_custom_connect_factory(self):
        opened: list[str] = []

        def connect(database: str):
            import duckdb

            opened.append(database)
            return duckdb.connect(database)

        engine = EngineHandle(connect=connect)
        engine.execute("SELECT 1")
        engine.execute("SELECT 2")
        engine.close()

        assert opened == [":memory:"]


class TestQuery:
    """Tests for applying outcomes to queries."""

    def test_with_successful_outcome(self):
        outcome = QueryOutcome(sql="SELECT 1", generation=2, elapsed=0.5, columns=["a"], rows=[(1,)], row_count=1)

        query = Query("SELECT 1", 2).with_outcome(outcome)

        assert query.completed
        assert query.has_results
        assert query.num_rows == 1
        assert query.elapsed_time == 0.5
        assert query.error is None

    def test_with_failed_outcome(self):
        outcome = QueryOutcome(sql="x", generation=1, elapsed=0.1, error="boom")

        query = Query.from_outcome(outcome)

        assert query.completed
        assert query.error == "boom"
        assert not query.has_results
