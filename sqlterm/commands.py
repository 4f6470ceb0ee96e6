"""Non-interactive command handlers (``sqlterm -f``)."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape as escape_markup
from rich.table import Table

from .config import AppConfig
from .db.engine import EngineHandle
from .domains.query.app.query_task import QueryOutcome, execute_query
from .domains.query.app.statements import split_statements

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_EXECUTION_FAILURE = 101


def build_result_table(outcome: QueryOutcome) -> Table:
    """Render a successful outcome as an ASCII table."""
    table = Table(box=box.ASCII, show_edge=True, header_style="bold")
    for column in outcome.columns:
        table.add_column(escape_markup(column))
    for row in outcome.rows:
        table.add_row(*("NULL" if value is None else escape_markup(str(value)) for value in row))
    return table


def _run_startup_ddl(engine: EngineHandle, config: AppConfig) -> None:
    ddl_path = config.ddl_path()
    if not ddl_path.is_file():
        return
    for statement in split_statements(ddl_path.read_text(encoding="utf-8")):
        outcome = execute_query(engine, statement)
        if not outcome.succeeded:
            logger.warning("DDL statement failed: %s", outcome.error)


def cmd_execute_files(
    paths: Iterable[Path],
    config: AppConfig,
    console: Console | None = None,
    engine: EngineHandle | None = None,
) -> int:
    """Execute every statement of every file in order.

    Stops at the first failing statement and returns ``EXIT_EXECUTION_FAILURE``.
    """
    console = console or Console(file=sys.stdout, highlight=False)
    engine = engine or EngineHandle(config.execution.database)
    max_rows = config.execution.max_rows or None

    try:
        _run_startup_ddl(engine, config)
        for path in paths:
            sql = Path(path).read_text(encoding="utf-8")
            statements = split_statements(sql)
            logger.info("Executing %d statements from %s", len(statements), path)
            for statement in statements:
                outcome = execute_query(engine, statement, max_rows=max_rows)
                if not outcome.succeeded:
                    print(f"Error executing '{statement}': {outcome.error}", file=sys.stderr)
                    return EXIT_EXECUTION_FAILURE
                if outcome.columns:
                    console.print(build_result_table(outcome))
                if outcome.truncated:
                    print(f"(truncated to {outcome.row_count} rows)", file=sys.stderr)
    finally:
        engine.close()

    return EXIT_SUCCESS
