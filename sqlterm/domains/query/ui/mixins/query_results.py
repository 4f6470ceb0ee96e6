"""Result rendering helpers for query execution."""

from __future__ import annotations

from typing import Any

import pyarrow as pa
from rich.markup import escape as escape_markup
from textual.widgets import Static
from textual_fastdatatable import ArrowBackend

from sqlterm.domains.query.app.query_task import Query
from sqlterm.ui.protocols import AppProtocol
from sqlterm.ui.render import render_error
from sqlterm.ui.widgets import ResultsTable

MAX_RENDER_ROWS = 100000
MAX_COLUMN_CONTENT_WIDTH = 120


class QueryResultsMixin:
    """Mixin providing results rendering for queries."""

    _results_table_counter: int = 0
    _rendered_query: Query | None = None

    def _replace_results_table(self: AppProtocol, columns: list[str], rows: list[tuple]) -> None:
        """Replace the results table with new data."""
        container = self.results_area
        old_table = self.results_table
        new_table = self._build_results_table(columns, rows)
        container.mount(new_table, after=old_table)
        old_table.remove()

    def _build_results_table(self: AppProtocol, columns: list[str], rows: list[tuple]) -> ResultsTable:
        """Build a new results table with markup-escaped cells."""
        self._results_table_counter += 1
        new_id = f"results-table-{self._results_table_counter}"

        if not columns:
            return ResultsTable(id=new_id, zebra_stripes=True, show_header=False)

        # Duplicate column names (e.g. SELECT 1, 1) would collide in the arrow table
        labels = _unique_labels(columns)
        if not rows:
            arrow_table = pa.table({label: [] for label in labels})
        else:
            formatted_rows = []
            for row in rows[:MAX_RENDER_ROWS]:
                formatted = []
                for i in range(len(columns)):
                    val = row[i] if i < len(row) else None
                    formatted.append(escape_markup(str(val)) if val is not None else "NULL")
                formatted_rows.append(formatted)

            formatted_columns: dict[str, list[Any]] = {
                label: [r[i] for r in formatted_rows] for i, label in enumerate(labels)
            }
            arrow_table = pa.table(formatted_columns)

        return ResultsTable(
            id=new_id,
            zebra_stripes=True,
            backend=ArrowBackend(arrow_table),
            max_column_content_width=MAX_COLUMN_CONTENT_WIDTH,
        )

    def _show_query(self: AppProtocol, query: Query | None) -> None:
        """Render the active query slot (called on the UI loop)."""
        error_view = self.results_area.query_one("#results-error", Static)
        if query is not self._rendered_query:
            self._rendered_query = query
            if query is not None and query.error is not None:
                self._replace_results_table([], [])
                error_view.update(render_error(query))
                error_view.display = True
            else:
                columns = query.columns if query is not None else None
                rows = query.rows if query is not None else None
                self._replace_results_table(columns or [], rows or [])
                error_view.display = False

        selected = self.state.explore.results.selected
        if selected is not None and self.state.explore.result_row_count():
            self.results_table.move_cursor(row=selected)


def _unique_labels(columns: list[str]) -> list[str]:
    labels: list[str] = []
    seen: dict[str, int] = {}
    for column in columns:
        count = seen.get(column, 0)
        seen[column] = count + 1
        labels.append(column if count == 0 else f"{column}_{count}")
    return labels
