"""Rich renderables for the app's views.

Pure functions of state; the widgets in ``sqlterm.ui.widgets`` call them on
every refresh.
"""

from __future__ import annotations

from rich.markup import escape as escape_markup
from rich.text import Text

from sqlterm.core.state import AppState, InputMode, LogsTabState, Tab
from sqlterm.domains.query.app.query_task import Query
from sqlterm.domains.query.editing.session import EditorSession


def format_duration(seconds: float) -> str:
    ms = seconds * 1000
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{seconds:.2f}s"


def render_tabs(state: AppState) -> Text:
    text = Text()
    for tab in state.tabs:
        label = f" [{tab.key}] {tab.value} "
        if tab is state.selected_tab:
            text.append(label, style="bold reverse")
        else:
            text.append(label, style="dim")
    return text


def render_editor(session: EditorSession, viewport_height: int, mode: InputMode) -> Text:
    """Visible editor window, with the cursor cell highlighted in edit mode."""
    buffer = session.input
    lines = buffer.visible_lines(viewport_height)
    cursor_row = session.cursor_row(viewport_height)
    text = Text(no_wrap=True, overflow="ellipsis")

    for row, line in enumerate(lines):
        content = line.content
        if mode is InputMode.EDITABLE and row == cursor_row:
            index = line.index_at(buffer.cursor_column)
            text.append(content[:index])
            text.append(content[index : index + 1] or " ", style="reverse")
            text.append(content[index + 1 :])
        else:
            text.append(content)
        if row < len(lines) - 1:
            text.append("\n")

    if not lines and mode is InputMode.EDITABLE:
        text.append(" ", style="reverse")
    return text


def render_status(state: AppState) -> Text:
    explore = state.explore
    text = Text()
    text.append(f" {explore.mode.value} ", style="bold reverse" if explore.editable else "bold")
    query = explore.query
    if state.notice:
        text.append(f"  {state.notice}", style="yellow")
    elif query is None:
        text.append("  Ready")
    elif not query.completed:
        text.append("  Running query...")
    elif query.error is not None:
        text.append(f"  Error after {format_duration(query.elapsed_time)}", style="red")
    else:
        suffix = "+ (truncated)" if query.truncated else ""
        text.append(f"  {query.num_rows}{suffix} rows in {format_duration(query.elapsed_time)}")
    if explore.session.statement_terminated:
        text.append("  ;", style="green")
    return text


def render_history(entries: list[Query], selected: int | None) -> Text:
    if not entries:
        return Text("No queries yet", style="dim")
    text = Text(no_wrap=True, overflow="ellipsis")
    for index, query in enumerate(entries):
        sql = " ".join(query.sql.split())
        if query.error is not None:
            summary = "error"
        else:
            summary = f"{query.num_rows} rows"
        line = f"{format_duration(query.elapsed_time):>8}  {summary:<12} {sql}"
        text.append(line, style="reverse" if index == selected else "")
        if index < len(entries) - 1:
            text.append("\n")
    return text


def render_logs(logs: LogsTabState, height: int) -> Text:
    lines = list(logs.lines)
    end = len(lines) - logs.offset
    window = lines[max(0, end - height) : end]
    return Text("\n".join(window), no_wrap=True, overflow="ellipsis")


def render_context(state: AppState, engine_version: str, database: str) -> str:
    """Markup for the context tab."""
    tabs = ", ".join(tab.value for tab in state.tabs)
    return (
        f"[b]Engine[/b]    DuckDB {escape_markup(engine_version)}\n"
        f"[b]Database[/b]  {escape_markup(database)}\n"
        f"[b]Tabs[/b]      {escape_markup(tabs)}\n"
        f"[b]History[/b]   {len(state.session.history)} queries"
    )


def render_error(query: Query) -> Text:
    return Text(f"Error: {query.error}", style="red")


TAB_CONTENT_IDS = {
    Tab.QUERY: "query-pane",
    Tab.HISTORY: "history-pane",
    Tab.LOGS: "logs-pane",
    Tab.CONTEXT: "context-pane",
}
