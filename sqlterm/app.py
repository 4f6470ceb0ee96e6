"""Main Textual application for sqlterm."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import ContentSwitcher, Static

from .config import AppConfig
from .core.dispatcher import EventDispatcher
from .core.events import ExecuteDDL, KeyPressed, Tick
from .core.keys import Key
from .core.logging_setup import LogsTabHandler, attach_logs_tab, detach_logs_tab
from .core.state import AppState, Tab
from .db.engine import EngineHandle
from .domains.query.ui.mixins import QueryMixin, QueryResultsMixin
from .ui.render import (
    TAB_CONTENT_IDS,
    render_context,
    render_editor,
    render_history,
    render_logs,
    render_status,
    render_tabs,
)
from .ui.widgets import EditorView, ResultsTable, TabsBar

logger = logging.getLogger(__name__)


class SqlTermApp(QueryMixin, QueryResultsMixin, App):
    """Main sqlterm application."""

    TITLE = "sqlterm"

    CSS = """
    Screen {
        background: $surface;
    }

    #main-container {
        width: 100%;
        height: 100%;
    }

    #tabs-bar {
        height: 1;
        background: $surface-darken-1;
    }

    #panes {
        height: 1fr;
    }

    #query-area {
        height: auto;
        border-bottom: solid $primary;
        padding: 0 1;
    }

    #editor {
        height: auto;
    }

    #results-area {
        height: 1fr;
        padding: 0 1;
    }

    ResultsTable {
        height: 1fr;
    }

    #results-error {
        height: auto;
        display: none;
    }

    #history-pane, #logs-pane, #context-pane {
        height: 1fr;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    .section-label {
        height: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, config: AppConfig | None = None, engine: EngineHandle | None = None):
        super().__init__()
        self.config = config or AppConfig()
        self.engine = engine or EngineHandle(self.config.execution.database)
        self.state = AppState.from_config(self.config)
        self.dispatcher = EventDispatcher(self.state, self, self.config)
        self._logs_handler: LogsTabHandler | None = None

    @property
    def tabs_bar(self) -> TabsBar:
        return self.query_one("#tabs-bar", TabsBar)

    @property
    def editor_view(self) -> EditorView:
        return self.query_one("#editor", EditorView)

    @property
    def results_area(self) -> Container:
        return self.query_one("#results-area", Container)

    @property
    def results_table(self) -> ResultsTable:
        return self.results_area.query(ResultsTable).last()

    @property
    def status_bar(self) -> Static:
        return self.query_one("#status-bar", Static)

    def compose(self) -> ComposeResult:
        with Vertical(id="main-container"):
            yield TabsBar(id="tabs-bar")
            with ContentSwitcher(initial=TAB_CONTENT_IDS[Tab.QUERY], id="panes"):
                with Vertical(id=TAB_CONTENT_IDS[Tab.QUERY]):
                    with Container(id="query-area"):
                        yield Static(
                            r"\[e] Edit  \[Esc] Normal  \[Enter/F5] Run  \[c] Clear",
                            classes="section-label",
                            id="label-editor",
                        )
                        yield EditorView(id="editor")
                    with Container(id="results-area"):
                        yield ResultsTable(id="results-table-0", zebra_stripes=True, show_header=False)
                        yield Static(id="results-error")
                yield Static(id=TAB_CONTENT_IDS[Tab.HISTORY])
                yield Static(id=TAB_CONTENT_IDS[Tab.LOGS])
                yield Static(id=TAB_CONTENT_IDS[Tab.CONTEXT])
            yield Static(id="status-bar")

    def on_mount(self) -> None:
        """Initialize the app."""
        self.theme = "tokyo-night"
        self._logs_handler = attach_logs_tab(self.state.logs)
        self.editor_view.styles.height = self.config.editor.viewport_height + 1
        self.tabs_bar.focus()

        self._load_startup_ddl()
        self.set_interval(self.config.display.tick_rate_ms / 1000, self._on_tick)
        self.refresh_view()

    def on_unmount(self) -> None:
        if self._logs_handler is not None:
            detach_logs_tab(self._logs_handler)
            self._logs_handler = None
        self.engine.close()

    def _load_startup_ddl(self) -> None:
        ddl_path = self.config.ddl_path()
        if not ddl_path.is_file():
            logger.info("No DDL file at %s", ddl_path)
            return
        try:
            sql = ddl_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Could not read DDL file %s: %s", ddl_path, exc)
            return
        self.dispatcher.handle(ExecuteDDL(sql))

    def _on_tick(self) -> None:
        self.dispatcher.handle(Tick())
        self.refresh_view()

    def route_key(self, key: Key) -> None:
        """Route a decoded key press through the dispatcher."""
        self.dispatcher.handle(KeyPressed(key))
        if self.state.should_quit:
            self.exit()
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        """Re-render every view from ``self.state``."""
        state = self.state
        self.tabs_bar.update(render_tabs(state))
        self.query_one("#panes", ContentSwitcher).current = TAB_CONTENT_IDS[state.selected_tab]
        self.editor_view.update(
            render_editor(state.session, self.config.editor.viewport_height, state.explore.mode)
        )
        self._show_query(state.explore.query)
        self.status_bar.update(render_status(state))

        if state.selected_tab is Tab.QUERY:
            return
        pane = self.query_one(f"#{TAB_CONTENT_IDS[state.selected_tab]}", Static)
        if state.selected_tab is Tab.HISTORY:
            pane.update(render_history(state.history_entries(), state.history.selection.selected))
        elif state.selected_tab is Tab.LOGS:
            pane.update(render_logs(state.logs, max(1, pane.size.height)))
        elif state.selected_tab is Tab.CONTEXT:
            pane.update(render_context(state, self.engine.version, self.config.execution.database))
