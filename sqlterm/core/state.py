"""UI state owned by the event loop.

Everything here is mutated only by the dispatcher, on the UI loop. Query
tasks report back through events and never touch these objects.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from sqlterm.config import AppConfig
from sqlterm.domains.query.app.query_task import Query, QueryOutcome
from sqlterm.domains.query.editing.session import EditorSession

logger = logging.getLogger(__name__)

MAX_LOG_LINES = 2000
LOG_LEVELS = (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR)


class InputMode(Enum):
    """Editing modes of the query tab."""

    NORMAL = "NORMAL"
    EDITABLE = "EDIT"


class Tab(Enum):
    """Top-level views."""

    QUERY = "SQL"
    HISTORY = "History"
    LOGS = "Logs"
    CONTEXT = "Context"

    @property
    def key(self) -> str:
        return TAB_KEYS_BY_TAB[self]


TAB_KEYS = {
    "s": Tab.QUERY,
    "h": Tab.HISTORY,
    "l": Tab.LOGS,
    "x": Tab.CONTEXT,
}
TAB_KEYS_BY_TAB = {tab: key for key, tab in TAB_KEYS.items()}


def enabled_tabs(config: AppConfig) -> tuple[Tab, ...]:
    """Tabs that exist for this configuration, in display order."""
    tabs = [Tab.QUERY, Tab.HISTORY]
    if config.display.show_logs_tab:
        tabs.append(Tab.LOGS)
    tabs.append(Tab.CONTEXT)
    return tuple(tabs)


@dataclass
class Selection:
    """Cursor over a list of rows; ``None`` means nothing selected."""

    selected: int | None = None

    def select_next(self, count: int) -> None:
        if count <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = min(self.selected + 1, count - 1)

    def select_previous(self, count: int) -> None:
        if count <= 0:
            self.selected = None
        elif self.selected is None:
            self.selected = count - 1
        else:
            self.selected = max(self.selected - 1, 0)

    def reset(self) -> None:
        self.selected = None


@dataclass
class ExploreTabState:
    """Query editor, active query slot and results selection."""

    session: EditorSession
    mode: InputMode = InputMode.NORMAL
    query: Query | None = None
    results: Selection = field(default_factory=Selection)
    generation: int = 0

    @property
    def editable(self) -> bool:
        return self.mode is InputMode.EDITABLE

    def edit(self) -> None:
        self.mode = InputMode.EDITABLE

    def exit_edit(self) -> None:
        self.mode = InputMode.NORMAL

    def clear_editor(self) -> None:
        self.session.clear()

    def next_generation(self) -> int:
        self.generation += 1
        return self.generation

    def start_query(self, sql: str) -> Query:
        """Put a new pending query in the active slot."""
        query = Query(sql, self.next_generation())
        self.set_query(query)
        return query

    def set_query(self, query: Query) -> None:
        self.query = query
        self.results.reset()

    def apply_outcome(self, outcome: QueryOutcome) -> Query:
        """Record ``outcome`` and fill the active slot if it is still current.

        Outcomes from superseded submissions go to history only.
        """
        if self.query is not None and self.query.generation == outcome.generation:
            completed = self.query.with_outcome(outcome)
        else:
            completed = Query.from_outcome(outcome)
        self.session.record(completed)

        if outcome.generation != self.generation:
            logger.info(
                "Discarding stale result of generation %d (current %d)",
                outcome.generation,
                self.generation,
            )
        else:
            self.set_query(completed)
        return completed

    def result_row_count(self) -> int:
        if self.query is None or not self.query.rows:
            return 0
        return len(self.query.rows)


@dataclass
class HistoryTabState:
    selection: Selection = field(default_factory=Selection)


@dataclass
class LogsTabState:
    """Captured log lines and the view's scroll position."""

    lines: deque[str] = field(default_factory=lambda: deque(maxlen=MAX_LOG_LINES))
    level: int = logging.INFO
    offset: int = 0  # Lines scrolled back from the newest

    def scroll_back(self, amount: int = 1) -> None:
        self.offset = min(self.offset + amount, max(0, len(self.lines) - 1))

    def scroll_forward(self, amount: int = 1) -> None:
        self.offset = max(0, self.offset - amount)

    def more_verbose(self) -> None:
        index = LOG_LEVELS.index(self.level) if self.level in LOG_LEVELS else 1
        self.level = LOG_LEVELS[max(0, index - 1)]

    def less_verbose(self) -> None:
        index = LOG_LEVELS.index(self.level) if self.level in LOG_LEVELS else 1
        self.level = LOG_LEVELS[min(len(LOG_LEVELS) - 1, index + 1)]


@dataclass
class AppState:
    """All state rendered by the UI."""

    explore: ExploreTabState
    tabs: tuple[Tab, ...] = tuple(Tab)
    selected_tab: Tab = Tab.QUERY
    history: HistoryTabState = field(default_factory=HistoryTabState)
    logs: LogsTabState = field(default_factory=LogsTabState)
    should_quit: bool = False
    notice: str | None = None

    @classmethod
    def from_config(cls, config: AppConfig) -> AppState:
        session = EditorSession(history_limit=config.history_limit)
        return cls(explore=ExploreTabState(session=session), tabs=enabled_tabs(config))

    @property
    def session(self) -> EditorSession:
        return self.explore.session

    def select_tab(self, tab: Tab) -> bool:
        if tab not in self.tabs:
            return False
        self.selected_tab = tab
        return True

    def history_entries(self) -> list[Query]:
        """History, newest first."""
        return list(reversed(self.session.history))
