"""Protocol for the attributes the app mixins rely on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from textual.message import Message
    from textual.widget import Widget
    from textual.worker import Worker

    from sqlterm.config import AppConfig
    from sqlterm.core.dispatcher import EventDispatcher
    from sqlterm.core.state import AppState
    from sqlterm.db.engine import EngineHandle
    from sqlterm.domains.query.app.query_task import Query
    from sqlterm.ui.widgets import ResultsTable


class AppProtocol(Protocol):
    config: AppConfig
    engine: EngineHandle
    state: AppState
    dispatcher: EventDispatcher
    _results_table_counter: int
    _rendered_query: Query | None

    @property
    def results_area(self) -> Widget: ...

    @property
    def results_table(self) -> ResultsTable: ...

    def run_worker(self, work: Any, name: str | None = "", group: str = "default", **kwargs: Any) -> Worker[Any]: ...

    def post_message(self, message: Message) -> bool: ...

    def refresh_view(self) -> None: ...

    def _replace_results_table(self, columns: list[str], rows: list[tuple]) -> None: ...

    def _build_results_table(self, columns: list[str], rows: list[tuple]) -> ResultsTable: ...
