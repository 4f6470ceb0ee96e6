"""Widgets for sqlterm."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from textual.events import Key as KeyEvent
from textual.widgets import Static
from textual_fastdatatable import DataTable

from sqlterm.core.keys import decode_key

if TYPE_CHECKING:
    from sqlterm.app import SqlTermApp


class ResultsTable(DataTable, can_focus=False):
    """Results grid. Selection is driven by the dispatcher, never by focus."""


class TabsBar(Static, can_focus=True):
    """Tab strip that holds keyboard focus and hands keys to the app."""

    async def _on_key(self, event: KeyEvent) -> None:
        key = decode_key(event.key, event.character)
        if key is None:
            # Unknown keys (ctrl+q and friends) keep their Textual behaviour
            await super()._on_key(event)
            return
        event.prevent_default()
        event.stop()
        cast("SqlTermApp", self.app).route_key(key)


class EditorView(Static):
    """Read-only rendering of the editor window."""
