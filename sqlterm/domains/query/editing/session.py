"""Editor session: the text buffer plus statement and history tracking."""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import TYPE_CHECKING

from .buffer import TAB_SPACES, TERMINATOR, Line, TextBuffer

if TYPE_CHECKING:
    from sqlterm.domains.query.app.query_task import Query

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_HEIGHT = 17
DEFAULT_HISTORY_LIMIT = 100
STATEMENT_TERMINATOR = ";"


def lines_from_text(text: str) -> list[Line]:
    """Split loaded text into editor lines.

    Tabs become four spaces and every line gets a terminator, whether or not
    the source ended with one. A trailing ``\\r`` is dropped from each line.
    """
    if not text:
        return []
    raw_lines = text.split(TERMINATOR)
    if text.endswith(TERMINATOR):
        raw_lines.pop()
    return [Line(raw.rstrip("\r").replace("\t", TAB_SPACES) + TERMINATOR) for raw in raw_lines]


class EditorSession:
    """The entire editor and its state."""

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.input = TextBuffer()
        # Set when a statement terminator is typed
        self.statement_terminated: bool = False
        # Completed queries, oldest first
        self.history: deque[Query] = deque(maxlen=max(1, history_limit))

    def cursor_row(self, viewport_height: int = DEFAULT_VIEWPORT_HEIGHT) -> int:
        """Cursor row relative to the rendered window."""
        return min(self.input.current_row, viewport_height)

    def cursor_column(self) -> int:
        return self.input.cursor_column

    def text(self) -> str:
        return self.input.combine_lines()

    def append_char(self, char: str) -> None:
        self.input.append_char(char)
        if char == STATEMENT_TERMINATOR:
            self.statement_terminated = True

    def clear(self) -> None:
        self.input.clear()
        self.statement_terminated = False

    def record(self, query: Query) -> None:
        self.history.append(query)

    def load_text(self, text: str) -> None:
        """Replace the buffer with ``text``."""
        self._swap(TextBuffer(lines_from_text(text)))

    def load_file(self, path: str | Path) -> None:
        """Replace the buffer with the contents of ``path``.

        The file is read completely before the current buffer is touched, so
        an ``OSError`` leaves the editor as it was.
        """
        text = Path(path).read_text(encoding="utf-8")
        buffer = TextBuffer(lines_from_text(text))
        logger.debug("Loaded %d lines from %s", len(buffer.lines), path)
        self._swap(buffer)

    def _swap(self, buffer: TextBuffer) -> None:
        self.input = buffer
        self.statement_terminated = False
