"""Multi-line text buffer backing the SQL editor.

The buffer keeps one ``Line`` per logical line of the document. Every line
except possibly the last carries a trailing ``"\\n"`` terminator, so joining
the raw line texts reproduces the document exactly.

Cursor columns are measured in terminal cells (display width), not in
characters, so wide characters position the cursor where the renderer
draws them.
"""

from __future__ import annotations

import logging

from rich.cells import cell_len

logger = logging.getLogger(__name__)

TERMINATOR = "\n"
TAB_SPACES = "    "


class Line:
    """Single line of editor text."""

    __slots__ = ("_text",)

    def __init__(self, text: str = "") -> None:
        self._text = text

    def __repr__(self) -> str:
        return f"Line({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self._text == other._text

    @property
    def text(self) -> str:
        """Raw text, including the terminator if present."""
        return self._text

    @property
    def content(self) -> str:
        """Text without the trailing terminator."""
        if self._text.endswith(TERMINATOR):
            return self._text[:-1]
        return self._text

    @property
    def has_terminator(self) -> bool:
        return self._text.endswith(TERMINATOR)

    @property
    def width(self) -> int:
        """Display width of the content."""
        return cell_len(self.content)

    def is_empty(self) -> bool:
        return not self._text

    def index_at(self, column: int) -> int:
        """Map a display column to a character index into the content.

        Zero-width characters (combining marks) belong to the character
        before them, so the returned index never points at one.
        """
        content = self.content
        width = 0
        for index, char in enumerate(content):
            char_width = cell_len(char)
            if width >= column and char_width:
                return index
            width += char_width
        return len(content)

    def snap_column(self, column: int) -> int:
        """Floor ``column`` to the start of the character it falls in."""
        width = 0
        for char in self.content:
            char_width = cell_len(char)
            if width + char_width > column:
                return width
            width += char_width
        return width

    def char_at(self, column: int) -> str:
        """Character starting at display ``column``, or empty string at end."""
        content = self.content
        index = self.index_at(column)
        return content[index] if index < len(content) else ""

    def insert(self, index: int, text: str) -> None:
        self._text = self._text[:index] + text + self._text[index:]

    def append(self, text: str) -> None:
        self._text += text

    def remove(self, index: int) -> str:
        """Remove and return the character at ``index``."""
        char = self._text[index]
        self._text = self._text[:index] + self._text[index + 1 :]
        return char

    def drain_from(self, index: int) -> str:
        """Remove and return everything from ``index`` to the end."""
        drained = self._text[index:]
        self._text = self._text[:index]
        return drained

    def pop(self) -> str | None:
        if not self._text:
            return None
        char = self._text[-1]
        self._text = self._text[:-1]
        return char


class TextBuffer:
    """All editor lines plus a (row, display column) cursor.

    Editing operations never raise: requests that make no sense at the
    current position (backspace at the very start, moving past the last
    row, ...) leave the buffer untouched.
    """

    def __init__(self, lines: list[Line] | None = None) -> None:
        self.lines: list[Line] = lines if lines is not None else []
        self.current_row: int = 0
        self.cursor_column: int = 0

    def __repr__(self) -> str:
        return (
            f"TextBuffer(lines={self.lines!r}, current_row={self.current_row}, "
            f"cursor_column={self.cursor_column})"
        )

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    @property
    def current_line(self) -> Line | None:
        if not self.lines:
            return None
        return self.lines[self.current_row]

    def is_empty(self) -> bool:
        return not self.lines

    def on_last_line(self) -> bool:
        return self.current_row == len(self.lines) - 1

    def cursor_is_at_line_beginning(self) -> bool:
        return self.cursor_column == 0

    def cursor_is_at_line_end(self) -> bool:
        line = self.current_line
        return line is None or self.cursor_column >= line.width

    def cursor_is_in_line_middle(self) -> bool:
        return not self.cursor_is_at_line_beginning() and not self.cursor_is_at_line_end()

    def combine_lines(self) -> str:
        """Full document text, as submitted to the query engine."""
        return "".join(line.text for line in self.lines)

    def visible_lines(self, viewport_height: int) -> list[Line]:
        """Window of lines that keeps ``current_row`` on screen."""
        start = max(0, self.current_row - viewport_height)
        end = start + viewport_height + 1
        if start > 0:
            logger.debug("Combining visible lines: start(%d) to end(%d)", start, end)
        return self.lines[start:end]

    def combine_visible_lines(self, viewport_height: int) -> str:
        return "".join(line.text for line in self.visible_lines(viewport_height))

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def append_char(self, char: str) -> None:
        if not self.lines:
            self.lines.append(Line())

        if char == TERMINATOR:
            self.new_line()
        elif char == "\t":
            self._insert_at_cursor(TAB_SPACES)
        else:
            self._insert_at_cursor(char)
            logger.debug("Line after appending %r: %r", char, self.lines[self.current_row].text)

    def tab(self) -> None:
        self.append_char("\t")

    def pop(self) -> str | None:
        """Remove and return the last character of the current line.

        The line terminator is never removed.
        """
        line = self.current_line
        if line is None or not line.content:
            return None
        char = line.remove(len(line.content) - 1)
        self.cursor_column = min(self.cursor_column, line.width)
        return char

    def backspace(self) -> None:
        line = self.current_line
        if line is None:
            return

        if self.cursor_column > 0:
            index = line.index_at(self.cursor_column)
            removed = line.remove(index - 1)
            self.cursor_column -= cell_len(removed)
        elif self.current_row > 0:
            self._merge_with_previous_line()

    def clear(self) -> None:
        self.lines = []
        self.current_row = 0
        self.cursor_column = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def up_row(self) -> None:
        if self.current_row > 0:
            self._move_to_row(self.current_row - 1)

    def down_row(self) -> None:
        if self.lines and self.current_row + 1 < len(self.lines):
            self._move_to_row(self.current_row + 1)

    def next_char(self) -> None:
        line = self.current_line
        if line is None:
            return
        if self.cursor_column < line.width:
            self.cursor_column += cell_len(line.char_at(self.cursor_column))
        elif not self.on_last_line():
            self.current_row += 1
            self.cursor_column = 0

    def previous_char(self) -> None:
        line = self.current_line
        if line is None:
            return
        if self.cursor_column > 0:
            self.cursor_column = line.snap_column(self.cursor_column - 1)
        elif self.current_row > 0:
            self.current_row -= 1
            self.cursor_column = self.lines[self.current_row].width

    def new_line(self) -> None:
        if not self.lines:
            self.lines.append(Line())
        line = self.lines[self.current_row]

        if self.cursor_is_at_line_beginning():
            logger.debug("Cursor at line beginning")
            moved = Line(line.text)
            self.lines[self.current_row] = Line(TERMINATOR)
        elif self.cursor_is_at_line_end():
            logger.debug("Cursor at line end")
            # Inner lines already end with a terminator, so the blank line
            # inserted after them needs its own.
            if line.has_terminator:
                moved = Line(TERMINATOR)
            else:
                line.append(TERMINATOR)
                moved = Line()
        else:
            logger.debug("Cursor in middle of line")
            moved = Line(line.drain_from(line.index_at(self.cursor_column)))
            line.append(TERMINATOR)

        self._insert_after_current(moved)
        self.current_row += 1
        self.cursor_column = 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert_at_cursor(self, text: str) -> None:
        line = self.lines[self.current_row]
        line.insert(line.index_at(self.cursor_column), text)
        self.cursor_column += cell_len(text)

    def _insert_after_current(self, line: Line) -> None:
        if self.on_last_line():
            self.lines.append(line)
        else:
            self.lines.insert(self.current_row + 1, line)

    def _move_to_row(self, row: int) -> None:
        previous_column = self.cursor_column
        self.current_row = row
        self.cursor_column = self.lines[row].snap_column(previous_column)

    def _merge_with_previous_line(self) -> None:
        current = self.lines.pop(self.current_row)
        self.current_row -= 1
        previous = self.lines[self.current_row]
        self.cursor_column = previous.width
        if previous.has_terminator:
            previous.pop()
        previous.append(current.text)
