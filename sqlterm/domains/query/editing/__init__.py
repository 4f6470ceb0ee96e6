"""Query editor text model."""

from .buffer import Line, TextBuffer
from .session import EditorSession

__all__ = ["EditorSession", "Line", "TextBuffer"]
