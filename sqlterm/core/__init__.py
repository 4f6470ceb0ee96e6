"""Core, UI-agnostic models and helpers for sqlterm."""

from .dispatcher import EventDispatcher, QueryRunner
from .events import AppEvent, ExecuteDDL, KeyPressed, QueryCompleted, Tick
from .keys import Key, KeyCode, Modifier, decode_key
from .state import AppState, InputMode, Tab, enabled_tabs

__all__ = [
    "AppEvent",
    "AppState",
    "EventDispatcher",
    "ExecuteDDL",
    "InputMode",
    "Key",
    "KeyCode",
    "KeyPressed",
    "Modifier",
    "QueryCompleted",
    "QueryRunner",
    "Tab",
    "Tick",
    "decode_key",
    "enabled_tabs",
]
