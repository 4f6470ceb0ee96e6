"""Terminal key input as a closed set of key codes.

Textual reports keys as strings such as ``"ctrl+enter"`` or ``"pageup"``.
``decode_key`` turns those into ``Key`` values so the dispatcher never deals
with raw key names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, auto


class KeyCode(Enum):
    """Keys the dispatcher understands."""

    CHAR = auto()
    ENTER = auto()
    BACKSPACE = auto()
    TAB = auto()
    ESC = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    F5 = auto()


class Modifier(Flag):
    NONE = 0
    SHIFT = auto()
    CONTROL = auto()
    ALT = auto()


NAMED_KEYS = {
    "enter": KeyCode.ENTER,
    "backspace": KeyCode.BACKSPACE,
    "tab": KeyCode.TAB,
    "escape": KeyCode.ESC,
    "up": KeyCode.UP,
    "down": KeyCode.DOWN,
    "left": KeyCode.LEFT,
    "right": KeyCode.RIGHT,
    "pageup": KeyCode.PAGE_UP,
    "pagedown": KeyCode.PAGE_DOWN,
    "f5": KeyCode.F5,
}

MODIFIER_NAMES = {
    "shift": Modifier.SHIFT,
    "ctrl": Modifier.CONTROL,
    "alt": Modifier.ALT,
    "meta": Modifier.ALT,
}

MODIFIER_LABELS = {
    Modifier.SHIFT: "shift",
    Modifier.CONTROL: "ctrl",
    Modifier.ALT: "alt",
}


@dataclass(frozen=True)
class Key:
    """A decoded key press."""

    code: KeyCode
    char: str = ""
    modifiers: Modifier = Modifier.NONE

    @classmethod
    def of(cls, char: str) -> Key:
        """Character key shortcut."""
        return cls(KeyCode.CHAR, char)

    def is_char(self, char: str) -> bool:
        return self.code is KeyCode.CHAR and self.char == char

    @property
    def control(self) -> bool:
        return Modifier.CONTROL in self.modifiers

    def __str__(self) -> str:
        parts = [label for mod, label in MODIFIER_LABELS.items() if mod in self.modifiers]
        parts.append(repr(self.char) if self.code is KeyCode.CHAR else self.code.name.lower())
        return "+".join(parts)


def decode_key(key: str, character: str | None = None) -> Key | None:
    """Decode a Textual key name (plus its printable character, if any).

    Returns ``None`` for keys outside the supported set.
    """
    *modifier_names, name = key.split("+")
    modifiers = Modifier.NONE
    for modifier_name in modifier_names:
        modifier = MODIFIER_NAMES.get(modifier_name)
        if modifier is None:
            return None
        modifiers |= modifier

    code = NAMED_KEYS.get(name)
    if code is not None:
        return Key(code, modifiers=modifiers)

    if Modifier.CONTROL in modifiers or Modifier.ALT in modifiers:
        return None
    if character and len(character) == 1 and character.isprintable():
        return Key(KeyCode.CHAR, character)
    return None
