"""Keys that can be read from the keyboard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(Enum):
    """Keys without a payload.

    This is an incomplete mapping of keys that are supported for reading
    from the keyboard. Printable characters are represented by :class:`Char`
    and unrecognised escape sequences by :class:`UnknownEscSeq`.
    """

    UNKNOWN = "unknown"
    ARROW_LEFT = "arrow_left"
    ARROW_RIGHT = "arrow_right"
    ARROW_UP = "arrow_up"
    ARROW_DOWN = "arrow_down"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    HOME = "home"
    END = "end"
    TAB = "tab"
    BACK_TAB = "back_tab"
    ALT = "alt"
    DEL = "del"
    SHIFT = "shift"
    INSERT = "insert"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    CTRL_C = "ctrl_c"


def _check_single_char(value: object) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise ValueError(f"expected a single character, got {value!r}")
    return value


@dataclass(frozen=True)
class Char:
    """A single character typed on the keyboard."""

    char: str

    def __post_init__(self) -> None:
        _check_single_char(self.char)

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class UnknownEscSeq:
    """An unrecognised sequence: the characters that followed Esc."""

    chars: tuple[str, ...]

    def __post_init__(self) -> None:
        chars = tuple(self.chars)
        for ch in chars:
            _check_single_char(ch)
        object.__setattr__(self, "chars", chars)