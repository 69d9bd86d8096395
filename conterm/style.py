"""Colours, attributes and styles for terminal text."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any, Iterator, Union

from conterm import platform


class Color(Enum):
    """One of the eight basic terminal colours."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7

    @property
    def ansi_num(self) -> int:
        return self.value


@dataclass(frozen=True)
class Color256:
    """A colour from the 256-colour palette."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or not 0 <= self.value <= 255:
            raise ValueError(f"256-colour index must be in 0..255, got {self.value!r}")

    @property
    def ansi_num(self) -> int:
        return self.value


AnyColor = Union[Color, Color256]


class Attribute(IntEnum):
    """A text attribute; its ANSI code is its value plus one."""

    BOLD = 0
    DIM = 1
    ITALIC = 2
    UNDERLINED = 3
    BLINK = 4
    BLINK_FAST = 5
    REVERSE = 6
    HIDDEN = 7
    STRIKETHROUGH = 8


@dataclass(frozen=True)
class Attributes:
    """An immutable set of attributes, kept in ascending order."""

    mask: int = 0

    def insert(self, attr: Attribute) -> Attributes:
        """Return a set that also holds ``attr``."""
        return Attributes(self.mask | (1 << int(attr)))

    def bits(self) -> Iterator[int]:
        """Yield the bit numbers that are set, lowest first."""
        mask = self.mask
        while mask:
            bit = (mask & -mask).bit_length() - 1
            mask ^= 1 << bit
            yield bit

    def attrs(self) -> Iterator[Attribute]:
        """Yield the attributes in the set, in ascending order."""
        return (Attribute(bit) for bit in self.bits())

    def __bool__(self) -> bool:
        return self.mask != 0

    def __str__(self) -> str:
        return "".join(f"\x1b[{bit + 1}m" for bit in self.bits())

    def __repr__(self) -> str:
        return "{" + ", ".join(attr.name for attr in self.attrs()) + "}"


def _parse_u8(text: str) -> int | None:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not all("0" <= c <= "9" for c in digits):
        return None
    value = int(digits)
    return value if value <= 255 else None


@dataclass(frozen=True)
class Style:
    """A stored style that can be applied to values."""

    fg_color: AnyColor | None = None
    bg_color: AnyColor | None = None
    fg_bright: bool = False
    bg_bright: bool = False
    attributes: Attributes = field(default_factory=Attributes)
    force: bool | None = None
    to_stderr: bool = False

    @classmethod
    def from_dotted_str(cls, s: str) -> Style:
        """Build a style from terms separated by dots, e.g. ``red.on_blue``.

        Numbers select 256-colour palette entries (``9.on_12``); unknown
        terms are ignored.
        """
        rv = cls()
        for part in s.split("."):
            method = _DOTTED_TERMS.get(part)
            if method is not None:
                rv = getattr(rv, method)()
            elif part.startswith("on_"):
                n = _parse_u8(part[3:])
                if n is not None:
                    rv = rv.on_color256(n)
            else:
                n = _parse_u8(part)
                if n is not None:
                    rv = rv.color256(n)
        return rv

    def apply_to(self, val: Any) -> StyledObject:
        """Wrap ``val`` so that it is rendered in this style."""
        return StyledObject(self, val)

    def force_styling(self, value: bool) -> Style:
        """Force styling on or off, overriding automatic detection."""
        return replace(self, force=value)

    def for_stderr(self) -> Style:
        """Mark the style as applying to output on stderr."""
        return replace(self, to_stderr=True)

    def for_stdout(self) -> Style:
        """Mark the style as applying to output on stdout (the default)."""
        return replace(self, to_stderr=False)

    def fg(self, color: AnyColor) -> Style:
        return replace(self, fg_color=color)

    def bg(self, color: AnyColor) -> Style:
        return replace(self, bg_color=color)

    def attr(self, attr: Attribute) -> Style:
        return replace(self, attributes=self.attributes.insert(attr))

    def black(self) -> Style:
        return self.fg(Color.BLACK)

    def red(self) -> Style:
        return self.fg(Color.RED)

    def green(self) -> Style:
        return self.fg(Color.GREEN)

    def yellow(self) -> Style:
        return self.fg(Color.YELLOW)

    def blue(self) -> Style:
        return self.fg(Color.BLUE)

    def magenta(self) -> Style:
        return self.fg(Color.MAGENTA)

    def cyan(self) -> Style:
        return self.fg(Color.CYAN)

    def white(self) -> Style:
        return self.fg(Color.WHITE)

    def color256(self, color: int) -> Style:
        return self.fg(Color256(color))

    def bright(self) -> Style:
        return replace(self, fg_bright=True)

    def on_black(self) -> Style:
        return self.bg(Color.BLACK)

    def on_red(self) -> Style:
        return self.bg(Color.RED)

    def on_green(self) -> Style:
        return self.bg(Color.GREEN)

    def on_yellow(self) -> Style:
        return self.bg(Color.YELLOW)

    def on_blue(self) -> Style:
        return self.bg(Color.BLUE)

    def on_magenta(self) -> Style:
        return self.bg(Color.MAGENTA)

    def on_cyan(self) -> Style:
        return self.bg(Color.CYAN)

    def on_white(self) -> Style:
        return self.bg(Color.WHITE)

    def on_color256(self, color: int) -> Style:
        return self.bg(Color256(color))

    def on_bright(self) -> Style:
        return replace(self, bg_bright=True)

    def bold(self) -> Style:
        return self.attr(Attribute.BOLD)

    def dim(self) -> Style:
        return self.attr(Attribute.DIM)

    def italic(self) -> Style:
        return self.attr(Attribute.ITALIC)

    def underlined(self) -> Style:
        return self.attr(Attribute.UNDERLINED)

    def blink(self) -> Style:
        return self.attr(Attribute.BLINK)

    def blink_fast(self) -> Style:
        return self.attr(Attribute.BLINK_FAST)

    def reverse(self) -> Style:
        return self.attr(Attribute.REVERSE)

    def hidden(self) -> Style:
        return self.attr(Attribute.HIDDEN)

    def strikethrough(self) -> Style:
        return self.attr(Attribute.STRIKETHROUGH)

    def _enabled(self) -> bool:
        if self.force is not None:
            return self.force
        return colors_enabled_stderr() if self.to_stderr else colors_enabled()

    def _render(self, text: str) -> str:
        if not self._enabled():
            return text
        codes = []
        if self.fg_color is not None:
            codes.append(_color_code(self.fg_color, self.fg_bright, 38, 30))
        if self.bg_color is not None:
            codes.append(_color_code(self.bg_color, self.bg_bright, 48, 40))
        if self.attributes:
            codes.append(str(self.attributes))
        if not codes:
            return text
        return "".join(codes) + text + "\x1b[0m"


def _color_code(color: AnyColor, bright: bool, extended: int, base: int) -> str:
    if isinstance(color, Color256):
        return f"\x1b[{extended};5;{color.ansi_num}m"
    if bright:
        return f"\x1b[{extended};5;{color.ansi_num + 8}m"
    return f"\x1b[{color.ansi_num + base}m"


_DOTTED_TERMS = {
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "magenta": "magenta",
    "cyan": "cyan",
    "white": "white",
    "bright": "bright",
    "on_black": "on_black",
    "on_red": "on_red",
    "on_green": "on_green",
    "on_yellow": "on_yellow",
    "on_blue": "on_blue",
    "on_magenta": "on_magenta",
    "on_cyan": "on_cyan",
    "on_white": "on_white",
    "on_bright": "on_bright",
    "bold": "bold",
    "dim": "dim",
    "underlined": "underlined",
    "blink": "blink",
    "blink_fast": "blink_fast",
    "reverse": "reverse",
    "hidden": "hidden",
    "strikethrough": "strikethrough",
}


@dataclass(frozen=True)
class StyledObject:
    """A value together with the style it is rendered in."""

    style: Style
    val: Any

    def _restyle(self, style: Style) -> StyledObject:
        return StyledObject(style, self.val)

    def force_styling(self, value: bool) -> StyledObject:
        return self._restyle(self.style.force_styling(value))

    def for_stderr(self) -> StyledObject:
        return self._restyle(self.style.for_stderr())

    def for_stdout(self) -> StyledObject:
        return self._restyle(self.style.for_stdout())

    def fg(self, color: AnyColor) -> StyledObject:
        return self._restyle(self.style.fg(color))

    def bg(self, color: AnyColor) -> StyledObject:
        return self._restyle(self.style.bg(color))

    def attr(self, attr: Attribute) -> StyledObject:
        return self._restyle(self.style.attr(attr))

    def black(self) -> StyledObject:
        return self._restyle(self.style.black())

    def red(self) -> StyledObject:
        return self._restyle(self.style.red())

    def green(self) -> StyledObject:
        return self._restyle(self.style.green())

    def yellow(self) -> StyledObject:
        return self._restyle(self.style.yellow())

    def blue(self) -> StyledObject:
        return self._restyle(self.style.blue())

    def magenta(self) -> StyledObject:
        return self._restyle(self.style.magenta())

    def cyan(self) -> StyledObject:
        return self._restyle(self.style.cyan())

    def white(self) -> StyledObject:
        return self._restyle(self.style.white())

    def color256(self, color: int) -> StyledObject:
        return self._restyle(self.style.color256(color))

    def bright(self) -> StyledObject:
        return self._restyle(self.style.bright())

    def on_black(self) -> StyledObject:
        return self._restyle(self.style.on_black())

    def on_red(self) -> StyledObject:
        return self._restyle(self.style.on_red())

    def on_green(self) -> StyledObject:
        return self._restyle(self.style.on_green())

    def on_yellow(self) -> StyledObject:
        return self._restyle(self.style.on_yellow())

    def on_blue(self) -> StyledObject:
        return self._restyle(self.style.on_blue())

    def on_magenta(self) -> StyledObject:
        return self._restyle(self.style.on_magenta())

    def on_cyan(self) -> StyledObject:
        return self._restyle(self.style.on_cyan())

    def on_white(self) -> StyledObject:
        return self._restyle(self.style.on_white())

    def on_color256(self, color: int) -> StyledObject:
        return self._restyle(self.style.on_color256(color))

    def on_bright(self) -> StyledObject:
        return self._restyle(self.style.on_bright())

    def bold(self) -> StyledObject:
        return self._restyle(self.style.bold())

    def dim(self) -> StyledObject:
        return self._restyle(self.style.dim())

    def italic(self) -> StyledObject:
        return self._restyle(self.style.italic())

    def underlined(self) -> StyledObject:
        return self._restyle(self.style.underlined())

    def blink(self) -> StyledObject:
        return self._restyle(self.style.blink())

    def blink_fast(self) -> StyledObject:
        return self._restyle(self.style.blink_fast())

    def reverse(self) -> StyledObject:
        return self._restyle(self.style.reverse())

    def hidden(self) -> StyledObject:
        return self._restyle(self.style.hidden())

    def strikethrough(self) -> StyledObject:
        return self._restyle(self.style.strikethrough())

    def __format__(self, spec: str) -> str:
        return self.style._render(format(self.val, spec))

    def __str__(self) -> str:
        return format(self, "")


def style(val: Any) -> StyledObject:
    """Wrap ``val`` in an empty style, ready to be styled further."""
    return Style().apply_to(val)


@dataclass(frozen=True)
class Emoji:
    """An emoji that renders as a fallback where emoji are not wanted."""

    emoji: str
    fallback: str

    def __str__(self) -> str:
        return self.emoji if platform.wants_emoji() else self.fallback


def _default_colors_enabled(fd: int) -> bool:
    return (
        platform.is_a_color_terminal(fd) and os.environ.get("CLICOLOR", "1") != "0"
    ) or os.environ.get("CLICOLOR_FORCE", "0") != "0"


class _ColorSwitch:
    """A per-stream colour flag whose default is detected on first use."""

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._value: bool | None = None
        self._lock = threading.Lock()

    def get(self) -> bool:
        with self._lock:
            if self._value is None:
                self._value = _default_colors_enabled(self._fd)
            return self._value

    def set(self, value: bool) -> None:
        with self._lock:
            self._value = bool(value)


_STDOUT_COLORS = _ColorSwitch(1)
_STDERR_COLORS = _ColorSwitch(2)


def colors_enabled() -> bool:
    """Return whether colours should be used on stdout.

    Honours ``CLICOLOR`` and ``CLICOLOR_FORCE``.
    """
    return _STDOUT_COLORS.get()


def set_colors_enabled(val: bool) -> None:
    """Force colours on or off for stdout."""
    _STDOUT_COLORS.set(val)


def colors_enabled_stderr() -> bool:
    """Return whether colours should be used on stderr.

    Honours ``CLICOLOR`` and ``CLICOLOR_FORCE``.
    """
    return _STDERR_COLORS.get()


def set_colors_enabled_stderr(val: bool) -> None:
    """Force colours on or off for stderr."""
    _STDERR_COLORS.set(val)