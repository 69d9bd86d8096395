"""Terminal handles: writing, buffering, cursor control and reading input."""

from __future__ import annotations

import io
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from conterm import cursor, platform
from conterm.keys import Char, Key, UnknownEscSeq
from conterm.style import Style
from conterm.text import char_width

_NOT_A_TERMINAL_ERRNO = 107


class TermTarget(Enum):
    """A standard stream a terminal writes to."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass(frozen=True)
class ReadWritePair:
    """A terminal target made of an explicit reader and writer."""

    read: Any
    write: Any
    style: Style = field(default_factory=lambda: Style().for_stderr())


Target = Union[TermTarget, ReadWritePair]


class TermFamily(Enum):
    """The family of a terminal."""

    FILE = "file"
    UNIX_TERM = "unix_term"
    WINDOWS_CONSOLE = "windows_console"
    DUMMY = "dummy"


class TermFeatures:
    """Gives access to the features of a terminal."""

    def __init__(self, term: Term) -> None:
        self._term = term

    def is_attended(self) -> bool:
        """Return whether this is a real, user-attended terminal."""
        return platform.is_a_terminal(self._term._output())

    def colors_supported(self) -> bool:
        """Return whether the terminal supports colours.

        This does not check whether colours are enabled.
        """
        return platform.is_a_color_terminal(self._term._output())

    def is_msys_tty(self) -> bool:
        """Return whether this is an msys terminal; never true here."""
        return False

    def wants_emoji(self) -> bool:
        """Return whether the terminal is attended and wants emoji."""
        return self.is_attended() and platform.wants_emoji()

    def family(self) -> TermFamily:
        """Return the family of the terminal."""
        if not self.is_attended():
            return TermFamily.FILE
        return TermFamily.UNIX_TERM


def _write_to_stream(stream: Any, data: bytes) -> None:
    if isinstance(stream, io.TextIOBase) or not hasattr(stream, "buffer") and not _is_binary(stream):
        stream.write(data.decode("utf-8"))
    elif hasattr(stream, "buffer") and isinstance(stream, io.TextIOBase) is False and not _is_binary(stream):
        stream.buffer.write(data)
    else:
        stream.write(data)
    if hasattr(stream, "flush"):
        stream.flush()


def _is_binary(stream: Any) -> bool:
    return isinstance(stream, (io.RawIOBase, io.BufferedIOBase)) or "b" in getattr(
        stream, "mode", ""
    )


def _write_to_std(stream: Any, data: bytes) -> None:
    stream.flush()
    binary = getattr(stream, "buffer", None)
    if binary is not None:
        binary.write(data)
        binary.flush()
    else:
        stream.write(data.decode("utf-8"))
        stream.flush()


class Term:
    """A handle to a terminal, optionally buffering its output."""

    def __init__(self, target: Target, buffered: bool = False) -> None:
        self._target = target
        self._buffer: bytearray | None = bytearray() if buffered else None
        self._buffer_lock = threading.Lock()
        self._prompt = ""
        self._prompt_lock = threading.Lock()
        self._prompt_guard = threading.Lock()
        self._is_tty = self.features().is_attended()

    @classmethod
    def stdout(cls) -> Term:
        """Return an unbuffered terminal writing to stdout."""
        return cls(TermTarget.STDOUT)

    @classmethod
    def stderr(cls) -> Term:
        """Return an unbuffered terminal writing to stderr."""
        return cls(TermTarget.STDERR)

    @classmethod
    def buffered_stdout(cls) -> Term:
        """Return a buffered terminal writing to stdout."""
        return cls(TermTarget.STDOUT, buffered=True)

    @classmethod
    def buffered_stderr(cls) -> Term:
        """Return a buffered terminal writing to stderr."""
        return cls(TermTarget.STDERR, buffered=True)

    @classmethod
    def read_write_pair(cls, read: Any, write: Any) -> Term:
        """Return a terminal over a reader and writer, styled like stderr."""
        return cls.read_write_pair_with_style(read, write, Style().for_stderr())

    @classmethod
    def read_write_pair_with_style(cls, read: Any, write: Any, style: Style) -> Term:
        """Return a terminal over a reader and writer with the given style."""
        return cls(ReadWritePair(read, write, style))

    def style(self) -> Style:
        """Return the style for this terminal."""
        if isinstance(self._target, ReadWritePair):
            return self._target.style
        if self._target is TermTarget.STDERR:
            return Style().for_stderr()
        return Style().for_stdout()

    def target(self) -> Target:
        """Return what this terminal writes to."""
        return self._target

    def fileno(self) -> int:
        """Return the file descriptor this terminal writes to."""
        if self._target is TermTarget.STDOUT:
            return 1
        if self._target is TermTarget.STDERR:
            return 2
        return self._target.write.fileno()

    def _output(self) -> Any:
        if isinstance(self._target, ReadWritePair):
            return self._target.write
        return self.fileno()

    def _write_through(self, data: bytes) -> None:
        if self._target is TermTarget.STDOUT:
            _write_to_std(sys.stdout, data)
        elif self._target is TermTarget.STDERR:
            _write_to_std(sys.stderr, data)
        else:
            writer = self._target.write
            if isinstance(writer, io.TextIOBase):
                writer.write(data.decode("utf-8"))
            else:
                writer.write(data)
            if hasattr(writer, "flush"):
                writer.flush()

    def write(self, data: bytes) -> int:
        """Write raw bytes, buffered if this terminal buffers; return the count."""
        data = bytes(data)
        if self._buffer is not None:
            with self._buffer_lock:
                self._buffer += data
        else:
            self._write_through(data)
        return len(data)

    def write_str(self, s: str) -> None:
        """Write a string to the terminal."""
        self.write(s.encode("utf-8"))

    def write_line(self, s: str) -> None:
        """Write a string followed by a newline.

        If a line is being read, the prompt is redrawn after it.
        """
        with self._prompt_lock:
            prompt = self._prompt
            if prompt:
                self.clear_line()
            self.write_str(f"{s}\n{prompt}")

    def read_char(self) -> str:
        """Read a single character without echoing it.

        Enter gives a newline.  Raises OSError if the terminal is not
        user attended.
        """
        if not self._is_tty:
            raise OSError(_NOT_A_TERMINAL_ERRNO, "Not a terminal")
        while True:
            key = self.read_key()
            if isinstance(key, Char):
                return key.char
            if key is Key.ENTER:
                return "\n"

    def read_key(self) -> Key | Char | UnknownEscSeq:
        """Read a single key without echoing it.

        An unattended terminal always gives :attr:`Key.UNKNOWN`.
        """
        if not self._is_tty:
            return Key.UNKNOWN
        return platform.read_single_key(False)

    def read_key_raw(self) -> Key | Char | UnknownEscSeq:
        """Read a single key, reporting Ctrl-C as :attr:`Key.CTRL_C`."""
        if not self._is_tty:
            return Key.UNKNOWN
        return platform.read_single_key(True)

    def read_line(self) -> str:
        """Read one line of input without its newline."""
        return self.read_line_initial_text("")

    def read_line_initial_text(self, initial: str) -> str:
        """Read one line of input, starting from editable text ``initial``.

        Only the text typed after ``initial`` is returned.  An unattended
        terminal gives an empty string.
        """
        if not self._is_tty:
            return ""
        with self._prompt_lock:
            self._prompt = initial
        try:
            with self._prompt_guard:
                self.write_str(initial)
                return self._read_line_after(initial)
        finally:
            with self._prompt_lock:
                self._prompt = ""

    def _read_line_after(self, initial: str) -> str:
        prefix_len = len(initial)
        chars = list(initial)
        while True:
            key = self.read_key()
            if key is Key.BACKSPACE:
                if prefix_len < len(chars):
                    self.clear_chars(char_width(chars.pop()))
                self.flush()
            elif isinstance(key, Char):
                chars.append(key.char)
                self.write_str(key.char)
                self.flush()
            elif key is Key.ENTER:
                self._write_through(f"\n{initial}".encode("utf-8"))
                break
        return "".join(chars[prefix_len:])

    def read_secure_line(self) -> str:
        """Read a line without echoing it.

        An unattended terminal gives an empty string.
        """
        if not self._is_tty:
            return ""
        rv = platform.read_secure()
        self.write_line("")
        return rv

    def flush(self) -> None:
        """Write out anything held in the buffer."""
        if self._buffer is None:
            return
        with self._buffer_lock:
            if self._buffer:
                self._write_through(bytes(self._buffer))
                self._buffer.clear()

    def is_term(self) -> bool:
        """Return whether this terminal is user attended."""
        return self._is_tty

    def features(self) -> TermFeatures:
        """Return the features of this terminal."""
        return TermFeatures(self)

    def size(self) -> tuple[int, int]:
        """Return ``(rows, columns)``, or a sensible default if unknown."""
        return self.size_checked() or (24, platform.DEFAULT_WIDTH)

    def size_checked(self) -> tuple[int, int] | None:
        """Return ``(rows, columns)``, or None if it cannot be determined."""
        return platform.terminal_size(self._output())

    def move_cursor_to(self, x: int, y: int) -> None:
        """Move the cursor to column ``x`` and row ``y``, both 0-based."""
        cursor.move_cursor_to(self, x, y)

    def move_cursor_up(self, n: int) -> None:
        """Move the cursor up ``n`` lines, as far as possible."""
        cursor.move_cursor_up(self, n)

    def move_cursor_down(self, n: int) -> None:
        """Move the cursor down ``n`` lines, as far as possible."""
        cursor.move_cursor_down(self, n)

    def move_cursor_left(self, n: int) -> None:
        """Move the cursor ``n`` columns left, as far as possible."""
        cursor.move_cursor_left(self, n)

    def move_cursor_right(self, n: int) -> None:
        """Move the cursor ``n`` columns right, as far as possible."""
        cursor.move_cursor_right(self, n)

    def clear_line(self) -> None:
        """Clear the current line and move to its start."""
        cursor.clear_line(self)

    def clear_last_lines(self, n: int) -> None:
        """Clear the ``n`` lines above the current one.

        The cursor ends at the start of the first cleared line.
        """
        self.move_cursor_up(n)
        for _ in range(n):
            self.clear_line()
            self.move_cursor_down(1)
        self.move_cursor_up(n)

    def clear_screen(self) -> None:
        """Clear the screen and move the cursor to the top left."""
        cursor.clear_screen(self)

    def clear_to_end_of_screen(self) -> None:
        """Clear from the cursor to the end of the screen."""
        cursor.clear_to_end_of_screen(self)

    def clear_chars(self, n: int) -> None:
        """Clear the last ``n`` characters of the current line."""
        cursor.clear_chars(self, n)

    def set_title(self, title: object) -> None:
        """Set the terminal title, if the terminal is attended."""
        if not self._is_tty:
            return
        platform.set_title(title)

    def show_cursor(self) -> None:
        """Make the cursor visible."""
        cursor.show_cursor(self)

    def hide_cursor(self) -> None:
        """Hide the cursor."""
        cursor.hide_cursor(self)


def user_attended() -> bool:
    """Return whether stdout is connected to a terminal."""
    return Term.stdout().features().is_attended()


def user_attended_stderr() -> bool:
    """Return whether stderr is connected to a terminal."""
    return Term.stderr().features().is_attended()