"""Terminal access on POSIX systems: detection, sizing and keyboard input."""

from __future__ import annotations

import os
import select
import signal
import sys
import termios
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from conterm.keys import Char, Key, UnknownEscSeq

DEFAULT_WIDTH = 80

ByteReader = Callable[[bool], Optional[int]]

_ESCAPE_FINALS = {
    "A": Key.ARROW_UP,
    "B": Key.ARROW_DOWN,
    "C": Key.ARROW_RIGHT,
    "D": Key.ARROW_LEFT,
    "H": Key.HOME,
    "F": Key.END,
    "Z": Key.BACK_TAB,
}

_TILDE_KEYS = {
    "1": Key.HOME,
    "2": Key.INSERT,
    "3": Key.DEL,
    "4": Key.END,
    "5": Key.PAGE_UP,
    "6": Key.PAGE_DOWN,
    "7": Key.HOME,
    "8": Key.END,
}

_CONTROL_KEYS = {
    "\n": Key.ENTER,
    "\r": Key.ENTER,
    "\x7f": Key.BACKSPACE,
    "\t": Key.TAB,
    "\x01": Key.HOME,
    "\x05": Key.END,
    "\x08": Key.BACKSPACE,
}


def _fileno(fd: object) -> int | None:
    if isinstance(fd, int):
        return fd
    try:
        return fd.fileno()  # type: ignore[attr-defined]
    except (AttributeError, OSError, ValueError):
        return None


def is_a_terminal(fd: object) -> bool:
    """Return whether ``fd`` (a descriptor or file object) is a terminal."""
    number = _fileno(fd)
    return number is not None and os.isatty(number)


def is_a_color_terminal(fd: object) -> bool:
    """Return whether ``fd`` is a terminal that supports colours.

    ``NO_COLOR`` disables colours, and ``TERM`` must be set to something
    other than ``dumb``.
    """
    if not is_a_terminal(fd):
        return False
    if "NO_COLOR" in os.environ:
        return False
    term = os.environ.get("TERM")
    return term is not None and term != "dumb"


def terminal_size(fd: object) -> tuple[int, int] | None:
    """Return ``(rows, columns)`` of the terminal, or None if unknown."""
    if not is_a_terminal(fd):
        return None
    number = _fileno(fd)
    try:
        size = os.get_terminal_size(number)  # type: ignore[arg-type]
    except OSError:
        return None
    if size.lines > 0 and size.columns > 0:
        return size.lines, size.columns
    return None


@contextmanager
def _open_input() -> Iterator[int]:
    """Yield a descriptor to read keyboard input from.

    Standard input is used when it is a terminal, otherwise the
    controlling terminal is opened.
    """
    stdin_fd = 0
    if os.isatty(stdin_fd):
        yield stdin_fd
        return
    fd = os.open("/dev/tty", os.O_RDWR)
    try:
        yield fd
    finally:
        os.close(fd)


def _read_line(fd: int) -> bytes:
    data = bytearray()
    while True:
        chunk = os.read(fd, 1)
        if not chunk:
            break
        data += chunk
        if chunk == b"\n":
            break
    return bytes(data)


def read_secure() -> str:
    """Read a line from the terminal without echoing it.

    The trailing line ending is not included.
    """
    with _open_input() as fd:
        original = termios.tcgetattr(fd)
        quiet = list(original)
        quiet[3] &= ~termios.ECHO
        termios.tcsetattr(fd, termios.TCSAFLUSH, quiet)
        try:
            data = _read_line(fd)
        finally:
            termios.tcsetattr(fd, termios.TCSAFLUSH, original)
    return data.decode("utf-8").rstrip("\r\n")


def _wait_readable(fd: int, timeout_ms: int) -> bool:
    """Return whether ``fd`` has input; a negative timeout blocks."""
    # Terminals on macOS cannot be polled; only select() works there.
    if sys.platform == "darwin" and os.isatty(fd):
        timeout = None if timeout_ms < 0 else timeout_ms / 1000
        readable, _, _ = select.select([fd], [], [], timeout)
        return bool(readable)
    poller = select.poll()
    poller.register(fd, select.POLLIN)
    events = poller.poll(None if timeout_ms < 0 else timeout_ms)
    return any(mask & select.POLLIN for _, mask in events)


def _fd_reader(fd: int) -> ByteReader:
    def read_byte(block: bool) -> int | None:
        if not block and not _wait_readable(fd, 0):
            return None
        data = os.read(fd, 1)
        if not data:
            raise EOFError("Reached end of file")
        return data[0]

    return read_byte


def key_from_utf8(buf: bytes) -> Key | Char:
    """Return the first character of the UTF-8 bytes ``buf`` as a key.

    Invalid or empty input gives :attr:`Key.UNKNOWN`.
    """
    try:
        text = bytes(buf).decode("utf-8")
    except UnicodeDecodeError:
        return Key.UNKNOWN
    return Char(text[0]) if text else Key.UNKNOWN


def decode_key(read_char: ByteReader) -> Key | Char | UnknownEscSeq:
    """Decode one key from a byte source.

    ``read_char(block)`` returns the next byte as an int.  With ``block``
    false it returns None when no byte is ready right away.  A Ctrl-C byte
    raises :class:`InterruptedError`.
    """

    def next_byte(block: bool) -> int | None:
        byte = read_char(block)
        if byte == 0x03:
            raise InterruptedError("read interrupted")
        return byte

    def next_char() -> str | None:
        byte = next_byte(False)
        return None if byte is None else chr(byte)

    first = next_byte(True)
    if first is None:
        raise EOFError("Reached end of file")

    if first == 0x1B:
        c1 = next_char()
        if c1 is None:
            return Key.ESCAPE
        if c1 != "[":
            return UnknownEscSeq((c1,))
        c2 = next_char()
        if c2 is None:
            return UnknownEscSeq((c1,))
        if c2 in _ESCAPE_FINALS:
            return _ESCAPE_FINALS[c2]
        c3 = next_char()
        if c3 is None:
            return UnknownEscSeq((c1, c2))
        if c3 == "~" and c2 in _TILDE_KEYS:
            return _TILDE_KEYS[c2]
        return UnknownEscSeq((c1, c2, c3))

    if first & 0xE0 == 0xC0:
        extra = 1
    elif first & 0xF0 == 0xE0:
        extra = 2
    elif first & 0xF8 == 0xF0:
        extra = 3
    else:
        c = chr(first)
        return _CONTROL_KEYS.get(c, Char(c))

    buf = bytearray([first])
    for _ in range(extra):
        byte = next_byte(True)
        if byte is None:
            raise EOFError("Reached end of file")
        buf.append(byte)
    return key_from_utf8(bytes(buf))


def _make_raw(attrs: list) -> list:
    raw = list(attrs)
    raw[0] &= ~(
        termios.IGNBRK
        | termios.BRKINT
        | termios.PARMRK
        | termios.ISTRIP
        | termios.INLCR
        | termios.IGNCR
        | termios.ICRNL
        | termios.IXON
    )
    raw[2] &= ~(termios.CSIZE | termios.PARENB)
    raw[2] |= termios.CS8
    raw[3] &= ~(
        termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN
    )
    cc = list(raw[6])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    raw[6] = cc
    return raw


def read_single_key(ctrlc_key: bool) -> Key | Char | UnknownEscSeq:
    """Read a single key from the terminal in raw mode.

    On Ctrl-C, :attr:`Key.CTRL_C` is returned if ``ctrlc_key`` is true;
    otherwise SIGINT is raised in this process.
    """
    with _open_input() as fd:
        original = termios.tcgetattr(fd)
        termios.tcsetattr(fd, termios.TCSADRAIN, _make_raw(original))
        try:
            try:
                return decode_key(_fd_reader(fd))
            finally:
                termios.tcsetattr(fd, termios.TCSADRAIN, original)
        except InterruptedError:
            if ctrlc_key:
                return Key.CTRL_C
            signal.raise_signal(signal.SIGINT)
            raise


def wants_emoji() -> bool:
    """Return whether the environment is likely to render emoji."""
    if sys.platform == "darwin":
        return True
    return os.environ.get("LANG", "").upper().endswith("UTF-8")


def set_title(title: object) -> None:
    """Set the terminal window title."""
    sys.stdout.write(f"\x1b]0;{title}\x07")