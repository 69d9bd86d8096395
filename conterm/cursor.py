"""Escape sequences for moving the cursor and clearing the screen.

Each function writes to ``out``, any object with a ``write_str`` method.
"""

from __future__ import annotations

from typing import Protocol


class _Writer(Protocol):
    def write_str(self, s: str) -> None: ...


def move_cursor_down(out: _Writer, n: int) -> None:
    """Move the cursor down ``n`` lines."""
    if n > 0:
        out.write_str(f"\x1b[{n}B")


def move_cursor_up(out: _Writer, n: int) -> None:
    """Move the cursor up ``n`` lines."""
    if n > 0:
        out.write_str(f"\x1b[{n}A")


def move_cursor_left(out: _Writer, n: int) -> None:
    """Move the cursor ``n`` columns to the left."""
    if n > 0:
        out.write_str(f"\x1b[{n}D")


def move_cursor_right(out: _Writer, n: int) -> None:
    """Move the cursor ``n`` columns to the right."""
    if n > 0:
        out.write_str(f"\x1b[{n}C")


def move_cursor_to(out: _Writer, x: int, y: int) -> None:
    """Move the cursor to column ``x`` and row ``y``, both 0-based."""
    out.write_str(f"\x1b[{y + 1};{x + 1}H")


def clear_chars(out: _Writer, n: int) -> None:
    """Clear the last ``n`` characters of the current line."""
    if n > 0:
        out.write_str(f"\x1b[{n}D\x1b[0K")


def clear_line(out: _Writer) -> None:
    """Clear the current line and return to its start."""
    out.write_str("\r\x1b[2K")


def clear_screen(out: _Writer) -> None:
    """Clear the screen and move the cursor to the top left."""
    out.write_str("\r\x1b[2J\r\x1b[H")


def clear_to_end_of_screen(out: _Writer) -> None:
    """Clear from the cursor to the end of the screen."""
    out.write_str("\r\x1b[0J")


def show_cursor(out: _Writer) -> None:
    """Make the cursor visible."""
    out.write_str("\x1b[?25h")


def hide_cursor(out: _Writer) -> None:
    """Hide the cursor."""
    out.write_str("\x1b[?25l")