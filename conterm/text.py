"""Measuring, truncating and padding text that may contain ANSI codes."""

from __future__ import annotations

from enum import Enum

from wcwidth import wcwidth

from conterm.ansi import AnsiCodeIterator


class Alignment(Enum):
    """Alignment for padding operations."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def char_width(c: str) -> int:
    """Return the number of terminal columns the character ``c`` takes.

    Characters without a defined width, such as control characters,
    count as zero.
    """
    width = wcwidth(c)
    return width if width > 0 else 0


def str_width(s: str) -> int:
    """Return the number of terminal columns ``s`` takes, codes included."""
    return sum(char_width(c) for c in s)


def measure_text_width(s: str) -> int:
    """Return the display width of ``s``, ignoring ANSI codes."""
    return sum(str_width(part) for part, is_ansi in AnsiCodeIterator(s) if not is_ansi)


def truncate_str(s: str, width: int, tail: str) -> str:
    """Truncate ``s`` to ``width`` columns, appending ``tail`` if cut.

    ANSI codes after the cut are kept so that styling is still closed
    properly.
    """
    if measure_text_width(s) <= width:
        return s

    tail_width = str_width(tail)
    budget = max(width - tail_width, 0)
    length = 0
    result: str | None = None
    parts = AnsiCodeIterator(s)

    for part, is_ansi in parts:
        if is_ansi:
            if result is not None:
                result += part
            continue
        if result is not None:
            continue
        part_width = str_width(part)
        if part_width + length > budget:
            consumed = parts.current_slice()
            rest_width = max(budget - length, 0)
            keep = 0
            used = 0
            for c in part:
                keep += 1
                used += char_width(c)
                if used == rest_width:
                    break
                if used > rest_width:
                    keep -= 1
                    break
            cut = len(consumed) - len(part) + keep
            result = consumed[:cut] + tail
        length += part_width

    return s if result is None else result


def pad_str_with(
    s: str,
    width: int,
    align: Alignment,
    truncate: str | None = None,
    pad: str = " ",
) -> str:
    """Pad ``s`` with ``pad`` to ``width`` columns using ``align``.

    If ``s`` is already at least ``width`` wide it is returned unchanged,
    unless ``truncate`` is given, in which case it is truncated with that
    string as the tail marker.
    """
    cols = measure_text_width(s)
    if cols >= width:
        if truncate is None:
            return s
        return truncate_str(s, width, truncate)

    diff = width - cols
    if align is Alignment.LEFT:
        left, right = 0, diff
    elif align is Alignment.RIGHT:
        left, right = diff, 0
    else:
        left, right = diff // 2, diff - diff // 2
    return pad * left + s + pad * right


def pad_str(
    s: str,
    width: int,
    align: Alignment,
    truncate: str | None = None,
) -> str:
    """Pad ``s`` with spaces to ``width`` columns using ``align``."""
    return pad_str_with(s, width, align, truncate, " ")