"""Locating and stripping ANSI escape codes in text."""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterator


class _State(Enum):
    START = auto()
    S1 = auto()
    S2 = auto()
    S3 = auto()
    S4 = auto()
    S5 = auto()
    S6 = auto()
    S7 = auto()
    S8 = auto()
    S9 = auto()
    S10 = auto()
    S11 = auto()
    TRAP = auto()


_ENTRY_CHARS = frozenset("\x1b\x9b")

_FINAL_STATES = frozenset(
    {_State.S3, _State.S5, _State.S6, _State.S7, _State.S8, _State.S9, _State.S11}
)

_TERMINATORS = frozenset(
    [chr(c) for c in range(ord("A"), ord("P") + 1)]
    + ["R", "Z", "c"]
    + [chr(c) for c in range(ord("f"), ord("n") + 1)]
    + ["q", "r", "y", "=", ">", "<"]
)

_PREFIX_STATES = frozenset({_State.S1, _State.S2, _State.S4})

_DIGIT_NEXT = {
    _State.S1: _State.S5,
    _State.S4: _State.S5,
    _State.S5: _State.S6,
    _State.S6: _State.S7,
    _State.S7: _State.S8,
    _State.S8: _State.S9,
    _State.S10: _State.S5,
}

_SEMICOLON_PARAM_STATES = frozenset(
    {_State.S5, _State.S6, _State.S7, _State.S8, _State.S10}
)

_TERMINATOR_STATES = frozenset(
    {
        _State.S1,
        _State.S2,
        _State.S4,
        _State.S5,
        _State.S6,
        _State.S7,
        _State.S8,
        _State.S10,
    }
)


def _transition(state: _State, c: str) -> _State:
    """Return the state reached from ``state`` on character ``c``."""
    if c in _ENTRY_CHARS:
        return _State.S1 if state is _State.START else _State.TRAP
    if c in "()":
        if state is _State.S1:
            return _State.S2
        if state in (_State.S2, _State.S4):
            return _State.S4
        return _State.TRAP
    if c == ";":
        if state in _PREFIX_STATES:
            return _State.S4
        if state in _SEMICOLON_PARAM_STATES:
            return _State.S10
        return _State.TRAP
    if c in "[#?":
        return _State.S4 if state in _PREFIX_STATES else _State.TRAP
    if "0" <= c <= "9":
        if state is _State.S2:
            return _State.S3 if c in "012" else _State.S5
        return _DIGIT_NEXT.get(state, _State.TRAP)
    if c in _TERMINATORS and state in _TERMINATOR_STATES:
        return _State.S11
    return _State.TRAP


def find_ansi_codes(s: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` spans of the ANSI codes in ``s``, end exclusive.

    Matching is greedy: a code extends to the last position at which the
    scanner was in an accepting state before it could go no further.
    """
    pos = 0
    n = len(s)
    while pos < n:
        if s[pos] not in _ENTRY_CHARS:
            pos += 1
            continue
        start = pos
        state = _State.START
        end = None
        while True:
            if pos < n:
                state = _transition(state, s[pos])
                if state in _FINAL_STATES:
                    end = pos
            if state is _State.TRAP or pos >= n:
                break
            pos += 1
        if end is not None:
            yield start, end + 1
        # Otherwise the trapping character may itself start a code, so the
        # scan resumes at it without advancing.


def strip_ansi_codes(s: str) -> str:
    """Return ``s`` with all ANSI codes removed."""
    if next(find_ansi_codes(s), None) is None:
        return s
    return "".join(text for text, is_ansi in AnsiCodeIterator(s) if not is_ansi)


class AnsiCodeIterator:
    """Iterate over a string as ``(part, is_ansi)`` pairs.

    Each part is a slice of the original string that is either a single
    ANSI code or a run of plain text.
    """

    def __init__(self, s: str) -> None:
        self._s = s
        self._pending: tuple[str, bool] | None = None
        self._last_idx = 0
        self._cur_idx = 0
        self._matches = find_ansi_codes(s)

    def __iter__(self) -> AnsiCodeIterator:
        return self

    def __next__(self) -> tuple[str, bool]:
        if self._pending is not None:
            item, self._pending = self._pending, None
            self._cur_idx += len(item[0])
            return item

        match = next(self._matches, None)
        if match is not None:
            start, end = match
            text = self._s[self._last_idx:start]
            code = self._s[start:end]
            self._last_idx = end
            if not text:
                self._cur_idx = end
                return code, True
            self._cur_idx = start
            self._pending = (code, True)
            return text, False

        if self._last_idx < len(self._s):
            rest = self._s[self._last_idx:]
            self._cur_idx = self._last_idx = len(self._s)
            return rest, False

        raise StopIteration

    def current_slice(self) -> str:
        """Return the part of the string consumed so far."""
        return self._s[: self._cur_idx]

    def rest_slice(self) -> str:
        """Return the part of the string not yet consumed."""
        return self._s[self._cur_idx:]