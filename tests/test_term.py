import io
import tempfile

import pytest

from conterm.keys import Key
from conterm.style import Style
from conterm.term import (
    ReadWritePair,
    Term,
    TermFamily,
    TermTarget,
    user_attended,
    user_attended_stderr,
)


@pytest.fixture
def pair():
    out = io.BytesIO()
    return Term.read_write_pair(io.BytesIO(), out), out


def test_write_str_goes_to_writer(pair):
    term, out = pair
    term.write_str("hello")
    assert out.getvalue() == b"hello"


def test_write_returns_length(pair):
    term, out = pair
    assert term.write(b"abc") == 3
    assert out.getvalue() == b"abc"


def test_write_line_appends_newline(pair):
    term, out = pair
    term.write_line("abc")
    assert out.getvalue() == b"abc\n"


def test_text_writer_receives_text():
    out = io.StringIO()
    term = Term.read_write_pair(io.StringIO(), out)
    term.write_line("héllo")
    assert out.getvalue() == "héllo\n"


def test_cursor_movement(pair):
    term, out = pair
    term.move_cursor_up(3)
    term.move_cursor_down(0)
    term.move_cursor_to(0, 0)
    assert out.getvalue() == b"\x1b[3A\x1b[1;1H"


def test_clear_last_lines(pair):
    term, out = pair
    term.clear_last_lines(2)
    expected = "\x1b[2A" + "\r\x1b[2K\x1b[1B" * 2 + "\x1b[2A"
    assert out.getvalue() == expected.encode()


def test_show_and_hide_cursor(pair):
    term, out = pair
    term.hide_cursor()
    term.show_cursor()
    assert out.getvalue() == b"\x1b[?25l\x1b[?25h"


def test_buffered_stdout_holds_until_flush(capsys):
    term = Term.buffered_stdout()
    term.write_str("first")
    term.write_line(" line")
    assert capsys.readouterr().out == ""
    term.flush()
    assert capsys.readouterr().out == "first line\n"


def test_flush_empties_buffer(capsys):
    term = Term.buffered_stderr()
    term.write_str("x")
    term.flush()
    term.flush()
    assert capsys.readouterr().err == "x"


def test_unbuffered_stderr_writes_immediately(capsys):
    term = Term.stderr()
    term.write_line("oops")
    captured = capsys.readouterr()
    assert captured.err == "oops\n"
    assert captured.out == ""


def test_unattended_features(pair):
    term, _ = pair
    features = term.features()
    assert term.is_term() is False
    assert features.is_attended() is False
    assert features.colors_supported() is False
    assert features.wants_emoji() is False
    assert features.is_msys_tty() is False
    assert features.family() is TermFamily.FILE


def test_unattended_reads(pair):
    term, _ = pair
    assert term.read_key() is Key.UNKNOWN
    assert term.read_key_raw() is Key.UNKNOWN
    assert term.read_line() == ""
    assert term.read_line_initial_text("default") == ""
    assert term.read_secure_line() == ""


def test_read_char_requires_terminal(pair):
    term, _ = pair
    with pytest.raises(OSError):
        term.read_char()


def test_size_defaults_when_unattended(pair):
    term, _ = pair
    assert term.size_checked() is None
    assert term.size() == (24, 80)


def test_set_title_skipped_when_unattended(pair):
    term, out = pair
    term.set_title("Counting...")
    assert out.getvalue() == b""


def test_styles():
    assert Term.stdout().style() == Style().for_stdout()
    assert Term.stderr().style() == Style().for_stderr()
    custom = Style().red()
    term = Term.read_write_pair_with_style(io.BytesIO(), io.BytesIO(), custom)
    assert term.style() == custom


def test_pair_default_style_is_stderr(pair):
    term, _ = pair
    assert term.style() == Style().for_stderr()


def test_targets_and_filenos(pair):
    term, out = pair
    assert Term.stdout().target() is TermTarget.STDOUT
    assert Term.stderr().target() is TermTarget.STDERR
    assert Term.stdout().fileno() == 1
    assert Term.stderr().fileno() == 2
    target = term.target()
    assert isinstance(target, ReadWritePair)
    assert target.write is out


def test_pair_fileno_from_writer():
    with tempfile.TemporaryFile() as handle:
        term = Term.read_write_pair(io.BytesIO(), handle)
        assert term.fileno() == handle.fileno()
        term.write_str("data")
        handle.seek(0)
        assert handle.read() == b"data"


def test_user_attended_matches_terms():
    assert user_attended() == Term.stdout().is_term()
    assert user_attended_stderr() == Term.stderr().is_term()