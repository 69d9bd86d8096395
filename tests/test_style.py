import sys

import pytest

from conterm.ansi import AnsiCodeIterator
from conterm.style import (
    Attribute,
    Attributes,
    Color,
    Color256,
    Emoji,
    Style,
    colors_enabled,
    colors_enabled_stderr,
    set_colors_enabled,
    set_colors_enabled_stderr,
    style,
)
from conterm.text import measure_text_width, truncate_str


@pytest.fixture
def restore_colors():
    before_out = colors_enabled()
    before_err = colors_enabled_stderr()
    yield
    set_colors_enabled(before_out)
    set_colors_enabled_stderr(before_err)


def red(text):
    return style(text).red().force_styling(True)


def test_text_width():
    s = str(style("foo").red().on_black().bold().force_styling(True))
    assert measure_text_width(s) == 3
    s = str(style("🐶 <3").red().force_styling(True))
    assert measure_text_width(s) == 5


def test_truncate_str():
    s = f"foo {red('bar')}"
    assert truncate_str(s, 5, "") == f"foo {red('b')}"
    assert truncate_str(s, 5, "!") == f"foo {red('!')}"
    s = f"foo {red('bar')} baz"
    assert truncate_str(s, 10, "...") == f"foo {red('bar')}..."
    s = f"foo {red('バー')}"
    assert truncate_str(s, 5, "") == f"foo {red('')}"
    assert truncate_str(s, 6, "") == f"foo {red('バ')}"
    assert truncate_str(s, 2, "!!!") == f"!!!{red('')}"


def test_attributes_single():
    for attr in Attribute:
        attrs = Attributes().insert(attr)
        assert list(attrs.bits()) == [int(attr)]
        assert list(attrs.attrs()) == [attr]


@pytest.mark.parametrize(
    "attrs",
    [
        [Attribute.BOLD, Attribute.UNDERLINED, Attribute.BLINK_FAST, Attribute.HIDDEN],
        [
            Attribute.DIM,
            Attribute.ITALIC,
            Attribute.BLINK,
            Attribute.REVERSE,
            Attribute.STRIKETHROUGH,
        ],
        list(Attribute),
    ],
)
def test_attributes_many(attrs):
    collected = Attributes()
    for attr in attrs:
        collected = collected.insert(attr)
    assert list(collected.bits()) == [int(a) for a in attrs]
    assert list(collected.attrs()) == attrs


def test_attributes_order_independent_of_insertion():
    attrs = Attributes().insert(Attribute.HIDDEN).insert(Attribute.BOLD)
    assert list(attrs.attrs()) == [Attribute.BOLD, Attribute.HIDDEN]
    assert str(attrs) == "\x1b[1m\x1b[8m"


def test_render_red():
    assert str(red("World")) == "\x1b[31mWorld\x1b[0m"


def test_render_red_bold_matches_iterator_parts():
    s = str(style("a").red().bold().force_styling(True))
    assert list(AnsiCodeIterator(s)) == [
        ("\x1b[31m", True),
        ("\x1b[1m", True),
        ("a", False),
        ("\x1b[0m", True),
    ]


def test_render_bright_and_background():
    s = str(style("x").black().bright().on_red().force_styling(True))
    assert s == "\x1b[38;5;8m\x1b[41mx\x1b[0m"
    s = str(style("x").color256(200).on_color256(12).force_styling(True))
    assert s == "\x1b[38;5;200m\x1b[48;5;12mx\x1b[0m"
    s = str(style("x").on_blue().on_bright().force_styling(True))
    assert s == "\x1b[48;5;12mx\x1b[0m"


def test_no_style_no_reset():
    assert str(style("plain").force_styling(True)) == "plain"


def test_forced_off():
    assert str(style("x").red().bold().force_styling(False)) == "x"


def test_format_spec_applies_to_value():
    assert format(red(42), "010x") == "\x1b[31m000000002a\x1b[0m"
    assert f"{red(3):03}" == "\x1b[31m003\x1b[0m"


def test_global_switch(restore_colors):
    set_colors_enabled(True)
    assert colors_enabled() is True
    assert str(style("x").red()) == "\x1b[31mx\x1b[0m"
    set_colors_enabled(False)
    assert str(style("x").red()) == "x"


def test_stderr_switch(restore_colors):
    set_colors_enabled(False)
    set_colors_enabled_stderr(True)
    assert colors_enabled_stderr() is True
    assert str(style("x").green().for_stderr()) == "\x1b[32mx\x1b[0m"
    assert str(style("x").green().for_stderr().for_stdout()) == "x"


def test_from_dotted_str():
    assert Style.from_dotted_str("red.on_blue") == Style().red().on_blue()
    assert Style.from_dotted_str("9.on_12") == Style().color256(9).on_color256(12)
    assert Style.from_dotted_str("bold.nonsense.cyan") == Style().bold().cyan()
    assert Style.from_dotted_str("on_300.256") == Style()


def test_from_dotted_str_italic_is_not_a_term():
    assert Style.from_dotted_str("italic") == Style()


def test_apply_to_keeps_style():
    s = Style().magenta().underlined()
    obj = s.apply_to("v")
    assert obj.style == s
    assert obj.val == "v"


def test_styles_are_immutable_builders():
    base = Style()
    assert base.red() != base
    assert base == Style()


def test_color256_range():
    assert Color256(255).ansi_num == 255
    with pytest.raises(ValueError):
        Color256(256)
    with pytest.raises(ValueError):
        Style().color256(-1)


def test_fg_with_enum():
    s = str(Style().fg(Color.YELLOW).force_styling(True).apply_to("y"))
    assert s == "\x1b[33my\x1b[0m"


def test_emoji_wanted(monkeypatch):
    monkeypatch.setenv("LANG", "en_US.UTF-8")
    assert str(Emoji("✨", ":-)")) == "✨"


def test_emoji_fallback(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("LANG", "C")
    assert str(Emoji("✨", ":-)")) == ":-)"